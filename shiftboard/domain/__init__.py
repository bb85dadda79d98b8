"""Domain models and data access layer."""

from .models import Availability, Base, Period, ShiftAssignment, Staff, Submission
from .repositories import (
    AssignmentRepository,
    AvailabilityRepository,
    PeriodRepository,
    StaffRepository,
    SubmissionRepository,
)

__all__ = [
    "Availability",
    "Base",
    "Period",
    "ShiftAssignment",
    "Staff",
    "Submission",
    "AssignmentRepository",
    "AvailabilityRepository",
    "PeriodRepository",
    "StaffRepository",
    "SubmissionRepository",
]
