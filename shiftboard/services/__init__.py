"""Services for scheduling logic."""

from .assignments import create_assignment, delete_assignment, list_assignments, update_assignment
from .availability import AvailabilityItem, bulk_upsert_availability, list_availability, upsert_availability
from .submissions import submission_status, submit_availability
from .summary import format_summary, summarize_day, summarize_period

__all__ = [
    "create_assignment",
    "update_assignment",
    "delete_assignment",
    "list_assignments",
    "AvailabilityItem",
    "upsert_availability",
    "bulk_upsert_availability",
    "list_availability",
    "submit_availability",
    "submission_status",
    "format_summary",
    "summarize_day",
    "summarize_period",
]
