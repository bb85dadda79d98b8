"""Interactive timeline editing: gesture state machine and persistence synchronizer."""

from .client import RemoteError, ScheduleClient
from .machine import TimelineEditor
from .state import (
    AssignmentView,
    BarTarget,
    ChangeBreak,
    CreateAssignment,
    Creating,
    Handle,
    Idle,
    Moving,
    MovingBreak,
    Proposal,
    RemoveAssignment,
    ResizingEnd,
    ResizingStart,
    RowTarget,
    UpdateBreakPosition,
    UpdateInterval,
)
from .sync import Confirmed, LocalSchedule, Pending, PersistenceSynchronizer, Rejected

__all__ = [
    "AssignmentView",
    "BarTarget",
    "ChangeBreak",
    "Confirmed",
    "CreateAssignment",
    "Creating",
    "Handle",
    "Idle",
    "LocalSchedule",
    "Moving",
    "MovingBreak",
    "Pending",
    "PersistenceSynchronizer",
    "Proposal",
    "Rejected",
    "RemoteError",
    "RemoveAssignment",
    "ResizingEnd",
    "ResizingStart",
    "RowTarget",
    "ScheduleClient",
    "TimelineEditor",
    "UpdateBreakPosition",
    "UpdateInterval",
]
