"""Value types for the timeline editor: targets, drag states, proposals and intents."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Union


class Handle(str, Enum):
    BODY = "BODY"
    START_EDGE = "START_EDGE"
    END_EDGE = "END_EDGE"
    BREAK = "BREAK"


@dataclass(frozen=True)
class AssignmentView:
    """Client-side snapshot of a shift assignment."""

    id: int
    period_id: int
    staff_id: int
    date: date
    start_min: int
    end_min: int
    break_min: Optional[int] = None
    break_start_min: Optional[int] = None
    note: Optional[str] = None
    staff_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AssignmentView":
        """Build from the API's camelCase JSON."""
        staff = payload.get("staff") or {}
        return cls(
            id=int(payload["id"]),
            period_id=int(payload["periodId"]),
            staff_id=int(payload["staffId"]),
            date=date.fromisoformat(str(payload["date"])[:10]),
            start_min=int(payload["startMin"]),
            end_min=int(payload["endMin"]),
            break_min=payload.get("breakMin"),
            break_start_min=payload.get("breakStartMin"),
            note=payload.get("note"),
            staff_name=staff.get("name"),
        )

    def with_values(self, **changes: Any) -> "AssignmentView":
        return replace(self, **changes)


@dataclass(frozen=True)
class RowTarget:
    """Empty space on a staff member's day row."""

    staff_id: int
    date: date


@dataclass(frozen=True)
class BarTarget:
    """An existing assignment bar; ``handle`` says which part was pressed."""

    assignment: AssignmentView
    handle: Handle = Handle.BODY


Target = Union[RowTarget, BarTarget]


# Drag states. Each variant carries exactly the fields its gesture needs.


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Creating:
    staff_id: int
    date: date
    start_min: int
    end_min: int


@dataclass(frozen=True)
class Moving:
    assignment_id: int
    origin_x: float
    anchor_start: int
    anchor_end: int
    start_min: int
    end_min: int


@dataclass(frozen=True)
class ResizingStart:
    assignment_id: int
    origin_x: float
    anchor_start: int
    end_min: int
    start_min: int


@dataclass(frozen=True)
class ResizingEnd:
    assignment_id: int
    origin_x: float
    anchor_end: int
    start_min: int
    end_min: int


@dataclass(frozen=True)
class MovingBreak:
    assignment_id: int
    origin_x: float
    start_min: int
    end_min: int
    break_min: int
    anchor_break_start: int
    break_start_min: int


DragState = Union[Idle, Creating, Moving, ResizingStart, ResizingEnd, MovingBreak]


@dataclass(frozen=True)
class Proposal:
    """Live preview of the gesture in progress."""

    start_min: int
    end_min: int
    break_start_min: Optional[int] = None

    @property
    def duration(self) -> int:
        return abs(self.end_min - self.start_min)


# Mutation intents emitted by the editor (and by other operator controls).


@dataclass(frozen=True)
class CreateAssignment:
    staff_id: int
    date: date
    start_min: int
    end_min: int


@dataclass(frozen=True)
class UpdateInterval:
    assignment_id: int
    start_min: int
    end_min: int


@dataclass(frozen=True)
class UpdateBreakPosition:
    assignment_id: int
    break_start_min: int


@dataclass(frozen=True)
class ChangeBreak:
    """Set or clear the break duration; the server re-derives its position."""

    assignment_id: int
    break_min: Optional[int]


@dataclass(frozen=True)
class RemoveAssignment:
    assignment_id: int


EditorIntent = Union[CreateAssignment, UpdateInterval, UpdateBreakPosition]
MutationIntent = Union[CreateAssignment, UpdateInterval, UpdateBreakPosition, ChangeBreak, RemoveAssignment]
