import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from shiftboard.domain.models import Availability, Period, ShiftAssignment, Staff, Submission

StatusName = Literal["UNAVAILABLE", "AVAILABLE", "FREE", "PREFER_OFF"]


class AssignmentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    periodId: int
    staffId: int
    date: dt.date
    startMin: int
    endMin: int
    breakMin: Optional[int] = None
    breakStartMin: Optional[int] = None
    note: Optional[str] = None


class AssignmentPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    startMin: Optional[int] = None
    endMin: Optional[int] = None
    breakMin: Optional[int] = None
    breakStartMin: Optional[int] = None
    note: Optional[str] = None

    def changes(self) -> dict:
        """Only the fields the caller actually sent, in store naming."""
        names = {
            "startMin": "start_min",
            "endMin": "end_min",
            "breakMin": "break_min",
            "breakStartMin": "break_start_min",
            "note": "note",
        }
        return {names[key]: value for key, value in self.model_dump(exclude_unset=True).items()}


class AvailabilityEntry(BaseModel):
    date: dt.date
    status: StatusName
    startMin: Optional[int] = None
    endMin: Optional[int] = None
    note: Optional[str] = None


class AvailabilityRequest(AvailabilityEntry):
    periodId: int
    staffId: Optional[int] = None  # Admins may write for someone else


class BulkAvailabilityRequest(BaseModel):
    periodId: int
    staffId: Optional[int] = None
    items: List[AvailabilityEntry] = Field(default_factory=list)


class SubmissionRequest(BaseModel):
    periodId: int


def staff_payload(staff: Optional[Staff]) -> Optional[dict]:
    if staff is None:
        return None
    return {"id": staff.id, "name": staff.name}


def assignment_payload(a: ShiftAssignment) -> dict:
    return {
        "id": a.id,
        "periodId": a.period_id,
        "staffId": a.staff_id,
        "date": a.date.isoformat(),
        "startMin": a.start_min,
        "endMin": a.end_min,
        "breakMin": a.break_min,
        "breakStartMin": a.break_start_min,
        "workMin": a.work_min,
        "note": a.note,
        "staff": staff_payload(a.staff),
    }


def availability_payload(a: Availability) -> dict:
    return {
        "id": a.id,
        "periodId": a.period_id,
        "staffId": a.staff_id,
        "date": a.date.isoformat(),
        "status": a.status,
        "startMin": a.start_min,
        "endMin": a.end_min,
        "note": a.note,
        "staff": staff_payload(a.staff),
    }


def submission_payload(s: Optional[Submission]) -> Optional[dict]:
    if s is None:
        return None
    return {
        "periodId": s.period_id,
        "staffId": s.staff_id,
        "submittedAt": s.submitted_at.isoformat(),
    }


def period_payload(p: Period) -> dict:
    return {
        "id": p.id,
        "startDate": p.start_date.isoformat(),
        "endDate": p.end_date.isoformat(),
        "deadlineAt": p.deadline_at.isoformat() if p.deadline_at else None,
        "isOpen": p.is_open,
        "publishedAt": p.published_at.isoformat() if p.published_at else None,
    }
