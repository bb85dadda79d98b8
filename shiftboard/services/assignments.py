"""Shift assignment store: validated create, merge-and-revalidate update, delete, query."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from shiftboard.config import DEFAULT_CONFIG, ScheduleConfig
from shiftboard.constraints import IntervalKind, validate_break, validate_interval
from shiftboard.domain.models import ShiftAssignment, Staff
from shiftboard.domain.repositories import AssignmentRepository, PeriodRepository, StaffRepository
from shiftboard.errors import DateOutsidePeriod, NotFound, ScheduleError
from shiftboard.logger import get_logger

log = get_logger("assignments")

UPDATABLE_FIELDS = ("start_min", "end_min", "break_min", "break_start_min", "note")


def _resolve_break(
    start_min: int,
    end_min: int,
    break_min: Optional[int],
    break_start_min: Optional[int],
    cfg: ScheduleConfig,
) -> Optional[int]:
    if break_min is None:
        return None
    return validate_break(start_min, end_min, break_min, break_start_min, cfg)


def create_assignment(
    session: Session,
    period_id: int,
    staff_id: int,
    day: date,
    start_min: int,
    end_min: int,
    break_min: Optional[int] = None,
    break_start_min: Optional[int] = None,
    note: Optional[str] = None,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> ShiftAssignment:
    """
    Create a shift for one staff member on one date.

    Args:
        session: Database session
        period_id: Period the shift belongs to
        staff_id: Staff member being assigned
        day: Calendar date of the shift
        start_min: Shift start (minute-of-day)
        end_min: Shift end (minute-of-day)
        break_min: Optional break duration
        break_start_min: Optional break start; defaults to the centred position
        note: Optional free text
        cfg: ScheduleConfig with business hours and break options

    Returns:
        The persisted ShiftAssignment

    Raises:
        NotFound: Unknown period or staff member
        DateOutsidePeriod: day is not inside the period
        ValidationFailed: Interval or break is invalid
        DuplicateAssignment: Staff member already has a shift on that date
    """
    period = PeriodRepository.require(session, period_id)
    if StaffRepository.get_by_id(session, staff_id) is None:
        raise NotFound(f"Staff {staff_id} not found")
    if not period.contains(day):
        raise DateOutsidePeriod(f"{day.isoformat()} is outside the period")

    try:
        validate_interval(IntervalKind.ASSIGNMENT, start_min, end_min, cfg)
        resolved_break_start = _resolve_break(start_min, end_min, break_min, break_start_min, cfg)
    except ScheduleError as e:
        log.warning("Rejected shift for staff %s on %s: %s", staff_id, day, e.reason)
        raise

    assignment = ShiftAssignment(
        period_id=period_id,
        staff_id=staff_id,
        date=day,
        start_min=start_min,
        end_min=end_min,
        break_min=break_min,
        break_start_min=resolved_break_start,
        note=note,
    )
    assignment = AssignmentRepository.create(session, assignment)
    log.info("Created shift %s for staff %s on %s (%s-%s)", assignment.id, staff_id, day, start_min, end_min)
    return assignment


def update_assignment(
    session: Session,
    assignment_id: int,
    changes: Dict[str, Any],
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> ShiftAssignment:
    """
    Apply a partial update and re-validate the merged interval and break.

    Keys absent from ``changes`` keep their stored value. ``break_min=None``
    removes the break; ``break_start_min=None`` resets it to the default
    position. A null start/end is treated as absent.

    Raises:
        NotFound: Unknown assignment
        ValidationFailed: The merged interval or break is invalid
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")

    assignment = AssignmentRepository.get_by_id(session, assignment_id)
    if assignment is None:
        raise NotFound(f"Assignment {assignment_id} not found")

    start_min = changes.get("start_min")
    if start_min is None:
        start_min = assignment.start_min
    end_min = changes.get("end_min")
    if end_min is None:
        end_min = assignment.end_min
    break_min = changes["break_min"] if "break_min" in changes else assignment.break_min
    break_start_min = changes["break_start_min"] if "break_start_min" in changes else assignment.break_start_min

    try:
        validate_interval(IntervalKind.ASSIGNMENT, start_min, end_min, cfg)
        resolved_break_start = _resolve_break(start_min, end_min, break_min, break_start_min, cfg)
    except ScheduleError as e:
        log.warning("Rejected update of shift %s: %s", assignment_id, e.reason)
        raise

    assignment.start_min = start_min
    assignment.end_min = end_min
    assignment.break_min = break_min
    assignment.break_start_min = resolved_break_start
    if "note" in changes:
        assignment.note = changes["note"]
    assignment = AssignmentRepository.save(session, assignment)
    log.info("Updated shift %s (%s-%s, break=%s@%s)", assignment_id, start_min, end_min, break_min, resolved_break_start)
    return assignment


def delete_assignment(session: Session, assignment_id: int) -> None:
    """Delete an assignment; raises NotFound if it does not exist."""
    assignment = AssignmentRepository.get_by_id(session, assignment_id)
    if assignment is None:
        raise NotFound(f"Assignment {assignment_id} not found")
    AssignmentRepository.delete(session, assignment)
    log.info("Deleted shift %s", assignment_id)


def list_assignments(session: Session, period_id: int, viewer: Staff) -> List[ShiftAssignment]:
    """
    Get a period's assignments ordered by date then start time.

    Staff viewers only see their own shifts, and nothing until the period
    is published.
    """
    if viewer.is_admin:
        return AssignmentRepository.get_by_period(session, period_id)
    period = PeriodRepository.get_by_id(session, period_id)
    if period is None or not period.is_published:
        return []
    return AssignmentRepository.get_by_period(session, period_id, staff_id=viewer.id)
