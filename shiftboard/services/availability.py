"""Availability upserts with status-driven defaulting and validate-before-write batches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from shiftboard.config import DEFAULT_CONFIG, ScheduleConfig
from shiftboard.constraints import AvailabilityStatus, resolve_availability_window
from shiftboard.domain.models import Availability, Period, Staff
from shiftboard.domain.repositories import AvailabilityRepository, PeriodRepository
from shiftboard.errors import DateOutsidePeriod, PeriodClosed, ScheduleError
from shiftboard.logger import get_logger

log = get_logger("availability")


@dataclass
class AvailabilityItem:
    date: date
    status: AvailabilityStatus
    start_min: Optional[int] = None
    end_min: Optional[int] = None
    note: Optional[str] = None


def _writable_period(session: Session, period_id: int, viewer: Staff) -> Period:
    period = PeriodRepository.require(session, period_id)
    if not period.is_open and not viewer.is_admin:
        raise PeriodClosed("This period no longer accepts availability")
    return period


def _resolve(item: AvailabilityItem, period: Period, cfg: ScheduleConfig) -> Dict:
    if not period.contains(item.date):
        raise DateOutsidePeriod(f"{item.date.isoformat()} is outside the period")
    start_min, end_min = resolve_availability_window(item.status, item.start_min, item.end_min, cfg)
    return {
        "status": AvailabilityStatus(item.status).value,
        "start_min": start_min,
        "end_min": end_min,
        "note": item.note,
    }


def upsert_availability(
    session: Session,
    period_id: int,
    staff_id: int,
    item: AvailabilityItem,
    viewer: Staff,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> Availability:
    """Create or overwrite one day of a staff member's availability."""
    return bulk_upsert_availability(session, period_id, staff_id, [item], viewer, cfg)[0]


def bulk_upsert_availability(
    session: Session,
    period_id: int,
    staff_id: int,
    items: Sequence[AvailabilityItem],
    viewer: Staff,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> List[Availability]:
    """
    Create or overwrite several days of availability.

    Every item is resolved and validated before anything is written, so a
    single invalid item rejects the whole batch and leaves stored rows as
    they were. Later items win when a date repeats.

    Args:
        session: Database session
        period_id: Target period
        staff_id: Staff member whose availability is written
        items: Items to upsert
        viewer: Caller; non-admins may only write while the period is open
        cfg: ScheduleConfig with business hours and granularity

    Raises:
        NotFound: Unknown period
        PeriodClosed: Period is closed and viewer is not an admin
        ValidationFailed: Any item is invalid
    """
    period = _writable_period(session, period_id, viewer)

    rows: Dict[date, Dict] = {}
    for item in items:
        try:
            rows[item.date] = _resolve(item, period, cfg)
        except ScheduleError as e:
            log.warning("Rejected availability batch for staff %s: %s on %s", staff_id, e.reason, item.date)
            raise type(e)(f"{item.date.isoformat()}: {e.message}")

    if not rows:
        return []
    records = AvailabilityRepository.bulk_upsert(session, period_id, staff_id, rows)
    log.info("Saved %d availability day(s) for staff %s in period %s", len(records), staff_id, period_id)
    return records


def list_availability(
    session: Session,
    period_id: int,
    viewer: Staff,
    staff_id: int | None = None,
) -> List[Availability]:
    """Get availability ordered by staff then date; staff viewers only see their own."""
    if not viewer.is_admin:
        staff_id = viewer.id
    return AvailabilityRepository.get_by_period(session, period_id, staff_id=staff_id)
