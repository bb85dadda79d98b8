"""Availability submission tracking."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy.orm import Session

from shiftboard.domain.models import Staff, Submission
from shiftboard.domain.repositories import PeriodRepository, StaffRepository, SubmissionRepository
from shiftboard.errors import PeriodClosed
from shiftboard.logger import get_logger

log = get_logger("submissions")


def submit_availability(session: Session, period_id: int, staff_id: int) -> Submission:
    """Mark a staff member's availability as submitted (re-submitting refreshes the time)."""
    period = PeriodRepository.require(session, period_id)
    if not period.is_open:
        raise PeriodClosed("This period no longer accepts availability")
    submission = SubmissionRepository.upsert(
        session,
        Submission(period_id=period_id, staff_id=staff_id, submitted_at=datetime.now(timezone.utc)),
    )
    log.info("Staff %s submitted availability for period %s", staff_id, period_id)
    return submission


def submission_status(session: Session, period_id: int) -> Dict[str, List[Staff]]:
    """
    Split STAFF-role members into those who submitted and those who did not.

    Returns:
        Dict with "submitted" and "not_submitted" lists of Staff
    """
    PeriodRepository.require(session, period_id)
    submitted_ids = {s.staff_id for s in SubmissionRepository.get_by_period(session, period_id)}
    members = StaffRepository.get_by_role(session, "STAFF")
    return {
        "submitted": [m for m in members if m.id in submitted_ids],
        "not_submitted": [m for m in members if m.id not in submitted_ids],
    }
