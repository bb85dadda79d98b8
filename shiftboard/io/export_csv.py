"""CSV export of a period's assignments."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.orm import Session

from shiftboard.domain.repositories import AssignmentRepository, PeriodRepository
from shiftboard.logger import get_logger
from shiftboard.services.summary import assignments_frame, with_labels

log = get_logger("io")

EXPORT_COLUMNS = ["date", "staff_id", "staff_name", "start", "end", "break_min", "break_start", "work_min"]


def export_assignments_csv(session: Session, period_id: int, csv_path: str | Path) -> int:
    """
    Write every assignment of a period to CSV, ordered by date then start.

    Args:
        session: Database session
        period_id: Period to export
        csv_path: Destination file

    Returns:
        Number of rows written
    """
    PeriodRepository.require(session, period_id)
    df = assignments_frame(AssignmentRepository.get_by_period(session, period_id))
    if df.empty:
        df.reindex(columns=EXPORT_COLUMNS).to_csv(csv_path, index=False)
    else:
        with_labels(df)[EXPORT_COLUMNS].to_csv(csv_path, index=False)
    log.info("Exported %d shift(s) for period %s to %s", len(df), period_id, csv_path)
    return len(df)
