import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_config, get_db, get_viewer, require_admin
from shiftboard.api.schemas import period_payload
from shiftboard.config import ScheduleConfig
from shiftboard.domain.models import Staff
from shiftboard.domain.repositories import AssignmentRepository, PeriodRepository
from shiftboard.services.summary import summarize_day, summarize_period
from shiftboard.timemodel import enumerate_slots

router = APIRouter(prefix="/periods", tags=["Periods"])


@router.get("/{period_id}", summary="Read a period")
def get_period(
    period_id: int,
    _: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
):
    return {"period": period_payload(PeriodRepository.require(db, period_id))}


@router.get("/{period_id}/summary", summary="Work-time summary for a day or the whole period")
def get_summary(
    period_id: int,
    day: Optional[dt.date] = Query(None, alias="date"),
    _: Staff = Depends(require_admin),
    db: Session = Depends(get_db),
):
    PeriodRepository.require(db, period_id)
    if day is not None:
        return {"date": day.isoformat(), **summarize_day(AssignmentRepository.get_by_date(db, period_id, day))}
    return summarize_period(AssignmentRepository.get_by_period(db, period_id))


@router.get("/{period_id}/timeline", summary="Timeline grid and shift templates")
def get_timeline(
    period_id: int,
    _: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
    cfg: ScheduleConfig = Depends(get_config),
):
    period = PeriodRepository.require(db, period_id)
    days = [
        (period.start_date + dt.timedelta(days=offset)).isoformat()
        for offset in range((period.end_date - period.start_date).days + 1)
    ]
    slots = enumerate_slots(cfg.business_start_min, cfg.business_end_min, cfg.availability_granularity)
    return {
        "days": days,
        "businessStartMin": cfg.business_start_min,
        "businessEndMin": cfg.business_end_min,
        "assignmentGranularity": cfg.assignment_granularity,
        "pixelsPerSlot": cfg.pixels_per_slot,
        "breakOptions": list(cfg.break_options),
        "slots": [{"value": value, "label": label} for value, label in slots.labels()],
        "templates": [
            {"label": t.label, "startMin": t.start_min, "endMin": t.end_min} for t in cfg.templates
        ],
    }
