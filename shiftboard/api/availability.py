from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_config, get_db, get_viewer
from shiftboard.api.schemas import (
    AvailabilityEntry,
    AvailabilityRequest,
    BulkAvailabilityRequest,
    availability_payload,
)
from shiftboard.config import ScheduleConfig
from shiftboard.domain.models import Staff
from shiftboard.errors import Forbidden
from shiftboard.services.availability import (
    AvailabilityItem,
    bulk_upsert_availability,
    list_availability,
    upsert_availability,
)

router = APIRouter(prefix="/availability", tags=["Availability"])


def _to_item(entry: AvailabilityEntry) -> AvailabilityItem:
    return AvailabilityItem(
        date=entry.date,
        status=entry.status,
        start_min=entry.startMin,
        end_min=entry.endMin,
        note=entry.note,
    )


def _target_staff(viewer: Staff, requested: Optional[int]) -> int:
    if requested is None or requested == viewer.id:
        return viewer.id
    if not viewer.is_admin:
        raise Forbidden("Staff may only edit their own availability")
    return requested


@router.get("", summary="List availability for a period")
def get_availability(
    period_id: int = Query(..., alias="periodId"),
    staff_id: Optional[int] = Query(None, alias="staffId"),
    viewer: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
):
    records = list_availability(db, period_id, viewer, staff_id=staff_id)
    return {"availabilities": [availability_payload(a) for a in records]}


@router.post("", summary="Save one day or a batch of availability")
def post_availability(
    body: Dict[str, Any] = Body(...),
    viewer: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
    cfg: ScheduleConfig = Depends(get_config),
):
    # A body with "items" is a batch; anything else is a single day.
    if "items" in body:
        bulk = BulkAvailabilityRequest.model_validate(body)
        staff_id = _target_staff(viewer, bulk.staffId)
        records = bulk_upsert_availability(
            db, bulk.periodId, staff_id, [_to_item(e) for e in bulk.items], viewer, cfg
        )
        return {"availabilities": [availability_payload(a) for a in records]}

    single = AvailabilityRequest.model_validate(body)
    staff_id = _target_staff(viewer, single.staffId)
    record = upsert_availability(db, single.periodId, staff_id, _to_item(single), viewer, cfg)
    return {"availability": availability_payload(record)}
