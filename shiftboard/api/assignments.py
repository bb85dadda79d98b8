from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_config, get_db, get_viewer, require_admin
from shiftboard.api.schemas import AssignmentCreate, AssignmentPatch, assignment_payload
from shiftboard.config import ScheduleConfig
from shiftboard.domain.models import Staff
from shiftboard.services import assignments as service

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.get("", summary="List shifts for a period")
def list_assignments(
    period_id: int = Query(..., alias="periodId"),
    viewer: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
):
    assignments = service.list_assignments(db, period_id, viewer)
    return {"assignments": [assignment_payload(a) for a in assignments]}


@router.post("", summary="Create a shift", status_code=201)
def create_assignment(
    body: AssignmentCreate,
    _: Staff = Depends(require_admin),
    db: Session = Depends(get_db),
    cfg: ScheduleConfig = Depends(get_config),
):
    assignment = service.create_assignment(
        db,
        period_id=body.periodId,
        staff_id=body.staffId,
        day=body.date,
        start_min=body.startMin,
        end_min=body.endMin,
        break_min=body.breakMin,
        break_start_min=body.breakStartMin,
        note=body.note,
        cfg=cfg,
    )
    return JSONResponse(status_code=201, content={"assignment": assignment_payload(assignment)})


@router.patch("/{assignment_id}", summary="Update a shift")
def update_assignment(
    assignment_id: int,
    body: AssignmentPatch,
    _: Staff = Depends(require_admin),
    db: Session = Depends(get_db),
    cfg: ScheduleConfig = Depends(get_config),
):
    assignment = service.update_assignment(db, assignment_id, body.changes(), cfg)
    return {"assignment": assignment_payload(assignment)}


@router.delete("/{assignment_id}", summary="Delete a shift")
def delete_assignment(
    assignment_id: int,
    _: Staff = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service.delete_assignment(db, assignment_id)
    return {"success": True}
