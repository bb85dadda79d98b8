from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_db, get_viewer
from shiftboard.api.schemas import SubmissionRequest, staff_payload, submission_payload
from shiftboard.domain.models import Staff
from shiftboard.domain.repositories import SubmissionRepository
from shiftboard.services.submissions import submission_status, submit_availability

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.get("", summary="Submission status for a period")
def get_submissions(
    period_id: int = Query(..., alias="periodId"),
    viewer: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
):
    if not viewer.is_admin:
        own = SubmissionRepository.get_one(db, period_id, viewer.id)
        return {"submission": submission_payload(own)}
    status = submission_status(db, period_id)
    return {
        "submitted": [staff_payload(s) for s in status["submitted"]],
        "notSubmitted": [staff_payload(s) for s in status["not_submitted"]],
    }


@router.post("", summary="Mark availability as submitted")
def post_submission(
    body: SubmissionRequest,
    viewer: Staff = Depends(get_viewer),
    db: Session = Depends(get_db),
):
    submission = submit_availability(db, body.periodId, viewer.id)
    return {"submission": submission_payload(submission)}
