"""Request-scoped dependencies: database session, configuration and caller identity."""

from typing import Iterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from shiftboard.config import ScheduleConfig
from shiftboard.domain.models import Staff
from shiftboard.domain.repositories import StaffRepository
from shiftboard.errors import Forbidden, Unauthenticated


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_config(request: Request) -> ScheduleConfig:
    return request.app.state.config


def get_viewer(
    x_staff_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Staff:
    # Session handling lives in front of this service; it forwards the
    # authenticated staff id in X-Staff-Id.
    if not x_staff_id or not x_staff_id.isdigit():
        raise Unauthenticated("Authentication is required")
    staff = StaffRepository.get_by_id(db, int(x_staff_id))
    if staff is None:
        raise Unauthenticated("Unknown staff identity")
    return staff


def require_admin(viewer: Staff = Depends(get_viewer)) -> Staff:
    if not viewer.is_admin:
        raise Forbidden("Administrator role required")
    return viewer
