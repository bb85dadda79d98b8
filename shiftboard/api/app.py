"""FastAPI application exposing the assignment and availability stores."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from shiftboard.api import assignments, availability, periods, submissions
from shiftboard.config import DEFAULT_CONFIG, ScheduleConfig
from shiftboard.domain.db import DEFAULT_DB_URL, get_session_factory, init_database
from shiftboard.errors import ScheduleError, status_for
from shiftboard.logger import get_logger

log = get_logger("api")


def _first_error(errors) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def create_app(
    session_factory: Optional[sessionmaker] = None,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
    db_url: str = DEFAULT_DB_URL,
) -> FastAPI:
    """
    Build the API.

    Args:
        session_factory: Session factory to use; when omitted the database at
            ``db_url`` is initialised and used
        cfg: ScheduleConfig shared by every request
        db_url: SQLAlchemy URL used when no session factory is given
    """
    if session_factory is None:
        session_factory = get_session_factory(engine=init_database(db_url))

    app = FastAPI(title="Shift Board API", version="0.1")
    app.state.session_factory = session_factory
    app.state.config = cfg

    @app.exception_handler(ScheduleError)
    async def schedule_error_handler(request: Request, exc: ScheduleError):
        status = status_for(exc)
        if status >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status, content={"error": exc.message, "reason": exc.reason})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _first_error(exc.errors()), "reason": "InvalidRequest"})

    @app.exception_handler(ValidationError)
    async def body_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": _first_error(exc.errors()), "reason": "InvalidRequest"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(assignments.router)
    app.include_router(availability.router)
    app.include_router(submissions.router)
    app.include_router(periods.router)
    return app
