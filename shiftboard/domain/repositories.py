"""Repository classes for data access."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftboard.errors import DuplicateAssignment, NotFound

from .models import Availability, Period, ShiftAssignment, Staff, Submission


class StaffRepository:
    """Repository for staff identity lookups."""

    @staticmethod
    def get_all(session: Session) -> List[Staff]:
        """Get all staff ordered by id."""
        return session.query(Staff).order_by(Staff.id).all()

    @staticmethod
    def get_by_id(session: Session, staff_id: int) -> Optional[Staff]:
        """Get staff member by ID."""
        return session.get(Staff, staff_id)

    @staticmethod
    def get_by_role(session: Session, role: str) -> List[Staff]:
        """Get all staff with a specific role."""
        return session.query(Staff).filter(Staff.role == role.upper()).order_by(Staff.id).all()

    @staticmethod
    def create(session: Session, staff: Staff) -> Staff:
        """Create a new staff member."""
        session.add(staff)
        session.commit()
        session.refresh(staff)
        return staff


class PeriodRepository:
    """Repository for scheduling periods."""

    @staticmethod
    def get_by_id(session: Session, period_id: int) -> Optional[Period]:
        """Get period by ID."""
        return session.get(Period, period_id)

    @staticmethod
    def require(session: Session, period_id: int) -> Period:
        """Get period by ID or raise NotFound."""
        period = session.get(Period, period_id)
        if period is None:
            raise NotFound(f"Period {period_id} not found")
        return period

    @staticmethod
    def get_all(session: Session) -> List[Period]:
        """Get all periods, newest first."""
        return session.query(Period).order_by(Period.start_date.desc()).all()

    @staticmethod
    def create(session: Session, period: Period) -> Period:
        """Create a new period."""
        session.add(period)
        session.commit()
        session.refresh(period)
        return period


class AssignmentRepository:
    """Repository for shift assignment data access."""

    @staticmethod
    def get_by_id(session: Session, assignment_id: int) -> Optional[ShiftAssignment]:
        """Get assignment by ID."""
        return session.get(ShiftAssignment, assignment_id)

    @staticmethod
    def get_by_period(session: Session, period_id: int, staff_id: int | None = None) -> List[ShiftAssignment]:
        """Get assignments for a period ordered by date then start time."""
        query = session.query(ShiftAssignment).filter(ShiftAssignment.period_id == period_id)
        if staff_id is not None:
            query = query.filter(ShiftAssignment.staff_id == staff_id)
        return query.order_by(ShiftAssignment.date, ShiftAssignment.start_min, ShiftAssignment.id).all()

    @staticmethod
    def get_by_date(session: Session, period_id: int, day: date) -> List[ShiftAssignment]:
        """Get all assignments on one date of a period."""
        return (
            session.query(ShiftAssignment)
            .filter(ShiftAssignment.period_id == period_id, ShiftAssignment.date == day)
            .order_by(ShiftAssignment.start_min, ShiftAssignment.id)
            .all()
        )

    @staticmethod
    def create(session: Session, assignment: ShiftAssignment) -> ShiftAssignment:
        """
        Insert a new assignment.

        The (period, staff, date) unique constraint decides the winner when
        two inserts race; the loser gets DuplicateAssignment.

        Raises:
            DuplicateAssignment: A shift already exists for this staff and date
        """
        session.add(assignment)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise DuplicateAssignment("This staff member already has a shift on that date")
        session.refresh(assignment)
        return assignment

    @staticmethod
    def save(session: Session, assignment: ShiftAssignment) -> ShiftAssignment:
        """Commit pending changes to an existing assignment."""
        session.commit()
        session.refresh(assignment)
        return assignment

    @staticmethod
    def delete(session: Session, assignment: ShiftAssignment) -> None:
        """Delete an assignment."""
        session.delete(assignment)
        session.commit()


class AvailabilityRepository:
    """Repository for availability data access."""

    @staticmethod
    def get_by_period(session: Session, period_id: int, staff_id: int | None = None) -> List[Availability]:
        """Get availabilities for a period ordered by staff then date."""
        query = session.query(Availability).filter(Availability.period_id == period_id)
        if staff_id is not None:
            query = query.filter(Availability.staff_id == staff_id)
        return query.order_by(Availability.staff_id, Availability.date).all()

    @staticmethod
    def get_one(session: Session, period_id: int, staff_id: int, day: date) -> Optional[Availability]:
        """Get the availability record for (period, staff, date)."""
        return (
            session.query(Availability)
            .filter(
                Availability.period_id == period_id,
                Availability.staff_id == staff_id,
                Availability.date == day,
            )
            .one_or_none()
        )

    @staticmethod
    def stage_upsert(session: Session, period_id: int, staff_id: int, day: date, values: Dict) -> Availability:
        """Insert or overwrite the (period, staff, date) record without committing."""
        existing = AvailabilityRepository.get_one(session, period_id, staff_id, day)
        if existing is None:
            record = Availability(period_id=period_id, staff_id=staff_id, date=day, **values)
            session.add(record)
            return record
        for key, value in values.items():
            setattr(existing, key, value)
        return existing

    @staticmethod
    def bulk_upsert(session: Session, period_id: int, staff_id: int, rows: Dict[date, Dict]) -> List[Availability]:
        """
        Upsert several dates for one staff member in a single commit.

        If a concurrent writer inserted one of the rows first, the unique
        constraint rejects our insert; the batch is then staged again, which
        turns that insert into an update of the winner's row.
        """
        for attempt in range(2):
            try:
                records = [
                    AvailabilityRepository.stage_upsert(session, period_id, staff_id, day, values)
                    for day, values in rows.items()
                ]
                session.commit()
                break
            except IntegrityError:
                session.rollback()
                if attempt:
                    raise
        for record in records:
            session.refresh(record)
        return records

    @staticmethod
    def upsert(session: Session, period_id: int, staff_id: int, day: date, values: Dict) -> Availability:
        """Insert or overwrite one availability record and commit."""
        return AvailabilityRepository.bulk_upsert(session, period_id, staff_id, {day: values})[0]


class SubmissionRepository:
    """Repository for availability submissions."""

    @staticmethod
    def get_by_period(session: Session, period_id: int) -> List[Submission]:
        """Get all submissions for a period."""
        return session.query(Submission).filter(Submission.period_id == period_id).all()

    @staticmethod
    def get_one(session: Session, period_id: int, staff_id: int) -> Optional[Submission]:
        """Get a staff member's submission for a period."""
        return (
            session.query(Submission)
            .filter(Submission.period_id == period_id, Submission.staff_id == staff_id)
            .one_or_none()
        )

    @staticmethod
    def upsert(session: Session, submission: Submission) -> Submission:
        """Create the submission or refresh its timestamp."""
        existing = SubmissionRepository.get_one(session, submission.period_id, submission.staff_id)
        if existing is not None:
            existing.submitted_at = submission.submitted_at
            submission = existing
        else:
            session.add(submission)
        session.commit()
        session.refresh(submission)
        return submission
