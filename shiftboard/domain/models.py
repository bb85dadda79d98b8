"""SQLAlchemy models for the shift board."""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Staff(Base):
    """Staff member identity with an ADMIN or STAFF role."""

    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    role = Column(String(10), nullable=False, default="STAFF")  # ADMIN, STAFF

    # Relationships
    availabilities = relationship("Availability", back_populates="staff", cascade="all, delete-orphan")
    assignments = relationship("ShiftAssignment", back_populates="staff", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="staff", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, name='{self.name}', role='{self.role}')>"


class Period(Base):
    """Scheduling window for which availability is collected and shifts are assigned."""

    __tablename__ = "periods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # Inclusive
    deadline_at = Column(DateTime, nullable=True)
    is_open = Column(Boolean, nullable=False, default=True)
    published_at = Column(DateTime, nullable=True)

    # Relationships
    availabilities = relationship("Availability", back_populates="period", cascade="all, delete-orphan")
    assignments = relationship("ShiftAssignment", back_populates="period", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="period", cascade="all, delete-orphan")

    @property
    def is_published(self) -> bool:
        return self.published_at is not None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        return f"<Period(id={self.id}, {self.start_date}..{self.end_date}, open={self.is_open})>"


class Availability(Base):
    """A staff member's reported availability for one date of a period."""

    __tablename__ = "availabilities"
    __table_args__ = (UniqueConstraint("period_id", "staff_id", "date", name="uq_availability_period_staff_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    period_id = Column(Integer, ForeignKey("periods.id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(12), nullable=False)  # UNAVAILABLE, AVAILABLE, FREE, PREFER_OFF
    start_min = Column(Integer, nullable=True)  # Null when UNAVAILABLE
    end_min = Column(Integer, nullable=True)
    note = Column(Text, nullable=True)

    # Relationships
    period = relationship("Period", back_populates="availabilities")
    staff = relationship("Staff", back_populates="availabilities")

    def __repr__(self) -> str:
        return f"<Availability(staff={self.staff_id}, date={self.date}, status={self.status})>"


class ShiftAssignment(Base):
    """Confirmed shift for one staff member on one date, with an optional break."""

    __tablename__ = "shift_assignments"
    __table_args__ = (UniqueConstraint("period_id", "staff_id", "date", name="uq_assignment_period_staff_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    period_id = Column(Integer, ForeignKey("periods.id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_min = Column(Integer, nullable=False)
    end_min = Column(Integer, nullable=False)
    break_min = Column(Integer, nullable=True)  # 30, 45 or 60; null means no break
    break_start_min = Column(Integer, nullable=True)  # Absolute minute-of-day
    note = Column(Text, nullable=True)

    # Relationships
    period = relationship("Period", back_populates="assignments")
    staff = relationship("Staff", back_populates="assignments")

    @property
    def work_min(self) -> int:
        return self.end_min - self.start_min - (self.break_min or 0)

    def __repr__(self) -> str:
        return (
            f"<ShiftAssignment(id={self.id}, staff={self.staff_id}, date={self.date}, "
            f"{self.start_min}-{self.end_min}, break={self.break_min})>"
        )


class Submission(Base):
    """Marks that a staff member has finished entering availability for a period."""

    __tablename__ = "submissions"
    __table_args__ = (UniqueConstraint("period_id", "staff_id", name="uq_submission_period_staff"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    period_id = Column(Integer, ForeignKey("periods.id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    period = relationship("Period", back_populates="submissions")
    staff = relationship("Staff", back_populates="submissions")

    def __repr__(self) -> str:
        return f"<Submission(period={self.period_id}, staff={self.staff_id}, at={self.submitted_at})>"
