"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from shiftboard.domain.db import get_session_factory, init_database
from shiftboard.domain.models import Period, Staff
from shiftboard.domain.repositories import PeriodRepository, StaffRepository


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = init_database("sqlite://")
    yield get_session_factory(engine=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """Create in-memory database session for testing."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def admin(db_session):
    return StaffRepository.create(db_session, Staff(name="Aiko", role="ADMIN"))


@pytest.fixture
def staff_member(db_session):
    return StaffRepository.create(db_session, Staff(name="Ben", role="STAFF"))


@pytest.fixture
def other_staff(db_session):
    return StaffRepository.create(db_session, Staff(name="Chika", role="STAFF"))


@pytest.fixture
def period(db_session):
    """Open, unpublished period covering the first half of March 2025."""
    return PeriodRepository.create(
        db_session,
        Period(start_date=date(2025, 3, 1), end_date=date(2025, 3, 15), is_open=True),
    )
