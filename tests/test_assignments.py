"""Tests for the assignment store."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime

import pytest

from shiftboard.domain.db import get_session_factory, init_database
from shiftboard.domain.models import Period, ShiftAssignment, Staff
from shiftboard.domain.repositories import AssignmentRepository, PeriodRepository, StaffRepository
from shiftboard.errors import (
    BreakExceedsShift,
    DateOutsidePeriod,
    DuplicateAssignment,
    InvalidBreakDuration,
    InvertedInterval,
    NotFound,
    OutOfBusinessHours,
)
from shiftboard.services.assignments import (
    create_assignment,
    delete_assignment,
    list_assignments,
    update_assignment,
)

DAY = date(2025, 3, 3)


def test_create_assignment_with_default_break(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 780, break_min=60)
    assert a.id is not None
    assert a.break_start_min == 660
    assert a.work_min == 120


def test_create_assignment_without_break(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720)
    assert a.break_min is None
    assert a.break_start_min is None
    assert a.work_min == 120


def test_second_shift_same_day_is_duplicate(db_session, period, staff_member):
    create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720)
    with pytest.raises(DuplicateAssignment):
        create_assignment(db_session, period.id, staff_member.id, DAY, 900, 1020)
    # The session is still usable after the rollback
    assert len(AssignmentRepository.get_by_period(db_session, period.id)) == 1


def test_different_staff_same_day_is_allowed(db_session, period, staff_member, other_staff):
    create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720)
    create_assignment(db_session, period.id, other_staff.id, DAY, 600, 720)
    assert len(AssignmentRepository.get_by_date(db_session, period.id, DAY)) == 2


def test_create_rejects_invalid_input(db_session, period, staff_member):
    with pytest.raises(OutOfBusinessHours):
        create_assignment(db_session, period.id, staff_member.id, DAY, 540, 720)
    with pytest.raises(InvalidBreakDuration):
        create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720, break_min=20)
    with pytest.raises(BreakExceedsShift):
        create_assignment(db_session, period.id, staff_member.id, DAY, 600, 630, break_min=30)
    with pytest.raises(DateOutsidePeriod):
        create_assignment(db_session, period.id, staff_member.id, date(2025, 4, 1), 600, 720)
    with pytest.raises(NotFound):
        create_assignment(db_session, 999, staff_member.id, DAY, 600, 720)
    with pytest.raises(NotFound):
        create_assignment(db_session, period.id, 999, DAY, 600, 720)
    assert AssignmentRepository.get_by_period(db_session, period.id) == []


def test_partial_update_revalidates_merged_interval(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720)
    with pytest.raises(InvertedInterval):
        update_assignment(db_session, a.id, {"start_min": 780})
    stored = AssignmentRepository.get_by_id(db_session, a.id)
    assert (stored.start_min, stored.end_min) == (600, 720)

    updated = update_assignment(db_session, a.id, {"end_min": 900})
    assert (updated.start_min, updated.end_min) == (600, 900)


def test_update_clamps_break_into_new_interval(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 900, break_min=60, break_start_min=780)
    updated = update_assignment(db_session, a.id, {"end_min": 780})
    # Break must end by 780, so it moves back to 720
    assert updated.break_start_min == 720


def test_update_break_changes(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 780, break_min=30)

    moved = update_assignment(db_session, a.id, {"break_start_min": 690})
    assert moved.break_start_min == 690

    recentred = update_assignment(db_session, a.id, {"break_min": 60, "break_start_min": None})
    assert (recentred.break_min, recentred.break_start_min) == (60, 660)

    removed = update_assignment(db_session, a.id, {"break_min": None})
    assert removed.break_min is None
    assert removed.break_start_min is None
    assert removed.work_min == 180


def test_update_ignores_null_bounds_and_rejects_unknown_fields(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720)
    updated = update_assignment(db_session, a.id, {"start_min": None, "note": "opening"})
    assert updated.start_min == 600
    assert updated.note == "opening"
    with pytest.raises(ValueError):
        update_assignment(db_session, a.id, {"staff_id": 5})


def test_update_and_delete_missing_assignment(db_session):
    with pytest.raises(NotFound):
        update_assignment(db_session, 42, {"end_min": 900})
    with pytest.raises(NotFound):
        delete_assignment(db_session, 42)


def test_delete_assignment(db_session, period, staff_member):
    a = create_assignment(db_session, period.id, staff_member.id, DAY, 600, 720)
    delete_assignment(db_session, a.id)
    assert AssignmentRepository.get_by_id(db_session, a.id) is None
    # The slot is free again
    create_assignment(db_session, period.id, staff_member.id, DAY, 900, 1020)


def test_list_assignments_is_ordered_and_role_filtered(db_session, period, admin, staff_member, other_staff):
    create_assignment(db_session, period.id, other_staff.id, date(2025, 3, 4), 600, 720)
    create_assignment(db_session, period.id, staff_member.id, DAY, 900, 1020)
    create_assignment(db_session, period.id, other_staff.id, DAY, 600, 720)

    everything = list_assignments(db_session, period.id, admin)
    assert [(a.date, a.start_min) for a in everything] == [
        (DAY, 600),
        (DAY, 900),
        (date(2025, 3, 4), 600),
    ]

    # Staff see nothing until the period is published
    assert list_assignments(db_session, period.id, staff_member) == []

    period.published_at = datetime(2025, 2, 25, 9, 0)
    db_session.commit()
    own = list_assignments(db_session, period.id, staff_member)
    assert [a.staff_id for a in own] == [staff_member.id]


def test_unique_constraint_applies_below_the_service(db_session, period, staff_member):
    AssignmentRepository.create(
        db_session, ShiftAssignment(period_id=period.id, staff_id=staff_member.id, date=DAY, start_min=600, end_min=720)
    )
    with pytest.raises(DuplicateAssignment):
        AssignmentRepository.create(
            db_session,
            ShiftAssignment(period_id=period.id, staff_id=staff_member.id, date=DAY, start_min=900, end_min=960),
        )


def test_concurrent_creates_for_same_staff_and_date(tmp_path):
    engine = init_database(f"sqlite:///{tmp_path / 'race.db'}")
    factory = get_session_factory(engine=engine)
    with factory() as session:
        staff_id = StaffRepository.create(session, Staff(name="Ben", role="STAFF")).id
        period_id = PeriodRepository.create(
            session, Period(start_date=date(2025, 3, 1), end_date=date(2025, 3, 15), is_open=True)
        ).id

    workers = 8
    barrier = threading.Barrier(workers)

    def attempt(i):
        with factory() as session:
            barrier.wait()
            try:
                create_assignment(session, period_id, staff_id, DAY, 600 + 15 * i, 780)
            except DuplicateAssignment:
                return "dup"
            return "ok"

    try:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(attempt, range(workers)))

        assert sorted(results) == ["dup"] * (workers - 1) + ["ok"]
        with factory() as session:
            assert len(AssignmentRepository.get_by_period(session, period_id)) == 1
    finally:
        engine.dispose()
