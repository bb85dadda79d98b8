"""Tests for the availability store and submissions."""

from datetime import date, datetime, timedelta, timezone

import pytest

from shiftboard.constraints import AvailabilityStatus
from shiftboard.domain.repositories import AvailabilityRepository
from shiftboard.errors import DateOutsidePeriod, MisalignedInterval, MissingInterval, PeriodClosed
from shiftboard.services.availability import (
    AvailabilityItem,
    bulk_upsert_availability,
    list_availability,
    upsert_availability,
)
from shiftboard.services.submissions import submission_status, submit_availability


def _item(day, status, start=None, end=None):
    return AvailabilityItem(date=date(2025, 3, day), status=status, start_min=start, end_min=end)


def test_status_drives_stored_window(db_session, period, staff_member):
    free = upsert_availability(db_session, period.id, staff_member.id, _item(1, "FREE", 700, 800), staff_member)
    assert (free.start_min, free.end_min) == (600, 1230)

    off = upsert_availability(db_session, period.id, staff_member.id, _item(2, "UNAVAILABLE", 600, 720), staff_member)
    assert (off.start_min, off.end_min) == (None, None)

    partial = upsert_availability(
        db_session, period.id, staff_member.id, _item(3, AvailabilityStatus.PREFER_OFF, 630, 900), staff_member
    )
    assert partial.status == "PREFER_OFF"
    assert (partial.start_min, partial.end_min) == (630, 900)


def test_upsert_overwrites_same_date(db_session, period, staff_member):
    upsert_availability(db_session, period.id, staff_member.id, _item(1, "AVAILABLE", 600, 720), staff_member)
    upsert_availability(db_session, period.id, staff_member.id, _item(1, "UNAVAILABLE"), staff_member)
    records = AvailabilityRepository.get_by_period(db_session, period.id)
    assert len(records) == 1
    assert records[0].status == "UNAVAILABLE"


def test_available_requires_times(db_session, period, staff_member):
    with pytest.raises(MissingInterval):
        upsert_availability(db_session, period.id, staff_member.id, _item(1, "AVAILABLE"), staff_member)


def test_date_must_fall_inside_period(db_session, period, staff_member):
    item = AvailabilityItem(date=date(2025, 3, 16), status="FREE")
    with pytest.raises(DateOutsidePeriod):
        upsert_availability(db_session, period.id, staff_member.id, item, staff_member)


def test_bulk_with_one_invalid_item_changes_nothing(db_session, period, staff_member):
    upsert_availability(db_session, period.id, staff_member.id, _item(1, "AVAILABLE", 600, 720), staff_member)

    items = [_item(day, "FREE") for day in range(1, 11)]
    items[6] = _item(7, "AVAILABLE", 615, 720)  # Off the 30-minute grid
    with pytest.raises(MisalignedInterval) as excinfo:
        bulk_upsert_availability(db_session, period.id, staff_member.id, items, staff_member)
    assert "2025-03-07" in str(excinfo.value)

    records = AvailabilityRepository.get_by_period(db_session, period.id)
    assert len(records) == 1
    assert (records[0].status, records[0].start_min, records[0].end_min) == ("AVAILABLE", 600, 720)


def test_bulk_writes_every_item(db_session, period, staff_member):
    items = [_item(day, "FREE") for day in range(1, 6)]
    records = bulk_upsert_availability(db_session, period.id, staff_member.id, items, staff_member)
    assert len(records) == 5
    assert len(AvailabilityRepository.get_by_period(db_session, period.id, staff_id=staff_member.id)) == 5


def test_closed_period_blocks_staff_but_not_admin(db_session, period, admin, staff_member):
    period.is_open = False
    db_session.commit()
    with pytest.raises(PeriodClosed):
        upsert_availability(db_session, period.id, staff_member.id, _item(1, "FREE"), staff_member)
    record = upsert_availability(db_session, period.id, staff_member.id, _item(1, "FREE"), admin)
    assert record.staff_id == staff_member.id


def test_staff_only_list_their_own(db_session, period, admin, staff_member, other_staff):
    upsert_availability(db_session, period.id, staff_member.id, _item(2, "FREE"), staff_member)
    upsert_availability(db_session, period.id, other_staff.id, _item(1, "FREE"), other_staff)
    upsert_availability(db_session, period.id, staff_member.id, _item(1, "FREE"), staff_member)

    mine = list_availability(db_session, period.id, staff_member, staff_id=other_staff.id)
    assert [(a.staff_id, a.date.day) for a in mine] == [(staff_member.id, 1), (staff_member.id, 2)]

    everyone = list_availability(db_session, period.id, admin)
    assert [a.staff_id for a in everyone] == [staff_member.id, staff_member.id, other_staff.id]


def test_submission_status(db_session, period, admin, staff_member, other_staff):
    submit_availability(db_session, period.id, staff_member.id)
    # Re-submitting refreshes rather than duplicates
    submit_availability(db_session, period.id, staff_member.id)

    status = submission_status(db_session, period.id)
    assert [s.id for s in status["submitted"]] == [staff_member.id]
    assert [s.id for s in status["not_submitted"]] == [other_staff.id]


def test_cannot_submit_to_closed_period(db_session, period, staff_member):
    period.is_open = False
    db_session.commit()
    with pytest.raises(PeriodClosed):
        submit_availability(db_session, period.id, staff_member.id)


def test_submission_time_is_current_utc(db_session, period, staff_member):
    before = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=1)
    submission = submit_availability(db_session, period.id, staff_member.id)
    # SQLite drops the offset on reload, so compare as naive UTC
    stamped = submission.submitted_at.replace(tzinfo=None)
    assert before <= stamped <= before + timedelta(minutes=1)
