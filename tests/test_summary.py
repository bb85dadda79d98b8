"""Tests for work-time summaries."""

from datetime import date

from shiftboard.services.assignments import create_assignment
from shiftboard.domain.repositories import AssignmentRepository
from shiftboard.services.summary import format_summary, format_work, summarize_day, summarize_period


def _seed(db_session, period, staff_member, other_staff):
    create_assignment(db_session, period.id, staff_member.id, date(2025, 3, 3), 600, 1050, break_min=45)
    create_assignment(db_session, period.id, other_staff.id, date(2025, 3, 3), 960, 1230)
    create_assignment(db_session, period.id, staff_member.id, date(2025, 3, 4), 600, 780)


def test_format_work():
    assert format_work(420) == "7h"
    assert format_work(450) == "7h30m"
    assert format_work(45) == "0h45m"


def test_summarize_day(db_session, period, staff_member, other_staff):
    _seed(db_session, period, staff_member, other_staff)
    summary = summarize_day(AssignmentRepository.get_by_date(db_session, period.id, date(2025, 3, 3)))

    assert summary["headcount"] == 2
    assert summary["total_work_min"] == 405 + 270
    first, second = summary["rows"]
    assert (first["staff_name"], first["start"], first["end"], first["work"]) == ("Ben", "10:00", "17:30", "6h45m")
    assert first["break_start"] == "13:15"
    assert (second["staff_name"], second["break_min"], second["break_start"]) == ("Chika", 0, "")


def test_summarize_period(db_session, period, staff_member, other_staff):
    _seed(db_session, period, staff_member, other_staff)
    summary = summarize_period(AssignmentRepository.get_by_period(db_session, period.id))

    assert summary["total_work_min"] == 405 + 270 + 180
    assert summary["per_staff"] == [
        {"staff_id": staff_member.id, "staff_name": "Ben", "shifts": 2, "work_min": 585},
        {"staff_id": other_staff.id, "staff_name": "Chika", "shifts": 1, "work_min": 270},
    ]
    assert summary["per_day"] == [
        {"date": "2025-03-03", "headcount": 2, "work_min": 675},
        {"date": "2025-03-04", "headcount": 1, "work_min": 180},
    ]


def test_empty_summaries():
    assert summarize_day([]) == {"headcount": 0, "total_work_min": 0, "rows": []}
    assert summarize_period([])["per_staff"] == []
    assert format_summary([]) == "No assignments."


def test_format_summary_lists_shifts(db_session, period, staff_member, other_staff):
    _seed(db_session, period, staff_member, other_staff)
    text = format_summary(AssignmentRepository.get_by_period(db_session, period.id))
    assert text.startswith("Shifts:")
    assert "Chika" in text
    assert "6h45m" in text
