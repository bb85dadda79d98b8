"""Tests for CSV import/export functionality."""

from datetime import date

import pandas as pd
import pytest

from shiftboard.domain.repositories import StaffRepository
from shiftboard.io.export_csv import EXPORT_COLUMNS, export_assignments_csv
from shiftboard.io.import_csv import import_staff_csv
from shiftboard.services.assignments import create_assignment


def test_import_staff_csv(db_session, tmp_path):
    """Test importing a staff roster from CSV."""
    csv_content = """id,name,role
10,Aiko,admin
11,Ben,
12,Chika,STAFF
"""
    csv_file = tmp_path / "staff.csv"
    csv_file.write_text(csv_content)

    count = import_staff_csv(db_session, csv_file)
    assert count == 3

    # Verify in database
    assert StaffRepository.get_by_id(db_session, 10).is_admin
    assert StaffRepository.get_by_id(db_session, 11).role == "STAFF"
    assert [s.name for s in StaffRepository.get_by_role(db_session, "staff")] == ["Ben", "Chika"]


def test_import_staff_csv_rejects_unknown_role(db_session, tmp_path):
    csv_file = tmp_path / "staff.csv"
    csv_file.write_text("name,role\nDan,OWNER\n")
    with pytest.raises(ValueError):
        import_staff_csv(db_session, csv_file)
    assert StaffRepository.get_all(db_session) == []


def test_export_assignments_csv(db_session, tmp_path, period, staff_member, other_staff):
    create_assignment(db_session, period.id, other_staff.id, date(2025, 3, 4), 960, 1230)
    create_assignment(db_session, period.id, staff_member.id, date(2025, 3, 3), 600, 780, break_min=60)

    out = tmp_path / "shifts.csv"
    assert export_assignments_csv(db_session, period.id, out) == 2

    df = pd.read_csv(out)
    assert list(df.columns) == EXPORT_COLUMNS
    assert list(df["staff_name"]) == ["Ben", "Chika"]
    assert list(df["start"]) == ["10:00", "16:00"]
    assert list(df["work_min"]) == [120, 270]


def test_export_empty_period_writes_header(db_session, tmp_path, period):
    out = tmp_path / "shifts.csv"
    assert export_assignments_csv(db_session, period.id, out) == 0
    assert out.read_text().strip() == ",".join(EXPORT_COLUMNS)
