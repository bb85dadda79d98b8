"""CSV import utilities to load the staff roster into the database."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from shiftboard.domain.models import Staff
from shiftboard.logger import get_logger

log = get_logger("io")

ROLES = ("ADMIN", "STAFF")


def import_staff_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import staff members from CSV into database.

    The CSV needs a ``name`` column; ``role`` is optional and defaults to
    STAFF. An ``id`` column, when present, is kept so that identities stay
    stable across re-imports.

    Args:
        session: Database session
        csv_path: Path to staff CSV

    Returns:
        Number of staff imported
    """
    df = pd.read_csv(csv_path)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    if "name" not in df.columns:
        raise ValueError(f"{csv_path}: missing required column 'name'")

    if "role" in df.columns:
        df["role"] = df["role"].fillna("STAFF").astype(str).str.strip().str.upper()
    else:
        df["role"] = "STAFF"
    bad_roles = sorted(set(df["role"]) - set(ROLES))
    if bad_roles:
        raise ValueError(f"{csv_path}: unknown role(s) {bad_roles}")

    staff = []
    for _, row in df.iterrows():
        member = Staff(name=str(row["name"]).strip(), role=row["role"])
        if "id" in df.columns and pd.notna(row["id"]):
            member.id = int(row["id"])
        staff.append(member)

    # Bulk insert
    session.add_all(staff)
    session.commit()

    log.info("Imported %d staff from %s", len(staff), csv_path)
    return len(staff)
