from __future__ import annotations

from typing import Iterable

import pandas as pd

from shiftboard.domain.models import ShiftAssignment
from shiftboard.timemodel import to_label

COLUMNS = [
    "assignment_id",
    "date",
    "staff_id",
    "staff_name",
    "start_min",
    "end_min",
    "break_min",
    "break_start_min",
    "work_min",
]


def assignments_frame(assignments: Iterable[ShiftAssignment]) -> pd.DataFrame:
    rows = []
    for a in assignments:
        rows.append(
            {
                "assignment_id": a.id,
                "date": a.date,
                "staff_id": a.staff_id,
                "staff_name": a.staff.name if a.staff is not None else "",
                "start_min": a.start_min,
                "end_min": a.end_min,
                "break_min": a.break_min or 0,
                "break_start_min": a.break_start_min,
                "work_min": a.work_min,
            }
        )
    df = pd.DataFrame(rows, columns=COLUMNS)
    if not df.empty:
        df.sort_values(["date", "start_min", "staff_id"], inplace=True)
        df.reset_index(drop=True, inplace=True)
    return df


def with_labels(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out["start"] = out["start_min"].map(to_label)
    out["end"] = out["end_min"].map(to_label)
    out["break_start"] = out["break_start_min"].map(lambda m: to_label(int(m)) if pd.notna(m) else "")
    out["work"] = out["work_min"].map(format_work)
    return out


def format_work(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h{mins:02d}m" if mins else f"{hours}h"


def summarize_day(assignments: Iterable[ShiftAssignment]) -> dict:
    """Per-shift rows plus headcount and total work minutes for one day."""
    df = assignments_frame(assignments)
    if df.empty:
        return {"headcount": 0, "total_work_min": 0, "rows": []}
    labelled = with_labels(df)
    rows = [
        {
            "assignment_id": int(row["assignment_id"]),
            "staff_id": int(row["staff_id"]),
            "staff_name": row["staff_name"],
            "start": row["start"],
            "end": row["end"],
            "break_min": int(row["break_min"]),
            "break_start": row["break_start"],
            "work_min": int(row["work_min"]),
            "work": row["work"],
        }
        for row in labelled.to_dict(orient="records")
    ]
    return {
        "headcount": int(df["staff_id"].nunique()),
        "total_work_min": int(df["work_min"].sum()),
        "rows": rows,
    }


def summarize_period(assignments: Iterable[ShiftAssignment]) -> dict:
    """Work minutes per staff member and per day across a period."""
    df = assignments_frame(assignments)
    if df.empty:
        return {"per_staff": [], "per_day": [], "total_work_min": 0}
    per_staff = (
        df.groupby(["staff_id", "staff_name"])
        .agg(shifts=("assignment_id", "count"), work_min=("work_min", "sum"))
        .reset_index()
        .sort_values("staff_id")
    )
    per_day = (
        df.groupby("date")
        .agg(headcount=("staff_id", "nunique"), work_min=("work_min", "sum"))
        .reset_index()
    )
    per_day["date"] = per_day["date"].map(lambda d: d.isoformat())
    return {
        "per_staff": [
            {k: (int(v) if k != "staff_name" else v) for k, v in row.items()}
            for row in per_staff.to_dict(orient="records")
        ],
        "per_day": [
            {"date": row["date"], "headcount": int(row["headcount"]), "work_min": int(row["work_min"])}
            for row in per_day.to_dict(orient="records")
        ],
        "total_work_min": int(df["work_min"].sum()),
    }


def format_summary(assignments: Iterable[ShiftAssignment]) -> str:
    df = assignments_frame(assignments)
    if df.empty:
        return "No assignments."
    labelled = with_labels(df)
    lines = ["Shifts:"]
    lines.append(labelled[["date", "staff_name", "start", "end", "break_min", "work"]].to_string(index=False))
    lines.append("")
    lines.append("Work minutes per staff:")
    lines.append(df.groupby("staff_name")["work_min"].sum().sort_values(ascending=False).to_string())
    return "\n".join(lines)
