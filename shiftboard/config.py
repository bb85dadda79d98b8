"""Configuration loading for the shift board (YAML or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml


@dataclass(frozen=True)
class ShiftTemplate:
    label: str
    start_min: int
    end_min: int


DEFAULT_TEMPLATES: Tuple[ShiftTemplate, ...] = (
    ShiftTemplate("10:00-13:00", 600, 780),
    ShiftTemplate("10:00-15:00", 600, 900),
    ShiftTemplate("10:00-16:00", 600, 960),
    ShiftTemplate("10:00-17:00", 600, 1020),
    ShiftTemplate("16:00-20:30", 960, 1230),
    ShiftTemplate("17:00-20:30", 1020, 1230),
    ShiftTemplate("18:00-20:30", 1080, 1230),
)


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Immutable scheduling envelope threaded through the time model and validators.

    Attributes:
        business_start_min: Opening time as minute-of-day (600 = 10:00)
        business_end_min: Closing time as minute-of-day (1230 = 20:30)
        assignment_granularity: Grid for shift boundaries and break positions
        availability_granularity: Grid for availability windows
        break_options: Allowed break durations in minutes
        pixels_per_slot: Timeline width of one assignment slot
    """

    business_start_min: int = 600
    business_end_min: int = 1230
    assignment_granularity: int = 15
    availability_granularity: int = 30
    break_options: Tuple[int, ...] = (30, 45, 60)
    pixels_per_slot: int = 15
    templates: Tuple[ShiftTemplate, ...] = field(default=DEFAULT_TEMPLATES)

    def __post_init__(self) -> None:
        if self.business_start_min >= self.business_end_min:
            raise ValueError("business_start_min must be before business_end_min")
        if self.business_start_min < 0 or self.business_end_min > 24 * 60:
            raise ValueError("business hours must lie within a single day")
        for value in (self.business_start_min, self.business_end_min):
            if value % self.assignment_granularity != 0:
                raise ValueError(
                    f"business hours must align to {self.assignment_granularity} minutes: {value}"
                )
        if self.pixels_per_slot <= 0:
            raise ValueError("pixels_per_slot must be positive")
        if not self.break_options:
            raise ValueError("break_options must not be empty")

    @property
    def business_span(self) -> Tuple[int, int]:
        return self.business_start_min, self.business_end_min


def _parse_hm(value: Any) -> int:
    """Accept either a minute count or an "HH:MM" string."""
    if isinstance(value, int):
        return value
    hours, minutes = [int(x) for x in str(value).split(":")]
    return hours * 60 + minutes


def config_from_dict(raw: Dict[str, Any]) -> ScheduleConfig:
    hours = raw.get("business_hours", {}) or {}
    kwargs: Dict[str, Any] = {}
    if "start" in hours:
        kwargs["business_start_min"] = _parse_hm(hours["start"])
    if "end" in hours:
        kwargs["business_end_min"] = _parse_hm(hours["end"])

    granularity = raw.get("granularity", {}) or {}
    if "assignment" in granularity:
        kwargs["assignment_granularity"] = int(granularity["assignment"])
    if "availability" in granularity:
        kwargs["availability_granularity"] = int(granularity["availability"])

    if "break_options" in raw:
        kwargs["break_options"] = tuple(int(x) for x in raw["break_options"])
    if "pixels_per_slot" in raw:
        kwargs["pixels_per_slot"] = int(raw["pixels_per_slot"])
    if "templates" in raw:
        kwargs["templates"] = tuple(
            ShiftTemplate(
                label=str(t.get("label") or f"{t['start']}-{t['end']}"),
                start_min=_parse_hm(t["start"]),
                end_min=_parse_hm(t["end"]),
            )
            for t in raw["templates"]
        )
    return ScheduleConfig(**kwargs)


def load_config(path: str | Path) -> ScheduleConfig:
    """
    Load a ScheduleConfig from a YAML or JSON file.

    Args:
        path: Path to a .yaml/.yml or .json file

    Returns:
        Validated ScheduleConfig
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            raw = json.load(handle)
        else:
            raw = yaml.safe_load(handle)
    return config_from_dict(raw or {})


DEFAULT_CONFIG = ScheduleConfig()
