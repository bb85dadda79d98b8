"""Minute-of-day arithmetic shared by validators, services and the editor."""

from __future__ import annotations

import math
from typing import Iterator

MINUTES_PER_DAY = 24 * 60


def clamp(minute: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, minute))


def is_aligned(minute: int, granularity: int) -> bool:
    return minute % granularity == 0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snap(minute: int, granularity: int) -> int:
    """Round to the nearest grid point; halves round up."""
    return round_half_up(minute / granularity) * granularity


def to_label(minute: int) -> str:
    """Format a minute-of-day as "HH:MM" (600 -> "10:00")."""
    hours, minutes = divmod(minute, 60)
    return f"{hours:02d}:{minutes:02d}"


def from_label(label: str) -> int:
    """Parse "HH:MM" into a minute-of-day ("10:00" -> 600)."""
    try:
        hours_text, minutes_text = label.strip().split(":")
        hours, minutes = int(hours_text), int(minutes_text)
    except (AttributeError, ValueError):
        raise ValueError(f"time must be HH:MM, got {label!r}")
    if not (0 <= minutes < 60) or not (0 <= hours * 60 + minutes <= MINUTES_PER_DAY):
        raise ValueError(f"time out of range: {label!r}")
    return hours * 60 + minutes


def duration(start_min: int, end_min: int) -> int:
    return end_min - start_min


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and b_start < a_end


class SlotRange:
    """
    Grid points from ``lo`` to ``hi`` inclusive, stepping by ``granularity``.

    Iteration is lazy and can be repeated; each ``iter()`` starts over.
    """

    def __init__(self, lo: int, hi: int, granularity: int):
        if granularity <= 0:
            raise ValueError("granularity must be positive")
        self.lo = lo
        self.hi = hi
        self.granularity = granularity

    def __iter__(self) -> Iterator[int]:
        minute = self.lo
        while minute <= self.hi:
            yield minute
            minute += self.granularity

    def __len__(self) -> int:
        if self.hi < self.lo:
            return 0
        return (self.hi - self.lo) // self.granularity + 1

    def __contains__(self, minute: object) -> bool:
        if not isinstance(minute, int):
            return False
        return self.lo <= minute <= self.hi and (minute - self.lo) % self.granularity == 0

    def labels(self) -> list[tuple[int, str]]:
        return [(minute, to_label(minute)) for minute in self]

    def __repr__(self) -> str:
        return f"<SlotRange({to_label(self.lo)}-{to_label(self.hi)}, step={self.granularity})>"


def enumerate_slots(lo: int, hi: int, granularity: int) -> SlotRange:
    return SlotRange(lo, hi, granularity)
