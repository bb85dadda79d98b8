from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from .config import DEFAULT_CONFIG, ScheduleConfig
from .errors import (
    BreakExceedsShift,
    InvalidBreakDuration,
    InvertedInterval,
    MisalignedInterval,
    MissingInterval,
    OutOfBusinessHours,
    ValidationFailed,
)
from .timemodel import clamp, is_aligned, to_label


class IntervalKind(str, Enum):
    ASSIGNMENT = "ASSIGNMENT"
    AVAILABILITY = "AVAILABILITY"


class AvailabilityStatus(str, Enum):
    UNAVAILABLE = "UNAVAILABLE"
    AVAILABLE = "AVAILABLE"
    FREE = "FREE"
    PREFER_OFF = "PREFER_OFF"


def granularity_for(kind: IntervalKind, cfg: ScheduleConfig = DEFAULT_CONFIG) -> int:
    if IntervalKind(kind) is IntervalKind.ASSIGNMENT:
        return cfg.assignment_granularity
    return cfg.availability_granularity


def validate_interval(
    kind: IntervalKind,
    start_min: int,
    end_min: int,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> None:
    if start_min < cfg.business_start_min or end_min > cfg.business_end_min:
        raise OutOfBusinessHours(
            f"Times must be within business hours "
            f"({to_label(cfg.business_start_min)}-{to_label(cfg.business_end_min)})"
        )
    if start_min >= end_min:
        raise InvertedInterval("End time must be after start time")
    step = granularity_for(kind, cfg)
    if not is_aligned(start_min, step) or not is_aligned(end_min, step):
        raise MisalignedInterval(f"Times must be in {step}-minute steps")


def is_valid_interval(
    kind: IntervalKind,
    start_min: int,
    end_min: int,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> bool:
    try:
        validate_interval(kind, start_min, end_min, cfg)
    except ValidationFailed:
        return False
    return True


def default_break_start(start_min: int, end_min: int, break_min: int, granularity: int = 15) -> int:
    """Centre the break in the shift, rounded down to the grid."""
    slack = (end_min - start_min) - break_min
    return start_min + (slack // 2 // granularity) * granularity


def validate_break(
    shift_start: int,
    shift_end: int,
    break_min: int,
    break_start_min: Optional[int] = None,
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> int:
    """
    Validate a break against its shift and resolve where it starts.

    Args:
        shift_start: Shift start (minute-of-day)
        shift_end: Shift end (minute-of-day)
        break_min: Break duration in minutes
        break_start_min: Requested break start; None to use the centred default
        cfg: ScheduleConfig with break options and granularity

    Returns:
        Effective break start. A requested start that would push the break
        outside the shift is clamped into ``[shift_start, shift_end - break_min]``.

    Raises:
        InvalidBreakDuration: break_min is not an allowed option
        BreakExceedsShift: break_min >= shift duration
    """
    if break_min not in cfg.break_options:
        options = ", ".join(str(x) for x in cfg.break_options)
        raise InvalidBreakDuration(f"Break must be one of {options} minutes")
    if break_min >= shift_end - shift_start:
        raise BreakExceedsShift("Break is longer than the shift")

    if break_start_min is None:
        return default_break_start(shift_start, shift_end, break_min, cfg.assignment_granularity)
    # Out-of-range positions are corrected, not rejected.
    return clamp(break_start_min, shift_start, shift_end - break_min)


def resolve_availability_window(
    status: AvailabilityStatus,
    start_min: Optional[int],
    end_min: Optional[int],
    cfg: ScheduleConfig = DEFAULT_CONFIG,
) -> Tuple[Optional[int], Optional[int]]:
    status = AvailabilityStatus(status)
    if status is AvailabilityStatus.UNAVAILABLE:
        return None, None
    if status is AvailabilityStatus.FREE:
        return cfg.business_start_min, cfg.business_end_min
    if start_min is None or end_min is None:
        raise MissingInterval("Start and end times are required")
    validate_interval(IntervalKind.AVAILABILITY, start_min, end_min, cfg)
    return start_min, end_min
