"""
Timeline editor: turns pointer gestures into shift mutation intents.

Positions are horizontal pixel offsets from the timeline origin, which sits
at business opening time. Every live proposal is clamped to business hours
and snapped to the assignment grid, so intents leaving the editor are
already valid intervals. The editor never talks to persistence; callers
hand the emitted intent to a synchronizer.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from shiftboard.config import DEFAULT_CONFIG, ScheduleConfig
from shiftboard.constraints import default_break_start
from shiftboard.logger import get_logger
from shiftboard.timemodel import clamp, round_half_up, snap

from .state import (
    AssignmentView,
    BarTarget,
    CreateAssignment,
    Creating,
    DragState,
    EditorIntent,
    Handle,
    Idle,
    MovingBreak,
    Moving,
    Proposal,
    ResizingEnd,
    ResizingStart,
    RowTarget,
    Target,
    UpdateBreakPosition,
    UpdateInterval,
)

log = get_logger("editor")

AssignmentLookup = Callable[[int, date], Optional[AssignmentView]]


def _no_assignments(staff_id: int, day: date) -> Optional[AssignmentView]:
    return None


class TimelineEditor:
    """
    State machine for one operator's drag gestures on the day timeline.

    States are the variants of ``DragState``; ``pointer_down``,
    ``pointer_move`` and ``pointer_up`` drive the transitions. Only one
    gesture is active at a time: a press during a gesture is ignored.
    """

    def __init__(self, cfg: ScheduleConfig = DEFAULT_CONFIG, lookup: AssignmentLookup = _no_assignments):
        """
        Args:
            cfg: ScheduleConfig with business hours, grid and pixel geometry
            lookup: Returns the existing assignment for (staff_id, date), if any
        """
        self.cfg = cfg
        self.lookup = lookup
        self.state: DragState = Idle()

    # Geometry

    @property
    def granularity(self) -> int:
        return self.cfg.assignment_granularity

    def pixel_to_min(self, x: float) -> int:
        slots = round_half_up(x / self.cfg.pixels_per_slot)
        return self.cfg.business_start_min + slots * self.granularity

    def min_to_pixel(self, minute: int) -> float:
        return (minute - self.cfg.business_start_min) / self.granularity * self.cfg.pixels_per_slot

    def delta_min(self, dx: float) -> int:
        return round_half_up(dx / self.cfg.pixels_per_slot) * self.granularity

    def _clamp(self, minute: int) -> int:
        return clamp(minute, self.cfg.business_start_min, self.cfg.business_end_min)

    # Queries

    @property
    def is_active(self) -> bool:
        return not isinstance(self.state, Idle)

    @property
    def proposal(self) -> Optional[Proposal]:
        state = self.state
        if isinstance(state, Idle):
            return None
        if isinstance(state, MovingBreak):
            return Proposal(state.start_min, state.end_min, state.break_start_min)
        return Proposal(state.start_min, state.end_min)

    def preview(self, assignment: AssignmentView) -> AssignmentView:
        """Return ``assignment`` as it should be drawn while a gesture is live."""
        state = self.state
        if isinstance(state, (Idle, Creating)) or state.assignment_id != assignment.id:
            return assignment
        if isinstance(state, MovingBreak):
            return assignment.with_values(break_start_min=state.break_start_min)
        return assignment.with_values(start_min=state.start_min, end_min=state.end_min)

    # Signals

    def pointer_down(self, target: Target, x: float) -> DragState:
        if self.is_active:
            log.debug("Ignoring press during active gesture %s", type(self.state).__name__)
            return self.state

        if isinstance(target, RowTarget):
            if self.lookup(target.staff_id, target.date) is not None:
                return self.state
            start = self._clamp(self.pixel_to_min(x))
            self.state = Creating(
                staff_id=target.staff_id,
                date=target.date,
                start_min=start,
                end_min=self._clamp(start + self.granularity),
            )
            return self.state

        if isinstance(target, BarTarget):
            self.state = self._begin_bar_gesture(target, x)
            return self.state

        raise TypeError(f"Unknown pointer target: {target!r}")

    def _begin_bar_gesture(self, target: BarTarget, x: float) -> DragState:
        a = target.assignment
        if target.handle is Handle.START_EDGE:
            return ResizingStart(a.id, x, anchor_start=a.start_min, end_min=a.end_min, start_min=a.start_min)
        if target.handle is Handle.END_EDGE:
            return ResizingEnd(a.id, x, anchor_end=a.end_min, start_min=a.start_min, end_min=a.end_min)
        if target.handle is Handle.BREAK:
            if not a.break_min:
                return Idle()
            anchor = a.break_start_min
            if anchor is None:
                anchor = default_break_start(a.start_min, a.end_min, a.break_min, self.granularity)
            return MovingBreak(
                a.id,
                x,
                start_min=a.start_min,
                end_min=a.end_min,
                break_min=a.break_min,
                anchor_break_start=anchor,
                break_start_min=anchor,
            )
        return Moving(a.id, x, anchor_start=a.start_min, anchor_end=a.end_min, start_min=a.start_min, end_min=a.end_min)

    def pointer_move(self, x: float) -> Optional[Proposal]:
        state = self.state
        lo, hi = self.cfg.business_start_min, self.cfg.business_end_min

        if isinstance(state, Idle):
            return None

        if isinstance(state, Creating):
            self.state = Creating(state.staff_id, state.date, state.start_min, self._clamp(self.pixel_to_min(x)))

        elif isinstance(state, Moving):
            delta = self.delta_min(x - state.origin_x)
            length = state.anchor_end - state.anchor_start
            start = state.anchor_start + delta
            end = start + length
            if start < lo:
                start, end = lo, lo + length
            if end > hi:
                start, end = hi - length, hi
            self.state = Moving(state.assignment_id, state.origin_x, state.anchor_start, state.anchor_end, start, end)

        elif isinstance(state, ResizingStart):
            start = self._clamp(state.anchor_start + self.delta_min(x - state.origin_x))
            start = min(start, state.end_min - self.granularity)
            self.state = ResizingStart(state.assignment_id, state.origin_x, state.anchor_start, state.end_min, start)

        elif isinstance(state, ResizingEnd):
            end = self._clamp(state.anchor_end + self.delta_min(x - state.origin_x))
            end = max(end, state.start_min + self.granularity)
            self.state = ResizingEnd(state.assignment_id, state.origin_x, state.anchor_end, state.start_min, end)

        elif isinstance(state, MovingBreak):
            position = state.anchor_break_start + self.delta_min(x - state.origin_x)
            position = clamp(position, state.start_min, state.end_min - state.break_min)
            position = snap(position, self.granularity)
            self.state = MovingBreak(
                state.assignment_id,
                state.origin_x,
                state.start_min,
                state.end_min,
                state.break_min,
                state.anchor_break_start,
                position,
            )

        return self.proposal

    def pointer_up(self) -> Optional[EditorIntent]:
        """
        Finish the gesture and return to Idle.

        Returns:
            The mutation intent, or None when there was no gesture or the
            proposal is shorter than one grid step.
        """
        state = self.state
        self.state = Idle()
        if isinstance(state, Idle):
            return None

        start, end = min(state.start_min, state.end_min), max(state.start_min, state.end_min)
        if end - start < self.granularity:
            log.debug("Discarded %s gesture shorter than %d minutes", type(state).__name__, self.granularity)
            return None

        if isinstance(state, Creating):
            return CreateAssignment(state.staff_id, state.date, start, end)
        if isinstance(state, MovingBreak):
            return UpdateBreakPosition(state.assignment_id, state.break_start_min)
        return UpdateInterval(state.assignment_id, start, end)

    def cancel(self) -> None:
        self.state = Idle()
