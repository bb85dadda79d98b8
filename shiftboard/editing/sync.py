"""
Optimistic local state with asynchronous confirmation or rollback.

Every intent goes through ``Pending(optimistic) -> Confirmed(server) |
Rejected(reason, rollback)``. The pending value is applied to the local
schedule immediately; once the backend answers, the local record is
replaced by the authoritative one, or the whole schedule is reloaded.
"""

from __future__ import annotations

import asyncio
import itertools
from collections import deque
from dataclasses import dataclass
from datetime import date
from typing import Deque, Dict, List, Optional, Protocol, Set, Tuple, Union

from shiftboard.config import DEFAULT_CONFIG, ScheduleConfig
from shiftboard.constraints import default_break_start
from shiftboard.logger import get_logger

from .state import (
    AssignmentView,
    ChangeBreak,
    CreateAssignment,
    MutationIntent,
    RemoveAssignment,
    UpdateBreakPosition,
    UpdateInterval,
)

log = get_logger("sync")


class ScheduleBackend(Protocol):
    async def list_assignments(self, period_id: int) -> List[AssignmentView]: ...

    async def create_assignment(self, period_id: int, intent: CreateAssignment) -> AssignmentView: ...

    async def update_assignment(self, assignment_id: int, changes: Dict) -> AssignmentView: ...

    async def delete_assignment(self, assignment_id: int) -> None: ...


@dataclass(frozen=True)
class Pending:
    mutation_id: int
    intent: MutationIntent
    optimistic: Optional[AssignmentView]


@dataclass(frozen=True)
class Confirmed:
    mutation_id: int
    intent: MutationIntent
    value: Optional[AssignmentView]


@dataclass(frozen=True)
class Rejected:
    mutation_id: int
    intent: MutationIntent
    reason: str
    message: str
    rollback: Optional[AssignmentView]


MutationEvent = Union[Pending, Confirmed, Rejected]
MutationOutcome = Union[Confirmed, Rejected]


class LocalSchedule:
    """In-memory assignments for one period, keyed by id."""

    def __init__(self, assignments: Optional[List[AssignmentView]] = None):
        self._by_id: Dict[int, AssignmentView] = {}
        self.replace_all(assignments or [])

    def replace_all(self, assignments: List[AssignmentView]) -> None:
        self._by_id = {a.id: a for a in assignments}

    def get(self, assignment_id: int) -> Optional[AssignmentView]:
        return self._by_id.get(assignment_id)

    def put(self, assignment: AssignmentView) -> None:
        self._by_id[assignment.id] = assignment

    def discard(self, assignment_id: int) -> None:
        self._by_id.pop(assignment_id, None)

    def assignment_for(self, staff_id: int, day: date) -> Optional[AssignmentView]:
        for a in self._by_id.values():
            if a.staff_id == staff_id and a.date == day:
                return a
        return None

    def all(self) -> List[AssignmentView]:
        return sorted(self._by_id.values(), key=lambda a: (a.date, a.start_min, a.id))

    def __len__(self) -> int:
        return len(self._by_id)


class PersistenceSynchronizer:
    """
    Applies mutation intents optimistically and reconciles with the backend.

    Intents for different assignments are independent and may complete in
    any order; the editor only ever has one gesture live, so two intents
    for the same assignment are never in flight from the same operator.

    Every submitted intent ends in exactly one Confirmed or Rejected event,
    even when the backend is unreachable. ``events`` keeps the most recent
    ``max_events`` entries.
    """

    def __init__(
        self,
        backend: ScheduleBackend,
        period_id: int,
        schedule: Optional[LocalSchedule] = None,
        cfg: ScheduleConfig = DEFAULT_CONFIG,
        max_events: int = 1000,
    ):
        self.backend = backend
        self.period_id = period_id
        self.schedule = schedule or LocalSchedule()
        self.cfg = cfg
        self.events: Deque[MutationEvent] = deque(maxlen=max_events)
        self._ids = itertools.count(1)
        self._provisional_ids = itertools.count(-1, -1)
        self._in_flight: Set[asyncio.Task] = set()
        # Confirmations that landed while a reload was in transit, as
        # (sequence, assignment_id, server value or None when deleted).
        self._confirmation_seq = 0
        self._loads_in_progress = 0
        self._recent_confirmations: List[Tuple[int, int, Optional[AssignmentView]]] = []

    async def load(self) -> List[AssignmentView]:
        """
        Replace local state with the backend's authoritative assignments.

        Records confirmed while the listing was in transit are newer than
        the listing and are applied on top of it.
        """
        started_at = self._confirmation_seq
        self._loads_in_progress += 1
        try:
            assignments = await self.backend.list_assignments(self.period_id)
            self.schedule.replace_all(assignments)
            for seq, assignment_id, value in self._recent_confirmations:
                if seq <= started_at:
                    continue
                if value is None:
                    self.schedule.discard(assignment_id)
                else:
                    self.schedule.put(value)
        finally:
            self._loads_in_progress -= 1
            if not self._loads_in_progress:
                self._recent_confirmations.clear()
        return self.schedule.all()

    def history(self, mutation_id: int) -> List[MutationEvent]:
        return [e for e in self.events if e.mutation_id == mutation_id]

    def _record_confirmation(self, assignment_id: int, value: Optional[AssignmentView]) -> None:
        self._confirmation_seq += 1
        if self._loads_in_progress:
            self._recent_confirmations.append((self._confirmation_seq, assignment_id, value))

    # Optimistic application

    def _apply_optimistic(self, intent: MutationIntent) -> Optional[AssignmentView]:
        if isinstance(intent, CreateAssignment):
            provisional = AssignmentView(
                id=next(self._provisional_ids),
                period_id=self.period_id,
                staff_id=intent.staff_id,
                date=intent.date,
                start_min=intent.start_min,
                end_min=intent.end_min,
            )
            self.schedule.put(provisional)
            return provisional

        current = self.schedule.get(intent.assignment_id)
        if current is None:
            return None
        if isinstance(intent, RemoveAssignment):
            self.schedule.discard(current.id)
            return None
        if isinstance(intent, UpdateInterval):
            updated = current.with_values(start_min=intent.start_min, end_min=intent.end_min)
        elif isinstance(intent, UpdateBreakPosition):
            updated = current.with_values(break_start_min=intent.break_start_min)
        elif isinstance(intent, ChangeBreak):
            position = None
            if intent.break_min:
                position = default_break_start(
                    current.start_min, current.end_min, intent.break_min, self.cfg.assignment_granularity
                )
            updated = current.with_values(break_min=intent.break_min, break_start_min=position)
        else:
            raise TypeError(f"Unknown mutation intent: {intent!r}")
        self.schedule.put(updated)
        return updated

    def _undo_optimistic(
        self,
        intent: MutationIntent,
        optimistic: Optional[AssignmentView],
        previous: Optional[AssignmentView],
    ) -> None:
        if isinstance(intent, CreateAssignment):
            if optimistic is not None:
                self.schedule.discard(optimistic.id)
        elif previous is not None:
            self.schedule.put(previous)

    async def _persist(self, intent: MutationIntent) -> Optional[AssignmentView]:
        if isinstance(intent, CreateAssignment):
            return await self.backend.create_assignment(self.period_id, intent)
        if isinstance(intent, UpdateInterval):
            return await self.backend.update_assignment(
                intent.assignment_id, {"start_min": intent.start_min, "end_min": intent.end_min}
            )
        if isinstance(intent, UpdateBreakPosition):
            return await self.backend.update_assignment(
                intent.assignment_id, {"break_start_min": intent.break_start_min}
            )
        if isinstance(intent, ChangeBreak):
            # Dropping the stored position lets the server re-centre the break.
            return await self.backend.update_assignment(
                intent.assignment_id, {"break_min": intent.break_min, "break_start_min": None}
            )
        if isinstance(intent, RemoveAssignment):
            await self.backend.delete_assignment(intent.assignment_id)
            return None
        raise TypeError(f"Unknown mutation intent: {intent!r}")

    # Lifecycle

    async def submit(self, intent: MutationIntent) -> MutationOutcome:
        """
        Run one intent through its full lifecycle.

        On failure the schedule is reloaded from the backend. If the reload
        fails too, the optimistic change is undone locally instead.

        Returns:
            Confirmed with the server's record, or Rejected with the error
            reason and the record as it now stands locally (None if it no
            longer exists).
        """
        mutation_id = next(self._ids)
        previous = None
        if not isinstance(intent, CreateAssignment):
            previous = self.schedule.get(intent.assignment_id)
        optimistic = self._apply_optimistic(intent)
        self.events.append(Pending(mutation_id, intent, optimistic))

        try:
            server_value = await self._persist(intent)
        except Exception as e:
            outcome: MutationOutcome = await self._reject(mutation_id, intent, e, optimistic, previous)
        else:
            if isinstance(intent, CreateAssignment):
                if optimistic is not None:
                    self.schedule.discard(optimistic.id)
            else:
                self._record_confirmation(intent.assignment_id, server_value)
            if server_value is not None:
                self.schedule.put(server_value)
                if isinstance(intent, CreateAssignment):
                    self._record_confirmation(server_value.id, server_value)
            outcome = Confirmed(mutation_id, intent, server_value)

        self.events.append(outcome)
        return outcome

    async def _reject(
        self,
        mutation_id: int,
        intent: MutationIntent,
        error: Exception,
        optimistic: Optional[AssignmentView],
        previous: Optional[AssignmentView],
    ) -> Rejected:
        reason = getattr(error, "reason", type(error).__name__)
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        log.warning("Mutation %d (%s) failed: %s", mutation_id, type(intent).__name__, message)
        try:
            await self.load()
        except Exception as reload_error:
            log.warning("Reload after mutation %d failed: %s; undoing locally", mutation_id, reload_error)
            self._undo_optimistic(intent, optimistic, previous)

        rollback = None
        if not isinstance(intent, CreateAssignment):
            rollback = self.schedule.get(intent.assignment_id)
        return Rejected(mutation_id, intent, reason, message, rollback)

    def dispatch(self, intent: MutationIntent) -> "asyncio.Task[MutationOutcome]":
        """Start ``submit`` in the background so the next gesture need not wait."""
        task = asyncio.get_running_loop().create_task(self.submit(intent))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def drain(self) -> List[MutationOutcome]:
        """Wait for every dispatched mutation to settle."""
        if not self._in_flight:
            return []
        return list(await asyncio.gather(*list(self._in_flight)))

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)
