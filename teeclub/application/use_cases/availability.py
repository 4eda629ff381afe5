from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable

from teeclub.application.utils.durations import DurationResolver
from teeclub.domain.entities.booking import ExistingSession, Slot
from teeclub.domain.entities.member import Resource


@dataclass(frozen=True)
class GridCell:
    slot: Slot
    available: bool


class SlotAvailabilityChecker:
    """Slot checks for the discretized booking grid.

    Remote sessions are compared by exact start time on the same bay. Slots held
    locally (picked but not yet submitted) are compared as half-open spans
    ``[start, start + duration)``, which also catches a held slot sitting on the
    successor cell of a multi-cell reservation.
    """

    def __init__(
        self,
        duration_resolver: DurationResolver,
        grid_start_hour: int = 9,
        grid_end_hour: int = 17,
        step_minutes: int = 30,
    ) -> None:
        self._duration_resolver = duration_resolver
        self._grid_start_hour = grid_start_hour
        self._grid_end_hour = grid_end_hour
        self._step_minutes = step_minutes

    def is_available(self, proposed: Slot, existing_sessions: Iterable[ExistingSession]) -> bool:
        for session in existing_sessions:
            if (
                session.day == proposed.day
                and session.resource_id == proposed.resource_id
                and session.start == proposed.start
            ):
                return False
        return True

    def has_local_conflict(self, proposed: Slot, held_slots: Iterable[Slot]) -> bool:
        return self.find_local_conflict(proposed, held_slots) is not None

    def find_local_conflict(self, proposed: Slot, held_slots: Iterable[Slot]) -> Slot | None:
        start, end = proposed.span(self._duration_resolver(proposed.service_name))
        for held in held_slots:
            if held.day != proposed.day or held.resource_id != proposed.resource_id:
                continue
            held_start, held_end = held.span(self._duration_resolver(held.service_name))
            if start < held_end and held_start < end:
                return held
        return None

    def conflicting_slots(self, slots: list[Slot]) -> list[Slot]:
        """Slots of one request that collide with an earlier slot of the same request."""
        conflicts: list[Slot] = []
        for index, slot in enumerate(slots):
            if self.has_local_conflict(slot, slots[:index]):
                conflicts.append(slot)
        return conflicts

    def grid_times(self) -> list[time]:
        times: list[time] = []
        current = datetime.combine(date.min, time(self._grid_start_hour))
        end = datetime.combine(date.min, time(0)) + timedelta(hours=self._grid_end_hour)
        while current < end:
            times.append(current.time())
            current += timedelta(minutes=self._step_minutes)
        return times

    def open_slots(
        self,
        day: date,
        resources: list[Resource],
        existing_sessions: list[ExistingSession],
        service_name: str = "",
    ) -> list[GridCell]:
        cells: list[GridCell] = []
        for start in self.grid_times():
            for resource in resources:
                slot = Slot(
                    day=day,
                    resource_id=resource.id,
                    start=start,
                    bay_name=resource.name,
                    service_name=service_name,
                )
                cells.append(GridCell(slot=slot, available=self.is_available(slot, existing_sessions)))
        return cells
