"""Free-room queries.

``RoomFinder`` answers "which rooms are free on this day, at this time, for
at least this long". It is built from an operating window, a room roster
and a clock, and holds no other state: every query recomputes from the
occupancy records it is given, so one instance can serve concurrent
callers.

Results are ordered longest free stretch first; rooms with equal stretches
are ordered by room number.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .aggregator import ScheduleAggregator
from .clock import CampusClock
from .config import Settings, settings
from .intervals import free_slots, merge_slots
from .models import FreeRoomResult, OperatingWindow, RoomOccupancy, TimeSlot
from .timeutil import to_minutes

logger = logging.getLogger(__name__)


def room_sort_key(room: str) -> Tuple[int, int, str]:
    """Order numeric room ids by value, then any non-numeric ids by name."""
    if room.isdigit():
        return (0, int(room), room)
    return (1, 0, room)


def result_sort_key(result: FreeRoomResult) -> Tuple[int, Tuple[int, int, str]]:
    return (-result.durationMinutes, room_sort_key(result.room))


class RoomFinder:
    """Compute free rooms from weekly occupancy records."""

    def __init__(
        self,
        window: Optional[OperatingWindow] = None,
        rooms: Sequence[str] = (),
        clock: Optional[CampusClock] = None,
    ):
        self.window = window or OperatingWindow()
        self.rooms = list(rooms)
        self.clock = clock or CampusClock()

    @classmethod
    def from_settings(cls, config: Settings) -> "RoomFinder":
        return cls(window=config.window, rooms=config.rooms, clock=CampusClock(config.campus_timezone))

    def free_slots_for(self, aggregator: ScheduleAggregator, room: str, day: str) -> List[TimeSlot]:
        """Return the free slots of one room on one day."""
        occupied = merge_slots(aggregator.occupied(room, day), self.window)
        return free_slots(occupied, self.window)

    def find_free_rooms(
        self,
        occupancy: Iterable[RoomOccupancy],
        day: str,
        target_time: Optional[str] = None,
        min_duration: Optional[int] = None,
    ) -> List[FreeRoomResult]:
        """Return free slots across the roster for ``day``.

        Args:
            occupancy: every occupancy record known; records for rooms
                outside the roster are ignored.
            day: day abbreviation, e.g. ``"Mon"`` or ``"Thur"``.
            target_time: if given, only slots with ``start <= target < end``.
            min_duration: if given, only slots at least this many minutes long.

        Raises:
            FormatError: if ``target_time`` is not a valid ``HH:mm`` string.
        """
        target = to_minutes(target_time) if target_time is not None else None
        aggregator = ScheduleAggregator(occupancy)

        results: List[FreeRoomResult] = []
        for room in self.rooms:
            for slot in self.free_slots_for(aggregator, room, day):
                start, end = slot.start_minutes, slot.end_minutes
                duration = end - start
                if min_duration is not None and duration < min_duration:
                    continue
                if target is not None and not (start <= target < end):
                    continue
                results.append(
                    FreeRoomResult(
                        room=room,
                        day=day,
                        freeFrom=slot.start,
                        freeTill=slot.end,
                        durationMinutes=duration,
                    )
                )

        results.sort(key=result_sort_key)
        logger.debug(
            "Free rooms for day=%s time=%s min_duration=%s: %d result(s)",
            day,
            target_time,
            min_duration,
            len(results),
        )
        return results

    def free_now(self, occupancy: Iterable[RoomOccupancy]) -> List[FreeRoomResult]:
        """Return rooms free at the current campus day and time."""
        day, now = self.clock.day_and_time()
        return self.find_free_rooms(occupancy, day, target_time=now)


_default_finder: Optional[RoomFinder] = None


def default_finder() -> RoomFinder:
    """Return a ``RoomFinder`` built from the process settings."""
    global _default_finder
    if _default_finder is None:
        _default_finder = RoomFinder.from_settings(settings)
    return _default_finder


def find_free_rooms(
    occupancy: Iterable[RoomOccupancy],
    day: str,
    target_time: Optional[str] = None,
    min_duration: Optional[int] = None,
) -> List[FreeRoomResult]:
    return default_finder().find_free_rooms(occupancy, day, target_time, min_duration)


def get_free_now(occupancy: Iterable[RoomOccupancy]) -> List[FreeRoomResult]:
    return default_finder().free_now(occupancy)
