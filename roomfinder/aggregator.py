"""Grouping of occupancy records by room and day.

Timetables are uploaded per batch or semester, so the same room/day pair
can show up in several records. ``ScheduleAggregator`` concatenates their
occupied slots; overlaps and duplicates are left for ``merge_slots``.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .models import RoomOccupancy, TimeSlot

Key = Tuple[str, str]


class ScheduleAggregator:
    """Occupied slots for every ``(room, day)`` pair seen in the input."""

    def __init__(self, records: Iterable[RoomOccupancy]):
        self._slots: Dict[Key, List[TimeSlot]] = {}
        for record in records:
            self._slots.setdefault((record.room, record.day), []).extend(record.occupied)

    def occupied(self, room: str, day: str) -> List[TimeSlot]:
        """Return all occupied slots for ``room`` on ``day``.

        A pair with no records is free all day and yields an empty list.
        """
        return list(self._slots.get((room, day), []))

    def keys(self) -> List[Key]:
        return list(self._slots)

    def rooms(self) -> List[str]:
        return sorted({room for room, _ in self._slots})

    def records(self) -> List[RoomOccupancy]:
        """Return one combined ``RoomOccupancy`` per key, in first-seen order."""
        return [RoomOccupancy(room=room, day=day, occupied=slots) for (room, day), slots in self._slots.items()]

    def __len__(self) -> int:
        return len(self._slots)
