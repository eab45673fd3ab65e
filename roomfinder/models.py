"""Pydantic data models for schedules and query results.

These models define the shape of the schedule document on disk and of the
free-room records returned from the API. Clock times are kept as ``HH:mm``
strings, matching the stored data; the interval code converts them to
minutes when it needs to compare them.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .timeutil import to_clock_time, to_minutes

# Thursday is spelled "Thur" in the timetables; keep that spelling everywhere.
DayOfWeek = Literal["Mon", "Tue", "Wed", "Thur", "Fri", "Sat", "Sun"]
WEEK_DAYS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thur", "Fri", "Sat", "Sun")


class TimeSlot(BaseModel):
    """A clock-time interval on a single day.

    Times are stored zero-padded, so ``"9:30"`` becomes ``"09:30"``. Extra
    keys (``subject``, ``batch``, ``semester`` and so on) are accepted
    and carried along untouched; nothing in the availability code reads them.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _normalise_clock(cls, value: str) -> str:
        return to_clock_time(to_minutes(value))

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)

    @property
    def metadata(self) -> Dict[str, Any]:
        """Return the opaque extra fields attached to this slot."""
        return dict(self.model_extra or {})


class RoomOccupancy(BaseModel):
    """Occupied slots for one room on one day, as supplied by one source."""

    model_config = ConfigDict(frozen=True)

    room: str
    day: DayOfWeek
    occupied: List[TimeSlot] = []

    @field_validator("room", mode="before")
    @classmethod
    def _room_as_str(cls, value: Any) -> str:
        return str(value).strip()


class OperatingWindow(BaseModel):
    """The daily range of clock time that availability is computed over."""

    model_config = ConfigDict(frozen=True)

    start: str = "09:00"
    end: str = "19:30"

    @field_validator("start", "end")
    @classmethod
    def _normalise_clock(cls, value: str) -> str:
        return to_clock_time(to_minutes(value))

    @model_validator(mode="after")
    def _check_order(self) -> "OperatingWindow":
        if to_minutes(self.start) >= to_minutes(self.end):
            raise ValueError(f"operating window start {self.start} must be before end {self.end}")
        return self

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)

    def contains(self, clock_time: str) -> bool:
        """Return True if ``clock_time`` falls inside ``[start, end)``."""
        return self.start_minutes <= to_minutes(clock_time) < self.end_minutes


class FreeRoomResult(BaseModel):
    """A room that is free for a contiguous stretch of the day."""

    model_config = ConfigDict(frozen=True)

    room: str
    day: str
    freeFrom: str
    freeTill: str
    durationMinutes: int


class ScheduleDocument(BaseModel):
    """The persisted schedule document: every occupancy record plus a timestamp."""

    lastUpdated: Optional[str] = None
    schedules: List[RoomOccupancy] = []


def _ordinal(day: int) -> str:
    if 11 <= day <= 13:
        return f"{day}th"
    return f"{day}" + {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


class WeekConfig(BaseModel):
    """The calendar week the loaded timetable applies to."""

    weekStartDate: Optional[date] = None
    weekEndDate: Optional[date] = None

    @field_validator("weekStartDate", "weekEndDate", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        return value or None

    def display(self) -> str:
        """Return a label such as ``"19th Jan - 23rd Jan"``."""
        if self.weekStartDate is None or self.weekEndDate is None:
            return "Unknown Week"
        start, end = self.weekStartDate, self.weekEndDate
        return f"{_ordinal(start.day)} {start:%b} - {_ordinal(end.day)} {end:%b}"

    def is_current(self, today: date) -> bool:
        if self.weekStartDate is None or self.weekEndDate is None:
            return False
        return self.weekStartDate <= today <= self.weekEndDate


class ImportRequest(BaseModel):
    """Body of a schedule import request."""

    schedules: Any = None
    merge: bool = True
