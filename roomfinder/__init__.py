# Package initializer for the free classroom finder.

"""
The ``roomfinder`` package works out which classrooms are free, and for how
long, from weekly per-room occupancy schedules.

Modules:

- ``timeutil``: ``HH:mm`` to minutes conversion.
- ``models``: Pydantic models for slots, occupancy records and results.
- ``intervals``: merging occupied slots and deriving free slots.
- ``aggregator``: combining occupancy records by room and day.
- ``clock``: current day and time in the campus time zone.
- ``finder``: the free-room query engine.
- ``config``: application settings loaded from environment variables.
- ``store``: JSON storage for schedules and the active week.
- ``main``: the FastAPI application definition.

"""

from .finder import RoomFinder, find_free_rooms, get_free_now
from .models import FreeRoomResult, OperatingWindow, RoomOccupancy, TimeSlot
from .timeutil import FormatError, to_clock_time, to_minutes

__all__ = [
    "FormatError",
    "FreeRoomResult",
    "OperatingWindow",
    "RoomFinder",
    "RoomOccupancy",
    "TimeSlot",
    "find_free_rooms",
    "get_free_now",
    "to_clock_time",
    "to_minutes",
]
