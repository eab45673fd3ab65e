from datetime import datetime

import pytest

from roomfinder.clock import CampusClock
from roomfinder.finder import RoomFinder
from roomfinder.models import OperatingWindow, RoomOccupancy, TimeSlot

ROSTER = ["401", "402", "403", "404", "405", "501", "502", "503", "504", "505"]


def slot(start, end, **extra):
    return TimeSlot(start=start, end=end, **extra)


def fixed_clock(year, month, day, hour, minute):
    """A clock pinned to a wall time in the campus zone."""
    return CampusClock("Asia/Kolkata", now=lambda zone: datetime(year, month, day, hour, minute, tzinfo=zone))


@pytest.fixture
def window():
    return OperatingWindow(start="09:00", end="19:30")


@pytest.fixture
def thursday_clock():
    # 22 Jan 2026 is a Thursday.
    return fixed_clock(2026, 1, 22, 10, 0)


@pytest.fixture
def finder(window, thursday_clock):
    return RoomFinder(window=window, rooms=ROSTER, clock=thursday_clock)


@pytest.fixture
def occupancy():
    return [
        RoomOccupancy(room="501", day="Mon", occupied=[slot("09:00", "11:30")]),
        RoomOccupancy(room="402", day="Tue", occupied=[slot("09:00", "09:30")]),
        RoomOccupancy(room="402", day="Tue", occupied=[slot("14:30", "15:30", subject="Physics")]),
        RoomOccupancy(room="999", day="Tue", occupied=[slot("09:00", "19:30")]),
        RoomOccupancy(room="401", day="Thur", occupied=[slot("09:00", "12:00"), slot("13:00", "19:30")]),
    ]
