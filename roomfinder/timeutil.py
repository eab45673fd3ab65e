"""Clock-time helpers.

Schedules store times as zero-padded ``HH:mm`` strings on a 24-hour clock.
All interval arithmetic is done on integer minutes since midnight, so the
rest of the package converts at the edges with the two functions here.
"""

from __future__ import annotations

import re

_CLOCK_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


class FormatError(ValueError):
    """Raised when a clock-time string cannot be parsed."""


def to_minutes(value: str) -> int:
    """Return minutes since midnight for an ``HH:mm`` string.

    Raises:
        FormatError: if ``value`` is not a valid 24-hour clock time.
    """
    match = _CLOCK_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise FormatError(f"invalid clock time {value!r}: expected HH:mm")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise FormatError(f"invalid clock time {value!r}: out of range")
    return hours * 60 + minutes


def to_clock_time(minutes: int) -> str:
    """Format minutes since midnight as ``HH:mm``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
