"""Interval merging and free-slot derivation.

``merge_slots`` turns the raw occupied slots of one room/day into a sorted,
non-overlapping list clipped to the operating window. ``free_slots`` then
walks that list and emits the gaps. Together the two outputs tile the
window exactly.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .models import OperatingWindow, TimeSlot
from .timeutil import to_clock_time

logger = logging.getLogger(__name__)


def _coalesce(spans: List[Tuple[int, int, TimeSlot]]) -> List[TimeSlot]:
    """Merge minute spans that overlap or touch.

    Each merged run is a copy of its earliest slot, so that slot's metadata
    survives; a run whose bounds did not change is that slot itself.
    """
    spans.sort(key=lambda span: (span[0], span[1]))
    runs: List[List] = []
    for start, end, slot in spans:
        if runs and start <= runs[-1][1]:
            run = runs[-1]
            run[1] = max(run[1], end)
        else:
            runs.append([start, end, slot])

    merged: List[TimeSlot] = []
    for start, end, slot in runs:
        if slot.start_minutes == start and slot.end_minutes == end:
            merged.append(slot)
        else:
            merged.append(slot.model_copy(update={"start": to_clock_time(start), "end": to_clock_time(end)}))
    return merged


def merge_slots(slots: Iterable[TimeSlot], window: Optional[OperatingWindow] = None) -> List[TimeSlot]:
    """Return ``slots`` clipped to ``window``, sorted and with overlaps merged.

    Slots that touch (one ends exactly when the next starts) are merged as
    well. Slots that are empty or inverted after clipping are dropped. When
    ``window`` is None no clipping is applied.
    """
    lower = window.start_minutes if window is not None else 0
    upper = window.end_minutes if window is not None else 24 * 60
    spans: List[Tuple[int, int, TimeSlot]] = []
    for slot in slots:
        start = max(slot.start_minutes, lower)
        end = min(slot.end_minutes, upper)
        if start >= end:
            logger.debug("Dropping slot %s-%s: empty within %s-%s", slot.start, slot.end,
                         to_clock_time(lower), to_clock_time(upper))
            continue
        spans.append((start, end, slot))
    return _coalesce(spans)


def free_slots(occupied: Iterable[TimeSlot], window: OperatingWindow) -> List[TimeSlot]:
    """Return the parts of ``window`` not covered by ``occupied``.

    ``occupied`` must already be merged (see ``merge_slots``).
    """
    cursor = window.start_minutes
    free: List[TimeSlot] = []
    for slot in occupied:
        if cursor < slot.start_minutes:
            free.append(TimeSlot(start=to_clock_time(cursor), end=to_clock_time(slot.start_minutes)))
        cursor = max(cursor, slot.end_minutes)
    if cursor < window.end_minutes:
        free.append(TimeSlot(start=to_clock_time(cursor), end=to_clock_time(window.end_minutes)))
    return free
