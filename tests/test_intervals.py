from itertools import permutations

import pytest

from roomfinder.intervals import free_slots, merge_slots
from roomfinder.models import OperatingWindow

from .conftest import slot


def spans(slots):
    return [(s.start, s.end) for s in slots]


def assert_tiles(window, occupied, free):
    pieces = sorted(
        [(s.start_minutes, s.end_minutes) for s in occupied + free],
        key=lambda piece: piece[0],
    )
    assert pieces[0][0] == window.start_minutes
    assert pieces[-1][1] == window.end_minutes
    for (_, end), (next_start, _) in zip(pieces, pieces[1:]):
        assert end == next_start
    assert all(start < end for start, end in pieces)


SAMPLES = [
    [],
    [slot("09:00", "11:30")],
    [slot("09:00", "09:30"), slot("14:30", "15:30")],
    [slot("10:00", "11:00"), slot("10:30", "12:00")],
    [slot("08:00", "09:30"), slot("19:00", "21:00")],
    [slot("09:00", "19:30")],
    [slot("12:00", "13:00"), slot("13:00", "14:00"), slot("11:00", "12:30")],
    [slot("06:00", "07:00"), slot("20:00", "21:00")],
]


@pytest.mark.parametrize("occupied", SAMPLES)
def test_merged_and_free_slots_tile_the_window(window, occupied):
    merged = merge_slots(occupied, window)
    free = free_slots(merged, window)
    assert_tiles(window, merged, free)


@pytest.mark.parametrize("occupied", SAMPLES)
def test_merge_is_idempotent(window, occupied):
    merged = merge_slots(occupied, window)
    assert merge_slots(merged, window) == merged


def test_merge_ignores_input_order(window):
    occupied = [slot("13:00", "14:00"), slot("09:15", "10:00"), slot("09:45", "11:00"), slot("11:00", "11:30")]
    expected = merge_slots(occupied, window)
    for order in permutations(occupied):
        assert merge_slots(list(order), window) == expected


def test_overlapping_slots_merge(window):
    merged = merge_slots([slot("10:00", "11:00"), slot("10:30", "12:00")], window)
    assert spans(merged) == [("10:00", "12:00")]


def test_touching_slots_merge(window):
    merged = merge_slots([slot("10:00", "11:00"), slot("11:00", "12:00")], window)
    assert spans(merged) == [("10:00", "12:00")]


def test_equal_starts_merge_to_longest(window):
    merged = merge_slots([slot("10:00", "10:30"), slot("10:00", "12:00")], window)
    assert spans(merged) == [("10:00", "12:00")]


def test_slots_are_clipped_to_window(window):
    merged = merge_slots([slot("08:00", "09:30"), slot("19:00", "21:00")], window)
    assert spans(merged) == [("09:00", "09:30"), ("19:00", "19:30")]


def test_slots_outside_window_and_inverted_slots_are_dropped(window):
    merged = merge_slots(
        [slot("07:00", "08:30"), slot("20:00", "21:00"), slot("12:00", "11:00"), slot("15:00", "15:00")],
        window,
    )
    assert merged == []


def test_empty_input_is_free_all_day(window):
    assert merge_slots([], window) == []
    assert spans(free_slots([], window)) == [("09:00", "19:30")]


def test_free_slots_after_morning_class(window):
    free = free_slots(merge_slots([slot("09:00", "11:30")], window), window)
    assert spans(free) == [("11:30", "19:30")]


def test_free_slots_between_classes(window):
    occupied = merge_slots([slot("09:00", "09:30"), slot("14:30", "15:30")], window)
    assert spans(free_slots(occupied, window)) == [("09:30", "14:30"), ("15:30", "19:30")]


def test_fully_booked_day_has_no_free_slots(window):
    assert free_slots(merge_slots([slot("08:00", "20:00")], window), window) == []


def test_custom_window():
    window = OperatingWindow(start="08:00", end="12:00")
    free = free_slots(merge_slots([slot("09:00", "10:00")], window), window)
    assert spans(free) == [("08:00", "09:00"), ("10:00", "12:00")]


def test_unmerged_slot_keeps_metadata(window):
    (merged,) = merge_slots([slot("10:00", "11:00", subject="Maths", batch="Turing")], window)
    assert merged.metadata == {"subject": "Maths", "batch": "Turing"}


def test_merge_without_window_does_not_clip():
    merged = merge_slots([slot("07:00", "08:00"), slot("07:30", "21:00")])
    assert spans(merged) == [("07:00", "21:00")]


def test_merged_run_keeps_earliest_slot_metadata(window):
    merged = merge_slots([slot("09:30", "11:00", subject="DSA"), slot("09:00", "10:00", subject="Maths")], window)
    assert spans(merged) == [("09:00", "11:00")]
    assert merged[0].metadata == {"subject": "Maths"}


def test_clipped_slot_keeps_metadata(window):
    (merged,) = merge_slots([slot("08:00", "10:00", batch="Hopper")], window)
    assert (merged.start, merged.end) == ("09:00", "10:00")
    assert merged.metadata == {"batch": "Hopper"}


def test_clock_strings_are_zero_padded(window):
    (merged,) = merge_slots([slot("9:30", " 10:00 ")], window)
    assert (merged.start, merged.end) == ("09:30", "10:00")
    assert OperatingWindow(start="8:00", end="12:00").start == "08:00"
