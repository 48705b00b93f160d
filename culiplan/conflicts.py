"""
Timetable overlap detection.

Given the weekly schedule, detect slots that overlap on the same weekday.
Overlap rule:
    start < other_end AND end > other_start

Overlaps are only reported; the schedule itself accepts them.
"""

from __future__ import annotations

from typing import Iterable

from culiplan.model import ScheduleSlot


def _time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def find_slot_overlaps(schedule: Iterable[ScheduleSlot]) -> list[tuple[ScheduleSlot, ScheduleSlot]]:
    """
    Find overlapping slot pairs (A,B), each pair appears once (i<j).
    Slots with unparsable or empty time ranges are ignored.
    """
    parsed: list[tuple[int, int, int, ScheduleSlot]] = []
    for slot in schedule:
        try:
            start = _time_to_minutes(slot.start_time)
            end = _time_to_minutes(slot.end_time)
        except ValueError:
            continue
        if end <= start:
            continue
        parsed.append((slot.day_of_week, start, end, slot))

    conflicts: list[tuple[ScheduleSlot, ScheduleSlot]] = []
    # a teacher's week has a few dozen slots at most
    for i in range(len(parsed)):
        d1, s1, e1, slot1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            d2, s2, e2, slot2 = parsed[j]
            if d1 != d2:
                continue
            if _overlaps(s1, e1, s2, e2):
                conflicts.append((slot1, slot2))

    return conflicts
