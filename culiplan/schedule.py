"""
Weekly timetable lookups.

ScheduleSlot.day_of_week uses 1=Monday .. 7=Sunday (date.isoweekday()).
Only Monday..Friday are ever scheduled; weekend dates return no slots.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from culiplan.model import ScheduleSlot, to_date

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def iso_weekday(day: date | str) -> int:
    return to_date(day).isoweekday()


def is_weekend(day: date | str) -> bool:
    return iso_weekday(day) > 5


def slots_for_date(day: date | str, schedule: Iterable[ScheduleSlot]) -> list[ScheduleSlot]:
    """
    All timetable slots of the weekday of `day`, ordered by start time.
    """
    dow = iso_weekday(day)
    return sorted((s for s in schedule if s.day_of_week == dow), key=lambda s: s.start_time)


def planned_hours(day: date | str, schedule: Iterable[ScheduleSlot]) -> int:
    return sum(s.default_hours for s in slots_for_date(day, schedule))


def default_session_hours(day: date | str, schedule: Iterable[ScheduleSlot], course_id: str) -> int:
    """
    Hours pre-filled in the journal when a course is picked for `day`:
    everything the timetable gives that course on that weekday, or 1.
    """
    total = sum(s.default_hours for s in slots_for_date(day, schedule) if s.course_id == course_id)
    return total if total > 0 else 1


def weekly_hours_by_course(schedule: Iterable[ScheduleSlot]) -> dict[str, int]:
    out: dict[str, int] = {}
    for s in schedule:
        out[s.course_id] = out.get(s.course_id, 0) + s.default_hours
    return out


def add_slot(schedule: Iterable[ScheduleSlot], slot: ScheduleSlot) -> list[ScheduleSlot]:
    if not 1 <= slot.day_of_week <= 5:
        raise ValueError(f"Slots must fall on Monday..Friday, got day {slot.day_of_week}")
    if slot.default_hours < 0:
        raise ValueError("default_hours must not be negative")
    return [*schedule, slot]


def remove_slot(schedule: Iterable[ScheduleSlot], index: int) -> list[ScheduleSlot]:
    items = list(schedule)
    if not 0 <= index < len(items):
        raise IndexError(f"No slot at position {index}")
    return items[:index] + items[index + 1 :]
