"""
Day tracking: planned vs. logged hours per calendar day.

    free       weekend, holiday, or nothing on the timetable
    completed  logged >= planned
    partial    0 < logged < planned
    missing    nothing logged on a teaching day

Exams count as logged hours (one hour when no duration was recorded).
Holiday detection is isolated in is_holiday_marker() so callers can swap
the strategy (e.g. is_holiday_flagged) without touching classify_day().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from collections.abc import Mapping
from typing import Callable, Iterable, Optional

from culiplan.config import HOLIDAY_COLOR, HOLIDAY_KEYWORDS
from culiplan.model import CalendarEvent, ClassLog, EventType, Exam, LegendItem, ScheduleSlot, iso, to_date
from culiplan.schedule import is_weekend, planned_hours

HolidayPredicate = Callable[[CalendarEvent, Mapping[str, LegendItem]], bool]


class DayStatus(str, Enum):
    FREE = "free"
    COMPLETED = "completed"
    PARTIAL = "partial"
    MISSING = "missing"


@dataclass(frozen=True)
class DayTracking:
    date: str
    status: DayStatus
    planned: int = 0
    logged: int = 0
    logs: tuple[ClassLog, ...] = field(default_factory=tuple)
    exams: tuple[Exam, ...] = field(default_factory=tuple)

    @property
    def missing_hours(self) -> int:
        return max(0, self.planned - self.logged)


def is_holiday_marker(event: CalendarEvent, legend: Mapping[str, LegendItem]) -> bool:
    """
    True when the event's legend item looks like a non-teaching day:
    holiday red, or a label mentioning 'festivo' / 'inicio'.
    """
    item = legend.get(event.legend_item_id or "")
    if item is None:
        return False
    if item.color.upper() == HOLIDAY_COLOR.upper():
        return True
    label = item.label.lower()
    return any(k in label for k in HOLIDAY_KEYWORDS)


def is_holiday_flagged(event: CalendarEvent, legend: Mapping[str, LegendItem]) -> bool:
    """Alternative strategy: only events explicitly typed as holidays."""
    return event.type == EventType.HOLIDAY


def classify_day(
    day: date | str,
    schedule: Iterable[ScheduleSlot],
    logs: Iterable[ClassLog],
    exams: Iterable[Exam],
    events: Iterable[CalendarEvent],
    legend: Iterable[LegendItem] | Mapping[str, LegendItem] = (),
    is_holiday: HolidayPredicate = is_holiday_marker,
) -> DayTracking:
    key = iso(day)
    legend_by_id = legend if isinstance(legend, Mapping) else {item.id: item for item in legend}

    day_logs = tuple(l for l in logs if l.date == key)
    day_exams = tuple(e for e in exams if e.date == key)
    logged = sum(l.hours for l in day_logs) + sum(e.effective_duration for e in day_exams)

    holiday = any(is_holiday(e, legend_by_id) for e in events if e.date == key)
    if is_weekend(key) or holiday:
        return DayTracking(date=key, status=DayStatus.FREE, logged=logged, logs=day_logs, exams=day_exams)

    planned = planned_hours(key, schedule)
    if planned == 0:
        return DayTracking(date=key, status=DayStatus.FREE, logged=logged, logs=day_logs, exams=day_exams)

    if logged >= planned:
        status = DayStatus.COMPLETED
    elif logged > 0:
        status = DayStatus.PARTIAL
    else:
        status = DayStatus.MISSING

    return DayTracking(date=key, status=status, planned=planned, logged=logged, logs=day_logs, exams=day_exams)


def classify_range(
    start: date | str,
    end: date | str,
    schedule: Iterable[ScheduleSlot],
    logs: Iterable[ClassLog],
    exams: Iterable[Exam],
    events: Iterable[CalendarEvent],
    legend: Iterable[LegendItem] = (),
    is_holiday: HolidayPredicate = is_holiday_marker,
) -> list[DayTracking]:
    """
    Classify every day from start to end, both inclusive.
    """
    schedule = list(schedule)
    logs = list(logs)
    exams = list(exams)
    events = list(events)
    legend_by_id = {item.id: item for item in legend}

    out: list[DayTracking] = []
    d = to_date(start)
    last = to_date(end)
    while d <= last:
        out.append(classify_day(d, schedule, logs, exams, events, legend_by_id, is_holiday))
        d += timedelta(days=1)
    return out


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return first, nxt - timedelta(days=1)


def missing_days(days: Iterable[DayTracking], until: Optional[date] = None) -> list[DayTracking]:
    """
    Teaching days still short of hours (missing or partial), optionally
    only those up to `until`.
    """
    out = []
    for d in days:
        if d.status not in (DayStatus.MISSING, DayStatus.PARTIAL):
            continue
        if until is not None and to_date(d.date) > until:
            continue
        out.append(d)
    return out
