"""
Summary figures for the dashboard and the printable reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from culiplan.model import ClassLog, Course, Exam, UnitStatus


@dataclass(frozen=True)
class GlobalStats:
    total_units: int
    completed: int
    in_progress: int
    delayed: int
    pending: int
    hours_planned: int
    hours_logged: int


@dataclass(frozen=True)
class ModuleSummary:
    course_id: str
    name: str
    completed_units: int
    total_units: int

    @property
    def percent(self) -> int:
        return round(self.completed_units / self.total_units * 100) if self.total_units else 0


def global_stats(courses: Iterable[Course], logs: Iterable[ClassLog], exams: Iterable[Exam]) -> GlobalStats:
    courses = list(courses)
    units = [u for c in courses for u in c.units]

    def count(status: UnitStatus) -> int:
        return sum(1 for u in units if u.status == status)

    return GlobalStats(
        total_units=len(units),
        completed=count(UnitStatus.COMPLETED),
        in_progress=count(UnitStatus.IN_PROGRESS),
        delayed=count(UnitStatus.DELAYED),
        pending=count(UnitStatus.PENDING),
        hours_planned=sum(c.annual_hours for c in courses),
        hours_logged=sum(l.hours for l in logs) + sum(e.duration or 0 for e in exams),
    )


def module_summary(courses: Iterable[Course]) -> list[ModuleSummary]:
    return [
        ModuleSummary(
            course_id=c.id,
            name=c.name,
            completed_units=sum(1 for u in c.units if u.status == UnitStatus.COMPLETED),
            total_units=len(c.units),
        )
        for c in courses
    ]


def recent_activity(
    logs: Iterable[ClassLog], exams: Iterable[Exam], today: date, days: int = 7
) -> list[tuple[str, int]]:
    """
    Hours logged per day over the last `days` days, oldest first.
    """
    per_day: dict[str, int] = {}
    for l in logs:
        per_day[l.date] = per_day.get(l.date, 0) + l.hours
    for e in exams:
        per_day[e.date] = per_day.get(e.date, 0) + (e.duration or 0)

    out: list[tuple[str, int]] = []
    for offset in range(days - 1, -1, -1):
        key = (today - timedelta(days=offset)).isoformat()
        out.append((key, per_day.get(key, 0)))
    return out
