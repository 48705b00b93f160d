"""
Hours aggregation and unit status reconciliation.

Realized hours are never typed in by hand: they are the sum of the class
logs recorded for a (course, unit) pair. reconcile_units() is the single
writer of Unit.hours_realized / Unit.status.

Status rule:
    Completed   if realized >= planned and planned > 0
    InProgress  if realized > 0
    Pending     otherwise
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from culiplan.model import ClassLog, Course, Exam, SessionType, Unit, UnitStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitHours:
    theory: int = 0
    practice: int = 0

    @property
    def total(self) -> int:
        return self.theory + self.practice


@dataclass(frozen=True)
class Reconciliation:
    courses: list[Course]
    changed: int

    @property
    def has_changes(self) -> bool:
        return self.changed > 0


def aggregate_unit_hours(course_id: str, unit_id: str, logs: Iterable[ClassLog]) -> UnitHours:
    """
    Sum theory and practice hours of the logs recorded for one unit.
    """
    theory = 0
    practice = 0
    for log in logs:
        if log.course_id != course_id or log.unit_id != unit_id:
            continue
        if log.session_type == SessionType.THEORY:
            theory += log.hours
        elif log.session_type == SessionType.PRACTICE:
            practice += log.hours
    return UnitHours(theory=theory, practice=practice)


def realized_hours_index(logs: Iterable[ClassLog]) -> dict[tuple[str, str], UnitHours]:
    """
    Aggregate every log once, keyed by (course_id, unit_id).
    """
    theory: dict[tuple[str, str], int] = {}
    practice: dict[tuple[str, str], int] = {}
    for log in logs:
        key = (log.course_id, log.unit_id)
        if log.session_type == SessionType.THEORY:
            theory[key] = theory.get(key, 0) + log.hours
        elif log.session_type == SessionType.PRACTICE:
            practice[key] = practice.get(key, 0) + log.hours
    keys = set(theory) | set(practice)
    return {k: UnitHours(theory=theory.get(k, 0), practice=practice.get(k, 0)) for k in keys}


def resolve_status(total_planned: int, total_realized: int) -> UnitStatus:
    if total_realized >= total_planned and total_planned > 0:
        return UnitStatus.COMPLETED
    if total_realized > 0:
        return UnitStatus.IN_PROGRESS
    return UnitStatus.PENDING


def _keeps_manual_delay(unit: Unit, realized: int, derived: UnitStatus) -> bool:
    # a hand-set Delayed flag stays until the unit's hours move or it completes
    return unit.status == UnitStatus.DELAYED and unit.hours_realized == realized and derived != UnitStatus.COMPLETED


def reconcile_units(courses: list[Course], logs: Iterable[ClassLog]) -> Reconciliation:
    """
    Recompute realized hours and status of every unit in every course.

    Only units whose derived values differ are replaced; unchanged courses
    are returned as the very same objects. When nothing changed the input
    list itself is returned, so callers can skip persisting.
    """
    index = realized_hours_index(logs)
    changed = 0
    new_courses: list[Course] = []

    for course in courses:
        new_units: list[Unit] = []
        course_changed = False
        for unit in course.units:
            realized = index.get((course.id, unit.id), UnitHours()).total
            status = resolve_status(unit.total_planned, realized)
            if _keeps_manual_delay(unit, realized, status):
                status = UnitStatus.DELAYED
            if unit.hours_realized != realized or unit.status != status:
                new_units.append(replace(unit, hours_realized=realized, status=status))
                course_changed = True
                changed += 1
            else:
                new_units.append(unit)
        new_courses.append(replace(course, units=new_units) if course_changed else course)

    if not changed:
        return Reconciliation(courses=courses, changed=0)

    logger.debug("Reconciliation updated %d unit(s)", changed)
    return Reconciliation(courses=new_courses, changed=changed)


def mark_delayed(courses: list[Course], course_id: str, unit_id: str) -> list[Course]:
    """
    Manually flag a unit as Delayed.

    The flag survives reconciliation until the unit's realized hours change
    or the unit reaches Completed. A unit that is already Completed cannot be
    delayed (ValueError).
    """
    out: list[Course] = []
    found = False
    for course in courses:
        if course.id != course_id:
            out.append(course)
            continue
        units = []
        for unit in course.units:
            if unit.id == unit_id:
                found = True
                if unit.status == UnitStatus.COMPLETED:
                    raise ValueError(f"Unit {unit_id} is already completed")
                unit = replace(unit, status=UnitStatus.DELAYED)
            units.append(unit)
        out.append(replace(course, units=units))
    if not found:
        raise KeyError(f"Unknown unit {course_id}/{unit_id}")
    return out


# ---------------------------------------------------------------------------
# Course level figures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CourseEffort:
    course_id: str
    theory: int
    practice: int
    exams: int
    annual_hours: int

    @property
    def total(self) -> int:
        return self.theory + self.practice + self.exams

    @property
    def progress_percent(self) -> int:
        return min(100, round(self.total / max(1, self.annual_hours) * 100))


def course_effort(course: Course, logs: Iterable[ClassLog], exams: Iterable[Exam]) -> CourseEffort:
    """
    Realized hours of a course split by session type, exams counted apart.
    """
    theory = 0
    practice = 0
    for log in logs:
        if log.course_id != course.id:
            continue
        if log.session_type == SessionType.THEORY:
            theory += log.hours
        else:
            practice += log.hours
    exam_hours = sum(e.duration or 0 for e in exams if e.course_id == course.id)
    return CourseEffort(
        course_id=course.id,
        theory=theory,
        practice=practice,
        exams=exam_hours,
        annual_hours=course.annual_hours,
    )


def planned_hours_delta(course: Course) -> int:
    """
    annual_hours minus the hours planned across all units.

    Positive: hours still to distribute. Negative: units are over-planned.
    """
    return course.annual_hours - sum(u.total_planned for u in course.units)
