"""
Application state and its transitions.

AppState is an immutable snapshot of every collection. Transitions return a
new snapshot; persistence is a separate step (save_state) that writes only
the collections whose snapshot changed.

Any transition that touches the logs goes through with_logs(), which runs
unit reconciliation before returning, so no reader ever sees units that are
out of date with the logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable, Iterable, Optional, TypeVar

from culiplan import seed
from culiplan.hours import reconcile_units
from culiplan.model import (
    CalendarEvent,
    ClassLog,
    Course,
    Exam,
    LegendItem,
    NotebookTask,
    ScheduleSlot,
    SchoolInfo,
    TeacherInfo,
)
from culiplan.storage import (
    KEY_COURSES,
    KEY_EVENTS,
    KEY_EXAMS,
    KEY_LEGEND,
    KEY_LOCKED,
    KEY_LOGS,
    KEY_SCHEDULE,
    KEY_SCHOOL,
    KEY_TASKS,
    KEY_TEACHER,
    JsonStore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AppState:
    courses: list[Course] = field(default_factory=list)
    schedule: list[ScheduleSlot] = field(default_factory=list)
    logs: list[ClassLog] = field(default_factory=list)
    events: list[CalendarEvent] = field(default_factory=list)
    exams: list[Exam] = field(default_factory=list)
    school_info: SchoolInfo = field(default_factory=SchoolInfo)
    teacher_info: TeacherInfo = field(default_factory=TeacherInfo)
    tasks: list[NotebookTask] = field(default_factory=list)
    calendar_locked: bool = False
    legend: list[LegendItem] = field(default_factory=list)


def with_logs(state: AppState, logs: list[ClassLog]) -> AppState:
    """
    Replace the logs and reconcile every unit against them.
    """
    result = reconcile_units(state.courses, logs)
    return replace(state, logs=list(logs), courses=result.courses)


def with_courses(state: AppState, courses: list[Course]) -> AppState:
    """
    Replace the curriculum; new or edited units are reconciled right away.
    """
    result = reconcile_units(courses, state.logs)
    return replace(state, courses=result.courses)


def reconciled(state: AppState) -> AppState:
    return with_logs(state, state.logs)


def default_state(today: Optional[date] = None, with_sample_log: bool = True) -> AppState:
    """
    Seed state. A reset starts without the sample log.
    """
    state = AppState(
        courses=seed.default_courses(),
        schedule=seed.default_schedule(),
        logs=seed.initial_logs(today) if with_sample_log else [],
        events=seed.default_events(),
        exams=[],
        school_info=seed.default_school_info(),
        teacher_info=seed.default_teacher_info(),
        tasks=[],
        calendar_locked=False,
        legend=seed.default_legend(),
    )
    return reconciled(state)


# ---------------------------------------------------------------------------
# (De)serialization
# ---------------------------------------------------------------------------


def to_snapshots(state: AppState) -> dict[str, Any]:
    """
    JSON-ready snapshot of every collection, keyed by storage key.
    """
    return {
        KEY_COURSES: [c.to_dict() for c in state.courses],
        KEY_SCHEDULE: [s.to_dict() for s in state.schedule],
        KEY_LOGS: [l.to_dict() for l in state.logs],
        KEY_EVENTS: [e.to_dict() for e in state.events],
        KEY_EXAMS: [e.to_dict() for e in state.exams],
        KEY_SCHOOL: state.school_info.to_dict(),
        KEY_TEACHER: state.teacher_info.to_dict(),
        KEY_TASKS: [t.to_dict() for t in state.tasks],
        KEY_LOCKED: state.calendar_locked,
        KEY_LEGEND: [i.to_dict() for i in state.legend],
    }


def parse_list(raw: Any, from_dict: Callable[[dict[str, Any]], T]) -> Optional[list[T]]:
    """
    Parse a JSON list of records. Returns None when anything is malformed,
    so the whole collection falls back instead of loading half of it.
    """
    if not isinstance(raw, list):
        return None
    try:
        return [from_dict(item) for item in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Discarding malformed collection: %s", exc)
        return None


def parse_object(raw: Any, from_dict: Callable[[dict[str, Any]], T]) -> Optional[T]:
    if not isinstance(raw, dict):
        return None
    try:
        return from_dict(raw)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Discarding malformed record: %s", exc)
        return None


LIST_FIELDS: dict[str, tuple[str, Callable[[dict[str, Any]], Any]]] = {
    KEY_COURSES: ("courses", Course.from_dict),
    KEY_SCHEDULE: ("schedule", ScheduleSlot.from_dict),
    KEY_LOGS: ("logs", ClassLog.from_dict),
    KEY_EVENTS: ("events", CalendarEvent.from_dict),
    KEY_EXAMS: ("exams", Exam.from_dict),
    KEY_TASKS: ("tasks", NotebookTask.from_dict),
    KEY_LEGEND: ("legend", LegendItem.from_dict),
}

OBJECT_FIELDS: dict[str, tuple[str, Callable[[dict[str, Any]], Any]]] = {
    KEY_SCHOOL: ("school_info", SchoolInfo.from_dict),
    KEY_TEACHER: ("teacher_info", TeacherInfo.from_dict),
}


def merge_snapshots(state: AppState, snapshots: dict[str, Any]) -> AppState:
    """
    Replace every collection present (and valid) in `snapshots`; everything
    else keeps its current value. Units are reconciled afterwards.
    """
    changes: dict[str, Any] = {}
    for key, (attr, from_dict) in LIST_FIELDS.items():
        if snapshots.get(key) is None:
            continue
        parsed = parse_list(snapshots[key], from_dict)
        if parsed is not None:
            changes[attr] = parsed
    for key, (attr, from_dict) in OBJECT_FIELDS.items():
        if snapshots.get(key) is None:
            continue
        parsed_obj = parse_object(snapshots[key], from_dict)
        if parsed_obj is not None:
            changes[attr] = parsed_obj
    if isinstance(snapshots.get(KEY_LOCKED), bool):
        changes["calendar_locked"] = snapshots[KEY_LOCKED]
    return reconciled(replace(state, **changes))


# ---------------------------------------------------------------------------
# Persistence adapter
# ---------------------------------------------------------------------------


def _is_valid(key: str, raw: Any) -> bool:
    if raw is None:
        return False
    if key in LIST_FIELDS:
        return parse_list(raw, LIST_FIELDS[key][1]) is not None
    if key in OBJECT_FIELDS:
        return parse_object(raw, OBJECT_FIELDS[key][1]) is not None
    return isinstance(raw, bool)


def load_state_with_fallbacks(store: JsonStore, today: Optional[date] = None) -> tuple[AppState, list[str]]:
    """
    Like load_state(), also returning the keys that fell back to the seed
    data because their file was missing or malformed. Those keys are not on
    disk yet and must be written by the caller.
    """
    base = default_state(today)
    stored = {key: store.load(key) for key in to_snapshots(base)}
    fallbacks = [key for key, raw in stored.items() if not _is_valid(key, raw)]
    if fallbacks:
        logger.debug("Using built-in data for %s", ", ".join(fallbacks))
    return merge_snapshots(base, stored), fallbacks


def load_state(store: JsonStore, today: Optional[date] = None) -> AppState:
    """
    Load every collection from the store, falling back to the seed data per
    collection when a file is missing or malformed.
    """
    return load_state_with_fallbacks(store, today)[0]


def save_state(
    store: JsonStore,
    state: AppState,
    previous: Optional[AppState] = None,
    force: Iterable[str] = (),
) -> list[str]:
    """
    Write the collections of `state` that differ from `previous` (all of
    them when there is no previous snapshot), plus every key in `force`.
    Returns the keys written.
    """
    new = to_snapshots(state)
    old = to_snapshots(previous) if previous is not None else {}
    forced = set(force)
    written: list[str] = []
    for key, value in new.items():
        if key not in forced and key in old and old[key] == value:
            continue
        store.save(key, value)
        written.append(key)
    if written:
        logger.info("Persisted %s", ", ".join(written))
    return written
