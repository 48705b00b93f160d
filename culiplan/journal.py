"""
Daily journal: recording class sessions and exams.

A session with mixed hours is stored as up to two ClassLog records, one
per session type, so the hours aggregator can split theory from practice.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from culiplan.model import AttendanceStatus, ClassLog, Exam, SessionType, iso


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def clamp_hours(value: Any, minimum: int = 1) -> int:
    """
    Normalize raw hour input: non-numeric or too small values become `minimum`.
    """
    try:
        n = int(float(value))
    except (TypeError, ValueError):
        return minimum
    return max(minimum, n)


def record_class_session(
    logs: Sequence[ClassLog],
    day: date | str,
    course_id: str,
    unit_id: str,
    theory_hours: int = 0,
    practice_hours: int = 0,
    attendance: AttendanceStatus = AttendanceStatus.DELIVERED,
    notes: str = "",
    log_id: Optional[str] = None,
) -> list[ClassLog]:
    """
    Append one taught session to the log list and return the new list.

    Raises ValueError when course/unit are missing or no hours were given.
    """
    if not course_id or not unit_id:
        raise ValueError("A class session needs a course and a unit")
    theory_hours = max(0, int(theory_hours))
    practice_hours = max(0, int(practice_hours))
    if theory_hours + practice_hours <= 0:
        raise ValueError("A class session needs at least one hour")

    base_id = log_id or _new_id("log")
    mixed = theory_hours > 0 and practice_hours > 0
    notes = notes.strip()
    new_logs: list[ClassLog] = []

    if theory_hours > 0:
        new_logs.append(
            ClassLog(
                id=f"{base_id}-T",
                date=iso(day),
                course_id=course_id,
                unit_id=unit_id,
                hours=theory_hours,
                session_type=SessionType.THEORY,
                attendance=attendance,
                notes=f"(Theory part) {notes}".strip() if mixed else notes,
            )
        )
    if practice_hours > 0:
        new_logs.append(
            ClassLog(
                id=f"{base_id}-P",
                date=iso(day),
                course_id=course_id,
                unit_id=unit_id,
                hours=practice_hours,
                session_type=SessionType.PRACTICE,
                attendance=attendance,
                notes=f"(Practice part) {notes}".strip() if mixed else notes,
            )
        )

    return [*logs, *new_logs]


def split_distribution(distribution: Iterable[SessionType]) -> tuple[int, int]:
    """
    Count an hour-by-hour distribution, e.g. [THEORY, PRACTICE, PRACTICE],
    into (theory_hours, practice_hours).
    """
    theory = 0
    practice = 0
    for t in distribution:
        if t == SessionType.THEORY:
            theory += 1
        elif t == SessionType.PRACTICE:
            practice += 1
    return theory, practice


def record_exam(
    exams: Sequence[Exam],
    day: date | str,
    course_id: str,
    exam_type: SessionType,
    unit_ids: Sequence[str],
    topics: str = "",
    duration: Any = 1,
    exam_id: Optional[str] = None,
) -> list[Exam]:
    if not course_id:
        raise ValueError("An exam needs a course")
    unit_ids = [u for u in dict.fromkeys(unit_ids) if u]
    if not unit_ids:
        raise ValueError("An exam needs at least one unit")

    exam = Exam(
        id=exam_id or _new_id("exam"),
        date=iso(day),
        course_id=course_id,
        exam_type=exam_type,
        unit_ids=unit_ids,
        topics=topics.strip(),
        duration=clamp_hours(duration),
    )
    return [*exams, exam]


def delete_log(logs: Sequence[ClassLog], log_id: str) -> list[ClassLog]:
    return [l for l in logs if l.id != log_id]


def delete_exam(exams: Sequence[Exam], exam_id: str) -> list[Exam]:
    return [e for e in exams if e.id != exam_id]


def entries_for_date(
    day: date | str, logs: Iterable[ClassLog], exams: Iterable[Exam]
) -> tuple[list[ClassLog], list[Exam]]:
    key = iso(day)
    return [l for l in logs if l.date == key], [e for e in exams if e.date == key]
