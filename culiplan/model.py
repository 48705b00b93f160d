"""
Central data model definitions used across the project.

This module defines the canonical structure of every persisted entity so that:
- all modules share the same field names
- the JSON files keep camelCase keys
- older files with Spanish keys and labels can still be read

All entities are frozen dataclasses. Changes always go through
dataclasses.replace(), which keeps the snapshots handed to the derivation
code immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, List


class _LabelEnum(str, Enum):
    """
    String enum that also accepts the labels used by older data files.
    """

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value: object) -> Optional["_LabelEnum"]:
        if isinstance(value, str):
            key = value.strip()
            canonical = cls._aliases().get(key) or cls._aliases().get(key.lower())
            if canonical is not None:
                return cls(canonical)
            for member in cls:
                if member.value.lower() == key.lower():
                    return member
        return None


class UnitStatus(_LabelEnum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    DELAYED = "Delayed"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "Pendiente": "Pending",
            "En Progreso": "InProgress",
            "Completado": "Completed",
            "Retrasado": "Delayed",
        }


class SessionType(_LabelEnum):
    THEORY = "Theory"
    PRACTICE = "Practice"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "Teórica": "Theory",
            "Teórico": "Theory",
            "Práctica": "Practice",
            "Práctico": "Practice",
        }


class AttendanceStatus(_LabelEnum):
    DELIVERED = "Delivered"
    TEACHER_ABSENT = "TeacherAbsent"
    STUDENTS_ABSENT = "StudentsAbsent"
    OTHER_INCIDENT = "OtherIncident"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "Impartida": "Delivered",
            "Falta Profesor": "TeacherAbsent",
            "Falta Alumnos": "StudentsAbsent",
            "Otras Incidencias": "OtherIncident",
        }


class EventType(_LabelEnum):
    ACADEMIC = "academic"
    SERVICE = "service"
    ORDER = "order"
    MENU = "menu"
    NOTE = "note"
    HOLIDAY = "holiday"
    OTHER = "other"


class Priority(_LabelEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_date(value: str | date | datetime) -> date:
    """
    Normalize 'YYYY-MM-DD' strings (or full ISO timestamps) to a date.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()


def iso(d: str | date | datetime) -> str:
    return to_date(d).isoformat()


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    # first key present wins; later keys are legacy spellings
    for k in keys:
        if k in data and data[k] is not None:
            return data[k]
    return default


def _num(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _enum_or_none(enum_cls: type[_LabelEnum], value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# ---------------------------------------------------------------------------
# Curriculum
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Unit:
    """
    One work-unit (UT) of a course.

    hours_realized and status are derived from the class logs by
    culiplan.hours.reconcile_units(); they are never edited directly.
    """

    id: str
    title: str
    description: str = ""
    hours_planned_theory: int = 0
    hours_planned_practice: int = 0
    hours_realized: int = 0
    status: UnitStatus = UnitStatus.PENDING
    terms: List[int] = field(default_factory=lambda: [1])

    @property
    def total_planned(self) -> int:
        return self.hours_planned_theory + self.hours_planned_practice

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "hoursPlannedTheory": self.hours_planned_theory,
            "hoursPlannedPractice": self.hours_planned_practice,
            "hoursRealized": self.hours_realized,
            "status": self.status.value,
            "terms": list(self.terms),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Unit":
        terms = _pick(data, "terms", "trimestres", default=[1])
        return cls(
            id=str(data["id"]),
            title=str(_pick(data, "title", default="")),
            description=str(_pick(data, "description", default="")),
            hours_planned_theory=_num(data.get("hoursPlannedTheory")),
            hours_planned_practice=_num(data.get("hoursPlannedPractice")),
            hours_realized=_num(data.get("hoursRealized")),
            status=_enum_or_none(UnitStatus, data.get("status")) or UnitStatus.PENDING,
            terms=[_num(t) for t in terms] if isinstance(terms, list) else [1],
        )


@dataclass(frozen=True)
class UnitAssociation:
    """Edge between an evaluation criterion and the unit where it is assessed."""

    id: str
    unit_id: str
    instruments: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "unitId": self.unit_id, "instruments": list(self.instruments)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UnitAssociation":
        instruments = data.get("instruments") or []
        return cls(
            id=str(data["id"]),
            unit_id=str(_pick(data, "unitId", "utId", default="")),
            instruments=[str(x) for x in instruments],
        )


@dataclass(frozen=True)
class EvaluationCriterion:
    id: str
    code: str
    description: str = ""
    weight: float = 0
    associations: List[UnitAssociation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "weight": self.weight,
            "associations": [a.to_dict() for a in self.associations],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvaluationCriterion":
        assocs = _pick(data, "associations", "asociaciones", default=[])
        return cls(
            id=str(data["id"]),
            code=str(_pick(data, "code", "codigo", default="")),
            description=str(_pick(data, "description", "descripcion", default="")),
            weight=_float(_pick(data, "weight", "ponderacion")),
            associations=[UnitAssociation.from_dict(a) for a in assocs],
        )


@dataclass(frozen=True)
class LearningOutcome:
    """A learning outcome (RA), weighted toward the module grade."""

    id: str
    code: str
    description: str = ""
    weight: float = 0
    criteria: List[EvaluationCriterion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "weight": self.weight,
            "criteria": [c.to_dict() for c in self.criteria],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LearningOutcome":
        criteria = _pick(data, "criteria", "criterios", default=[])
        return cls(
            id=str(data["id"]),
            code=str(_pick(data, "code", "codigo", default="")),
            description=str(_pick(data, "description", "descripcion", default="")),
            weight=_float(_pick(data, "weight", "ponderacion")),
            criteria=[EvaluationCriterion.from_dict(c) for c in criteria],
        )


@dataclass(frozen=True)
class Course:
    """
    One module of the vocational curriculum.

    annual_hours is the authoritative planned total; the sum of the units'
    planned hours is only compared against it, never forced to match.
    """

    id: str
    name: str
    cycle: str = ""
    grade: str = ""
    weekly_hours: int = 0
    annual_hours: int = 0
    color: Optional[str] = None
    units: List[Unit] = field(default_factory=list)
    learning_outcomes: List[LearningOutcome] = field(default_factory=list)

    def unit(self, unit_id: str) -> Optional[Unit]:
        for u in self.units:
            if u.id == unit_id:
                return u
        return None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "name": self.name,
                "cycle": self.cycle,
                "grade": self.grade,
                "weeklyHours": self.weekly_hours,
                "annualHours": self.annual_hours,
                "color": self.color,
                "units": [u.to_dict() for u in self.units],
                "learningOutcomes": [o.to_dict() for o in self.learning_outcomes],
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        outcomes = _pick(data, "learningOutcomes", "learningResults", default=[])
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            cycle=str(data.get("cycle", "")),
            grade=str(data.get("grade", "")),
            weekly_hours=_num(data.get("weeklyHours")),
            annual_hours=_num(data.get("annualHours")),
            color=data.get("color"),
            units=[Unit.from_dict(u) for u in data.get("units") or []],
            learning_outcomes=[LearningOutcome.from_dict(o) for o in outcomes],
        )


# ---------------------------------------------------------------------------
# Journal
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassLog:
    """One recorded teaching session. Immutable; only deleted, never edited."""

    id: str
    date: str
    course_id: str
    unit_id: str
    hours: int
    session_type: SessionType
    attendance: AttendanceStatus = AttendanceStatus.DELIVERED
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "courseId": self.course_id,
            "unitId": self.unit_id,
            "hours": self.hours,
            "type": self.session_type.value,
            "status": self.attendance.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClassLog":
        return cls(
            id=str(data["id"]),
            date=str(data["date"]),
            course_id=str(data.get("courseId", "")),
            unit_id=str(data.get("unitId", "")),
            hours=_num(data.get("hours")),
            session_type=SessionType(data.get("type")),
            attendance=_enum_or_none(AttendanceStatus, data.get("status")) or AttendanceStatus.DELIVERED,
            notes=str(data.get("notes") or ""),
        )


@dataclass(frozen=True)
class Exam:
    id: str
    date: str
    course_id: str
    exam_type: SessionType
    unit_ids: List[str] = field(default_factory=list)
    topics: str = ""
    duration: Optional[int] = 1

    @property
    def effective_duration(self) -> int:
        # older records may have no duration; they count as one hour
        return self.duration or 1

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "date": self.date,
                "courseId": self.course_id,
                "type": self.exam_type.value,
                "unitIds": list(self.unit_ids),
                "topics": self.topics,
                "duration": self.duration,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Exam":
        duration = data.get("duration")
        return cls(
            id=str(data["id"]),
            date=str(data["date"]),
            course_id=str(data.get("courseId", "")),
            exam_type=SessionType(data.get("type")),
            unit_ids=[str(x) for x in data.get("unitIds") or []],
            topics=str(data.get("topics") or ""),
            duration=_num(duration) if duration is not None else None,
        )


@dataclass(frozen=True)
class ScheduleSlot:
    """One weekly timetable slot. day_of_week: 1=Monday .. 5=Friday."""

    day_of_week: int
    start_time: str
    end_time: str
    course_id: str
    default_hours: int = 1
    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "dayOfWeek": self.day_of_week,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "courseId": self.course_id,
            "defaultHours": self.default_hours,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleSlot":
        return cls(
            day_of_week=_num(data.get("dayOfWeek")),
            start_time=str(data.get("startTime", "")),
            end_time=str(data.get("endTime", "")),
            course_id=str(data.get("courseId", "")),
            default_hours=_num(data.get("defaultHours"), default=1),
            label=str(data.get("label") or ""),
        )


# ---------------------------------------------------------------------------
# Calendar & notebook
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LegendItem:
    id: str
    label: str
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LegendItem":
        return cls(id=str(data["id"]), label=str(data.get("label", "")), color=str(data.get("color", "")))


@dataclass(frozen=True)
class CalendarEvent:
    """
    One calendar entry.

    linked_event_id points at the service event a logistics reminder was
    derived from. Nothing enforces that the parent still exists.
    """

    id: str
    date: str
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[EventType] = None
    legend_item_id: Optional[str] = None
    linked_event_id: Optional[str] = None
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "date": self.date,
                "title": self.title,
                "description": self.description,
                "type": self.type.value if self.type else None,
                "legendItemId": self.legend_item_id,
                "linkedEventId": self.linked_event_id,
                "completed": self.completed,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalendarEvent":
        return cls(
            id=str(data["id"]),
            date=str(data["date"]),
            title=data.get("title"),
            description=data.get("description"),
            type=_enum_or_none(EventType, data.get("type")),
            legend_item_id=data.get("legendItemId"),
            linked_event_id=data.get("linkedEventId"),
            completed=bool(data.get("completed", False)),
        )


@dataclass(frozen=True)
class NotebookTask:
    id: str
    title: str
    created_date: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    completed: bool = False
    completed_date: Optional[str] = None
    priority: Optional[Priority] = Priority.MEDIUM

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "title": self.title,
                "description": self.description,
                "dueDate": self.due_date,
                "completed": self.completed,
                "completedDate": self.completed_date,
                "createdDate": self.created_date,
                "priority": self.priority.value if self.priority else None,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotebookTask":
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            created_date=str(data.get("createdDate", "")),
            description=data.get("description"),
            due_date=data.get("dueDate"),
            completed=bool(data.get("completed", False)),
            completed_date=data.get("completedDate"),
            priority=_enum_or_none(Priority, data.get("priority")),
        )


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SchoolInfo:
    name: str = ""
    logo_url: str = ""
    academic_year: str = ""
    department: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "logoUrl": self.logo_url,
            "academicYear": self.academic_year,
            "department": self.department,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchoolInfo":
        return cls(
            name=str(data.get("name", "")),
            logo_url=str(data.get("logoUrl", "")),
            academic_year=str(data.get("academicYear", "")),
            department=str(data.get("department", "")),
        )


@dataclass(frozen=True)
class TeacherInfo:
    name: str = ""
    role: str = ""
    avatar_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "role": self.role, "avatarUrl": self.avatar_url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TeacherInfo":
        return cls(
            name=str(data.get("name", "")),
            role=str(data.get("role", "")),
            avatar_url=str(data.get("avatarUrl", "")),
        )
