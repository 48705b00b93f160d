"""
Curriculum configuration: courses, units, learning outcomes, criteria and
their unit associations.

Every helper takes the current course list and returns a new one; nothing
is mutated in place. Unknown ids raise KeyError, invalid values ValueError.
Realized hours and status are not editable here (see culiplan.hours).
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Any, Callable, Iterable, Sequence

from culiplan.model import (
    Course,
    EvaluationCriterion,
    LearningOutcome,
    Unit,
    UnitAssociation,
)

VALID_TERMS = (1, 2, 3)
_DERIVED_UNIT_FIELDS = {"hours_realized", "status"}
_IMMUTABLE_FIELDS = {"id"}


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _check_weight(weight: float) -> None:
    if not 0 <= weight <= 100:
        raise ValueError(f"Weight must be between 0 and 100, got {weight}")


def _check_terms(terms: Iterable[int]) -> list[int]:
    out = sorted(set(int(t) for t in terms))
    if not out or any(t not in VALID_TERMS for t in out):
        raise ValueError(f"Terms must be a non-empty subset of {VALID_TERMS}")
    return out


def find_course(courses: Sequence[Course], course_id: str) -> Course:
    for c in courses:
        if c.id == course_id:
            return c
    raise KeyError(f"Unknown course {course_id}")


def _update_course(courses: Sequence[Course], course_id: str, fn: Callable[[Course], Course]) -> list[Course]:
    find_course(courses, course_id)
    return [fn(c) if c.id == course_id else c for c in courses]


def _update_outcome(
    course: Course, outcome_id: str, fn: Callable[[LearningOutcome], LearningOutcome]
) -> Course:
    if not any(o.id == outcome_id for o in course.learning_outcomes):
        raise KeyError(f"Unknown learning outcome {outcome_id}")
    return replace(
        course,
        learning_outcomes=[fn(o) if o.id == outcome_id else o for o in course.learning_outcomes],
    )


def _update_criterion(
    outcome: LearningOutcome, criterion_id: str, fn: Callable[[EvaluationCriterion], EvaluationCriterion]
) -> LearningOutcome:
    if not any(c.id == criterion_id for c in outcome.criteria):
        raise KeyError(f"Unknown criterion {criterion_id}")
    return replace(outcome, criteria=[fn(c) if c.id == criterion_id else c for c in outcome.criteria])


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


def add_course(courses: Sequence[Course], name: str, **fields: Any) -> list[Course]:
    if not name.strip():
        raise ValueError("A course needs a name")
    course = Course(id=fields.pop("id", None) or _new_id("mod"), name=name.strip(), **fields)
    if any(c.id == course.id for c in courses):
        raise ValueError(f"Duplicate course id {course.id}")
    return [*courses, course]


def update_course(courses: Sequence[Course], course_id: str, **changes: Any) -> list[Course]:
    bad = set(changes) & (_IMMUTABLE_FIELDS | {"units", "learning_outcomes"})
    if bad:
        raise ValueError(f"Cannot edit {', '.join(sorted(bad))} here")
    return _update_course(courses, course_id, lambda c: replace(c, **changes))


def delete_course(courses: Sequence[Course], course_id: str) -> list[Course]:
    # units and outcomes go with the course; logs referring to it are left alone
    find_course(courses, course_id)
    return [c for c in courses if c.id != course_id]


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


def add_unit(
    courses: Sequence[Course],
    course_id: str,
    title: str,
    hours_planned_theory: int = 0,
    hours_planned_practice: int = 0,
    terms: Iterable[int] = (1,),
    description: str = "",
    unit_id: str | None = None,
) -> list[Course]:
    if hours_planned_theory < 0 or hours_planned_practice < 0:
        raise ValueError("Planned hours must not be negative")
    unit = Unit(
        id=unit_id or _new_id("ut"),
        title=title.strip(),
        description=description,
        hours_planned_theory=int(hours_planned_theory),
        hours_planned_practice=int(hours_planned_practice),
        terms=_check_terms(terms),
    )
    return _update_course(courses, course_id, lambda c: replace(c, units=[*c.units, unit]))


def update_unit(courses: Sequence[Course], course_id: str, unit_id: str, **changes: Any) -> list[Course]:
    bad = set(changes) & (_DERIVED_UNIT_FIELDS | _IMMUTABLE_FIELDS)
    if bad:
        raise ValueError(f"{', '.join(sorted(bad))} cannot be edited directly")
    if "terms" in changes:
        changes["terms"] = _check_terms(changes["terms"])
    for key in ("hours_planned_theory", "hours_planned_practice"):
        if key in changes and changes[key] < 0:
            raise ValueError("Planned hours must not be negative")

    def fn(course: Course) -> Course:
        if course.unit(unit_id) is None:
            raise KeyError(f"Unknown unit {unit_id}")
        return replace(course, units=[replace(u, **changes) if u.id == unit_id else u for u in course.units])

    return _update_course(courses, course_id, fn)


def delete_unit(courses: Sequence[Course], course_id: str, unit_id: str) -> list[Course]:
    """
    Remove a unit. Associations pointing at it are kept and simply resolve
    to nothing from then on.
    """

    def fn(course: Course) -> Course:
        if course.unit(unit_id) is None:
            raise KeyError(f"Unknown unit {unit_id}")
        return replace(course, units=[u for u in course.units if u.id != unit_id])

    return _update_course(courses, course_id, fn)


# ---------------------------------------------------------------------------
# Learning outcomes, criteria, associations
# ---------------------------------------------------------------------------


def add_learning_outcome(
    courses: Sequence[Course],
    course_id: str,
    code: str,
    description: str = "",
    weight: float = 0,
    outcome_id: str | None = None,
) -> list[Course]:
    _check_weight(weight)
    outcome = LearningOutcome(id=outcome_id or _new_id("ra"), code=code, description=description, weight=weight)
    return _update_course(
        courses, course_id, lambda c: replace(c, learning_outcomes=[*c.learning_outcomes, outcome])
    )


def delete_learning_outcome(courses: Sequence[Course], course_id: str, outcome_id: str) -> list[Course]:
    def fn(course: Course) -> Course:
        if not any(o.id == outcome_id for o in course.learning_outcomes):
            raise KeyError(f"Unknown learning outcome {outcome_id}")
        return replace(course, learning_outcomes=[o for o in course.learning_outcomes if o.id != outcome_id])

    return _update_course(courses, course_id, fn)


def add_criterion(
    courses: Sequence[Course],
    course_id: str,
    outcome_id: str,
    code: str,
    description: str = "",
    weight: float = 0,
    criterion_id: str | None = None,
) -> list[Course]:
    _check_weight(weight)
    criterion = EvaluationCriterion(
        id=criterion_id or _new_id("ce"), code=code, description=description, weight=weight
    )
    return _update_course(
        courses,
        course_id,
        lambda c: _update_outcome(c, outcome_id, lambda o: replace(o, criteria=[*o.criteria, criterion])),
    )


def delete_criterion(courses: Sequence[Course], course_id: str, outcome_id: str, criterion_id: str) -> list[Course]:
    def drop(outcome: LearningOutcome) -> LearningOutcome:
        if not any(c.id == criterion_id for c in outcome.criteria):
            raise KeyError(f"Unknown criterion {criterion_id}")
        return replace(outcome, criteria=[c for c in outcome.criteria if c.id != criterion_id])

    return _update_course(courses, course_id, lambda c: _update_outcome(c, outcome_id, drop))


def add_association(
    courses: Sequence[Course],
    course_id: str,
    outcome_id: str,
    criterion_id: str,
    unit_id: str,
    instruments: Iterable[str] = (),
    association_id: str | None = None,
) -> list[Course]:
    """
    Link a criterion to a unit of the same course.
    """
    course = find_course(courses, course_id)
    if course.unit(unit_id) is None:
        raise KeyError(f"Unknown unit {unit_id}")
    assoc = UnitAssociation(
        id=association_id or _new_id("assoc"),
        unit_id=unit_id,
        instruments=[i.strip() for i in instruments if i.strip()],
    )
    return _update_course(
        courses,
        course_id,
        lambda c: _update_outcome(
            c,
            outcome_id,
            lambda o: _update_criterion(o, criterion_id, lambda cr: replace(cr, associations=[*cr.associations, assoc])),
        ),
    )


def delete_association(
    courses: Sequence[Course], course_id: str, outcome_id: str, criterion_id: str, association_id: str
) -> list[Course]:
    def drop(criterion: EvaluationCriterion) -> EvaluationCriterion:
        if not any(a.id == association_id for a in criterion.associations):
            raise KeyError(f"Unknown association {association_id}")
        return replace(criterion, associations=[a for a in criterion.associations if a.id != association_id])

    return _update_course(
        courses,
        course_id,
        lambda c: _update_outcome(c, outcome_id, lambda o: _update_criterion(o, criterion_id, drop)),
    )
