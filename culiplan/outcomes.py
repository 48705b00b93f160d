"""
Learning-outcome (RA) progress.

A criterion's progress is the share of planned hours already delivered in
the units it is associated with, capped at 100%:

    progress     = min(1, sum(realized) / sum(planned))   (0 if nothing linked)
    contribution = progress * criterion.weight
    outcome %    = sum(contribution)

Weights are used as given; an outcome whose criteria weigh less than 100
in total can never reach 100%. Nothing here is persisted.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from culiplan.hours import realized_hours_index
from culiplan.model import ClassLog, Course, EvaluationCriterion, LearningOutcome, Unit


@dataclass(frozen=True)
class AssociationEdge:
    outcome_id: str
    criterion_id: str
    unit_id: str
    instruments: tuple[str, ...] = ()


@dataclass(frozen=True)
class CriterionProgress:
    criterion_id: str
    code: str
    description: str
    weight: float
    progress: float
    contribution: float
    linked_units: tuple[Unit, ...]

    @property
    def percent(self) -> float:
        return self.progress * 100


@dataclass(frozen=True)
class OutcomeProgress:
    outcome_id: str
    code: str
    description: str
    weight: float
    percent: float
    criteria: tuple[CriterionProgress, ...]

    @property
    def is_complete(self) -> bool:
        # float sums of weights land a hair under 100
        return self.percent >= 99.9


def association_edges(course: Course) -> list[AssociationEdge]:
    """
    Flatten outcome -> criterion -> association into an edge list.
    """
    edges: list[AssociationEdge] = []
    for outcome in course.learning_outcomes:
        for criterion in outcome.criteria:
            for assoc in criterion.associations:
                if not assoc.unit_id:
                    continue
                edges.append(
                    AssociationEdge(
                        outcome_id=outcome.id,
                        criterion_id=criterion.id,
                        unit_id=assoc.unit_id,
                        instruments=tuple(assoc.instruments),
                    )
                )
    return edges


def criteria_by_unit(course: Course) -> dict[str, list[AssociationEdge]]:
    """
    Reverse index: unit id -> edges of the criteria assessed in that unit.
    """
    index: dict[str, list[AssociationEdge]] = defaultdict(list)
    for edge in association_edges(course):
        index[edge.unit_id].append(edge)
    return dict(index)


def criterion_progress(
    criterion: EvaluationCriterion,
    units_by_id: Mapping[str, Unit],
    realized: Optional[Mapping[str, int]] = None,
) -> CriterionProgress:
    """
    realized maps unit id -> delivered hours; when omitted the reconciled
    Unit.hours_realized is used.
    """
    linked: list[Unit] = []
    seen: set[str] = set()
    for assoc in criterion.associations:
        unit = units_by_id.get(assoc.unit_id)
        # dangling references are skipped; a unit linked twice counts once
        if unit is None or unit.id in seen:
            continue
        seen.add(unit.id)
        linked.append(unit)

    progress = 0.0
    if linked:
        planned = sum(u.total_planned for u in linked)
        if realized is None:
            done = sum(u.hours_realized for u in linked)
        else:
            done = sum(realized.get(u.id, 0) for u in linked)
        progress = min(1.0, done / planned) if planned > 0 else 0.0

    weight = criterion.weight or 0
    return CriterionProgress(
        criterion_id=criterion.id,
        code=criterion.code,
        description=criterion.description,
        weight=weight,
        progress=progress,
        contribution=progress * weight,
        linked_units=tuple(linked),
    )


def outcome_progress(
    outcome: LearningOutcome,
    units: Iterable[Unit],
    realized: Optional[Mapping[str, int]] = None,
) -> OutcomeProgress:
    units_by_id = {u.id: u for u in units}
    details = tuple(criterion_progress(c, units_by_id, realized) for c in outcome.criteria)
    return OutcomeProgress(
        outcome_id=outcome.id,
        code=outcome.code,
        description=outcome.description,
        weight=outcome.weight,
        percent=sum(d.contribution for d in details),
        criteria=details,
    )


def course_outcomes(course: Course, logs: Optional[Iterable[ClassLog]] = None) -> list[OutcomeProgress]:
    """
    Progress of every learning outcome of a course.

    With logs, realized hours are recomputed from them instead of read from
    the units' reconciled cache.
    """
    realized: Optional[dict[str, int]] = None
    if logs is not None:
        index = realized_hours_index(logs)
        realized = {u.id: index[(course.id, u.id)].total for u in course.units if (course.id, u.id) in index}
    return [outcome_progress(o, course.units, realized) for o in course.learning_outcomes]
