"""
Unit tests for hours aggregation and unit status reconciliation.

Rules exercised here:
- realized hours of a unit = sum of its logs (theory + practice)
- status: Completed when realized >= planned > 0, InProgress when > 0, else Pending
- reconciliation is idempotent and returns the same list when nothing changed
- a manual Delayed flag survives until the unit's hours move
"""

import unittest

from culiplan.hours import (
    aggregate_unit_hours,
    course_effort,
    mark_delayed,
    planned_hours_delta,
    reconcile_units,
    resolve_status,
)
from culiplan.model import ClassLog, Course, Exam, SessionType, Unit, UnitStatus


def _log(log_id: str, unit_id: str, hours: int, kind: SessionType = SessionType.PRACTICE, course_id: str = "c1") -> ClassLog:
    return ClassLog(id=log_id, date="2025-11-20", course_id=course_id, unit_id=unit_id, hours=hours, session_type=kind)


def _course() -> Course:
    return Course(
        id="c1",
        name="Cocina",
        annual_hours=100,
        units=[
            Unit("u1", "UD1", hours_planned_theory=2, hours_planned_practice=3),
            Unit("u2", "UD2", hours_planned_theory=0, hours_planned_practice=0),
        ],
    )


class TestAggregate(unittest.TestCase):
    def test_sums_theory_and_practice_of_one_unit(self) -> None:
        logs = [
            _log("a", "u1", 2, SessionType.THEORY),
            _log("b", "u1", 3),
            _log("c", "u2", 4),
            _log("d", "u1", 5, course_id="other"),
        ]
        hours = aggregate_unit_hours("c1", "u1", logs)
        self.assertEqual(hours.theory, 2)
        self.assertEqual(hours.practice, 3)
        self.assertEqual(hours.total, 5)

    def test_no_logs_is_zero(self) -> None:
        self.assertEqual(aggregate_unit_hours("c1", "u1", []).total, 0)


class TestResolveStatus(unittest.TestCase):
    def test_status_thresholds(self) -> None:
        self.assertEqual(resolve_status(5, 0), UnitStatus.PENDING)
        self.assertEqual(resolve_status(5, 1), UnitStatus.IN_PROGRESS)
        self.assertEqual(resolve_status(5, 5), UnitStatus.COMPLETED)
        self.assertEqual(resolve_status(5, 9), UnitStatus.COMPLETED)

    def test_unplanned_unit_never_completes(self) -> None:
        self.assertEqual(resolve_status(0, 0), UnitStatus.PENDING)
        self.assertEqual(resolve_status(0, 3), UnitStatus.IN_PROGRESS)


class TestReconcile(unittest.TestCase):
    def test_updates_hours_and_status(self) -> None:
        result = reconcile_units([_course()], [_log("a", "u1", 3)])
        unit = result.courses[0].unit("u1")
        self.assertEqual(unit.hours_realized, 3)
        self.assertEqual(unit.status, UnitStatus.IN_PROGRESS)
        self.assertEqual(result.changed, 1)

    def test_is_idempotent(self) -> None:
        logs = [_log("a", "u1", 5)]
        first = reconcile_units([_course()], logs)
        second = reconcile_units(first.courses, logs)
        self.assertFalse(second.has_changes)
        self.assertIs(second.courses, first.courses)
        self.assertEqual(second.courses[0].unit("u1").status, UnitStatus.COMPLETED)

    def test_more_logs_never_lower_realized_hours(self) -> None:
        logs = [_log("a", "u1", 1)]
        before = reconcile_units([_course()], logs).courses[0].unit("u1").hours_realized
        after = reconcile_units([_course()], logs + [_log("b", "u1", 2)]).courses[0].unit("u1").hours_realized
        self.assertGreaterEqual(after, before)

    def test_empty_inputs(self) -> None:
        self.assertEqual(reconcile_units([], []).courses, [])
        result = reconcile_units([_course()], [])
        self.assertFalse(result.has_changes)

    def test_deleting_logs_resets_unit(self) -> None:
        done = reconcile_units([_course()], [_log("a", "u1", 5)]).courses
        reset = reconcile_units(done, []).courses[0].unit("u1")
        self.assertEqual(reset.hours_realized, 0)
        self.assertEqual(reset.status, UnitStatus.PENDING)

    def test_manual_delay_survives_until_hours_change(self) -> None:
        courses = reconcile_units([_course()], [_log("a", "u1", 1)]).courses
        delayed = mark_delayed(courses, "c1", "u1")
        kept = reconcile_units(delayed, [_log("a", "u1", 1)]).courses
        self.assertEqual(kept[0].unit("u1").status, UnitStatus.DELAYED)

        moved = reconcile_units(kept, [_log("a", "u1", 1), _log("b", "u1", 1)]).courses
        self.assertEqual(moved[0].unit("u1").status, UnitStatus.IN_PROGRESS)

    def test_mark_delayed_unknown_unit(self) -> None:
        with self.assertRaises(KeyError):
            mark_delayed([_course()], "c1", "nope")

    def test_completed_unit_cannot_be_delayed(self) -> None:
        courses = reconcile_units([_course()], [_log("a", "u1", 5)]).courses
        with self.assertRaises(ValueError):
            mark_delayed(courses, "c1", "u1")
        self.assertEqual(courses[0].unit("u1").status, UnitStatus.COMPLETED)


class TestCourseFigures(unittest.TestCase):
    def test_effort_counts_exams_apart(self) -> None:
        logs = [_log("a", "u1", 2, SessionType.THEORY), _log("b", "u1", 3)]
        exams = [Exam("e1", "2025-11-21", "c1", SessionType.THEORY, ["u1"], duration=2)]
        effort = course_effort(_course(), logs, exams)
        self.assertEqual((effort.theory, effort.practice, effort.exams), (2, 3, 2))
        self.assertEqual(effort.total, 7)
        self.assertEqual(effort.progress_percent, 7)

    def test_planned_delta(self) -> None:
        self.assertEqual(planned_hours_delta(_course()), 95)


if __name__ == "__main__":
    unittest.main()
