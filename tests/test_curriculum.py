"""
Unit tests for curriculum configuration.

Every operation returns a new course list; the input is never mutated.
"""

import unittest

from culiplan.curriculum import (
    add_association,
    add_course,
    add_criterion,
    add_learning_outcome,
    add_unit,
    delete_association,
    delete_course,
    delete_criterion,
    delete_learning_outcome,
    delete_unit,
    find_course,
    update_course,
    update_unit,
)
from culiplan.outcomes import course_outcomes


class TestCourses(unittest.TestCase):
    def test_add_update_delete(self) -> None:
        courses = add_course([], "Cocina", id="c1", annual_hours=100)
        self.assertEqual(find_course(courses, "c1").annual_hours, 100)

        updated = update_course(courses, "c1", annual_hours=120)
        self.assertEqual(find_course(updated, "c1").annual_hours, 120)
        self.assertEqual(find_course(courses, "c1").annual_hours, 100)

        self.assertEqual(delete_course(updated, "c1"), [])

    def test_rejects_duplicates_and_unknown(self) -> None:
        courses = add_course([], "Cocina", id="c1")
        with self.assertRaises(ValueError):
            add_course(courses, "Otra", id="c1")
        with self.assertRaises(ValueError):
            add_course(courses, "  ")
        with self.assertRaises(KeyError):
            update_course(courses, "nope", name="x")
        with self.assertRaises(ValueError):
            update_course(courses, "c1", id="c2")


class TestUnits(unittest.TestCase):
    def setUp(self) -> None:
        self.courses = add_unit(
            add_course([], "Cocina", id="c1"), "c1", "UD1", 5, 10, terms=[2, 1], unit_id="u1"
        )

    def test_add_unit(self) -> None:
        unit = find_course(self.courses, "c1").unit("u1")
        self.assertEqual(unit.total_planned, 15)
        self.assertEqual(unit.terms, [1, 2])

    def test_invalid_terms_and_hours(self) -> None:
        with self.assertRaises(ValueError):
            add_unit(self.courses, "c1", "UD2", terms=[4])
        with self.assertRaises(ValueError):
            add_unit(self.courses, "c1", "UD2", terms=[])
        with self.assertRaises(ValueError):
            add_unit(self.courses, "c1", "UD2", hours_planned_theory=-1)

    def test_update_unit(self) -> None:
        courses = update_unit(self.courses, "c1", "u1", title="UD1 bis", hours_planned_practice=20)
        unit = find_course(courses, "c1").unit("u1")
        self.assertEqual((unit.title, unit.total_planned), ("UD1 bis", 25))

    def test_derived_fields_are_read_only(self) -> None:
        with self.assertRaises(ValueError):
            update_unit(self.courses, "c1", "u1", hours_realized=3)
        with self.assertRaises(ValueError):
            update_unit(self.courses, "c1", "u1", status="Completed")

    def test_delete_unit(self) -> None:
        courses = delete_unit(self.courses, "c1", "u1")
        self.assertEqual(find_course(courses, "c1").units, [])
        with self.assertRaises(KeyError):
            delete_unit(courses, "c1", "u1")


class TestOutcomes(unittest.TestCase):
    def _build(self):
        courses = add_course([], "Cocina", id="c1")
        courses = add_unit(courses, "c1", "UD1", 0, 10, unit_id="u1")
        courses = add_learning_outcome(courses, "c1", "RA1", weight=20, outcome_id="ra1")
        courses = add_criterion(courses, "c1", "ra1", "1.a", weight=100, criterion_id="ce1")
        return add_association(courses, "c1", "ra1", "ce1", "u1", [" Examen ", ""], association_id="as1")

    def test_full_tree(self) -> None:
        course = find_course(self._build(), "c1")
        assoc = course.learning_outcomes[0].criteria[0].associations[0]
        self.assertEqual((assoc.unit_id, assoc.instruments), ("u1", ["Examen"]))
        self.assertEqual(course_outcomes(course)[0].percent, 0)

    def test_weights_bounded(self) -> None:
        courses = add_course([], "Cocina", id="c1")
        with self.assertRaises(ValueError):
            add_learning_outcome(courses, "c1", "RA1", weight=120)

    def test_association_needs_known_unit(self) -> None:
        with self.assertRaises(KeyError):
            add_association(self._build(), "c1", "ra1", "ce1", "ghost")

    def test_deletions(self) -> None:
        courses = delete_association(self._build(), "c1", "ra1", "ce1", "as1")
        self.assertEqual(find_course(courses, "c1").learning_outcomes[0].criteria[0].associations, [])
        courses = delete_criterion(courses, "c1", "ra1", "ce1")
        self.assertEqual(find_course(courses, "c1").learning_outcomes[0].criteria, [])
        courses = delete_learning_outcome(courses, "c1", "ra1")
        self.assertEqual(find_course(courses, "c1").learning_outcomes, [])

    def test_delete_unknown_association(self) -> None:
        with self.assertRaises(KeyError):
            delete_association(self._build(), "c1", "ra1", "ce1", "ghost")


if __name__ == "__main__":
    unittest.main()
