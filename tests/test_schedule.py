"""
Unit tests for the weekly timetable lookups.

2025-11-25 is a Tuesday, 2025-11-27 a Thursday, 2025-11-29 a Saturday.
"""

import unittest

from culiplan.model import ScheduleSlot
from culiplan.schedule import (
    add_slot,
    default_session_hours,
    is_weekend,
    planned_hours,
    remove_slot,
    slots_for_date,
    weekly_hours_by_course,
)
from culiplan.seed import default_schedule


class TestProjection(unittest.TestCase):
    def test_slots_sorted_by_start(self) -> None:
        schedule = [
            ScheduleSlot(2, "11:30", "12:25", "b", 1),
            ScheduleSlot(2, "08:15", "11:00", "a", 3),
            ScheduleSlot(3, "08:15", "10:05", "c", 2),
        ]
        self.assertEqual([s.course_id for s in slots_for_date("2025-11-25", schedule)], ["a", "b"])

    def test_planned_hours_from_default_timetable(self) -> None:
        schedule = default_schedule()
        self.assertEqual(planned_hours("2025-11-25", schedule), 4)
        self.assertEqual(planned_hours("2025-11-27", schedule), 6)
        self.assertEqual(planned_hours("2025-11-29", schedule), 0)

    def test_weekend(self) -> None:
        self.assertTrue(is_weekend("2025-11-29"))
        self.assertTrue(is_weekend("2025-11-30"))
        self.assertFalse(is_weekend("2025-11-28"))

    def test_default_session_hours(self) -> None:
        schedule = default_schedule()
        self.assertEqual(default_session_hours("2025-11-25", schedule, "mod-prod-culinarios"), 4)
        self.assertEqual(default_session_hours("2025-11-25", schedule, "mod-sostenible"), 1)

    def test_weekly_hours(self) -> None:
        hours = weekly_hours_by_course(default_schedule())
        self.assertEqual(hours["mod-prod-culinarios"], 11)
        self.assertEqual(hours["mod-sostenible"], 2)


class TestEditing(unittest.TestCase):
    def test_add_and_remove(self) -> None:
        schedule = add_slot([], ScheduleSlot(1, "08:15", "09:10", "a", 1))
        self.assertEqual(len(schedule), 1)
        self.assertEqual(remove_slot(schedule, 0), [])

    def test_rejects_weekend_slot(self) -> None:
        with self.assertRaises(ValueError):
            add_slot([], ScheduleSlot(6, "08:15", "09:10", "a", 1))

    def test_remove_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            remove_slot([], 0)


if __name__ == "__main__":
    unittest.main()
