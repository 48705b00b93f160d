import io
import unittest
from datetime import date

from rich.console import Console

from culiplan.outcomes import course_outcomes
from culiplan.render import month_table, outcomes_table, print_table, units_table
from culiplan.seed import default_courses, default_schedule
from culiplan.tracking import classify_range


def _render(table) -> str:
    buf = io.StringIO()
    print_table(table, Console(file=buf, width=160, color_system=None))
    return buf.getvalue()


class TestRender(unittest.TestCase):
    def test_units_table(self) -> None:
        course = default_courses()[0]
        text = _render(units_table(course))
        self.assertIn("m1-u1", text)
        self.assertIn("0/30", text)

    def test_outcomes_table(self) -> None:
        course = default_courses()[0]
        text = _render(outcomes_table(course, course_outcomes(course)))
        self.assertIn("RA1", text)
        self.assertIn("1.a:0%", text)

    def test_month_table(self) -> None:
        days = classify_range(date(2025, 11, 24), date(2025, 11, 30), default_schedule(), [], [], [])
        text = _render(month_table(days, title="2025-11"))
        self.assertIn("Tue", text)
        self.assertIn("missing", text)


if __name__ == "__main__":
    unittest.main()
