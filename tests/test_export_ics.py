import tempfile
import unittest
from pathlib import Path

from culiplan.export_ics import export_calendar_to_ics, render_ics
from culiplan.model import CalendarEvent, Course, EventType, Exam, LegendItem, SessionType


class TestExportICS(unittest.TestCase):
    def test_export_creates_file_and_contains_calendar(self) -> None:
        events = [
            CalendarEvent(id="srv-1", date="2025-11-25", title="Menú degustación", type=EventType.SERVICE),
            CalendarEvent(id="evt-1", date="2025-09-15", legend_item_id="leg-1"),
        ]
        legend = [LegendItem("leg-1", "Inicio de curso", "#DC2626")]
        exams = [Exam("ex-1", "2025-12-17", "c1", SessionType.THEORY, ["u1"], topics="Salsas, fondos")]
        courses = [Course(id="c1", name="Productos Culinarios")]

        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            n = export_calendar_to_ics(events, out, exams, courses, legend)
            self.assertEqual(n, 3)
            raw = out.read_bytes()
            text = raw.decode("utf-8")
            self.assertIn(b"\r\n", raw)
            self.assertIn("BEGIN:VCALENDAR", text)
            self.assertEqual(text.count("BEGIN:VEVENT"), 3)
            self.assertIn("DTSTART;VALUE=DATE:20251125", text)
            self.assertIn("SUMMARY:Menú degustación", text)
            self.assertIn("SUMMARY:Inicio de curso", text)
            self.assertIn("SUMMARY:EXAM Theory - Productos Culinarios", text)
            self.assertIn("DESCRIPTION:Salsas\\, fondos", text)

    def test_untitled_event_and_bad_date(self) -> None:
        text, n = render_ics([CalendarEvent(id="a", date="2025-11-25"), CalendarEvent(id="b", date="not a date")])
        self.assertEqual(n, 1)
        self.assertIn("SUMMARY:Event", text)
        self.assertTrue(text.endswith("END:VCALENDAR\r\n"))


if __name__ == "__main__":
    unittest.main()
