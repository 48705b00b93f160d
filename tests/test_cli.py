"""
Tests for CLI entry points.

These tests focus on:
- argument validation (bad dates, unknown ids -> nonzero exit)
- commands that change state persist only through the data directory
  given on the command line (a temporary one, never the real user data)
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import date
from pathlib import Path

from culiplan.cli import main
from culiplan.state import default_state, load_state
from culiplan.storage import KEY_COURSES, KEY_EVENTS, KEY_EXAMS, KEY_LOGS, KEY_SCHEDULE, KEY_TASKS, JsonStore


def run(*argv: str) -> tuple[int, str]:
    buf = io.StringIO()
    with redirect_stdout(buf):
        try:
            main(list(argv))
        except SystemExit as exc:
            return exc.code, buf.getvalue()
    return 0, buf.getvalue()


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = self._tmp.name
        self.store = JsonStore(self.data_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def cli(self, *argv: str) -> tuple[int, str]:
        return run("--data-dir", self.data_dir, *argv)

    def test_bad_date_is_rejected(self) -> None:
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main(["--data-dir", self.data_dir, "day", "25/11/2025"])
        self.assertNotEqual(ctx.exception.code, 0)

    def test_log_persists_and_reconciles(self) -> None:
        code, out = self.cli("log", "add", "2025-11-25", "mod-pasteleria", "m4-u1", "--theory", "1", "--practice", "2")
        self.assertEqual(code, 0)
        self.assertIn("Logged 3h", out)

        logs = self.store.load(KEY_LOGS)
        self.assertIn("m4-u1", [l["unitId"] for l in logs])
        self.assertEqual(sum(1 for l in logs if l["date"] == "2025-11-25" and l["unitId"] == "m4-u1"), 2)

    def test_log_unknown_unit(self) -> None:
        code, out = self.cli("log", "add", "2025-11-25", "mod-pasteleria", "nope", "--theory", "1")
        self.assertEqual(code, 1)
        self.assertIn("Unknown unit", out)
        self.assertIsNone(self.store.load(KEY_LOGS))

    def test_first_run_persists_built_in_data(self) -> None:
        self.assertEqual(self.cli("service", "2025-11-25", "Menú degustación")[0], 0)
        self.assertTrue(self.store.path_for(KEY_LOGS).exists())
        self.assertTrue(self.store.path_for(KEY_COURSES).exists())

        # the sample log keeps the date it was first written with
        first = load_state(self.store, date(2030, 1, 1))
        later = load_state(self.store, date(2031, 6, 15))
        self.assertEqual([l.date for l in first.logs], [l.date for l in later.logs])

    def test_read_only_command_rewrites_nothing_after_first_run(self) -> None:
        self.assertEqual(self.cli("units")[0], 0)
        path = self.store.path_for(KEY_LOGS)
        compact = json.dumps(self.store.load(KEY_LOGS))
        path.write_text(compact, encoding="utf-8")

        self.assertEqual(self.cli("units")[0], 0)
        self.assertEqual(path.read_text(encoding="utf-8"), compact)

    def test_service_creates_reminders(self) -> None:
        code, out = self.cli("service", "2025-11-25", "Menú degustación")
        self.assertEqual(code, 0)
        self.assertIn("(3 reminders)", out)
        self.assertIn("2025-11-17", out)
        events = self.store.load(KEY_EVENTS)
        self.assertEqual(len(events), len(default_state().events) + 4)

    def test_task_add_and_done(self) -> None:
        self.assertEqual(self.cli("task", "add", "Pedir pescado", "--due", "2025-11-24")[0], 0)
        task_id = self.store.load(KEY_TASKS)[0]["id"]
        self.assertEqual(self.cli("task", "done", task_id)[0], 0)
        self.assertTrue(self.store.load(KEY_TASKS)[0]["completed"])
        self.assertIn(f"task-completed-{task_id}", [e["id"] for e in self.store.load(KEY_EVENTS)])

    def test_export_ics(self) -> None:
        out_path = Path(self.data_dir) / "out" / "calendar.ics"
        code, out = self.cli("export-ics", str(out_path))
        self.assertEqual(code, 0)
        self.assertTrue(out_path.exists())
        self.assertIn("Exported", out)

    def test_backup_export_and_import(self) -> None:
        path = Path(self.data_dir) / "backup.json"
        self.assertEqual(self.cli("backup", "export", str(path), "--sections", "logs")[0], 0)
        doc = json.loads(path.read_text(encoding="utf-8"))
        self.assertIn("timestamp", doc)
        self.assertEqual(self.cli("backup", "import", str(path))[0], 0)

    def test_backup_import_rejects_non_backup(self) -> None:
        path = Path(self.data_dir) / "other.json"
        path.write_text(json.dumps({"logs": []}), encoding="utf-8")
        code, out = self.cli("backup", "import", str(path))
        self.assertEqual(code, 1)
        self.assertIn("Backup rejected", out)

    def test_reset(self) -> None:
        self.cli("log", "add", "2025-11-25", "mod-pasteleria", "m4-u1", "--theory", "1")
        self.assertEqual(self.cli("reset")[0], 0)
        self.assertEqual(self.store.load(KEY_LOGS), [])


class TestCLIMaintenance(unittest.TestCase):
    """Deletions and curriculum/timetable configuration."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = self._tmp.name
        self.store = JsonStore(self.data_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def cli(self, *argv: str) -> tuple[int, str]:
        return run("--data-dir", self.data_dir, *argv)

    def stored_course(self, course_id: str) -> dict:
        return next(c for c in self.store.load(KEY_COURSES) if c["id"] == course_id)

    def stored_unit(self, course_id: str, unit_id: str) -> dict:
        return next(u for u in self.stored_course(course_id)["units"] if u["id"] == unit_id)

    def test_log_delete_resets_unit_hours(self) -> None:
        self.assertEqual(self.cli("units")[0], 0)
        self.assertEqual(self.stored_unit("mod-prod-culinarios", "m1-u2")["hoursRealized"], 3)

        code, out = self.cli("log", "delete", "log-1")
        self.assertEqual(code, 0)
        self.assertIn("Deleted log", out)
        self.assertEqual(self.store.load(KEY_LOGS), [])
        unit = self.stored_unit("mod-prod-culinarios", "m1-u2")
        self.assertEqual((unit["hoursRealized"], unit["status"]), (0, "Pending"))

    def test_log_delete_unknown(self) -> None:
        code, out = self.cli("log", "delete", "nope")
        self.assertEqual(code, 1)
        self.assertIn("Unknown log", out)

    def test_exam_add_and_delete(self) -> None:
        before = {e.id for e in default_state().exams}
        code, _ = self.cli("exam", "add", "2025-12-17", "mod-pasteleria", "--units", "m4-u1", "--duration", "2")
        self.assertEqual(code, 0)
        new_ids = [e["id"] for e in self.store.load(KEY_EXAMS) if e["id"] not in before]
        self.assertEqual(len(new_ids), 1)

        self.assertEqual(self.cli("exam", "delete", new_ids[0])[0], 0)
        self.assertNotIn(new_ids[0], [e["id"] for e in self.store.load(KEY_EXAMS)])
        self.assertEqual(self.cli("exam", "delete", new_ids[0])[0], 1)

    def test_course_add_edit_delete(self) -> None:
        code, out = self.cli("course", "add", "Panadería", "--id", "mod-pan", "--annual", "120", "--weekly", "4")
        self.assertEqual(code, 0)
        self.assertIn("mod-pan", out)
        self.assertEqual(self.stored_course("mod-pan")["annualHours"], 120)

        self.assertEqual(self.cli("course", "edit", "mod-pan", "--name", "Panadería y Bollería")[0], 0)
        self.assertEqual(self.stored_course("mod-pan")["name"], "Panadería y Bollería")
        self.assertEqual(self.stored_course("mod-pan")["annualHours"], 120)

        self.assertEqual(self.cli("course", "delete", "mod-pan")[0], 0)
        self.assertNotIn("mod-pan", [c["id"] for c in self.store.load(KEY_COURSES)])

    def test_unit_add_and_delete(self) -> None:
        code, out = self.cli(
            "unit", "add", "mod-pasteleria", "UD2: Cremas", "--id", "m4-u2", "--theory", "4", "--practice", "6", "--terms", "1,2"
        )
        self.assertEqual(code, 0)
        self.assertIn("10 h planned", out)
        unit = self.stored_unit("mod-pasteleria", "m4-u2")
        self.assertEqual(unit["terms"], [1, 2])

        self.assertEqual(self.cli("unit", "delete", "mod-pasteleria", "m4-u2")[0], 0)
        units = self.stored_course("mod-pasteleria")["units"]
        self.assertNotIn("m4-u2", [u["id"] for u in units])

    def test_unit_edit_reconciles_status(self) -> None:
        # the sample log gives m1-u2 three hours; planning two makes it complete
        code, out = self.cli("unit", "edit", "mod-prod-culinarios", "m1-u2", "--theory", "1", "--practice", "1")
        self.assertEqual(code, 0)
        self.assertIn("Completed", out)
        self.assertEqual(self.stored_unit("mod-prod-culinarios", "m1-u2")["status"], "Completed")

    def test_unit_edit_needs_changes(self) -> None:
        self.assertEqual(self.cli("unit", "edit", "mod-prod-culinarios", "m1-u2")[0], 1)

    def test_unit_edit_rejects_bad_terms(self) -> None:
        code, out = self.cli("unit", "edit", "mod-prod-culinarios", "m1-u2", "--terms", "4")
        self.assertEqual(code, 1)
        self.assertIn("Terms", out)

    def test_outcome_criterion_link(self) -> None:
        self.assertEqual(self.cli("outcome", "add", "mod-pasteleria", "RA1", "--weight", "20", "--id", "ra-p1")[0], 0)
        self.assertEqual(
            self.cli("criterion", "add", "mod-pasteleria", "ra-p1", "1.a", "--weight", "100", "--id", "ce-p1a")[0], 0
        )
        code, _ = self.cli(
            "link", "add", "mod-pasteleria", "ra-p1", "ce-p1a", "m4-u1", "--instruments", "Rúbrica,Examen", "--id", "as-p1"
        )
        self.assertEqual(code, 0)

        outcome = self.stored_course("mod-pasteleria")["learningOutcomes"][0]
        self.assertEqual(outcome["weight"], 20)
        link = outcome["criteria"][0]["associations"][0]
        self.assertEqual((link["id"], link["unitId"]), ("as-p1", "m4-u1"))
        self.assertEqual(link["instruments"], ["Rúbrica", "Examen"])

        self.assertEqual(self.cli("link", "delete", "mod-pasteleria", "ra-p1", "ce-p1a", "as-p1")[0], 0)
        self.assertEqual(self.cli("link", "delete", "mod-pasteleria", "ra-p1", "ce-p1a", "as-p1")[0], 1)
        self.assertEqual(self.cli("criterion", "delete", "mod-pasteleria", "ra-p1", "ce-p1a")[0], 0)
        self.assertEqual(self.cli("outcome", "delete", "mod-pasteleria", "ra-p1")[0], 0)
        self.assertEqual(self.stored_course("mod-pasteleria")["learningOutcomes"], [])

    def test_link_to_unknown_unit(self) -> None:
        code, out = self.cli("link", "add", "mod-prod-culinarios", "ra1", "ce1a", "nope")
        self.assertEqual(code, 1)
        self.assertIn("Unknown unit", out)

    def test_outcome_weight_out_of_range(self) -> None:
        code, out = self.cli("outcome", "add", "mod-pasteleria", "RA9", "--weight", "150")
        self.assertEqual(code, 1)
        self.assertIn("Weight", out)

    def test_slot_add_and_remove(self) -> None:
        base = len(default_state().schedule)
        code, out = self.cli("slot", "add", "1", "08:15", "09:10", "mod-pasteleria", "--hours", "1")
        self.assertEqual(code, 0)
        self.assertNotIn("Warning", out)
        schedule = self.store.load(KEY_SCHEDULE)
        self.assertEqual(len(schedule), base + 1)
        self.assertEqual(schedule[-1]["startTime"], "08:15")

        self.assertEqual(self.cli("slot", "remove", str(base))[0], 0)
        self.assertEqual(len(self.store.load(KEY_SCHEDULE)), base)

    def test_slot_overlap_warns(self) -> None:
        code, out = self.cli("slot", "add", "1", "12:00", "13:00", "mod-pasteleria")
        self.assertEqual(code, 0)
        self.assertIn("Warning: overlaps", out)

    def test_slot_bad_input(self) -> None:
        self.assertEqual(self.cli("slot", "remove", "99")[0], 1)
        self.assertEqual(self.cli("slot", "add", "1", "10:00", "09:00", "mod-pasteleria")[0], 1)
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main(["--data-dir", self.data_dir, "slot", "add", "1", "8h", "09:00", "mod-pasteleria"])
        self.assertNotEqual(ctx.exception.code, 0)

    def test_event_delete_keeps_reminders(self) -> None:
        before = {e.id for e in default_state().events}
        self.assertEqual(self.cli("service", "2025-11-25", "Menú degustación")[0], 0)
        service_id = next(
            e["id"] for e in self.store.load(KEY_EVENTS) if e["id"] not in before and e.get("type") == "service"
        )

        code, out = self.cli("event", "delete", service_id)
        self.assertEqual(code, 0)
        self.assertIn("3 linked reminders kept", out)

        code, out = self.cli("orphans")
        self.assertEqual(code, 0)
        self.assertEqual(out.count(f"(service {service_id})"), 3)

    def test_event_delete_unknown(self) -> None:
        self.assertEqual(self.cli("event", "delete", "nope")[0], 1)

    def test_task_delete(self) -> None:
        self.cli("task", "add", "Pedir pescado")
        task_id = self.store.load(KEY_TASKS)[0]["id"]
        self.assertEqual(self.cli("task", "delete", task_id)[0], 0)
        self.assertEqual(self.store.load(KEY_TASKS), [])
        self.assertEqual(self.cli("task", "delete", task_id)[0], 1)

    def test_delay_prints_stored_status(self) -> None:
        code, out = self.cli("delay", "mod-prod-culinarios", "m1-u2")
        self.assertEqual(code, 0)
        self.assertIn("m1-u2: Delayed", out)
        self.assertEqual(self.stored_unit("mod-prod-culinarios", "m1-u2")["status"], "Delayed")

    def test_delay_refuses_completed_unit(self) -> None:
        self.cli("unit", "edit", "mod-prod-culinarios", "m1-u2", "--theory", "1", "--practice", "1")
        code, out = self.cli("delay", "mod-prod-culinarios", "m1-u2")
        self.assertEqual(code, 1)
        self.assertIn("already completed", out)
        self.assertEqual(self.stored_unit("mod-prod-culinarios", "m1-u2")["status"], "Completed")


if __name__ == "__main__":
    unittest.main()
