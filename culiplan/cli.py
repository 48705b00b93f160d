"""
CLI (Command Line Interface).

Terminal commands over the persisted planner state, e.g.:

    culiplan units
    culiplan outcomes mod-prod-culinarios
    culiplan month 2025-11
    culiplan log add 2025-11-20 mod-prod-culinarios m1-u2 --practice 3
    culiplan unit edit mod-prod-culinarios m1-u2 --practice 12
    culiplan service 2025-11-25 "Lunch service"
    culiplan export-ics out.ics
    culiplan backup export backup.json

Every command loads the state, applies at most one transition and writes
back only the collections that changed. The first run in an empty data
directory also writes the built-in data.

Note:
- Status messages are plain text; the tracking views are rich tables
  (culiplan/render.py)
- Exit codes: 0 success, 1 user error
"""

from __future__ import annotations

import argparse
import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from culiplan import curriculum, journal, logistics, notebook, render, reports
from culiplan.assistant import AssistantClient, build_context
from culiplan.backup import SECTIONS, BackupError, apply_backup, build_backup, read_backup, write_backup
from culiplan.conflicts import _time_to_minutes, find_slot_overlaps
from culiplan.export_ics import export_calendar_to_ics
from culiplan.hours import course_effort, mark_delayed
from culiplan.model import (
    AttendanceStatus,
    CalendarEvent,
    EventType,
    Priority,
    ScheduleSlot,
    SessionType,
    Unit,
    iso,
    to_date,
)
from culiplan.outcomes import course_outcomes
from culiplan.schedule import add_slot, remove_slot
from culiplan.seed import EVALUATIONS
from culiplan.state import AppState, default_state, load_state_with_fallbacks, save_state, with_courses, with_logs
from culiplan.storage import JsonStore
from culiplan.tracking import classify_day, classify_range, missing_days, month_bounds

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, AppState], tuple[int, Optional[AppState]]]


def _parse_day(text: str) -> date:
    try:
        return to_date(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{text}' (expected YYYY-MM-DD)") from exc


def _parse_month(text: str) -> tuple[int, int]:
    try:
        year, month = text.split("-")
        return int(year), int(month)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid month '{text}' (expected YYYY-MM)") from exc


def _error_text(exc: Exception) -> str:
    # KeyError str() wraps the message in quotes
    return str(exc.args[0]) if isinstance(exc, KeyError) and exc.args else str(exc)


# ---------------------------------------------------------------------------
# Read-only views
# ---------------------------------------------------------------------------


def _cmd_units(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    courses = state.courses
    if args.course:
        courses = [curriculum.find_course(state.courses, args.course)]
    for c in courses:
        render.print_table(render.units_table(c, course_effort(c, state.logs, state.exams)))
    return 0, None


def _cmd_outcomes(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    course = curriculum.find_course(state.courses, args.course)
    progress = course_outcomes(course)
    if not progress:
        print("No learning outcomes configured.")
        return 0, None
    render.print_table(render.outcomes_table(course, progress))
    return 0, None


def _cmd_day(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    t = classify_day(args.date, state.schedule, state.logs, state.exams, state.events, state.legend)
    print(f"{t.date}: {t.status.value} ({t.logged}/{t.planned} h)")
    for log in t.logs:
        print(f"- {log.course_id} {log.unit_id} {log.hours}h {log.session_type.value} [{log.attendance.value}]")
    for exam in t.exams:
        print(f"- EXAM {exam.course_id} {exam.exam_type.value} {exam.effective_duration}h {', '.join(exam.unit_ids)}")
    return 0, None


def _cmd_month(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    year, month = args.month
    first, last = month_bounds(year, month)
    days = classify_range(first, last, state.schedule, state.logs, state.exams, state.events, state.legend)
    if args.missing:
        days = missing_days(days)
        if not days:
            print("No missing days.")
            return 0, None
    render.print_table(render.month_table(days, title=f"{year}-{month:02d}"))
    return 0, None


def _cmd_events(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.date:
        events = logistics.events_on(state.events, args.date)
    else:
        events = logistics.upcoming_events(state.events, date.today(), limit=args.limit)
    if not events:
        print("No events.")
        return 0, None
    for e in events:
        mark = "x" if e.completed else " "
        kind = e.type.value if e.type else "-"
        print(f"[{mark}] {e.date} {e.id} ({kind}) {e.title or ''}".rstrip())
    return 0, None


def _cmd_stats(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    s = reports.global_stats(state.courses, state.logs, state.exams)
    print(
        f"Units: {s.total_units} | completed {s.completed} | in progress {s.in_progress} | "
        f"delayed {s.delayed} | pending {s.pending}"
    )
    print(f"Hours logged: {s.hours_logged} / {s.hours_planned}")
    for m in reports.module_summary(state.courses):
        print(f"- {m.name}: {m.completed_units}/{m.total_units} units ({m.percent}%)")
    return 0, None


def _cmd_overlaps(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    pairs = find_slot_overlaps(state.schedule)
    if not pairs:
        print("No overlapping slots.")
        return 0, None
    print(f"Overlapping slots: {len(pairs)}")
    for a, b in pairs:
        print(f"- day {a.day_of_week} {a.start_time}-{a.end_time} {a.course_id}  <->  {b.start_time}-{b.end_time} {b.course_id}")
    return 0, None


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _require_unit(state: AppState, course_id: str, unit_id: str) -> Unit:
    unit = curriculum.find_course(state.courses, course_id).unit(unit_id)
    if unit is None:
        raise KeyError(f"Unknown unit {unit_id} in {course_id}")
    return unit


def _cmd_log(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.log_command == "delete":
        if not any(l.id == args.log_id for l in state.logs):
            raise KeyError(f"Unknown log {args.log_id}")
        print(f"Deleted log: {args.log_id}")
        return 0, with_logs(state, journal.delete_log(state.logs, args.log_id))

    _require_unit(state, args.course, args.unit)
    logs = journal.record_class_session(
        state.logs,
        args.date,
        args.course,
        args.unit,
        theory_hours=args.theory,
        practice_hours=args.practice,
        attendance=AttendanceStatus(args.status),
        notes=args.notes,
    )
    new = with_logs(state, logs)
    unit = _require_unit(new, args.course, args.unit)
    print(
        f"Logged {args.theory + args.practice}h for {args.unit} "
        f"({unit.hours_realized}/{unit.total_planned} h, {unit.status.value})"
    )
    return 0, new


def _cmd_exam(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.exam_command == "delete":
        if not any(e.id == args.exam_id for e in state.exams):
            raise KeyError(f"Unknown exam {args.exam_id}")
        print(f"Deleted exam: {args.exam_id}")
        return 0, replace(state, exams=journal.delete_exam(state.exams, args.exam_id))

    curriculum.find_course(state.courses, args.course)
    exams = journal.record_exam(
        state.exams,
        args.date,
        args.course,
        SessionType(args.type),
        [u.strip() for u in args.units.split(",")],
        topics=args.topics,
        duration=args.duration,
    )
    print(f"Exam recorded on {iso(args.date)}")
    return 0, replace(state, exams=exams)


def _cmd_delay(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    new = with_courses(state, mark_delayed(state.courses, args.course, args.unit))
    unit = _require_unit(new, args.course, args.unit)
    print(f"{args.unit}: {unit.status.value}")
    return 0, new


def _cmd_service(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    service = CalendarEvent(
        id=f"srv-{uuid.uuid4().hex[:12]}",
        date=iso(args.date),
        title=args.title,
        description=args.description or None,
        type=EventType.SERVICE,
    )
    reminders = [] if args.no_reminders else None
    events = logistics.create_event(state.events, service, reminders=reminders)
    added = events[len(state.events):]
    print(f"Service scheduled on {service.date} ({len(added) - 1} reminders)")
    for e in added[1:]:
        print(f"- {e.date} {e.title}")
    return 0, replace(state, events=events)


def _cmd_done(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    events = logistics.set_completed(state.events, args.event_id, completed=not args.undo)
    print(f"{'Reopened' if args.undo else 'Completed'}: {args.event_id}")
    return 0, replace(state, events=events)


def _cmd_task(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.task_command == "add":
        tasks = notebook.add_task(state.tasks, args.title, due_date=args.due, priority=Priority(args.priority))
        print(f"Added: {tasks[-1].id}")
        return 0, replace(state, tasks=tasks)

    if args.task_command == "done":
        tasks, events = notebook.toggle_task(state.tasks, state.events, args.task_id)
        done = next(t for t in tasks if t.id == args.task_id).completed
        print(f"{'Completed' if done else 'Reopened'}: {args.task_id}")
        return 0, replace(state, tasks=tasks, events=events)

    if args.task_command == "delete":
        if not any(t.id == args.task_id for t in state.tasks):
            raise KeyError(f"Unknown task {args.task_id}")
        print(f"Deleted: {args.task_id}")
        return 0, replace(state, tasks=notebook.delete_task(state.tasks, args.task_id))

    pending = notebook.pending_tasks(state.tasks)
    if not pending:
        print("No pending tasks.")
        return 0, None
    render.print_table(render.tasks_table(pending, date.today()))
    return 0, None


def _cmd_event(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if not any(e.id == args.event_id for e in state.events):
        raise KeyError(f"Unknown event {args.event_id}")
    events = logistics.delete_event(state.events, args.event_id)
    left = [e for e in logistics.orphaned_events(events) if e.linked_event_id == args.event_id]
    print(f"Deleted event: {args.event_id}")
    if left:
        print(f"{len(left)} linked reminders kept (see 'culiplan orphans')")
    return 0, replace(state, events=events)


def _cmd_orphans(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    orphans = logistics.orphaned_events(state.events)
    if not orphans:
        print("No orphaned reminders.")
        return 0, None
    for e in orphans:
        print(f"- {e.id}  {e.date}  {e.title}  (service {e.linked_event_id})")
    return 0, None


# ---------------------------------------------------------------------------
# Curriculum and timetable configuration
# ---------------------------------------------------------------------------


def _parse_terms(text: str) -> list[int]:
    try:
        return [int(t) for t in text.split(",") if t.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid terms '{text}' (expected e.g. 1,2)") from exc


def _parse_time(text: str) -> str:
    try:
        _time_to_minutes(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid time '{text}' (expected HH:MM)") from exc
    return text.strip()


def _given(args: argparse.Namespace, mapping: dict[str, str]) -> dict[str, object]:
    # only the options actually passed on the command line
    return {field: getattr(args, opt) for opt, field in mapping.items() if getattr(args, opt) is not None}


def _cmd_course(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.course_command == "add":
        fields = _given(args, {"cycle": "cycle", "grade": "grade", "weekly": "weekly_hours", "annual": "annual_hours"})
        courses = curriculum.add_course(state.courses, args.name, id=args.id, **fields)
        print(f"Added course: {courses[-1].id}")
        return 0, with_courses(state, courses)

    if args.course_command == "edit":
        changes = _given(
            args,
            {"name": "name", "cycle": "cycle", "grade": "grade", "weekly": "weekly_hours", "annual": "annual_hours"},
        )
        if not changes:
            print("Nothing to change.")
            return 1, None
        courses = curriculum.update_course(state.courses, args.course, **changes)
        print(f"Updated course: {args.course}")
        return 0, with_courses(state, courses)

    courses = curriculum.delete_course(state.courses, args.course)
    print(f"Deleted course: {args.course}")
    return 0, with_courses(state, courses)


def _cmd_unit(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.unit_command == "add":
        courses = curriculum.add_unit(
            state.courses,
            args.course,
            args.title,
            hours_planned_theory=args.theory or 0,
            hours_planned_practice=args.practice or 0,
            terms=args.terms or (1,),
            description=args.description or "",
            unit_id=args.id,
        )
        unit = curriculum.find_course(courses, args.course).units[-1]
        print(f"Added unit: {unit.id} ({unit.total_planned} h planned)")
        return 0, with_courses(state, courses)

    if args.unit_command == "edit":
        changes = _given(
            args,
            {
                "title": "title",
                "theory": "hours_planned_theory",
                "practice": "hours_planned_practice",
                "terms": "terms",
                "description": "description",
            },
        )
        if not changes:
            print("Nothing to change.")
            return 1, None
        new = with_courses(state, curriculum.update_unit(state.courses, args.course, args.unit, **changes))
        unit = _require_unit(new, args.course, args.unit)
        print(f"Updated unit: {unit.id} ({unit.hours_realized}/{unit.total_planned} h, {unit.status.value})")
        return 0, new

    courses = curriculum.delete_unit(state.courses, args.course, args.unit)
    print(f"Deleted unit: {args.unit}")
    return 0, with_courses(state, courses)


def _cmd_outcome(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.outcome_command == "add":
        courses = curriculum.add_learning_outcome(
            state.courses, args.course, args.code, description=args.description, weight=args.weight, outcome_id=args.id
        )
        print(f"Added learning outcome: {curriculum.find_course(courses, args.course).learning_outcomes[-1].id}")
        return 0, with_courses(state, courses)

    courses = curriculum.delete_learning_outcome(state.courses, args.course, args.outcome)
    print(f"Deleted learning outcome: {args.outcome}")
    return 0, with_courses(state, courses)


def _cmd_criterion(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.criterion_command == "add":
        courses = curriculum.add_criterion(
            state.courses,
            args.course,
            args.outcome,
            args.code,
            description=args.description,
            weight=args.weight,
            criterion_id=args.id,
        )
        outcome = next(o for o in curriculum.find_course(courses, args.course).learning_outcomes if o.id == args.outcome)
        print(f"Added criterion: {outcome.criteria[-1].id}")
        return 0, with_courses(state, courses)

    courses = curriculum.delete_criterion(state.courses, args.course, args.outcome, args.criterion)
    print(f"Deleted criterion: {args.criterion}")
    return 0, with_courses(state, courses)


def _cmd_link(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.link_command == "add":
        instruments = (args.instruments or "").split(",")
        courses = curriculum.add_association(
            state.courses,
            args.course,
            args.outcome,
            args.criterion,
            args.unit,
            instruments=instruments,
            association_id=args.id,
        )
        print(f"Linked {args.criterion} to {args.unit}")
        return 0, with_courses(state, courses)

    courses = curriculum.delete_association(state.courses, args.course, args.outcome, args.criterion, args.link)
    print(f"Deleted link: {args.link}")
    return 0, with_courses(state, courses)


def _cmd_slot(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.slot_command == "list":
        for i, s in enumerate(state.schedule):
            print(f"{i:>3}  day {s.day_of_week} {s.start_time}-{s.end_time}  {s.course_id}  {s.default_hours}h  {s.label}")
        return 0, None

    if args.slot_command == "remove":
        try:
            schedule = remove_slot(state.schedule, args.index)
        except IndexError as exc:
            raise ValueError(str(exc)) from exc
        print(f"Removed slot {args.index}")
        return 0, replace(state, schedule=schedule)

    curriculum.find_course(state.courses, args.course)
    if _time_to_minutes(args.end) <= _time_to_minutes(args.start):
        raise ValueError(f"Slot must end after it starts ({args.start}-{args.end})")
    slot = ScheduleSlot(args.day, args.start, args.end, args.course, default_hours=args.hours, label=args.label)
    schedule = add_slot(state.schedule, slot)
    print(f"Added slot: day {slot.day_of_week} {slot.start_time}-{slot.end_time} {slot.course_id}")
    clashes = [p for p in find_slot_overlaps(schedule) if slot in p]
    if clashes:
        print(f"Warning: overlaps {len(clashes)} existing slot(s)")
    return 0, replace(state, schedule=schedule)


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


def _cmd_export_ics(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1, None

    n = export_calendar_to_ics(state.events, out_path, state.exams, state.courses, state.legend)
    print(f"Exported {n} events to: {out_path}")
    return 0, None


def _cmd_backup(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    if args.backup_command == "export":
        doc = build_backup(state, sections=args.sections or None)
        write_backup(doc, args.path)
        print(f"Backup written to: {args.path}")
        return 0, None

    data = read_backup(args.path)
    restored = apply_backup(state, data)
    print(f"Backup restored from {data['timestamp']}")
    return 0, restored


def _cmd_ask(args: argparse.Namespace, state: AppState) -> tuple[int, Optional[AppState]]:
    client = AssistantClient()
    context = build_context(state.courses, EVALUATIONS)
    print(client.ask(" ".join(args.text), context=context, year=state.school_info.academic_year))
    return 0, None


HANDLERS: dict[str, Handler] = {
    "units": _cmd_units,
    "outcomes": _cmd_outcomes,
    "day": _cmd_day,
    "month": _cmd_month,
    "events": _cmd_events,
    "stats": _cmd_stats,
    "overlaps": _cmd_overlaps,
    "log": _cmd_log,
    "exam": _cmd_exam,
    "delay": _cmd_delay,
    "service": _cmd_service,
    "done": _cmd_done,
    "task": _cmd_task,
    "event": _cmd_event,
    "orphans": _cmd_orphans,
    "course": _cmd_course,
    "unit": _cmd_unit,
    "outcome": _cmd_outcome,
    "criterion": _cmd_criterion,
    "link": _cmd_link,
    "slot": _cmd_slot,
    "export-ics": _cmd_export_ics,
    "backup": _cmd_backup,
    "ask": _cmd_ask,
}


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="culiplan", description="CuliPlan - culinary course planner")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory holding the state files")
    sub = parser.add_subparsers(dest="command", required=True)

    p_units = sub.add_parser("units", help="Show units, hours and status")
    p_units.add_argument("--course", type=str, default=None, help="Only this course id")

    p_out = sub.add_parser("outcomes", help="Learning outcome progress of a course")
    p_out.add_argument("course", type=str, help="Course id (e.g. mod-prod-culinarios)")

    p_day = sub.add_parser("day", help="Tracking status of one day")
    p_day.add_argument("date", type=_parse_day, help="YYYY-MM-DD")

    p_month = sub.add_parser("month", help="Tracking status of every day in a month")
    p_month.add_argument("month", type=_parse_month, help="YYYY-MM")
    p_month.add_argument("--missing", action="store_true", help="Only days still short of hours")

    p_events = sub.add_parser("events", help="List calendar events")
    p_events.add_argument("--date", type=_parse_day, default=None, help="Events of this day only")
    p_events.add_argument("--limit", type=int, default=10, help="Max upcoming events")

    sub.add_parser("stats", help="Global progress summary")
    sub.add_parser("overlaps", help="Show overlapping timetable slots")

    p_log = sub.add_parser("log", help="Record or delete taught sessions")
    log_sub = p_log.add_subparsers(dest="log_command", required=True)
    p_log_add = log_sub.add_parser("add", help="Record a taught session")
    p_log_add.add_argument("date", type=_parse_day, help="YYYY-MM-DD")
    p_log_add.add_argument("course", type=str, help="Course id")
    p_log_add.add_argument("unit", type=str, help="Unit id")
    p_log_add.add_argument("--theory", type=int, default=0, help="Theory hours")
    p_log_add.add_argument("--practice", type=int, default=0, help="Practice hours")
    p_log_add.add_argument(
        "--status", type=str, default=AttendanceStatus.DELIVERED.value, choices=[s.value for s in AttendanceStatus]
    )
    p_log_add.add_argument("--notes", type=str, default="")
    p_log_del = log_sub.add_parser("delete", help="Delete a session log")
    p_log_del.add_argument("log_id", type=str)

    p_exam = sub.add_parser("exam", help="Record or delete exams")
    exam_sub = p_exam.add_subparsers(dest="exam_command", required=True)
    p_exam_add = exam_sub.add_parser("add", help="Record an exam")
    p_exam_add.add_argument("date", type=_parse_day, help="YYYY-MM-DD")
    p_exam_add.add_argument("course", type=str, help="Course id")
    p_exam_add.add_argument("--units", type=str, required=True, help="Comma separated unit ids")
    p_exam_add.add_argument(
        "--type", type=str, default=SessionType.THEORY.value, choices=[s.value for s in SessionType]
    )
    p_exam_add.add_argument("--topics", type=str, default="")
    p_exam_add.add_argument("--duration", type=int, default=1, help="Hours")
    p_exam_del = exam_sub.add_parser("delete", help="Delete an exam")
    p_exam_del.add_argument("exam_id", type=str)

    p_delay = sub.add_parser("delay", help="Mark a unit as delayed")
    p_delay.add_argument("course", type=str, help="Course id")
    p_delay.add_argument("unit", type=str, help="Unit id")

    p_srv = sub.add_parser("service", help="Schedule a service with its logistics reminders")
    p_srv.add_argument("date", type=_parse_day, help="YYYY-MM-DD")
    p_srv.add_argument("title", type=str, help="Service title")
    p_srv.add_argument("--description", type=str, default="")
    p_srv.add_argument("--no-reminders", action="store_true", help="Do not create order/stock/menu reminders")

    p_done = sub.add_parser("done", help="Mark a calendar event as completed")
    p_done.add_argument("event_id", type=str)
    p_done.add_argument("--undo", action="store_true", help="Reopen instead")

    p_task = sub.add_parser("task", help="Notebook tasks")
    task_sub = p_task.add_subparsers(dest="task_command", required=True)
    p_task_add = task_sub.add_parser("add", help="Add a task")
    p_task_add.add_argument("title", type=str)
    p_task_add.add_argument("--due", type=_parse_day, default=None, help="YYYY-MM-DD")
    p_task_add.add_argument("--priority", type=str, default=Priority.MEDIUM.value, choices=[p.value for p in Priority])
    p_task_done = task_sub.add_parser("done", help="Toggle a task done/open")
    p_task_done.add_argument("task_id", type=str)
    p_task_del = task_sub.add_parser("delete", help="Delete a task")
    p_task_del.add_argument("task_id", type=str)
    task_sub.add_parser("list", help="Pending tasks")

    p_event = sub.add_parser("event", help="Calendar event maintenance")
    event_sub = p_event.add_subparsers(dest="event_command", required=True)
    p_event_del = event_sub.add_parser("delete", help="Delete an event (linked reminders are kept)")
    p_event_del.add_argument("event_id", type=str)

    sub.add_parser("orphans", help="Reminders whose service was deleted")

    p_course = sub.add_parser("course", help="Add, edit or delete courses")
    course_sub = p_course.add_subparsers(dest="course_command", required=True)
    p_course_add = course_sub.add_parser("add", help="Add a course")
    p_course_add.add_argument("name", type=str)
    p_course_add.add_argument("--id", type=str, default=None)
    p_course_edit = course_sub.add_parser("edit", help="Edit a course")
    p_course_edit.add_argument("course", type=str, help="Course id")
    p_course_edit.add_argument("--name", type=str, default=None)
    for p in (p_course_add, p_course_edit):
        p.add_argument("--cycle", type=str, default=None)
        p.add_argument("--grade", type=str, default=None)
        p.add_argument("--weekly", type=int, default=None, help="Weekly hours")
        p.add_argument("--annual", type=int, default=None, help="Annual hours")
    p_course_del = course_sub.add_parser("delete", help="Delete a course with its units and outcomes")
    p_course_del.add_argument("course", type=str, help="Course id")

    p_unit = sub.add_parser("unit", help="Add, edit or delete units")
    unit_sub = p_unit.add_subparsers(dest="unit_command", required=True)
    p_unit_add = unit_sub.add_parser("add", help="Add a unit")
    p_unit_add.add_argument("course", type=str, help="Course id")
    p_unit_add.add_argument("title", type=str)
    p_unit_add.add_argument("--id", type=str, default=None)
    p_unit_edit = unit_sub.add_parser("edit", help="Edit a unit")
    p_unit_edit.add_argument("course", type=str, help="Course id")
    p_unit_edit.add_argument("unit", type=str, help="Unit id")
    p_unit_edit.add_argument("--title", type=str, default=None)
    for p in (p_unit_add, p_unit_edit):
        p.add_argument("--theory", type=int, default=None, help="Planned theory hours")
        p.add_argument("--practice", type=int, default=None, help="Planned practice hours")
        p.add_argument("--terms", type=_parse_terms, default=None, help="Comma separated terms, e.g. 1,2")
        p.add_argument("--description", type=str, default=None)
    p_unit_del = unit_sub.add_parser("delete", help="Delete a unit")
    p_unit_del.add_argument("course", type=str, help="Course id")
    p_unit_del.add_argument("unit", type=str, help="Unit id")

    p_outcome = sub.add_parser("outcome", help="Add or delete learning outcomes (RA)")
    outcome_sub = p_outcome.add_subparsers(dest="outcome_command", required=True)
    p_outcome_add = outcome_sub.add_parser("add", help="Add a learning outcome")
    p_outcome_add.add_argument("course", type=str, help="Course id")
    p_outcome_add.add_argument("code", type=str, help="e.g. RA1")
    p_outcome_add.add_argument("--description", type=str, default="")
    p_outcome_add.add_argument("--weight", type=float, default=0, help="Percent of the module grade")
    p_outcome_add.add_argument("--id", type=str, default=None)
    p_outcome_del = outcome_sub.add_parser("delete", help="Delete a learning outcome")
    p_outcome_del.add_argument("course", type=str, help="Course id")
    p_outcome_del.add_argument("outcome", type=str, help="Learning outcome id")

    p_crit = sub.add_parser("criterion", help="Add or delete evaluation criteria (CE)")
    crit_sub = p_crit.add_subparsers(dest="criterion_command", required=True)
    p_crit_add = crit_sub.add_parser("add", help="Add a criterion")
    p_crit_add.add_argument("course", type=str, help="Course id")
    p_crit_add.add_argument("outcome", type=str, help="Learning outcome id")
    p_crit_add.add_argument("code", type=str, help="e.g. a)")
    p_crit_add.add_argument("--description", type=str, default="")
    p_crit_add.add_argument("--weight", type=float, default=0, help="Percent of the outcome")
    p_crit_add.add_argument("--id", type=str, default=None)
    p_crit_del = crit_sub.add_parser("delete", help="Delete a criterion")
    p_crit_del.add_argument("course", type=str, help="Course id")
    p_crit_del.add_argument("outcome", type=str, help="Learning outcome id")
    p_crit_del.add_argument("criterion", type=str, help="Criterion id")

    p_link = sub.add_parser("link", help="Link criteria to units")
    link_sub = p_link.add_subparsers(dest="link_command", required=True)
    p_link_add = link_sub.add_parser("add", help="Link a criterion to a unit")
    p_link_del = link_sub.add_parser("delete", help="Remove a criterion/unit link")
    for p in (p_link_add, p_link_del):
        p.add_argument("course", type=str, help="Course id")
        p.add_argument("outcome", type=str, help="Learning outcome id")
        p.add_argument("criterion", type=str, help="Criterion id")
    p_link_add.add_argument("unit", type=str, help="Unit id")
    p_link_add.add_argument("--instruments", type=str, default="", help="Comma separated instruments")
    p_link_add.add_argument("--id", type=str, default=None)
    p_link_del.add_argument("link", type=str, help="Link id")

    p_slot = sub.add_parser("slot", help="Weekly timetable slots")
    slot_sub = p_slot.add_subparsers(dest="slot_command", required=True)
    slot_sub.add_parser("list", help="Show slots with their position")
    p_slot_add = slot_sub.add_parser("add", help="Add a slot")
    p_slot_add.add_argument("day", type=int, choices=range(1, 6), help="1=Monday .. 5=Friday")
    p_slot_add.add_argument("start", type=_parse_time, help="HH:MM")
    p_slot_add.add_argument("end", type=_parse_time, help="HH:MM")
    p_slot_add.add_argument("course", type=str, help="Course id")
    p_slot_add.add_argument("--hours", type=int, default=1, help="Default session hours")
    p_slot_add.add_argument("--label", type=str, default="")
    p_slot_rm = slot_sub.add_parser("remove", help="Remove a slot by position (see 'slot list')")
    p_slot_rm.add_argument("index", type=int)

    p_export = sub.add_parser("export-ics", help="Export calendar events and exams to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")

    p_backup = sub.add_parser("backup", help="Export or import a JSON backup")
    backup_sub = p_backup.add_subparsers(dest="backup_command", required=True)
    p_bexp = backup_sub.add_parser("export", help="Write a backup file")
    p_bexp.add_argument("path", type=str)
    p_bexp.add_argument("--sections", nargs="+", choices=list(SECTIONS), default=None)
    p_bimp = backup_sub.add_parser("import", help="Restore a backup file")
    p_bimp.add_argument("path", type=str)

    p_ask = sub.add_parser("ask", help="Ask the academic assistant")
    p_ask.add_argument("text", nargs="+", help="Question")

    sub.add_parser("reset", help="Delete all stored data and start from the defaults")

    return parser


def _reset(store: JsonStore) -> int:
    store.clear()
    save_state(store, default_state(with_sample_log=False))
    print(f"Data reset in: {store.directory}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    store = JsonStore(args.data_dir)
    if args.command == "reset":
        raise SystemExit(_reset(store))

    # keys that fell back to built-in data are written on this run so the
    # sample log keeps the date of the first run
    state, fallbacks = load_state_with_fallbacks(store)
    logger.debug("Loaded state from %s", store.directory)
    handler = HANDLERS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        code, new_state = handler(args, state)
    except BackupError as exc:
        print(f"Backup rejected: {exc}")
        raise SystemExit(1)
    except (KeyError, ValueError) as exc:
        print(f"Error: {_error_text(exc)}")
        raise SystemExit(1)

    if new_state is not None or fallbacks:
        save_state(store, new_state or state, state, force=fallbacks)
    raise SystemExit(code)
