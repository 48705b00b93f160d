"""
rich tables for the terminal views.

Each builder returns a Table so callers decide where it is printed
(the CLI prints to the default console, tests print to a StringIO).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from culiplan.hours import CourseEffort
from culiplan.model import Course, NotebookTask, UnitStatus
from culiplan.notebook import urgency
from culiplan.outcomes import OutcomeProgress
from culiplan.schedule import WEEKDAY_NAMES
from culiplan.tracking import DayStatus, DayTracking

STATUS_STYLE = {
    UnitStatus.PENDING: "dim",
    UnitStatus.IN_PROGRESS: "cyan",
    UnitStatus.COMPLETED: "green",
    UnitStatus.DELAYED: "red",
}

DAY_STYLE = {
    DayStatus.FREE: "dim",
    DayStatus.COMPLETED: "green",
    DayStatus.PARTIAL: "yellow",
    DayStatus.MISSING: "red",
}

URGENCY_STYLE = {"overdue": "bold red", "urgent": "red", "soon": "yellow", "normal": "", "": "dim"}


def units_table(course: Course, effort: Optional[CourseEffort] = None) -> Table:
    title = f"{course.name} ({course.cycle})"
    if effort is not None:
        title += f" | {effort.total}/{effort.annual_hours} h ({effort.progress_percent}%)"
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Unit")
    table.add_column("Title")
    table.add_column("Terms")
    table.add_column("Hours", justify="right")
    table.add_column("Status")

    for u in course.units:
        style = STATUS_STYLE.get(u.status, "")
        table.add_row(
            u.id,
            u.title,
            ",".join(str(t) for t in u.terms),
            f"{u.hours_realized}/{u.total_planned}",
            f"[{style}]{u.status.value}[/]" if style else u.status.value,
        )
    return table


def outcomes_table(course: Course, progress: Sequence[OutcomeProgress]) -> Table:
    table = Table(title=f"Learning outcomes: {course.name}", box=box.SIMPLE)
    table.add_column("Code")
    table.add_column("Weight", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Criteria")

    for op in progress:
        crits = " ".join(f"{c.code}:{c.percent:.0f}%" for c in op.criteria)
        pct = f"{op.percent:.1f}%"
        table.add_row(op.code, f"{op.weight:g}%", f"[green]{pct}[/]" if op.is_complete else pct, crits)
    return table


def month_table(days: Iterable[DayTracking], title: str = "") -> Table:
    table = Table(title=title or None, box=box.SIMPLE)
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Status")
    table.add_column("Logged/Planned", justify="right")

    for d in days:
        day = date.fromisoformat(d.date)
        style = DAY_STYLE[d.status]
        hours = f"{d.logged}/{d.planned}" if d.status != DayStatus.FREE else (str(d.logged) if d.logged else "")
        table.add_row(d.date, WEEKDAY_NAMES[day.isoweekday() - 1], f"[{style}]{d.status.value}[/]", hours)
    return table


def tasks_table(tasks: Iterable[NotebookTask], today: date) -> Table:
    table = Table(title="Notebook", box=box.SIMPLE)
    table.add_column("Id")
    table.add_column("Task")
    table.add_column("Due")
    table.add_column("Priority")

    for t in tasks:
        level = urgency(t, today)
        style = URGENCY_STYLE.get(level, "")
        due = t.due_date or "-"
        table.add_row(t.id, t.title, f"[{style}]{due}[/]" if style else due, t.priority.value if t.priority else "")
    return table


def print_table(table: Table, console: Optional[Console] = None) -> None:
    (console or Console()).print(table)
