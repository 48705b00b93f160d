"""
Teacher's notebook: a small to-do list.

Completing a task drops a note on the calendar for that day. The note is
a one-way record: reopening or deleting the task leaves it in place.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from culiplan.model import CalendarEvent, EventType, NotebookTask, Priority, iso, to_date


def add_task(
    tasks: Sequence[NotebookTask],
    title: str,
    due_date: date | str | None = None,
    description: Optional[str] = None,
    priority: Priority = Priority.MEDIUM,
    now: Optional[datetime] = None,
) -> list[NotebookTask]:
    if not title.strip():
        raise ValueError("A task needs a title")
    now = now or datetime.now()
    task = NotebookTask(
        id=f"task-{uuid.uuid4().hex[:12]}",
        title=title.strip(),
        created_date=now.isoformat(timespec="seconds"),
        description=description or None,
        due_date=iso(due_date) if due_date else None,
        priority=priority,
    )
    return [*tasks, task]


def toggle_task(
    tasks: Sequence[NotebookTask],
    events: Sequence[CalendarEvent],
    task_id: str,
    now: Optional[datetime] = None,
) -> tuple[list[NotebookTask], list[CalendarEvent]]:
    """
    Flip a task between open and done.

    Returns the new (tasks, events) pair. Completing a task writes its
    "task-completed-<id>" note, replacing the one left by an earlier
    completion.
    """
    now = now or datetime.now()
    new_tasks: list[NotebookTask] = []
    new_events = list(events)
    found = False

    for task in tasks:
        if task.id != task_id:
            new_tasks.append(task)
            continue
        found = True
        completing = not task.completed
        if completing:
            note_id = f"task-completed-{task.id}"
            new_events = [e for e in new_events if e.id != note_id]
            new_events.append(
                CalendarEvent(
                    id=note_id,
                    date=now.date().isoformat(),
                    title=f"✓ {task.title}",
                    description=task.description or "Task completed",
                    type=EventType.NOTE,
                    completed=True,
                )
            )
        new_tasks.append(
            replace(
                task,
                completed=completing,
                completed_date=now.isoformat(timespec="seconds") if completing else None,
            )
        )

    if not found:
        raise KeyError(f"Unknown task {task_id}")
    return new_tasks, new_events


def delete_task(tasks: Sequence[NotebookTask], task_id: str) -> list[NotebookTask]:
    return [t for t in tasks if t.id != task_id]


def pending_tasks(tasks: Sequence[NotebookTask]) -> list[NotebookTask]:
    """
    Open tasks: dated ones first (earliest due first), then undated ones
    newest first.
    """
    open_tasks = [t for t in tasks if not t.completed]
    dated = sorted((t for t in open_tasks if t.due_date), key=lambda t: t.due_date or "")
    undated = sorted((t for t in open_tasks if not t.due_date), key=lambda t: t.created_date, reverse=True)
    return dated + undated


def completed_tasks(tasks: Sequence[NotebookTask]) -> list[NotebookTask]:
    done = [t for t in tasks if t.completed]
    return sorted(done, key=lambda t: t.completed_date or t.created_date, reverse=True)


def urgency(task: NotebookTask, today: date) -> str:
    """
    'overdue', 'urgent' (<= 2 days), 'soon' (<= 7 days), 'normal',
    or '' for undated tasks.
    """
    if not task.due_date:
        return ""
    days = (to_date(task.due_date) - today).days
    if days < 0:
        return "overdue"
    if days <= 2:
        return "urgent"
    if days <= 7:
        return "soon"
    return "normal"
