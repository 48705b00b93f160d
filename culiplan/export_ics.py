"""
iCalendar (.ics) export.

We convert the academic calendar and the exams into a calendar file that
can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Every entry is an all-day event (DTSTART;VALUE=DATE). No time zones,
recurrence rules or alarms.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from culiplan.model import CalendarEvent, Course, Exam, LegendItem, to_date


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _date_value(date_yyyy_mm_dd: str) -> str:
    """
    Convert 'YYYY-MM-DD' to the ICS date form 'YYYYMMDD'.
    """
    return to_date(date_yyyy_mm_dd).strftime("%Y%m%d")


def _vevent(uid: str, day: str, summary: str, description: Optional[str], dtstamp: str) -> list[str]:
    lines = [
        "BEGIN:VEVENT",
        f"UID:{_ics_escape(uid)}@culiplan",
        f"DTSTAMP:{dtstamp}",
        f"DTSTART;VALUE=DATE:{_date_value(day)}",
        f"SUMMARY:{_ics_escape(summary)}",
    ]
    if description and description.strip():
        lines.append(f"DESCRIPTION:{_ics_escape(description.strip())}")
    lines.append("END:VEVENT")
    return lines


def render_ics(
    events: Iterable[CalendarEvent],
    exams: Iterable[Exam] = (),
    courses: Iterable[Course] = (),
    legend: Iterable[LegendItem] = (),
) -> tuple[str, int]:
    """
    Build the calendar document. Returns (text, number of VEVENTs).

    Entries with an unparsable date are skipped.
    """
    legend_by_id = {item.id: item for item in legend}
    course_names = {c.id: c.name for c in courses}
    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//CuliPlan//NONSGML v1.0//EN")
    lines.append("CALSCALE:GREGORIAN")

    count = 0
    for ev in events:
        item = legend_by_id.get(ev.legend_item_id or "")
        summary = ev.title or (item.label if item else "") or "Event"
        try:
            lines.extend(_vevent(ev.id, ev.date, summary, ev.description, dtstamp))
        except ValueError:
            continue
        count += 1

    for exam in exams:
        name = course_names.get(exam.course_id, "")
        summary = f"EXAM {exam.exam_type.value} - {name}".rstrip(" -")
        try:
            lines.extend(_vevent(exam.id, exam.date, summary, exam.topics, dtstamp))
        except ValueError:
            continue
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    return "\r\n".join(lines) + "\r\n", count


def export_calendar_to_ics(
    events: Iterable[CalendarEvent],
    out_path: str | Path,
    exams: Iterable[Exam] = (),
    courses: Iterable[Course] = (),
    legend: Iterable[LegendItem] = (),
) -> int:
    """
    Export calendar events and exams to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    text, count = render_ics(events, exams, courses, legend)
    out.write_bytes(text.encode("utf-8"))
    return count
