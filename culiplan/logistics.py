"""
Kitchen logistics dates derived from a restaurant service.

For a service on day D:
- place order:        Monday of the week before D's week
- close stock:        Friday before that Monday
- design menu:        D minus 24 calendar days

Example: service Tue 2025-11-25 -> order 2025-11-17, stock 2025-11-14,
menu 2025-11-01.

The generated reminders are only a proposal: callers may edit them before
creating the service. Deleting a service leaves its reminders in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from culiplan.model import CalendarEvent, EventType, iso, to_date

MENU_LEAD_DAYS = 24


@dataclass(frozen=True)
class ReminderProposal:
    """A reminder the user can still edit before the service is saved."""

    key: str
    title: str
    date: str
    type: EventType


def week_monday(d: date) -> date:
    return d - timedelta(days=d.weekday())


def order_date(service: date | str) -> date:
    return week_monday(to_date(service)) - timedelta(days=7)


def stock_close_date(service: date | str) -> date:
    return order_date(service) - timedelta(days=3)


def menu_date(service: date | str) -> date:
    return to_date(service) - timedelta(days=MENU_LEAD_DAYS)


def propose_reminders(service: date | str) -> list[ReminderProposal]:
    return [
        ReminderProposal("order", "Place order", iso(order_date(service)), EventType.ORDER),
        ReminderProposal("stock", "Close stock and inventory", iso(stock_close_date(service)), EventType.ORDER),
        ReminderProposal("menu", "Design menu", iso(menu_date(service)), EventType.MENU),
    ]


def generate_logistic_events(service_event: CalendarEvent) -> list[CalendarEvent]:
    """
    Build the three logistics reminders of a service event.
    Returns [] when the event has no date.
    """
    if not service_event.date:
        return []

    descriptions = {
        "order": f"Order for the service on {service_event.date}",
        "stock": f"Final stock check for the service on {service_event.date}",
        "menu": f"Menu definition for {service_event.date}",
    }
    return [
        CalendarEvent(
            id=f"{service_event.id}-{p.key}",
            date=p.date,
            title=p.title,
            description=descriptions[p.key],
            type=p.type,
            linked_event_id=service_event.id,
            completed=False,
        )
        for p in propose_reminders(service_event.date)
    ]


def create_event(
    events: Sequence[CalendarEvent],
    event: CalendarEvent,
    reminders: Optional[Sequence[ReminderProposal]] = None,
    extra_reminder_dates: Iterable[date | str] = (),
) -> list[CalendarEvent]:
    """
    Add an event to the calendar and return the new event list.

    For a service event, reminders holds the (possibly edited) proposals;
    None means "use the default rules", an empty list means "no reminders".
    extra_reminder_dates adds one note reminder per date for any event type.
    """
    added: list[CalendarEvent] = [event]

    if event.type == EventType.SERVICE:
        if reminders is None:
            added.extend(generate_logistic_events(event))
        else:
            for r in reminders:
                added.append(
                    CalendarEvent(
                        id=f"{event.id}-{r.key}",
                        date=iso(r.date),
                        title=f"{r.title} - {event.title}" if event.title else r.title,
                        description=f"Logistics for: {event.title or event.date}",
                        type=r.type,
                        linked_event_id=event.id,
                        completed=False,
                    )
                )

    for idx, d in enumerate(extra_reminder_dates):
        added.append(
            CalendarEvent(
                id=f"reminder-{event.id}-{idx}",
                date=iso(d),
                title=f"Reminder: {event.title or 'event'}",
                description=f"Preparation for the event on {event.date}",
                type=EventType.NOTE,
                linked_event_id=event.id,
                completed=False,
            )
        )

    return [*events, *added]


def delete_event(events: Sequence[CalendarEvent], event_id: str) -> list[CalendarEvent]:
    # linked reminders are kept on purpose
    return [e for e in events if e.id != event_id]


def set_completed(events: Sequence[CalendarEvent], event_id: str, completed: bool = True) -> list[CalendarEvent]:
    out: list[CalendarEvent] = []
    found = False
    for e in events:
        if e.id == event_id:
            found = True
            e = replace(e, completed=completed)
        out.append(e)
    if not found:
        raise KeyError(f"Unknown event {event_id}")
    return out


def orphaned_events(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    """Derived events whose parent service no longer exists."""
    events = list(events)
    ids = {e.id for e in events}
    return [e for e in events if e.linked_event_id and e.linked_event_id not in ids]


def events_on(events: Iterable[CalendarEvent], day: date | str) -> list[CalendarEvent]:
    key = iso(day)
    return [e for e in events if e.date == key]


def upcoming_events(events: Iterable[CalendarEvent], today: date, limit: Optional[int] = None) -> list[CalendarEvent]:
    out = sorted((e for e in events if to_date(e.date) >= today), key=lambda e: e.date)
    return out[:limit] if limit is not None else out
