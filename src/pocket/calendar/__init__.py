"""Apple Calendar.app integration."""

from pocket.calendar.actions import create_event, delete_event
from pocket.calendar.calendars import Calendar, get_calendars
from pocket.calendar.events import (
    CalendarEvent,
    find_events,
    get_events,
    get_events_for_days,
    get_events_this_week,
    get_events_today,
    get_upcoming_events,
)

__all__ = [
    "Calendar",
    "CalendarEvent",
    "get_calendars",
    "get_events",
    "get_events_today",
    "get_events_for_days",
    "get_events_this_week",
    "get_upcoming_events",
    "find_events",
    "create_event",
    "delete_event",
]
