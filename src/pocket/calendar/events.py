"""Calendar event retrieval from Apple Calendar.app."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from pocket.applescript import Field, RecordSchema, ScriptBuilder, quote, run_applescript, whose
from pocket.applescript.builder import contains
from pocket.applescript.dates import day_bounds, parse_applescript_date
from pocket.applescript.errors import DecodeError
from pocket.applescript.parsing import optional_text, parse_bool
from pocket.calendar.calendars import APP

EVENT_SCHEMA = RecordSchema(
    "event",
    (
        Field("id", "uid of {item}"),
        Field("summary", "summary of {item}"),
        Field("start", "start date of {item}", kind="date"),
        Field("end", "end date of {item}", kind="date"),
        Field("all_day", "allday event of {item}", kind="bool"),
        Field("calendar", "calName"),
        Field("location", "location of {item}", optional=True),
        Field("description", "description of {item}", optional=True),
        Field("url", "url of {item}", optional=True),
    ),
)

# Window searched by find_events
SEARCH_PAST_DAYS = 30
SEARCH_FUTURE_DAYS = 365


@dataclass(frozen=True)
class CalendarEvent:
    """Represents an event from Calendar.app."""

    id: str
    summary: str  # Event title
    start_date: datetime
    end_date: datetime
    all_day: bool
    calendar_name: str
    location: str | None = None
    description: str = ""
    url: str | None = None

    @property
    def duration_minutes(self) -> int:
        """Calculate event duration in minutes."""
        if self.all_day:
            return 24 * 60
        delta = self.end_date - self.start_date
        return int(delta.total_seconds() / 60)

    @property
    def duration_str(self) -> str:
        """Human-readable duration string."""
        minutes = self.duration_minutes
        if self.all_day:
            return "all day"
        if minutes < 60:
            return f"{minutes}m"
        hours, mins = divmod(minutes, 60)
        return f"{hours}h" if mins == 0 else f"{hours}h {mins}m"

    @property
    def is_upcoming(self) -> bool:
        """Check if event is in the future."""
        return self.start_date > datetime.now()

    def __str__(self) -> str:
        if self.all_day:
            time_str = self.start_date.strftime("%Y-%m-%d") + " (all day)"
        else:
            time_str = self.start_date.strftime("%Y-%m-%d %H:%M")
        return f"{time_str}: {self.summary}"


def _required_date(value: str) -> datetime:
    parsed = parse_applescript_date(value)
    if parsed is None:
        raise DecodeError("Event is missing a start or end date", context={"value": value})
    return parsed


def events_from_records(records: list[dict[str, str]]) -> list[CalendarEvent]:
    """Map decoded event records to CalendarEvent objects."""
    return [
        CalendarEvent(
            id=rec["id"],
            summary=rec["summary"],
            start_date=_required_date(rec["start"]),
            end_date=_required_date(rec["end"]),
            all_day=parse_bool(rec["all_day"]),
            calendar_name=rec["calendar"],
            location=optional_text(rec["location"]),
            description=rec["description"],
            url=optional_text(rec["url"]),
        )
        for rec in records
    ]


def get_events(
    calendar_name: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    title: str | None = None,
    limit: int = 200,
) -> list[CalendarEvent]:
    """
    Get events starting within a date range.

    Args:
        calendar_name: Filter to specific calendar, or None for all.
        start_date: Range start (default: now).
        end_date: Range end (default: 7 days after start).
        title: Only events whose title contains this text.
        limit: Maximum number of events.

    Returns:
        List of CalendarEvent objects sorted by start date.

    Raises:
        TargetNotFoundError: If the calendar does not exist.
        AppleScriptError: If the AppleScript fails.
    """
    start_date = start_date or datetime.now()
    end_date = end_date or start_date + timedelta(days=7)

    script = ScriptBuilder(APP, schema=EVENT_SCHEMA)
    script.set_date("rangeStart", start_date).set_date("rangeEnd", end_date)

    if calendar_name:
        calendars_ref = "{" + f"calendar {quote(calendar_name)}" + "}"
    else:
        calendars_ref = "calendars"
    condition = whose("start date >= rangeStart", "start date < rangeEnd", contains("summary", title))

    script.add('set output to ""', "set found to 0")
    with script.block(f"repeat with cal in {calendars_ref}", "end repeat"):
        script.add(f"if found >= {limit} then exit repeat", "set calName to name of cal")
        with script.block(f"repeat with ev in (every event of cal {condition})", "end repeat"):
            script.add(f"if found >= {limit} then exit repeat", "set found to found + 1")
            script.emit_record("ev")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=60)

    events = events_from_records(EVENT_SCHEMA.decode(result))
    events.sort(key=lambda e: e.start_date)
    return events


def get_events_today(calendar_name: str | None = None) -> list[CalendarEvent]:
    """Get all events scheduled for today."""
    start, end = day_bounds(datetime.now())
    return get_events(calendar_name=calendar_name, start_date=start, end_date=end)


def get_events_for_days(days: int, calendar_name: str | None = None) -> list[CalendarEvent]:
    """Get events from the start of today through the next ``days`` days."""
    start, _ = day_bounds(datetime.now())
    return get_events(calendar_name=calendar_name, start_date=start, end_date=start + timedelta(days=days))


def get_events_this_week(calendar_name: str | None = None) -> list[CalendarEvent]:
    """Get events from Monday through Sunday of the current week."""
    today, _ = day_bounds(datetime.now())
    monday = today - timedelta(days=today.weekday())
    return get_events(calendar_name=calendar_name, start_date=monday, end_date=monday + timedelta(days=7))


def get_upcoming_events(limit: int = 10, days: int = 30, calendar_name: str | None = None) -> list[CalendarEvent]:
    """Get the next ``limit`` events that have not started yet."""
    events = get_events(
        calendar_name=calendar_name,
        start_date=datetime.now(),
        end_date=datetime.now() + timedelta(days=days),
    )
    return events[:limit]


def find_events(title: str, calendar_name: str | None = None) -> list[CalendarEvent]:
    """Search events by title in the last month and the coming year."""
    now = datetime.now()
    return get_events(
        calendar_name=calendar_name,
        start_date=now - timedelta(days=SEARCH_PAST_DAYS),
        end_date=now + timedelta(days=SEARCH_FUTURE_DAYS),
        title=title,
    )
