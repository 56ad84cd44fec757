"""Write operations for Apple Calendar.app."""

from datetime import datetime

from pocket.applescript import Properties, ScriptBuilder, quote, run_applescript, whose
from pocket.applescript.builder import equals, not_found
from pocket.applescript.dates import day_bounds
from pocket.calendar.calendars import APP


def create_event(
    summary: str,
    start_date: datetime,
    end_date: datetime,
    calendar_name: str | None = None,
    location: str = "",
    description: str = "",
    url: str = "",
    all_day: bool = False,
) -> str:
    """
    Create a new event in Calendar.app.

    Args:
        summary: Event title.
        start_date: Event start.
        end_date: Event end, must not precede the start.
        calendar_name: Target calendar, defaults to the first writable one.
        location: Optional location.
        description: Optional notes.
        url: Optional URL.
        all_day: Create an all-day event.

    Returns:
        The uid of the new event.

    Raises:
        ValueError: If the end date is before the start date.
        TargetNotFoundError: If the calendar does not exist.
        AppleScriptError: If the AppleScript fails.
    """
    if end_date < start_date:
        raise ValueError("end date must not be before start date")

    script = ScriptBuilder(APP)
    script.set_date("eventStart", start_date).set_date("eventEnd", end_date)

    if calendar_name:
        script.add(f"set targetCal to calendar {quote(calendar_name)}")
    else:
        script.add("set targetCal to first calendar whose writable is true")

    props = (
        Properties()
        .text("summary", summary)
        .raw("start date", "eventStart")
        .raw("end date", "eventEnd")
        .text("location", location)
        .text("description", description)
        .text("url", url)
    )
    if all_day:
        props.raw("allday event", "true")

    script.add(
        f"set newEvent to make new event at end of events of targetCal with properties {props.render()}",
        "return uid of newEvent",
    )
    return run_applescript(script.build(), app=APP)


def delete_event(summary: str, on_date: datetime, calendar_name: str | None = None) -> int:
    """
    Delete events with an exact title starting on a given day.

    Returns:
        Number of events deleted.

    Raises:
        TargetNotFoundError: If no event matches.
        AppleScriptError: If the AppleScript fails.
    """
    start, end = day_bounds(on_date)
    script = ScriptBuilder(APP)
    script.set_date("dayStart", start).set_date("dayEnd", end)

    if calendar_name:
        calendars_ref = "{" + f"calendar {quote(calendar_name)}" + "}"
    else:
        calendars_ref = "calendars"
    condition = whose(equals("summary", summary), "start date >= dayStart", "start date < dayEnd")

    script.add("set deleted to 0")
    with script.block(f"repeat with cal in {calendars_ref}", "end repeat"):
        script.add(f"set matches to (every event of cal {condition})")
        with script.block("repeat with ev in matches", "end repeat"):
            script.add("delete ev", "set deleted to deleted + 1")
    script.add(
        f"if deleted is 0 then {not_found('Event', summary)}",
        "return deleted",
    )
    return int(run_applescript(script.build(), app=APP))
