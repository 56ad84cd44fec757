"""Reminder retrieval from Apple Reminders.app.

Performance Note:
    Reminders.app is a Catalyst app (iPad app running on macOS), which makes
    AppleScript interactions extremely slow. Lists with thousands of items
    may time out; pass a list name where possible.
"""

from dataclasses import dataclass
from datetime import datetime

from pocket.applescript import Field, RecordSchema, ScriptBuilder, quote, run_applescript, whose
from pocket.applescript.dates import day_bounds, parse_applescript_date
from pocket.applescript.parsing import parse_bool, parse_int
from pocket.reminders.lists import APP, REMINDERS_TIMEOUT

REMINDER_SCHEMA = RecordSchema(
    "reminder",
    (
        Field("id", "id of {item}"),
        Field("name", "name of {item}"),
        Field("completed", "completed of {item}", kind="bool"),
        Field("priority", "priority of {item}", kind="number"),
        Field("due", "due date of {item}", kind="date", optional=True),
        Field("notes", "body of {item}", optional=True),
        Field("list", "listName"),
    ),
)


@dataclass(frozen=True)
class Reminder:
    """Represents a reminder from Reminders.app."""

    name: str
    completed: bool
    priority: int  # 0=none, 1-4=high, 5=medium, 6-9=low
    due_date: datetime | None
    notes: str = ""
    id: str = ""
    list_name: str = ""

    @property
    def priority_label(self) -> str:
        """Human-readable priority label."""
        if self.priority == 0:
            return "none"
        elif self.priority <= 4:
            return "high"
        elif self.priority == 5:
            return "medium"
        else:
            return "low"

    @property
    def is_overdue(self) -> bool:
        return not self.completed and self.due_date is not None and self.due_date < datetime.now()

    def __str__(self) -> str:
        status = "[x]" if self.completed else "[ ]"
        due = f" (due {self.due_date.strftime('%Y-%m-%d')})" if self.due_date else ""
        return f"{status} {self.name}{due}"


def reminders_from_records(records: list[dict[str, str]], list_name: str = "") -> list[Reminder]:
    """Map decoded reminder records to Reminder objects."""
    return [
        Reminder(
            id=rec.get("id", ""),
            name=rec.get("name", ""),
            completed=parse_bool(rec.get("completed")),
            priority=parse_int(rec.get("priority")),
            due_date=parse_applescript_date(rec.get("due", "")),
            notes=rec.get("notes", ""),
            list_name=rec.get("list") or list_name,
        )
        for rec in records
    ]


def _query(list_name: str | None, condition: str, limit: int, script: ScriptBuilder | None = None) -> list[Reminder]:
    script = script or ScriptBuilder(APP, schema=REMINDER_SCHEMA)
    lists_ref = "{" + f"list {quote(list_name)}" + "}" if list_name else "lists"

    script.add('set output to ""', "set found to 0")
    with script.block(f"repeat with aList in {lists_ref}", "end repeat"):
        script.add(f"if found >= {limit} then exit repeat", "set listName to name of aList")
        with script.block(f"repeat with r in (reminders of aList {condition})", "end repeat"):
            script.add(f"if found >= {limit} then exit repeat", "set found to found + 1")
            script.emit_record("r")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=REMINDERS_TIMEOUT)
    return reminders_from_records(REMINDER_SCHEMA.decode(result), list_name or "")


def get_reminders(
    list_name: str | None = None,
    completed: bool | None = False,
    limit: int = 100,
) -> list[Reminder]:
    """
    Get reminders from Reminders.app.

    Args:
        list_name: Filter to specific list, or None for all lists.
        completed: True=completed only, False=incomplete only, None=all.
        limit: Maximum number of reminders to retrieve.

    Returns:
        List of Reminder objects.

    Raises:
        TargetNotFoundError: If the list does not exist.
        AppNotRunningError: If Reminders.app is not running.
        AppleScriptError: If the AppleScript fails.
    """
    if completed is None:
        condition = ""
    else:
        condition = whose(f"completed is {'true' if completed else 'false'}")
    return _query(list_name, condition, limit)


def get_due_today(list_name: str | None = None, limit: int = 100) -> list[Reminder]:
    """Incomplete reminders due today."""
    start, end = day_bounds(datetime.now())
    script = ScriptBuilder(APP, schema=REMINDER_SCHEMA)
    script.set_date("dayStart", start).set_date("dayEnd", end)
    condition = whose("completed is false", "due date >= dayStart", "due date < dayEnd")
    return _query(list_name, condition, limit, script)


def get_overdue(list_name: str | None = None, limit: int = 100) -> list[Reminder]:
    """Incomplete reminders whose due date has passed."""
    script = ScriptBuilder(APP, schema=REMINDER_SCHEMA)
    script.set_date("rightNow", datetime.now())
    condition = whose("completed is false", "due date < rightNow")
    reminders = _query(list_name, condition, limit, script)
    return sorted(reminders, key=lambda r: r.due_date or datetime.max)
