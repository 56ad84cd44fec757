"""Reminder list retrieval from Apple Reminders.app."""

from dataclasses import dataclass

from pocket.applescript import Field, RecordSchema, ScriptBuilder, run_applescript
from pocket.applescript.parsing import parse_int

APP = "Reminders"

# Reminders.app is a Catalyst app and slow to answer AppleScript
REMINDERS_TIMEOUT = 60

LIST_SCHEMA = RecordSchema(
    "reminder_list",
    (
        Field("id", "id of {item}"),
        Field("name", "name of {item}"),
        Field("count", "count of (reminders of {item} whose completed is false)", kind="number"),
    ),
)

LIST_SCHEMA_NO_COUNTS = RecordSchema(
    "reminder_list",
    (
        Field("id", "id of {item}"),
        Field("name", "name of {item}"),
        Field("count", "0", kind="number"),
    ),
)


@dataclass(frozen=True)
class ReminderList:
    """Represents a reminder list from Reminders.app."""

    id: str
    name: str
    count: int  # Number of incomplete reminders, 0 when not counted

    def __str__(self) -> str:
        return f"{self.name} ({self.count} items)"


def get_lists(include_counts: bool = False) -> list[ReminderList]:
    """
    Get all reminder lists from Reminders.app.

    Args:
        include_counts: If True, include incomplete reminder counts (slower).
                        If False, count will be 0 for all lists (faster).

    Returns:
        List of ReminderList objects.

    Raises:
        AppNotRunningError: If Reminders.app is not running.
        AppleScriptError: If the AppleScript fails.
    """
    schema = LIST_SCHEMA if include_counts else LIST_SCHEMA_NO_COUNTS

    script = ScriptBuilder(APP, schema=schema)
    script.add('set output to ""')
    with script.block("repeat with aList in lists", "end repeat"):
        script.emit_record("aList")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=REMINDERS_TIMEOUT)

    return [
        ReminderList(id=rec["id"], name=rec["name"], count=parse_int(rec["count"]))
        for rec in schema.decode(result)
    ]
