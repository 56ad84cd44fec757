"""Calendar retrieval from Apple Calendar.app."""

from dataclasses import dataclass

from pocket.applescript import Field, RecordSchema, ScriptBuilder, run_applescript
from pocket.applescript.parsing import parse_bool

APP = "Calendar"

# Calendar.app doesn't expose a uid for calendars, the name doubles as id
CALENDAR_SCHEMA = RecordSchema(
    "calendar",
    (
        Field("name", "name of {item}"),
        Field("description", "description of {item}", optional=True),
        Field("writable", "writable of {item}", kind="bool", optional=True),
    ),
)


@dataclass(frozen=True)
class Calendar:
    """Represents a calendar from Calendar.app."""

    name: str
    description: str
    writable: bool

    def __str__(self) -> str:
        return self.name


def get_calendars() -> list[Calendar]:
    """
    Get all calendars from Calendar.app.

    Returns:
        List of Calendar objects.

    Raises:
        AppNotRunningError: If Calendar.app is not running.
        AppleScriptError: If the AppleScript fails.
    """
    script = ScriptBuilder(APP, schema=CALENDAR_SCHEMA)
    script.add('set output to ""')
    with script.block("repeat with cal in calendars", "end repeat"):
        script.emit_record("cal")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)

    return [
        Calendar(
            name=rec["name"],
            description=rec["description"],
            writable=parse_bool(rec["writable"]),
        )
        for rec in CALENDAR_SCHEMA.decode(result)
    ]
