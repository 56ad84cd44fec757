"""Write operations for Apple Reminders.app.

Reminders are addressed by id or by name; the first match across the
searched lists wins.
"""

from datetime import datetime

from pocket.applescript import Properties, ScriptBuilder, quote, run_applescript
from pocket.applescript.builder import not_found
from pocket.reminders.lists import APP, REMINDERS_TIMEOUT

MAX_PRIORITY = 9


def create_reminder(
    name: str,
    list_name: str = "Reminders",
    notes: str = "",
    due_date: datetime | None = None,
    priority: int = 0,
) -> str:
    """
    Create a new reminder in Reminders.app.

    Args:
        name: The reminder title.
        list_name: Name of the list to add the reminder to (default: "Reminders").
        notes: Optional notes text for the reminder.
        due_date: Optional due date for the reminder.
        priority: Priority level (0=none, 1=high, 5=medium, 9=low).

    Returns:
        The ID of the newly created reminder.

    Raises:
        ValueError: If priority is outside 0-9.
        TargetNotFoundError: If the list does not exist.
        AppleScriptError: If the AppleScript fails.
    """
    if not 0 <= priority <= MAX_PRIORITY:
        raise ValueError(f"priority must be between 0 and {MAX_PRIORITY}")

    script = ScriptBuilder(APP)
    props = Properties().text("name", name).text("body", notes)
    if priority:
        props.raw("priority", str(priority))
    if due_date:
        script.set_date("dueDate", due_date)
        props.raw("due date", "dueDate")

    script.add(
        f"set newReminder to make new reminder at list {quote(list_name)} with properties {props.render()}",
        "return id of newReminder",
    )

    return run_applescript(script.build(), app=APP, timeout=REMINDERS_TIMEOUT)


def _locate(script: ScriptBuilder, identifier: str, list_name: str | None) -> None:
    """Bind ``target`` to the reminder matching an id or name, or raise."""
    lists_ref = "{" + f"list {quote(list_name)}" + "}" if list_name else "lists"
    needle = quote(identifier)
    script.add("set target to missing value")
    with script.block(f"repeat with aList in {lists_ref}", "end repeat"):
        script.add(f"set hits to (reminders of aList whose id is {needle} or name is {needle})")
        with script.block("if (count of hits) > 0 then", "end if"):
            script.add("set target to item 1 of hits", "exit repeat")
    script.add(f"if target is missing value then {not_found('Reminder', identifier)}")


def set_completed(identifier: str, completed: bool = True, list_name: str | None = None) -> str:
    """
    Mark a reminder as completed or not completed.

    Args:
        identifier: The reminder's ID or exact name.
        completed: New completion state.
        list_name: Restrict the search to this list.

    Returns:
        The name of the updated reminder.

    Raises:
        TargetNotFoundError: If no reminder matches.
        AppleScriptError: If the AppleScript fails.
    """
    script = ScriptBuilder(APP)
    _locate(script, identifier, list_name)
    script.add(
        f"set completed of target to {'true' if completed else 'false'}",
        "return name of target",
    )
    return run_applescript(script.build(), app=APP, timeout=REMINDERS_TIMEOUT)


def complete_reminder(identifier: str, list_name: str | None = None) -> str:
    """Mark a reminder as completed."""
    return set_completed(identifier, True, list_name)


def uncomplete_reminder(identifier: str, list_name: str | None = None) -> str:
    """Mark a completed reminder as incomplete again."""
    return set_completed(identifier, False, list_name)


def delete_reminder(identifier: str, list_name: str | None = None) -> str:
    """
    Delete a reminder by id or name.

    Returns:
        The name of the deleted reminder.

    Raises:
        TargetNotFoundError: If no reminder matches.
    """
    script = ScriptBuilder(APP)
    _locate(script, identifier, list_name)
    script.add("set targetName to name of target", "delete target", "return targetName")
    return run_applescript(script.build(), app=APP, timeout=REMINDERS_TIMEOUT)
