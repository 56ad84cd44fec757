"""Command-line interface for pocket."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from pocket.applescript import AppleScriptError, check_platform, configure_runner
from pocket.config import Settings
from pocket.logging import get_integration_logger, setup_logging
from pocket.output import OutputFormat, console, print_error, print_result

app = typer.Typer(
    name="pocket",
    help="Drive macOS Calendar, Mail, Contacts, Notes, Reminders, Finder and Safari from the terminal",
    no_args_is_help=True,
)

# Sub-command groups
calendar_app = typer.Typer(help="Calendar.app events", no_args_is_help=True)
reminders_app = typer.Typer(help="Reminders.app lists and reminders", no_args_is_help=True)
mail_app = typer.Typer(help="Mail.app accounts and messages", no_args_is_help=True)
contacts_app = typer.Typer(help="Contacts.app cards and groups", no_args_is_help=True)
notes_app = typer.Typer(help="Notes.app notes and folders", no_args_is_help=True)
finder_app = typer.Typer(help="Finder files, tags and Spotlight", no_args_is_help=True)
safari_app = typer.Typer(help="Safari tabs, bookmarks and history", no_args_is_help=True)

app.add_typer(calendar_app, name="calendar")
app.add_typer(reminders_app, name="reminders")
app.add_typer(mail_app, name="mail")
app.add_typer(contacts_app, name="contacts")
app.add_typer(notes_app, name="notes")
app.add_typer(finder_app, name="finder")
app.add_typer(safari_app, name="safari")


@dataclass
class CliState:
    """Per-invocation state shared with subcommands through ``ctx.obj``."""

    settings: Settings
    output_format: OutputFormat


def get_settings() -> Settings:
    """Load application settings."""
    return Settings()


def _state(ctx: typer.Context) -> CliState:
    if not isinstance(ctx.obj, CliState):
        settings = get_settings()
        ctx.obj = CliState(settings=settings, output_format=settings.output_format)
    return ctx.obj


def _fail(ctx: typer.Context, integration: str, error: AppleScriptError) -> NoReturn:
    """Render a classified error, log it and exit with status 1."""
    get_integration_logger(integration).error("%s: %s", error.kind.value, error.message)
    print_error(error, _state(ctx).output_format)
    raise typer.Exit(1)


def _run(
    ctx: typer.Context,
    integration: str,
    operation: Callable[[], Any],
    *,
    columns: Sequence[str] | None = None,
    title: str | None = None,
) -> None:
    """Run an integration operation and print its result or its error."""
    try:
        result = operation()
    except AppleScriptError as e:
        _fail(ctx, integration, e)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    print_result(result, _state(ctx).output_format, columns=columns, title=title)


def _gate(ctx: typer.Context, integration: str) -> None:
    try:
        check_platform()
    except AppleScriptError as e:
        _fail(ctx, integration, e)


def _parse_date(value: str, option: str) -> datetime:
    from pocket.applescript.dates import parse_user_date

    try:
        return parse_user_date(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=option) from e


def _split_addresses(value: str | None) -> list[str]:
    from pocket.applescript.parsing import split_list

    return split_list(value) if value else []


def _limit(ctx: typer.Context, limit: int | None) -> int:
    return limit if limit is not None else _state(ctx).settings.default_limit


LimitOption = Annotated[int | None, typer.Option("--limit", "-n", min=1, help="Maximum number of results")]


@app.callback()
def main(
    ctx: typer.Context,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: json or table"),
    ] = None,
) -> None:
    """Configure settings, logging and the AppleScript runner."""
    settings = get_settings()
    fmt = output_format or settings.output_format
    if fmt not in ("json", "table"):
        raise typer.BadParameter("must be 'json' or 'table'", param_hint="--format")

    setup_logging(
        log_dir=settings.log_dir,
        log_level=settings.log_level,
        max_bytes=settings.log_rotation_size_mb * 1024 * 1024,
        backup_count=settings.log_backup_count,
    )
    configure_runner(executable=settings.osascript_path, timeout=settings.applescript_timeout)
    ctx.obj = CliState(settings=settings, output_format=fmt)


@app.command()
def version() -> None:
    """Show version information."""
    from pocket import __version__

    console.print(f"pocket v{__version__}")


@app.command()
def init(
    config_dir: Annotated[
        Path | None,
        typer.Option("--config-dir", "-c", help="Configuration directory"),
    ] = None,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config.yaml")] = False,
) -> None:
    """Initialize the configuration directory with an example config.yaml."""
    from pocket.config import EXAMPLE_CONFIG, save_config_file

    settings = get_settings()
    if config_dir:
        settings.config_dir = config_dir

    settings.ensure_config_dir()

    if settings.config_path.exists() and not force:
        console.print(f"[yellow]Exists[/yellow] {settings.config_path} (use --force to overwrite)")
        return

    save_config_file(settings.config_path, EXAMPLE_CONFIG)
    console.print(f"[green]Created[/green] {settings.config_path}")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show effective settings and the values set in config.yaml."""
    from pocket.config import load_config_file

    state = _state(ctx)
    settings = state.settings
    print_result(
        {
            "config_file": settings.config_path,
            "file_values": load_config_file(settings.config_path),
            "settings": settings.model_dump(),
        },
        state.output_format,
    )


# === Calendar Commands ===

EVENT_COLUMNS = ("summary", "start_date", "end_date", "calendar_name", "location")


@calendar_app.callback()
def calendar_main(ctx: typer.Context) -> None:
    _gate(ctx, "calendar")


@calendar_app.command("calendars")
def calendar_calendars(ctx: typer.Context) -> None:
    """List all calendars."""
    from pocket.calendar import get_calendars

    _run(ctx, "calendar", get_calendars, title="Calendars")


@calendar_app.command("today")
def calendar_today(
    ctx: typer.Context,
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
) -> None:
    """Show today's events."""
    from pocket.calendar import get_events_today

    _run(ctx, "calendar", lambda: get_events_today(calendar), columns=EVENT_COLUMNS, title="Today")


@calendar_app.command("week")
def calendar_week(
    ctx: typer.Context,
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
) -> None:
    """Show events for the rest of this week."""
    from pocket.calendar import get_events_this_week

    _run(ctx, "calendar", lambda: get_events_this_week(calendar), columns=EVENT_COLUMNS, title="This week")


@calendar_app.command("events")
def calendar_events(
    ctx: typer.Context,
    days: Annotated[int, typer.Option("--days", "-d", min=1, help="Number of days from today")] = 7,
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
) -> None:
    """Show events in the next N days."""
    from pocket.calendar import get_events_for_days

    _run(ctx, "calendar", lambda: get_events_for_days(days, calendar), columns=EVENT_COLUMNS)


@calendar_app.command("upcoming")
def calendar_upcoming(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Maximum number of events")] = 10,
    days: Annotated[int, typer.Option("--days", "-d", min=1, help="How far ahead to look")] = 30,
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
) -> None:
    """Show the next upcoming events."""
    from pocket.calendar import get_upcoming_events

    _run(
        ctx,
        "calendar",
        lambda: get_upcoming_events(limit=limit, days=days, calendar_name=calendar),
        columns=EVENT_COLUMNS,
        title="Upcoming",
    )


@calendar_app.command("search")
def calendar_search(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Text contained in the event title")],
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
) -> None:
    """Search events by title."""
    from pocket.calendar import find_events

    _run(ctx, "calendar", lambda: find_events(title, calendar), columns=EVENT_COLUMNS)


@calendar_app.command("create")
def calendar_create(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Event title")],
    start: Annotated[str, typer.Option("--start", "-s", help="Start, e.g. '2025-03-01 14:00' or 'tomorrow'")],
    end: Annotated[str, typer.Option("--end", "-e", help="End date and time")],
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
    location: Annotated[str, typer.Option("--location", "-l", help="Location")] = "",
    notes: Annotated[str, typer.Option("--notes", help="Event notes")] = "",
    url: Annotated[str, typer.Option("--url", help="Event URL")] = "",
    all_day: Annotated[bool, typer.Option("--all-day", help="Create an all-day event")] = False,
) -> None:
    """Create a calendar event."""
    from pocket.calendar import create_event

    start_date = _parse_date(start, "--start")
    end_date = _parse_date(end, "--end")
    calendar = calendar or _state(ctx).settings.default_calendar
    get_integration_logger("calendar").info("Creating event %r at %s", title, start_date.isoformat())

    def operation() -> dict[str, Any]:
        uid = create_event(
            title,
            start_date,
            end_date,
            calendar_name=calendar,
            location=location,
            description=notes,
            url=url,
            all_day=all_day,
        )
        return {"id": uid, "summary": title, "start_date": start_date, "end_date": end_date}

    _run(ctx, "calendar", operation)


@calendar_app.command("delete")
def calendar_delete(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Exact event title")],
    on_date: Annotated[str, typer.Option("--date", "-d", help="Day the event starts on")],
    calendar: Annotated[str | None, typer.Option("--calendar", "-c", help="Calendar name")] = None,
) -> None:
    """Delete events with this title on a given day."""
    from pocket.calendar import delete_event

    day = _parse_date(on_date, "--date")
    get_integration_logger("calendar").info("Deleting event %r on %s", title, day.date().isoformat())
    _run(ctx, "calendar", lambda: {"deleted": delete_event(title, day, calendar), "summary": title})


# === Reminders Commands ===

REMINDER_COLUMNS = ("name", "list_name", "due_date", "priority", "completed")


@reminders_app.callback()
def reminders_main(ctx: typer.Context) -> None:
    _gate(ctx, "reminders")


@reminders_app.command("lists")
def reminders_lists(
    ctx: typer.Context,
    counts: Annotated[bool, typer.Option("--counts", help="Include incomplete counts (slower)")] = False,
) -> None:
    """List reminder lists."""
    from pocket.reminders import get_lists

    _run(ctx, "reminders", lambda: get_lists(include_counts=counts), title="Reminder lists")


@reminders_app.command("list")
def reminders_list(
    ctx: typer.Context,
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
    completed: Annotated[bool, typer.Option("--completed", help="Show completed reminders only")] = False,
    show_all: Annotated[bool, typer.Option("--all", "-a", help="Show completed and incomplete")] = False,
    limit: LimitOption = None,
) -> None:
    """Show reminders (incomplete by default)."""
    from pocket.reminders import get_reminders

    state: bool | None = None if show_all else completed
    _run(
        ctx,
        "reminders",
        lambda: get_reminders(list_name, completed=state, limit=_limit(ctx, limit)),
        columns=REMINDER_COLUMNS,
    )


@reminders_app.command("today")
def reminders_today(
    ctx: typer.Context,
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
) -> None:
    """Show incomplete reminders due today."""
    from pocket.reminders import get_due_today

    _run(ctx, "reminders", lambda: get_due_today(list_name), columns=REMINDER_COLUMNS, title="Due today")


@reminders_app.command("overdue")
def reminders_overdue(
    ctx: typer.Context,
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
) -> None:
    """Show incomplete reminders past their due date."""
    from pocket.reminders import get_overdue

    _run(ctx, "reminders", lambda: get_overdue(list_name), columns=REMINDER_COLUMNS, title="Overdue")


@reminders_app.command("add")
def reminders_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Reminder title")],
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
    due: Annotated[str | None, typer.Option("--due", "-d", help="Due date, e.g. 'tomorrow' or '2025-03-01 09:00'")] = None,
    notes: Annotated[str, typer.Option("--notes", help="Reminder notes")] = "",
    priority: Annotated[int, typer.Option("--priority", "-p", min=0, max=9, help="0=none, 1=high, 5=medium, 9=low")] = 0,
) -> None:
    """Create a reminder."""
    from pocket.reminders import create_reminder

    due_date = _parse_date(due, "--due") if due else None
    target = list_name or _state(ctx).settings.default_reminders_list
    get_integration_logger("reminders").info("Creating reminder %r in %r", name, target)
    _run(
        ctx,
        "reminders",
        lambda: {
            "id": create_reminder(name, target, notes=notes, due_date=due_date, priority=priority),
            "name": name,
            "list_name": target,
        },
    )


@reminders_app.command("complete")
def reminders_complete(
    ctx: typer.Context,
    reminder: Annotated[str, typer.Argument(help="Reminder ID or exact name")],
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
) -> None:
    """Mark a reminder as completed."""
    from pocket.reminders import complete_reminder

    get_integration_logger("reminders").info("Completing reminder %r", reminder)
    _run(ctx, "reminders", lambda: {"name": complete_reminder(reminder, list_name), "completed": True})


@reminders_app.command("uncomplete")
def reminders_uncomplete(
    ctx: typer.Context,
    reminder: Annotated[str, typer.Argument(help="Reminder ID or exact name")],
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
) -> None:
    """Mark a reminder as not completed."""
    from pocket.reminders import uncomplete_reminder

    get_integration_logger("reminders").info("Reopening reminder %r", reminder)
    _run(ctx, "reminders", lambda: {"name": uncomplete_reminder(reminder, list_name), "completed": False})


@reminders_app.command("delete")
def reminders_delete(
    ctx: typer.Context,
    reminder: Annotated[str, typer.Argument(help="Reminder ID or exact name")],
    list_name: Annotated[str | None, typer.Option("--list", "-l", help="Reminder list name")] = None,
) -> None:
    """Delete a reminder."""
    from pocket.reminders import delete_reminder

    get_integration_logger("reminders").info("Deleting reminder %r", reminder)
    _run(ctx, "reminders", lambda: {"deleted": delete_reminder(reminder, list_name)})


# === Mail Commands ===

MESSAGE_COLUMNS = ("id", "date_received", "sender", "subject", "is_read", "mailbox")


@mail_app.callback()
def mail_main(ctx: typer.Context) -> None:
    _gate(ctx, "mail")


@mail_app.command("accounts")
def mail_accounts(ctx: typer.Context) -> None:
    """List mail accounts."""
    from pocket.mail import get_accounts

    _run(ctx, "mail", get_accounts, columns=("name", "account_type", "enabled", "email_addresses"))


@mail_app.command("mailboxes")
def mail_mailboxes(
    ctx: typer.Context,
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account name")] = None,
) -> None:
    """List mailboxes with unread counts."""
    from pocket.mail import get_mailboxes

    _run(ctx, "mail", lambda: get_mailboxes(account), title="Mailboxes")


@mail_app.command("list")
def mail_list(
    ctx: typer.Context,
    mailbox: Annotated[str, typer.Option("--mailbox", "-m", help="Mailbox name")] = "INBOX",
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account name")] = None,
    limit: LimitOption = None,
    unread: Annotated[bool, typer.Option("--unread", "-u", help="Only unread messages")] = False,
) -> None:
    """List messages in a mailbox."""
    from pocket.mail import get_messages

    _run(
        ctx,
        "mail",
        lambda: get_messages(mailbox, account, limit=_limit(ctx, limit), unread_only=unread),
        columns=MESSAGE_COLUMNS,
    )


@mail_app.command("read")
def mail_read(
    ctx: typer.Context,
    message_id: Annotated[str, typer.Argument(help="Numeric Mail.app message ID")],
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account to search")] = None,
) -> None:
    """Show a message with its plain-text body."""
    from pocket.mail import get_message

    _run(ctx, "mail", lambda: get_message(message_id, account))


@mail_app.command("search")
def mail_search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text in the subject or sender")],
    mailbox: Annotated[str, typer.Option("--mailbox", "-m", help="Mailbox name")] = "INBOX",
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account name")] = None,
    limit: LimitOption = None,
) -> None:
    """Search messages by subject or sender."""
    from pocket.mail import search_messages

    _run(
        ctx,
        "mail",
        lambda: search_messages(query, mailbox, account, limit=_limit(ctx, limit)),
        columns=MESSAGE_COLUMNS,
    )


@mail_app.command("unread")
def mail_unread(
    ctx: typer.Context,
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account name")] = None,
    mailbox: Annotated[str | None, typer.Option("--mailbox", "-m", help="Mailbox name")] = None,
) -> None:
    """Count unread messages."""
    from pocket.mail import get_unread_count

    _run(ctx, "mail", lambda: {"unread": get_unread_count(account, mailbox)})


@mail_app.command("send")
def mail_send(
    ctx: typer.Context,
    to: Annotated[str, typer.Option("--to", help="Comma-separated recipients")],
    subject: Annotated[str, typer.Option("--subject", "-s", help="Subject line")],
    body: Annotated[str, typer.Option("--body", "-b", help="Plain-text body")] = "",
    cc: Annotated[str | None, typer.Option("--cc", help="Comma-separated CC recipients")] = None,
    bcc: Annotated[str | None, typer.Option("--bcc", help="Comma-separated BCC recipients")] = None,
    sender: Annotated[str | None, typer.Option("--from", help="Sending address")] = None,
) -> None:
    """Send an email."""
    from pocket.mail import send_message

    recipients = _split_addresses(to)
    if not recipients:
        raise typer.BadParameter("at least one recipient is required", param_hint="--to")

    get_integration_logger("mail").info("Sending %r to %s", subject, ", ".join(recipients))

    def operation() -> dict[str, Any]:
        send_message(
            recipients,
            subject,
            body,
            cc=_split_addresses(cc),
            bcc=_split_addresses(bcc),
            sender=sender,
        )
        return {"sent": True, "to": recipients, "subject": subject}

    _run(ctx, "mail", operation)


@mail_app.command("mark-read")
def mail_mark_read(
    ctx: typer.Context,
    message_id: Annotated[str, typer.Argument(help="Numeric Mail.app message ID")],
    unread: Annotated[bool, typer.Option("--unread", help="Mark as unread instead")] = False,
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account to search")] = None,
) -> None:
    """Mark a message as read or unread."""
    from pocket.mail import mark_as_read

    def operation() -> dict[str, Any]:
        mark_as_read(message_id, read=not unread, account=account)
        return {"id": message_id, "is_read": not unread}

    _run(ctx, "mail", operation)


@mail_app.command("flag")
def mail_flag(
    ctx: typer.Context,
    message_id: Annotated[str, typer.Argument(help="Numeric Mail.app message ID")],
    unflag: Annotated[bool, typer.Option("--unflag", help="Remove the flag instead")] = False,
    account: Annotated[str | None, typer.Option("--account", "-a", help="Account to search")] = None,
) -> None:
    """Flag or unflag a message."""
    from pocket.mail import flag_message

    def operation() -> dict[str, Any]:
        flag_message(message_id, flagged=not unflag, account=account)
        return {"id": message_id, "is_flagged": not unflag}

    _run(ctx, "mail", operation)


# === Contacts Commands ===


@contacts_app.callback()
def contacts_main(ctx: typer.Context) -> None:
    _gate(ctx, "contacts")


@contacts_app.command("list")
def contacts_list(ctx: typer.Context, limit: LimitOption = None) -> None:
    """List contacts."""
    from pocket.contacts import list_contacts

    _run(ctx, "contacts", lambda: list_contacts(_limit(ctx, limit)), title="Contacts")


@contacts_app.command("search")
def contacts_search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text in the name or company")],
    limit: LimitOption = None,
) -> None:
    """Search contacts by name or company."""
    from pocket.contacts import search_contacts

    _run(ctx, "contacts", lambda: search_contacts(query, _limit(ctx, limit)))


@contacts_app.command("show")
def contacts_show(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Full name of the contact")],
    groups: Annotated[bool, typer.Option("--groups/--no-groups", help="Look up group membership")] = True,
) -> None:
    """Show a contact card."""
    from pocket.contacts import get_contact

    _run(ctx, "contacts", lambda: get_contact(name, include_groups=groups))


@contacts_app.command("groups")
def contacts_groups(ctx: typer.Context) -> None:
    """List contact groups."""
    from pocket.contacts import list_groups

    _run(ctx, "contacts", list_groups, title="Groups")


@contacts_app.command("members")
def contacts_members(
    ctx: typer.Context,
    group: Annotated[str, typer.Argument(help="Group name")],
) -> None:
    """List the members of a group."""
    from pocket.contacts import get_group_members

    _run(ctx, "contacts", lambda: get_group_members(group), title=group)


@contacts_app.command("create")
def contacts_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Full name")],
    company: Annotated[str, typer.Option("--company", "-c", help="Organization")] = "",
    email: Annotated[str, typer.Option("--email", "-e", help="Work email")] = "",
    phone: Annotated[str, typer.Option("--phone", "-p", help="Mobile phone")] = "",
    note: Annotated[str, typer.Option("--note", help="Note")] = "",
) -> None:
    """Create a contact."""
    from pocket.contacts import create_contact

    get_integration_logger("contacts").info("Creating contact %r", name)
    _run(
        ctx,
        "contacts",
        lambda: {"id": create_contact(name, company=company, email=email, phone=phone, note=note), "name": name},
    )


# === Notes Commands ===

NOTE_COLUMNS = ("name", "folder", "modified")


@notes_app.callback()
def notes_main(ctx: typer.Context) -> None:
    _gate(ctx, "notes")


@notes_app.command("list")
def notes_list(
    ctx: typer.Context,
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Folder name")] = None,
    limit: LimitOption = None,
) -> None:
    """List notes, most recently modified first."""
    from pocket.notes import list_notes

    _run(ctx, "notes", lambda: list_notes(folder, _limit(ctx, limit)), columns=NOTE_COLUMNS)


@notes_app.command("folders")
def notes_folders(ctx: typer.Context) -> None:
    """List note folders."""
    from pocket.notes import get_folders

    _run(ctx, "notes", get_folders, title="Folders")


@notes_app.command("read")
def notes_read(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Note title")],
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Folder name")] = None,
) -> None:
    """Show a note with its plain-text body."""
    from pocket.notes import read_note

    _run(ctx, "notes", lambda: read_note(name, folder))


@notes_app.command("search")
def notes_search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text in the title or body")],
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Folder name")] = None,
    limit: LimitOption = None,
) -> None:
    """Search notes."""
    from pocket.notes import search_notes

    _run(ctx, "notes", lambda: search_notes(query, folder, _limit(ctx, limit)), columns=NOTE_COLUMNS)


@notes_app.command("create")
def notes_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Note title")],
    body: Annotated[str, typer.Option("--body", "-b", help="Plain-text body")] = "",
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Folder name")] = None,
) -> None:
    """Create a note."""
    from pocket.notes import create_note

    folder = folder or _state(ctx).settings.default_notes_folder
    get_integration_logger("notes").info("Creating note %r", name)
    _run(ctx, "notes", lambda: {"id": create_note(name, body, folder), "name": name})


@notes_app.command("append")
def notes_append(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Note title")],
    text: Annotated[str, typer.Argument(help="Plain text to append")],
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Folder name")] = None,
) -> None:
    """Append text to a note."""
    from pocket.notes import append_to_note

    get_integration_logger("notes").info("Appending to note %r", name)
    _run(ctx, "notes", lambda: {"name": append_to_note(name, text, folder), "appended": True})


# === Finder Commands ===


@finder_app.callback()
def finder_main(ctx: typer.Context) -> None:
    _gate(ctx, "finder")


@finder_app.command("open")
def finder_open(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
    application: Annotated[str | None, typer.Option("--app", "-a", help="Application to open with")] = None,
) -> None:
    """Open a file or folder."""
    from pocket.finder import open_path

    _run(ctx, "finder", lambda: {"opened": open_path(path, application)})


@finder_app.command("reveal")
def finder_reveal(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
) -> None:
    """Reveal a file in a Finder window."""
    from pocket.finder import reveal

    _run(ctx, "finder", lambda: {"revealed": reveal(path)})


@finder_app.command("trash")
def finder_trash(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
) -> None:
    """Move a file or folder to the Trash."""
    from pocket.finder import move_to_trash

    get_integration_logger("finder").info("Moving %s to Trash", path)
    _run(ctx, "finder", lambda: {"trashed": move_to_trash(path)})


@finder_app.command("info")
def finder_info(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
) -> None:
    """Show file details and tags."""
    from pocket.finder import get_info

    _run(ctx, "finder", lambda: get_info(path))


@finder_app.command("ls")
def finder_ls(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory")] = ".",
    show_hidden: Annotated[bool, typer.Option("--all", "-a", help="Include hidden files")] = False,
) -> None:
    """List a directory."""
    from pocket.finder import list_directory

    _run(
        ctx,
        "finder",
        lambda: list_directory(path, show_hidden),
        columns=("name", "type", "size_human", "modified"),
    )


@finder_app.command("tags")
def finder_tags(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
) -> None:
    """Show Finder tags."""
    from pocket.finder import get_tags

    _run(ctx, "finder", lambda: get_tags(path))


@finder_app.command("tag")
def finder_tag(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
    tags: Annotated[list[str], typer.Argument(help="Tags to add")],
) -> None:
    """Add Finder tags."""
    from pocket.finder import add_tag

    def operation() -> list[str]:
        current: list[str] = []
        for tag in tags:
            current = add_tag(path, tag)
        return current

    _run(ctx, "finder", operation)


@finder_app.command("untag")
def finder_untag(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or folder")],
    tags: Annotated[list[str], typer.Argument(help="Tags to remove")],
) -> None:
    """Remove Finder tags."""
    from pocket.finder import remove_tag

    def operation() -> list[str]:
        current: list[str] = []
        for tag in tags:
            current = remove_tag(path, tag)
        return current

    _run(ctx, "finder", operation)


@finder_app.command("search")
def finder_search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text in the file name")],
    kind: Annotated[str | None, typer.Option("--kind", "-k", help="app, folder, image, audio, video, pdf, document, text")] = None,
    scope: Annotated[str | None, typer.Option("--scope", "-s", help="Directory to search in")] = None,
    limit: LimitOption = None,
) -> None:
    """Search files with Spotlight."""
    from pocket.finder import search

    _run(ctx, "finder", lambda: search(query, kind, scope, _limit(ctx, limit)), columns=("name", "path"))


# === Safari Commands ===


@safari_app.callback()
def safari_main(ctx: typer.Context) -> None:
    _gate(ctx, "safari")


@safari_app.command("tabs")
def safari_tabs(
    ctx: typer.Context,
    window: Annotated[int | None, typer.Option("--window", "-w", min=1, help="Window index")] = None,
) -> None:
    """List open tabs."""
    from pocket.safari import list_tabs

    _run(ctx, "safari", lambda: list_tabs(window), title="Tabs")


@safari_app.command("current")
def safari_current(
    ctx: typer.Context,
    window: Annotated[int | None, typer.Option("--window", "-w", min=1, help="Window index")] = None,
) -> None:
    """Show the current tab."""
    from pocket.safari import current_tab

    _run(ctx, "safari", lambda: current_tab(window))


@safari_app.command("open")
def safari_open(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL (https:// is added when missing)")],
    new_window: Annotated[bool, typer.Option("--new-window", help="Open in a new window")] = False,
) -> None:
    """Open a URL."""
    from pocket.safari import open_url

    _run(ctx, "safari", lambda: open_url(url, new_window))


@safari_app.command("close")
def safari_close(
    ctx: typer.Context,
    window: Annotated[int | None, typer.Option("--window", "-w", min=1, help="Window index")] = None,
    index: Annotated[int | None, typer.Option("--index", "-i", min=1, help="Tab index")] = None,
    close_window: Annotated[bool, typer.Option("--close-window", help="Close the whole window")] = False,
) -> None:
    """Close a tab (the current one by default)."""
    from pocket.safari import close_tab

    _run(ctx, "safari", lambda: {"closed": close_tab(window, index, close_window)})


@safari_app.command("bookmarks")
def safari_bookmarks(
    ctx: typer.Context,
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Bookmark folder title")] = None,
    limit: LimitOption = None,
) -> None:
    """List bookmarks."""
    from pocket.safari import get_bookmarks
    from pocket.safari.library import BOOKMARKS_BAR

    _run(ctx, "safari", lambda: get_bookmarks(folder or BOOKMARKS_BAR, limit), title="Bookmarks")


@safari_app.command("reading-list")
def safari_reading_list(ctx: typer.Context, limit: LimitOption = None) -> None:
    """List Reading List items."""
    from pocket.safari import get_reading_list

    _run(ctx, "safari", lambda: get_reading_list(limit), columns=("title", "url", "date_added"))


@safari_app.command("read-later")
def safari_read_later(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL to save")],
    title: Annotated[str | None, typer.Option("--title", "-t", help="Title to store")] = None,
) -> None:
    """Add a page to the Reading List."""
    from pocket.safari import add_to_reading_list

    _run(ctx, "safari", lambda: {"added": add_to_reading_list(url, title)})


@safari_app.command("history")
def safari_history(
    ctx: typer.Context,
    days: Annotated[int, typer.Option("--days", "-d", min=1, help="How far back to look")] = 7,
    search: Annotated[str | None, typer.Option("--search", "-s", help="Text in the title or URL")] = None,
    limit: LimitOption = None,
) -> None:
    """Show browsing history."""
    from pocket.safari import get_history

    _run(ctx, "safari", lambda: get_history(days, search, _limit(ctx, limit)), columns=("visit_time", "title", "url"))


if __name__ == "__main__":
    app()
