"""Mail.app account and mailbox listing."""

from dataclasses import dataclass, field

from pocket.applescript import Field, RecordSchema, ScriptBuilder, quote, run_applescript
from pocket.applescript.parsing import parse_bool, parse_int

APP = "Mail"

ACCOUNT_SCHEMA = RecordSchema(
    "mail_account",
    (
        Field("name", "name of {item}"),
        Field("id", "id of {item}"),
        Field("emails", "email addresses of {item}", kind="pairs", parts=("{entry}",), optional=True),
        Field("enabled", "enabled of {item}", kind="bool"),
        Field("type", "(account type of {item}) as text", optional=True),
    ),
)

MAILBOX_SCHEMA = RecordSchema(
    "mailbox",
    (
        Field("name", "name of {item}"),
        Field("account", "acctName"),
        Field("unread", "unread count of {item}", kind="number", optional=True),
    ),
)


@dataclass(frozen=True)
class MailAccount:
    """Represents a Mail.app email account."""

    name: str
    id: str
    enabled: bool
    account_type: str
    email_addresses: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Mailbox:
    """A mailbox and its unread count."""

    name: str
    account: str
    unread_count: int


def get_accounts() -> list[MailAccount]:
    """
    Retrieve all configured email accounts from Mail.app.

    Returns:
        List of MailAccount objects representing each account.
    """
    script = ScriptBuilder(APP, schema=ACCOUNT_SCHEMA)
    script.add('set output to ""')
    with script.block("repeat with acct in accounts", "end repeat"):
        script.emit_record("acct")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)

    return [
        MailAccount(
            name=rec["name"],
            id=rec["id"],
            enabled=parse_bool(rec["enabled"]),
            account_type=rec["type"],
            email_addresses=[parts[0] for parts in ACCOUNT_SCHEMA.sublist(rec["emails"])],
        )
        for rec in ACCOUNT_SCHEMA.decode(result)
    ]


def get_mailboxes(account_name: str | None = None) -> list[Mailbox]:
    """
    List mailboxes, for one account or all of them.

    Raises:
        TargetNotFoundError: If the account does not exist.
    """
    accounts_ref = "{" + f"account {quote(account_name)}" + "}" if account_name else "accounts"

    script = ScriptBuilder(APP, schema=MAILBOX_SCHEMA)
    script.add('set output to ""')
    with script.block(f"repeat with acct in {accounts_ref}", "end repeat"):
        script.add("set acctName to name of acct")
        with script.block("repeat with mbox in mailboxes of acct", "end repeat"):
            script.emit_record("mbox")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=60)

    return [
        Mailbox(name=rec["name"], account=rec["account"], unread_count=parse_int(rec["unread"]))
        for rec in MAILBOX_SCHEMA.decode(result)
    ]


def get_unread_count(account_name: str | None = None, mailbox: str | None = None) -> int:
    """Total unread messages, optionally narrowed to an account and mailbox."""
    boxes = get_mailboxes(account_name)
    if mailbox:
        boxes = [b for b in boxes if b.name.lower() == mailbox.lower()]
    return sum(b.unread_count for b in boxes)
