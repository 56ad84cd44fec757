"""Mail.app message retrieval and parsing."""

from dataclasses import dataclass, field
from datetime import datetime

from pocket.applescript import Field, RecordSchema, ScriptBuilder, quote, run_applescript, whose
from pocket.applescript.builder import contains_any, not_found
from pocket.applescript.dates import parse_applescript_date
from pocket.applescript.parsing import parse_bool
from pocket.applescript.richtext import html_to_plaintext
from pocket.mail.accounts import APP

_SUMMARY_FIELDS = (
    Field("id", "id of {item}", kind="number"),
    Field("message_id", "message id of {item}", optional=True),
    Field("subject", "subject of {item}", optional=True),
    Field("sender", "sender of {item}", optional=True),
    Field("date_received", "date received of {item}", kind="date", optional=True),
    Field("read", "read status of {item}", kind="bool"),
    Field("flagged", "flagged status of {item}", kind="bool", optional=True),
    Field("mailbox", "name of mailbox of {item}", optional=True),
    Field("account", "name of account of mailbox of {item}", optional=True),
)

MESSAGE_SCHEMA = RecordSchema("mail_message", _SUMMARY_FIELDS)

MESSAGE_DETAIL_SCHEMA = RecordSchema(
    "mail_message_detail",
    _SUMMARY_FIELDS
    + (
        Field("to", "to recipients of {item}", kind="pairs", parts=("address of {entry}",), optional=True),
        Field("cc", "cc recipients of {item}", kind="pairs", parts=("address of {entry}",), optional=True),
        Field("date_sent", "date sent of {item}", kind="date", optional=True),
        Field("content", "content of {item}", optional=True),
    ),
)

# Larger mailboxes take a while to filter
MAIL_TIMEOUT = 120


@dataclass(frozen=True)
class EmailMessage:
    """Represents an email message from Mail.app."""

    id: str
    message_id: str
    subject: str
    sender: str
    date_received: datetime | None
    is_read: bool
    is_flagged: bool
    mailbox: str
    account: str
    recipients: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    date_sent: datetime | None = None
    content: str = ""

    @property
    def preview(self) -> str:
        """Get a short preview of the message content."""
        content = self.content[:200].replace("\n", " ").strip()
        return f"{content}..." if len(self.content) > 200 else content


def _addresses(schema: RecordSchema, value: str | None) -> list[str]:
    return [parts[0] for parts in schema.sublist(value or "") if parts and parts[0]]


def messages_from_records(records: list[dict[str, str]], schema: RecordSchema = MESSAGE_SCHEMA) -> list[EmailMessage]:
    """Map decoded message records to EmailMessage objects."""
    return [
        EmailMessage(
            id=rec["id"],
            message_id=rec["message_id"],
            subject=rec["subject"],
            sender=rec["sender"],
            date_received=parse_applescript_date(rec["date_received"]),
            is_read=parse_bool(rec["read"]),
            is_flagged=parse_bool(rec["flagged"]),
            mailbox=rec["mailbox"],
            account=rec["account"],
            recipients=_addresses(schema, rec.get("to")),
            cc=_addresses(schema, rec.get("cc")),
            date_sent=parse_applescript_date(rec.get("date_sent", "")),
            content=html_to_plaintext(rec.get("content", "")),
        )
        for rec in records
    ]


def _mailbox_ref(mailbox: str, account: str | None) -> str:
    if mailbox.upper() == "INBOX" and not account:
        return "inbox"
    if account:
        return f"mailbox {quote(mailbox)} of account {quote(account)}"
    return f"mailbox {quote(mailbox)}"


def _collect(source: str, condition: str, limit: int) -> list[EmailMessage]:
    script = ScriptBuilder(APP, schema=MESSAGE_SCHEMA)
    script.add('set output to ""', f"set msgList to (messages of {source} {condition})")
    script.add("set msgCount to count of msgList", f"if msgCount > {limit} then set msgCount to {limit}")
    with script.block("repeat with i from 1 to msgCount", "end repeat"):
        script.add("set msg to item i of msgList")
        script.emit_record("msg")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=MAIL_TIMEOUT)
    return messages_from_records(MESSAGE_SCHEMA.decode(result))


def get_messages(
    mailbox: str = "INBOX",
    account: str | None = None,
    limit: int = 25,
    unread_only: bool = False,
) -> list[EmailMessage]:
    """
    Retrieve message summaries from a mailbox (without bodies).

    Args:
        mailbox: Name of the mailbox (default: INBOX, the unified inbox).
        account: Specific account name, or None.
        limit: Maximum number of messages to retrieve.
        unread_only: If True, only retrieve unread messages.

    Raises:
        TargetNotFoundError: If the mailbox or account does not exist.
    """
    condition = whose("read status is false") if unread_only else ""
    return _collect(_mailbox_ref(mailbox, account), condition, limit)


def search_messages(
    query: str,
    mailbox: str = "INBOX",
    account: str | None = None,
    limit: int = 25,
) -> list[EmailMessage]:
    """Messages whose subject or sender contains ``query``."""
    condition = whose(contains_any(("subject", "sender"), query))
    return _collect(_mailbox_ref(mailbox, account), condition, limit)


def validate_message_id(message_id: str) -> str:
    """Mail ids are integers and are interpolated unquoted."""
    message_id = message_id.strip()
    if not message_id.isdigit():
        raise ValueError(f"invalid message id: {message_id!r}")
    return message_id


def locate_message(script: ScriptBuilder, message_id: str, account: str | None = None) -> None:
    """Bind ``foundMsg`` to the message with ``message_id`` or raise not found."""
    message_id = validate_message_id(message_id)
    accounts_ref = "{" + f"account {quote(account)}" + "}" if account else "accounts"

    script.add("set foundMsg to missing value")
    with script.block(f"repeat with acct in {accounts_ref}", "end repeat"):
        with script.block("repeat with mbox in mailboxes of acct", "end repeat"):
            script.add(f"set hits to (messages of mbox whose id is {message_id})")
            with script.block("if (count of hits) > 0 then", "end if"):
                script.add("set foundMsg to item 1 of hits", "exit repeat")
        script.add("if foundMsg is not missing value then exit repeat")
    script.add(f"if foundMsg is missing value then {not_found('Message', message_id)}")


def get_message(message_id: str, account: str | None = None) -> EmailMessage:
    """
    Retrieve a full message, body converted to plain text.

    Raises:
        ValueError: If the id is not numeric.
        TargetNotFoundError: If no message has this id.
    """
    script = ScriptBuilder(APP, schema=MESSAGE_DETAIL_SCHEMA)
    locate_message(script, message_id, account)
    script.add('set output to ""')
    script.emit_record("foundMsg")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=MAIL_TIMEOUT)
    record = MESSAGE_DETAIL_SCHEMA.decode_one(result)
    return messages_from_records([record], MESSAGE_DETAIL_SCHEMA)[0]
