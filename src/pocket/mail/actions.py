"""Mail.app write actions: send, mark read, flag."""

from pocket.applescript import Properties, ScriptBuilder, quote, run_applescript
from pocket.mail.accounts import APP
from pocket.mail.messages import locate_message

_RECIPIENT_KINDS = ("to", "cc", "bcc")


def send_message(
    to: list[str],
    subject: str,
    body: str,
    *,
    cc: list[str] | None = None,
    bcc: list[str] | None = None,
    sender: str | None = None,
) -> None:
    """
    Compose and send a message.

    Args:
        to: Recipient addresses (at least one).
        subject: Subject line.
        body: Plain-text body.
        cc: Carbon-copy addresses.
        bcc: Blind-copy addresses.
        sender: Sending address or account, Mail's default when omitted.

    Raises:
        ValueError: If there are no recipients.
        AppleScriptError: If Mail refuses the message.
    """
    if not to:
        raise ValueError("at least one recipient is required")

    props = Properties().text("subject", subject).text("content", body).raw("visible", "false").text("sender", sender)

    script = ScriptBuilder(APP)
    script.add(f"set newMessage to make new outgoing message with properties {props.render()}")
    with script.block("tell newMessage", "end tell"):
        for kind, addresses in zip(_RECIPIENT_KINDS, (to, cc or [], bcc or [])):
            for address in addresses:
                script.add(
                    f"make new {kind} recipient at end of {kind} recipients "
                    f"with properties {{address:{quote(address)}}}"
                )
    script.add("send newMessage", 'return "sent"')

    run_applescript(script.build(), app=APP)


def mark_as_read(message_id: str, *, read: bool = True, account: str | None = None) -> None:
    """Mark a message as read or unread."""
    script = ScriptBuilder(APP)
    locate_message(script, message_id, account)
    script.add(f"set read status of foundMsg to {'true' if read else 'false'}")
    run_applescript(script.build(), app=APP, timeout=120)


def flag_message(message_id: str, *, flagged: bool = True, account: str | None = None) -> None:
    """Flag or unflag a message."""
    script = ScriptBuilder(APP)
    locate_message(script, message_id, account)
    script.add(f"set flagged status of foundMsg to {'true' if flagged else 'false'}")
    run_applescript(script.build(), app=APP, timeout=120)
