"""Mail.app integration."""

from pocket.mail.accounts import Mailbox, MailAccount, get_accounts, get_mailboxes, get_unread_count
from pocket.mail.actions import flag_message, mark_as_read, send_message
from pocket.mail.messages import (
    EmailMessage,
    get_message,
    get_messages,
    search_messages,
)

__all__ = [
    "MailAccount",
    "Mailbox",
    "EmailMessage",
    "get_accounts",
    "get_mailboxes",
    "get_unread_count",
    "get_messages",
    "get_message",
    "search_messages",
    "send_message",
    "mark_as_read",
    "flag_message",
]
