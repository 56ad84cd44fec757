"""Apple Reminders.app integration."""

from pocket.reminders.actions import (
    complete_reminder,
    create_reminder,
    delete_reminder,
    uncomplete_reminder,
)
from pocket.reminders.lists import ReminderList, get_lists
from pocket.reminders.reminders import Reminder, get_due_today, get_overdue, get_reminders

__all__ = [
    "Reminder",
    "ReminderList",
    "get_lists",
    "get_reminders",
    "get_due_today",
    "get_overdue",
    "create_reminder",
    "complete_reminder",
    "uncomplete_reminder",
    "delete_reminder",
]
