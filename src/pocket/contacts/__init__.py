"""Contacts.app integration."""

from pocket.contacts.actions import create_contact
from pocket.contacts.contacts import (
    Address,
    Contact,
    ContactGroup,
    ContactSummary,
    LabeledValue,
    get_contact,
    get_group_members,
    list_contacts,
    list_groups,
    search_contacts,
)

__all__ = [
    "Address",
    "Contact",
    "ContactGroup",
    "ContactSummary",
    "LabeledValue",
    "list_contacts",
    "search_contacts",
    "get_contact",
    "list_groups",
    "get_group_members",
    "create_contact",
]
