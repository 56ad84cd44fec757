"""Contacts.app write actions."""

from pocket.applescript import Properties, ScriptBuilder, quote, run_applescript
from pocket.contacts.contacts import APP


def split_name(full_name: str) -> tuple[str, str]:
    """Split a full name into first name and the rest."""
    first, _, last = full_name.strip().partition(" ")
    return first, last.strip()


def create_contact(
    name: str,
    company: str = "",
    email: str = "",
    phone: str = "",
    note: str = "",
) -> str:
    """
    Create a person in Contacts.app.

    Args:
        name: Full name, split at the first space into first/last name.
        company: Optional organization.
        email: Optional work email.
        phone: Optional mobile number.
        note: Optional note.

    Returns:
        The id of the new person.
    """
    first, last = split_name(name)
    if not first:
        raise ValueError("name must not be empty")

    props = (
        Properties()
        .text("first name", first)
        .text("last name", last)
        .text("organization", company)
        .text("note", note)
    )

    script = ScriptBuilder(APP)
    script.add(f"set newPerson to make new person with properties {props.render()}")
    if email:
        script.add(
            'make new email at end of emails of newPerson with properties {label:"work", value:'
            f"{quote(email)}}}"
        )
    if phone:
        script.add(
            'make new phone at end of phones of newPerson with properties {label:"mobile", value:'
            f"{quote(phone)}}}"
        )
    script.add("save", "return id of newPerson")

    return run_applescript(script.build(), app=APP)
