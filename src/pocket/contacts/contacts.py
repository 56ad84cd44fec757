"""Contacts.app people and groups."""

from dataclasses import dataclass, field, replace
from datetime import date

from pocket.applescript import Field, RecordSchema, ScriptBuilder, fetch_optional, quote, run_applescript, whose
from pocket.applescript.builder import contains_any
from pocket.applescript.dates import parse_applescript_date
from pocket.applescript.parsing import clean_label, parse_int

APP = "Contacts"

SUMMARY_SCHEMA = RecordSchema(
    "contact_summary",
    (
        Field("name", "name of {item}"),
        Field("email", "value of first email of {item}", optional=True),
        Field("phone", "value of first phone of {item}", optional=True),
        Field("company", "organization of {item}", optional=True),
    ),
)

CONTACT_SCHEMA = RecordSchema(
    "contact",
    (
        Field("name", "name of {item}"),
        Field("first_name", "first name of {item}", optional=True),
        Field("last_name", "last name of {item}", optional=True),
        Field("company", "organization of {item}", optional=True),
        Field("job_title", "job title of {item}", optional=True),
        Field("notes", "note of {item}", optional=True),
        Field("birthday", "birth date of {item}", kind="date", optional=True),
        Field("emails", "emails of {item}", kind="pairs", parts=("label of {entry}", "value of {entry}"), optional=True),
        Field("phones", "phones of {item}", kind="pairs", parts=("label of {entry}", "value of {entry}"), optional=True),
        Field(
            "addresses",
            "addresses of {item}",
            kind="pairs",
            parts=(
                "label of {entry}",
                "street of {entry}",
                "city of {entry}",
                "state of {entry}",
                "zip of {entry}",
                "country of {entry}",
            ),
            optional=True,
        ),
    ),
)

GROUP_SCHEMA = RecordSchema(
    "contact_group",
    (
        Field("name", "name of {item}"),
        Field("count", "count of people of {item}", kind="number", optional=True),
    ),
)

GROUP_NAME_SCHEMA = RecordSchema("contact_group_name", (Field("name", "name of {item}"),))


@dataclass(frozen=True)
class LabeledValue:
    """An email address or phone number with its Contacts label."""

    label: str
    value: str


@dataclass(frozen=True)
class Address:
    """A postal address."""

    label: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""


@dataclass(frozen=True)
class ContactSummary:
    """One row of a contact listing."""

    name: str
    email: str = ""
    phone: str = ""
    company: str = ""


@dataclass(frozen=True)
class Contact:
    """A full contact card."""

    name: str
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    job_title: str = ""
    notes: str = ""
    birthday: date | None = None
    emails: list[LabeledValue] = field(default_factory=list)
    phones: list[LabeledValue] = field(default_factory=list)
    addresses: list[Address] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ContactGroup:
    """A Contacts group."""

    name: str
    count: int = 0


def _labeled(parts_list: list[list[str]]) -> list[LabeledValue]:
    return [
        LabeledValue(label=clean_label(parts[0]), value=parts[1])
        for parts in parts_list
        if len(parts) >= 2 and parts[1]
    ]


def _addresses(parts_list: list[list[str]]) -> list[Address]:
    addresses = []
    for parts in parts_list:
        label, street, city, state, zip_code, country = (parts + [""] * 6)[:6]
        addresses.append(
            Address(
                label=clean_label(label),
                street=street,
                city=city,
                state=state,
                zip=zip_code,
                country=country,
            )
        )
    return addresses


def contact_from_record(rec: dict[str, str]) -> Contact:
    """Map a decoded contact record to a Contact."""
    birthday = parse_applescript_date(rec["birthday"])
    return Contact(
        name=rec["name"],
        first_name=rec["first_name"],
        last_name=rec["last_name"],
        company=rec["company"],
        job_title=rec["job_title"],
        notes=rec["notes"],
        birthday=birthday.date() if birthday else None,
        emails=_labeled(CONTACT_SCHEMA.sublist(rec["emails"])),
        phones=_labeled(CONTACT_SCHEMA.sublist(rec["phones"])),
        addresses=_addresses(CONTACT_SCHEMA.sublist(rec["addresses"])),
    )


def _summaries(source: str, limit: int | None) -> list[ContactSummary]:
    script = ScriptBuilder(APP, schema=SUMMARY_SCHEMA)
    script.add('set output to ""', "set found to 0")
    with script.block(f"repeat with p in ({source})", "end repeat"):
        if limit:
            script.add(f"if found >= {limit} then exit repeat")
        script.add("set found to found + 1")
        script.emit_record("p")
    script.add("return output")

    result = run_applescript(script.build(), app=APP, timeout=60)
    return [ContactSummary(**rec) for rec in SUMMARY_SCHEMA.decode(result)]


def list_contacts(limit: int | None = None) -> list[ContactSummary]:
    """List every contact (name, first email, first phone, company)."""
    return _summaries("people", limit)


def search_contacts(query: str, limit: int | None = None) -> list[ContactSummary]:
    """Contacts whose name or company contains ``query`` (case-insensitive)."""
    condition = whose(contains_any(("name", "organization"), query))
    return _summaries(f"people {condition}", limit)


def get_contact(name: str, include_groups: bool = True) -> Contact:
    """
    Fetch a full contact card by exact name.

    Group membership is a secondary lookup: if it fails the card is returned
    with no groups.

    Raises:
        TargetNotFoundError: If no contact has this name.
    """
    script = ScriptBuilder(APP, schema=CONTACT_SCHEMA)
    script.add('set output to ""', f"set p to first person whose name is {quote(name)}")
    script.emit_record("p")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)
    contact = contact_from_record(CONTACT_SCHEMA.decode_one(result))

    if not include_groups:
        return contact
    groups = fetch_optional(lambda: get_contact_groups(name), [], what=f"groups of {name}")
    return replace(contact, groups=groups)


def get_contact_groups(name: str) -> list[str]:
    """Names of the groups containing the contact called ``name``."""
    script = ScriptBuilder(APP, schema=GROUP_NAME_SCHEMA)
    script.add('set output to ""')
    with script.block("repeat with g in groups", "end repeat"):
        with script.block(f"if (count of (people of g whose name is {quote(name)})) > 0 then", "end if"):
            script.emit_record("g")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)
    return [rec["name"] for rec in GROUP_NAME_SCHEMA.decode(result)]


def list_groups() -> list[ContactGroup]:
    """All contact groups with member counts."""
    script = ScriptBuilder(APP, schema=GROUP_SCHEMA)
    script.add('set output to ""')
    with script.block("repeat with g in groups", "end repeat"):
        script.emit_record("g")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)
    return [ContactGroup(name=rec["name"], count=parse_int(rec["count"])) for rec in GROUP_SCHEMA.decode(result)]


def get_group_members(group_name: str) -> list[ContactSummary]:
    """
    Contacts in a group.

    Raises:
        TargetNotFoundError: If the group does not exist.
    """
    return _summaries(f"people of group {quote(group_name)}", None)
