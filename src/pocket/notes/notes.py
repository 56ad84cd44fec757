"""Notes.app folders and notes."""

from dataclasses import dataclass, replace
from datetime import datetime

from pocket.applescript import Field, RecordSchema, ScriptBuilder, fetch_optional, quote, run_applescript, whose
from pocket.applescript.builder import contains_any, not_found
from pocket.applescript.dates import parse_applescript_date
from pocket.applescript.parsing import parse_int
from pocket.applescript.richtext import html_to_plaintext

APP = "Notes"

# Never listed or searched
TRASH_FOLDER = "Recently Deleted"

NOTE_SCHEMA = RecordSchema(
    "note",
    (
        Field("id", "id of {item}"),
        Field("name", "name of {item}"),
        Field("folder", "folderName"),
        Field("created", "creation date of {item}", kind="date", optional=True),
        Field("modified", "modification date of {item}", kind="date", optional=True),
    ),
)

FOLDER_SCHEMA = RecordSchema(
    "note_folder",
    (
        Field("name", "name of {item}"),
        Field("count", "count of notes of {item}", kind="number", optional=True),
    ),
)


@dataclass(frozen=True)
class Note:
    """A note; ``body`` is plain text and only filled by ``read_note``."""

    name: str
    folder: str
    created: datetime | None = None
    modified: datetime | None = None
    id: str = ""
    body: str = ""


@dataclass(frozen=True)
class NoteFolder:
    """A Notes folder."""

    name: str
    count: int = 0


def notes_from_records(records: list[dict[str, str]]) -> list[Note]:
    """Map decoded note records to Note objects."""
    return [
        Note(
            id=rec["id"],
            name=rec["name"],
            folder=rec["folder"],
            created=parse_applescript_date(rec["created"]),
            modified=parse_applescript_date(rec["modified"]),
        )
        for rec in records
    ]


def _walk_notes(script: ScriptBuilder, folder: str | None, condition: str = "", limit: int | None = None) -> None:
    """Emit one note record per matching note, skipping the trash folder."""
    folders_ref = "{" + f"folder {quote(folder)}" + "}" if folder else "folders"
    script.add('set output to ""', "set found to 0")
    with script.block(f"repeat with theFolder in {folders_ref}", "end repeat"):
        script.add("set folderName to name of theFolder")
        with script.block(f"if folderName is not {quote(TRASH_FOLDER)} then", "end if"):
            with script.block(f"repeat with theNote in (notes of theFolder {condition})", "end repeat"):
                if limit:
                    script.add(f"if found >= {limit} then exit repeat")
                script.add("set found to found + 1")
                script.emit_record("theNote")
    script.add("return output")


def list_notes(folder: str | None = None, limit: int | None = None) -> list[Note]:
    """
    List notes, optionally in one folder.

    Raises:
        TargetNotFoundError: If the folder does not exist.
    """
    script = ScriptBuilder(APP, schema=NOTE_SCHEMA)
    _walk_notes(script, folder, limit=limit)
    result = run_applescript(script.build(), app=APP, timeout=60)
    return notes_from_records(NOTE_SCHEMA.decode(result))


def search_notes(query: str, folder: str | None = None, limit: int | None = None) -> list[Note]:
    """Notes whose title or text contains ``query``."""
    condition = whose(contains_any(("name", "plaintext"), query))
    script = ScriptBuilder(APP, schema=NOTE_SCHEMA)
    _walk_notes(script, folder, condition, limit)
    result = run_applescript(script.build(), app=APP, timeout=60)
    return notes_from_records(NOTE_SCHEMA.decode(result))


def get_folders() -> list[NoteFolder]:
    """All folders with their note counts."""
    script = ScriptBuilder(APP, schema=FOLDER_SCHEMA)
    script.add('set output to ""')
    with script.block("repeat with theFolder in folders", "end repeat"):
        script.emit_record("theFolder")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)
    return [NoteFolder(name=rec["name"], count=parse_int(rec["count"])) for rec in FOLDER_SCHEMA.decode(result)]


def find_note(script: ScriptBuilder, name: str, folder: str | None) -> None:
    """Bind ``theNote`` and ``folderName`` to the first note called ``name``."""
    folders_ref = "{" + f"folder {quote(folder)}" + "}" if folder else "folders"
    script.add("set theNote to missing value")
    with script.block(f"repeat with theFolder in {folders_ref}", "end repeat"):
        script.add("set folderName to name of theFolder")
        with script.block(f"if folderName is not {quote(TRASH_FOLDER)} then", "end if"):
            script.add(f"set hits to (notes of theFolder whose name is {quote(name)})")
            with script.block("if (count of hits) > 0 then", "end if"):
                script.add("set theNote to item 1 of hits", "exit repeat")
    script.add(f"if theNote is missing value then {not_found('Note', name)}")


def get_note_body(name: str, folder: str | None = None) -> str:
    """The body of a note converted to plain text."""
    script = ScriptBuilder(APP)
    find_note(script, name, folder)
    script.add("return body of theNote")
    return html_to_plaintext(run_applescript(script.build(), app=APP))


def read_note(name: str, folder: str | None = None) -> Note:
    """
    Read a note: metadata first, then the body.

    A failure fetching the body leaves it empty rather than failing.

    Raises:
        TargetNotFoundError: If no note has this name.
    """
    script = ScriptBuilder(APP, schema=NOTE_SCHEMA)
    find_note(script, name, folder)
    script.add('set output to ""')
    script.emit_record("theNote")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)
    note = notes_from_records([NOTE_SCHEMA.decode_one(result)])[0]

    body = fetch_optional(lambda: get_note_body(name, note.folder), "", what=f"body of note {name!r}")
    return replace(note, body=body)
