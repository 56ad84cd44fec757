"""Notes.app integration."""

from pocket.notes.actions import append_to_note, create_note
from pocket.notes.notes import Note, NoteFolder, get_folders, list_notes, read_note, search_notes

__all__ = [
    "Note",
    "NoteFolder",
    "list_notes",
    "get_folders",
    "read_note",
    "search_notes",
    "create_note",
    "append_to_note",
]
