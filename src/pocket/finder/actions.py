"""Finder actions: open, reveal, move to Trash."""

from pocket.applescript import ScriptBuilder, quote, run_applescript, run_command
from pocket.finder.paths import resolve_path

APP = "Finder"


def open_path(path: str, application: str | None = None) -> str:
    """Open a file or folder, optionally with a specific application."""
    resolved = str(resolve_path(path))
    args = ["open", "-a", application, resolved] if application else ["open", resolved]
    run_command(args, app=application)
    return resolved


def reveal(path: str) -> str:
    """Select a file in a Finder window and bring Finder to the front."""
    resolved = str(resolve_path(path))
    script = ScriptBuilder(APP)
    script.add(f"reveal (POSIX file {quote(resolved)} as alias)", "activate")
    run_applescript(script.build(), app=APP)
    return resolved


def move_to_trash(path: str) -> str:
    """Move a file or folder to the Trash through Finder (undoable)."""
    resolved = str(resolve_path(path))
    script = ScriptBuilder(APP)
    script.add(f"delete (POSIX file {quote(resolved)} as alias)")
    run_applescript(script.build(), app=APP)
    return resolved
