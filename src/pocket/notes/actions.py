"""Notes.app write actions."""

from pocket.applescript import Properties, ScriptBuilder, quote, run_applescript
from pocket.applescript.richtext import plaintext_to_html
from pocket.notes.notes import APP, find_note


def create_note(name: str, body: str = "", folder: str | None = None) -> str:
    """
    Create a note. Newlines in ``body`` become line breaks.

    Returns:
        The id of the new note.

    Raises:
        TargetNotFoundError: If the folder does not exist.
    """
    # Notes uses the first line of the body as the title
    html_body = f"<h1>{plaintext_to_html(name)}</h1>"
    if body:
        html_body += plaintext_to_html(body)
    props = Properties().text("name", name).text("body", html_body)

    location = f" at folder {quote(folder)}" if folder else ""
    script = ScriptBuilder(APP)
    script.add(f"set theNote to make new note{location} with properties {props.render()}", "return id of theNote")
    return run_applescript(script.build(), app=APP)


def append_to_note(name: str, text: str, folder: str | None = None) -> str:
    """
    Append text to an existing note on a new line.

    Returns:
        The name of the updated note.

    Raises:
        TargetNotFoundError: If no note has this name.
    """
    script = ScriptBuilder(APP)
    find_note(script, name, folder)
    script.add(
        f"set body of theNote to (body of theNote) & {quote('<br>' + plaintext_to_html(text))}",
        "return name of theNote",
    )
    return run_applescript(script.build(), app=APP)
