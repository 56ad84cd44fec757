"""Safari windows and tabs."""

from dataclasses import dataclass

from pocket.applescript import Field, Properties, RecordSchema, ScriptBuilder, quote, run_applescript
from pocket.applescript.parsing import parse_int

APP = "Safari"

TAB_SCHEMA = RecordSchema(
    "safari_tab",
    (
        Field("window", "w", kind="number"),
        Field("index", "t", kind="number"),
        Field("title", "name of {item}", optional=True),
        Field("url", "URL of {item}", optional=True),
    ),
)


@dataclass(frozen=True)
class Tab:
    """An open Safari tab, addressed by 1-based window and tab index."""

    window_index: int
    tab_index: int
    title: str
    url: str


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when the URL has no scheme."""
    url = url.strip()
    if "://" not in url and not url.startswith(("about:", "file:")):
        return f"https://{url}"
    return url


def tabs_from_records(records: list[dict[str, str]]) -> list[Tab]:
    """Map decoded tab records to Tab objects."""
    return [
        Tab(
            window_index=parse_int(rec["window"]),
            tab_index=parse_int(rec["index"]),
            title=rec["title"],
            url=rec["url"],
        )
        for rec in records
    ]


def list_tabs(window: int | None = None) -> list[Tab]:
    """
    List open tabs of every window, or of one window.

    Raises:
        TargetNotFoundError: If the window does not exist.
    """
    script = ScriptBuilder(APP, schema=TAB_SCHEMA)
    script.add('set output to ""')
    if window:
        script.add(f"set windowList to {{{int(window)}}}")
    else:
        script.add("set windowList to {}")
        with script.block("repeat with w from 1 to count of windows", "end repeat"):
            script.add("set end of windowList to w")
    with script.block("repeat with wRef in windowList", "end repeat"):
        script.add("set w to contents of wRef")
        with script.block("repeat with t from 1 to count of tabs of window w", "end repeat"):
            script.add("set theTab to tab t of window w")
            script.emit_record("theTab")
    script.add("return output")

    result = run_applescript(script.build(), app=APP)
    return tabs_from_records(TAB_SCHEMA.decode(result))


def _emit_current(script: ScriptBuilder, window: str = "front window") -> None:
    script.add(f"set w to index of {window}", f"set t to index of current tab of {window}")
    script.add('set output to ""')
    script.emit_record(f"(current tab of {window})")
    script.add("return output")


def current_tab(window: int | None = None, index: int | None = None) -> Tab:
    """
    The active tab of the front window, or a specific tab.

    A window without a tab index selects that window's current tab.

    Raises:
        TargetNotFoundError: If no window is open or the tab does not exist.
    """
    script = ScriptBuilder(APP, schema=TAB_SCHEMA)
    if index:
        w, t = int(window or 1), int(index)
        script.add(f"set w to {w}", f"set t to {t}", 'set output to ""')
        script.emit_record(f"(tab {t} of window {w})")
        script.add("return output")
    elif window:
        _emit_current(script, f"window {int(window)}")
    else:
        _emit_current(script)

    result = run_applescript(script.build(), app=APP)
    return tabs_from_records([TAB_SCHEMA.decode_one(result)])[0]


def open_url(url: str, new_window: bool = False) -> Tab:
    """
    Open a URL in a new tab (or window) and return that tab.

    Safari is launched when needed; without any window a new document is
    created.
    """
    url = normalize_url(url)
    props = Properties().text("URL", url)

    script = ScriptBuilder(APP, schema=TAB_SCHEMA)
    script.add("activate")
    if new_window:
        script.add(f"make new document with properties {props.render()}")
    else:
        script.add(
            "set hadWindow to (count of windows) > 0",
            f"if not hadWindow then make new document with properties {props.render()}",
        )
        with script.block("if hadWindow then", "end if"):
            with script.block("tell front window", "end tell"):
                script.add(f"set newTab to make new tab with properties {props.render()}", "set current tab to newTab")
    script.add("delay 0.5")
    _emit_current(script)

    result = run_applescript(script.build(), app=APP)
    return tabs_from_records([TAB_SCHEMA.decode_one(result)])[0]


def close_tab(window: int | None = None, index: int | None = None, close_window: bool = False) -> str:
    """
    Close a tab (the current one by default) or a whole window.

    Returns:
        What was closed, ``"tab"`` or ``"window"``.
    """
    window_ref = f"window {int(window)}" if window else "front window"
    script = ScriptBuilder(APP)
    if close_window:
        script.add(f"close {window_ref}")
    elif index:
        script.add(f"close tab {int(index)} of {window_ref}")
    else:
        script.add(f"close current tab of {window_ref}")
    script.add('return "ok"')

    run_applescript(script.build(), app=APP)
    return "window" if close_window else "tab"


def add_to_reading_list(url: str, title: str | None = None) -> str:
    """Add a URL to the Reading List; returns the normalized URL."""
    url = normalize_url(url)
    script = ScriptBuilder(APP)
    clause = f"add reading list item {quote(url)}"
    if title:
        clause += f" with title {quote(title)}"
    script.add(clause, 'return "ok"')
    run_applescript(script.build(), app=APP)
    return url
