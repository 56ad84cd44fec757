"""Composition of AppleScript programs from escaped parameters.

Three shapes cover every integration: queries that walk a filtered
collection and emit records, creation of an object from a property bag, and
mutation of an existing object's properties. Free text always goes through
``quote``; optional values that are empty produce no clause at all.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date, datetime

from pocket.applescript.base import ERROR_SENTINEL, NOT_FOUND_ERROR_NUMBER, escape_applescript_string
from pocket.applescript.records import RecordSchema

INDENT = "    "


def quote(value: str) -> str:
    """Return ``value`` as an AppleScript string literal."""
    return f'"{escape_applescript_string(value)}"'


def not_found(label: str, name: str) -> str:
    """``error`` statement for a failed lookup, numbered like a missing object."""
    return f'error "{label} not found: " & {quote(name)} number {NOT_FOUND_ERROR_NUMBER}'


def text_list(values: Iterable[str]) -> str:
    """Return an AppleScript list literal of strings."""
    return "{" + ", ".join(quote(v) for v in values) + "}"


def equals(prop: str, value: str | None) -> str | None:
    """``whose`` condition matching a property exactly; None when unset."""
    if value is None or value == "":
        return None
    return f"{prop} is {quote(value)}"


def contains(prop: str, value: str | None) -> str | None:
    """``whose`` condition matching a substring; None when unset."""
    if value is None or value == "":
        return None
    return f"{prop} contains {quote(value)}"


def contains_any(props: Iterable[str], value: str) -> str:
    """Condition matching a substring in any of ``props``.

    Raises:
        ValueError: If ``value`` is empty or blank.
    """
    if not value or not value.strip():
        raise ValueError("search text must not be empty")
    return "(" + " or ".join(f"{prop} contains {quote(value)}" for prop in props) + ")"


def whose(*conditions: str | None) -> str:
    """Join the set conditions into a ``whose`` clause (empty if none)."""
    active = [c for c in conditions if c]
    if not active:
        return ""
    return "whose " + " and ".join(active)


class Properties:
    """Property bag for ``make new ... with properties``.

    Absent values are skipped, so the target application keeps its own
    default instead of receiving an empty value.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[str, str]] = []

    def text(self, key: str, value: str | None) -> "Properties":
        if value:
            self._entries.append((key, quote(value)))
        return self

    def raw(self, key: str, expr: str | None) -> "Properties":
        """Add an already-formed expression (variable, number, boolean)."""
        if expr is not None and expr != "":
            self._entries.append((key, expr))
        return self

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._entries)

    def render(self) -> str:
        return "{" + ", ".join(f"{key}:{expr}" for key, expr in self._entries) + "}"


class ScriptBuilder:
    """Accumulates the body of a program targeting one application.

    Args:
        app: Application for the ``tell`` block, or None for no ``tell``.
        schema: Record schema whose handlers and separators the body uses.
        guarded: Wrap the body in an ``on error`` handler returning the
            error sentinel.
    """

    def __init__(
        self,
        app: str | None,
        *,
        schema: RecordSchema | None = None,
        guarded: bool = True,
    ) -> None:
        self.app = app
        self.schema = schema
        self.guarded = guarded
        self._preamble: list[str] = []
        self._lines: list[str] = []
        self._depth = 0
        if schema is not None:
            self.add(*schema.prologue())

    def add(self, *lines: str) -> "ScriptBuilder":
        for line in lines:
            self._lines.append(INDENT * self._depth + line)
        return self

    @contextmanager
    def block(self, opener: str, closer: str) -> Iterator["ScriptBuilder"]:
        """Indent statements between ``opener`` and ``closer``."""
        self.add(opener)
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            self.add(closer)

    def emit_record(self, item: str, output: str = "output") -> "ScriptBuilder":
        """Append one schema record for the loop variable ``item``."""
        if self.schema is None:
            raise ValueError("emit_record requires a schema")
        return self.add(*self.schema.emit(item, output))

    def set_date(self, var: str, value: datetime | date) -> "ScriptBuilder":
        """Bind ``var`` to a date built from components (locale independent)."""
        if isinstance(value, datetime):
            seconds = value.hour * 3600 + value.minute * 60 + value.second
        else:
            seconds = 0
        self._preamble.extend([
            f"set {var} to current date",
            f"set day of {var} to 1",
            f"set year of {var} to {value.year}",
            f"set month of {var} to {value.month}",
            f"set day of {var} to {value.day}",
            f"set time of {var} to {seconds}",
        ])
        return self

    def set_text(self, target: str, prop: str, value: str | None) -> "ScriptBuilder":
        """Mutation clause for a text property, skipped when empty."""
        if value:
            self.add(f"set {prop} of {target} to {quote(value)}")
        return self

    def set_properties(self, target: str, props: Properties) -> "ScriptBuilder":
        """Mutation clauses for every entry of a property bag."""
        for key, expr in props:
            self.add(f"set {key} of {target} to {expr}")
        return self

    def build(self) -> str:
        """Return the complete program text."""
        body = list(self._lines)
        if self.guarded:
            body = (
                ["try"]
                + [INDENT + line for line in body]
                + [
                    "on error errMsg number errNum",
                    f'{INDENT}return {quote(ERROR_SENTINEL)} & "[" & errNum & "] " & errMsg',
                    "end try",
                ]
            )
        if self.app:
            body = (
                [f"tell application {quote(self.app)}"]
                + [INDENT + line for line in body]
                + ["end tell"]
            )

        parts = []
        if self.schema is not None:
            parts.append(self.schema.handlers())
        parts.extend(self._preamble)
        parts.extend(body)
        return "\n".join(parts)
