"""Flat-text record protocol shared by generated scripts and decoders.

AppleScript can only hand back one string. Multi-record results are
serialized as records joined by a record separator, fields joined by a field
separator and, for multi-valued fields (emails, addresses), sub-list items
joined by an item separator whose parts use a part separator.

A ``RecordSchema`` is the single description of one such result shape: it
generates the AppleScript that emits each record and decodes the text that
comes back, so the two sides cannot drift apart. The default separators are
the ASCII information separators (28-31). The generated ``cleanField``
handler removes them from every emitted value, so a field can never contain
a separator.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from pocket.applescript.base import escape_applescript_string
from pocket.applescript.errors import DecodeError

logger = logging.getLogger(__name__)

RECORD_SEP = "\x1e"  # ASCII 30, Record Separator
FIELD_SEP = "\x1f"  # ASCII 31, Unit Separator
ITEM_SEP = "\x1d"  # ASCII 29, Group Separator
PART_SEP = "\x1c"  # ASCII 28, File Separator

FieldKind = Literal["text", "number", "bool", "date", "pairs"]

_NAMED_LITERALS = {"\t": "tab", "\n": "linefeed", "\r": "return"}


def decode(text: str, record_sep: str, field_sep: str, min_fields: int = 0) -> list[list[str]]:
    """Split flat text into records of fields.

    Empty trailing segments (left by a separator after the last record) are
    discarded. A record with fewer than ``min_fields`` fields is dropped,
    never padded.

    Args:
        text: Raw output of the script.
        record_sep: Separator between records.
        field_sep: Separator between fields of one record.
        min_fields: Minimum number of fields a record needs to be kept.

    Returns:
        Records in output order, each a list of field strings.
    """
    if not text:
        return []

    segments = text.split(record_sep)
    while segments and segments[-1] == "":
        segments.pop()

    records = []
    for segment in segments:
        fields = segment.split(field_sep)
        if len(fields) < min_fields:
            logger.debug("Dropping malformed record (%d < %d fields)", len(fields), min_fields)
            continue
        records.append(fields)
    return records


def split_sublist(value: str, item_sep: str = ITEM_SEP, part_sep: str = PART_SEP) -> list[list[str]]:
    """Split a multi-valued field into items, each a list of parts."""
    if not value:
        return []
    return [item.split(part_sep) for item in value.split(item_sep) if item]


def applescript_literal(sep: str) -> str:
    """Render a separator as an AppleScript expression."""
    if sep in _NAMED_LITERALS:
        return _NAMED_LITERALS[sep]
    if len(sep) == 1 and ord(sep) < 32:
        return f"(ASCII character {ord(sep)})"
    return f'"{escape_applescript_string(sep)}"'


@dataclass(frozen=True)
class Field:
    """One positional field of a record.

    ``expr`` is the AppleScript expression producing the value; ``{item}`` is
    replaced by the loop variable. For ``pairs`` fields, ``expr`` yields a
    collection and each of ``parts`` is evaluated against ``{entry}``, one
    element of that collection.
    """

    name: str
    expr: str = ""
    kind: FieldKind = "text"
    optional: bool = False
    parts: tuple[str, ...] = ()


@dataclass(frozen=True)
class RecordSchema:
    """Versioned description of one operation's result shape."""

    name: str
    fields: tuple[Field, ...]
    min_fields: int | None = None
    record_sep: str = RECORD_SEP
    field_sep: str = FIELD_SEP
    item_sep: str = ITEM_SEP
    part_sep: str = PART_SEP
    version: int = 1

    @property
    def separators(self) -> tuple[str, ...]:
        return (self.record_sep, self.field_sep, self.item_sep, self.part_sep)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def minimum(self) -> int:
        """Minimum field count; every field is required unless overridden."""
        return len(self.fields) if self.min_fields is None else self.min_fields

    # Decoding

    def decode(self, text: str | None) -> list[dict[str, str]]:
        """Decode script output into one dict per well-formed record.

        Fields missing from a short (but still valid) record are absent from
        its dict.
        """
        rows = decode(text or "", self.record_sep, self.field_sep, self.minimum)
        return [dict(zip(self.field_names, row)) for row in rows]

    def decode_one(self, text: str | None) -> dict[str, str]:
        """Decode output that must contain exactly one record.

        Raises:
            DecodeError: If no well-formed record is present.
        """
        records = self.decode(text)
        if not records:
            raise DecodeError(
                f"Unexpected output for {self.name} (schema v{self.version})",
                context={"schema": self.name, "version": self.version, "output": (text or "")[:200]},
            )
        return records[0]

    def sublist(self, value: str) -> list[list[str]]:
        """Split one of this schema's ``pairs`` fields."""
        return split_sublist(value, self.item_sep, self.part_sep)

    # Emission

    def prologue(self) -> list[str]:
        """Statements binding the separator variables used by ``emit``."""
        return [
            f"set pRS to {applescript_literal(self.record_sep)}",
            f"set pFS to {applescript_literal(self.field_sep)}",
            f"set pIS to {applescript_literal(self.item_sep)}",
            f"set pPS to {applescript_literal(self.part_sep)}",
        ]

    def handlers(self) -> str:
        """Top-level handler definitions the emitted statements call."""
        delimiters = ", ".join(applescript_literal(sep) for sep in dict.fromkeys(self.separators))
        return f"""-- record schema: {self.name} v{self.version}
on cleanField(theText)
    if theText is missing value then return ""
    set theText to theText as text
    set savedDelims to AppleScript's text item delimiters
    set AppleScript's text item delimiters to {{{delimiters}}}
    set pieces to text items of theText
    set AppleScript's text item delimiters to " "
    set theText to pieces as text
    set AppleScript's text item delimiters to savedDelims
    return theText
end cleanField

on isoDate(theDate)
    if theDate is missing value then return ""
    set theTime to time of theDate
    return ((year of theDate) as text) & "-" & my pad2((month of theDate) as integer) & "-" & my pad2(day of theDate) & " " & my pad2(theTime div 3600) & ":" & my pad2((theTime mod 3600) div 60) & ":" & my pad2(theTime mod 60)
end isoDate

on pad2(n)
    return text -2 thru -1 of ("0" & (n as integer))
end pad2
"""

    def emit(self, item: str = "item", output: str = "output") -> list[str]:
        """Statements appending one record for ``item`` to ``output``."""
        lines: list[str] = []
        for f in self.fields:
            lines.extend(self._emit_field(f, item))
        values = " & pFS & ".join(f"v_{f.name}" for f in self.fields)
        lines.append(f"set {output} to {output} & {values} & pRS")
        return lines

    def _emit_field(self, f: Field, item: str) -> list[str]:
        var = f"v_{f.name}"
        expr = f.expr.replace("{item}", item)

        if f.kind == "pairs":
            parts = " & pPS & ".join(
                f"my cleanField({part.replace('{entry}', 'anEntry')})" for part in f.parts
            )
            body = [
                f"repeat with anEntry in ({expr})",
                f"    set {var} to {var} & {parts} & pIS",
                "end repeat",
            ]
            if f.optional:
                body = ["try", *("    " + line for line in body), "end try"]
            return [f'set {var} to ""', *body]

        if f.kind == "date":
            value = f"my isoDate({expr})"
        elif f.kind in ("number", "bool"):
            value = f"(({expr}) as text)"
        else:
            value = f"my cleanField({expr})"

        if not f.optional:
            return [f"set {var} to {value}"]
        return [f'set {var} to ""', "try", f"    set {var} to {value}", "end try"]
