"""Conversion of the HTML bodies returned by Notes and Mail to plain text."""

import html
import re

_BLOCK_TAGS = r"(?:p|div|br|tr|h[1-6])"

_CLOSING_BLOCK = re.compile(rf"</{_BLOCK_TAGS}\s*>", re.IGNORECASE)
_SELF_CLOSING_BLOCK = re.compile(rf"<{_BLOCK_TAGS}\b[^>]*/\s*>", re.IGNORECASE)
_LINE_BREAK = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)
_OPENING_BLOCK = re.compile(rf"<{_BLOCK_TAGS}\b[^>]*>", re.IGNORECASE)
_LIST_ITEM_OPEN = re.compile(r"<li\b[^>]*>", re.IGNORECASE)
_LIST_ITEM_CLOSE = re.compile(r"</li\s*>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]*>")
_BLANK_LINES = re.compile(r"\n{3,}")

_ENTITIES = {
    "&amp;": "&",
    "&amp": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&nbsp;": " ",
}
# One pass, so "&amp;lt;" decodes to the literal text "&lt;"
_ENTITY = re.compile(r"&(?:amp;?|lt;|gt;|quot;|#39;|apos;|nbsp;)")

BULLET = "• "


def html_to_plaintext(markup: str) -> str:
    """Convert an HTML body to readable plain text.

    Block-level tags become line breaks, list items get a bullet, remaining
    tags are dropped, common entities are decoded and runs of blank lines
    collapse to one.
    """
    if not markup:
        return ""

    text = markup.replace("\r\n", "\n").replace("\r", "\n")

    text = _CLOSING_BLOCK.sub("\n", text)
    text = _SELF_CLOSING_BLOCK.sub("\n", text)
    text = _LINE_BREAK.sub("\n", text)
    text = _OPENING_BLOCK.sub("", text)

    text = _LIST_ITEM_OPEN.sub(BULLET, text)
    text = _LIST_ITEM_CLOSE.sub("\n", text)

    text = _ANY_TAG.sub("", text)
    text = _ENTITY.sub(lambda m: _ENTITIES[m.group(0)], text)

    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()


def plaintext_to_html(text: str) -> str:
    """Encode plain text as a Notes body: markup characters escaped, newlines as ``<br>``."""
    escaped = html.escape(text.replace("\r\n", "\n").replace("\r", "\n"), quote=False)
    return escaped.replace("\n", "<br>")
