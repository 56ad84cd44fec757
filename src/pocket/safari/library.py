"""Safari bookmarks and Reading List, read from Bookmarks.plist."""

import plistlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from pocket.applescript import PermissionDeniedError, TargetNotFoundError

BOOKMARKS_PLIST = Path.home() / "Library" / "Safari" / "Bookmarks.plist"
BOOKMARKS_BAR = "BookmarksBar"
READING_LIST = "com.apple.ReadingList"

_FOLDER = "WebBookmarkTypeList"
_LEAF = "WebBookmarkTypeLeaf"

FULL_DISK_ACCESS_HINT = (
    "Grant Full Disk Access to your terminal in "
    "System Settings > Privacy & Security > Full Disk Access."
)


@dataclass(frozen=True)
class Bookmark:
    """A bookmark and the folder it lives in."""

    title: str
    url: str
    folder: str


@dataclass(frozen=True)
class ReadingListItem:
    """An entry of the Safari Reading List."""

    title: str
    url: str
    preview: str = ""
    date_added: datetime | None = None


def load_bookmarks_plist(path: Path = BOOKMARKS_PLIST) -> dict[str, Any]:
    """
    Load Safari's bookmarks property list.

    Raises:
        PermissionDeniedError: If the file cannot be read (Full Disk Access).
        TargetNotFoundError: If the file does not exist.
    """
    try:
        with open(path, "rb") as f:
            return plistlib.load(f)
    except FileNotFoundError as e:
        raise TargetNotFoundError(f"Safari bookmarks not found at {path}", context={"path": str(path)}) from e
    except PermissionError as e:
        raise PermissionDeniedError(
            f"Cannot read {path}. {FULL_DISK_ACCESS_HINT}", context={"path": str(path)}
        ) from e


def _title(node: dict[str, Any]) -> str:
    return node.get("URIDictionary", {}).get("title") or node.get("Title", "")


def _find_folder(node: dict[str, Any], name: str) -> dict[str, Any] | None:
    if node.get("WebBookmarkType") == _FOLDER and node.get("Title") == name:
        return node
    for child in node.get("Children", []):
        found = _find_folder(child, name)
        if found is not None:
            return found
    return None


def _collect(node: dict[str, Any], folder: str, out: list[Bookmark], limit: int | None) -> None:
    for child in node.get("Children", []):
        if limit and len(out) >= limit:
            return
        kind = child.get("WebBookmarkType")
        if kind == _LEAF and child.get("URLString"):
            out.append(Bookmark(title=_title(child), url=child["URLString"], folder=folder))
        elif kind == _FOLDER and child.get("Title") != READING_LIST:
            _collect(child, child.get("Title", ""), out, limit)


def get_bookmarks(
    folder: str = BOOKMARKS_BAR,
    limit: int | None = None,
    path: Path = BOOKMARKS_PLIST,
) -> list[Bookmark]:
    """
    Bookmarks in a folder (the Favorites bar by default), including subfolders.

    Raises:
        TargetNotFoundError: If the folder does not exist.
        PermissionDeniedError: If Bookmarks.plist cannot be read.
    """
    root = load_bookmarks_plist(path)
    node = _find_folder(root, folder)
    if node is None:
        raise TargetNotFoundError(f"Bookmark folder not found: {folder}", context={"folder": folder})

    bookmarks: list[Bookmark] = []
    _collect(node, folder, bookmarks, limit)
    return bookmarks


def get_reading_list(limit: int | None = None, path: Path = BOOKMARKS_PLIST) -> list[ReadingListItem]:
    """Reading List entries, in Safari's order."""
    root = load_bookmarks_plist(path)
    node = _find_folder(root, READING_LIST)
    if node is None:
        return []

    items = []
    for child in node.get("Children", []):
        if not child.get("URLString"):
            continue
        extra = child.get("ReadingList", {})
        added = extra.get("DateAdded")
        items.append(
            ReadingListItem(
                title=_title(child),
                url=child["URLString"],
                preview=extra.get("PreviewText", ""),
                date_added=added if isinstance(added, datetime) else None,
            )
        )
        if limit and len(items) >= limit:
            break
    return items
