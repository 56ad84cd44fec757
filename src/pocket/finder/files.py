"""File information, directory listings and Spotlight search."""

import logging
import os
import stat
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path

from pocket.applescript import TargetNotFoundError, fetch_optional, run_command
from pocket.finder.paths import human_readable_size, resolve_path
from pocket.finder.tags import get_tags

logger = logging.getLogger(__name__)

MDLS_NULL = "(null)"
MDLS_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

# Directory size walks stop after this many entries
MAX_WALK_ENTRIES = 100_000

SEARCH_KINDS = {
    "app": "com.apple.application-bundle",
    "application": "com.apple.application-bundle",
    "folder": "public.folder",
    "directory": "public.folder",
    "image": "public.image",
    "audio": "public.audio",
    "video": "public.movie",
    "pdf": "com.adobe.pdf",
    "document": "public.content",
    "text": "public.text",
}


@dataclass(frozen=True)
class FileInfo:
    """Details about a file or folder."""

    name: str
    path: str
    type: str  # "file" or "directory"
    size: int
    size_human: str
    modified: datetime
    permissions: str
    is_hidden: bool
    is_executable: bool = False
    content_type: str = ""
    created: datetime | None = None
    last_used: datetime | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DirectoryEntry:
    """One entry of a directory listing."""

    name: str
    path: str
    type: str
    size: int
    size_human: str
    modified: datetime
    is_hidden: bool


@dataclass(frozen=True)
class SearchResult:
    """A Spotlight hit."""

    path: str
    name: str


def parse_mdls(output: str) -> dict[str, str]:
    """Parse ``key = value`` lines from mdls, dropping null values."""
    values = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if not sep:
            continue
        value = value.strip().strip('"')
        if value and value != MDLS_NULL:
            values[key.strip()] = value
    return values


def _mdls_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, MDLS_DATE_FORMAT)
    except ValueError:
        return None


def _directory_size(path: Path) -> int:
    total = 0
    seen = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            seen += 1
            if seen >= MAX_WALK_ENTRIES:
                logger.debug("Stopped sizing %s after %d files", path, seen)
                return total
            try:
                total += os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
    return total


def get_spotlight_metadata(path: Path) -> dict[str, str]:
    """Content type and dates recorded by Spotlight."""
    output = run_command([
        "mdls",
        "-name", "kMDItemContentType",
        "-name", "kMDItemContentCreationDate",
        "-name", "kMDItemLastUsedDate",
        str(path),
    ])
    return parse_mdls(output)


def get_info(path: str) -> FileInfo:
    """
    Stat a path and enrich it with Spotlight metadata and Finder tags.

    Metadata and tags are optional: if either lookup fails the info is
    returned without them.

    Raises:
        TargetNotFoundError: If the path does not exist.
    """
    resolved = resolve_path(path)
    st = resolved.stat()
    is_dir = stat.S_ISDIR(st.st_mode)
    size = _directory_size(resolved) if is_dir else st.st_size

    info = FileInfo(
        name=resolved.name,
        path=str(resolved),
        type="directory" if is_dir else "file",
        size=size,
        size_human=human_readable_size(size),
        modified=datetime.fromtimestamp(st.st_mtime),
        permissions=stat.filemode(st.st_mode),
        is_hidden=resolved.name.startswith("."),
        is_executable=not is_dir and bool(st.st_mode & 0o111),
    )

    metadata = fetch_optional(lambda: get_spotlight_metadata(resolved), {}, what=f"metadata of {resolved}")
    tags = fetch_optional(lambda: get_tags(str(resolved)), [], what=f"tags of {resolved}")
    return replace(
        info,
        content_type=metadata.get("kMDItemContentType", ""),
        created=_mdls_date(metadata.get("kMDItemContentCreationDate")),
        last_used=_mdls_date(metadata.get("kMDItemLastUsedDate")),
        tags=tags,
    )


def list_directory(path: str = ".", show_hidden: bool = False) -> list[DirectoryEntry]:
    """
    List a directory, folders first then files, each alphabetically.

    Raises:
        TargetNotFoundError: If the path does not exist or is not a directory.
    """
    resolved = resolve_path(path)
    if not resolved.is_dir():
        raise TargetNotFoundError(f"Not a directory: {resolved}", context={"path": str(resolved)})

    entries = []
    with os.scandir(resolved) as it:
        for entry in it:
            if entry.name.startswith(".") and not show_hidden:
                continue
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            is_dir = entry.is_dir(follow_symlinks=False)
            size = 0 if is_dir else st.st_size
            entries.append(
                DirectoryEntry(
                    name=entry.name,
                    path=entry.path,
                    type="directory" if is_dir else "file",
                    size=size,
                    size_human=human_readable_size(size),
                    modified=datetime.fromtimestamp(st.st_mtime),
                    is_hidden=entry.name.startswith("."),
                )
            )

    entries.sort(key=lambda e: (e.type != "directory", e.name.lower()))
    return entries


def _spotlight_literal(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'").replace("*", "\\*")


def build_spotlight_query(query: str, kind: str | None = None) -> str:
    """Build an mdfind query matching names or content, optionally by kind.

    Raises:
        ValueError: If ``kind`` is not a known kind.
    """
    text = _spotlight_literal(query)
    match = f"kMDItemDisplayName == '*{text}*'wcd || kMDItemTextContent == '*{text}*'wcd"
    if not kind:
        return match
    content_type = SEARCH_KINDS.get(kind.lower())
    if content_type is None:
        raise ValueError(f"unknown kind {kind!r}, expected one of: {', '.join(sorted(SEARCH_KINDS))}")
    return f"(kMDItemContentTypeTree == '{content_type}') && ({match})"


def search(query: str, kind: str | None = None, scope: str | None = None, limit: int = 50) -> list[SearchResult]:
    """Spotlight search by name or content."""
    args = ["mdfind"]
    if scope:
        args += ["-onlyin", str(resolve_path(scope))]
    args.append(build_spotlight_query(query, kind))

    output = run_command(args, timeout=60)
    paths = [line.strip() for line in output.splitlines() if line.strip()]
    return [SearchResult(path=p, name=os.path.basename(p)) for p in paths[:limit]]
