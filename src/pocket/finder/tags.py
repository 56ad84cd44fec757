"""Finder tags, read through Spotlight and written as extended attributes."""

import plistlib

from pocket.applescript import run_command
from pocket.finder.paths import resolve_path

TAGS_ATTRIBUTE = "com.apple.metadata:_kMDItemUserTags"
MDLS_NULL = "(null)"


def parse_mdls_tags(output: str) -> list[str]:
    """Parse the ``-raw`` output of ``mdls -name kMDItemUserTags``.

    The value is a plist-style array such as ``(\\n    Red,\\n    "Two Words"\\n)``.
    """
    output = output.strip()
    if not output or output == MDLS_NULL:
        return []

    tags = []
    for part in output.strip("()").split(","):
        tag = part.strip().strip('"')
        # Finder appends the colour index on a second line ("Red\n6")
        tag = tag.split("\n", 1)[0].strip()
        if tag:
            tags.append(tag)
    return tags


def get_tags(path: str) -> list[str]:
    """
    Finder tags of a file or folder.

    Raises:
        TargetNotFoundError: If the path does not exist.
    """
    resolved = resolve_path(path)
    output = run_command(["mdls", "-name", "kMDItemUserTags", "-raw", str(resolved)])
    return parse_mdls_tags(output)


def _write_tags(path: str, tags: list[str]) -> None:
    if not tags:
        run_command(["xattr", "-d", TAGS_ATTRIBUTE, path])
        return
    plist = plistlib.dumps(tags, fmt=plistlib.FMT_XML).decode("utf-8")
    run_command(["xattr", "-w", TAGS_ATTRIBUTE, plist, path])


def add_tag(path: str, tag: str) -> list[str]:
    """
    Add a tag, keeping existing ones.

    Returns:
        The tags after the change.
    """
    resolved = str(resolve_path(path))
    tags = get_tags(resolved)
    if tag in tags:
        return tags
    tags.append(tag)
    _write_tags(resolved, tags)
    return tags


def remove_tag(path: str, tag: str) -> list[str]:
    """
    Remove a tag if present.

    Returns:
        The tags after the change.
    """
    resolved = str(resolve_path(path))
    tags = get_tags(resolved)
    if tag not in tags:
        return tags
    remaining = [t for t in tags if t != tag]
    _write_tags(resolved, remaining)
    return remaining
