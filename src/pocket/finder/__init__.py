"""Finder and filesystem integration."""

from pocket.finder.actions import move_to_trash, open_path, reveal
from pocket.finder.files import DirectoryEntry, FileInfo, SearchResult, get_info, list_directory, search
from pocket.finder.tags import add_tag, get_tags, remove_tag

__all__ = [
    "FileInfo",
    "DirectoryEntry",
    "SearchResult",
    "get_info",
    "list_directory",
    "search",
    "get_tags",
    "add_tag",
    "remove_tag",
    "open_path",
    "reveal",
    "move_to_trash",
]
