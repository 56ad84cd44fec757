"""Safari integration."""

from pocket.safari.history import HistoryItem, get_history
from pocket.safari.library import Bookmark, ReadingListItem, get_bookmarks, get_reading_list
from pocket.safari.tabs import Tab, add_to_reading_list, close_tab, current_tab, list_tabs, open_url

__all__ = [
    "Tab",
    "Bookmark",
    "ReadingListItem",
    "HistoryItem",
    "list_tabs",
    "current_tab",
    "open_url",
    "close_tab",
    "add_to_reading_list",
    "get_bookmarks",
    "get_reading_list",
    "get_history",
]
