"""Field converters shared by the domain mappers."""

_LABEL_PREFIX = "_$!<"
_LABEL_SUFFIX = ">!$_"


def parse_bool(value: str | None) -> bool:
    """AppleScript booleans arrive as ``true``/``false``."""
    return (value or "").strip().lower() == "true"


def parse_int(value: str | None, default: int = 0) -> int:
    """Parse an integer field, falling back to ``default``."""
    try:
        return int(float((value or "").strip()))
    except ValueError:
        return default


def optional_text(value: str | None) -> str | None:
    """Map empty and ``missing value`` fields to None."""
    if not value or value == "missing value":
        return None
    return value


def clean_label(label: str) -> str:
    """Strip the ``_$!<...>!$_`` wrapper Contacts puts around built-in labels.

    ``"_$!<Home>!$_"`` becomes ``"Home"``; custom labels are returned as is.
    """
    if label.startswith(_LABEL_PREFIX) and label.endswith(_LABEL_SUFFIX):
        return label[len(_LABEL_PREFIX):-len(_LABEL_SUFFIX)]
    return label


def split_list(value: str | None, sep: str = ",") -> list[str]:
    """Split a comma separated option into trimmed, non-empty entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(sep) if part.strip()]
