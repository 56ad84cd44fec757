"""Date parsing for AppleScript output and user input."""

from datetime import datetime, timedelta

from pocket.applescript.errors import DecodeError

# Tried in order. The first is what the generated isoDate handler emits; the
# rest cover dates coerced to text by the running locale.
APPLESCRIPT_DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S",  # 2024-12-20 22:30:00
    # US English locale formats
    "%A, %B %d, %Y at %I:%M:%S %p",  # Friday, December 20, 2024 at 10:30:00 AM
    "%A, %B %d, %Y at %H:%M:%S",  # Friday, December 20, 2024 at 22:30:00
    "%a, %b %d, %Y at %I:%M:%S %p",  # Fri, Dec 20, 2024 at 10:30:00 AM
    "%B %d, %Y at %I:%M:%S %p",  # December 20, 2024 at 10:30:00 AM
    "%B %d, %Y at %H:%M:%S",  # December 20, 2024 at 22:30:00
    # UK English locale
    "%A, %d %B %Y at %H:%M:%S",  # Friday, 20 December 2024 at 22:30:00
    "%A %d %B %Y at %H:%M:%S",  # Friday 20 December 2024 at 22:30:00
    # ISO 8601 variants
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    # Numeric
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%d/%m/%Y %H:%M:%S",
    "%A, %B %d, %Y at %I:%M %p",  # without seconds
]

# Formats accepted on the command line, with or without a time
USER_DATE_FORMATS = [
    ("%Y-%m-%dT%H:%M:%S", True),
    ("%Y-%m-%d %H:%M:%S", True),
    ("%Y-%m-%dT%H:%M", True),
    ("%Y-%m-%d %H:%M", True),
    ("%Y-%m-%d", False),
    ("%m/%d/%Y %H:%M:%S", True),
    ("%m/%d/%Y %H:%M", True),
    ("%m/%d/%Y", False),
    ("%b %d, %Y %I:%M %p", True),
    ("%B %d, %Y %I:%M %p", True),
    ("%b %d, %Y %H:%M", True),
    ("%B %d, %Y %H:%M", True),
    ("%b %d, %Y", False),
    ("%B %d, %Y", False),
]

DEFAULT_HOUR = 9


def parse_applescript_date(value: str) -> datetime | None:
    """Parse a date emitted by a script.

    Args:
        value: Date text; empty or ``missing value`` means no date.

    Returns:
        The parsed datetime, or None when the date is unset.

    Raises:
        DecodeError: If the text matches none of the known formats.
    """
    value = value.strip() if value else ""
    if not value or value == "missing value":
        return None

    # macOS inserts a narrow no-break space before AM/PM on recent releases
    value = value.replace("\u202f", " ")

    for fmt in APPLESCRIPT_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    raise DecodeError(f"Unrecognized date format: {value!r}", context={"value": value})


def parse_user_date(value: str, *, now: datetime | None = None) -> datetime:
    """Parse a date typed by the user.

    Accepts ``today``, ``tomorrow`` and ``next week`` (all at 9:00) as well
    as ISO, US numeric and month-name forms. Dates without a time get 9:00.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    now = now or datetime.now()
    text = value.strip()
    keyword = text.lower()
    morning = now.replace(hour=DEFAULT_HOUR, minute=0, second=0, microsecond=0)

    if keyword == "today":
        return morning
    if keyword == "tomorrow":
        return morning + timedelta(days=1)
    if keyword == "next week":
        return morning + timedelta(days=7)

    for fmt, has_time in USER_DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if not has_time:
            parsed = parsed.replace(hour=DEFAULT_HOUR)
        return parsed

    raise ValueError(f"unrecognized date format: {value}")


def day_bounds(day: datetime) -> tuple[datetime, datetime]:
    """Return midnight of ``day`` and midnight of the following day."""
    start = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
