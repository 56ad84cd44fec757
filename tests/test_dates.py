"""Tests for date parsing."""

from datetime import datetime

import pytest

from pocket.applescript import DecodeError
from pocket.applescript.dates import day_bounds, parse_applescript_date, parse_user_date


class TestParseAppleScriptDate:
    """Tests for dates emitted by scripts."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-12-20 22:30:00", datetime(2024, 12, 20, 22, 30, 0)),
            ("Friday, December 20, 2024 at 10:30:00 AM", datetime(2024, 12, 20, 10, 30, 0)),
            ("Friday, December 20, 2024 at 22:30:00", datetime(2024, 12, 20, 22, 30, 0)),
            ("Fri, Dec 20, 2024 at 10:30:00 PM", datetime(2024, 12, 20, 22, 30, 0)),
            ("December 20, 2024 at 10:30:00 AM", datetime(2024, 12, 20, 10, 30, 0)),
            ("Friday, 20 December 2024 at 22:30:00", datetime(2024, 12, 20, 22, 30, 0)),
            ("2024-12-20T22:30:00", datetime(2024, 12, 20, 22, 30, 0)),
            ("2024-12-20", datetime(2024, 12, 20)),
            ("12/20/2024 22:30:00", datetime(2024, 12, 20, 22, 30, 0)),
        ],
    )
    def test_known_formats(self, value: str, expected: datetime) -> None:
        assert parse_applescript_date(value) == expected

    def test_narrow_no_break_space(self) -> None:
        value = "Friday, December 20, 2024 at 10:30:00\u202fAM"
        assert parse_applescript_date(value) == datetime(2024, 12, 20, 10, 30, 0)

    @pytest.mark.parametrize("value", ["", "missing value", "   "])
    def test_unset(self, value: str) -> None:
        assert parse_applescript_date(value) is None

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            parse_applescript_date("not a date")

        assert exc_info.value.context == {"value": "not a date"}


class TestParseUserDate:
    """Tests for dates typed on the command line."""

    NOW = datetime(2025, 3, 1, 15, 45, 12)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("today", datetime(2025, 3, 1, 9, 0)),
            ("Tomorrow", datetime(2025, 3, 2, 9, 0)),
            ("next week", datetime(2025, 3, 8, 9, 0)),
        ],
    )
    def test_keywords(self, value: str, expected: datetime) -> None:
        assert parse_user_date(value, now=self.NOW) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2025-03-10 14:00", datetime(2025, 3, 10, 14, 0)),
            ("2025-03-10T14:00:30", datetime(2025, 3, 10, 14, 0, 30)),
            ("2025-03-10", datetime(2025, 3, 10, 9, 0)),
            ("03/10/2025 14:00", datetime(2025, 3, 10, 14, 0)),
            ("03/10/2025", datetime(2025, 3, 10, 9, 0)),
            ("Mar 10, 2025 2:00 PM", datetime(2025, 3, 10, 14, 0)),
            ("March 10, 2025", datetime(2025, 3, 10, 9, 0)),
        ],
    )
    def test_explicit_forms(self, value: str, expected: datetime) -> None:
        assert parse_user_date(value, now=self.NOW) == expected

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_user_date("someday", now=self.NOW)


class TestDayBounds:
    def test_midnight_to_midnight(self) -> None:
        start, end = day_bounds(datetime(2025, 3, 1, 15, 45))
        assert start == datetime(2025, 3, 1)
        assert end == datetime(2025, 3, 2)
