"""Tests for the Calendar.app integration."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from pocket.applescript import DecodeError, TargetNotFoundError
from pocket.applescript.records import FIELD_SEP, RECORD_SEP
from pocket.calendar import (
    CalendarEvent,
    create_event,
    delete_event,
    find_events,
    get_calendars,
    get_events,
    get_events_today,
    get_upcoming_events,
)


def record(*fields: str) -> str:
    return FIELD_SEP.join(fields) + RECORD_SEP


def event_record(
    uid: str = "E1",
    summary: str = "Standup",
    start: str = "2025-01-15 09:00:00",
    end: str = "2025-01-15 09:30:00",
    all_day: str = "false",
    calendar: str = "Work",
    location: str = "",
    description: str = "",
    url: str = "",
) -> str:
    return record(uid, summary, start, end, all_day, calendar, location, description, url)


def make_event(**overrides) -> CalendarEvent:
    values = {
        "id": "E1",
        "summary": "Meeting",
        "start_date": datetime(2025, 1, 15, 10, 0),
        "end_date": datetime(2025, 1, 15, 11, 30),
        "all_day": False,
        "calendar_name": "Work",
    }
    values.update(overrides)
    return CalendarEvent(**values)


class TestCalendarEvent:
    """Tests for CalendarEvent properties."""

    def test_duration(self) -> None:
        event = make_event()
        assert event.duration_minutes == 90
        assert event.duration_str == "1h 30m"

    @pytest.mark.parametrize(
        "minutes,expected",
        [(15, "15m"), (60, "1h"), (150, "2h 30m")],
    )
    def test_duration_str(self, minutes: int, expected: str) -> None:
        start = datetime(2025, 1, 15, 10, 0)
        event = make_event(start_date=start, end_date=start + timedelta(minutes=minutes))
        assert event.duration_str == expected

    def test_all_day(self) -> None:
        event = make_event(all_day=True)
        assert event.duration_minutes == 1440
        assert event.duration_str == "all day"
        assert str(event) == "2025-01-15 (all day): Meeting"

    def test_str(self) -> None:
        assert str(make_event()) == "2025-01-15 10:00: Meeting"

    def test_is_upcoming(self) -> None:
        assert make_event(start_date=datetime.now() + timedelta(hours=1)).is_upcoming
        assert not make_event(start_date=datetime(2020, 1, 1)).is_upcoming


class TestGetCalendars:
    """Tests for calendar listing."""

    @patch("pocket.calendar.calendars.run_applescript")
    def test_parses_calendars(self, mock_run) -> None:
        mock_run.return_value = record("Work", "Office", "true") + record("Holidays", "", "false")

        calendars = get_calendars()

        assert [(c.name, c.description, c.writable) for c in calendars] == [
            ("Work", "Office", True),
            ("Holidays", "", False),
        ]
        assert mock_run.call_args.kwargs == {"app": "Calendar"}

    @patch("pocket.calendar.calendars.run_applescript")
    def test_empty(self, mock_run) -> None:
        mock_run.return_value = ""
        assert get_calendars() == []


class TestGetEvents:
    """Tests for event queries."""

    @patch("pocket.calendar.events.run_applescript")
    def test_parses_and_sorts(self, mock_run) -> None:
        mock_run.return_value = event_record(
            uid="E2", summary="Lunch", start="2025-01-15 12:00:00", end="2025-01-15 13:00:00",
            location="Cafe", url="https://example.com",
        ) + event_record()

        events = get_events(start_date=datetime(2025, 1, 15), end_date=datetime(2025, 1, 16))

        assert [e.summary for e in events] == ["Standup", "Lunch"]
        lunch = events[1]
        assert lunch.location == "Cafe"
        assert lunch.url == "https://example.com"
        assert events[0].location is None
        assert events[0].url is None

    @patch("pocket.calendar.events.run_applescript")
    def test_range_and_filters_in_script(self, mock_run) -> None:
        mock_run.return_value = ""

        get_events("Work", datetime(2025, 1, 15), datetime(2025, 1, 16), title='Team "A"', limit=3)

        script = mock_run.call_args.args[0]
        assert "set year of rangeStart to 2025" in script
        assert "set day of rangeEnd to 16" in script
        assert 'repeat with cal in {calendar "Work"}' in script
        assert 'whose start date >= rangeStart and start date < rangeEnd and summary contains "Team \\"A\\""' in script
        assert "if found >= 3 then exit repeat" in script

    @patch("pocket.calendar.events.run_applescript")
    def test_all_calendars_without_title(self, mock_run) -> None:
        mock_run.return_value = ""

        get_events_today()

        script = mock_run.call_args.args[0]
        assert "repeat with cal in calendars" in script
        assert "summary contains" not in script

    @patch("pocket.calendar.events.run_applescript")
    def test_missing_start_date_is_decode_error(self, mock_run) -> None:
        mock_run.return_value = event_record(start="")

        with pytest.raises(DecodeError):
            get_events()

    @patch("pocket.calendar.events.run_applescript")
    def test_upcoming_limited(self, mock_run) -> None:
        mock_run.return_value = "".join(
            event_record(uid=f"E{i}", start=f"2099-01-{i:02d} 09:00:00", end=f"2099-01-{i:02d} 10:00:00")
            for i in range(1, 6)
        )

        events = get_upcoming_events(limit=2)

        assert [e.id for e in events] == ["E1", "E2"]

    @patch("pocket.calendar.events.run_applescript")
    def test_find_events(self, mock_run) -> None:
        mock_run.return_value = ""

        find_events("Dentist")

        assert 'summary contains "Dentist"' in mock_run.call_args.args[0]


class TestCreateEvent:
    """Tests for event creation."""

    @patch("pocket.calendar.actions.run_applescript")
    def test_optional_properties_omitted(self, mock_run) -> None:
        mock_run.return_value = "NEW-UID"

        uid = create_event("Lunch", datetime(2025, 1, 15, 12, 0), datetime(2025, 1, 15, 13, 0))

        assert uid == "NEW-UID"
        script = mock_run.call_args.args[0]
        assert "set targetCal to first calendar whose writable is true" in script
        assert (
            'with properties {summary:"Lunch", start date:eventStart, end date:eventEnd}' in script
        )
        assert "location" not in script

    @patch("pocket.calendar.actions.run_applescript")
    def test_all_properties(self, mock_run) -> None:
        mock_run.return_value = "NEW-UID"

        create_event(
            "Offsite",
            datetime(2025, 1, 15),
            datetime(2025, 1, 16),
            calendar_name="Work",
            location="HQ",
            description="Bring laptop",
            url="https://example.com",
            all_day=True,
        )

        script = mock_run.call_args.args[0]
        assert 'set targetCal to calendar "Work"' in script
        assert (
            '{summary:"Offsite", start date:eventStart, end date:eventEnd, location:"HQ", '
            'description:"Bring laptop", url:"https://example.com", allday event:true}'
        ) in script

    def test_end_before_start(self) -> None:
        with pytest.raises(ValueError):
            create_event("x", datetime(2025, 1, 2), datetime(2025, 1, 1))


class TestDeleteEvent:
    """Tests for event deletion."""

    @patch("pocket.calendar.actions.run_applescript")
    def test_returns_count(self, mock_run) -> None:
        mock_run.return_value = "2"

        assert delete_event("Standup", datetime(2025, 1, 15, 14, 0)) == 2

        script = mock_run.call_args.args[0]
        assert "set time of dayStart to 0" in script
        assert 'whose summary is "Standup" and start date >= dayStart and start date < dayEnd' in script

    @patch("pocket.calendar.actions.run_applescript")
    def test_not_found(self, mock_run) -> None:
        mock_run.side_effect = TargetNotFoundError("[-2700] Event not found: Standup")

        with pytest.raises(TargetNotFoundError):
            delete_event("Standup", datetime(2025, 1, 15))
