"""Tests for the Contacts.app integration."""

from datetime import date
from unittest.mock import patch

import pytest

from pocket.applescript import AppNotRunningError, ScriptExecutionError, TargetNotFoundError
from pocket.applescript.records import FIELD_SEP, ITEM_SEP, PART_SEP, RECORD_SEP
from pocket.contacts import (
    Address,
    LabeledValue,
    create_contact,
    get_contact,
    get_group_members,
    list_contacts,
    list_groups,
    search_contacts,
)
from pocket.contacts.actions import split_name


def record(*fields: str) -> str:
    return FIELD_SEP.join(fields) + RECORD_SEP


def sublist(*items: tuple[str, ...]) -> str:
    return "".join(PART_SEP.join(item) + ITEM_SEP for item in items)


CARD = record(
    "Ada Lovelace",
    "Ada",
    "Lovelace",
    "Analytical Engines",
    "Mathematician",
    "Met at the lecture",
    "1815-12-10 00:00:00",
    sublist(("_$!<Home>!$_", "ada@home.org"), ("work", "ada@engines.com")),
    sublist(("_$!<Mobile>!$_", "+44 20 0000")),
    sublist(("_$!<Home>!$_", "12 St James's Sq", "London", "", "SW1", "UK")),
)


class TestSummaries:
    """Tests for listing and searching contacts."""

    @patch("pocket.contacts.contacts.run_applescript")
    def test_list(self, mock_run) -> None:
        mock_run.return_value = record("Ada Lovelace", "ada@home.org", "", "Engines") + record(
            "Charles Babbage", "", "+44", ""
        )

        contacts = list_contacts(limit=5)

        assert [c.name for c in contacts] == ["Ada Lovelace", "Charles Babbage"]
        assert contacts[0].email == "ada@home.org"
        assert contacts[1].phone == "+44"
        assert "if found >= 5 then exit repeat" in mock_run.call_args.args[0]

    @patch("pocket.contacts.contacts.run_applescript")
    def test_search_matches_name_or_company(self, mock_run) -> None:
        mock_run.return_value = ""

        assert search_contacts("Ada") == []
        assert (
            'repeat with p in (people whose (name contains "Ada" or organization contains "Ada"))'
            in mock_run.call_args.args[0]
        )

    @pytest.mark.parametrize("query", ["", "   "])
    @patch("pocket.contacts.contacts.run_applescript")
    def test_search_rejects_empty_query(self, mock_run, query: str) -> None:
        with pytest.raises(ValueError):
            search_contacts(query)

        mock_run.assert_not_called()


class TestGetContact:
    """Tests for full contact cards."""

    @patch("pocket.contacts.contacts.run_applescript")
    def test_card_with_groups(self, mock_run) -> None:
        mock_run.side_effect = [CARD, record("Friends") + record("Science")]

        contact = get_contact("Ada Lovelace")

        assert contact.first_name == "Ada"
        assert contact.birthday == date(1815, 12, 10)
        assert contact.emails == [
            LabeledValue("Home", "ada@home.org"),
            LabeledValue("work", "ada@engines.com"),
        ]
        assert contact.phones == [LabeledValue("Mobile", "+44 20 0000")]
        assert contact.addresses == [
            Address(label="Home", street="12 St James's Sq", city="London", zip="SW1", country="UK")
        ]
        assert contact.groups == ["Friends", "Science"]
        assert mock_run.call_count == 2

    @patch("pocket.contacts.contacts.run_applescript")
    def test_group_failure_degrades_to_empty(self, mock_run) -> None:
        mock_run.side_effect = [CARD, ScriptExecutionError("Contacts got an error")]

        contact = get_contact("Ada Lovelace")

        assert contact.name == "Ada Lovelace"
        assert contact.groups == []

    @patch("pocket.contacts.contacts.run_applescript")
    def test_primary_failure_is_fatal(self, mock_run) -> None:
        mock_run.side_effect = AppNotRunningError("Contacts")

        with pytest.raises(AppNotRunningError):
            get_contact("Ada Lovelace")

        assert mock_run.call_count == 1

    @patch("pocket.contacts.contacts.run_applescript")
    def test_without_groups(self, mock_run) -> None:
        mock_run.return_value = CARD

        contact = get_contact("Ada Lovelace", include_groups=False)

        assert contact.groups == []
        assert mock_run.call_count == 1

    @patch("pocket.contacts.contacts.run_applescript")
    def test_name_escaped(self, mock_run) -> None:
        mock_run.side_effect = [CARD, ""]

        get_contact('Dwayne "The Rock" Johnson')

        first_script = mock_run.call_args_list[0].args[0]
        assert 'first person whose name is "Dwayne \\"The Rock\\" Johnson"' in first_script


class TestGroups:
    """Tests for contact groups."""

    @patch("pocket.contacts.contacts.run_applescript")
    def test_list_groups(self, mock_run) -> None:
        mock_run.return_value = record("Friends", "12") + record("Work", "")

        groups = list_groups()

        assert [(g.name, g.count) for g in groups] == [("Friends", 12), ("Work", 0)]

    @patch("pocket.contacts.contacts.run_applescript")
    def test_missing_group(self, mock_run) -> None:
        mock_run.side_effect = TargetNotFoundError("[-1728] Can't get group \"Nope\".")

        with pytest.raises(TargetNotFoundError):
            get_group_members("Nope")

        assert 'people of group "Nope"' in mock_run.call_args.args[0]


class TestCreateContact:
    """Tests for contact creation."""

    @pytest.mark.parametrize(
        "full_name,expected",
        [
            ("Ada Lovelace", ("Ada", "Lovelace")),
            ("Cher", ("Cher", "")),
            ("  Ludwig van Beethoven ", ("Ludwig", "van Beethoven")),
        ],
    )
    def test_split_name(self, full_name: str, expected: tuple[str, str]) -> None:
        assert split_name(full_name) == expected

    @patch("pocket.contacts.actions.run_applescript")
    def test_full(self, mock_run) -> None:
        mock_run.return_value = "ABC:ABPerson"

        assert create_contact("Ada Lovelace", company="Engines", email="ada@x.com", phone="+44") == "ABC:ABPerson"

        script = mock_run.call_args.args[0]
        assert (
            'make new person with properties {first name:"Ada", last name:"Lovelace", organization:"Engines"}'
            in script
        )
        assert 'with properties {label:"work", value:"ada@x.com"}' in script
        assert 'with properties {label:"mobile", value:"+44"}' in script
        assert "    save" in script

    @patch("pocket.contacts.actions.run_applescript")
    def test_single_name(self, mock_run) -> None:
        mock_run.return_value = "id"

        create_contact("Cher")

        script = mock_run.call_args.args[0]
        assert 'make new person with properties {first name:"Cher"}' in script
        assert "make new email" not in script

    def test_empty_name(self) -> None:
        with pytest.raises(ValueError):
            create_contact("   ")
