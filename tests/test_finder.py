"""Tests for the Finder integration."""

import os
import plistlib
from unittest.mock import patch

import pytest

from pocket.applescript import ScriptExecutionError, TargetNotFoundError
from pocket.finder import (
    add_tag,
    get_info,
    get_tags,
    list_directory,
    move_to_trash,
    open_path,
    remove_tag,
    reveal,
    search,
)
from pocket.finder.files import build_spotlight_query, parse_mdls
from pocket.finder.paths import human_readable_size, resolve_path
from pocket.finder.tags import TAGS_ATTRIBUTE, parse_mdls_tags

MDLS_OUTPUT = """kMDItemContentCreationDate = 2025-01-15 09:00:00 +0000
kMDItemContentType         = "public.plain-text"
kMDItemLastUsedDate        = (null)
"""


@pytest.fixture
def sample_tree(tmp_path):
    (tmp_path / "notes.txt").write_text("hello")
    (tmp_path / ".hidden").write_text("x")
    (tmp_path / "b_folder").mkdir()
    (tmp_path / "a_folder").mkdir()
    (tmp_path / "a_folder" / "inner.bin").write_bytes(b"\0" * 2048)
    return tmp_path


class TestPaths:
    """Tests for path helpers."""

    def test_expands_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "doc.txt").write_text("x")

        assert resolve_path("~/doc.txt") == tmp_path / "doc.txt"

    def test_missing_path(self, tmp_path) -> None:
        with pytest.raises(TargetNotFoundError) as exc_info:
            resolve_path(str(tmp_path / "nope"))

        assert exc_info.value.context == {"path": str(tmp_path / "nope")}

    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 B"), (1023, "1023 B"), (1024, "1.0 KB"), (1536, "1.5 KB"), (5 * 1024**2, "5.0 MB"), (3 * 1024**4, "3.0 TB")],
    )
    def test_human_readable_size(self, size: int, expected: str) -> None:
        assert human_readable_size(size) == expected


class TestListDirectory:
    """Tests for directory listings."""

    def test_folders_first_hidden_skipped(self, sample_tree) -> None:
        entries = list_directory(str(sample_tree))

        assert [(e.name, e.type) for e in entries] == [
            ("a_folder", "directory"),
            ("b_folder", "directory"),
            ("notes.txt", "file"),
        ]
        assert entries[2].size == 5

    def test_show_hidden(self, sample_tree) -> None:
        names = [e.name for e in list_directory(str(sample_tree), show_hidden=True)]
        assert ".hidden" in names

    def test_not_a_directory(self, sample_tree) -> None:
        with pytest.raises(TargetNotFoundError):
            list_directory(str(sample_tree / "notes.txt"))


class TestGetInfo:
    """Tests for file details."""

    @patch("pocket.finder.tags.run_command")
    @patch("pocket.finder.files.run_command")
    def test_file_with_metadata_and_tags(self, mock_mdls, mock_tags, sample_tree) -> None:
        mock_mdls.return_value = MDLS_OUTPUT
        mock_tags.return_value = '(\n    Red,\n    "Two Words"\n)'

        info = get_info(str(sample_tree / "notes.txt"))

        assert info.type == "file"
        assert info.size == 5
        assert info.content_type == "public.plain-text"
        assert info.created is not None and info.created.year == 2025
        assert info.last_used is None
        assert info.tags == ["Red", "Two Words"]
        assert info.permissions.startswith("-")

    @patch("pocket.finder.tags.run_command")
    @patch("pocket.finder.files.run_command")
    def test_directory_size_is_recursive(self, mock_mdls, mock_tags, sample_tree) -> None:
        mock_mdls.return_value = ""
        mock_tags.return_value = "(null)"

        info = get_info(str(sample_tree / "a_folder"))

        assert info.type == "directory"
        assert info.size == 2048
        assert info.size_human == "2.0 KB"

    @patch("pocket.finder.tags.run_command")
    @patch("pocket.finder.files.run_command")
    def test_metadata_failures_degrade(self, mock_mdls, mock_tags, sample_tree) -> None:
        mock_mdls.side_effect = ScriptExecutionError("mdls failed")
        mock_tags.side_effect = ScriptExecutionError("mdls failed")

        info = get_info(str(sample_tree / "notes.txt"))

        assert info.name == "notes.txt"
        assert info.tags == []
        assert info.content_type == ""

    def test_missing(self, tmp_path) -> None:
        with pytest.raises(TargetNotFoundError):
            get_info(str(tmp_path / "missing"))


class TestParsing:
    """Tests for mdls output parsing."""

    def test_parse_mdls(self) -> None:
        assert parse_mdls(MDLS_OUTPUT) == {
            "kMDItemContentCreationDate": "2025-01-15 09:00:00 +0000",
            "kMDItemContentType": "public.plain-text",
        }

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("(null)", []),
            ("", []),
            ("(\n)", []),
            ("(\n    Red\n)", ["Red"]),
            ('(\n    Work,\n    "Long Tag"\n)', ["Work", "Long Tag"]),
        ],
    )
    def test_parse_tags(self, output: str, expected: list[str]) -> None:
        assert parse_mdls_tags(output) == expected


class TestTags:
    """Tests for reading and writing Finder tags."""

    @patch("pocket.finder.tags.run_command")
    def test_get_tags(self, mock_run, sample_tree) -> None:
        mock_run.return_value = "(\n    Red\n)"
        path = str(sample_tree / "notes.txt")

        assert get_tags(path) == ["Red"]
        assert mock_run.call_args.args[0] == ["mdls", "-name", "kMDItemUserTags", "-raw", path]

    @patch("pocket.finder.tags.run_command")
    def test_add_tag_writes_plist(self, mock_run, sample_tree) -> None:
        mock_run.side_effect = ["(\n    Red\n)", ""]
        path = str(sample_tree / "notes.txt")

        assert add_tag(path, "Work") == ["Red", "Work"]

        write_args = mock_run.call_args_list[1].args[0]
        assert write_args[:3] == ["xattr", "-w", TAGS_ATTRIBUTE]
        assert plistlib.loads(write_args[3].encode("utf-8")) == ["Red", "Work"]
        assert write_args[4] == path

    @patch("pocket.finder.tags.run_command")
    def test_add_existing_tag_is_noop(self, mock_run, sample_tree) -> None:
        mock_run.return_value = "(\n    Red\n)"

        assert add_tag(str(sample_tree / "notes.txt"), "Red") == ["Red"]
        assert mock_run.call_count == 1

    @patch("pocket.finder.tags.run_command")
    def test_remove_last_tag_deletes_attribute(self, mock_run, sample_tree) -> None:
        mock_run.side_effect = ["(\n    Red\n)", ""]
        path = str(sample_tree / "notes.txt")

        assert remove_tag(path, "Red") == []
        assert mock_run.call_args_list[1].args[0] == ["xattr", "-d", TAGS_ATTRIBUTE, path]


class TestSpotlight:
    """Tests for Spotlight search."""

    def test_query_by_name_or_content(self) -> None:
        assert build_spotlight_query("report") == (
            "kMDItemDisplayName == '*report*'wcd || kMDItemTextContent == '*report*'wcd"
        )

    def test_query_escapes(self) -> None:
        assert "'*it\\'s\\**'wcd" in build_spotlight_query("it's*")

    def test_query_kind(self) -> None:
        query = build_spotlight_query("x", "PDF")
        assert query.startswith("(kMDItemContentTypeTree == 'com.adobe.pdf') && (")

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            build_spotlight_query("x", "spreadsheet")

    @patch("pocket.finder.files.run_command")
    def test_search(self, mock_run, tmp_path) -> None:
        mock_run.return_value = "/Users/me/a.pdf\n/Users/me/b.pdf\n\n/Users/me/c.pdf"

        results = search("x", scope=str(tmp_path), limit=2)

        assert [(r.name, r.path) for r in results] == [("a.pdf", "/Users/me/a.pdf"), ("b.pdf", "/Users/me/b.pdf")]
        assert mock_run.call_args.args[0][:3] == ["mdfind", "-onlyin", str(tmp_path)]


class TestActions:
    """Tests for open, reveal and trash."""

    @patch("pocket.finder.actions.run_command")
    def test_open_with_app(self, mock_run, sample_tree) -> None:
        path = str(sample_tree / "notes.txt")

        assert open_path(path, "TextEdit") == path
        assert mock_run.call_args.args[0] == ["open", "-a", "TextEdit", path]

    @patch("pocket.finder.actions.run_command")
    def test_open_default(self, mock_run, sample_tree) -> None:
        open_path(str(sample_tree))
        assert mock_run.call_args.args[0] == ["open", str(sample_tree)]

    @patch("pocket.finder.actions.run_applescript")
    def test_reveal(self, mock_run, sample_tree) -> None:
        path = str(sample_tree / "notes.txt")

        reveal(path)

        script = mock_run.call_args.args[0]
        assert f'reveal (POSIX file "{path}" as alias)' in script
        assert 'tell application "Finder"' in script

    @patch("pocket.finder.actions.run_applescript")
    def test_trash(self, mock_run, sample_tree) -> None:
        path = str(sample_tree / "notes.txt")

        assert move_to_trash(path) == path
        assert f'delete (POSIX file "{path}" as alias)' in mock_run.call_args.args[0]
        assert os.path.exists(path)

    @patch("pocket.finder.actions.run_applescript")
    def test_trash_missing_path(self, mock_run, tmp_path) -> None:
        with pytest.raises(TargetNotFoundError):
            move_to_trash(str(tmp_path / "gone"))

        mock_run.assert_not_called()
