"""Tests for the AppleScript runner, escaping and error classification."""

import subprocess

import pytest

from pocket.applescript import (
    AppleScriptRunner,
    AppNotRunningError,
    ErrorKind,
    PermissionDeniedError,
    PlatformUnsupportedError,
    ScriptExecutionError,
    TargetNotFoundError,
    escape_applescript_string,
    fetch_optional,
)
from pocket.applescript.base import ERROR_SENTINEL, classify_failure, error_number
from pocket.applescript.platform import check_platform


def parse_string_literal(literal: str) -> str:
    """Read back the contents of an AppleScript string literal body."""
    out = []
    chars = iter(literal)
    for ch in chars:
        if ch == "\\":
            out.append(next(chars))
        else:
            assert ch != '"', "unescaped quote inside literal"
            out.append(ch)
    return "".join(out)


class TestEscapeAppleScriptString:
    """Tests for AppleScript string escaping."""

    def test_escape_quotes(self) -> None:
        assert escape_applescript_string('Hello "World"') == 'Hello \\"World\\"'

    def test_escape_backslashes(self) -> None:
        assert escape_applescript_string("path\\to\\file") == "path\\\\to\\\\file"

    def test_escape_combined(self) -> None:
        assert escape_applescript_string('Say "Hello\\World"') == 'Say \\"Hello\\\\World\\"'

    def test_single_quote(self) -> None:
        """A lone quote becomes a single backslash-quote."""
        assert escape_applescript_string('"') == '\\"'

    def test_backslash_escaped_before_quote(self) -> None:
        """Backslash-quote must not have the inserted backslash escaped again."""
        assert escape_applescript_string('\\"') == '\\\\\\"'

    def test_other_characters_pass_through(self) -> None:
        value = "it's\ttabbed\nand ünïcödé 'quoted'"
        assert escape_applescript_string(value) == value

    def test_empty_string(self) -> None:
        assert escape_applescript_string("") == ""

    def test_not_idempotent(self) -> None:
        once = escape_applescript_string('"')
        assert escape_applescript_string(once) == '\\\\\\"'

    @pytest.mark.parametrize(
        "value",
        [
            "",
            '"',
            "\\",
            '\\"',
            '"\\',
            '""\\\\""',
            'a "b" \\c\\ "d',
            "\\\\\\",
            'end"quote',
            "trailing backslash\\",
        ],
    )
    def test_round_trip(self, value: str) -> None:
        """Escaped text read back as a literal is the original string."""
        assert parse_string_literal(escape_applescript_string(value)) == value


class TestClassifyFailure:
    """Tests for mapping diagnostic text to error kinds."""

    def test_not_running(self) -> None:
        error = classify_failure("Application isn't running (-600)", app="Calendar")
        assert isinstance(error, AppNotRunningError)
        assert error.kind == ErrorKind.APPLICATION_NOT_RUNNING

    @pytest.mark.parametrize(
        "text",
        [
            "Not authorized to send Apple events to Notes. (-1743)",
            "The file couldn't be opened because you don't have permission to view it.",
            "osascript is not allowed assistive access.",
        ],
    )
    def test_permission(self, text: str) -> None:
        error = classify_failure(text, app="Notes")
        assert isinstance(error, PermissionDeniedError)
        assert "System Settings" in error.message
        assert error.context["detail"] == text

    def test_not_found_only_when_allowed(self) -> None:
        text = "Can't get calendar \"Nope\". (-1728)"
        assert isinstance(classify_failure(text, allow_not_found=True), TargetNotFoundError)
        assert isinstance(classify_failure(text), ScriptExecutionError)

    def test_other_failure_keeps_raw_text(self) -> None:
        error = classify_failure("syntax error: Expected end of line (-2741)")
        assert type(error) is ScriptExecutionError
        assert error.message == "syntax error: Expected end of line (-2741)"

    def test_not_running_checked_before_permission(self) -> None:
        error = classify_failure("Mail isn't running, permission unknown (-600)")
        assert isinstance(error, AppNotRunningError)

    @pytest.mark.parametrize(
        "payload",
        [
            "[-1728] Note not found: Permission slip",
            "[-1728] Reminder not found: Server not running checklist",
            "[-2700] Note not found: Permission slip",
            "[-2700] Reminder not found: Server not running checklist",
        ],
    )
    def test_object_name_does_not_change_kind(self, payload: str) -> None:
        error = classify_failure(payload, app="Notes", allow_not_found=True)
        assert error.kind == ErrorKind.TARGET_NOT_FOUND

    @pytest.mark.parametrize(
        "payload,kind",
        [
            ("[-600] Notes got an error: Note not found", ErrorKind.APPLICATION_NOT_RUNNING),
            ("[-1743] Not found in the list of allowed apps", ErrorKind.PERMISSION_DENIED),
            ("[-1719] Invalid index.", ErrorKind.TARGET_NOT_FOUND),
        ],
    )
    def test_number_decides_over_text(self, payload: str, kind: ErrorKind) -> None:
        assert classify_failure(payload, allow_not_found=True).kind == kind

    @pytest.mark.parametrize(
        "text,number",
        [
            ("[-1728] Can't get note", -1728),
            ("execution error: Application isn't running. (-600)", -600),
            ("Can't get calendar \"Nope\". (-1728).", -1728),
            ("mdls: no such file", None),
        ],
    )
    def test_error_number(self, text: str, number: int | None) -> None:
        assert error_number(text) == number


class TestAppleScriptRunner:
    """Tests for running scripts through a patched subprocess."""

    def test_returns_trimmed_stdout(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(stdout="hello\n")
        runner = AppleScriptRunner(platform="darwin")

        assert runner.run('return "hello"') == "hello"

        args, kwargs = mock_subprocess.call_args
        assert args[0] == ["osascript", "-e", 'return "hello"']
        assert kwargs["timeout"] == 30
        assert kwargs["capture_output"] is True

    def test_separators_survive_trimming(self, mock_subprocess, completed_process) -> None:
        """Record separators at the end of the output are data, not whitespace."""
        mock_subprocess.return_value = completed_process(stdout="a\x1fb\x1e\n")
        runner = AppleScriptRunner(platform="darwin")

        assert runner.run("x") == "a\x1fb\x1e"

    def test_custom_executable_and_timeout(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(stdout="")
        runner = AppleScriptRunner(executable="/opt/bin/osascript", timeout=5, platform="darwin")

        runner.run("x")
        runner.run("y", timeout=90)

        first, second = mock_subprocess.call_args_list
        assert first.args[0][0] == "/opt/bin/osascript"
        assert first.kwargs["timeout"] == 5
        assert second.kwargs["timeout"] == 90

    def test_stderr_not_running(self, mock_subprocess, completed_process) -> None:
        """A failing process whose stderr reports -600 is ApplicationNotRunning."""
        mock_subprocess.return_value = completed_process(
            stderr="execution error: Application isn't running (-600)", returncode=1
        )
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(AppNotRunningError) as exc_info:
            runner.run("x", app="Reminders")

        assert exc_info.value.kind == ErrorKind.APPLICATION_NOT_RUNNING
        assert "Reminders" in exc_info.value.message

    def test_stderr_generic_failure(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(stderr="boom (-2700)\n", returncode=1)
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(ScriptExecutionError) as exc_info:
            runner.run("x")

        assert exc_info.value.message == "boom (-2700)"
        assert exc_info.value.script == "x"

    def test_stderr_lookup_failure_is_not_target_not_found(self, mock_subprocess, completed_process) -> None:
        """Only sentinel payloads are classified as lookups."""
        mock_subprocess.return_value = completed_process(stderr="Can't get window 1. (-1719)", returncode=1)
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(ScriptExecutionError):
            runner.run("x")

    def test_sentinel_not_found(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(
            stdout=f'{ERROR_SENTINEL}[-1728] Can\'t get list "Groceries".\n'
        )
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(TargetNotFoundError) as exc_info:
            runner.run("x", app="Reminders")

        assert exc_info.value.kind == ErrorKind.TARGET_NOT_FOUND
        assert "Groceries" in exc_info.value.message

    def test_sentinel_custom_not_found_message(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(stdout=f"{ERROR_SENTINEL}[-2700] Note not found: Ideas")
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(TargetNotFoundError):
            runner.run("x", app="Notes")

    def test_sentinel_permission(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(
            stdout=f"{ERROR_SENTINEL}[-1743] Not authorized to send Apple events to Contacts."
        )
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(PermissionDeniedError):
            runner.run("x", app="Contacts")

    def test_sentinel_other(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(stdout=f"{ERROR_SENTINEL}[-10000] Something odd")
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(ScriptExecutionError) as exc_info:
            runner.run("x")

        assert exc_info.value.message == "[-10000] Something odd"

    def test_timeout(self, mock_subprocess) -> None:
        mock_subprocess.side_effect = subprocess.TimeoutExpired(cmd="osascript", timeout=30)
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(ScriptExecutionError) as exc_info:
            runner.run("x", app="Calendar")

        assert exc_info.value.context == {"timeout": 30}
        assert "dialog" in exc_info.value.message

    def test_missing_executable(self, mock_subprocess) -> None:
        mock_subprocess.side_effect = FileNotFoundError("osascript")
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(ScriptExecutionError) as exc_info:
            runner.run("x")

        assert exc_info.value.context == {"executable": "osascript"}

    def test_run_command_classifies_missing_files(self, mock_subprocess, completed_process) -> None:
        mock_subprocess.return_value = completed_process(
            stderr="The file /tmp/nope does not exist.", returncode=1
        )
        runner = AppleScriptRunner(platform="darwin")

        with pytest.raises(TargetNotFoundError):
            runner.run_command(["open", "/tmp/nope"])


class TestPlatformGate:
    """Tests for the macOS platform check."""

    def test_darwin_passes(self) -> None:
        check_platform("darwin")

    @pytest.mark.parametrize("platform", ["linux", "win32", "cygwin"])
    def test_other_platforms_rejected(self, platform: str) -> None:
        with pytest.raises(PlatformUnsupportedError) as exc_info:
            check_platform(platform)

        assert exc_info.value.kind == ErrorKind.PLATFORM_UNSUPPORTED
        assert exc_info.value.context == {"platform": platform, "required": "darwin"}

    def test_runner_never_spawns_off_macos(self, mock_subprocess) -> None:
        runner = AppleScriptRunner(platform="linux")

        with pytest.raises(PlatformUnsupportedError):
            runner.run('tell application "Notes" to count notes')
        with pytest.raises(PlatformUnsupportedError):
            runner.run_command(["mdfind", "x"])

        mock_subprocess.assert_not_called()


class TestFetchOptional:
    """Tests for degrade-on-secondary-failure."""

    def test_returns_value(self) -> None:
        assert fetch_optional(lambda: ["Work"], [], what="groups") == ["Work"]

    def test_bridge_failure_returns_default(self, caplog) -> None:
        def failing() -> list[str]:
            raise ScriptExecutionError("boom")

        with caplog.at_level("WARNING", logger="pocket.applescript.base"):
            assert fetch_optional(failing, [], what="groups") == []

        assert "groups" in caplog.text

    def test_other_exceptions_propagate(self) -> None:
        def failing() -> list[str]:
            raise KeyError("bug")

        with pytest.raises(KeyError):
            fetch_optional(failing, [], what="groups")
