"""AppleScript execution wrapper for macOS app integrations."""

import logging
import re
import subprocess
from collections.abc import Callable, Sequence
from typing import TypeVar

from pocket.applescript.errors import (
    AppleScriptError,
    AppNotRunningError,
    PermissionDeniedError,
    ScriptExecutionError,
    TargetNotFoundError,
)
from pocket.applescript.platform import check_platform

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_EXECUTABLE = "osascript"
DEFAULT_TIMEOUT = 30

# Prefix returned by the ``on error`` handler of generated scripts
ERROR_SENTINEL = "POCKET-ERROR:"

# ASCII separators (28-31) count as whitespace for str.strip(), keep them
_TRIM_CHARS = " \t\r\n\f\v"

# AppleScript error numbers, matched before any message text
NOT_RUNNING_NUMBERS = frozenset({-600})
PERMISSION_NUMBERS = frozenset({-1743, -1744})
NOT_FOUND_NUMBERS = frozenset({-1728, -1719})

# Raised by generated lookups that find nothing (errAENoSuchObject)
NOT_FOUND_ERROR_NUMBER = -1728

# "[-1728] message" from the sentinel handler, "message (-1728)" from osascript
_PREFIXED_NUMBER = re.compile(r"^\[(-?\d+)\]")
_TRAILING_NUMBER = re.compile(r"\((-?\d+)\)\.?$")

_NOT_RUNNING_MARKERS = ("isn't running", "not running")
_PERMISSION_MARKERS = (
    "permission",
    "couldn't be opened",
    "not authorized",
    "not allowed",
)
_NOT_FOUND_MARKERS = (
    "not found",
    "can't get",
    "no such file",
    "does not exist",
)


def escape_applescript_string(value: str) -> str:
    """Escape a string for inclusion between double quotes in AppleScript.

    Backslashes are escaped before quotes so the inserted escape characters
    are not escaped a second time. Every other character passes through.
    """
    return value.replace("\\", "\\\\").replace('"', '\\"')


def error_number(text: str) -> int | None:
    """The AppleScript error number carried by diagnostic text, if any."""
    match = _PREFIXED_NUMBER.match(text) or _TRAILING_NUMBER.search(text)
    return int(match.group(1)) if match else None


def classify_failure(
    text: str,
    *,
    script: str | None = None,
    app: str | None = None,
    allow_not_found: bool = False,
) -> AppleScriptError:
    """Map diagnostic text from osascript or a script handler to an error.

    The error number decides when one is present. Message text is only
    consulted for not-found lookups under an unrecognised number, and for
    every kind when there is no number (host tools). Object names quoted in
    a message therefore never turn a lookup failure into another kind.

    Args:
        text: stderr of the interpreter, or the payload after the sentinel.
        script: The program that produced the failure.
        app: Target application name, used in messages.
        allow_not_found: Recognise lookup failures as TargetNotFoundError.

    Returns:
        The classified exception (not raised).
    """
    lowered = text.lower()
    context = {"application": app, "detail": text} if app else {"detail": text}
    number = error_number(text)

    if number is not None:
        not_running = number in NOT_RUNNING_NUMBERS
        permission = number in PERMISSION_NUMBERS
        not_found = number in NOT_FOUND_NUMBERS or any(marker in lowered for marker in _NOT_FOUND_MARKERS)
    else:
        not_running = any(marker in lowered for marker in _NOT_RUNNING_MARKERS)
        permission = any(marker in lowered for marker in _PERMISSION_MARKERS)
        not_found = any(marker in lowered for marker in _NOT_FOUND_MARKERS)

    if not_running:
        return AppNotRunningError(app or "Application", script=script, context={"detail": text})
    if permission:
        target = app or "the target application"
        return PermissionDeniedError(
            f"Permission denied controlling {target}. Grant access in "
            "System Settings > Privacy & Security > Automation.",
            script,
            context,
        )
    if allow_not_found and not_found:
        return TargetNotFoundError(text, script, context)
    return ScriptExecutionError(text, script, context)


class AppleScriptRunner:
    """Runs generated programs through the ``osascript`` interpreter.

    Args:
        executable: Interpreter path.
        timeout: Default upper bound in seconds for a single call.
        platform: Host platform override, defaults to the running one.
    """

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        timeout: int = DEFAULT_TIMEOUT,
        platform: str | None = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.platform = platform

    def run(self, script: str, *, app: str | None = None, timeout: int | None = None) -> str:
        """Execute an AppleScript and return its trimmed output.

        Args:
            script: The AppleScript code to execute.
            app: Name of the application the script targets.
            timeout: Override of the default timeout.

        Returns:
            The stdout from the AppleScript execution.

        Raises:
            AppleScriptError: A classified subclass for every failure.
        """
        check_platform(self.platform)
        logger.debug("Running AppleScript for %s (%d chars)", app or "system", len(script))

        output = self._execute([self.executable, "-e", script], script=script, app=app, timeout=timeout)

        if output.startswith(ERROR_SENTINEL):
            payload = output[len(ERROR_SENTINEL):].strip(_TRIM_CHARS)
            error = classify_failure(payload, script=script, app=app, allow_not_found=True)
            logger.warning("Script error in %s [%s]: %s", app or "system", error.kind.value, payload)
            raise error

        return output

    def run_command(
        self,
        args: Sequence[str],
        *,
        app: str | None = None,
        timeout: int | None = None,
    ) -> str:
        """Run a macOS helper tool (open, mdls, mdfind, xattr) and return stdout."""
        check_platform(self.platform)
        logger.debug("Running command: %s", " ".join(args))
        return self._execute(list(args), script=None, app=app, timeout=timeout, allow_not_found=True)

    def _execute(
        self,
        args: list[str],
        *,
        script: str | None,
        app: str | None,
        timeout: int | None,
        allow_not_found: bool = False,
    ) -> str:
        timeout = timeout or self.timeout
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning("%s timed out after %ss", args[0], timeout)
            raise ScriptExecutionError(
                f"{args[0]} timed out after {timeout}s (is {app or 'the application'} showing a dialog?)",
                script,
                {"timeout": timeout},
            ) from e
        except OSError as e:
            raise ScriptExecutionError(
                f"Could not start {args[0]}: {e}", script, {"executable": args[0]}
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip() or f"{args[0]} exited with status {result.returncode}"
            error = classify_failure(stderr, script=script, app=app, allow_not_found=allow_not_found)
            logger.warning("%s failed [%s]: %s", args[0], error.kind.value, stderr)
            raise error

        return (result.stdout or "").strip(_TRIM_CHARS)


_runner: AppleScriptRunner | None = None


def get_runner() -> AppleScriptRunner:
    """Return the process-wide runner, creating a default one on first use."""
    global _runner
    if _runner is None:
        _runner = AppleScriptRunner()
    return _runner


def configure_runner(
    executable: str = DEFAULT_EXECUTABLE,
    timeout: int = DEFAULT_TIMEOUT,
    platform: str | None = None,
) -> AppleScriptRunner:
    """Replace the process-wide runner (called once by the CLI from Settings)."""
    global _runner
    _runner = AppleScriptRunner(executable=executable, timeout=timeout, platform=platform)
    return _runner


def run_applescript(script: str, *, app: str | None = None, timeout: int | None = None) -> str:
    """Execute an AppleScript with the configured runner."""
    return get_runner().run(script, app=app, timeout=timeout)


def run_command(args: Sequence[str], *, app: str | None = None, timeout: int | None = None) -> str:
    """Run a helper tool with the configured runner."""
    return get_runner().run_command(args, app=app, timeout=timeout)


def fetch_optional(fetch: Callable[[], T], default: T, *, what: str) -> T:
    """Run a secondary fetch whose failure must not fail the primary result.

    Args:
        fetch: Callable performing the enrichment.
        default: Value used when the fetch fails.
        what: Description for the log message.

    Returns:
        The fetched value, or ``default`` on any bridge failure.
    """
    try:
        return fetch()
    except AppleScriptError as e:
        logger.warning("Could not fetch %s, continuing without it: %s", what, e)
        return default
