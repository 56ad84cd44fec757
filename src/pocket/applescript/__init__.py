"""Shared AppleScript bridge for macOS app integrations."""

from pocket.applescript.base import (
    AppleScriptRunner,
    configure_runner,
    escape_applescript_string,
    fetch_optional,
    run_applescript,
    run_command,
)
from pocket.applescript.builder import Properties, ScriptBuilder, quote, whose
from pocket.applescript.errors import (
    AppleScriptError,
    AppNotRunningError,
    DecodeError,
    ErrorKind,
    PermissionDeniedError,
    PlatformUnsupportedError,
    ScriptExecutionError,
    TargetNotFoundError,
)
from pocket.applescript.platform import check_platform
from pocket.applescript.records import Field, RecordSchema, decode
from pocket.applescript.richtext import html_to_plaintext

__all__ = [
    "run_applescript",
    "run_command",
    "configure_runner",
    "fetch_optional",
    "escape_applescript_string",
    "AppleScriptRunner",
    "ScriptBuilder",
    "Properties",
    "quote",
    "whose",
    "Field",
    "RecordSchema",
    "decode",
    "html_to_plaintext",
    "check_platform",
    "ErrorKind",
    "AppleScriptError",
    "AppNotRunningError",
    "DecodeError",
    "PermissionDeniedError",
    "PlatformUnsupportedError",
    "ScriptExecutionError",
    "TargetNotFoundError",
]
