"""Classified errors raised by the AppleScript bridge."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Machine-readable failure categories surfaced to the CLI."""

    PLATFORM_UNSUPPORTED = "platform_unsupported"
    APPLICATION_NOT_RUNNING = "application_not_running"
    PERMISSION_DENIED = "permission_denied"
    TARGET_NOT_FOUND = "target_not_found"
    SCRIPT_EXECUTION_FAILED = "script_execution_failed"
    DECODE_FAILED = "decode_failed"


class AppleScriptError(Exception):
    """Base class for every bridge failure.

    Attributes:
        kind: Category of the failure.
        message: Human readable description.
        context: Extra details (application, platform, raw stderr, ...).
        script: The generated program, when one was involved.
    """

    kind: ErrorKind = ErrorKind.SCRIPT_EXECUTION_FAILED

    def __init__(
        self,
        message: str,
        script: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.script = script
        self.context = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        """Structured form used by the output layer."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "context": self.context,
        }


class ScriptExecutionError(AppleScriptError):
    """Raised when the interpreter or the generated script fails."""

    kind = ErrorKind.SCRIPT_EXECUTION_FAILED


class PlatformUnsupportedError(AppleScriptError):
    """Raised when the host OS has no AppleScript facility."""

    kind = ErrorKind.PLATFORM_UNSUPPORTED

    def __init__(self, detected: str, required: str) -> None:
        super().__init__(
            f"This command requires macOS (detected platform: {detected})",
            context={"platform": detected, "required": required},
        )
        self.detected = detected
        self.required = required


class AppNotRunningError(AppleScriptError):
    """Raised when a target macOS app is not running."""

    kind = ErrorKind.APPLICATION_NOT_RUNNING

    def __init__(
        self,
        app_name: str = "Application",
        script: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"{app_name} is not running. Please open {app_name} and try again.",
            script=script,
            context={"application": app_name, **(context or {})},
        )
        self.app_name = app_name


class PermissionDeniedError(AppleScriptError):
    """Raised when macOS refuses automation or file access."""

    kind = ErrorKind.PERMISSION_DENIED


class TargetNotFoundError(AppleScriptError):
    """Raised when the requested object does not exist."""

    kind = ErrorKind.TARGET_NOT_FOUND


class DecodeError(AppleScriptError):
    """Raised when script output does not match the expected record shape."""

    kind = ErrorKind.DECODE_FAILED
