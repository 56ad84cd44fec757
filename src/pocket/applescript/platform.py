"""Host platform gate for commands that drive macOS applications."""

import sys

from pocket.applescript.errors import PlatformUnsupportedError

REQUIRED_PLATFORM = "darwin"


def current_platform() -> str:
    """Return the interpreter's platform identifier."""
    return sys.platform


def check_platform(detected: str | None = None) -> None:
    """Fail fast unless running on macOS.

    Args:
        detected: Platform to check, defaults to the running interpreter's.

    Raises:
        PlatformUnsupportedError: If the platform is not macOS.
    """
    detected = detected if detected is not None else current_platform()
    if detected != REQUIRED_PLATFORM:
        raise PlatformUnsupportedError(detected, REQUIRED_PLATFORM)
