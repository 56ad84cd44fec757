"""Command-line bridge to macOS apps driven through AppleScript."""

__version__ = "0.3.0"
