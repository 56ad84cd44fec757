"""Path resolution and size formatting."""

from pathlib import Path

from pocket.applescript import TargetNotFoundError


def resolve_path(path: str) -> Path:
    """Expand ``~`` and make the path absolute.

    Raises:
        TargetNotFoundError: If nothing exists at the path.
    """
    resolved = Path(path).expanduser().absolute()
    if not resolved.exists():
        raise TargetNotFoundError(f"Path does not exist: {resolved}", context={"path": str(resolved)})
    return resolved


def human_readable_size(size: int) -> str:
    """Format a byte count using 1024-based units."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024:
            return f"{value:.1f} {unit}"
    return f"{value / 1024:.1f} TB"
