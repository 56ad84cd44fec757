"""Rendering of command results and errors for the terminal."""

import dataclasses
import json
from collections.abc import Sequence
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pocket.applescript.errors import AppleScriptError

OutputFormat = Literal["json", "table"]

console = Console()


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, datetimes and paths into JSON-compatible values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [to_jsonable(v) for v in value]
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return value


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        return ", ".join(_cell(v) for v in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}: {_cell(v)}" for k, v in value.items() if v not in (None, "", []))
    return str(value)


def build_table(rows: Sequence[dict[str, Any]], columns: Sequence[str] | None = None, title: str | None = None) -> Table:
    """Build a rich table from JSON-compatible records.

    Args:
        rows: Records to display, one per row.
        columns: Keys to show, defaults to every key of the first record.
        title: Optional table title.
    """
    table = Table(title=title)
    if not rows:
        return table

    keys = list(columns) if columns else list(rows[0].keys())
    for key in keys:
        table.add_column(key.replace("_", " ").title())
    for row in rows:
        table.add_row(*(Text(_cell(row.get(key))) for key in keys))
    return table


def print_result(
    data: Any,
    fmt: OutputFormat = "json",
    *,
    columns: Sequence[str] | None = None,
    title: str | None = None,
) -> None:
    """Print a successful result in the selected format."""
    payload = to_jsonable(data)

    if fmt == "json":
        console.print_json(json.dumps({"success": True, "data": payload}, ensure_ascii=False))
        return

    if isinstance(payload, list):
        if not payload:
            console.print("[yellow]No results[/yellow]")
            return
        if isinstance(payload[0], dict):
            console.print(build_table(payload, columns, title))
        else:
            for item in payload:
                console.print(f"  {item}", markup=False)
    elif isinstance(payload, dict):
        table = Table(title=title, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for key, value in payload.items():
            table.add_row(key.replace("_", " ").title(), Text(_cell(value)))
        console.print(table)
    else:
        console.print(f"[green]{escape(str(payload))}[/green]")


def print_error(error: AppleScriptError, fmt: OutputFormat = "json") -> None:
    """Print a classified failure in the selected format."""
    if fmt == "json":
        envelope = {"success": False, "error": to_jsonable(error.to_dict())}
        console.print_json(json.dumps(envelope, ensure_ascii=False))
        return

    console.print(f"[red]Error ({error.kind.value}):[/red] {escape(error.message)}")
    for key, value in error.context.items():
        console.print(f"  [dim]{key}: {escape(str(value))}[/dim]")
