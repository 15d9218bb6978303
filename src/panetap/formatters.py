"""Output formatters for panetap commands.

Commands hand structured data here and never print it themselves. Tables go
through rich; json and yaml are written as plain text so they stay machine
readable; raw pane text is written unmodified.

PUBLIC API:
  - OutputFormat: Supported encodings
  - emit: Render one command result
  - emit_event: Render one streamed event (follow)
  - emit_error: Render a structured error on stderr
  - render_table: Build a rich Table from row dicts
  - console: Shared stdout console
"""

import json
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console(highlight=False)


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    yaml = "yaml"
    quiet = "quiet"


def to_data(obj: Any) -> Any:
    """Convert records into plain json/yaml-safe structures."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "_asdict"):
        return {k: to_data(v) for k, v in obj._asdict().items()}
    if isinstance(obj, dict):
        return {k: to_data(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_data(item) for item in obj]
    return obj


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return escape(str(value))


def render_table(rows: Sequence[dict], headers: Optional[Sequence[str]] = None, title: Optional[str] = None) -> Table:
    """Build a table from row dicts, columns in headers order."""
    columns = list(headers) if headers else list(rows[0].keys()) if rows else []
    table = Table(title=title, show_header=True, header_style="bold")
    for column in columns:
        table.add_column(escape(column))
    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))
    return table


def _write(text: str) -> None:
    typer.echo(text, nl=not text.endswith("\n"))


def emit(
    data: Any,
    fmt: OutputFormat,
    text: Optional[str] = None,
    quiet: Optional[Iterable[Any] | str | int] = None,
    headers: Optional[Sequence[str]] = None,
    renderable: Any = None,
    empty: Optional[str] = None,
) -> None:
    """Render a command result.

    Args:
        data: Structured payload, used for json/yaml and default tables.
        fmt: Output format.
        text: Human text for table mode, written as-is.
        quiet: Minimal token(s) for quiet mode. None prints nothing.
        headers: Column order when data is a list of rows.
        renderable: Prebuilt rich renderable for table mode.
        empty: Message printed in table mode when data is an empty list.
    """
    if fmt == OutputFormat.json:
        typer.echo(json.dumps(to_data(data), indent=2))
        return

    if fmt == OutputFormat.yaml:
        typer.echo(yaml.safe_dump(to_data(data), sort_keys=False, allow_unicode=True, default_flow_style=False), nl=False)
        return

    if fmt == OutputFormat.quiet:
        if quiet is None:
            return
        if isinstance(quiet, (str, int)):
            typer.echo(str(quiet))
            return
        for token in quiet:
            typer.echo(str(token))
        return

    if text is not None:
        if text:
            typer.echo(text, nl=False)
        return
    if renderable is not None:
        console.print(renderable)
        return

    payload = to_data(data)
    if isinstance(payload, list):
        if not payload:
            if empty:
                typer.echo(empty)
            return
        console.print(render_table(payload, headers))
    elif isinstance(payload, dict):
        rows = [{"Field": k, "Value": v} for k, v in payload.items()]
        console.print(render_table(rows, ["Field", "Value"]))
    elif payload is not None:
        _write(str(payload))


def emit_event(event: Any, fmt: OutputFormat) -> None:
    """Render one streamed event: a json line, a yaml document, or the bare line."""
    data = to_data(event)
    if fmt == OutputFormat.json:
        typer.echo(json.dumps(data))
    elif fmt == OutputFormat.yaml:
        typer.echo("---\n" + yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
    else:
        typer.echo(data["line"] if isinstance(data, dict) else str(data))


def emit_error(data: dict, fmt: OutputFormat) -> None:
    """Write a structured error document to stderr."""
    if fmt == OutputFormat.yaml:
        typer.echo(yaml.safe_dump({"error": data}, sort_keys=False, allow_unicode=True), nl=False, err=True)
    else:
        typer.echo(json.dumps({"error": data}, indent=2), err=True)
