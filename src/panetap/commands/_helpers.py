"""Shared helper functions for commands.

PUBLIC API:
  - PaneOption: Reusable --pane option
  - OutputOption: Per-command --output override
  - cli_errors: Turn CodedError into "Error: ..." on stderr and exit 1
  - fail: Report an error and exit 1
  - output_format: Effective output format for this invocation
  - require_pane: Resolve --pane into a Pane
"""

import functools
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..errors import CodedError
from ..formatters import OutputFormat, emit_error
from ..pane import Pane
from ..tmux.resolution import resolve_pane

__all__ = ["PaneOption", "OutputOption", "cli_errors", "fail", "output_format", "require_pane"]

err_console = Console(stderr=True, highlight=False)

PaneOption = Annotated[
    Optional[str],
    typer.Option("--pane", "-p", help="Target pane (session:window.pane, %id, @current, @active, @alias)"),
]

OutputOption = Annotated[
    Optional[OutputFormat],
    typer.Option("--output", "-o", help="Output format (table, json, yaml, quiet)"),
]


def fail(err: BaseException, fmt: Optional[OutputFormat] = None) -> None:
    """Print err on stderr and exit with status 1.

    With json or yaml output a CodedError is written as an {"error": {...}}
    document instead of the one-line message.
    """
    if fmt in (OutputFormat.json, OutputFormat.yaml) and isinstance(err, CodedError):
        emit_error(err.to_dict(), fmt)
    else:
        err_console.print(f"[red]Error:[/red] {escape(str(err))}", soft_wrap=True)
    raise typer.Exit(code=1)


def cli_errors(func):
    """Decorator mapping CodedError (and OS failures) to exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CodedError as e:
            fail(e, output_format(kwargs.get("ctx"), kwargs.get("output")))
        except OSError as e:
            fail(e)

    return wrapper


def output_format(ctx: Optional[typer.Context], override: Optional[OutputFormat] = None) -> OutputFormat:
    """Per-command --output wins over the global one."""
    if override is not None:
        return override
    state = ctx.obj if ctx is not None else None
    return getattr(state, "output", OutputFormat.table)


def require_pane(raw: Optional[str]) -> Pane:
    """Resolve raw --pane input into a validated Pane."""
    return Pane(resolve_pane(raw))
