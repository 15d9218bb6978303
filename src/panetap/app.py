"""panetap typer application - pane-first CLI for tmux.

Main application entry point. Commands register themselves on import through
the @app.command decorator, so every command module is imported at the bottom
of this file.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

import typer

from .formatters import OutputFormat


@dataclass
class PaneTapState:
    """Per-invocation state shared with commands through ctx.obj."""

    output: OutputFormat = OutputFormat.table
    verbose: bool = False


def configure_logging(verbose: bool) -> None:
    """Log to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("panetap").setLevel(logging.DEBUG if verbose else logging.WARNING)


# Must be created before command imports for decorator registration
app = typer.Typer(
    name="panetap",
    help="Drive tmux panes: run commands, wait for quiet, capture output.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    output: Annotated[
        Optional[OutputFormat], typer.Option("--output", "-o", help="Output format (table, json, yaml, quiet)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging on stderr")] = False,
):
    """Drive tmux panes: run commands, wait for quiet, capture output."""
    configure_logging(verbose)
    ctx.obj = PaneTapState(output=output or OutputFormat.table, verbose=verbose)


# Command imports trigger @app.command decorator registration
from .commands import run  # noqa: E402, F401
from .commands import follow  # noqa: E402, F401
from .commands import send  # noqa: E402, F401
from .commands import capture  # noqa: E402, F401
from .commands import ls  # noqa: E402, F401
from .commands import control  # noqa: E402, F401
from .commands import launch  # noqa: E402, F401
from .commands import alias  # noqa: E402, F401
from .commands import monitor  # noqa: E402, F401
from .commands import locate  # noqa: E402, F401
