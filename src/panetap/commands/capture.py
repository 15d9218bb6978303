"""Capture command - print pane text."""

from typing import Annotated, Optional

import typer

from ..app import app
from ..config import get_config_manager
from ..filters import strip_trailing_empty_lines
from ..formatters import emit
from ._helpers import PaneOption, OutputOption, cli_errors, output_format, require_pane


@app.command()
@cli_errors
def capture(
    ctx: typer.Context,
    pane: PaneOption = None,
    lines: Annotated[Optional[int], typer.Option(help="Limit capture to last N lines, 0 for full [default: 200]")] = None,
    trim: Annotated[bool, typer.Option("--trim", help="Drop the blank padding tmux adds below the output")] = False,
    output: OutputOption = None,
):
    """Capture the text of a pane."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)
    count = get_config_manager().lines if lines is None else lines

    text = target.capture(count)
    if trim:
        text = strip_trailing_empty_lines(text)

    emit({"pane_id": target.target, "lines": count, "output": text}, fmt, text=text)
