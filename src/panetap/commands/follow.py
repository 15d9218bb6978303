"""Follow command - stream new pane output."""

from typing import Annotated, Optional

import typer

from ..app import app
from ..config import get_config_manager
from ..formatters import emit_event
from ..pane import follow as follow_pane
from ._helpers import PaneOption, OutputOption, cli_errors, output_format, require_pane


@app.command()
@cli_errors
def follow(
    ctx: typer.Context,
    pane: PaneOption = None,
    lines: Annotated[Optional[int], typer.Option(help="Limit capture to last N lines, 0 for full [default: 200]")] = None,
    interval: Annotated[float, typer.Option(help="Polling interval in seconds")] = 1.0,
    from_start: Annotated[bool, typer.Option("--from-start", help="Emit the full buffer before new lines")] = False,
    duration: Annotated[float, typer.Option(help="Stop after N seconds, 0 to run until interrupted")] = 0.0,
    once: Annotated[bool, typer.Option("--once", help="Capture once and exit")] = False,
    output: OutputOption = None,
):
    """Poll a pane and print lines as they appear."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)

    if lines is None:
        # --from-start without --lines reads the whole history
        lines = 0 if from_start else get_config_manager().lines

    try:
        for event in follow_pane(
            target,
            lines=lines,
            interval=interval,
            from_start=from_start,
            duration=max(duration, 0.0),
            once=once,
        ):
            emit_event(event, fmt)
    except KeyboardInterrupt:
        raise typer.Exit(code=0)
