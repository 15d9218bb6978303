"""Send, interrupt and escape commands - keystroke injection."""

from typing import Annotated, List, Optional

import typer

from ..app import app
from ..formatters import emit
from ._helpers import PaneOption, OutputOption, cli_errors, output_format, require_pane


@app.command()
@cli_errors
def send(
    ctx: typer.Context,
    text: Annotated[Optional[List[str]], typer.Argument(help="Literal text to type")] = None,
    pane: PaneOption = None,
    key: Annotated[
        Optional[List[str]], typer.Option("--key", "-k", help="tmux key name, repeatable (C-x, Up, Enter)")
    ] = None,
    enter: Annotated[bool, typer.Option("--enter/--no-enter", help="Press Enter after the text")] = True,
    delay_enter: Annotated[float, typer.Option("--delay-enter", help="Seconds to wait before pressing Enter")] = 1.0,
    output: OutputOption = None,
):
    """Send literal text or tmux key names to a pane."""
    words = text or []
    keys = key or []
    if not words and not keys:
        raise typer.BadParameter("requires text or at least one --key")

    fmt = output_format(ctx, output)
    target = require_pane(pane)

    joined = " ".join(words)
    if joined:
        target.send(joined, enter=enter, delay=delay_enter)
    if keys:
        target.send_keys(keys)

    data = {"pane_id": target.target, "text": joined, "enter": enter, "delay_secs": delay_enter}
    if keys:
        data["keys"] = keys
    emit(data, fmt, text="Text sent\n")


@app.command()
@cli_errors
def interrupt(ctx: typer.Context, pane: PaneOption = None, output: OutputOption = None):
    """Send Ctrl+C to a pane."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)
    target.interrupt()
    emit({"pane_id": target.target, "sent": "C-c"}, fmt, text=f"Sent Ctrl+C to {target.target}\n")


@app.command()
@cli_errors
def escape(ctx: typer.Context, pane: PaneOption = None, output: OutputOption = None):
    """Send Escape to a pane."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)
    target.escape()
    emit({"pane_id": target.target, "sent": "Escape"}, fmt, text=f"Sent Escape to {target.target}\n")
