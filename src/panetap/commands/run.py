"""Run and wait commands - the send, wait for quiet, capture workflow."""

from typing import Annotated, List, Optional

import typer

from ..app import app
from ..config import get_config_manager, DEFAULT_TIMEOUT
from ..formatters import emit
from ..pane import run_command, resolve_outcome, wait_idle, clamp_timeout
from ._helpers import PaneOption, OutputOption, cli_errors, fail, output_format, require_pane


@app.command()
@cli_errors
def run(
    ctx: typer.Context,
    command: Annotated[List[str], typer.Argument(help="Command to type into the pane")],
    pane: PaneOption = None,
    idle: Annotated[Optional[float], typer.Option(help="Seconds of inactivity to consider idle [default: 2]")] = None,
    timeout: Annotated[Optional[float], typer.Option(help="Maximum seconds to wait [default: 60]")] = None,
    lines: Annotated[Optional[int], typer.Option(help="Limit capture to last N lines, 0 for full [default: 200]")] = None,
    exit_code: Annotated[bool, typer.Option("--exit-code", help="Emit and parse a sentinel exit code")] = False,
    exit_tag: Annotated[Optional[str], typer.Option("--exit-tag", help="Sentinel tag for exit code parsing")] = None,
    exit_propagate: Annotated[
        bool, typer.Option("--exit-propagate", help="Exit non-zero when the parsed exit code is non-zero")
    ] = False,
    segment: Annotated[
        bool, typer.Option("--segment", help="Capture only this command's output using markers (runs via sh -lc)")
    ] = False,
    output: OutputOption = None,
):
    """Send a command, wait until the pane goes quiet, then print the captured output."""
    cfg = get_config_manager()
    fmt = output_format(ctx, output)
    target = require_pane(pane)

    session = run_command(
        target,
        " ".join(command),
        idle=cfg.idle if idle is None else idle,
        timeout=clamp_timeout(cfg.timeout if timeout is None else timeout, DEFAULT_TIMEOUT),
        lines=cfg.lines if lines is None else lines,
        exit_code=exit_code,
        segment=segment,
        exit_tag=exit_tag or cfg.exit_tag,
        enter_delay=cfg.enter_delay,
        poll_interval=cfg.poll_interval,
    )
    result = session.result

    text = result.output
    if exit_code:
        if result.exit_found:
            text += f"\nExit code: {result.exit_code}\n"
        else:
            text += "\nExit code: unknown\n"
    quiet = result.exit_code if exit_code and result.exit_found else None
    emit(result, fmt, text=text, quiet=quiet)

    err = resolve_outcome(result, session.wait_error, exit_propagate, exit_code)
    if err is not None:
        fail(err, fmt)


@app.command()
@cli_errors
def wait(
    ctx: typer.Context,
    pane: PaneOption = None,
    idle: Annotated[Optional[float], typer.Option(help="Seconds of inactivity to consider idle [default: 2]")] = None,
    timeout: Annotated[Optional[float], typer.Option(help="Maximum seconds to wait [default: 60]")] = None,
    output: OutputOption = None,
):
    """Block until a pane has been quiet for --idle seconds."""
    cfg = get_config_manager()
    fmt = output_format(ctx, output)
    target = require_pane(pane)

    state = wait_idle(
        target,
        cfg.idle if idle is None else idle,
        clamp_timeout(cfg.timeout if timeout is None else timeout, DEFAULT_TIMEOUT),
        poll_interval=cfg.poll_interval,
    )
    data = {"pane_id": target.target, "idle": True, "strategy": state.strategy, "polls": state.polls}
    emit(data, fmt, text=f"Pane {target.target} is idle.\n", quiet=target.target)
