"""Process control commands - stop, kill, signal."""

from typing import Annotated, Optional

import typer

from ..app import app
from ..config import get_config_manager, DEFAULT_STOP_TIMEOUT, DEFAULT_IDLE
from ..errors import IdleTimeoutError
from ..formatters import emit
from ..pane import stop_pane, parse_signal, send_signal, clamp_timeout
from ._helpers import PaneOption, OutputOption, cli_errors, fail, output_format, require_pane


@app.command()
@cli_errors
def stop(
    ctx: typer.Context,
    pane: PaneOption = None,
    idle: Annotated[Optional[float], typer.Option(help="Seconds of inactivity to consider idle [default: 2]")] = None,
    timeout: Annotated[float, typer.Option(help="Maximum seconds to wait before kill")] = DEFAULT_STOP_TIMEOUT,
    kill: Annotated[bool, typer.Option("--kill/--no-kill", help="Kill the pane if it fails to become idle")] = True,
    output: OutputOption = None,
):
    """Send Ctrl+C, wait for the pane to settle, kill it if it hangs."""
    cfg = get_config_manager()
    fmt = output_format(ctx, output)
    target = require_pane(pane)

    quiet_for = cfg.idle if idle is None else idle
    result = stop_pane(
        target,
        idle=quiet_for if quiet_for > 0 else DEFAULT_IDLE,
        timeout=clamp_timeout(timeout, DEFAULT_STOP_TIMEOUT),
        kill_on_timeout=kill,
        poll_interval=cfg.poll_interval,
    )

    if result.killed:
        text = f"Pane {result.pane_id} interrupted and killed after timeout.\n"
    elif result.timed_out:
        text = f"Pane {result.pane_id} interrupted but did not become idle within timeout.\n"
    else:
        text = f"Pane {result.pane_id} interrupted.\n"
    emit(result, fmt, text=text, quiet="killed" if result.killed else "interrupted")

    if result.timed_out and not result.killed:
        fail(IdleTimeoutError(timeout=timeout), fmt)


@app.command()
@cli_errors
def kill(
    ctx: typer.Context,
    pane: PaneOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Preview without killing")] = False,
    output: OutputOption = None,
):
    """Kill a tmux pane (asks first unless --yes)."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)

    if dry_run:
        data = {"pane_id": target.target, "dry_run": True, "killed": False}
        emit(data, fmt, text=f"[dry-run] Would kill tmux pane {target.target}\n", quiet=target.target)
        return

    if not yes and not typer.confirm(f"Kill tmux pane {target.target}?", default=False):
        typer.echo("Aborted. No panes were killed.")
        return

    target.kill()
    data = {"pane_id": target.target, "dry_run": False, "killed": True}
    emit(data, fmt, text=f"Killed tmux pane {target.target}\n", quiet=target.target)


@app.command()
@cli_errors
def signal(
    ctx: typer.Context,
    pane: PaneOption = None,
    sig: Annotated[str, typer.Option("--signal", "-s", help="Signal name or number (TERM, KILL, INT, 15)")] = "TERM",
    output: OutputOption = None,
):
    """Send a signal to the process running in a pane."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)

    parsed, name = parse_signal(sig)
    pid = target.pid
    send_signal(pid, parsed)

    data = {"pane_id": target.target, "pid": pid, "signal": name}
    emit(data, fmt, text=f"Sent {name} to pid {pid} ({target.target})\n", quiet=pid)
