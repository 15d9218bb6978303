"""Pane inspection commands - monitor and inspect."""

import logging
from typing import Annotated, Optional

import typer

from ..app import app
from ..config import get_config_manager
from ..formatters import emit
from ..pane.inspection import DEFAULT_MONITOR_IDLE, process_tree, snapshot_pane
from ..tmux import pane_details
from ._helpers import PaneOption, OutputOption, cli_errors, output_format, require_pane

logger = logging.getLogger(__name__)


@app.command()
@cli_errors
def monitor(
    ctx: typer.Context,
    pane: PaneOption = None,
    idle: Annotated[float, typer.Option(help="Seconds of inactivity to consider idle")] = DEFAULT_MONITOR_IDLE,
    lines: Annotated[Optional[int], typer.Option(help="Hash the last N lines, 0 for full [default: 200]")] = None,
    output: OutputOption = None,
):
    """Snapshot pane activity, idle state and an output hash."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)
    count = get_config_manager().lines if lines is None else lines

    snap = snapshot_pane(target, pane_details(target.target), idle, count)

    idle_text = "unknown" if snap.idle_seconds is None else f"{snap.idle_seconds:.1f}s"
    text = f"Pane {snap.pane_id} is {snap.status} (idle {idle_text}). hash={snap.output_hash}\n"
    emit(snap, fmt, text=text, quiet=snap.status)


@app.command()
@cli_errors
def inspect(ctx: typer.Context, pane: PaneOption = None, output: OutputOption = None):
    """Show pane metadata and the process tree under its PID."""
    fmt = output_format(ctx, output)
    target = require_pane(pane)
    details = pane_details(target.target)

    tree = []
    if details.pid > 0:
        try:
            tree = process_tree(details.pid)
        except OSError as e:
            logger.info(f"Process tree unavailable for pid {details.pid}: {e}")

    data = {"pane": details.to_dict(), "process_tree": [node._asdict() for node in tree]}

    lines = [
        f"Pane: {details.swp} (id={details.pane_id})",
        f"  active={details.is_active}  window={details.session}:{details.window_index} ({details.window_name})"
        f"  window_active={details.window_active}",
        f"  cmd={details.command}  title={details.title}  path={details.path}  pid={details.pid}",
    ]
    if tree:
        lines.append("Process tree:")
        lines.extend(f"{'  ' * node.depth}- {node.pid}  {node.command}" for node in tree)
    else:
        lines.append("Process tree: (not available)")
    emit(data, fmt, text="\n".join(lines) + "\n", quiet=details.swp)
