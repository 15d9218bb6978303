"""Launch, ensure and cleanup commands - create panes, destroy the managed session."""

import re
from enum import Enum
from typing import Annotated, List, Optional

import typer

from ..app import app
from ..config import get_config_manager
from ..errors import CodedError, ERR_INVALID_ENV
from ..formatters import emit
from ..tmux import in_tmux, get_current_pane, launch as launch_pane, session_exists, kill_session
from ..tmux.exceptions import SessionNotFoundError
from ..tmux.resolution import resolve_session_target
from ..tmux.session import DEFAULT_MANAGED_SESSION, ensure_window
from ..types import PaneIdentifier, is_session_window_pane
from ._helpers import OutputOption, cli_errors, output_format


_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Split(str, Enum):
    h = "h"
    v = "v"


def _managed_session(session: Optional[str]) -> str:
    return resolve_session_target(session) or get_config_manager().managed_session or DEFAULT_MANAGED_SESSION


@app.command()
@cli_errors
def launch(
    ctx: typer.Context,
    command: Annotated[Optional[str], typer.Argument(help="Command to run in the new pane (shell when omitted)")] = None,
    split: Annotated[Optional[Split], typer.Option(help="Split direction inside tmux (h or v)")] = None,
    session: Annotated[Optional[str], typer.Option(help="Managed session used outside tmux")] = None,
    output: OutputOption = None,
):
    """Open a new pane (inside tmux) or window in the managed session (outside)."""
    fmt = output_format(ctx, output)
    managed = None if in_tmux() else _managed_session(session)

    swp = launch_pane(command, managed_session=managed, split=split.value if split else None)

    data = {"pane_id": swp}
    if is_session_window_pane(swp):
        ident = PaneIdentifier.parse(swp)
        data.update(session=ident.session, window_index=ident.window, pane_index=ident.pane)
    emit(data, fmt, text=f"{swp}\n", quiet=swp)


@app.command()
@cli_errors
def cleanup(
    ctx: typer.Context,
    session: Annotated[Optional[str], typer.Option(help="Session to kill (default: managed session)")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Preview without killing")] = False,
    output: OutputOption = None,
):
    """Kill the managed tmux session."""
    fmt = output_format(ctx, output)
    name = _managed_session(session)
    if not session_exists(name):
        raise SessionNotFoundError(f"session {name!r} not found")

    if dry_run:
        data = {"session": name, "dry_run": True, "killed": False}
        emit(data, fmt, text=f"[dry-run] Would kill tmux session {name}\n", quiet=name)
        return

    if not yes and not typer.confirm(f"Kill tmux session {name!r}?", default=False):
        typer.echo("Aborted.")
        return

    kill_session(name)
    emit({"session": name, "dry_run": False, "killed": True}, fmt, text=f"Killed tmux session {name}\n", quiet=name)


def parse_env(pairs: Optional[List[str]]) -> List[str]:
    """Validate KEY=VAL pairs, returned trimmed.

    Raises:
        CodedError: ERR_INVALID_ENV for an empty item, missing '=' or bad key.
    """
    valid = []
    for item in pairs or []:
        key, sep, value = item.strip().partition("=")
        key = key.strip()
        if not sep or not _ENV_KEY_RE.match(key):
            raise CodedError(f"invalid env {item!r}; expected KEY=VAL", code=ERR_INVALID_ENV)
        valid.append(f"{key}={value}")
    return valid


def _ensure_session(raw: Optional[str]) -> str:
    name = resolve_session_target(raw)
    if name:
        return name
    current = get_current_pane() if in_tmux() else None
    if current:
        return current.split(":", 1)[0]
    return get_config_manager().managed_session or DEFAULT_MANAGED_SESSION


@app.command()
@cli_errors
def ensure(
    ctx: typer.Context,
    command: Annotated[Optional[str], typer.Argument(help="Command for a newly created window or pane")] = None,
    window: Annotated[Optional[str], typer.Option(help="Window name to ensure")] = None,
    session: Annotated[Optional[str], typer.Option(help="Session name or @current/@managed")] = None,
    pane_title: Annotated[Optional[str], typer.Option(help="Pane title to ensure within the window")] = None,
    panes: Annotated[int, typer.Option(help="Ensure at least N panes in the window (0 to skip)")] = 0,
    layout: Annotated[Optional[str], typer.Option(help="tmux layout applied when panes are created")] = None,
    split: Annotated[Optional[Split], typer.Option(help="Split direction for new panes (h or v)")] = None,
    cwd: Annotated[Optional[str], typer.Option(help="Working directory for new panes")] = None,
    env: Annotated[Optional[List[str]], typer.Option(help="KEY=VAL for new panes, repeatable")] = None,
    output: OutputOption = None,
):
    """Create a session, named window and pane only if they are missing."""
    fmt = output_format(ctx, output)
    name = (window or "").strip()
    if not name:
        raise typer.BadParameter("--window is required")
    if panes < 0:
        raise typer.BadParameter("--panes must be >= 0")

    result = ensure_window(
        _ensure_session(session),
        name,
        command=command,
        pane_title=(pane_title or "").strip(),
        panes=panes,
        layout=layout,
        split=split.value if split else None,
        cwd=(cwd or "").strip() or None,
        env=parse_env(env),
    )

    if result.created_window:
        lines = [f'Ensured window "{result.window}" in session "{result.session}" (index {result.window_index}).']
    else:
        lines = [
            f'Window "{result.window}" already exists in session "{result.session}" (index {result.window_index}).'
        ]
    state = "created" if result.created_pane else "existing"
    if result.pane_title:
        state += f', title="{result.pane_title}"'
    lines.append(f"Pane {result.pane_id} ({state}).")
    if result.added_panes:
        lines.append(f"Added panes: {result.added_panes}")
    if result.layout_applied:
        lines.append(f"Layout applied: {layout}")
    emit(result, fmt, text="\n".join(lines) + "\n", quiet=result.pane_id)
