"""Discovery commands - list, panes, windows, sessions, status."""

from datetime import datetime, timezone
from itertools import groupby
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.tree import Tree

from ..app import app
from ..config import get_config_manager
from ..errors import TargetError, ERR_NO_CURRENT_PANE
from ..formatters import emit
from ..tmux import in_tmux, get_current_pane, list_panes, list_panes_detailed, list_sessions, list_windows
from ..tmux.exceptions import NoServerError
from ..tmux.resolution import resolve_session_target
from ..tmux.session import DEFAULT_MANAGED_SESSION
from ..types import PaneIdentifier
from ._helpers import OutputOption, cli_errors, output_format

NO_SERVER = "No tmux server is running."


def _iso(ts: Optional[float]) -> Optional[str]:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def _state(active: bool) -> str:
    return "active" if active else "inactive"


def detail_rows(details) -> list:
    """Row dicts for PaneDetails with activity as an ISO timestamp."""
    rows = []
    for p in details:
        row = p.to_dict()
        row["activity_at"] = _iso(row.pop("activity"))
        rows.append(row)
    return rows


@app.command("list")
@cli_errors
def list_(
    ctx: typer.Context,
    flat: Annotated[bool, typer.Option("--flat", help="Flat table instead of grouping by window")] = False,
    output: OutputOption = None,
):
    """List panes grouped under sessions and windows."""
    fmt = output_format(ctx, output)
    try:
        panes = list_panes()
    except NoServerError:
        typer.echo(NO_SERVER)
        return

    panes.sort(key=lambda p: (p.session, p.window_index, p.pane_index))
    rows = [{"formatted_id": p.swp, "title": p.title, "command": p.command, "active": p.is_active} for p in panes]

    if flat or not panes:
        emit(
            rows,
            fmt,
            quiet=[p.swp for p in panes],
            headers=["formatted_id", "command", "title", "active"],
            empty="No tmux panes found.",
        )
        return

    tree = Tree("Tmux windows and panes", guide_style="dim")
    for session, in_session in groupby(panes, key=lambda p: p.session):
        session_node = tree.add(f"[bold]{escape(session)}[/bold]")
        for window, in_window in groupby(in_session, key=lambda p: p.window_index):
            members = list(in_window)
            window_node = session_node.add(f"{escape(session)}:{window}  ({_state(any(p.is_active for p in members))})")
            for p in members:
                label = f"{escape(p.swp)}  title={escape(p.title)}  cmd={escape(p.command)}"
                window_node.add(f"{label}  ({_state(p.is_active)})")

    emit(rows, fmt, quiet=[p.swp for p in panes], renderable=tree)


@app.command()
@cli_errors
def panes(
    ctx: typer.Context,
    session: Annotated[Optional[str], typer.Option(help="Filter by session name or @current/@managed")] = None,
    window: Annotated[Optional[int], typer.Option(help="Filter by window index")] = None,
    command: Annotated[Optional[str], typer.Option(help="Filter by current command (substring)")] = None,
    title: Annotated[Optional[str], typer.Option(help="Filter by pane title (substring)")] = None,
    path: Annotated[Optional[str], typer.Option(help="Filter by pane path (substring)")] = None,
    output: OutputOption = None,
):
    """List panes with metadata (pid, path, activity)."""
    fmt = output_format(ctx, output)
    session_name = resolve_session_target(session)
    try:
        details = list_panes_detailed()
    except NoServerError:
        typer.echo(NO_SERVER)
        return

    def keep(p) -> bool:
        if session_name and p.session != session_name:
            return False
        if window is not None and p.window_index != window:
            return False
        for needle, hay in ((command, p.command), (title, p.title), (path, p.path)):
            if needle and needle.lower() not in hay.lower():
                return False
        return True

    selected = sorted((p for p in details if keep(p)), key=lambda p: (p.session, p.window_index, p.pane_index))
    emit(
        detail_rows(selected),
        fmt,
        quiet=[p.swp for p in selected],
        headers=["formatted_id", "pane_id", "pid", "command", "path", "title", "window_name", "activity_at"],
        empty="No tmux panes found.",
    )


@app.command()
@cli_errors
def windows(
    ctx: typer.Context,
    session: Annotated[Optional[str], typer.Option(help="Session name or @current/@managed, all when omitted")] = None,
    output: OutputOption = None,
):
    """List tmux windows."""
    fmt = output_format(ctx, output)
    session_name = resolve_session_target(session)
    try:
        wins = list_windows(session_name)
    except NoServerError:
        typer.echo(NO_SERVER)
        return

    rows = [{"session": w.session, "index": w.index, "name": w.name, "active": w.is_active} for w in wins]
    emit(rows, fmt, quiet=[f"{w.session}:{w.index}" for w in wins], empty="No tmux windows found.")


@app.command()
@cli_errors
def sessions(ctx: typer.Context, output: OutputOption = None):
    """List tmux sessions."""
    fmt = output_format(ctx, output)
    try:
        infos = list_sessions()
    except NoServerError:
        typer.echo(NO_SERVER)
        return

    rows = [
        {
            "name": s.name,
            "windows": s.windows,
            "attached": s.attached,
            "created_at": _iso(s.created),
            "activity_at": _iso(s.activity),
        }
        for s in infos
    ]
    emit(rows, fmt, quiet=[s.name for s in infos], empty="No tmux sessions found.")


@app.command()
@cli_errors
def status(ctx: typer.Context, output: OutputOption = None):
    """Show where this shell sits in tmux, or the managed session outside it."""
    fmt = output_format(ctx, output)

    if not in_tmux():
        managed = get_config_manager().managed_session or DEFAULT_MANAGED_SESSION
        snap = {"in_tmux": False, "managed_session": managed}
        text = f"Managed session: {managed}\nNot currently inside tmux.\n"
        emit(snap, fmt, text=text, quiet=managed)
        return

    current = get_current_pane()
    if not current:
        raise TargetError("no current pane found", code=ERR_NO_CURRENT_PANE)
    ident = PaneIdentifier.parse(current)
    window_name = next((w.name for w in list_windows(ident.session) if w.index == ident.window), "")
    prefix = f"{ident.session}:{ident.window}."
    members = [
        {"id": p.swp, "title": p.title, "command": p.command, "active": p.is_active}
        for p in list_panes()
        if p.swp.startswith(prefix)
    ]

    snap = {
        "in_tmux": True,
        "session": ident.session,
        "window_index": ident.window,
        "window_name": window_name,
        "pane_index": ident.pane,
        "pane_id": current,
        "panes": members,
    }

    lines = [f"Current: {current}", f"Window:  {ident.session}:{ident.window}" + (f" ({window_name})" if window_name else "")]
    if members:
        lines.append("")
        lines.append("Panes:")
        for p in members:
            mark = "*" if p["id"] == current else " "
            lines.append(f"{mark} {p['id']:<14} {p['command']:<16} {p['title']}")
    emit(snap, fmt, text="\n".join(lines) + "\n", quiet=current)
