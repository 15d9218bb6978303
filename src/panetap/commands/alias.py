"""Alias commands - name panes so they can be targeted as @name."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..aliases import AliasStore, normalize_alias_name
from ..app import app
from ..errors import TargetError, ERR_PANE_REQUIRED, ERR_UNKNOWN_SELECTOR
from ..formatters import emit
from ..tmux.resolution import resolve_pane
from ._helpers import PaneOption, OutputOption, cli_errors, output_format

alias_app = typer.Typer(help="Manage pane aliases.", no_args_is_help=True)
app.add_typer(alias_app, name="alias")

FileOption = Annotated[
    Optional[Path], typer.Option("--file", help="Alias file (default: $PANETAP_ALIASES or config dir)")
]


def _store(file: Optional[Path]) -> AliasStore:
    return AliasStore(file) if file else AliasStore()


@alias_app.command("list")
@cli_errors
def alias_list(ctx: typer.Context, file: FileOption = None, output: OutputOption = None):
    """List aliases."""
    fmt = output_format(ctx, output)
    aliases = _store(file).all()
    rows = [{"name": name, "target": target} for name, target in aliases.items()]
    text = "Aliases:\n" + "".join(f"  {name} => {target}\n" for name, target in aliases.items())
    emit(rows, fmt, text=text if rows else "No aliases defined.\n", quiet=list(aliases))


@alias_app.command("set")
@cli_errors
def alias_set(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Alias name")],
    target: Annotated[Optional[str], typer.Argument(help="Pane to alias")] = None,
    pane: PaneOption = None,
    file: FileOption = None,
    output: OutputOption = None,
):
    """Point an alias at a pane."""
    fmt = output_format(ctx, output)
    key = normalize_alias_name(name)
    raw = pane or target
    if not raw:
        raise TargetError("pane target is required", code=ERR_PANE_REQUIRED)

    resolved = resolve_pane(raw)
    _store(file).set(key, resolved)
    emit({"name": key, "target": resolved}, fmt, text=f"Alias {key} => {resolved}\n", quiet=key)


@alias_app.command("unset")
@cli_errors
def alias_unset(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Alias name")],
    file: FileOption = None,
    output: OutputOption = None,
):
    """Remove an alias."""
    fmt = output_format(ctx, output)
    key = normalize_alias_name(name)
    removed = _store(file).remove(key)
    text = f"Alias {key} removed.\n" if removed else f"Alias {key} not found.\n"
    emit({"name": key, "removed": removed}, fmt, text=text, quiet=key if removed else None)


@alias_app.command("resolve")
@cli_errors
def alias_resolve(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Alias name")],
    file: FileOption = None,
    output: OutputOption = None,
):
    """Print the pane an alias points at."""
    fmt = output_format(ctx, output)
    key = normalize_alias_name(name)
    target = _store(file).get(key)
    if target is None:
        raise TargetError(f"unknown pane selector: @{key}", code=ERR_UNKNOWN_SELECTOR)
    emit({"name": key, "target": target}, fmt, text=f"{key} => {target}\n", quiet=target)
