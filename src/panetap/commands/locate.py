"""Locate command - find panes by command, title or path."""

import re
from enum import Enum
from typing import Annotated, Callable, List, Optional

import typer

from ..app import app
from ..formatters import emit
from ..tmux import list_panes_detailed
from ..tmux.exceptions import NoServerError
from ..tmux.resolution import resolve_session_target
from ._helpers import OutputOption, cli_errors, output_format
from .ls import NO_SERVER, detail_rows


class Field(str, Enum):
    any = "any"
    command = "command"
    title = "title"
    path = "path"


def fuzzy_match(value: str, query: str) -> bool:
    """True if the characters of query appear in value in order, ignoring case."""
    needle = query.strip().lower()
    pos = 0
    for ch in value.lower():
        if pos == len(needle):
            break
        if ch == needle[pos]:
            pos += 1
    return pos == len(needle)


def build_matcher(query: str, regex: bool = False, fuzzy: bool = False) -> Callable[[str], bool]:
    """Matcher for one field value: regex search, fuzzy, or case-insensitive substring.

    Raises:
        re.error: If regex is set and query does not compile.
    """
    if regex:
        pattern = re.compile(query)
        return lambda value: pattern.search(value) is not None
    if fuzzy:
        return lambda value: fuzzy_match(value, query)
    needle = query.lower()
    return lambda value: needle in value.lower()


def field_values(pane, field: Field) -> List[str]:
    if field == Field.any:
        return [pane.command, pane.title, pane.path]
    return [getattr(pane, field.value)]


@app.command()
@cli_errors
def locate(
    ctx: typer.Context,
    words: Annotated[Optional[List[str]], typer.Argument(help="Query (joined with spaces)")] = None,
    query: Annotated[Optional[str], typer.Option("--query", "-q", help="Query string (wins over words)")] = None,
    field: Annotated[Field, typer.Option(help="Field to search")] = Field.any,
    regex: Annotated[bool, typer.Option("--regex", help="Treat the query as a regular expression")] = False,
    fuzzy: Annotated[bool, typer.Option("--fuzzy", help="Match query characters in order")] = False,
    session: Annotated[Optional[str], typer.Option(help="Filter by session name or @current/@managed")] = None,
    window: Annotated[Optional[int], typer.Option(help="Filter by window index")] = None,
    output: OutputOption = None,
):
    """Find panes whose command, title or path match a query."""
    fmt = output_format(ctx, output)
    needle = (query or "").strip() or " ".join(words or []).strip()
    if not needle:
        raise typer.BadParameter("query is required")
    if regex and fuzzy:
        raise typer.BadParameter("use either --regex or --fuzzy, not both")
    try:
        matches = build_matcher(needle, regex=regex, fuzzy=fuzzy)
    except re.error as e:
        raise typer.BadParameter(f"invalid regex: {e}")

    session_name = resolve_session_target(session)
    try:
        details = list_panes_detailed()
    except NoServerError:
        typer.echo(NO_SERVER)
        return

    found = sorted(
        (
            p
            for p in details
            if (not session_name or p.session == session_name)
            and (window is None or p.window_index == window)
            and any(matches(value) for value in field_values(p, field))
        ),
        key=lambda p: (p.session, p.window_index, p.pane_index),
    )

    if found:
        text = "Matching panes:\n" + "".join(
            f"  {p.swp}  cmd={p.command}  title={p.title}  path={p.path}\n" for p in found
        )
    else:
        text = "No matching panes found.\n"
    emit(detail_rows(found), fmt, text=text, quiet=[p.swp for p in found])
