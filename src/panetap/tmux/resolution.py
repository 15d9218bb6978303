"""Target resolution - turn raw --pane/--session input into canonical targets.

Ambient lookups (environment, current pane, pane listing, alias mapping) come
from a TargetContext so tests can substitute fakes without touching the real
tmux server or process environment.

PUBLIC API:
  - TargetContext: Injected lookups used during resolution
  - resolve_target: Resolve raw pane input to a target string
  - resolve_pane: Resolve and validate in one step
  - resolve_session_target: Resolve raw --session input (@current, @managed)
  - validate_target: Enforce session:window.pane shape
"""

from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional
import logging
import os

from ..errors import (
    TargetError,
    ERR_PANE_REQUIRED,
    ERR_INVALID_PANE,
    ERR_UNKNOWN_SELECTOR,
    ERR_NO_ACTIVE_PANE,
    ERR_NO_CURRENT_PANE,
    ERR_NOT_IN_TMUX,
)
from ..types import SessionWindowPane, Target, is_pane_id
from .core import in_tmux, get_current_pane
from .pane import PaneInfo, list_panes, pane_swp
from .session import DEFAULT_MANAGED_SESSION

logger = logging.getLogger(__name__)

__all__ = ["TargetContext", "resolve_target", "resolve_pane", "resolve_session_target", "validate_target"]


def _load_aliases() -> Mapping[str, str]:
    from ..aliases import AliasStore

    return AliasStore().all()


def _managed_session() -> str:
    from ..config import get_config_manager

    return get_config_manager().managed_session or DEFAULT_MANAGED_SESSION


@dataclass
class TargetContext:
    """Lookups consulted while resolving a target.

    Defaults hit the real tmux server, process environment and alias file.
    """

    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    current_pane: Callable[[], Optional[str]] = get_current_pane
    list_panes: Callable[[], List[PaneInfo]] = list_panes
    pane_swp: Callable[[str], str] = pane_swp
    aliases: Callable[[], Mapping[str, str]] = _load_aliases
    managed_session: Callable[[], str] = _managed_session

    @property
    def in_tmux(self) -> bool:
        return in_tmux(self.environ)


def resolve_target(raw: Optional[Target], ctx: Optional[TargetContext] = None) -> str:
    """Resolve raw pane input to a target string.

    Supports:
    - session:window.pane (returned as-is)
    - Pane ID (%42) -> session:window.pane
    - @current -> pane this process runs in
    - @active -> first active pane in sorted order
    - @alias -> saved alias mapping

    Raises:
        TargetError: With a specific code for each failure.
    """
    ctx = ctx or TargetContext()
    target = (raw or "").strip()
    if not target:
        raise TargetError("--pane is required", code=ERR_PANE_REQUIRED)

    if is_pane_id(target):
        return ctx.pane_swp(target)

    if not target.startswith("@"):
        return target

    if target == "@current":
        if not ctx.in_tmux:
            raise TargetError("not inside tmux; @current requires a tmux client", code=ERR_NOT_IN_TMUX)
        current = (ctx.current_pane() or "").strip()
        if not current:
            raise TargetError("no current pane found", code=ERR_NO_CURRENT_PANE)
        return current

    if target == "@active":
        active = sorted(p.swp for p in ctx.list_panes() if p.is_active)
        if not active:
            raise TargetError("no active pane found", code=ERR_NO_ACTIVE_PANE)
        return active[0]

    from ..aliases import normalize_alias_name

    name = normalize_alias_name(target)
    aliases = ctx.aliases()
    if name not in aliases:
        raise TargetError(f"unknown pane selector: {target}", code=ERR_UNKNOWN_SELECTOR)
    logger.debug(f"Alias @{name} -> {aliases[name]}")
    return aliases[name]


def validate_target(target: str) -> None:
    """Check target decomposes into exactly one session, window and pane.

    Raises:
        TargetError: ERR_INVALID_PANE if the shape is wrong.
    """
    if target.count(":") != 1 or target.count(".") != 1:
        raise TargetError(f"invalid pane id {target!r}; expected session:window.pane", code=ERR_INVALID_PANE)

    session, rest = target.split(":", 1)
    window, pane = rest.split(".", 1)
    if not session or not window.isdigit() or not pane.isdigit():
        raise TargetError(f"invalid pane id {target!r}; expected session:window.pane", code=ERR_INVALID_PANE)


def resolve_pane(raw: Optional[Target], ctx: Optional[TargetContext] = None) -> SessionWindowPane:
    """Resolve raw input and validate the result."""
    target = resolve_target(raw, ctx)
    validate_target(target)
    return target


def resolve_session_target(raw: Optional[str], ctx: Optional[TargetContext] = None) -> Optional[str]:
    """Resolve raw session input.

    Empty input means "all sessions" and returns None. @current is the
    session of the current pane, @managed the configured managed session.
    """
    target = (raw or "").strip()
    if not target:
        return None
    if not target.startswith("@"):
        return target

    ctx = ctx or TargetContext()
    if target == "@current":
        if not ctx.in_tmux:
            raise TargetError("not inside tmux; @current requires a tmux client", code=ERR_NOT_IN_TMUX)
        current = (ctx.current_pane() or "").strip()
        if not current:
            raise TargetError("no current pane found", code=ERR_NO_CURRENT_PANE)
        return current.split(":", 1)[0]
    if target == "@managed":
        return ctx.managed_session()
    raise TargetError(f"unknown session selector: {target}", code=ERR_UNKNOWN_SELECTOR)
