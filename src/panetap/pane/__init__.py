"""Pane module - the core run/wait/follow protocol on top of tmux.

PUBLIC API:
  - Pane: A resolved tmux pane
  - wait_idle: Block until the pane is quiet
  - run_command: Send, wait, capture and clean
  - resolve_outcome: Invocation-level error for a run
  - follow: Stream new lines
  - stop_pane: Interrupt and kill on timeout
"""

from .core import Pane
from .idle import wait_idle, IdleState
from .execution import run_command, resolve_outcome, RunSession, clamp_timeout
from .streaming import follow, FollowEvent, diff_lines, diff_lines_by_count
from .control import stop_pane, StopResult, parse_signal, send_signal

__all__ = [
    "Pane",
    "wait_idle",
    "IdleState",
    "run_command",
    "resolve_outcome",
    "RunSession",
    "clamp_timeout",
    "follow",
    "FollowEvent",
    "diff_lines",
    "diff_lines_by_count",
    "stop_pane",
    "StopResult",
    "parse_signal",
    "send_signal",
]
