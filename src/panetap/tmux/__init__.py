"""Pure tmux operations - the multiplexer control interface panetap consumes.

PUBLIC API:
  - run_tmux: Run tmux command and return result
  - in_tmux: Check if running inside a tmux client
  - get_current_pane: Current pane as session:window.pane
  - list_panes: List panes across sessions
  - list_panes_detailed: List panes with extended metadata
  - pane_details: Extended metadata for one pane
  - capture: Capture pane text
  - pane_activity: Last activity timestamp
  - send_literal: Type literal text with optional Enter
  - send_keys: Send tmux key names
  - interrupt: Send Ctrl+C
  - escape: Send Escape
  - kill_pane: Kill a pane (never the current one)
  - list_sessions: List sessions
  - list_windows: List windows
  - session_exists: Check if session exists
  - create_session: Create tmux session
  - kill_session: Kill tmux session
  - launch: Create a pane running a command
  - resolve_pane: Resolve raw target input
"""

from .core import run_tmux, in_tmux, get_current_pane

from .pane import (
    PaneInfo,
    PaneDetails,
    list_panes,
    list_panes_detailed,
    pane_details,
    capture,
    pane_activity,
    send_literal,
    send_keys,
    interrupt,
    escape,
    kill_pane,
)

from .session import (
    SessionInfo,
    WindowInfo,
    list_sessions,
    list_windows,
    session_exists,
    create_session,
    kill_session,
    launch,
)

from .resolution import TargetContext, resolve_target, resolve_pane, validate_target

__all__ = [
    "run_tmux",
    "in_tmux",
    "get_current_pane",
    "PaneInfo",
    "PaneDetails",
    "list_panes",
    "list_panes_detailed",
    "pane_details",
    "capture",
    "pane_activity",
    "send_literal",
    "send_keys",
    "interrupt",
    "escape",
    "kill_pane",
    "SessionInfo",
    "WindowInfo",
    "list_sessions",
    "list_windows",
    "session_exists",
    "create_session",
    "kill_session",
    "launch",
    "TargetContext",
    "resolve_target",
    "resolve_pane",
    "validate_target",
]
