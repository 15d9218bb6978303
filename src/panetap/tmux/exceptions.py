"""Tmux-specific exceptions.

Every tmux failure is fatal to the invocation and never retried: they point
at the environment (missing binary, no server) rather than a transient state.

PUBLIC API:
  - TmuxError: Base exception for all tmux operations
  - TmuxNotFoundError: tmux binary is not on PATH
  - NoServerError: No tmux server is running
  - SessionNotFoundError: Session not found exception
  - PaneNotFoundError: Pane not found exception
  - CurrentPaneError: Current pane operation error
"""

from ..errors import CodedError, ERR_TMUX


class TmuxError(CodedError):
    """Base exception for all tmux operations."""

    default_code = ERR_TMUX


class TmuxNotFoundError(TmuxError):
    """Raised when the tmux binary cannot be executed."""

    pass


class NoServerError(TmuxError):
    """Raised when no tmux server is running."""

    pass


class SessionNotFoundError(TmuxError):
    """Raised when a tmux session cannot be found."""

    pass


class PaneNotFoundError(TmuxError):
    """Raised when a tmux pane cannot be found."""

    pass


class CurrentPaneError(TmuxError):
    """Raised when attempting forbidden operations on current pane."""

    pass
