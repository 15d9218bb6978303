"""Coded errors shared by every panetap layer.

Every failure the core can produce carries a stable machine-readable code plus
a human message. The CLI boundary is the only place that turns them into
stderr text and an exit status.

PUBLIC API:
  - CodedError: Base exception with code, message and optional cause
  - TargetError: Pane target could not be resolved or is malformed
  - IdleTimeoutError: Pane did not become idle before the deadline
  - CommandExitError: Remote command exit code was missing or non-zero
  - SignalError: Unsupported signal name or number
  - AliasError: Invalid alias name
"""

from typing import Optional

ERR_PANE_REQUIRED = "ERR_PANE_REQUIRED"
ERR_INVALID_PANE = "ERR_INVALID_PANE"
ERR_UNKNOWN_SELECTOR = "ERR_UNKNOWN_SELECTOR"
ERR_NO_ACTIVE_PANE = "ERR_NO_ACTIVE_PANE"
ERR_NO_CURRENT_PANE = "ERR_NO_CURRENT_PANE"
ERR_NOT_IN_TMUX = "ERR_NOT_IN_TMUX"
ERR_SIGNAL_UNSUPPORTED = "ERR_SIGNAL_UNSUPPORTED"
ERR_COMMAND_EXIT = "ERR_COMMAND_EXIT"
ERR_IDLE_TIMEOUT = "ERR_IDLE_TIMEOUT"
ERR_INVALID_ALIAS = "ERR_INVALID_ALIAS"
ERR_INVALID_ENV = "ERR_INVALID_ENV"
ERR_TMUX = "ERR_TMUX"


class CodedError(Exception):
    """Base exception carrying a stable error code.

    Attributes:
        code: Machine-readable code (e.g. "ERR_COMMAND_EXIT").
        message: Human-readable description.
        cause: Underlying exception, if any.
    """

    default_code = "ERR_UNKNOWN"

    def __init__(self, message: str, code: Optional[str] = None, cause: Optional[BaseException] = None):
        self.code = code or self.default_code
        self.message = message
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.code}: {self.message}: {self.cause}"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict:
        """Serializable form for json/yaml error output."""
        data = {"code": self.code, "message": self.message}
        if self.cause is not None:
            data["cause"] = str(self.cause)
        return data


class TargetError(CodedError):
    """Raised when a pane target cannot be resolved or validated."""

    default_code = ERR_INVALID_PANE


class IdleTimeoutError(CodedError):
    """Raised when a pane keeps changing past the wait deadline.

    A timeout is an expected outcome: callers may report it, tolerate it, or
    escalate (the stop workflow kills the pane).
    """

    default_code = ERR_IDLE_TIMEOUT

    def __init__(self, message: str = "timeout waiting for idle", timeout: Optional[float] = None):
        self.timeout = timeout
        super().__init__(message)


class CommandExitError(CodedError):
    """Raised when exit-code propagation is requested and the run did not succeed."""

    default_code = ERR_COMMAND_EXIT

    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message)


class SignalError(CodedError):
    """Raised for unsupported signal names."""

    default_code = ERR_SIGNAL_UNSUPPORTED


class AliasError(CodedError):
    """Raised for invalid or reserved alias names."""

    default_code = ERR_INVALID_ALIAS
