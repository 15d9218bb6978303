"""Type definitions for panetap - pane-first targets and run results.

Everything happens in panes. Targets are resolved once per invocation to the
canonical session:window.pane form and never change afterwards.
"""

from typing import Optional
from dataclasses import dataclass
import re


type PaneID = str  # e.g., "%42" - tmux native pane ID
type SessionWindowPane = str  # e.g., "session:0.0" - our canonical format
type Target = PaneID | SessionWindowPane | str  # str for @selectors and aliases

# Selectors that can never be alias names
RESERVED_SELECTORS = frozenset(["current", "active"])

_SWP_RE = re.compile(r"^([^:]+):(\d+)\.(\d+)$")


@dataclass
class PaneIdentifier:
    """Parsed pane identifier with all components."""

    session: str
    window: int
    pane: int

    @property
    def swp(self) -> SessionWindowPane:
        """Get session:window.pane format."""
        return f"{self.session}:{self.window}.{self.pane}"

    @classmethod
    def parse(cls, target: str) -> "PaneIdentifier":
        """Parse session:window.pane format.

        Args:
            target: String like "dev:0.0" or "backend:1.2"

        Raises:
            ValueError: If format is invalid
        """
        match = _SWP_RE.match(target)
        if not match:
            raise ValueError(f"Invalid pane identifier format: {target}")

        session, window, pane = match.groups()
        return cls(session=session, window=int(window), pane=int(pane))


def is_pane_id(target: str) -> bool:
    """Check if target is a tmux pane ID (%number)."""
    return target.startswith("%") and target[1:].isdigit()


def is_session_window_pane(target: str) -> bool:
    """Check if target is session:window.pane format."""
    return _SWP_RE.match(target) is not None


@dataclass
class RunResult:
    """Structured result of one run invocation."""

    output: str
    exit_code: Optional[int] = None
    exit_found: bool = False
    wait_error: Optional[str] = None

    def to_dict(self) -> dict:
        """Payload form, absent optional fields omitted."""
        data: dict = {"output": self.output}
        if self.exit_code is not None:
            data["exit_code"] = self.exit_code
        data["exit_found"] = self.exit_found
        if self.wait_error:
            data["wait_error"] = self.wait_error
        return data
