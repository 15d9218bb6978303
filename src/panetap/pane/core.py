"""The Pane - a resolved target with lazy-loaded properties."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..types import SessionWindowPane


@dataclass
class Pane:
    """A tmux pane - the fundamental unit panetap drives.

    Wraps a target resolved once per invocation. Everything the core needs
    from tmux (text, activity, keystrokes) goes through these methods so tests
    can substitute a fake pane.
    """

    target: SessionWindowPane

    # Cached properties - only stable things that don't change
    _pid: Optional[int] = field(default=None, init=False, repr=False)

    @property
    def pid(self) -> int:
        """Get pane PID."""
        if self._pid is None:
            from ..tmux.pane import pane_details

            self._pid = pane_details(self.target).pid
        return self._pid

    def capture(self, lines: int = 0) -> str:
        """Capture pane text, limited to the last lines (0 = unlimited)."""
        from ..tmux.pane import capture

        return capture(self.target, lines)

    def last_activity(self) -> Optional[float]:
        """Last activity as epoch seconds, None if tmux does not report one."""
        from ..tmux.pane import pane_activity

        return pane_activity(self.target)

    def send(self, text: str, enter: bool = True, delay: float = 0.0) -> None:
        """Type literal text, then Enter after delay seconds if requested."""
        from ..tmux.pane import send_literal

        send_literal(self.target, text, enter=enter, delay=delay)

    def send_keys(self, keys: List[str]) -> None:
        from ..tmux.pane import send_keys

        send_keys(self.target, keys)

    def interrupt(self) -> None:
        from ..tmux.pane import interrupt

        interrupt(self.target)

    def escape(self) -> None:
        from ..tmux.pane import escape

        escape(self.target)

    def kill(self) -> None:
        from ..tmux.pane import kill_pane

        kill_pane(self.target)
