"""Pane operations - listing, capture, keystroke injection and kill."""

from typing import List, Optional
from dataclasses import dataclass, asdict
import logging
import time

from .core import run_tmux, check_tmux, parse_format_line, get_current_pane, FIELD_SEP, SWP_FORMAT
from .exceptions import CurrentPaneError, PaneNotFoundError
from ..types import SessionWindowPane

logger = logging.getLogger(__name__)

_PANE_FIELDS = [
    "#{session_name}",
    "#{window_index}",
    "#{pane_index}",
    "#{?pane_active,1,0}",
    "#{pane_current_command}",
    "#{pane_title}",
]

_DETAIL_FIELDS = [
    "#{session_name}",
    "#{window_index}",
    "#{window_name}",
    "#{?window_active,1,0}",
    "#{pane_index}",
    "#{pane_id}",
    "#{?pane_active,1,0}",
    "#{pane_current_command}",
    "#{pane_title}",
    "#{pane_current_path}",
    "#{pane_pid}",
    "#{pane_activity}",
]


@dataclass
class PaneInfo:
    """Summary of a tmux pane."""

    session: str
    window_index: int
    pane_index: int
    is_active: bool
    command: str
    title: str

    @property
    def swp(self) -> SessionWindowPane:
        """Get session:window.pane format."""
        return f"{self.session}:{self.window_index}.{self.pane_index}"


@dataclass
class PaneDetails:
    """Complete information about a tmux pane."""

    session: str
    window_index: int
    window_name: str
    window_active: bool
    pane_index: int
    pane_id: str  # %42
    is_active: bool
    command: str
    title: str
    path: str
    pid: int
    activity: Optional[float]  # epoch seconds, None when tmux reports nothing

    @property
    def swp(self) -> SessionWindowPane:
        """Get session:window.pane format."""
        return f"{self.session}:{self.window_index}.{self.pane_index}"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["formatted_id"] = self.swp
        return data


def _to_int(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return 0


def parse_epoch(raw: str) -> Optional[float]:
    """Parse tmux epoch seconds, None for empty or non-positive values."""
    try:
        secs = int(raw.strip())
    except ValueError:
        return None
    return float(secs) if secs > 0 else None


def parse_panes_output(output: str) -> List[PaneInfo]:
    """Parse `list-panes` output produced with the summary format."""
    panes = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = parse_format_line(line)
        if len(parts) < 6:
            continue
        panes.append(
            PaneInfo(
                session=parts[0],
                window_index=_to_int(parts[1]),
                pane_index=_to_int(parts[2]),
                is_active=parts[3] == "1",
                command=parts[4],
                title=parts[5],
            )
        )
    return panes


def parse_pane_details_output(output: str) -> List[PaneDetails]:
    """Parse `list-panes`/`display-message` output produced with the detail format."""
    panes = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = parse_format_line(line)
        if len(parts) < 12:
            continue
        panes.append(
            PaneDetails(
                session=parts[0],
                window_index=_to_int(parts[1]),
                window_name=parts[2],
                window_active=parts[3] == "1",
                pane_index=_to_int(parts[4]),
                pane_id=parts[5],
                is_active=parts[6] == "1",
                command=parts[7],
                title=parts[8],
                path=parts[9],
                pid=_to_int(parts[10]),
                activity=parse_epoch(parts[11]),
            )
        )
    return panes


def list_panes() -> List[PaneInfo]:
    """List panes across all sessions.

    Raises:
        NoServerError: If no tmux server is running.
    """
    stdout = check_tmux(["list-panes", "-a", "-F", FIELD_SEP.join(_PANE_FIELDS)])
    return parse_panes_output(stdout)


def list_panes_detailed() -> List[PaneDetails]:
    """List panes across all sessions with extended metadata."""
    stdout = check_tmux(["list-panes", "-a", "-F", FIELD_SEP.join(_DETAIL_FIELDS)])
    return parse_pane_details_output(stdout)


def pane_details(target: str) -> PaneDetails:
    """Get extended metadata for a specific pane.

    Raises:
        PaneNotFoundError: If tmux returns nothing for the target.
    """
    code, stdout, stderr = run_tmux(["display-message", "-p", "-t", target, FIELD_SEP.join(_DETAIL_FIELDS)])
    if code != 0:
        raise PaneNotFoundError(f"pane {target} not found: {stderr.strip()}")

    panes = parse_pane_details_output(stdout)
    if not panes:
        raise PaneNotFoundError(f"no pane details returned for {target}")
    return panes[0]


def pane_swp(pane_id: str) -> SessionWindowPane:
    """Get session:window.pane format for a pane ID like '%3'."""
    code, stdout, stderr = run_tmux(["display-message", "-p", "-t", pane_id, SWP_FORMAT])
    if code != 0 or not stdout.strip():
        raise PaneNotFoundError(f"pane {pane_id} not found: {stderr.strip()}")
    return stdout.strip()


def capture(target: str, lines: int = 0) -> str:
    """Capture the pane buffer.

    Args:
        target: Target pane.
        lines: Limit to the last N lines of history, 0 for the full buffer.
    """
    args = ["capture-pane", "-p", "-t", target]
    if lines > 0:
        args.extend(["-S", f"-{lines}"])
    else:
        args.extend(["-S", "-"])
    return check_tmux(args)


def pane_activity(target: str) -> Optional[float]:
    """Get the pane's last activity as epoch seconds.

    Returns:
        Timestamp, or None when tmux does not expose one for this pane.
    """
    code, stdout, _ = run_tmux(["display-message", "-p", "-t", target, "#{pane_activity}"])
    if code != 0:
        return None
    return parse_epoch(stdout)


def send_literal(target: str, text: str, enter: bool = True, delay: float = 0.0) -> None:
    """Type literal text into a pane, optionally followed by Enter.

    Args:
        target: Target pane.
        text: Text typed as-is (tmux send-keys -l).
        enter: Whether to press Enter afterwards.
        delay: Seconds to wait before pressing Enter.
    """
    check_tmux(["send-keys", "-t", target, "-l", text])
    if enter:
        if delay > 0:
            time.sleep(delay)
        check_tmux(["send-keys", "-t", target, "C-m"])


def send_keys(target: str, keys: List[str]) -> None:
    """Send tmux key names to a pane (e.g. C-x, Enter, Down)."""
    if not keys:
        return
    check_tmux(["send-keys", "-t", target, *keys])


def interrupt(target: str) -> None:
    """Send Ctrl+C to the pane."""
    send_keys(target, ["C-c"])


def escape(target: str) -> None:
    """Send Escape to the pane."""
    send_keys(target, ["Escape"])


def kill_pane(target: str) -> None:
    """Kill a pane, refusing to kill the pane we are running in.

    Raises:
        CurrentPaneError: If target is the current pane.
    """
    current = get_current_pane()
    if current and current == target.strip():
        raise CurrentPaneError("refusing to kill the current pane")
    logger.info(f"Killing pane {target}")
    check_tmux(["kill-pane", "-t", target])

