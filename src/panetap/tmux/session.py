"""Session and window management for tmux.

PUBLIC API:
  - SessionInfo: Session information record
  - WindowInfo: Window information record
  - session_exists: Check if session exists (exact name match)
  - create_session: Create a detached session
  - ensure_session: Create session unless it already exists
  - kill_session: Kill a tmux session
  - list_sessions: Get all tmux sessions
  - list_windows: Get windows for one or all sessions
  - launch: Create a new pane or window running a command
  - new_window: Open a named window
  - split_window: Split a window into a new pane
  - set_pane_title: Title a pane
  - select_layout: Apply a tmux layout
  - find_window: Look up a window by name
  - ensure_window: Create session, window and panes only when missing
"""

from dataclasses import dataclass, asdict
from typing import Optional, NamedTuple, List, Sequence
import logging

from .core import run_tmux, check_tmux, parse_format_line, in_tmux, FIELD_SEP, SWP_FORMAT
from .exceptions import TmuxError
from .pane import parse_epoch, list_panes_detailed
from ..types import PaneIdentifier, is_session_window_pane

logger = logging.getLogger(__name__)

DEFAULT_MANAGED_SESSION = "panetap"


class SessionInfo(NamedTuple):
    """Session information named tuple.

    Attributes:
        name: Session name.
        windows: Number of windows.
        attached: Number of attached clients.
        created: Creation time as epoch seconds.
        activity: Last activity as epoch seconds.
    """

    name: str
    windows: int
    attached: int
    created: Optional[float]
    activity: Optional[float]

    @classmethod
    def from_format_line(cls, line: str) -> "SessionInfo":
        """Parse from tmux format string."""
        parts = parse_format_line(line) + [""] * 5
        return cls(
            name=parts[0],
            windows=int(parts[1]) if parts[1].isdigit() else 0,
            attached=int(parts[2]) if parts[2].isdigit() else 0,
            created=parse_epoch(parts[3]),
            activity=parse_epoch(parts[4]),
        )


class WindowInfo(NamedTuple):
    """Window information named tuple."""

    session: str
    index: int
    is_active: bool
    name: str

    @classmethod
    def from_format_line(cls, line: str) -> "WindowInfo":
        """Parse from tmux format string."""
        parts = parse_format_line(line) + [""] * 4
        return cls(
            session=parts[0],
            index=int(parts[1]) if parts[1].isdigit() else 0,
            is_active=parts[2] == "1",
            name=parts[3],
        )


def exact_session_target(name: str) -> str:
    """Prefix with '=' so tmux does not prefix-match session names."""
    return name if name.startswith("=") else f"={name}"


def session_exists(name: str) -> bool:
    """Check if session exists.

    Args:
        name: Session name to check.

    Returns:
        True if session exists, False otherwise (including no server).

    Raises:
        TmuxError: If tmux fails for another reason.
    """
    code, _, stderr = run_tmux(["has-session", "-t", exact_session_target(name)])
    if code == 0:
        return True

    lower = stderr.strip().lower()
    if "no server running" in lower or "can't find session" in lower or "error connecting to" in lower:
        return False
    raise TmuxError(f"tmux has-session: {stderr.strip()}" if stderr.strip() else "tmux has-session failed")


def create_session(name: str, start_dir: Optional[str] = None) -> str:
    """Create new detached session and return its first pane as session:window.pane."""
    args = ["new-session", "-d", "-s", name, "-P", "-F", SWP_FORMAT]
    if start_dir:
        args.extend(["-c", start_dir])
    return check_tmux(args).strip()


def ensure_session(name: str) -> bool:
    """Create the session if missing.

    Returns:
        True if a session was created.
    """
    if session_exists(name):
        return False
    logger.info(f"Creating session {name}")
    create_session(name)
    return True


def kill_session(name: str) -> None:
    """Kill a tmux session."""
    check_tmux(["kill-session", "-t", exact_session_target(name)])


def list_sessions() -> List[SessionInfo]:
    """Get all tmux sessions.

    Raises:
        NoServerError: If no tmux server is running.
    """
    fields = [
        "#{session_name}",
        "#{session_windows}",
        "#{session_attached}",
        "#{session_created}",
        "#{session_activity}",
    ]
    out = check_tmux(["list-sessions", "-F", FIELD_SEP.join(fields)])
    return [SessionInfo.from_format_line(line) for line in out.splitlines() if line.strip()]


def list_windows(session: Optional[str] = None) -> List[WindowInfo]:
    """Get windows for a session, or across all sessions when session is None."""
    fields = ["#{session_name}", "#{window_index}", "#{?window_active,1,0}", "#{window_name}"]
    args = ["list-windows", "-F", FIELD_SEP.join(fields)]
    if session:
        args.extend(["-t", session])
    else:
        args.append("-a")
    out = check_tmux(args)
    return [WindowInfo.from_format_line(line) for line in out.splitlines() if line.strip()]


def _shell_args(command: Optional[str]) -> List[str]:
    if not command or not command.strip():
        return []
    return ["sh", "-lc", command]


def launch(command: Optional[str] = None, managed_session: Optional[str] = None, split: Optional[str] = None) -> str:
    """Create a new pane running command and return it as session:window.pane.

    Inside tmux the current window is split ("h" or "v"). Outside tmux a new
    window is opened in the managed session, which is created on demand.
    """
    if in_tmux():
        args = ["split-window", "-P", "-F", SWP_FORMAT]
        if split == "h":
            args.append("-h")
        elif split == "v":
            args.append("-v")
        args.extend(_shell_args(command))
        return check_tmux(args).strip()

    session = managed_session or DEFAULT_MANAGED_SESSION
    ensure_session(session)
    args = ["new-window", "-t", f"{exact_session_target(session)}:", "-P", "-F", SWP_FORMAT]
    args.extend(_shell_args(command))
    return check_tmux(args).strip()


def _spawn_args(command: Optional[str], cwd: Optional[str], env: Sequence[str]) -> List[str]:
    args = []
    if cwd:
        args.extend(["-c", cwd])
    for pair in env:
        args.extend(["-e", pair])
    args.extend(_shell_args(command))
    return args


def new_window(
    session: str, name: str, command: Optional[str] = None, cwd: Optional[str] = None, env: Sequence[str] = ()
) -> str:
    """Open a detached named window and return its pane as session:window.pane."""
    args = ["new-window", "-d", "-t", f"{exact_session_target(session)}:", "-n", name, "-P", "-F", SWP_FORMAT]
    args.extend(_spawn_args(command, cwd, env))
    return check_tmux(args).strip()


def split_window(
    target: str,
    split: Optional[str] = None,
    command: Optional[str] = None,
    cwd: Optional[str] = None,
    env: Sequence[str] = (),
) -> str:
    """Split target without changing focus and return the new pane as session:window.pane."""
    args = ["split-window", "-d", "-t", target, "-P", "-F", SWP_FORMAT]
    if split == "h":
        args.append("-h")
    elif split == "v":
        args.append("-v")
    args.extend(_spawn_args(command, cwd, env))
    return check_tmux(args).strip()


def set_pane_title(target: str, title: str) -> None:
    check_tmux(["select-pane", "-t", target, "-T", title])


def select_layout(target: str, layout: str) -> None:
    check_tmux(["select-layout", "-t", target, layout])


def find_window(windows: Sequence[WindowInfo], name: str) -> Optional[WindowInfo]:
    """Lowest-index window called name, if any."""
    matches = [w for w in windows if w.name == name.strip()]
    return min(matches, key=lambda w: w.index) if matches else None


@dataclass
class EnsureResult:
    """What ensure_window found or created."""

    session: str
    window: str
    window_index: int = 0
    pane_id: str = ""
    pane_title: str = ""
    created_session: bool = False
    created_window: bool = False
    created_pane: bool = False
    added_panes: int = 0
    layout_applied: bool = False

    def to_dict(self) -> dict:
        data = asdict(self)
        if not self.pane_title:
            del data["pane_title"]
        return data


def ensure_window(
    session: str,
    window: str,
    command: Optional[str] = None,
    pane_title: str = "",
    panes: int = 0,
    layout: Optional[str] = None,
    split: Optional[str] = None,
    cwd: Optional[str] = None,
    env: Sequence[str] = (),
) -> EnsureResult:
    """Make sure session, a window named window and optionally a titled pane exist.

    Nothing that already exists is touched. command, cwd and env apply only
    to panes created here; panes added to reach the count run a plain shell.

    Args:
        session: Session name, created when missing.
        window: Window name; the lowest index wins when several share it.
        command: Command for the created window or titled pane.
        pane_title: Pane to find by title in the window, split and titled when missing.
        panes: Split until the window holds at least this many panes (0 to skip).
        layout: tmux layout applied when anything was created.
        split: Split direction for new panes ("h" or "v").
        cwd: Working directory for new panes.
        env: KEY=VAL pairs for new panes.
    """
    result = EnsureResult(session=session, window=window, pane_title=pane_title)
    result.created_session = ensure_session(session)

    existing = find_window(list_windows(exact_session_target(session)), window)
    if existing is None:
        swp = new_window(session, window, command, cwd, env)
        logger.info(f"Created window {window} in {session}: {swp}")
        result.created_window = result.created_pane = True
        result.pane_id = swp
        if is_session_window_pane(swp):
            result.window_index = PaneIdentifier.parse(swp).window
        if pane_title:
            set_pane_title(swp, pane_title)
        count = 1
    else:
        result.window_index = existing.index
        members = sorted(
            (p for p in list_panes_detailed() if p.session == session and p.window_index == existing.index),
            key=lambda p: p.pane_index,
        )
        titled = next((p for p in members if pane_title and p.title == pane_title), None)
        if titled is not None:
            result.pane_id = titled.swp
        elif pane_title:
            result.pane_id = split_window(_window_target(session, existing.index), split, command, cwd, env)
            result.created_pane = True
            set_pane_title(result.pane_id, pane_title)
        elif members:
            result.pane_id = next((p for p in members if p.is_active), members[0]).swp
        else:
            raise TmuxError(f"no panes found in window {session}:{existing.index}")
        count = len(members) + (1 if result.created_pane else 0)

    window_target = _window_target(session, result.window_index)
    while count < panes:
        split_window(window_target, split, None, cwd, env)
        result.added_panes += 1
        count += 1

    if layout and (result.created_window or result.created_pane or result.added_panes):
        select_layout(window_target, layout)
        result.layout_applied = True
    return result


def _window_target(session: str, index: int) -> str:
    return f"{exact_session_target(session)}:{index}"
