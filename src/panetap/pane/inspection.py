"""Point-in-time views of a pane - activity snapshot and process tree.

PUBLIC API:
  - PaneSnapshot: Metadata, idle verdict and output hash at one instant
  - snapshot_pane: Build a PaneSnapshot from pane details and a capture
  - ProcessNode: One process in a tree, with its depth below the root
  - parse_process_list: Parse `ps -o pid=,ppid=,command=` output
  - build_process_tree: Depth-first tree rooted at a pid
  - process_tree: Process tree of a running pid
"""

import logging
import subprocess
import time
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Callable, Dict, List, NamedTuple, Optional

from .idle import content_hash

logger = logging.getLogger(__name__)

DEFAULT_MONITOR_IDLE = 2.0


@dataclass
class PaneSnapshot:
    """One observation of a pane.

    idle_seconds is None when tmux reports no activity timestamp; such a pane
    is never reported idle.
    """

    pane_id: str
    session: str
    window_index: int
    pane_index: int
    active: bool
    command: str
    title: str
    path: str
    pid: int
    activity_at: Optional[str]
    idle_seconds: Optional[float]
    idle: bool
    output_hash: str
    lines_checked: int

    @property
    def status(self) -> str:
        return "idle" if self.idle else "busy"

    def to_dict(self) -> dict:
        return asdict(self)


def snapshot_pane(pane, details, idle: float, lines: int, clock: Callable[[], float] = time.time) -> PaneSnapshot:
    """Snapshot pane using its tmux details and a capture of the last lines.

    Args:
        pane: Object with a target and capture(lines).
        details: PaneDetails for the same pane.
        idle: Seconds without activity that count as idle; <= 0 means 2.
        lines: Lines hashed from the end of the buffer, 0 for all of it.
        clock: Epoch clock.
    """
    if idle <= 0:
        idle = DEFAULT_MONITOR_IDLE

    idle_seconds = None
    activity_at = None
    if details.activity is not None:
        idle_seconds = max(0.0, clock() - details.activity)
        activity_at = datetime.fromtimestamp(details.activity, tz=timezone.utc).isoformat()

    return PaneSnapshot(
        pane_id=pane.target,
        session=details.session,
        window_index=details.window_index,
        pane_index=details.pane_index,
        active=details.is_active,
        command=details.command,
        title=details.title,
        path=details.path,
        pid=details.pid,
        activity_at=activity_at,
        idle_seconds=idle_seconds,
        idle=idle_seconds is not None and idle_seconds >= idle,
        output_hash=content_hash(pane.capture(lines)),
        lines_checked=lines,
    )


class ProcessNode(NamedTuple):
    """A process and its depth below the tree root."""

    pid: int
    ppid: int
    command: str
    depth: int = 0


def parse_process_list(output: str) -> List[ProcessNode]:
    """Parse `ps -o pid=,ppid=,command=` output, skipping malformed rows."""
    procs = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 3 or not fields[0].isdigit() or not fields[1].isdigit():
            continue
        procs.append(ProcessNode(int(fields[0]), int(fields[1]), " ".join(fields[2:])))
    return procs


def build_process_tree(root: int, procs: List[ProcessNode]) -> List[ProcessNode]:
    """Walk procs depth-first from root, children in listing order.

    Returns:
        Nodes with depth set, root first; empty if root is not listed.
    """
    by_pid: Dict[int, ProcessNode] = {p.pid: p for p in procs}
    children: Dict[int, List[ProcessNode]] = {}
    for p in procs:
        if p.pid != p.ppid:
            children.setdefault(p.ppid, []).append(p)
    if root not in by_pid:
        return []

    nodes = []
    seen = set()

    def walk(pid: int, depth: int) -> None:
        if pid in seen:
            return
        seen.add(pid)
        nodes.append(by_pid[pid]._replace(depth=depth))
        for child in children.get(pid, []):
            walk(child.pid, depth + 1)

    walk(root, 0)
    return nodes


def process_tree(pid: int) -> List[ProcessNode]:
    """Process tree rooted at pid, read from ps.

    Raises:
        OSError: If ps cannot be run or fails.
    """
    if pid <= 0:
        return []
    result = subprocess.run(["ps", "-o", "pid=,ppid=,command=", "-A"], capture_output=True, text=True)
    if result.returncode != 0:
        raise OSError(f"ps failed: {result.stderr.strip()}")
    tree = build_process_tree(pid, parse_process_list(result.stdout))
    logger.debug(f"Process tree for {pid}: {len(tree)} processes")
    return tree
