"""Follow mode - poll a pane and emit only the lines not seen before.

PUBLIC API:
  - diff_lines: New lines of curr given the previous line-limited capture
  - diff_lines_by_count: New lines of an unlimited capture by line count
  - follow: Generator of FollowEvent for each new line
  - FollowEvent: One emitted line with its UTC timestamp
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Tuple

from .sentinel import split_lines

logger = logging.getLogger(__name__)


@dataclass
class FollowEvent:
    """A line observed in the pane."""

    time: str  # RFC 3339, UTC
    line: str

    def to_dict(self) -> dict:
        return {"time": self.time, "line": self.line}


def diff_lines(prev: List[str], curr: List[str]) -> List[str]:
    """Return the part of curr that extends prev.

    The longest suffix of prev that is also a prefix of curr is treated as
    already emitted. With no overlap (the buffer scrolled past everything
    seen) all of curr is new.
    """
    if not prev:
        return curr
    for k in range(min(len(prev), len(curr)), 0, -1):
        if prev[-k:] == curr[:k]:
            return curr[k:]
    return curr


def diff_lines_by_count(curr: List[str], prev_count: int) -> Tuple[List[str], int]:
    """Diff an unlimited capture by how many lines were already seen.

    Returns:
        Tuple of (lines to emit, new count). A buffer that shrank (cleared or
        trimmed history) is emitted again in full.
    """
    if prev_count <= 0 or len(curr) < prev_count:
        return curr, len(curr)
    return curr[prev_count:], len(curr)


def _now_utc() -> str:
    return datetime.now(timezone.utc).isoformat()


def follow(
    pane,
    lines: int = 200,
    interval: float = 1.0,
    from_start: bool = False,
    duration: float = 0.0,
    once: bool = False,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], None] = time.sleep,
    timestamp: Callable[[], str] = _now_utc,
) -> Iterator[FollowEvent]:
    """Poll pane and yield new lines in buffer order.

    Args:
        pane: Pane with capture(lines).
        lines: Capture the last N lines, 0 for the full buffer.
        interval: Seconds between polls (<= 0 means 1).
        from_start: Emit the initial buffer instead of only later lines.
        duration: Stop after this many seconds, 0 to run until interrupted.
        once: Take a single capture and stop.
    """
    if interval <= 0:
        interval = 1.0
    deadline = clock() + duration if duration > 0 else None

    prev: List[str] = []
    prev_count = 0
    initialized = False

    while True:
        curr = split_lines(pane.capture(lines))
        if not initialized:
            emit = curr if from_start else []
            initialized = True
            if lines == 0:
                prev_count = len(curr)
            else:
                prev = curr
        elif lines == 0:
            emit, prev_count = diff_lines_by_count(curr, prev_count)
        else:
            emit = diff_lines(prev, curr)
            prev = curr

        if emit:
            logger.debug(f"follow: {len(emit)} new lines")
        for line in emit:
            yield FollowEvent(time=timestamp(), line=line)

        if once:
            return
        if deadline is not None and clock() >= deadline:
            return
        sleep(interval)
