"""Idle detection - wait until a pane stops producing output.

Two progress signals exist. The activity signal reads tmux's per-pane
last-activity timestamp; the content signal hashes a bounded tail of the
captured buffer. The activity signal is preferred when the pane exposes it and
the wait drops to content hashing if the timestamp disappears mid-wait.

PUBLIC API:
  - wait_idle: Block until the pane is quiet or the deadline passes
  - IdleState: Polling bookkeeping returned on success
  - ActivitySignal: Timestamp-based progress signal
  - ContentSignal: Capture-hash progress signal
  - content_hash: sha1 fingerprint of captured text
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..errors import IdleTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.3
CONTENT_TAIL_LINES = 200


def content_hash(text: str) -> str:
    """sha1 hex digest of captured pane text."""
    return hashlib.sha1(text.encode()).hexdigest()


@dataclass
class IdleState:
    """Transient state for one wait call.

    Attributes:
        strategy: Name of the signal in use ("activity" or "content").
        last_seen: Last fingerprint (content) or max timestamp (activity).
        last_change: Clock time output was last seen changing.
        polls: Number of observations made so far.
    """

    strategy: str
    last_seen: Any
    last_change: float
    polls: int = 0


class ActivitySignal:
    """Progress from the pane's last-activity timestamp.

    Only the maximum timestamp is kept, so a stale report never moves
    last_change backward.
    """

    name = "activity"

    def observe(self, pane, state: Optional[IdleState], now: float) -> Optional[IdleState]:
        ts = pane.last_activity()
        if ts is None:
            return None
        if state is None:
            return IdleState(self.name, ts, ts)
        if ts > state.last_seen:
            state.last_seen = ts
            state.last_change = ts
        return state


class ContentSignal:
    """Progress from a sha1 of the last lines of the pane buffer."""

    name = "content"

    def __init__(self, lines: int = CONTENT_TAIL_LINES):
        self.lines = lines

    def observe(self, pane, state: Optional[IdleState], now: float) -> Optional[IdleState]:
        fingerprint = content_hash(pane.capture(self.lines))
        if state is None:
            return IdleState(self.name, fingerprint, now)
        if fingerprint != state.last_seen:
            state.last_seen = fingerprint
            state.last_change = now
        return state


def _select_signal(pane):
    if callable(getattr(pane, "last_activity", None)):
        return ActivitySignal()
    return ContentSignal()


def wait_idle(
    pane,
    quiet: float,
    timeout: float,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], None] = time.sleep,
) -> IdleState:
    """Wait until pane output has been unchanged for quiet seconds.

    The deadline is checked before every sleep and each sleep is clamped to
    the time remaining, so a timeout is raised at most one poll interval late.

    Args:
        pane: Object with capture(lines) and optionally last_activity().
        quiet: Seconds without change that count as idle. <= 0 means idle on
            the first observation that shows no recent change.
        timeout: Maximum seconds to wait.
        poll_interval: Seconds between observations.
        clock: Time source in epoch seconds (tmux activity is epoch based).
        sleep: Sleep function.

    Returns:
        Final IdleState.

    Raises:
        IdleTimeoutError: If the deadline passes first.
    """
    quiet = max(quiet, 0.0)
    deadline = clock() + timeout
    signal = _select_signal(pane)
    state: Optional[IdleState] = None
    polls = 0
    logger.debug(f"Waiting for idle: quiet={quiet}s timeout={timeout}s signal={signal.name}")

    while True:
        now = clock()
        observed = signal.observe(pane, state, now)
        if observed is None:
            logger.debug(f"{signal.name} signal unavailable, falling back to content hashing")
            signal = ContentSignal()
            state = None
            observed = signal.observe(pane, state, now)

        state = observed
        polls += 1
        state.polls = polls

        quiet_for = now - state.last_change
        logger.debug(f"poll {polls}: {signal.name} quiet for {quiet_for:.2f}s")
        if quiet_for >= quiet:
            return state

        if now >= deadline:
            raise IdleTimeoutError(timeout=timeout)

        sleep(min(poll_interval, deadline - now))
