"""Process control operations for panes.

Contains signal lookup, signal delivery to a pane's process, and the stop
workflow (interrupt, wait for quiet, kill if it hangs).

PUBLIC API:
  - SIGNALS: Supported signal names
  - parse_signal: Resolve a signal name or number
  - send_signal: Deliver a signal to a PID
  - stop_pane: Interrupt a pane and kill it on idle timeout
  - StopResult: Outcome of stop_pane
"""

import logging
import os
import signal
import time
from dataclasses import dataclass, asdict
from typing import Callable, Optional, Tuple

from ..errors import IdleTimeoutError, SignalError
from .idle import wait_idle, DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)

SIGNALS = {
    "HUP": signal.SIGHUP,
    "INT": signal.SIGINT,
    "QUIT": signal.SIGQUIT,
    "KILL": signal.SIGKILL,
    "TERM": signal.SIGTERM,
    "USR1": signal.SIGUSR1,
    "USR2": signal.SIGUSR2,
}


def parse_signal(raw: Optional[str]) -> Tuple[signal.Signals, str]:
    """Resolve "TERM", "sigterm", "SIGTERM" or "15" to a signal.

    Empty input means TERM.

    Returns:
        Tuple of (signal, canonical name like "SIGTERM").

    Raises:
        SignalError: If the name or number is not supported.
    """
    name = (raw or "").strip().upper() or "TERM"
    name = name.removeprefix("SIG")

    if name in SIGNALS:
        return SIGNALS[name], f"SIG{name}"

    if name.isdigit():
        try:
            sig = signal.Signals(int(name))
        except ValueError:
            raise SignalError(f"unsupported signal: {raw}") from None
        return sig, sig.name

    raise SignalError(f"unsupported signal: {raw}")


def send_signal(pid: int, sig: signal.Signals = signal.SIGTERM) -> None:
    """Send a signal to a specific process.

    Raises:
        SignalError: If the PID is unusable.
        OSError: If the kernel refuses delivery.
    """
    if pid <= 0:
        raise SignalError("pane PID not available")
    os.kill(pid, sig)
    logger.info(f"Sent {signal.Signals(sig).name} to PID {pid}")


@dataclass
class StopResult:
    """Outcome of the stop workflow."""

    pane_id: str
    interrupted: bool = False
    killed: bool = False
    timed_out: bool = False
    wait_error: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["wait_error"] is None:
            del data["wait_error"]
        return data


def stop_pane(
    pane,
    idle: float = 2.0,
    timeout: float = 30.0,
    kill_on_timeout: bool = True,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], None] = time.sleep,
) -> StopResult:
    """Send Ctrl+C, wait for idle, kill the pane if it never settles.

    An idle timeout is an expected branch here, recorded on the result. The
    caller decides whether a timeout without a kill is an error.
    """
    result = StopResult(pane_id=pane.target)
    pane.interrupt()
    result.interrupted = True

    try:
        wait_idle(pane, idle, timeout, poll_interval=poll_interval, clock=clock, sleep=sleep)
    except IdleTimeoutError as e:
        result.timed_out = True
        result.wait_error = str(e)
        if kill_on_timeout:
            logger.warning(f"Pane {pane.target} still busy after {timeout}s, killing")
            pane.kill()
            result.killed = True

    return result
