"""Run orchestration - send a command, wait for quiet, capture its output.

PUBLIC API:
  - run_command: Execute command in pane and build the result
  - resolve_outcome: Decide the invocation-level error for a run
  - RunSession: Everything one run produced
  - clamp_timeout: Replace non-positive timeouts with a default
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import CommandExitError, IdleTimeoutError
from ..types import RunResult
from .idle import wait_idle, DEFAULT_POLL_INTERVAL
from .sentinel import (
    DEFAULT_EXIT_TAG,
    extract_exit_code,
    extract_window,
    new_run_id,
    run_tags,
    wrap_command,
)

logger = logging.getLogger(__name__)


@dataclass
class RunSession:
    """In-memory record of one run invocation.

    Attributes:
        command: Command as the user typed it.
        text: Text actually sent to the pane (wrapped when sentinels are used).
        start_tag: Run start marker, None without sentinels.
        end_tag: Run end marker, None without sentinels.
        exit_tag: Exit marker prefix, None unless an exit code was requested.
        wait_error: Idle timeout from the wait step, if any.
        capture: Raw final capture the result was derived from.
        result: Cleaned output and exit code.
    """

    command: str
    text: str
    start_tag: Optional[str] = None
    end_tag: Optional[str] = None
    exit_tag: Optional[str] = None
    wait_error: Optional[IdleTimeoutError] = None
    capture: str = ""
    result: Optional[RunResult] = None

    @property
    def uses_sentinels(self) -> bool:
        return self.start_tag is not None


def clamp_timeout(timeout: Optional[float], default: float) -> float:
    """Non-positive or missing timeouts fall back to default."""
    if timeout is None or timeout <= 0:
        return default
    return timeout


def _derive_result(session: RunSession, pane, lines: int, want_exit: bool) -> RunResult:
    output = session.capture
    code: Optional[int] = None
    found = False

    if session.uses_sentinels:
        window = extract_window(output, session.start_tag, session.end_tag, session.exit_tag, want_exit)
        if not window.window_found and lines > 0:
            logger.info(f"Start marker not in last {lines} lines, recapturing full buffer")
            full = pane.capture(0)
            session.capture = full
            window = extract_window(full, session.start_tag, session.end_tag, session.exit_tag, want_exit)
        if window.window_found:
            output, code, found = window.text, window.exit_code, window.exit_found
        else:
            logger.warning("Start marker not found in capture")

        if want_exit and not found:
            output, code, found = extract_exit_code(output, session.exit_tag)

    wait_error = str(session.wait_error) if session.wait_error else None
    return RunResult(output=output, exit_code=code, exit_found=found, wait_error=wait_error)


def run_command(
    pane,
    command: str,
    idle: float = 2.0,
    timeout: float = 60.0,
    lines: int = 200,
    exit_code: bool = False,
    segment: bool = False,
    exit_tag: str = DEFAULT_EXIT_TAG,
    enter_delay: float = 0.0,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], None] = time.sleep,
    run_id: Optional[str] = None,
) -> RunSession:
    """Send command to pane, wait until idle, capture and clean the output.

    An idle timeout is recorded on the session instead of raised: output
    captured up to that point is still returned. tmux failures propagate.

    Args:
        pane: Pane to run in.
        command: Command text.
        idle: Quiet period in seconds.
        timeout: Maximum wait in seconds.
        lines: Capture the last N lines, 0 for the full buffer.
        exit_code: Wrap the command so its exit status is reported.
        segment: Wrap the command so only its own output is returned.
        exit_tag: Prefix of the exit-code line.
        enter_delay: Seconds between typing and pressing Enter.
        poll_interval: Idle detector polling interval.
        clock: Time source for the idle detector.
        sleep: Sleep function for the idle detector.
        run_id: Token for the markers, random when None.

    Returns:
        RunSession with result populated.
    """
    session = RunSession(command=command, text=command)

    if exit_code or segment:
        rid = run_id or new_run_id()
        session.start_tag, session.end_tag = run_tags(rid)
        if exit_code:
            session.exit_tag = exit_tag or DEFAULT_EXIT_TAG
        session.text = wrap_command(command, session.start_tag, session.end_tag, session.exit_tag or "", exit_code)
        logger.debug(f"Run {rid}: wrapped command for markers")

    pane.send(session.text, enter=True, delay=enter_delay)

    try:
        wait_idle(pane, idle, timeout, poll_interval=poll_interval, clock=clock, sleep=sleep)
    except IdleTimeoutError as e:
        logger.info(f"Pane did not go idle within {timeout}s, capturing anyway")
        session.wait_error = e

    session.capture = pane.capture(lines)
    session.result = _derive_result(session, pane, lines, exit_code)
    return session


def resolve_outcome(
    result: RunResult,
    wait_error: Optional[BaseException],
    propagate: bool,
    exit_requested: bool,
) -> Optional[Exception]:
    """Decide the invocation-level error for a finished run.

    The idle timeout wins over everything. With propagation, a requested but
    missing exit code is an error and so is a non-zero code. A missing code
    without propagation is not an error.

    Returns:
        The error to surface, or None on success.
    """
    if wait_error is not None:
        return wait_error
    if not propagate:
        return None
    if exit_requested and not result.exit_found:
        return CommandExitError("exit code not found")
    if result.exit_found and result.exit_code not in (None, 0):
        return CommandExitError(f"command exited with {result.exit_code}", exit_code=result.exit_code)
    return None
