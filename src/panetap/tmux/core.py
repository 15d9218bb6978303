"""Core tmux operations - shared utilities for all tmux modules.

PUBLIC API:
  - run_tmux: Execute tmux command and return result
  - check_tmux: Run tmux command and raise on failure
  - parse_format_line: Split tab-delimited tmux format output
  - in_tmux: Check if running inside a tmux client
  - get_current_pane: Get current pane as session:window.pane
"""

import logging
import os
import subprocess
from typing import Mapping, Optional, Tuple, List

from .exceptions import TmuxError, TmuxNotFoundError, NoServerError, SessionNotFoundError

logger = logging.getLogger(__name__)

# Tab avoids clashes with colons in paths, titles and commands
FIELD_SEP = "\t"

SWP_FORMAT = "#{session_name}:#{window_index}.#{pane_index}"


def run_tmux(args: List[str], input: Optional[str] = None) -> Tuple[int, str, str]:
    """Run tmux command, return (returncode, stdout, stderr).

    Raises:
        TmuxNotFoundError: If the tmux binary cannot be executed.
    """
    cmd = ["tmux"] + args
    logger.debug(f"tmux {' '.join(args)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, input=input)
    except FileNotFoundError as e:
        raise TmuxNotFoundError("tmux not found in PATH", cause=e) from e
    return result.returncode, result.stdout, result.stderr


def tmux_failure(action: str, stderr: str) -> TmuxError:
    """Map tmux stderr to the matching exception."""
    msg = stderr.strip()
    lower = msg.lower()
    if "no server running" in lower or "error connecting to" in lower:
        return NoServerError("no tmux server running")
    if "can't find session" in lower or "no current session" in lower:
        return SessionNotFoundError(f"tmux {action}: session not found")
    return TmuxError(f"tmux {action}: {msg}" if msg else f"tmux {action} failed")


def check_tmux(args: List[str], input: Optional[str] = None) -> str:
    """Run tmux command and return stdout.

    Raises:
        TmuxError: If tmux exits non-zero.
    """
    code, stdout, stderr = run_tmux(args, input=input)
    if code != 0:
        logger.warning(f"tmux {args[0]} failed ({code}): {stderr.strip()}")
        raise tmux_failure(args[0], stderr)
    return stdout


def parse_format_line(line: str, delimiter: str = FIELD_SEP) -> List[str]:
    """Parse tmux format string output into fields."""
    return line.rstrip("\n").split(delimiter)


def in_tmux(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check if running inside a tmux client."""
    env = os.environ if environ is None else environ
    return bool(env.get("TMUX"))


def get_current_pane() -> Optional[str]:
    """Get current tmux pane as session:window.pane if inside tmux."""
    if not in_tmux():
        return None

    code, stdout, _ = run_tmux(["display-message", "-p", SWP_FORMAT])
    if code == 0 and stdout.strip():
        return stdout.strip()
    return None
