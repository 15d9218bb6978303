"""Sentinel protocol - wrap a command in markers and cut its output back out.

The wrapped command prints a start tag, runs the user command in a subshell,
saves its status, optionally prints the exit tag with that status, then prints
the end tag. Parsing trusts only the most recent start tag: scrollback can hold
markers from earlier runs. Output written into the pane by other processes is
not detected.

PUBLIC API:
  - Window: Result of cutting a run's segment out of a capture
  - split_lines: Split text into lines without a phantom trailing entry
  - extract_window: Locate start/end tags and optional exit code
  - extract_exit: Pull the last valid exit-tag line out of a line list
  - extract_exit_code: Text-level exit code extraction
  - wrap_command: Build the sh -lc wrapper
  - new_run_id: Random per-run token
  - run_tags: Start/end tags for a run id
"""

import secrets
import shlex
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

START_TAG_FORMAT = "__PANETAP_RUN_START:{}__"
END_TAG_FORMAT = "__PANETAP_RUN_END:{}__"
DEFAULT_START_TAG = "__PANETAP_RUN_START__"
DEFAULT_END_TAG = "__PANETAP_RUN_END__"
DEFAULT_EXIT_TAG = "__PANETAP_EXIT:"


@dataclass
class Window:
    """A run's output segment.

    Attributes:
        text: Cleaned segment, or the untouched input when no window was found.
        exit_code: Parsed exit code, if found.
        exit_found: Whether a valid exit-tag line was found.
        window_found: Whether the start tag was found.
    """

    text: str
    exit_code: Optional[int] = None
    exit_found: bool = False
    window_found: bool = False


def split_lines(text: str) -> List[str]:
    """Split on newlines, dropping the empty entry after a trailing newline."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _join(lines: List[str], trailing_newline: bool) -> str:
    text = "\n".join(lines)
    return text + "\n" if trailing_newline else text


def extract_exit(lines: List[str], exit_tag: str) -> Tuple[List[str], Optional[int], bool]:
    """Find the last line carrying a valid exit code and remove it.

    Lines with the tag but an empty or non-integer value are skipped and the
    scan continues toward the start.

    Returns:
        Tuple of (remaining lines, exit code or None, found).
    """
    if not exit_tag:
        return lines, None, False

    for i in range(len(lines) - 1, -1, -1):
        idx = lines[i].find(exit_tag)
        if idx < 0:
            continue
        raw = lines[i][idx + len(exit_tag) :].strip()
        if not raw:
            continue
        try:
            code = int(raw)
        except ValueError:
            continue
        return lines[:i] + lines[i + 1 :], code, True

    return lines, None, False


def extract_exit_code(text: str, exit_tag: str) -> Tuple[str, Optional[int], bool]:
    """extract_exit over text, keeping the trailing newline if present."""
    remaining, code, found = extract_exit(split_lines(text), exit_tag)
    if not found:
        return text, None, False
    return _join(remaining, text.endswith("\n")), code, True


def extract_window(
    text: str,
    start_tag: str,
    end_tag: str,
    exit_tag: Optional[str] = None,
    want_exit: bool = False,
) -> Window:
    """Cut the segment between the last start tag and the next end tag.

    Args:
        text: Captured pane text.
        start_tag: Marker printed before the command runs.
        end_tag: Marker printed after it finishes.
        exit_tag: Prefix of the exit-code line.
        want_exit: Whether to parse and remove the exit-code line.

    Returns:
        Window. Without a start tag the input comes back unchanged with
        window_found False. Without an end tag the segment runs to the end.
    """
    if not start_tag or not end_tag:
        return Window(text=text)

    lines = split_lines(text)
    start = -1
    for i in range(len(lines) - 1, -1, -1):
        if start_tag in lines[i]:
            start = i
            break
    if start < 0:
        return Window(text=text)

    end = len(lines)
    for i in range(start + 1, len(lines)):
        if end_tag in lines[i]:
            end = i
            break

    segment = lines[start + 1 : end]
    code, found = None, False
    if want_exit:
        segment, code, found = extract_exit(segment, exit_tag or "")

    return Window(
        text=_join(segment, text.endswith("\n")),
        exit_code=code,
        exit_found=found,
        window_found=True,
    )


def wrap_command(
    command: str,
    start_tag: str = "",
    end_tag: str = "",
    exit_tag: str = "",
    include_exit: bool = False,
) -> str:
    """Wrap command so its output is fenced by markers.

    The status is saved into a variable straight after the subshell, before
    any printf runs, so the reported code is the command's own.
    """
    if not start_tag.strip():
        start_tag = DEFAULT_START_TAG
    if not end_tag.strip():
        end_tag = DEFAULT_END_TAG

    inner = f'printf "\\n{start_tag}\\n"; ( {command} ); status=$?;'
    if include_exit:
        if not exit_tag.strip():
            exit_tag = DEFAULT_EXIT_TAG
        inner += f' printf "\\n{exit_tag}%d\\n" "$status";'
    inner += f' printf "\\n{end_tag}\\n"'
    return "sh -lc " + shlex.quote(inner)


def new_run_id() -> str:
    """12 hex chars (48 random bits), nanosecond timestamp if randomness fails."""
    try:
        return secrets.token_hex(6)
    except (NotImplementedError, OSError):
        return str(time.time_ns())


def run_tags(run_id: str) -> Tuple[str, str]:
    """Start and end tags for a run."""
    return START_TAG_FORMAT.format(run_id), END_TAG_FORMAT.format(run_id)
