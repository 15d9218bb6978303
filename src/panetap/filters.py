"""Output filters applied to captured pane text before display.

PUBLIC API:
  - strip_trailing_empty_lines: Drop the blank rows tmux pads a capture with
"""


def strip_trailing_empty_lines(content: str) -> str:
    """Remove blank rows below the last line of output.

    capture-pane returns the full pane height, so a short output is followed
    by whitespace-only rows. Blank lines inside the output are kept.

    Returns:
        The trimmed text ending in a single newline, or "" if nothing remains.
    """
    kept = content.rstrip().splitlines() if content.strip() else []
    return "\n".join(kept) + "\n" if kept else ""
