"""Command-line control surface for tmux panes.

Discovers sessions, windows and panes, sends keystrokes, captures scrollback,
and automates "run command, wait for quiet, capture result" workflows.

PUBLIC API:
  - app: typer application with panetap commands
"""

from .app import app

__version__ = "0.1.0"
__all__ = ["app"]
