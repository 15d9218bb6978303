"""Filesystem locations used by panetap."""

from pathlib import Path
import os

CONFIG_FILENAME = "panetap.toml"

ALIASES_ENV = "PANETAP_ALIASES"
SESSION_ENV = "PANETAP_SESSION"


def config_dir() -> Path:
    """User config directory, honouring XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME", "").strip()
    root = Path(base) if base else Path.home() / ".config"
    return root / "panetap"


def default_aliases_path() -> Path:
    return config_dir() / "aliases.yaml"
