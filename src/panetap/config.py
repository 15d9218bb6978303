"""Configuration management for panetap.

Handles default settings from panetap.toml. CLI flags always win over these
values; environment variables win over the file.
"""

from pathlib import Path
from typing import Optional
import logging
import os
import tomllib

from .paths import CONFIG_FILENAME, ALIASES_ENV, SESSION_ENV, default_aliases_path

logger = logging.getLogger(__name__)

DEFAULT_IDLE = 2.0
DEFAULT_TIMEOUT = 60.0
DEFAULT_STOP_TIMEOUT = 30.0
DEFAULT_LINES = 200
DEFAULT_POLL_INTERVAL = 0.3
DEFAULT_ENTER_DELAY = 0.0
DEFAULT_EXIT_TAG = "__PANETAP_EXIT:"


def _find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find panetap.toml in current or parent directories."""
    current = start or Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None or not path.exists():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


class ConfigManager:
    """Manages configuration for panetap."""

    def __init__(self, path: Optional[Path] = None, environ=None):
        self._config_file = path or _find_config_file()
        self._environ = os.environ if environ is None else environ
        self.data = _load_config(self._config_file)
        self._default_config = self.data.get("default", {})
        if self._config_file:
            logger.debug(f"Loaded config from {self._config_file}")

    def _number(self, key: str, fallback: float) -> float:
        value = self._default_config.get(key, fallback)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning(f"Ignoring non-numeric {key} in {self._config_file}")
            return fallback
        return value

    @property
    def config_file(self) -> Optional[Path]:
        return self._config_file

    @property
    def idle(self) -> float:
        """Quiet period in seconds."""
        return float(self._number("idle", DEFAULT_IDLE))

    @property
    def timeout(self) -> float:
        """Maximum wait in seconds."""
        return float(self._number("timeout", DEFAULT_TIMEOUT))

    @property
    def lines(self) -> int:
        """Capture line limit, 0 for unlimited."""
        return int(self._number("lines", DEFAULT_LINES))

    @property
    def poll_interval(self) -> float:
        return float(self._number("poll_interval", DEFAULT_POLL_INTERVAL))

    @property
    def enter_delay(self) -> float:
        return float(self._number("enter_delay", DEFAULT_ENTER_DELAY))

    @property
    def exit_tag(self) -> str:
        return str(self._default_config.get("exit_tag") or DEFAULT_EXIT_TAG)

    @property
    def managed_session(self) -> Optional[str]:
        """Session used for launch outside tmux."""
        env = self._environ.get(SESSION_ENV, "").strip()
        if env:
            return env
        return self._default_config.get("managed_session")

    @property
    def alias_file(self) -> Path:
        """Alias file location: $PANETAP_ALIASES, then config, then user config dir."""
        env = self._environ.get(ALIASES_ENV, "").strip()
        if env:
            return Path(env).expanduser()
        configured = self._default_config.get("alias_file")
        if configured:
            return Path(configured).expanduser()
        return default_aliases_path()


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reset_config_manager() -> None:
    """Drop the cached manager so the next access re-reads file and environment."""
    global _config_manager
    _config_manager = None
