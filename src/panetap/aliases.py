"""Alias storage - short names for pane targets.

Aliases live in a small YAML mapping of name to target. The file is read fully
when the store is created and rewritten atomically on save. Concurrent writers
are not locked against each other; the last writer wins.

PUBLIC API:
  - AliasStore: Load/save/lookup aliases from YAML
  - normalize_alias_name: Validate and canonicalize an alias name
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import AliasError
from .types import RESERVED_SELECTORS

logger = logging.getLogger(__name__)

__all__ = ["AliasStore", "normalize_alias_name"]

_ALLOWED = set("abcdefghijklmnopqrstuvwxyz0123456789-_.")


def normalize_alias_name(name: Optional[str]) -> str:
    """Normalize alias name: trim, drop a leading @, lowercase.

    Raises:
        AliasError: If empty, reserved or containing characters outside [a-z0-9._-].
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise AliasError("alias name is required")

    normalized = trimmed.removeprefix("@").lower()
    if normalized in RESERVED_SELECTORS:
        raise AliasError(f"alias {normalized!r} is reserved")
    if not normalized or any(ch not in _ALLOWED for ch in normalized):
        raise AliasError(f"invalid alias name: {name!r}")
    return normalized


def _default_path() -> Path:
    from .config import get_config_manager

    return get_config_manager().alias_file


@dataclass
class AliasStore:
    """Load, save, and look up aliases."""

    path: Path = field(default_factory=_default_path)
    aliases: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.path = Path(self.path)
        self.load()

    def load(self):
        """Load aliases from YAML file."""
        if not self.path.exists():
            self.aliases = {}
            return

        with open(self.path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise AliasError(f"alias file {self.path} is not a mapping")
        self.aliases = {str(k): str(v) for k, v in data.items()}

    def save(self):
        """Save aliases to YAML file (atomic write)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first, then replace
        with tempfile.NamedTemporaryFile(mode="w", dir=self.path.parent, delete=False, suffix=".yaml") as f:
            yaml.safe_dump(dict(sorted(self.aliases.items())), f, default_flow_style=False)
            temp_path = Path(f.name)

        os.replace(temp_path, self.path)
        logger.debug(f"Saved {len(self.aliases)} aliases to {self.path}")

    def get(self, name: str) -> Optional[str]:
        return self.aliases.get(normalize_alias_name(name))

    def all(self) -> dict[str, str]:
        """All aliases sorted by name."""
        return dict(sorted(self.aliases.items()))

    def set(self, name: str, target: str) -> str:
        """Add or replace an alias and persist.

        Returns:
            The normalized alias name.
        """
        key = normalize_alias_name(name)
        self.aliases[key] = target
        self.save()
        return key

    def remove(self, name: str) -> bool:
        """Remove an alias and persist.

        Returns:
            True if the alias existed.
        """
        key = normalize_alias_name(name)
        if key not in self.aliases:
            return False
        del self.aliases[key]
        self.save()
        return True
