"""Configuration manager for pidfinder.

Loads config from YAML, merges with defaults, provides dot-notation access.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from pidfinder.core.models import MatchCriteria

DEFAULT_CONFIG: dict[str, Any] = {
    "match": {
        "process_name": None,
        "process_path": None,
        "process_cwd": None,
        "reconcile": None,
    },
    "procfs": {
        "root": "/proc",
    },
    "reclaim": {
        "enabled": False,
        "interval_seconds": 5.0,
    },
    "logging": {
        "level": "WARNING",
        "file": None,
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 5,
    },
}


def default_config_path() -> Path:
    """Return ``$XDG_CONFIG_HOME/pidfinder/config.yaml``."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "pidfinder" / "config.yaml"


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base. Override values win."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class FinderConfig:
    """Configuration manager with dot-notation access and YAML persistence."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data = copy.deepcopy(data or DEFAULT_CONFIG)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a value using dot-notation (e.g., 'match.reconcile')."""
        keys = dotted_key.split(".")
        current = self._data
        for k in keys:
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default
        return current

    def set(self, dotted_key: str, value: Any) -> None:
        """Set a value using dot-notation."""
        keys = dotted_key.split(".")
        current = self._data
        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value

    def criteria(self) -> MatchCriteria:
        """Build :class:`MatchCriteria` from the ``match`` section."""
        return MatchCriteria.from_dict(self.get("match", {}) or {})

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self._data, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )

    @classmethod
    def load(cls, path: Path) -> FinderConfig:
        """Load config from YAML, merging with defaults for missing keys."""
        path = Path(path)
        if not path.exists():
            return cls()
        user_data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(user_data, dict):
            raise ValueError(f"{path}: top level of the config must be a mapping")
        return cls(data=_deep_merge(DEFAULT_CONFIG, user_data))
