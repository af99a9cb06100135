"""
Engine settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffSettings:
    """Limits and heuristics for diff and merge preview computation."""
    max_content_size_bytes: int = 10 * 1024 * 1024  # 10 MiB per input
    max_hunks: int = 1000
    max_changes_per_hunk: int = 500
    word_threshold_lines: int = 60     # Auto mode uses word diff at or below this
    default_context: int = 3
    similarity_threshold: float = 0.30  # Below this a replace counts as delete+add

    def __post_init__(self):
        for name in ('max_content_size_bytes', 'max_hunks', 'max_changes_per_hunk'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive")
        if self.word_threshold_lines < 0:
            raise ValueError("word_threshold_lines must not be negative")
        if self.default_context < 0:
            raise ValueError("default_context must not be negative")
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be between 0 and 1")


class SettingsManager:
    """Manager for loading/saving engine settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[DiffSettings] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'notediff' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'notediff' / 'settings.json'

    @property
    def settings(self) -> DiffSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> DiffSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return DiffSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"SettingsManager - Could not load {self.settings_path}, using defaults: {e}")
            return DiffSettings()

    def save(self, settings: Optional[DiffSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
        except OSError as e:
            logger.error(f"SettingsManager - Failed to save {self.settings_path}: {e}")
            return False

        self._settings = settings
        return True

    def reset(self) -> DiffSettings:
        """Reset to default settings."""
        self._settings = DiffSettings()
        self.save()
        return self._settings

    def _to_dict(self, settings: DiffSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        return asdict(settings)

    def _from_dict(self, data: Any) -> DiffSettings:
        """Convert dictionary back to settings, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise TypeError("settings file must contain a JSON object")

        defaults = DiffSettings()
        values = {}
        for f in fields(DiffSettings):
            default = getattr(defaults, f.name)
            value = data.get(f.name, default)
            values[f.name] = type(default)(value)
        return DiffSettings(**values)
