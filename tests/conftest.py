"""
Pytest configuration and shared fixtures for the notediff tests.
"""

import logging

import pytest

from notediff.services.settings import DiffSettings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep SettingsManager away from the real user configuration."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("APPDATA", str(config_home))
    return config_home


@pytest.fixture
def restore_logging():
    """Undo root logger changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def settings():
    return DiffSettings()


@pytest.fixture
def numbered_lines():
    """Factory for "line N" documents."""
    def make(count, changed=(), suffix=" edited"):
        lines = []
        for number in range(1, count + 1):
            text = f"line {number}"
            if number in changed:
                text += suffix
            lines.append(text)
        return "\n".join(lines) + "\n"
    return make


@pytest.fixture
def three_line_base():
    return "Line 1\nLine 2\nLine 3\n"
