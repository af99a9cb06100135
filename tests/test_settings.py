import json
import os

import pytest

from notediff.services.settings import DiffSettings, SettingsManager


def test_default_settings():
    settings = DiffSettings()

    assert settings.max_content_size_bytes == 10 * 1024 * 1024
    assert settings.max_hunks == 1000
    assert settings.max_changes_per_hunk == 500
    assert settings.word_threshold_lines == 60
    assert settings.default_context == 3
    assert settings.similarity_threshold == pytest.approx(0.30)


@pytest.mark.parametrize("overrides", [
    {"max_content_size_bytes": 0},
    {"max_hunks": 0},
    {"max_changes_per_hunk": -1},
    {"word_threshold_lines": -1},
    {"default_context": -2},
    {"similarity_threshold": 1.5},
])
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValueError):
        DiffSettings(**overrides)


def test_missing_file_gives_defaults(tmp_path):
    manager = SettingsManager(tmp_path / "absent.json")

    assert manager.settings == DiffSettings()


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    custom = DiffSettings(max_hunks=5, default_context=1, similarity_threshold=0.5)

    assert SettingsManager(path).save(custom) is True
    assert SettingsManager(path).load() == custom


def test_partial_file_fills_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_hunks": "25", "unknown_key": True}), encoding="utf-8")

    settings = SettingsManager(path).load()

    assert settings.max_hunks == 25
    assert settings.default_context == 3


@pytest.mark.parametrize("content", [
    "{not json",
    "[1, 2, 3]",
    json.dumps({"max_hunks": "many"}),
    json.dumps({"max_hunks": 0}),
])
def test_unusable_file_gives_defaults(tmp_path, content):
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")

    assert SettingsManager(path).load() == DiffSettings()


def test_save_without_settings_is_noop(tmp_path):
    path = tmp_path / "settings.json"

    assert SettingsManager(path).save() is False
    assert not path.exists()


def test_reset_writes_defaults(tmp_path):
    path = tmp_path / "settings.json"
    SettingsManager(path).save(DiffSettings(max_hunks=7))

    manager = SettingsManager(path)
    assert manager.reset() == DiffSettings()
    assert json.loads(path.read_text(encoding="utf-8"))["max_hunks"] == 1000


@pytest.mark.skipif(os.name == "nt", reason="XDG layout only applies off Windows")
def test_default_path_follows_xdg_config_home(isolated_config):
    manager = SettingsManager()

    assert manager.settings_path == isolated_config / "notediff" / "settings.json"
