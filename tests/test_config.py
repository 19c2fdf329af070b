from __future__ import annotations

import json

import pytest

from notemerge.config import CONFIG_ENV_VAR, Settings, load_settings


def test_defaults_without_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert load_settings() == Settings()
    assert Settings().warn_unknown_directives is True


def test_config_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "debug", "backup_dir": "backups", "index_base": 0}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    settings = load_settings()
    assert settings.log_level == "DEBUG"
    assert settings.backup_dir == "backups"
    assert settings.index_base == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"colour": "blue"},
        {"index_base": 2},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_settings(tmp_path, payload):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")
