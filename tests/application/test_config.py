from pathlib import Path

import pytest
from pydantic import ValidationError

from leitner.application.config import AppConfig, resolve_config


def test_defaults():
    config = AppConfig()

    assert config.host == "127.0.0.1"
    assert config.port == 3001
    assert config.deck_file is None
    assert config.max_active_bucket == 4
    assert config.server_url == "http://127.0.0.1:3001"


def test_env_vars(monkeypatch):
    monkeypatch.setenv("LEITNER_PORT", "4000")
    monkeypatch.setenv("LEITNER_LOG_LEVEL", "debug")

    config = AppConfig()

    assert config.port == 4000
    assert config.log_level == "DEBUG"


def test_overrides_drop_none(monkeypatch):
    monkeypatch.setenv("LEITNER_PORT", "4000")

    assert resolve_config({"port": None}).port == 4000
    assert resolve_config({"port": 5000}).port == 5000


def test_deck_file_resolved(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = resolve_config({"deck_file": "deck.yaml"})

    assert config.deck_file == (tmp_path / "deck.yaml").resolve()
    assert config.deck_file.is_absolute()


def test_invalid_port():
    with pytest.raises(ValidationError):
        AppConfig(port=0)


def test_toml_file(tmp_path, monkeypatch):
    toml = tmp_path / "config.toml"
    toml.write_text('port = 5050\nserver_url = "http://example:5050"\n', encoding="utf-8")
    monkeypatch.setattr("leitner.application.config.CONFIG_FILES", [Path("/nonexistent"), toml])

    config = AppConfig()

    assert config.port == 5050
    assert config.server_url == "http://example:5050"


def test_env_beats_toml(tmp_path, monkeypatch):
    toml = tmp_path / "config.toml"
    toml.write_text("port = 5050\n", encoding="utf-8")
    monkeypatch.setattr("leitner.application.config.CONFIG_FILES", [toml])
    monkeypatch.setenv("LEITNER_PORT", "6060")

    assert AppConfig().port == 6060
