"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from dailyreport.config import Settings, load_window_config
from dailyreport.models.window import WindowConfig


def _set_base_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DR_MONGODB_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("DR_MONGODB_DATABASE", "test_db")
    monkeypatch.setenv("DR_DELIVERY_METHOD", "none")


def test_settings_load_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_WINDOW_START_HOUR", "9")
    monkeypatch.setenv("DR_WINDOW_END_HOUR", "18")
    monkeypatch.setenv("DR_DEVICE_NAME", "Work Laptop")

    settings = Settings(_env_file=None)

    assert settings.mongodb_uri == "mongodb://localhost:27017"
    assert settings.mongodb_database == "test_db"
    assert settings.window == WindowConfig(start_hour=9, end_hour=18)
    assert settings.device_name == "Work Laptop"
    assert settings.tick_interval_seconds == 1.0
    assert settings.auto_send_enabled is False


def test_settings_defaults_match_daily_window(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)

    settings = Settings(_env_file=None)

    assert settings.window == WindowConfig(start_hour=8, end_hour=22)
    assert (settings.auto_send_hour, settings.auto_send_minute) == (21, 0)


@pytest.mark.parametrize(("start", "end"), [("18", "9"), ("10", "10"), ("8", "24")])
def test_settings_reject_invalid_window(monkeypatch: pytest.MonkeyPatch, start: str, end: str) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_WINDOW_START_HOUR", start)
    monkeypatch.setenv("DR_WINDOW_END_HOUR", end)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_reject_non_positive_tick_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_TICK_INTERVAL_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_require_telegram_credentials_for_telegram_delivery(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_DELIVERY_METHOD", "telegram")
    monkeypatch.setenv("DR_TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.delenv("DR_TELEGRAM_CHAT_ID", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_accept_telegram_delivery_with_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_DELIVERY_METHOD", "telegram")
    monkeypatch.setenv("DR_TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("DR_TELEGRAM_CHAT_ID", "-100200300")

    settings = Settings(_env_file=None)

    assert settings.delivery_method == "telegram"
    assert settings.telegram_chat_id == "-100200300"


def test_settings_reject_invalid_auto_send_time(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_AUTO_SEND_MINUTE", "75")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_load_window_config_parses_nested_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "window.yaml"
    config_path.write_text("window:\n  start_hour: 7\n  end_hour: 21\n", encoding="utf-8")

    assert load_window_config(config_path) == WindowConfig(start_hour=7, end_hour=21)


def test_load_window_config_parses_flat_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "window.yaml"
    config_path.write_text("start_hour: 6\nend_hour: 12\n", encoding="utf-8")

    assert load_window_config(config_path) == WindowConfig(start_hour=6, end_hour=12)


def test_load_window_config_rejects_inverted_window(tmp_path: Path) -> None:
    config_path = tmp_path / "window.yaml"
    config_path.write_text("start_hour: 20\nend_hour: 8\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid window config"):
        load_window_config(config_path)


def test_load_window_config_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_window_config(tmp_path / "missing.yaml")


def test_settings_accept_known_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_TIMEZONE", "Europe/Berlin")

    assert Settings(_env_file=None).timezone == "Europe/Berlin"


def test_settings_reject_unknown_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_base_env(monkeypatch)
    monkeypatch.setenv("DR_TIMEZONE", "Mars/Olympus_Mons")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
