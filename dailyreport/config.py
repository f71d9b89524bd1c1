"""Application configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dailyreport.models.window import WindowConfig

DeliveryMethod = Literal["telegram", "none"]


class Settings(BaseSettings):
    """Strongly typed settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Data store
    mongodb_uri: str
    mongodb_database: str = "dailyreport"

    # Reporting window and timer
    window_start_hour: int = 8
    window_end_hour: int = 22
    tick_interval_seconds: float = 1.0
    timer_enabled: bool = True

    # Delivery
    delivery_method: DeliveryMethod = "none"
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    telegram_timeout_seconds: int = 15
    telegram_send_attempts: int = 3
    telegram_circuit_breaker_failure_threshold: int = 3
    telegram_circuit_breaker_recovery_seconds: int = 120
    device_name: str = "Unknown Device"
    # IANA zone for the window; the host zone when unset.
    timezone: str | None = None

    # Scheduled end-of-day send
    auto_send_enabled: bool = False
    auto_send_hour: int = 21
    auto_send_minute: int = 0

    # File-based configs
    logging_config_path: Path = Path("config/logging.yaml")
    window_config_path: Path | None = None

    @property
    def window(self) -> WindowConfig:
        return WindowConfig(start_hour=self.window_start_hour, end_hour=self.window_end_hour)

    @model_validator(mode="after")
    def validate_runtime_configuration(self) -> "Settings":
        """Validate cross-field configuration constraints."""
        try:
            self.window
        except ValidationError as exc:
            raise ValueError(f"DR_WINDOW_START_HOUR/DR_WINDOW_END_HOUR are invalid: {exc}") from exc

        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"DR_TIMEZONE is not a known IANA zone: {self.timezone}") from exc

        if self.tick_interval_seconds <= 0:
            raise ValueError("DR_TICK_INTERVAL_SECONDS must be > 0")

        if self.telegram_timeout_seconds <= 0:
            raise ValueError("DR_TELEGRAM_TIMEOUT_SECONDS must be > 0")

        if self.telegram_send_attempts <= 0:
            raise ValueError("DR_TELEGRAM_SEND_ATTEMPTS must be > 0")

        if self.telegram_circuit_breaker_failure_threshold <= 0:
            raise ValueError("DR_TELEGRAM_CIRCUIT_BREAKER_FAILURE_THRESHOLD must be > 0")

        if self.telegram_circuit_breaker_recovery_seconds <= 0:
            raise ValueError("DR_TELEGRAM_CIRCUIT_BREAKER_RECOVERY_SECONDS must be > 0")

        if not 0 <= self.auto_send_hour <= 23:
            raise ValueError("DR_AUTO_SEND_HOUR must be between 0 and 23")

        if not 0 <= self.auto_send_minute <= 59:
            raise ValueError("DR_AUTO_SEND_MINUTE must be between 0 and 59")

        if self.delivery_method == "telegram" and (not self.telegram_bot_token or not self.telegram_chat_id):
            raise ValueError(
                "DR_TELEGRAM_BOT_TOKEN and DR_TELEGRAM_CHAT_ID are required when DR_DELIVERY_METHOD=telegram"
            )

        return self


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        parsed = yaml.safe_load(handle)

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ValueError(f"YAML config must be a mapping: {path}")

    return parsed


def load_window_config(path: str | Path) -> WindowConfig:
    """Load and validate a reporting window from YAML.

    Accepts either top-level ``start_hour``/``end_hour`` keys or the same keys
    nested under ``window``.
    """
    config_path = Path(path)
    payload = _load_yaml(config_path)
    section = payload.get("window", payload)

    try:
        return WindowConfig.model_validate(section)
    except ValidationError as exc:
        raise ValueError(f"Invalid window config at {config_path}: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
