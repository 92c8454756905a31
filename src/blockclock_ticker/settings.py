from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Ticker
    ticker_config_path: Path = Field(
        default=Path("configs/ticker.toml"),
        validation_alias="TICKER_CONFIG",
    )
    http_timeout_seconds: float = Field(default=10.0, gt=0, validation_alias="HTTP_TIMEOUT_SECONDS")

    # BlockClock
    block_clock_address: str = Field(default="", validation_alias="BLOCK_CLOCK_ADDRESS")
    block_clock_password: str = Field(default="", validation_alias="BLOCK_CLOCK_PASSWORD")
    label_position: int = Field(default=6, ge=0, validation_alias="LABEL_POSITION")
    label_delay_seconds: float = Field(default=1.0, ge=0, validation_alias="LABEL_DELAY_SECONDS")

    # CoinGecko
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        validation_alias="COINGECKO_BASE_URL",
    )
    coingecko_api_key: str = Field(default="", validation_alias="COINGECKO_API_KEY")
    coingecko_pro: bool = Field(default=False, validation_alias="COINGECKO_PRO")

    # E-mail alerts
    smtp_server: str = Field(default="", validation_alias="SMTP_SERVER")
    smtp_port: int | None = Field(default=None, gt=0, le=65535, validation_alias="SMTP_PORT")
    smtp_user: str = Field(default="", validation_alias="SMTP_USER")
    smtp_pass: str = Field(default="", validation_alias="SMTP_PASS")
    notify_address: str = Field(default="", validation_alias="NOTIFY_ADDRESS")

    # Telegram
    telegram_bot_token: str = Field(default="", validation_alias="TELEGRAM_BOT_TOKEN")
    telegram_chat_id: str = Field(default="", validation_alias="TELEGRAM_CHAT_ID")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("smtp_port", mode="before")
    @classmethod
    def blank_port_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def email_enabled(self) -> bool:
        if self.smtp_port is None:
            return False
        return all(
            v.strip()
            for v in (
                self.smtp_server,
                self.smtp_user,
                self.smtp_pass,
                self.notify_address,
            )
        )

    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token.strip() and self.telegram_chat_id.strip())
