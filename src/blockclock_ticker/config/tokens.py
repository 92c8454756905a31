from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from blockclock_ticker.errors import ConfigError
from blockclock_ticker.types import TokenConfig


class TokenEntry(BaseModel):
    source: Literal["coingecko"] = "coingecko"
    symbol: str = Field(min_length=1)
    display_currency: str = ""
    contract_address: str = Field(min_length=1)
    currency: str = "usd"
    light_price_above: float = Field(default=0.0, ge=0)
    light_price_below: float = Field(default=0.0, ge=0)
    light_percent: float = 0.0
    show_duration_seconds: float = Field(default=10.0, gt=0)
    notify: bool = False

    def to_token_config(self) -> TokenConfig:
        return TokenConfig(
            symbol=self.symbol.strip(),
            display_currency=self.display_currency.strip(),
            contract_address=self.contract_address.strip().lower(),
            currency=self.currency.strip().lower(),
            price_above=self.light_price_above,
            price_below=self.light_price_below,
            percent_change=self.light_percent,
            notify=self.notify,
            dwell_seconds=self.show_duration_seconds,
            source=self.source,
        )


class TickerConfig(BaseModel):
    sort_symbols: bool = False
    tokens: list[TokenEntry] = Field(default_factory=list)

    def validate_logic(self) -> None:
        if not self.tokens:
            raise ValueError("tokens must list at least one token")

    def token_configs(self) -> list[TokenConfig]:
        return [t.to_token_config() for t in self.tokens]


def load_ticker_config(path: Path) -> TickerConfig:
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}") from e
    try:
        cfg = TickerConfig.model_validate(raw)
        cfg.validate_logic()
    except (ValidationError, ValueError) as e:
        raise ConfigError(f"invalid ticker config {path}: {e}") from e
    return cfg
