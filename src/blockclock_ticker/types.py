from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LightState(str, Enum):
    OFF = "off"
    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class TokenConfig:
    symbol: str
    display_currency: str
    contract_address: str
    currency: str
    price_above: float = 0.0
    price_below: float = 0.0
    # Percent thresholds are symmetric: +x% lights ABOVE, -x% lights BELOW.
    percent_change: float = 0.0
    notify: bool = False
    dwell_seconds: float = 10.0
    source: str = "coingecko"


@dataclass
class PriceReading:
    price: float
    market_cap: float = 0.0
    volume: float = 0.0
    percent_change_24h: float = 0.0
    last_updated_epoch: int = 0


@dataclass(frozen=True)
class AlertDecision:
    light_state: LightState
    notify: bool
