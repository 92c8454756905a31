__all__ = ["AlertDecision", "LightState", "PriceReading", "TokenConfig"]

from blockclock_ticker.types import AlertDecision, LightState, PriceReading, TokenConfig
