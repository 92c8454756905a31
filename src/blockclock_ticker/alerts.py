from __future__ import annotations

from blockclock_ticker.types import AlertDecision, LightState, PriceReading, TokenConfig


def _is_above(reading: PriceReading, config: TokenConfig) -> bool:
    if config.percent_change > 0 and reading.percent_change_24h > config.percent_change:
        return True
    return config.price_above > 0 and reading.price >= config.price_above


def _is_below(reading: PriceReading, config: TokenConfig) -> bool:
    if config.percent_change != 0 and reading.percent_change_24h < -config.percent_change:
        return True
    return config.price_below > 0 and reading.price <= config.price_below


def decide(reading: PriceReading, config: TokenConfig) -> AlertDecision:
    # ABOVE is checked first, so a config that trips both lights green.
    # No state is kept between calls: a price sitting past a threshold
    # notifies on every cycle.
    if _is_above(reading, config):
        return AlertDecision(light_state=LightState.ABOVE, notify=config.notify)
    if _is_below(reading, config):
        return AlertDecision(light_state=LightState.BELOW, notify=config.notify)
    return AlertDecision(light_state=LightState.OFF, notify=False)
