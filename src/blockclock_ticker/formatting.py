from __future__ import annotations

DISPLAY_DIGITS = 6
_DECIMALS = 6


def format_alert_price(price: float) -> str:
    return f"{price:,.{_DECIMALS}f}"


def format_price(price: float, *, digits: int = DISPLAY_DIGITS) -> str:
    """Render a price for the BlockClock's fixed-width large-text screen.

    Only ``digits`` digit characters are kept; the grouping and decimal
    separators ride along for free. Prices of a million or more lose their
    decimals entirely.
    """
    if digits <= 0:
        raise ValueError("digits must be > 0")
    rendered = format_alert_price(price) + "0"
    seen = 0
    for i, ch in enumerate(rendered):
        if not ch.isdigit():
            continue
        seen += 1
        if seen == digits:
            return rendered[: i + 1]
    return rendered
