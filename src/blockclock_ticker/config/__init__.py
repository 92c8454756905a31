__all__ = ["TickerConfig", "TokenEntry", "load_ticker_config"]

from blockclock_ticker.config.tokens import TickerConfig, TokenEntry, load_ticker_config
