__all__ = ["CoinGeckoApiError", "CoinGeckoPriceSource"]

from blockclock_ticker.prices.coingecko import CoinGeckoApiError, CoinGeckoPriceSource
