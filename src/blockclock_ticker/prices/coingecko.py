from __future__ import annotations

import math
from typing import Any

import httpx

from blockclock_ticker.errors import FetchError
from blockclock_ticker.types import PriceReading

NATIVE_ETHEREUM = "ethereum"
_TOKEN_PLATFORM = "ethereum"
_INCLUDE_FLAGS = {
    "include_market_cap": "true",
    "include_24hr_vol": "true",
    "include_24hr_change": "true",
    "include_last_updated_at": "true",
}


class CoinGeckoApiError(FetchError):
    def __init__(self, *, status_code: int, payload: Any):
        super().__init__(f"CoinGecko API error: status={status_code} payload={payload!r}")
        self.status_code = status_code
        self.payload = payload


def _as_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_reading(data: Any, *, asset: str, currency: str) -> PriceReading:
    if not isinstance(data, dict):
        raise FetchError(f"unexpected payload for {asset}: {data!r}")
    entry = data.get(asset)
    if not isinstance(entry, dict):
        raise FetchError(f"no price entry for {asset}")
    if entry.get(currency) is None:
        raise FetchError(f"no {currency} price for {asset}")
    try:
        price = float(entry[currency])
    except (TypeError, ValueError) as e:
        raise FetchError(f"bad {currency} price for {asset}: {entry[currency]!r}") from e
    if not math.isfinite(price):
        # NaN or Infinity would reach the display as literal text.
        raise FetchError(f"non-finite {currency} price for {asset}: {price}")
    return PriceReading(
        price=price,
        market_cap=_as_float(entry.get(f"{currency}_market_cap")),
        volume=_as_float(entry.get(f"{currency}_24h_vol")),
        percent_change_24h=_as_float(entry.get(f"{currency}_24h_change")),
        last_updated_epoch=int(_as_float(entry.get("last_updated_at"))),
    )


class CoinGeckoPriceSource:
    def __init__(
        self,
        *,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str = "",
        pro: bool = False,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["x-cg-pro-api-key" if pro else "x-cg-demo-api-key"] = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, asset: str, currency: str) -> PriceReading:
        """Fetch one reading.

        ``asset`` is either the native coin id (``"ethereum"``) or an ERC-20
        contract address; both are matched case-insensitively.
        """
        asset = asset.strip().lower()
        currency = currency.strip().lower()
        if asset == NATIVE_ETHEREUM:
            path = "/simple/price"
            params = {"ids": asset, "vs_currencies": currency, **_INCLUDE_FLAGS}
        else:
            path = f"/simple/token_price/{_TOKEN_PLATFORM}"
            params = {"contract_addresses": asset, "vs_currencies": currency, **_INCLUDE_FLAGS}
        data = await self._get(path, params=params)
        return parse_reading(data, asset=asset, currency=currency)

    async def _get(self, path: str, *, params: dict[str, str]) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"CoinGecko request failed: {type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            payload: Any
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise CoinGeckoApiError(status_code=response.status_code, payload=payload)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"CoinGecko returned non-JSON body: {response.text[:200]!r}") from e
