import asyncio

import httpx
import pytest

from blockclock_ticker.errors import FetchError
from blockclock_ticker.prices.coingecko import CoinGeckoApiError, CoinGeckoPriceSource

_LINK = "0x514910771af9ca656af840dff83e8264ecf986ca"


def _source(handler, **kwargs) -> CoinGeckoPriceSource:  # type: ignore[no-untyped-def]
    return CoinGeckoPriceSource(transport=httpx.MockTransport(handler), **kwargs)


def _fetch(source: CoinGeckoPriceSource, asset: str, currency: str):  # type: ignore[no-untyped-def]
    try:
        return asyncio.run(source.fetch(asset, currency))
    finally:
        asyncio.run(source.aclose())


def test_native_asset_uses_simple_price() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "ethereum": {
                    "usd": 1234.5,
                    "usd_market_cap": 148000000000.0,
                    "usd_24h_vol": 9100000000.0,
                    "usd_24h_change": -2.5,
                    "last_updated_at": 1700000000,
                }
            },
        )

    reading = _fetch(_source(handler), "Ethereum", "USD")

    assert seen[0].url.path == "/api/v3/simple/price"
    params = seen[0].url.params
    assert params["ids"] == "ethereum"
    assert params["vs_currencies"] == "usd"
    assert params["include_24hr_change"] == "true"
    assert params["include_last_updated_at"] == "true"
    assert reading.price == 1234.5
    assert reading.market_cap == 148000000000.0
    assert reading.volume == 9100000000.0
    assert reading.percent_change_24h == -2.5
    assert reading.last_updated_epoch == 1700000000


def test_contract_asset_uses_token_price_and_lowercases() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={_LINK: {"eur": 12.25}})

    reading = _fetch(_source(handler), _LINK.upper().replace("0X", "0x"), "EUR")

    assert seen[0].url.path == "/api/v3/simple/token_price/ethereum"
    assert seen[0].url.params["contract_addresses"] == _LINK
    assert reading.price == 12.25
    assert reading.market_cap == 0.0
    assert reading.percent_change_24h == 0.0
    assert reading.last_updated_epoch == 0


def test_http_error_raises_without_retry() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(429, json={"status": {"error_code": 429}})

    with pytest.raises(CoinGeckoApiError) as excinfo:
        _fetch(_source(handler), "ethereum", "usd")

    assert excinfo.value.status_code == 429
    assert isinstance(excinfo.value, FetchError)
    assert calls["n"] == 1


def test_transport_error_becomes_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timeout", request=request)

    with pytest.raises(FetchError):
        _fetch(_source(handler), "ethereum", "usd")


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"ethereum": {}},
        {"ethereum": {"eur": 1.0}},
        ["ethereum"],
    ],
)
def test_malformed_payload_becomes_fetch_error(payload: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    with pytest.raises(FetchError):
        _fetch(_source(handler), "ethereum", "usd")


def test_non_json_body_becomes_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(FetchError):
        _fetch(_source(handler), "ethereum", "usd")


def test_api_key_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ethereum": {"usd": 1.0}})

    _fetch(_source(handler, api_key="demo-key"), "ethereum", "usd")
    _fetch(_source(handler, api_key="pro-key", pro=True), "ethereum", "usd")

    assert seen[0].headers["x-cg-demo-api-key"] == "demo-key"
    assert seen[1].headers["x-cg-pro-api-key"] == "pro-key"


@pytest.mark.parametrize("raw", [b"NaN", b"Infinity", b"-Infinity", b'"n/a"'])
def test_unusable_price_becomes_fetch_error(raw: bytes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=b'{"ethereum": {"usd": ' + raw + b', "last_updated_at": NaN}}',
            headers={"Content-Type": "application/json"},
        )

    with pytest.raises(FetchError):
        _fetch(_source(handler), "ethereum", "usd")


def test_non_finite_secondary_fields_default_to_zero() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=(
                b'{"ethereum": {"usd": 2.5, "usd_24h_change": NaN, '
                b'"last_updated_at": Infinity}}'
            ),
            headers={"Content-Type": "application/json"},
        )

    reading = _fetch(_source(handler), "ethereum", "usd")

    assert reading.price == 2.5
    assert reading.percent_change_24h == 0.0
    assert reading.last_updated_epoch == 0
