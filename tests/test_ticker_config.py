from pathlib import Path

import pytest

from blockclock_ticker.config.tokens import load_ticker_config
from blockclock_ticker.errors import ConfigError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "ticker.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_ticker_config_builds_normalized_tokens(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
sort_symbols = true

[[tokens]]
symbol = "LINK"
display_currency = "EUR"
contract_address = "0x514910771AF9Ca656af840dff83E8264EcF986CA"
currency = "EUR"
light_percent = 5
show_duration_seconds = 20
notify = true

[[tokens]]
symbol = "ETH"
contract_address = "Ethereum"
light_price_above = 4000
light_price_below = 2000
""",
    )

    cfg = load_ticker_config(path)
    link, eth = cfg.token_configs()

    assert cfg.sort_symbols is True
    assert link.contract_address == "0x514910771af9ca656af840dff83e8264ecf986ca"
    assert link.currency == "eur"
    assert link.percent_change == 5
    assert link.dwell_seconds == 20
    assert link.notify is True
    assert eth.contract_address == "ethereum"
    assert eth.currency == "usd"
    assert (eth.price_above, eth.price_below) == (4000, 2000)
    assert eth.notify is False
    assert eth.source == "coingecko"


def test_bundled_example_config_loads() -> None:
    path = Path(__file__).resolve().parents[1] / "configs" / "ticker.toml"
    cfg = load_ticker_config(path)
    assert [t.symbol for t in cfg.token_configs()] == ["ETH", "LINK", "UNI"]


@pytest.mark.parametrize(
    "text",
    [
        "sort_symbols = false\n",
        '[[tokens]]\nsymbol = "ETH"\ncontract_address = "ethereum"\nsource = "binance"\n',
        '[[tokens]]\nsymbol = "ETH"\ncontract_address = "ethereum"\nlight_price_above = -1\n',
        '[[tokens]]\nsymbol = "ETH"\ncontract_address = "ethereum"\nshow_duration_seconds = 0\n',
        '[[tokens]]\nsymbol = ""\ncontract_address = "ethereum"\n',
        "[[tokens]\n",
    ],
)
def test_invalid_config_raises_config_error(tmp_path: Path, text: str) -> None:
    with pytest.raises(ConfigError):
        load_ticker_config(_write(tmp_path, text))


def test_missing_config_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_ticker_config(tmp_path / "nope.toml")
