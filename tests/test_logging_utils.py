import json
import logging

from blockclock_ticker.logging_utils import JsonFormatter


def test_json_formatter_includes_ticker_extras() -> None:
    record = logging.LogRecord(
        name="blockclock_ticker.scheduler",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="token_shown",
        args=(),
        exc_info=None,
    )
    record.symbol = "ETH"
    record.price = "150.000"
    record.light_state = "above"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "token_shown"
    assert payload["logger"] == "blockclock_ticker.scheduler"
    assert payload["symbol"] == "ETH"
    assert payload["price"] == "150.000"
    assert payload["light_state"] == "above"
    assert "command" not in payload
