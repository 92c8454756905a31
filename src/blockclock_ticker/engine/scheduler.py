from __future__ import annotations

import asyncio
import itertools
import logging
import signal
from collections.abc import Awaitable, Sequence

from blockclock_ticker.alerts import decide
from blockclock_ticker.engine.protocols import DeviceDriver, Notifier, PriceSource
from blockclock_ticker.formatting import format_alert_price, format_price
from blockclock_ticker.types import AlertDecision, PriceReading, TokenConfig

logger = logging.getLogger("blockclock_ticker.scheduler")

DEFAULT_LABEL_POSITION = 6
DEFAULT_LABEL_DELAY_SECONDS = 1.0
_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def order_tokens(tokens: Sequence[TokenConfig], *, sort_symbols: bool) -> list[TokenConfig]:
    if not sort_symbols:
        return list(tokens)
    # sorted() is stable, so equal symbols keep their configured order.
    return sorted(tokens, key=lambda t: t.symbol.lower())


class Scheduler:
    """Cycle through the configured tokens, one at a time, forever.

    Each cycle fetches a reading, decides the alert state and hands the
    device/notifier work to a detached task before dwelling on the token.
    Updates for consecutive tokens may overlap; nothing orders them and the
    device simply shows whatever call landed last.
    """

    def __init__(
        self,
        *,
        tokens: Sequence[TokenConfig],
        source: PriceSource,
        device: DeviceDriver,
        notifier: Notifier | None = None,
        notify_address: str = "",
        sort_symbols: bool = False,
        label_position: int = DEFAULT_LABEL_POSITION,
        label_delay_seconds: float = DEFAULT_LABEL_DELAY_SECONDS,
    ) -> None:
        if not tokens:
            raise ValueError("at least one token is required")
        self._tokens = order_tokens(tokens, sort_symbols=sort_symbols)
        self._source = source
        self._device = device
        self._notifier = notifier
        self._notify_address = notify_address
        self._label_position = label_position
        self._label_delay_seconds = max(0.0, label_delay_seconds)
        self._stop = asyncio.Event()
        self._pending: set[asyncio.Task[None]] = set()
        self._signal_loop: asyncio.AbstractEventLoop | None = None

    @property
    def tokens(self) -> list[TokenConfig]:
        return list(self._tokens)

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _STOP_SIGNALS:
            loop.add_signal_handler(sig, self._on_signal, sig)
        self._signal_loop = loop

    def remove_signal_handlers(self) -> None:
        if self._signal_loop is None:
            return
        for sig in _STOP_SIGNALS:
            self._signal_loop.remove_signal_handler(sig)
        self._signal_loop = None

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.info("stop_requested", extra={"signal": sig.name})
        self.stop()

    async def run(self) -> None:
        logger.info(
            "ticker_started",
            extra={"tokens": [t.symbol for t in self._tokens]},
        )
        await self._device_call("pause", self._device.pause())
        try:
            for token in itertools.cycle(self._tokens):
                if self._stop.is_set():
                    break
                await self._tick(token)
                if await self._dwell(token.dwell_seconds):
                    break
        finally:
            await self._shutdown()

    async def _tick(self, token: TokenConfig) -> asyncio.Task[None] | None:
        logger.info("fetching_price", extra={"symbol": token.symbol})
        try:
            reading = await self._source.fetch(token.contract_address, token.currency)
        except Exception:
            # Keep whatever the device is showing; the next lap retries.
            logger.exception("fetch_failed", extra={"symbol": token.symbol})
            return None
        decision = decide(reading, token)
        return self._dispatch(token=token, reading=reading, decision=decision)

    def _dispatch(
        self,
        *,
        token: TokenConfig,
        reading: PriceReading,
        decision: AlertDecision,
    ) -> asyncio.Task[None]:
        task = asyncio.create_task(
            self._update(token=token, reading=reading, decision=decision),
            name=f"update-{token.symbol}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _update(
        self,
        *,
        token: TokenConfig,
        reading: PriceReading,
        decision: AlertDecision,
    ) -> None:
        text = format_price(reading.price)
        logger.info(
            "token_shown",
            extra={
                "symbol": token.symbol,
                "price": text,
                "light_state": decision.light_state.value,
            },
        )
        await self._device_call(
            "show_lights",
            self._device.show_lights(decision.light_state),
            symbol=token.symbol,
        )
        await self._device_call(
            "show_text",
            self._device.show_text(text, False),
            symbol=token.symbol,
        )
        if self._label_delay_seconds > 0:
            await asyncio.sleep(self._label_delay_seconds)
        await self._device_call(
            "show_label",
            self._device.show_label(self._label_position, token.symbol, token.display_currency),
            symbol=token.symbol,
        )
        if decision.notify:
            await self._safe_notify(token=token, reading=reading)

    async def _dwell(self, seconds: float) -> bool:
        """Sleep on the current token; True means a stop arrived meanwhile."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=max(0.0, seconds))
        except TimeoutError:
            return False
        return True

    async def _device_call(
        self,
        command: str,
        call: Awaitable[None],
        *,
        symbol: str | None = None,
    ) -> bool:
        try:
            await call
        except Exception:
            extra: dict[str, object] = {"command": command}
            if symbol is not None:
                extra["symbol"] = symbol
            logger.exception("device_command_failed", extra=extra)
            return False
        return True

    async def _safe_notify(self, *, token: TokenConfig, reading: PriceReading) -> None:
        if self._notifier is None or not self._notifier.enabled():
            return
        try:
            await self._notifier.send(
                f"{token.currency} {format_alert_price(reading.price)}",
                f"ALERT - {token.symbol}",
                self._notify_address,
            )
        except Exception:
            logger.exception("notify_failed", extra={"symbol": token.symbol})

    async def _shutdown(self) -> None:
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self._device_call("resume", self._device.resume())
        logger.info("ticker_stopped")
