from __future__ import annotations

from typing import Protocol

from blockclock_ticker.types import LightState, PriceReading


class PriceSource(Protocol):
    async def fetch(self, asset: str, currency: str) -> PriceReading: ...


class DeviceDriver(Protocol):
    async def pause(self) -> None: ...

    async def resume(self) -> None: ...

    async def show_lights(self, state: LightState) -> None: ...

    async def show_text(self, text: str, show_currency_symbol: bool = False) -> None: ...

    async def show_label(self, position: int, over_text: str, under_text: str) -> None: ...


class Notifier(Protocol):
    def enabled(self) -> bool: ...

    async def send(self, body: str, subject: str, recipient: str) -> None: ...
