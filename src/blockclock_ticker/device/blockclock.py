from __future__ import annotations

from urllib.parse import quote

import httpx

from blockclock_ticker.errors import DeviceError
from blockclock_ticker.types import LightState

ABOVE_COLOR = "00ff0040"
BELOW_COLOR = "ff000040"
_RESUME_RATE = 5


def _segment(value: object) -> str:
    return quote(str(value), safe="")


class BlockClockClient:
    """HTTP client for the BlockClock's local REST API.

    Every command is a plain GET; any non-2xx answer is a failure and the
    response body is the only diagnostic the device gives back.
    """

    def __init__(
        self,
        *,
        base_url: str,
        password: str = "",
        timeout_seconds: float = 10.0,
        above_color: str = ABOVE_COLOR,
        below_color: str = BELOW_COLOR,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._above_color = above_color
        self._below_color = below_color
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout_seconds),
            auth=httpx.BasicAuth("", password) if password else None,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def lights_off(self) -> None:
        await self._command("lights_off", "/api/lights/off")

    async def lights_on(self, color: str) -> None:
        await self._command("lights_on", f"/api/lights/{_segment(color)}")

    async def lights_flash(self) -> None:
        await self._command("lights_flash", "/api/lights/flash")

    async def show_lights(self, state: LightState) -> None:
        if state is LightState.ABOVE:
            await self.lights_on(self._above_color)
        elif state is LightState.BELOW:
            await self.lights_on(self._below_color)
        else:
            await self.lights_off()

    async def show_label(self, position: int, over_text: str, under_text: str) -> None:
        path = f"/api/ou_text/{int(position)}/{_segment(over_text)}/{_segment(under_text)}"
        await self._command("show_label", path)

    async def show_image(self, position: int, name: str) -> None:
        await self._command("show_image", f"/api/image/{int(position)}/{_segment(name)}")

    async def show_text(self, text: str, show_currency_symbol: bool = False) -> None:
        params = {"sym": "$"} if show_currency_symbol else None
        await self._command("show_text", f"/api/show/text/{_segment(text)}", params=params)

    async def pause(self) -> None:
        await self._command("pause", "/api/action/pause")

    async def resume(self) -> None:
        await self._command("resume", "/api/action/update", params={"rate": _RESUME_RATE})

    async def _command(
        self,
        command: str,
        path: str,
        *,
        params: dict[str, object] | None = None,
    ) -> None:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise DeviceError(command=command, detail=f"{type(e).__name__}: {e}") from e
        if response.status_code >= 400:
            raise DeviceError(command=command, detail=response.text)
