from __future__ import annotations

import httpx

from blockclock_ticker.errors import NotifyError


class TelegramNotifier:
    def __init__(
        self,
        *,
        bot_token: str,
        chat_id: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._bot_token = bot_token.strip()
        self._chat_id = chat_id.strip()
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    def enabled(self) -> bool:
        return bool(self._bot_token and self._chat_id)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, body: str, subject: str, recipient: str = "") -> None:
        # The chat id is fixed by configuration; ``recipient`` only matters for e-mail.
        if not self.enabled():
            return
        url = f"https://api.telegram.org/bot{self._bot_token}/sendMessage"
        text = f"{subject}\n{body}" if subject else body
        payload = {"chat_id": self._chat_id, "text": text, "disable_web_page_preview": True}
        try:
            resp = await self._client.post(url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise NotifyError(f"Telegram send failed: {type(e).__name__}: {e}") from e
