from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage

from blockclock_ticker.errors import NotifyError


class EmailNotifier:
    def __init__(
        self,
        *,
        server: str,
        port: int,
        user: str,
        password: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._server = server.strip()
        self._port = port
        self._user = user.strip()
        self._password = password
        self._timeout_seconds = timeout_seconds

    def enabled(self) -> bool:
        return bool(self._server and self._port and self._user and self._password)

    def build_message(self, *, body: str, subject: str, recipient: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._user
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body, subtype="html")
        return msg

    async def send(self, body: str, subject: str, recipient: str) -> None:
        if not self.enabled():
            return
        if not recipient.strip():
            raise NotifyError("no recipient configured")
        msg = self.build_message(body=body, subject=subject, recipient=recipient)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotifyError(f"SMTP send failed: {type(e).__name__}: {e}") from e

    def _deliver(self, msg: EmailMessage) -> None:
        # The server must offer STARTTLS; credentials never go out in clear.
        with smtplib.SMTP(self._server, self._port, timeout=self._timeout_seconds) as smtp:
            smtp.starttls()
            smtp.login(self._user, self._password)
            smtp.send_message(msg)
