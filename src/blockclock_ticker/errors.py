from __future__ import annotations


class TickerError(RuntimeError):
    pass


class FetchError(TickerError):
    """Price feed unreachable or returned something unusable."""


class DeviceError(TickerError):
    def __init__(self, *, command: str, detail: str) -> None:
        super().__init__(f"BlockClock command failed: command={command} detail={detail}")
        self.command = command
        self.detail = detail


class NotifyError(TickerError):
    pass


class ConfigError(TickerError):
    pass
