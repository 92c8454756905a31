from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from blockclock_ticker.alerts import decide
from blockclock_ticker.config.tokens import TickerConfig, load_ticker_config
from blockclock_ticker.device import BlockClockClient
from blockclock_ticker.engine.protocols import Notifier
from blockclock_ticker.engine.scheduler import Scheduler, order_tokens
from blockclock_ticker.errors import ConfigError
from blockclock_ticker.formatting import format_price
from blockclock_ticker.logging_utils import configure_logging
from blockclock_ticker.notifications import EmailNotifier, TelegramNotifier
from blockclock_ticker.prices import CoinGeckoPriceSource
from blockclock_ticker.settings import Settings

app = typer.Typer(no_args_is_help=True, add_completion=False)
logger = logging.getLogger("blockclock_ticker")


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise typer.BadParameter(f"invalid settings: {e}") from e


def _load_config(path: Path) -> TickerConfig:
    if not path.exists():
        raise typer.BadParameter(f"config file not found: {path}")
    try:
        return load_ticker_config(path)
    except ConfigError as e:
        raise typer.BadParameter(str(e)) from e


def _build_source(settings: Settings) -> CoinGeckoPriceSource:
    return CoinGeckoPriceSource(
        base_url=settings.coingecko_base_url,
        api_key=settings.coingecko_api_key,
        pro=settings.coingecko_pro,
        timeout_seconds=settings.http_timeout_seconds,
    )


def _build_device(settings: Settings) -> BlockClockClient:
    if not settings.block_clock_address.strip():
        raise typer.BadParameter("BLOCK_CLOCK_ADDRESS is required")
    return BlockClockClient(
        base_url=settings.block_clock_address,
        password=settings.block_clock_password,
        timeout_seconds=settings.http_timeout_seconds,
    )


def _build_notifier(settings: Settings) -> EmailNotifier | TelegramNotifier | None:
    if settings.email_enabled():
        return EmailNotifier(
            server=settings.smtp_server,
            port=settings.smtp_port or 0,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            timeout_seconds=settings.http_timeout_seconds,
        )
    if settings.telegram_enabled():
        return TelegramNotifier(
            bot_token=settings.telegram_bot_token,
            chat_id=settings.telegram_chat_id,
            timeout_seconds=settings.http_timeout_seconds,
        )
    return None


async def _close_notifier(notifier: Notifier | None) -> None:
    if isinstance(notifier, TelegramNotifier):
        await notifier.aclose()


@app.command()
def config_init(
    path: Path = typer.Option(Path(".env"), help="Path to write a starter .env file."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite if exists."),
) -> None:
    """
    Create a starter `.env` file (copy from `.env.example`).
    """
    example_path = Path(".env.example")
    if not example_path.exists():
        raise typer.Exit(code=2)

    if path.exists() and not overwrite:
        raise typer.Exit(code=1)

    path.write_text(example_path.read_text(encoding="utf-8"), encoding="utf-8")
    typer.echo(f"Wrote {path}")


@app.command()
def show_config(
    config: Path | None = typer.Option(None, help="Ticker config file (TOML)."),
) -> None:
    settings = _load_settings()
    configure_logging(settings.log_level)
    redacted = settings.model_dump(mode="json")
    for key in ("block_clock_password", "coingecko_api_key", "smtp_pass", "telegram_bot_token"):
        redacted[key] = "***" if redacted[key] else ""
    cfg = _load_config(config or settings.ticker_config_path)
    tokens = order_tokens(cfg.token_configs(), sort_symbols=cfg.sort_symbols)
    logger.info("loaded_config", extra={"tokens": [t.symbol for t in tokens]})
    typer.echo({**redacted, "sort_symbols": cfg.sort_symbols, "tokens": [t.symbol for t in tokens]})


@app.command()
def price(
    symbol: str = typer.Option(..., help="Symbol of a configured token."),
    config: Path | None = typer.Option(None, help="Ticker config file (TOML)."),
) -> None:
    """
    Fetch one token and print what the ticker would show for it.
    """
    settings = _load_settings()
    configure_logging(settings.log_level)
    cfg = _load_config(config or settings.ticker_config_path)
    matches = [t for t in cfg.token_configs() if t.symbol.lower() == symbol.strip().lower()]
    if not matches:
        raise typer.BadParameter(f"token not configured: {symbol}")
    token = matches[0]

    async def _run() -> None:
        source = _build_source(settings)
        try:
            reading = await source.fetch(token.contract_address, token.currency)
        finally:
            await source.aclose()
        decision = decide(reading, token)
        typer.echo(
            {
                "symbol": token.symbol,
                "currency": token.currency,
                "price": reading.price,
                "market_cap": reading.market_cap,
                "volume": reading.volume,
                "percent_change_24h": reading.percent_change_24h,
                "last_updated_epoch": reading.last_updated_epoch,
                "display": format_price(reading.price),
                "light_state": decision.light_state.value,
                "notify": decision.notify,
            }
        )

    asyncio.run(_run())


@app.command()
def health() -> None:
    """
    Pause then resume the BlockClock to check it is reachable.
    """
    settings = _load_settings()
    configure_logging(settings.log_level)

    async def _run() -> None:
        device = _build_device(settings)
        try:
            await device.pause()
            await device.resume()
            typer.echo({"ok": True, "block_clock": settings.block_clock_address})
        finally:
            await device.aclose()

    asyncio.run(_run())


@app.command()
def alerts_test(
    message: str = typer.Option("blockclock-ticker test alert", help="Message to send."),
) -> None:
    settings = _load_settings()
    configure_logging(settings.log_level)

    async def _run() -> None:
        notifier = _build_notifier(settings)
        if notifier is None:
            typer.echo({"ok": False, "enabled": False})
            return
        try:
            await notifier.send(message, "ALERT - test", settings.notify_address)
            typer.echo({"ok": True, "channel": type(notifier).__name__, "enabled": True})
        finally:
            await _close_notifier(notifier)

    asyncio.run(_run())


@app.command()
def run(
    config: Path | None = typer.Option(None, help="Ticker config file (TOML)."),
) -> None:
    """
    Cycle the configured tokens on the BlockClock until SIGINT/SIGTERM.
    """
    settings = _load_settings()
    configure_logging(settings.log_level)
    cfg = _load_config(config or settings.ticker_config_path)

    async def _run() -> None:
        device = _build_device(settings)
        source = _build_source(settings)
        notifier = _build_notifier(settings)
        scheduler = Scheduler(
            tokens=cfg.token_configs(),
            source=source,
            device=device,
            notifier=notifier,
            notify_address=settings.notify_address,
            sort_symbols=cfg.sort_symbols,
            label_position=settings.label_position,
            label_delay_seconds=settings.label_delay_seconds,
        )
        try:
            scheduler.install_signal_handlers()
            await scheduler.run()
        finally:
            scheduler.remove_signal_handlers()
            await _close_notifier(notifier)
            await device.aclose()
            await source.aclose()

    asyncio.run(_run())
