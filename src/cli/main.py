"""
CLI entry point: orderdesk book | trade | analytics | stats | watch.

Every command loads config from --config (default config.yaml), talks to the
venue through one VenueClient, and prints human-readable output.
"""

import asyncio
import logging
import sys

import click
from dotenv import load_dotenv

from config import AppConfig, load_config
from venue.client import VenueClient
from venue.errors import TradingError
from venue.session import SessionSlot

load_dotenv()


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


def _load(ctx: click.Context) -> AppConfig:
    try:
        return load_config(ctx.obj["config_path"])
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def _make_client(ctx: click.Context, cfg: AppConfig) -> VenueClient:
    """One client per command; the transport override exists for tests."""
    session = SessionSlot(cfg.venue.session())
    return VenueClient(
        cfg.venue.base_url,
        session_provider=session.current,
        timeout_s=cfg.venue.timeout_s,
        transport=ctx.obj.get("transport"),
    )


def _resolve_symbol(cfg: AppConfig, symbol: str | None) -> str:
    """Default to the first configured symbol; reject symbols the config does not list."""
    if symbol is None:
        return cfg.symbols[0]
    symbol = symbol.upper()
    if symbol not in cfg.symbols:
        raise click.ClickException(f"Unknown symbol {symbol}; configured: {', '.join(cfg.symbols)}")
    return symbol


def _events(cfg: AppConfig, symbol: str):
    from cli.structured_log import StructuredEventLogger

    return StructuredEventLogger(
        symbol,
        enabled=cfg.alerting.structured_logs,
        webhook_url=cfg.alerting.webhook_url,
    )


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """orderdesk: live order book, order submission and execution analytics."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- orderdesk book ----------


@cli.command()
@click.argument("symbol", required=False)
@click.pass_context
def book(ctx: click.Context, symbol: str | None) -> None:
    """Fetch and print the order book for SYMBOL once (default: first configured symbol)."""
    cfg = _load(ctx)
    symbol = _resolve_symbol(cfg, symbol)
    from cli.output import format_order_book
    from orderbook import OrderBookCache

    async def _main():
        async with _make_client(ctx, cfg) as client:
            cache = OrderBookCache(client, refresh_interval_s=cfg.polling.orderbook_interval_s)
            await cache.fetch(symbol)
            return cache.view(symbol)

    view = asyncio.run(_main())
    click.echo(format_order_book(view))
    if view.snapshot is None:
        _events(cfg, symbol).error(message=view.error or "no snapshot", detail="order book unavailable")
        raise click.ClickException(f"Order book unavailable for {symbol}")


# ---------- orderdesk trade ----------


@cli.command()
@click.argument("symbol")
@click.option("--side", type=click.Choice(["BUY", "SELL"], case_sensitive=False), required=True)
@click.option("--type", "order_type", type=click.Choice(["MARKET", "LIMIT"], case_sensitive=False), default="MARKET", show_default=True)
@click.option("--qty", "quantity", type=float, required=True, help="Quantity to trade.")
@click.option("--limit-price", type=float, default=None, help="Required for LIMIT orders.")
@click.pass_context
def trade(ctx: click.Context, symbol: str, side: str, order_type: str, quantity: float, limit_price: float | None) -> None:
    """Submit one order for SYMBOL and print the venue's record. Never retried."""
    cfg = _load(ctx)
    symbol = _resolve_symbol(cfg, symbol)
    from cli.output import format_order_record
    from execution import OrderSubmitter, estimated_total
    from venue.contracts import OrderType, Side, TradeRequest
    from venue.errors import SubmitError, ValidationError

    request = TradeRequest(
        symbol=symbol,
        side=Side(side.upper()),
        type=OrderType(order_type.upper()),
        quantity=quantity,
        limit_price=limit_price,
    )
    events = _events(cfg, symbol)
    if request.type is OrderType.LIMIT and limit_price:
        click.echo(f"Estimated total: ${estimated_total(limit_price, quantity):,.2f}")

    async def _main():
        async with _make_client(ctx, cfg) as client:
            return await OrderSubmitter(client).submit(request)

    try:
        record = asyncio.run(_main())
    except ValidationError as exc:
        events.order_rejected(reason=str(exc))
        raise click.ClickException(str(exc)) from exc
    except SubmitError as exc:
        events.submit_failed(message=exc.message)
        raise click.ClickException(exc.message) from exc

    fill = record.fill
    events.order_submitted(
        order_id=record.order_id,
        side=record.side.value,
        order_type=record.type.value,
        qty=record.quantity,
        status=record.status.value,
        slippage_bps=fill.slippage_bps if fill else None,
    )
    click.echo(format_order_record(record))


# ---------- orderdesk analytics ----------


@cli.command()
@click.option("--symbol", default=None, help="Narrow analytics to one symbol.")
@click.pass_context
def analytics(ctx: click.Context, symbol: str | None) -> None:
    """Fetch order history and venue stats; print fill rate, slippage and trend."""
    cfg = _load(ctx)
    from analytics import AnalyticsAggregator
    from cli.output import format_analytics

    async def _main():
        async with _make_client(ctx, cfg) as client:
            aggregator = AnalyticsAggregator(client, trend_window=cfg.analytics.trend_window)
            aggregator.select_symbol(symbol)
            failure = None
            try:
                await aggregator.refresh()
            except TradingError as exc:
                failure = exc
            return aggregator.view(), failure

    view, failure = asyncio.run(_main())
    click.echo(format_analytics(view))
    if failure is not None:
        _events(cfg, symbol or "ALL").error(message=str(failure), detail=type(failure).__name__)
        raise click.ClickException(str(failure))


# ---------- orderdesk stats ----------


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Print dashboard metrics: open orders and portfolio value."""
    cfg = _load(ctx)
    from account import DashboardSummaryPoller
    from cli.output import format_dashboard_stats

    async def _main():
        async with _make_client(ctx, cfg) as client:
            return await DashboardSummaryPoller(client).poll_once()

    latest = asyncio.run(_main())
    click.echo(format_dashboard_stats(latest))


# ---------- orderdesk watch ----------


@cli.command()
@click.argument("symbol", required=False)
@click.pass_context
def watch(ctx: click.Context, symbol: str | None) -> None:
    """Watch SYMBOL's order book and the dashboard summary until Ctrl+C."""
    cfg = _load(ctx)
    symbol = _resolve_symbol(cfg, symbol)
    from cli.live import run_live_loop

    run_live_loop(cfg, symbol, client=_make_client(ctx, cfg), events=_events(cfg, symbol))


if __name__ == "__main__":
    cli()
