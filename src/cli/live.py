"""
Live watch loop: order book for one symbol plus dashboard summary, until Ctrl+C.

Each applied snapshot is printed with the latest dashboard metrics. Failed
refreshes print a stale notice and keep the last good book on screen.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import click

from account.summary import DashboardSummaryPoller
from cli.output import format_dashboard_stats, format_order_book
from cli.structured_log import StructuredEventLogger
from config.loader import AppConfig
from orderbook.cache import OrderBookCache
from orderbook.depth import is_incomplete
from venue.client import VenueClient
from venue.contracts import OrderBookSnapshot


@dataclass
class WatchState:
    refreshes: int = 0
    failures: int = 0


async def run_watch(
    cfg: AppConfig,
    symbol: str,
    *,
    client: VenueClient,
    events: StructuredEventLogger,
    max_refreshes: int | None = None,
    state: WatchState | None = None,
) -> int:
    """
    Watch *symbol* until cancelled, or until *max_refreshes* snapshots have
    been applied. Returns the number of applied snapshots.
    """
    cache = OrderBookCache(client, refresh_interval_s=cfg.polling.orderbook_interval_s)
    poller = DashboardSummaryPoller(client, poll_interval_s=cfg.polling.dashboard_interval_s)
    state = state if state is not None else WatchState()
    done = asyncio.Event()

    def _on_book(snapshot: OrderBookSnapshot) -> None:
        state.refreshes += 1
        click.echo(format_order_book(cache.view(symbol)))
        click.echo(format_dashboard_stats(poller.latest))
        events.book_refreshed(
            mid=snapshot.mid,
            bids=len(snapshot.bids),
            asks=len(snapshot.asks),
            incomplete=is_incomplete(snapshot),
        )
        if max_refreshes is not None and state.refreshes >= max_refreshes:
            done.set()

    def _on_error(failed_symbol: str, message: str) -> None:
        state.failures += 1
        click.echo(f"[{failed_symbol}] refresh failed: {message}")
        if cache.view(failed_symbol).stale:
            events.book_stale(error=message)
        else:
            events.error(message=message, detail="order book unavailable")

    listener = cache.subscribe(_on_book, on_error=_on_error)
    poller.start()
    cache.start_watching(symbol)
    try:
        await done.wait()
    finally:
        listener.cancel()
        await cache.aclose()
        await poller.aclose()
    return state.refreshes


def run_live_loop(cfg: AppConfig, symbol: str, *, client: VenueClient, events: StructuredEventLogger) -> None:
    """Blocking entry point for the CLI. Ctrl+C for graceful shutdown."""
    click.echo(f"Watching {symbol}: order book every {cfg.polling.orderbook_interval_s:.0f}s, "
               f"dashboard every {cfg.polling.dashboard_interval_s:.0f}s  |  Ctrl+C to stop\n")

    state = WatchState()

    async def _main() -> None:
        async with client:
            await run_watch(cfg, symbol, client=client, events=events, state=state)

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        events.shutdown(refreshes=state.refreshes)
        click.echo(f"\n\nShutting down after {state.refreshes} refresh(es), "
                   f"{state.failures} failed. Goodbye.")
