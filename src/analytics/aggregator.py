"""
Analytics aggregator: order history + venue stats, combined only for display.

Both fetches run on demand (when an analytics view opens), never on a timer.
Derived figures are recomputed from the held history on every read, so a
symbol filter or a failed refresh can never leave them half-updated.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from venue.client import VenueClient
from venue.contracts import OrderRecord, SymbolStats
from venue.errors import VenueError
from venue.payloads import parse_order_history, parse_symbol_stats

from analytics.metrics import (
    DEFAULT_TREND_WINDOW,
    EMPTY_STATS,
    SlippagePoint,
    TradeStats,
    compute_trade_stats,
    distinct_symbols,
    filter_by_symbol,
    side_counts,
    slippage_series,
)

logger = logging.getLogger("orderdesk.analytics")


@dataclass(frozen=True)
class AnalyticsView:
    selected_symbol: str | None = None
    symbols: tuple[str, ...] = ()
    stats: TradeStats = EMPTY_STATS
    slippage_series: tuple[SlippagePoint, ...] = ()
    side_counts: dict[str, int] = field(default_factory=lambda: {"BUY": 0, "SELL": 0})
    venue_stats: SymbolStats | None = None
    error: str | None = None


class AnalyticsAggregator:
    """Holds the account's order history and venue stats; derives display metrics."""

    def __init__(self, client: VenueClient, *, trend_window: int = DEFAULT_TREND_WINDOW) -> None:
        if trend_window < 1:
            raise ValueError(f"trend_window must be >= 1, got {trend_window}")
        self._client = client
        self._trend_window = trend_window
        self._orders: tuple[OrderRecord, ...] = ()
        self._venue_stats: SymbolStats | None = None
        self._error: str | None = None
        self._selected: str | None = None

    @property
    def orders(self) -> tuple[OrderRecord, ...]:
        return self._orders

    @property
    def venue_stats(self) -> SymbolStats | None:
        return self._venue_stats

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def selected_symbol(self) -> str | None:
        return self._selected

    # ---------------------------------------------------------------------
    # Fetch
    # ---------------------------------------------------------------------

    async def refresh_orders(self) -> tuple[OrderRecord, ...]:
        try:
            records = parse_order_history(await self._client.list_orders())
        except VenueError as exc:
            self._error = exc.message
            logger.warning("Order history fetch failed: %s", exc.message)
            raise
        self._orders = tuple(records)
        logger.info("Loaded %d orders", len(records))
        return self._orders

    async def refresh_stats(self) -> SymbolStats | None:
        try:
            stats = parse_symbol_stats(await self._client.get_analytics())
        except VenueError as exc:
            self._error = exc.message
            logger.warning("Analytics fetch failed: %s", exc.message)
            raise
        self._venue_stats = stats
        return stats

    async def refresh(self) -> AnalyticsView:
        """
        Fetch history and venue stats concurrently.

        Each successful fetch replaces its slot even if the other fails; the
        first failure is then raised. Derived metrics stay zero-defined.
        """
        self._error = None
        results = await asyncio.gather(
            self.refresh_orders(),
            self.refresh_stats(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return self.view()

    # ---------------------------------------------------------------------
    # Derived
    # ---------------------------------------------------------------------

    def select_symbol(self, symbol: str | None) -> None:
        """Narrow every derived figure to *symbol*; None shows all symbols."""
        self._selected = symbol or None

    @property
    def symbols(self) -> list[str]:
        return distinct_symbols(self._orders)

    @property
    def working_set(self) -> list[OrderRecord]:
        return filter_by_symbol(self._orders, self._selected)

    @property
    def stats(self) -> TradeStats:
        return compute_trade_stats(self.working_set)

    def view(self) -> AnalyticsView:
        working = self.working_set
        return AnalyticsView(
            selected_symbol=self._selected,
            symbols=tuple(distinct_symbols(self._orders)),
            stats=compute_trade_stats(working),
            slippage_series=tuple(slippage_series(working, self._trend_window)),
            side_counts=side_counts(working),
            venue_stats=self._venue_stats,
            error=self._error,
        )
