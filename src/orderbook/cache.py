"""
Order book cache: one time-bounded snapshot per symbol, refreshed by polling.

Per-symbol state: IDLE -> LOADING -> READY | ERRORED, and back to LOADING on
the next tick. A failed refresh keeps the last good snapshot for display. Each
fetch carries a per-symbol sequence number; only the response to the most
recently issued request is applied.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from polling import Subscription, run_every
from venue.client import VenueClient
from venue.contracts import OrderBookSnapshot
from venue.errors import VenueError
from venue.payloads import parse_order_book

from orderbook.depth import is_incomplete

logger = logging.getLogger("orderdesk.orderbook")

DEFAULT_REFRESH_INTERVAL_S = 60.0

BookListener = Callable[[OrderBookSnapshot], None]
ErrorListener = Callable[[str, str], None]


class BookState(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    READY = "READY"
    ERRORED = "ERRORED"


@dataclass(frozen=True)
class BookView:
    """What a renderer sees for one symbol. Replaced whole, never mutated."""

    symbol: str
    state: BookState = BookState.IDLE
    snapshot: OrderBookSnapshot | None = None
    error: str | None = None

    @property
    def incomplete(self) -> bool:
        return self.snapshot is not None and is_incomplete(self.snapshot)

    @property
    def stale(self) -> bool:
        """Showing a previous snapshot because the latest refresh failed."""
        return self.state is BookState.ERRORED and self.snapshot is not None


class OrderBookCache:
    """
    Holds the latest OrderBookSnapshot per symbol and watches at most one
    symbol at a time.

    The venue smooths prices over a multi-minute window and the upstream
    pricing provider is rate limited, so the default cadence is 60 seconds.
    """

    def __init__(
        self,
        client: VenueClient,
        *,
        refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S,
    ) -> None:
        if refresh_interval_s <= 0:
            raise ValueError(f"refresh_interval_s must be positive, got {refresh_interval_s}")
        self._client = client
        self._interval_s = float(refresh_interval_s)
        self._views: dict[str, BookView] = {}
        self._issued: dict[str, int] = {}
        self._in_flight: dict[str, set[int]] = {}
        self._listeners: list[BookListener] = []
        self._error_listeners: list[ErrorListener] = []
        self._watch: Subscription | None = None
        self._watched: str | None = None

    # ---------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------

    def view(self, symbol: str) -> BookView:
        return self._views.get(symbol) or BookView(symbol=symbol)

    def snapshot(self, symbol: str) -> OrderBookSnapshot | None:
        return self.view(symbol).snapshot

    def error(self, symbol: str) -> str | None:
        return self.view(symbol).error

    def state(self, symbol: str) -> BookState:
        return self.view(symbol).state

    @property
    def watched_symbol(self) -> str | None:
        return self._watched

    # ---------------------------------------------------------------------
    # Refresh
    # ---------------------------------------------------------------------

    def _is_latest(self, symbol: str, seq: int) -> bool:
        return self._issued.get(symbol) == seq

    def _roll_back(self, symbol: str) -> None:
        """The latest fetch was cancelled: an older one still in flight becomes the latest."""
        pending = self._in_flight.get(symbol)
        if pending:
            self._issued[symbol] = max(pending)
            return
        view = self.view(symbol)
        if view.error is not None:
            state = BookState.ERRORED
        elif view.snapshot is not None:
            state = BookState.READY
        else:
            state = BookState.IDLE
        self._views[symbol] = replace(view, state=state)

    async def fetch(self, symbol: str) -> OrderBookSnapshot | None:
        """
        Refresh one symbol. Returns the snapshot now on display, which is the
        previous one if this refresh failed or was overtaken. Never raises
        VenueError.
        """
        seq = self._issued.get(symbol, 0) + 1
        self._issued[symbol] = seq
        in_flight = self._in_flight.setdefault(symbol, set())
        in_flight.add(seq)
        self._views[symbol] = replace(self.view(symbol), state=BookState.LOADING)

        try:
            payload = await self._client.get_order_book(symbol)
            snapshot = parse_order_book(payload)
        except asyncio.CancelledError:
            in_flight.discard(seq)
            if self._is_latest(symbol, seq):
                self._roll_back(symbol)
            raise
        except VenueError as exc:
            in_flight.discard(seq)
            if not self._is_latest(symbol, seq):
                logger.debug("Dropping stale failure for %s (seq %d)", symbol, seq)
                return self.snapshot(symbol)
            current = self.view(symbol)
            self._views[symbol] = replace(current, state=BookState.ERRORED, error=exc.message)
            if current.snapshot is not None:
                logger.warning("Order book refresh failed for %s, keeping last snapshot: %s", symbol, exc.message)
            else:
                logger.warning("Order book refresh failed for %s: %s", symbol, exc.message)
            self._notify_error(symbol, exc.message)
            return current.snapshot

        in_flight.discard(seq)
        if not self._is_latest(symbol, seq):
            logger.debug("Dropping stale order book for %s (seq %d)", symbol, seq)
            return self.snapshot(symbol)

        self._views[symbol] = BookView(symbol=symbol, state=BookState.READY, snapshot=snapshot)
        logger.debug(
            "Order book %s refreshed: mid=%.2f bids=%d asks=%d",
            symbol, snapshot.mid, len(snapshot.bids), len(snapshot.asks),
        )
        self._notify(snapshot)
        return snapshot

    # ---------------------------------------------------------------------
    # Push notifications
    # ---------------------------------------------------------------------

    def subscribe(
        self,
        listener: BookListener,
        *,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        """
        Call *listener* with every newly applied snapshot, and *on_error* with
        (symbol, message) whenever a refresh fails.
        """
        self._listeners.append(listener)
        if on_error is not None:
            self._error_listeners.append(on_error)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
            if on_error is not None and on_error in self._error_listeners:
                self._error_listeners.remove(on_error)

        return Subscription(f"orderbook-listener-{id(listener)}", on_cancel=_remove)

    def _notify(self, snapshot: OrderBookSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Order book listener failed for %s", snapshot.symbol)

    def _notify_error(self, symbol: str, message: str) -> None:
        for listener in list(self._error_listeners):
            try:
                listener(symbol, message)
            except Exception:
                logger.exception("Order book error listener failed for %s", symbol)

    # ---------------------------------------------------------------------
    # Watching
    # ---------------------------------------------------------------------

    def start_watching(self, symbol: str) -> Subscription:
        """
        Fetch *symbol* now and every refresh interval until stopped.

        Watching a new symbol first cancels the previous watch, including its
        in-flight request, so only one symbol is ever polled.
        """
        self.stop_watching()

        async def _tick() -> None:
            try:
                await self.fetch(symbol)
            except Exception:
                logger.exception("Order book refresh crashed for %s", symbol)

        def _forget() -> None:
            if self._watch is watch:
                logger.info("Stopped watching order book %s", symbol)
                self._watch = None
                self._watched = None

        watch = run_every(self._interval_s, _tick, name=f"orderbook-{symbol}", on_cancel=_forget)
        self._watch = watch
        self._watched = symbol
        logger.info("Watching order book %s every %.0fs", symbol, self._interval_s)
        return watch

    def stop_watching(self) -> None:
        if self._watch is not None:
            self._watch.cancel()

    async def aclose(self) -> None:
        watch = self._watch
        self.stop_watching()
        if watch is not None:
            await watch.wait_closed()
