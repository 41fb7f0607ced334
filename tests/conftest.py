"""Pytest fixtures: venue payloads and a VenueClient on an in-memory transport."""

from typing import Any, Callable

import httpx
import pytest

from venue.client import VenueClient
from venue.session import Session, SessionSlot

BASE_URL = "http://venue.test/api"


def book_payload(
    symbol: str = "BTC-USD",
    mid: float = 100.0,
    bids: list | None = None,
    asks: list | None = None,
) -> dict:
    if bids is None:
        bids = [{"side": "BID", "price": 99.5, "size": 2.0}, {"side": "BID", "price": 99.0, "size": 4.0}]
    if asks is None:
        asks = [{"side": "ASK", "price": 100.5, "size": 1.0}, {"side": "ASK", "price": 101.0, "size": 3.0}]
    return {"symbol": symbol, "mid": mid, "bids": bids, "asks": asks}


def order_payload(
    order_id: Any = 1,
    *,
    symbol: str = "BTC-USD",
    side: str = "BUY",
    type: str = "MARKET",
    quantity: float = 1.0,
    status: str = "FILLED",
    exec_price: float | None = 100.0,
    exec_qty: float | None = None,
    slippage_bps: float | None = 5.0,
    exec_created_at: str | None = "2024-01-02T10:00:00Z",
    **extra: Any,
) -> dict:
    payload = {
        "order_id": order_id,
        "symbol": symbol,
        "side": side,
        "type": type,
        "quantity": quantity,
        "status": status,
        "created_at": "2024-01-02T09:59:59Z",
    }
    if status == "FILLED":
        payload.update(
            exec_price=exec_price,
            exec_qty=exec_qty,
            slippage_bps=slippage_bps,
            exec_created_at=exec_created_at,
        )
    payload.update(extra)
    return payload


def stats_payload(open_orders: int = 3, portfolio_value: float = 12_500.5) -> dict:
    return {"open_orders": open_orders, "portfolio_value": portfolio_value}


def route(routes: dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    """
    Handler answering "METHOD /path" keys (path without the /api prefix).

    A value may be an httpx.Response, a callable(request) -> Response, or any
    JSON-serializable body served with 200.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        key = f"{request.method} {path}"
        if key not in routes:
            return httpx.Response(404, json={"detail": f"no route {key}"})
        value = routes[key]
        if callable(value):
            return value(request)
        if isinstance(value, httpx.Response):
            return httpx.Response(value.status_code, headers=value.headers, content=value.content)
        return httpx.Response(200, json=value)

    return handler


@pytest.fixture
def session_slot() -> SessionSlot:
    return SessionSlot(Session(token="tok-123", account_id="acct-1"))


@pytest.fixture
def make_client(session_slot: SessionSlot) -> Callable[..., VenueClient]:
    """Factory: VenueClient whose requests are answered by *handler*."""

    def _make(handler: Callable, *, timeout_s: float = 10.0) -> VenueClient:
        return VenueClient(
            BASE_URL,
            session_provider=session_slot.current,
            timeout_s=timeout_s,
            transport=httpx.MockTransport(handler),
        )

    return _make
