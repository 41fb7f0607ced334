"""
Venue JSON -> contracts. Every payload is schema-checked before use.

Absent optional fields stay absent: a PENDING order never gets a zero
slippage or zero executed quantity, it gets Unfilled.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import jsonschema

from venue import schemas
from venue.contracts import (
    UNFILLED,
    BookSide,
    DashboardStats,
    Execution,
    Filled,
    OrderBookSnapshot,
    OrderLevel,
    OrderRecord,
    OrderStatus,
    OrderType,
    Side,
    SymbolStats,
)
from venue.errors import PayloadError


def _validate(payload: Any, schema: dict, what: str) -> None:
    try:
        jsonschema.validate(instance=payload, schema=schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise PayloadError(f"Malformed {what} at {location}: {exc.message}", exc) from exc


def parse_timestamp(value: str | None) -> datetime | None:
    """ISO-8601 string -> UTC datetime. None and empty strings stay None."""
    if not value:
        return None
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise PayloadError(f"Invalid timestamp: {value!r}", exc) from exc
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _opt_float(value: Any) -> float | None:
    return None if value is None else float(value)


# ---------------------------------------------------------------------------
# Order book
# ---------------------------------------------------------------------------


def _levels(raw: list | None, side: BookSide) -> tuple[OrderLevel, ...]:
    return tuple(
        OrderLevel(side=side, price=float(level["price"]), size=float(level["size"]))
        for level in raw or []
    )


def parse_order_book(payload: Any) -> OrderBookSnapshot:
    _validate(payload, schemas.ORDER_BOOK_SCHEMA, "order book")
    return OrderBookSnapshot(
        symbol=payload["symbol"],
        mid=float(payload["mid"]),
        bids=_levels(payload.get("bids"), BookSide.BID),
        asks=_levels(payload.get("asks"), BookSide.ASK),
    )


# ---------------------------------------------------------------------------
# Order records
# ---------------------------------------------------------------------------


def derive_slippage_bps(side: Side, arrival_mid: float, exec_price: float) -> float:
    """Slippage vs arrival mid in bps, positive when the fill cost the trader."""
    if arrival_mid <= 0:
        raise PayloadError(f"Cannot derive slippage from arrival_mid={arrival_mid}")
    if side is Side.BUY:
        return (exec_price - arrival_mid) / arrival_mid * 10_000
    return (arrival_mid - exec_price) / arrival_mid * 10_000


def _execution(payload: dict, side: Side, status: OrderStatus) -> Execution:
    if status is OrderStatus.PENDING:
        return UNFILLED

    # Execution fields arrive nested, flattened onto the order, or split across both.
    nested = payload.get("execution") or {}
    raw = {**payload, **{key: value for key, value in nested.items() if value is not None}}
    exec_price = raw.get("exec_price")
    if exec_price is None:
        raise PayloadError(f"FILLED order {payload['order_id']} has no exec_price")

    exec_qty = raw.get("exec_qty")
    slippage = raw.get("slippage_bps")
    if slippage is None:
        arrival_mid = raw.get("arrival_mid")
        if arrival_mid is None:
            raise PayloadError(
                f"FILLED order {payload['order_id']} has neither slippage_bps nor arrival_mid"
            )
        slippage = derive_slippage_bps(side, float(arrival_mid), float(exec_price))

    exec_id = raw.get("exec_id")
    at = (
        parse_timestamp(raw.get("exec_created_at"))
        or parse_timestamp(payload.get("updated_at"))
        or parse_timestamp(payload.get("created_at"))
    )
    return Filled(
        price=float(exec_price),
        qty=float(exec_qty) if exec_qty is not None else float(payload["quantity"]),
        slippage_bps=float(slippage),
        at=at,
        exec_id=str(exec_id) if exec_id is not None else None,
    )


def _order_record(payload: dict) -> OrderRecord:
    side = Side(payload["side"])
    status = OrderStatus(payload["status"])
    return OrderRecord(
        order_id=str(payload["order_id"]),
        symbol=payload["symbol"],
        side=side,
        type=OrderType(payload["type"]),
        quantity=float(payload["quantity"]),
        status=status,
        execution=_execution(payload, side, status),
        limit_price=_opt_float(payload.get("limit_price")),
        arrival_mid=_opt_float(payload.get("arrival_mid")),
        created_at=parse_timestamp(payload.get("created_at")),
        updated_at=parse_timestamp(payload.get("updated_at")),
    )


def parse_order_record(payload: Any) -> OrderRecord:
    _validate(payload, schemas.ORDER_RECORD_SCHEMA, "order record")
    return _order_record(payload)


def parse_order_history(payload: Any) -> list[OrderRecord]:
    """Null history (new account) is an empty list, not an error."""
    _validate(payload, schemas.ORDER_HISTORY_SCHEMA, "order history")
    if payload is None:
        return []
    return [_order_record(item) for item in payload]


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def parse_symbol_stats(payload: Any) -> SymbolStats | None:
    """Venue stats, optionally wrapped as {"stats": {...}}. Null means none yet."""
    if isinstance(payload, dict) and "stats" in payload:
        payload = payload["stats"]
    if payload is None or payload == {}:
        return None
    _validate(payload, schemas.SYMBOL_STATS_SCHEMA, "analytics")
    return SymbolStats(
        symbol=payload["symbol"],
        trades=int(payload["trades"]),
        **{
            key: float(payload[key])
            for key in (
                "total_qty",
                "buy_qty",
                "sell_qty",
                "net_qty",
                "avg_exec_price",
                "avg_slippage_usd",
                "avg_slippage_bps",
            )
            if payload.get(key) is not None
        },
    )


def parse_dashboard_stats(payload: Any) -> DashboardStats:
    _validate(payload, schemas.DASHBOARD_STATS_SCHEMA, "dashboard stats")
    return DashboardStats(
        open_orders=int(payload["open_orders"]),
        portfolio_value=float(payload["portfolio_value"]),
    )
