"""
Data contracts for the trading core: order book, trade request, order record, stats.

The venue is the source of truth for every record here. These are plain,
immutable dataclasses; parsing from JSON lives in venue.payloads.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Sequence, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BookSide(str, Enum):
    """Side of an order book level."""

    BID = "BID"
    ASK = "ASK"


class Side(str, Enum):
    """Direction of a trade request."""

    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class OrderStatus(str, Enum):
    """Order lifecycle. PENDING transitions to FILLED exactly once."""

    PENDING = "PENDING"
    FILLED = "FILLED"


# ---------------------------------------------------------------------------
# Order book
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLevel:
    """One price/size pair on one side of the book."""

    side: BookSide
    price: float
    size: float


@dataclass(frozen=True)
class OrderBookSnapshot:
    """Full book for one symbol. Bids descending by price, asks ascending."""

    symbol: str
    mid: float
    bids: Sequence[OrderLevel] = ()
    asks: Sequence[OrderLevel] = ()

    @property
    def best_bid(self) -> OrderLevel | None:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> OrderLevel | None:
        return self.asks[0] if self.asks else None

    @property
    def spread(self) -> float | None:
        """Best ask minus best bid; None unless both sides have levels."""
        if not self.bids or not self.asks:
            return None
        return self.asks[0].price - self.bids[0].price

    def is_crossed(self) -> bool:
        """Best ask below best bid. A display anomaly, not an error."""
        spread = self.spread
        return spread is not None and spread < 0


# ---------------------------------------------------------------------------
# Trade request
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TradeRequest:
    """Caller-built order instruction; consumed once by the submission pipeline."""

    symbol: str
    side: Side
    type: OrderType
    quantity: float
    limit_price: float | None = None

    def to_payload(self) -> dict:
        payload = {
            "symbol": self.symbol,
            "side": Side(self.side).value,
            "type": OrderType(self.type).value,
            "quantity": self.quantity,
        }
        if OrderType(self.type) is OrderType.LIMIT:
            payload["limit_price"] = self.limit_price
        return payload


# ---------------------------------------------------------------------------
# Order record (server-authoritative)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Unfilled:
    """No execution yet. Carries no price, quantity or slippage at all."""


@dataclass(frozen=True)
class Filled:
    """Execution data, present only once the venue reports the order FILLED."""

    price: float
    qty: float
    slippage_bps: float
    at: datetime | None = None
    exec_id: str | None = None


Execution = Union[Unfilled, Filled]

UNFILLED = Unfilled()


@dataclass(frozen=True)
class OrderRecord:
    order_id: str
    symbol: str
    side: Side
    type: OrderType
    quantity: float
    status: OrderStatus
    execution: Execution = UNFILLED
    limit_price: float | None = None
    arrival_mid: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_filled(self) -> bool:
        return isinstance(self.execution, Filled)

    @property
    def fill(self) -> Filled | None:
        """Execution data if FILLED, else None."""
        return self.execution if isinstance(self.execution, Filled) else None


# ---------------------------------------------------------------------------
# Venue-computed aggregates (read-only)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SymbolStats:
    symbol: str
    trades: int
    total_qty: float = 0.0
    buy_qty: float = 0.0
    sell_qty: float = 0.0
    net_qty: float = 0.0
    avg_exec_price: float = 0.0
    avg_slippage_usd: float = 0.0
    avg_slippage_bps: float = 0.0


@dataclass(frozen=True)
class DashboardStats:
    open_orders: int
    portfolio_value: float
