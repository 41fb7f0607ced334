"""
Venue access: async HTTP client, session slot, payload contracts, error taxonomy.

Everything else in the trading core talks to the venue through VenueClient
and receives contracts parsed by venue.payloads.
"""

from venue.client import VenueClient
from venue.contracts import (
    BookSide,
    DashboardStats,
    Filled,
    OrderBookSnapshot,
    OrderLevel,
    OrderRecord,
    OrderStatus,
    OrderType,
    Side,
    SymbolStats,
    TradeRequest,
    Unfilled,
)
from venue.errors import (
    PayloadError,
    ServerError,
    SubmitError,
    TradingError,
    TransportError,
    ValidationError,
    VenueError,
)
from venue.session import Session, SessionSlot

__all__ = [
    "BookSide",
    "DashboardStats",
    "Filled",
    "OrderBookSnapshot",
    "OrderLevel",
    "OrderRecord",
    "OrderStatus",
    "OrderType",
    "PayloadError",
    "ServerError",
    "Session",
    "SessionSlot",
    "Side",
    "SubmitError",
    "SymbolStats",
    "TradeRequest",
    "TradingError",
    "TransportError",
    "Unfilled",
    "ValidationError",
    "VenueClient",
    "VenueError",
]
