"""
Order book: polled per-symbol snapshot cache and depth-bar scaling for display.
"""

from orderbook.cache import BookState, BookView, OrderBookCache
from orderbook.depth import (
    DepthLadder,
    DepthRow,
    build_ladder,
    is_incomplete,
    level_widths,
    max_level_size,
)

__all__ = [
    "BookState",
    "BookView",
    "DepthLadder",
    "DepthRow",
    "OrderBookCache",
    "build_ladder",
    "is_incomplete",
    "level_widths",
    "max_level_size",
]
