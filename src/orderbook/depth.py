"""
Depth-bar scaling for order book display.

Widths are level size relative to the largest size across both sides, as a
percentage. An empty or all-zero book scales every width to 0 instead of
dividing by zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from venue.contracts import OrderBookSnapshot, OrderLevel


def is_incomplete(snapshot: OrderBookSnapshot) -> bool:
    """True when either side has no levels."""
    return not snapshot.bids or not snapshot.asks


def max_level_size(bids: Sequence[OrderLevel], asks: Sequence[OrderLevel]) -> float:
    """Largest positive size across both sides; 0.0 when there is none."""
    sizes = [level.size for level in (*bids, *asks) if level.size > 0]
    return max(sizes, default=0.0)


def level_widths(levels: Sequence[OrderLevel], max_size: float) -> list[float]:
    """Width percentage (0-100) per level."""
    if max_size <= 0:
        return [0.0 for _ in levels]
    return [max(level.size, 0.0) / max_size * 100 for level in levels]


@dataclass(frozen=True)
class DepthRow:
    price: float
    size: float
    width_pct: float


@dataclass(frozen=True)
class DepthLadder:
    symbol: str
    mid: float
    bids: tuple[DepthRow, ...]
    asks: tuple[DepthRow, ...]
    spread: float | None
    incomplete: bool
    crossed: bool


def build_ladder(snapshot: OrderBookSnapshot) -> DepthLadder:
    max_size = max_level_size(snapshot.bids, snapshot.asks)

    def _rows(levels: Sequence[OrderLevel]) -> tuple[DepthRow, ...]:
        widths = level_widths(levels, max_size)
        return tuple(
            DepthRow(price=level.price, size=level.size, width_pct=width)
            for level, width in zip(levels, widths)
        )

    return DepthLadder(
        symbol=snapshot.symbol,
        mid=snapshot.mid,
        bids=_rows(snapshot.bids),
        asks=_rows(snapshot.asks),
        spread=snapshot.spread,
        incomplete=is_incomplete(snapshot),
        crossed=snapshot.is_crossed(),
    )
