"""
Derived execution analytics over a set of OrderRecords.

Filled-only rule: a PENDING record counts toward total/buy/sell counts and the
fill-rate denominator, and toward nothing else. Executed quantity, slippage
averages and the slippage trend are computed over FILLED records only, selected
by execution type. A PENDING record's missing slippage is never read as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from venue.contracts import Filled, OrderRecord, Side

DEFAULT_TREND_WINDOW = 20

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TradeStats:
    total_trades: int = 0
    filled_trades: int = 0
    buy_trades: int = 0
    sell_trades: int = 0
    total_quantity: float = 0.0
    fill_rate: float = 0.0
    avg_slippage_bps: float = 0.0

    @property
    def pending_trades(self) -> int:
        return self.total_trades - self.filled_trades

    @property
    def fill_rate_display(self) -> str:
        """Fill rate with one decimal, e.g. "66.7"; plain "0" with no trades."""
        if self.total_trades == 0:
            return "0"
        return f"{self.fill_rate:.1f}"

    @property
    def avg_slippage_display(self) -> str:
        """Average slippage with two decimals, e.g. "5.00"; plain "0" with no fills."""
        if self.filled_trades == 0:
            return "0"
        return f"{self.avg_slippage_bps:.2f}"

    @property
    def total_quantity_display(self) -> str:
        return f"{self.total_quantity:.4f}"


EMPTY_STATS = TradeStats()


@dataclass(frozen=True)
class SlippagePoint:
    order_id: str
    symbol: str
    at: datetime | None
    slippage_bps: float


def filled_executions(records: Iterable[OrderRecord]) -> list[tuple[OrderRecord, Filled]]:
    """(record, execution) pairs for FILLED records, input order preserved."""
    return [(r, r.execution) for r in records if isinstance(r.execution, Filled)]


def filter_by_symbol(records: Sequence[OrderRecord], symbol: str | None) -> list[OrderRecord]:
    """Narrow to one symbol; None keeps every record."""
    if symbol is None:
        return list(records)
    return [r for r in records if r.symbol == symbol]


def distinct_symbols(records: Iterable[OrderRecord]) -> list[str]:
    """Symbols in order of first appearance."""
    return list(dict.fromkeys(r.symbol for r in records))


def side_counts(records: Iterable[OrderRecord]) -> dict[str, int]:
    counts = {Side.BUY.value: 0, Side.SELL.value: 0}
    for r in records:
        counts[Side(r.side).value] += 1
    return counts


def compute_trade_stats(records: Sequence[OrderRecord]) -> TradeStats:
    total = len(records)
    if total == 0:
        return EMPTY_STATS

    fills = [execution for _, execution in filled_executions(records)]
    filled = len(fills)
    sides = side_counts(records)
    return TradeStats(
        total_trades=total,
        filled_trades=filled,
        buy_trades=sides[Side.BUY.value],
        sell_trades=sides[Side.SELL.value],
        total_quantity=sum(f.qty for f in fills),
        fill_rate=filled / total * 100,
        avg_slippage_bps=sum(f.slippage_bps for f in fills) / filled if filled else 0.0,
    )


def slippage_series(
    records: Sequence[OrderRecord],
    limit: int = DEFAULT_TREND_WINDOW,
) -> list[SlippagePoint]:
    """
    Most recent *limit* FILLED records, oldest first.

    PENDING records are dropped before windowing, so a pending backlog never
    pushes real fills out of the window.
    """
    if limit < 1:
        return []
    fills = filled_executions(records)
    # Stable sort: records without an execution time keep their relative order.
    fills.sort(key=lambda pair: pair[1].at or _EPOCH)
    return [
        SlippagePoint(
            order_id=record.order_id,
            symbol=record.symbol,
            at=execution.at,
            slippage_bps=execution.slippage_bps,
        )
        for record, execution in fills[-limit:]
    ]
