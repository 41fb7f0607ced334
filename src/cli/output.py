"""
Human-readable terminal output for order books, orders and analytics.

Every CLI command renders through these formatters. They only read the
core's immutable views and never compute trading semantics of their own.
"""

from __future__ import annotations

from analytics.aggregator import AnalyticsView
from orderbook.cache import BookView
from orderbook.depth import DepthRow, build_ladder
from venue.contracts import DashboardStats, OrderRecord, SymbolStats

BAR_WIDTH = 20


def _bar(width_pct: float) -> str:
    return "#" * int(round(width_pct / 100 * BAR_WIDTH))


def _fmt_row(row: DepthRow) -> str:
    return f"  {row.price:>12,.2f}  {row.size:>12.4f}  {_bar(row.width_pct)}"


def format_order_book(view: BookView) -> str:
    """Ladder with depth bars, or the reason there is nothing to draw."""
    if view.snapshot is None:
        if view.error:
            return f"Order book {view.symbol}: unavailable ({view.error})"
        return f"Order book {view.symbol}: no data available"

    ladder = build_ladder(view.snapshot)
    lines = [f"=== Order Book: {ladder.symbol} ===", f"Mid price    : ${ladder.mid:,.2f}"]
    if view.stale:
        lines.append(f"Stale        : last refresh failed ({view.error})")
    if ladder.incomplete:
        lines.append("Order book data is incomplete")
        lines.append("===")
        return "\n".join(lines)

    lines.append("Asks (sell orders):")
    lines.extend(_fmt_row(row) for row in reversed(ladder.asks))
    lines.append("Bids (buy orders):")
    lines.extend(_fmt_row(row) for row in ladder.bids)
    if ladder.spread is not None:
        lines.append(f"Spread       : ${ladder.spread:,.2f}" + ("  (crossed)" if ladder.crossed else ""))
    lines.append("===")
    return "\n".join(lines)


def format_order_record(record: OrderRecord) -> str:
    lines = [
        f"=== Order {record.order_id} ===",
        f"Instrument   : {record.symbol}",
        f"Side / type  : {record.side.value} {record.type.value}",
        f"Quantity     : {record.quantity:.4f}",
    ]
    if record.limit_price is not None:
        lines.append(f"Limit price  : ${record.limit_price:,.2f}")
    if record.arrival_mid is not None:
        lines.append(f"Arrival mid  : ${record.arrival_mid:,.2f}")
    lines.append(f"Status       : {record.status.value}")
    fill = record.fill
    if fill is not None:
        lines.append(f"Exec price   : ${fill.price:,.2f}")
        lines.append(f"Exec qty     : {fill.qty:.4f}")
        lines.append(f"Slippage     : {fill.slippage_bps:.2f} bps")
        if fill.at is not None:
            lines.append(f"Executed at  : {fill.at.isoformat()}")
    else:
        lines.append("Execution    : awaiting fill")
    lines.append("===")
    return "\n".join(lines)


def _format_venue_stats(stats: SymbolStats) -> list[str]:
    return [
        f"Venue stats  : {stats.symbol} | {stats.trades} trades | net qty {stats.net_qty:.4f}",
        f"               avg exec ${stats.avg_exec_price:,.2f} | avg slippage "
        f"{stats.avg_slippage_bps:.2f} bps (${stats.avg_slippage_usd:,.2f})",
    ]


def format_analytics(view: AnalyticsView) -> str:
    stats = view.stats
    scope = view.selected_symbol or "All"
    lines = [f"=== Analytics: {scope} ==="]
    if view.error:
        lines.append(f"Error        : {view.error}")
    if stats.total_trades == 0:
        lines.append("No trades yet. Start trading to see analytics!")
    if len(view.symbols) > 1:
        lines.append(f"Symbols      : {', '.join(view.symbols)}")
    lines.extend([
        f"Total trades : {stats.total_trades} (buy {stats.buy_trades} / sell {stats.sell_trades})",
        f"Fill rate    : {stats.fill_rate_display}%",
        f"Total qty    : {stats.total_quantity_display}",
        f"Avg slippage : {stats.avg_slippage_display} bps",
    ])
    if view.venue_stats is not None:
        lines.extend(_format_venue_stats(view.venue_stats))
    if view.slippage_series:
        lines.append(f"Slippage trend (last {len(view.slippage_series)} fills):")
        for point in view.slippage_series:
            when = point.at.date().isoformat() if point.at else "-"
            lines.append(f"  {when}  {point.symbol:<10} {point.slippage_bps:>8.2f} bps")
    lines.append("===")
    return "\n".join(lines)


def format_dashboard_stats(stats: DashboardStats | None) -> str:
    if stats is None:
        return "Dashboard    : no data yet"
    return (
        f"Open orders  : {stats.open_orders}  |  "
        f"Portfolio value: ${stats.portfolio_value:,.2f}"
    )
