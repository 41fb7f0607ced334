"""
Execution analytics: fill rate, slippage and trend series under the filled-only rule.
"""

from analytics.aggregator import AnalyticsAggregator, AnalyticsView
from analytics.metrics import (
    DEFAULT_TREND_WINDOW,
    SlippagePoint,
    TradeStats,
    compute_trade_stats,
    distinct_symbols,
    filter_by_symbol,
    side_counts,
    slippage_series,
)

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsView",
    "DEFAULT_TREND_WINDOW",
    "SlippagePoint",
    "TradeStats",
    "compute_trade_stats",
    "distinct_symbols",
    "filter_by_symbol",
    "side_counts",
    "slippage_series",
]
