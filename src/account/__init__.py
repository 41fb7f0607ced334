"""Account-level summaries for the trading dashboard."""

from account.summary import DashboardSummaryPoller

__all__ = ["DashboardSummaryPoller"]
