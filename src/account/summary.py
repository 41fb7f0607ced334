"""
Dashboard summary poller: open order count and portfolio value every 30s.

Lower priority than the order book and trade pipeline. A failed tick is
logged and skipped; it never surfaces an error and never stops the loop.
"""

from __future__ import annotations

import logging

from polling import Subscription, run_every
from venue.client import VenueClient
from venue.contracts import DashboardStats
from venue.payloads import parse_dashboard_stats

logger = logging.getLogger("orderdesk.account")

DEFAULT_POLL_INTERVAL_S = 30.0


class DashboardSummaryPoller:
    """Keeps the latest DashboardStats; one background loop at a time."""

    def __init__(
        self,
        client: VenueClient,
        *,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        if poll_interval_s <= 0:
            raise ValueError(f"poll_interval_s must be positive, got {poll_interval_s}")
        self._client = client
        self._interval_s = float(poll_interval_s)
        self._latest: DashboardStats | None = None
        self._loop: Subscription | None = None
        self._ticks = 0
        self._failures = 0

    @property
    def latest(self) -> DashboardStats | None:
        return self._latest

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def failures(self) -> int:
        return self._failures

    async def poll_once(self) -> DashboardStats | None:
        """One refresh. Returns the latest good stats; never raises."""
        self._ticks += 1
        try:
            stats = parse_dashboard_stats(await self._client.get_dashboard_stats())
        except Exception as exc:
            self._failures += 1
            logger.warning("Dashboard stats refresh failed (tick %d): %s", self._ticks, exc)
            return self._latest
        self._latest = stats
        return stats

    def start(self) -> Subscription:
        """Poll now and every interval. Restarting replaces the running loop."""
        self.stop()
        self._loop = run_every(self._interval_s, self._tick, name="dashboard-summary")
        return self._loop

    async def _tick(self) -> None:
        await self.poll_once()

    def stop(self) -> None:
        if self._loop is not None:
            self._loop.cancel()
        self._loop = None

    async def aclose(self) -> None:
        loop = self._loop
        self.stop()
        if loop is not None:
            await loop.wait_closed()
