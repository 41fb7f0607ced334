"""
Interval polling on the running asyncio loop.

run_every() owns one background task; the returned Subscription is the only
way to stop it. Cancelling also cancels whatever request the tick is awaiting.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger("orderdesk.polling")

Tick = Callable[[], Awaitable[None]]


class Subscription:
    """Handle for a background task or a callback registration."""

    def __init__(
        self,
        name: str,
        *,
        task: asyncio.Task | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self.name = name
        self._task = task
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def active(self) -> bool:
        if self._cancelled:
            return False
        return self._task is None or not self._task.done()

    def cancel(self) -> None:
        """Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self._on_cancel is not None:
            self._on_cancel()
        logger.debug("Subscription %s cancelled", self.name)

    async def wait_closed(self) -> None:
        """Wait until the underlying task has finished unwinding."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass


def run_every(
    interval_s: float,
    tick: Tick,
    *,
    name: str,
    on_cancel: Callable[[], None] | None = None,
) -> Subscription:
    """
    Run *tick* now, then every *interval_s* seconds, until cancelled.

    Must be called with a running event loop. Exceptions from *tick* end
    the loop, so ticks that must survive failures catch their own errors.
    """
    if interval_s <= 0:
        raise ValueError(f"interval_s must be positive, got {interval_s}")

    async def _loop() -> None:
        while True:
            await tick()
            await asyncio.sleep(interval_s)

    task = asyncio.get_running_loop().create_task(_loop(), name=name)
    return Subscription(name, task=task, on_cancel=on_cancel)
