"""Background refresh primitives shared by the order book cache and summary poller."""

from polling.interval import Subscription, run_every

__all__ = ["Subscription", "run_every"]
