"""
Structured JSON event logger.

Emits one JSON object per line to stderr, for log aggregators.

Optional webhook: when configured, trade-level events (order_submitted,
order_rejected, submit_failed, error) are POSTed to the URL.
"""

from __future__ import annotations

import json
import logging
import sys
import urllib.request
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger("orderdesk.events")


class StructuredEventLogger:
    """Emit structured JSON events to stderr and optional webhook."""

    def __init__(
        self,
        symbol: str,
        *,
        enabled: bool = True,
        webhook_url: str = "",
        stream: Any = None,
    ) -> None:
        self._symbol = symbol
        self._enabled = enabled
        self._webhook_url = webhook_url.strip()
        self._stream = stream or sys.stderr
        self._ALERT_EVENTS = {
            "order_submitted",
            "order_rejected",
            "submit_failed",
            "error",
        }

    def _emit(self, event_type: str, **fields: Any) -> dict:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event_type,
            "symbol": self._symbol,
            **fields,
        }
        if self._enabled:
            self._stream.write(json.dumps(record) + "\n")
            self._stream.flush()

        if self._webhook_url and event_type in self._ALERT_EVENTS:
            self._post_webhook(record)

        return record

    def _post_webhook(self, record: dict) -> None:
        try:
            data = json.dumps(record).encode("utf-8")
            req = urllib.request.Request(
                self._webhook_url,
                data=data,
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            urllib.request.urlopen(req, timeout=5)
        except Exception as exc:
            logger.warning("Webhook POST failed: %s", exc)

    def book_refreshed(self, mid: float, bids: int, asks: int, incomplete: bool) -> dict:
        return self._emit(
            "book_refreshed",
            mid=mid,
            bids=bids,
            asks=asks,
            incomplete=incomplete,
        )

    def book_stale(self, error: str) -> dict:
        return self._emit("book_stale", error=error)

    def order_submitted(
        self,
        order_id: str,
        side: str,
        order_type: str,
        qty: float,
        status: str,
        slippage_bps: float | None = None,
    ) -> dict:
        return self._emit(
            "order_submitted",
            order_id=order_id,
            side=side,
            type=order_type,
            qty=qty,
            status=status,
            slippage_bps=slippage_bps,
        )

    def order_rejected(self, reason: str) -> dict:
        return self._emit("order_rejected", reason=reason)

    def submit_failed(self, message: str) -> dict:
        return self._emit("submit_failed", message=message)

    def error(self, message: str, detail: str = "") -> dict:
        return self._emit("error", message=message, detail=detail)

    def shutdown(self, refreshes: int) -> dict:
        return self._emit("shutdown", refreshes=refreshes)
