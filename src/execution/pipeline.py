"""
Order submission: validate locally, send once, reflect exactly what the venue returned.

The venue answers synchronously with the final record (FILLED or still
PENDING); there is no confirm round trip and no optimistic fill. A failed
submission is raised to the caller and never retried here, so a trade
instruction is never duplicated silently.
"""

from __future__ import annotations

import logging
import math

from venue.client import VenueClient
from venue.contracts import OrderRecord, OrderType, Side, TradeRequest
from venue.errors import PayloadError, ServerError, SubmitError, ValidationError, VenueError
from venue.payloads import parse_order_record

logger = logging.getLogger("orderdesk.execution")

GENERIC_SUBMIT_ERROR = "Trade submission failed"
UNREADABLE_CONFIRMATION = (
    "Venue accepted the order but returned an unreadable confirmation; "
    "check order history before resubmitting"
)


def validate_trade_request(request: TradeRequest) -> None:
    """Raise ValidationError if *request* must not be sent."""
    if not request.symbol or not request.symbol.strip():
        raise ValidationError("Symbol is required")
    try:
        Side(request.side)
    except ValueError:
        raise ValidationError(f"Unknown side {request.side!r}; expected BUY or SELL") from None
    try:
        order_type = OrderType(request.type)
    except ValueError:
        raise ValidationError(f"Unknown order type {request.type!r}; expected MARKET or LIMIT") from None
    if request.quantity is None or not request.quantity > 0:
        raise ValidationError(f"Quantity must be greater than 0, got {request.quantity}")
    if not math.isfinite(request.quantity):
        raise ValidationError(f"Quantity must be a finite number, got {request.quantity}")
    if order_type is OrderType.LIMIT:
        if request.limit_price is None:
            raise ValidationError("Limit price is required for LIMIT orders")
        if not request.limit_price > 0:
            raise ValidationError(f"Limit price must be greater than 0, got {request.limit_price}")
        if not math.isfinite(request.limit_price):
            raise ValidationError(f"Limit price must be a finite number, got {request.limit_price}")


def estimated_total(price: float, quantity: float | None) -> float:
    """Notional preview for the trade form: price * quantity."""
    if not quantity or quantity <= 0:
        return 0.0
    return price * quantity


class OrderSubmitter:
    """Submits TradeRequests and keeps the last confirmation and last error."""

    def __init__(self, client: VenueClient) -> None:
        self._client = client
        self._last_order: OrderRecord | None = None
        self._last_error: str | None = None

    @property
    def last_order(self) -> OrderRecord | None:
        return self._last_order

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def clear_error(self) -> None:
        self._last_error = None

    async def submit(self, request: TradeRequest) -> OrderRecord:
        """
        Validate and send *request*.

        Raises ValidationError before any network call, or SubmitError when
        the venue call fails. Returns the record exactly as the venue
        reported it.
        """
        self._last_error = None
        try:
            validate_trade_request(request)
        except ValidationError as exc:
            self._last_error = str(exc)
            raise

        try:
            payload = await self._client.submit_trade(request.to_payload())
            record = parse_order_record(payload)
        except VenueError as exc:
            if isinstance(exc, PayloadError):
                message = UNREADABLE_CONFIRMATION
            elif isinstance(exc, ServerError) and exc.server_message:
                message = exc.server_message
            else:
                message = GENERIC_SUBMIT_ERROR
            self._last_error = message
            logger.warning(
                "Submission failed: %s %s %s x %s: %s",
                request.symbol, Side(request.side).value, OrderType(request.type).value,
                request.quantity, message,
            )
            raise SubmitError(message, exc) from exc

        self._last_order = record
        logger.info(
            "Order %s %s %s %s x %s -> %s",
            record.order_id, record.symbol, record.side.value, record.type.value,
            record.quantity, record.status.value,
        )
        return record
