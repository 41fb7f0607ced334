"""
Venue client: one async HTTP call per operation, uniform error shape.

Attaches the bearer token when a session exists, never retries, and never
lets an httpx exception escape: callers only ever see VenueError.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from venue.errors import PayloadError, ServerError, TransportError, VenueError
from venue.session import SessionProvider

logger = logging.getLogger("orderdesk.venue")

DEFAULT_BASE_URL = "http://localhost:8082/api"
DEFAULT_TIMEOUT_S = 10.0


def _server_message(response: httpx.Response) -> str | None:
    """Best-effort human message from an error body."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] or None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
        return None
    if isinstance(body, str) and body:
        return body
    return None


class VenueClient:
    """
    Thin async transport over the venue's REST API.

    The session provider is asked for the credential on every request, so a
    login or logout elsewhere takes effect on the next call.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session_provider: SessionProvider | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session_provider = session_provider
        self._timeout_s = float(timeout_s)
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=self._timeout_s,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> VenueClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _auth_headers(self) -> dict[str, str]:
        session = self._session_provider() if self._session_provider else None
        if session is None or not session.token:
            return {}
        return {"Authorization": f"Bearer {session.token}"}

    async def send(self, method: str, path: str, body: Any = None) -> Any:
        """Issue one request. Returns decoded JSON (None for an empty body)."""
        method = method.upper()
        try:
            request = self._http.build_request(method, path, json=body, headers=self._auth_headers())
        except (TypeError, ValueError) as exc:
            raise VenueError(f"Request body for {method} {path} is not valid JSON: {exc}", exc) from exc

        try:
            response = await self._http.send(request)
        except httpx.TimeoutException as exc:
            logger.debug("%s %s timed out after %.1fs", method, path, self._timeout_s)
            raise TransportError(
                f"Request timed out after {self._timeout_s:g}s: {method} {path}", exc
            ) from exc
        except httpx.HTTPError as exc:
            logger.debug("%s %s transport failure: %r", method, path, exc)
            raise TransportError(f"Transport failure on {method} {path}: {exc}", exc) from exc

        if not response.is_success:
            server_message = _server_message(response)
            message = server_message or f"HTTP {response.status_code} {method} {path}"
            logger.debug("%s %s -> %d %s", method, path, response.status_code, message)
            raise ServerError(message, status_code=response.status_code, server_message=server_message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PayloadError(f"Undecodable JSON from {method} {path}", exc) from exc

    # ---------------------------------------------------------------------
    # Endpoints
    # ---------------------------------------------------------------------

    async def get_order_book(self, symbol: str) -> Any:
        return await self.send("GET", f"/orderbook/{quote(symbol, safe='')}")

    async def submit_trade(self, payload: dict) -> Any:
        return await self.send("POST", "/trade/", payload)

    async def list_orders(self) -> Any:
        return await self.send("GET", "/me/orders")

    async def get_analytics(self) -> Any:
        return await self.send("GET", "/me/analytics")

    async def get_dashboard_stats(self) -> Any:
        return await self.send("GET", "/me/stats")
