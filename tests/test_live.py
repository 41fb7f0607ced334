"""Tests for the live watch loop (in-memory venue, sub-second intervals)."""

import asyncio
import io
import json

import httpx
import pytest

from cli.live import WatchState, run_watch
from cli.structured_log import StructuredEventLogger
from config import AppConfig, PollingConfig
from conftest import book_payload, route, stats_payload


@pytest.fixture
def fast_cfg() -> AppConfig:
    return AppConfig(polling=PollingConfig(orderbook_interval_s=0.01, dashboard_interval_s=0.01))


def test_watch_prints_each_refresh(make_client, fast_cfg: AppConfig, capsys: pytest.CaptureFixture) -> None:
    buf = io.StringIO()
    events = StructuredEventLogger("BTC-USD", stream=buf)
    handler = route({
        "GET /orderbook/BTC-USD": book_payload(),
        "GET /me/stats": stats_payload(open_orders=2),
    })

    async def scenario():
        async with make_client(handler) as client:
            return await run_watch(fast_cfg, "BTC-USD", client=client, events=events, max_refreshes=2)

    refreshes = asyncio.run(scenario())
    out = capsys.readouterr().out
    assert refreshes == 2
    assert out.count("=== Order Book: BTC-USD ===") == 2
    lines = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert [r["event"] for r in lines] == ["book_refreshed", "book_refreshed"]
    assert lines[0]["incomplete"] is False


def test_watch_reports_failed_refresh(make_client, fast_cfg: AppConfig, capsys: pytest.CaptureFixture) -> None:
    buf = io.StringIO()
    events = StructuredEventLogger("BTC-USD", stream=buf)
    calls: list[int] = []

    def book(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            return httpx.Response(503, json={"message": "rate limited"})
        return httpx.Response(200, json=book_payload())

    handler = route({"GET /orderbook/BTC-USD": book, "GET /me/stats": httpx.Response(500)})
    state = WatchState()

    async def scenario():
        async with make_client(handler) as client:
            return await run_watch(fast_cfg, "BTC-USD", client=client, events=events, max_refreshes=1, state=state)

    refreshes = asyncio.run(scenario())
    out = capsys.readouterr().out
    assert refreshes == 1
    assert state.failures == 1
    assert "[BTC-USD] refresh failed: rate limited" in out
    assert "Dashboard    : no data yet" in out
    events_seen = [json.loads(line)["event"] for line in buf.getvalue().splitlines()]
    assert events_seen == ["error", "book_refreshed"]
