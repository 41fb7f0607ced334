"""Tests for DashboardSummaryPoller: failures are logged and skipped, never raised."""

import asyncio

import httpx
import pytest

from account import DashboardSummaryPoller
from conftest import stats_payload


async def _until(predicate, timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout)


def test_poll_once(make_client) -> None:
    async def scenario():
        async with make_client(lambda r: httpx.Response(200, json=stats_payload(open_orders=4))) as client:
            poller = DashboardSummaryPoller(client)
            return poller, await poller.poll_once()

    poller, stats = asyncio.run(scenario())
    assert stats.open_orders == 4
    assert poller.latest is stats
    assert poller.ticks == 1
    assert poller.failures == 0


def test_failure_keeps_latest(make_client) -> None:
    responses = [
        httpx.Response(200, json=stats_payload(open_orders=1)),
        httpx.Response(500),
        httpx.Response(200, json={"open_orders": "many"}),
    ]

    async def scenario():
        async with make_client(lambda r: responses.pop(0)) as client:
            poller = DashboardSummaryPoller(client)
            await poller.poll_once()
            after_http_error = await poller.poll_once()
            after_bad_payload = await poller.poll_once()
            return poller, after_http_error, after_bad_payload

    poller, after_http_error, after_bad_payload = asyncio.run(scenario())
    assert after_http_error.open_orders == 1
    assert after_bad_payload.open_orders == 1
    assert poller.failures == 2
    assert poller.ticks == 3


def test_no_data_before_first_success(make_client) -> None:
    async def scenario():
        async with make_client(lambda r: httpx.Response(502)) as client:
            return await DashboardSummaryPoller(client).poll_once()

    assert asyncio.run(scenario()) is None


def test_loop_continues_after_failure(make_client) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=stats_payload(portfolio_value=42.0))

    async def scenario():
        async with make_client(handler) as client:
            poller = DashboardSummaryPoller(client, poll_interval_s=0.01)
            loop = poller.start()
            await _until(lambda: poller.latest is not None)
            assert loop.active
            await poller.aclose()
            assert not loop.active
            return poller

    poller = asyncio.run(scenario())
    assert poller.failures == 1
    assert poller.latest.portfolio_value == 42.0


def test_restart_replaces_loop(make_client) -> None:
    async def scenario():
        async with make_client(lambda r: httpx.Response(200, json=stats_payload())) as client:
            poller = DashboardSummaryPoller(client, poll_interval_s=60)
            first = poller.start()
            second = poller.start()
            assert not first.active
            assert second.active
            await poller.aclose()

    asyncio.run(scenario())


def test_invalid_interval() -> None:
    with pytest.raises(ValueError):
        DashboardSummaryPoller(object(), poll_interval_s=-1)
