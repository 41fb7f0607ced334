"""Tests for interval polling and subscription handles."""

import asyncio

import pytest

from polling import Subscription, run_every


def test_runs_immediately_then_repeats_until_cancelled() -> None:
    ticks: list[int] = []

    async def tick() -> None:
        ticks.append(1)

    async def scenario():
        sub = run_every(0.01, tick, name="test")
        await asyncio.sleep(0)
        assert len(ticks) == 1
        while len(ticks) < 3:
            await asyncio.sleep(0.005)
        sub.cancel()
        await sub.wait_closed()
        stopped_at = len(ticks)
        await asyncio.sleep(0.05)
        return sub, stopped_at

    sub, stopped_at = asyncio.run(scenario())
    assert len(ticks) == stopped_at
    assert not sub.active


def test_cancel_interrupts_awaiting_tick() -> None:
    cancelled: list[bool] = []

    async def slow_tick() -> None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    async def scenario():
        sub = run_every(60, slow_tick, name="slow")
        await asyncio.sleep(0)
        sub.cancel()
        await sub.wait_closed()

    asyncio.run(scenario())
    assert cancelled == [True]


def test_invalid_interval() -> None:
    async def tick() -> None:
        pass

    with pytest.raises(ValueError):
        run_every(0, tick, name="bad")


def test_cancel_is_idempotent() -> None:
    calls: list[int] = []
    sub = Subscription("listener", on_cancel=lambda: calls.append(1))
    assert sub.active
    sub.cancel()
    sub.cancel()
    assert calls == [1]
    assert not sub.active


def test_wait_closed_without_task() -> None:
    sub = Subscription("listener")
    asyncio.run(sub.wait_closed())


def test_run_every_calls_on_cancel_once() -> None:
    cancelled: list[int] = []

    async def tick() -> None:
        pass

    async def scenario():
        sub = run_every(0.01, tick, name="ticker", on_cancel=lambda: cancelled.append(1))
        sub.cancel()
        sub.cancel()
        await sub.wait_closed()

    asyncio.run(scenario())
    assert cancelled == [1]
