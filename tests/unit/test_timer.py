# tests/unit/test_timer.py
import asyncio

import pytest

from intraday_engine.lifecycle import PeriodicTimer


@pytest.mark.asyncio
async def test_timer_fires_repeatedly():
    calls = []

    async def tick():
        calls.append(1)

    timer = PeriodicTimer(0.01, tick)
    timer.start()
    await asyncio.sleep(0.1)
    await timer.stop()

    assert len(calls) >= 3


@pytest.mark.asyncio
async def test_no_callbacks_after_stop():
    calls = []

    async def tick():
        calls.append(1)

    timer = PeriodicTimer(0.01, tick)
    timer.start()
    await asyncio.sleep(0.025)
    await timer.stop()
    seen = len(calls)

    await asyncio.sleep(0.05)

    assert len(calls) == seen
    assert not timer.is_running


@pytest.mark.asyncio
async def test_cancel_before_first_interval():
    calls = []

    async def tick():
        calls.append(1)

    timer = PeriodicTimer(0.02, tick)
    timer.start()
    timer.cancel()
    await asyncio.sleep(0.05)

    assert calls == []


@pytest.mark.asyncio
async def test_callback_errors_do_not_stop_timer():
    calls = []

    async def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    timer = PeriodicTimer(0.01, flaky)
    timer.start()
    await asyncio.sleep(0.1)
    await timer.stop()

    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_cancelled_timer_cannot_restart():
    async def tick():
        pass

    timer = PeriodicTimer(1, tick)
    timer.cancel()
    with pytest.raises(RuntimeError):
        timer.start()


def test_interval_must_be_positive():
    async def tick():
        pass

    with pytest.raises(ValueError):
        PeriodicTimer(0, tick)
