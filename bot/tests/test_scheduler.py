from __future__ import annotations

import asyncio

import pytest

from services.scheduler import TaskScheduler


@pytest.mark.asyncio
async def test_callback_runs_after_sleep(clock) -> None:
    scheduler = TaskScheduler(sleep=clock.sleep)
    calls: list[str] = []

    async def callback() -> None:
        calls.append("fired")

    handle = scheduler.schedule(2.5, callback, name="demo")
    await asyncio.sleep(0)

    assert clock.sleeps == [2.5]
    assert handle.due_at > asyncio.get_running_loop().time()
    assert calls == []
    assert scheduler.pending == 1

    clock.advance()
    await handle.wait()

    assert calls == ["fired"]
    assert handle.done() is True
    assert scheduler.pending == 0


@pytest.mark.asyncio
async def test_failing_callback_is_logged(clock, caplog) -> None:
    scheduler = TaskScheduler(sleep=clock.sleep)

    async def callback() -> None:
        raise RuntimeError("nope")

    handle = scheduler.schedule(1, callback, name="broken")
    await asyncio.sleep(0)
    clock.advance()
    await handle.wait()

    assert handle.cancelled() is False
    assert "Scheduled task broken failed" in caplog.text


@pytest.mark.asyncio
async def test_cancel_all_stops_pending_tasks(clock) -> None:
    scheduler = TaskScheduler(sleep=clock.sleep)
    calls: list[int] = []

    async def callback() -> None:
        calls.append(1)

    handles = [scheduler.schedule(5, callback) for _ in range(3)]
    await asyncio.sleep(0)
    scheduler.cancel_all()
    for handle in handles:
        await handle.wait()

    assert all(handle.cancelled() for handle in handles)
    assert calls == []
    assert handles[0].cancel() is False


@pytest.mark.asyncio
async def test_done_callback_runs_for_fired_and_cancelled_tasks(clock) -> None:
    scheduler = TaskScheduler(sleep=clock.sleep)
    finished: list[str] = []

    async def callback() -> None:
        return None

    fired = scheduler.schedule(1, callback, name="fired")
    dropped = scheduler.schedule(1, callback, name="dropped")
    fired.add_done_callback(lambda handle: finished.append(handle.name))
    dropped.add_done_callback(lambda handle: finished.append(handle.name))
    await asyncio.sleep(0)

    dropped.cancel()
    await dropped.wait()
    clock.advance()
    await fired.wait()

    assert finished == ["dropped", "fired"]
