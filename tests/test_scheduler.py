"""Tests for delayed action scheduling."""

import asyncio

import pytest

from automator.engine.clock import ManualClock
from automator.engine.scheduler import DelayedActionScheduler


class Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def job(self, name: str):
        async def run() -> None:
            self.calls.append(name)

        return run


@pytest.mark.asyncio
async def test_action_fires_only_after_delay(
    scheduler: DelayedActionScheduler,
    clock: ManualClock,
) -> None:
    recorder = Recorder()
    scheduler.schedule(300, recorder.job("a"))

    clock.advance(299)
    assert await scheduler.run_due() == 0
    assert recorder.calls == []

    clock.advance(1)
    assert await scheduler.run_due() == 1
    assert recorder.calls == ["a"]
    assert scheduler.pending() == []


@pytest.mark.asyncio
async def test_due_actions_fire_in_time_order(
    scheduler: DelayedActionScheduler,
    clock: ManualClock,
) -> None:
    recorder = Recorder()
    scheduler.schedule(120, recorder.job("late"))
    scheduler.schedule(60, recorder.job("early"))
    scheduler.schedule(600, recorder.job("much later"))

    assert scheduler.next_fire_at() == 60

    clock.advance(200)
    assert await scheduler.run_due() == 2
    assert recorder.calls == ["early", "late"]
    assert len(scheduler.pending()) == 1


@pytest.mark.asyncio
async def test_cancelled_action_never_fires(
    scheduler: DelayedActionScheduler,
    clock: ManualClock,
) -> None:
    recorder = Recorder()
    keep = scheduler.schedule(60, recorder.job("keep"), label="keep")
    drop = scheduler.schedule(30, recorder.job("drop"), label="drop")

    assert scheduler.cancel(drop.action_id) is True
    assert scheduler.cancel(drop.action_id) is False
    assert scheduler.next_fire_at() == keep.fire_at

    clock.advance(60)
    await scheduler.run_due()

    assert recorder.calls == ["keep"]


@pytest.mark.asyncio
async def test_cancel_all(scheduler: DelayedActionScheduler, clock: ManualClock) -> None:
    recorder = Recorder()
    scheduler.schedule(10, recorder.job("a"))
    scheduler.schedule(20, recorder.job("b"))

    assert scheduler.cancel_all() == 2

    clock.advance(100)
    assert await scheduler.run_due() == 0
    assert recorder.calls == []
    assert scheduler.next_fire_at() is None


@pytest.mark.asyncio
async def test_failing_action_does_not_stop_others(
    scheduler: DelayedActionScheduler,
    clock: ManualClock,
) -> None:
    recorder = Recorder()

    async def boom() -> None:
        raise RuntimeError("boom")

    scheduler.schedule(10, boom, label="boom")
    scheduler.schedule(10, recorder.job("ok"))

    clock.advance(10)
    assert await scheduler.run_due() == 2
    assert recorder.calls == ["ok"]


def test_negative_delay_is_rejected(scheduler: DelayedActionScheduler) -> None:
    async def noop() -> None:
        return None

    with pytest.raises(ValueError):
        scheduler.schedule(-1, noop)


@pytest.mark.asyncio
async def test_background_loop_runs_due_actions() -> None:
    scheduler = DelayedActionScheduler()
    fired = asyncio.Event()

    async def job() -> None:
        fired.set()

    scheduler.start()
    try:
        scheduler.schedule(0.01, job)
        await asyncio.wait_for(fired.wait(), timeout=2)
    finally:
        await scheduler.stop()

    assert not scheduler.running


@pytest.mark.asyncio
async def test_stop_cancels_pending_actions() -> None:
    scheduler = DelayedActionScheduler()
    recorder = Recorder()

    scheduler.start()
    scheduler.schedule(3600, recorder.job("never"))
    await scheduler.stop()

    assert scheduler.pending() == []
    assert recorder.calls == []
