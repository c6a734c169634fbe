"""Tests for the countdown timer and virtual-time scheduler."""

import asyncio

from assessment.timer import AsyncioScheduler, CountdownTimer, ManualScheduler


class TestManualScheduler:
    def test_advance_fires_in_time_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_every(2.0, lambda: calls.append(("slow", scheduler.now())))
        scheduler.call_every(1.0, lambda: calls.append(("fast", scheduler.now())))

        scheduler.advance(2.0)

        assert calls == [("fast", 1.0), ("slow", 2.0), ("fast", 2.0)]
        assert scheduler.now() == 2.0

    def test_cancelled_jobs_do_not_fire(self):
        scheduler = ManualScheduler()
        calls = []
        job = scheduler.call_every(1.0, lambda: calls.append(1))
        job.cancel()

        scheduler.advance(5)

        assert calls == []
        assert scheduler.pending == 0


class TestCountdownTimer:
    def test_ticks_down_and_expires_once(self):
        scheduler = ManualScheduler()
        ticks, expired = [], []
        timer = CountdownTimer(scheduler, 3)
        timer.start(ticks.append, lambda: expired.append(True))

        scheduler.advance(1)
        assert ticks == [2]
        assert timer.running

        scheduler.advance(10)
        assert ticks == [2, 1, 0]
        assert expired == [True]
        assert not timer.running
        assert scheduler.pending == 0

    def test_stop_is_idempotent_and_cancels(self):
        scheduler = ManualScheduler()
        timer = CountdownTimer(scheduler, 10)
        timer.start()

        timer.stop()
        timer.stop()
        scheduler.advance(20)

        assert timer.remaining == 10
        assert scheduler.pending == 0

    def test_zero_seconds_expires_immediately(self):
        scheduler = ManualScheduler()
        expired = []
        timer = CountdownTimer(scheduler, 0)

        timer.start(on_expire=lambda: expired.append(True))

        assert expired == [True]
        assert scheduler.pending == 0

    def test_restart_does_not_leak_handles(self):
        scheduler = ManualScheduler()
        timer = CountdownTimer(scheduler, 10)
        timer.start()
        timer.start()

        assert scheduler.pending == 1

    def test_stop_from_tick_prevents_expiry(self):
        scheduler = ManualScheduler()
        expired = []
        timer = CountdownTimer(scheduler, 1)
        timer.start(lambda remaining: timer.stop(), lambda: expired.append(True))

        scheduler.advance(5)

        assert expired == []


class TestAsyncioScheduler:
    def test_repeats_on_running_loop(self):
        async def run():
            scheduler = AsyncioScheduler()
            calls = []
            handle = scheduler.call_every(0.01, lambda: calls.append(1))
            await asyncio.sleep(0.1)
            handle.cancel()
            count = len(calls)
            await asyncio.sleep(0.03)
            return count, len(calls)

        count, later = asyncio.run(run())

        assert count >= 2
        assert later == count
