"""Tests for the session timer and tick scheduler."""

from __future__ import annotations

import asyncio

import pytest

from focusgarden.codec import PersistenceCodec
from focusgarden.scheduler import TickScheduler
from focusgarden.store import MemoryStore
from focusgarden.timer import SessionTimer, format_clock

T = 1_800_000_000_000


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def completions() -> list[int]:
    return []


@pytest.fixture()
def timer(store, completions) -> SessionTimer:
    async def on_complete() -> None:
        completions.append(1)

    return SessionTimer(PersistenceCodec(store), on_complete=on_complete, clock=lambda: T)


class TestFormatClock:
    def test_format(self) -> None:
        assert format_clock(1500) == "25:00"
        assert format_clock(65) == "01:05"
        assert format_clock(0) == "00:00"


class TestControls:
    def test_initial_state(self, timer) -> None:
        assert timer.remaining_seconds == 1500
        assert timer.is_active is False
        assert timer.display == "25:00"

    def test_start_and_pause(self, timer) -> None:
        timer.start()
        assert timer.is_active
        timer.pause()
        assert not timer.is_active
        assert timer.toggle() is True

    def test_pause_has_no_persistence_side_effect(self, timer, store) -> None:
        timer.start()
        timer.pause()
        assert store.data == {}


class TestTick:
    def test_inactive_tick_does_nothing(self, timer) -> None:
        assert asyncio.run(timer.tick()) is False
        assert timer.remaining_seconds == 1500

    def test_tick_decrements(self, timer) -> None:
        timer.start()
        asyncio.run(timer.tick())
        assert timer.remaining_seconds == 1499
        assert timer.elapsed_seconds == 1

    def test_completion_resets_and_fires_once(self, store, completions) -> None:
        async def on_complete() -> None:
            completions.append(1)

        timer = SessionTimer(PersistenceCodec(store), on_complete=on_complete, session_seconds=3)
        timer.start()
        results = [asyncio.run(timer.tick()) for _ in range(3)]
        assert results == [False, False, True]
        assert completions == [1]
        assert timer.is_active is False
        assert timer.remaining_seconds == 3


class TestSuspendResume:
    def test_suspend_when_inactive_is_noop(self, timer, store) -> None:
        assert asyncio.run(timer.on_suspend(T)) is None
        assert "timerEndTime" not in store.data

    def test_suspend_persists_absolute_deadline(self, timer, store) -> None:
        timer.start()
        timer.remaining_seconds = 100
        assert asyncio.run(timer.on_suspend(T)) == T + 100_000
        assert store.data["timerEndTime"] == str(T + 100_000)

    def test_resume_before_deadline(self, timer, store) -> None:
        timer.start()
        timer.remaining_seconds = 100
        asyncio.run(timer.on_suspend(T))
        timer.pause()
        assert asyncio.run(timer.on_resume(T + 30_000)) is True
        assert timer.remaining_seconds == 70
        assert timer.is_active is True
        assert "timerEndTime" not in store.data

    def test_resume_after_deadline_lapses_silently(self, timer, store, completions) -> None:
        timer.start()
        timer.remaining_seconds = 100
        asyncio.run(timer.on_suspend(T))
        assert asyncio.run(timer.on_resume(T + 200_000)) is True
        assert timer.remaining_seconds == 1500
        assert timer.is_active is False
        assert completions == []
        assert "timerEndTime" not in store.data

    def test_resume_exactly_at_deadline_resets(self, timer, store) -> None:
        store.data["timerEndTime"] = str(T)
        asyncio.run(timer.on_resume(T))
        assert timer.is_active is False
        assert timer.remaining_seconds == 1500

    def test_resume_rounds_half_up(self, timer, store) -> None:
        store.data["timerEndTime"] = str(T + 29_500)
        asyncio.run(timer.on_resume(T))
        assert timer.remaining_seconds == 30

    def test_resume_without_deadline(self, timer) -> None:
        assert asyncio.run(timer.on_resume(T)) is False
        assert timer.remaining_seconds == 1500
        assert timer.is_active is False


class TestTickScheduler:
    def test_runs_until_callback_declines(self) -> None:
        calls: list[int] = []

        async def callback() -> bool:
            calls.append(1)
            return len(calls) < 3

        async def main() -> bool:
            scheduler = TickScheduler(interval=0)
            scheduler.start(callback)
            await scheduler.wait()
            return scheduler.running

        assert asyncio.run(main()) is False
        assert len(calls) == 3

    def test_stop_cancels_pending_tick(self) -> None:
        calls: list[int] = []

        async def callback() -> bool:
            calls.append(1)
            return True

        async def main() -> bool:
            scheduler = TickScheduler(interval=60)
            scheduler.start(callback)
            await asyncio.sleep(0)
            scheduler.stop()
            await asyncio.sleep(0)
            return scheduler.running

        assert asyncio.run(main()) is False
        assert calls == []

    def test_second_start_is_ignored(self) -> None:
        calls: list[int] = []

        async def callback() -> bool:
            calls.append(1)
            return len(calls) < 5

        async def main() -> None:
            scheduler = TickScheduler(interval=0)
            scheduler.start(callback)
            scheduler.start(callback)
            await scheduler.wait()

        asyncio.run(main())
        assert len(calls) == 5
