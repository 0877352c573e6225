"""Tests for the persistence codec."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone

import pytest

from focusgarden.codec import ALL_KEYS, PersistenceCodec, UnreadableDataError
from focusgarden.models import (
    FocusHistoryEntry,
    PlotState,
    Ringtone,
    Task,
    ThemeName,
    empty_garden,
)
from focusgarden.store import MemoryStore, StoreError


class BrokenStore:
    """A store whose every operation fails."""

    async def get(self, key):
        raise StoreError("unavailable")

    async def set(self, key, value):
        raise StoreError("unavailable")

    async def remove(self, key):
        raise StoreError("unavailable")

    async def remove_many(self, keys):
        raise StoreError("unavailable")

    def close(self) -> None:
        pass


class FailingKeyStore(MemoryStore):
    """A memory store whose reads of one key fail."""

    def __init__(self, failing_key: str, initial=None) -> None:
        super().__init__(initial)
        self.failing_key = failing_key

    async def get(self, key):
        if key == self.failing_key:
            raise StoreError("unavailable")
        return await super().get(key)


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def codec(store: MemoryStore) -> PersistenceCodec:
    return PersistenceCodec(store)


class TestDefaults:
    def test_empty_store(self, codec) -> None:
        assert asyncio.run(codec.load_tasks()) == []
        assert asyncio.run(codec.load_garden()) == empty_garden()
        assert asyncio.run(codec.load_history()) == []
        assert asyncio.run(codec.load_timer_end()) is None
        assert asyncio.run(codec.load_theme()) == ThemeName.CUTE
        assert asyncio.run(codec.load_ringtone()) == Ringtone.DING


class TestTasks:
    def test_wire_format(self, codec, store) -> None:
        asyncio.run(codec.save_tasks([Task(id="1", text="A", deadline=5)]))
        assert json.loads(store.data["tasks"]) == [
            {"id": "1", "text": "A", "completed": False, "deadline": 5}
        ]

    def test_roundtrip(self, codec) -> None:
        tasks = [
            Task(id="1", text="A", deadline=5),
            Task(id="2", text="B", completed=True, deadline=6),
        ]
        asyncio.run(codec.save_tasks(tasks))
        assert asyncio.run(codec.load_tasks()) == tasks

    def test_malformed_json_falls_back(self, codec, store, caplog) -> None:
        store.data["tasks"] = "not valid json{{{"
        with caplog.at_level(logging.WARNING):
            assert asyncio.run(codec.load_tasks()) == []
        assert "tasks" in caplog.text


class TestGarden:
    def test_short_garden_is_padded(self, codec, store) -> None:
        store.data["garden"] = '["bloomed", "withered"]'
        garden = asyncio.run(codec.load_garden())
        assert len(garden) == 10
        assert garden[:3] == [PlotState.BLOOMED, PlotState.WITHERED, PlotState.EMPTY]

    def test_long_garden_is_truncated(self, codec, store) -> None:
        store.data["garden"] = json.dumps(["bloomed"] * 12)
        assert asyncio.run(codec.load_garden()) == [PlotState.BLOOMED] * 10

    def test_unknown_state_falls_back(self, codec, store) -> None:
        store.data["garden"] = json.dumps(["sprouting"] * 10)
        assert asyncio.run(codec.load_garden()) == empty_garden()


class TestHistory:
    def test_append(self, codec) -> None:
        when = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
        asyncio.run(codec.append_history(FocusHistoryEntry(date=when)))
        history = asyncio.run(codec.append_history(FocusHistoryEntry(date=when)))
        assert len(history) == 2
        assert len(asyncio.run(codec.load_history())) == 2

    def test_missing_duration_defaults(self, codec, store) -> None:
        store.data["focusHistory"] = '[{"date": "2026-10-19T09:00:00.000Z"}]'
        history = asyncio.run(codec.load_history())
        assert history[0].duration == 25


class TestTimerEnd:
    def test_save_load_clear(self, codec, store) -> None:
        asyncio.run(codec.save_timer_end(1_800_000_100_000))
        assert store.data["timerEndTime"] == "1800000100000"
        assert asyncio.run(codec.load_timer_end()) == 1_800_000_100_000
        asyncio.run(codec.clear_timer_end())
        assert "timerEndTime" not in store.data

    def test_malformed_value(self, codec, store) -> None:
        store.data["timerEndTime"] = "soon"
        assert asyncio.run(codec.load_timer_end()) is None


class TestSettings:
    def test_unknown_theme_falls_back(self, codec, store) -> None:
        store.data["theme"] = "neon"
        assert asyncio.run(codec.load_theme()) == ThemeName.CUTE

    def test_settings_roundtrip(self, codec, store) -> None:
        asyncio.run(codec.save_theme(ThemeName.FOREST))
        asyncio.run(codec.save_ringtone(Ringtone.HARP))
        assert store.data["theme"] == "forest"
        assert asyncio.run(codec.load_ringtone()) == Ringtone.HARP


class TestClearAll:
    def test_removes_all_app_keys(self, codec, store) -> None:
        for key in ALL_KEYS:
            store.data[key] = "x"
        store.data["unrelated"] = "keep"
        assert asyncio.run(codec.clear_all()) is True
        assert store.data == {"unrelated": "keep"}

    def test_all_six_keys(self) -> None:
        assert set(ALL_KEYS) == {
            "tasks", "garden", "focusHistory", "timerEndTime", "theme", "ringtone",
        }


class TestStoreFailures:
    def test_reads_fall_back_to_defaults(self) -> None:
        codec = PersistenceCodec(BrokenStore())
        assert asyncio.run(codec.load_tasks()) == []
        assert asyncio.run(codec.load_garden()) == empty_garden()
        assert asyncio.run(codec.load_timer_end()) is None
        assert asyncio.run(codec.load_theme()) == ThemeName.CUTE

    def test_writes_report_failure(self, caplog) -> None:
        codec = PersistenceCodec(BrokenStore())
        with caplog.at_level(logging.WARNING):
            assert asyncio.run(codec.save_tasks([])) is False
            assert asyncio.run(codec.clear_all()) is False
            assert asyncio.run(codec.clear_timer_end()) is False
        assert "Failed" in caplog.text


class TestStrictReads:
    def test_missing_key_is_default(self, codec) -> None:
        assert asyncio.run(codec.load_tasks(strict=True)) == []
        assert asyncio.run(codec.load_garden(strict=True)) == empty_garden()
        assert asyncio.run(codec.load_history(strict=True)) == []

    def test_store_error_raises(self) -> None:
        codec = PersistenceCodec(FailingKeyStore("tasks"))
        with pytest.raises(UnreadableDataError):
            asyncio.run(codec.load_tasks(strict=True))

    def test_invalid_task_raises(self, codec, store) -> None:
        store.data["tasks"] = json.dumps([
            {"id": "1", "text": "", "completed": False, "deadline": 1},
            {"id": "2", "text": "Read", "completed": False, "deadline": 1},
        ])
        with pytest.raises(UnreadableDataError):
            asyncio.run(codec.load_tasks(strict=True))
        assert asyncio.run(codec.load_tasks()) == []

    def test_malformed_garden_raises(self, codec, store) -> None:
        store.data["garden"] = "not json"
        with pytest.raises(UnreadableDataError):
            asyncio.run(codec.load_garden(strict=True))


class TestAppendHistoryFailures:
    def test_unreadable_log_is_left_alone(self) -> None:
        stored = json.dumps([{"date": "2026-10-19T09:00:00.000Z", "duration": 25}] * 6)
        store = FailingKeyStore("focusHistory", {"focusHistory": stored})
        codec = PersistenceCodec(store)
        when = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)
        assert asyncio.run(codec.append_history(FocusHistoryEntry(date=when))) is None
        assert store.data["focusHistory"] == stored

    def test_malformed_log_is_left_alone(self, codec, store) -> None:
        store.data["focusHistory"] = '[{"date": "yesterday"}]'
        when = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)
        assert asyncio.run(codec.append_history(FocusHistoryEntry(date=when))) is None
        assert store.data["focusHistory"] == '[{"date": "yesterday"}]'

    def test_unavailable_store_returns_none(self) -> None:
        codec = PersistenceCodec(BrokenStore())
        when = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)
        assert asyncio.run(codec.append_history(FocusHistoryEntry(date=when))) is None
