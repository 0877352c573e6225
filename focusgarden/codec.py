"""Persistence codec: typed load/save for every key in the store.

By default reads never raise. A missing, unreadable or malformed value is
logged and replaced by the default for that key, which is what display
paths want. Paths that write back what they read pass ``strict=True``:
a missing key still yields the default, but an unreadable or malformed
value raises ``UnreadableDataError`` so nothing gets saved over it.
Writes report failure by returning False.
"""

from __future__ import annotations

import logging
from typing import Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from focusgarden.models import (
    GARDEN_SIZE,
    FocusHistoryEntry,
    PlotState,
    Ringtone,
    Task,
    ThemeName,
    empty_garden,
)
from focusgarden.store import KeyValueStore, StoreError

log = logging.getLogger(__name__)

TASKS_KEY = "tasks"
GARDEN_KEY = "garden"
HISTORY_KEY = "focusHistory"
TIMER_END_KEY = "timerEndTime"
THEME_KEY = "theme"
RINGTONE_KEY = "ringtone"

ALL_KEYS: tuple[str, ...] = (
    TASKS_KEY,
    GARDEN_KEY,
    HISTORY_KEY,
    TIMER_END_KEY,
    THEME_KEY,
    RINGTONE_KEY,
)

_TASKS = TypeAdapter(list[Task])
_GARDEN = TypeAdapter(list[PlotState])
_HISTORY = TypeAdapter(list[FocusHistoryEntry])

T = TypeVar("T")


class UnreadableDataError(Exception):
    """A stored value exists but could not be read or parsed."""


class PersistenceCodec:
    """Serializes tasks, garden, history and settings to store strings."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # -- primitives --

    async def _read(self, key: str, strict: bool = False) -> Optional[str]:
        try:
            return await self.store.get(key)
        except StoreError as exc:
            log.warning("Failed to read %r from the store.", key, exc_info=True)
            if strict:
                raise UnreadableDataError(key) from exc
            return None

    async def _write(self, key: str, value: str) -> bool:
        try:
            await self.store.set(key, value)
        except StoreError:
            log.warning("Failed to save %r.", key, exc_info=True)
            return False
        return True

    async def _load_list(
        self, key: str, adapter: TypeAdapter[list[T]], strict: bool = False
    ) -> list[T]:
        raw = await self._read(key, strict)
        if raw is None:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            if strict:
                log.warning("Stored %r entry is malformed.", key, exc_info=True)
                raise UnreadableDataError(key) from exc
            log.warning("Discarding malformed %r entry.", key, exc_info=True)
            return []

    # -- tasks --

    async def load_tasks(self, strict: bool = False) -> list[Task]:
        return await self._load_list(TASKS_KEY, _TASKS, strict)

    async def save_tasks(self, tasks: list[Task]) -> bool:
        return await self._write(TASKS_KEY, _TASKS.dump_json(tasks).decode())

    # -- garden --

    async def load_garden(self, strict: bool = False) -> list[PlotState]:
        """Load the garden, always returning exactly GARDEN_SIZE plots."""
        garden = await self._load_list(GARDEN_KEY, _GARDEN, strict)
        if not garden:
            return empty_garden()
        if len(garden) != GARDEN_SIZE:
            log.warning("Stored garden has %d plots; resizing to %d.", len(garden), GARDEN_SIZE)
            garden = (garden + empty_garden())[:GARDEN_SIZE]
        return garden

    async def save_garden(self, garden: list[PlotState]) -> bool:
        return await self._write(GARDEN_KEY, _GARDEN.dump_json(garden).decode())

    # -- focus history --

    async def load_history(self, strict: bool = False) -> list[FocusHistoryEntry]:
        return await self._load_list(HISTORY_KEY, _HISTORY, strict)

    async def append_history(
        self, entry: FocusHistoryEntry
    ) -> Optional[list[FocusHistoryEntry]]:
        """Append *entry* to the stored log and return the new log.

        Returns None, leaving the stored log untouched, when the existing
        log cannot be read or the write fails.
        """
        try:
            history = await self.load_history(strict=True)
        except UnreadableDataError:
            log.warning("Focus history is unreadable; session not recorded.")
            return None
        history.append(entry)
        if not await self._write(HISTORY_KEY, _HISTORY.dump_json(history).decode()):
            return None
        return history

    # -- suspended timer deadline --

    async def load_timer_end(self) -> Optional[int]:
        raw = await self._read(TIMER_END_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            log.warning("Ignoring malformed timer deadline %r.", raw)
            return None

    async def save_timer_end(self, deadline_ms: int) -> bool:
        return await self._write(TIMER_END_KEY, str(deadline_ms))

    async def clear_timer_end(self) -> bool:
        try:
            await self.store.remove(TIMER_END_KEY)
        except StoreError:
            log.warning("Failed to clear the timer deadline.", exc_info=True)
            return False
        return True

    # -- settings --

    async def load_theme(self) -> ThemeName:
        raw = await self._read(THEME_KEY)
        try:
            return ThemeName(raw) if raw else ThemeName.CUTE
        except ValueError:
            log.warning("Unknown theme %r; using default.", raw)
            return ThemeName.CUTE

    async def save_theme(self, theme: ThemeName) -> bool:
        return await self._write(THEME_KEY, theme.value)

    async def load_ringtone(self) -> Ringtone:
        raw = await self._read(RINGTONE_KEY)
        try:
            return Ringtone(raw) if raw else Ringtone.DING
        except ValueError:
            log.warning("Unknown ringtone %r; using default.", raw)
            return Ringtone.DING

    async def save_ringtone(self, ringtone: Ringtone) -> bool:
        return await self._write(RINGTONE_KEY, ringtone.value)

    # -- reset --

    async def clear_all(self) -> bool:
        """Remove every key this app writes. Best effort, no transaction."""
        try:
            await self.store.remove_many(ALL_KEYS)
        except StoreError:
            log.warning("Failed to clear all data.", exc_info=True)
            return False
        return True
