"""Application controller: one foreground screen of the focus garden.

Wires the timer, reconciler, settings and notifier to the host's
lifecycle events (launch, activate, suspend, close).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Callable, Optional

from focusgarden.codec import PersistenceCodec
from focusgarden.dates import local_today, ms_to_datetime, now_ms
from focusgarden.models import (
    SESSION_MINUTES,
    AppConfig,
    FocusHistoryEntry,
    Notice,
    PlotState,
    StatsSummary,
    Task,
)
from focusgarden.notifier import Notifier, create_notifier
from focusgarden.reconciler import Reconciler
from focusgarden.scheduler import TickScheduler
from focusgarden.settings import SettingsContext
from focusgarden.stats import compute_daily_histogram, compute_summary
from focusgarden.store import KeyValueStore
from focusgarden.timer import SessionTimer

log = logging.getLogger(__name__)

SESSION_COMPLETE = Notice(title="Session Complete!", message="Great job! Your garden is growing.")
DATA_CLEARED = Notice(title="Data Cleared", message="Your app has been reset.")
CLEAR_FAILED = Notice(title="Error", message="Could not clear all data.")


class FocusGarden:
    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[AppConfig] = None,
        notify: Optional[Callable[[Notice], None]] = None,
        clock: Callable[[], int] = now_ms,
        tick_interval: float = 1.0,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.store = store
        self.codec = PersistenceCodec(store)
        self.clock = clock
        self.notify = notify
        self.settings = SettingsContext(self.codec)
        self.reconciler = Reconciler(self.codec, notify=notify, clock=clock)
        self.timer = SessionTimer(self.codec, on_complete=self._complete_session, clock=clock)
        self.scheduler = TickScheduler(tick_interval)
        self.notifier = notifier or create_notifier(config or AppConfig())

    @property
    def tasks(self) -> list[Task]:
        return self.reconciler.tasks

    @property
    def garden(self) -> list[PlotState]:
        return self.reconciler.garden

    # -- lifecycle --

    async def launch(self) -> None:
        """First activation: settings, then the regular activation path."""
        await self.settings.load()
        await self.activate()

    async def activate(self) -> None:
        """Foreground activation: reconcile deadlines, then resume the timer.

        The tick is only re-armed after the stored deadline has been
        consumed and cleared.
        """
        now = self.clock()
        await self.reconciler.reconcile(now, run_overdue_check=True)
        await self.timer.on_resume(now)
        if self.timer.is_active:
            self.scheduler.start(self._tick)

    async def suspend(self) -> None:
        """The app is leaving the foreground."""
        self.scheduler.stop()
        await self.timer.on_suspend()

    def close(self) -> None:
        """Tear down: no further ticks, and pending reads stop mutating state."""
        self.scheduler.stop()
        self.reconciler.detach()

    # -- timer controls --

    def start_timer(self) -> None:
        self.timer.start()
        self.scheduler.start(self._tick)

    def pause_timer(self) -> None:
        self.timer.pause()
        self.scheduler.stop()

    def toggle_timer(self) -> bool:
        if self.timer.is_active:
            self.pause_timer()
        else:
            self.start_timer()
        return self.timer.is_active

    async def _tick(self) -> bool:
        await self.timer.tick()
        return self.timer.is_active

    async def _complete_session(self) -> None:
        self.notifier.play(self.settings.ringtone)
        self._emit(SESSION_COMPLETE)
        now = self.clock()
        entry = FocusHistoryEntry(date=ms_to_datetime(now), duration=SESSION_MINUTES)
        history = await self.codec.append_history(entry)
        if history is None:
            log.warning("Focus session at %s was not recorded.", entry.date.isoformat())
        else:
            log.info("Recorded focus session #%d.", len(history))
        await self.reconciler.reconcile(now, run_overdue_check=False)

    # -- stats & data --

    async def statistics(
        self, reference_date: Optional[date] = None
    ) -> tuple[StatsSummary, list[int]]:
        """Summary totals and the seven-day histogram ending *reference_date*."""
        if reference_date is None:
            reference_date = local_today(self.clock())
        history = await self.codec.load_history()
        tasks = await self.codec.load_tasks()
        return compute_summary(history, tasks), compute_daily_histogram(history, reference_date)

    async def clear_all_data(self) -> bool:
        """Erase tasks, garden, history, timer and settings."""
        if not await self.codec.clear_all():
            self._emit(CLEAR_FAILED)
            return False
        self.scheduler.stop()
        self.timer.reset()
        self.reconciler.reset()
        self.settings.reset()
        self._emit(DATA_CLEARED)
        return True

    def _emit(self, notice: Notice) -> None:
        if self.notify is not None:
            self.notify(notice)


@asynccontextmanager
async def running_app(store: KeyValueStore, **kwargs) -> AsyncIterator[FocusGarden]:
    """Launch the app on *store*; suspend and close it on exit."""
    app = FocusGarden(store, **kwargs)
    await app.launch()
    try:
        yield app
    finally:
        await app.suspend()
        app.close()
        store.close()
