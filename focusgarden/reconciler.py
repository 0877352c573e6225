"""Task list and deadline reconciliation.

On every activation the stored tasks are checked against the wall clock.
Unfinished tasks whose deadline has passed are removed and each one
withers a flower. The garden is then topped up from the focus history.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from focusgarden.codec import PersistenceCodec, UnreadableDataError
from focusgarden.dates import deadline_for, local_today, now_ms
from focusgarden.garden import fill_blooms_from_history, wither_one
from focusgarden.models import DeadlineChoice, Notice, PlotState, Task, empty_garden

log = logging.getLogger(__name__)


def partition_overdue(tasks: list[Task], now: int) -> tuple[list[Task], list[Task]]:
    """Split *tasks* into ``(overdue, kept)``, both in list order."""
    overdue = [t for t in tasks if t.is_overdue(now)]
    kept = [t for t in tasks if not t.is_overdue(now)]
    return overdue, kept


def overdue_notice(count: int) -> Notice:
    return Notice(
        title="Tasks Overdue!",
        message=f"{count} task(s) were missed and flowers have withered.",
    )


class Reconciler:
    """Owns the in-memory task list and garden for the foreground screen."""

    def __init__(
        self,
        codec: PersistenceCodec,
        notify: Optional[Callable[[Notice], None]] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.codec = codec
        self.notify = notify
        self.clock = clock
        self.tasks: list[Task] = []
        self.garden: list[PlotState] = empty_garden()
        self._attached = True

    def detach(self) -> None:
        """Stop applying results; called when the screen is torn down."""
        self._attached = False

    def reset(self) -> None:
        self.tasks = []
        self.garden = empty_garden()

    async def reconcile(
        self, now: Optional[int] = None, run_overdue_check: bool = True
    ) -> tuple[list[Task], list[PlotState]]:
        """Reload tasks and garden, apply overdue penalties, regrow blooms.

        If any stored value cannot be read, nothing is saved and the
        last-known in-memory state is returned unchanged.
        """
        if now is None:
            now = self.clock()
        try:
            tasks = await self.codec.load_tasks(strict=True)
            garden = await self.codec.load_garden(strict=True)
            history = await self.codec.load_history(strict=True)
        except UnreadableDataError as exc:
            log.warning("Reconcile aborted; %r could not be read.", str(exc))
            return self.tasks, self.garden

        overdue: list[Task] = []
        if run_overdue_check:
            overdue, tasks = partition_overdue(tasks, now)
            for _ in overdue:
                garden = wither_one(garden)

        garden = fill_blooms_from_history(garden, len(history))

        if not self._attached:
            log.debug("Reconciler detached; dropping reconcile result.")
            return tasks, garden

        if overdue:
            log.info("%d overdue task(s) removed; flowers withered.", len(overdue))
            self._emit(overdue_notice(len(overdue)))
        self.tasks = tasks
        self.garden = garden
        await self.codec.save_tasks(tasks)
        await self.codec.save_garden(garden)
        return tasks, garden

    async def add_task(
        self,
        text: str,
        deadline_choice: DeadlineChoice = DeadlineChoice.TODAY,
        today: Optional[date] = None,
    ) -> Optional[Task]:
        """Append a new task. Blank text is ignored and returns None."""
        if not text.strip():
            return None
        now = self.clock()
        if today is None:
            today = local_today(now)
        task = Task(
            id=self._new_id(now),
            text=text,
            completed=False,
            deadline=deadline_for(deadline_choice, today),
        )
        self.tasks = [*self.tasks, task]
        await self.codec.save_tasks(self.tasks)
        return task

    async def toggle_completed(self, task_id: str) -> Optional[Task]:
        """Flip completion on *task_id*; unknown ids are a no-op."""
        toggled: Optional[Task] = None
        updated: list[Task] = []
        for task in self.tasks:
            if task.id == task_id:
                task = task.model_copy(update={"completed": not task.completed})
                toggled = task
            updated.append(task)
        if toggled is None:
            return None
        self.tasks = updated
        await self.codec.save_tasks(self.tasks)
        return toggled

    async def delete_task(self, task_id: str) -> bool:
        """Remove *task_id*; returns False when no such task exists."""
        remaining = [t for t in self.tasks if t.id != task_id]
        if len(remaining) == len(self.tasks):
            return False
        self.tasks = remaining
        await self.codec.save_tasks(self.tasks)
        return True

    def _new_id(self, now: int) -> str:
        """Creation-time id, bumped past any id already in use."""
        taken = {t.id for t in self.tasks}
        candidate = now
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _emit(self, notice: Notice) -> None:
        if self.notify is not None:
            self.notify(notice)
