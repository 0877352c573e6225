"""Focus session countdown that survives the app leaving the foreground.

While the app is in the foreground the countdown advances one second per
tick. When the app is suspended mid-session the absolute end instant is
persisted; on the next activation the remaining time is recomputed from
the wall clock.
"""

from __future__ import annotations

import logging
import math
from typing import Awaitable, Callable, Optional

from focusgarden.codec import PersistenceCodec
from focusgarden.dates import now_ms
from focusgarden.models import SESSION_SECONDS

log = logging.getLogger(__name__)


def format_clock(seconds: int) -> str:
    """Render a second count as ``MM:SS``."""
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class SessionTimer:
    """Countdown state machine for one focus session at a time."""

    def __init__(
        self,
        codec: PersistenceCodec,
        on_complete: Optional[Callable[[], Awaitable[None]]] = None,
        clock: Callable[[], int] = now_ms,
        session_seconds: int = SESSION_SECONDS,
    ) -> None:
        self.codec = codec
        self.on_complete = on_complete
        self.clock = clock
        self.session_seconds = session_seconds
        self.remaining_seconds = session_seconds
        self.is_active = False

    @property
    def display(self) -> str:
        return format_clock(self.remaining_seconds)

    @property
    def elapsed_seconds(self) -> int:
        return self.session_seconds - self.remaining_seconds

    def start(self) -> None:
        self.is_active = True

    def pause(self) -> None:
        self.is_active = False

    def toggle(self) -> bool:
        """Start if paused, pause if running. Returns the new active state."""
        self.is_active = not self.is_active
        return self.is_active

    def reset(self) -> None:
        self.is_active = False
        self.remaining_seconds = self.session_seconds

    async def tick(self) -> bool:
        """Advance one second. Returns True when this tick finished the session."""
        if not self.is_active:
            return False
        self.remaining_seconds -= 1
        if self.remaining_seconds > 0:
            return False
        self.reset()
        log.info("Focus session complete.")
        if self.on_complete is not None:
            await self.on_complete()
        return True

    async def on_suspend(self, now: Optional[int] = None) -> Optional[int]:
        """Persist the absolute end instant if a session is running."""
        if not self.is_active:
            return None
        if now is None:
            now = self.clock()
        deadline = now + self.remaining_seconds * 1000
        await self.codec.save_timer_end(deadline)
        log.debug("Suspended with %ds left; deadline %d.", self.remaining_seconds, deadline)
        return deadline

    async def on_resume(self, now: Optional[int] = None) -> bool:
        """Consume a persisted end instant. Returns True if one was found.

        A session whose end passed while suspended is reset without being
        recorded.
        """
        deadline = await self.codec.load_timer_end()
        if deadline is None:
            return False
        if now is None:
            now = self.clock()
        remaining = _round_half_up((deadline - now) / 1000)
        if remaining > 0:
            self.remaining_seconds = remaining
            self.is_active = True
            log.info("Resumed focus session with %ds left.", remaining)
        else:
            self.reset()
            log.info("Focus session lapsed while suspended; not recorded.")
        await self.codec.clear_timer_end()
        return True
