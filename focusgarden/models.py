"""Pydantic models -- single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

GARDEN_SIZE = 10
SESSION_MINUTES = 25
SESSION_SECONDS = SESSION_MINUTES * 60
SESSIONS_PER_FLOWER = 2


class PlotState(str, enum.Enum):
    """Garden plot states. Plots only ever move forward through this order."""

    EMPTY = "empty"
    BLOOMED = "bloomed"
    WITHERED = "withered"


class DeadlineChoice(str, enum.Enum):
    """Which day's end a new task is due at."""

    TODAY = "today"
    TOMORROW = "tomorrow"


class ThemeName(str, enum.Enum):
    CUTE = "cute"
    DARK = "dark"
    FOREST = "forest"


class Ringtone(str, enum.Enum):
    DING = "ding"
    CHIME = "chime"
    HARP = "harp"


class NotifierKind(str, enum.Enum):
    """How the session-complete sound is played."""

    BELL = "bell"  # terminal bell
    PLAYER = "player"  # external audio player with a sound file
    SILENT = "silent"


class Task(BaseModel):
    """A to-do item with an end-of-day deadline."""

    id: str
    text: str = Field(min_length=1)
    completed: bool = False
    deadline: int  # epoch milliseconds

    def is_overdue(self, now_ms: int) -> bool:
        return not self.completed and self.deadline < now_ms


class FocusHistoryEntry(BaseModel):
    """One completed focus session."""

    date: datetime
    duration: Optional[int] = SESSION_MINUTES


class StatsSummary(BaseModel):
    """Totals shown on the stats screen."""

    total_sessions: int = Field(default=0, ge=0)
    total_time: int = Field(default=0, ge=0)
    tasks_completed: int = Field(default=0, ge=0)


class Notice(BaseModel):
    """A user-visible message (alert)."""

    title: str
    message: str


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/focusgarden/config.json)."""

    store_path: Optional[str] = None  # None = use default (~/.local/share/focusgarden/)
    notifier: NotifierKind = NotifierKind.BELL
    sound_dir: Optional[str] = None
    player_command: Optional[str] = None


def empty_garden() -> list[PlotState]:
    """Return a fresh garden of all-empty plots."""
    return [PlotState.EMPTY] * GARDEN_SIZE
