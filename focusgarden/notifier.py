"""Session-complete sound, one implementation per target.

The variant is picked from ``AppConfig.notifier`` at startup. Playback
problems are logged and never reach the caller.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from focusgarden.display import console
from focusgarden.models import AppConfig, NotifierKind, Ringtone

log = logging.getLogger(__name__)

_PLAYERS = ("afplay", "paplay", "mpg123", "play")


def _find_player() -> Optional[str]:
    """Locate a command-line audio player."""
    for name in _PLAYERS:
        found = shutil.which(name)
        if found:
            return found
    return None


class Notifier(ABC):
    def play(self, ringtone: Ringtone) -> None:
        """Play *ringtone* once. Never raises."""
        try:
            self._play(ringtone)
        except (OSError, subprocess.SubprocessError):
            log.warning("Couldn't play the %s sound.", ringtone.value, exc_info=True)

    @abstractmethod
    def _play(self, ringtone: Ringtone) -> None: ...


class BellNotifier(Notifier):
    """Terminal bell. All ringtones sound the same."""

    def _play(self, ringtone: Ringtone) -> None:
        console.bell()


class PlayerNotifier(Notifier):
    """Hands ``<sound_dir>/<ringtone>.mp3`` to an external player process."""

    def __init__(self, sound_dir: Optional[Path], command: Optional[str] = None) -> None:
        self.sound_dir = sound_dir
        self.command = command
        self._process: Optional[subprocess.Popen] = None

    def sound_file(self, ringtone: Ringtone) -> Path:
        if self.sound_dir is None:
            raise FileNotFoundError("No sound directory configured")
        path = self.sound_dir / f"{ringtone.value}.mp3"
        if not path.is_file():
            raise FileNotFoundError(f"Missing sound file: {path}")
        return path

    def reap(self) -> None:
        """Collect the previous player if it has exited."""
        if self._process is not None and self._process.poll() is not None:
            self._process = None

    def _play(self, ringtone: Ringtone) -> None:
        path = self.sound_file(ringtone)
        command = self.command or _find_player()
        if command is None:
            raise FileNotFoundError("No audio player found")
        self.reap()
        # Not waited on; the countdown must not block on playback.
        self._process = subprocess.Popen(
            [command, str(path)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )


class SilentNotifier(Notifier):
    def _play(self, ringtone: Ringtone) -> None:
        log.debug("Silent notifier: skipping %s.", ringtone.value)


def create_notifier(config: AppConfig) -> Notifier:
    """Build the notifier selected by *config*."""
    if config.notifier == NotifierKind.PLAYER:
        sound_dir = Path(config.sound_dir) if config.sound_dir else None
        return PlayerNotifier(sound_dir, config.player_command)
    if config.notifier == NotifierKind.SILENT:
        return SilentNotifier()
    return BellNotifier()
