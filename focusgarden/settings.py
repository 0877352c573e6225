"""Theme and ringtone settings shared by every screen.

Passed explicitly to whatever needs it. Loaded once at launch and written
through to the store on every change.
"""

from __future__ import annotations

from focusgarden.codec import PersistenceCodec
from focusgarden.models import Ringtone, ThemeName


class SettingsContext:
    def __init__(self, codec: PersistenceCodec) -> None:
        self.codec = codec
        self.theme = ThemeName.CUTE
        self.ringtone = Ringtone.DING

    async def load(self) -> None:
        self.theme = await self.codec.load_theme()
        self.ringtone = await self.codec.load_ringtone()

    async def set_theme(self, name: str) -> ThemeName:
        """Switch theme. Raises ValueError for an unknown name."""
        self.theme = ThemeName(name.lower())
        await self.codec.save_theme(self.theme)
        return self.theme

    async def set_ringtone(self, name: str) -> Ringtone:
        """Switch ringtone. Raises ValueError for an unknown name."""
        self.ringtone = Ringtone(name.lower())
        await self.codec.save_ringtone(self.ringtone)
        return self.ringtone

    def reset(self) -> None:
        """Back to defaults in memory (after the stored keys are cleared)."""
        self.theme = ThemeName.CUTE
        self.ringtone = Ringtone.DING
