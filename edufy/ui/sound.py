"""Sound effects for game feedback."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)

_DEFAULT_SOUND_DIR = Path(__file__).resolve().parent.parent / "assets" / "sounds"


class SoundPlayer(QObject):
    """Plays short WAV cues such as ``success`` or ``failure`` by name.

    Cues are looked up in ``EDUFY_SOUNDS_DIR`` (or ``edufy/assets/sounds``).
    Without that directory the player stays silent after one log line; a
    single missing file is logged once and skipped. ``EDUFY_MUTE=1`` starts
    the player muted.
    """

    def __init__(self, sound_dir: Optional[Path] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        if sound_dir is None:
            env_dir = os.environ.get("EDUFY_SOUNDS_DIR")
            sound_dir = Path(env_dir) if env_dir else _DEFAULT_SOUND_DIR
        self._sound_dir = Path(sound_dir)
        self._effects: Dict[str, Optional[QSoundEffect]] = {}
        self._muted = os.environ.get("EDUFY_MUTE") == "1"
        self._volume = 0.8
        self._available = self._sound_dir.is_dir()
        if not self._available:
            logger.info("No sound directory at %s; sound effects are off", self._sound_dir)

    @property
    def muted(self) -> bool:
        return self._muted

    @property
    def volume(self) -> float:
        return self._volume

    def set_muted(self, muted: bool) -> None:
        self._muted = bool(muted)
        logger.info("Sound %s", "muted" if self._muted else "unmuted")

    def toggle_muted(self) -> bool:
        self.set_muted(not self._muted)
        return self._muted

    def set_volume(self, volume: float) -> None:
        """Set the volume of every cue; values outside 0.0-1.0 are clamped."""
        self._volume = max(0.0, min(1.0, float(volume)))
        for effect in self._effects.values():
            if effect is not None:
                effect.setVolume(self._volume)

    def play(self, name: str) -> None:
        """Play ``<sound_dir>/<name>`` (``.wav`` added when missing)."""
        if not name or self._muted or not self._available:
            return
        effect = self._effect(name)
        if effect is not None:
            effect.play()

    def _effect(self, name: str) -> Optional[QSoundEffect]:
        if name in self._effects:
            return self._effects[name]
        filename = name if name.endswith(".wav") else f"{name}.wav"
        path = self._sound_dir / filename
        if not path.exists():
            logger.warning("Sound file not found: %s", path)
            self._effects[name] = None
            return None
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        effect.setVolume(self._volume)
        self._effects[name] = effect
        return effect
