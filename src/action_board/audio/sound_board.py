# src/action_board/audio/sound_board.py

from __future__ import annotations

import logging
import threading

from ..board.persistence import BoardPersistence
from ..board.task_models import SoundPreferences, SoundTrigger
from ..core.ports import AudioPlayer
from .player import SOUND_IDS

logger = logging.getLogger(__name__)


class SoundBoard:
    """
    User sound choices per trigger, persisted independently of the tasks.

    play_trigger() is fire-and-forget: unset triggers are silent and player
    failures are logged, never raised.
    """

    def __init__(self, player: AudioPlayer, persistence: BoardPersistence | None = None) -> None:
        self._player = player
        self._persistence = persistence
        self._lock = threading.Lock()
        self._prefs = persistence.load_sounds() if persistence is not None else SoundPreferences()

    @property
    def preferences(self) -> SoundPreferences:
        with self._lock:
            return self._prefs

    def set_sound(self, trigger: str, sound_id: str | None) -> SoundPreferences:
        """Pick a sound for a trigger; None/"off" clears it."""
        try:
            trig = SoundTrigger(trigger.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown trigger {trigger!r}. Use one of: {', '.join(t.value for t in SoundTrigger)}."
            ) from None

        sid = (sound_id or "").strip().lower()
        if sid in ("", "off", "none"):
            sid = ""
        elif sid not in SOUND_IDS:
            raise ValueError(f"Unknown sound {sound_id!r}. Use one of: {', '.join(SOUND_IDS)}.")

        with self._lock:
            self._prefs = self._prefs.with_sound(trig, sid or None)
            prefs = self._prefs

        if self._persistence is not None:
            self._persistence.save_sounds(prefs)
        logger.info("Sound for %s -> %s", trig.value, sid or "off")
        return prefs

    def play_trigger(self, trigger: str) -> None:
        sound_id = self.preferences.sound_for(trigger)
        if not sound_id:
            return
        try:
            self._player.play(sound_id)
        except Exception:
            logger.exception("Playing sound %s for %s failed.", sound_id, trigger)
