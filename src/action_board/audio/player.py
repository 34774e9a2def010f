# src/action_board/audio/player.py

from __future__ import annotations

import logging
import queue
import threading
from typing import Any

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# (frequency Hz, duration s) notes per built-in sound.
_SOUND_NOTES: dict[str, tuple[tuple[float, float], ...]] = {
    "click": ((2000.0, 0.02),),
    "pop": ((520.0, 0.03), (880.0, 0.04)),
    "chime": ((880.0, 0.18), (1320.0, 0.35)),
    "bell": ((660.0, 0.8),),
    "fanfare": ((523.25, 0.12), (659.25, 0.12), (783.99, 0.12), (1046.5, 0.45)),
}

SOUND_IDS: tuple[str, ...] = tuple(_SOUND_NOTES)


def synthesize(np: Any, sound_id: str, *, volume: float, sample_rate: int = SAMPLE_RATE) -> Any:
    """Render a built-in sound as a float32 mono buffer (numpy module passed in)."""
    parts = []
    for freq, duration in _SOUND_NOTES[sound_id]:
        t = np.linspace(0.0, duration, int(sample_rate * duration), endpoint=False)
        # Bell-like partials with an exponential decay envelope.
        wave = np.sin(2 * np.pi * freq * t) + 0.3 * np.sin(4 * np.pi * freq * t)
        envelope = np.exp(-4.0 * t / max(duration, 1e-3))
        parts.append(wave * envelope)
    audio = np.concatenate(parts) if parts else np.zeros(1)
    peak = float(np.max(np.abs(audio))) or 1.0
    return (audio / peak * volume).astype(np.float32)


class SoundPlayer:
    """
    Best-effort sound effects.

    Design goals:
    - Optional dependencies (numpy + sounddevice); disables itself if missing.
    - Fire-and-forget: synthesis and playback happen in a worker thread.
    - A new sound replaces whatever is still playing.
    """

    def __init__(self, enabled: bool, *, volume: float = 0.3) -> None:
        self.enabled = bool(enabled)
        self.volume = min(1.0, max(0.0, float(volume)))

        self._queue: "queue.Queue[str | None] | None" = None
        self._worker: threading.Thread | None = None
        self._np: Any = None
        self._sd: Any = None
        self._stop_requested = False

        if not self.enabled:
            logger.info("Sound disabled.")
            return

        try:
            import numpy as np  # type: ignore
            import sounddevice as sd  # type: ignore
        except Exception as e:
            self.enabled = False
            logger.warning(
                "Sound is enabled, but dependencies are missing or failed to import. "
                "Install the 'audio' extra (numpy + sounddevice) to enable it. Error: %s",
                repr(e),
            )
            return

        self._np = np
        self._sd = sd
        self._queue = queue.Queue()
        self._worker = threading.Thread(target=self._audio_worker, name="board-audio", daemon=True)
        self._worker.start()
        logger.info("Sound ready (volume=%.2f).", self.volume)

    def _audio_worker(self) -> None:
        assert self._queue is not None

        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                try:
                    audio = synthesize(self._np, item, volume=self.volume)
                    self._sd.stop()
                    self._sd.play(audio, SAMPLE_RATE)
                except Exception as e:
                    logger.error("Sound playback failed (%s): %s", item, repr(e))
            finally:
                self._queue.task_done()

    def play(self, sound_id: str) -> None:
        """Queue a sound (no-op if disabled). Unknown ids are logged and skipped."""
        if sound_id not in _SOUND_NOTES:
            logger.warning("Unknown sound id: %r", sound_id)
            return
        if not self.enabled or self._queue is None:
            logger.debug("Sound disabled; not playing %s", sound_id)
            return
        self._queue.put(sound_id)

    def shutdown(self) -> None:
        if not self.enabled or self._queue is None or self._stop_requested:
            return
        self._stop_requested = True
        self._queue.put(None)
        self._queue.join()
        if self._worker is not None:
            self._worker.join(timeout=2.0)
        try:
            self._sd.stop()
        except Exception:
            logger.debug("sounddevice stop failed.", exc_info=True)
        logger.info("Sound stopped.")
