# src/action_board/board/feedback.py

"""
Completion feedback.

Progress and the "all complete" flag are pure functions of a snapshot.
The controller keeps exactly one piece of state (the last observed
"all complete" value) so celebration fires only on the rising edge.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ..core.ports import CelebrationEffects, SoundTriggers
from .task_models import SoundTrigger, TaskCollection

logger = logging.getLogger(__name__)


def progress_percent(tasks: TaskCollection) -> float:
    total = len(tasks)
    if total == 0:
        return 0.0
    return 100.0 * sum(1 for t in tasks if t.completed) / total


def is_fully_complete(tasks: TaskCollection) -> bool:
    return len(tasks) > 0 and all(t.completed for t in tasks)


@dataclass(frozen=True, slots=True)
class BoardProgress:
    completed: int
    total: int
    percent: float
    all_complete: bool


def summarize(tasks: TaskCollection) -> BoardProgress:
    return BoardProgress(
        completed=sum(1 for t in tasks if t.completed),
        total=len(tasks),
        percent=progress_percent(tasks),
        all_complete=is_fully_complete(tasks),
    )


class CompletionFeedback:
    """Edge-triggered celebration. Subscribe it to the TaskStore."""

    def __init__(self, effects: CelebrationEffects, sounds: SoundTriggers) -> None:
        self._effects = effects
        self._sounds = sounds
        self._lock = threading.Lock()
        self._was_complete = False
        self.celebrations = 0

    def prime(self, tasks: TaskCollection) -> None:
        """Record the initial state without firing (no replay on every start)."""
        with self._lock:
            self._was_complete = is_fully_complete(tasks)

    def __call__(self, tasks: TaskCollection) -> None:
        self.observe(tasks)

    def observe(self, tasks: TaskCollection) -> None:
        now_complete = is_fully_complete(tasks)
        with self._lock:
            was_complete = self._was_complete
            self._was_complete = now_complete

        if now_complete and not was_complete:
            self.celebrations += 1
            logger.info("All tasks complete -> celebrating")
            try:
                self._effects.celebrate()
            except Exception:
                logger.exception("Celebration effect failed.")
            try:
                self._sounds.play_trigger(SoundTrigger.CELEBRATION)
            except Exception:
                logger.exception("Celebration sound failed.")
        elif was_complete and not now_complete:
            logger.info("Board no longer complete -> clearing celebration")
            try:
                self._effects.clear()
            except Exception:
                logger.exception("Clearing celebration failed.")
