# src/action_board/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..audio.sound_board import SoundBoard
from ..board.dispatcher import ActionDispatcher
from ..board.feedback import BoardProgress, CompletionFeedback, summarize
from ..board.handoff import NavigationHandoff
from ..board.persistence import PersistenceWriter
from ..board.prioritize import PrioritizationWorkflow
from ..board.task_store import TaskStore
from .ports import AudioPlayer


@dataclass
class AppState:
    """Everything one board session needs, wired by cli.bootstrap."""

    settings: Any

    store: TaskStore
    workflow: PrioritizationWorkflow
    dispatcher: ActionDispatcher
    feedback: CompletionFeedback
    handoff: NavigationHandoff
    sounds: SoundBoard
    player: AudioPlayer
    writer: PersistenceWriter | None = None

    def progress(self) -> BoardProgress:
        return summarize(self.store.snapshot())
