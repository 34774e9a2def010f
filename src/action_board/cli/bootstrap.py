# src/action_board/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/LLM/audio/presentation),
- subscribes the feedback controller and the persistence writer to the store.
"""

from __future__ import annotations

import logging

from ..audio.player import SoundPlayer
from ..audio.sound_board import SoundBoard
from ..board.dispatcher import ActionDispatcher
from ..board.feedback import CompletionFeedback
from ..board.handoff import NavigationHandoff
from ..board.persistence import BoardPersistence, PersistenceWriter
from ..board.prioritize import PrioritizationWorkflow
from ..board.task_models import DEFAULT_TASKS, TaskCollection
from ..board.task_store import TaskStore
from ..config import get_settings
from ..core.ports import (
    AudioPlayer,
    CelebrationEffects,
    KeyValueStore,
    LLMClient,
    Navigator,
    Notifier,
    Prioritizer,
    Spawner,
)
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..llm.prioritizer import LLMPrioritizer
from ..storage.kv_store import SqliteKeyValueStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def build_llm_client(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except Exception as e:
        # Fallback for demos / local runs without external services.
        logger.info("Using offline LLM (%s)", e)
        return OfflineLLMClient()


def create_initial_state(
    *,
    ui: Notifier,
    effects: CelebrationEffects,
    navigator: Navigator,
    spawn: Spawner,
    settings=None,
    kv: KeyValueStore | None = None,
    prioritizer: Prioritizer | None = None,
    player: AudioPlayer | None = None,
    defaults: TaskCollection = DEFAULT_TASKS,
) -> AppState:
    """
    Create AppState from the provided settings and collaborators.

    Everything concrete is injectable so tests can swap in fakes.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SqliteKeyValueStore(settings.store_path)
    if prioritizer is None:
        prioritizer = LLMPrioritizer(build_llm_client(settings))
    if player is None:
        player = SoundPlayer(
            enabled=getattr(settings, "sound_enabled", False),
            volume=getattr(settings, "sound_volume", 0.3),
        )

    persistence = BoardPersistence(kv)
    store = TaskStore(defaults, persistence)
    sounds = SoundBoard(player, persistence)
    handoff = NavigationHandoff()

    workflow = PrioritizationWorkflow(
        store,
        prioritizer,
        ui,
        sounds,
        timeout_seconds=getattr(settings, "prioritize_timeout", 60.0),
    )
    dispatcher = ActionDispatcher(store, workflow, handoff, navigator, sounds, spawn)

    feedback = CompletionFeedback(effects, sounds)
    feedback.prime(store.load())

    writer = PersistenceWriter(persistence)
    store.subscribe(feedback)
    store.subscribe(writer)

    return AppState(
        settings=settings,
        store=store,
        workflow=workflow,
        dispatcher=dispatcher,
        feedback=feedback,
        handoff=handoff,
        sounds=sounds,
        player=player,
        writer=writer,
    )


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if state.writer is not None:
        try:
            state.writer.shutdown()
        except Exception:
            logger.exception("Persistence writer shutdown failed.")
    try:
        state.player.shutdown()
    except Exception:
        logger.debug("Sound shutdown failed.", exc_info=True)
