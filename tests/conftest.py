# tests/conftest.py

from __future__ import annotations

from collections.abc import Coroutine, Iterator
from types import SimpleNamespace
from typing import Any

import pytest

from action_board.board.task_store import TaskStore
from action_board.cli.bootstrap import create_initial_state, shutdown_state
from action_board.core.state import AppState

from .fakes import FakePlayer, FakePrioritizer, FakeUI, MemoryKeyValueStore


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="action-board-test",
        data_dir=tmp_path,
        store_path=tmp_path / "board.sqlite3",
        llm_models=["test/model"],
        prioritize_timeout=5.0,
        sound_enabled=False,
        sound_volume=0.0,
    )


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def ui() -> FakeUI:
    return FakeUI()


@pytest.fixture()
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture()
def prioritizer() -> FakePrioritizer:
    return FakePrioritizer()


@pytest.fixture()
def spawned() -> list[Coroutine[Any, Any, Any]]:
    """Coroutines handed to the spawner; tests await them explicitly."""
    return []


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    kv: MemoryKeyValueStore,
    ui: FakeUI,
    player: FakePlayer,
    prioritizer: FakePrioritizer,
    spawned: list[Coroutine[Any, Any, Any]],
) -> Iterator[AppState]:
    """AppState wired with deterministic fakes (real store, feedback and workflow)."""
    app = create_initial_state(
        settings=settings,
        ui=ui,
        effects=ui,
        navigator=ui,
        spawn=spawned.append,
        kv=kv,
        prioritizer=prioritizer,
        player=player,
    )
    yield app
    for coro in spawned:
        coro.close()
    shutdown_state(app)


@pytest.fixture()
def store() -> TaskStore:
    s = TaskStore()
    s.load()
    return s
