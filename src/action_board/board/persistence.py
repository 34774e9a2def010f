# src/action_board/board/persistence.py

"""
Persistence adapter: serialized task collection + sound preferences.

Both live in the client-scoped key-value store under independent keys.
Malformed values are treated as absent, so a corrupt store never breaks loading.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from typing import Any

from ..core.ports import KeyValueStore
from .task_models import (
    ControlKind,
    SoundPreferences,
    SoundTrigger,
    Task,
    TaskBehavior,
    TaskCollection,
    has_unique_ids,
)

logger = logging.getLogger(__name__)

TASKS_KEY = "action_board.tasks"
SOUNDS_KEY = "action_board.sounds"


def dump_tasks(tasks: TaskCollection) -> str:
    return json.dumps(
        [
            {
                "id": t.id,
                "label": t.label,
                "controlKind": t.control_kind.value,
                "behavior": t.behavior.value,
                "completed": t.completed,
            }
            for t in tasks
        ],
        ensure_ascii=False,
    )


def _parse_task(raw: Any) -> Task | None:
    if not isinstance(raw, dict):
        return None
    tid = raw.get("id")
    label = raw.get("label")
    completed = raw.get("completed")
    # bool is an int subclass; ids must be real integers.
    if not isinstance(tid, int) or isinstance(tid, bool):
        return None
    if not isinstance(label, str) or not isinstance(completed, bool):
        return None
    control_kind = ControlKind.parse(raw.get("controlKind"))
    behavior = TaskBehavior.parse(raw.get("behavior"))
    if control_kind is None or behavior is None:
        return None
    return Task(id=tid, label=label, control_kind=control_kind, behavior=behavior, completed=completed)


def parse_tasks(raw: str | None) -> TaskCollection | None:
    """Deserialize a task collection. Returns None for anything not well-formed."""
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, list) or not data:
        return None

    tasks: list[Task] = []
    for item in data:
        task = _parse_task(item)
        if task is None:
            return None
        tasks.append(task)

    out = tuple(tasks)
    return out if has_unique_ids(out) else None


def dump_sounds(prefs: SoundPreferences) -> str:
    return json.dumps(dict(prefs.sounds), ensure_ascii=False, sort_keys=True)


def parse_sounds(raw: str | None) -> SoundPreferences:
    if not raw:
        return SoundPreferences()
    try:
        data = json.loads(raw)
    except ValueError:
        return SoundPreferences()
    if not isinstance(data, dict):
        return SoundPreferences()

    known = {t.value for t in SoundTrigger}
    clean = {
        str(k): v.strip()
        for k, v in data.items()
        if k in known and isinstance(v, str) and v.strip()
    }
    return SoundPreferences(sounds=clean)


class BoardPersistence:
    """Typed get/set over the key-value store."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def load_tasks(self) -> TaskCollection | None:
        try:
            raw = self._kv.get(TASKS_KEY)
        except Exception:
            logger.exception("Failed to read persisted tasks; using defaults.")
            return None

        tasks = parse_tasks(raw)
        if raw and tasks is None:
            logger.warning("Persisted task collection is malformed; ignoring it.")
        return tasks

    def save_tasks(self, tasks: TaskCollection) -> None:
        self._kv.set(TASKS_KEY, dump_tasks(tasks))

    def load_sounds(self) -> SoundPreferences:
        try:
            raw = self._kv.get(SOUNDS_KEY)
        except Exception:
            logger.exception("Failed to read sound preferences; using defaults.")
            return SoundPreferences()
        return parse_sounds(raw)

    def save_sounds(self, prefs: SoundPreferences) -> None:
        try:
            self._kv.set(SOUNDS_KEY, dump_sounds(prefs))
        except Exception:
            logger.exception("Failed to save sound preferences.")


class PersistenceWriter:
    """
    Fire-and-forget write-through of task snapshots.

    Subscribe an instance to the TaskStore. Snapshots are queued and written
    by a single worker thread, so writes land in commit order and the last
    snapshot wins. Failures are logged and never reach the caller.
    """

    def __init__(self, persistence: BoardPersistence) -> None:
        self._persistence = persistence
        self._queue: "queue.Queue[TaskCollection | None]" = queue.Queue()
        self._stop_requested = False

        self._worker = threading.Thread(target=self._run, name="board-persistence", daemon=True)
        self._worker.start()

    def __call__(self, snapshot: TaskCollection) -> None:
        if self._stop_requested:
            logger.warning("Persistence writer stopped; dropping snapshot.")
            return
        self._queue.put(snapshot)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                try:
                    self._persistence.save_tasks(item)
                except Exception:
                    logger.exception("Failed to persist task collection.")
            finally:
                self._queue.task_done()

    def flush(self) -> None:
        """Block until every queued snapshot has been written (or failed)."""
        self._queue.join()

    def shutdown(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True
        self._queue.put(None)
        self._queue.join()
        self._worker.join(timeout=2.0)
