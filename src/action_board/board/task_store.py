# src/action_board/board/task_store.py

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Callable, Iterator

from .persistence import BoardPersistence
from .task_models import DEFAULT_TASKS, Task, TaskCollection, fresh_collection, has_unique_ids

logger = logging.getLogger(__name__)

StoreListener = Callable[[TaskCollection], None]


class TaskStore:
    """
    Owns the canonical task collection.

    Snapshots are immutable tuples, so readers never see a half-applied
    mutation. Every committed mutation is pushed to subscribers (feedback
    controller, persistence writer) while the store lock is held, which keeps
    notifications in commit order.

    Invariants:
    - task ids are unique within the live collection
    - completed only flips false -> true, except via reset() and revert()
    - no-op mutations return the unchanged snapshot and notify nobody
    """

    def __init__(
        self,
        defaults: TaskCollection = DEFAULT_TASKS,
        persistence: BoardPersistence | None = None,
    ) -> None:
        if not defaults or not has_unique_ids(defaults):
            raise ValueError("default task configuration must be non-empty with unique ids")

        self._defaults = fresh_collection(defaults)
        self._persistence = persistence
        self._lock = threading.RLock()
        self._tasks: TaskCollection = self._defaults
        self._epoch = 0
        self._listeners: list[StoreListener] = []

    # ---- read side ----

    @property
    def epoch(self) -> int:
        """Bumped by every reset; async results from an older epoch are stale."""
        with self._lock:
            return self._epoch

    def snapshot(self) -> TaskCollection:
        with self._lock:
            return self._tasks

    def get(self, task_id: int) -> Task | None:
        with self._lock:
            for t in self._tasks:
                if t.id == task_id:
                    return t
            return None

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Hold the store lock across a check-then-mutate sequence.

        Callers that also hold their own lock must take this one first.
        """
        with self._lock:
            yield

    # ---- observers ----

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, tasks: TaskCollection) -> TaskCollection:
        self._tasks = tasks
        for listener in list(self._listeners):
            try:
                listener(tasks)
            except Exception:
                logger.exception("Store listener failed: %r", listener)
        return tasks

    # ---- mutations ----

    def load(self) -> TaskCollection:
        """Initialize from persisted state; absent or corrupt state -> defaults."""
        loaded = self._persistence.load_tasks() if self._persistence is not None else None
        with self._lock:
            self._tasks = loaded if loaded is not None else self._defaults
            logger.info(
                "TaskStore loaded tasks=%d completed=%d source=%s",
                len(self._tasks),
                sum(1 for t in self._tasks if t.completed),
                "persisted" if loaded is not None else "defaults",
            )
            return self._tasks

    def _set_completed(self, task_id: int, completed: bool) -> TaskCollection:
        with self._lock:
            target = self.get(task_id)
            if target is None or target.completed == completed:
                logger.debug("set_completed(%s, %s) ignored (missing or unchanged)", task_id, completed)
                return self._tasks

            updated = tuple(t.with_completed(completed) if t.id == task_id else t for t in self._tasks)
            logger.info("Task %s -> %s", task_id, "completed" if completed else "incomplete")
            return self._commit(updated)

    def complete(self, task_id: int) -> TaskCollection:
        """Mark a task completed. Idempotent: missing or completed ids are no-ops."""
        return self._set_completed(task_id, True)

    def revert(self, task_id: int) -> TaskCollection:
        """Roll a completion back to incomplete (AI failure recovery)."""
        return self._set_completed(task_id, False)

    def reset(self) -> TaskCollection:
        """Replace the collection with the defaults, all incomplete. No undo."""
        with self._lock:
            self._epoch += 1
            logger.info("TaskStore reset (epoch=%d)", self._epoch)
            return self._commit(fresh_collection(self._defaults))
