# src/action_board/board/dispatcher.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.ports import Navigator, SoundTriggers, Spawner
from .handoff import NavigationHandoff, action_link
from .prioritize import PrioritizationWorkflow
from .task_models import SoundTrigger, TaskBehavior, TaskCollection
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class ActivationResult(StrEnum):
    IGNORED = "ignored"  # missing, completed or busy
    COMPLETED = "completed"
    NAVIGATED = "navigated"  # waiting for the external view to report back
    STARTED = "started"  # AI request in flight


class ActionDispatcher:
    """
    Routes a task activation to the task's behavior and reconciles the result
    back into the TaskStore.

    Side effects stay behavior-scoped: toggles never reach the AI workflow,
    and AI tasks never get the plain checkbox sound.
    """

    def __init__(
        self,
        store: TaskStore,
        workflow: PrioritizationWorkflow,
        handoff: NavigationHandoff,
        navigator: Navigator,
        sounds: SoundTriggers,
        spawn: Spawner,
    ) -> None:
        self._store = store
        self._workflow = workflow
        self._handoff = handoff
        self._navigator = navigator
        self._sounds = sounds
        self._spawn = spawn

    def _play(self, trigger: SoundTrigger) -> None:
        try:
            self._sounds.play_trigger(trigger)
        except Exception:
            logger.exception("Sound trigger %s failed.", trigger)

    def activate(self, task_id: int) -> ActivationResult:
        task = self._store.get(task_id)
        if task is None or task.completed:
            logger.debug("activate(%s) ignored (missing or completed)", task_id)
            return ActivationResult.IGNORED

        if task.behavior == TaskBehavior.TOGGLE:
            self._store.complete(task_id)
            self._play(SoundTrigger.CHECKBOX)
            return ActivationResult.COMPLETED

        if task.behavior == TaskBehavior.NAVIGATE_AND_COMPLETE:
            link = action_link(task_id)
            logger.info("Task %s -> external action view %s", task_id, link)
            self._navigator.open_action_view(task_id, link)
            return ActivationResult.NAVIGATED

        if task.behavior == TaskBehavior.AI_PRIORITIZE:
            if self._workflow.is_busy(task_id):
                return ActivationResult.IGNORED
            pending = self._workflow.request(task_id)
            if pending is None:
                done = self._store.get(task_id)
                return ActivationResult.COMPLETED if done is not None and done.completed else ActivationResult.IGNORED
            self._spawn(pending)
            return ActivationResult.STARTED

        logger.warning("Task %s has unknown behavior %r", task_id, task.behavior)
        return ActivationResult.IGNORED

    def report_completion(self, signal: object) -> bool:
        """Entry point for the external view: record its signal, then process it."""
        self._handoff.submit(signal)
        return self.process_handoff()

    def process_handoff(self) -> bool:
        """Consume the pending handoff signal; True if it completed a task."""
        task_id = self._handoff.consume()
        if task_id is None:
            return False

        task = self._store.get(task_id)
        if task is None or task.completed or task.behavior != TaskBehavior.NAVIGATE_AND_COMPLETE:
            logger.debug("Handoff signal for task %s ignored", task_id)
            return False

        self._store.complete(task_id)
        self._play(SoundTrigger.TRIGGER)
        logger.info("Task %s completed by external action view", task_id)
        return True

    def reset(self) -> TaskCollection:
        # One transaction, so an AI result cannot land between abandon and reset.
        with self._store.transaction():
            self._workflow.abandon_all()
            self._workflow.dismiss_report()
            return self._store.reset()
