# src/action_board/board/prioritize.py

"""
AI reprioritization workflow.

Per AI task:  idle -> requesting -> succeeded | failed

- Only one request per AI task may be in flight; re-activation while
  requesting is a no-op.
- The AI task is completed only when the call succeeds (or there is nothing
  to prioritize). On failure the completion is rolled back via
  TaskStore.revert() and the user gets one error notification.
- A result is applied only if its request is still the current one: same
  ticket, same store epoch, task still present. The check and the store
  mutation happen in one store transaction. Reset abandons everything.
- The returned order is advisory; the canonical collection is never reordered.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections.abc import Coroutine
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.ports import Notifier, Prioritizer, SoundTriggers
from ..llm.client import friendly_llm_error_message
from ..llm.prioritizer import FAILURE_MESSAGE, PrioritizationError
from .task_models import PrioritizationReport, SoundTrigger, TaskBehavior, TaskCollection
from .task_store import TaskStore

logger = logging.getLogger(__name__)

NOTHING_TO_PRIORITIZE = "Nothing to prioritize: every other task is already done."


class PrioritizationPhase(StrEnum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class _InFlight:
    ticket: int
    epoch: int
    labels: tuple[str, ...]


def eligible_labels(tasks: TaskCollection) -> list[str]:
    """Labels of incomplete tasks, excluding AI tasks themselves (canonical order)."""
    return [t.label for t in tasks if not t.completed and t.behavior != TaskBehavior.AI_PRIORITIZE]


class PrioritizationWorkflow:
    def __init__(
        self,
        store: TaskStore,
        prioritizer: Prioritizer,
        notifier: Notifier,
        sounds: SoundTriggers,
        *,
        timeout_seconds: float | None = 60.0,
    ) -> None:
        self._store = store
        self._prioritizer = prioritizer
        self._notifier = notifier
        self._sounds = sounds
        self._timeout = timeout_seconds

        self._lock = threading.Lock()
        self._phases: dict[int, PrioritizationPhase] = {}
        self._inflight: dict[int, _InFlight] = {}
        self._tickets = itertools.count(1)

        self.current_report: PrioritizationReport | None = None
        self.last_error: str | None = None

    # ---- state ----

    def phase(self, task_id: int) -> PrioritizationPhase:
        with self._lock:
            return self._phases.get(task_id, PrioritizationPhase.IDLE)

    def is_busy(self, task_id: int) -> bool:
        return self.phase(task_id) == PrioritizationPhase.REQUESTING

    def dismiss_report(self) -> PrioritizationReport | None:
        report, self.current_report = self.current_report, None
        return report

    def abandon_all(self) -> None:
        """Drop every in-flight request; late results will be discarded."""
        with self._store.transaction(), self._lock:
            if self._inflight:
                logger.info("Abandoning %d in-flight prioritization request(s)", len(self._inflight))
            for task_id in self._inflight:
                self._phases[task_id] = PrioritizationPhase.IDLE
            self._inflight.clear()

    # ---- transitions ----
    #
    # Lock order: store transaction first, then self._lock. Every check that
    # decides a store mutation runs under both, together with the mutation,
    # so a concurrent reset lands either fully before or fully after it.

    def request(self, task_id: int) -> Coroutine[Any, Any, PrioritizationPhase] | None:
        """
        Synchronous half of an activation.

        Returns the coroutine that performs the external call, or None when
        there is nothing to await (no-op, or the nothing-to-prioritize path).
        """
        with self._store.transaction():
            task = self._store.get(task_id)
            if task is None or task.completed or task.behavior != TaskBehavior.AI_PRIORITIZE:
                logger.debug("Prioritization request for task %s ignored", task_id)
                return None

            with self._lock:
                if self._phases.get(task_id) == PrioritizationPhase.REQUESTING:
                    logger.debug("Prioritization already in flight for task %s", task_id)
                    return None

                labels = tuple(eligible_labels(self._store.snapshot()))
                if not labels:
                    self._phases[task_id] = PrioritizationPhase.SUCCEEDED
                else:
                    flight = _InFlight(ticket=next(self._tickets), epoch=self._store.epoch, labels=labels)
                    self._inflight[task_id] = flight
                    self._phases[task_id] = PrioritizationPhase.REQUESTING

            if not labels:
                logger.info("Nothing to prioritize; completing task %s without a service call", task_id)
                self._store.complete(task_id)

        if not labels:
            self._notify_info(NOTHING_TO_PRIORITIZE)
            return None

        logger.info("Prioritization requested task=%s labels=%d ticket=%d", task_id, len(labels), flight.ticket)
        return self._call(task_id, flight)

    async def run(self, task_id: int) -> PrioritizationPhase:
        pending = self.request(task_id)
        if pending is not None:
            return await pending
        return self.phase(task_id)

    async def _call(self, task_id: int, flight: _InFlight) -> PrioritizationPhase:
        try:
            call = self._prioritizer.prioritize(list(flight.labels))
            if self._timeout:
                report = await asyncio.wait_for(call, timeout=self._timeout)
            else:
                report = await call
            if not isinstance(report, PrioritizationReport):
                raise PrioritizationError("AI service returned an unexpected result type.")
        except asyncio.CancelledError:
            self._discard(task_id, flight, reason="cancelled")
            raise
        except Exception as e:
            return self._fail(task_id, flight, e)

        return self._succeed(task_id, flight, report)

    def _is_current(self, task_id: int, flight: _InFlight) -> bool:
        # Caller holds the store transaction and self._lock.
        return (
            self._inflight.get(task_id) == flight
            and self._store.epoch == flight.epoch
            and self._store.get(task_id) is not None
        )

    def _discard(self, task_id: int, flight: _InFlight, *, reason: str) -> PrioritizationPhase:
        with self._lock:
            if self._inflight.get(task_id) == flight:
                del self._inflight[task_id]
                self._phases[task_id] = PrioritizationPhase.IDLE
            phase = self._phases.get(task_id, PrioritizationPhase.IDLE)
        logger.info("Discarding stale prioritization result task=%s ticket=%d (%s)", task_id, flight.ticket, reason)
        return phase

    def _succeed(self, task_id: int, flight: _InFlight, report: PrioritizationReport) -> PrioritizationPhase:
        with self._store.transaction():
            with self._lock:
                stale = not self._is_current(task_id, flight)
                if not stale:
                    del self._inflight[task_id]
                    self._phases[task_id] = PrioritizationPhase.SUCCEEDED
                    self.current_report = report
                    self.last_error = None
            if not stale:
                self._store.complete(task_id)
        if stale:
            return self._discard(task_id, flight, reason="abandoned")

        logger.info("Prioritization succeeded task=%s order=%s", task_id, list(report.ordered_labels))

        try:
            self._notifier.show_report(report)
        except Exception:
            logger.exception("Presenting the prioritization report failed.")
        try:
            self._sounds.play_trigger(SoundTrigger.TRIGGER)
        except Exception:
            logger.exception("Prioritization sound failed.")
        return PrioritizationPhase.SUCCEEDED

    def _fail(self, task_id: int, flight: _InFlight, err: Exception) -> PrioritizationPhase:
        if isinstance(err, asyncio.TimeoutError):
            message = "AI service timed out. Try again later."
        elif isinstance(err, RuntimeError):
            message = friendly_llm_error_message(err)
        else:
            message = FAILURE_MESSAGE

        with self._store.transaction():
            with self._lock:
                stale = not self._is_current(task_id, flight)
                if not stale:
                    del self._inflight[task_id]
                    self._phases[task_id] = PrioritizationPhase.FAILED
                    self.last_error = message
            if not stale:
                self._store.revert(task_id)
        if stale:
            return self._discard(task_id, flight, reason="abandoned after failure")

        logger.warning("Prioritization failed task=%s: %s", task_id, message, exc_info=err)
        self._notify_error(message)
        return PrioritizationPhase.FAILED

    # ---- notifications (never raise) ----

    def _notify_info(self, text: str) -> None:
        try:
            self._notifier.info(text)
        except Exception:
            logger.exception("Notifier failed.")

    def _notify_error(self, text: str) -> None:
        try:
            self._notifier.error(text)
        except Exception:
            logger.exception("Notifier failed.")
