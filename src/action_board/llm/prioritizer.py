# src/action_board/llm/prioritizer.py

"""
AI task prioritization over an LLM client.

Request:  a non-empty list of task labels.
Response: {"prioritizedTasks": [...same labels, reordered...], "reasoning": "..."}

Anything that does not match that shape (or reorders a different set of
labels than it was given) raises PrioritizationError.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import Counter
from collections.abc import Sequence
from typing import Any

from ..core.ports import LLMClient
from ..board.task_models import PrioritizationReport

logger = logging.getLogger(__name__)

PRIORITIZER_SYSTEM_PROMPT = """You are an AI task prioritization expert.
Given a list of tasks, analyze them and determine the optimal order of execution.

Return the reordered list and a detailed explanation of why the order was changed.
Include what makes a specific task to be prioritized above the others.

Rules:
- Keep every task exactly as written. Do not add, drop, merge or rename tasks.
- Output ONLY a JSON object, no markdown, no extra text:
  {"prioritizedTasks": ["<task>", ...], "reasoning": "<explanation>"}
"""

FAILURE_MESSAGE = "Failed to prioritize tasks due to an AI service error."


class PrioritizationError(RuntimeError):
    """The AI service failed or returned a response that does not fit the contract."""


def build_user_message(task_list: Sequence[str]) -> str:
    lines = ["Tasks:"]
    lines.extend(f"- {label}" for label in task_list)
    return "\n".join(lines)


def _extract_json_object(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("{") and raw.endswith("}"):
        return raw
    first = raw.find("{")
    last = raw.rfind("}")
    if first != -1 and last != -1 and last > first:
        return raw[first : last + 1]
    return raw


def parse_prioritization(raw: str, task_list: Sequence[str]) -> PrioritizationReport:
    raw = (raw or "").strip()
    if not raw:
        raise PrioritizationError("AI service returned an empty response.")

    try:
        data: Any = json.loads(_extract_json_object(raw))
    except ValueError as e:
        raise PrioritizationError("AI service returned a response that is not valid JSON.") from e

    if not isinstance(data, dict):
        raise PrioritizationError("AI service response is not a JSON object.")

    ordered = data.get("prioritizedTasks")
    reasoning = data.get("reasoning")

    if not isinstance(ordered, list) or not all(isinstance(x, str) for x in ordered):
        raise PrioritizationError("AI service response has no valid 'prioritizedTasks' list.")
    if not isinstance(reasoning, str):
        raise PrioritizationError("AI service response has no valid 'reasoning' text.")

    ordered_clean = tuple(x.strip() for x in ordered)
    if Counter(ordered_clean) != Counter(x.strip() for x in task_list):
        raise PrioritizationError("AI service changed the task list instead of reordering it.")

    return PrioritizationReport(ordered_labels=ordered_clean, reasoning=reasoning)


class LLMPrioritizer:
    """Prioritizer port implementation backed by a (blocking) streaming LLM client."""

    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    def _complete(self, user_message: str) -> str:
        raw = ""
        for piece in self._llm.stream_chat([{"role": "user", "content": user_message}], PRIORITIZER_SYSTEM_PROMPT):
            raw += piece
        return raw

    async def prioritize(self, task_list: Sequence[str]) -> PrioritizationReport:
        labels = [str(x) for x in task_list]
        if not labels:
            raise ValueError("task_list must contain at least one task")

        logger.info("Prioritizing %d tasks", len(labels))
        # The streaming client blocks; keep the event loop free while it runs.
        raw = await asyncio.to_thread(self._complete, build_user_message(labels))
        report = parse_prioritization(raw, labels)
        logger.debug("Prioritized order: %s", report.ordered_labels)
        return report
