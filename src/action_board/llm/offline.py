# src/action_board/llm/offline.py

from __future__ import annotations

import json
from collections.abc import Iterable

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Offline deterministic LLM client used when no external API is configured.

    Behavior:
    - Prioritization prompts -> the same tasks in their current order, as JSON
    - Anything else -> a short notice that no LLM is configured
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        sp = (system_prompt or "").lower()

        if "prioritization expert" in sp:
            user_text = ""
            for m in reversed(messages):
                if m["role"] == "user":
                    user_text = m["content"]
                    break

            tasks = [line[2:].strip() for line in user_text.splitlines() if line.startswith("- ")]
            yield json.dumps(
                {
                    "prioritizedTasks": tasks,
                    "reasoning": (
                        "Offline demo mode: no external LLM is configured, so the current order is kept. "
                        "Set BOARD_OPENROUTER_API_KEY (and BOARD_LLM_MODELS) to enable real prioritization."
                    ),
                },
                ensure_ascii=False,
            )
            return

        yield "Offline demo mode: no external LLM is configured."
