# src/action_board/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the board core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/LLM/audio/presentation swappable and makes testing easier.
"""

from collections.abc import Awaitable, Callable, Coroutine, Iterable, Sequence
from typing import Any, Protocol

from ..board.task_models import PrioritizationReport

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class KeyValueStore(Protocol):
    """Client-scoped persistence medium."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class Prioritizer(Protocol):
    """External AI service: task labels -> reordered labels + reasoning."""

    def prioritize(self, task_list: Sequence[str]) -> Awaitable[PrioritizationReport]: ...


class AudioPlayer(Protocol):
    def play(self, sound_id: str) -> None: ...
    def shutdown(self) -> None: ...


class SoundTriggers(Protocol):
    """Plays the sound the user picked for a trigger (checkbox/trigger/celebration)."""

    def play_trigger(self, trigger: str) -> None: ...


class Notifier(Protocol):
    """User-visible messaging (toasts and the prioritization dialog)."""

    def info(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...
    def show_report(self, report: PrioritizationReport) -> None: ...


class CelebrationEffects(Protocol):
    def celebrate(self) -> None: ...
    def clear(self) -> None: ...


class Navigator(Protocol):
    """Hands control to the external single-action view for a task."""

    def open_action_view(self, task_id: int, link: str) -> None: ...


# Schedules a coroutine without waiting for it (loop.create_task, run_coroutine_threadsafe, ...).
Spawner = Callable[[Coroutine[Any, Any, Any]], Any]
