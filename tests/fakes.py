# tests/fakes.py

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from action_board.board.task_models import PrioritizationReport
from action_board.core.ports import ChatMessage


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions
    - Yields a predefined text as a single chunk
    """

    def __init__(self, next_text: str = "ok") -> None:
        self.next_text = next_text
        self.calls: list[tuple[list[ChatMessage], str]] = []

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls.append((messages, system_prompt))
        yield self.next_text


class MemoryKeyValueStore:
    """In-memory KeyValueStore; can be told to fail writes."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.writes: list[tuple[str, str]] = []
        self.fail_writes = False

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes.append((key, value))
        self.data[key] = value


class FakePrioritizer:
    """
    Prioritizer port fake.

    - records every task list it was asked about
    - returns `report`, or raises `error`
    - if `gate` is set, waits for it first (keeps a request in flight)
    """

    def __init__(
        self,
        report: PrioritizationReport | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.report = report
        self.error = error
        self.gate = gate
        self.calls: list[list[str]] = []

    async def prioritize(self, task_list: Sequence[str]) -> PrioritizationReport:
        self.calls.append(list(task_list))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.report is not None:
            return self.report
        return PrioritizationReport(ordered_labels=tuple(reversed(task_list)), reasoning="reversed")


@dataclass(slots=True)
class FakeUI:
    """Notifier + CelebrationEffects + Navigator in one recorder."""

    infos: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    reports: list[PrioritizationReport] = field(default_factory=list)
    celebrations: int = 0
    clears: int = 0
    opened: list[tuple[int, str]] = field(default_factory=list)

    def info(self, text: str) -> None:
        self.infos.append(text)

    def error(self, text: str) -> None:
        self.errors.append(text)

    def show_report(self, report: PrioritizationReport) -> None:
        self.reports.append(report)

    def celebrate(self) -> None:
        self.celebrations += 1

    def clear(self) -> None:
        self.clears += 1

    def open_action_view(self, task_id: int, link: str) -> None:
        self.opened.append((task_id, link))


@dataclass(slots=True)
class FakePlayer:
    played: list[str] = field(default_factory=list)
    fail: bool = False
    enabled: bool = True

    def play(self, sound_id: str) -> None:
        if self.fail:
            raise RuntimeError("no audio device")
        self.played.append(sound_id)

    def shutdown(self) -> None:
        return


@dataclass(slots=True)
class FakeSoundTriggers:
    triggered: list[str] = field(default_factory=list)

    def play_trigger(self, trigger: str) -> None:
        self.triggered.append(str(trigger))
