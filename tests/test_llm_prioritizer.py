# tests/test_llm_prioritizer.py

from __future__ import annotations

import json

import pytest

from action_board.llm.client import friendly_llm_error_message
from action_board.llm.offline import OfflineLLMClient
from action_board.llm.prioritizer import (
    PRIORITIZER_SYSTEM_PROMPT,
    LLMPrioritizer,
    PrioritizationError,
    build_user_message,
    parse_prioritization,
)

from .fakes import FakeLLMClient

TASKS = ["Write docs", "Fix login bug", "Plan sprint"]


def test_user_message_lists_every_task() -> None:
    assert build_user_message(TASKS) == "Tasks:\n- Write docs\n- Fix login bug\n- Plan sprint"


def test_parse_accepts_reordered_labels() -> None:
    raw = json.dumps({"prioritizedTasks": ["Fix login bug", "Plan sprint", "Write docs"], "reasoning": "bugs first"})
    report = parse_prioritization(raw, TASKS)
    assert report.ordered_labels == ("Fix login bug", "Plan sprint", "Write docs")
    assert report.reasoning == "bugs first"


def test_parse_tolerates_surrounding_text_and_whitespace() -> None:
    raw = 'Sure!\n```json\n{"prioritizedTasks": [" Plan sprint", "Write docs", "Fix login bug "], "reasoning": "r"}\n```'
    report = parse_prioritization(raw, TASKS)
    assert report.ordered_labels == ("Plan sprint", "Write docs", "Fix login bug")


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "no json here",
        "[1, 2, 3]",
        json.dumps({"reasoning": "missing list"}),
        json.dumps({"prioritizedTasks": TASKS}),
        json.dumps({"prioritizedTasks": [1, 2, 3], "reasoning": "r"}),
        json.dumps({"prioritizedTasks": TASKS[:2], "reasoning": "dropped one"}),
        json.dumps({"prioritizedTasks": TASKS + ["Extra"], "reasoning": "added one"}),
        json.dumps({"prioritizedTasks": [TASKS[0]] * 3, "reasoning": "duplicated"}),
    ],
)
def test_parse_rejects_contract_violations(raw: str) -> None:
    with pytest.raises(PrioritizationError):
        parse_prioritization(raw, TASKS)


@pytest.mark.asyncio
async def test_llm_prioritizer_sends_prompt_and_parses() -> None:
    llm = FakeLLMClient(next_text=json.dumps({"prioritizedTasks": list(reversed(TASKS)), "reasoning": "why"}))
    report = await LLMPrioritizer(llm).prioritize(TASKS)

    assert report.ordered_labels == tuple(reversed(TASKS))
    messages, system_prompt = llm.calls[0]
    assert system_prompt == PRIORITIZER_SYSTEM_PROMPT
    assert messages == [{"role": "user", "content": build_user_message(TASKS)}]


@pytest.mark.asyncio
async def test_llm_prioritizer_rejects_empty_list() -> None:
    with pytest.raises(ValueError):
        await LLMPrioritizer(FakeLLMClient()).prioritize([])


@pytest.mark.asyncio
async def test_offline_client_keeps_order() -> None:
    report = await LLMPrioritizer(OfflineLLMClient()).prioritize(TASKS)
    assert report.ordered_labels == tuple(TASKS)
    assert "Offline" in report.reasoning


def test_offline_client_answers_other_prompts() -> None:
    text = "".join(OfflineLLMClient().stream_chat([{"role": "user", "content": "hi"}], "You are helpful."))
    assert "Offline" in text


def test_friendly_error_messages() -> None:
    assert "missing API key" in friendly_llm_error_message(RuntimeError("LLM API key is not set. ..."))
    assert friendly_llm_error_message(RuntimeError("")) == "LLM error."
    assert friendly_llm_error_message(RuntimeError("boom")) == "boom"
