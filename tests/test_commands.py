# tests/test_commands.py

from __future__ import annotations

import pytest

from action_board.cli.commands import CommandRegistry, registry


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["alpha"])
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x y") == "h2:x,y"
    assert reg.handle(state, "/ALPHA") == "h2:"
    assert reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_help_lists_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("/board", "/do", "/back", "/reset", "/report", "/sound", "/status"):
        assert name in text


def test_do_toggle_renders_board(state) -> None:
    reply = registry.handle(state, "/do 1") or ""
    assert "[x] ~Review project requirements~" in reply
    assert "1/4 done (25%)" in reply

    assert registry.handle(state, "/do 1") == "Task 1 is already done."
    assert registry.handle(state, "/do 99") == "No task with id 99."
    assert "Usage" in (registry.handle(state, "/do") or "")
    assert "Usage" in (registry.handle(state, "/do x") or "")


def test_do_navigate_then_back(state, ui) -> None:
    reply = registry.handle(state, "/do 4") or ""
    assert "/back 4" in reply
    assert ui.opened == [(4, "/action/4")]

    assert "(v) ~Initiate final review~" in (registry.handle(state, "/back /?completed_task=4") or "")
    assert "Nothing to complete" in (registry.handle(state, "/back 4") or "")
    assert "Not a completion signal" in (registry.handle(state, "/back soon") or "")


@pytest.mark.asyncio
async def test_do_ai_task_emits_progress_and_shows_report(state, spawned) -> None:
    notes: list[str] = []
    reply = registry.handle(state, "/do 3", emit=notes.append) or ""

    assert notes and "prioritize" in notes[0]
    assert "(...) Prioritize remaining tasks  (thinking...)" in reply
    assert registry.handle(state, "/do 3") == "Task 3 is busy."

    await spawned.pop()

    report = registry.handle(state, "/report") or ""
    assert report.startswith("AI prioritization:")
    assert "reversed" in report
    assert registry.handle(state, "/report dismiss") == "Report dismissed."
    assert registry.handle(state, "/report dismiss") == "No report to dismiss."
    assert registry.handle(state, "/report") == "No AI prioritization yet."


@pytest.mark.asyncio
async def test_report_shows_last_error(state, prioritizer, spawned) -> None:
    prioritizer.error = RuntimeError("quota exceeded")
    registry.handle(state, "/do 3")
    await spawned.pop()

    assert registry.handle(state, "/report") == "No report. Last AI error: quota exceeded"


def test_reset_and_celebration_banner(state, ui) -> None:
    for task_id in (1, 2):
        registry.handle(state, f"/do {task_id}")
    registry.handle(state, "/do 4")
    registry.handle(state, "/back 4")
    reply = registry.handle(state, "/do 3") or ""

    assert "Job Complete!" in reply
    assert ui.celebrations == 1

    reply = registry.handle(state, "/reset") or ""
    assert reply.startswith("Board reset.")
    assert "0/4 done" in reply
    assert ui.clears == 1


def test_sound_command(state, player) -> None:
    listing = registry.handle(state, "/sound") or ""
    assert "checkbox: off" in listing

    assert registry.handle(state, "/sound checkbox pop") == "Sound for checkbox set to pop."
    # picking a sound previews it
    assert player.played == ["pop"]
    assert "checkbox: pop" in (registry.handle(state, "/sound") or "")

    assert "Unknown sound" in (registry.handle(state, "/sound checkbox kazoo") or "")
    assert "Unknown trigger" in (registry.handle(state, "/sound doorbell pop") or "")
    assert "Usage" in (registry.handle(state, "/sound checkbox") or "")


def test_status(state) -> None:
    registry.handle(state, "/do 2")
    text = registry.handle(state, "/status") or ""
    assert "Progress: 1/4 (25%)" in text
    assert "#3=idle" in text
    assert "test/model" in text
