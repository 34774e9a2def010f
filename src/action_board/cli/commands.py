# src/action_board/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..audio.player import SOUND_IDS
from ..board.dispatcher import ActivationResult
from ..board.handoff import parse_completed_task
from ..board.task_models import SoundTrigger, TaskBehavior
from ..core.state import AppState
from .render import render_board, render_report

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /do, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_board(state: AppState, args: list[str]) -> str:
    return render_board(state)


def cmd_do(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /do <id>  -> activate a task (checkbox, external action or AI prioritization)
    """
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /do <task id>."

    result = state.dispatcher.activate(task_id)
    logger.debug("activate(%s) -> %s", task_id, result.value)

    if result == ActivationResult.IGNORED:
        task = state.store.get(task_id)
        if task is None:
            return f"No task with id {task_id}."
        if task.completed:
            return f"Task {task_id} is already done."
        return f"Task {task_id} is busy."
    if result == ActivationResult.STARTED:
        if emit:
            emit("Asking the AI to prioritize the remaining tasks...")
        return render_board(state)
    if result == ActivationResult.NAVIGATED:
        return f"When the action is done, run /back {task_id}."
    return render_board(state)


def cmd_back(state: AppState, args: list[str]) -> str:
    """
    /back <id | /?completed_task=<id>>  -> the external action view reports completion
    """
    if not args:
        return "Usage: /back <task id or completion link>."

    signal = " ".join(args)
    if parse_completed_task(signal) is None:
        return f"Not a completion signal: {signal}"

    if not state.dispatcher.report_completion(signal):
        return "Nothing to complete (unknown task or already done)."
    return render_board(state)


def cmd_reset(state: AppState, args: list[str]) -> str:
    state.dispatcher.reset()
    return "Board reset.\n" + render_board(state)


def cmd_report(state: AppState, args: list[str]) -> str:
    """
    /report          -> show the last AI prioritization
    /report dismiss  -> close it
    """
    if args and args[0].lower() in ("dismiss", "close", "clear"):
        return "Report dismissed." if state.workflow.dismiss_report() else "No report to dismiss."

    report = state.workflow.current_report
    if report is None:
        if state.workflow.last_error:
            return f"No report. Last AI error: {state.workflow.last_error}"
        return "No AI prioritization yet."
    return render_report(report)


def cmd_sound(state: AppState, args: list[str]) -> str:
    """
    /sound                      -> show sound choices
    /sound <trigger> <sound|off> -> pick a sound for checkbox / trigger / celebration
    """
    if not args:
        prefs = state.sounds.preferences
        lines = ["Sounds:"]
        for trig in SoundTrigger:
            lines.append(f"  {trig.value}: {prefs.sound_for(trig) or 'off'}")
        lines.append(f"Available: {', '.join(SOUND_IDS)}")
        return "\n".join(lines)

    if len(args) != 2:
        return "Usage: /sound <checkbox|trigger|celebration> <sound|off>."

    try:
        state.sounds.set_sound(args[0], args[1])
    except ValueError as e:
        return str(e)

    state.sounds.play_trigger(args[0].lower())
    return f"Sound for {args[0].lower()} set to {args[1].lower()}."


def cmd_status(state: AppState, args: list[str]) -> str:
    progress = state.progress()
    models = ", ".join(list(getattr(state.settings, "llm_models", []) or []))
    ai_phases = ", ".join(
        f"#{t.id}={state.workflow.phase(t.id).value}"
        for t in state.store.snapshot()
        if t.behavior == TaskBehavior.AI_PRIORITIZE
    )
    return (
        "Status:\n"
        f"  Progress: {progress.completed}/{progress.total} ({progress.percent:.0f}%)\n"
        f"  AI tasks: {ai_phases or 'none'}\n"
        f"  Sound: {'ON' if getattr(state.player, 'enabled', False) else 'OFF'}\n"
        f"  Models (priority -> fallback): {models}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("board", cmd_board, help_text="Show the board.", aliases=["b", "ls"])
registry.register("do", cmd_do, help_text="Activate a task: /do <id> (or just type the id).", aliases=["done"])
registry.register("back", cmd_back, help_text="Report an external action as done: /back <id>.")
registry.register("reset", cmd_reset, help_text="Reset every task to not done (no undo).")
registry.register("report", cmd_report, help_text="Show or dismiss the AI prioritization: /report [dismiss].")
registry.register("sound", cmd_sound, help_text="Sound choices: /sound <trigger> <sound|off>.")
registry.register("status", cmd_status, help_text="Show progress, AI state and settings.")
