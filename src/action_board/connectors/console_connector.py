# src/action_board/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from datetime import datetime

from ..board.celebration import make_confetti
from ..board.handoff import completion_link
from ..board.task_models import PrioritizationReport
from ..cli.commands import registry as command_registry
from ..cli.render import render_board, render_confetti, render_report
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleUI:
    """
    Console presentation: notifier, celebration effects and navigator in one.

    AI results arrive from the background loop thread, so printing is
    serialized with a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _print(self, text: str) -> None:
        with self._lock:
            print(f"[{_ts_local()}] {text}", flush=True)

    # ---- Notifier ----

    def info(self, text: str) -> None:
        self._print(text)

    def error(self, text: str) -> None:
        self._print(f"[ERROR] {text}")

    def show_report(self, report: PrioritizationReport) -> None:
        self._print(render_report(report) + "\n(/report dismiss to close)")

    # ---- CelebrationEffects ----

    def celebrate(self) -> None:
        particles = make_confetti()
        strip = "\n".join(render_confetti(particles[i::3]) for i in range(3))
        self._print("\n" + strip)

    def clear(self) -> None:
        # Printed confetti stays in the scrollback.
        self._print("Board reopened.")

    # ---- Navigator ----

    def open_action_view(self, task_id: int, link: str) -> None:
        self._print(
            f"Opening action view {link}\n"
            f"  (the view returns to {completion_link(task_id)} when you complete the action)"
        )


def run_console_loop(state: AppState, ui: ConsoleUI) -> None:
    logger.info("Console connector started.")
    print(render_board(state))
    print(f"[{_ts_local()}] Type a task id to activate it. Use /help for commands, /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (AI requests)
        ui.info(text)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # A bare task id is shorthand for /do <id>.
        if user_input.isdigit():
            user_input = f"/do {user_input}"

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Type a task id or a /command. Use /help to list commands."
        print(f"[{_ts_local()}] {response}\n")

    logger.info("Console connector finished.")
