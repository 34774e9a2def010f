# src/action_board/cli/main.py

"""
CLI entrypoint.

Initializes logging, starts the background event loop used for AI requests,
builds AppState, then runs the console board in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleUI, run_console_loop
from ..core.loop_runner import LoopRunner
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    # keep noisy libs readable
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    ui = ConsoleUI()
    runner = LoopRunner().start()
    state = create_initial_state(
        settings=settings,
        ui=ui,
        effects=ui,
        navigator=ui,
        spawn=runner.submit,
    )

    try:
        run_console_loop(state, ui)
    finally:
        runner.stop()
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
