# tests/test_loop_runner.py

from __future__ import annotations

import asyncio

import pytest

from action_board.core.loop_runner import LoopRunner


def test_submit_runs_on_background_loop() -> None:
    runner = LoopRunner().start()
    try:

        async def answer() -> int:
            await asyncio.sleep(0)
            return 42

        assert runner.submit(answer()).result(timeout=5) == 42
    finally:
        runner.stop()


def test_stop_cancels_pending_work() -> None:
    runner = LoopRunner().start()
    fut = runner.submit(asyncio.sleep(60))
    runner.stop()
    assert fut.cancelled()


def test_submit_requires_start() -> None:
    async def noop() -> None:
        return None

    with pytest.raises(RuntimeError):
        LoopRunner().submit(noop())
