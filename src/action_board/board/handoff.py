# src/action_board/board/handoff.py

"""
Navigation handoff with the external single-action view.

The board links out to /action/<id>; the view links back with
?completed_task=<id>. The return signal is consumed exactly once so that
re-observing the same navigation state (back/forward, refresh) is harmless.
"""

from __future__ import annotations

import logging
import threading
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)

COMPLETED_TASK_PARAM = "completed_task"


def action_link(task_id: int) -> str:
    return f"/action/{task_id}"


def completion_link(task_id: int) -> str:
    return f"/?{COMPLETED_TASK_PARAM}={task_id}"


def _parse_int(raw: str) -> int | None:
    raw = raw.strip()
    # int() also accepts non-ASCII digits; task ids are plain ASCII.
    if not raw.isascii():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def parse_completed_task(value: object) -> int | None:
    """Accepts 3, "3", "completed_task=3" or "/?completed_task=3"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None

    direct = _parse_int(value)
    if direct is not None:
        return direct

    parts = urlsplit(value.strip())
    query = parts.query or (parts.path if "=" in parts.path else "")
    values = parse_qs(query.lstrip("?")).get(COMPLETED_TASK_PARAM)
    if not values:
        return None
    return _parse_int(values[0])


class NavigationHandoff:
    """Holds at most one pending completion signal."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: int | None = None

    def submit(self, value: object) -> int | None:
        task_id = parse_completed_task(value)
        if task_id is None:
            logger.debug("Ignoring unparseable handoff signal: %r", value)
            return None
        with self._lock:
            self._pending = task_id
        return task_id

    def consume(self) -> int | None:
        with self._lock:
            task_id, self._pending = self._pending, None
            return task_id
