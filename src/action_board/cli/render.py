# src/action_board/cli/render.py

from __future__ import annotations

from ..board.celebration import CELEBRATION_SUBTITLE, CELEBRATION_TITLE, ConfettiParticle
from ..board.feedback import summarize
from ..board.task_models import ControlKind, PrioritizationReport, Task
from ..core.state import AppState

_CONFETTI_GLYPHS = "*+.o~"


def _control(task: Task, busy: bool) -> str:
    if task.control_kind == ControlKind.CHECKBOX:
        return "[x]" if task.completed else "[ ]"
    if task.completed:
        return "(v)"
    return "(...)" if busy else "(>)"


def render_board(state: AppState) -> str:
    tasks = state.store.snapshot()
    progress = summarize(tasks)

    lines = [f"Action board: {progress.completed}/{progress.total} done ({progress.percent:.0f}%)"]
    for t in tasks:
        busy = state.workflow.is_busy(t.id)
        label = f"~{t.label}~" if t.completed else t.label
        suffix = "  (thinking...)" if busy else ""
        lines.append(f"  {t.id:>3}. {_control(t, busy)} {label}{suffix}")

    if progress.all_complete:
        lines.extend(["", f"  {CELEBRATION_TITLE}", f"  {CELEBRATION_SUBTITLE}"])
    return "\n".join(lines)


def render_report(report: PrioritizationReport) -> str:
    lines = ["AI prioritization:"]
    lines.extend(f"  {i}. {label}" for i, label in enumerate(report.ordered_labels, start=1))
    lines.extend(["", "Reasoning:", f"  {report.reasoning}"])
    return "\n".join(lines)


def render_confetti(particles: list[ConfettiParticle], width: int = 60) -> str:
    """One strip of confetti: each particle lands at its `left` position."""
    row = [" "] * max(1, width)
    for p in particles:
        col = min(width - 1, int(p.left / 100 * width))
        row[col] = _CONFETTI_GLYPHS[p.id % len(_CONFETTI_GLYPHS)]
    return "".join(row).rstrip()
