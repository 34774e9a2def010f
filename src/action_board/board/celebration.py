# src/action_board/board/celebration.py

from __future__ import annotations

import random
from dataclasses import dataclass

CONFETTI_COLORS: tuple[str, ...] = (
    "#87CEEB",  # primary
    "#66CDAA",  # accent
    "#FFD700",  # gold
    "#FF69B4",  # hotpink
    "#FFFFFF",  # white
)
CONFETTI_COUNT = 150

CELEBRATION_TITLE = "Job Complete!"
CELEBRATION_SUBTITLE = "Great work, time to celebrate!"


@dataclass(frozen=True, slots=True)
class ConfettiParticle:
    id: int
    color: str
    left: float  # percent of viewport width
    delay: float  # seconds
    duration: float  # seconds
    rotation: float  # degrees


def make_confetti(count: int = CONFETTI_COUNT, rng: random.Random | None = None) -> list[ConfettiParticle]:
    rng = rng or random.Random()
    return [
        ConfettiParticle(
            id=i,
            color=CONFETTI_COLORS[i % len(CONFETTI_COLORS)],
            left=rng.random() * 100,
            delay=rng.random() * 3,
            duration=rng.random() * 2 + 3,
            rotation=rng.random() * 360,
        )
        for i in range(max(0, count))
    ]
