"""Random match simulation driven by team strengths."""

from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


HOME_FACTOR = 2.0
AWAY_FACTOR = 1.8


def simulate_goals(expected: float, rng: RandomSource | None = None) -> int:
    """Draw a goal count around the expected value."""
    rng = rng or random
    base = int(expected)
    roll = rng.random()
    if roll < 0.4:
        return base
    if roll < 0.65:
        return base + 1
    if roll < 0.8:
        return base + 2
    if roll < 0.9:
        return base + 3
    return base + rng.randrange(5)


def simulate_match(
    home_strength: int, away_strength: int, rng: RandomSource | None = None
) -> tuple[int, int]:
    """Simulate a match and return ``(home_goals, away_goals)``.

    The home side gets a larger scoring factor than the away side.
    """
    total = home_strength + away_strength
    if total == 0:
        raise ValueError("combined team strength must not be zero")
    expected_home = home_strength / total * HOME_FACTOR
    expected_away = away_strength / total * AWAY_FACTOR
    return simulate_goals(expected_home, rng), simulate_goals(expected_away, rng)