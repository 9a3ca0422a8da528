"""Food spawning logic."""

from __future__ import annotations

import logging

import numpy as np

from snake_frenzy.grid import Position

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places food on random cells that do not already hold food.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(self, size: int, rng: np.random.Generator | None = None) -> None:
        if size < 1:
            raise ValueError("size must be at least 1.")
        self.size = size
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def area(self) -> int:
        return self.size * self.size

    def random_position(self) -> Position:
        """Draw a uniformly random cell of the grid."""
        r, c = self.rng.integers(0, self.size, size=2)
        return int(r), int(c)

    def try_spawn(self, food: frozenset[Position]) -> frozenset[Position]:
        """Return *food* plus one new item, or *food* itself when saturated.

        Rejection-samples until an unused cell turns up; the expected number
        of draws stays small while the board is sparsely filled.
        """
        if len(food) >= self.area:
            logger.debug("Grid saturated with food; skipping spawn.")
            return food
        while True:
            pos = self.random_position()
            if pos not in food:
                return food | {pos}

    def random_positions(self, count: int) -> frozenset[Position]:
        """Sample *count* cells with replacement; duplicates collapse."""
        return frozenset(self.random_position() for _ in range(count))
