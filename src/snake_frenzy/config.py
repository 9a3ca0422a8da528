"""Game configuration value object."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Immutable settings fixed when a game is created.

    Supports JSON serialization so a session can be reproduced.
    """

    grid_size: int = 40
    motion_interval_ms: int = 100
    spawn_interval_ms: int = 100
    food_enabled: bool = True
    # Cells sampled by "randomize obstacles"; ``None`` means one per row.
    random_obstacle_count: int | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_size < 4:
            raise ValueError("grid_size must be at least 4.")
        if self.motion_interval_ms < 0:
            raise ValueError("motion_interval_ms must be >= 0.")
        if self.spawn_interval_ms < 0:
            raise ValueError("spawn_interval_ms must be >= 0.")
        if self.random_obstacle_count is not None and not (
            0 <= self.random_obstacle_count <= self.area
        ):
            raise ValueError(
                "random_obstacle_count must be between 0 and the grid area."
            )

    @property
    def area(self) -> int:
        return self.grid_size * self.grid_size

    @property
    def effective_obstacle_count(self) -> int:
        if self.random_obstacle_count is not None:
            return self.random_obstacle_count
        return self.grid_size

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls(**json.loads(Path(path).read_text()))
