"""Snake Frenzy: wrap-around snake simulation engine."""

from snake_frenzy.collision import is_terminal
from snake_frenzy.config import GameConfig
from snake_frenzy.controls import KeyCode, KeyRoute, route_key
from snake_frenzy.engine import GameEngine
from snake_frenzy.food import FoodSpawner
from snake_frenzy.grid import CellType, project, wrap, wrap_position
from snake_frenzy.snake import Direction, advance, next_head

__all__ = [
    "CellType",
    "Direction",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "KeyCode",
    "KeyRoute",
    "advance",
    "is_terminal",
    "next_head",
    "project",
    "route_key",
    "wrap",
    "wrap_position",
]
