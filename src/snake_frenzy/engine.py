"""Tick-based game engine composing motion, food, collision, and input."""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from snake_frenzy.collision import is_terminal
from snake_frenzy.config import GameConfig
from snake_frenzy.controls import route_key
from snake_frenzy.food import FoodSpawner
from snake_frenzy.grid import Position, board_to_dict, in_bounds, project
from snake_frenzy.snake import Direction, advance

logger = logging.getLogger(__name__)

StateListener = Callable[[dict], None]


class GameEngine:
    """Single-snake game on a wrap-around grid.

    The engine owns the body, food, obstacles, direction and run state.
    :meth:`step` is the motion tick and :meth:`spawn_food` the food tick;
    the caller schedules both. Every state change is pushed to the
    registered listeners as a serializable dict.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.spawner = FoodSpawner(self.config.grid_size, rng=self.rng)
        self._listeners: list[StateListener] = []
        self._reset()

    def _reset(self) -> None:
        self.body: tuple[Position, ...] = (self.spawner.random_position(),)
        self.food: frozenset[Position] = frozenset()
        self.obstacles: frozenset[Position] = frozenset()
        self.direction: Direction | None = None
        self.running = False
        self.game_over = False
        self.tick = 0
        self.board = self._project()

    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def size(self) -> int:
        return self.config.grid_size

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with the state after each change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, code: int) -> bool:
        """Apply a raw key code. Returns True if the key was recognized."""
        route = route_key(code)
        if route is None:
            logger.debug("Ignoring key code %r.", code)
            return False
        if self.game_over:
            logger.debug("Ignoring key %d after game over.", code)
            return False
        self.direction = route.direction
        if route.activate_run:
            self.running = True
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def step(self) -> dict:
        """Advance the snake by one tick.

        A no-op unless the game is running, so a tick that fires after a
        stop or restart cannot touch the fresh state.
        """
        if not self.running:
            return self.get_state()

        new_body = advance(self.body, self.direction, self.food, self.size)
        new_head = new_body[0]
        self.body = new_body
        if new_head in self.food:
            self.food = self.food - {new_head}
        self.tick += 1
        self.board = self._project()

        if is_terminal(self.body, self.obstacles):
            self._end_game()

        self._notify()
        return self.get_state()

    def spawn_food(self) -> dict:
        """Add at most one food item while the game is running."""
        if not self.running or not self.config.food_enabled:
            return self.get_state()
        food = self.spawner.try_spawn(self.food)
        if food is not self.food:
            self.food = food
            self.board = self._project()
            self._notify()
        return self.get_state()

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------

    def toggle_obstacle(self, row: int, col: int) -> bool:
        """Flip the obstacle flag of a cell. Returns the new flag."""
        pos = (row, col)
        if not in_bounds(pos, self.size):
            raise ValueError(
                f"Cell {pos} is outside the {self.size}x{self.size} grid."
            )
        if pos in self.obstacles:
            self.obstacles = self.obstacles - {pos}
        else:
            self.obstacles = self.obstacles | {pos}
        self._obstacles_changed()
        return pos in self.obstacles

    def randomize_obstacles(self) -> frozenset[Position]:
        """Replace all obstacles with a freshly sampled set."""
        self.obstacles = self.spawner.random_positions(
            self.config.effective_obstacle_count,
        )
        self._obstacles_changed()
        return self.obstacles

    def clear_obstacles(self) -> None:
        self.obstacles = frozenset()
        self._obstacles_changed()

    def _obstacles_changed(self) -> None:
        self.board = self._project()
        if not self.game_over and is_terminal(self.body, self.obstacles):
            self._end_game()
        self._notify()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def restart(self) -> dict:
        """Start over with a one-cell snake at a random position."""
        self._reset()
        logger.info("Game restarted with head at %s.", self.head)
        self._notify()
        return self.get_state()

    def _end_game(self) -> None:
        self.running = False
        self.game_over = True
        logger.info(
            "Game over at tick %d with length %d.", self.tick, len(self.body),
        )

    def _project(self):
        return project(self.body, self.food, self.obstacles, self.size)

    def _notify(self) -> None:
        if not self._listeners:
            return
        state = self.get_state()
        for listener in list(self._listeners):
            listener(state)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "running": self.running,
            "game_over": self.game_over,
            "direction": self.direction.name if self.direction else None,
            "length": len(self.body),
            "snake": [list(seg) for seg in self.body],
            "food": [list(p) for p in sorted(self.food)],
            "obstacles": [list(p) for p in sorted(self.obstacles)],
            "board": board_to_dict(self.board),
        }
