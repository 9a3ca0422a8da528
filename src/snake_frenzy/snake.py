"""Directions and the snake motion step."""

from __future__ import annotations

import enum
from collections.abc import Collection, Sequence

from snake_frenzy.grid import Position, wrap_position


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    RIGHT = (0, 1)
    DOWN = (1, 0)
    LEFT = (0, -1)


def next_head(
    head: Position, direction: Direction | None, size: int,
) -> Position:
    """Compute the wrapped cell one step from *head*.

    An unset direction leaves the head where it is.
    """
    dr, dc = direction.value if direction is not None else (0, 0)
    r, c = head
    return wrap_position((r + dr, c + dc), size)


def advance(
    body: Sequence[Position],
    direction: Direction | None,
    food: Collection[Position],
    size: int,
) -> tuple[Position, ...]:
    """Move the snake one step forward and return the new body.

    The input body is left untouched. When the new head lands on food the
    pre-move tail is kept, so the body grows by exactly one segment.
    """
    if not body:
        raise ValueError("Snake body must contain at least one segment.")
    new_head = next_head(body[0], direction, size)
    moved = (new_head, *body[:-1])
    if new_head in food:
        return (*moved, body[-1])
    return moved
