"""Toroidal grid geometry and board projection."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

Position = tuple[int, int]


class CellType(enum.IntEnum):
    """Integer codes stored in the projected board array."""

    BLANK = 0
    SNAKE = 1
    FOOD = 2
    WALL = 3


_ASCII: dict[CellType, str] = {
    CellType.BLANK: ".",
    CellType.SNAKE: "o",
    CellType.FOOD: "*",
    CellType.WALL: "#",
}


def wrap(value: int, bound: int) -> int:
    """Fold a coordinate that stepped off one edge onto the opposite edge."""
    if value < 0:
        return bound - 1
    if value >= bound:
        return 0
    return value


def wrap_position(position: Position, size: int) -> Position:
    """Apply :func:`wrap` to both axes of a ``(row, col)`` position."""
    row, col = position
    return wrap(row, size), wrap(col, size)


def in_bounds(position: Position, size: int) -> bool:
    """Check whether a coordinate lies within an ``size`` x ``size`` grid."""
    row, col = position
    return 0 <= row < size and 0 <= col < size


def project(
    body: Iterable[Position],
    food: Iterable[Position],
    obstacles: Iterable[Position],
    size: int,
) -> np.ndarray:
    """Classify every cell of the board.

    Food is painted first, then walls, then the snake, so snake cells win
    whenever coordinates coincide.
    """
    board = np.full((size, size), CellType.BLANK, dtype=np.int8)
    for r, c in food:
        board[r, c] = CellType.FOOD
    for r, c in obstacles:
        board[r, c] = CellType.WALL
    for r, c in body:
        board[r, c] = CellType.SNAKE
    return board


def board_to_dict(board: np.ndarray) -> dict:
    """Serialize a projected board to a dictionary."""
    return {
        "size": int(board.shape[0]),
        "cells": board.tolist(),
    }


def render_text(board: np.ndarray) -> str:
    """Render a projected board as one line of characters per row."""
    return "\n".join(
        "".join(_ASCII[CellType(v)] for v in row) for row in board.tolist()
    )
