"""Keyboard input routing."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from snake_frenzy.snake import Direction


class KeyCode(enum.IntEnum):
    """Browser ``keyCode`` values of the arrow keys."""

    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40


_KEY_DIRECTIONS: dict[KeyCode, Direction] = {
    KeyCode.LEFT: Direction.LEFT,
    KeyCode.UP: Direction.UP,
    KeyCode.RIGHT: Direction.RIGHT,
    KeyCode.DOWN: Direction.DOWN,
}

# Names accepted from text-based clients.
KEY_NAMES: dict[str, KeyCode] = {
    "up": KeyCode.UP,
    "down": KeyCode.DOWN,
    "left": KeyCode.LEFT,
    "right": KeyCode.RIGHT,
    "arrowup": KeyCode.UP,
    "arrowdown": KeyCode.DOWN,
    "arrowleft": KeyCode.LEFT,
    "arrowright": KeyCode.RIGHT,
}


@dataclass(frozen=True)
class KeyRoute:
    """Effect of a recognized key press on the game."""

    direction: Direction
    activate_run: bool = True


def route_key(code: int) -> KeyRoute | None:
    """Translate a raw key code, or return ``None`` for unrelated keys."""
    try:
        key = KeyCode(code)
    except ValueError:
        return None
    return KeyRoute(direction=_KEY_DIRECTIONS[key])


def key_from_name(name: str) -> KeyCode | None:
    """Look up a key by a case-insensitive name such as ``"up"``."""
    return KEY_NAMES.get(name.lower())
