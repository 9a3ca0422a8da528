"""Termination rules: self-intersection and obstacle hits."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from snake_frenzy.grid import Position


def first_overlap(body: Sequence[Position]) -> Position | None:
    """Return the first coordinate that repeats, scanning head to tail."""
    seen: set[Position] = set()
    for seg in body:
        if seg in seen:
            return seg
        seen.add(seg)
    return None


def is_terminal(
    body: Sequence[Position],
    obstacles: Collection[Position] | None = None,
) -> bool:
    """Check whether *body* ends the game."""
    if first_overlap(body) is not None:
        return True
    return bool(obstacles) and body[0] in obstacles
