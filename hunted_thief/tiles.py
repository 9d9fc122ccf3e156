"""hunted_thief/tiles.py — Tile kinds and movement directions."""

from __future__ import annotations

from enum import Enum

from hunted_thief.constants import COORD_MASK

Pos = tuple[int, int]


class Tile(Enum):
    """Static floor layer. Only VOID -> FLOOR ever changes at runtime."""

    VOID = 0
    WALL = 1
    FLOOR = 2
    EXIT = 3


class Direction(Enum):
    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @property
    def delta(self) -> Pos:
        return _DELTAS[self]

    def apply(self, pos: Pos) -> Pos:
        """Step one cell in this direction with unsigned wrap-around.

        Stepping off the left or top edge wraps to COORD_MASK, which no grid
        accepts, so callers need no separate sign check.
        """
        dx, dy = _DELTAS[self]
        return (pos[0] + dx) & COORD_MASK, (pos[1] + dy) & COORD_MASK

    def opposite(self) -> Direction:
        return Direction((self.value + 2) % 4)


_DELTAS: dict[Direction, Pos] = {
    Direction.LEFT: (-1, 0),
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
}
