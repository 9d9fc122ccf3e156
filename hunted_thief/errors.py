"""hunted_thief/errors.py — Rejected moves and malformed map setup.

Every SokobanError is recoverable: the kernel raises it before touching any
state, so callers may simply ignore the attempted move.
"""

from __future__ import annotations

from hunted_thief.tiles import Direction


class SokobanError(Exception):
    """Base class for moves the kernel refused."""


class NoPlayer(SokobanError):
    def __init__(self) -> None:
        super().__init__("No player on the map")


class MovedOutOfRange(SokobanError):
    def __init__(self, x: int, y: int, direction: Direction) -> None:
        super().__init__(f"Thing at ({x}, {y}) cannot move {direction.name}: off the map")
        self.x = x
        self.y = y
        self.direction = direction


class BumpedIntoWall(SokobanError):
    def __init__(self, x: int, y: int, direction: Direction) -> None:
        super().__init__(f"Thing at ({x}, {y}) cannot move {direction.name}: wall")
        self.x = x
        self.y = y
        self.direction = direction


class CollisionLoop(SokobanError):
    def __init__(self) -> None:
        super().__init__("Pushed things form a loop")


class MapSetupError(ValueError):
    """Inconsistent map passed to load_map. A programmer error."""
