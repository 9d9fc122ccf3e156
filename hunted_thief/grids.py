"""Synthetic map builders for tests, the demo level and the Gym adapter.

Maps are described in code, one string per row. No files are read.

    #  wall        .  floor       (space)  void     E  exit
    @  player      $  box         C  chest         (things stand on floor)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from hunted_thief.state import State, ThingEntry, ThingKind, ThingSpec, TileAt
from hunted_thief.tiles import Tile

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TILE_CHARS: dict[str, Tile] = {
    "#": Tile.WALL,
    ".": Tile.FLOOR,
    " ": Tile.VOID,
    "E": Tile.EXIT,
}

THING_CHARS: dict[str, ThingKind] = {
    "@": ThingKind.PLAYER,
    "$": ThingKind.BOX,
    "C": ThingKind.CHEST,
}

_TILE_SYMBOLS = {tile: ch for ch, tile in TILE_CHARS.items()}
_THING_SYMBOLS = {kind: ch for ch, kind in THING_CHARS.items()}


@dataclass
class MapSpec:
    """Arguments for SokobanKernel.load_map."""

    width: int
    height: int
    tile_at: TileAt
    things: list[ThingSpec] = field(default_factory=list)

    def as_args(self) -> tuple[int, int, TileAt, list[ThingSpec]]:
        return self.width, self.height, self.tile_at, list(self.things)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _wrap(tiles: dict[tuple[int, int], Tile]) -> TileAt:
    """Wrap a tile dict as a TileAt callable. Missing cells are VOID."""
    def tile_at(x: int, y: int) -> Tile:
        return tiles.get((x, y), Tile.VOID)
    return tile_at


# ---------------------------------------------------------------------------
# Public builders
# ---------------------------------------------------------------------------

def build_from_rows(rows: list[str]) -> MapSpec:
    """Build a map from rows of characters. Thing ids follow reading order.

    Raises:
        ValueError: On ragged rows or unknown characters.
    """
    width = len(rows[0]) if rows else 0
    tiles: dict[tuple[int, int], Tile] = {}
    things: list[ThingSpec] = []
    for y, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"Row {y} has length {len(row)}, expected {width}")
        for x, ch in enumerate(row):
            if ch in THING_CHARS:
                tiles[(x, y)] = Tile.FLOOR
                things.append((x, y, len(things), ThingEntry(THING_CHARS[ch])))
            elif ch in TILE_CHARS:
                tiles[(x, y)] = TILE_CHARS[ch]
            else:
                raise ValueError(f"Unknown map character {ch!r} at ({x}, {y})")
    return MapSpec(width=width, height=len(rows), tile_at=_wrap(tiles), things=things)


def build_room(width: int, height: int) -> MapSpec:
    """Floor surrounded by a one-tile wall border. No things."""
    tiles: dict[tuple[int, int], Tile] = {}
    for y in range(height):
        for x in range(width):
            border = x in (0, width - 1) or y in (0, height - 1)
            tiles[(x, y)] = Tile.WALL if border else Tile.FLOOR
    return MapSpec(width=width, height=height, tile_at=_wrap(tiles))


def build_corridor(length: int, boxes: int, *, wall_at_end: bool = False) -> MapSpec:
    """Single-row corridor: player at x=0 followed by `boxes` boxes.

    With wall_at_end the last cell is a wall, otherwise floor.
    """
    if boxes + 1 >= length:
        raise ValueError(f"Corridor of length {length} cannot hold {boxes} boxes and a gap")
    tail = "#" if wall_at_end else "."
    row = "@" + "$" * boxes + "." * (length - boxes - 2) + tail
    return build_from_rows([row])


def build_demo() -> MapSpec:
    """10x10 level: exit in the corner, wall column on the right, void bottom row."""
    def tile_at(x: int, y: int) -> Tile:
        if x == 0 and y == 0:
            return Tile.EXIT
        if y > 8:
            return Tile.VOID
        if x >= 9:
            return Tile.WALL
        return Tile.FLOOR

    things: list[ThingSpec] = [
        (0, 0, 0, ThingEntry(ThingKind.PLAYER)),
        (3, 3, 1, ThingEntry(ThingKind.BOX)),
        (6, 6, 2, ThingEntry(ThingKind.CHEST)),
    ]
    return MapSpec(width=10, height=10, tile_at=tile_at, things=things)


LEVELS: dict[str, Callable[[], MapSpec]] = {
    "demo": build_demo,
    "corridor": lambda: build_corridor(8, 2),
}


def load_level(name: str) -> MapSpec:
    """Look up a built-in level by name.

    Raises:
        ValueError: If name is not recognized.
    """
    builder = LEVELS.get(name)
    if builder is None:
        raise ValueError(f"Unknown level: {name!r}")
    return builder()


def dump_rows(state: State) -> list[str]:
    """Inverse of build_from_rows, for logging and test assertions."""
    rows = []
    for y in range(state.height):
        chars = []
        for x in range(state.width):
            thing_id = state.thing_at((x, y))
            if thing_id is not None:
                chars.append(_THING_SYMBOLS[state.kind_of(thing_id)])
            else:
                chars.append(_TILE_SYMBOLS[state.tile_at(x, y)])
        rows.append("".join(chars))
    return rows
