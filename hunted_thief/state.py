"""hunted_thief/state.py — Authoritative game state.

State owns the tile grid, the sparse occupancy (position -> thing id and
thing id -> entry, kept in agreement), and the player's move history. It is
mutated only through SokobanKernel.load_map and SokobanKernel.move_player.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional

from hunted_thief.errors import MapSetupError
from hunted_thief.table import Grid
from hunted_thief.tiles import Pos, Tile

TileAt = Callable[[int, int], Tile]
"""Callable that returns the Tile at grid position (x, y)."""


# ---------------------------------------------------------------------------
# Things
# ---------------------------------------------------------------------------

class ThingKind(Enum):
    PLAYER = 1
    BOX = 2
    CHEST = 3


@dataclass(frozen=True)
class ThingEntry:
    """Metadata for one thing. Kind never changes after creation."""

    kind: ThingKind


ThingSpec = tuple[int, int, int, ThingEntry]
"""(x, y, thing_id, entry) as passed to load_map."""


@dataclass(frozen=True)
class HistoryEntry:
    """One successful player move."""

    from_pos: Pos
    to_pos: Pos


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass
class State:
    tiles: Grid = field(default_factory=lambda: Grid(default=Tile.VOID))
    positions: dict[Pos, int] = field(default_factory=dict)
    things: dict[int, ThingEntry] = field(default_factory=dict)
    history: list[HistoryEntry] = field(default_factory=list)

    @classmethod
    def from_map(
        cls,
        width: int,
        height: int,
        tile_at: TileAt,
        things: Iterable[ThingSpec],
    ) -> State:
        """Build a fresh state, validating the thing layout.

        Raises:
            MapSetupError: On negative dimensions, duplicate ids, two things in
                one cell, things outside the grid, or more than one player or
                chest.
        """
        if width < 0 or height < 0:
            raise MapSetupError(f"Map size must be non-negative, got {width}x{height}")

        tiles = Grid.filled(width, height, Tile.VOID)
        for y in range(height):
            for x in range(width):
                tiles.set(x, y, Tile(tile_at(x, y)))

        state = cls(tiles=tiles)
        singletons: dict[ThingKind, int] = {}
        for x, y, thing_id, entry in things:
            if not tiles.in_bounds(x, y):
                raise MapSetupError(f"Thing {thing_id} placed outside the map at ({x}, {y})")
            if thing_id in state.things:
                raise MapSetupError(f"Duplicate thing id {thing_id}")
            if (x, y) in state.positions:
                raise MapSetupError(
                    f"Things {state.positions[(x, y)]} and {thing_id} share cell ({x}, {y})"
                )
            if entry.kind in (ThingKind.PLAYER, ThingKind.CHEST):
                if entry.kind in singletons:
                    raise MapSetupError(
                        f"Second {entry.kind.name.lower()} {thing_id} "
                        f"(first is {singletons[entry.kind]})"
                    )
                singletons[entry.kind] = thing_id
            state.positions[(x, y)] = thing_id
            state.things[thing_id] = entry
        return state

    # -- geometry -----------------------------------------------------------

    @property
    def width(self) -> int:
        return self.tiles.width

    @property
    def height(self) -> int:
        return self.tiles.height

    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        return self.tiles.get(x, y)

    # -- occupancy ----------------------------------------------------------

    def thing_at(self, pos: Pos) -> Optional[int]:
        return self.positions.get(pos)

    def kind_of(self, thing_id: int) -> ThingKind:
        return self.things[thing_id].kind

    def iter_things(self) -> Iterator[tuple[Pos, int, ThingEntry]]:
        """Yield (pos, id, entry) in row-major position order."""
        for pos in sorted(self.positions, key=lambda p: (p[1], p[0])):
            thing_id = self.positions[pos]
            yield pos, thing_id, self.things[thing_id]

    def find_kind(self, kind: ThingKind) -> Optional[tuple[Pos, int]]:
        for pos, thing_id in self.positions.items():
            if self.things[thing_id].kind == kind:
                return pos, thing_id
        return None

    def remove_thing(self, pos: Pos) -> int:
        """Drop the thing at pos from both maps. Returns its id."""
        thing_id = self.positions.pop(pos)
        del self.things[thing_id]
        return thing_id

    def copy(self) -> State:
        return State(
            tiles=self.tiles.copy(),
            positions=dict(self.positions),
            things=dict(self.things),
            history=copy.copy(self.history),
        )
