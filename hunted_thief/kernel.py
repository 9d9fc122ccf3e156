"""hunted_thief/kernel.py — Kernel facade: load a map, move the player.

SokobanKernel owns the State and all scratch buffers. load_map replaces
everything; move_player is the single mutating entry point and is one
complete transaction: it either raises a SokobanError with nothing changed,
or resolves the push chain, drops fallers into the void, and recomputes the
trail shadow. Renderers and input adapters only use the read accessors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from hunted_thief import debug
from hunted_thief.errors import NoPlayer, SokobanError
from hunted_thief.invariants import check_invariants
from hunted_thief.push import PushResolver, commit
from hunted_thief.shadow import ShadowState, TrailShadow
from hunted_thief.state import HistoryEntry, State, ThingEntry, ThingKind, ThingSpec, TileAt
from hunted_thief.table import Grid
from hunted_thief.tiles import Direction, Pos, Tile
from hunted_thief.void_fall import clear_void_fallers

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

@dataclass
class ThingMovedEvent:
    thing_id: int
    src: Pos
    dst: Pos


@dataclass
class ChestCollectedEvent:
    thing_id: int
    pos: Pos


@dataclass
class ThingFellEvent:
    thing_id: int
    kind: ThingKind
    pos: Pos


@dataclass
class HoleFilledEvent:
    pos: Pos


@dataclass
class LoopClosedEvent:
    cells: list[Pos]


@dataclass
class EscapedEvent:
    pos: Pos


Event = (
    ThingMovedEvent
    | ChestCollectedEvent
    | ThingFellEvent
    | HoleFilledEvent
    | LoopClosedEvent
    | EscapedEvent
)


# ---------------------------------------------------------------------------
# Kernel
# ---------------------------------------------------------------------------

class SokobanKernel:
    def __init__(self) -> None:
        self._state = State()
        self._resolver = PushResolver()
        self._shadow = TrailShadow()
        self._moved: frozenset[int] = frozenset()
        self._has_chest = False
        self.chest_collected = False
        self.escaped = False

    @classmethod
    def from_map(
        cls,
        width: int,
        height: int,
        tile_at: TileAt,
        things: Iterable[ThingSpec],
    ) -> SokobanKernel:
        kernel = cls()
        kernel.load_map(width, height, tile_at, things)
        return kernel

    # -- mutation -----------------------------------------------------------

    def load_map(
        self,
        width: int,
        height: int,
        tile_at: TileAt,
        things: Iterable[ThingSpec],
    ) -> None:
        """Replace the whole game state with a new map.

        Raises:
            MapSetupError: If the map is inconsistent (see State.from_map).
        """
        self._state = State.from_map(width, height, tile_at, things)
        self._shadow.clear(width, height)
        self._moved = frozenset()
        self._has_chest = self._state.find_kind(ThingKind.CHEST) is not None
        self.chest_collected = False
        self.escaped = False
        logger.debug("Loaded %dx%d map with %d things", width, height, len(self._state.things))
        self._debug_check("load_map")

    def move_player(self, direction: Direction) -> list[Event]:
        """Move the player one step, pushing whatever is in the way.

        Returns:
            Events describing what changed, in the order they happened.

        Raises:
            NoPlayer: There is no player on the map.
            MovedOutOfRange: The push chain would leave the grid.
            BumpedIntoWall: The push chain would enter a wall.
            CollisionLoop: The push chain feeds back into itself.
        """
        state = self._state
        found = state.find_kind(ThingKind.PLAYER)
        if found is None:
            raise NoPlayer()
        player_pos, player_id = found

        try:
            moves = self._resolver.resolve(state, [(player_pos, direction, player_id)])
        except SokobanError as e:
            logger.debug("Move %s rejected: %s", direction.name, e)
            raise

        events: list[Event] = []
        collected = commit(state, moves)
        self._moved = frozenset(m.thing_id for m in moves)
        for m in moves:
            events.append(ThingMovedEvent(thing_id=m.thing_id, src=m.src, dst=m.dst))

        player_to = direction.apply(player_pos)
        for thing_id in collected:
            logger.info("Chest %d collected at %s", thing_id, player_to)
            self.chest_collected = True
            events.append(ChestCollectedEvent(thing_id=thing_id, pos=player_to))

        for fall in clear_void_fallers(state):
            events.append(ThingFellEvent(thing_id=fall.thing_id, kind=fall.kind, pos=fall.pos))
            if fall.kind == ThingKind.CHEST:
                # Nothing left to steal; the exit opens without it.
                self._has_chest = False
            if fall.filled_hole:
                events.append(HoleFilledEvent(pos=fall.pos))

        state.history.append(HistoryEntry(from_pos=player_pos, to_pos=player_to))
        known_loops = len(self._shadow.loops)
        loops = self._shadow.update(state.history, state.width, state.height)
        if len(loops) > known_loops:
            for loop in loops[known_loops:]:
                logger.info("Trail closed a loop of %d cells", len(loop))
                events.append(LoopClosedEvent(cells=list(loop)))

        if not self.escaped and self._on_open_exit():
            self.escaped = True
            logger.info("Player escaped at %s", player_to)
            events.append(EscapedEvent(pos=player_to))

        self._debug_check("move_player")
        return events

    def _on_open_exit(self) -> bool:
        found = self._state.find_kind(ThingKind.PLAYER)
        if found is None:
            return False
        if self._has_chest and not self.chest_collected:
            return False
        pos, _ = found
        return self._state.tile_at(*pos) == Tile.EXIT

    def _debug_check(self, where: str) -> None:
        if not debug.DEBUG:
            return
        violations = [v for v in check_invariants(self._state) if v.severity == "error"]
        if violations:
            details = "; ".join(f"{v.invariant}: {v.details}" for v in violations)
            raise AssertionError(f"State invariants broken after {where}: {details}")

    # -- read accessors -----------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def width(self) -> int:
        return self._state.width

    @property
    def height(self) -> int:
        return self._state.height

    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        return self._state.tile_at(x, y)

    def shadow_at(self, x: int, y: int) -> Optional[ShadowState]:
        return self._shadow.state_at(x, y)

    @property
    def shadow(self) -> Grid:
        return self._shadow.shadow

    def all_things(self) -> Iterator[tuple[int, int, int]]:
        for (x, y), thing_id, _ in self._state.iter_things():
            yield x, y, thing_id

    def all_things_with_metadata(self) -> Iterator[tuple[int, int, int, ThingEntry]]:
        for (x, y), thing_id, entry in self._state.iter_things():
            yield x, y, thing_id, entry

    def player_position(self) -> Optional[Pos]:
        found = self._state.find_kind(ThingKind.PLAYER)
        return found[0] if found is not None else None

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._state.history)

    @property
    def loops(self) -> list[list[Pos]]:
        return [list(loop) for loop in self._shadow.loops]

    @property
    def moved_things(self) -> frozenset[int]:
        """Ids displaced by the last successful move."""
        return self._moved
