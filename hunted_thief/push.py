"""hunted_thief/push.py — Breadth-first chain-push resolution.

Given one or more movers and their directions, works out every thing that has
to move along with them. Resolution only fills a move log; the state is
changed by commit() and only once the whole chain is known to be feasible.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from hunted_thief.errors import BumpedIntoWall, CollisionLoop, MovedOutOfRange
from hunted_thief.state import State, ThingKind
from hunted_thief.table import Grid
from hunted_thief.tiles import Direction, Pos, Tile

logger = logging.getLogger(__name__)

Seed = tuple[Pos, Direction, int]
"""(position, direction, mover id) that starts a push chain."""


@dataclass(frozen=True)
class Move:
    """One feasible displacement in a push chain."""

    src: Pos
    dst: Pos
    thing_id: int
    direction: Direction


class PushResolver:
    """Owns the scratch buffers reused across resolutions."""

    def __init__(self) -> None:
        self._frontier = Grid(default=None)
        self._queue: deque[Seed] = deque()
        self._log: list[Move] = []
        self._moved: set[int] = set()
        self._claimed: set[Pos] = set()

    def _prepare(self, state: State) -> None:
        if (self._frontier.width, self._frontier.height) != (state.width, state.height):
            self._frontier.resize(state.width, state.height)
        else:
            self._frontier.reset()
        self._queue.clear()
        self._log.clear()
        self._moved.clear()
        self._claimed.clear()

    def resolve(self, state: State, seeds: Iterable[Seed]) -> list[Move]:
        """Resolve the push chain started by `seeds`.

        Returns:
            Moves in the order they were found feasible.

        Raises:
            MovedOutOfRange: A thing in the chain would leave the grid.
            BumpedIntoWall: A thing in the chain would enter a wall.
            CollisionLoop: The chain pushes into a cell that is itself a
                source of a pending move, moves one thing twice, or sends
                two things into the same cell.
        """
        self._prepare(state)
        self._queue.extend(seeds)

        while self._queue:
            pos, direction, mover = self._queue.popleft()
            self._frontier.set(pos[0], pos[1], direction)

            target = direction.apply(pos)
            logger.debug("push %d: %s -> %s", mover, pos, target)

            if not state.tiles.in_bounds(*target):
                raise MovedOutOfRange(pos[0], pos[1], direction)
            if state.tile_at(*target) == Tile.WALL:
                raise BumpedIntoWall(pos[0], pos[1], direction)
            if self._frontier.get(*target) is not None:
                raise CollisionLoop()
            if mover in self._moved or target in self._claimed:
                raise CollisionLoop()

            self._log.append(Move(src=pos, dst=target, thing_id=mover, direction=direction))
            self._moved.add(mover)
            self._claimed.add(target)

            occupant = state.thing_at(target)
            if occupant is None:
                continue
            if (
                state.kind_of(mover) == ThingKind.PLAYER
                and state.kind_of(occupant) == ThingKind.CHEST
            ):
                # The player steps onto the chest instead of pushing it.
                continue
            self._queue.append((target, direction, occupant))

        return list(self._log)


def commit(state: State, moves: list[Move]) -> list[int]:
    """Apply a resolved move log to the state.

    All sources are cleared before any destination is written, so ordering
    inside the log does not matter. A destination still held by a thing that
    is not moving (the chest under the collect rule) loses that thing.

    Returns:
        Ids of things removed because a mover took their cell.
    """
    moving = {m.thing_id for m in moves}
    for m in moves:
        del state.positions[m.src]

    collected: list[int] = []
    for m in moves:
        resident = state.positions.get(m.dst)
        if resident is not None and resident not in moving:
            state.remove_thing(m.dst)
            collected.append(resident)
        state.positions[m.dst] = m.thing_id

    logger.debug("committed %d moves, collected %s", len(moves), collected)
    return collected
