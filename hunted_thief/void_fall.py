"""hunted_thief/void_fall.py — Things falling through VOID tiles.

Runs after a committed push. Anything standing on VOID is gone; a box plugs
the hole, turning the tile into FLOOR for good.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hunted_thief.state import State, ThingKind
from hunted_thief.tiles import Pos, Tile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fall:
    pos: Pos
    thing_id: int
    kind: ThingKind
    filled_hole: bool


def clear_void_fallers(state: State) -> list[Fall]:
    """Remove every thing resting on VOID. Returns what fell, row-major."""
    falls: list[Fall] = []
    for pos, thing_id, entry in list(state.iter_things()):
        if state.tile_at(*pos) != Tile.VOID:
            continue

        state.remove_thing(pos)
        filled = entry.kind == ThingKind.BOX
        if filled:
            state.tiles.set(pos[0], pos[1], Tile.FLOOR)
        else:
            logger.warning("%s %d fell into the void at %s", entry.kind.name.lower(), thing_id, pos)
        falls.append(Fall(pos=pos, thing_id=thing_id, kind=entry.kind, filled_hole=filled))
    return falls
