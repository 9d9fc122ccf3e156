"""hunted_thief/observation.py — Observation extraction from the kernel.

Produces a (3, height, width) int8 array for agent consumption.
"""

from __future__ import annotations

import numpy as np

from hunted_thief.kernel import SokobanKernel

NUM_PLANES = 3

PLANE_TILE = 0
PLANE_THING = 1
PLANE_SHADOW = 2


def extract_observation(kernel: SokobanKernel) -> np.ndarray:
    """Stack the kernel state into integer planes.

    Layout:
        [0] tile value (Tile.value: 0 void, 1 wall, 2 floor, 3 exit)
        [1] thing kind (ThingKind.value: 1 player, 2 box, 3 chest; 0 empty)
        [2] shadow state (ShadowState.value: 0 free, 1 occupied, 2 cycle)
    """
    obs = np.zeros((NUM_PLANES, kernel.height, kernel.width), dtype=np.int8)

    tiles = kernel.state.tiles.array
    shadow = kernel.shadow.array
    for y in range(kernel.height):
        for x in range(kernel.width):
            obs[PLANE_TILE, y, x] = tiles[y, x].value
            obs[PLANE_SHADOW, y, x] = shadow[y, x].value

    for x, y, _, entry in kernel.all_things_with_metadata():
        obs[PLANE_THING, y, x] = entry.kind.value

    return obs
