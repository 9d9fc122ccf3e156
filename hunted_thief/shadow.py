"""hunted_thief/shadow.py — Trail shadow over the player's path history.

The player's visited cells are walked in order with a stack. Whenever the
walk returns to a cell already on the stack, the sub-path traced since that
cell is rolled back: it was a loop. What is left on the stack is a
self-intersection-free path, marked OCCUPIED. Rolled-back loops that pass the
even-odd scanline check are marked CYCLE together with the cells they enclose.

The most recent SHADOW_TRAIL_BUFFER moves are left out so that a loop still
being traced is not flagged early.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Sequence

import numpy as np

from hunted_thief.constants import MIN_LOOP_CELLS, SHADOW_TRAIL_BUFFER
from hunted_thief.state import HistoryEntry
from hunted_thief.table import Grid
from hunted_thief.tiles import Pos


class ShadowState(Enum):
    FREE = 0
    OCCUPIED = 1
    CYCLE = 2


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def visited_positions(
    history: Sequence[HistoryEntry],
    trail_buffer: int = SHADOW_TRAIL_BUFFER,
) -> list[Pos]:
    """Cells visited by the player, minus the newest `trail_buffer` moves.

    Every kept move contributes its source cell; the last kept move also
    contributes its destination.
    """
    kept = history[: max(len(history) - trail_buffer, 0)]
    if not kept:
        return []
    return [entry.from_pos for entry in kept] + [kept[-1].to_pos]


def _loop_mask(width: int, height: int, cells: Iterable[Pos]) -> np.ndarray:
    mask = np.zeros((height, width), dtype=bool)
    for x, y in cells:
        if 0 <= x < width and 0 <= y < height:
            mask[y, x] = True
    return mask


def _up_links(width: int, height: int, cells: Sequence[Pos]) -> np.ndarray:
    """Vertical steps of a closed path, keyed by the lower cell of each step.

    links[y, x] is set when the path steps between (x, y-1) and (x, y) in
    either direction, including the closing step from the last cell back to
    the first. A step traced twice is kept once.
    """
    links = np.zeros((height, width), dtype=bool)
    for (ax, ay), (bx, by) in zip(cells, cells[1:] + cells[:1]):
        if ax != bx or abs(ay - by) != 1:
            continue
        y = max(ay, by)
        if 0 <= ax < width and 1 <= y < height:
            links[y, ax] = True
    return links


# ---------------------------------------------------------------------------
# Even-odd check
# ---------------------------------------------------------------------------

def even_odd_check(width: int, height: int, cells: Iterable[Pos]) -> list[int]:
    """Rows where a candidate closed path crosses the scanline an odd number of times.

    `cells` is the path in traversal order. The scanline between row y-1 and
    row y is crossed once per distinct vertical step of the path between those
    rows. A simple closed curve crosses every scanline an even number of
    times, so any row reported here points at a degenerate trace, such as a
    dead end walked out and back along the same step. An empty result means
    the path is topologically consistent.
    """
    crossings = _up_links(width, height, list(cells)).sum(axis=1)
    return [int(y) for y in np.flatnonzero(crossings % 2)]


def enclosed_cells(width: int, height: int, cells: Iterable[Pos]) -> list[Pos]:
    """Cells strictly inside a closed path, by parity of crossings to their left."""
    cells = list(cells)
    mask = _loop_mask(width, height, cells)
    links = _up_links(width, height, cells).astype(np.int64)
    before = np.cumsum(links, axis=1) - links
    inside = ~mask & (before % 2 == 1)
    ys, xs = np.nonzero(inside)
    return [(int(x), int(y)) for y, x in zip(ys, xs)]


def is_closed_loop(width: int, height: int, cells: Sequence[Pos]) -> bool:
    return len(set(cells)) >= MIN_LOOP_CELLS and not even_odd_check(width, height, cells)


# ---------------------------------------------------------------------------
# TrailShadow
# ---------------------------------------------------------------------------

class TrailShadow:
    """Shadow bitmap plus the scratch used to recompute it."""

    def __init__(self) -> None:
        self.shadow = Grid(default=ShadowState.FREE)
        self.loops: list[list[Pos]] = []
        self._visited = Grid(default=False, dtype=bool)
        self._log: list[Pos] = []

    def clear(self, width: int, height: int) -> None:
        self.shadow.resize(width, height)
        self._visited.resize(width, height)
        self._log.clear()
        self.loops = []

    def state_at(self, x: int, y: int) -> Optional[ShadowState]:
        return self.shadow.get(x, y)

    def update(self, history: Sequence[HistoryEntry], width: int, height: int) -> list[list[Pos]]:
        """Recompute the shadow from scratch.

        Returns:
            The confirmed loops, each in traversal order starting at the cell
            where it closed.
        """
        if (self.shadow.width, self.shadow.height) != (width, height):
            self.clear(width, height)
        self.shadow.reset()
        self._visited.reset()
        self._log.clear()

        candidates: list[list[Pos]] = []
        for pos in visited_positions(history):
            if not self._visited.get(*pos):
                self._log.append(pos)
                self._visited.set(pos[0], pos[1], True)
                continue

            # Revisit: roll back to the earlier occurrence, which stays on top.
            rolled_back: list[Pos] = []
            while self._log[-1] != pos:
                stale = self._log.pop()
                self._visited.set(stale[0], stale[1], False)
                rolled_back.append(stale)
            candidates.append([pos] + rolled_back[::-1])

        for x, y in self._log:
            self.shadow.set(x, y, ShadowState.OCCUPIED)

        self.loops = [loop for loop in candidates if is_closed_loop(width, height, loop)]
        for loop in self.loops:
            for x, y in loop + enclosed_cells(width, height, loop):
                self.shadow.set(x, y, ShadowState.CYCLE)
        return self.loops
