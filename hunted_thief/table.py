"""hunted_thief/table.py — Dense fixed-size 2D table keyed by (x, y).

Generic storage for the tile grid and for scratch bitmaps (frontier table,
visited set, shadow). Backed by a numpy array indexed [y, x]. Every accessor
bounds-checks: out-of-range coordinates, including the huge values produced
by unsigned wrap-around (see Direction.apply), read as "no such cell".
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np


class Grid:
    """A width x height table of cells, all starting at `default`."""

    def __init__(self, default: Any = None, dtype: Any = object) -> None:
        self._default = default
        self._dtype = dtype
        self._mem = np.full((0, 0), default, dtype=dtype)

    @classmethod
    def filled(cls, width: int, height: int, value: Any, dtype: Any = object) -> Grid:
        """Create a width x height table with every cell set to `value`."""
        grid = cls(default=value, dtype=dtype)
        grid.resize(width, height)
        return grid

    # -- geometry -----------------------------------------------------------

    @property
    def width(self) -> int:
        return self._mem.shape[1]

    @property
    def height(self) -> int:
        return self._mem.shape[0]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def resize(self, width: int, height: int) -> None:
        """Reallocate to width x height default cells. Contents are dropped."""
        if width < 0 or height < 0:
            raise ValueError(f"Grid size must be non-negative, got {width}x{height}")
        self._mem = np.full((height, width), self._default, dtype=self._dtype)

    # -- cell access --------------------------------------------------------

    def get(self, x: int, y: int) -> Any:
        if not self.in_bounds(x, y):
            return None
        return self._mem.item(y, x)

    def set(self, x: int, y: int, value: Any) -> None:
        if not self.in_bounds(x, y):
            return
        self._mem[y, x] = value

    def fill(self, value: Any) -> None:
        self._mem.fill(value)

    def reset(self) -> None:
        self.fill(self._default)

    def cells(self) -> Iterator[tuple[int, int, Any]]:
        """Yield (x, y, value) in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, self._mem.item(y, x)

    # -- bulk ---------------------------------------------------------------

    @property
    def array(self) -> np.ndarray:
        """Read-only [y, x] view of the backing array."""
        view = self._mem.view()
        view.flags.writeable = False
        return view

    def copy(self) -> Grid:
        other = Grid(default=self._default, dtype=self._dtype)
        other._mem = self._mem.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._mem.shape == other._mem.shape and bool(
            np.array_equal(self._mem, other._mem)
        )

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, default={self._default!r})"
