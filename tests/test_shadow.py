"""Tests for hunted_thief/shadow.py — trail rollback and even-odd check."""

from __future__ import annotations

import pytest

from hunted_thief.constants import SHADOW_TRAIL_BUFFER
from hunted_thief.shadow import (
    ShadowState,
    TrailShadow,
    enclosed_cells,
    even_odd_check,
    is_closed_loop,
    visited_positions,
)
from hunted_thief.state import HistoryEntry


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def history_of(path: list[tuple[int, int]]) -> list[HistoryEntry]:
    """History entries for a player walking along `path`."""
    return [HistoryEntry(from_pos=a, to_pos=b) for a, b in zip(path, path[1:])]


def rectangle(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    """Clockwise boundary cells of the rectangle [x0..x1] x [y0..y1]."""
    cells = [(x, y0) for x in range(x0, x1 + 1)]
    cells += [(x1, y) for y in range(y0 + 1, y1 + 1)]
    cells += [(x, y1) for x in range(x1 - 1, x0 - 1, -1)]
    cells += [(x0, y) for y in range(y1 - 1, y0, -1)]
    return cells


# Closed 3x3 ring around (2, 2), then three steps that stay in the trail buffer.
RING = rectangle(1, 1, 3, 3)
RING_WALK = RING + [(1, 1), (0, 1), (0, 2), (0, 3)]


# ---------------------------------------------------------------------------
# visited_positions
# ---------------------------------------------------------------------------

class TestVisitedPositions:
    def test_short_history_is_empty(self):
        path = [(0, 0), (1, 0), (2, 0), (3, 0)]
        assert visited_positions(history_of(path)) == []

    def test_trailing_moves_dropped(self):
        path = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (5, 0)]
        assert visited_positions(history_of(path)) == [(0, 0), (1, 0), (2, 0)]

    def test_zero_buffer_keeps_everything(self):
        path = [(0, 0), (1, 0), (1, 1)]
        assert visited_positions(history_of(path), trail_buffer=0) == path


# ---------------------------------------------------------------------------
# Even-odd check
# ---------------------------------------------------------------------------

class TestEvenOddCheck:
    def test_simple_rectangle_flags_nothing(self):
        assert even_odd_check(4, 4, rectangle(0, 0, 3, 3)) == []

    def test_rectangle_inside_bigger_grid(self):
        assert even_odd_check(8, 8, rectangle(2, 1, 5, 4)) == []

    @pytest.mark.parametrize("width", [2, 3, 4, 5])
    @pytest.mark.parametrize("height", [2, 3, 4])
    def test_rectangles_of_any_size_flag_nothing(self, width, height):
        loop = rectangle(0, 0, width - 1, height - 1)
        assert even_odd_check(width + 1, height + 1, loop) == []
        assert is_closed_loop(width + 1, height + 1, loop)

    def test_stacked_runs_are_not_crossings(self):
        # Top and bottom runs of a 3x2 ring sit on adjacent rows.
        loop = [(0, 0), (1, 0), (2, 0), (2, 1), (1, 1), (0, 1)]
        assert even_odd_check(5, 5, loop) == []

    def test_self_touch_flags_a_row(self):
        # Trace leaves the top edge at (2, 1), visits (2, 0), and returns to (2, 1).
        loop = rectangle(1, 1, 4, 4)
        spur_at = loop.index((2, 1))
        touched = loop[: spur_at + 1] + [(2, 0), (2, 1)] + loop[spur_at + 1:]
        flagged = even_odd_check(6, 6, touched)
        assert flagged == [1]

    def test_flagged_rows_contain_loop_cells(self):
        cells = [(1, 0), (1, 1)]
        for row in even_odd_check(3, 3, cells):
            assert any(y == row for _, y in cells)

    def test_cells_outside_grid_ignored(self):
        assert even_odd_check(2, 2, [(5, 5), (9, 0)]) == []

    def test_two_by_two_loop_is_closed(self):
        assert is_closed_loop(3, 3, [(0, 0), (1, 0), (1, 1), (0, 1)])

    def test_back_and_forth_is_not_a_loop(self):
        assert not is_closed_loop(3, 3, [(0, 0), (1, 0)])


class TestEnclosedCells:
    def test_ring_encloses_centre(self):
        assert enclosed_cells(5, 5, RING) == [(2, 2)]

    def test_rectangle_interior(self):
        inside = enclosed_cells(7, 7, rectangle(1, 1, 4, 4))
        assert inside == [(2, 2), (3, 2), (2, 3), (3, 3)]

    def test_two_by_two_encloses_nothing(self):
        assert enclosed_cells(4, 4, [(0, 0), (1, 0), (1, 1), (0, 1)]) == []


# ---------------------------------------------------------------------------
# TrailShadow
# ---------------------------------------------------------------------------

class TestTrailShadow:
    def test_empty_history_is_all_free(self):
        shadow = TrailShadow()
        assert shadow.update([], 3, 3) == []
        assert all(v == ShadowState.FREE for _, _, v in shadow.shadow.cells())

    def test_straight_path_is_occupied(self):
        path = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (4, 1), (4, 2)]
        shadow = TrailShadow()
        shadow.update(history_of(path), 5, 3)
        for x in range(4):
            assert shadow.state_at(x, 0) == ShadowState.OCCUPIED
        # The last three moves are still inside the trail buffer.
        assert shadow.state_at(4, 0) == ShadowState.FREE
        assert shadow.state_at(4, 1) == ShadowState.FREE
        assert shadow.state_at(4, 2) == ShadowState.FREE

    def test_square_loop_rolled_back(self):
        path = [(1, 1), (2, 1), (2, 2), (1, 2), (1, 1), (0, 1), (0, 2), (0, 3), (0, 4)]
        shadow = TrailShadow()
        loops = shadow.update(history_of(path), 5, 5)
        assert loops == [[(1, 1), (2, 1), (2, 2), (1, 2)]]
        for pos in [(1, 1), (2, 1), (2, 2), (1, 2)]:
            assert shadow.state_at(*pos) == ShadowState.CYCLE
        assert shadow.state_at(0, 1) == ShadowState.OCCUPIED
        assert shadow.state_at(0, 2) == ShadowState.FREE

    def test_ring_marks_interior(self):
        shadow = TrailShadow()
        loops = shadow.update(history_of(RING_WALK), 5, 5)
        assert len(loops) == 1
        assert sorted(loops[0]) == sorted(RING)
        assert shadow.state_at(2, 2) == ShadowState.CYCLE
        assert shadow.state_at(0, 0) == ShadowState.FREE

    def test_two_row_ring_closes(self):
        ring = [(0, 0), (1, 0), (2, 0), (2, 1), (1, 1), (0, 1)]
        path = ring + [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3)]
        shadow = TrailShadow()
        assert shadow.update(history_of(path), 3, 4) == [ring]
        for pos in ring:
            assert shadow.state_at(*pos) == ShadowState.CYCLE
        assert shadow.state_at(0, 2) == ShadowState.FREE

    def test_loop_not_flagged_while_in_buffer(self):
        # Closing step is one of the last SHADOW_TRAIL_BUFFER moves.
        path = RING + [(1, 1)]
        shadow = TrailShadow()
        assert SHADOW_TRAIL_BUFFER >= 1
        assert shadow.update(history_of(path), 5, 5) == []
        assert shadow.state_at(2, 2) == ShadowState.FREE

    def test_back_and_forth_rolls_back_without_loop(self):
        path = [(0, 0), (1, 0), (0, 0), (0, 1), (0, 2), (0, 3), (0, 4)]
        shadow = TrailShadow()
        assert shadow.update(history_of(path), 2, 5) == []
        assert shadow.state_at(1, 0) == ShadowState.FREE
        assert shadow.state_at(0, 0) == ShadowState.OCCUPIED
        assert shadow.state_at(0, 1) == ShadowState.OCCUPIED

    def test_update_is_idempotent(self):
        shadow = TrailShadow()
        history = history_of(RING_WALK)
        shadow.update(history, 5, 5)
        first = shadow.shadow.copy()
        shadow.update(history, 5, 5)
        assert shadow.shadow == first
