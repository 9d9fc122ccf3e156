"""hunted_thief/constants.py — Kernel tunables."""

# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------

COORD_BITS = 32
COORD_MASK = (1 << COORD_BITS) - 1
"""Grid coordinates behave as unsigned words: 0 - 1 wraps to COORD_MASK."""

# ---------------------------------------------------------------------------
# Trail shadow
# ---------------------------------------------------------------------------

SHADOW_TRAIL_BUFFER = 3
"""Most recent history entries left out of the shadow walk."""

MIN_LOOP_CELLS = 4
"""Smallest closed trace that can enclose anything (a 2x2 square)."""
