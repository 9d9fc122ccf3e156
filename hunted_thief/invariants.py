"""hunted_thief/invariants.py — State invariant checker.

Scans a State and flags impossible configurations. This is a library module:
tests import it and assert on results, and the kernel runs it after every
transaction when HUNTED_THIEF_DEBUG=1.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from hunted_thief.state import State, ThingKind
from hunted_thief.tiles import Tile

# ---------------------------------------------------------------------------
# Violation
# ---------------------------------------------------------------------------


@dataclass
class Violation:
    """A single state invariant violation."""

    invariant: str
    details: str
    severity: str  # "error" or "warning"


# ---------------------------------------------------------------------------
# Individual checkers
# ---------------------------------------------------------------------------


def _check_singletons(state: State) -> list[Violation]:
    violations: list[Violation] = []
    counts = Counter(entry.kind for entry in state.things.values())
    for kind in (ThingKind.PLAYER, ThingKind.CHEST):
        if counts[kind] > 1:
            violations.append(Violation(
                invariant=f"multiple_{kind.name.lower()}s",
                details=f"{counts[kind]} things of kind {kind.name}",
                severity="error",
            ))
    return violations


def _check_bounds(state: State) -> list[Violation]:
    violations: list[Violation] = []
    for (x, y), thing_id in state.positions.items():
        if not state.tiles.in_bounds(x, y):
            violations.append(Violation(
                invariant="thing_out_of_bounds",
                details=f"Thing {thing_id} at ({x}, {y}) outside {state.width}x{state.height}",
                severity="error",
            ))
    return violations


def _check_map_agreement(state: State) -> list[Violation]:
    violations: list[Violation] = []
    placed = Counter(state.positions.values())
    for thing_id, count in placed.items():
        if thing_id not in state.things:
            violations.append(Violation(
                invariant="unknown_thing",
                details=f"Thing {thing_id} placed but has no entry",
                severity="error",
            ))
        if count > 1:
            violations.append(Violation(
                invariant="thing_in_two_places",
                details=f"Thing {thing_id} placed {count} times",
                severity="error",
            ))
    for thing_id in state.things:
        if thing_id not in placed:
            violations.append(Violation(
                invariant="unplaced_thing",
                details=f"Thing {thing_id} has an entry but no position",
                severity="error",
            ))
    return violations


def _check_void_resting(state: State) -> list[Violation]:
    violations: list[Violation] = []
    for (x, y), thing_id in state.positions.items():
        if state.tile_at(x, y) == Tile.VOID:
            violations.append(Violation(
                invariant="thing_over_void",
                details=f"Thing {thing_id} rests on VOID at ({x}, {y})",
                severity="warning",
            ))
    return violations


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_invariants(state: State) -> list[Violation]:
    """Scan a state for invariant violations.

    Things placed over VOID by load_map only fall once a move happens, so
    they are reported as warnings rather than errors.

    Returns:
        List of Violation objects, errors first.
    """
    violations: list[Violation] = []
    violations.extend(_check_singletons(state))
    violations.extend(_check_bounds(state))
    violations.extend(_check_map_agreement(state))
    violations.extend(_check_void_resting(state))
    violations.sort(key=lambda v: v.severity != "error")
    return violations
