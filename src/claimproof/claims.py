"""
Claim Evaluator - Ground Truth on the 3x3 Grid

A claim is an assertion about a hidden cell made without revealing it:
"the target is in row 1", "the target is in column 2", "the target is
next to my cell". This module computes whether a claim is true for a given
hidden position.

The circuit evaluates the same relation inside the proof. Its output is
declared as the proof's expected result, so the two computations must never
disagree.

Grid layout (row-major, 1-indexed):

    1 | 2 | 3        row 0
    4 | 5 | 6        row 1
    7 | 8 | 9        row 2
"""
from __future__ import annotations

import operator
from enum import IntEnum
from typing import Iterator, Union

from .errors import InvalidClaimValue, InvalidPosition, UnsupportedClaimType

GRID_SIZE = 3
MIN_POSITION = 1
MAX_POSITION = GRID_SIZE * GRID_SIZE

POSITIONS = tuple(range(MIN_POSITION, MAX_POSITION + 1))


class ClaimType(IntEnum):
    """Claim kinds, numbered exactly as the circuit expects them."""
    ROW = 0
    COLUMN = 1
    ADJACENT = 2

    @classmethod
    def parse(cls, value: Union["ClaimType", int, str]) -> "ClaimType":
        """Accept an enum member, its circuit number or its lowercase name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise UnsupportedClaimType(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise UnsupportedClaimType(value) from None
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls.parse(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise UnsupportedClaimType(value) from None
        raise UnsupportedClaimType(value)

    @property
    def label(self) -> str:
        return self.name.lower()


ClaimTypeLike = Union[ClaimType, int, str]


def _check_position(position: int) -> int:
    if isinstance(position, bool) or not isinstance(position, int):
        raise InvalidPosition(position)
    if position < MIN_POSITION or position > MAX_POSITION:
        raise InvalidPosition(position)
    return position


def check_claim_value(claim_value: int) -> int:
    """Return ``claim_value`` as a plain int; strings, floats and bools are rejected."""
    if isinstance(claim_value, bool):
        raise InvalidClaimValue(claim_value)
    try:
        return operator.index(claim_value)
    except TypeError:
        raise InvalidClaimValue(claim_value) from None


def row_of(position: int) -> int:
    """Zero-based row index of a position."""
    return (_check_position(position) - 1) // GRID_SIZE


def col_of(position: int) -> int:
    """Zero-based column index of a position."""
    return (_check_position(position) - 1) % GRID_SIZE


def cell_of(row: int, col: int) -> int:
    """Position of the cell at ``(row, col)``."""
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise InvalidPosition((row, col))
    return row * GRID_SIZE + col + 1


def are_adjacent(first: int, second: int) -> bool:
    """Orthogonal neighbours only; diagonal cells are not adjacent."""
    row_diff = abs(row_of(first) - row_of(second))
    col_diff = abs(col_of(first) - col_of(second))
    return row_diff + col_diff == 1


def evaluate_claim(position: int, claim_type: ClaimTypeLike, claim_value: int) -> bool:
    """Return whether ``claim_type``/``claim_value`` holds for ``position``.

    Args:
        position: Hidden cell, 1..9.
        claim_type: ClaimType member, circuit number or lowercase name.
        claim_value: Row or column index (0..2), or the claimer's own cell
            (1..9) for adjacency claims.

    Raises:
        InvalidPosition: ``position`` (or an adjacency ``claim_value``) is
            outside the grid.
        UnsupportedClaimType: ``claim_type`` is not a known claim kind.
        InvalidClaimValue: ``claim_value`` is not an integer.
    """
    _check_position(position)
    kind = ClaimType.parse(claim_type)
    claim_value = check_claim_value(claim_value)

    if kind is ClaimType.ROW:
        return row_of(position) == claim_value
    if kind is ClaimType.COLUMN:
        return col_of(position) == claim_value
    if kind is ClaimType.ADJACENT:
        return are_adjacent(position, claim_value)
    raise UnsupportedClaimType(claim_type)


def claim_domain(claim_type: ClaimTypeLike) -> tuple[int, ...]:
    """Every valid claim value for a claim type."""
    kind = ClaimType.parse(claim_type)
    if kind is ClaimType.ADJACENT:
        return POSITIONS
    return tuple(range(GRID_SIZE))


def iter_claims() -> Iterator[tuple[int, ClaimType, int]]:
    """Every reachable (position, claim_type, claim_value) on the grid."""
    for position in POSITIONS:
        for kind in ClaimType:
            for value in claim_domain(kind):
                yield position, kind, value


def truth_table() -> dict[tuple[int, ClaimType, int], bool]:
    """Evaluate every reachable claim on the grid."""
    return {
        (position, kind, value): evaluate_claim(position, kind, value)
        for position, kind, value in iter_claims()
    }


__all__ = [
    "GRID_SIZE",
    "POSITIONS",
    "ClaimType",
    "row_of",
    "col_of",
    "cell_of",
    "are_adjacent",
    "check_claim_value",
    "evaluate_claim",
    "claim_domain",
    "iter_claims",
    "truth_table",
]
