"""Coordinate helpers shared by both grid topologies."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

# A position is either a mapping with "row"/"col" keys or a (row, col) tuple.
Position = Mapping[str, Any] | tuple[int, int]


def as_row_col(pos: Position) -> tuple[int, int]:
    """Return ``(row, col)`` for a position mapping or tuple."""
    if isinstance(pos, Mapping):
        return int(pos["row"]), int(pos["col"])
    row, col = pos
    return int(row), int(col)


def raw_distance(pos_a: Position, pos_b: Position) -> float:
    """Euclidean distance in raw row/col units.

    Independent of any topology's rendering geometry, so spans measured
    with it stay comparable between hex and square devices.
    """
    row_a, col_a = as_row_col(pos_a)
    row_b, col_b = as_row_col(pos_b)
    return math.hypot(row_b - row_a, col_b - col_a)


def max_pairwise(positions: list[Any], distance=raw_distance) -> float:
    """Largest pairwise distance among *positions* (0.0 for fewer than two)."""
    span = 0.0
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            span = max(span, distance(positions[i], positions[j]))
    return span
