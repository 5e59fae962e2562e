"""Hex Grid — coordinate math for the staggered hexagonal controller.

Layout (portrait):
    - 11 rows, row 0 at the bottom.
    - Even rows have 6 pads, odd rows have 5 and sit half a pad to the right.
    - ``intervals`` mode: moving up-right is a major third, up-left a minor
      third, right a semitone. Row starts therefore advance by +4/+3 and
      pad indices of neighbouring rows overlap.
    - ``chromatic`` mode: pad indices run sequentially row by row.

Reverse lookup in ``intervals`` mode is ambiguous: :meth:`HexGrid.row_col`
scans rows from the bottom and returns the first row whose column range
contains the index.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

from ..errors import OutOfRange
from .coords import Position, as_row_col


ROW_COUNT: int = 11
TOTAL_PADS: int = 61

ROW_START_CHROMATIC: tuple[int, ...] = (0, 6, 11, 17, 22, 28, 33, 39, 44, 50, 55)
ROW_START_INTERVALS: tuple[int, ...] = (0, 4, 7, 11, 14, 18, 21, 25, 28, 32, 35)

LAYOUT_MODES: dict[str, tuple[int, ...]] = {
    "intervals": ROW_START_INTERVALS,
    "chromatic": ROW_START_CHROMATIC,
}

# ── Rendering geometry (pointy-top hexagons) ──────────────────
# Distances are measured between rendered centres and divided by the
# horizontal pitch, which approximates hop count on the hex lattice.
HEX_GEOMETRY: dict[str, float] = {
    "size": 22,  # hexagon radius
    "w": 38,     # horizontal centre spacing
    "h": 33,     # vertical centre spacing
}


def row_length(row: int) -> int:
    """Number of pads in *row* (6 for even rows, 5 for odd rows)."""
    if not 0 <= row < ROW_COUNT:
        raise OutOfRange(f"Row {row} outside hex grid (0-{ROW_COUNT - 1})")
    return 6 if row % 2 == 0 else 5


class HexGrid:
    """Hex grid geometry bound to one layout mode.

    Args:
        mode: ``"intervals"`` (default) or ``"chromatic"``.
    """

    topology: str = "hex"
    row_count: int = ROW_COUNT
    total_pads: int = TOTAL_PADS

    def __init__(self, mode: str = "intervals") -> None:
        if mode not in LAYOUT_MODES:
            raise ValueError(
                f"Invalid hex layout mode '{mode}'. Must be one of {sorted(LAYOUT_MODES)}"
            )
        self.mode: str = mode
        self.row_starts: tuple[int, ...] = LAYOUT_MODES[mode]

    def __repr__(self) -> str:
        return f"HexGrid(mode={self.mode!r})"

    def with_mode(self, mode: str) -> HexGrid:
        """Return a new grid using *mode*; this instance is unchanged."""
        return HexGrid(mode)

    # ── Layout ────────────────────────────────────────────────

    def row_length(self, row: int) -> int:
        return row_length(row)

    def is_valid(self, row: int, col: int) -> bool:
        return 0 <= row < ROW_COUNT and 0 <= col < row_length(row)

    def iter_positions(self, max_row: int | None = None) -> Iterator[tuple[int, int]]:
        """Yield every ``(row, col)`` from the bottom row up to *max_row*."""
        last = ROW_COUNT - 1 if max_row is None else min(max_row, ROW_COUNT - 1)
        for row in range(last + 1):
            for col in range(row_length(row)):
                yield row, col

    # ── Coordinate conversion ─────────────────────────────────

    def pad_index(self, row: int, col: int) -> int:
        """Linear pad index of ``(row, col)`` under this layout mode.

        Raises:
            OutOfRange: If the position is not on the grid.
        """
        if not self.is_valid(row, col):
            raise OutOfRange(f"Invalid hex position: row={row}, col={col}")
        return self.row_starts[row] + col

    def row_col(self, pad_index: int) -> tuple[int, int]:
        """Position of *pad_index*; the lowest matching row wins.

        Raises:
            OutOfRange: If no row contains the index.
        """
        for row in range(ROW_COUNT):
            col = pad_index - self.row_starts[row]
            if 0 <= col < row_length(row):
                return row, col
        raise OutOfRange(f"Invalid pad index: {pad_index}")

    def midi_note(self, row: int, col: int, base_midi: int = 48) -> int:
        return base_midi + self.pad_index(row, col)

    def pitch_class(self, row: int, col: int, base_midi: int = 48) -> int:
        return self.midi_note(row, col, base_midi) % 12

    # ── Geometry ──────────────────────────────────────────────

    def cell_center(self, row: int, col: int, padding: float = 48) -> tuple[float, float]:
        """Rendered centre of a pad; row 0 is drawn at the bottom."""
        w = HEX_GEOMETRY["w"]
        h = HEX_GEOMETRY["h"]
        x = col * w + padding + (w / 2 if row % 2 == 1 else 0)
        y = (ROW_COUNT - 1 - row) * h + padding
        return x, y

    def grid_distance(self, pos_a: Position, pos_b: Position) -> float:
        """Approximate hop distance: centre distance over the pad pitch."""
        x1, y1 = self.cell_center(*as_row_col(pos_a))
        x2, y2 = self.cell_center(*as_row_col(pos_b))
        return math.hypot(x2 - x1, y2 - y1) / HEX_GEOMETRY["w"]

    def neighbors(self, row: int, col: int) -> list[tuple[int, int]]:
        """Up to six adjacent pads, filtered to the grid."""
        if not self.is_valid(row, col):
            raise OutOfRange(f"Invalid hex position: row={row}, col={col}")
        # Odd rows are shifted right, so the diagonal columns depend on parity
        diag = (col - 1, col) if row % 2 == 0 else (col, col + 1)
        candidates = [(row, col - 1), (row, col + 1)]
        for dr in (1, -1):
            candidates.extend((row + dr, c) for c in diag)
        return [(r, c) for r, c in candidates if self.is_valid(r, c)]
