"""Square Grid — coordinate math for 8x8 pad controllers.

Row 0 is at the bottom, column 0 at the left. Pad indices are sequential
(``row * 8 + col``) and round-trip exactly. The MIDI layout depends on
the row interval: ``fourths`` (each row a perfect fourth above the one
below, the isomorphic default) or ``sequential`` (rows of 8 chromatic
notes).
"""

from __future__ import annotations

from collections.abc import Iterator

from ..errors import OutOfRange
from .coords import Position, as_row_col


ROW_COUNT: int = 8
COL_COUNT: int = 8
TOTAL_PADS: int = ROW_COUNT * COL_COUNT

# Semitones between the first pads of consecutive rows
LAYOUT_MODES: dict[str, int] = {
    "fourths": 5,
    "sequential": COL_COUNT,
}


class SquareGrid:
    """Square grid geometry bound to one MIDI layout.

    Args:
        mode: ``"fourths"`` (default) or ``"sequential"``.
    """

    topology: str = "square"
    row_count: int = ROW_COUNT
    total_pads: int = TOTAL_PADS

    def __init__(self, mode: str = "fourths") -> None:
        if mode not in LAYOUT_MODES:
            raise ValueError(
                f"Invalid square layout mode '{mode}'. Must be one of {sorted(LAYOUT_MODES)}"
            )
        self.mode: str = mode
        self.row_interval: int = LAYOUT_MODES[mode]

    def __repr__(self) -> str:
        return f"SquareGrid(mode={self.mode!r})"

    def with_mode(self, mode: str) -> SquareGrid:
        return SquareGrid(mode)

    def row_length(self, row: int) -> int:
        if not 0 <= row < ROW_COUNT:
            raise OutOfRange(f"Row {row} outside square grid (0-{ROW_COUNT - 1})")
        return COL_COUNT

    def is_valid(self, row: int, col: int) -> bool:
        return 0 <= row < ROW_COUNT and 0 <= col < COL_COUNT

    def iter_positions(self, max_row: int | None = None) -> Iterator[tuple[int, int]]:
        last = ROW_COUNT - 1 if max_row is None else min(max_row, ROW_COUNT - 1)
        for row in range(last + 1):
            for col in range(COL_COUNT):
                yield row, col

    def pad_index(self, row: int, col: int) -> int:
        if not self.is_valid(row, col):
            raise OutOfRange(f"Invalid square position: row={row}, col={col}")
        return row * COL_COUNT + col

    def row_col(self, pad_index: int) -> tuple[int, int]:
        if not 0 <= pad_index < TOTAL_PADS:
            raise OutOfRange(f"Invalid pad index: {pad_index}")
        return divmod(pad_index, COL_COUNT)

    def midi_note(self, row: int, col: int, base_midi: int = 48) -> int:
        if not self.is_valid(row, col):
            raise OutOfRange(f"Invalid square position: row={row}, col={col}")
        return base_midi + row * self.row_interval + col

    def pitch_class(self, row: int, col: int, base_midi: int = 48) -> int:
        return self.midi_note(row, col, base_midi) % 12

    def grid_distance(self, pos_a: Position, pos_b: Position) -> int:
        """Manhattan distance in pads."""
        row_a, col_a = as_row_col(pos_a)
        row_b, col_b = as_row_col(pos_b)
        return abs(row_b - row_a) + abs(col_b - col_a)

    def neighbors(self, row: int, col: int) -> list[tuple[int, int]]:
        """Left, right, up and down neighbours that lie on the grid."""
        if not self.is_valid(row, col):
            raise OutOfRange(f"Invalid square position: row={row}, col={col}")
        candidates = [(row, col - 1), (row, col + 1), (row + 1, col), (row - 1, col)]
        return [(r, c) for r, c in candidates if self.is_valid(r, c)]
