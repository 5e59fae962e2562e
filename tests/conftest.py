"""Shared fixtures for the isofinger test suite."""

import pytest

from isofinger.grid import HexGrid, SquareGrid


def make_handprint(positions, hand="right", comfort=80, hp_id="hp", base_midi=48, grid=None):
    """Build a raw handprint record from ``(row, col, finger)`` triples."""
    grid = grid or HexGrid()
    return {
        "id": hp_id,
        "hand": hand,
        "comfort_rating": comfort,
        "base_midi": base_midi,
        "positions": [
            {
                "row": row,
                "col": col,
                "pad_index": grid.pad_index(row, col),
                "midi_note": grid.midi_note(row, col, base_midi),
                "finger": finger,
            }
            for row, col, finger in positions
        ],
    }


@pytest.fixture
def hex_grid():
    return HexGrid()


@pytest.fixture
def chromatic_grid():
    return HexGrid("chromatic")


@pytest.fixture
def square_grid():
    return SquareGrid()


@pytest.fixture
def c_major_handprint():
    """Three-finger C-E-G stack on the intervals hex grid (base 48)."""
    return make_handprint([(0, 0, 1), (1, 0, 2), (2, 0, 3)], comfort=80, hp_id="c_major")


@pytest.fixture
def five_finger_handprint():
    """C, D, E, G, A under fingers 1-5; only fingers 1-3-4 spell C major."""
    return make_handprint(
        [(0, 0, 1), (0, 2, 2), (1, 0, 3), (1, 3, 4), (2, 2, 5)],
        comfort=60,
        hp_id="five",
    )


@pytest.fixture
def wide_handprint():
    """Three-finger shape spread along the bottom row (raw span 4)."""
    return make_handprint([(0, 0, 1), (0, 1, 2), (0, 4, 3)], comfort=80, hp_id="wide")
