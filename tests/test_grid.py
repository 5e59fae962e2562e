"""
Tests for hex and square grid geometry and the device presets.
"""

import math

import pytest

from isofinger.errors import OutOfRange
from isofinger.grid import (
    HexGrid,
    SquareGrid,
    detect_device,
    grid_for_device,
    list_devices,
    make_grid,
)
from isofinger.grid.hex_grid import ROW_COUNT, TOTAL_PADS


class TestHexLayout:
    """Row lengths, pad counts and index tables."""

    def test_row_lengths_alternate(self, hex_grid):
        assert [hex_grid.row_length(r) for r in range(4)] == [6, 5, 6, 5]

    def test_total_pads(self, hex_grid):
        assert len(list(hex_grid.iter_positions())) == TOTAL_PADS == 61

    def test_iter_positions_respects_max_row(self, hex_grid):
        rows = {row for row, _ in hex_grid.iter_positions(max_row=2)}
        assert rows == {0, 1, 2}

    def test_chromatic_midi_notes(self, chromatic_grid):
        """Row 1 of the chromatic layout starts at pad index 6."""
        assert chromatic_grid.midi_note(0, 0, 48) == 48
        assert chromatic_grid.midi_note(1, 0, 48) == 54

    def test_intervals_midi_notes(self, hex_grid):
        """Up-right is a major third, the next row up a fifth above the start."""
        assert hex_grid.midi_note(0, 0) == 48
        assert hex_grid.midi_note(1, 0) == 52
        assert hex_grid.midi_note(2, 0) == 55
        assert hex_grid.pitch_class(1, 3) == 7

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            HexGrid("diatonic")

    def test_with_mode_returns_new_grid(self, hex_grid):
        chromatic = hex_grid.with_mode("chromatic")
        assert chromatic.mode == "chromatic"
        assert hex_grid.mode == "intervals"


class TestHexConversion:
    """Pad index lookups in both directions."""

    def test_chromatic_round_trip(self, chromatic_grid):
        for row, col in chromatic_grid.iter_positions():
            assert chromatic_grid.row_col(chromatic_grid.pad_index(row, col)) == (row, col)

    def test_intervals_lookup_is_self_consistent(self, hex_grid):
        """Overlapping indices resolve to some position with the same index."""
        for row, col in hex_grid.iter_positions():
            idx = hex_grid.pad_index(row, col)
            r, c = hex_grid.row_col(idx)
            assert hex_grid.is_valid(r, c)
            assert hex_grid.pad_index(r, c) == idx

    def test_intervals_lowest_row_wins(self, hex_grid):
        # Index 4 is (0, 4) and also (1, 0)
        assert hex_grid.pad_index(1, 0) == 4
        assert hex_grid.row_col(4) == (0, 4)

    @pytest.mark.parametrize("row, col", [(0, 6), (1, 5), (-1, 0), (11, 0), (0, -1)])
    def test_pad_index_out_of_range(self, hex_grid, row, col):
        with pytest.raises(OutOfRange):
            hex_grid.pad_index(row, col)

    def test_out_of_range_is_an_index_error(self, hex_grid):
        with pytest.raises(IndexError):
            hex_grid.row_col(1000)

    def test_midi_note_out_of_range(self, hex_grid):
        with pytest.raises(OutOfRange):
            hex_grid.midi_note(ROW_COUNT, 0)


class TestHexGeometry:
    """Distances and neighbours."""

    def test_same_row_distance_is_one(self, hex_grid):
        assert hex_grid.grid_distance((0, 0), (0, 1)) == pytest.approx(1.0)

    def test_diagonal_distance_close_to_one(self, hex_grid):
        assert hex_grid.grid_distance({"row": 0, "col": 0}, {"row": 1, "col": 0}) == pytest.approx(
            math.hypot(19, 33) / 38
        )

    def test_distance_symmetric(self, hex_grid):
        assert hex_grid.grid_distance((2, 1), (5, 3)) == pytest.approx(hex_grid.grid_distance((5, 3), (2, 1)))

    def test_odd_rows_shifted_right(self, hex_grid):
        x_even, _ = hex_grid.cell_center(0, 0)
        x_odd, _ = hex_grid.cell_center(1, 0)
        assert x_odd - x_even == pytest.approx(19)

    def test_corner_neighbors(self, hex_grid):
        assert hex_grid.neighbors(0, 0) == [(0, 1), (1, 0)]

    def test_odd_row_edge_neighbors(self, hex_grid):
        assert sorted(hex_grid.neighbors(1, 0)) == [(0, 0), (0, 1), (1, 1), (2, 0), (2, 1)]

    def test_interior_has_six_neighbors(self, hex_grid):
        assert len(hex_grid.neighbors(2, 2)) == 6
        assert len(hex_grid.neighbors(3, 2)) == 6

    def test_neighbors_are_reciprocal(self, hex_grid):
        for row, col in hex_grid.iter_positions():
            for n in hex_grid.neighbors(row, col):
                assert (row, col) in hex_grid.neighbors(*n)


class TestSquareGrid:
    """8x8 layouts."""

    @pytest.mark.parametrize("mode", ["fourths", "sequential"])
    def test_round_trip(self, mode):
        grid = SquareGrid(mode)
        for row, col in grid.iter_positions():
            assert grid.row_col(grid.pad_index(row, col)) == (row, col)

    def test_fourths_layout(self, square_grid):
        assert square_grid.midi_note(0, 0, 36) == 36
        assert square_grid.midi_note(1, 0, 36) == 41
        assert square_grid.midi_note(0, 5, 36) == square_grid.midi_note(1, 0, 36)

    def test_sequential_layout(self):
        grid = SquareGrid("sequential")
        assert grid.midi_note(1, 0, 48) == 56
        assert grid.midi_note(7, 7, 48) == 48 + 63

    def test_manhattan_distance(self, square_grid):
        assert square_grid.grid_distance((0, 0), (2, 3)) == 5

    def test_neighbors(self, square_grid):
        assert square_grid.neighbors(0, 0) == [(0, 1), (1, 0)]
        assert len(square_grid.neighbors(4, 4)) == 4

    def test_out_of_range(self, square_grid):
        with pytest.raises(OutOfRange):
            square_grid.pad_index(8, 0)
        with pytest.raises(OutOfRange):
            square_grid.row_col(64)


class TestDevices:
    """Presets, factory and port-name detection."""

    def test_list_devices(self):
        assert [d["type"] for d in list_devices()] == ["exquis", "launchpad-x", "launchpad-pro-mk1"]

    def test_grid_for_device(self):
        assert isinstance(grid_for_device("exquis"), HexGrid)
        lp = grid_for_device("launchpad-pro-mk1")
        assert isinstance(lp, SquareGrid)
        assert lp.row_interval == 8

    def test_grid_for_device_mode_override(self):
        assert grid_for_device("exquis", "chromatic").mode == "chromatic"

    def test_unknown_device(self):
        with pytest.raises(ValueError):
            grid_for_device("theremin")

    def test_make_grid(self):
        assert make_grid("hex").mode == "intervals"
        assert make_grid("square", "sequential").mode == "sequential"
        with pytest.raises(ValueError):
            make_grid("triangle")

    @pytest.mark.parametrize(
        "port, expected",
        [
            ("Exquis MIDI 1", "exquis"),
            ("Launchpad X LPX MIDI", "launchpad-x"),
            ("Launchpad Pro", "launchpad-pro-mk1"),
            ("Launchpad Pro MK3", None),
            ("IAC Driver Bus 1", None),
            ("", None),
            (None, None),
        ],
    )
    def test_detect_device(self, port, expected):
        assert detect_device(port) == expected
