"""
Tests for handprint validation, creation and JSON IO.
"""

import json

import pytest

from conftest import make_handprint
from isofinger.errors import InvalidHandprint, OutOfRange
from isofinger.fingering_engine.handprints import (
    clear_hand,
    compute_measurements,
    create_handprint,
    filter_by_hand,
    load_handprints,
    pair_key,
    parse_handprints,
    remove_handprint,
    save_handprints,
    snapshot,
    validate_handprint,
)


class TestValidateHandprint:
    """Normalisation and rejection of bad records."""

    def test_valid_record(self, c_major_handprint):
        record = validate_handprint(c_major_handprint)
        assert record["hand"] == "right"
        assert record["comfort_rating"] == 80
        assert [p["midi_note"] for p in record["positions"]] == [48, 52, 55]

    def test_hand_alias(self, c_major_handprint):
        c_major_handprint["hand"] = "L"
        assert validate_handprint(c_major_handprint)["hand"] == "left"

    def test_midi_note_derived_from_pad_index(self):
        entry = {
            "hand": "right",
            "base_midi": 36,
            "positions": [
                {"row": 0, "col": 0, "pad_index": 0, "finger": 1},
                {"row": 0, "col": 2, "pad_index": 2, "finger": 2},
                {"row": 0, "col": 4, "pad_index": 4, "finger": 3},
            ],
        }
        record = validate_handprint(entry)
        assert [p["midi_note"] for p in record["positions"]] == [36, 38, 40]

    def test_measurements_computed_when_missing(self, c_major_handprint):
        record = validate_handprint(c_major_handprint)
        assert record["measurements"] == {"1-2": 1.0, "1-3": 2.0, "2-3": 1.0}

    def test_cached_measurements_kept(self, c_major_handprint):
        c_major_handprint["measurements"] = {"1-2": 1.5, "1-3": 2.5, "2-3": 1.25}
        assert validate_handprint(c_major_handprint)["measurements"]["1-2"] == 1.5

    def test_default_comfort(self, c_major_handprint):
        del c_major_handprint["comfort_rating"]
        assert validate_handprint(c_major_handprint)["comfort_rating"] == 50

    @pytest.mark.parametrize("missing", ["hand", "positions"])
    def test_missing_keys(self, c_major_handprint, missing):
        del c_major_handprint[missing]
        with pytest.raises(InvalidHandprint):
            validate_handprint(c_major_handprint)

    def test_too_few_positions(self):
        with pytest.raises(InvalidHandprint):
            validate_handprint(make_handprint([(0, 0, 1), (0, 1, 2)]))

    def test_too_many_positions(self):
        entry = make_handprint([(0, c, c + 1) for c in range(5)])
        entry["positions"].append(dict(entry["positions"][0], finger=5))
        with pytest.raises(InvalidHandprint):
            validate_handprint(entry)

    def test_finger_out_of_range(self):
        with pytest.raises(InvalidHandprint):
            validate_handprint(make_handprint([(0, 0, 1), (0, 1, 2), (0, 2, 6)]))

    def test_fingers_must_increase(self):
        with pytest.raises(InvalidHandprint):
            validate_handprint(make_handprint([(0, 0, 1), (0, 1, 3), (0, 2, 2)]))

    def test_duplicate_fingers(self):
        with pytest.raises(InvalidHandprint):
            validate_handprint(make_handprint([(0, 0, 1), (0, 1, 2), (0, 2, 2)]))

    def test_comfort_out_of_range(self):
        with pytest.raises(InvalidHandprint):
            validate_handprint(make_handprint([(0, 0, 1), (0, 1, 2), (0, 2, 3)], comfort=120))

    def test_bad_hand(self, c_major_handprint):
        c_major_handprint["hand"] = "both"
        with pytest.raises(InvalidHandprint):
            validate_handprint(c_major_handprint)

    def test_invalid_handprint_is_value_error(self):
        with pytest.raises(ValueError):
            validate_handprint("not a handprint")


class TestCreateHandprint:
    """One-step capture builder."""

    def test_fills_grid_fields(self, hex_grid):
        record = create_handprint("right", [(0, 0), (1, 0), (2, 0)], 75, hex_grid, device="exquis")
        assert [p["finger"] for p in record["positions"]] == [1, 2, 3]
        assert [p["pad_index"] for p in record["positions"]] == [0, 4, 7]
        assert [p["midi_note"] for p in record["positions"]] == [48, 52, 55]
        assert record["id"].startswith("right_")
        assert record["device"] == "exquis"
        assert "captured_at" in record
        assert record["measurements"]["1-3"] == 2.0

    def test_explicit_fingers(self, hex_grid):
        pads = [{"row": 0, "col": 0, "finger": 1}, {"row": 0, "col": 2, "finger": 3}, {"row": 1, "col": 3, "finger": 5}]
        record = create_handprint("left", pads, 60, hex_grid)
        assert [p["finger"] for p in record["positions"]] == [1, 3, 5]
        assert record["hand"] == "left"

    def test_pad_off_grid(self, hex_grid):
        with pytest.raises(OutOfRange):
            create_handprint("right", [(0, 0), (1, 5), (2, 0)], 50, hex_grid)


class TestCollectionHelpers:
    """Helpers return new lists and never touch the input."""

    def test_pair_key_is_unordered(self):
        assert pair_key(3, 1) == pair_key(1, 3) == "1-3"

    def test_compute_measurements(self):
        positions = [{"row": 0, "col": 0, "finger": 1}, {"row": 3, "col": 4, "finger": 2}]
        assert compute_measurements(positions) == {"1-2": 5.0}

    def test_filter_remove_clear(self, c_major_handprint, wide_handprint):
        left = dict(wide_handprint, hand="left", id="left_one")
        store = [c_major_handprint, left]

        assert [hp["id"] for hp in filter_by_hand(store, "right")] == ["c_major"]
        assert [hp["id"] for hp in filter_by_hand(store, None)] == ["c_major", "left_one"]
        assert [hp["id"] for hp in remove_handprint(store, "c_major")] == ["left_one"]
        assert [hp["id"] for hp in clear_hand(store, "L")] == ["c_major"]
        assert len(store) == 2

    def test_snapshot_is_deep(self, c_major_handprint):
        store = [c_major_handprint]
        copy = snapshot(store)
        c_major_handprint["positions"][0]["finger"] = 5
        assert copy[0]["positions"][0]["finger"] == 1


class TestJsonIO:
    """Saving and loading handprint files."""

    def test_save_and_load(self, tmp_path, c_major_handprint, five_finger_handprint):
        records = [validate_handprint(c_major_handprint), validate_handprint(five_finger_handprint)]
        path = save_handprints(records, tmp_path / "nested" / "handprints.json")
        assert load_handprints(path) == records

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_handprints(tmp_path / "nope.json")

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"hand": "right"}), encoding="utf-8")
        with pytest.raises(InvalidHandprint):
            load_handprints(path)

    def test_error_names_entry(self, c_major_handprint):
        with pytest.raises(InvalidHandprint, match="Entry 1"):
            parse_handprints([c_major_handprint, {"hand": "right"}])
