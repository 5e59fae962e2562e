"""
Tests for exact chord matching inside captured handprints.
"""

import random

from conftest import make_handprint
from isofinger.fingering_engine.chord_matcher import (
    find_chord_fingerings,
    generate_subsets,
    position_midi_note,
)
from isofinger.fingering_engine.handprints import validate_handprint
from isofinger.fingering_engine.scorer import rank_fingerings
from isofinger.grid import HexGrid


class TestSubsets:
    """Bounded subset enumeration."""

    def test_five_positions_give_sixteen_subsets(self):
        assert len(generate_subsets(list(range(5)), 3, 5)) == 16

    def test_three_positions_give_one_subset(self):
        assert generate_subsets(["a", "b", "c"], 3, 5) == [("a", "b", "c")]

    def test_midi_note_fallback(self):
        assert position_midi_note({"pad_index": 7, "midi_note": None}, 48) == 55
        assert position_midi_note({"pad_index": 7, "midi_note": 60}, 48) == 60


class TestFindChordFingerings:
    """Exact pitch-class set matching."""

    def test_c_major_single_match(self, c_major_handprint):
        matches = find_chord_fingerings({0, 4, 7}, [validate_handprint(c_major_handprint)])
        assert len(matches) == 1
        match = matches[0]
        assert match["comfort_rating"] == 80
        assert match["source"] == "handprint"
        assert match["handprint_id"] == "c_major"
        assert [p["pitch_class"] for p in match["positions"]] == [0, 4, 7]
        assert match["target_pitch_classes"] == [0, 4, 7]

    def test_c_major_scored(self, c_major_handprint):
        """Span 2 in one column: full geometry and ergonomics."""
        ranked = rank_fingerings(find_chord_fingerings({0, 4, 7}, [validate_handprint(c_major_handprint)]))
        assert ranked[0]["comfort_score"] == 80
        assert ranked[0]["geometric_score"] == 100
        assert ranked[0]["ergonomic_score"] == 100
        assert ranked[0]["score"] == 92

    def test_subset_of_larger_handprint(self, five_finger_handprint):
        matches = find_chord_fingerings([0, 4, 7], [validate_handprint(five_finger_handprint)])
        assert len(matches) == 1
        assert [p["finger"] for p in matches[0]["positions"]] == [1, 3, 4]

    def test_supersets_and_subsets_rejected(self, five_finger_handprint):
        store = [validate_handprint(five_finger_handprint)]
        # C D E G A never equals a two-note or six-note target
        assert find_chord_fingerings({0, 4}, store) == []
        assert find_chord_fingerings({0, 2, 4, 7, 9, 11}, store) == []
        assert len(find_chord_fingerings({0, 2, 4, 7, 9}, store)) == 1

    def test_octave_doublings_match(self):
        grid = HexGrid()
        # C3 E3 G3 C4
        hp = make_handprint([(0, 0, 1), (1, 0, 2), (2, 0, 3), (3, 1, 4)], grid=grid)
        matches = find_chord_fingerings({0, 4, 7}, [validate_handprint(hp)])
        assert sorted(tuple(p["finger"] for p in m["positions"]) for m in matches) == [
            (1, 2, 3),
            (1, 2, 3, 4),
            (2, 3, 4),
        ]

    def test_hand_filter(self, c_major_handprint):
        store = [validate_handprint(c_major_handprint)]
        assert find_chord_fingerings({0, 4, 7}, store, hand="left") == []
        assert len(find_chord_fingerings({0, 4, 7}, store, hand="right")) == 1

    def test_empty_inputs(self, c_major_handprint):
        assert find_chord_fingerings(set(), [validate_handprint(c_major_handprint)]) == []
        assert find_chord_fingerings({0, 4, 7}, []) == []

    def test_store_not_mutated(self, c_major_handprint):
        store = [validate_handprint(c_major_handprint)]
        matches = find_chord_fingerings({0, 4, 7}, store)
        matches[0]["positions"][0]["finger"] = 5
        assert store[0]["positions"][0]["finger"] == 1

    def test_matches_are_exact_for_random_stores(self):
        """Every match spells exactly the target, whatever the store."""
        rng = random.Random(2024)
        grid = HexGrid()
        pads = list(grid.iter_positions(max_row=6))

        for trial in range(150):
            store = []
            for i in range(rng.randint(1, 6)):
                size = rng.randint(3, 5)
                chosen = rng.sample(pads, size)
                fingers = sorted(rng.sample(range(1, 6), size))
                store.append(
                    validate_handprint(
                        make_handprint(
                            [(r, c, f) for (r, c), f in zip(chosen, fingers)],
                            hp_id=f"t{trial}_{i}",
                            grid=grid,
                        )
                    )
                )

            if rng.random() < 0.5:
                source = rng.choice(store)["positions"]
                sample = rng.sample(source, 3)
                target = {p["midi_note"] % 12 for p in sample}
            else:
                target = set(rng.sample(range(12), rng.randint(3, 5)))

            for match in find_chord_fingerings(target, store):
                assert {p["midi_note"] % 12 for p in match["positions"]} == target
                assert all(p["pitch_class"] == p["midi_note"] % 12 for p in match["positions"])
                assert 3 <= len(match["positions"]) <= 5
