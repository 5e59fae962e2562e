"""
Tests for chord-notation parsing and target resolution.
"""

import pytest

from isofinger.errors import UnknownQuality
from isofinger.theory.chord_parser import (
    QUALITY_PATTERNS,
    is_valid_chord_notation,
    parse_chord_notation,
    resolve_target,
)
from isofinger.theory.chords import CHORD_QUALITIES


class TestParseChordNotation:
    """Root and quality extraction."""

    @pytest.mark.parametrize(
        "text, root_pc, quality",
        [
            ("Cmaj7", 0, "maj7"),
            ("C", 0, "major"),
            ("Am", 9, "minor"),
            ("G7", 7, "dom7"),
            ("F#m7b5", 6, "hdim7"),
            ("Dbmaj9", 1, "maj9"),
            ("CM7", 0, "maj7"),
            ("Bb7#9", 10, "dom7#9"),
            ("E7alt", 4, "alt7"),
            ("Csus", 0, "sus4"),
            ("D6/9", 2, "6/9"),
            ("Gsowhat", 7, "sowhat"),
        ],
    )
    def test_known_chords(self, text, root_pc, quality):
        assert parse_chord_notation(text) == {"root_pc": root_pc, "quality": quality}

    def test_exotic_alteration_with_unicode_flat(self):
        assert parse_chord_notation("E♭13b9#11") == {"root_pc": 3, "quality": "dom13"}

    def test_specific_alterations_beat_plain_seventh(self):
        """``7b5#9`` must not be swallowed by the shorter ``7`` pattern."""
        assert parse_chord_notation("C7b5#9")["quality"] == "7b5#9"
        assert parse_chord_notation("C7b9")["quality"] == "dom7b9"

    def test_two_character_root_checked_first(self):
        assert parse_chord_notation("C#")["root_pc"] == 1

    @pytest.mark.parametrize("text", ["", "   ", "H7", "Cxyz", "7", None, 42])
    def test_unparseable_returns_none(self, text):
        assert parse_chord_notation(text) is None
        assert not is_valid_chord_notation(text)

    def test_every_pattern_has_a_table_entry(self):
        for _, quality in QUALITY_PATTERNS:
            assert quality in CHORD_QUALITIES


class TestResolveTarget:
    """Any supported target form to a pitch-class set."""

    def test_chord_name(self):
        assert resolve_target("Cmaj7") == {0, 4, 7, 11}

    def test_pitch_class_string(self):
        assert resolve_target("0,4,7") == {0, 4, 7}

    def test_iterable(self):
        assert resolve_target([12, 16, 19]) == {0, 4, 7}

    def test_root_quality_pair(self):
        assert resolve_target(("C", "major")) == {0, 4, 7}
        assert resolve_target((2, "minor")) == {2, 5, 9}

    def test_unknown_quality_in_pair_raises(self):
        with pytest.raises(UnknownQuality):
            resolve_target(("C", "maj42"))

    def test_garbage_string_is_empty(self):
        assert resolve_target("not a chord") == set()

    def test_none_is_empty(self):
        assert resolve_target(None) == set()

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            resolve_target(3.5)
