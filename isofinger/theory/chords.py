"""Chord dictionary — chord qualities and their intervals from the root.

Intervals above 12 mark extensions (9ths, 11ths, 13ths); they collapse
to pitch classes mod 12 when a chord is resolved.
"""

from __future__ import annotations

from typing import Any

from ..errors import UnknownQuality
from .pitch import pitch_classes


CHORD_QUALITIES: dict[str, list[int]] = {
    # Triads and dyads
    "major": [0, 4, 7],
    "minor": [0, 3, 7],
    "dim": [0, 3, 6],
    "aug": [0, 4, 8],
    "sus2": [0, 2, 7],
    "sus4": [0, 5, 7],
    "5": [0, 7],

    # 6th and add chords
    "6": [0, 4, 7, 9],
    "min6": [0, 3, 7, 9],
    "6/9": [0, 4, 7, 9, 14],
    "min6/9": [0, 3, 7, 9, 14],
    "add2": [0, 2, 4, 7],
    "add9": [0, 4, 7, 14],
    "add4": [0, 4, 5, 7],
    "minadd9": [0, 3, 7, 14],

    # 7th chords
    "maj7": [0, 4, 7, 11],
    "min7": [0, 3, 7, 10],
    "dom7": [0, 4, 7, 10],
    "dim7": [0, 3, 6, 9],
    "hdim7": [0, 3, 6, 10],
    "minmaj7": [0, 3, 7, 11],
    "aug7": [0, 4, 8, 10],
    "augmaj7": [0, 4, 8, 11],
    "dimmaj7": [0, 3, 6, 11],
    "7sus4": [0, 5, 7, 10],
    "7sus2": [0, 2, 7, 10],

    # 9th chords
    "maj9": [0, 4, 7, 11, 14],
    "min9": [0, 3, 7, 10, 14],
    "dom9": [0, 4, 7, 10, 14],
    "aug9": [0, 4, 8, 10, 14],
    "dim9": [0, 3, 6, 9, 14],
    "maj7#9": [0, 4, 7, 11, 15],
    "min7b9": [0, 3, 7, 10, 13],

    # 11th chords
    "dom11": [0, 4, 7, 10, 14, 17],
    "maj11": [0, 4, 7, 11, 14, 17],
    "min11": [0, 3, 7, 10, 14, 17],
    "min11b5": [0, 3, 6, 10, 14, 17],
    "dom7#11": [0, 4, 7, 10, 18],
    "maj7#11": [0, 4, 7, 11, 18],

    # 13th chords
    "dom13": [0, 4, 7, 10, 14, 21],
    "maj13": [0, 4, 7, 11, 14, 21],
    "min13": [0, 3, 7, 10, 14, 21],
    "dom7b13": [0, 4, 7, 10, 20],
    "maj7#11b13": [0, 4, 7, 11, 18, 20],

    # Altered dominants
    "dom7#9": [0, 4, 7, 10, 15],
    "dom7b9": [0, 4, 7, 10, 13],
    "7#5": [0, 4, 8, 10],
    "7b5": [0, 4, 6, 10],
    "7#5#9": [0, 4, 8, 10, 15],
    "7#5b9": [0, 4, 8, 10, 13],
    "7b5#9": [0, 4, 6, 10, 15],
    "7b5b9": [0, 4, 6, 10, 13],
    "alt7": [0, 4, 6, 8, 10, 13, 15],

    # Quartal / quintal stacks
    "quartal": [0, 5, 10],
    "quartal4": [0, 5, 10, 15],
    "quintal": [0, 7, 14],
    "sowhat": [0, 5, 10, 15, 19],

    # Rootless jazz voicings (A: 3rd on the bottom, B: 7th on the bottom)
    "rootless_maj7_a": [4, 7, 11, 14],
    "rootless_maj7_b": [11, 14, 16, 19],
    "rootless_min7_a": [3, 7, 10, 14],
    "rootless_min7_b": [10, 14, 15, 19],
    "rootless_dom7_a": [4, 9, 10, 14],
    "rootless_dom7_b": [10, 14, 16, 21],
}

CHORD_NAMES: dict[str, str] = {
    "major": "Major",
    "minor": "Minor",
    "dim": "Diminished",
    "aug": "Augmented",
    "sus2": "Sus2",
    "sus4": "Sus4",
    "5": "Power",
    "6": "6th",
    "min6": "Minor 6th",
    "6/9": "6/9",
    "min6/9": "Minor 6/9",
    "add2": "Add2",
    "add9": "Add9",
    "add4": "Add4",
    "minadd9": "Minor Add9",
    "maj7": "Major 7th",
    "min7": "Minor 7th",
    "dom7": "Dominant 7th",
    "dim7": "Diminished 7th",
    "hdim7": "Half-dim 7th",
    "minmaj7": "Minor-Major 7th",
    "aug7": "Augmented 7th",
    "augmaj7": "Augmented Major 7th",
    "dimmaj7": "Diminished Major 7th",
    "7sus4": "7sus4",
    "7sus2": "7sus2",
    "maj9": "Major 9th",
    "min9": "Minor 9th",
    "dom9": "Dominant 9th",
    "aug9": "Augmented 9th",
    "dim9": "Diminished 9th",
    "maj7#9": "Major 7th #9",
    "min7b9": "Minor 7th b9",
    "dom11": "Dominant 11th",
    "maj11": "Major 11th",
    "min11": "Minor 11th",
    "min11b5": "Minor 11th b5",
    "dom7#11": "Dominant 7th #11",
    "maj7#11": "Major 7th #11",
    "dom13": "Dominant 13th",
    "maj13": "Major 13th",
    "min13": "Minor 13th",
    "dom7b13": "Dominant 7th b13",
    "maj7#11b13": "Major 7th #11 b13",
    "dom7#9": "Dominant 7th #9",
    "dom7b9": "Dominant 7th b9",
    "7#5": "7#5",
    "7b5": "7b5",
    "7#5#9": "7#5#9",
    "7#5b9": "7#5b9",
    "7b5#9": "7b5#9",
    "7b5b9": "7b5b9",
    "alt7": "Altered",
    "quartal": "Quartal",
    "quartal4": "Quartal (4 notes)",
    "quintal": "Quintal",
    "sowhat": "So What",
    "rootless_maj7_a": "Major 7th (rootless A)",
    "rootless_maj7_b": "Major 7th (rootless B)",
    "rootless_min7_a": "Minor 7th (rootless A)",
    "rootless_min7_b": "Minor 7th (rootless B)",
    "rootless_dom7_a": "Dominant 7th (rootless A)",
    "rootless_dom7_b": "Dominant 7th (rootless B)",
}

NOTE_NAMES: list[str] = [
    "C", "C#/Db", "D", "D#/Eb", "E", "F",
    "F#/Gb", "G", "G#/Ab", "A", "A#/Bb", "B",
]


def chord_pitch_classes(root_pc: int, quality: str) -> set[int]:
    """Pitch classes of *quality* built on *root_pc*.

    Raises:
        UnknownQuality: If *quality* is not in :data:`CHORD_QUALITIES`.
    """
    intervals = CHORD_QUALITIES.get(quality)
    if intervals is None:
        raise UnknownQuality(f"Unknown chord quality: {quality}")
    return pitch_classes(root_pc, intervals)


def chord_name(root_pc: int, quality: str) -> str:
    """Display name such as ``"C Dominant 7th"``."""
    return f"{NOTE_NAMES[root_pc % 12]} {CHORD_NAMES.get(quality, quality)}"


def analyze_voicing(midi_notes: list[int], root_pc: int) -> dict[str, Any]:
    """Classify a voicing as root position or an inversion, close or open.

    Args:
        midi_notes: MIDI notes of the voicing, any order.
        root_pc: Root pitch class of the chord.

    Returns:
        Dict with ``type`` and ``description``; complete voicings also
        carry ``is_root_position``, ``is_close``, ``lowest_pc`` and
        ``span`` (semitones between the outer notes).
    """
    if len(midi_notes) < 3:
        return {"type": "incomplete", "description": "Incomplete voicing"}

    ordered = sorted(midi_notes)
    lowest_pc = ordered[0] % 12
    is_root_position = lowest_pc == root_pc % 12

    gaps = [b - a for a, b in zip(ordered, ordered[1:])]
    is_close = max(gaps) <= 12

    if is_root_position:
        voicing_type = "root_close" if is_close else "root_open"
        description = "Root Position (Close)" if is_close else "Root Position (Open)"
    else:
        bass_interval = (lowest_pc - root_pc) % 12
        if bass_interval in (3, 4):
            inversion = "first"
        elif bass_interval == 7:
            inversion = "second"
        elif bass_interval in (10, 11):
            inversion = "third"
        else:
            inversion = "other"
        voicing_type = f"{inversion}_inversion"
        description = f"{inversion.capitalize()} Inversion"
        if not is_close:
            description += " (Open)"

    return {
        "type": voicing_type,
        "description": description,
        "is_root_position": is_root_position,
        "is_close": is_close,
        "lowest_pc": lowest_pc,
        "span": ordered[-1] - ordered[0],
    }
