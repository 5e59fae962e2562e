"""Pitch classes — note names, interval tables and mod-12 arithmetic.

All pitch classes are integers in ``[0, 12)``; every helper normalises
negative input with Python's floor modulo.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pretty_midi

from ..errors import UnknownQuality


NOTE_TO_PC: dict[str, int] = {
    "C": 0, "C#": 1, "Db": 1,
    "D": 2, "D#": 3, "Eb": 3,
    "E": 4,
    "F": 5, "F#": 6, "Gb": 6,
    "G": 7, "G#": 8, "Ab": 8,
    "A": 9, "A#": 10, "Bb": 10,
    "B": 11,
}

PC_TO_NOTE_SHARP: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
PC_TO_NOTE_FLAT: list[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# ── Scale / chord interval tables ─────────────────────────────
PITCH_CLASS_SETS: dict[str, dict[str, Any]] = {
    # Scales
    "maj": {"name": "Major scale", "intervals": [0, 2, 4, 5, 7, 9, 11], "type": "scale"},
    "natmin": {"name": "Natural minor", "intervals": [0, 2, 3, 5, 7, 8, 10], "type": "scale"},
    "harmin": {"name": "Harmonic minor", "intervals": [0, 2, 3, 5, 7, 8, 11], "type": "scale"},
    "melmin": {"name": "Melodic minor", "intervals": [0, 2, 3, 5, 7, 9, 11], "type": "scale"},
    "dorian": {"name": "Dorian", "intervals": [0, 2, 3, 5, 7, 9, 10], "type": "scale"},
    "phrygian": {"name": "Phrygian", "intervals": [0, 1, 3, 5, 7, 8, 10], "type": "scale"},
    "lydian": {"name": "Lydian", "intervals": [0, 2, 4, 6, 7, 9, 11], "type": "scale"},
    "mixolydian": {"name": "Mixolydian", "intervals": [0, 2, 4, 5, 7, 9, 10], "type": "scale"},
    "locrian": {"name": "Locrian", "intervals": [0, 1, 3, 5, 6, 8, 10], "type": "scale"},
    "majpent": {"name": "Major pentatonic", "intervals": [0, 2, 4, 7, 9], "type": "scale"},
    "minpent": {"name": "Minor pentatonic", "intervals": [0, 3, 5, 7, 10], "type": "scale"},
    "chromatic": {"name": "Chromatic", "intervals": list(range(12)), "type": "scale"},
    "wholeTone": {"name": "Whole tone", "intervals": [0, 2, 4, 6, 8, 10], "type": "scale"},
    # Triads
    "majtriad": {"name": "Major triad", "intervals": [0, 4, 7], "type": "chord"},
    "mintriad": {"name": "Minor triad", "intervals": [0, 3, 7], "type": "chord"},
    "augtriad": {"name": "Augmented triad", "intervals": [0, 4, 8], "type": "chord"},
    "dimtriad": {"name": "Diminished triad", "intervals": [0, 3, 6], "type": "chord"},
    # 7th chords
    "maj7": {"name": "Major 7th", "intervals": [0, 4, 7, 11], "type": "chord"},
    "min7": {"name": "Minor 7th", "intervals": [0, 3, 7, 10], "type": "chord"},
    "dom7": {"name": "Dominant 7th", "intervals": [0, 4, 7, 10], "type": "chord"},
    "dim7": {"name": "Diminished 7th", "intervals": [0, 3, 6, 9], "type": "chord"},
    "hdim7": {"name": "Half-diminished 7th", "intervals": [0, 3, 6, 10], "type": "chord"},
    # Extended chords
    "maj9": {"name": "Major 9th", "intervals": [0, 4, 7, 11, 14], "type": "chord"},
    "min9": {"name": "Minor 9th", "intervals": [0, 3, 7, 10, 14], "type": "chord"},
    "dom9": {"name": "Dominant 9th", "intervals": [0, 4, 7, 10, 14], "type": "chord"},
}


def _normalise_accidentals(name: str) -> str:
    return name.replace("♯", "#").replace("♭", "b")


def note_to_pc(name: str) -> int:
    """Pitch class of a note name such as ``"F#"``, ``"Bb"`` or ``"E♭"``.

    Raises:
        UnknownQuality: If the name is not a recognised spelling.
    """
    key = _normalise_accidentals(name.strip())
    if key not in NOTE_TO_PC:
        raise UnknownQuality(f"Invalid key: {name}")
    return NOTE_TO_PC[key]


def pitch_class(midi_note: int) -> int:
    return midi_note % 12


def pitch_classes(root: int, intervals: Iterable[int]) -> set[int]:
    """``{(root + i) mod 12 for i in intervals}``."""
    return {(root + interval) % 12 for interval in intervals}


def get_pitch_classes(key: str, set_type: str) -> set[int]:
    """Pitch classes of a named scale or chord on a named root.

    Args:
        key: Root note name, e.g. ``"C"`` or ``"F#"``.
        set_type: A key of :data:`PITCH_CLASS_SETS`.

    Raises:
        UnknownQuality: For an unknown key or set type.
    """
    root = note_to_pc(key)
    if set_type not in PITCH_CLASS_SETS:
        raise UnknownQuality(f"Invalid set type: {set_type}")
    return pitch_classes(root, PITCH_CLASS_SETS[set_type]["intervals"])


def parse_custom_pitch_classes(text: str | None) -> set[int]:
    """Parse ``"0,3,7,10"`` into a pitch-class set.

    Each token is reduced mod 12 (negatives included). Tokens that are
    not integers are dropped rather than rejecting the whole string.
    """
    pcs: set[int] = set()
    if not text or not text.strip():
        return pcs

    for token in text.split(","):
        token = token.strip()
        try:
            value = int(token)
        except ValueError:
            continue
        pcs.add(value % 12)
    return pcs


def midi_to_note_name(midi_note: int, use_flats: bool = False) -> str:
    """Note name with octave, e.g. ``60 -> "C4"``, ``61 -> "C#4"`` / ``"Db4"``."""
    name = pretty_midi.note_number_to_name(int(midi_note))
    if not use_flats:
        return name
    octave = name[2:] if name[1] == "#" else name[1:]
    return f"{PC_TO_NOTE_FLAT[midi_note % 12]}{octave}"


def pcs_to_binary(pcs: Iterable[int]) -> int:
    """12-bit mask with bit ``pc`` set for each member (C major triad = 2193)."""
    binary = 0
    for pc in pcs:
        binary |= 1 << (pc % 12)
    return binary


def binary_to_pcs(binary: int) -> set[int]:
    return {pc for pc in range(12) if binary & (1 << pc)}


def interval(pc1: int, pc2: int) -> int:
    """Ascending interval in semitones from *pc1* to *pc2* (0-11)."""
    return (pc2 - pc1) % 12


def transpose(pcs: Iterable[int], semitones: int) -> set[int]:
    return {(pc + semitones) % 12 for pc in pcs}


def format_pcs(pcs: Iterable[int], use_flats: bool = False) -> str:
    """Readable listing such as ``"C E G"`` in ascending pitch-class order."""
    names = PC_TO_NOTE_FLAT if use_flats else PC_TO_NOTE_SHARP
    return " ".join(names[pc] for pc in sorted(pcs))
