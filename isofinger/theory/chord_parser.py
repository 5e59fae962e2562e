"""Chord notation parser — ``"Cmaj7"``, ``"E♭13b9#11"``, ``"F#dim"`` → root + quality.

Malformed text is routine user input, so parsing returns ``None``
instead of raising.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..errors import UnknownQuality
from .chords import chord_pitch_classes
from .pitch import NOTE_TO_PC, note_to_pc, parse_custom_pitch_classes


# Tested in order: more specific alterations must precede the shorter
# patterns that would otherwise claim them.
QUALITY_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(p), quality)
    for p, quality in [
        # Extended altered chords
        (r"13b9#11", "dom13"),
        (r"13#11", "dom13"),
        (r"13b9", "dom13"),
        # Altered dominants
        (r"7alt|alt7|altered", "alt7"),
        (r"7#5#9", "7#5#9"),
        (r"7#5b9", "7#5b9"),
        (r"7b5#9", "7b5#9"),
        (r"7b5b9", "7b5b9"),
        (r"7#5", "7#5"),
        (r"7b5", "7b5"),
        (r"7#9", "dom7#9"),
        (r"7b9", "dom7b9"),
        # 13th chords
        (r"maj7#11b13|M7#11b13|Δ7#11b13", "maj7#11b13"),
        (r"13|dom13", "dom13"),
        (r"maj13|M13|Δ13", "maj13"),
        (r"m13|min13|-13", "min13"),
        (r"7b13", "dom7b13"),
        # 11th chords
        (r"maj7#11|M7#11|Δ7#11", "maj7#11"),
        (r"7#11", "dom7#11"),
        (r"m11b5|min11b5|-11b5", "min11b5"),
        (r"11|dom11", "dom11"),
        (r"maj11|M11|Δ11", "maj11"),
        (r"m11|min11|-11", "min11"),
        # 9th chords
        (r"maj7#9|M7#9|Δ7#9", "maj7#9"),
        (r"m7b9|min7b9|-7b9", "min7b9"),
        (r"9|dom9", "dom9"),
        (r"maj9|M9|Δ9", "maj9"),
        (r"m9|min9|-9", "min9"),
        (r"aug9|\+9", "aug9"),
        (r"dim9|o9", "dim9"),
        # 7th chords
        (r"maj7|M7|Δ7|Δ", "maj7"),
        (r"m7|min7|-7", "min7"),
        (r"7|dom7", "dom7"),
        (r"dim7|o7|°7", "dim7"),
        (r"m7b5|ø7|ø|hdim7", "hdim7"),
        (r"mM7|m\(maj7\)|minmaj7|-M7", "minmaj7"),
        (r"aug7|\+7", "aug7"),
        (r"augmaj7|\+M7|\+maj7", "augmaj7"),
        (r"7sus4", "7sus4"),
        (r"7sus2", "7sus2"),
        (r"dimM7|oM7", "dimmaj7"),
        # 6th chords
        (r"6/9|6add9", "6/9"),
        (r"m6/9|min6/9|-6/9", "min6/9"),
        (r"6", "6"),
        (r"m6|min6|-6", "min6"),
        # Add chords
        (r"add2", "add2"),
        (r"add9", "add9"),
        (r"add4", "add4"),
        (r"madd9|minadd9|-add9", "minadd9"),
        # Suspended
        (r"sus2", "sus2"),
        (r"sus4|sus", "sus4"),
        # Triads
        (r"maj|M|major", "major"),
        (r"m|min|minor|-", "minor"),
        (r"dim|o|°", "dim"),
        (r"aug|\+", "aug"),
        (r"5", "5"),
        # Special voicings
        (r"quartal", "quartal"),
        (r"quartal4", "quartal4"),
        (r"quintal", "quintal"),
        (r"sowhat", "sowhat"),
    ]
]


def parse_chord_notation(notation: Any) -> dict[str, Any] | None:
    """Split chord notation into root pitch class and quality key.

    The root is one or two characters; two-character spellings
    (``"C#"``, ``"Db"``, ``"E♭"``) are tried first. An empty remainder
    means a major triad.

    Returns:
        ``{"root_pc": int, "quality": str}`` or ``None`` when the text
        has no valid root or an unrecognised quality.
    """
    if not isinstance(notation, str):
        return None

    text = notation.strip().replace("♯", "#").replace("♭", "b")
    if not text:
        return None

    root = None
    for size in (2, 1):
        if len(text) >= size and text[:size] in NOTE_TO_PC:
            root = text[:size]
            break
    if root is None:
        return None

    root_pc = NOTE_TO_PC[root]
    quality_str = text[len(root):]
    if not quality_str:
        return {"root_pc": root_pc, "quality": "major"}

    for pattern, quality in QUALITY_PATTERNS:
        if pattern.fullmatch(quality_str):
            return {"root_pc": root_pc, "quality": quality}
    return None


def is_valid_chord_notation(notation: Any) -> bool:
    return parse_chord_notation(notation) is not None


def resolve_target(target: Any) -> set[int]:
    """Turn any supported target description into a pitch-class set.

    Accepted forms:
        - an iterable of integers (reduced mod 12),
        - a chord-notation string such as ``"Cmaj7"``,
        - a comma-separated pitch-class string such as ``"0,4,7"``,
        - a ``(root, quality)`` pair, root as a note name or pitch class.

    Unparseable strings resolve to an empty set.

    Raises:
        UnknownQuality: For a ``(root, quality)`` pair naming an unknown
            quality or root.
    """
    if target is None:
        return set()

    if isinstance(target, str):
        parsed = parse_chord_notation(target)
        if parsed is not None:
            return chord_pitch_classes(parsed["root_pc"], parsed["quality"])
        return parse_custom_pitch_classes(target)

    if isinstance(target, tuple) and len(target) == 2 and isinstance(target[1], str):
        root, quality = target
        root_pc = note_to_pc(root) if isinstance(root, str) else int(root) % 12
        return chord_pitch_classes(root_pc, quality)

    if isinstance(target, Iterable):
        return {int(pc) % 12 for pc in target}

    raise TypeError(f"Unsupported target type: {type(target).__name__}")
