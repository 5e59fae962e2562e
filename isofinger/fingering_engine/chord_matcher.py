"""Chord Matcher — exact chord fingerings recovered from captured handprints.

Every 3–5 finger subset of every handprint (at most 16 per handprint) is
checked; a subset is accepted only when its pitch-class set equals the
target exactly. Supersets and subsets of the target are rejected, not
scored lower.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from typing import Any

from .handprints import filter_by_hand, snapshot


logger = logging.getLogger(__name__)

MIN_CHORD_FINGERS: int = 3
MAX_CHORD_FINGERS: int = 5


def generate_subsets(items: list[Any], min_size: int, max_size: int) -> list[tuple[Any, ...]]:
    """All order-preserving subsets with ``min_size <= len <= max_size``."""
    subsets: list[tuple[Any, ...]] = []
    for size in range(min_size, min(max_size, len(items)) + 1):
        subsets.extend(itertools.combinations(items, size))
    return subsets


def position_midi_note(pos: dict[str, Any], base_midi: int) -> int:
    """Stored MIDI note of a captured position, else ``base_midi + pad_index``."""
    if pos.get("midi_note") is not None:
        return int(pos["midi_note"])
    return base_midi + int(pos["pad_index"])


def find_chord_fingerings(
    target_pitch_classes: Iterable[int],
    handprints: list[dict[str, Any]],
    base_midi: int = 48,
    hand: str | None = None,
) -> list[dict[str, Any]]:
    """Find handprint subsets that play exactly *target_pitch_classes*.

    Args:
        target_pitch_classes: Pitch classes to match (e.g. ``{0, 4, 7}``).
        handprints: Captured handprints; a snapshot is taken on entry.
        base_midi: Fallback base note for positions without ``midi_note``.
        hand: Restrict to ``"left"`` or ``"right"`` handprints.

    Returns:
        Unscored candidate fingerings in handprint / subset order. Empty
        when nothing matches.
    """
    target = {pc % 12 for pc in target_pitch_classes}
    if not target:
        return []

    matches: list[dict[str, Any]] = []
    selected = filter_by_hand(snapshot(handprints), hand)

    for handprint in selected:
        hp_base = handprint.get("base_midi", base_midi)
        for subset in generate_subsets(handprint["positions"], MIN_CHORD_FINGERS, MAX_CHORD_FINGERS):
            notes = [position_midi_note(pos, hp_base) for pos in subset]
            if {note % 12 for note in notes} != target:
                continue

            matches.append(
                {
                    "source": "handprint",
                    "handprint_id": handprint.get("id"),
                    "hand": handprint["hand"],
                    "comfort_rating": handprint.get("comfort_rating", 50),
                    "base_midi": hp_base,
                    "device": handprint.get("device"),
                    "captured_at": handprint.get("captured_at"),
                    "target_pitch_classes": sorted(target),
                    "positions": [
                        {
                            "row": pos["row"],
                            "col": pos["col"],
                            "pad_index": pos.get("pad_index"),
                            "midi_note": note,
                            "finger": pos["finger"],
                            "pitch_class": note % 12,
                        }
                        for pos, note in zip(subset, notes)
                    ],
                    "score": 0,
                }
            )

    logger.debug(
        "Matched %d fingerings for %s across %d handprints",
        len(matches), sorted(target), len(selected),
    )
    return matches
