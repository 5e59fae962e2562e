"""Synthesizer — approximate chord fingerings built from grid search and learned patterns.

Pipeline:
    1. Collect pads for each target pitch class in rows ``0..max_search_row``,
       keeping the first ``pads_per_pitch_class`` found (bottom row first).
    2. Take the Cartesian product: one pad per pitch class per candidate.
       With at most 5 pitch classes and 3 pads each this is <= 243 shapes.
    3. Assign fingers: thumb low, then along the row toward the pinky side
       (rightward for the right hand, leftward for the left hand), preferring
       the finger most often seen on that pad in the handprints.
    4. Score with the live heuristic (span, row height, pattern similarity)
       and then with the shared :class:`FingeringScorer`.
    5. Return the best ``max_suggestions``.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from typing import Any

from ..grid import Grid, HexGrid
from ..grid.coords import max_pairwise
from .handprints import normalise_hand, snapshot
from .pattern_extractor import (
    calculate_pattern_similarity,
    extract_patterns,
    suggest_finger_for_position,
)
from .scorer import FingeringScorer


logger = logging.getLogger(__name__)

FINGERS: list[int] = [1, 2, 3, 4, 5]


def find_candidate_pads(
    target_pitch_classes: Iterable[int],
    grid: Grid,
    base_midi: int = 48,
    max_row: int = 5,
    pads_per_pitch_class: int = 3,
) -> dict[int, list[dict[str, Any]]]:
    """Pads within reach for each pitch class, in scan order.

    Returns:
        Mapping pitch class -> up to *pads_per_pitch_class* pad dicts
        (``row``, ``col``, ``pad_index``, ``midi_note``, ``pitch_class``).
        Pitch classes are keyed in ascending order.
    """
    pads_by_pc: dict[int, list[dict[str, Any]]] = {pc: [] for pc in sorted({p % 12 for p in target_pitch_classes})}

    for row, col in grid.iter_positions(max_row):
        midi_note = grid.midi_note(row, col, base_midi)
        pads = pads_by_pc.get(midi_note % 12)
        if pads is None or len(pads) >= pads_per_pitch_class:
            continue
        pads.append(
            {
                "row": row,
                "col": col,
                "pad_index": grid.pad_index(row, col),
                "midi_note": midi_note,
                "pitch_class": midi_note % 12,
            }
        )
    return pads_by_pc


def generate_combinations(pads_by_pc: dict[int, list[dict[str, Any]]]) -> list[tuple[dict[str, Any], ...]]:
    """One pad per pitch class, every combination; empty if any class has no pad."""
    if not pads_by_pc:
        return []
    return list(itertools.product(*pads_by_pc.values()))


def assign_fingers(
    pads: Iterable[dict[str, Any]],
    hand: str,
    patterns: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Attach finger numbers to a hand shape.

    Pads are ordered bottom row first, then toward the pinky side. Each
    pad takes the finger most often captured on it (when *patterns* is
    given and that finger is still free), otherwise its sequential finger,
    otherwise the lowest free finger. Fingers stay unique.

    Raises:
        ValueError: more pads than fingers.
    """
    hand = normalise_hand(hand)
    direction = 1 if hand == "right" else -1
    ordered = sorted(pads, key=lambda p: (p["row"], direction * p["col"]))
    if len(ordered) > len(FINGERS):
        raise ValueError(f"Cannot finger {len(ordered)} pads with {len(FINGERS)} fingers")

    used: set[int] = set()
    assigned: list[dict[str, Any]] = []
    for index, pad in enumerate(ordered):
        finger = suggest_finger_for_position(pad["row"], pad["col"], patterns)
        if finger is None or finger in used:
            finger = min(index + 1, 5)
        if finger in used:
            finger = next(f for f in FINGERS if f not in used)
        used.add(finger)
        assigned.append({**pad, "finger": finger, "hand": hand})
    return assigned


def heuristic_score(
    fingering: dict[str, Any],
    grid: Grid,
    patterns: dict[str, Any] | None,
) -> float:
    """Live ergonomic estimate (0–100) for a synthesised shape.

    Starts at 50, averaged with pattern similarity when patterns exist;
    then rewards compact spans (measured with the grid's own distance)
    and lower rows.
    """
    score = 50.0
    if patterns:
        score = (score + calculate_pattern_similarity(fingering, patterns)) / 2

    positions = fingering["positions"]
    span = max_pairwise(positions, grid.grid_distance)
    if span < 1.5:
        score += 10
    elif span <= 3.0:
        score += 5
    elif span > 4.0:
        score -= 20

    avg_row = sum(p["row"] for p in positions) / len(positions)
    score += max(0.0, 10 - avg_row * 2)

    return min(100.0, max(0.0, score))


def synthesize_fingerings(
    target_pitch_classes: Iterable[int],
    handprints: list[dict[str, Any]],
    grid: Grid | None = None,
    base_midi: int = 48,
    hand: str = "right",
    max_suggestions: int | None = None,
    pads_per_pitch_class: int | None = None,
    max_search_row: int | None = None,
    scorer: FingeringScorer | None = None,
) -> list[dict[str, Any]]:
    """Synthesize ranked fingering suggestions for a target chord.

    Args:
        target_pitch_classes: Pitch classes the fingering must cover.
        handprints: Captured handprints used for pattern learning; a
            snapshot is taken on entry. An empty collection yields no
            suggestions.
        grid: Grid geometry; an intervals-mode :class:`HexGrid` by default.
        base_midi: MIDI note of pad (0, 0).
        hand: ``"left"`` or ``"right"``.
        max_suggestions: Number of results; config default when ``None``.
        pads_per_pitch_class: Per-class pad cap; config default when ``None``.
        max_search_row: Highest row searched; config default when ``None``.
        scorer: Shared scorer; built from the default config when ``None``.

    Returns:
        Scored candidates, best first. Empty for an empty target, an
        empty handprint collection, a target with more pitch classes
        than one hand has fingers, or when some pitch class has no pad
        within reach.
    """
    target = sorted({pc % 12 for pc in target_pitch_classes})
    if not target or not handprints:
        return []
    if len(target) > len(FINGERS):
        logger.debug("Synthesis skipped for %s: %d pitch classes exceed one hand", target, len(target))
        return []

    grid = grid or HexGrid()
    scorer = scorer or FingeringScorer()
    cfg = scorer.config
    max_suggestions = cfg["max_suggestions"] if max_suggestions is None else max_suggestions
    pads_per_pitch_class = cfg["pads_per_pitch_class"] if pads_per_pitch_class is None else pads_per_pitch_class
    max_search_row = cfg["max_search_row"] if max_search_row is None else max_search_row
    hand = normalise_hand(hand)

    patterns = extract_patterns(snapshot(handprints), hand)

    pads_by_pc = find_candidate_pads(target, grid, base_midi, max_search_row, pads_per_pitch_class)
    combinations = generate_combinations(pads_by_pc)
    logger.debug(
        "Synthesis for %s on %r: pads per class %s, %d combinations",
        target, grid, {pc: len(p) for pc, p in pads_by_pc.items()}, len(combinations),
    )
    if not combinations:
        return []

    candidates: list[dict[str, Any]] = []
    for combo in combinations:
        positions = [
            {key: pad[key] for key in ("row", "col", "pad_index", "midi_note", "finger", "pitch_class")}
            for pad in assign_fingers(combo, hand, patterns)
        ]
        fingering: dict[str, Any] = {
            "source": "synthesized",
            "hand": hand,
            "base_midi": base_midi,
            "target_pitch_classes": target,
            "positions": positions,
        }
        fingering["pattern_score"] = calculate_pattern_similarity(fingering, patterns)
        fingering["heuristic_score"] = heuristic_score(fingering, grid, patterns)
        candidates.append(fingering)

    # Heuristic order first so it breaks ties in the stable ranking below
    candidates.sort(key=lambda f: f["heuristic_score"], reverse=True)
    ranked = scorer.rank_fingerings(candidates)
    return ranked[:max_suggestions]
