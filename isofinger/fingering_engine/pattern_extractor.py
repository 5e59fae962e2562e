"""Pattern Extractor — statistical hand patterns learned from handprints.

For a snapshot of handprints (optionally one hand only) computes:
    finger_distances    – mean / population std-dev per finger pair
    avg_span            – mean of each handprint's largest pad distance
    finger_assignments  – how often each finger landed on each pad
    chord_shapes        – anchor-relative geometry templates with comfort

The result is a fresh dict every call; nothing is cached or mutated.
``None`` means "no handprints for this hand", which callers treat as a
normal state (synthesis then assigns fingers anatomically).
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from ..grid.coords import max_pairwise, raw_distance
from .handprints import compute_measurements, filter_by_hand


logger = logging.getLogger(__name__)

# Comfort assumed for handprints captured without a rating
_DEFAULT_COMFORT: float = 50.0


def _comfort(handprint: dict[str, Any]) -> float:
    rating = handprint.get("comfort_rating")
    return _DEFAULT_COMFORT if rating is None else float(rating)


def position_key(row: int, col: int) -> str:
    return f"r{row}c{col}"


def calculate_span(positions: list[dict[str, Any]]) -> float:
    """Largest raw row/col distance between any two positions."""
    return max_pairwise(positions, raw_distance)


def extract_chord_shape(handprint: dict[str, Any]) -> dict[str, Any] | None:
    """Express a handprint relative to its lowest-numbered finger.

    Returns:
        ``{num_fingers, fingers, geometry, comfort}`` where ``geometry``
        lists ``{finger, row_offset, col_offset, distance}`` for every
        finger (the anchor itself included at offset 0), or ``None`` for
        fewer than three positions.
    """
    positions = handprint["positions"]
    if len(positions) < 3:
        return None

    ordered = sorted(positions, key=lambda p: p["finger"])
    anchor = ordered[0]

    geometry = [
        {
            "finger": pos["finger"],
            "row_offset": pos["row"] - anchor["row"],
            "col_offset": pos["col"] - anchor["col"],
            "distance": raw_distance(pos, anchor),
        }
        for pos in ordered
    ]

    return {
        "num_fingers": len(positions),
        "fingers": [p["finger"] for p in ordered],
        "geometry": geometry,
        "comfort": _comfort(handprint),
    }


def extract_patterns(
    handprints: list[dict[str, Any]],
    hand: str | None = None,
) -> dict[str, Any] | None:
    """Aggregate pattern statistics from a handprint collection.

    Args:
        handprints: Validated handprint dicts.
        hand: ``"left"`` / ``"right"`` to restrict the statistics, or
            ``None`` for both hands.

    Returns:
        Pattern dict, or ``None`` if no handprint matches the filter.
    """
    selected = filter_by_hand(handprints, hand)
    if not selected:
        logger.debug("No handprints for hand=%s; no patterns extracted", hand)
        return None

    pair_samples: dict[str, list[float]] = {}
    spans: list[float] = []
    comforts: list[float] = []
    finger_assignments: dict[str, dict[int, int]] = {}
    chord_shapes: list[dict[str, Any]] = []

    for handprint in selected:
        comforts.append(_comfort(handprint))
        positions = handprint["positions"]

        # Cached measurements are authoritative; recompute only when absent
        measurements = handprint.get("measurements") or compute_measurements(positions)
        for pair, distance in measurements.items():
            pair_samples.setdefault(pair, []).append(float(distance))

        spans.append(calculate_span(positions))

        for pos in positions:
            counts = finger_assignments.setdefault(position_key(pos["row"], pos["col"]), {})
            counts[pos["finger"]] = counts.get(pos["finger"], 0) + 1

        shape = extract_chord_shape(handprint)
        if shape is not None:
            chord_shapes.append(shape)

    finger_distances: dict[str, dict[str, float]] = {}
    for pair, samples in pair_samples.items():
        values = np.asarray(samples, dtype=float)
        finger_distances[pair] = {
            "avg": float(np.mean(values)),
            "std_dev": float(np.std(values)),
            "sample_count": int(values.size),
        }

    span_values = np.asarray(spans, dtype=float)
    patterns = {
        "hand": hand,
        "handprint_count": len(selected),
        "finger_distances": finger_distances,
        "span_distances": spans,
        "avg_span": float(np.mean(span_values)),
        "span_std_dev": float(np.std(span_values)),
        "finger_assignments": finger_assignments,
        "chord_shapes": chord_shapes,
        "avg_comfort": float(np.mean(comforts)),
    }
    logger.debug(
        "Extracted patterns from %d handprints (hand=%s): %d pairs, %d shapes",
        len(selected), hand, len(finger_distances), len(chord_shapes),
    )
    return patterns


def suggest_finger_for_position(row: int, col: int, patterns: dict[str, Any] | None) -> int | None:
    """Most frequently observed finger on ``(row, col)``, or ``None``.

    Ties go to the finger that was recorded first.
    """
    if not patterns:
        return None
    counts = patterns["finger_assignments"].get(position_key(row, col))
    if not counts:
        return None

    best_finger, best_count = None, 0
    for finger, count in counts.items():
        if count > best_count:
            best_finger, best_count = int(finger), count
    return best_finger


def calculate_pattern_similarity(candidate: dict[str, Any], patterns: dict[str, Any] | None) -> float:
    """Similarity (0–100) between a candidate fingering and learned shapes.

    Each shape scores +20 for the same finger count, up to +30 for a span
    close to the average learned span, and half its comfort rating; the
    best shape wins. Without patterns the neutral 50 is returned.
    """
    if not patterns or not patterns["chord_shapes"]:
        return 50.0

    candidate_span = calculate_span(candidate["positions"])
    span_similarity = max(0.0, 30 - abs(candidate_span - patterns["avg_span"]) * 10)

    best = 0.0
    for shape in patterns["chord_shapes"]:
        score = span_similarity + shape["comfort"] / 2
        if len(candidate["positions"]) == shape["num_fingers"]:
            score += 20
        best = max(best, score)
    return min(100.0, best)
