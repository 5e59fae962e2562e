"""Ergonomics — hand-size aware analysis and anatomical finger assignment.

``ErgoAnalyzer.analyze`` grades a finished fingering (one or both hands)
from 100 downwards:

    stretch    – adjacent fingers (1→2, 2→3, ...) further apart than the
                 hand size allows: -20 beyond max stretch, -5 beyond the
                 comfortable stretch
    strength   – +2 per strong finger (index, middle), -1 per pinky
    crossings  – -5 when a lower-numbered finger sits on a higher row
                 than the next finger

Distances use the grid's own ``grid_distance``.
"""

from __future__ import annotations

import math
from typing import Any

from ..grid import Grid, HexGrid
from .handprints import normalise_hand


# ── Anatomy tables ────────────────────────────────────────────
FINGER_WEIGHTS: dict[int, float] = {
    1: 0.8,  # thumb
    2: 1.0,  # index
    3: 0.9,  # middle
    4: 0.6,  # ring
    5: 0.4,  # pinky
}

HAND_SIZES: dict[str, dict[str, float]] = {
    "small": {"max_stretch": 2.5, "comfortable_stretch": 1.5},
    "medium": {"max_stretch": 3.0, "comfortable_stretch": 2.0},
    "large": {"max_stretch": 3.5, "comfortable_stretch": 2.5},
}

RECOMMENDATIONS: list[tuple[float, str]] = [
    (90, "Excellent ergonomics!"),
    (75, "Good fingering, comfortable to play"),
    (60, "Acceptable, but could be improved"),
    (40, "Uncomfortable, consider revising"),
]
POOR_RECOMMENDATION: str = "Poor ergonomics, recommend different fingering"


def recommendation_for(score: float) -> str:
    for threshold, text in RECOMMENDATIONS:
        if score >= threshold:
            return text
    return POOR_RECOMMENDATION


class ErgoAnalyzer:
    """Grades fingerings and proposes anatomical finger assignments.

    Args:
        hand_size: ``"small"``, ``"medium"`` or ``"large"``.
        grid: Geometry used for stretch distances; an intervals-mode
            :class:`HexGrid` by default.

    Raises:
        ValueError: For an unknown hand size.
    """

    def __init__(self, hand_size: str = "medium", grid: Grid | None = None) -> None:
        self.grid = grid or HexGrid()
        self.hand_size = hand_size
        self._check_hand_size(hand_size)

    @staticmethod
    def _check_hand_size(hand_size: str) -> None:
        if hand_size not in HAND_SIZES:
            raise ValueError(f"Unknown hand size '{hand_size}'. Choose from: {sorted(HAND_SIZES)}")

    def set_hand_size(self, hand_size: str) -> None:
        self._check_hand_size(hand_size)
        self.hand_size = hand_size

    # ── Analysis ──────────────────────────────────────────────

    def analyze(self, positions_by_hand: dict[str, list[dict[str, Any]]]) -> dict[str, Any]:
        """Grade the pads of each hand.

        Args:
            positions_by_hand: ``{"left": [...], "right": [...]}``; each
                position needs ``row``, ``col`` and ``finger``. Either hand
                may be missing or empty.

        Returns:
            ``{"score", "issues", "recommendation"}``. ``score`` is clamped
            to [0, 100]; the recommendation is chosen from the raw total.
        """
        total = 100.0
        issues: list[dict[str, Any]] = []

        for hand, pads in positions_by_hand.items():
            if not pads:
                continue
            hand = normalise_hand(hand)
            ordered = sorted(pads, key=lambda p: p["finger"])
            total -= self._stretch_penalty(ordered, hand, issues)
            total += self._strength_bonus(ordered)
            total -= self._crossing_penalty(ordered, hand, issues)

        return {
            "score": max(0.0, min(100.0, total)),
            "issues": issues,
            "recommendation": recommendation_for(total),
        }

    def analyze_fingering(self, fingering: dict[str, Any]) -> dict[str, Any]:
        """:meth:`analyze` for a single-hand candidate fingering."""
        return self.analyze({fingering.get("hand", "right"): fingering["positions"]})

    def _stretch_penalty(self, ordered: list[dict[str, Any]], hand: str, issues: list[dict[str, Any]]) -> float:
        limits = HAND_SIZES[self.hand_size]
        penalty = 0.0
        for a, b in zip(ordered, ordered[1:]):
            if a["finger"] == b["finger"]:
                continue
            distance = self.grid.grid_distance(a, b)
            if distance > limits["max_stretch"]:
                penalty += 20
                kind = "excessive_stretch"
            elif distance > limits["comfortable_stretch"]:
                penalty += 5
                kind = "uncomfortable_stretch"
            else:
                continue
            issues.append({"type": kind, "hand": hand, "fingers": [a["finger"], b["finger"]], "distance": distance})
        return penalty

    @staticmethod
    def _strength_bonus(ordered: list[dict[str, Any]]) -> float:
        bonus = 0.0
        for pad in ordered:
            weight = FINGER_WEIGHTS[pad["finger"]]
            if weight >= 0.9:
                bonus += 2
            elif weight <= 0.5:
                bonus -= 1
        return bonus

    @staticmethod
    def _crossing_penalty(ordered: list[dict[str, Any]], hand: str, issues: list[dict[str, Any]]) -> float:
        penalty = 0.0
        for a, b in zip(ordered, ordered[1:]):
            if a["row"] > b["row"]:
                penalty += 5
                issues.append({"type": "finger_crossing", "hand": hand, "fingers": [a["finger"], b["finger"]]})
        return penalty

    # ── Assignment ────────────────────────────────────────────

    def assign_anatomically(self, pads: list[dict[str, Any]], hand: str) -> list[dict[str, Any]]:
        """Thumb on the anchor pad, fingers 2–5 fanning out from it.

        The anchor is the lowest-row pad, leftmost for the right hand and
        rightmost for the left. Remaining pads are ranked by
        ``2 * direction - 0.5 * distance`` where direction favours moving
        up and outward (right for the right hand, left for the left hand).
        At most five pads are assigned.
        """
        if not pads:
            return []
        hand = normalise_hand(hand)
        outward = 1 if hand == "right" else -1

        anchor = min(pads, key=lambda p: (p["row"], outward * p["col"]))
        assignments = [{"row": anchor["row"], "col": anchor["col"], "hand": hand, "finger": 1, "score": 1.0}]

        ranked: list[tuple[float, dict[str, Any]]] = []
        for pad in pads:
            if pad["row"] == anchor["row"] and pad["col"] == anchor["col"]:
                continue
            row_diff = pad["row"] - anchor["row"]
            col_diff = pad["col"] - anchor["col"]
            distance = math.hypot(row_diff, col_diff)
            direction = row_diff + outward * col_diff
            ranked.append((direction * 2 - distance * 0.5, pad))
        ranked.sort(key=lambda item: item[0], reverse=True)

        for finger, (_, pad) in zip((2, 3, 4, 5), ranked):
            assignments.append({"row": pad["row"], "col": pad["col"], "hand": hand, "finger": finger, "score": 0.8})
        return assignments

    def suggest_fingerings(
        self,
        pads: list[dict[str, Any]],
        hand: str,
        base_midi: int = 48,
    ) -> list[dict[str, Any]]:
        """Assign fingers to an arbitrary pad selection.

        Keeps one pad per pitch class (lowest row, then lowest column),
        at most five of them preferring low rows and left columns, then
        assigns fingers with :meth:`assign_anatomically`.
        """
        by_pc: dict[int, dict[str, Any]] = {}
        for pad in pads:
            pc = self.grid.pitch_class(pad["row"], pad["col"], base_midi)
            current = by_pc.get(pc)
            if current is None or (pad["row"], pad["col"]) < (current["row"], current["col"]):
                by_pc[pc] = pad

        selected = list(by_pc.values())
        if len(selected) > 5:
            selected = sorted(selected, key=lambda p: p["row"] * 2 + p["col"])[:5]
        return self.assign_anatomically(selected, hand)
