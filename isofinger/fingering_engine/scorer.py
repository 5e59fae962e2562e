"""Scorer — comfort, geometry and ergonomic scoring shared by every fingering source.

Weights are loaded from ``configs/fingering_scores.yaml`` via
:func:`isofinger.config.load_config`.

Methods:
    comfort_score     – captured rating, learned-pattern score or neutral 50
    span_score        – piecewise penalty for wide hand spans
    compactness_score – penalty for voicings spread over many rows
    geometry_score    – mean of span and compactness
    ergonomic_score   – finger-sequence heuristics
    score_fingering   – weighted total plus rounded sub-scores
    rank_fingerings   – stable descending sort by total score
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from ..config import load_config
from .pattern_extractor import calculate_span


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (``round`` would bank)."""
    return int(math.floor(value + 0.5))


def uses_consecutive_fingers(positions: list[dict[str, Any]]) -> bool:
    """True when the sorted finger numbers have no gaps (2-3-4, not 1-3-5)."""
    fingers = sorted(p["finger"] for p in positions)
    return all(b == a + 1 for a, b in zip(fingers, fingers[1:]))


class FingeringScorer:
    """Multi-factor scorer for candidate fingerings.

    Args:
        config: An already loaded config dict. Takes precedence over
            *config_path*.
        config_path: Path to a YAML config; the packaged default when
            both arguments are omitted.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        config_path: str | Path | None = None,
    ) -> None:
        self._cfg: dict[str, Any] = config if config is not None else load_config(config_path)

        self.comfort_weight: float = float(self._cfg["comfort_weight"])
        self.geometry_weight: float = float(self._cfg["geometry_weight"])
        self.ergonomics_weight: float = float(self._cfg["ergonomics_weight"])
        self.neutral_comfort: float = float(self._cfg["neutral_comfort"])

    @property
    def config(self) -> dict[str, Any]:
        """Copy of the configuration this scorer was built from."""
        return dict(self._cfg)

    # ── Individual score components ───────────────────────────

    def comfort_score(self, fingering: dict[str, Any]) -> float:
        """Comfort (0–100) for a fingering.

        A rating traced back to a real capture wins; synthesised
        fingerings fall back to their learned-pattern score, and to the
        neutral baseline when there is none.
        """
        rating = fingering.get("comfort_rating")
        if rating is None:
            rating = fingering.get("pattern_score")
        if rating is None:
            rating = self.neutral_comfort
        return min(100.0, max(0.0, float(rating)))

    @staticmethod
    def span_score(span: float) -> float:
        """100 up to 3 grid units, then decaying piecewise, floored at 0."""
        if span <= 3:
            return 100.0
        if span <= 5:
            return 100 - (span - 3) * 15  # 70 at span 5
        if span <= 7:
            return 70 - (span - 5) * 15  # 40 at span 7
        return max(0.0, 40 - (span - 7) * 10)

    @staticmethod
    def compactness_score(row_span: int) -> float:
        """Full marks within two rows, -20 per extra row."""
        if row_span <= 2:
            return 100.0
        return max(0.0, 100 - (row_span - 2) * 20)

    def geometry_score(self, fingering: dict[str, Any]) -> float:
        positions = fingering["positions"]
        if not positions:
            return 0.0
        rows = [p["row"] for p in positions]
        span = calculate_span(positions)
        return (self.span_score(span) + self.compactness_score(max(rows) - min(rows))) / 2

    def ergonomic_score(self, fingering: dict[str, Any]) -> float:
        """Finger-sequence heuristics starting from a neutral 50.

        +30 for consecutive fingers, +20 for three or four fingers (+10
        for five), -30 for thumb and pinky without any middle finger and
        a further -20 when those two are the only fingers. Clamped to
        [0, 100].
        """
        positions = fingering["positions"]
        score = 50.0

        if uses_consecutive_fingers(positions):
            score += 30

        count = len(positions)
        if count in (3, 4):
            score += 20
        elif count == 5:
            score += 10

        fingers = sorted(p["finger"] for p in positions)
        if 1 in fingers and 5 in fingers and not {2, 3, 4} & set(fingers):
            score -= 30
        if fingers == [1, 5]:
            score -= 20

        return max(0.0, min(100.0, score))

    # ── Aggregate ─────────────────────────────────────────────

    def score_fingering(self, fingering: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of *fingering* with its scores filled in.

        Adds ``score`` (weighted total), ``comfort_score``,
        ``geometric_score`` and ``ergonomic_score``, all rounded to the
        nearest integer.
        """
        comfort = self.comfort_score(fingering)
        geometry = self.geometry_score(fingering)
        ergonomics = self.ergonomic_score(fingering)

        total = (
            comfort * self.comfort_weight
            + geometry * self.geometry_weight
            + ergonomics * self.ergonomics_weight
        )

        scored = dict(fingering)
        scored["score"] = round_half_up(total)
        scored["comfort_score"] = round_half_up(comfort)
        scored["geometric_score"] = round_half_up(geometry)
        scored["ergonomic_score"] = round_half_up(ergonomics)
        return scored

    def rank_fingerings(self, fingerings: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Score every fingering and sort by total, highest first.

        The sort is stable: equal totals keep their input order.
        """
        scored = [self.score_fingering(f) for f in fingerings]
        scored.sort(key=lambda f: f["score"], reverse=True)
        return scored


def rank_fingerings(
    fingerings: list[dict[str, Any]],
    scorer: FingeringScorer | None = None,
) -> list[dict[str, Any]]:
    """Convenience wrapper using the default configuration."""
    return (scorer or FingeringScorer()).rank_fingerings(fingerings)
