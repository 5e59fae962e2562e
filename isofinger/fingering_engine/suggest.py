"""Suggest — orchestrate matching, synthesis and scoring, then export results.

Responsibilities:
    1. Resolve the target (chord notation, pitch classes or root/quality).
    2. Look for exact matches in the captured handprints.
    3. Fall back to synthesis when nothing matches (``strategy="auto"``).
    4. Rank candidates with the shared scorer and grade them ergonomically.
    5. Save the result as JSON and optionally export a candidate as MIDI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pretty_midi

from ..config import load_config
from ..grid import Grid, HexGrid
from ..theory.chord_parser import resolve_target
from .chord_matcher import find_chord_fingerings
from .ergonomics import ErgoAnalyzer
from .handprints import normalise_hand, snapshot
from .scorer import FingeringScorer
from .synthesizer import synthesize_fingerings


logger = logging.getLogger(__name__)

STRATEGIES: tuple[str, ...] = ("auto", "match", "synthesize")

STATUS_MESSAGES: dict[str, str] = {
    "ok": "Found fingering suggestions.",
    "empty_target": "No pitch classes to finger. Enter a chord name or a pitch-class list.",
    "no_handprints": "No handprints captured yet. Capture a few hand positions first.",
    "no_match": "No fingering found for this chord. Try synthesis, another hand or a different chord.",
}


def suggest(
    target: Any,
    handprints: list[dict[str, Any]],
    grid: Grid | None = None,
    hand: str = "right",
    base_midi: int | None = None,
    strategy: str = "auto",
    max_suggestions: int | None = None,
    config_path: str | Path | None = None,
    hand_size: str = "medium",
) -> dict[str, Any]:
    """Produce ranked fingering suggestions for a chord.

    Args:
        target: Chord notation (``"Cmaj7"``), comma-separated pitch classes
            (``"0,4,7"``), an iterable of pitch classes or a
            ``(root, quality)`` pair.
        handprints: Captured handprints; a snapshot is taken on entry.
        grid: Grid geometry; an intervals-mode :class:`HexGrid` by default.
        hand: ``"left"`` or ``"right"``.
        base_midi: MIDI note of pad (0, 0); config default when ``None``.
        strategy: ``"auto"`` (exact matches, else synthesis), ``"match"``
            or ``"synthesize"``.
        max_suggestions: Number of candidates; config default when ``None``.
        config_path: Scoring config YAML; the packaged default when ``None``.
        hand_size: Hand-size profile for the ergonomic grade.

    Returns:
        ``{"status", "message", "target_pitch_classes", "source",
        "candidates"}``. ``source`` is ``"handprint"``, ``"synthesized"``
        or ``None``.

    Raises:
        ValueError: For an unknown strategy.
        UnknownQuality: For a ``(root, quality)`` pair with an unknown part.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{strategy}'. Choose from: {list(STRATEGIES)}")

    cfg = load_config(config_path)
    scorer = FingeringScorer(config=cfg)
    grid = grid or HexGrid()
    hand = normalise_hand(hand)
    base_midi = cfg["default_base_midi"] if base_midi is None else base_midi
    max_suggestions = cfg["max_suggestions"] if max_suggestions is None else max_suggestions

    pitch_classes = sorted(resolve_target(target))
    store = snapshot(handprints)

    if not pitch_classes:
        return _result("empty_target", pitch_classes)
    if not store:
        return _result("no_handprints", pitch_classes)

    candidates: list[dict[str, Any]] = []
    source = None

    if strategy in ("auto", "match"):
        matches = find_chord_fingerings(pitch_classes, store, base_midi=base_midi, hand=hand)
        if matches:
            candidates = scorer.rank_fingerings(matches)[:max_suggestions]
            source = "handprint"

    if not candidates and strategy in ("auto", "synthesize"):
        candidates = synthesize_fingerings(
            pitch_classes,
            store,
            grid=grid,
            base_midi=base_midi,
            hand=hand,
            max_suggestions=max_suggestions,
            scorer=scorer,
        )
        if candidates:
            source = "synthesized"

    if not candidates:
        logger.info("No fingering for %s (hand=%s, strategy=%s)", pitch_classes, hand, strategy)
        return _result("no_match", pitch_classes)

    analyzer = ErgoAnalyzer(hand_size=hand_size, grid=grid)
    for candidate in candidates:
        analysis = analyzer.analyze_fingering(candidate)
        candidate["ergonomics"] = {
            "score": analysis["score"],
            "recommendation": analysis["recommendation"],
            "issues": analysis["issues"],
        }

    logger.info("%d %s candidates for %s", len(candidates), source, pitch_classes)
    return _result("ok", pitch_classes, source, candidates)


def _result(
    status: str,
    pitch_classes: list[int],
    source: str | None = None,
    candidates: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "status": status,
        "message": STATUS_MESSAGES[status],
        "target_pitch_classes": pitch_classes,
        "source": source,
        "candidates": candidates or [],
    }


# ── Export ────────────────────────────────────────────────────


def save_suggestions(
    result: dict[str, Any],
    output_dir: str | Path,
    stem: str = "chord",
) -> Path:
    """Write a :func:`suggest` result to ``<output_dir>/<stem>_suggestions.json``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    json_path = output_dir / f"{stem}_suggestions.json"
    with open(json_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2, ensure_ascii=False)
    return json_path


def export_fingering_midi(
    candidate: dict[str, Any],
    path: str | Path,
    duration: float = 1.0,
    velocity: int = 100,
) -> Path:
    """Write a candidate fingering as a block chord MIDI file.

    Every pad becomes a note starting at 0 and lasting *duration*
    seconds. Fingering is encoded as one ``pretty_midi.Lyric`` per note
    with the text ``H<hand>F<finger>`` (e.g. ``HRF2``).

    Args:
        candidate: A candidate fingering with ``positions`` and ``hand``.
        path: Output ``.mid`` path; parent directories are created.
        duration: Note length in seconds.
        velocity: Note-on velocity.

    Returns:
        Path to the written MIDI file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    midi_data = pretty_midi.PrettyMIDI()
    instrument = pretty_midi.Instrument(program=0, name="fingering")
    hand_letter = normalise_hand(candidate.get("hand", "right"))[0].upper()

    for pos in sorted(candidate["positions"], key=lambda p: p["midi_note"]):
        instrument.notes.append(
            pretty_midi.Note(velocity=velocity, pitch=int(pos["midi_note"]), start=0.0, end=duration)
        )
        midi_data.lyrics.append(pretty_midi.Lyric(text=f"H{hand_letter}F{pos['finger']}", time=0.0))

    midi_data.instruments.append(instrument)
    midi_data.write(str(path))
    return path


def suggestions_to_json_bytes(result: dict[str, Any]) -> bytes:
    """Serialise a :func:`suggest` result to UTF-8 JSON bytes (for download buttons)."""
    return json.dumps(result, indent=2, ensure_ascii=False).encode("utf-8")
