"""isofinger — command-line entry point.

Suggests fingerings for a chord from a handprint file and prints a
ranked table. The Streamlit front-end lives in ``app/streamlit_app.py``.

Examples::

    isofinger Cmaj7 --handprints handprints.json
    isofinger --pcs 0,4,7 --handprints handprints.json --hand left --midi
    isofinger --pads 0:0,0:4,1:3 --hand-size small
"""

from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path
from typing import Any

import pandas as pd

from .config import setup_logging
from .errors import InvalidHandprint
from .fingering_engine.ergonomics import HAND_SIZES, ErgoAnalyzer
from .fingering_engine.handprints import load_handprints
from .fingering_engine.suggest import STRATEGIES, export_fingering_midi, save_suggestions, suggest
from .grid import Grid
from .grid.devices import DEVICES, get_device, grid_for_device
from .theory.pitch import format_pcs, midi_to_note_name


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="isofinger",
        description="Chord fingering suggestions for isomorphic grid controllers",
    )
    parser.add_argument("chord", nargs="?", help="Chord notation, e.g. Cmaj7 or Eb7b9")
    parser.add_argument("--pcs", help="Comma-separated pitch classes instead of a chord name, e.g. 0,4,7")
    parser.add_argument("--pads", help="Assign fingers to chosen pads instead, as row:col pairs, e.g. 0:0,1:0,2:0")
    parser.add_argument("--handprints", type=Path, help="JSON file with captured handprints")
    parser.add_argument("--hand", choices=["left", "right"], default="right")
    parser.add_argument("--hand-size", choices=sorted(HAND_SIZES), default="medium")
    parser.add_argument("--device", choices=sorted(DEVICES), default="exquis")
    parser.add_argument("--mode", help="Layout mode override (intervals, chromatic, fourths, sequential)")
    parser.add_argument("--base-midi", type=int, help="MIDI note of the bottom-left pad (device default)")
    parser.add_argument("--strategy", choices=STRATEGIES, default="auto")
    parser.add_argument("--max", type=int, dest="max_suggestions", help="Number of suggestions")
    parser.add_argument("--config", type=Path, help="Scoring config YAML")
    parser.add_argument("--output", type=Path, help="Directory for the JSON result (and MIDI export)")
    parser.add_argument("--midi", action="store_true", help="Export the best suggestion as a MIDI chord")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def candidates_table(candidates: list[dict[str, Any]]) -> pd.DataFrame:
    """One row per candidate with its scores, fingers, pads and notes."""
    rows = []
    for rank, cand in enumerate(candidates, start=1):
        positions = sorted(cand["positions"], key=lambda p: p["finger"])
        rows.append(
            {
                "Rank": rank,
                "Score": cand["score"],
                "Comfort": cand["comfort_score"],
                "Geometry": cand["geometric_score"],
                "Ergonomics": cand["ergonomic_score"],
                "Fingers": "-".join(str(p["finger"]) for p in positions),
                "Pads": " ".join(f"r{p['row']}c{p['col']}" for p in positions),
                "Notes": " ".join(midi_to_note_name(p["midi_note"]) for p in positions),
            }
        )
    return pd.DataFrame(rows)


def _file_stem(target: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", target).strip("_") or "chord"


def parse_pads(text: str) -> list[dict[str, int]]:
    """Parse ``"0:0,1:0,2:3"`` into pad dicts; raises ValueError on a bad pair."""
    pads = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        row, sep, col = token.partition(":")
        if not sep:
            raise ValueError(f"Pad '{token}' is not a row:col pair")
        pads.append({"row": int(row), "col": int(col)})
    return pads


def _print_pad_fingering(args: argparse.Namespace, grid: Grid, base_midi: int, parser: argparse.ArgumentParser) -> None:
    try:
        pads = parse_pads(args.pads)
        for pad in pads:
            grid.pad_index(pad["row"], pad["col"])
    except (ValueError, IndexError) as exc:
        parser.error(str(exc))

    analyzer = ErgoAnalyzer(hand_size=args.hand_size, grid=grid)
    assignments = analyzer.suggest_fingerings(pads, args.hand, base_midi=base_midi)
    for item in assignments:
        item["midi_note"] = grid.midi_note(item["row"], item["col"], base_midi)
    analysis = analyzer.analyze({args.hand: assignments})

    print(f"Anatomical fingering ({args.hand} hand, {args.hand_size}):")
    for item in sorted(assignments, key=lambda a: a["finger"]):
        print(f"  finger {item['finger']}: r{item['row']}c{item['col']} {midi_to_note_name(item['midi_note'])}")
    print(f"Ergonomic score: {analysis['score']} ({analysis['recommendation']})")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the suggestion pipeline and print the result."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    target = args.pcs if args.pcs is not None else args.chord
    if target is None and args.pads is None:
        parser.error("give a chord name, --pcs or --pads")

    try:
        grid = grid_for_device(args.device, args.mode)
    except ValueError as exc:
        parser.error(str(exc))
    base_midi = args.base_midi if args.base_midi is not None else get_device(args.device)["base_midi"]

    if args.pads is not None:
        _print_pad_fingering(args, grid, base_midi, parser)
        return 0

    handprints: list[dict[str, Any]] = []
    if args.handprints is not None:
        try:
            handprints = load_handprints(args.handprints, base_midi=base_midi)
        except (FileNotFoundError, InvalidHandprint) as exc:
            parser.error(str(exc))
        logger.info("Loaded %d handprints from %s", len(handprints), args.handprints)

    print("isofinger – Chord Fingering Suggestions")
    print(f"Device: {get_device(args.device)['name']} ({grid!r}), base MIDI {base_midi}")

    result = suggest(
        target,
        handprints,
        grid=grid,
        hand=args.hand,
        base_midi=base_midi,
        strategy=args.strategy,
        max_suggestions=args.max_suggestions,
        config_path=args.config,
        hand_size=args.hand_size,
    )

    print(f"Target: {target} -> {format_pcs(result['target_pitch_classes'])}")
    print(result["message"])
    if result["candidates"]:
        print(f"Source: {result['source']}")
        print(candidates_table(result["candidates"]).to_string(index=False))

    stem = _file_stem(target)
    if args.output is not None:
        json_path = save_suggestions(result, args.output, stem=stem)
        print(f"Saved: {json_path}")
    if args.midi and result["candidates"]:
        midi_dir = args.output if args.output is not None else Path.cwd()
        midi_path = export_fingering_midi(result["candidates"][0], midi_dir / f"{stem}_fingering.mid")
        print(f"MIDI: {midi_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
