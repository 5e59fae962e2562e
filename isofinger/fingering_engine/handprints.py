"""Handprints — load, validate and build captured hand positions.

A handprint is a plain dict that serialises straight to JSON::

    {
      "id": "right_20260101T120000",
      "hand": "right",
      "comfort_rating": 80,
      "positions": [
        {"row": 0, "col": 0, "pad_index": 0, "midi_note": 48, "finger": 1},
        ...
      ],
      "measurements": {"1-2": 1.0, "1-3": 2.0, ...},
      "base_midi": 48,
      "device": "exquis",
      "captured_at": "2026-01-01T12:00:00+00:00"
    }

The engine only reads handprints. Helpers that "modify" a collection
return a new list; persisting it is up to the owner.
"""

from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import InvalidHandprint
from ..grid.coords import raw_distance


# ── Validation constants ──────────────────────────────────────
_HAND_ALIASES: dict[str, str] = {
    "left": "left",
    "l": "left",
    "right": "right",
    "r": "right",
}
_VALID_FINGERS: set[int] = {1, 2, 3, 4, 5}
MIN_FINGERS: int = 3
MAX_FINGERS: int = 5


def normalise_hand(hand: Any) -> str:
    """Map ``"L"`` / ``"Left"`` / ``"right"`` ... onto ``"left"`` or ``"right"``.

    Raises:
        InvalidHandprint: For anything else.
    """
    key = str(hand).strip().lower()
    if key not in _HAND_ALIASES:
        raise InvalidHandprint(f"hand must be 'left' or 'right', got '{hand}'")
    return _HAND_ALIASES[key]


def pair_key(finger_a: int, finger_b: int) -> str:
    """Unordered finger-pair key, e.g. ``pair_key(3, 1) == "1-3"``."""
    lo, hi = sorted((finger_a, finger_b))
    return f"{lo}-{hi}"


def compute_measurements(positions: list[dict[str, Any]]) -> dict[str, float]:
    """Raw row/col Euclidean distance for every finger pair."""
    measurements: dict[str, float] = {}
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            key = pair_key(positions[i]["finger"], positions[j]["finger"])
            measurements[key] = raw_distance(positions[i], positions[j])
    return measurements


def validate_handprint(entry: dict[str, Any], base_midi: int = 48) -> dict[str, Any]:
    """Validate one handprint record and return a normalised copy.

    Missing ``midi_note`` values are derived as ``base_midi + pad_index``
    (using the record's own ``base_midi`` when present); missing
    ``measurements`` are recomputed from the positions.

    Args:
        entry: Raw handprint dict (e.g. one element of a JSON file).
        base_midi: Fallback base note for records without one.

    Raises:
        InvalidHandprint: If any field fails validation.
    """
    if not isinstance(entry, dict):
        raise InvalidHandprint(f"Handprint must be an object, got {type(entry).__name__}")

    for key in ("hand", "positions"):
        if key not in entry:
            raise InvalidHandprint(f"Handprint is missing required key '{key}'")

    hand = normalise_hand(entry["hand"])
    record_base = int(entry.get("base_midi", base_midi))

    raw_positions = entry["positions"]
    if not isinstance(raw_positions, list) or not MIN_FINGERS <= len(raw_positions) <= MAX_FINGERS:
        raise InvalidHandprint(
            f"Handprint must have {MIN_FINGERS}-{MAX_FINGERS} positions, "
            f"got {len(raw_positions) if isinstance(raw_positions, list) else raw_positions!r}"
        )

    positions: list[dict[str, Any]] = []
    last_finger = 0
    for i, pos in enumerate(raw_positions):
        for key in ("row", "col", "finger"):
            if key not in pos:
                raise InvalidHandprint(f"Position {i} is missing required key '{key}'")
        finger = int(pos["finger"])
        if finger not in _VALID_FINGERS:
            raise InvalidHandprint(f"Position {i}: finger must be 1–5, got {finger}")
        if finger <= last_finger:
            raise InvalidHandprint(
                f"Position {i}: fingers must increase in capture order, got {finger} after {last_finger}"
            )
        last_finger = finger

        if pos.get("midi_note") is not None:
            midi_note = int(pos["midi_note"])
        elif pos.get("pad_index") is not None:
            midi_note = record_base + int(pos["pad_index"])
        else:
            raise InvalidHandprint(f"Position {i} needs 'midi_note' or 'pad_index'")

        positions.append(
            {
                "row": int(pos["row"]),
                "col": int(pos["col"]),
                "pad_index": int(pos["pad_index"]) if pos.get("pad_index") is not None else None,
                "midi_note": midi_note,
                "finger": finger,
            }
        )

    rating = entry.get("comfort_rating")
    comfort = 50.0 if rating is None else float(rating)
    if not 0 <= comfort <= 100:
        raise InvalidHandprint(f"comfort_rating must be within 0–100, got {comfort}")

    measurements = entry.get("measurements")
    if measurements:
        measurements = {str(k): float(v) for k, v in measurements.items()}
    else:
        measurements = compute_measurements(positions)

    record = {
        "id": str(entry.get("id", "")),
        "hand": hand,
        "comfort_rating": comfort,
        "positions": positions,
        "measurements": measurements,
        "base_midi": record_base,
    }
    for key in ("device", "captured_at"):
        if key in entry:
            record[key] = entry[key]
    return record


def create_handprint(
    hand: str,
    pads: list[Any],
    comfort_rating: float,
    grid: Any,
    base_midi: int = 48,
    device: str | None = None,
) -> dict[str, Any]:
    """Build a complete handprint at the end of a capture session.

    Args:
        hand: ``"left"`` or ``"right"``.
        pads: Pads in capture order, each a ``(row, col)`` tuple or a
            dict with ``row``/``col`` and optionally ``finger``. Fingers
            default to 1..n in capture order.
        comfort_rating: Player's rating, 0–100.
        grid: Grid geometry used to fill ``pad_index`` and ``midi_note``.
        base_midi: MIDI note of pad (0, 0).
        device: Optional device type tag.

    Raises:
        InvalidHandprint: If the result fails validation.
        OutOfRange: If a pad is not on the grid.
    """
    positions: list[dict[str, Any]] = []
    for i, pad in enumerate(pads):
        if isinstance(pad, dict):
            row, col = int(pad["row"]), int(pad["col"])
            finger = int(pad.get("finger", i + 1))
        else:
            row, col = pad
            finger = i + 1
        positions.append(
            {
                "row": row,
                "col": col,
                "pad_index": grid.pad_index(row, col),
                "midi_note": grid.midi_note(row, col, base_midi),
                "finger": finger,
            }
        )

    now = datetime.now(timezone.utc)
    entry: dict[str, Any] = {
        "id": f"{normalise_hand(hand)}_{now.strftime('%Y%m%dT%H%M%S%f')}",
        "hand": hand,
        "comfort_rating": comfort_rating,
        "positions": positions,
        "base_midi": base_midi,
        "captured_at": now.isoformat(),
    }
    if device is not None:
        entry["device"] = device
    return validate_handprint(entry, base_midi=base_midi)


# ── Collection helpers ────────────────────────────────────────


def snapshot(handprints: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Deep copy taken at call entry so later mutation cannot leak in."""
    return copy.deepcopy(list(handprints))


def filter_by_hand(handprints: list[dict[str, Any]], hand: str | None) -> list[dict[str, Any]]:
    if hand is None:
        return list(handprints)
    wanted = normalise_hand(hand)
    return [hp for hp in handprints if normalise_hand(hp["hand"]) == wanted]


def remove_handprint(handprints: list[dict[str, Any]], handprint_id: str) -> list[dict[str, Any]]:
    return [hp for hp in handprints if hp.get("id") != handprint_id]


def clear_hand(handprints: list[dict[str, Any]], hand: str) -> list[dict[str, Any]]:
    """Drop every handprint of *hand*, keeping the other hand's captures."""
    wanted = normalise_hand(hand)
    return [hp for hp in handprints if normalise_hand(hp["hand"]) != wanted]


# ── JSON IO ───────────────────────────────────────────────────


def load_handprints(json_path: str | Path, base_midi: int = 48) -> list[dict[str, Any]]:
    """Load and validate a JSON array of handprints.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidHandprint: If the file is not an array or an entry is invalid.
    """
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Handprint file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    return parse_handprints(data, base_midi=base_midi, source=path.name)


def parse_handprints(data: Any, base_midi: int = 48, source: str = "<data>") -> list[dict[str, Any]]:
    """Validate already-decoded handprint data (a list of dicts)."""
    if not isinstance(data, list):
        raise InvalidHandprint(
            f"Handprint data must be a JSON array, got {type(data).__name__}: {source}"
        )

    validated: list[dict[str, Any]] = []
    for i, entry in enumerate(data):
        try:
            validated.append(validate_handprint(entry, base_midi=base_midi))
        except InvalidHandprint as exc:
            raise InvalidHandprint(f"Entry {i} in '{source}': {exc}") from exc
    return validated


def save_handprints(handprints: list[dict[str, Any]], json_path: str | Path) -> Path:
    path = Path(json_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(handprints, fh, indent=2, ensure_ascii=False)
    return path
