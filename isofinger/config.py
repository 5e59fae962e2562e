"""Configuration and logging setup for isofinger.

Scoring weights and synthesis bounds are loaded from
``configs/fingering_scores.yaml`` (shipped inside the package).
No hardcoded fallbacks: if a required key is missing from the YAML,
a ``ValueError`` is raised with a clear message.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent / "configs" / "fingering_scores.yaml"

# ── Required keys ─────────────────────────────────────────────
_WEIGHT_KEYS: list[str] = [
    "comfort_weight",
    "geometry_weight",
    "ergonomics_weight",
]
_REQUIRED_KEYS: list[str] = _WEIGHT_KEYS + [
    "neutral_comfort",
    "max_search_row",
    "pads_per_pitch_class",
    "max_suggestions",
    "default_base_midi",
]


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load and validate the scoring configuration.

    Args:
        config_path: Path to a YAML file. Defaults to the packaged
            ``fingering_scores.yaml``.

    Returns:
        Dict with float weights and integer search bounds.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a key is missing or a value is out of range.
    """
    path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Score config not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Score config must be a YAML mapping: {path}")

    for key in _REQUIRED_KEYS:
        if key not in raw:
            raise ValueError(f"Missing required key '{key}' in score config: {path}")

    cfg: dict[str, Any] = {key: float(raw[key]) for key in _WEIGHT_KEYS}
    cfg["neutral_comfort"] = float(raw["neutral_comfort"])
    cfg["max_search_row"] = int(raw["max_search_row"])
    cfg["pads_per_pitch_class"] = int(raw["pads_per_pitch_class"])
    cfg["max_suggestions"] = int(raw["max_suggestions"])
    cfg["default_base_midi"] = int(raw["default_base_midi"])

    total = sum(cfg[key] for key in _WEIGHT_KEYS)
    if abs(total - 1.0) > 1e-6:
        raise ValueError(f"Score weights must sum to 1.0, got {total:.6f}: {path}")
    if cfg["pads_per_pitch_class"] < 1:
        raise ValueError(f"'pads_per_pitch_class' must be at least 1: {path}")
    if cfg["max_search_row"] < 0:
        raise ValueError(f"'max_search_row' must be non-negative: {path}")
    if cfg["max_suggestions"] < 1:
        raise ValueError(f"'max_suggestions' must be at least 1: {path}")

    return cfg


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for the host entry points.

    The engine modules only create loggers; handlers are installed here.

    Args:
        verbose: ``DEBUG`` level when True, otherwise ``INFO``.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
