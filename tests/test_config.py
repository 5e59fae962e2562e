"""
Tests for loading and validating the scoring configuration.
"""

import logging

import pytest
import yaml

from isofinger.config import DEFAULT_CONFIG_PATH, load_config, setup_logging


VALID = {
    "comfort_weight": 0.4,
    "geometry_weight": 0.3,
    "ergonomics_weight": 0.3,
    "neutral_comfort": 50,
    "max_search_row": 5,
    "pads_per_pitch_class": 3,
    "max_suggestions": 5,
    "default_base_midi": 48,
}


def write_config(tmp_path, **overrides):
    data = {**VALID, **overrides}
    data = {k: v for k, v in data.items() if v is not None}
    path = tmp_path / "scores.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadConfig:
    """Packaged defaults and validation errors."""

    def test_packaged_defaults(self):
        assert DEFAULT_CONFIG_PATH.exists()
        cfg = load_config()
        assert cfg["comfort_weight"] == pytest.approx(0.4)
        assert cfg["geometry_weight"] == pytest.approx(0.3)
        assert cfg["ergonomics_weight"] == pytest.approx(0.3)
        assert cfg["neutral_comfort"] == 50
        assert cfg["max_search_row"] == 5
        assert cfg["pads_per_pitch_class"] == 3
        assert cfg["max_suggestions"] == 5
        assert cfg["default_base_midi"] == 48

    def test_custom_file(self, tmp_path):
        cfg = load_config(write_config(tmp_path, pads_per_pitch_class=2))
        assert cfg["pads_per_pitch_class"] == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_missing_key(self, tmp_path):
        with pytest.raises(ValueError, match="neutral_comfort"):
            load_config(write_config(tmp_path, neutral_comfort=None))

    def test_weights_must_sum_to_one(self, tmp_path):
        with pytest.raises(ValueError, match="sum to 1.0"):
            load_config(write_config(tmp_path, comfort_weight=0.5))

    @pytest.mark.parametrize(
        "key, value",
        [("pads_per_pitch_class", 0), ("max_search_row", -1), ("max_suggestions", 0)],
    )
    def test_bounds(self, tmp_path, key, value):
        with pytest.raises(ValueError, match=key):
            load_config(write_config(tmp_path, **{key: value}))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "scores.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)


class TestSetupLogging:
    """Root logger configuration for the host entry points."""

    def test_verbose_sets_debug(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        monkeypatch.setattr(root, "level", logging.WARNING)
        setup_logging(verbose=True)
        assert root.level == logging.DEBUG
