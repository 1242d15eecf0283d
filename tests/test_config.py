"""
Tests for configuration loading and validation.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for development testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fourier_epicycles.config import Config, load_config, save_config, validate_config


class TestConfigDefaults:
    """Tests for default configuration values."""

    def test_defaults_valid(self):
        """The default configuration passes validation."""
        config = Config()
        validate_config(config)

        assert config.series.wave_type == "square"
        assert config.series.num_terms == 10
        assert config.series.amplitude == 1.0
        assert config.animation.trail_length == 300
        assert config.sweep.wave_types == ["square", "sawtooth", "triangle", "custom"]

    def test_from_dict_ignores_unknown_keys(self):
        """Unknown sections and keys are ignored."""
        config = Config.from_dict({
            "series": {"wave_type": "triangle", "bogus": 1},
            "unknown_section": {"x": 1},
        })
        assert config.series.wave_type == "triangle"
        assert not hasattr(config.series, "bogus")


class TestConfigFiles:
    """Tests for YAML loading and saving."""

    def test_missing_file(self, tmp_path):
        """Loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file_defaults(self, tmp_path):
        """An empty file gives the default configuration."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).to_dict() == Config().to_dict()

    def test_round_trip(self, tmp_path):
        """Saved configs load back unchanged."""
        config = Config()
        config.series.wave_type = "custom"
        config.series.num_terms = 25
        config.animation.show_circles = False
        config.sweep.wave_types = ["square", "custom"]

        path = tmp_path / "sub" / "config.yaml"
        save_config(config, path)

        assert load_config(path).to_dict() == config.to_dict()

    @pytest.mark.parametrize("content", [
        "series:\n  num_terms: null\n",
        "series:\n  amplitude: loud\n",
        "- square\n- triangle\n",
        "series: 5\n",
    ])
    def test_malformed_file_raises_value_error(self, tmp_path, content):
        """Malformed values and sections are reported as ValueError."""
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(ValueError):
            load_config(path)

    def test_run_section_only_has_out_dir(self, tmp_path):
        """Stale run keys from older files are ignored and not written back."""
        path = tmp_path / "old.yaml"
        path.write_text("run:\n  out_dir: results\n  run_name: legacy\n")

        config = load_config(path)
        assert config.run.out_dir == "results"
        assert config.to_dict()["run"] == {"out_dir": "results"}


class TestValidation:
    """Tests for range checks."""

    @pytest.mark.parametrize("section, key, value", [
        ("series", "wave_type", "zigzag"),
        ("series", "num_terms", 0),
        ("series", "num_terms", 51),
        ("series", "num_terms", 2.5),
        ("series", "amplitude", 0.1),
        ("series", "amplitude", 3.0),
        ("animation", "speed", 0.0),
        ("animation", "trail_length", 10),
        ("animation", "n_frames", 0),
        ("animation", "fps", 0),
        ("sweep", "wave_types", []),
        ("sweep", "wave_types", ["square", "zigzag"]),
        ("sweep", "n_min", 0),
        ("thresholds", "convergence_tolerance", 0.0),
        ("thresholds", "convergence_tolerance", 1.5),
        ("series", "num_terms", None),
        ("series", "num_terms", "ten"),
        ("series", "num_terms", True),
        ("series", "amplitude", "loud"),
        ("series", "amplitude", None),
        ("animation", "speed", "fast"),
        ("animation", "trail_length", 75.5),
        ("animation", "n_frames", None),
        ("animation", "fps", "thirty"),
        ("sweep", "wave_types", None),
        ("sweep", "wave_types", "square"),
        ("sweep", "n_min", None),
        ("sweep", "n_max", "many"),
        ("thresholds", "convergence_tolerance", None),
    ])
    def test_invalid_values(self, section, key, value):
        """Out-of-range or wrongly typed values raise ValueError."""
        config = Config()
        setattr(getattr(config, section), key, value)
        with pytest.raises(ValueError):
            validate_config(config)

    def test_n_max_below_n_min(self):
        """n_max must not be below n_min."""
        config = Config()
        config.sweep.n_min = 10
        config.sweep.n_max = 5
        with pytest.raises(ValueError):
            validate_config(config)

    def test_bounds_inclusive(self):
        """Range limits are inclusive."""
        config = Config()
        config.series.num_terms = 50
        config.series.amplitude = 0.5
        config.animation.speed = 3.0
        config.animation.trail_length = 50
        validate_config(config)
