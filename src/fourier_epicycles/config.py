"""
Configuration management for Fourier series runs.

Handles loading, validation, and defaulting of YAML configuration files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
import yaml

from .waves import WaveKind, wave_names


# Bounds of the interactive controls
NUM_TERMS_RANGE = (1, 50)
AMPLITUDE_RANGE = (0.5, 2.0)
SPEED_RANGE = (0.1, 3.0)
TRAIL_LENGTH_RANGE = (50, 500)


@dataclass
class RunConfig:
    """Run-level configuration."""
    out_dir: str = "out"


@dataclass
class SeriesConfig:
    """Series selection."""
    wave_type: str = WaveKind.SQUARE.value
    num_terms: int = 10
    amplitude: float = 1.0


@dataclass
class AnimationConfig:
    """Epicycle animation settings."""
    speed: float = 1.0
    trail_length: int = 300
    show_circles: bool = True
    show_vectors: bool = True
    n_frames: int = 120
    fps: int = 30


@dataclass
class SweepConfig:
    """Term-count sweep configuration."""
    wave_types: list[str] = field(default_factory=wave_names)
    n_min: int = 1
    n_max: int = 50


@dataclass
class ThresholdConfig:
    """Thresholds for convergence reporting."""
    convergence_tolerance: float = 0.05


@dataclass
class Config:
    """Complete configuration for a Fourier series run."""
    run: RunConfig = field(default_factory=RunConfig)
    series: SeriesConfig = field(default_factory=SeriesConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    sweep: SweepConfig = field(default_factory=SweepConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def to_dict(self) -> dict:
        """Convert config to nested dictionary."""
        return {
            "run": {
                "out_dir": self.run.out_dir,
            },
            "series": {
                "wave_type": self.series.wave_type,
                "num_terms": self.series.num_terms,
                "amplitude": self.series.amplitude,
            },
            "animation": {
                "speed": self.animation.speed,
                "trail_length": self.animation.trail_length,
                "show_circles": self.animation.show_circles,
                "show_vectors": self.animation.show_vectors,
                "n_frames": self.animation.n_frames,
                "fps": self.animation.fps,
            },
            "sweep": {
                "wave_types": list(self.sweep.wave_types),
                "n_min": self.sweep.n_min,
                "n_max": self.sweep.n_max,
            },
            "thresholds": {
                "convergence_tolerance": self.thresholds.convergence_tolerance,
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Config":
        """Create Config from nested dictionary. Unknown keys are ignored."""
        config = cls()

        for section in ("run", "series", "animation", "sweep", "thresholds"):
            if section not in d or d[section] is None:
                continue
            if not isinstance(d[section], dict):
                raise ValueError(f"Config section '{section}' must be a mapping")
            target = getattr(config, section)
            for key, value in d[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)

        return config


def load_config(path: Union[str, Path]) -> Config:
    """
    Load configuration from a YAML file.

    Parameters
    ----------
    path : str or Path
        Path to YAML configuration file.

    Returns
    -------
    Config
        Loaded and validated configuration.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    config = Config.from_dict(data)
    validate_config(config)
    return config


def _check_number(name: str, value, integer: bool = False) -> None:
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if integer and int(value) != value:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _check_range(name: str, value, bounds, integer: bool = False) -> None:
    _check_number(name, value, integer)
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


def validate_config(config: Config) -> None:
    """
    Validate configuration values.

    Parameters
    ----------
    config : Config
        Configuration to validate.

    Raises
    ------
    ValueError
        If any configuration value is missing, of the wrong type or out of
        range.
    """
    valid_waves = wave_names()

    # Series validation
    if config.series.wave_type not in valid_waves:
        raise ValueError(f"Unknown wave_type: {config.series.wave_type}")
    _check_range("num_terms", config.series.num_terms, NUM_TERMS_RANGE, integer=True)
    _check_range("amplitude", config.series.amplitude, AMPLITUDE_RANGE)

    # Animation validation
    _check_range("speed", config.animation.speed, SPEED_RANGE)
    _check_range("trail_length", config.animation.trail_length, TRAIL_LENGTH_RANGE, integer=True)
    _check_number("n_frames", config.animation.n_frames, integer=True)
    if config.animation.n_frames < 1:
        raise ValueError("n_frames must be at least 1")
    _check_number("fps", config.animation.fps)
    if config.animation.fps < 1:
        raise ValueError("fps must be at least 1")

    # Sweep validation
    if not isinstance(config.sweep.wave_types, list) or not config.sweep.wave_types:
        raise ValueError("sweep.wave_types must be a non-empty list")
    for wave in config.sweep.wave_types:
        if wave not in valid_waves:
            raise ValueError(f"Unknown wave type in sweep: {wave}")
    _check_number("n_min", config.sweep.n_min, integer=True)
    _check_number("n_max", config.sweep.n_max, integer=True)
    if config.sweep.n_min < 1:
        raise ValueError("n_min must be at least 1")
    if config.sweep.n_max < config.sweep.n_min:
        raise ValueError("n_max must be at least n_min")

    # Threshold validation
    _check_number("convergence_tolerance", config.thresholds.convergence_tolerance)
    if not 0 < config.thresholds.convergence_tolerance <= 1:
        raise ValueError("convergence_tolerance must be in (0, 1]")


def save_config(config: Config, path: Union[str, Path]) -> None:
    """
    Save configuration to a YAML file.

    Parameters
    ----------
    config : Config
        Configuration to save.
    path : str or Path
        Path to save YAML file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
