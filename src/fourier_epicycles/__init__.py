"""
Fourier Epicycles: Fourier series approximation of periodic waveforms.

Computes the harmonic coefficients of square, sawtooth, triangle and custom
waves, the rotating vectors ("epicycles") whose tip traces the partial sum,
and summary statistics such as total harmonic distortion and a heuristic
convergence estimate.

NOTE: The convergence estimate compares the sum of harmonic amplitudes with
a unit-peak ideal waveform. It is a quick indicator, not a rigorous error
bound.
"""

__version__ = "0.1.0"
__author__ = "Fourier Epicycles Contributors"

from .config import Config, load_config, validate_config
from .waves import WaveKind, parse_wave_kind, resolve_wave_kind, ideal_waveform
from .coefficients import (
    HarmonicCoefficient,
    generate,
    evaluate_series,
    epicycle_chain,
)
from .metrics import (
    FourierMetrics,
    compute_metrics,
    harmonic_shares,
    convergence_percent,
    format_number,
)
from .equations import equation_for, expanded_form, harmonic_table
from .animation import EpicycleState, Frame
from .render import run_render, RenderResult
from .sweep import run_sweep, SweepResult

try:
    from .plots import plot_epicycles, plot_spectrum, plot_approximation, plot_convergence
except ImportError:
    # Handle missing matplotlib
    plot_epicycles = None
    plot_spectrum = None
    plot_approximation = None
    plot_convergence = None
from .io import save_results, load_results, create_run_folder, compute_config_hash

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Config
    "Config",
    "load_config",
    "validate_config",
    # Waves
    "WaveKind",
    "parse_wave_kind",
    "resolve_wave_kind",
    "ideal_waveform",
    # Coefficients
    "HarmonicCoefficient",
    "generate",
    "evaluate_series",
    "epicycle_chain",
    # Metrics
    "FourierMetrics",
    "compute_metrics",
    "harmonic_shares",
    "convergence_percent",
    "format_number",
    # Equations
    "equation_for",
    "expanded_form",
    "harmonic_table",
    # Animation
    "EpicycleState",
    "Frame",
    # Runs
    "run_render",
    "RenderResult",
    "run_sweep",
    "SweepResult",
    # Plots
    "plot_epicycles",
    "plot_spectrum",
    "plot_approximation",
    "plot_convergence",
    # I/O
    "save_results",
    "load_results",
    "create_run_folder",
    "compute_config_hash",
]
