"""
Quality metrics for truncated Fourier series.

Provides total harmonic distortion, a heuristic convergence estimate,
and the display helpers used when reporting them.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .coefficients import HarmonicCoefficient
from .waves import WaveKind


@dataclass(frozen=True)
class FourierMetrics:
    """Summary statistics for a coefficient sequence."""

    current_amplitude: float  # Sum of harmonic amplitudes, scaled
    fundamental_frequency: float  # Always 1
    total_harmonics: int  # Number of coefficients
    convergence_error: float  # Heuristic in [0, 1], 0 = converged
    thd: float  # Total harmonic distortion, percent

    def to_dict(self) -> dict:
        """Convert metrics to a plain dictionary."""
        return {
            "current_amplitude": self.current_amplitude,
            "fundamental_frequency": self.fundamental_frequency,
            "total_harmonics": self.total_harmonics,
            "convergence_error": self.convergence_error,
            "thd": self.thd,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "FourierMetrics":
        """Create metrics from a dictionary produced by ``to_dict``."""
        return cls(
            current_amplitude=float(d["current_amplitude"]),
            fundamental_frequency=float(d["fundamental_frequency"]),
            total_harmonics=int(d["total_harmonics"]),
            convergence_error=float(d["convergence_error"]),
            thd=float(d["thd"]),
        )


EMPTY_METRICS = FourierMetrics(
    current_amplitude=0.0,
    fundamental_frequency=1.0,
    total_harmonics=0,
    convergence_error=1.0,
    thd=0.0,
)

# Every waveform is compared against a unit-peak ideal
IDEAL_PEAK = 1.0


def total_harmonic_distortion(coefficients: Sequence[HarmonicCoefficient]) -> float:
    """
    Compute total harmonic distortion in percent.

    THD = sqrt(Σ_{k>0} A_k²) / A_0 * 100

    The first generated harmonic is treated as the fundamental regardless
    of its index n.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics in generation order.

    Returns
    -------
    thd : float
        Distortion in percent; 0 when there is no fundamental.
    """
    if len(coefficients) == 0:
        return 0.0

    fundamental_amp = coefficients[0].amplitude
    if fundamental_amp <= 0:
        return 0.0

    harmonic_power = sum(c.amplitude * c.amplitude for c in coefficients[1:])
    return math.sqrt(harmonic_power) / fundamental_amp * 100.0


def compute_metrics(
    coefficients: Sequence[HarmonicCoefficient],
    wave_kind: Union[str, WaveKind],
    amplitude: float
) -> FourierMetrics:
    """
    Compute summary metrics for a coefficient sequence.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Output of ``generate``.
    wave_kind : str or WaveKind
        Target waveform. Every waveform currently shares a unit ideal peak.
    amplitude : float
        Global amplitude scale.

    Returns
    -------
    metrics : FourierMetrics
        Computed metrics. Empty input gives ``EMPTY_METRICS``.
    """
    if len(coefficients) == 0:
        return EMPTY_METRICS

    total_amplitude = sum(c.amplitude for c in coefficients) * amplitude
    thd = total_harmonic_distortion(coefficients)

    # Undo the amplitude scale; a zero scale gives a zero peak
    approximated_peak = total_amplitude / amplitude if amplitude != 0 else 0.0
    convergence_error = abs(IDEAL_PEAK - approximated_peak / IDEAL_PEAK)

    return FourierMetrics(
        current_amplitude=total_amplitude,
        fundamental_frequency=1.0,
        total_harmonics=len(coefficients),
        convergence_error=min(convergence_error, 1.0),
        thd=thd,
    )


def harmonic_shares(coefficients: Sequence[HarmonicCoefficient]) -> NDArray[np.float64]:
    """
    Compute each harmonic's share of the total amplitude.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics in generation order.

    Returns
    -------
    shares : ndarray of shape (len(coefficients),)
        Percent of total amplitude; all zeros if the total is 0.
    """
    amps = np.array([c.amplitude for c in coefficients], dtype=np.float64)
    total = float(np.sum(amps))
    if total <= 0:
        return np.zeros_like(amps)
    return amps / total * 100.0


def convergence_percent(metrics: FourierMetrics) -> float:
    """Convergence as a percentage, 100 = fully converged."""
    return max(0.0, (1.0 - finite_or_zero(metrics.convergence_error)) * 100.0)


def finite_or_zero(value: float) -> float:
    """Replace NaN and infinite values with 0."""
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def format_number(value: float, decimals: int = 2) -> str:
    """Format a number for display, showing non-finite values as zero."""
    return f"{finite_or_zero(value):.{decimals}f}"


def insight_message(metrics: FourierMetrics) -> str:
    """
    Describe the approximation quality in a sentence.

    Parameters
    ----------
    metrics : FourierMetrics
        Metrics to describe.

    Returns
    -------
    message : str
        Human-readable insight, keyed on the number of harmonics.
    """
    n = metrics.total_harmonics
    if n < 5:
        return (
            f"With only {n} terms, the approximation shows significant deviation "
            "from the ideal waveform. Add more terms to improve accuracy."
        )
    if n < 15:
        return (
            f"Using {n} harmonics provides a reasonable approximation. "
            "The Gibbs phenomenon is visible at discontinuities."
        )
    return (
        f"With {n} terms, the series converges well "
        f"({format_number(convergence_percent(metrics), 0)}%). "
        "The Gibbs overshoot at discontinuities remains at ~9%."
    )
