"""
Fourier coefficient generation for the supported waveforms.

Each waveform has a closed-form sine/cosine coefficient formula. The
generated harmonics drive the epicycles: each harmonic is a vector of
length ``amplitude`` rotating at angle ``n * t + phase``.
"""

import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Sequence, Union

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from .waves import WaveKind, resolve_wave_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HarmonicCoefficient:
    """A single harmonic of a Fourier series."""

    n: int  # Harmonic index
    a: float  # Cosine coefficient
    b: float  # Sine coefficient
    amplitude: float = field(init=False)  # sqrt(a² + b²)
    phase: float = field(init=False)  # atan2(a, b)

    def __post_init__(self):
        object.__setattr__(self, "amplitude", math.sqrt(self.a * self.a + self.b * self.b))
        # Argument order (a, b) places the phase relative to the sine term
        object.__setattr__(self, "phase", math.atan2(self.a, self.b))

    def angle(self, t):
        """Rotation angle of this harmonic's vector at time t."""
        return self.n * t + self.phase


# Formula signature: generation index i -> (n, a_n, b_n)
Formula = Callable[[int], tuple[int, float, float]]


def _square_term(i: int) -> tuple[int, float, float]:
    n = 2 * i + 1
    return n, 0.0, 4 / (n * math.pi)


def _sawtooth_term(i: int) -> tuple[int, float, float]:
    n = i + 1
    return n, 0.0, 2 * (-1) ** (n + 1) / (n * math.pi)


def _triangle_term(i: int) -> tuple[int, float, float]:
    n = 2 * i + 1
    return n, 0.0, 8 * (-1) ** i / (n * n * math.pi * math.pi)


def _custom_term(i: int) -> tuple[int, float, float]:
    n = i + 1
    a = 1 / (n * math.pi) if i % 2 == 0 else 0.0
    return n, a, 1 / (n * math.pi)


WAVE_FORMULAS: dict[WaveKind, Formula] = {
    WaveKind.SQUARE: _square_term,
    WaveKind.SAWTOOTH: _sawtooth_term,
    WaveKind.TRIANGLE: _triangle_term,
    WaveKind.CUSTOM: _custom_term,
}


@lru_cache(maxsize=256)
def _generate_cached(kind: WaveKind, num_terms: int) -> tuple[HarmonicCoefficient, ...]:
    formula = WAVE_FORMULAS[kind]
    logger.debug("Generating %d %s harmonics", num_terms, kind.value)
    return tuple(HarmonicCoefficient(*formula(i)) for i in range(num_terms))


def generate(
    wave_kind: Union[str, WaveKind],
    num_terms: int
) -> list[HarmonicCoefficient]:
    """
    Generate the first harmonics of a waveform's Fourier series.

    Results are memoized on (wave_kind, num_terms); each call returns a new
    list, so callers may modify it freely.

    Parameters
    ----------
    wave_kind : str or WaveKind
        Target waveform. Unrecognized tags use the square wave formula.
    num_terms : int
        Number of harmonics to generate (non-negative). Zero yields an
        empty list.

    Returns
    -------
    coefficients : list of HarmonicCoefficient
        Exactly ``num_terms`` harmonics in generation order.
    """
    kind = resolve_wave_kind(wave_kind)
    return list(_generate_cached(kind, int(num_terms)))


def clear_cache() -> None:
    """Clear the memoized coefficient tables."""
    _generate_cached.cache_clear()


def _as_arrays(
    coefficients: Sequence[HarmonicCoefficient]
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Return (n, amplitude, phase) arrays."""
    n = np.array([c.n for c in coefficients], dtype=np.float64)
    amp = np.array([c.amplitude for c in coefficients], dtype=np.float64)
    phase = np.array([c.phase for c in coefficients], dtype=np.float64)
    return n, amp, phase


def evaluate_series(
    coefficients: Sequence[HarmonicCoefficient],
    t: Union[float, NDArray[np.float64]],
    amplitude: float = 1.0
) -> Union[float, NDArray[np.float64]]:
    """
    Evaluate the partial Fourier sum traced by the epicycle tip.

    f(t) = amplitude * Σ_k A_k sin(n_k t + φ_k)

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics to sum.
    t : float or ndarray
        Time points in radians.
    amplitude : float, optional
        Global amplitude scale (default 1.0).

    Returns
    -------
    y : float or ndarray
        Partial sum with the same shape as ``t``.
    """
    t_arr = np.asarray(t, dtype=np.float64)
    if len(coefficients) == 0:
        y = np.zeros_like(t_arr)
    else:
        n, amp, phase = _as_arrays(coefficients)
        # Broadcast harmonics along a trailing axis
        angles = np.multiply.outer(t_arr, n) + phase
        y = amplitude * np.sum(amp * np.sin(angles), axis=-1)

    if np.ndim(t) == 0:
        return float(y)
    return y


def epicycle_chain(
    coefficients: Sequence[HarmonicCoefficient],
    t: float,
    scale: float = 1.0
) -> NDArray[np.float64]:
    """
    Compute the joint positions of the epicycle chain at time t.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics in drawing order.
    t : float
        Time in radians.
    scale : float, optional
        Radius scale applied to every harmonic amplitude (default 1.0).

    Returns
    -------
    joints : ndarray of shape (len(coefficients) + 1, 2)
        Joint 0 is the origin; the last joint is the tip.
    """
    joints = np.zeros((len(coefficients) + 1, 2), dtype=np.float64)
    if len(coefficients) == 0:
        return joints

    n, amp, phase = _as_arrays(coefficients)
    radius = amp * scale
    angles = n * t + phase

    joints[1:, 0] = np.cumsum(radius * np.cos(angles))
    joints[1:, 1] = np.cumsum(radius * np.sin(angles))
    return joints


def coefficients_to_frame(coefficients: Sequence[HarmonicCoefficient]) -> pd.DataFrame:
    """Convert harmonics to a DataFrame with one row per harmonic."""
    rows = []
    for i, c in enumerate(coefficients):
        rows.append({
            "index": i,
            "n": c.n,
            "a": c.a,
            "b": c.b,
            "amplitude": c.amplitude,
            "phase": c.phase,
        })
    return pd.DataFrame(rows, columns=["index", "n", "a", "b", "amplitude", "phase"])


def coefficients_from_records(records: Sequence[dict]) -> list[HarmonicCoefficient]:
    """
    Rebuild harmonics from dictionaries with ``n``, ``a`` and ``b`` keys.

    Amplitude and phase are recomputed, never read back.
    """
    return [
        HarmonicCoefficient(n=int(r["n"]), a=float(r["a"]), b=float(r["b"]))
        for r in records
    ]
