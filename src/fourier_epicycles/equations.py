"""
LaTeX equations for the supported Fourier series.
"""

from dataclasses import dataclass
from typing import Sequence, Union

from .coefficients import HarmonicCoefficient
from .metrics import harmonic_shares
from .waves import WaveKind, WAVE_NAMES, resolve_wave_kind


@dataclass(frozen=True)
class WaveEquation:
    """Closed-form equations for one waveform."""
    name: str
    general: str
    coefficient: str


WAVE_EQUATIONS = {
    WaveKind.SQUARE: WaveEquation(
        name=WAVE_NAMES[WaveKind.SQUARE],
        general=r"f(t) = \frac{4}{\pi} \sum_{n=1,3,5,...}^{N} \frac{1}{n} \sin(n \omega t)",
        coefficient=r"b_n = \frac{4}{n\pi} \quad (n \text{ odd})",
    ),
    WaveKind.SAWTOOTH: WaveEquation(
        name=WAVE_NAMES[WaveKind.SAWTOOTH],
        general=r"f(t) = \frac{2}{\pi} \sum_{n=1}^{N} \frac{(-1)^{n+1}}{n} \sin(n \omega t)",
        coefficient=r"b_n = \frac{2(-1)^{n+1}}{n\pi}",
    ),
    WaveKind.TRIANGLE: WaveEquation(
        name=WAVE_NAMES[WaveKind.TRIANGLE],
        general=(
            r"f(t) = \frac{8}{\pi^2} \sum_{n=1,3,5,...}^{N} "
            r"\frac{(-1)^{(n-1)/2}}{n^2} \sin(n \omega t)"
        ),
        coefficient=r"b_n = \frac{8(-1)^{(n-1)/2}}{n^2\pi^2} \quad (n \text{ odd})",
    ),
    WaveKind.CUSTOM: WaveEquation(
        name=WAVE_NAMES[WaveKind.CUSTOM],
        general=(
            r"f(t) = \frac{a_0}{2} + \sum_{n=1}^{N} "
            r"[a_n \cos(n \omega t) + b_n \sin(n \omega t)]"
        ),
        coefficient=r"a_n, b_n = \frac{1}{n\pi}",
    ),
}


def equation_for(wave_kind: Union[str, WaveKind]) -> WaveEquation:
    """Get the equations for a waveform (square for unknown tags)."""
    return WAVE_EQUATIONS[resolve_wave_kind(wave_kind)]


def expanded_form(
    coefficients: Sequence[HarmonicCoefficient],
    num_terms: int,
    max_terms: int = 4
) -> str:
    """
    Build the expanded series with numeric amplitudes substituted.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Generated harmonics.
    num_terms : int
        Requested number of terms; adds a trailing ellipsis when it exceeds
        ``max_terms``.
    max_terms : int, optional
        Number of leading terms to write out (default 4).

    Returns
    -------
    latex : str
        LaTeX string, or "" if there are no coefficients.
    """
    if len(coefficients) == 0:
        return ""

    terms = [
        f"{c.amplitude:.3f}\\sin({c.n}\\omega t)"
        for c in coefficients[:max_terms]
    ]
    latex = r"f(t) \approx " + " + ".join(terms)
    if num_terms > max_terms:
        latex += r" + \cdots"
    return latex


def harmonic_table(
    coefficients: Sequence[HarmonicCoefficient],
    limit: int = 5
) -> list[dict]:
    """
    Rows describing the leading harmonics.

    Each row has ``n``, ``amplitude``, ``frequency`` (e.g. "3f") and
    ``percent`` (share of the total amplitude over all harmonics).
    """
    shares = harmonic_shares(coefficients)
    rows = []
    for c, share in zip(coefficients[:limit], shares[:limit]):
        rows.append({
            "n": c.n,
            "amplitude": c.amplitude,
            "frequency": f"{c.n}f",
            "percent": float(share),
        })
    return rows
