"""
Waveform catalogue for Fourier series approximation.

Provides the closed set of target waveforms, their display metadata,
tag parsing, and ideal reference curves for plotting.
"""

import logging
from enum import Enum
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


class WaveKind(str, Enum):
    """
    Enumeration of target waveforms.

    String values match the tags used in configuration files and on the
    command line.
    """
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"
    CUSTOM = "custom"


# Wave names for display
WAVE_NAMES = {
    WaveKind.SQUARE: "Square Wave",
    WaveKind.SAWTOOTH: "Sawtooth Wave",
    WaveKind.TRIANGLE: "Triangle Wave",
    WaveKind.CUSTOM: "Custom Wave",
}

# Short descriptions of the harmonic content
WAVE_DESCRIPTIONS = {
    WaveKind.SQUARE: "Odd harmonics only",
    WaveKind.SAWTOOTH: "All harmonics",
    WaveKind.TRIANGLE: "Odd harmonics, 1/n²",
    WaveKind.CUSTOM: "Mixed harmonics",
}

# Wave colors for plotting
WAVE_COLORS = {
    WaveKind.SQUARE: "#6366f1",    # Indigo
    WaveKind.SAWTOOTH: "#22d3ee",  # Cyan
    WaveKind.TRIANGLE: "#a78bfa",  # Violet
    WaveKind.CUSTOM: "#f472b6",    # Pink
}

DEFAULT_WAVE = WaveKind.SQUARE


def parse_wave_kind(tag: Union[str, WaveKind, None]) -> Optional[WaveKind]:
    """
    Convert a tag to a wave kind.

    Parameters
    ----------
    tag : str or WaveKind
        Wave tag, case-insensitive.

    Returns
    -------
    kind : WaveKind or None
        Matching wave kind, or None if the tag is not recognized.
    """
    if isinstance(tag, WaveKind):
        return tag
    if not isinstance(tag, str):
        return None
    try:
        return WaveKind(tag.strip().lower())
    except ValueError:
        return None


def resolve_wave_kind(tag: Union[str, WaveKind, None]) -> WaveKind:
    """
    Convert a tag to a wave kind, falling back to the square wave.

    Unrecognized tags are not an error.
    """
    kind = parse_wave_kind(tag)
    if kind is None:
        logger.debug("Unrecognized wave tag %r, using %s", tag, DEFAULT_WAVE.value)
        return DEFAULT_WAVE
    return kind


def wave_names() -> list[str]:
    """Return the list of valid wave tags."""
    return [kind.value for kind in WaveKind]


def describe_wave(kind: Union[str, WaveKind]) -> str:
    """
    Get a one-line description of a waveform.

    Parameters
    ----------
    kind : str or WaveKind
        Wave to describe.

    Returns
    -------
    description : str
        "<name>: <harmonic content>".
    """
    kind = resolve_wave_kind(kind)
    return f"{WAVE_NAMES[kind]}: {WAVE_DESCRIPTIONS[kind]}"


def get_wave_color(kind: Union[str, WaveKind]) -> str:
    """Get the hex plot color for a wave."""
    return WAVE_COLORS.get(parse_wave_kind(kind), "#94a3b8")


def ideal_waveform(
    kind: Union[str, WaveKind],
    t: NDArray[np.float64]
) -> Optional[NDArray[np.float64]]:
    """
    Evaluate the ideal (infinite-term) waveform with unit peak.

    The curves match the limits of the series produced by
    ``coefficients.generate``:

    - square: sign(sin t)
    - sawtooth: t / pi on (-pi, pi), extended periodically
    - triangle: (2 / pi) * arcsin(sin t)

    Parameters
    ----------
    kind : str or WaveKind
        Target waveform.
    t : ndarray
        Time points in radians.

    Returns
    -------
    y : ndarray or None
        Ideal waveform values, or None for the custom wave, which has no
        closed-form target.
    """
    kind = resolve_wave_kind(kind)
    t = np.asarray(t, dtype=np.float64)

    if kind == WaveKind.SQUARE:
        return np.sign(np.sin(t))
    if kind == WaveKind.SAWTOOTH:
        # Wrap to [-π, π)
        return (np.mod(t + np.pi, 2 * np.pi) - np.pi) / np.pi
    if kind == WaveKind.TRIANGLE:
        return (2 / np.pi) * np.arcsin(np.sin(t))
    return None
