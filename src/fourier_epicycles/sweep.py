"""
Term-count sweep for Fourier series convergence.

Provides functions to compute metrics over a range of term counts for
several waveforms, showing how distortion and convergence evolve as
harmonics are added.
"""

import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass
from typing import Optional
from datetime import datetime
import logging
import time

from .config import Config
from .coefficients import generate
from .metrics import compute_metrics, FourierMetrics
from .waves import resolve_wave_kind

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Results from a complete term-count sweep."""
    # Grid parameters
    wave_types: list[str]                  # Length n_waves
    term_counts: NDArray[np.int32]         # Shape (n_terms,)

    # Result arrays (all shape (n_waves, n_terms))
    current_amplitude: NDArray[np.float64]
    thd: NDArray[np.float64]
    convergence_error: NDArray[np.float64]

    # Metadata
    config: Config
    config_hash: str
    timestamp: str
    elapsed_seconds: float
    total_points: int

    def get_point(self, i_wave: int, i_term: int) -> FourierMetrics:
        """Get metrics for a specific grid point."""
        return FourierMetrics(
            current_amplitude=float(self.current_amplitude[i_wave, i_term]),
            fundamental_frequency=1.0,
            total_harmonics=int(self.term_counts[i_term]),
            convergence_error=float(self.convergence_error[i_wave, i_term]),
            thd=float(self.thd[i_wave, i_term]),
        )


def run_sweep(
    config: Config,
    progress_callback: Optional[callable] = None
) -> SweepResult:
    """
    Run a sweep over term counts for each configured waveform.

    Parameters
    ----------
    config : Config
        Complete configuration for the sweep.
    progress_callback : callable, optional
        Called with (current_point, total_points) for progress updates.

    Returns
    -------
    result : SweepResult
        Complete sweep results.
    """
    from .io import compute_config_hash

    start_time = time.time()
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    amplitude = config.series.amplitude
    wave_types = [resolve_wave_kind(w).value for w in config.sweep.wave_types]
    term_counts = np.arange(config.sweep.n_min, config.sweep.n_max + 1, dtype=np.int32)

    n_waves = len(wave_types)
    n_terms = len(term_counts)

    # Preallocate result arrays
    amplitude_arr = np.zeros((n_waves, n_terms), dtype=np.float64)
    thd_arr = np.zeros((n_waves, n_terms), dtype=np.float64)
    error_arr = np.zeros((n_waves, n_terms), dtype=np.float64)

    total_points = n_waves * n_terms
    current_point = 0

    for i_wave, wave in enumerate(wave_types):
        for i_term, num_terms in enumerate(term_counts):
            coefficients = generate(wave, int(num_terms))
            metrics = compute_metrics(coefficients, wave, amplitude)

            amplitude_arr[i_wave, i_term] = metrics.current_amplitude
            thd_arr[i_wave, i_term] = metrics.thd
            error_arr[i_wave, i_term] = metrics.convergence_error

            current_point += 1
            if progress_callback is not None:
                progress_callback(current_point, total_points)

    elapsed = time.time() - start_time
    config_hash = compute_config_hash(config)
    logger.info("Sweep of %d points finished in %.3fs", total_points, elapsed)

    return SweepResult(
        wave_types=wave_types,
        term_counts=term_counts,
        current_amplitude=amplitude_arr,
        thd=thd_arr,
        convergence_error=error_arr,
        config=config,
        config_hash=config_hash,
        timestamp=timestamp,
        elapsed_seconds=elapsed,
        total_points=total_points
    )


def terms_to_converge(
    result: SweepResult,
    tolerance: Optional[float] = None
) -> dict[str, Optional[int]]:
    """
    Find the first term count at which each wave converges.

    Parameters
    ----------
    result : SweepResult
        Sweep results.
    tolerance : float, optional
        Convergence error tolerance. If None, uses config value.

    Returns
    -------
    terms : dict
        Wave tag -> first term count with convergence_error <= tolerance,
        or None if it never reaches the tolerance.
    """
    if tolerance is None:
        tolerance = result.config.thresholds.convergence_tolerance

    terms = {}
    for i_wave, wave in enumerate(result.wave_types):
        converged = result.convergence_error[i_wave] <= tolerance
        if np.any(converged):
            terms[wave] = int(result.term_counts[np.argmax(converged)])
        else:
            terms[wave] = None
    return terms


def get_sweep_summary(result: SweepResult) -> dict:
    """
    Get a summary of sweep results.

    Parameters
    ----------
    result : SweepResult
        Sweep results.

    Returns
    -------
    summary : dict
        Summary statistics, with one entry per wave under "waves".
    """
    converge_at = terms_to_converge(result)

    waves = {}
    for i_wave, wave in enumerate(result.wave_types):
        waves[wave] = {
            "final_thd": float(result.thd[i_wave, -1]) if result.thd.shape[1] else 0.0,
            "final_convergence_error": (
                float(result.convergence_error[i_wave, -1])
                if result.convergence_error.shape[1] else 1.0
            ),
            "terms_to_converge": converge_at[wave],
        }

    return {
        "total_points": result.total_points,
        "n_waves": len(result.wave_types),
        "n_min": int(result.term_counts[0]) if len(result.term_counts) else 0,
        "n_max": int(result.term_counts[-1]) if len(result.term_counts) else 0,
        "waves": waves,
        "elapsed_seconds": result.elapsed_seconds,
        "points_per_second": result.total_points / result.elapsed_seconds if result.elapsed_seconds > 0 else 0.0
    }
