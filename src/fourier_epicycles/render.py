"""
Single-series rendering runs.

Bundles the coefficients and metrics for one configured series together
with the metadata needed to archive and reproduce the run.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from .config import Config
from .coefficients import HarmonicCoefficient, generate
from .metrics import FourierMetrics, compute_metrics
from .waves import WaveKind, resolve_wave_kind

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Results for one configured series."""
    wave_kind: WaveKind
    coefficients: list[HarmonicCoefficient]
    metrics: FourierMetrics

    # Metadata
    config: Config
    config_hash: str
    timestamp: str


def run_render(config: Config) -> RenderResult:
    """
    Compute the coefficients and metrics for the configured series.

    Parameters
    ----------
    config : Config
        Complete configuration.

    Returns
    -------
    result : RenderResult
        Coefficients, metrics and run metadata.
    """
    from .io import compute_config_hash

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    kind = resolve_wave_kind(config.series.wave_type)
    coefficients = generate(kind, config.series.num_terms)
    metrics = compute_metrics(coefficients, kind, config.series.amplitude)

    logger.info(
        "Rendered %s with %d terms: THD=%.2f%%, convergence error=%.4f",
        kind.value, metrics.total_harmonics, metrics.thd, metrics.convergence_error
    )

    return RenderResult(
        wave_kind=kind,
        coefficients=coefficients,
        metrics=metrics,
        config=config,
        config_hash=compute_config_hash(config),
        timestamp=timestamp,
    )
