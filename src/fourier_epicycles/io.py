"""
Input/Output functionality for Fourier series runs.

Handles saving and loading results, creating run folders,
and computing reproducibility hashes.
"""

import json
import hashlib
import logging
import numpy as np
from pathlib import Path
from typing import Optional, Sequence, Union
from datetime import datetime

import pandas as pd

from .config import Config, save_config
from .coefficients import coefficients_from_records, coefficients_to_frame
from .metrics import FourierMetrics
from .render import RenderResult
from .sweep import SweepResult
from .waves import resolve_wave_kind

logger = logging.getLogger(__name__)

RESULTS_JSON = "results.json"
RESULTS_CSV = "results.csv"
CONFIG_YAML = "config_resolved.yaml"


def compute_config_hash(config: Config) -> str:
    """
    Compute a stable hash of the configuration.

    The hash is deterministic and based on the resolved config values.

    Parameters
    ----------
    config : Config
        Configuration to hash.

    Returns
    -------
    hash_str : str
        SHA256 hash of the configuration (first 12 characters).
    """
    config_dict = config.to_dict()
    # Sort keys for determinism
    config_json = json.dumps(config_dict, sort_keys=True)
    hash_full = hashlib.sha256(config_json.encode()).hexdigest()
    return hash_full[:12]


def create_run_folder(
    config: Config,
    timestamp: Optional[str] = None,
    prefix: str = "run"
) -> Path:
    """
    Create a unique folder for a run.

    Folder name format: <prefix>_<YYYYmmdd_HHMMSS>_<hash>

    Parameters
    ----------
    config : Config
        Configuration for the run.
    timestamp : str, optional
        Timestamp string. If None, uses current time.
    prefix : str, optional
        Folder name prefix (default "run").

    Returns
    -------
    run_path : Path
        Path to the created run folder.
    """
    if timestamp is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    config_hash = compute_config_hash(config)
    folder_name = f"{prefix}_{timestamp}_{config_hash}"

    run_path = Path(config.run.out_dir) / folder_name
    run_path.mkdir(parents=True, exist_ok=True)

    return run_path


def save_results(
    result: Union[RenderResult, SweepResult],
    run_path: Union[str, Path]
) -> dict[str, Path]:
    """
    Save render or sweep results to a run folder.

    Saves:
    - config_resolved.yaml: The resolved configuration
    - results.json: Metadata and results as JSON
    - results.csv: Coefficients (render) or long-format sweep table

    Parameters
    ----------
    result : RenderResult or SweepResult
        Results to save.
    run_path : str or Path
        Path to the run folder.

    Returns
    -------
    paths : dict
        Dictionary mapping output names to file paths.
    """
    run_path = Path(run_path)
    run_path.mkdir(parents=True, exist_ok=True)

    paths = {}

    # Save resolved config
    config_path = run_path / CONFIG_YAML
    save_config(result.config, config_path)
    paths["config"] = config_path

    paths.update(_write_exports(result, run_path, ["json", "csv"]))
    logger.debug("Saved results to %s", run_path)

    return paths


def _write_exports(
    result: Union[RenderResult, SweepResult],
    run_path: Path,
    formats: Sequence[str]
) -> dict[str, Path]:
    paths = {}

    if "json" in formats:
        json_path = run_path / RESULTS_JSON
        with open(json_path, "w") as f:
            json.dump(_result_to_json_dict(result), f, indent=2)
        paths["json"] = json_path

    if "csv" in formats:
        csv_path = run_path / RESULTS_CSV
        _result_to_dataframe(result).to_csv(csv_path, index=False)
        paths["csv"] = csv_path

    return paths


def _result_to_json_dict(result: Union[RenderResult, SweepResult]) -> dict:
    """Convert a result to JSON-serializable dictionary."""
    if isinstance(result, SweepResult):
        return {
            "kind": "sweep",
            "metadata": {
                "config_hash": result.config_hash,
                "timestamp": result.timestamp,
                "elapsed_seconds": result.elapsed_seconds,
                "total_points": result.total_points
            },
            "grid": {
                "wave_types": list(result.wave_types),
                "term_counts": result.term_counts.tolist(),
            },
            "results": {
                "current_amplitude": result.current_amplitude.tolist(),
                "thd": result.thd.tolist(),
                "convergence_error": result.convergence_error.tolist(),
            },
            "config": result.config.to_dict()
        }

    return {
        "kind": "render",
        "metadata": {
            "config_hash": result.config_hash,
            "timestamp": result.timestamp,
            "wave_type": result.wave_kind.value,
        },
        "metrics": result.metrics.to_dict(),
        "coefficients": [
            {"n": c.n, "a": c.a, "b": c.b, "amplitude": c.amplitude, "phase": c.phase}
            for c in result.coefficients
        ],
        "config": result.config.to_dict()
    }


def _result_to_dataframe(result: Union[RenderResult, SweepResult]) -> pd.DataFrame:
    """Convert a result to a long-format DataFrame."""
    if isinstance(result, RenderResult):
        return coefficients_to_frame(result.coefficients)

    rows = []
    for i_wave, wave in enumerate(result.wave_types):
        for i_term, num_terms in enumerate(result.term_counts):
            rows.append({
                "wave_type": wave,
                "num_terms": int(num_terms),
                "current_amplitude": result.current_amplitude[i_wave, i_term],
                "thd": result.thd[i_wave, i_term],
                "convergence_error": result.convergence_error[i_wave, i_term],
            })
    return pd.DataFrame(rows)


def load_results(run_path: Union[str, Path]) -> Union[RenderResult, SweepResult]:
    """
    Load render or sweep results from a run folder.

    Parameters
    ----------
    run_path : str or Path
        Path to the run folder.

    Returns
    -------
    result : RenderResult or SweepResult
        Loaded results.
    """
    from .config import load_config

    run_path = Path(run_path)

    # Load config
    config = load_config(run_path / CONFIG_YAML)

    # Load JSON results
    with open(run_path / RESULTS_JSON, "r") as f:
        data = json.load(f)

    if data.get("kind") == "sweep":
        return SweepResult(
            wave_types=list(data["grid"]["wave_types"]),
            term_counts=np.array(data["grid"]["term_counts"], dtype=np.int32),
            current_amplitude=np.array(data["results"]["current_amplitude"]),
            thd=np.array(data["results"]["thd"]),
            convergence_error=np.array(data["results"]["convergence_error"]),
            config=config,
            config_hash=data["metadata"]["config_hash"],
            timestamp=data["metadata"]["timestamp"],
            elapsed_seconds=data["metadata"]["elapsed_seconds"],
            total_points=data["metadata"]["total_points"]
        )

    return RenderResult(
        wave_kind=resolve_wave_kind(data["metadata"]["wave_type"]),
        coefficients=coefficients_from_records(data["coefficients"]),
        metrics=FourierMetrics.from_dict(data["metrics"]),
        config=config,
        config_hash=data["metadata"]["config_hash"],
        timestamp=data["metadata"]["timestamp"],
    )


def export_results(
    run_path: Union[str, Path],
    formats: Sequence[str] = ("json", "csv")
) -> dict[str, Path]:
    """
    Export results from a run folder in specified formats.

    This is useful for re-exporting or converting existing results.

    Parameters
    ----------
    run_path : str or Path
        Path to the run folder.
    formats : sequence of str
        Formats to export ("json", "csv").

    Returns
    -------
    paths : dict
        Dictionary mapping format names to file paths.
    """
    run_path = Path(run_path)
    result = load_results(run_path)
    return _write_exports(result, run_path, formats)


def list_runs(out_dir: Union[str, Path] = "out") -> list[Path]:
    """
    List all run folders in an output directory.

    Parameters
    ----------
    out_dir : str or Path
        Output directory to search.

    Returns
    -------
    runs : list of Path
        List of run folder paths, sorted by name (most recent last).
    """
    out_path = Path(out_dir)
    if not out_path.exists():
        return []

    runs = [
        p for p in out_path.iterdir()
        if p.is_dir() and (p.name.startswith("run_") or p.name.startswith("sweep_"))
    ]
    return sorted(runs, key=lambda p: p.name.split("_", 1)[1])


def get_latest_run(out_dir: Union[str, Path] = "out") -> Optional[Path]:
    """
    Get the most recent run folder.

    Parameters
    ----------
    out_dir : str or Path
        Output directory to search.

    Returns
    -------
    run_path : Path or None
        Path to most recent run, or None if no runs exist.
    """
    runs = list_runs(out_dir)
    return runs[-1] if runs else None
