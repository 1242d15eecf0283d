"""
Tests for reproducibility of runs.

Verifies that the same configuration produces identical results and
that saved run folders load back to the same values.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path for development testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fourier_epicycles.config import Config
from fourier_epicycles.coefficients import generate, clear_cache
from fourier_epicycles.metrics import compute_metrics
from fourier_epicycles.render import run_render
from fourier_epicycles.sweep import run_sweep, terms_to_converge, get_sweep_summary
from fourier_epicycles.io import (
    compute_config_hash,
    create_run_folder,
    save_results,
    load_results,
    export_results,
    list_runs,
    get_latest_run,
)


class TestReproducibility:
    """Tests for result reproducibility."""

    @pytest.fixture
    def tiny_config(self, tmp_path):
        """Create a tiny configuration for fast testing."""
        config = Config()
        config.run.out_dir = str(tmp_path / "out")
        config.series.wave_type = "triangle"
        config.series.num_terms = 6
        config.sweep.wave_types = ["square", "triangle"]
        config.sweep.n_min = 1
        config.sweep.n_max = 8
        return config

    def test_generate_deterministic_across_cache(self):
        """Cached and freshly computed coefficients are identical."""
        cached = generate("custom", 20)
        clear_cache()
        fresh = generate("custom", 20)
        assert cached == fresh

    def test_metrics_deterministic(self):
        """Metrics of the same series are identical."""
        m1 = compute_metrics(generate("sawtooth", 15), "sawtooth", 1.3)
        m2 = compute_metrics(generate("sawtooth", 15), "sawtooth", 1.3)
        assert m1 == m2

    def test_identical_sweeps(self, tiny_config):
        """Two sweeps with the same config produce identical arrays."""
        result1 = run_sweep(tiny_config)
        result2 = run_sweep(tiny_config)

        np.testing.assert_array_equal(
            result1.current_amplitude, result2.current_amplitude,
            err_msg="current_amplitude arrays differ between runs"
        )
        np.testing.assert_array_equal(
            result1.thd, result2.thd,
            err_msg="thd arrays differ between runs"
        )
        np.testing.assert_array_equal(
            result1.convergence_error, result2.convergence_error,
            err_msg="convergence_error arrays differ between runs"
        )

    def test_config_hash_stability(self, tiny_config):
        """Config hash should be stable across computations."""
        assert compute_config_hash(tiny_config) == compute_config_hash(tiny_config)

    def test_hash_changes_with_config(self, tiny_config):
        """Different configs should produce different hashes."""
        hash1 = compute_config_hash(tiny_config)
        tiny_config.series.num_terms = 7
        hash2 = compute_config_hash(tiny_config)

        assert hash1 != hash2, "Hash should change when config changes"

    def test_result_hash_matches_config(self, tiny_config):
        """Result's config_hash should match computed hash."""
        expected_hash = compute_config_hash(tiny_config)
        assert run_sweep(tiny_config).config_hash == expected_hash
        assert run_render(tiny_config).config_hash == expected_hash


class TestSweep:
    """Tests for the term-count sweep."""

    @pytest.fixture
    def sweep_config(self):
        config = Config()
        config.sweep.wave_types = ["square", "triangle"]
        config.sweep.n_min = 1
        config.sweep.n_max = 10
        return config

    def test_grid_shape(self, sweep_config):
        """Arrays are indexed by [wave, term count]."""
        result = run_sweep(sweep_config)

        assert result.thd.shape == (2, 10)
        assert result.total_points == 20
        assert list(result.term_counts) == list(range(1, 11))

    def test_point_matches_direct_metrics(self, sweep_config):
        """Each grid point equals the metrics computed directly."""
        result = run_sweep(sweep_config)
        point = result.get_point(1, 4)
        direct = compute_metrics(generate("triangle", 5), "triangle", 1.0)

        assert point.thd == pytest.approx(direct.thd)
        assert point.convergence_error == pytest.approx(direct.convergence_error)
        assert point.total_harmonics == 5

    def test_progress_callback(self, sweep_config):
        """The callback sees every point in order."""
        calls = []
        run_sweep(sweep_config, progress_callback=lambda i, n: calls.append((i, n)))

        assert calls[0] == (1, 20)
        assert calls[-1] == (20, 20)

    def test_terms_to_converge(self, sweep_config):
        """Triangle converges within tolerance at five terms; square never does."""
        terms = terms_to_converge(run_sweep(sweep_config), tolerance=0.05)

        assert terms["triangle"] == 5
        assert terms["square"] is None

    def test_summary(self, sweep_config):
        """The summary reports the grid and per-wave results."""
        summary = get_sweep_summary(run_sweep(sweep_config))

        assert summary["total_points"] == 20
        assert summary["n_min"] == 1
        assert summary["n_max"] == 10
        assert set(summary["waves"]) == {"square", "triangle"}
        assert summary["waves"]["square"]["final_convergence_error"] == pytest.approx(1.0)


class TestRunFolders:
    """Tests for saving and loading run folders."""

    @pytest.fixture
    def config(self, tmp_path):
        config = Config()
        config.run.out_dir = str(tmp_path / "out")
        config.series.wave_type = "custom"
        config.series.num_terms = 7
        config.series.amplitude = 1.5
        config.sweep.wave_types = ["sawtooth"]
        config.sweep.n_max = 6
        return config

    def test_render_round_trip(self, config):
        """A saved render loads back with the same coefficients and metrics."""
        result = run_render(config)
        run_path = create_run_folder(config, result.timestamp)
        paths = save_results(result, run_path)

        assert set(paths) == {"config", "json", "csv"}
        assert run_path.name.startswith("run_")

        loaded = load_results(run_path)
        assert loaded.wave_kind == result.wave_kind
        assert loaded.coefficients == result.coefficients
        assert loaded.metrics == result.metrics
        assert loaded.config_hash == result.config_hash

    def test_sweep_round_trip(self, config):
        """A saved sweep loads back with identical arrays."""
        result = run_sweep(config)
        run_path = create_run_folder(config, result.timestamp, prefix="sweep")
        save_results(result, run_path)

        loaded = load_results(run_path)
        assert loaded.wave_types == ["sawtooth"]
        np.testing.assert_array_equal(loaded.term_counts, result.term_counts)
        np.testing.assert_allclose(loaded.thd, result.thd)
        np.testing.assert_allclose(loaded.convergence_error, result.convergence_error)

    def test_list_runs_sorted(self, config):
        """Runs are listed by timestamp regardless of kind."""
        create_run_folder(config, "20240101_000000", prefix="sweep")
        create_run_folder(config, "20240102_000000")

        runs = list_runs(config.run.out_dir)
        assert [p.name.split("_")[0] for p in runs] == ["sweep", "run"]
        assert get_latest_run(config.run.out_dir) == runs[-1]

    def test_export_default_formats(self, config):
        """Re-export writes JSON and CSV by default and accepts any sequence."""
        result = run_render(config)
        run_path = create_run_folder(config, result.timestamp)
        save_results(result, run_path)
        (run_path / "results.csv").unlink()

        paths = export_results(run_path)
        assert set(paths) == {"json", "csv"}
        assert (run_path / "results.csv").exists()

        assert set(export_results(run_path, ["csv"])) == {"csv"}
        assert set(export_results(run_path)) == {"json", "csv"}

    def test_no_runs(self, tmp_path):
        """A missing output directory has no runs."""
        assert list_runs(tmp_path / "nothing") == []
        assert get_latest_run(tmp_path / "nothing") is None
