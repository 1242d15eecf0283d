"""
Tests for Fourier coefficient generation.

Verifies the closed-form coefficients, harmonic indexing, and the
partial-sum and epicycle evaluation built on them.
"""

import math
import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path for development testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fourier_epicycles.coefficients import (
    HarmonicCoefficient,
    generate,
    evaluate_series,
    epicycle_chain,
    coefficients_to_frame,
    coefficients_from_records,
)
from fourier_epicycles.waves import WaveKind, ideal_waveform


ALL_WAVES = ["square", "sawtooth", "triangle", "custom"]


class TestGenerateLength:
    """Tests for the number of generated harmonics."""

    @pytest.mark.parametrize("wave", ALL_WAVES)
    @pytest.mark.parametrize("num_terms", [0, 1, 2, 7, 50])
    def test_exact_length(self, wave, num_terms):
        """generate should return exactly num_terms harmonics."""
        assert len(generate(wave, num_terms)) == num_terms

    def test_zero_terms_empty(self):
        """Zero terms should give an empty list, not an error."""
        assert generate("square", 0) == []


class TestHarmonicIndices:
    """Tests for the harmonic index sequence of each wave."""

    @pytest.mark.parametrize("wave", ["square", "triangle"])
    def test_odd_harmonics(self, wave):
        """Square and triangle waves use odd harmonics 1, 3, 5, ..."""
        n = [c.n for c in generate(wave, 6)]
        assert n == [1, 3, 5, 7, 9, 11]

    @pytest.mark.parametrize("wave", ["sawtooth", "custom"])
    def test_all_harmonics(self, wave):
        """Sawtooth and custom waves use every harmonic 1, 2, 3, ..."""
        n = [c.n for c in generate(wave, 6)]
        assert n == [1, 2, 3, 4, 5, 6]


class TestClosedForms:
    """Tests for the coefficient formulas."""

    def test_square_three_terms(self):
        """Square wave: b_n = 4/(nπ), a_n = 0."""
        coeffs = generate("square", 3)

        assert [c.n for c in coeffs] == [1, 3, 5]
        assert [c.a for c in coeffs] == [0, 0, 0]
        expected_b = [4 / math.pi, 4 / (3 * math.pi), 4 / (5 * math.pi)]
        for c, b in zip(coeffs, expected_b):
            assert c.b == pytest.approx(b, rel=1e-12)

    def test_sawtooth_two_terms(self):
        """Sawtooth wave: b_n alternates in sign."""
        coeffs = generate("sawtooth", 2)

        assert [c.n for c in coeffs] == [1, 2]
        assert coeffs[0].b == pytest.approx(2 / math.pi, rel=1e-12)
        assert coeffs[1].b == pytest.approx(-1 / math.pi, rel=1e-12)

    def test_triangle_signs(self):
        """Triangle wave: b_n = 8(-1)^i/(n²π²)."""
        coeffs = generate("triangle", 3)
        pi2 = math.pi ** 2

        assert coeffs[0].b == pytest.approx(8 / pi2, rel=1e-12)
        assert coeffs[1].b == pytest.approx(-8 / (9 * pi2), rel=1e-12)
        assert coeffs[2].b == pytest.approx(8 / (25 * pi2), rel=1e-12)

    def test_custom_cosine_on_even_index(self):
        """Custom wave has a cosine term only on even generation indices."""
        coeffs = generate("custom", 4)

        assert coeffs[0].a == pytest.approx(1 / math.pi)
        assert coeffs[1].a == 0
        assert coeffs[2].a == pytest.approx(1 / (3 * math.pi))
        assert coeffs[3].a == 0
        for c in coeffs:
            assert c.b == pytest.approx(1 / (c.n * math.pi))

    @pytest.mark.parametrize("wave", ["square", "sawtooth", "triangle"])
    def test_no_cosine_terms(self, wave):
        """Only the custom wave has cosine coefficients."""
        assert all(c.a == 0 for c in generate(wave, 10))

    def test_unknown_tag_falls_back_to_square(self):
        """Unrecognized tags should use the square wave formula."""
        assert generate("zigzag", 5) == generate("square", 5)
        assert generate(None, 3) == generate(WaveKind.SQUARE, 3)

    def test_tag_case_insensitive(self):
        """Wave tags are matched without regard to case."""
        assert generate("Triangle", 4) == generate("triangle", 4)


class TestDerivedFields:
    """Tests for amplitude and phase derivation."""

    @pytest.mark.parametrize("wave", ALL_WAVES)
    def test_amplitude_and_phase(self, wave):
        """amplitude = sqrt(a²+b²) and phase = atan2(a, b) for every harmonic."""
        for c in generate(wave, 20):
            assert c.amplitude == pytest.approx(math.sqrt(c.a ** 2 + c.b ** 2), rel=1e-12)
            assert c.phase == pytest.approx(math.atan2(c.a, c.b), abs=1e-12)
            assert c.amplitude >= 0

    def test_custom_phase_quarter_turn(self):
        """Equal cosine and sine terms give a phase of π/4."""
        c = generate("custom", 1)[0]
        assert c.phase == pytest.approx(math.pi / 4)

    def test_negative_sine_phase(self):
        """A negative sine term with no cosine term gives a phase of π."""
        c = generate("sawtooth", 2)[1]
        assert c.phase == pytest.approx(math.pi)

    def test_derived_fields_not_settable(self):
        """Amplitude and phase cannot be passed to the constructor."""
        with pytest.raises(TypeError):
            HarmonicCoefficient(n=1, a=0.0, b=1.0, amplitude=5.0)

    def test_frozen(self):
        """Harmonics are immutable values."""
        c = HarmonicCoefficient(n=1, a=0.0, b=1.0)
        with pytest.raises(AttributeError):
            c.b = 2.0

    def test_structural_equality(self):
        """Harmonics with the same (n, a, b) are equal."""
        assert HarmonicCoefficient(3, 0.5, 0.25) == HarmonicCoefficient(3, 0.5, 0.25)


class TestMemoization:
    """Tests for cached generation."""

    def test_repeat_calls_equal(self):
        """Repeated calls return equal sequences."""
        assert generate("triangle", 12) == generate("triangle", 12)

    def test_returned_list_is_independent(self):
        """Mutating a returned list does not affect later calls."""
        first = generate("square", 4)
        first.clear()
        assert len(generate("square", 4)) == 4


class TestSeriesEvaluation:
    """Tests for partial sums and epicycle chains."""

    def test_single_square_harmonic_peak(self):
        """One square harmonic peaks at 4/π at t = π/2."""
        y = evaluate_series(generate("square", 1), math.pi / 2)
        assert y == pytest.approx(4 / math.pi)

    def test_amplitude_scales_sum(self):
        """The global amplitude scales the partial sum linearly."""
        coeffs = generate("sawtooth", 8)
        t = np.linspace(0, 2 * np.pi, 50)
        np.testing.assert_allclose(
            evaluate_series(coeffs, t, amplitude=2.0),
            2.0 * evaluate_series(coeffs, t)
        )

    def test_empty_series_is_zero(self):
        """No harmonics gives a zero sum with the input's shape."""
        t = np.linspace(0, 1, 5)
        y = evaluate_series([], t)
        assert y.shape == (5,)
        assert np.all(y == 0)
        assert evaluate_series([], 1.0) == 0.0

    def test_triangle_approaches_ideal(self):
        """Many triangle harmonics closely match the ideal triangle wave."""
        t = np.linspace(-np.pi, np.pi, 200)
        y = evaluate_series(generate("triangle", 50), t)
        np.testing.assert_allclose(y, ideal_waveform("triangle", t), atol=0.01)

    def test_chain_shape_and_origin(self):
        """The chain has one joint per harmonic plus the origin."""
        joints = epicycle_chain(generate("custom", 6), 0.3)
        assert joints.shape == (7, 2)
        np.testing.assert_array_equal(joints[0], [0.0, 0.0])

    def test_chain_tip_matches_series(self):
        """The tip's y-coordinate equals the partial sum."""
        coeffs = generate("custom", 9)
        for t in [0.0, 0.7, 2.1, 5.5]:
            tip = epicycle_chain(coeffs, t, scale=1.5)[-1]
            assert tip[1] == pytest.approx(evaluate_series(coeffs, t, amplitude=1.5))

    def test_chain_at_zero_square(self):
        """At t = 0 the square chain lies along the x-axis."""
        coeffs = generate("square", 5)
        tip = epicycle_chain(coeffs, 0.0)[-1]
        assert tip[0] == pytest.approx(sum(c.amplitude for c in coeffs))
        assert tip[1] == pytest.approx(0.0, abs=1e-12)


class TestTabularConversion:
    """Tests for DataFrame and record conversion."""

    def test_frame_columns(self):
        """Frame has one row per harmonic with the expected columns."""
        df = coefficients_to_frame(generate("square", 4))
        assert list(df.columns) == ["index", "n", "a", "b", "amplitude", "phase"]
        assert list(df["n"]) == [1, 3, 5, 7]

    def test_empty_frame(self):
        """Empty input gives an empty frame with the same columns."""
        df = coefficients_to_frame([])
        assert len(df) == 0
        assert "amplitude" in df.columns

    def test_records_recompute_derived_fields(self):
        """Records rebuild harmonics from (n, a, b) only."""
        records = [{"n": 1, "a": 0.0, "b": -2.0, "amplitude": 99.0, "phase": 99.0}]
        c = coefficients_from_records(records)[0]
        assert c.amplitude == pytest.approx(2.0)
        assert c.phase == pytest.approx(math.pi)
