"""Tests for the illustrative baseband waveform."""

import numpy as np
import pytest

from modsim.errors import InvalidArgumentError
from modsim.waveform import (DEFAULT_SAMPLES_PER_SYMBOL, add_noise_to_waveform, generate_waveform,
                             raised_cosine_pulse, sample_at_symbol_centers)

SYMBOLS = np.array([0.7 + 0.7j, -0.7 + 0.7j, -0.7 - 0.7j, 0.7 - 0.7j])


class TestGenerateWaveform:
    """Validate oversampled I/Q traces."""

    def test_shapes_and_time_axis(self) -> None:
        t, i, q = generate_waveform(SYMBOLS)
        n = len(SYMBOLS) * DEFAULT_SAMPLES_PER_SYMBOL
        assert t.shape == i.shape == q.shape == (n,)
        assert t[0] == 0.0
        assert t[DEFAULT_SAMPLES_PER_SYMBOL] == pytest.approx(1.0)
        assert np.all(np.diff(t) > 0)

    def test_rectangular_holds_symbol(self) -> None:
        _, i, q = generate_waveform(SYMBOLS, samples_per_symbol=4)
        np.testing.assert_allclose(i, np.repeat(SYMBOLS.real, 4))
        np.testing.assert_allclose(q, np.repeat(SYMBOLS.imag, 4))

    def test_center_sampling_recovers_symbols(self) -> None:
        _, i, q = generate_waveform(SYMBOLS, samples_per_symbol=10)
        np.testing.assert_allclose(sample_at_symbol_centers(i, q, 10), SYMBOLS)

    def test_raised_cosine_starts_at_symbol_value(self) -> None:
        _, i, q = generate_waveform(SYMBOLS, samples_per_symbol=8, pulse_shape="raised_cosine")
        np.testing.assert_allclose(i[::8] + 1j * q[::8], SYMBOLS)
        assert np.all(np.abs(i[1:8]) < np.abs(i[0]))

    def test_empty_input(self) -> None:
        t, i, q = generate_waveform(np.zeros(0, dtype=complex))
        assert len(t) == len(i) == len(q) == 0

    def test_unknown_pulse_shape(self) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_waveform(SYMBOLS, pulse_shape="gaussian")

    def test_invalid_oversampling(self) -> None:
        with pytest.raises(InvalidArgumentError):
            generate_waveform(SYMBOLS, samples_per_symbol=0)


class TestRaisedCosinePulse:
    """Validate the pulse shape."""

    def test_peak(self) -> None:
        assert raised_cosine_pulse(0.0) == pytest.approx(1.0)

    def test_zero_crossings_at_symbol_periods(self) -> None:
        np.testing.assert_allclose(raised_cosine_pulse(np.array([2.0, 3.0, -2.0])), 0.0, atol=1e-12)

    def test_singular_point_uses_limit(self) -> None:
        """alpha = 0.5 puts the removable singularity at t = 1."""
        value = raised_cosine_pulse(1.0, alpha=0.5)
        assert np.isfinite(value)
        assert value == pytest.approx(np.pi / 4 * np.sinc(1.0), abs=1e-12)

    def test_symmetric(self) -> None:
        t = np.linspace(0.0, 3.0, 31)
        np.testing.assert_allclose(raised_cosine_pulse(t), raised_cosine_pulse(-t))


def test_add_noise_to_waveform() -> None:
    _, i, q = generate_waveform(SYMBOLS)
    noisy_i, noisy_q = add_noise_to_waveform(i, q, 0.1, rng=4)
    assert noisy_i.shape == i.shape
    assert 0 < np.std(noisy_i - i) < 0.2
    clean_i, clean_q = add_noise_to_waveform(i, q, 0.0, rng=4)
    np.testing.assert_array_equal(clean_i, i)
    np.testing.assert_array_equal(clean_q, q)
