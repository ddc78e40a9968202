"""Tests for closed-form error rates and the required Eb/N0 search."""

import math

import numpy as np
import pytest

from modsim.schemes import ModulationScheme
from modsim.theory import (CURVE_FLOOR_BER, SEARCH_LOW_DB, generate_theoretical_ber_curve,
                           max_useful_snr, required_eb_n0_for_ber, snr_penalty, theoretical_ber,
                           theoretical_ser)
from modsim.utils import db_to_linear, q_function

ALL_SCHEMES = list(ModulationScheme)
SNR_GRID = np.linspace(-10.0, 30.0, 401)


class TestTheoreticalBer:
    """Validate BER formulas."""

    def test_bpsk_known_values(self) -> None:
        assert theoretical_ber("BPSK", 0.0) == pytest.approx(0.0786496, rel=1e-5)
        assert theoretical_ber("BPSK", 9.6) == pytest.approx(1e-5, rel=0.05)

    def test_qpsk_equals_bpsk(self) -> None:
        """Gray-coded QPSK has the per-bit performance of BPSK."""
        np.testing.assert_array_equal(theoretical_ber("QPSK", SNR_GRID),
                                      theoretical_ber("BPSK", SNR_GRID))

    def test_8psk_formula(self) -> None:
        gamma = db_to_linear(12.0)
        expected = (2 / 3) * q_function(math.sqrt(6 * gamma) * math.sin(math.pi / 8))
        assert theoretical_ber("8-PSK", 12.0) == pytest.approx(expected)

    @pytest.mark.parametrize("scheme,order", [(ModulationScheme.QAM16, 16),
                                              (ModulationScheme.QAM64, 64)])
    def test_qam_formula(self, scheme: ModulationScheme, order: int) -> None:
        k = math.log2(order)
        gamma = db_to_linear(15.0)
        expected = (4 / k) * (1 - 1 / math.sqrt(order)) * q_function(
            math.sqrt(3 * k * gamma / (order - 1)))
        assert theoretical_ber(scheme, 15.0) == pytest.approx(expected)

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    def test_non_increasing_in_snr(self, scheme: ModulationScheme) -> None:
        assert np.all(np.diff(theoretical_ber(scheme, SNR_GRID)) <= 0)

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    def test_bounded(self, scheme: ModulationScheme) -> None:
        ber = theoretical_ber(scheme, SNR_GRID)
        assert np.all(ber >= 0) and np.all(ber <= 1)

    def test_scalar_input_gives_float(self) -> None:
        assert isinstance(theoretical_ber("16-QAM", 10.0), float)

    def test_infinite_snr(self) -> None:
        assert theoretical_ber("QPSK", math.inf) == 0.0

    def test_higher_order_is_worse(self) -> None:
        """At equal Eb/N0 denser alphabets lose."""
        bers = [theoretical_ber(s, 10.0) for s in
                (ModulationScheme.QPSK, ModulationScheme.QAM16, ModulationScheme.QAM64)]
        assert bers == sorted(bers)


class TestTheoreticalSer:
    """Validate SER formulas."""

    def test_bpsk_ser_equals_ber(self) -> None:
        np.testing.assert_allclose(theoretical_ser("BPSK", SNR_GRID),
                                   theoretical_ber("BPSK", SNR_GRID))

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    def test_ser_not_below_ber(self, scheme: ModulationScheme) -> None:
        ser = theoretical_ser(scheme, SNR_GRID)
        ber = theoretical_ber(scheme, SNR_GRID)
        assert np.all(ser >= ber - 1e-15)

    def test_qpsk_ser(self) -> None:
        p = theoretical_ber("BPSK", 6.0)
        assert theoretical_ser("QPSK", 6.0) == pytest.approx(2 * p - p * p)


class TestRequiredEbN0:
    """Validate the bisection search over [-10, 30] dB."""

    def test_bpsk_1e5(self) -> None:
        assert required_eb_n0_for_ber("BPSK", 1e-5) == pytest.approx(9.59, abs=0.02)

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    @pytest.mark.parametrize("target", [1e-2, 1e-4, 1e-6])
    def test_hits_target(self, scheme: ModulationScheme, target: float) -> None:
        """The BER at the answer is within the 0.01 dB resolution of the target."""
        snr = required_eb_n0_for_ber(scheme, target)
        assert theoretical_ber(scheme, snr + 0.01) <= target
        assert theoretical_ber(scheme, snr - 0.01) >= target

    def test_unreachable_target(self) -> None:
        assert required_eb_n0_for_ber("64-QAM", -1.0) == math.inf

    def test_target_met_at_lower_bound(self) -> None:
        """A target already met at -10 dB returns the lower bound."""
        assert required_eb_n0_for_ber("BPSK", 0.4) == SEARCH_LOW_DB

    def test_denser_alphabets_need_more(self) -> None:
        required = [required_eb_n0_for_ber(s, 1e-5) for s in
                    (ModulationScheme.QPSK, ModulationScheme.PSK8,
                     ModulationScheme.QAM16, ModulationScheme.QAM64)]
        assert required == sorted(required)


class TestPenaltyAndCurves:
    """Validate derived quantities."""

    def test_penalty_identical_schemes(self) -> None:
        assert snr_penalty("BPSK", "QPSK") == 0.0

    def test_penalty_16qam(self) -> None:
        penalty = snr_penalty("BPSK", "16-QAM")
        assert 3.0 < penalty < 5.0
        assert snr_penalty("16-QAM", "BPSK") == pytest.approx(-penalty)

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    def test_max_useful_snr(self, scheme: ModulationScheme) -> None:
        snr = max_useful_snr(scheme)
        assert (snr * 2) == int(snr * 2)
        assert snr >= required_eb_n0_for_ber(scheme, 1e-6) + 1

    def test_curve_drops_negligible_points(self) -> None:
        curve = generate_theoretical_ber_curve("BPSK", 0.0, 20.0, 100)
        assert 0 < len(curve) < 100
        assert curve[0] == (0.0, pytest.approx(0.0786496, rel=1e-5))
        assert all(ber > CURVE_FLOOR_BER for _, ber in curve)
        snrs = [snr for snr, _ in curve]
        assert snrs == sorted(snrs)

    def test_curve_keeps_all_points_when_above_floor(self) -> None:
        assert len(generate_theoretical_ber_curve("64-QAM", 0.0, 10.0, 50)) == 50
