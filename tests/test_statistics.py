"""Tests for the live simulation session and BER statistics helpers."""

import math

import pytest

from modsim.config import SimulationConfig
from modsim.errors import InvalidArgumentError
from modsim.modulator import count_bit_errors
from modsim.samples import ReceivedSample
from modsim.schemes import ModulationScheme
from modsim.statistics import (RunningStatistics, SimulationSession, accuracy_assessment,
                               ber_confidence_interval, ber_standard_error, sample_size_quality)


@pytest.fixture
def session() -> SimulationSession:
    """Seeded QPSK session at 4 dB."""
    return SimulationSession(SimulationConfig(scheme="QPSK", snr_db=4.0, seed=5))


class TestRunningStatistics:
    """Validate the counter record."""

    def test_empty_ber_is_zero(self) -> None:
        assert RunningStatistics(ModulationScheme.BPSK, 3.0).current_ber == 0.0

    def test_record_and_clear(self) -> None:
        stats = RunningStatistics(ModulationScheme.QPSK, 3.0)
        stats.record(10, 20, 2)
        stats.record(5, 10, 1)
        assert (stats.symbol_count, stats.bit_count, stats.bit_error_count) == (15, 30, 3)
        assert stats.current_ber == pytest.approx(0.1)
        stats.clear()
        assert stats.current_ber == 0.0
        assert stats.scheme is ModulationScheme.QPSK


class TestSimulationSession:
    """Validate stepping, reset and parameter-change semantics."""

    def test_initial_state(self, session: SimulationSession) -> None:
        assert session.current_ber == 0.0
        assert session.statistics.bit_count == 0
        assert len(session.recent_symbols) == 0

    def test_default_config(self) -> None:
        default = SimulationSession()
        assert default.scheme is ModulationScheme.QPSK
        assert default.snr_db == 10.0

    def test_step_counts(self, session: SimulationSession) -> None:
        received = session.step()
        assert len(received) == 8
        assert session.statistics.symbol_count == 8
        assert session.statistics.bit_count == 16
        assert 0 <= session.statistics.bit_error_count <= 16
        assert all(isinstance(s, ReceivedSample) for s in received)

    def test_step_zero_changes_nothing(self, session: SimulationSession) -> None:
        assert session.step(0) == []
        assert session.statistics.bit_count == 0
        assert session.current_ber == 0.0

    def test_negative_step_rejected(self, session: SimulationSession) -> None:
        with pytest.raises(InvalidArgumentError):
            session.step(-1)

    def test_errors_match_sample_labels(self) -> None:
        """The error counter equals the bit differences of the returned samples."""
        noisy = SimulationSession(SimulationConfig(scheme="16-QAM", snr_db=2.0, seed=9))
        received = noisy.step(500)
        expected = sum(count_bit_errors(s.transmitted_bits, s.decoded_bits) for s in received)
        assert expected > 0
        assert noisy.statistics.bit_error_count == expected

    def test_buffers_hold_last_batch(self, session: SimulationSession) -> None:
        session.step(20)
        session.step(3)
        assert len(session.current_bits) == 6
        assert len(session.current_symbols) == 3
        assert len(session.noisy_symbols) == 3

    def test_counters_only_grow(self, session: SimulationSession) -> None:
        previous = 0
        for _ in range(20):
            session.step()
            assert session.statistics.bit_count > previous
            previous = session.statistics.bit_count

    def test_snr_change_keeps_counters(self, session: SimulationSession) -> None:
        session.step(100)
        bits = session.statistics.bit_count
        session.snr_db = 12.0
        assert session.statistics.bit_count == bits
        assert session.snr_db == 12.0

    def test_scheme_change_resets(self, session: SimulationSession) -> None:
        session.step(100)
        session.scheme = "16-QAM"
        assert session.scheme is ModulationScheme.QAM16
        assert session.statistics.bit_count == 0
        assert session.current_ber == 0.0
        assert len(session.recent_symbols) == 0
        assert len(session.constellation) == 16
        session.step(10)
        assert session.statistics.bit_count == 40

    def test_config_follows_parameter_changes(self, session: SimulationSession) -> None:
        session.scheme = "64-QAM"
        session.snr_db = 15.0
        assert session.config.scheme is ModulationScheme.QAM64
        assert session.config.bits_per_symbol == 6
        assert session.config.snr_db == 15.0

    def test_reset_keeps_parameters(self, session: SimulationSession) -> None:
        session.step(50)
        session.snr_db = 6.0
        session.reset()
        assert session.statistics.bit_count == 0
        assert session.scheme is ModulationScheme.QPSK
        assert session.snr_db == 6.0
        assert len(session.current_symbols) == 0

    def test_recent_window_is_bounded(self) -> None:
        small = SimulationSession(SimulationConfig(max_recent_symbols=50, seed=1))
        small.step(120)
        assert len(small.recent_symbols) == 50

    def test_noiseless_session(self) -> None:
        clean = SimulationSession(SimulationConfig(scheme="64-QAM", seed=2))
        clean.snr_db = math.inf
        clean.step(1000)
        assert clean.statistics.bit_error_count == 0
        assert clean.theoretical_ber == 0.0

    def test_seeded_sessions_repeat(self) -> None:
        a = SimulationSession(SimulationConfig(scheme="8-PSK", snr_db=5.0, seed=3))
        b = SimulationSession(SimulationConfig(scheme="8-PSK", snr_db=5.0, seed=3))
        assert a.step(100) == b.step(100)
        assert a.statistics == b.statistics

    def test_converges_to_theory(self, session: SimulationSession) -> None:
        """QPSK at 4 dB with 100k bits lands within 4 sigma of the formula."""
        session.step(50_000)
        theory = session.theoretical_ber
        sigma = ber_standard_error(theory, session.statistics.bit_count)
        assert abs(session.current_ber - theory) < 4 * sigma
        assert session.summary()['accuracy'] in {"Converging well", "Within range"}

    def test_summary(self, session: SimulationSession) -> None:
        session.step(10)
        summary = session.summary()
        assert summary['scheme'] == "QPSK"
        assert summary['snr_db'] == 4.0
        assert summary['bit_count'] == 20
        assert summary['simulated_ber'] == session.current_ber
        assert summary['theoretical_ber'] == pytest.approx(session.theoretical_ber)
        assert summary['sample_quality'] in {"Need more samples", "Low sample size"}


class TestConvergenceHelpers:
    """Validate standard error and labelling helpers."""

    def test_standard_error(self) -> None:
        assert ber_standard_error(0.01, 10_000) == pytest.approx(math.sqrt(0.0099 / 10_000))
        assert ber_standard_error(0.01, 0) == math.inf

    def test_confidence_interval(self) -> None:
        low, high = ber_confidence_interval(0.01, 10_000)
        half = 3 * math.sqrt(0.0099 / 10_000)
        assert low == pytest.approx(0.01 - half, rel=1e-3)
        assert high == pytest.approx(0.01 + half, rel=1e-3)

    def test_confidence_interval_is_clipped(self) -> None:
        assert ber_confidence_interval(0.0, 100)[0] == 0.0
        assert ber_confidence_interval(0.5, 0) == (0.0, 1.0)

    @pytest.mark.parametrize("confidence", [0.0, 1.0, 1.5])
    def test_confidence_out_of_range(self, confidence: float) -> None:
        with pytest.raises(InvalidArgumentError):
            ber_confidence_interval(0.1, 100, confidence)

    @pytest.mark.parametrize("errors,bits,label", [
        (0, 0, "No Data"),
        (3, 1000, "Need more samples"),
        (20, 1000, "Low sample size"),
        (70, 1000, "Moderate"),
        (200, 10_000, "Good sample size"),
        (800, 10_000, "Large sample"),
    ])
    def test_sample_size_quality(self, errors: int, bits: int, label: str) -> None:
        assert sample_size_quality(errors, bits) == label

    @pytest.mark.parametrize("simulated,theory,errors,label", [
        (0.01, 0.01, 5, "Insufficient data"),
        (0.0, 0.01, 100, "Insufficient data"),
        (0.01, 0.0, 100, "Insufficient data"),
        (0.0105, 0.01, 400, "Converging well"),
        (0.012, 0.01, 400, "Within range"),
        (0.02, 0.01, 400, "Check simulation"),
    ])
    def test_accuracy_assessment(self, simulated, theory, errors, label) -> None:
        assert accuracy_assessment(simulated, theory, errors) == label


class TestSimulationConfig:
    """Validate defaults and argument checking."""

    def test_defaults(self) -> None:
        config = SimulationConfig()
        assert config.scheme is ModulationScheme.QPSK
        assert config.symbols_per_step == 8
        assert config.max_recent_symbols == 200
        assert config.samples_per_symbol == 20
        assert config.batch_symbols == 400
        assert config.bits_per_symbol == 2

    def test_scheme_tag_is_parsed(self) -> None:
        assert SimulationConfig(scheme="64-QAM").scheme is ModulationScheme.QAM64

    @pytest.mark.parametrize("kwargs", [
        {"scheme": "128-QAM"},
        {"symbols_per_step": 0},
        {"max_recent_symbols": -5},
        {"batch_symbols": 0},
        {"sweep_step_db": 0.0},
    ])
    def test_invalid_values(self, kwargs) -> None:
        with pytest.raises(InvalidArgumentError):
            SimulationConfig(**kwargs)
