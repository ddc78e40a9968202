"""
Monte-Carlo Statistics Engine / 蒙特卡洛统计引擎

Runs random bits through modulate → AWGN → demodulate and accumulates
running bit-error statistics for one simulation session.
将随机比特依次经过调制、AWGN信道与解调，并为一个仿真会话累计误码统计。

Each SimulationSession owns its counters and its random generator. Two
sessions never share state, so sessions may run side by side (e.g. one per
SNR point); a single session must not be stepped from two threads.
每个会话拥有独立的计数器和随机数发生器；同一会话不可被两个线程同时驱动。
"""

import logging
import math
from collections import deque
from dataclasses import dataclass

import numpy as np
from scipy.stats import norm

from .channel import AWGNChannel
from .config import SimulationConfig
from .errors import InvalidArgumentError
from .modulator import Modulator, detect, generate_random_bits, label_distance_matrix
from .samples import ReceivedSample
from .schemes import ModulationScheme
from .theory import theoretical_ber

logger = logging.getLogger(__name__)


@dataclass
class RunningStatistics:
    """
    Accumulated counters of one session / 单个会话的累计计数器

    Counters only grow, except on reset() or a scheme change.
    计数器只增不减（重置或切换调制方式时清零）。
    """
    scheme: ModulationScheme
    snr_db: float
    symbol_count: int = 0
    bit_count: int = 0
    bit_error_count: int = 0

    @property
    def current_ber(self) -> float:
        """Empirical BER, 0 before any bit is sent / 经验误码率，无数据时为0"""
        if self.bit_count == 0:
            return 0.0
        return self.bit_error_count / self.bit_count

    def record(self, symbols: int, bits: int, errors: int):
        self.symbol_count += symbols
        self.bit_count += bits
        self.bit_error_count += errors

    def clear(self):
        self.symbol_count = 0
        self.bit_count = 0
        self.bit_error_count = 0


class SimulationSession:
    """
    Live BER simulation session / 实时误码率仿真会话

    Typical use / 典型用法:
        session = SimulationSession(SimulationConfig(scheme="16-QAM", snr_db=12))
        for _ in range(100):
            session.step()
        print(session.current_ber, session.theoretical_ber)
    """

    def __init__(self, config=None):
        self.config = config if config is not None else SimulationConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.channel = AWGNChannel(self.rng)
        self.statistics = RunningStatistics(self.config.scheme, float(self.config.snr_db))
        self.recent_symbols = deque(maxlen=self.config.max_recent_symbols)
        self._load_scheme(self.config.scheme)
        self._clear_buffers()

    def _load_scheme(self, scheme):
        self.modulator = Modulator(scheme)
        self._hamming = label_distance_matrix(self.modulator.constellation)
        self._labels = [p.bits for p in self.modulator.constellation]

    def _clear_buffers(self):
        self.recent_symbols.clear()
        self.current_bits = np.zeros(0, dtype=np.int8)
        self.current_symbols = np.zeros(0, dtype=np.complex128)
        self.noisy_symbols = np.zeros(0, dtype=np.complex128)

    @property
    def constellation(self):
        return self.modulator.constellation

    @property
    def scheme(self) -> ModulationScheme:
        return self.statistics.scheme

    @scheme.setter
    def scheme(self, scheme):
        # Different alphabets are not comparable: start over
        scheme = ModulationScheme.parse(scheme)
        self.config.scheme = scheme
        self.statistics.scheme = scheme
        self._load_scheme(scheme)
        self.reset()
        logger.debug("Session scheme set to %s, counters reset", scheme)

    @property
    def snr_db(self) -> float:
        return self.statistics.snr_db

    @snr_db.setter
    def snr_db(self, snr_db):
        # Counters are kept so convergence can be watched as conditions change
        self.config.snr_db = float(snr_db)
        self.statistics.snr_db = float(snr_db)

    @property
    def current_ber(self) -> float:
        return self.statistics.current_ber

    @property
    def theoretical_ber(self) -> float:
        return theoretical_ber(self.scheme, self.snr_db)

    def reset(self):
        """Zero counters and buffers, keep scheme and SNR / 清零计数器，保留调制方式与信噪比"""
        self.statistics.clear()
        self._clear_buffers()

    def step(self, num_symbols=None):
        """
        Simulate one batch of symbols / 仿真一批符号

        Parameters / 参数:
        ----------------
        num_symbols : int, optional
            Batch size, defaults to config.symbols_per_step / 批大小

        Returns / 返回:
        -------------
        received : list of ReceivedSample
            One record per symbol of this batch / 本批每个符号一条记录
        """
        if num_symbols is None:
            num_symbols = self.config.symbols_per_step
        if num_symbols < 0:
            raise InvalidArgumentError(f"num_symbols must be non-negative, got {num_symbols}")

        scheme = self.scheme
        num_bits = num_symbols * scheme.bits_per_symbol

        bits = generate_random_bits(num_bits, self.rng)
        tx_symbols = self.modulator.modulate(bits)
        rx_symbols = self.channel.transmit(tx_symbols, self.snr_db, scheme)

        # Nearest-point lookup on the clean symbols recovers the sent labels
        sent = detect(tx_symbols, self.constellation)
        decided = detect(rx_symbols, self.constellation)
        errors = int(self._hamming[sent, decided].sum())

        received = [
            ReceivedSample(float(z.real), float(z.imag), self._labels[s], self._labels[d])
            for z, s, d in zip(rx_symbols, sent, decided)
        ]
        self.recent_symbols.extend(received)
        self.current_bits = bits
        self.current_symbols = tx_symbols
        self.noisy_symbols = rx_symbols

        self.statistics.record(len(tx_symbols), num_bits, errors)
        return received

    def summary(self) -> dict:
        """Metrics for numeric displays / 用于数值显示的指标"""
        stats = self.statistics
        return {
            'scheme': stats.scheme.value,
            'snr_db': stats.snr_db,
            'symbol_count': stats.symbol_count,
            'bit_count': stats.bit_count,
            'bit_error_count': stats.bit_error_count,
            'simulated_ber': stats.current_ber,
            'theoretical_ber': float(self.theoretical_ber),
            'sample_quality': sample_size_quality(stats.bit_error_count, stats.bit_count),
            'accuracy': accuracy_assessment(stats.current_ber, self.theoretical_ber,
                                            stats.bit_error_count),
        }


def ber_standard_error(ber, bit_count):
    """sqrt(p(1-p)/N), binomial standard error of a BER estimate / BER估计的标准误差"""
    if bit_count <= 0:
        return math.inf
    return math.sqrt(ber * (1 - ber) / bit_count)


def ber_confidence_interval(ber, bit_count, confidence=0.9973):
    """
    Normal-approximation confidence interval for a BER estimate
    BER估计值的正态近似置信区间

    The default confidence corresponds to a ±3σ band.
    默认置信度对应±3σ。
    """
    if not 0 < confidence < 1:
        raise InvalidArgumentError(f"confidence must be in (0, 1), got {confidence}")
    if bit_count <= 0:
        return 0.0, 1.0
    z = norm.ppf(0.5 + confidence / 2)
    half_width = z * ber_standard_error(ber, bit_count)
    return max(0.0, ber - half_width), min(1.0, ber + half_width)


def sample_size_quality(error_count, bit_count):
    """Rough label for how trustworthy the error count is / 样本量等级"""
    if bit_count == 0:
        return "No Data"
    if error_count < 10:
        return "Need more samples"
    if error_count < 50:
        return "Low sample size"
    if error_count < 100:
        return "Moderate"
    if error_count < 500:
        return "Good sample size"
    return "Large sample"


def accuracy_assessment(simulated_ber, theoretical, error_count):
    """
    Compare simulated and theoretical BER / 比较仿真与理论误码率

    The ratio simulated/theoretical has a relative standard deviation of
    about 1/sqrt(errors); within 2.5 of those counts as converging.
    """
    if error_count < 10 or theoretical == 0 or simulated_ber == 0:
        return "Insufficient data"

    ratio = simulated_ber / theoretical
    tolerance = 2.5 / math.sqrt(error_count)
    if 1 - tolerance < ratio < 1 + tolerance:
        return "Converging well"
    if 0.7 < ratio < 1.4:
        return "Within range"
    return "Check simulation"
