"""
Digital Modulation Simulation Blocks / 数字调制仿真模块集

This package contains modular implementations of a digital modulation
teaching simulator: Gray-coded constellations, modulation and
minimum-distance demodulation, AWGN channel, theoretical error rates and a
Monte-Carlo bit-error-rate engine.

本包包含数字调制教学仿真器的模块化实现：格雷编码星座图、调制与最小距离解调、
AWGN信道、理论误码率以及蒙特卡洛误码率统计引擎。
"""

from .channel import AWGNChannel, add_awgn, eb_n0_db_from_es_n0, es_n0_db, noise_std_dev, noise_variance
from .config import SimulationConfig
from .constellation import generate_constellation, gray_code, verify_constellation
from .errors import InvalidArgumentError, InvalidStateError, ModulationError
from .modulator import Modulator, count_bit_errors, demodulate, detect, modulate, symbol_to_bits
from .samples import ComplexSample, ConstellationPoint, ReceivedSample
from .schemes import BITS_PER_SYMBOL, ModulationScheme
from .statistics import RunningStatistics, SimulationSession, ber_confidence_interval
from .sweep import SweepPoint, format_sweep_csv, simulate_ber_at_snr, sweep_snr, write_sweep_csv
from .theory import (generate_theoretical_ber_curve, required_eb_n0_for_ber, snr_penalty,
                     theoretical_ber, theoretical_ser)
from .utils import (complex_gaussian_random, db_to_linear, linear_to_db, q_function,
                    q_function_inverse)

__all__ = [
    'AWGNChannel',
    'BITS_PER_SYMBOL',
    'ComplexSample',
    'ConstellationPoint',
    'InvalidArgumentError',
    'InvalidStateError',
    'ModulationError',
    'ModulationScheme',
    'Modulator',
    'ReceivedSample',
    'RunningStatistics',
    'SimulationConfig',
    'SimulationSession',
    'SweepPoint',
    'add_awgn',
    'ber_confidence_interval',
    'complex_gaussian_random',
    'count_bit_errors',
    'db_to_linear',
    'demodulate',
    'detect',
    'eb_n0_db_from_es_n0',
    'es_n0_db',
    'format_sweep_csv',
    'generate_constellation',
    'generate_theoretical_ber_curve',
    'gray_code',
    'linear_to_db',
    'modulate',
    'noise_std_dev',
    'noise_variance',
    'q_function',
    'q_function_inverse',
    'required_eb_n0_for_ber',
    'simulate_ber_at_snr',
    'snr_penalty',
    'sweep_snr',
    'symbol_to_bits',
    'theoretical_ber',
    'theoretical_ser',
    'verify_constellation',
    'write_sweep_csv',
]
