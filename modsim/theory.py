"""
Theoretical Error Rates / 理论误码率

Closed-form BER/SER over AWGN for each scheme, plus the inverse lookup of the
Eb/N0 needed to reach a target BER.
各调制方式在AWGN下的闭式误比特率/误符号率，以及达到目标误码率所需Eb/N0的反查。

All BER formulas assume Gray coding. For the non-binary schemes they are the
usual high-SNR approximations (nearest-neighbour errors only, one bit error
per symbol error); at low Eb/N0 they deviate from simulation. They are kept
as textbook formulas on purpose.
所有公式假设格雷编码；非二进制方式为高信噪比近似，低信噪比时与仿真存在偏差。
"""

import math

import numpy as np

from .schemes import ModulationScheme, check_exhaustive
from .utils import db_to_linear, q_function

SEARCH_LOW_DB = -10.0
SEARCH_HIGH_DB = 30.0
SEARCH_RESOLUTION_DB = 0.01
CURVE_FLOOR_BER = 1e-8


def _ber_binary(eb_n0):
    # BPSK and QPSK: per-bit performance of two orthogonal BPSK channels
    return q_function(np.sqrt(2 * eb_n0))


def _ber_mpsk(eb_n0, order):
    # (2/k)·Q(sqrt(2k·Eb/N0)·sin(π/M))
    k = math.log2(order)
    return (2 / k) * q_function(np.sqrt(2 * k * eb_n0) * math.sin(math.pi / order))


def _ber_square_qam(eb_n0, order):
    # (4/k)(1 - 1/sqrt(M))·Q(sqrt(3k·Eb/N0 / (M-1)))
    k = math.log2(order)
    factor = (4 / k) * (1 - 1 / math.sqrt(order))
    return factor * q_function(np.sqrt(3 * k * eb_n0 / (order - 1)))


def _ser_square_qam(es_n0, order):
    # Per-axis √M-PAM error, combined for the two independent axes
    p_sqrt_m = 2 * (1 - 1 / math.sqrt(order)) * q_function(np.sqrt(3 * es_n0 / (order - 1)))
    return 1 - (1 - p_sqrt_m) ** 2


def _ser_qpsk(es_n0):
    p = q_function(np.sqrt(es_n0))
    return 2 * p - p * p


_BER_FORMULAS = {
    ModulationScheme.BPSK: _ber_binary,
    ModulationScheme.QPSK: _ber_binary,
    ModulationScheme.PSK8: lambda g: _ber_mpsk(g, 8),
    ModulationScheme.QAM16: lambda g: _ber_square_qam(g, 16),
    ModulationScheme.QAM64: lambda g: _ber_square_qam(g, 64),
}

# SER formulas take (Eb/N0, Es/N0) linear / 误符号率公式参数为线性Eb/N0与Es/N0
_SER_FORMULAS = {
    ModulationScheme.BPSK: lambda eb, es: q_function(np.sqrt(2 * eb)),
    ModulationScheme.QPSK: lambda eb, es: _ser_qpsk(es),
    ModulationScheme.PSK8: lambda eb, es: 2 * q_function(np.sqrt(2 * es) * math.sin(math.pi / 8)),
    ModulationScheme.QAM16: lambda eb, es: _ser_square_qam(es, 16),
    ModulationScheme.QAM64: lambda eb, es: _ser_square_qam(es, 64),
}

check_exhaustive(_BER_FORMULAS, "_BER_FORMULAS")
check_exhaustive(_SER_FORMULAS, "_SER_FORMULAS")


def theoretical_ber(scheme, eb_n0_db):
    """
    Theoretical bit error rate / 理论误比特率

    Parameters / 参数:
    ----------------
    scheme : ModulationScheme or str
        Modulation scheme / 调制方式
    eb_n0_db : float or np.ndarray
        Eb/N0 in dB / 比特信噪比(dB)

    Returns / 返回:
    -------------
    ber : float or np.ndarray
        Bit error probability / 误比特概率
    """
    scheme = ModulationScheme.parse(scheme)
    return _BER_FORMULAS[scheme](db_to_linear(eb_n0_db))


def theoretical_ser(scheme, eb_n0_db):
    """Theoretical symbol error rate / 理论误符号率"""
    scheme = ModulationScheme.parse(scheme)
    eb_n0 = db_to_linear(eb_n0_db)
    es_n0 = eb_n0 * scheme.bits_per_symbol
    return _SER_FORMULAS[scheme](eb_n0, es_n0)


def generate_theoretical_ber_curve(scheme, snr_min=0.0, snr_max=20.0, num_points=100):
    """
    Sample the theoretical BER curve / 对理论BER曲线采样

    Points with BER at or below 1e-8 are dropped; they are negligible on a
    log plot and not an error.
    BER不高于1e-8的点被丢弃（绘图时可忽略，不视为错误）。

    Returns / 返回:
    -------------
    points : list of (snr_db, ber)
    """
    snr_values = np.linspace(snr_min, snr_max, num_points)
    ber_values = theoretical_ber(scheme, snr_values)
    return [(float(snr), float(ber))
            for snr, ber in zip(snr_values, ber_values) if ber > CURVE_FLOOR_BER]


def required_eb_n0_for_ber(scheme, target_ber):
    """
    Eb/N0 (dB) needed to reach a target BER / 达到目标误码率所需的Eb/N0

    Bisection over [-10, 30] dB until the bracket is at most 0.01 dB wide.
    Returns inf when the target is not reached at 30 dB, and -10 when it is
    already met at -10 dB.
    在[-10, 30] dB区间二分查找；30 dB仍达不到返回inf，-10 dB已满足返回-10。
    """
    scheme = ModulationScheme.parse(scheme)
    low, high = SEARCH_LOW_DB, SEARCH_HIGH_DB

    if theoretical_ber(scheme, high) > target_ber:
        return math.inf
    if theoretical_ber(scheme, low) < target_ber:
        return low

    while high - low > SEARCH_RESOLUTION_DB:
        mid = (low + high) / 2
        if theoretical_ber(scheme, mid) > target_ber:
            low = mid
        else:
            high = mid
    return (low + high) / 2


def snr_penalty(scheme_a, scheme_b, target_ber=1e-5):
    """
    Extra Eb/N0 (dB) scheme_b needs over scheme_a at a target BER
    在目标误码率下scheme_b相对scheme_a需要额外的Eb/N0(dB)
    """
    return required_eb_n0_for_ber(scheme_b, target_ber) - required_eb_n0_for_ber(scheme_a, target_ber)


def max_useful_snr(scheme):
    """
    Upper end of an interesting SNR axis: BER 1e-6 plus 1 dB, rounded up to
    0.5 dB / 有意义的SNR上限
    """
    snr = required_eb_n0_for_ber(scheme, 1e-6)
    return math.ceil((snr + 1) * 2) / 2
