"""
AWGN Channel Simulation / 加性高斯白噪声信道仿真

Simulates the effects of Additive White Gaussian Noise (AWGN) on transmitted
symbols. All SNR → noise power conversions go through noise_variance() so
that every scheme sees the same noise scale for the same Eb/N0.
仿真AWGN对传输符号的影响。所有信噪比到噪声功率的换算都经过noise_variance()。
"""

import math

import numpy as np

from .schemes import ModulationScheme
from .utils import complex_gaussian_random, db_to_linear


def noise_variance(eb_n0_db, scheme):
    """
    Total complex noise variance for a given Eb/N0 / 给定Eb/N0下的复噪声总方差

    With unit average symbol energy (Es = 1):
    Es/N0 = Eb/N0 · k,  σ² = N0 = 1 / (Es/N0)
    在平均符号能量为1时，σ² = 1/(Es/N0)。

    Parameters / 参数:
    ----------------
    eb_n0_db : float
        Energy per bit over noise PSD in dB / 每比特能量与噪声谱密度之比(dB)
    scheme : ModulationScheme or str
        Modulation scheme (sets bits per symbol k) / 调制方式（决定k）

    Returns / 返回:
    -------------
    variance : float
        E[|n|²]; 0 for Eb/N0 = +inf, inf for -inf / 噪声方差，Eb/N0为正无穷时为0，负无穷时为无穷
    """
    scheme = ModulationScheme.parse(scheme)
    es_n0_linear = db_to_linear(eb_n0_db) * scheme.bits_per_symbol
    if es_n0_linear == 0:
        return math.inf
    return 1.0 / es_n0_linear


def noise_std_dev(eb_n0_db, scheme):
    """Noise standard deviation per I/Q dimension / 每路(I或Q)噪声标准差"""
    return math.sqrt(noise_variance(eb_n0_db, scheme) / 2.0)


def es_n0_db(eb_n0_db, scheme):
    """Es/N0 (dB) = Eb/N0 (dB) + 10·log10(k) / 符号信噪比"""
    return eb_n0_db + 10.0 * math.log10(ModulationScheme.parse(scheme).bits_per_symbol)


def eb_n0_db_from_es_n0(es_n0_db_value, scheme):
    """Eb/N0 (dB) = Es/N0 (dB) - 10·log10(k) / 比特信噪比"""
    return es_n0_db_value - 10.0 * math.log10(ModulationScheme.parse(scheme).bits_per_symbol)


class AWGNChannel:
    """
    AWGN channel bound to one random generator / 绑定单个随机数发生器的AWGN信道

    Adds circularly symmetric complex Gaussian noise to unit-energy symbols.
    Channels share a generator only when one is passed in explicitly.
    对单位能量符号叠加圆对称复高斯噪声；仅在显式传入时才共享随机数发生器。
    """

    def __init__(self, rng=None):
        """
        Bind the channel to a generator / 绑定随机数发生器

        Parameters / 参数:
        ----------------
        rng : np.random.Generator or int or None
            Random generator or seed / 随机数发生器或种子
        """
        self.rng = np.random.default_rng(rng)

    def simulate(self, input_signal, noise_power):
        """
        Add noise of a given total variance to a symbol block
        按给定总方差对符号块加噪

        Parameters / 参数:
        ----------------
        input_signal : array-like of complex
            Unit-energy baseband symbols / 单位能量基带符号
        noise_power : float
            E[|n|²], split evenly over I and Q; a non-positive value returns
            an unchanged copy / 噪声总方差，I、Q平分；非正值时原样复制返回

        Returns / 返回:
        -------------
        received : np.ndarray (complex)
            One noisy sample per input symbol / 每个输入符号对应一个含噪采样
        """
        input_signal = np.asarray(input_signal, dtype=np.complex128)
        if noise_power <= 0:
            return input_signal.copy()

        # I and Q noise are independent Gaussian / I、Q噪声为独立高斯分布
        noise = complex_gaussian_random(noise_power, self.rng, size=len(input_signal))
        return input_signal + noise

    def transmit(self, symbols, eb_n0_db, scheme):
        """Add noise for the given Eb/N0 and scheme / 按给定Eb/N0与调制方式加噪"""
        return self.simulate(symbols, noise_variance(eb_n0_db, scheme))


def add_awgn(symbols, eb_n0_db, scheme, rng=None):
    """
    Add AWGN to a block of symbols / 对符号块添加AWGN

    Noise draws are independent across symbols and across I/Q.
    噪声在符号间及I/Q之间相互独立。
    """
    return AWGNChannel(rng).transmit(symbols, eb_n0_db, scheme)
