"""
Modulation/Demodulation Module / 调制解调模块

Maps bit groups to constellation symbols and recovers bits from (noisy)
symbols by minimum Euclidean distance, which is the maximum-likelihood
decision under AWGN.
将比特组映射为星座符号，并以最小欧氏距离（AWGN下的最大似然判决）恢复比特。
"""

import numpy as np

from .constellation import constellation_arrays, constellation_iq, generate_constellation
from .errors import InvalidArgumentError, InvalidStateError
from .samples import ComplexSample
from .schemes import ModulationScheme

# Rows per distance-matrix block in detect() / detect()中每块距离矩阵的行数
_DETECT_CHUNK = 4096


def as_bit_array(bits):
    """
    Normalise a bit sequence to an int8 array of 0/1 / 将比特序列规范化为0/1数组

    Accepts a '0'/'1' string, a sequence of ints or a numpy array.
    """
    if isinstance(bits, str):
        arr = np.frombuffer(bits.encode("ascii"), dtype=np.uint8).astype(np.int8) - ord("0")
    else:
        arr = np.asarray(bits).astype(np.int8).ravel()
    if np.any((arr != 0) & (arr != 1)):
        raise InvalidArgumentError("Bit sequence may only contain 0 and 1")
    return arr


def as_complex_array(samples):
    """Complex numbers, numpy arrays or ComplexSample objects → complex array"""
    if isinstance(samples, np.ndarray):
        return samples.astype(np.complex128, copy=False).ravel()
    return np.array([complex(s) for s in samples], dtype=np.complex128)


def generate_random_bits(count, rng=None) -> np.ndarray:
    """Uniform independent random bits / 均匀独立随机比特"""
    if rng is None:
        rng = np.random.default_rng()
    return rng.integers(0, 2, size=count, dtype=np.int8)


def modulate(bits, constellation) -> np.ndarray:
    """
    Modulate bit stream to baseband symbols / 将比特流调制为基带符号

    Bits are split into non-overlapping groups of the label length; a
    trailing partial group is dropped.
    比特按标签长度分组，末尾不足一组的比特被丢弃。

    Parameters / 参数:
    ----------------
    bits : str, sequence of int or np.ndarray
        Input binary data / 输入二进制数据
    constellation : sequence of ConstellationPoint
        Symbol alphabet / 符号字母表

    Returns / 返回:
    -------------
    symbols : np.ndarray (complex)
        One complex symbol per bit group / 每组比特对应一个复数符号
    """
    bits = as_bit_array(bits)
    k = len(constellation[0].bits)
    n_symbols = len(bits) // k

    # Label value → point index, built once per call / 标签值到星座点索引的查找表
    index = np.full(2 ** k, -1, dtype=np.int64)
    for position, point in enumerate(constellation):
        index[int(point.bits, 2)] = position
    symbols, _ = constellation_arrays(constellation)

    groups = bits[:n_symbols * k].reshape(-1, k).astype(np.int64)
    weights = 1 << np.arange(k - 1, -1, -1)
    positions = index[groups @ weights]

    if np.any(positions < 0):
        bad = groups[np.argmax(positions < 0)]
        raise InvalidStateError(
            f"Invalid bit pattern: {''.join(str(b) for b in bad)}")
    return symbols[positions]


def detect(samples, constellation) -> np.ndarray:
    """
    Nearest constellation point index per sample / 每个采样点最近星座点的索引

    On an exact tie the point generated first wins (np.argmin returns the
    first minimum). Ties have probability zero under continuous noise.
    完全平局时取生成顺序中第一个最小点。
    """
    received = as_complex_array(samples)
    symbols, _ = constellation_arrays(constellation)

    decisions = np.empty(len(received), dtype=np.int64)
    for start in range(0, len(received), _DETECT_CHUNK):
        block = received[start:start + _DETECT_CHUNK]
        diff = block[:, None] - symbols[None, :]
        dist_squared = diff.real ** 2 + diff.imag ** 2
        decisions[start:start + _DETECT_CHUNK] = np.argmin(dist_squared, axis=1)
    return decisions


def demodulate(samples, constellation) -> list:
    """
    Demodulate received symbols to bit labels / 将接收符号解调为比特标签

    Parameters / 参数:
    ----------------
    samples : array-like of complex or ComplexSample
        Received (possibly noisy) symbols / 接收符号（可含噪声）
    constellation : sequence of ConstellationPoint
        Symbol alphabet / 符号字母表

    Returns / 返回:
    -------------
    labels : list of str
        Decided bit label per symbol / 每个符号的判决比特标签
    """
    _, labels = constellation_arrays(constellation)
    return labels[detect(samples, constellation)].tolist()


def symbol_to_bits(sample, constellation) -> str:
    """
    Bit label of the nearest constellation point / 最近星座点的比特标签

    Doubles as the canonical label lookup for ideal points.
    """
    if not isinstance(sample, ComplexSample):
        sample = ComplexSample.from_complex(sample)

    min_dist = np.inf
    closest = constellation[0]
    for point in constellation:
        dist = sample.distance_squared(point)
        if dist < min_dist:
            min_dist = dist
            closest = point
    return closest.bits


def count_bit_errors(transmitted, received) -> int:
    """
    Hamming distance between two bit sequences / 两个比特序列的汉明距离

    Raises InvalidArgumentError when lengths differ.
    长度不一致时抛出InvalidArgumentError。
    """
    if len(transmitted) != len(received):
        raise InvalidArgumentError(
            f"Bit sequences must have the same length ({len(transmitted)} != {len(received)})")
    tx = np.asarray(list(transmitted) if isinstance(transmitted, str) else transmitted)
    rx = np.asarray(list(received) if isinstance(received, str) else received)
    return int(np.count_nonzero(tx != rx))


def label_distance_matrix(constellation) -> np.ndarray:
    """
    Pairwise Hamming distance between point labels / 星座点标签两两汉明距离

    entry [a, b] = bit errors when point a is sent and point b decided
    """
    values = np.array([int(p.bits, 2) for p in constellation], dtype=np.int64)
    xor = values[:, None] ^ values[None, :]
    k = len(constellation[0].bits)
    return sum((xor >> shift) & 1 for shift in range(k))


class Modulator:
    """
    Modulator and Demodulator for one scheme / 单一调制方式的调制解调器

    Constellation (Gray coding, Es = 1) / 星座映射(格雷码，Es=1):
    see constellation.generate_constellation
    """

    def __init__(self, scheme=ModulationScheme.QPSK):
        """
        Load the Gray-coded alphabet of a scheme / 载入调制方式的格雷码字母表

        Parameters / 参数:
        ----------------
        scheme : ModulationScheme or str, default=QPSK
            Modulation scheme / 调制方式
        """
        self.scheme = ModulationScheme.parse(scheme)
        self.bits_per_symbol = self.scheme.bits_per_symbol
        self.constellation = generate_constellation(self.scheme)

    def modulate(self, bit_stream) -> np.ndarray:
        """Modulate bit stream to symbols / 将比特流调制为符号"""
        return modulate(bit_stream, self.constellation)

    def demodulate(self, received_signal) -> list:
        """Demodulate symbols to bit labels / 将符号解调为比特标签"""
        return demodulate(received_signal, self.constellation)

    def demodulate_bits(self, received_signal) -> np.ndarray:
        """Demodulate symbols to a flat bit array / 将符号解调为扁平比特数组"""
        labels = self.demodulate(received_signal)
        return as_bit_array("".join(labels))

    def symbol_to_bits(self, sample) -> str:
        return symbol_to_bits(sample, self.constellation)

    def get_constellation(self) -> tuple:
        """
        Unit-energy alphabet of this scheme as coordinate arrays
        本调制方式单位能量字母表的坐标数组

        Returns / 返回:
        -------------
        (i, q) : tuple of np.ndarray
            In generation order, aligned with self.constellation labels
            按生成顺序排列，与self.constellation的标签一一对应
        """
        return constellation_iq(self.constellation)
