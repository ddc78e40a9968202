"""
Constellation Generator / 星座图生成

Builds the Gray-coded symbol alphabet for each modulation scheme, normalised
to unit average symbol energy (Es = 1).
为每种调制方式生成格雷编码的符号字母表，平均符号能量归一化为1。

Generation order (used for tie-breaking in the demodulator) /
生成顺序（解调器平局判决时使用）:
- PSK : increasing angle from 0 rad / 从0弧度起按角度递增
- QAM : Q-major rows from the bottom, I increasing within a row
        按Q行优先（自下而上），行内I递增
"""

from functools import lru_cache

import numpy as np

from .errors import InvalidStateError
from .samples import ConstellationPoint
from .schemes import ModulationScheme, check_exhaustive
from .utils import calculate_signal_power

ENERGY_TOLERANCE = 1e-9


def gray_code(n_bits):
    """
    Reflected binary Gray sequence as bit strings / 反射二进制格雷码序列

    gray_code(2) -> ['00', '01', '11', '10']
    """
    return [format(k ^ (k >> 1), f"0{n_bits}b") for k in range(2 ** n_bits)]


def _generate_bpsk():
    return [
        ConstellationPoint(1.0, 0.0, "0"),
        ConstellationPoint(-1.0, 0.0, "1"),
    ]


def _generate_qpsk():
    # Quadrants I→II→III→IV, neighbours differ by one bit / 相邻象限只差一位
    scale = 1 / np.sqrt(2)
    return [
        ConstellationPoint(scale, scale, "00"),
        ConstellationPoint(-scale, scale, "01"),
        ConstellationPoint(-scale, -scale, "11"),
        ConstellationPoint(scale, -scale, "10"),
    ]


def _generate_mpsk(order):
    labels = gray_code(int(np.log2(order)))
    points = []
    for k in range(order):
        angle = 2 * np.pi * k / order
        points.append(ConstellationPoint(float(np.cos(angle)), float(np.sin(angle)), labels[k]))
    return points


def _generate_square_qam(order):
    """
    Square M-QAM with independent Gray coding per axis / 每轴独立格雷编码的方形QAM

    Levels {±1, ±3, ...} scaled by 1/sqrt(2(M-1)/3), label = I-code + Q-code.
    """
    side = int(round(np.sqrt(order)))
    axis_bits = int(np.log2(side))
    labels = gray_code(axis_bits)
    levels = np.arange(-(side - 1), side, 2, dtype=np.float64)
    scale = 1 / np.sqrt(2 * (order - 1) / 3)  # 1/√10 for 16-QAM, 1/√42 for 64-QAM

    points = []
    for qi in range(side):
        for ii in range(side):
            points.append(ConstellationPoint(
                float(levels[ii] * scale),
                float(levels[qi] * scale),
                labels[ii] + labels[qi],
            ))
    return points


_GENERATORS = {
    ModulationScheme.BPSK: _generate_bpsk,
    ModulationScheme.QPSK: _generate_qpsk,
    ModulationScheme.PSK8: lambda: _generate_mpsk(8),
    ModulationScheme.QAM16: lambda: _generate_square_qam(16),
    ModulationScheme.QAM64: lambda: _generate_square_qam(64),
}
check_exhaustive(_GENERATORS, "_GENERATORS")


def generate_constellation(scheme):
    """
    Generate the symbol alphabet of a scheme / 生成调制方式的符号字母表

    Parameters / 参数:
    ----------------
    scheme : ModulationScheme or str
        Modulation scheme or its tag / 调制方式或其标签

    Returns / 返回:
    -------------
    points : tuple of ConstellationPoint
        Read-only alphabet in generation order / 按生成顺序排列的只读字母表
    """
    return _cached_constellation(ModulationScheme.parse(scheme))


@lru_cache(maxsize=None)
def _cached_constellation(scheme):
    points = tuple(_GENERATORS[scheme]())
    verify_constellation(points, scheme)
    return points


def verify_constellation(points, scheme):
    """
    Check size, label and energy invariants / 检查大小、标签与能量不变量

    Raises InvalidStateError on the first violation.
    """
    scheme = ModulationScheme.parse(scheme)
    k = scheme.bits_per_symbol

    if len(points) != 2 ** k:
        raise InvalidStateError(
            f"{scheme} constellation has {len(points)} points, expected {2 ** k}")

    labels = [p.bits for p in points]
    if any(len(label) != k or set(label) - {"0", "1"} for label in labels):
        raise InvalidStateError(f"{scheme} constellation has malformed bit labels")
    if len(set(labels)) != len(labels):
        raise InvalidStateError(f"{scheme} constellation has duplicate bit labels")

    energy = calculate_signal_power([complex(p) for p in points])
    if abs(energy - 1.0) > ENERGY_TOLERANCE:
        raise InvalidStateError(
            f"{scheme} constellation average energy is {energy}, expected 1")


def constellation_arrays(points):
    """
    Vectorised view of a constellation / 星座图的向量化表示

    Returns / 返回:
    -------------
    symbols : np.ndarray (complex)
        Point coordinates in generation order / 星座点坐标
    labels : np.ndarray (str)
        Bit labels aligned with symbols / 对应的比特标签
    """
    symbols = np.array([complex(p) for p in points], dtype=np.complex128)
    labels = np.array([p.bits for p in points])
    return symbols, labels


def constellation_iq(points):
    """(I, Q) coordinate arrays for plotting / 用于绘图的I、Q坐标"""
    symbols, _ = constellation_arrays(points)
    return np.real(symbols), np.imag(symbols)
