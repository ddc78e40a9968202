"""
Numeric Primitives for Digital Communications / 数字通信数值工具函数

Gaussian tail function (Q-function) and its inverse, dB/linear conversion,
signal power and Gaussian noise generation.
高斯尾函数(Q函数)及其反函数、分贝/线性转换、信号功率与高斯噪声生成。
"""

import math

import numpy as np
from scipy.special import erfc

from .errors import InvalidArgumentError
from .samples import ComplexSample

# Abramowitz & Stegun 26.2.17 / A&S 26.2.17 有理多项式系数
_AS_P = 0.2316419
_AS_B1 = 0.319381530
_AS_B2 = -0.356563782
_AS_B3 = 1.781477937
_AS_B4 = -1.821255978
_AS_B5 = 1.330274429

INV_SQRT_2PI = 0.3989422804014327  # 1/sqrt(2π)

# Q(x) < 7e-16 beyond this point / 超过此值Q(x)视为0
Q_UNDERFLOW_LIMIT = 8.0

# Floor for the first uniform draw of Box-Muller / Box-Muller第一个均匀数的下限
UNIFORM_FLOOR = 1e-10


def normal_pdf(x):
    """Standard normal density φ(x) / 标准正态概率密度"""
    return INV_SQRT_2PI * np.exp(-0.5 * np.square(x))


def q_function(x):
    """
    Gaussian tail probability Q(x) = P(Z > x) / 高斯右尾概率

    Uses the Abramowitz-Stegun rational approximation (|error| < 7.5e-8):
    Q(x) ≈ φ(x)·t·(b1 + t(b2 + t(b3 + t(b4 + t·b5)))),  t = 1/(1 + p·x)
    使用A&S有理逼近，多项式按Horner法则嵌套求值。

    Parameters / 参数:
    ----------------
    x : float or np.ndarray
        Argument(s) / 自变量

    Returns / 返回:
    -------------
    q : float or np.ndarray
        Tail probability; 0 for x > 8 and 1 for x < -8 (saturated, never NaN)
        尾概率；x>8返回0，x<-8返回1（饱和，不会产生NaN）
    """
    x_arr = np.asarray(x, dtype=np.float64)
    ax = np.abs(x_arr)

    t = 1.0 / (1.0 + _AS_P * ax)
    polynomial = t * (_AS_B1 + t * (_AS_B2 + t * (_AS_B3 + t * (_AS_B4 + t * _AS_B5))))
    q = normal_pdf(ax) * polynomial
    q = np.where(ax > Q_UNDERFLOW_LIMIT, 0.0, q)

    # Symmetry Q(-x) = 1 - Q(x) / 对称性
    q = np.where(x_arr < 0, 1.0 - q, q)

    if q.ndim == 0:
        return float(q)
    return q


def q_function_exact(x):
    """
    Reference Q-function via the complementary error function
    用互补误差函数计算的参考Q函数

    Q(x) = 0.5 * erfc(x / sqrt(2))
    """
    result = 0.5 * erfc(np.asarray(x, dtype=np.float64) / np.sqrt(2))
    if np.ndim(result) == 0:
        return float(result)
    return result


def q_function_inverse(p):
    """
    Inverse Q-function / Q函数的反函数

    Seeds x = sqrt(-2 ln p) and refines with 10 Newton-Raphson steps using
    the analytic derivative Q'(x) = -φ(x).
    以sqrt(-2 ln p)为初值，使用解析导数进行10次牛顿迭代。

    Parameters / 参数:
    ----------------
    p : float
        Tail probability in (0, 1) / 尾概率，范围(0,1)

    Returns / 返回:
    -------------
    x : float
        Value such that Q(x) = p / 满足Q(x)=p的x
    """
    if not 0.0 < p < 1.0:
        raise InvalidArgumentError(
            f"Probability must be between 0 and 1 (exclusive), got {p}")

    if p > 0.5:
        return -q_function_inverse(1.0 - p)

    x = math.sqrt(-2.0 * math.log(p))
    for _ in range(10):
        fx = q_function(x) - p
        fpx = -INV_SQRT_2PI * math.exp(-0.5 * x * x)
        x = x - fx / fpx
    return x


def db_to_linear(db):
    """dB → linear power ratio / 分贝转线性功率比"""
    linear = np.power(10.0, np.asarray(db, dtype=np.float64) / 10.0)
    if linear.ndim == 0:
        return float(linear)
    return linear


def linear_to_db(linear):
    """
    Linear power ratio → dB / 线性功率比转分贝

    Non-positive input returns -inf instead of raising.
    非正输入返回负无穷而不报错。
    """
    linear = np.asarray(linear, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        db = np.where(linear > 0, 10.0 * np.log10(linear), -np.inf)
    if db.ndim == 0:
        return float(db)
    return db


def calculate_signal_power(signal):
    """
    Calculate average signal power / 计算信号平均功率

    Formula: P = E[|x|²] = (1/N) * Σ|x[n]|²
    公式：功率 = 信号模值平方的均值
    """
    return float(np.mean(np.abs(np.asarray(signal)) ** 2))


def gaussian_random_pair(rng, mean=0.0, std_dev=1.0, size=None):
    """
    Two independent Gaussian draws via Box-Muller / Box-Muller变换生成两个独立高斯数

    Parameters / 参数:
    ----------------
    rng : np.random.Generator
        Source of uniform draws / 均匀随机数源
    mean, std_dev : float
        Distribution parameters / 分布参数
    size : int or None
        Number of pairs; None for scalars / 样本对数，None返回标量

    Returns / 返回:
    -------------
    (z1, z2) : tuple
        Independent N(mean, std_dev²) samples / 独立正态样本
    """
    u1 = np.maximum(rng.random(size), UNIFORM_FLOOR)
    u2 = rng.random(size)

    magnitude = np.sqrt(-2.0 * np.log(u1))
    angle = 2.0 * np.pi * u2

    z1 = mean + std_dev * magnitude * np.cos(angle)
    z2 = mean + std_dev * magnitude * np.sin(angle)
    if size is None:
        return float(z1), float(z2)
    return z1, z2


def complex_gaussian_random(variance=1.0, rng=None, size=None):
    """
    Circularly symmetric complex Gaussian noise / 圆对称复高斯噪声

    Total variance is split evenly between I and Q (σ = sqrt(variance/2)
    per dimension).
    总方差在I、Q两路平均分配（每路标准差sqrt(variance/2)）。

    Parameters / 参数:
    ----------------
    variance : float
        Total complex noise variance E[|n|²] / 复噪声总方差
    rng : np.random.Generator, optional
        Random generator; a fresh unseeded one if omitted / 随机数发生器
    size : int or None
        Number of samples; None returns a single ComplexSample
        样本数，None时返回单个ComplexSample

    Returns / 返回:
    -------------
    noise : ComplexSample or np.ndarray (complex)
    """
    if rng is None:
        rng = np.random.default_rng()
    std_dev = math.sqrt(variance / 2.0)
    i, q = gaussian_random_pair(rng, 0.0, std_dev, size)
    if size is None:
        return ComplexSample(i, q)
    return i + 1j * q
