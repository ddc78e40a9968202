"""
Illustrative Baseband Waveform / 示意性基带波形

Turns a symbol sequence into oversampled I/Q traces for display. This is a
teaching aid, not a pulse-shaping filter design.
将符号序列转换为过采样的I/Q波形用于显示；仅作示意，不是成形滤波器设计。
"""

import numpy as np

from .errors import InvalidArgumentError

DEFAULT_SAMPLES_PER_SYMBOL = 20

PULSE_SHAPES = ("rectangular", "raised_cosine")


def raised_cosine_pulse(t, alpha=0.5):
    """
    Raised-cosine pulse p(t) with symbol period 1 / 升余弦脉冲（符号周期为1）

    p(t) = sinc(t)·cos(παt) / (1 - (2αt)²), with the removable singularity
    at |t| = 1/(2α) replaced by its limit (π/4)·sinc(1/(2α)).
    """
    t = np.asarray(t, dtype=np.float64)
    denominator = 1.0 - (2.0 * alpha * t) ** 2
    singular = np.abs(denominator) < 1e-10
    safe = np.where(singular, 1.0, denominator)
    pulse = np.sinc(t) * np.cos(np.pi * alpha * t) / safe
    if alpha > 0:
        pulse = np.where(singular, (np.pi / 4) * np.sinc(1.0 / (2.0 * alpha)), pulse)
    if pulse.ndim == 0:
        return float(pulse)
    return pulse


def generate_waveform(symbols, samples_per_symbol=DEFAULT_SAMPLES_PER_SYMBOL,
                      pulse_shape="rectangular"):
    """
    Generate I/Q traces for a symbol sequence / 为符号序列生成I/Q波形

    Parameters / 参数:
    ----------------
    symbols : np.ndarray (complex)
        Baseband symbols / 基带符号
    samples_per_symbol : int, default=20
        Oversampling factor / 每符号采样点数
    pulse_shape : str
        "rectangular" (hold) or "raised_cosine" (symbol scaled by p(t) over
        its own interval) / 脉冲形状

    Returns / 返回:
    -------------
    t, i, q : np.ndarray
        Time axis in symbol periods and the two traces / 以符号周期为单位的时间轴及I、Q波形
    """
    if pulse_shape not in PULSE_SHAPES:
        raise InvalidArgumentError(f"Unknown pulse shape: {pulse_shape}")
    if samples_per_symbol <= 0:
        raise InvalidArgumentError(f"samples_per_symbol must be positive, got {samples_per_symbol}")

    symbols = np.asarray(symbols, dtype=np.complex128)
    offsets = np.arange(samples_per_symbol) / samples_per_symbol
    t = (np.arange(len(symbols))[:, None] + offsets[None, :]).ravel()

    # Upsample (rectangular pulse) / 上采样（矩形脉冲）
    signal = np.repeat(symbols, samples_per_symbol)
    if pulse_shape == "raised_cosine":
        signal = signal * np.tile(raised_cosine_pulse(offsets), len(symbols))

    return t, np.real(signal), np.imag(signal)


def sample_at_symbol_centers(i, q, samples_per_symbol=DEFAULT_SAMPLES_PER_SYMBOL):
    """
    Downsample to symbol rate (take center sample of each symbol)
    下采样至符号率（取每符号中间采样点）
    """
    signal = np.asarray(i) + 1j * np.asarray(q)
    num_symbols = len(signal) // samples_per_symbol
    return signal[samples_per_symbol // 2:num_symbols * samples_per_symbol:samples_per_symbol]


def add_noise_to_waveform(i, q, noise_std_dev, rng=None):
    """Independent Gaussian noise on each trace / 对每路波形加独立高斯噪声"""
    rng = np.random.default_rng(rng)
    i = np.asarray(i, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    return (i + rng.normal(0.0, noise_std_dev, len(i)),
            q + rng.normal(0.0, noise_std_dev, len(q)))
