"""
BER Sweeps and Export / 误码率扫描与导出

Simulated BER at fixed SNR points, compared with theory, exported as CSV.
在固定信噪比点上仿真误码率并与理论值比较，导出为CSV。
"""

import csv
import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .channel import AWGNChannel
from .errors import InvalidArgumentError
from .modulator import Modulator, detect, generate_random_bits, label_distance_matrix
from .schemes import ModulationScheme
from .theory import theoretical_ber

logger = logging.getLogger(__name__)

CSV_HEADER = ['scheme', 'snr_db', 'theoretical_ber', 'simulated_ber', 'bit_count', 'error_count']


@dataclass(frozen=True)
class SweepPoint:
    snr_db: float
    simulated_ber: float
    theoretical_ber: float
    bit_count: int
    error_count: int


def simulate_ber_at_snr(scheme, snr_db, bits_target, batch_symbols=400, rng=None):
    """
    Monte-Carlo BER at one Eb/N0 / 单个Eb/N0点的蒙特卡洛误码率

    Batches of at most batch_symbols are simulated until at least bits_target
    bits were sent; the last batch is shrunk so it does not overshoot by more
    than one symbol.
    按批仿真直到发送比特数达到bits_target，最后一批缩小以避免超出。

    Parameters / 参数:
    ----------------
    scheme : ModulationScheme or str
        Modulation scheme / 调制方式
    snr_db : float
        Eb/N0 in dB / 比特信噪比(dB)
    bits_target : int
        Number of bits to simulate / 仿真比特数
    batch_symbols : int, default=400
        Symbols per batch / 每批符号数
    rng : np.random.Generator or int or None
        Random generator or seed / 随机数发生器或种子

    Returns / 返回:
    -------------
    point : SweepPoint
    """
    if batch_symbols <= 0:
        raise InvalidArgumentError(f"batch_symbols must be positive, got {batch_symbols}")

    modem = Modulator(scheme)
    k = modem.bits_per_symbol
    hamming = label_distance_matrix(modem.constellation)
    channel = AWGNChannel(rng)

    bit_count = 0
    error_count = 0
    while bit_count < bits_target:
        remaining_bits = bits_target - bit_count
        symbols_this_batch = min(batch_symbols, math.ceil(remaining_bits / k))
        bits_this_batch = symbols_this_batch * k

        bits = generate_random_bits(bits_this_batch, channel.rng)
        tx_symbols = modem.modulate(bits)
        rx_symbols = channel.transmit(tx_symbols, snr_db, modem.scheme)

        sent = detect(tx_symbols, modem.constellation)
        decided = detect(rx_symbols, modem.constellation)
        error_count += int(hamming[sent, decided].sum())
        bit_count += bits_this_batch

    point = SweepPoint(
        snr_db=float(snr_db),
        simulated_ber=error_count / bit_count if bit_count > 0 else 0.0,
        theoretical_ber=float(theoretical_ber(modem.scheme, snr_db)),
        bit_count=bit_count,
        error_count=error_count,
    )
    logger.debug("%s @ %.1f dB: %d errors in %d bits (BER %.3e, theory %.3e)",
                 modem.scheme, point.snr_db, error_count, bit_count,
                 point.simulated_ber, point.theoretical_ber)
    return point


def snr_range(snr_min, snr_max, step=1.0):
    """Inclusive SNR grid rounded to 0.1 dB / 含端点的信噪比网格（精确到0.1 dB）"""
    if step <= 0:
        raise InvalidArgumentError(f"step must be positive, got {step}")
    count = int(math.floor((snr_max - snr_min) / step + 1e-6)) + 1
    return [round(snr_min + i * step, 1) for i in range(max(count, 0))]


def sweep_snr(scheme, snr_min, snr_max, step=1.0, bits_per_point=20000,
              batch_symbols=400, seed=None):
    """
    Simulated and theoretical BER across an SNR range / 在信噪比范围内扫描误码率

    Every point gets its own generator spawned from one SeedSequence, so the
    points are independent and reproducible for a given seed whatever order
    (or process) they are computed in.
    每个点使用由同一SeedSequence派生的独立随机数发生器。

    Returns / 返回:
    -------------
    points : list of SweepPoint
    """
    scheme = ModulationScheme.parse(scheme)
    snr_values = snr_range(snr_min, snr_max, step)
    children = np.random.SeedSequence(seed).spawn(len(snr_values))

    points = []
    for i, (snr, child) in enumerate(zip(snr_values, children)):
        logger.debug("Sweeping %s %.1f dB (%d/%d)", scheme, snr, i + 1, len(snr_values))
        points.append(simulate_ber_at_snr(scheme, snr, bits_per_point, batch_symbols,
                                          rng=np.random.default_rng(child)))
    logger.info("%s sweep done: %d points, %.1f..%.1f dB, %d bits each",
                scheme, len(points), snr_min, snr_max, bits_per_point)
    return points


def sweep_rows(scheme, points):
    """Rows of the sweep table as strings / 扫描表的字符串行"""
    scheme = ModulationScheme.parse(scheme)
    return [[
        scheme.value,
        f"{p.snr_db:.1f}",
        f"{p.theoretical_ber:.6e}",
        f"{p.simulated_ber:.6e}",
        str(p.bit_count),
        str(p.error_count),
    ] for p in points]


def format_sweep_csv(scheme, points):
    """Sweep table as CSV text / CSV格式的扫描表"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(sweep_rows(scheme, points))
    return buffer.getvalue()


def write_sweep_csv(path, scheme, points):
    """Write the sweep table to a CSV file / 将扫描表写入CSV文件"""
    path = Path(path)
    with path.open("w", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        writer.writerows(sweep_rows(scheme, points))
    logger.info("Saved sweep table: %s", path)
    return path
