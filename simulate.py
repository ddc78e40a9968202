"""
Digital Modulation Simulation / 数字调制仿真

Runs live BER sessions and SNR sweeps for every modulation scheme, compares
them with theory and saves CSV tables and figures to ``generated/``.
对每种调制方式运行实时误码率会话与信噪比扫描，与理论值比较，并将CSV表格与图片保存到generated/。
"""

import logging
import os
import time

import matplotlib.pyplot as plt

from modsim import (ModulationScheme, SimulationConfig, SimulationSession,
                    generate_theoretical_ber_curve, required_eb_n0_for_ber, snr_penalty,
                    sweep_snr, write_sweep_csv)
from modsim.constellation import constellation_iq
from modsim.statistics import ber_confidence_interval
from modsim.theory import max_useful_snr
from modsim.waveform import generate_waveform

plt.rcParams['font.sans-serif'] = ['SimHei', 'DejaVu Sans']
plt.rcParams['axes.unicode_minus'] = False

OUTPUT_DIR = "generated"


def run_live_session(scheme, snr_db, steps=250, seed=None):
    """
    Live session: many small steps, as an animated front end would drive it
    实时会话：以小步多次推进，模拟动画前端的驱动方式
    """
    config = SimulationConfig(scheme=scheme, snr_db=snr_db, seed=seed)
    session = SimulationSession(config)
    for _ in range(steps):
        session.step()
    return session


def plot_session(session, filename):
    """Constellation scatter and waveform of the last step / 星座散点图与最近一步的波形"""
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    fig.suptitle(f"{session.scheme.value} @ Eb/N0 = {session.snr_db:.1f} dB",
                 fontsize=14, fontweight='bold')

    ok = [s for s in session.recent_symbols if not s.is_error]
    bad = [s for s in session.recent_symbols if s.is_error]
    ideal_i, ideal_q = constellation_iq(session.constellation)

    axes[0].scatter([s.i for s in ok], [s.q for s in ok], c='blue', alpha=0.4, s=10, label='Correct')
    axes[0].scatter([s.i for s in bad], [s.q for s in bad], c='red', alpha=0.7, s=14, label='Error')
    axes[0].scatter(ideal_i, ideal_q, c='black', marker='x', s=60, label='Ideal')
    for point in session.constellation:
        axes[0].annotate(point.bits, (point.i, point.q), textcoords="offset points",
                         xytext=(4, 4), fontsize=7)
    axes[0].set_title("Constellation / 星座图")
    axes[0].set_xlabel("In-phase / 同相")
    axes[0].set_ylabel("Quadrature / 正交")
    axes[0].grid(True, alpha=0.3)
    axes[0].axis('equal')
    axes[0].legend(loc='upper right', fontsize=8)

    t, i_clean, q_clean = generate_waveform(session.current_symbols, session.config.samples_per_symbol)
    _, i_noisy, q_noisy = generate_waveform(session.noisy_symbols, session.config.samples_per_symbol)
    axes[1].plot(t, i_clean, 'b-', label='I')
    axes[1].plot(t, q_clean, 'g-', label='Q')
    axes[1].plot(t, i_noisy, 'b:', alpha=0.6)
    axes[1].plot(t, q_noisy, 'g:', alpha=0.6)
    axes[1].set_title("Baseband waveform / 基带波形")
    axes[1].set_xlabel("Symbol period / 符号周期")
    axes[1].grid(True, alpha=0.3)
    axes[1].legend(fontsize=8)

    plt.tight_layout()
    plt.savefig(filename, dpi=150, bbox_inches='tight')
    plt.close()
    print(f"  Saved constellation / 保存星座图: {filename}")


def plot_ber_curves(sweeps, filename):
    """Simulated vs theoretical BER for all schemes / 各调制方式的仿真与理论误码率"""
    fig, ax = plt.subplots(figsize=(8, 6))
    for scheme, points in sweeps.items():
        curve = generate_theoretical_ber_curve(scheme, 0, max(p.snr_db for p in points), 200)
        line, = ax.semilogy([c[0] for c in curve], [c[1] for c in curve], label=f"{scheme.value} theory")
        measured = [p for p in points if p.error_count > 0]
        ax.semilogy([p.snr_db for p in measured], [p.simulated_ber for p in measured],
                    'o', color=line.get_color(), label=f"{scheme.value} simulated")
    ax.set_xlabel("Eb/N0 (dB)")
    ax.set_ylabel("BER / 误码率")
    ax.set_title("BER vs Eb/N0 / 误码率曲线")
    ax.grid(True, which='both', alpha=0.3)
    ax.legend(fontsize=8)
    plt.tight_layout()
    plt.savefig(filename, dpi=150, bbox_inches='tight')
    plt.close()
    print(f"  Saved BER curves / 保存误码率曲线: {filename}")


def process_scheme(scheme, snr_db, bits_per_point, seed):
    """Live session + sweep for one scheme / 单个调制方式的实时会话与扫描"""
    print(f"\n{'='*60}")
    print(f"Processing / 处理中: {scheme.value}, Eb/N0={snr_db} dB")
    print(f"{'='*60}")

    start_time = time.time()
    session = run_live_session(scheme, snr_db, seed=seed)
    metrics = session.summary()
    print(f"  Live session completed in / 耗时: {time.time() - start_time:.2f} seconds / 秒")
    plot_session(session, os.path.join(OUTPUT_DIR, f"constellation_{scheme.name}_{snr_db}dB.png"))

    start_time = time.time()
    snr_max = max_useful_snr(scheme)
    points = sweep_snr(scheme, 0.0, snr_max, step=1.0, bits_per_point=bits_per_point, seed=seed)
    print(f"  Sweep completed in / 耗时: {time.time() - start_time:.2f} seconds / 秒")
    write_sweep_csv(os.path.join(OUTPUT_DIR, f"ber_sweep_{scheme.name}.csv"), scheme, points)

    low, high = ber_confidence_interval(metrics['simulated_ber'], metrics['bit_count'])
    print(f"\nMetrics Summary / 性能指标摘要:")
    print(f"  {'Parameter':<35} {'Value':>15}")
    print(f"  {'-'*35} {'-'*15}")
    print(f"  {'Bits transmitted':<35} {metrics['bit_count']:>15d}")
    print(f"  {'Bit errors':<35} {metrics['bit_error_count']:>15d}")
    print(f"  {'Simulated BER':<35} {metrics['simulated_ber']:>15.2e}")
    print(f"  {'3-sigma band':<35} {low:>7.1e}..{high:.1e}")
    print(f"  {'Theoretical BER':<35} {metrics['theoretical_ber']:>15.2e}")
    print(f"  {'Sample quality':<35} {metrics['sample_quality']:>15}")
    print(f"  {'Accuracy':<35} {metrics['accuracy']:>15}")
    print(f"  {'Eb/N0 for BER 1e-5':<35} {required_eb_n0_for_ber(scheme, 1e-5):>12.2f} dB")
    return points


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    os.makedirs(OUTPUT_DIR, exist_ok=True)

    print("Digital Modulation Simulation / 数字调制仿真")
    print("=" * 60)
    print("Transmission chain: Bits → Gray mapping → AWGN Channel →")
    print("Minimum-distance detection → BER statistics")
    print("传输链路：比特 → 格雷映射 → AWGN信道 → 最小距离判决 → 误码统计")

    # (scheme, live Eb/N0 in dB)
    test_cases = [
        (ModulationScheme.BPSK, 4.0),
        (ModulationScheme.QPSK, 6.0),
        (ModulationScheme.PSK8, 9.0),
        (ModulationScheme.QAM16, 10.0),
        (ModulationScheme.QAM64, 14.0),
    ]

    sweeps = {}
    for seed, (scheme, snr) in enumerate(test_cases):
        try:
            sweeps[scheme] = process_scheme(scheme, snr, bits_per_point=20000, seed=seed)
        except Exception as e:
            print(f"Error in case (scheme={scheme.value}, snr={snr}): {e}")
            import traceback
            traceback.print_exc()

    if sweeps:
        plot_ber_curves(sweeps, os.path.join(OUTPUT_DIR, "ber_curves.png"))

    print(f"\n{'Penalty vs BPSK at BER 1e-5':<35}")
    for scheme, _ in test_cases[1:]:
        print(f"  {scheme.value:<33} {snr_penalty(ModulationScheme.BPSK, scheme):>8.2f} dB")

    print("\n" + "="*60)
    print("Simulation completed / 仿真完成")
