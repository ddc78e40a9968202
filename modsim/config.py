"""
Simulation Configuration / 仿真配置
"""

from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidArgumentError
from .schemes import ModulationScheme


@dataclass
class SimulationConfig:
    scheme: Union[ModulationScheme, str] = ModulationScheme.QPSK
    snr_db: float = 10.0                  # Eb/N0 (dB)
    symbols_per_step: int = 8             # symbols per SimulationSession.step()
    max_recent_symbols: int = 200         # retention window for scatter plots
    samples_per_symbol: int = 20          # illustrative waveform oversampling
    batch_symbols: int = 400              # Monte-Carlo batch size in sweeps
    sweep_step_db: float = 1.0
    sweep_bits_per_point: int = 20000
    seed: Optional[int] = None

    def __post_init__(self):
        self.scheme = ModulationScheme.parse(self.scheme)
        for name in ("symbols_per_step", "max_recent_symbols", "samples_per_symbol",
                     "batch_symbols", "sweep_bits_per_point"):
            if getattr(self, name) <= 0:
                raise InvalidArgumentError(f"{name} must be positive, got {getattr(self, name)}")
        if self.sweep_step_db <= 0:
            raise InvalidArgumentError(f"sweep_step_db must be positive, got {self.sweep_step_db}")

    @property
    def bits_per_symbol(self) -> int:
        return self.scheme.bits_per_symbol
