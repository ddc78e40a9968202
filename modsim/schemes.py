"""
Modulation Schemes / 调制方式

Closed set of supported symbol alphabets and their static properties.
支持的符号字母表及其静态属性。
"""

from enum import Enum

from .errors import InvalidArgumentError, InvalidStateError


class ModulationScheme(Enum):
    """
    Supported modulation schemes / 支持的调制方式

    The value is the display tag used in reports and CSV export.
    枚举值即报告和CSV导出中使用的标签。
    """
    BPSK = "BPSK"
    QPSK = "QPSK"
    PSK8 = "8-PSK"
    QAM16 = "16-QAM"
    QAM64 = "64-QAM"

    @classmethod
    def parse(cls, scheme):
        """
        Accept a scheme member, its tag ("8-PSK") or its name ("PSK8")
        接受枚举成员、标签或名称
        """
        if isinstance(scheme, cls):
            return scheme
        if isinstance(scheme, str):
            for member in cls:
                if scheme == member.value or scheme == member.name:
                    return member
        raise InvalidArgumentError(f"Unknown modulation scheme: {scheme!r}")

    @property
    def bits_per_symbol(self) -> int:
        return BITS_PER_SYMBOL[self]

    @property
    def constellation_size(self) -> int:
        return 2 ** BITS_PER_SYMBOL[self]

    @property
    def full_name(self) -> str:
        return SCHEME_INFO[self][0]

    @property
    def description(self) -> str:
        return SCHEME_INFO[self][1]

    def __str__(self):
        return self.value


BITS_PER_SYMBOL = {
    ModulationScheme.BPSK: 1,
    ModulationScheme.QPSK: 2,
    ModulationScheme.PSK8: 3,
    ModulationScheme.QAM16: 4,
    ModulationScheme.QAM64: 6,
}

SCHEME_INFO = {
    ModulationScheme.BPSK: (
        "Binary Phase Shift Keying",
        "Simplest digital modulation. Most robust to noise but lowest data rate."),
    ModulationScheme.QPSK: (
        "Quadrature Phase Shift Keying",
        "Same BER as BPSK but double the data rate. Widely used in satellite and cellular."),
    ModulationScheme.PSK8: (
        "8-ary Phase Shift Keying",
        "50% more bits than QPSK but requires higher SNR. Used in satellite communications."),
    ModulationScheme.QAM16: (
        "16-ary Quadrature Amplitude Modulation",
        "Uses amplitude and phase variation. Common in WiFi and LTE."),
    ModulationScheme.QAM64: (
        "64-ary Quadrature Amplitude Modulation",
        "High spectral efficiency but requires high SNR. Used in cable modems and 5G."),
}


def check_exhaustive(table, name):
    """Fail at import time if a per-scheme table misses a member / 检查按调制方式索引的表是否完整"""
    missing = [s.value for s in ModulationScheme if s not in table]
    if missing:
        raise InvalidStateError(f"{name} has no entry for: {', '.join(missing)}")


check_exhaustive(BITS_PER_SYMBOL, "BITS_PER_SYMBOL")
check_exhaustive(SCHEME_INFO, "SCHEME_INFO")
