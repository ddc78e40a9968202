"""
Baseband Sample Types / 基带采样点类型

Immutable I/Q value types shared by every block. Vectorised code paths use
numpy complex arrays; these classes are the per-symbol form handed to
display consumers.
所有模块共用的不可变I/Q值类型。向量化路径使用numpy复数数组。
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ComplexSample:
    """
    Complex baseband coordinate / 复基带坐标

    i : in-phase component (real part) / 同相分量
    q : quadrature component (imaginary part) / 正交分量
    """
    i: float
    q: float

    @classmethod
    def from_complex(cls, z):
        z = complex(z)
        return cls(z.real, z.imag)

    @classmethod
    def from_polar(cls, r, theta):
        return cls(r * math.cos(theta), r * math.sin(theta))

    def __complex__(self):
        return complex(self.i, self.q)

    def __add__(self, other):
        return ComplexSample(self.i + other.i, self.q + other.q)

    def __sub__(self, other):
        return ComplexSample(self.i - other.i, self.q - other.q)

    def __mul__(self, other):
        return ComplexSample(self.i * other.i - self.q * other.q,
                             self.i * other.q + self.q * other.i)

    def conjugate(self):
        return ComplexSample(self.i, -self.q)

    def scale(self, k):
        return ComplexSample(k * self.i, k * self.q)

    @property
    def magnitude_squared(self):
        return self.i * self.i + self.q * self.q

    @property
    def magnitude(self):
        return math.sqrt(self.magnitude_squared)

    @property
    def phase(self):
        """Angle in radians, atan2(Q, I) / 相位（弧度）"""
        return math.atan2(self.q, self.i)

    def distance_squared(self, other):
        # Hot path of nearest-neighbour search, no sqrt
        d_i = self.i - other.i
        d_q = self.q - other.q
        return d_i * d_i + d_q * d_q

    def distance(self, other):
        return math.sqrt(self.distance_squared(other))


@dataclass(frozen=True)
class ConstellationPoint(ComplexSample):
    """Constellation symbol with its Gray bit label / 带格雷码比特标签的星座点"""
    bits: str

    def as_sample(self):
        return ComplexSample(self.i, self.q)


@dataclass(frozen=True)
class ReceivedSample(ComplexSample):
    """
    Noisy received symbol with its decision / 带判决结果的接收符号

    Produced once per simulated symbol for scatter-plot consumers.
    每个仿真符号生成一个，供散点图使用。
    """
    transmitted_bits: str
    decoded_bits: str

    @property
    def is_error(self):
        return self.transmitted_bits != self.decoded_bits
