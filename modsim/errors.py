"""
Exception Types / 异常类型

Errors raised by the simulation blocks. Caller mistakes are reported as
``InvalidArgumentError`` (a ``ValueError``), broken internal invariants as
``InvalidStateError`` (a ``RuntimeError``).

仿真模块抛出的异常。调用方错误为InvalidArgumentError，内部不变量被破坏为InvalidStateError。
"""


class ModulationError(Exception):
    """Base class for all simulator errors / 仿真器异常基类"""


class InvalidArgumentError(ModulationError, ValueError):
    """
    Caller supplied an invalid value / 调用方传入非法参数

    e.g. probability outside (0, 1), bit sequences of different length,
    unknown modulation scheme tag.
    """


class InvalidStateError(ModulationError, RuntimeError):
    """
    Internal inconsistency detected / 检测到内部不一致

    e.g. a bit group with no matching constellation point, or a generated
    constellation violating its size/label/energy invariants.
    """
