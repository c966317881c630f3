"""Value types for calcexpr."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class VInt:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VFloat:
    value: float

    def __str__(self) -> str:
        v = self.value
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "+Inf" if v > 0 else "-Inf"
        if v == int(v) and abs(v) < 1e21:
            return str(int(v))
        return repr(v)

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.value)


@dataclass(frozen=True)
class VBool:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(frozen=True)
class VText:
    value: str

    def __str__(self) -> str:
        return self.value


Value = Union[VInt, VFloat, VBool, VText]

# Error sentinels: NaN where a number is promised, "" where a string is.
FLOAT_ERROR = VFloat(math.nan)
TEXT_ERROR = VText("")


def to_value(obj: object) -> Value:
    """Convert a host object to a Value.

    ``bool`` is checked before the numeric tower since it is an ``int``
    subclass; any ``numbers.Integral`` becomes ``VInt`` and any other
    ``numbers.Real`` becomes ``VFloat``.
    """
    if isinstance(obj, (VInt, VFloat, VBool, VText)):
        return obj
    if isinstance(obj, bool):
        return VBool(obj)
    if isinstance(obj, numbers.Integral):
        return VInt(int(obj))
    if isinstance(obj, numbers.Real):
        return VFloat(float(obj))
    if isinstance(obj, str):
        return VText(obj)
    raise TypeError(f"cannot convert {type(obj).__name__} to a calcexpr value")
