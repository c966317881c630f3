"""Coercion helpers shared by operators and built-in functions."""

from __future__ import annotations

import math
import re
from decimal import Decimal

from .values import Value, VBool, VFloat, VInt, VText

_INT_RE = re.compile(r"[+-]?\d+\Z")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)\Z",
    re.IGNORECASE,
)


def strip_quotes(s: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    return s


def parse_number(s: str) -> int | float | None:
    """Parse *s* as an integer, then as a float; None when neither works.

    Surrounding whitespace and digit-group underscores are not accepted.
    """
    if _INT_RE.match(s):
        return int(s)
    if _FLOAT_RE.match(s):
        return float(s)
    return None


def parse_numeric(s: str) -> int | float:
    """Like parse_number, with NaN standing in for failure."""
    n = parse_number(s)
    return math.nan if n is None else n


def as_float(n: int | float) -> float:
    """Widen *n* to a float; ints beyond the float range become a signed inf."""
    try:
        return float(n)
    except OverflowError:
        return math.inf if n > 0 else -math.inf


def to_float(v: Value | None) -> float:
    """Coerce any value to a float; NaN when it has no numeric reading."""
    if isinstance(v, VBool):
        return 1.0 if v.value else 0.0
    if isinstance(v, (VInt, VFloat)):
        return as_float(v.value)
    if isinstance(v, VText):
        return as_float(parse_numeric(strip_quotes(v.value)))
    return math.nan


def to_int(v: Value | None) -> int | None:
    """Coerce any value to an int, truncating toward zero.

    Returns ``None`` when there is no finite numeric reading.
    """
    if isinstance(v, VBool):
        return 1 if v.value else 0
    if isinstance(v, VInt):
        return v.value
    if isinstance(v, VFloat):
        f = v.value
    elif isinstance(v, VText):
        n = parse_numeric(strip_quotes(v.value))
        if isinstance(n, int):
            return n
        f = n
    else:
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return int(f)


def format_float(f: float) -> str:
    """Shortest positional form of *f* (no exponent): 1.0 -> "1"."""
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "+Inf" if f > 0 else "-Inf"
    s = format(Decimal(repr(f)), "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def stringify(v: Value | None) -> str | None:
    """Textual form of a value for string matching; None for non-values."""
    if isinstance(v, VText):
        return v.value
    if isinstance(v, VBool):
        return "true" if v.value else "false"
    if isinstance(v, VInt):
        return str(v.value)
    if isinstance(v, VFloat):
        return format_float(v.value)
    return None
