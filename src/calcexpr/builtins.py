"""Built-in function registry.

Every handler receives the evaluator and the *unevaluated* argument nodes,
so it decides itself how (and whether) each argument is evaluated. Handlers
never raise: a bad call resolves to NaN or ``""`` depending on what the
function promises to return.
"""

from __future__ import annotations

import logging
import math
import os
import re
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Sequence

from .coerce import as_float, parse_numeric, strip_quotes, stringify, to_float, to_int
from .printf import sprintf as format_printf
from .tree import Node
from .values import FLOAT_ERROR, TEXT_ERROR, Value, VBool, VFloat, VInt, VText

if TYPE_CHECKING:
    from .evaluator import Evaluator

logger = logging.getLogger(__name__)

Args = Sequence[Node]
Builtin = Callable[["Evaluator", Args], "Value | None"]

BUILTINS: dict[str, Builtin] = {}

# time("starttime", ...) reports this instant
START_TIME = datetime.now().astimezone()


def builtin(name: str) -> Callable[[Builtin], Builtin]:
    """Register the decorated handler under *name*."""

    def register(fn: Builtin) -> Builtin:
        BUILTINS[name] = fn
        return fn

    return register


def _number(v: Value) -> float:
    """Float reading of an Int, Float or numeric string; NaN otherwise."""
    if isinstance(v, (VInt, VFloat)):
        return as_float(v.value)
    if isinstance(v, VText):
        return as_float(parse_numeric(v.value))
    return math.nan


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y == int(y) and int(y) % 2 == 1


# ---------------------------------------------------------------------------
# Numeric functions
# ---------------------------------------------------------------------------

@builtin("abs")
def abs_(ev: Evaluator, args: Args) -> VFloat:
    """abs(x): absolute value of x as a float."""
    if len(args) != 1:
        return FLOAT_ERROR
    return VFloat(abs(_number(ev.get_arg(args[0]))))


def _usable_floats(ev: Evaluator, args: Args) -> list[float]:
    floats: list[float] = []
    for node in args:
        v = ev.get_arg(node)
        if isinstance(v, (VInt, VFloat)):
            floats.append(as_float(v.value))
        elif isinstance(v, VText):
            f = as_float(parse_numeric(v.value))
            if not math.isnan(f):
                floats.append(f)
            else:
                logger.debug("skipping non-numeric string %r", v.value)
    return floats


@builtin("avg")
def avg(ev: Evaluator, args: Args) -> VFloat:
    floats = _usable_floats(ev, args)
    if not floats:
        return FLOAT_ERROR
    total = 0.0
    for f in floats:
        total += f
    return VFloat(total / len(floats))


@builtin("max")
def max_(ev: Evaluator, args: Args) -> VFloat:
    """max(f1, f2, ...): non-numeric strings are ignored."""
    floats = _usable_floats(ev, args)
    if not floats:
        return FLOAT_ERROR
    if any(math.isnan(f) for f in floats):
        return FLOAT_ERROR
    return VFloat(max(floats))


@builtin("min")
def min_(ev: Evaluator, args: Args) -> VFloat:
    """min(f1, f2, ...): non-numeric strings are ignored."""
    floats = _usable_floats(ev, args)
    if not floats:
        return FLOAT_ERROR
    if any(math.isnan(f) for f in floats):
        return FLOAT_ERROR
    return VFloat(min(floats))


@builtin("pow")
def pow_(ev: Evaluator, args: Args) -> VFloat:
    """pow(x, y): x**y as a float."""
    if len(args) != 2:
        return FLOAT_ERROR
    x = _number(ev.get_arg(args[0]))
    y = _number(ev.get_arg(args[1]))
    try:
        return VFloat(math.pow(x, y))
    except ValueError:
        # 0 ** negative is a pole, negative ** fraction has no real result
        if x == 0:
            return VFloat(math.copysign(math.inf, x) if _is_odd_integer(y) else math.inf)
        return FLOAT_ERROR
    except OverflowError:
        return VFloat(-math.inf if x < 0 and _is_odd_integer(y) else math.inf)


def _round_half_away(x: float) -> float:
    if not math.isfinite(x):
        return x
    whole = math.floor(abs(x))
    if abs(x) - whole >= 0.5:
        whole += 1
    return math.copysign(whole, x)


@builtin("round")
def round_(ev: Evaluator, args: Args) -> VFloat:
    """round(x, digits): half away from zero; digits may be negative.

    round(3.14159, 3)  -> 3.142
    round(3.14159, -1) -> 0
    """
    if len(args) != 2:
        return FLOAT_ERROR
    x = _number(ev.get_arg(args[0]))
    digits = _number(ev.get_arg(args[1]))
    if not math.isfinite(digits):
        return FLOAT_ERROR
    n = int(digits)
    scale = math.inf if n > 308 else 10.0 ** n
    if scale == 0:
        return FLOAT_ERROR
    return VFloat(_round_half_away(x * scale) / scale)


@builtin("sqrt")
def sqrt(ev: Evaluator, args: Args) -> VFloat:
    if len(args) != 1:
        return FLOAT_ERROR
    x = _number(ev.get_arg(args[0]))
    try:
        return VFloat(math.sqrt(x))
    except ValueError:
        return FLOAT_ERROR


# ---------------------------------------------------------------------------
# Conversions and predicates
# ---------------------------------------------------------------------------

@builtin("float64")
def float64(ev: Evaluator, args: Args) -> VFloat:
    """float64(x): bool, number or numeric string to float.

    float64("NaN") is the way to force a NaN into an expression.
    """
    if not args:
        return FLOAT_ERROR
    return VFloat(to_float(ev.eval(args[0])))


@builtin("int")
def int_(ev: Evaluator, args: Args) -> Value:
    """int(x): bool, number or numeric string to int, truncating."""
    if not args:
        return FLOAT_ERROR
    n = to_int(ev.eval(args[0]))
    if n is None:
        return FLOAT_ERROR
    return VInt(n)


@builtin("isNaN")
def is_nan(ev: Evaluator, args: Args) -> VBool:
    if len(args) != 1:
        return VBool(True)
    v = ev.eval(args[0])
    if isinstance(v, (VBool, VInt)):
        return VBool(False)
    if isinstance(v, VFloat):
        return VBool(math.isnan(v.value))
    if isinstance(v, VText):
        return VBool(math.isnan(parse_numeric(strip_quotes(v.value))))
    return VBool(True)


def _finite_or_nan(v: Value) -> float:
    if isinstance(v, VInt):
        return as_float(v.value)
    if isinstance(v, VFloat):
        f = v.value
    elif isinstance(v, VText):
        if v.value == "":
            return math.nan
        f = as_float(parse_numeric(v.value))
    else:
        return math.nan
    return f if math.isfinite(f) else math.nan


@builtin("isBetween")
def is_between(ev: Evaluator, args: Args) -> VBool:
    """isBetween(v, lo, hi): lo <= v <= hi; non-numeric operands give false."""
    if len(args) != 3:
        return VBool(False)
    v, lo, hi = (_finite_or_nan(ev.get_arg(a)) for a in args)
    return VBool(lo <= v <= hi)


@builtin("ifExpr")
def if_expr(ev: Evaluator, args: Args) -> Value:
    """ifExpr(cond, a, b): all three arguments are evaluated."""
    if len(args) != 3:
        return FLOAT_ERROR
    cond, when_true, when_false = (ev.get_arg(a) for a in args)
    if not isinstance(cond, VBool):
        logger.debug("ifExpr condition is %s, not a bool", type(cond).__name__)
        return FLOAT_ERROR
    return when_true if cond.value else when_false


@builtin("regexpMatch")
def regexp_match(ev: Evaluator, args: Args) -> VBool:
    r"""regexpMatch(pattern, s): unanchored search of s.

    regexpMatch("^\d+$", 1234)        -> true
    regexpMatch("^[eurt]+$", true)    -> true
    """
    if len(args) != 2:
        return VBool(False)
    pattern = ev.get_arg(args[0])
    if not isinstance(pattern, VText):
        return VBool(False)
    subject = stringify(ev.get_arg(args[1]))
    if subject is None:
        return VBool(False)
    try:
        compiled = re.compile(pattern.value)
    except re.error as exc:
        logger.debug("bad regexp %r: %s", pattern.value, exc)
        return VBool(False)
    return VBool(compiled.search(subject) is not None)


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------

def _position(v: Value) -> int:
    if isinstance(v, VInt):
        return v.value
    if isinstance(v, VFloat) and math.isfinite(v.value):
        return int(v.value)
    return 0


@builtin("substr")
def substr(ev: Evaluator, args: Args) -> VText:
    """substr(s, start, len): piece of s.

    substr("MyNameIsJohn", 0, 2)   -> "My"
    substr("MyNameIsJohn", 2, -1)  -> "NameIsJohn"
    substr("MyNameIsJohn", -2, -1) -> "hn"
    substr("MyNameIsJohn", -4, 1)  -> "J"
    """
    if len(args) != 3:
        return TEXT_ERROR
    text, start_v, length_v = (ev.get_arg(a) for a in args)
    if not isinstance(text, VText):
        logger.debug("substr on %s, not a string", type(text).__name__)
        return TEXT_ERROR
    s = text.value
    start = _position(start_v)
    length = _position(length_v)
    size = len(s)

    if size == 0 or length == 0:
        return TEXT_ERROR
    length = min(length, size)
    if abs(start) >= size:
        logger.debug("substr start %d out of range for %r", start, s)
        return TEXT_ERROR
    if length == -1:
        return VText(s[start:] if start >= 0 else s[size + start:])
    if length < 0:
        logger.debug("substr length %d is invalid", length)
        return TEXT_ERROR
    begin = start if start >= 0 else size + start
    return VText(s[begin:min(begin + length, size)])


@builtin("sprintf")
def sprintf(ev: Evaluator, args: Args) -> Value:
    """sprintf(format, args...): printf-style formatting."""
    if not args:
        return FLOAT_ERROR
    template = ev.get_arg(args[0])
    if len(args) == 1:
        return template if isinstance(template, VText) else FLOAT_ERROR
    if not isinstance(template, VText):
        # every argument then shows up in the EXTRA marker
        logger.debug("sprintf template is %s, not a string", type(template).__name__)
        template = TEXT_ERROR
    params = [ev.get_arg(a) for a in args[1:]]
    return VText(format_printf(template.value, params))


# ---------------------------------------------------------------------------
# Environment, clock and variables
# ---------------------------------------------------------------------------

@builtin("env")
def env(ev: Evaluator, args: Args) -> VText:
    """env(name): process environment variable, "" when unset."""
    if not args:
        return TEXT_ERROR
    name = ev.eval(args[0])
    if not isinstance(name, VText):
        logger.debug("env() name is %s, not a string", type(name).__name__)
        return TEXT_ERROR
    return VText(os.environ.get(strip_quotes(name.value), ""))


@builtin("time")
def time_(ev: Evaluator, args: Args) -> Value:
    """time(which, format).

    time("", "")               -> 1423542512 (int, "now" as epoch seconds)
    time("now", "rfc3339")     -> "2020-07-02T07:39:10+02:00"
    time("starttime", "epoch") -> start time of the process
    """
    if len(args) != 2:
        return TEXT_ERROR
    which, fmt = ev.get_arg(args[0]), ev.get_arg(args[1])
    if not isinstance(which, VText) or not isinstance(fmt, VText):
        return TEXT_ERROR
    if which.value in ("", "now"):
        moment = datetime.now().astimezone()
    elif which.value == "starttime":
        moment = START_TIME
    else:
        return TEXT_ERROR
    if fmt.value in ("", "epoch"):
        return VInt(int(moment.timestamp()))
    return VText(moment.isoformat(timespec="seconds"))


@builtin("val")
def val(ev: Evaluator, args: Args) -> Value:
    """val(name): read a variable, "" when it is not set."""
    if len(args) != 1:
        return TEXT_ERROR
    name = ev.eval(args[0])
    if isinstance(name, VText):
        found = ev.env.get(strip_quotes(name.value))
        if found is not None:
            return found
        logger.debug("val(): %r not set", name.value)
    return TEXT_ERROR


@builtin("setVal")
def set_val(ev: Evaluator, args: Args) -> None:
    """setVal(k1, v1, k2, v2, ...): store variables in pairs.

    A key that is not a non-empty string is skipped and the next argument
    is read as a key again.
    """
    i = 0
    while i < len(args):
        key = ev.get_arg(args[i])
        if i + 1 < len(args) and isinstance(key, VText) and key.value:
            ev.env.set(key.value, ev.get_arg(args[i + 1]))
            i += 1
        i += 1
    return None
