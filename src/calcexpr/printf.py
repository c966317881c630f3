"""printf-style template formatting for ``sprintf``.

The verb set and the error markers follow the usual printf conventions::

    sprintf("%s,%d,%.3f,%t", "srv.demo.at", -15, 3.141, true)
        -> "srv.demo.at,-15,3.141,true"
    sprintf("%d")       -> "%!d(MISSING)"
    sprintf("%d", "x")  -> "%!d(string=x)"
    sprintf("a", "b")   -> "a%!(EXTRA string=b)"
"""

from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from typing import Sequence

from .coerce import format_float
from .values import Value, VBool, VFloat, VInt, VText

_VERB_RE = re.compile(r"%([-+# 0]*)(\d+)?(?:\.(\d*))?([a-zA-Z%])")


def sprintf(template: str, args: Sequence[Value]) -> str:
    """Render *template* against *args*."""
    out: list[str] = []
    pos = 0
    argi = 0
    for m in _VERB_RE.finditer(template):
        out.append(template[pos:m.start()])
        pos = m.end()
        flags, width, prec, verb = m.groups()
        if verb == "%":
            out.append("%")
            continue
        if argi >= len(args):
            out.append(f"%!{verb}(MISSING)")
            continue
        arg = args[argi]
        argi += 1
        text = _format_one(verb, flags, width, prec, arg)
        if text is None:
            text = f"%!{verb}({type_name(arg)}={plain(arg)})"
        out.append(text)
    out.append(template[pos:])

    if argi < len(args):
        extra = ", ".join(f"{type_name(a)}={plain(a)}" for a in args[argi:])
        out.append(f"%!(EXTRA {extra})")
    return "".join(out)


def type_name(v: Value) -> str:
    if isinstance(v, VBool):
        return "bool"
    if isinstance(v, VInt):
        return "int"
    if isinstance(v, VFloat):
        return "float64"
    return "string"


def plain(v: Value) -> str:
    """The ``%v`` rendering of a value."""
    if isinstance(v, VFloat):
        return shortest_g(v.value)
    return str(v)


def shortest_g(f: float) -> str:
    """``%g`` with the shortest precision that round-trips.

    Exponent notation is used when the decimal exponent is below -4 or at
    least 6, so ``45239.0 -> "45239"`` and ``1e6 -> "1e+06"``.
    """
    if math.isnan(f) or math.isinf(f):
        return format_float(f)
    if f == 0:
        return "-0" if math.copysign(1.0, f) < 0 else "0"
    sign, digits, exponent = Decimal(repr(f)).normalize().as_tuple()
    nd = len(digits)
    exp = nd + exponent - 1
    if -4 <= exp < 6:
        return format_float(f)
    mantissa = str(digits[0])
    if nd > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    return f"{'-' if sign else ''}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"


def _pad(body: str, flags: str, width: str | None) -> str:
    if not width:
        return body
    w = int(width)
    if len(body) >= w:
        return body
    if "-" in flags:
        return body.ljust(w)
    if "0" in flags:
        sign = body[0] if body[:1] in ("-", "+", " ") else ""
        return sign + body[len(sign):].rjust(w - len(sign), "0")
    return body.rjust(w)


def _py_format(verb: str, flags: str, width: str | None, prec: str | None, v) -> str:
    spec = "%" + flags + (width or "")
    if prec is not None:
        spec += "." + (prec or "0")
    return (spec + verb) % v


def _format_one(verb: str, flags: str, width: str | None, prec: str | None, arg: Value) -> str | None:
    if isinstance(arg, VBool):
        if verb in ("t", "v"):
            return _pad("true" if arg.value else "false", flags.replace("0", ""), width)
        return None

    if isinstance(arg, VInt):
        n = arg.value
        if verb in ("d", "v"):
            return _py_format("d", flags, width, prec, n)
        if verb in ("x", "X"):
            return _py_format(verb, flags, width, prec, n)
        if verb == "o":
            body = format(abs(n), "o")
            if "#" in flags:
                body = "0" + body
            return _pad(("-" if n < 0 else "") + body, flags, width)
        if verb == "b":
            return _pad(("-" if n < 0 else "") + format(abs(n), "b"), flags, width)
        if verb == "c":
            return _pad(chr(n), flags, width) if 0 <= n <= 0x10FFFF else None
        if verb == "q":
            return _pad("'" + chr(n) + "'", flags, width) if 0 <= n <= 0x10FFFF else None
        return None

    if isinstance(arg, VFloat):
        f = arg.value
        if verb not in ("e", "E", "f", "F", "g", "G", "v"):
            return None
        if math.isnan(f) or math.isinf(f):
            body = format_float(f)
            if math.isnan(f) and "+" in flags:
                body = "+NaN"
            return _pad(body, flags.replace("0", ""), width)
        if verb == "v" or (verb in ("g", "G") and prec is None):
            body = shortest_g(f)
            if verb == "G":
                body = body.upper()
            if "+" in flags and f >= 0:
                body = "+" + body
            return _pad(body, flags, width)
        return _py_format(verb, flags, width, prec, f)

    if isinstance(arg, VText):
        s = arg.value
        if verb in ("s", "v"):
            if prec is not None:
                s = s[: int(prec or 0)]
            return _pad(s, flags, width)
        if verb == "q":
            return _pad(json.dumps(s, ensure_ascii=False), flags, width)
        if verb in ("x", "X"):
            body = s.encode("utf-8").hex()
            return _pad(body.upper() if verb == "X" else body, flags, width)
        return None

    return None
