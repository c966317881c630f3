"""calcexpr — embeddable expression evaluator with a dynamic value model."""

from .environment import Environment
from .errors import CalcError, ParseError
from .evaluator import Evaluator, evaluate
from .parser import parse
from .repl import CalcRepl
from .values import FLOAT_ERROR, TEXT_ERROR, Value, VBool, VFloat, VInt, VText, to_value

__all__ = [
    "evaluate",
    "parse",
    "Evaluator",
    "Environment",
    "CalcRepl",
    "Value",
    "VBool",
    "VFloat",
    "VInt",
    "VText",
    "FLOAT_ERROR",
    "TEXT_ERROR",
    "to_value",
    "CalcError",
    "ParseError",
]
