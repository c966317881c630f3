"""Evaluator: recursive walk of an expression tree -> Value."""

from __future__ import annotations

import logging
import operator
from typing import Callable, Mapping

from .builtins import BUILTINS
from .coerce import as_float, strip_quotes
from .environment import Environment
from .parser import parse
from .tree import BinaryOp, Call, Identifier, Literal, Node, Paren, UnaryOp
from .values import FLOAT_ERROR, Value, VBool, VFloat, VInt, VText

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

class Evaluator:
    """Evaluates one expression at a time against a persistent variable store.

    Usage::

        e = Evaluator('round(pow(val("r"),2) * val("pi"),0)')
        e.variables({"r": 120, "pi": 3.14159})
        e.parse()
        e.run()    # -> VFloat(45239.0)

        e.evaluate('setVal("n", 10)')
        e.evaluate("n * 2")    # -> VInt(20)

    Not safe for concurrent use; use one instance per thread.
    """

    def __init__(self, text: str = "", variables: Mapping[str, object] | None = None) -> None:
        self.input = text
        self.tree: Node | None = None
        self.env = Environment.from_mapping(variables)

    def set_input(self, text: str) -> None:
        """Replace the input; the next run() parses it again."""
        self.input = text
        self.tree = None

    def variables(self, variables: Mapping[str, object] | None) -> "Evaluator":
        """Replace the variable store with *variables* (host values are converted)."""
        self.env = Environment.from_mapping(variables)
        return self

    @property
    def vars(self) -> Environment:
        return self.env

    def parse(self) -> Node:
        """Parse the current input. Raises ParseError on malformed text."""
        self.tree = parse(self.input)
        return self.tree

    def run(self) -> Value | None:
        """Evaluate the parsed input, parsing it first if needed.

        Returns ``None`` only for a bare ``setVal(...)`` call.
        """
        if self.tree is None:
            self.parse()
        return self.eval(self.tree)

    def evaluate(self, text: str) -> Value | None:
        self.set_input(text)
        return self.run()

    # -- Tree walk ------------------------------------------------------

    def eval(self, node: Node) -> Value | None:
        if isinstance(node, Literal):
            return _eval_literal(node)
        if isinstance(node, Identifier):
            return self._eval_identifier(node)
        if isinstance(node, UnaryOp):
            return self._eval_unary(node)
        if isinstance(node, Paren):
            return self.eval(node.inner)
        if isinstance(node, BinaryOp):
            return self._eval_binary(node)
        if isinstance(node, Call):
            return self._eval_call(node)
        logger.debug("unknown node %r", node)
        return FLOAT_ERROR

    def get_arg(self, node: Node) -> Value:
        """Evaluate *node* for use as an operand: strings lose their quotes."""
        v = self.eval(node)
        if isinstance(v, VText):
            return VText(strip_quotes(v.value))
        if isinstance(v, (VBool, VInt, VFloat)):
            return v
        return FLOAT_ERROR

    def _eval_identifier(self, node: Identifier) -> Value:
        if node.name == "true":
            return VBool(True)
        if node.name == "false":
            return VBool(False)
        found = self.env.get(node.name)
        if found is None:
            logger.debug("unknown identifier %r", node.name)
            return FLOAT_ERROR
        return found

    def _eval_unary(self, node: UnaryOp) -> Value:
        x = self.eval(node.operand)
        if not isinstance(x, (VInt, VFloat)):
            return FLOAT_ERROR
        if node.op == "+":
            return x
        if node.op == "-":
            return type(x)(-x.value)
        return FLOAT_ERROR

    def _eval_call(self, node: Call) -> Value | None:
        handler = BUILTINS.get(node.name)
        if handler is None:
            logger.debug("unknown function %r", node.name)
            return FLOAT_ERROR
        return handler(self, node.args)

    def _eval_binary(self, node: BinaryOp) -> Value:
        left = self.get_arg(node.left)
        right = self.get_arg(node.right)
        apply = _OPERATORS.get(node.op)
        if apply is None:
            logger.debug("unsupported operator %r", node.op)
            return FLOAT_ERROR
        return apply(node.op, left, right)


def evaluate(text: str, variables: Mapping[str, object] | None = None) -> Value | None:
    """Parse and evaluate *text* once on a fresh evaluator."""
    return Evaluator(text, variables).run()


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

def _eval_literal(node: Literal) -> Value:
    if node.kind == "int":
        return VInt(int(node.text))
    if node.kind == "float":
        return VFloat(float(node.text))
    # string literals keep their quotes until an operand or function reads them
    return VText(node.text)


# ---------------------------------------------------------------------------
# Binary operators
# ---------------------------------------------------------------------------

_NUMBERS = (VInt, VFloat)


def _arithmetic(op: str, left: Value, right: Value) -> Value:
    fn = _ARITH[op]
    if isinstance(left, VInt) and isinstance(right, VInt):
        return VInt(fn(left.value, right.value))
    if isinstance(left, _NUMBERS) and isinstance(right, _NUMBERS):
        return VFloat(fn(as_float(left.value), as_float(right.value)))
    return FLOAT_ERROR


def _divide(op: str, left: Value, right: Value) -> Value:
    if not (isinstance(left, _NUMBERS) and isinstance(right, _NUMBERS)):
        return FLOAT_ERROR
    if right.value == 0:
        return VFloat(float("inf"))
    try:
        return VFloat(left.value / right.value)
    except OverflowError:
        negative = (left.value < 0) != (right.value < 0)
        return VFloat(float("-inf") if negative else float("inf"))


def _compare(op: str, left: Value, right: Value) -> Value:
    fn = _COMPARE[op]
    if isinstance(left, VInt) and isinstance(right, VInt):
        return VBool(fn(left.value, right.value))
    if isinstance(left, _NUMBERS) and isinstance(right, _NUMBERS):
        return VBool(fn(as_float(left.value), as_float(right.value)))
    if op in ("==", "!="):
        if isinstance(left, VBool) and isinstance(right, VBool):
            return VBool(fn(left.value, right.value))
        if isinstance(left, VText) and isinstance(right, VText):
            return VBool(fn(left.value, right.value))
    return FLOAT_ERROR


def _logical(op: str, left: Value, right: Value) -> Value:
    if isinstance(left, VBool) and isinstance(right, VBool):
        if op == "&&":
            return VBool(left.value and right.value)
        return VBool(left.value or right.value)
    return FLOAT_ERROR


def _bitwise(op: str, left: Value, right: Value) -> Value:
    if isinstance(left, VInt) and isinstance(right, VInt):
        if op == "&":
            return VInt(left.value & right.value)
        return VInt(left.value | right.value)
    return FLOAT_ERROR


_ARITH: dict[str, Callable] = {"+": operator.add, "-": operator.sub, "*": operator.mul}

_COMPARE: dict[str, Callable] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}

_OPERATORS: dict[str, Callable[[str, Value, Value], Value]] = {
    **{op: _arithmetic for op in _ARITH},
    "/": _divide,
    **{op: _compare for op in _COMPARE},
    "&&": _logical,
    "||": _logical,
    "&": _bitwise,
    "|": _bitwise,
}
