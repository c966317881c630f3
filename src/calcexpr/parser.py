"""Reader layer: C-like expression text -> expression tree.

The grammar is handed to lark; a ``Transformer`` builds the ``tree`` nodes
while the LALR parser runs, so no intermediate parse tree is kept.
"""

from __future__ import annotations

import functools
import logging

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError

from .errors import ParseError
from .tree import BinaryOp, Call, Identifier, Literal, Node, Paren, UnaryOp

logger = logging.getLogger(__name__)

GRAMMAR = r"""
?start: or_expr

?or_expr: and_expr (LOR and_expr)*
?and_expr: cmp_expr (LAND cmp_expr)*
?cmp_expr: add_expr (cmp_op add_expr)*
?add_expr: mul_expr (add_op mul_expr)*
?mul_expr: unary (mul_op unary)*

?unary: prefix_op unary        -> unary_op
      | primary

?primary: INT                 -> int_lit
        | FLOAT               -> float_lit
        | STRING              -> string_lit
        | NAME "(" [args] ")" -> call
        | NAME                -> identifier
        | "(" or_expr ")"     -> paren

args: or_expr ("," or_expr)*

!cmp_op: "==" | "!=" | "<" | "<=" | ">" | ">="
!add_op: "+" | "-" | "|" | "^"
!mul_op: "*" | "/" | "%" | "<<" | ">>" | "&" | "&^"
!prefix_op: "+" | "-" | "!" | "^"

LOR: "||"
LAND: "&&"

FLOAT.2: /\d+\.\d*([eE][+-]?\d+)?/ | /\.\d+([eE][+-]?\d+)?/ | /\d+[eE][+-]?\d+/
INT: /\d+/
STRING: /"(\\.|[^"\\])*"/
NAME: /[^\W\d]\w*/

%import common.WS
%ignore WS
"""


class _TreeBuilder(Transformer):
    """Turns parse-tree branches into ``tree`` nodes."""

    def _fold(self, children: list) -> Node:
        node = children[0]
        for i in range(1, len(children), 2):
            node = BinaryOp(str(children[i]), node, children[i + 1])
        return node

    or_expr = and_expr = cmp_expr = add_expr = mul_expr = _fold

    def _operator(self, children: list[Token]) -> str:
        return str(children[0])

    cmp_op = add_op = mul_op = prefix_op = _operator

    def unary_op(self, children: list) -> Node:
        op, operand = children
        return UnaryOp(str(op), operand)

    def int_lit(self, children: list[Token]) -> Node:
        return Literal("int", str(children[0]))

    def float_lit(self, children: list[Token]) -> Node:
        return Literal("float", str(children[0]))

    def string_lit(self, children: list[Token]) -> Node:
        return Literal("string", str(children[0]))

    def identifier(self, children: list[Token]) -> Node:
        return Identifier(str(children[0]))

    def call(self, children: list) -> Node:
        name, args = children
        return Call(str(name), tuple(args or ()))

    def args(self, children: list) -> list[Node]:
        return list(children)

    def paren(self, children: list) -> Node:
        return Paren(children[0])


@functools.lru_cache(maxsize=None)
def _parser() -> Lark:
    return Lark(GRAMMAR, parser="lalr", transformer=_TreeBuilder())


def parse(text: str) -> Node:
    """Parse *text* into an expression tree.

    Raises:
        ParseError: *text* is not a single well-formed expression.
    """
    try:
        return _parser().parse(text)
    except LarkError as exc:
        logger.debug("parse error in %r: %s", text, exc)
        raise ParseError(text, f"cannot parse {text!r}: {exc}") from exc
