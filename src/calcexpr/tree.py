"""Expression tree nodes produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Literal:
    kind: str  # "int" | "float" | "string"
    text: str  # raw source token; strings keep their quotes


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Paren:
    inner: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple["Node", ...] = ()


Node = Union[Literal, Identifier, UnaryOp, BinaryOp, Paren, Call]
