"""Syntax tree for dice expressions.

Every node is a frozen dataclass owned by exactly one parent. A tree is built
in a single parse call and never mutated afterwards.

Shape
-----
Expression   left | obj, op, right
Operand      Roll | Constant | Group
Roll         count 'd' sides [Modifier]
Group        '(' Expression ')'

An Expression whose operator is ``Operator.none`` has no right continuation;
that case is called a singlet. The left side is either a nested Expression
(the additive level hands its left operand to the multiplicative level) or a
single Operand (the multiplicative level never nests on the left).
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass


class Operator(str, enum.Enum):
    """Arithmetic operator joining two sides of an Expression."""

    none = ""
    plus = "+"
    minus = "-"
    times = "*"
    divide = "/"


class ModifierKind(str, enum.Enum):
    """Roll modifier, valued by its notation letter."""

    choose_highest = "c"
    choose_lowest = "w"
    reroll_below = "b"
    explode_above = "v"


@dataclass(frozen=True)
class Modifier:
    kind: ModifierKind
    value: int

    def __str__(self) -> str:
        return f"{self.kind.value}{self.value}"


@dataclass(frozen=True)
class Roll:
    count: int
    sides: int
    modifier: Modifier | None = None

    def __str__(self) -> str:
        return f"{self.count}d{self.sides}{self.modifier or ''}"


@dataclass(frozen=True)
class Constant:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Group:
    """A parenthesized sub-expression."""

    expr: Expression

    def __str__(self) -> str:
        return f"({self.expr})"


Operand = Roll | Constant | Group


@dataclass(frozen=True)
class Expression:
    left: Expression | None = None
    obj: Operand | None = None
    op: Operator = Operator.none
    right: Expression | None = None

    def __post_init__(self) -> None:
        if (self.left is None) == (self.obj is None):
            raise ValueError("Expression needs exactly one of left or obj")
        if (self.op is Operator.none) != (self.right is None):
            raise ValueError("Expression operator and right continuation must be set together")

    @property
    def is_singlet(self) -> bool:
        return self.op is Operator.none and self.right is None

    def __str__(self) -> str:
        lhs = str(self.left) if self.left is not None else str(self.obj)
        if self.is_singlet:
            return lhs
        return f"{lhs}{self.op.value}{self.right}"


Node = Expression | Roll | Constant | Group | Modifier


def walk(node: Node) -> Iterator[Node]:
    """Yield every node of a tree in pre-order, left before right."""
    yield node
    if isinstance(node, Expression):
        if node.left is not None:
            yield from walk(node.left)
        if node.obj is not None:
            yield from walk(node.obj)
        if node.right is not None:
            yield from walk(node.right)
    elif isinstance(node, Group):
        yield from walk(node.expr)
    elif isinstance(node, Roll) and node.modifier is not None:
        yield from walk(node.modifier)
