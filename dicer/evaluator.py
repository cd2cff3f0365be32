"""Evaluates a parsed dice expression to an integer total."""

from __future__ import annotations

from dicer.errors import ErrorKind, EvaluationError
from dicer.executor import Narrator, execute_roll
from dicer.rng import Drawer
from dicer.tree import Constant, Expression, Group, Operand, Operator, Roll


def _divide(lhs: int, rhs: int) -> int:
    """Integer division truncating toward zero."""
    if rhs == 0:
        raise EvaluationError(ErrorKind.division_by_zero)
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def evaluate_operand(obj: Operand, source: Drawer, narrate: Narrator | None = None) -> int:
    if isinstance(obj, Roll):
        return execute_roll(obj, source, narrate)
    if isinstance(obj, Group):
        return evaluate(obj.expr, source, narrate)
    if isinstance(obj, Constant):
        return obj.value
    raise TypeError(f"Not an operand: {obj!r}")


def evaluate(expr: Expression, source: Drawer, narrate: Narrator | None = None) -> int:
    """Roll every die in an expression tree and combine the results.

    The left side is always evaluated before the right, so draws are consumed
    in the order the dice appear in the text.

    Raises:
        EvaluationError: On division by zero, or when ``source`` refuses to
            draw more dice.
    """
    if expr.left is not None:
        lhs = evaluate(expr.left, source, narrate)
    else:
        lhs = evaluate_operand(expr.obj, source, narrate)

    if expr.is_singlet:
        return lhs

    rhs = evaluate(expr.right, source, narrate)
    if expr.op is Operator.plus:
        return lhs + rhs
    if expr.op is Operator.minus:
        return lhs - rhs
    if expr.op is Operator.times:
        return lhs * rhs
    return _divide(lhs, rhs)
