"""Recursive-descent parser for dice expressions.

Grammar::

    expr     := term (addop expr)?
    term     := obj  (mulop term)?
    obj      := roll | integer | '(' expr ')'
    roll     := integer 'd' integer modifier?
    modifier := ('c'|'b'|'v'|'w') integer
    addop    := '+' | '-'
    mulop    := '*' | '/'

There is no tokenizer. Each level scans its span for the first operator that
is not nested inside parentheses, splits there, and recurses. Precedence comes
from the additive level handing its left operand to the multiplicative level;
same-precedence operators group to the right, so ``1-2-3`` is ``1-(2-3)``.

Every function takes a string and a length and never looks past ``length``,
so callers may hand in one expression out of a longer line.
"""

from __future__ import annotations

import enum
import logging

from dicer.errors import DiceError, ErrorKind, ParseError
from dicer.tree import Constant, Expression, Group, Modifier, ModifierKind, Operand, Operator, Roll

logger = logging.getLogger(__name__)

_DIGITS = frozenset("0123456789")
_MODIFIER_CHARS = "cbvw"


class Level(enum.Enum):
    """Precedence level being parsed, with the characters it splits on."""

    additive = "()+-"
    multiplicative = "()*/"


def _is_number(text: str) -> bool:
    return bool(text) and all(ch in _DIGITS for ch in text)


def find_first_free_opt(text: str, length: int, opchars: str) -> int | None:
    """Return the index of the first operator in ``text[:length]`` at paren depth 0.

    Args:
        text: Input string.
        length: Number of leading characters to consider.
        opchars: Characters to look for. Must include ``(`` and ``)``.

    Returns:
        Index of the first matching non-paren character outside any
        parentheses, or None if there is none.

    Raises:
        ParseError: ``mismatched_parentheses`` if a ``)`` closes nothing or
            the span ends with an unclosed ``(``.
    """
    depth = 0
    for i, ch in enumerate(text[:length]):
        if ch not in opchars:
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise ParseError(ErrorKind.mismatched_parentheses)
        elif depth == 0:
            return i
    if depth != 0:
        raise ParseError(ErrorKind.mismatched_parentheses)
    return None


def parse_operator(ch: str) -> Operator:
    """Map a single operator character to an Operator."""
    if ch and ch in "+-*/":
        return Operator(ch)
    raise ParseError(ErrorKind.unknown_operator, f"Unrecognized operation: {ch!r}")


def parse_expr(text: str, length: int, level: Level) -> Expression:
    """Parse ``text[:length]`` as an Expression at the given precedence level."""
    if length <= 0:
        raise ParseError(ErrorKind.empty_operand)

    pos = find_first_free_opt(text, length, level.value)
    end = pos if pos is not None else length

    if level is Level.multiplicative:
        left = None
        obj: Operand | None = parse_obj(text[:end], end)
    else:
        left = parse_expr(text[:end], end, Level.multiplicative)
        obj = None

    if pos is None:
        return Expression(left=left, obj=obj)

    op = parse_operator(text[pos])
    right = parse_expr(text[pos + 1 : length], length - pos - 1, level)
    return Expression(left=left, obj=obj, op=op, right=right)


def parse_obj(text: str, length: int) -> Operand:
    """Parse a roll, an integer constant, or a parenthesized sub-expression."""
    if length <= 0:
        raise ParseError(ErrorKind.empty_operand)
    span = text[:length]

    if span[0] == "(":
        if span[-1] != ")":
            raise ParseError(ErrorKind.mismatched_parentheses)
        return Group(parse_expr(span[1:-1], length - 2, Level.additive))
    if _is_number(span):
        return Constant(int(span))
    return parse_roll(span, length)


def parse_roll(text: str, length: int) -> Roll:
    """Parse ``XdY`` with an optional trailing modifier such as ``c3``."""
    if length <= 0:
        raise ParseError(ErrorKind.empty_operand)
    span = text[:length]

    d_loc = span.find("d")
    if d_loc < 0:
        raise ParseError(ErrorKind.missing_delimiter)

    count_text = span[:d_loc]
    rest = span[d_loc + 1 :]

    mod_loc = next((i for i, ch in enumerate(rest) if ch in _MODIFIER_CHARS), None)
    modifier = None
    if mod_loc is not None:
        modifier = parse_modifier(rest[mod_loc:], len(rest) - mod_loc)
        sides_text = rest[:mod_loc]
    else:
        sides_text = rest

    if not count_text or not sides_text:
        raise ParseError(ErrorKind.empty_constant)
    if not _is_number(count_text) or not _is_number(sides_text):
        raise ParseError(ErrorKind.invalid_constant)

    count = int(count_text)
    sides = int(sides_text)
    if count == 0:
        raise ParseError(ErrorKind.invalid_constant, "Die count must be at least 1.")
    if sides == 0:
        raise ParseError(ErrorKind.invalid_constant, "Dice must have at least one side.")
    return Roll(count=count, sides=sides, modifier=modifier)


def parse_modifier(text: str, length: int) -> Modifier:
    """Parse a modifier letter followed by its integer constant."""
    if length <= 0:
        raise ParseError(ErrorKind.unknown_modifier, "Missing Modifier.")
    span = text[:length]

    if span[0] not in _MODIFIER_CHARS:
        raise ParseError(ErrorKind.unknown_modifier)
    kind = ModifierKind(span[0])

    value_text = span[1:]
    if not value_text:
        raise ParseError(ErrorKind.missing_modifier_constant)
    if not _is_number(value_text):
        raise ParseError(ErrorKind.invalid_constant)
    return Modifier(kind=kind, value=int(value_text))


def parse(text: str, length: int | None = None) -> Expression:
    """Parse a complete dice expression.

    Args:
        text: Expression string, e.g. ``"(1d20c1)*2"``.
        length: How many leading characters of ``text`` belong to the
            expression. Defaults to all of it.

    Returns:
        Root Expression of the syntax tree.

    Raises:
        DiceError: If the expression is malformed or too deeply nested to build.
    """
    if length is None:
        length = len(text)
    try:
        return parse_expr(text, length, Level.additive)
    except DiceError as exc:
        logger.debug("Failed to parse %r: %s", text[:length], exc.kind.value)
        raise
    except (MemoryError, RecursionError) as exc:
        logger.warning("Ran out of room building tree for %d-char expression", length)
        raise ParseError(ErrorKind.allocation_failure) from exc
