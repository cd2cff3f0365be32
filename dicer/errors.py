"""Error taxonomy for parsing and rolling dice expressions."""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Category of a dice expression failure."""

    empty_operand = "empty_operand"
    mismatched_parentheses = "mismatched_parentheses"
    missing_delimiter = "missing_delimiter"
    empty_constant = "empty_constant"
    invalid_constant = "invalid_constant"
    unknown_modifier = "unknown_modifier"
    missing_modifier_constant = "missing_modifier_constant"
    unknown_operator = "unknown_operator"
    allocation_failure = "allocation_failure"
    division_by_zero = "division_by_zero"
    draw_limit_exceeded = "draw_limit_exceeded"


# Default messages, worded the way the command-line tool reports them.
MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.empty_operand: "Missing Object.",
    ErrorKind.mismatched_parentheses: "Mismatched parentheses.",
    ErrorKind.missing_delimiter: "Garbled roll (no 'd' delimiter).",
    ErrorKind.empty_constant: "Missing constant.",
    ErrorKind.invalid_constant: "Invalid constant.",
    ErrorKind.unknown_modifier: "Invalid Modifier Character.",
    ErrorKind.missing_modifier_constant: "Missing Modifier Constant.",
    ErrorKind.unknown_operator: "Unrecognized operation.",
    ErrorKind.allocation_failure: "Out of memory.",
    ErrorKind.division_by_zero: "Division by zero.",
    ErrorKind.draw_limit_exceeded: "Too many dice drawn.",
}


class DiceError(ValueError):
    """Raised when a dice expression cannot be parsed or rolled.

    Attributes:
        kind: Which failure occurred.
        message: Human-readable description.
    """

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or MESSAGES[kind]
        super().__init__(self.message)


class ParseError(DiceError):
    """Raised when an expression does not match the dice grammar."""


class EvaluationError(DiceError):
    """Raised when a well-formed expression cannot be rolled."""


class SettingError(ValueError):
    """Raised for an unrecognized interactive ``set`` command."""
