"""Rolling sessions: batches of expressions, verbosity, and result formatting.

This is the layer between the core parser/evaluator and the surfaces that
talk to people (the command line, the interactive loop, the HTTP API). It
decides how errors are reported and makes sure one bad expression never
stops the rest of a batch.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from dicer.errors import DiceError, SettingError
from dicer.evaluator import evaluate
from dicer.parser import parse
from dicer.rng import Drawer

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 28

_VERBOSITY_WORDS: dict[str, str] = {
    "verbose": "verbose",
    "v": "verbose",
    "-v": "verbose",
    "normal": "default",
    "default": "default",
    "quiet": "quiet",
    "q": "quiet",
    "-q": "quiet",
}

_VERBOSITY_MESSAGES: dict[str, str] = {
    "verbose": "Verbosity set to verbose (-v)",
    "default": "Verbosity set to default (normal)",
    "quiet": "Verbosity set to quiet (-q)",
}


class Verbosity(str, enum.Enum):
    """How much the roller prints per expression."""

    quiet = "quiet"
    default = "default"
    verbose = "verbose"


def resolve_verbosity(verbose: bool, quiet: bool, fallback: Verbosity = Verbosity.default) -> Verbosity:
    """Combine -v and -q flags. Asking for both cancels out to default."""
    if verbose and quiet:
        return Verbosity.default
    if verbose:
        return Verbosity.verbose
    if quiet:
        return Verbosity.quiet
    return fallback


@dataclass
class RollOutcome:
    """Result of rolling one expression of a batch."""

    index: int
    expression: str
    total: int | None = None
    error: DiceError | None = None
    narration: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def roll_expression(text: str, source: Drawer, verbose: bool = False, index: int = 1) -> RollOutcome:
    """Parse and roll one expression, capturing any DiceError in the outcome."""
    outcome = RollOutcome(index=index, expression=text)
    narrate = outcome.narration.append if verbose else None
    try:
        tree = parse(text)
        outcome.total = evaluate(tree, source, narrate)
    except DiceError as exc:
        logger.debug("Roll %d (%r) failed: %s", index, text, exc.kind.value)
        outcome.error = exc
    return outcome


def roll_batch(expressions: Iterable[str], source: Drawer, verbose: bool = False) -> list[RollOutcome]:
    """Roll each expression in order; failures stay local to their expression."""
    return [
        roll_expression(text, source, verbose=verbose, index=i)
        for i, text in enumerate(expressions, start=1)
    ]


def split_line(line: str) -> list[str]:
    """Split an interactive input line into its space-separated expressions."""
    return line.split()


def format_outcome(outcome: RollOutcome, verbosity: Verbosity) -> list[str]:
    """Render an outcome as the lines the command-line roller prints."""
    if outcome.error is not None:
        result = f"ERROR: {outcome.error.message}"
    elif verbosity is Verbosity.verbose:
        result = f"Total: {outcome.total}"
    else:
        result = str(outcome.total)

    if verbosity is Verbosity.quiet:
        return [result]
    if verbosity is Verbosity.default:
        return [f"Roll {outcome.index}: {result}"]
    return [
        f"Roll {outcome.index}:",
        SEPARATOR,
        *outcome.narration,
        result,
        SEPARATOR,
    ]


def format_batch(outcomes: list[RollOutcome], verbosity: Verbosity) -> list[str]:
    lines = [SEPARATOR] if verbosity is Verbosity.verbose and outcomes else []
    for outcome in outcomes:
        lines.extend(format_outcome(outcome, verbosity))
    return lines


def apply_set_command(command: str) -> tuple[Verbosity, str]:
    """Apply the argument of an interactive ``set`` command.

    Args:
        command: Text after ``set ``, e.g. ``"verbosity quiet"``.

    Returns:
        The new verbosity and a confirmation message to print.

    Raises:
        SettingError: If the setting or its value is not recognized.
    """
    name, _, value = command.strip().partition(" ")
    if name != "verbosity" or not value:
        raise SettingError("Unrecognized setting.")
    word = _VERBOSITY_WORDS.get(value.strip())
    if word is None:
        raise SettingError("Unrecognized verbosity setting.")
    return Verbosity(word), _VERBOSITY_MESSAGES[word]


def is_exit_command(line: str) -> bool:
    """True for lines that end an interactive session: ESC, ``q...``, or ``exit``."""
    return line.startswith(("\x1b", "q")) or line.strip() == "exit"
