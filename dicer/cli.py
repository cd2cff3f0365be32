"""Command-line dice roller.

Usage::

    dicer [-v | -q] <expression> [<expression> ...]
    dicer [-v | -q] -i
    dicer -help
"""

from __future__ import annotations

import argparse
import logging
import sys

from dicer.config import settings
from dicer.errors import SettingError
from dicer.rng import Drawer, RandomSource
from dicer.session import (
    Verbosity,
    apply_set_command,
    format_batch,
    is_exit_command,
    resolve_verbosity,
    roll_batch,
    split_line,
)

logger = logging.getLogger(__name__)

USAGE = (
    "Usage: dicer <flags> <expression>\n"
    " See header for expression grammar.\n"
    "Use dicer -help for a short explanation."
)

HELP = """\
General die rolls take the form of XdY.
X is the number of dice to roll and Y is the number of sides of the die for those rolls.
Die rolls can be composed with infix arithmetic operators (+, -, *, /) and can include constant values (ex. 1d4+4).

-v flag: Enables verbose printing (each individual die rolled will be displayed). Default is to print numbered roll results for overall rolls only.

-q flag: Only print the total value of each roll, newline-delimited, and nothing else (quiet mode). Useful for using the tool as input to other programs.

-i flag: Interactive mode. Enter space-separated expressions at the prompt; 'set verbosity <verbose|normal|quiet>' changes verbosity and 'exit' or 'q' leaves.

Die modifiers (appended to end of die rolls):
    c (Usage XdYcZ): Take only the Z highest results from the X dice rolled.
    v (Usage XdYvZ): Roll 'exploding' dice, wherein if a value at or above Z is rolled on a given die an extra die (of the same Y many sides) is rolled and also added to the total. Such extra dice can also explode given the same threshold.
    b (Usage XdYbZ): Reroll individual dice that fall below the threshold Z in value until they result in a value greater than Z.
    w (Usage XdYwZ): Take only the Z lowest results from the X dice rolled.
"""

PROMPT = ">>> "


class UsageError(Exception):
    """Raised when the command line cannot be understood."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dicer", add_help=False, usage=USAGE)
    parser.add_argument("-help", dest="help", action="store_true", help="Show a short explanation")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Print every die rolled")
    parser.add_argument("-q", dest="quiet", action="store_true", help="Print totals only")
    parser.add_argument("-i", dest="interactive", action="store_true", help="Interactive mode")
    parser.add_argument("expressions", nargs="*", help="Dice expressions to roll")
    return parser


def parse_options(argv: list[str]) -> argparse.Namespace:
    """Parse flags. ``-help`` is only accepted as the very first argument."""
    if not argv:
        raise UsageError("No arguments")
    if "-help" in argv[1:]:
        raise UsageError("-help must come first")
    args, unknown = build_parser().parse_known_args(argv)
    if unknown:
        raise UsageError(f"Unrecognized flags: {' '.join(unknown)}")
    return args


def run_expressions(expressions: list[str], verbosity: Verbosity, source: Drawer) -> None:
    outcomes = roll_batch(expressions, source, verbose=verbosity is Verbosity.verbose)
    for line in format_batch(outcomes, verbosity):
        print(line)


def handle_interactive_line(line: str, verbosity: Verbosity, source: Drawer) -> Verbosity:
    """Run one line of interactive input and return the verbosity that follows it."""
    if line.startswith("set "):
        try:
            verbosity, message = apply_set_command(line[4:])
        except SettingError as exc:
            print(f"ERROR: {exc}")
        else:
            print(message)
        return verbosity
    run_expressions(split_line(line), verbosity, source)
    return verbosity


def interactive_loop(verbosity: Verbosity, source: Drawer) -> None:
    print("dice, interactive mode:")
    print(PROMPT, end="", flush=True)
    for line in iter(sys.stdin.readline, ""):
        line = line[: settings.max_command_length]
        if is_exit_command(line):
            break
        verbosity = handle_interactive_line(line, verbosity, source)
        print(PROMPT, end="", flush=True)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level)
    if argv is None:
        argv = sys.argv[1:]

    try:
        args = parse_options(argv)
        if args.help:
            print(HELP)
            return 0
        if not args.interactive and not args.expressions:
            raise UsageError("No expressions")
    except UsageError as exc:
        logger.debug("Bad command line %r: %s", argv, exc)
        print(USAGE)
        return 1

    verbosity = resolve_verbosity(args.verbose, args.quiet, Verbosity(settings.verbosity))
    source = RandomSource(seed=settings.seed)

    if args.interactive:
        interactive_loop(verbosity, source)
    else:
        run_expressions(args.expressions, verbosity, source)
    return 0


if __name__ == "__main__":
    sys.exit(main())
