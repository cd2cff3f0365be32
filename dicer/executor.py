"""Roll executor: simulates the dice of a single Roll node.

Four strategies share one draw primitive:

* basic          draw ``count`` dice and sum them
* choose n       keep the best ``n`` dice (highest for ``c``, lowest for ``w``)
* reroll below   redraw each die until it lands above the threshold
* explode above  keep adding draws to a die while they meet the threshold

Reroll and explode thresholds are not checked against the die size. A
threshold that every face satisfies draws forever unless the source caps it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dicer.rng import Drawer
from dicer.tree import ModifierKind, Roll

logger = logging.getLogger(__name__)

Narrator = Callable[[str], None]


def _say(narrate: Narrator | None, line: str) -> None:
    if narrate is None:
        return
    logger.debug("%s", line)
    narrate(line)


def execute_basic_roll(count: int, sides: int, source: Drawer, narrate: Narrator | None = None) -> int:
    _say(narrate, f"{count}d{sides}:")
    total = 0
    for _ in range(count):
        value = source.draw(sides)
        _say(narrate, f"  {value}")
        total += value
    return total


def execute_choose_roll(
    count: int,
    sides: int,
    keep: int,
    highest: bool,
    source: Drawer,
    narrate: Narrator | None = None,
) -> int:
    """Sum the ``keep`` best of ``count`` dice.

    The first ``keep`` draws fill the buffer. Each later draw goes into an
    extra slot, the buffer is re-sorted best first, and the worst slot is
    dropped. With fewer than ``keep`` dice every draw counts.
    """
    letter = "c" if highest else "w"
    _say(narrate, f"{count}d{sides}{letter}{keep}:")
    chosen: list[int] = []
    for _ in range(count):
        value = source.draw(sides)
        _say(narrate, f"  {value}")
        chosen.append(value)
        if len(chosen) > keep:
            chosen.sort(reverse=highest)
            chosen.pop()
    _say(narrate, "Chosen:" + "".join(f" {value}" for value in chosen))
    return sum(chosen)


def execute_reroll_below_roll(
    count: int, sides: int, threshold: int, source: Drawer, narrate: Narrator | None = None
) -> int:
    _say(narrate, f"{count}d{sides}b{threshold}:")
    total = 0
    for _ in range(count):
        value = source.draw(sides)
        while value <= threshold:
            _say(narrate, f"  {value} * Rerolled")
            value = source.draw(sides)
        _say(narrate, f"  {value}")
        total += value
    return total


def execute_exploding_roll(
    count: int, sides: int, threshold: int, source: Drawer, narrate: Narrator | None = None
) -> int:
    _say(narrate, f"{count}d{sides}v{threshold}:")
    total = 0
    for _ in range(count):
        value = source.draw(sides)
        die_total = value
        indent = "  "
        while value >= threshold:
            _say(narrate, f"{indent}{value} * Exploded:")
            indent = "    "
            value = source.draw(sides)
            die_total += value
        _say(narrate, f"{indent}{value}")
        total += die_total
    return total


def execute_roll(roll: Roll, source: Drawer, narrate: Narrator | None = None) -> int:
    """Roll the dice described by a Roll node and return their total.

    Args:
        roll: Parsed roll, e.g. the node for ``4d6c3``.
        source: Where die results come from.
        narrate: Optional callable receiving one line of text per step. It
            does not influence the total.

    Returns:
        Sum of the dice that count under the roll's modifier.
    """
    mod = roll.modifier
    if mod is None:
        return execute_basic_roll(roll.count, roll.sides, source, narrate)
    if mod.kind is ModifierKind.choose_highest:
        return execute_choose_roll(roll.count, roll.sides, mod.value, True, source, narrate)
    if mod.kind is ModifierKind.choose_lowest:
        return execute_choose_roll(roll.count, roll.sides, mod.value, False, source, narrate)
    if mod.kind is ModifierKind.reroll_below:
        return execute_reroll_below_roll(roll.count, roll.sides, mod.value, source, narrate)
    return execute_exploding_roll(roll.count, roll.sides, mod.value, source, narrate)
