"""Random draw sources for the roll executor."""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Protocol

from dicer.errors import ErrorKind, EvaluationError


class Drawer(Protocol):
    def draw(self, sides: int) -> int:
        """Return an integer uniformly distributed in [1, sides]."""
        ...


class RandomSource:
    """Pseudo-random drawer seeded once at construction.

    Args:
        seed: Fixed seed for reproducible rolls. None seeds from OS entropy.
            Ignored when ``rng`` is given.
        max_draws: Optional cap on the number of draws. The draw after the cap
            raises EvaluationError, which bounds pathological reroll and
            explode thresholds. None leaves draws unbounded.
        rng: Existing generator to draw from, so several capped sources can
            share one seeded stream.
    """

    def __init__(
        self,
        seed: int | None = None,
        max_draws: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random(seed)
        self.max_draws = max_draws
        self.draws = 0

    def draw(self, sides: int) -> int:
        if self.max_draws is not None and self.draws >= self.max_draws:
            raise EvaluationError(
                ErrorKind.draw_limit_exceeded,
                f"Too many dice drawn (max {self.max_draws}).",
            )
        self.draws += 1
        return self._rng.randint(1, sides)


class SequenceSource:
    """Drawer that replays a fixed list of results, ignoring ``sides``."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self._next = 0

    def draw(self, sides: int) -> int:
        if self._next >= len(self._values):
            raise IndexError(f"SequenceSource exhausted after {len(self._values)} draws")
        value = self._values[self._next]
        self._next += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self._values) - self._next
