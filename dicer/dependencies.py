"""FastAPI dependencies for Dicer."""

from __future__ import annotations

import random

from dicer.config import settings
from dicer.rng import Drawer, RandomSource

# Seeded once per process and shared by every request's source.
_rng = random.Random(settings.seed)


def get_random_source() -> Drawer:
    """Return a new draw source for one request, capped at ``api_max_draws``.

    Each request counts its own draws. Override this dependency in tests to
    feed a fixed sequence of die results.
    """
    return RandomSource(rng=_rng, max_draws=settings.api_max_draws)
