"""Shared test fixtures for the dicer test suite.

Core tests (parser, executor, evaluator, session) need no fixtures beyond a
SequenceSource built inline: it replays a fixed list of die results so every
roll is deterministic.

HTTP tests use two fixtures:

client  (function scope)
    An AsyncClient wired to the FastAPI app over ASGITransport.

draws  (function scope)
    A callable that installs a SequenceSource as the app's random source
    dependency, e.g. ``draws(6, 6, 2)``. The override is removed after the
    test.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dicer.dependencies import get_random_source
from dicer.main import app
from dicer.rng import SequenceSource


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def draws():
    """Install a fixed sequence of die results for the duration of a test."""

    def _install(*values: int) -> SequenceSource:
        source = SequenceSource(values)
        app.dependency_overrides[get_random_source] = lambda: source
        return source

    yield _install

    app.dependency_overrides.pop(get_random_source, None)
