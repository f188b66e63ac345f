"""Shared fixtures: a controllable clock and self-closing caches."""

import logging

import pytest

from onemin_cache import TTLCache
from onemin_cache.observability import configure_logging

configure_logging(logging.DEBUG)


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_cache(clock):
    """Build caches on the fake clock and close them after the test."""
    created: list[TTLCache] = []

    def factory(options=None, cache_id="test-cache", **kwargs):
        kwargs.setdefault("clock", clock)
        cache = TTLCache(cache_id, options, **kwargs)
        created.append(cache)
        return cache

    yield factory

    for cache in created:
        cache.close()
