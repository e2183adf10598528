"""Shared test fixtures — a store in a temp dir and a predictable random source."""

from __future__ import annotations

import pytest

from evotune.evolution.engine import EvolutionEngine
from evotune.evolution.store import StateStore


class FakeRandom:
    """Random source with a fixed shuffle order and canned draws. No entropy."""

    def __init__(self, draws: list[float] | None = None, order: list[str] | None = None):
        self._draws = list(draws or [])
        self._order = order
        self.shuffles: list[list] = []

    def shuffle(self, x: list) -> None:
        self.shuffles.append(list(x))
        if self._order is not None:
            x[:] = list(self._order)

    def random(self) -> float:
        if self._draws:
            return self._draws.pop(0)
        return 0.5  # zero perturbation


@pytest.fixture
def initial():
    return {"speed": 10.0, "gain": 2.0, "bias": -4.0}


@pytest.fixture
def fake_random():
    def _factory(draws: list[float] | None = None, order: list[str] | None = None) -> FakeRandom:
        return FakeRandom(draws=draws, order=order)
    return _factory


@pytest.fixture
def store(tmp_path, initial):
    return StateStore(tmp_path, initial)


@pytest.fixture
def make_engine(store):
    def _factory(duration: int = 3, rates=(0.5, 0.5, 0.5), rng=None) -> EvolutionEngine:
        return EvolutionEngine(
            store,
            identity="test",
            mutation_rates=list(rates),
            generation_duration=duration,
            rng=rng,
        )
    return _factory
