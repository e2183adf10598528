"""Mutator — perturbs a parameter vector by per-position relative rates.

Parameter names are shuffled before being paired with the rate sequence,
so a given rate lands on a different parameter from one mutation to the
next. Names left over once the rates run out get rate 0.
"""

from __future__ import annotations

import logging
import random
from itertools import zip_longest
from typing import Protocol, Sequence

from evotune.types import ParameterVector

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float: ...

    def shuffle(self, x: list) -> None: ...


def mutate(
    vector: ParameterVector,
    mutation_rates: Sequence[float],
    rng: RandomSource | None = None,
) -> ParameterVector:
    """Return a new vector with every value moved by up to ±rate of itself."""
    rng = rng or random
    names = list(vector)
    rng.shuffle(names)

    mutated: ParameterVector = {}
    for name, rate in zip_longest(names, mutation_rates[: len(names)]):
        rate = rate or 0.0
        value = vector[name]
        mutation = rate * 2 * (rng.random() - 0.5)
        new_value = value + value * mutation
        if mutation:
            logger.debug(
                "Mutation for %s with mutation=%s : %s -> %s",
                name, mutation, value, new_value,
            )
        mutated[name] = new_value
    return mutated
