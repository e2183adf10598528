"""Evolution engine — the (1+1) accept/mutate state machine.

Every feedback submission bumps the generation. Every
``generation_duration`` generations the candidate is judged: if the score
beats the best one seen so far, the candidate becomes the stable vector.
Either way a fresh mutation of the candidate is put up for evaluation.

Submissions are applied one at a time, in arrival order. A new state is
only published after the store has saved it.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

import structlog

from evotune.evolution.mutator import RandomSource, mutate
from evotune.evolution.store import StateStore
from evotune.exceptions import EvotuneError
from evotune.types import EvolutionState

logger = structlog.get_logger()


class EvolutionEngine:
    """Owns the live EvolutionState and serialises every change to it."""

    def __init__(
        self,
        store: StateStore,
        identity: str,
        mutation_rates: Sequence[float],
        generation_duration: int,
        rng: RandomSource | None = None,
    ) -> None:
        if generation_duration <= 0:
            raise ValueError("generation_duration must be positive")
        self._store = store
        self._identity = identity
        self._rates = list(mutation_rates)
        self._duration = generation_duration
        self._rng = rng
        self._state: EvolutionState | None = None
        self._ready = asyncio.Event()
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> EvolutionState:
        if self._state is None:
            raise EvotuneError("Evolution engine has not been started")
        return self._state

    async def start(self) -> EvolutionState:
        """Load (or bootstrap) the persisted state. Safe to call twice."""
        async with self._lock:
            if self._state is None:
                self._state = await self._store.load(self._identity)
                self._ready.set()
                logger.info(
                    "evolution.loaded",
                    identity=self._identity,
                    generation=self._state.generation,
                    score=self._state.best_score,
                )
        return self._state

    async def snapshot(self) -> EvolutionState:
        """Latest committed state, waiting for start() if necessary."""
        await self._ready.wait()
        return self.state

    async def submit_feedback(self, score: float) -> EvolutionState:
        """Apply one score and return the persisted result.

        The update runs in its own task so that cancelling the caller does
        not abandon a submission that is already queued.
        """
        task = asyncio.ensure_future(self._apply(score))
        self._tasks.add(task)
        task.add_done_callback(self._on_applied)
        return await asyncio.shield(task)

    def _on_applied(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("evolution.save_failed", identity=self._identity, error=str(exc))

    async def _apply(self, score: float) -> EvolutionState:
        await self._ready.wait()
        async with self._lock:
            state = self.next_state(self.state, score)
            saved = await self._store.save(self._identity, state)
            self._state = saved
            return saved

    def next_state(self, state: EvolutionState, score: float) -> EvolutionState:
        """Pure transition: one generation forward for ``score``."""
        generation = state.generation + 1
        update: dict = {"generation": generation}
        boundary = generation % self._duration == 0
        promoted = False
        if boundary:
            current = state.current
            if score > state.best_score:
                update["stable"] = current
                update["best_score"] = score
                promoted = True
            update["current"] = mutate(current, self._rates, self._rng)
        logger.info(
            "evolution.learn",
            score=score,
            generation=generation,
            boundary=boundary,
            promoted=promoted,
        )
        return state.model_copy(update=update)
