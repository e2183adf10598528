"""Tuner service — the read/write surface the HTTP layer talks to."""

from __future__ import annotations

import logging
import math
from typing import Any

from evotune.evolution.engine import EvolutionEngine
from evotune.exceptions import ValidationError
from evotune.types import EvolutionState, ParameterVector

logger = logging.getLogger(__name__)


def parse_score(raw: Any) -> float:
    """Turn a submitted score into a finite float or raise ValidationError."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"score must be a number, got {raw!r}")
    if isinstance(raw, str):
        raw = raw.strip()
        # float() also takes Python digit separators such as "1_000"
        if "_" in raw:
            raise ValidationError(f"score must be a number, got {raw!r}")
    try:
        score = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"score must be a number, got {raw!r}") from None
    if not math.isfinite(score):
        raise ValidationError(f"score must be finite, got {raw!r}")
    return score


class TunerService:
    """Stateless facade over the engine's committed state."""

    def __init__(self, engine: EvolutionEngine) -> None:
        self._engine = engine

    async def get_current(self) -> ParameterVector:
        state = await self._engine.snapshot()
        return dict(state.current)

    async def get_stable(self) -> ParameterVector:
        state = await self._engine.snapshot()
        return dict(state.stable)

    async def submit_feedback(self, raw_score: Any) -> EvolutionState:
        try:
            score = parse_score(raw_score)
        except ValidationError as e:
            logger.info("Rejected feedback: %s", e)
            raise
        return await self._engine.submit_feedback(score)
