"""Core types shared across evotune subsystems."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, Field

# ── Parameter vector ─────────────────────────────────────────────────────────

ParameterVector: TypeAlias = dict[str, float]


# ── Evolution state ──────────────────────────────────────────────────────────


class EvolutionState(BaseModel):
    """The single persisted record of a tuner.

    Snapshots are immutable: every update builds a new one with
    ``model_copy(update=...)``. ``best_score`` is stored as ``score``.
    """

    stable: ParameterVector
    current: ParameterVector
    generation: int = Field(default=0, ge=0)
    best_score: float = Field(default=0.0, alias="score")

    model_config = {"populate_by_name": True, "frozen": True}

    @classmethod
    def bootstrap(cls, initial: ParameterVector) -> EvolutionState:
        """Generation 0, score 0, stable and current both set to ``initial``."""
        return cls(
            stable=dict(initial),
            current=dict(initial),
            generation=0,
            best_score=0.0,
        )

    def to_record(self) -> dict:
        """Field-name encoding used on disk and over HTTP."""
        return self.model_dump(by_alias=True)
