"""State store — one durable JSON record per tuner id.

Records live at ``{data_dir}/.data-{id}.json``. Writes go to a temp file
in the same directory and are moved over the record with ``Path.replace``,
so a crash leaves either the old record or the new one.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import orjson
from pydantic import ValidationError as PydanticValidationError

from evotune.exceptions import StorageError
from evotune.types import EvolutionState, ParameterVector

logger = logging.getLogger(__name__)


class StateStore:
    """Loads, bootstraps and atomically saves EvolutionState records."""

    def __init__(self, data_dir: Path | str, initial_data: ParameterVector) -> None:
        self._dir = Path(data_dir)
        self._initial = dict(initial_data)

    def path_for(self, identity: str) -> Path:
        return self._dir / f".data-{identity}.json"

    async def read(self, identity: str) -> EvolutionState | None:
        """Decode the record as stored, or None when there is none yet."""
        path = self.path_for(identity)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

        try:
            return EvolutionState.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, PydanticValidationError) as e:
            raise StorageError(f"Corrupt state record {path}: {e}") from e

    async def load(self, identity: str) -> EvolutionState:
        """Read the record, bootstrapping (and persisting) it when absent."""
        path = self.path_for(identity)
        state = await self.read(identity)
        if state is None:
            logger.info("No state at %s, bootstrapping from initial data", path)
            return await self.save(identity, EvolutionState.bootstrap(self._initial))

        reconciled = self.reconcile(state)
        if reconciled != state:
            logger.info("State at %s is missing configured parameters, filling in", path)
            return await self.save(identity, reconciled)
        return state

    async def save(self, identity: str, state: EvolutionState) -> EvolutionState:
        """Replace the record for ``identity`` with ``state``."""
        path = self.path_for(identity)
        payload = orjson.dumps(state.to_record())
        temp_path: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=path.parent,
                prefix=f"{path.name}.",
                suffix=".tmp",
            )
            try:
                os.write(fd, payload)
                os.fsync(fd)
            finally:
                os.close(fd)
            Path(temp_path).replace(path)
        except OSError as e:
            if temp_path:
                Path(temp_path).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug("State saved to %s (generation %d)", path, state.generation)
        return state

    def reconcile(self, state: EvolutionState) -> EvolutionState:
        """Fill parameters added to the initial data since the record was written.

        Values already in the record win over the initial ones.
        """
        stable = {**self._initial, **state.stable}
        current = {**self._initial, **state.current}
        if stable == state.stable and current == state.current:
            return state
        return state.model_copy(update={"stable": stable, "current": current})
