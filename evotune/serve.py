"""evotune server — load config, restore state, then serve HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import uvicorn

from evotune.api.app import app, configure
from evotune.config import TunerConfig, load_tuner_config, settings
from evotune.evolution.engine import EvolutionEngine
from evotune.evolution.service import TunerService
from evotune.evolution.store import StateStore

_logger = logging.getLogger(__name__)


def build_service(config: TunerConfig, data_dir: Path) -> tuple[EvolutionEngine, TunerService]:
    store = StateStore(data_dir, config.initial_data)
    engine = EvolutionEngine(
        store,
        identity=config.id,
        mutation_rates=config.mutation_rates,
        generation_duration=config.generation_duration,
    )
    return engine, TunerService(engine)


async def main(config: TunerConfig | None = None, data_dir: Path | None = None) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if config is None:
        config = load_tuner_config(settings.config_path)
    _logger.info("Config: %s", config.model_dump(by_alias=True))

    engine, service = build_service(config, data_dir or settings.data_dir)

    # State must be loaded (or bootstrapped) before the first request
    state = await engine.start()
    _logger.info("Data: %s", state.to_record())

    configure(service)

    server = uvicorn.Server(uvicorn.Config(
        app,
        host=settings.host,
        port=config.server,
        log_level=settings.log_level.lower(),
    ))
    try:
        await server.serve()
    finally:
        configure(None)


if __name__ == "__main__":
    asyncio.run(main())
