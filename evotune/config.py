"""Configuration — process settings from the environment, tuner config from JSON."""

from __future__ import annotations

from pathlib import Path

import orjson
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from evotune.exceptions import ConfigError
from evotune.types import ParameterVector


class EvotuneSettings(BaseSettings):
    config_path: Path = Path("config.json")
    data_dir: Path = Path(".")
    host: str = "0.0.0.0"
    log_level: str = "INFO"

    model_config = {"env_prefix": "EVOTUNE_"}


settings = EvotuneSettings()


class TunerConfig(BaseModel):
    """What one tuner instance optimises and how."""

    id: str = Field(min_length=1)
    server: int = Field(default=8020, gt=0, lt=65536)
    initial_data: ParameterVector = Field(alias="initialData", min_length=1)
    mutation_rates: list[float] = Field(alias="mutationRates")
    generation_duration: int = Field(alias="generationDuration", gt=0)

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("mutation_rates")
    @classmethod
    def _non_negative(cls, rates: list[float]) -> list[float]:
        if any(rate < 0 for rate in rates):
            raise ValueError("rates must be non-negative")
        return rates


def _describe(exc: PydanticValidationError) -> str:
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or "config"
        if err["type"] == "missing":
            problems.append(f"need {field}")
        else:
            problems.append(f"{field}: {err['msg']}")
    return "; ".join(problems)


def parse_tuner_config(data: dict) -> TunerConfig:
    """Validate an already-decoded config mapping."""
    if not isinstance(data, dict):
        raise ConfigError("config: expected a JSON object")
    try:
        return TunerConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"config: {_describe(e)}") from e


def load_tuner_config(path: Path | str) -> TunerConfig:
    """Read and validate a tuner config file. Any problem is a ConfigError."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"config: cannot read {path}: {e}") from e
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ConfigError(f"config: {path} is not valid JSON: {e}") from e
    return parse_tuner_config(data)
