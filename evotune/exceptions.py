"""Custom exception hierarchy for evotune."""


class EvotuneError(Exception):
    """Base for all evotune errors."""


class ConfigError(EvotuneError):
    """Required tuner configuration is missing or invalid."""


class ValidationError(EvotuneError):
    """Feedback score could not be parsed as a finite number."""


class StorageError(EvotuneError):
    """Durable state could not be read or written."""
