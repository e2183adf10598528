"""evotune — online (1+1) evolutionary parameter tuning over HTTP."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("evotune")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development
