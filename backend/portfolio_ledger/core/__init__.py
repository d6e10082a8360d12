"""Process-level setup: logging and telemetry."""

from .logging import setup_logging
from .runtime import init_runtime
from .telemetry import setup_telemetry

__all__ = ["init_runtime", "setup_logging", "setup_telemetry"]
