"""Process start-up wiring."""

from __future__ import annotations

import logging

from portfolio_ledger.config import LedgerSettings, get_settings
from portfolio_ledger.core.logging import setup_logging
from portfolio_ledger.core.telemetry import setup_telemetry

logger = logging.getLogger(__name__)


def init_runtime(settings: LedgerSettings | None = None) -> LedgerSettings:
    """Configure logging and telemetry once at process start."""

    settings = settings or get_settings()
    setup_logging(settings.log_level)
    setup_telemetry(settings)
    logger.info("Starting %s with %s", settings.app_name, settings.dict_for_logging())
    return settings


__all__ = ["init_runtime"]
