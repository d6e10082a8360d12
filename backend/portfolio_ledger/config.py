"""Configuration for the portfolio ledger."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_LOCAL_CURRENCY = "BRL"
DEFAULT_FOREIGN_CURRENCY = "USD"
DEFAULT_USD_RATE = 5.0


class LedgerSettings(BaseSettings):
    """Runtime options for consolidation runs."""

    app_name: str = Field(default="Portfolio Ledger")
    local_currency: str = Field(default=DEFAULT_LOCAL_CURRENCY, min_length=3, max_length=3)
    foreign_currency: str = Field(default=DEFAULT_FOREIGN_CURRENCY, min_length=3, max_length=3)
    default_usd_rate: float = Field(
        default=DEFAULT_USD_RATE,
        gt=0,
        description="Foreign-to-local rate used when the caller does not supply one.",
    )
    log_level: str = Field(default="INFO")

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="portfolio-ledger")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    class Config:
        env_prefix = "LEDGER_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitised dict for logging purposes."""

        hidden = {"telemetry_otlp_endpoint"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> LedgerSettings:
    """Return cached settings, optionally overriding values for tests."""

    if overrides:
        return LedgerSettings(**overrides)
    return LedgerSettings()


__all__ = [
    "DEFAULT_FOREIGN_CURRENCY",
    "DEFAULT_LOCAL_CURRENCY",
    "DEFAULT_USD_RATE",
    "LedgerSettings",
    "get_settings",
]
