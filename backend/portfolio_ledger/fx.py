"""FX conversion helpers."""
from __future__ import annotations

from dataclasses import dataclass

from .models import Country


@dataclass(frozen=True)
class CurrencyConverter:
    """Normalize foreign-market amounts into the local currency."""

    usd_rate: float
    local_country: Country = Country.BR

    def rate_for(self, country: Country) -> float:
        """Return the multiplier that brings ``country`` amounts to local currency."""

        if country == self.local_country:
            return 1.0
        return self.usd_rate

    def to_local_currency(self, amount: float, country: Country) -> float:
        return amount * self.rate_for(country)


__all__ = ["CurrencyConverter"]
