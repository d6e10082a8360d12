import pathlib
import sys
from datetime import date
from typing import Callable

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_ledger.config import get_settings  # noqa: E402
from portfolio_ledger.fx import CurrencyConverter  # noqa: E402
from portfolio_ledger.models import (  # noqa: E402
    AssetCategory,
    Country,
    Transaction,
    TransactionType,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def converter() -> CurrencyConverter:
    return CurrencyConverter(usd_rate=5.0)


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Build transactions with sensible defaults for a local stock at one broker."""

    counter = {"n": 0}

    def _make(
        type: TransactionType,
        day: date,
        quantity: float,
        unit_price: float,
        fees: float = 0.0,
        *,
        ticker: str = "PETR4",
        broker: str = "XP",
        country: Country = Country.BR,
        category: AssetCategory = AssetCategory.VARIABLE,
        id: str | None = None,
        **extra,
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=id or f"tx{counter['n']}",
            date=day,
            ticker=ticker,
            broker=broker,
            country=country,
            category=category,
            type=type,
            quantity=quantity,
            unit_price=unit_price,
            fees=fees,
            **extra,
        )

    return _make
