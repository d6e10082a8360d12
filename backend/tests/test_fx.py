import pytest

from portfolio_ledger.fx import CurrencyConverter
from portfolio_ledger.models import Country


def test_local_amounts_pass_through():
    converter = CurrencyConverter(usd_rate=5.2)
    assert converter.rate_for(Country.BR) == 1.0
    assert converter.to_local_currency(123.45, Country.BR) == 123.45


def test_foreign_amounts_use_the_rate():
    converter = CurrencyConverter(usd_rate=5.2)
    assert converter.to_local_currency(10, Country.USA) == pytest.approx(52)


def test_local_country_is_configurable():
    converter = CurrencyConverter(usd_rate=0.2, local_country=Country.USA)
    assert converter.to_local_currency(10, Country.USA) == 10
    assert converter.to_local_currency(10, Country.BR) == pytest.approx(2)
