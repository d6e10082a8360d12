"""Dividend income received to date and announced payments still to come."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from portfolio_ledger.fx import CurrencyConverter
from portfolio_ledger.models import Country, Position, Transaction, TransactionType

# Interest on equity (JCP) is withheld at source for local holders; plain
# dividends are not. Foreign payments lose the US treaty withholding.
JCP_WITHHOLDING_RATE = 0.15
FOREIGN_WITHHOLDING_RATE = 0.30


class DividendKind(str, Enum):
    DIVIDEND = "DIVIDEND"
    JCP = "JCP"


@dataclass(frozen=True)
class AnnouncedDividend:
    id: str
    ticker: str
    country: Country
    ex_date: date
    payment_date: date
    amount_per_share: float
    kind: DividendKind = DividendKind.DIVIDEND


@dataclass(frozen=True)
class MonthlyAmount:
    month: str
    amount: float


@dataclass
class DividendIncome:
    total_local: float = 0.0
    total_foreign: float = 0.0
    total_consolidated: float = 0.0
    by_month: List[MonthlyAmount] = field(default_factory=list)


@dataclass(frozen=True)
class DividendForecast:
    dividend: AnnouncedDividend
    quantity: float
    gross_amount: float
    tax_rate: float
    tax_amount: float
    net_amount: float
    net_amount_local: float


@dataclass
class DividendForecastReport:
    items: List[DividendForecast]
    total_net_local: float


def withholding_rate(country: Country, kind: DividendKind) -> float:
    if country == Country.USA:
        return FOREIGN_WITHHOLDING_RATE
    if kind == DividendKind.JCP:
        return JCP_WITHHOLDING_RATE
    return 0.0


def received_dividends(
    transactions: Iterable[Transaction], converter: CurrencyConverter
) -> DividendIncome:
    """Net dividend cash per currency and per month (local currency, newest first)."""

    income = DividendIncome()
    months: Dict[str, float] = {}
    for tx in transactions:
        if tx.type != TransactionType.DIVIDEND:
            continue
        amount = tx.quantity * tx.unit_price - tx.fees
        if tx.country == converter.local_country:
            income.total_local += amount
        else:
            income.total_foreign += amount
        months[tx.month] = months.get(tx.month, 0.0) + converter.to_local_currency(amount, tx.country)

    income.total_consolidated = income.total_local + converter.to_local_currency(
        income.total_foreign, Country.USA
    )
    income.by_month = [
        MonthlyAmount(month=month, amount=amount)
        for month, amount in sorted(months.items(), reverse=True)
    ]
    return income


def forecast_dividends(
    announced: Iterable[AnnouncedDividend],
    positions: Sequence[Position],
    converter: CurrencyConverter,
) -> DividendForecastReport:
    """Project net receipts from announced dividends using the current holdings.

    The holding is looked up by ticker alone; the first matching position wins.
    """

    items: List[DividendForecast] = []
    for dividend in announced:
        position = next((p for p in positions if p.ticker == dividend.ticker), None)
        quantity = position.total_quantity if position is not None else 0.0
        gross = quantity * dividend.amount_per_share
        rate = withholding_rate(dividend.country, dividend.kind)
        tax = gross * rate
        net = gross - tax
        items.append(
            DividendForecast(
                dividend=dividend,
                quantity=quantity,
                gross_amount=gross,
                tax_rate=rate,
                tax_amount=tax,
                net_amount=net,
                net_amount_local=converter.to_local_currency(net, dividend.country),
            )
        )
    items.sort(key=lambda item: item.dividend.payment_date)
    return DividendForecastReport(
        items=items,
        total_net_local=sum(item.net_amount_local for item in items),
    )


__all__ = [
    "FOREIGN_WITHHOLDING_RATE",
    "JCP_WITHHOLDING_RATE",
    "AnnouncedDividend",
    "DividendForecast",
    "DividendForecastReport",
    "DividendIncome",
    "DividendKind",
    "MonthlyAmount",
    "forecast_dividends",
    "received_dividends",
    "withholding_rate",
]
