"""Equity-versus-invested time series built during the ledger replay."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .fx import CurrencyConverter
from .models import EPSILON, Country, HistoricalPoint, Transaction, TransactionType

_INFLOWS = (TransactionType.BUY, TransactionType.BONUS)
_OUTFLOWS = (TransactionType.SELL, TransactionType.REDEMPTION)


@dataclass
class ReplayTotals:
    """Portfolio-wide running totals, in local currency."""

    invested: float = 0.0
    realized_cash: float = 0.0


@dataclass
class EquityCurveBuilder:
    """Mark the whole portfolio to market after every transaction.

    Quantities and prices are tracked per ``country:ticker`` regardless of
    broker. The price used for a key is the unit price of the latest
    transaction that touched it. Points are kept one per date; later
    transactions on the same day overwrite the day's point.
    """

    converter: CurrencyConverter
    held_quantities: Dict[str, float] = field(default_factory=dict)
    last_prices: Dict[str, float] = field(default_factory=dict)
    countries: Dict[str, Country] = field(default_factory=dict)
    points: List[HistoricalPoint] = field(default_factory=list)

    def observe_price(self, tx: Transaction) -> None:
        self.last_prices[tx.ticker_key] = tx.unit_price
        self.countries[tx.ticker_key] = tx.country

    def record(self, tx: Transaction, totals: ReplayTotals) -> HistoricalPoint:
        key = tx.ticker_key
        if tx.type in _INFLOWS:
            change = tx.quantity
        elif tx.type in _OUTFLOWS:
            change = -tx.quantity
        else:
            change = 0.0
        self.held_quantities[key] = self.held_quantities.get(key, 0.0) + change

        equity = self.market_value() + totals.realized_cash
        last = self.points[-1] if self.points else None
        if last is not None and last.date == tx.date:
            last.equity = equity
            last.invested = totals.invested
            return last
        point = HistoricalPoint(date=tx.date, equity=equity, invested=totals.invested)
        self.points.append(point)
        return point

    def market_value(self) -> float:
        total = 0.0
        for key, quantity in self.held_quantities.items():
            if quantity <= EPSILON:
                continue
            price = self.last_prices.get(key, 0.0)
            total += self.converter.to_local_currency(quantity * price, self.countries[key])
        return total


__all__ = ["EquityCurveBuilder", "ReplayTotals"]
