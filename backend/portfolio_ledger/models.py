"""Domain models used by the portfolio ledger engine."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Deque, Dict, List, Optional

EPSILON = 1e-8


class Country(str, Enum):
    BR = "BR"
    USA = "EUA"


class AssetCategory(str, Enum):
    VARIABLE = "Renda Variável"
    FIXED = "Renda Fixa"
    FII = "Fundo Imobiliário"


class TransactionType(str, Enum):
    BUY = "Compra"
    SELL = "Venda"
    DIVIDEND = "Dividendo"
    BONUS = "Bonificação"
    SPLIT = "Desdobramento/Grupamento"
    REDEMPTION = "Resgate"


@dataclass(frozen=True)
class Transaction:
    """A single market event as stored by the document store."""

    id: str
    date: date
    ticker: str
    broker: str
    country: Country
    category: AssetCategory
    type: TransactionType
    quantity: float
    unit_price: float
    fees: float = 0.0
    split_from: Optional[float] = None
    split_to: Optional[float] = None
    maturity_date: Optional[date] = None
    interest_rate: Optional[float] = None

    @property
    def month(self) -> str:
        return self.date.strftime("%Y-%m")

    @property
    def position_key(self) -> str:
        return f"{self.country.value}:{self.ticker}:{self.broker}"

    @property
    def ticker_key(self) -> str:
        return f"{self.country.value}:{self.ticker}"


@dataclass
class Lot:
    """An open acquisition batch, consumed FIFO by sells."""

    date: date
    quantity: float
    original_quantity: float
    unit_price: float
    fees: float = 0.0

    @property
    def fee_per_unit(self) -> float:
        if self.original_quantity <= 0:
            return 0.0
        return self.fees / self.original_quantity


@dataclass
class Position:
    """Running state of one asset held at one broker."""

    ticker: str
    broker: str
    country: Country
    category: AssetCategory
    total_quantity: float = 0.0
    average_price: float = 0.0
    total_invested: float = 0.0
    total_dividends: float = 0.0
    lots: Deque[Lot] = field(default_factory=deque)
    maturity_date: Optional[date] = None
    interest_rate: Optional[float] = None

    @property
    def key(self) -> str:
        return f"{self.country.value}:{self.ticker}:{self.broker}"

    @property
    def is_active(self) -> bool:
        return self.total_quantity > EPSILON or self.total_dividends > EPSILON


@dataclass(frozen=True)
class MatchedLot:
    """Audit record of how much one lot contributed to a sale."""

    buy_date: date
    quantity: float
    buy_price: float
    cost_basis: float


@dataclass(frozen=True)
class RealizedGainDetail:
    """Outcome of one Sell or Redemption."""

    id: str
    date: date
    ticker: str
    broker: str
    country: Country
    category: AssetCategory
    quantity: float
    sell_price: float
    cost_basis: float
    gain: float
    month: str
    unmatched_quantity: float = 0.0


@dataclass(frozen=True)
class MonthlyRealizedGain:
    month: str
    gain: float


@dataclass
class TaxMonthlySummary:
    """Capital-gains tax position for one calendar month."""

    month: str
    total_sales_brl: float = 0.0
    taxable_gain_brl: float = 0.0
    tax_due_brl: float = 0.0
    is_exempt: bool = False
    details: List[RealizedGainDetail] = field(default_factory=list)


@dataclass
class HistoricalPoint:
    date: date
    equity: float
    invested: float


@dataclass
class ConsolidatedPortfolio:
    """Everything a consolidation run hands to the reporting layer."""

    positions: List[Position]
    realized_gains: List[MonthlyRealizedGain]
    sell_matches: Dict[str, List[MatchedLot]]
    realized_gain_details: List[RealizedGainDetail]
    historical_equity: List[HistoricalPoint]
    tax_report: List[TaxMonthlySummary]


__all__ = [
    "EPSILON",
    "AssetCategory",
    "ConsolidatedPortfolio",
    "Country",
    "HistoricalPoint",
    "Lot",
    "MatchedLot",
    "MonthlyRealizedGain",
    "Position",
    "RealizedGainDetail",
    "TaxMonthlySummary",
    "Transaction",
    "TransactionType",
]
