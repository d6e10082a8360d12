"""Portfolio consolidation and tax-lot accounting engine."""

from .fx import CurrencyConverter
from .models import (
    AssetCategory,
    ConsolidatedPortfolio,
    Country,
    HistoricalPoint,
    Lot,
    MatchedLot,
    Position,
    RealizedGainDetail,
    TaxMonthlySummary,
    Transaction,
    TransactionType,
)
from .pipeline import consolidate

__all__ = [
    "AssetCategory",
    "ConsolidatedPortfolio",
    "Country",
    "CurrencyConverter",
    "HistoricalPoint",
    "Lot",
    "MatchedLot",
    "Position",
    "RealizedGainDetail",
    "TaxMonthlySummary",
    "Transaction",
    "TransactionType",
    "consolidate",
]
