"""Pydantic schema exports."""

from .portfolio import (
    ConsolidatedPortfolioSchema,
    HistoricalPointSchema,
    PositionSchema,
    RealizedGainDetailSchema,
    TaxMonthlySummarySchema,
    TransactionDocument,
    parse_transactions,
    serialize_consolidation,
)

__all__ = [
    "ConsolidatedPortfolioSchema",
    "HistoricalPointSchema",
    "PositionSchema",
    "RealizedGainDetailSchema",
    "TaxMonthlySummarySchema",
    "TransactionDocument",
    "parse_transactions",
    "serialize_consolidation",
]
