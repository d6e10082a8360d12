"""Pydantic schemas for stored transaction documents and consolidation output."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from portfolio_ledger.models import (
    AssetCategory,
    ConsolidatedPortfolio,
    Country,
    Transaction,
    TransactionType,
)


class TransactionDocument(BaseModel):
    """A transaction exactly as the document store hands it over."""

    id: str = Field(..., min_length=1)
    date: date
    ticker: str = Field(..., min_length=1, examples=["PETR4"])
    broker: str = Field(..., min_length=1, examples=["XP"])
    country: Country
    category: AssetCategory
    type: TransactionType
    quantity: float = Field(..., ge=0)
    unit_price: float = Field(..., alias="unitPrice")
    fees: float = Field(default=0.0, ge=0)
    split_from: float | None = Field(default=None, alias="splitFrom")
    split_to: float | None = Field(default=None, alias="splitTo")
    maturity_date: date | None = Field(default=None, alias="maturityDate")
    interest_rate: float | None = Field(default=None, alias="interestRate")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "tx-1",
                "date": "2024-03-01",
                "ticker": "PETR4",
                "broker": "XP",
                "country": "BR",
                "category": "Renda Variável",
                "type": "Compra",
                "quantity": 100,
                "unitPrice": 35.2,
                "fees": 4.9,
            }
        }

    @field_validator("maturity_date", "interest_rate", "split_from", "split_to", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_split_ratio(self) -> "TransactionDocument":
        if self.type == TransactionType.SPLIT:
            if self.split_from is None or self.split_from <= 0:
                raise ValueError("splitFrom must be positive for a split")
            if self.split_to is None or self.split_to <= 0:
                raise ValueError("splitTo must be positive for a split")
        return self

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.date,
            ticker=self.ticker,
            broker=self.broker,
            country=self.country,
            category=self.category,
            type=self.type,
            quantity=self.quantity,
            unit_price=self.unit_price,
            fees=self.fees,
            split_from=self.split_from,
            split_to=self.split_to,
            maturity_date=self.maturity_date,
            interest_rate=self.interest_rate,
        )


class _ResponseModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class LotSchema(_ResponseModel):
    date: date
    quantity: float
    original_quantity: float
    unit_price: float
    fees: float


class PositionSchema(_ResponseModel):
    ticker: str
    broker: str
    country: Country
    category: AssetCategory
    total_quantity: float
    average_price: float
    total_invested: float
    total_dividends: float
    lots: list[LotSchema]
    maturity_date: date | None = None
    interest_rate: float | None = None


class MatchedLotSchema(_ResponseModel):
    buy_date: date
    quantity: float
    buy_price: float
    cost_basis: float


class RealizedGainDetailSchema(_ResponseModel):
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


class MonthlyRealizedGainSchema(_ResponseModel):
    month: str
    gain: float


class TaxMonthlySummarySchema(_ResponseModel):
    month: str
    total_sales_brl: float = Field(..., alias="totalSalesBRL")
    taxable_gain_brl: float = Field(..., alias="taxableGainBRL")
    tax_due_brl: float = Field(..., alias="taxDueBRL")
    is_exempt: bool
    details: list[RealizedGainDetailSchema]


class HistoricalPointSchema(_ResponseModel):
    date: date
    equity: float
    invested: float


class ConsolidatedPortfolioSchema(_ResponseModel):
    positions: list[PositionSchema]
    realized_gains: list[MonthlyRealizedGainSchema]
    sell_matches: dict[str, list[MatchedLotSchema]]
    realized_gain_details: list[RealizedGainDetailSchema]
    historical_equity: list[HistoricalPointSchema]
    tax_report: list[TaxMonthlySummarySchema]


def parse_transactions(documents: list[dict[str, Any]]) -> list[Transaction]:
    """Validate raw store documents; raises ``pydantic.ValidationError`` on bad input."""

    return [TransactionDocument.model_validate(doc).to_transaction() for doc in documents]


def serialize_consolidation(result: ConsolidatedPortfolio) -> dict[str, Any]:
    """JSON-ready, camelCase rendering of a consolidation run."""

    return ConsolidatedPortfolioSchema.model_validate(result).model_dump(mode="json", by_alias=True)


__all__ = [
    "ConsolidatedPortfolioSchema",
    "HistoricalPointSchema",
    "LotSchema",
    "MatchedLotSchema",
    "MonthlyRealizedGainSchema",
    "PositionSchema",
    "RealizedGainDetailSchema",
    "TaxMonthlySummarySchema",
    "TransactionDocument",
    "parse_transactions",
    "serialize_consolidation",
]
