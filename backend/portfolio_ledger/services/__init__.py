"""Reporting services built on top of a consolidation run."""

from .dividends import AnnouncedDividend, DividendKind, forecast_dividends, received_dividends
from .reports import equity_curve_frame, realized_gains_frame, tax_report_frame
from .valuation import (
    InMemoryPriceSource,
    PriceSource,
    allocation_by_asset,
    allocation_by_category,
    mark_to_market,
    summarize_by_broker,
    summarize_portfolio,
)

__all__ = [
    "AnnouncedDividend",
    "DividendKind",
    "InMemoryPriceSource",
    "PriceSource",
    "allocation_by_asset",
    "allocation_by_category",
    "equity_curve_frame",
    "forecast_dividends",
    "mark_to_market",
    "realized_gains_frame",
    "received_dividends",
    "summarize_by_broker",
    "summarize_portfolio",
    "tax_report_frame",
]
