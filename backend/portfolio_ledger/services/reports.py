"""Tabular views of consolidation output for charting and export."""

from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

import pandas as pd

from portfolio_ledger.models import HistoricalPoint, RealizedGainDetail, TaxMonthlySummary

DETAIL_COLUMNS = [
    "id",
    "date",
    "month",
    "ticker",
    "broker",
    "country",
    "category",
    "quantity",
    "sell_price",
    "cost_basis",
    "gain",
    "unmatched_quantity",
]
TAX_COLUMNS = ["total_sales_brl", "taxable_gain_brl", "tax_due_brl", "is_exempt", "sales"]


def equity_curve_frame(points: Sequence[HistoricalPoint]) -> pd.DataFrame:
    """Equity and invested capital per date, plus the gap between them."""

    if not points:
        return pd.DataFrame(columns=["equity", "invested", "unrealized"])
    df = pd.DataFrame([asdict(p) for p in points]).set_index("date").sort_index()
    df.index = pd.to_datetime(df.index)
    df["unrealized"] = df["equity"] - df["invested"]
    return df


def realized_gains_frame(details: Sequence[RealizedGainDetail]) -> pd.DataFrame:
    if not details:
        return pd.DataFrame(columns=DETAIL_COLUMNS)
    rows = []
    for detail in details:
        row = asdict(detail)
        row["country"] = detail.country.value
        row["category"] = detail.category.value
        rows.append(row)
    return pd.DataFrame(rows, columns=DETAIL_COLUMNS)


def tax_report_frame(report: Sequence[TaxMonthlySummary]) -> pd.DataFrame:
    """One row per month, indexed by ``YYYY-MM`` in report order."""

    rows = [
        {
            "month": s.month,
            "total_sales_brl": s.total_sales_brl,
            "taxable_gain_brl": s.taxable_gain_brl,
            "tax_due_brl": s.tax_due_brl,
            "is_exempt": s.is_exempt,
            "sales": len(s.details),
        }
        for s in report
    ]
    if not rows:
        return pd.DataFrame(columns=TAX_COLUMNS)
    return pd.DataFrame(rows).set_index("month")


__all__ = ["equity_curve_frame", "realized_gains_frame", "tax_report_frame"]
