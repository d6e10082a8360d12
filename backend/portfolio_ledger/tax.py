"""Monthly capital-gains tax summaries for local-market sales.

The thresholds and rates encode Brazilian income-tax rules for individuals:
common-stock sales up to R$ 20,000 in a calendar month are exempt, stock gains
are taxed at 15%, real-estate fund (FII) gains at 20% with no exemption, and
fixed-income gains are estimated at a flat 15% (the regressive table is not
modelled). Losses are not carried across categories or months.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .models import AssetCategory, Country, RealizedGainDetail, TaxMonthlySummary

EXEMPTION_THRESHOLD_BRL = 20000.0
EQUITY_TAX_RATE = 0.15
FUND_TAX_RATE = 0.20
FIXED_INCOME_TAX_RATE = 0.15


@dataclass(frozen=True)
class TaxRules:
    country: Country = Country.BR
    exemption_threshold: float = EXEMPTION_THRESHOLD_BRL
    equity_rate: float = EQUITY_TAX_RATE
    fund_rate: float = FUND_TAX_RATE
    fixed_income_rate: float = FIXED_INCOME_TAX_RATE


BRAZIL_TAX_RULES = TaxRules()


def _bucket_gains(details: Iterable[RealizedGainDetail]) -> tuple[float, float, float]:
    equity = fund = fixed_income = 0.0
    for detail in details:
        if detail.category == AssetCategory.FII:
            fund += detail.gain
        elif detail.category == AssetCategory.FIXED:
            fixed_income += detail.gain
        else:
            equity += detail.gain
    return equity, fund, fixed_income


def summarize_month(summary: TaxMonthlySummary, rules: TaxRules = BRAZIL_TAX_RULES) -> None:
    """Fill exemption, taxable base and tax due from ``summary.details``."""

    equity_gain, fund_gain, fixed_income_gain = _bucket_gains(summary.details)
    is_exempt = summary.total_sales_brl <= rules.exemption_threshold

    equity_tax = equity_gain * rules.equity_rate if not is_exempt and equity_gain > 0 else 0.0
    fund_tax = fund_gain * rules.fund_rate if fund_gain > 0 else 0.0
    fixed_income_tax = fixed_income_gain * rules.fixed_income_rate if fixed_income_gain > 0 else 0.0

    summary.is_exempt = is_exempt
    summary.taxable_gain_brl = (
        (0.0 if is_exempt else max(0.0, equity_gain))
        + max(0.0, fund_gain)
        + max(0.0, fixed_income_gain)
    )
    summary.tax_due_brl = equity_tax + fund_tax + fixed_income_tax


def build_tax_report(
    details: Iterable[RealizedGainDetail], rules: TaxRules = BRAZIL_TAX_RULES
) -> List[TaxMonthlySummary]:
    """Group local sales by month and apply ``rules``; most recent month first."""

    by_month: Dict[str, TaxMonthlySummary] = {}
    for detail in details:
        if detail.country != rules.country:
            continue
        summary = by_month.get(detail.month)
        if summary is None:
            summary = by_month[detail.month] = TaxMonthlySummary(month=detail.month)
        # Only common stock counts toward the monthly exemption threshold
        if detail.category == AssetCategory.VARIABLE:
            summary.total_sales_brl += detail.quantity * detail.sell_price
        summary.details.append(detail)

    for summary in by_month.values():
        summarize_month(summary, rules)
    return sorted(by_month.values(), key=lambda s: s.month, reverse=True)


__all__ = [
    "BRAZIL_TAX_RULES",
    "EQUITY_TAX_RATE",
    "EXEMPTION_THRESHOLD_BRL",
    "FIXED_INCOME_TAX_RATE",
    "FUND_TAX_RATE",
    "TaxRules",
    "build_tax_report",
    "summarize_month",
]
