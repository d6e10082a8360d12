"""Consolidation entry point: replay, projection and tax report."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from opentelemetry import trace

from .config import get_settings
from .fx import CurrencyConverter
from .ledger import replay_transactions
from .models import ConsolidatedPortfolio, MonthlyRealizedGain, Position, Transaction
from .tax import build_tax_report

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def active_positions(positions: Iterable[Position]) -> List[Position]:
    """Drop closed, dividend-free positions; largest invested capital first."""

    return sorted(
        (p for p in positions if p.is_active),
        key=lambda p: p.total_invested,
        reverse=True,
    )


def realized_gains_by_month(gains_by_month: Dict[str, float]) -> List[MonthlyRealizedGain]:
    return [
        MonthlyRealizedGain(month=month, gain=gain)
        for month, gain in sorted(gains_by_month.items(), reverse=True)
    ]


def consolidate(
    transactions: Sequence[Transaction],
    usd_rate: float | None = None,
) -> ConsolidatedPortfolio:
    """Compute positions, realized gains, equity curve and tax report.

    Every call recomputes from scratch; nothing is cached between calls.
    """

    rate = usd_rate if usd_rate is not None else get_settings().default_usd_rate
    converter = CurrencyConverter(usd_rate=rate)

    with tracer.start_as_current_span("portfolio_ledger.consolidate") as span:
        span.set_attribute("ledger.transactions", len(transactions))
        span.set_attribute("ledger.usd_rate", rate)

        replay = replay_transactions(transactions, converter)
        result = ConsolidatedPortfolio(
            positions=active_positions(replay.positions.values()),
            realized_gains=realized_gains_by_month(replay.gains_by_month),
            sell_matches=replay.sell_matches,
            realized_gain_details=replay.realized_gain_details,
            historical_equity=replay.historical_equity,
            tax_report=build_tax_report(replay.realized_gain_details),
        )

        span.set_attribute("ledger.positions", len(result.positions))
        span.set_attribute("ledger.sales", len(result.realized_gain_details))

    logger.info(
        "Consolidated %d transactions into %d positions, %d sales, %d tax months",
        len(transactions),
        len(result.positions),
        len(result.realized_gain_details),
        len(result.tax_report),
    )
    return result


__all__ = ["active_positions", "consolidate", "realized_gains_by_month"]
