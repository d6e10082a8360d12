"""Mark-to-market helpers applied after a consolidation run.

Quotes come from a pluggable price source and only ever touch the reported
positions; the replay itself never sees them. When a ticker has no usable
quote the position is valued at its average price.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Protocol, Sequence

from portfolio_ledger.fx import CurrencyConverter
from portfolio_ledger.models import Country, Position

MIN_ALLOCATION_QUANTITY = 0.0001
OTHERS_LABEL = "Outros"


class PriceSource(Protocol):
    """Pluggable price provider."""

    def get_latest_price(self, ticker: str) -> float:
        ...


class InMemoryPriceSource:
    """Simple price source for tests and examples."""

    def __init__(self, prices: Mapping[str, float]):
        self._prices = {ticker: float(price) for ticker, price in prices.items()}

    def get_latest_price(self, ticker: str) -> float:
        if ticker not in self._prices:
            raise KeyError(f"No price for ticker {ticker}")
        return self._prices[ticker]


@dataclass
class PositionValuation:
    position: Position
    current_price: float
    market_value: float
    market_value_local: float
    invested_local: float
    dividends_local: float
    profit_pct: float
    yield_on_cost_pct: float


@dataclass
class PortfolioSummary:
    total_equity: float
    total_invested: float
    total_dividends: float
    unrealized_gain: float
    total_gain_pct: float
    yield_on_cost_pct: float


@dataclass
class BrokerSummary:
    broker: str
    equity_local: float = 0.0
    equity_foreign: float = 0.0
    dividends_local: float = 0.0
    dividends_foreign: float = 0.0
    valuations: List[PositionValuation] = field(default_factory=list)


@dataclass
class AllocationSlice:
    name: str
    value: float


def _quote(source: PriceSource | Mapping[str, float], ticker: str) -> float | None:
    if isinstance(source, Mapping):
        return source.get(ticker)
    try:
        return source.get_latest_price(ticker)
    except KeyError:
        return None


def _pct(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def value_position(
    position: Position,
    quote: float | None,
    converter: CurrencyConverter,
) -> PositionValuation:
    current_price = quote if quote is not None and quote > 0 else position.average_price
    market_value = position.total_quantity * current_price
    return PositionValuation(
        position=position,
        current_price=current_price,
        market_value=market_value,
        market_value_local=converter.to_local_currency(market_value, position.country),
        invested_local=converter.to_local_currency(position.total_invested, position.country),
        dividends_local=converter.to_local_currency(position.total_dividends, position.country),
        profit_pct=_pct(current_price - position.average_price, position.average_price),
        yield_on_cost_pct=_pct(position.total_dividends, position.total_invested),
    )


def mark_to_market(
    positions: Iterable[Position],
    quotes: PriceSource | Mapping[str, float],
    converter: CurrencyConverter,
) -> List[PositionValuation]:
    """Value each position at its latest quote, falling back to average price."""

    return [value_position(p, _quote(quotes, p.ticker), converter) for p in positions]


def summarize_portfolio(valuations: Sequence[PositionValuation]) -> PortfolioSummary:
    equity = sum(v.market_value_local for v in valuations)
    invested = sum(v.invested_local for v in valuations)
    dividends = sum(v.dividends_local for v in valuations)
    unrealized = equity - invested
    return PortfolioSummary(
        total_equity=equity,
        total_invested=invested,
        total_dividends=dividends,
        unrealized_gain=unrealized,
        total_gain_pct=_pct(unrealized, invested),
        yield_on_cost_pct=_pct(dividends, invested),
    )


def summarize_by_broker(valuations: Iterable[PositionValuation]) -> List[BrokerSummary]:
    """Group valuations per broker, in first-seen order."""

    brokers: Dict[str, BrokerSummary] = {}
    for valuation in valuations:
        position = valuation.position
        summary = brokers.setdefault(position.broker, BrokerSummary(broker=position.broker))
        summary.valuations.append(valuation)
        summary.equity_local += valuation.market_value_local
        summary.dividends_local += valuation.dividends_local
        if position.country == Country.USA:
            summary.equity_foreign += valuation.market_value
            summary.dividends_foreign += position.total_dividends
    return list(brokers.values())


def _allocatable(valuations: Iterable[PositionValuation]) -> List[PositionValuation]:
    return [v for v in valuations if v.position.total_quantity > MIN_ALLOCATION_QUANTITY]


def allocation_by_category(valuations: Iterable[PositionValuation]) -> List[AllocationSlice]:
    groups: Dict[str, float] = {}
    for valuation in _allocatable(valuations):
        name = valuation.position.category.value
        groups[name] = groups.get(name, 0.0) + valuation.market_value_local
    slices = [AllocationSlice(name=name, value=value) for name, value in groups.items()]
    return sorted(slices, key=lambda s: s.value, reverse=True)


def allocation_by_asset(
    valuations: Iterable[PositionValuation], top: int = 5
) -> List[AllocationSlice]:
    """Largest holdings by local market value; the tail is folded into one slice.

    Up to ``top + 1`` assets are listed individually.
    """

    slices = sorted(
        (AllocationSlice(name=v.position.ticker, value=v.market_value_local) for v in _allocatable(valuations)),
        key=lambda s: s.value,
        reverse=True,
    )
    if len(slices) <= top + 1:
        return slices
    others = sum(s.value for s in slices[top:])
    return slices[:top] + [AllocationSlice(name=OTHERS_LABEL, value=others)]


__all__ = [
    "AllocationSlice",
    "BrokerSummary",
    "InMemoryPriceSource",
    "PortfolioSummary",
    "PositionValuation",
    "PriceSource",
    "allocation_by_asset",
    "allocation_by_category",
    "mark_to_market",
    "summarize_by_broker",
    "summarize_portfolio",
    "value_position",
]
