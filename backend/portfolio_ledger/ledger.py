"""Ledger replay: positions, FIFO lot matching and realized gains."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .equity import EquityCurveBuilder, ReplayTotals
from .fx import CurrencyConverter
from .models import (
    EPSILON,
    AssetCategory,
    HistoricalPoint,
    Lot,
    MatchedLot,
    Position,
    RealizedGainDetail,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


@dataclass
class LedgerReplay:
    """Raw output of a single replay pass."""

    positions: Dict[str, Position] = field(default_factory=dict)
    realized_gain_details: List[RealizedGainDetail] = field(default_factory=list)
    sell_matches: Dict[str, List[MatchedLot]] = field(default_factory=dict)
    gains_by_month: Dict[str, float] = field(default_factory=dict)
    historical_equity: List[HistoricalPoint] = field(default_factory=list)
    totals: ReplayTotals = field(default_factory=ReplayTotals)


def _get_position(positions: Dict[str, Position], tx: Transaction) -> Position:
    position = positions.get(tx.position_key)
    if position is None:
        position = Position(
            ticker=tx.ticker,
            broker=tx.broker,
            country=tx.country,
            category=tx.category,
            maturity_date=tx.maturity_date,
            interest_rate=tx.interest_rate,
        )
        positions[tx.position_key] = position
    return position


def apply_buy(
    position: Position, tx: Transaction, totals: ReplayTotals, converter: CurrencyConverter
) -> None:
    operation_cost = tx.quantity * tx.unit_price + tx.fees
    previous_cost = position.total_quantity * position.average_price
    position.total_quantity += tx.quantity
    if position.total_quantity > EPSILON:
        position.average_price = (previous_cost + operation_cost) / position.total_quantity
    else:
        position.average_price = 0.0
    position.total_invested = position.total_quantity * position.average_price
    totals.invested += converter.to_local_currency(operation_cost, tx.country)

    if tx.category == AssetCategory.FIXED:
        position.maturity_date = tx.maturity_date
        position.interest_rate = tx.interest_rate

    position.lots.append(
        Lot(
            date=tx.date,
            quantity=tx.quantity,
            original_quantity=tx.quantity,
            unit_price=tx.unit_price,
            fees=tx.fees,
        )
    )


def apply_bonus(position: Position, tx: Transaction) -> None:
    """Add zero-cost units; invested capital stays put so the average dilutes."""

    position.total_quantity += tx.quantity
    if position.total_quantity > EPSILON:
        position.average_price = position.total_invested / position.total_quantity
    position.lots.append(
        Lot(date=tx.date, quantity=tx.quantity, original_quantity=tx.quantity, unit_price=0.0)
    )


def apply_split(position: Position, tx: Transaction) -> None:
    """Rescale every open lot by ``split_to / split_from``.

    Invested capital is conserved; only unit count and unit price move.
    """

    if not tx.split_from or not tx.split_to or tx.split_from <= 0:
        logger.debug("Ignoring split %s without a usable ratio", tx.id)
        return
    ratio = tx.split_to / tx.split_from
    for lot in position.lots:
        lot.unit_price /= ratio
        lot.quantity *= ratio
        lot.original_quantity *= ratio

    position.total_quantity = sum(lot.quantity for lot in position.lots)
    if position.total_quantity > EPSILON:
        position.average_price = position.total_invested / position.total_quantity
    else:
        position.average_price = 0.0


def consume_lots(position: Position, quantity: float) -> tuple[List[MatchedLot], float, float]:
    """Consume open lots oldest-first.

    Returns the matches, the total cost basis consumed and whatever quantity
    could not be matched because the lots ran out.
    """

    remaining = quantity
    cost_basis = 0.0
    matches: List[MatchedLot] = []
    lots = position.lots
    while remaining > EPSILON and lots:
        lot = lots[0]
        consumed = min(remaining, lot.quantity)
        lot_cost = consumed * (lot.unit_price + lot.fee_per_unit)
        matches.append(
            MatchedLot(
                buy_date=lot.date,
                quantity=consumed,
                buy_price=lot.unit_price,
                cost_basis=lot_cost,
            )
        )
        cost_basis += lot_cost
        lot.quantity -= consumed
        remaining -= consumed
        if lot.quantity <= EPSILON:
            lots.popleft()
    return matches, cost_basis, max(remaining, 0.0)


def apply_sell(
    position: Position,
    tx: Transaction,
    totals: ReplayTotals,
    converter: CurrencyConverter,
    replay: LedgerReplay,
) -> RealizedGainDetail:
    matches, cost_basis, unmatched = consume_lots(position, tx.quantity)
    replay.sell_matches[tx.id] = matches
    if unmatched > EPSILON:
        # Cost basis only covers the lots that were available; the gain is overstated.
        logger.warning(
            "Sell %s of %s at %s matched %.8f of %.8f units; %.8f left unmatched",
            tx.id,
            tx.ticker,
            tx.broker,
            tx.quantity - unmatched,
            tx.quantity,
            unmatched,
        )

    proceeds = tx.quantity * tx.unit_price - tx.fees
    gain = proceeds - cost_basis
    detail = RealizedGainDetail(
        id=tx.id,
        date=tx.date,
        ticker=tx.ticker,
        broker=tx.broker,
        country=tx.country,
        category=tx.category,
        quantity=tx.quantity,
        sell_price=tx.unit_price,
        cost_basis=cost_basis,
        gain=gain,
        month=tx.month,
        unmatched_quantity=unmatched if unmatched > EPSILON else 0.0,
    )
    replay.realized_gain_details.append(detail)
    replay.gains_by_month[tx.month] = replay.gains_by_month.get(tx.month, 0.0) + gain

    totals.realized_cash += converter.to_local_currency(gain, tx.country)
    totals.invested -= converter.to_local_currency(cost_basis, tx.country)

    position.total_quantity -= tx.quantity
    position.total_invested -= cost_basis
    if position.total_quantity <= EPSILON:
        position.total_quantity = 0.0
        position.total_invested = 0.0
        position.average_price = 0.0
    else:
        position.average_price = position.total_invested / position.total_quantity
    return detail


def apply_dividend(
    position: Position, tx: Transaction, totals: ReplayTotals, converter: CurrencyConverter
) -> None:
    amount = tx.quantity * tx.unit_price - tx.fees
    position.total_dividends += amount
    totals.realized_cash += converter.to_local_currency(amount, tx.country)


def replay_transactions(
    transactions: Iterable[Transaction], converter: CurrencyConverter
) -> LedgerReplay:
    """Replay ``transactions`` in date order and return the resulting ledger.

    The sort is stable, so same-day transactions keep their input order.
    """

    replay = LedgerReplay()
    totals = replay.totals
    curve = EquityCurveBuilder(converter=converter)

    for tx in sorted(transactions, key=lambda t: t.date):
        position = _get_position(replay.positions, tx)
        curve.observe_price(tx)
        logger.debug("Applying %s %s %s x %s", tx.id, tx.type.value, tx.ticker, tx.quantity)

        if tx.type == TransactionType.BUY:
            apply_buy(position, tx, totals, converter)
        elif tx.type == TransactionType.BONUS:
            apply_bonus(position, tx)
        elif tx.type == TransactionType.SPLIT:
            apply_split(position, tx)
        elif tx.type in (TransactionType.SELL, TransactionType.REDEMPTION):
            apply_sell(position, tx, totals, converter, replay)
        elif tx.type == TransactionType.DIVIDEND:
            apply_dividend(position, tx, totals, converter)

        curve.record(tx, totals)

    replay.historical_equity = curve.points
    return replay


__all__ = [
    "LedgerReplay",
    "apply_bonus",
    "apply_buy",
    "apply_dividend",
    "apply_sell",
    "apply_split",
    "consume_lots",
    "replay_transactions",
]
