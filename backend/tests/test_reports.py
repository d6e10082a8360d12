from datetime import date

import pandas as pd
import pytest

from portfolio_ledger import consolidate
from portfolio_ledger.models import TransactionType as T
from portfolio_ledger.services.reports import (
    DETAIL_COLUMNS,
    equity_curve_frame,
    realized_gains_frame,
    tax_report_frame,
)


def _result(make_tx):
    transactions = [
        make_tx(T.BUY, date(2024, 1, 2), 100, 10.0),
        make_tx(T.BUY, date(2024, 1, 5), 100, 12.0),
        make_tx(T.SELL, date(2024, 2, 1), 50, 15.0, id="s1"),
    ]
    return consolidate(transactions, usd_rate=5.0)


def test_equity_curve_frame(make_tx):
    df = equity_curve_frame(_result(make_tx).historical_equity)
    assert list(df.columns) == ["equity", "invested", "unrealized"]
    assert isinstance(df.index, pd.DatetimeIndex)
    assert df.index[0] == pd.Timestamp("2024-01-02")
    last = df.iloc[-1]
    assert last["invested"] == pytest.approx(1700)
    assert last["unrealized"] == pytest.approx(last["equity"] - 1700)


def test_realized_gains_frame_uses_plain_values(make_tx):
    df = realized_gains_frame(_result(make_tx).realized_gain_details)
    assert list(df.columns) == DETAIL_COLUMNS
    row = df.iloc[0]
    assert row["id"] == "s1"
    assert row["country"] == "BR"
    assert row["category"] == "Renda Variável"
    assert row["gain"] == pytest.approx(250)


def test_tax_report_frame_indexed_by_month(make_tx):
    df = tax_report_frame(_result(make_tx).tax_report)
    assert list(df.index) == ["2024-02"]
    assert bool(df.loc["2024-02", "is_exempt"]) is True
    assert df.loc["2024-02", "sales"] == 1


def test_empty_inputs_give_empty_frames():
    assert equity_curve_frame([]).empty
    assert realized_gains_frame([]).empty
    assert tax_report_frame([]).empty
