from datetime import date

import pytest

from portfolio_ledger import consolidate
from portfolio_ledger.models import Country, TransactionType as T


def _make_transactions(make_tx):
    return [
        make_tx(T.BUY, date(2024, 1, 2), 100, 10.0, id="b1"),
        make_tx(T.BUY, date(2024, 1, 9), 100, 20.0, id="b2"),
        make_tx(T.BUY, date(2024, 1, 15), 20, 30.0, ticker="BBAS3", id="b3"),
        make_tx(T.SELL, date(2024, 2, 1), 150, 25.0, id="s1"),
        make_tx(T.SELL, date(2024, 3, 4), 20, 28.0, ticker="BBAS3", id="s2"),
        make_tx(T.BUY, date(2024, 3, 5), 5, 100.0, ticker="MSFT", country=Country.USA, id="b4"),
        make_tx(T.SELL, date(2024, 3, 20), 2, 110.0, ticker="MSFT", country=Country.USA, id="s3"),
    ]


def test_consolidate_returns_every_report(make_tx):
    result = consolidate(_make_transactions(make_tx), usd_rate=5.0)

    assert [p.ticker for p in result.positions] == ["PETR4", "MSFT"]
    assert result.positions[0].total_invested == pytest.approx(1000)
    assert result.positions[1].total_invested == pytest.approx(300)

    assert set(result.sell_matches) == {"s1", "s2", "s3"}
    assert [d.id for d in result.realized_gain_details] == ["s1", "s2", "s3"]

    # Monthly gains are summed in each sale's own currency
    assert [(g.month, g.gain) for g in result.realized_gains] == [
        ("2024-03", pytest.approx(-40 + 20)),
        ("2024-02", pytest.approx(1750)),
    ]

    assert [s.month for s in result.tax_report] == ["2024-03", "2024-02"]
    assert all(s.is_exempt for s in result.tax_report)
    march = result.tax_report[0]
    assert [d.id for d in march.details] == ["s2"]

    assert len(result.historical_equity) == len({tx.date for tx in _make_transactions(make_tx)})


def test_closed_positions_with_dividends_are_kept(make_tx):
    transactions = [
        make_tx(T.BUY, date(2024, 1, 2), 10, 10.0, ticker="TAEE11"),
        make_tx(T.DIVIDEND, date(2024, 1, 20), 10, 0.8, ticker="TAEE11"),
        make_tx(T.SELL, date(2024, 2, 2), 10, 11.0, ticker="TAEE11"),
        make_tx(T.BUY, date(2024, 1, 3), 10, 10.0, ticker="MGLU3"),
        make_tx(T.SELL, date(2024, 2, 3), 10, 4.0, ticker="MGLU3"),
    ]
    result = consolidate(transactions, usd_rate=5.0)
    assert [p.ticker for p in result.positions] == ["TAEE11"]
    assert result.positions[0].total_quantity == 0
    assert result.positions[0].total_dividends == pytest.approx(8)


def test_input_order_does_not_matter(make_tx):
    transactions = _make_transactions(make_tx)
    forward = consolidate(transactions, usd_rate=5.0)
    backward = consolidate(list(reversed(transactions)), usd_rate=5.0)
    assert forward == backward


def test_repeated_runs_are_independent(make_tx):
    transactions = _make_transactions(make_tx)
    first = consolidate(transactions, usd_rate=5.0)
    second = consolidate(transactions, usd_rate=5.0)
    assert first == second
    assert first.positions[0] is not second.positions[0]


def test_default_rate_comes_from_settings(make_tx, monkeypatch):
    monkeypatch.setenv("LEDGER_DEFAULT_USD_RATE", "4.0")
    transactions = [make_tx(T.BUY, date(2024, 1, 2), 10, 100.0, ticker="MSFT", country=Country.USA)]
    result = consolidate(transactions)
    assert result.historical_equity[0].invested == pytest.approx(4000)


def test_empty_input():
    result = consolidate([], usd_rate=5.0)
    assert result.positions == []
    assert result.historical_equity == []
    assert result.tax_report == []
