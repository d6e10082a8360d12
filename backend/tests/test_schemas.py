from datetime import date

import pytest
from pydantic import ValidationError

from portfolio_ledger import consolidate
from portfolio_ledger.models import AssetCategory, Country, TransactionType
from portfolio_ledger.schemas import TransactionDocument, parse_transactions, serialize_consolidation


def _document(**overrides):
    doc = {
        "id": "abc123",
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
    doc.update(overrides)
    return doc


def test_document_maps_to_transaction():
    tx = TransactionDocument.model_validate(_document()).to_transaction()
    assert tx.date == date(2024, 3, 1)
    assert tx.country is Country.BR
    assert tx.category is AssetCategory.VARIABLE
    assert tx.type is TransactionType.BUY
    assert tx.unit_price == 35.2
    assert tx.fees == 4.9


def test_fixed_income_document_with_blank_fields():
    doc = _document(
        ticker="CDB Banco X",
        category="Renda Fixa",
        maturityDate="2027-01-04",
        interestRate="",
    )
    tx = TransactionDocument.model_validate(doc).to_transaction()
    assert tx.maturity_date == date(2027, 1, 4)
    assert tx.interest_rate is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"quantity": -1},
        {"fees": -0.5},
        {"type": "Transferência"},
        {"country": "AR"},
        {"type": "Desdobramento/Grupamento", "splitFrom": 0, "splitTo": 2},
        {"type": "Desdobramento/Grupamento", "splitTo": 2},
    ],
)
def test_invalid_documents_are_rejected(overrides):
    with pytest.raises(ValidationError):
        TransactionDocument.model_validate(_document(**overrides))


def test_parse_and_serialize_round_out_a_run():
    transactions = parse_transactions(
        [
            _document(id="b1", date="2024-01-02", quantity=100, unitPrice=10, fees=0),
            _document(id="s1", date="2024-01-20", type="Venda", quantity=100, unitPrice=15, fees=0),
            _document(id="d1", date="2024-01-25", ticker="ITSA4", type="Dividendo", quantity=10, unitPrice=1, fees=0),
        ]
    )
    payload = serialize_consolidation(consolidate(transactions, usd_rate=5.0))

    assert set(payload) == {
        "positions",
        "realizedGains",
        "sellMatches",
        "realizedGainDetails",
        "historicalEquity",
        "taxReport",
    }
    [position] = payload["positions"]
    assert position["ticker"] == "ITSA4"
    assert position["totalDividends"] == 10
    assert position["lots"] == []

    [match] = payload["sellMatches"]["s1"]
    assert match == {"buyDate": "2024-01-02", "quantity": 100, "buyPrice": 10, "costBasis": 1000}

    [summary] = payload["taxReport"]
    assert summary["totalSalesBRL"] == 1500
    assert summary["taxDueBRL"] == 0
    assert summary["isExempt"] is True
    assert summary["details"][0]["sellPrice"] == 15
    assert payload["historicalEquity"][0] == {"date": "2024-01-02", "equity": 1000, "invested": 1000}
