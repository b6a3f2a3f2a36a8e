from decimal import Decimal

import pytest
from flask.testing import FlaskClient

from ledgerstream import create_app
from ledgerstream.models.schemas import Transaction


def make_txn(account_id: str, amount: str, txn_type: str) -> Transaction:
    return Transaction(account_id=account_id, amount=Decimal(amount), type=txn_type)


@pytest.fixture
def client() -> FlaskClient:
    app = create_app({"TESTING": True})
    return app.test_client()


@pytest.fixture
def transactions():
    return [
        make_txn("ACC001", "100.00", "DEBIT"),
        make_txn("ACC001", "50.00", "DEBIT"),
        make_txn("ACC002", "200.00", "DEBIT"),
        make_txn("ACC001", "75.00", "CREDIT"),
        make_txn("ACC002", "150.00", "CREDIT"),
    ]


@pytest.fixture
def payload_rows():
    return [
        {"accountId": "ACC001", "amount": "100.00", "type": "DEBIT", "timestamp": "2024-03-15 10:30:00"},
        {"accountId": "ACC001", "amount": "50.00", "type": "debit", "timestamp": "2024-03-15 11:00:00"},
        {"accountId": "ACC002", "amount": "200.00", "type": "DEBIT", "timestamp": "2024-03-16 09:00:00"},
        {"accountId": "ACC001", "amount": "75.00", "type": "CREDIT", "timestamp": "2024-03-17 12:00:00"},
        {"accountId": "ACC002", "amount": "150.00", "type": "Credit", "timestamp": "2024-03-18 08:45:00"},
    ]
