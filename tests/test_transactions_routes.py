from flask.testing import FlaskClient

BASE = "/ledgerstream/v1"


def test_transactions_parse(client: FlaskClient, payload_rows):
    response = client.post(f"{BASE}/transactions:parse", json=payload_rows)

    assert response.status_code == 200

    data = response.get_json()

    assert len(data) == 5
    assert data[0] == {
        "accountId": "ACC001",
        "amount": "100.00",
        "type": "DEBIT",
        "timestamp": "2024-03-15 10:30:00",
    }
    assert "X-Response-Time-Ms" in response.headers


def test_transactions_parse_rejects_bad_row(client: FlaskClient):
    response = client.post(
        f"{BASE}/transactions:parse",
        json=[{"accountId": "ACC001", "type": "DEBIT"}],
    )

    assert response.status_code == 422
    assert "missing 'amount'" in response.get_json()["error"]


def test_transactions_filter_by_type_and_amount(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/transactions:filter",
        json={"transactions": payload_rows, "type": "debit", "minAmount": 60},
    )

    assert response.status_code == 200

    data = response.get_json()

    assert [t["amount"] for t in data] == ["100.00", "200.00"]


def test_transactions_filter_without_criteria_returns_all(client: FlaskClient, payload_rows):
    response = client.post(f"{BASE}/transactions:filter", json={"transactions": payload_rows})

    assert response.status_code == 200
    assert len(response.get_json()) == 5


def test_transactions_filter_missing_body(client: FlaskClient):
    response = client.post(f"{BASE}/transactions:filter", data="not json")

    assert response.status_code == 400


def test_unknown_route_is_json_404(client: FlaskClient):
    response = client.get(f"{BASE}/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


class _RecordingLogger:
    def __init__(self):
        self.lines = []

    def info(self, msg, *args):
        self.lines.append(msg % args)

    def warning(self, msg, *args):
        self.lines.append(msg % args)


def test_transactions_parse_logs_count_and_total(client: FlaskClient, payload_rows, monkeypatch):
    from ledgerstream.routes import transactions as transactions_routes

    recorder = _RecordingLogger()
    monkeypatch.setattr(transactions_routes, "logger", recorder)

    response = client.post(f"{BASE}/transactions:parse", json=payload_rows)

    assert response.status_code == 200
    assert recorder.lines == ["Parsed 5 transactions totalling 575.00"]
