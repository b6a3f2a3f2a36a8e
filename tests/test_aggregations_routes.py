from flask.testing import FlaskClient

BASE = "/ledgerstream/v1"


def test_group_sum_by_account(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/aggregations:group",
        json={"transactions": payload_rows, "key": "accountId", "metric": "sum"},
    )

    assert response.status_code == 200
    assert response.get_json() == {"ACC001": "225.00", "ACC002": "350.00"}


def test_group_count_by_type_merges_case_variants(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/aggregations:group",
        json={"transactions": payload_rows, "key": "type", "metric": "count"},
    )

    assert response.status_code == 200
    assert response.get_json() == {"DEBIT": 3, "CREDIT": 2}


def test_group_list_defaults(client: FlaskClient, payload_rows):
    response = client.post(f"{BASE}/aggregations:group", json={"transactions": payload_rows})

    assert response.status_code == 200

    data = response.get_json()

    assert list(data) == ["ACC001", "ACC002"]
    assert [t["amount"] for t in data["ACC001"]] == ["100.00", "50.00", "75.00"]


def test_group_rejects_unknown_metric(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/aggregations:group",
        json={"transactions": payload_rows, "metric": "median"},
    )

    assert response.status_code == 422
    assert "metric" in response.get_json()["error"]


def test_summary_for_debits(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/aggregations:summary",
        json={"transactions": payload_rows, "type": "DEBIT"},
    )

    assert response.status_code == 200

    data = response.get_json()

    assert data["total"] == "350.00"
    assert data["max"] == "200.00"
    assert data["count"] == 3
    assert data["keys"] == "ACC001,ACC002"
    assert data["accounts"][0] == {"key": "ACC001", "count": 2, "total": "150.00", "max": "100.00"}


def test_summary_of_empty_list(client: FlaskClient):
    response = client.post(f"{BASE}/aggregations:summary", json={"transactions": []})

    assert response.status_code == 200
    assert response.get_json() == {"total": "0", "max": None, "count": 0, "keys": "", "accounts": []}


def test_top_n(client: FlaskClient, payload_rows):
    response = client.post(f"{BASE}/aggregations:top", json={"transactions": payload_rows, "n": 2})

    assert response.status_code == 200
    assert [t["amount"] for t in response.get_json()] == ["200.00", "150.00"]


def test_top_n_rejects_negative(client: FlaskClient, payload_rows):
    response = client.post(f"{BASE}/aggregations:top", json={"transactions": payload_rows, "n": -1})

    assert response.status_code == 422
    assert "'n' must be >= 0" in response.get_json()["error"]


def test_adjust(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/aggregations:adjust",
        json={"transactions": payload_rows[:1], "factor": "0.98"},
    )

    assert response.status_code == 200
    assert response.get_json() == ["98.0000"]


def test_adjust_requires_factor(client: FlaskClient, payload_rows):
    response = client.post(f"{BASE}/aggregations:adjust", json={"transactions": payload_rows})

    assert response.status_code == 422


def test_missing_transactions_field(client: FlaskClient):
    response = client.post(f"{BASE}/aggregations:top", json={"n": 1})

    assert response.status_code == 422
    assert "transactions" in response.get_json()["error"]


def test_summary_rejects_non_string_type(client: FlaskClient, payload_rows):
    response = client.post(
        f"{BASE}/aggregations:summary",
        json={"transactions": payload_rows, "type": 5},
    )

    assert response.status_code == 422
    assert "'type' must be a string" in response.get_json()["error"]
