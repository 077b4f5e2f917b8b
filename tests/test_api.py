"""HTTP API over the in-memory store."""

from __future__ import annotations

import pytest

from api.app import create_app
from expense_index.store import ExpenseStore


@pytest.fixture()
def client(scenario_store: ExpenseStore):
    app = create_app(store=scenario_store)
    app.config["TESTING"] = True
    return app.test_client()


def test_list_and_create_expenses(client) -> None:
    response = client.post(
        "/expenses", json={"amount": "7.10", "category": "Fuel", "date": "2024-01-09"}
    )
    assert response.status_code == 201
    assert response.get_json() == {
        "position": 3,
        "deleted": False,
        "amount": "7.10",
        "category": "Fuel",
        "date": "2024-01-09",
    }

    items = client.get("/expenses").get_json()["items"]
    assert [item["category"] for item in items] == ["Food", "Rent", "Food", "Fuel"]


def test_create_expense_validation_error(client) -> None:
    response = client.post("/expenses", json={"amount": "x", "category": "Fuel", "date": "2024-01-09"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "Validation error"


def test_create_expense_requires_json(client) -> None:
    response = client.post("/expenses", data="amount=1")

    assert response.status_code == 400


def test_delete_marks_record_and_hides_it(client) -> None:
    assert client.delete("/expenses/0").status_code == 204
    assert client.delete("/expenses/0").status_code == 204

    visible = client.get("/expenses").get_json()["items"]
    assert [item["position"] for item in visible] == [1, 2]

    everything = client.get("/expenses?include_deleted=true").get_json()["items"]
    assert everything[0]["deleted"] is True

    food = client.get("/categories/Food/expenses").get_json()
    assert food == {"found": True, "items": [{"amount": "5.25", "category": "Food", "date": "2024-01-05"}]}


def test_delete_out_of_range_is_not_found(client) -> None:
    response = client.delete("/expenses/99")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Record not found"
    assert client.get("/expenses/99").status_code == 404


def test_category_totals_and_unknown_category(client) -> None:
    totals = client.get("/categories/totals").get_json()
    assert totals == {"totals": {"Food": "17.75", "Rent": "40.00"}}

    unknown = client.get("/categories/Travel/expenses").get_json()
    assert unknown == {"found": False, "items": []}


def test_date_queries(client) -> None:
    exact = client.get("/dates/2024-01-05/expenses").get_json()
    assert exact["found"] is True
    assert [item["amount"] for item in exact["items"]] == ["12.50", "5.25"]

    missing = client.get("/dates/2030-01-01/expenses").get_json()
    assert missing == {"found": False, "items": []}

    ranged = client.get("/dates?start=2024-01-01&end=2024-01-04").get_json()
    assert [item["category"] for item in ranged["items"]] == ["Rent"]

    assert client.get("/dates?start=2024-01-01").status_code == 400
    assert client.get("/dates/not-a-date/expenses").status_code == 400


def test_top_expenses(client) -> None:
    top = client.get("/expenses/top?n=2").get_json()["items"]

    assert [item["amount"] for item in top] == ["40.00", "12.50"]
    assert client.get("/expenses/top?n=-3").status_code == 400


def test_maintenance_routes(client) -> None:
    client.delete("/expenses/2")

    assert client.post("/maintenance/sort-by-date").get_json() == {"records": 3}
    assert client.get("/expenses/0").get_json()["category"] == "Rent"

    assert client.post("/maintenance/compact").get_json() == {"removed": 1, "records": 2}
    assert client.get("/stats").get_json() == {
        "records": 2,
        "live": 2,
        "deleted": 0,
        "categories": 2,
        "dates": 2,
    }
