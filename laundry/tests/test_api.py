"""
Integration tests for the HTTP API via TestClient.
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from laundry.api import create_app
from laundry.service import LaundryService
from laundry.storage import InMemoryStorage


@pytest.fixture()
def client():
    app = create_app(LaundryService(storage=InMemoryStorage()))
    return TestClient(app)


def _funded_customer(client, name="Budi", amount="50000"):
    assert client.post("/customers", json={"name": name, "contact": "0812"}).status_code == 201
    assert client.post(f"/customers/{name}/balance", json={"amount": amount}).status_code == 200


def _create_transaction(client, name="Budi", weight=2, express=False, service_type=0):
    response = client.post(
        "/transactions",
        json={"name": name, "weight": weight, "express": express, "service_type": service_type},
    )
    assert response.status_code == 201
    return response.json()["transaction"]["id"]


class TestCustomerEndpoints:
    def test_create_and_read_balance(self, client):
        response = client.post("/customers", json={"name": "Budi", "contact": "0812"})

        assert response.status_code == 201
        assert response.json()["message"] == "Customer Budi added successfully."
        balance = client.get("/customers/Budi/balance").json()
        assert Decimal(balance["balance"]) == Decimal("0")

    def test_duplicate_customer(self, client):
        client.post("/customers", json={"name": "Budi", "contact": "0812"})

        response = client.post("/customers", json={"name": "Budi", "contact": "other"})

        assert response.status_code == 409
        assert response.json()["kind"] == "ALREADY_EXISTS"

    def test_name_containing_slash(self, client):
        assert client.post("/customers", json={"name": "Budi/Jr", "contact": ""}).status_code == 201

        deposit = client.post("/customers/Budi/Jr/balance", json={"amount": "2500"})
        balance = client.get("/customers/Budi/Jr/balance")

        assert deposit.status_code == 200
        assert balance.json()["name"] == "Budi/Jr"
        assert Decimal(balance.json()["balance"]) == Decimal("2500")

    def test_empty_name_accepted(self, client):
        response = client.post("/customers", json={"name": "", "contact": ""})

        assert response.status_code == 201
        assert response.json()["customer"]["name"] == ""

    def test_unknown_customer_balance(self, client):
        response = client.get("/customers/Nobody/balance")

        assert response.status_code == 404
        assert response.json()["kind"] == "NOT_FOUND"


class TestTransactionEndpoints:
    def test_full_lifecycle(self, client):
        _funded_customer(client)
        transaction_id = _create_transaction(client)

        carry_on = client.post(f"/transactions/{transaction_id}/carry-on")
        assert carry_on.json()["message"] == f"Transaction {transaction_id} is Ongoing."
        ready = client.post(f"/transactions/{transaction_id}/finish-working")
        assert ready.json()["transaction"]["status"] == "Ready"
        finish = client.post(f"/transactions/{transaction_id}/finish")
        assert finish.status_code == 200
        assert finish.json()["message"] == f"Transaction {transaction_id} finished successfully!"

        laundry = client.get("/laundry/balance").json()
        assert Decimal(laundry["balance"]) == Decimal("16000")
        assert laundry["name"] == "Laundry ICP"
        customer = client.get("/customers/Budi/balance").json()
        assert Decimal(customer["balance"]) == Decimal("34000")

    def test_update_and_cancel(self, client):
        _funded_customer(client)
        transaction_id = _create_transaction(client)

        update = client.put(
            f"/transactions/{transaction_id}",
            json={"name": "Budi", "weight": 1, "express": True, "service_type": 2},
        )
        assert update.status_code == 200
        assert Decimal(update.json()["transaction"]["price"]) == Decimal("9000")

        cancel = client.post(f"/transactions/{transaction_id}/cancel")
        assert cancel.json()["transaction"]["status"] == "Cancelled"
        customer = client.get("/customers/Budi/balance").json()
        assert Decimal(customer["balance"]) == Decimal("50000")

    def test_insufficient_balance(self, client):
        _funded_customer(client, amount="1000")

        response = client.post("/transactions", json={"name": "Budi", "weight": 2, "service_type": 0})

        assert response.status_code == 400
        assert response.json()["kind"] == "INSUFFICIENT_BALANCE"
        assert client.get("/transactions").json() == []

    def test_invalid_state(self, client):
        _funded_customer(client)
        transaction_id = _create_transaction(client)
        client.post(f"/transactions/{transaction_id}/carry-on")

        response = client.post(f"/transactions/{transaction_id}/cancel")

        assert response.status_code == 409
        assert response.json()["kind"] == "INVALID_STATE"
        assert "Ongoing" in response.json()["detail"]

    def test_update_someone_elses_transaction(self, client):
        _funded_customer(client, name="Budi")
        _funded_customer(client, name="Sari")
        transaction_id = _create_transaction(client, name="Budi")

        response = client.put(
            f"/transactions/{transaction_id}",
            json={"name": "Sari", "weight": 1, "express": False, "service_type": 0},
        )

        assert response.status_code == 403
        assert response.json()["kind"] == "UNAUTHORIZED"

    def test_inexact_deposit_rejected(self, client):
        _funded_customer(client, amount="1E+20")

        response = client.post("/customers/Budi/balance", json={"amount": "1E-10"})

        assert response.status_code == 422
        assert response.json()["kind"] == "INVALID_AMOUNT"
        assert Decimal(client.get("/customers/Budi/balance").json()["balance"]) == Decimal("1E+20")

    def test_get_and_list(self, client):
        _funded_customer(client)
        transaction_id = _create_transaction(client)

        fetched = client.get(f"/transactions/{transaction_id}")
        assert fetched.status_code == 200
        assert fetched.json()["status"] == "Pending"
        assert [t["id"] for t in client.get("/transactions").json()] == [transaction_id]
        assert client.get("/transactions/missing").status_code == 404

    @pytest.mark.parametrize("payload", [
        {"name": "Budi", "weight": 0, "service_type": 0},
        {"name": "Budi", "weight": -1, "service_type": 0},
        {"name": "Budi", "weight": 1, "service_type": 3},
    ])
    def test_malformed_orders_rejected(self, client, payload):
        _funded_customer(client)

        response = client.post("/transactions", json=payload)

        assert response.status_code == 422
        assert client.get("/transactions").json() == []


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
