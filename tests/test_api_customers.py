"""Tests for the /api/customers routes."""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config.settings import Settings


@pytest.fixture
def new_customer() -> dict:
    return {
        "first_name": "Grace",
        "last_name": "O'Hopper-Smith",
        "email": "grace@example.com",
        "phone_number": "+15551234567",
        "date_of_birth": "1990-04-01",
    }


class TestReadCustomers:
    """Listing and lookups."""

    def test_list(self, client) -> None:
        response = client.get("/api/customers/")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == ["CUST001", "CUST002", "CUST003"]

    def test_get_includes_accounts(self, client) -> None:
        response = client.get("/api/customers/CUST001")
        assert response.status_code == 200
        body = response.json()
        assert body["full_name"] == "John Doe"
        assert sorted(a["id"] for a in body["accounts"]) == ["ACC001", "ACC002", "ACC005"]

    def test_get_missing(self, client) -> None:
        response = client.get("/api/customers/CUST999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Customer with ID 'CUST999' not found"

    def test_get_by_email(self, client) -> None:
        response = client.get("/api/customers/email/Jane.Smith@example.com")
        assert response.status_code == 200
        assert response.json()["id"] == "CUST002"

    def test_get_by_email_missing(self, client) -> None:
        assert client.get("/api/customers/email/nobody@example.com").status_code == 404


class TestCreateCustomer:
    """POST validation and defaults."""

    def test_create(self, client, new_customer) -> None:
        response = client.post("/api/customers/", json=new_customer)
        assert response.status_code == 201
        body = response.json()
        assert body["id"] == "CUST004"
        assert body["status"] == "ACTIVE"
        assert body["full_name"] == "Grace O'Hopper-Smith"
        assert body["created_at"] is not None

    def test_invalid_fields_return_400(self, client, new_customer) -> None:
        new_customer.update(first_name="G", email="not-an-email", phone_number="0123")
        response = client.post("/api/customers/", json=new_customer)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "One or more validation errors occurred"
        assert {"first_name", "email", "phone_number"} <= set(body["errors"])

    def test_name_with_digits_rejected(self, client, new_customer) -> None:
        new_customer["last_name"] = "Smith2"
        response = client.post("/api/customers/", json=new_customer)
        assert response.status_code == 400
        assert "last_name" in response.json()["errors"]

    def test_underage_rejected(self, client, new_customer) -> None:
        new_customer["date_of_birth"] = date(date.today().year - 10, 1, 1).isoformat()
        response = client.post("/api/customers/", json=new_customer)
        assert response.status_code == 400
        assert any("18" in msg for msg in response.json()["errors"]["date_of_birth"])

    def test_future_birth_date_rejected(self, client, new_customer) -> None:
        new_customer["date_of_birth"] = date(date.today().year + 1, 1, 1).isoformat()
        assert client.post("/api/customers/", json=new_customer).status_code == 400

    def test_missing_field_rejected(self, client, new_customer) -> None:
        del new_customer["email"]
        response = client.post("/api/customers/", json=new_customer)
        assert response.status_code == 400
        assert "email" in response.json()["errors"]


class TestUpdateDeleteCustomer:
    """PUT and DELETE."""

    def test_update(self, client) -> None:
        response = client.put("/api/customers/CUST002", json={"last_name": "Jones"})
        assert response.status_code == 200
        body = response.json()
        assert body["last_name"] == "Jones"
        assert body["first_name"] == "Jane"

    def test_update_missing(self, client) -> None:
        response = client.put("/api/customers/CUST999", json={"last_name": "Jones"})
        assert response.status_code == 404
        assert "CUST999" in response.json()["detail"]

    def test_delete(self, client) -> None:
        assert client.delete("/api/customers/CUST003").status_code == 204
        assert client.get("/api/customers/CUST003").status_code == 404

    def test_delete_missing_strict(self, client) -> None:
        assert client.delete("/api/customers/CUST999").status_code == 404

    def test_delete_missing_lenient(self) -> None:
        settings = Settings(STRICT_NOT_FOUND=False, SIMULATE_LATENCY=False, LOG_LEVEL="WARNING")
        with TestClient(create_app(settings)) as lenient:
            assert lenient.delete("/api/customers/CUST999").status_code == 204
            assert lenient.put("/api/customers/CUST999", json={"last_name": "Jones"}).status_code == 404
