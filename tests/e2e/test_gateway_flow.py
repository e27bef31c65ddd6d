"""
E2E tests for hosted-checkout payments against the mock gateway.

These tests require the mock gateway server to be running:
    uvicorn mock.gateway_server.main:app --port 8003

Scenarios:
- customer pays part of a debt through the gateway
- customer abandons checkout (email containing "decline")
- gateway retries the callback after a successful payment
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from shopdesk.api.dependencies import get_gateway_client
from shopdesk.infrastructure.clients.gateway import GatewayClient


@pytest.fixture
def live_client(client: TestClient) -> TestClient:
    """Test client whose gateway calls reach the mock server"""
    client.app.dependency_overrides[get_gateway_client] = lambda: GatewayClient(base_url="http://localhost:8003")
    return client


def start_payment(client: TestClient, sale, headers, email: str, amount: str = "400") -> str:
    response = client.post(
        "/v1/payments/initialize",
        json={
            "sale_id": str(sale.id),
            "amount": amount,
            "email": email,
            "metadata": {"purpose": "debt_payment"},
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["reference"]


@pytest.mark.integration
def test_partial_debt_payment_through_gateway(live_client: TestClient, make_sale, owner_headers):
    """
    Customer owes 1000 and pays 400 online
    Expected: balance 600, sale still partial
    """
    sale = make_sale(total="1000")
    reference = start_payment(live_client, sale, owner_headers, "chidi@example.com")

    response = live_client.post("/v1/payments/verify", json={"reference": reference, "status": "success"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "successful"
    assert Decimal(data["payment"]["balance_due"]) == Decimal("600")
    assert data["payment"]["payment_status"] == "partial"


@pytest.mark.integration
def test_abandoned_checkout_leaves_debt(live_client: TestClient, make_sale, owner_headers):
    """
    Callback claims success but the gateway never collected the money
    Expected: intent failed, full balance still owed
    """
    sale = make_sale(total="1000")
    reference = start_payment(live_client, sale, owner_headers, "decline@example.com")

    response = live_client.post("/v1/payments/verify", json={"reference": reference, "status": "success"})

    assert response.status_code == 200
    assert response.json()["status"] == "failed"

    debtors = live_client.get("/v1/debtors", headers=owner_headers).json()
    assert Decimal(debtors["total_outstanding"]) == Decimal("1000")


@pytest.mark.integration
def test_callback_retry_is_idempotent(live_client: TestClient, make_sale, owner_headers):
    """
    Gateway delivers the same success callback twice
    Expected: payment applied once
    """
    sale = make_sale(total="1000")
    reference = start_payment(live_client, sale, owner_headers, "chidi@example.com", amount="1000")

    first = live_client.post("/v1/payments/verify", json={"reference": reference, "status": "success"})
    second = live_client.post("/v1/payments/verify", json={"reference": reference, "status": "success"})

    assert first.json()["payment"]["payment_status"] == "completed"
    assert second.json()["already_applied"] is True

    debtors = live_client.get("/v1/debtors", headers=owner_headers).json()
    assert debtors["debtors"] == []
