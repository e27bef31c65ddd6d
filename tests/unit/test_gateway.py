"""Unit tests for gateway metadata and the outbound HTTP clients"""

import asyncio
import json
import pytest
import httpx
from decimal import Decimal
from shopdesk.domain.exceptions import PaymentGatewayError, ValidationError
from shopdesk.domain.gateway import (
    PaymentMetadata,
    from_minor_units,
    parse_metadata,
    to_minor_units,
    validate_gateway,
)
from shopdesk.infrastructure.clients.gateway import GatewayClient
from shopdesk.infrastructure.clients.receipts import ReceiptClient


def test_parse_metadata_known_fields():
    record = parse_metadata({"customer_name": "Chidi", "purpose": "debt_payment"})

    assert record == PaymentMetadata(customer_name="Chidi", purpose="debt_payment")
    assert record.as_dict() == {"version": 1, "customer_name": "Chidi", "purpose": "debt_payment"}


def test_parse_metadata_empty():
    assert parse_metadata(None) == PaymentMetadata()
    assert parse_metadata({}).as_dict() == {"version": 1}


def test_parse_metadata_rejects_unknown_fields():
    """Test the metadata record is closed: no free-form keys"""
    with pytest.raises(ValidationError, match="loyalty_tier"):
        parse_metadata({"customer_name": "Chidi", "loyalty_tier": "gold"})


def test_parse_metadata_rejects_other_versions():
    with pytest.raises(ValidationError, match="version"):
        parse_metadata({"version": 2})


@pytest.mark.parametrize(
    "amount,minor",
    [("150.50", 15050), ("1000", 100000), ("0.01", 1), ("19.999", 2000)],
)
def test_to_minor_units(amount, minor):
    assert to_minor_units(Decimal(amount)) == minor


def test_from_minor_units():
    assert from_minor_units(15050) == Decimal("150.50")
    assert from_minor_units(1) == Decimal("0.01")


def test_validate_gateway():
    assert validate_gateway("paystack") == "paystack"
    assert validate_gateway("flutterwave") == "flutterwave"
    with pytest.raises(ValidationError):
        validate_gateway("cash-app")


def gateway_client(handler) -> GatewayClient:
    return GatewayClient(
        base_url="http://gateway.test",
        secret_key="sk_test_123",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def test_gateway_initialize_returns_authorization_url():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"status": True, "data": {"authorization_url": "https://pay.test/abc", "reference": "REF-1"}},
        )

    url = asyncio.run(gateway_client(handler).initialize("c@example.com", 15050, "REF-1", {"version": 1}))

    assert url == "https://pay.test/abc"
    assert seen["path"] == "/transaction/initialize"
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["body"] == {
        "email": "c@example.com",
        "amount": 15050,
        "reference": "REF-1",
        "metadata": {"version": 1},
    }


def test_gateway_initialize_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": False, "message": "Invalid key"})

    with pytest.raises(PaymentGatewayError, match="Invalid key"):
        asyncio.run(gateway_client(handler).initialize("c@example.com", 100, "REF-1", {}))


def test_gateway_verify_parses_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/transaction/verify/REF-1"
        return httpx.Response(
            200,
            json={
                "status": True,
                "data": {"reference": "REF-1", "status": "success", "amount": 15050, "channel": "card"},
            },
        )

    verification = asyncio.run(gateway_client(handler).verify("REF-1"))

    assert verification.succeeded is True
    assert verification.amount_minor == 15050
    assert verification.channel == "card"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"status": False}),
        httpx.Response(404, json={"status": False, "message": "Transaction not found"}),
        httpx.Response(200, json={"status": True, "data": {"reference": "REF-1"}}),
        httpx.Response(200, text="<html>oops</html>"),
    ],
)
def test_gateway_verify_errors(response):
    """Test HTTP errors and malformed bodies all surface as PaymentGatewayError"""

    def handler(request: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(PaymentGatewayError):
        asyncio.run(gateway_client(handler).verify("REF-1"))


def test_gateway_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(PaymentGatewayError, match="timeout"):
        asyncio.run(gateway_client(handler).verify("REF-1"))


def receipt_client(handler, max_retries: int = 3) -> ReceiptClient:
    client = ReceiptClient(webhook_url="http://renderer.test/render/receipt", transport=httpx.MockTransport(handler))
    client.max_retries = max_retries
    client.backoff_base = 0
    return client


def test_send_receipt_success():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(202)

    delivered = asyncio.run(receipt_client(handler).send_receipt("payment_receipt", {"receipt_number": "PAY-1"}))

    assert delivered is True
    assert bodies == [{"kind": "payment_receipt", "receipt": {"receipt_number": "PAY-1"}}]


def test_send_receipt_retries_then_succeeds():
    """Test 5xx responses are retried"""
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(503) if calls["n"] < 3 else httpx.Response(200)

    assert asyncio.run(receipt_client(handler).send_receipt("sale_receipt", {})) is True
    assert calls["n"] == 3


def test_send_receipt_gives_up_without_raising():
    """Test renderer outage is logged and reported, never raised"""
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    assert asyncio.run(receipt_client(handler).send_receipt("sale_receipt", {})) is False
    assert calls["n"] == 3


def test_send_receipt_client_error_not_retried():
    """Test a 4xx rejection is reported after a single attempt"""
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(422)

    assert asyncio.run(receipt_client(handler).send_receipt("sale_receipt", {})) is False
    assert calls["n"] == 1
