"""Hosted-checkout payment gateway HTTP client"""

import httpx
from typing import Any, Dict
from shopdesk.domain.exceptions import PaymentGatewayError
from shopdesk.domain.gateway import GatewayVerification
from shopdesk.config import settings


class GatewayClient:
    """Client for the payment gateway's initialize and verify endpoints"""

    def __init__(
        self,
        base_url: str | None = None,
        secret_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.gateway_api_base
        self.secret_key = secret_key or settings.gateway_secret_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers={"Authorization": f"Bearer {self.secret_key}"},
        )

    async def initialize(self, email: str, amount_minor: int, reference: str, metadata: Dict[str, Any]) -> str:
        """
        Open a hosted checkout for a payment intent.

        Returns:
            Authorization URL the customer is sent to

        Raises:
            PaymentGatewayError: On timeout, HTTP errors, or invalid response
        """
        async with self._client() as client:
            try:
                response = await client.post(
                    f"{self.base_url}/transaction/initialize",
                    json={
                        "email": email,
                        "amount": amount_minor,
                        "reference": reference,
                        "metadata": metadata,
                    },
                )
                response.raise_for_status()
                data = response.json()
                if not data.get("status"):
                    raise PaymentGatewayError(data.get("message") or "Gateway rejected initialization")
                return data["data"]["authorization_url"]

            except httpx.TimeoutException as e:
                raise PaymentGatewayError(f"Gateway timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise PaymentGatewayError(f"Gateway error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise PaymentGatewayError(f"Gateway unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise PaymentGatewayError(f"Invalid initialize response from gateway: {e}") from e

    async def verify(self, reference: str) -> GatewayVerification:
        """
        Ask the gateway whether a reference was actually paid.

        Raises:
            PaymentGatewayError: On timeout, HTTP errors, or invalid response
        """
        async with self._client() as client:
            try:
                response = await client.get(f"{self.base_url}/transaction/verify/{reference}")
                response.raise_for_status()
                data = response.json()
                if not data.get("status"):
                    raise PaymentGatewayError(data.get("message") or "Payment verification failed")

                payload = data["data"]
                return GatewayVerification(
                    reference=payload["reference"],
                    status=payload["status"],
                    amount_minor=int(payload["amount"]),
                    channel=payload.get("channel"),
                )

            except httpx.TimeoutException as e:
                raise PaymentGatewayError(f"Gateway timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise PaymentGatewayError(f"Gateway error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise PaymentGatewayError(f"Gateway unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise PaymentGatewayError(f"Invalid verification data from gateway: {e}") from e
