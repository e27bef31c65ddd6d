"""Receipt renderer webhook client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Any, Dict
from shopdesk.config import settings
from shopdesk.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter

logger = logging.getLogger(__name__)


class ReceiptClient:
    """Client for handing receipt payloads to the PDF rendering service"""

    def __init__(self, webhook_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.webhook_url = webhook_url or settings.receipt_webhook_url
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base
        self.transport = transport

    async def send_receipt(self, kind: str, payload: Dict[str, Any]) -> bool:
        """
        Send a receipt payload with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on 5xx errors and network failures
        - Tracks latency histogram and failure counter

        Rendering is best-effort: after the last attempt the failure is
        logged and False is returned, never raised.

        Args:
            kind: "sale_receipt" or "payment_receipt"
            payload: Receipt data, JSON-serializable
        """
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json={"kind": kind, "receipt": payload},
                            timeout=10.0,
                        )
                        response.raise_for_status()
                        return True

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    # 4xx: the payload was rejected, resending it will not help
                    if isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500:
                        logger.error(
                            f"Receipt rejected by renderer: {e.response.status_code}",
                            extra={"receipt_kind": kind},
                        )
                        return False

                    if attempt >= self.max_retries:
                        logger.error(
                            f"Receipt delivery failed after {attempt} attempts: {e}",
                            extra={"receipt_kind": kind},
                        )
                        return False

                    # Exponential backoff: 1s, 2s, 4s, 8s, 16s
                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

        return False
