"""Lead webhook client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Any, Dict

import httpx

from assetmx_gateway.config import settings
from assetmx_gateway.infrastructure.observability.metrics import (
    webhook_failure_counter,
    webhook_latency_histogram,
)

logger = logging.getLogger(__name__)


class LeadClient:
    """Client for notifying the lead-capture service about issued quotes"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.lead_webhook_url
        self.max_retries = settings.webhook_max_retries if max_retries is None else max_retries
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.backoff_base = settings.webhook_backoff_base if backoff_base is None else backoff_base
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_quote_event(self, payload: Dict[str, Any]) -> None:
        """
        Send a lead event with retry logic.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1)
        - Retries on 5xx errors and network failures, not on 4xx
        - Tracks latency histogram and failure counter

        Raises:
            httpx.HTTPError: After the final failed attempt
        """
        if not self.enabled:
            return

        attempt = 0
        async with httpx.AsyncClient(transport=self._transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=10.0,
                        )
                        response.raise_for_status()
                        return

                except httpx.HTTPStatusError as e:
                    webhook_failure_counter.inc()
                    if e.response.status_code < 500:
                        logger.error(f"Lead webhook rejected event: {e.response.status_code}")
                        raise
                    attempt += 1
                    if attempt >= self.max_retries:
                        logger.error(f"Lead webhook failed after {attempt} attempts")
                        raise

                except httpx.RequestError:
                    webhook_failure_counter.inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        logger.error(f"Lead webhook unreachable after {attempt} attempts")
                        raise

                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)
