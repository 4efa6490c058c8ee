"""Rate store HTTP client for fetching rate and fee configuration"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import httpx

from assetmx_gateway.config import settings
from assetmx_gateway.domain.exceptions import RateStoreError
from assetmx_gateway.domain.models import FeeCondition, FeeItem, RateConfig
from assetmx_gateway.domain.rates import DEFAULT_FEES, DEFAULT_RATES

logger = logging.getLogger(__name__)

# fee_config.condition values understood by the engine
_FEE_CONDITIONS = {
    None: FeeCondition.ALWAYS,
    "": FeeCondition.ALWAYS,
    "always": FeeCondition.ALWAYS,
    "private_sale": FeeCondition.PRIVATE_SALE_ONLY,
}


class RateStoreClient:
    """Client for the hosted rate_config / fee_config tables"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.supabase_url or "").rstrip("/")
        self.api_key = api_key or settings.supabase_anon_key or ""
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport

    @property
    def _headers(self) -> Dict[str, str]:
        return {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}

    async def fetch_config(self) -> RateConfig:
        """
        Fetch active rates and fees, merged over the lender sheet defaults.

        Store rows override defaults by term (rates) and by name (fees).

        Raises:
            RateStoreError: On timeout, HTTP errors, or invalid rows
        """
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers, transport=self._transport
        ) as client:
            rate_rows = await self._get(client, "rate_config", {"select": "*", "is_active": "eq.true"})
            fee_rows = await self._get(client, "fee_config", {"select": "*"})

        try:
            rates = _merge_rates(rate_rows)
            fees = _merge_fees(fee_rows)
        except (KeyError, ValueError, TypeError, InvalidOperation) as e:
            raise RateStoreError(f"Invalid configuration data from rate store: {e}") from e

        logger.info(
            "Loaded rate configuration",
            extra={"rate_rows": len(rate_rows), "fee_rows": len(fee_rows)},
        )
        return RateConfig(rates=rates, fees=fees, source="rate_store")

    async def _get(self, client: httpx.AsyncClient, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        try:
            response = await client.get(f"{self.base_url}/rest/v1/{table}", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise RateStoreError(f"Rate store timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise RateStoreError(f"Rate store error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise RateStoreError(f"Rate store unreachable: {e}") from e
        except ValueError as e:
            raise RateStoreError(f"Rate store returned invalid JSON for {table}") from e

        if not isinstance(data, list):
            raise RateStoreError(f"Unexpected {table} payload from rate store")
        return data


def _merge_rates(rows: List[Dict[str, Any]]) -> Dict[int, Decimal]:
    rates = dict(DEFAULT_RATES)
    for row in rows:
        # Legacy rows keyed by asset type/condition carry no term and are skipped
        if not row.get("term_months"):
            continue
        rates[int(row["term_months"])] = Decimal(str(row["base_rate"]))
    return rates


def _merge_fees(rows: List[Dict[str, Any]]) -> tuple:
    fees = {fee.name: fee for fee in DEFAULT_FEES}
    for row in rows:
        name = row["fee_name"]
        condition = row.get("condition")
        if condition not in _FEE_CONDITIONS:
            raise ValueError(f"unknown fee condition {condition!r} for {name}")
        amount_cents = int((Decimal(str(row["amount"])) * 100).to_integral_value())
        existing = fees.get(name)
        fees[name] = FeeItem(
            name=name,
            amount_cents=amount_cents,
            description=row.get("description") or (existing.description if existing else name),
            applies_when=_FEE_CONDITIONS[condition],
            financed=bool(row.get("financed", False)),
        )
    return tuple(fees.values())
