"""Integration tests for the rate store and lead webhook clients"""

import logging
from decimal import Decimal

import httpx
import pytest
from pydantic import ValidationError

from assetmx_gateway.api.v1.quote import notify_lead
from assetmx_gateway.config import Settings
from assetmx_gateway.domain.exceptions import RateStoreError
from assetmx_gateway.domain.models import FeeCondition, FeeContext
from assetmx_gateway.domain.rates import RateTable
from assetmx_gateway.infrastructure.clients.leads import LeadClient
from assetmx_gateway.infrastructure.clients.rate_store import RateStoreClient
from assetmx_gateway.infrastructure.rate_provider import RateProvider

RATE_ROWS = [
    {"id": "r60", "term_months": 60, "base_rate": 6.49, "is_active": True},
    {"id": "legacy", "asset_type": "vehicle", "base_rate": 9.99, "is_active": True},
]
FEE_ROWS = [
    {"fee_name": "inspection_fee", "amount": 275, "description": "Inspection", "condition": "private_sale"},
    {"fee_name": "documentation_fee", "amount": 99.5, "condition": None, "financed": True},
]


def store_transport(rate_rows=None, fee_rows=None, seen=None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path == "/rest/v1/rate_config":
            return httpx.Response(200, json=RATE_ROWS if rate_rows is None else rate_rows)
        if request.url.path == "/rest/v1/fee_config":
            return httpx.Response(200, json=FEE_ROWS if fee_rows is None else fee_rows)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def make_store_client(transport: httpx.MockTransport) -> RateStoreClient:
    return RateStoreClient(base_url="http://store.test/", api_key="anon-key", transport=transport)


async def test_fetch_config_merges_rows_over_defaults():
    config = await make_store_client(store_transport()).fetch_config()

    assert config.source == "rate_store"
    assert config.rates[60] == Decimal("6.49")
    assert config.rates[12] == Decimal("6.45")  # untouched default
    assert Decimal("9.99") not in config.rates.values()

    fees = {fee.name: fee for fee in config.fees}
    assert fees["inspection_fee"].amount_cents == 27_500
    assert fees["inspection_fee"].applies_when == FeeCondition.PRIVATE_SALE_ONLY
    assert fees["documentation_fee"].amount == Decimal("99.50")
    assert fees["documentation_fee"].financed is True
    assert fees["platform_fee"].amount_cents == 80_000


async def test_fetch_config_sends_auth_and_active_filter():
    seen = []
    await make_store_client(store_transport(seen=seen)).fetch_config()

    rate_request = seen[0]
    assert rate_request.url.params["is_active"] == "eq.true"
    assert rate_request.headers["apikey"] == "anon-key"
    assert rate_request.headers["Authorization"] == "Bearer anon-key"


async def test_fetch_config_http_error():
    client = make_store_client(httpx.MockTransport(lambda request: httpx.Response(500)))

    with pytest.raises(RateStoreError):
        await client.fetch_config()


async def test_fetch_config_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RateStoreError):
        await make_store_client(httpx.MockTransport(handler)).fetch_config()


async def test_fetch_config_unknown_fee_condition():
    transport = store_transport(fee_rows=[{"fee_name": "x", "amount": 1, "condition": "weekends"}])

    with pytest.raises(RateStoreError):
        await make_store_client(transport).fetch_config()


async def test_provider_reload_installs_new_snapshot():
    provider = RateProvider()

    assert await provider.reload(make_store_client(store_transport())) is True

    table = provider.current()
    assert table.source == "rate_store"
    assert table.rate_for_term(60) == Decimal("6.49")
    assert [f.name for f in table.fee_schedule(FeeContext(private_sale=True))][-2:] == [
        "inspection_fee",
        "documentation_fee",
    ]


async def test_provider_reload_keeps_snapshot_on_store_failure(rate_table: RateTable):
    provider = RateProvider(rate_table)
    client = make_store_client(httpx.MockTransport(lambda request: httpx.Response(503)))

    assert await provider.reload(client) is False
    assert provider.current() is rate_table


async def test_provider_reload_keeps_snapshot_on_invalid_config(rate_table: RateTable):
    provider = RateProvider(rate_table)
    transport = store_transport(rate_rows=[{"term_months": 60, "base_rate": -1}])

    assert await provider.reload(make_store_client(transport)) is False
    assert provider.current() is rate_table


async def test_lead_client_retries_server_errors():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(503 if len(attempts) < 3 else 202)

    client = LeadClient(
        webhook_url="http://leads.test/hook",
        max_retries=5,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )
    await client.send_quote_event({"event": "QUOTE_ISSUED"})

    assert len(attempts) == 3


async def test_lead_client_gives_up_after_max_retries():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(502)

    client = LeadClient(
        webhook_url="http://leads.test/hook",
        max_retries=3,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await client.send_quote_event({"event": "QUOTE_ISSUED"})
    assert len(attempts) == 3


async def test_lead_client_does_not_retry_client_errors():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(400)

    client = LeadClient(
        webhook_url="http://leads.test/hook",
        max_retries=5,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await client.send_quote_event({"event": "QUOTE_ISSUED"})
    assert len(attempts) == 1


async def test_lead_client_disabled_sends_nothing():
    attempts = []
    client = LeadClient(transport=httpx.MockTransport(lambda request: attempts.append(request)))
    client.webhook_url = None

    await client.send_quote_event({"event": "QUOTE_ISSUED"})

    assert client.enabled is False
    assert attempts == []


async def test_lead_client_explicit_single_attempt():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(502)

    client = LeadClient(
        webhook_url="http://leads.test/hook",
        max_retries=1,
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await client.send_quote_event({"event": "QUOTE_ISSUED"})
    assert len(attempts) == 1


def test_lead_client_requires_at_least_one_attempt():
    with pytest.raises(ValueError):
        LeadClient(webhook_url="http://leads.test/hook", max_retries=0)


def test_settings_reject_zero_webhook_retries():
    with pytest.raises(ValidationError):
        Settings(webhook_max_retries=0)


class _BrokenUrlLeadClient:
    async def send_quote_event(self, payload):
        raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")


async def test_notify_lead_contains_malformed_webhook_url(caplog):
    with caplog.at_level(logging.ERROR):
        await notify_lead(_BrokenUrlLeadClient(), {"event": "QUOTE_ISSUED"}, "req-1")

    assert "Lead notification failed" in caplog.text
