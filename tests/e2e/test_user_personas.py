"""
E2E tests for borrower personas against the mock rate store.

These tests require the mock rate store to be running:
    uvicorn mock.rate_store.main:app --port 8001

Borrower personas:
- tradie_ute: New ute from a dealer, quotes against store rates
- private_excavator: Used excavator bought privately, inspection fee applies
- startup_cafe: ABN under two years, declined at eligibility
- long_haul_fleet: 84 month term, inactive store row falls back to the lender sheet
"""

import asyncio
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from assetmx_gateway.infrastructure.clients.rate_store import RateStoreClient
from assetmx_gateway.infrastructure.rate_provider import RateProvider

MOCK_STORE_URL = "http://localhost:8001"


@pytest.fixture
def store_provider(provider: RateProvider) -> RateProvider:
    """Provider loaded from the running mock store"""
    client = RateStoreClient(base_url=MOCK_STORE_URL, api_key="mock-anon-key")
    reloaded = asyncio.run(provider.reload(client))
    assert reloaded, "mock rate store must be running on port 8001"
    return provider


@pytest.mark.integration
def test_tradie_ute_quote(client: TestClient, store_provider: RateProvider):
    """
    tradie_ute: $45k new ute, 48 months, 20% balloon
    Expected: 6.45% from the store, dealer sale so no inspection fee
    """
    response = client.post(
        "/v1/quote",
        json={
            "asset_type": "vehicle",
            "asset_condition": "new",
            "loan_amount": 45000,
            "term_months": 48,
            "balloon_percent": 20,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["indicative_rate_percent"]) == Decimal("6.45")
    assert Decimal(data["balloon_amount"]) == Decimal("9000.00")
    assert "inspection_fee" not in [fee["name"] for fee in data["fees"]]


@pytest.mark.integration
def test_private_excavator_quote(client: TestClient, store_provider: RateProvider):
    """
    private_excavator: $120k used excavator, private sale, 60 months
    Expected: store rate 6.49% and the store's $275 inspection fee
    """
    response = client.post(
        "/v1/quote",
        json={
            "asset_type": "equipment",
            "asset_condition": "used_4_7",
            "loan_amount": 120000,
            "term_months": 60,
            "balloon_percent": 0,
            "private_sale": True,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["indicative_rate_percent"]) == Decimal("6.49")
    fees = {fee["name"]: Decimal(fee["amount"]) for fee in data["fees"]}
    assert fees["inspection_fee"] == Decimal("275.00")
    assert Decimal(data["total_fees_upfront"]) == Decimal("1582.40")


@pytest.mark.integration
def test_startup_cafe_declined(client: TestClient, store_provider: RateProvider):
    """
    startup_cafe: ABN registered 14 months ago, coffee machine
    Expected: declined with a single ABN age reason
    """
    response = client.post(
        "/v1/eligibility?as_of=2025-06-15",
        json={
            "business": {
                "abn": "51 824 753 556",
                "entity_name": "Bean There Cafe Pty Ltd",
                "gst_registered": True,
                "abn_registered_date": "2024-04-10",
            },
            "directors": [{"first_name": "Priya", "last_name": "Shah"}],
            "asset": {"asset_type": "equipment", "asset_condition": "new"},
            "loan": {"loan_amount": 18000, "term_months": 36, "balloon_percentage": 0},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["passed"] is False
    assert len(data["fail_reasons"]) == 1
    assert "14 months" in data["fail_reasons"][0]


@pytest.mark.integration
def test_long_haul_fleet_uses_sheet_rate(client: TestClient, store_provider: RateProvider):
    """
    long_haul_fleet: $480k prime mover, 84 months
    Expected: the store's 84 month row is inactive, so the 7.15% sheet rate applies
    """
    response = client.post(
        "/v1/quote",
        json={
            "asset_type": "truck",
            "asset_condition": "new",
            "loan_amount": 480000,
            "term_months": 84,
            "balloon_percent": 10,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["indicative_rate_percent"]) == Decimal("7.15")
    assert Decimal(data["estimated_saving"]) > 0

    rates = client.get("/v1/rates").json()
    assert rates["source"] == "rate_store"
