"""Pytest fixtures for testing"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from assetmx_gateway.api.dependencies import get_lead_client, get_rate_provider
from assetmx_gateway.api.main import create_app
from assetmx_gateway.domain.models import (
    AbnLookupResult,
    Application,
    AssetCondition,
    AssetDetails,
    AssetType,
    BusinessDetails,
    Director,
    LoanDetails,
)
from assetmx_gateway.domain.rates import RateTable
from assetmx_gateway.infrastructure.clients.leads import LeadClient
from assetmx_gateway.infrastructure.rate_provider import RateProvider

AS_OF = date(2025, 6, 15)


@pytest.fixture
def as_of() -> date:
    """Fixed reference date so ABN and asset ages don't drift"""
    return AS_OF


@pytest.fixture
def rate_table() -> RateTable:
    """Lender sheet with 6.49% at 60 months"""
    return RateTable(
        {
            12: Decimal("6.29"),
            24: Decimal("6.39"),
            36: Decimal("6.45"),
            48: Decimal("6.45"),
            60: Decimal("6.49"),
            72: Decimal("7.15"),
            84: Decimal("7.15"),
        }
    )


@pytest.fixture
def make_application():
    """Factory for an application that passes every check; override sections per test"""

    def _make(**overrides) -> Application:
        business = BusinessDetails(
            abn="51 824 753 556",
            entity_name="Harbour Earthmoving Pty Ltd",
            gst_registered=True,
            abn_registered_date=date(2019, 3, 1),
            abn_lookup=AbnLookupResult(
                abn="51824753556",
                abn_status="Active",
                abn_registered_date=date(2019, 3, 1),
                entity_name="Harbour Earthmoving Pty Ltd",
                gst_registered=True,
            ),
        )
        directors = [Director(first_name="Sam", last_name="Nguyen", email="sam@example.com")]
        asset = AssetDetails(
            asset_type=AssetType.TRUCK,
            asset_condition=AssetCondition.USED_4_7,
            asset_year=2020,
            purchase_price=Decimal("85000"),
        )
        loan = LoanDetails(
            loan_amount=Decimal("80000"),
            term_months=60,
            balloon_percentage=Decimal("20"),
            business_use_percentage=Decimal("100"),
        )
        fields = {"business": business, "directors": directors, "asset": asset, "loan": loan}
        fields.update(overrides)
        return Application(**fields)

    return _make


def _no_leads() -> LeadClient:
    lead_client = LeadClient()
    lead_client.webhook_url = None
    return lead_client


@pytest.fixture
def provider(rate_table: RateTable) -> RateProvider:
    return RateProvider(rate_table)


@pytest.fixture
def client(provider: RateProvider) -> TestClient:
    """FastAPI test client with an isolated rate snapshot and lead notifications off"""
    app = create_app()
    app.dependency_overrides[get_rate_provider] = lambda: provider
    app.dependency_overrides[get_lead_client] = _no_leads
    return TestClient(app)
