"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request

from assetmx_gateway.config import settings
from assetmx_gateway.domain.quotes import QuoteEngine
from assetmx_gateway.infrastructure.clients.leads import LeadClient
from assetmx_gateway.infrastructure.clients.rate_store import RateStoreClient
from assetmx_gateway.infrastructure.rate_provider import RateProvider

# Process-wide snapshot holder; reloads go through RateProvider.reload
rate_provider = RateProvider()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_provider() -> RateProvider:
    return rate_provider


def get_quote_engine(provider: RateProvider = Depends(get_rate_provider)) -> QuoteEngine:
    """Engine bound to the snapshot current at request time"""
    return QuoteEngine(provider.current(), settings.reference_markup_percent)


def get_rate_store_client() -> RateStoreClient:
    """Provide rate store client instance"""
    return RateStoreClient()


def get_lead_client() -> LeadClient:
    """Provide lead webhook client instance"""
    return LeadClient()
