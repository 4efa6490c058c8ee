"""GET /v1/rates - current rate snapshot; POST /v1/rates/reload - refresh it from the rate store"""

import logging

from fastapi import APIRouter, Depends

from assetmx_gateway.api.dependencies import get_rate_provider, get_rate_store_client
from assetmx_gateway.api.v1.schemas import FeeSchema, RateEntrySchema, RatesResponse, ReloadResponse
from assetmx_gateway.config import settings
from assetmx_gateway.domain.rates import max_balloon_for_term
from assetmx_gateway.infrastructure.clients.rate_store import RateStoreClient
from assetmx_gateway.infrastructure.rate_provider import RateProvider

router = APIRouter()


@router.get("/rates", response_model=RatesResponse)
def get_rates(provider: RateProvider = Depends(get_rate_provider)):
    """Rates by term with lender balloon guidance, plus the full fee schedule"""
    table = provider.current()
    return RatesResponse(
        source=table.source,
        reference_markup_percent=settings.reference_markup_percent,
        rates=[
            RateEntrySchema(
                term_months=term,
                base_rate_percent=rate,
                max_balloon_percent=max_balloon_for_term(term),
            )
            for term, rate in sorted(table.as_dict().items())
        ],
        fees=[FeeSchema.from_domain(fee) for fee in table.fees],
    )


@router.post("/rates/reload", response_model=ReloadResponse)
async def reload_rates(
    provider: RateProvider = Depends(get_rate_provider),
    client: RateStoreClient = Depends(get_rate_store_client),
):
    """Swap in the store's configuration; the previous snapshot stays on failure"""
    if not settings.rate_store_configured:
        logging.info("Rate store not configured, keeping current snapshot")
        return ReloadResponse(reloaded=False, source=provider.current().source)

    reloaded = await provider.reload(client)
    return ReloadResponse(reloaded=reloaded, source=provider.current().source)
