"""POST /v1/quote - priced quote for a calculator request"""

import logging
import time
from typing import Any, Dict

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from assetmx_gateway.api.dependencies import get_lead_client, get_quote_engine, get_request_id
from assetmx_gateway.api.v1.schemas import QuoteRequest, QuoteResponse
from assetmx_gateway.domain.exceptions import ConfigError, InvalidRequestError
from assetmx_gateway.domain.quotes import QuoteEngine
from assetmx_gateway.infrastructure.clients.leads import LeadClient
from assetmx_gateway.infrastructure.observability.logging import log_quote
from assetmx_gateway.infrastructure.observability.metrics import quote_rejected_counter, record_quote
from assetmx_gateway.utils.formatting import format_currency, format_percentage

router = APIRouter()


async def notify_lead(lead_client: LeadClient, payload: Dict[str, Any], request_id: str) -> None:
    """Deliver the lead event; delivery failures never reach the quote response"""
    try:
        await lead_client.send_quote_event(payload)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logging.error(f"Lead notification failed: {e}", extra={"request_id": request_id})


@router.post("/quote", response_model=QuoteResponse)
async def create_quote(
    request_body: QuoteRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    engine: QuoteEngine = Depends(get_quote_engine),
    lead_client: LeadClient = Depends(get_lead_client),
):
    """
    Price a loan request.

    Flow:
    1. Compute the quote against the current rate snapshot
    2. Record metrics and logs
    3. Schedule the lead notification (independent, retried on its own)
    4. Return the quote
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        quote = engine.compute_quote(request_body.to_domain())

    except InvalidRequestError as e:
        quote_rejected_counter.labels(field=e.field).inc()
        logging.warning(f"Invalid quote request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"message": str(e), "field": e.field})

    except ConfigError as e:
        logging.error(f"Rate configuration error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Rate configuration unavailable")

    duration_ms = (time.time() - start_time) * 1000
    record_quote(request_body.asset_type.value)
    log_quote(
        request_id,
        request_body.asset_type.value,
        request_body.loan_amount,
        request_body.term_months,
        quote.monthly_repayment,
        duration_ms,
    )

    if lead_client.enabled:
        background_tasks.add_task(
            notify_lead,
            lead_client,
            {
                "event": "QUOTE_ISSUED",
                "request_id": request_id,
                "contact_name": request_body.contact_name,
                "contact_email": request_body.contact_email,
                "contact_phone": request_body.contact_phone,
                "asset_type": request_body.asset_type.value,
                "asset_condition": request_body.asset_condition.value,
                "loan_amount": str(request_body.loan_amount),
                "term_months": request_body.term_months,
                "balloon_percent": str(request_body.balloon_percent),
                "indicative_rate_percent": str(quote.indicative_rate_percent),
                "monthly_repayment": str(quote.monthly_repayment),
                "total_cost": str(quote.total_cost),
                "summary": (
                    f"{format_currency(request_body.loan_amount)} over {request_body.term_months} months: "
                    f"{format_currency(quote.monthly_repayment)}/month at {format_percentage(quote.indicative_rate_percent)}"
                ),
            },
            request_id,
        )

    return QuoteResponse.from_domain(quote)
