"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from assetmx_gateway.api.dependencies import rate_provider
from assetmx_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from assetmx_gateway.api.v1 import eligibility, quote, rates
from assetmx_gateway.config import settings
from assetmx_gateway.infrastructure.clients.rate_store import RateStoreClient
from assetmx_gateway.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the rate snapshot from the store before serving quotes"""
    if settings.rate_store_configured and settings.load_rates_on_startup:
        await rate_provider.reload(RateStoreClient())
    else:
        logging.info("Rate store not configured, using lender sheet defaults")
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="AssetMX Quote Gateway",
        description="Asset finance quotes and pre-eligibility checks",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(quote.router, prefix="/v1", tags=["quotes"])
    app.include_router(eligibility.router, prefix="/v1", tags=["eligibility"])
    app.include_router(rates.router, prefix="/v1", tags=["rates"])

    return app


app = create_app()
