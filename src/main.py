# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.config import settings
from src.database import SessionLocal
from src.schemas.common import HealthResponse
from src.services.exchange_rates import ExchangeRateService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: Wire the exchange rate service and start the scheduler
    logger.info("Initializing exchange rate service...")
    service = ExchangeRateService(settings, SessionLocal)
    app.state.exchange_rates = service
    service.start()

    yield

    # Shutdown: Cleanup
    logger.info("Shutting down exchange rate service...")
    await service.close()
    app.state.exchange_rates = None


app = FastAPI(
    title="Currency Rates Service",
    description="Registers currencies and serves periodically refreshed exchange rates",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Import and include API router after it's created
from src.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
