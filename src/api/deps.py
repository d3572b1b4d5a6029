# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

from fastapi import HTTPException, Request, status

from src.database import get_db
from src.services.exchange_rates import ExchangeRateService

__all__ = ["get_db", "get_exchange_rate_service"]


def get_exchange_rate_service(request: Request) -> ExchangeRateService:
    """Get the application-wide exchange rate service."""
    service: ExchangeRateService | None = getattr(
        request.app.state, "exchange_rates", None
    )
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Exchange rate service not initialized",
        )
    return service
