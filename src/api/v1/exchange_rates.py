# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exchange rate API endpoints."""

import dataclasses

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.deps import get_exchange_rate_service
from src.schemas.currency import CURRENCY_CODE_PATTERN
from src.schemas.exchange_rate import ExchangeRateResponse, RefreshCycleResponse
from src.services.exchange_rates import ExchangeRateService
from src.services.rate_resolver import (
    InvalidCurrency,
    NotFoundAfterRefresh,
    RateQuote,
    RemoteFetchFailed,
)

router = APIRouter()


@router.get("", response_model=ExchangeRateResponse)
async def get_exchange_rate(
    base: str = Query(
        ...,
        pattern=CURRENCY_CODE_PATTERN,
        description="Base currency code (e.g., USD, EUR)",
    ),
    target: str = Query(
        ...,
        pattern=CURRENCY_CODE_PATTERN,
        description="Target currency code (e.g., USD, EUR)",
    ),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
) -> ExchangeRateResponse:
    """Get the latest exchange rate between two currencies."""
    result = await service.get_rate(base, target)

    match result:
        case RateQuote():
            return ExchangeRateResponse(
                base_currency=result.base,
                target_currency=result.target,
                rate=result.value,
                timestamp=result.as_of,
            )
        case InvalidCurrency() | NotFoundAfterRefresh():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=result.message,
            )
        case RemoteFetchFailed():
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=result.message,
            )


@router.post("/refresh", response_model=RefreshCycleResponse)
async def refresh_exchange_rates(
    service: ExchangeRateService = Depends(get_exchange_rate_service),
) -> RefreshCycleResponse:
    """Run a refresh cycle over all registered currencies now."""
    report = await service.refresh_all()
    return RefreshCycleResponse(**dataclasses.asdict(report))
