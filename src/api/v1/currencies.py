# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.deps import get_db
from src.schemas.currency import CurrencyCreate, CurrencyResponse
from src.services import currency_service
from src.services.currency_service import DuplicateCurrencyError

router = APIRouter()


@router.post("", response_model=CurrencyResponse, status_code=status.HTTP_201_CREATED)
def create_currency(
    data: CurrencyCreate,
    db: Session = Depends(get_db),
) -> CurrencyResponse:
    """Register a new currency."""
    try:
        currency = currency_service.create_currency(db, data)
    except DuplicateCurrencyError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    return CurrencyResponse.model_validate(currency)


@router.get("", response_model=list[CurrencyResponse])
def list_currencies(
    db: Session = Depends(get_db),
) -> list[CurrencyResponse]:
    """Get all registered currencies."""
    currencies = currency_service.get_currencies(db)
    return [CurrencyResponse.model_validate(c) for c in currencies]
