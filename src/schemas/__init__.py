# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Pydantic schemas package."""

from src.schemas.common import HealthResponse
from src.schemas.currency import CurrencyCreate, CurrencyResponse
from src.schemas.exchange_rate import ExchangeRateResponse, RefreshCycleResponse

__all__ = [
    "CurrencyCreate",
    "CurrencyResponse",
    "ExchangeRateResponse",
    "HealthResponse",
    "RefreshCycleResponse",
]
