# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exchange rate schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ExchangeRateResponse(BaseModel):
    """Latest rate between two currencies."""

    base_currency: str
    target_currency: str
    rate: Decimal
    timestamp: datetime


class RefreshCycleResponse(BaseModel):
    """Summary of one refresh cycle."""

    started_at: datetime
    finished_at: datetime | None
    currencies: int
    updated: int
    empty: int
    failed: int
    persisted: int
    skipped: bool
