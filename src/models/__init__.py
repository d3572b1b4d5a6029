# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from src.models.base import Base, ExactDecimal, TimestampMixin
from src.models.currency import Currency
from src.models.exchange_rate import ExchangeRate

__all__ = [
    "Base",
    "Currency",
    "ExactDecimal",
    "ExchangeRate",
    "TimestampMixin",
]
