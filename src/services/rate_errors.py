# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exceptions raised by the exchange rate infrastructure."""


class ExchangeRateError(Exception):
    """Base exception for exchange rate errors."""


class RateFetchError(ExchangeRateError):
    """The rate provider was unreachable or returned malformed data."""


class RatePersistenceError(ExchangeRateError):
    """Writing rate observations to the database failed."""
