# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Rate lookups with cache -> refresh -> cache fallback."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.services.currency_service import CurrencyRegistry
from src.services.rate_cache import RateCache
from src.services.rate_errors import RateFetchError
from src.services.rate_refresher import RateRefresher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateQuote:
    """A successful lookup."""

    base: str
    target: str
    value: Decimal
    as_of: datetime


@dataclass(frozen=True)
class InvalidCurrency:
    """A requested code is not registered."""

    code: str

    @property
    def message(self) -> str:
        return f"Currency not found with code: {self.code}"


@dataclass(frozen=True)
class RemoteFetchFailed:
    """The on-demand refresh could not reach the provider."""

    base: str
    cause: RateFetchError

    @property
    def message(self) -> str:
        return f"Failed to fetch exchange rates for {self.base}: {self.cause}"


@dataclass(frozen=True)
class NotFoundAfterRefresh:
    """The pair is still missing after a fresh fetch."""

    base: str
    target: str

    @property
    def message(self) -> str:
        return (
            f"No exchange rate found from {self.base} to {self.target} "
            f"after refresh attempt"
        )


RateLookupFailure = InvalidCurrency | RemoteFetchFailed | NotFoundAfterRefresh
RateLookupResult = RateQuote | RateLookupFailure


class RateResolver:
    """Answers "what is the rate from A to B"."""

    def __init__(
        self,
        registry: CurrencyRegistry,
        cache: RateCache,
        refresher: RateRefresher,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self.refresher = refresher

    def _from_cache(self, base: str, target: str) -> RateQuote | None:
        cached = self.cache.get(base, target)
        if cached is None:
            return None
        return RateQuote(base=base, target=target, value=cached.value, as_of=cached.as_of)

    async def get_rate(self, base_code: str, target_code: str) -> RateLookupResult:
        """Look up the latest rate from ``base_code`` to ``target_code``.

        A cache hit is answered without calling the provider. On a miss the
        base currency is refreshed synchronously and the cache is read once
        more.
        """
        base = await asyncio.to_thread(self.registry.get_by_code, base_code)
        if base is None:
            return InvalidCurrency(code=base_code.upper())
        target = await asyncio.to_thread(self.registry.get_by_code, target_code)
        if target is None:
            return InvalidCurrency(code=target_code.upper())

        quote = self._from_cache(base.code, target.code)
        if quote is not None:
            return quote

        logger.info(
            f"Exchange rate {base.code}->{target.code} not found in cache. "
            f"Fetching from API..."
        )
        outcome = await self.refresher.refresh_currency(base)
        if outcome.error is not None:
            return RemoteFetchFailed(base=base.code, cause=outcome.error)

        quote = self._from_cache(base.code, target.code)
        if quote is not None:
            return quote
        return NotFoundAfterRefresh(base=base.code, target=target.code)
