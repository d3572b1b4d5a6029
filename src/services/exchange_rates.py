# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exchange rate service wiring."""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from src.config import Settings
from src.services.currency_service import CurrencyRegistry
from src.services.rate_cache import RateCache
from src.services.rate_provider import OpenExchangeRatesClient, RateFetcher
from src.services.rate_refresher import RateRefresher
from src.services.rate_resolver import RateLookupResult, RateResolver
from src.services.rate_store import RateStore
from src.services.refresh_scheduler import CycleReport, RefreshScheduler

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """Owns the rate cache and the components that read and write it.

    One instance is created per application and shared by the scheduler and
    the request handlers.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: Callable[[], Session],
        fetcher: RateFetcher | None = None,
    ) -> None:
        self.settings = settings
        self.cache = RateCache()
        self.registry = CurrencyRegistry(session_factory)
        self.store = RateStore(session_factory)
        self.fetcher = fetcher or OpenExchangeRatesClient(
            base_url=settings.openexchangerates_base_url,
            api_key=settings.openexchangerates_api_key,
            timeout=settings.fetch_timeout_seconds,
        )
        self.refresher = RateRefresher(
            fetcher=self.fetcher,
            registry=self.registry,
            store=self.store,
            cache=self.cache,
            fetch_timeout=settings.fetch_timeout_seconds,
        )
        self.resolver = RateResolver(
            registry=self.registry,
            cache=self.cache,
            refresher=self.refresher,
        )
        self.scheduler = RefreshScheduler(
            refresher=self.refresher,
            registry=self.registry,
            interval_seconds=settings.refresh_interval_seconds,
            overlap_policy=settings.refresh_overlap_policy,
            max_workers=settings.refresh_max_workers,
        )

    async def get_rate(self, base_code: str, target_code: str) -> RateLookupResult:
        """Look up the latest rate between two currencies."""
        return await self.resolver.get_rate(base_code, target_code)

    async def refresh_all(self) -> CycleReport:
        """Run one refresh cycle now, honouring the overlap policy."""
        return await self.scheduler.tick()

    def start(self) -> None:
        """Start the background refresh loop if enabled."""
        if not self.settings.scheduler_enabled:
            logger.info("Exchange rate scheduler disabled")
            return
        self.scheduler.start(run_immediately=self.settings.refresh_on_startup)

    async def close(self) -> None:
        """Stop the scheduler and release the provider client."""
        await self.scheduler.stop()
        close = getattr(self.fetcher, "close", None)
        if close is not None:
            await close()
