# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Single-currency rate refresh shared by the scheduler and lookups."""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from enum import Enum

from src.services.currency_service import CurrencyRef, CurrencyRegistry
from src.services.rate_cache import CachedRate, RateCache
from src.services.rate_errors import RateFetchError, RatePersistenceError
from src.services.rate_provider import FetchedRates, RateFetcher
from src.services.rate_store import RateObservation, RateStore

logger = logging.getLogger(__name__)

LatestLookup = Callable[[str, str], RateObservation | None]


class RefreshStatus(str, Enum):
    """How a single-currency refresh ended."""

    UPDATED = "updated"
    EMPTY = "empty"
    FETCH_FAILED = "fetch_failed"


@dataclass
class RefreshOutcome:
    """Result of refreshing one base currency."""

    base: str
    status: RefreshStatus
    table_size: int = 0
    persisted: int = 0
    error: RateFetchError | None = None
    persistence_error: RatePersistenceError | None = None

    @property
    def ok(self) -> bool:
        """Return True unless the remote fetch failed."""
        return self.status != RefreshStatus.FETCH_FAILED


@dataclass
class Reconciliation:
    """Cache table and history rows derived from one fetch."""

    table: dict[str, CachedRate] = field(default_factory=dict)
    new_observations: list[RateObservation] = field(default_factory=list)
    unchanged: int = 0


def reconcile(
    fetched: FetchedRates,
    registered_codes: Collection[str],
    find_latest: LatestLookup,
) -> Reconciliation:
    """Diff a fetched rate table against the stored history.

    Self-rates and targets that are not registered are dropped pair by pair.
    A pair whose latest stored value is exactly equal to the fetched value,
    or whose latest stored observation is not older than this fetch, goes
    into the cache table only. Every other pair also becomes a new
    observation.
    """
    base = fetched.base
    result = Reconciliation()

    for target, value in fetched.rates.items():
        if target == base:
            continue
        if target not in registered_codes:
            logger.debug(f"Skipping rate for {base} to {target}: not registered")
            continue

        result.table[target] = CachedRate(value=value, as_of=fetched.fetched_at)

        latest = find_latest(base, target)
        if latest is not None and (
            latest.value == value or latest.observed_at >= fetched.fetched_at
        ):
            result.unchanged += 1
            continue

        result.new_observations.append(
            RateObservation(
                base=base,
                target=target,
                value=value,
                observed_at=fetched.fetched_at,
            )
        )

    return result


class RateRefresher:
    """Fetches, reconciles, caches and persists rates for one base currency."""

    def __init__(
        self,
        fetcher: RateFetcher,
        registry: CurrencyRegistry,
        store: RateStore,
        cache: RateCache,
        fetch_timeout: float | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.registry = registry
        self.store = store
        self.cache = cache
        self.fetch_timeout = fetch_timeout
        # One reconcile-and-persist section per base at a time
        self._base_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def _fetch(self, code: str) -> FetchedRates:
        """Call the provider, turning a timeout into RateFetchError."""
        try:
            return await asyncio.wait_for(
                self.fetcher.fetch_rates(code), timeout=self.fetch_timeout
            )
        except TimeoutError as e:
            raise RateFetchError(
                f"Timed out after {self.fetch_timeout}s fetching rates for {code}"
            ) from e

    async def refresh_currency(self, base: CurrencyRef) -> RefreshOutcome:
        """Refresh the cached and stored rates quoted from ``base``.

        A fetch failure is reported in the outcome. A persistence failure is
        logged and reported but does not undo the cache update.
        """
        code = base.code
        try:
            fetched = await self._fetch(code)
        except RateFetchError as e:
            logger.error(f"Error fetching exchange rates for base currency {code}: {e}")
            return RefreshOutcome(base=code, status=RefreshStatus.FETCH_FAILED, error=e)

        async with self._base_locks[code]:
            return await self._apply(code, fetched)

    async def _apply(self, code: str, fetched: FetchedRates) -> RefreshOutcome:
        """Reconcile a fetched table, swap it into the cache and persist it."""
        registered = await asyncio.to_thread(
            lambda: {c.code for c in self.registry.list_all()}
        )
        result = await asyncio.to_thread(
            reconcile, fetched, registered, self.store.find_latest
        )

        if not result.table:
            logger.warning(f"No valid exchange rates found for {code}")
            return RefreshOutcome(base=code, status=RefreshStatus.EMPTY)

        self.cache.replace_base_table(code, result.table)

        outcome = RefreshOutcome(
            base=code,
            status=RefreshStatus.UPDATED,
            table_size=len(result.table),
        )
        if result.new_observations:
            try:
                outcome.persisted = await asyncio.to_thread(
                    self.store.save_all, result.new_observations
                )
                logger.info(
                    f"Saved {outcome.persisted} exchange rates to database for {code}"
                )
            except RatePersistenceError as e:
                logger.warning(f"Cache updated but rates for {code} not saved: {e}")
                outcome.persistence_error = e
        else:
            logger.debug(f"All {result.unchanged} rates for {code} unchanged")

        return outcome
