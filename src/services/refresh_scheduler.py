# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Fixed-interval refresh of every registered currency."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from src.config import OverlapPolicy
from src.services.currency_service import CurrencyRef, CurrencyRegistry
from src.services.rate_refresher import RateRefresher, RefreshOutcome, RefreshStatus

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    """Summary of one refresh cycle."""

    started_at: datetime
    finished_at: datetime | None = None
    currencies: int = 0
    updated: int = 0
    empty: int = 0
    failed: int = 0
    persisted: int = 0
    skipped: bool = False

    def record(self, outcome: RefreshOutcome) -> None:
        """Count one currency's outcome."""
        if outcome.status == RefreshStatus.UPDATED:
            self.updated += 1
            self.persisted += outcome.persisted
        elif outcome.status == RefreshStatus.EMPTY:
            self.empty += 1
        else:
            self.failed += 1


class RefreshScheduler:
    """Runs a refresh cycle over all currencies on a fixed interval.

    ``overlap_policy`` decides what a tick does while a cycle is still
    running: ``skip`` drops it, ``queue`` waits for the running cycle to
    finish and then runs, ``overlap`` starts another cycle right away.
    """

    def __init__(
        self,
        refresher: RateRefresher,
        registry: CurrencyRegistry,
        interval_seconds: float,
        overlap_policy: OverlapPolicy = "skip",
        max_workers: int = 4,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.refresher = refresher
        self.registry = registry
        self.interval_seconds = interval_seconds
        self.overlap_policy = overlap_policy
        self.max_workers = max_workers
        self._cycle_lock = asyncio.Lock()
        self._running_cycles = 0
        self._loop_task: asyncio.Task | None = None
        self._tick_tasks: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        """True while at least one cycle is in progress."""
        return self._running_cycles > 0

    @property
    def is_started(self) -> bool:
        """True while the background loop is active."""
        return self._loop_task is not None and not self._loop_task.done()

    async def refresh_all(self) -> CycleReport:
        """Run one full refresh cycle. Never raises."""
        report = CycleReport(started_at=datetime.now(UTC))
        self._running_cycles += 1
        try:
            logger.info("Starting scheduled exchange rate update")
            try:
                currencies = await asyncio.to_thread(self.registry.list_all)
            except Exception as e:
                logger.error(f"Could not list currencies for rate update: {e}")
                return report

            report.currencies = len(currencies)
            if not currencies:
                logger.info("No currencies found to update exchange rates")
                return report

            semaphore = asyncio.Semaphore(self.max_workers)
            outcomes = await asyncio.gather(
                *(self._refresh_one(c, semaphore) for c in currencies)
            )
            for outcome in outcomes:
                report.record(outcome)

            logger.info(
                f"Completed scheduled exchange rate update: "
                f"{report.updated} updated, {report.empty} empty, "
                f"{report.failed} failed, {report.persisted} rates saved"
            )
            return report
        finally:
            report.finished_at = datetime.now(UTC)
            self._running_cycles -= 1

    async def _refresh_one(
        self, currency: CurrencyRef, semaphore: asyncio.Semaphore
    ) -> RefreshOutcome:
        """Refresh one currency, isolating any failure."""
        async with semaphore:
            try:
                return await self.refresher.refresh_currency(currency)
            except Exception as e:
                logger.error(f"Error updating rates for currency {currency.code}: {e}")
                return RefreshOutcome(
                    base=currency.code, status=RefreshStatus.FETCH_FAILED
                )

    async def tick(self) -> CycleReport:
        """Handle one timer tick according to the overlap policy."""
        if self.overlap_policy == "overlap":
            return await self.refresh_all()

        if self.overlap_policy == "skip" and self._cycle_lock.locked():
            logger.info("Previous exchange rate update still running, skipping tick")
            return CycleReport(
                started_at=datetime.now(UTC),
                finished_at=datetime.now(UTC),
                skipped=True,
            )

        async with self._cycle_lock:
            return await self.refresh_all()

    def start(self, run_immediately: bool = True) -> None:
        """Start the background loop on the running event loop."""
        if self.is_started:
            return
        self._loop_task = asyncio.create_task(self._run(run_immediately))
        logger.info(
            f"Exchange rate scheduler started (every {self.interval_seconds}s, "
            f"policy={self.overlap_policy})"
        )

    async def stop(self) -> None:
        """Stop the loop and cancel any in-flight cycles."""
        tasks = list(self._tick_tasks)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tick_tasks.clear()
        logger.info("Exchange rate scheduler stopped")

    async def _run(self, run_immediately: bool) -> None:
        """Fire a tick every interval; ticks run as separate tasks."""
        if not run_immediately:
            await asyncio.sleep(self.interval_seconds)
        while True:
            task = asyncio.create_task(self.tick())
            self._tick_tasks.add(task)
            task.add_done_callback(self._tick_tasks.discard)
            await asyncio.sleep(self.interval_seconds)
