# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Persistence for exchange rate history."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from src.models import Currency, ExchangeRate
from src.services.rate_errors import RatePersistenceError

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass(frozen=True)
class RateObservation:
    """One measurement of a base -> target rate."""

    base: str
    target: str
    value: Decimal
    observed_at: datetime


class RateStore:
    """Append-only rate history backed by the ``exchange_rates`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_latest(self, base: str, target: str) -> RateObservation | None:
        """Return the most recent observation for a pair, if any."""
        base_currency = aliased(Currency)
        target_currency = aliased(Currency)
        with self._session_factory() as db:
            latest = (
                db.query(ExchangeRate)
                .join(base_currency, ExchangeRate.base_currency_id == base_currency.id)
                .join(
                    target_currency,
                    ExchangeRate.target_currency_id == target_currency.id,
                )
                .filter(base_currency.code == base, target_currency.code == target)
                .order_by(ExchangeRate.timestamp.desc())
                .first()
            )
            if latest is None:
                return None
            return RateObservation(
                base=base,
                target=target,
                value=latest.rate,
                observed_at=_as_utc(latest.timestamp),
            )

    def save_all(self, observations: Sequence[RateObservation]) -> int:
        """Persist observations in a single transaction.

        Returns:
            Number of rows written.

        Raises:
            RatePersistenceError: If a currency is missing or the write fails.
        """
        if not observations:
            return 0

        codes = {o.base for o in observations} | {o.target for o in observations}
        with self._session_factory() as db:
            try:
                ids = dict(
                    db.query(Currency.code, Currency.id)
                    .filter(Currency.code.in_(codes))
                    .all()
                )
                missing = codes - ids.keys()
                if missing:
                    raise RatePersistenceError(
                        f"Unknown currencies: {', '.join(sorted(missing))}"
                    )

                db.add_all(
                    ExchangeRate(
                        base_currency_id=ids[o.base],
                        target_currency_id=ids[o.target],
                        rate=o.value,
                        timestamp=o.observed_at,
                    )
                    for o in observations
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to save exchange rates: {e}")
                raise RatePersistenceError(f"Failed to save exchange rates: {e}") from e

        return len(observations)
