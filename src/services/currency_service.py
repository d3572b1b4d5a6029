# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency registry service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from src.models import Currency
from src.schemas.currency import CurrencyCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrencyRef:
    """Read-only view of a registered currency."""

    code: str
    name: str


class CurrencyServiceError(Exception):
    """Base exception for currency registry errors."""


class DuplicateCurrencyError(CurrencyServiceError):
    """A currency with the same code is already registered."""


def get_currencies(db: Session) -> list[Currency]:
    """Get all registered currencies ordered by code."""
    return db.query(Currency).order_by(Currency.code).all()


def get_currency_by_code(db: Session, code: str) -> Currency | None:
    """Get a currency by its code (case-insensitive)."""
    return db.query(Currency).filter(Currency.code == code.upper()).first()


def create_currency(db: Session, data: CurrencyCreate) -> Currency:
    """Register a new currency.

    Raises:
        DuplicateCurrencyError: If the code is already registered.
    """
    code = data.code.upper()
    if get_currency_by_code(db, code) is not None:
        raise DuplicateCurrencyError(f"Currency with code {code} already exists")

    currency = Currency(code=code, name=data.name)
    db.add(currency)
    db.commit()
    db.refresh(currency)
    logger.info(f"Registered currency {code}")
    return currency


class CurrencyRegistry:
    """Registry lookups used by the exchange rate core.

    Every call opens its own session, so instances can be shared between the
    scheduler and request handlers and called from worker threads.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_all(self) -> list[CurrencyRef]:
        """Return every registered currency."""
        with self._session_factory() as db:
            return [CurrencyRef(code=c.code, name=c.name) for c in get_currencies(db)]

    def get_by_code(self, code: str) -> CurrencyRef | None:
        """Return the currency registered under ``code``, if any."""
        with self._session_factory() as db:
            currency = get_currency_by_code(db, code)
            if currency is None:
                return None
            return CurrencyRef(code=currency.code, name=currency.name)
