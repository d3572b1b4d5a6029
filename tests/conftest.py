# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["OPENEXCHANGERATES_BASE_URL"] = "https://openexchangerates.test/api"
os.environ["OPENEXCHANGERATES_API_KEY"] = "test-app-id"  # nosec - test-only key
os.environ["SCHEDULER_ENABLED"] = "false"

from src.database import get_db
from src.main import app
from src.models import Currency, ExchangeRate
from src.models.base import Base
from src.services.currency_service import CurrencyRegistry
from src.services.rate_cache import RateCache
from src.services.rate_provider import FetchedRates
from src.services.rate_refresher import RateRefresher
from src.services.rate_store import RateStore

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FETCHED_AT = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def add_currency(db_session, code: str, name: str | None = None) -> Currency:
    """Register a currency directly in the database."""
    currency = Currency(code=code, name=name or code)
    db_session.add(currency)
    db_session.commit()
    db_session.refresh(currency)
    return currency


def add_rate(
    db_session,
    base: Currency,
    target: Currency,
    rate: str,
    timestamp: datetime | None = None,
) -> ExchangeRate:
    """Store a historical rate observation."""
    row = ExchangeRate(
        base_currency_id=base.id,
        target_currency_id=target.id,
        rate=Decimal(rate),
        timestamp=timestamp or datetime.now(UTC),
    )
    db_session.add(row)
    db_session.commit()
    return row


def count_rates(db_session) -> int:
    """Count stored rate observations."""
    db_session.expire_all()
    return db_session.query(ExchangeRate).count()


class FakeFetcher:
    """In-memory rate provider that records every call.

    ``responses`` maps a base code to either a {target: "rate"} dict or an
    exception to raise.
    """

    def __init__(self, responses: dict | None = None) -> None:
        self.responses: dict = responses or {}
        self.calls: list[str] = []

    async def fetch_rates(self, base_code: str) -> FetchedRates:
        self.calls.append(base_code)
        response = self.responses.get(base_code, {})
        if isinstance(response, Exception):
            raise response
        return FetchedRates(
            base=base_code,
            rates={code: Decimal(value) for code, value in response.items()},
            fetched_at=FETCHED_AT,
        )


@pytest.fixture
def usd(db_session) -> Currency:
    return add_currency(db_session, "USD", "US Dollar")


@pytest.fixture
def eur(db_session) -> Currency:
    return add_currency(db_session, "EUR", "Euro")


@pytest.fixture
def gbp(db_session) -> Currency:
    return add_currency(db_session, "GBP", "British Pound")


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def registry(db_session) -> CurrencyRegistry:
    return CurrencyRegistry(TestingSessionLocal)


@pytest.fixture
def store(db_session) -> RateStore:
    return RateStore(TestingSessionLocal)


@pytest.fixture
def rate_cache() -> RateCache:
    return RateCache()


@pytest.fixture
def refresher(fetcher, registry, store, rate_cache) -> RateRefresher:
    return RateRefresher(
        fetcher=fetcher,
        registry=registry,
        store=store,
        cache=rate_cache,
        fetch_timeout=1.0,
    )
