# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for currency_service."""

import pytest
from conftest import add_currency

from src.schemas.currency import CurrencyCreate
from src.services import currency_service
from src.services.currency_service import CurrencyRef, DuplicateCurrencyError


class TestCreateCurrency:
    """Tests for create_currency."""

    def test_creates_currency(self, db_session):
        currency = currency_service.create_currency(
            db_session, CurrencyCreate(code="USD", name="US Dollar")
        )

        assert currency.id is not None
        assert currency.code == "USD"
        assert currency.name == "US Dollar"

    def test_duplicate_code_raises(self, db_session):
        add_currency(db_session, "USD")

        with pytest.raises(DuplicateCurrencyError):
            currency_service.create_currency(
                db_session, CurrencyCreate(code="USD", name="Dollar again")
            )


class TestCurrencyCreateSchema:
    """Tests for CurrencyCreate validation."""

    @pytest.mark.parametrize("code", ["usd", "US", "USDT", "U5D"])
    def test_rejects_invalid_codes(self, code):
        with pytest.raises(ValueError):
            CurrencyCreate(code=code, name="Dollar")

    def test_rejects_blank_name(self):
        with pytest.raises(ValueError):
            CurrencyCreate(code="USD", name="   ")


class TestLookups:
    """Tests for listing and lookup by code."""

    def test_get_currencies_ordered_by_code(self, db_session):
        add_currency(db_session, "USD")
        add_currency(db_session, "EUR")
        add_currency(db_session, "GBP")

        codes = [c.code for c in currency_service.get_currencies(db_session)]

        assert codes == ["EUR", "GBP", "USD"]

    def test_get_by_code_is_case_insensitive(self, db_session, usd):
        assert currency_service.get_currency_by_code(db_session, "usd") is not None

    def test_get_by_code_unknown(self, db_session):
        assert currency_service.get_currency_by_code(db_session, "XYZ") is None


class TestCurrencyRegistry:
    """Tests for CurrencyRegistry."""

    def test_list_all(self, registry, usd, eur):
        assert set(registry.list_all()) == {
            CurrencyRef(code="USD", name="US Dollar"),
            CurrencyRef(code="EUR", name="Euro"),
        }

    def test_list_all_empty(self, registry):
        assert registry.list_all() == []

    def test_get_by_code(self, registry, usd):
        assert registry.get_by_code("USD") == CurrencyRef(code="USD", name="US Dollar")
        assert registry.get_by_code("XYZ") is None
