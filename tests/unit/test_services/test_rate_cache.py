# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for rate_cache."""

import threading
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from src.services.rate_cache import CachedRate, RateCache

AS_OF = datetime(2025, 1, 15, tzinfo=UTC)


def _rate(value: str) -> CachedRate:
    return CachedRate(value=Decimal(value), as_of=AS_OF)


class TestRateCache:
    """Tests for RateCache."""

    def test_miss_on_empty_cache(self):
        cache = RateCache()
        assert cache.get("USD", "EUR") is None
        assert cache.get_table("USD") is None

    def test_get_after_replace(self):
        cache = RateCache()
        cache.replace_base_table("USD", {"EUR": _rate("0.85")})

        cached = cache.get("USD", "EUR")
        assert cached == _rate("0.85")
        assert cache.get("USD", "GBP") is None
        assert cache.get("EUR", "USD") is None

    def test_replace_drops_targets_missing_from_new_table(self):
        """Tables are swapped wholesale, not merged."""
        cache = RateCache()
        cache.replace_base_table("USD", {"EUR": _rate("0.85"), "GBP": _rate("0.79")})
        cache.replace_base_table("USD", {"EUR": _rate("0.86")})

        assert cache.get("USD", "EUR").value == Decimal("0.86")
        assert cache.get("USD", "GBP") is None

    def test_replace_copies_input(self):
        """Mutating the caller's dict must not leak into the cache."""
        cache = RateCache()
        table = {"EUR": _rate("0.85")}
        cache.replace_base_table("USD", table)
        table["GBP"] = _rate("0.79")

        assert cache.get("USD", "GBP") is None

    def test_returned_table_is_read_only(self):
        cache = RateCache()
        cache.replace_base_table("USD", {"EUR": _rate("0.85")})
        table = cache.get_table("USD")

        with pytest.raises(TypeError):
            table["GBP"] = _rate("0.79")  # type: ignore[index]
        assert cache.get("USD", "GBP") is None

    def test_bases_lists_cached_currencies(self):
        cache = RateCache()
        cache.replace_base_table("USD", {"EUR": _rate("0.85")})
        cache.replace_base_table("EUR", {"USD": _rate("1.17")})

        assert cache.bases() == ["EUR", "USD"]

    def test_readers_never_see_mixed_tables(self):
        """Concurrent readers see one whole table or the other."""
        cache = RateCache()
        old = {code: _rate("1") for code in ("EUR", "GBP", "JPY")}
        new = {code: _rate("2") for code in ("EUR", "GBP", "JPY")}
        cache.replace_base_table("USD", old)
        torn: list[set] = []
        stop = threading.Event()

        def writer():
            for i in range(2000):
                cache.replace_base_table("USD", new if i % 2 else old)
            stop.set()

        def reader():
            while not stop.is_set():
                table = cache.get_table("USD")
                values = {rate.value for rate in table.values()}
                if len(values) != 1:
                    torn.append(values)

        threads = [threading.Thread(target=writer)] + [
            threading.Thread(target=reader) for _ in range(3)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert torn == []
