# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-process exchange rate cache."""

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType


@dataclass(frozen=True)
class CachedRate:
    """A cached rate together with the time it was observed."""

    value: Decimal
    as_of: datetime


RateTable = Mapping[str, CachedRate]


class RateCache:
    """Maps base code -> {target code -> CachedRate}.

    Per-base tables are never mutated in place. ``replace_base_table`` swaps
    in a frozen copy under the lock, so a reader sees either the old table or
    the new one. Entries live for the lifetime of the process.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: dict[str, RateTable] = {}

    def get(self, base: str, target: str) -> CachedRate | None:
        """Return the cached rate for a pair, or None on a miss."""
        with self._lock:
            table = self._tables.get(base)
        if table is None:
            return None
        return table.get(target)

    def get_table(self, base: str) -> RateTable | None:
        """Return the full table for a base currency."""
        with self._lock:
            return self._tables.get(base)

    def replace_base_table(self, base: str, table: Mapping[str, CachedRate]) -> None:
        """Atomically replace the whole table for ``base``."""
        frozen = MappingProxyType(dict(table))
        with self._lock:
            self._tables[base] = frozen

    def bases(self) -> list[str]:
        """Return the base codes that currently have a table."""
        with self._lock:
            return sorted(self._tables)
