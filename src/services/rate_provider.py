# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exchange rate provider client for the Open Exchange Rates API."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

import httpx

from src.services.rate_errors import RateFetchError

logger = logging.getLogger(__name__)

# Default timeout for a single provider call (in seconds)
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class FetchedRates:
    """Full rate table for one base currency as returned by the provider."""

    base: str
    rates: dict[str, Decimal]
    fetched_at: datetime


class RateFetcher(Protocol):
    """Anything that can fetch the rate table for a base currency."""

    async def fetch_rates(self, base_code: str) -> FetchedRates: ...


class OpenExchangeRatesClient:
    """Fetches latest rates from openexchangerates.org."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL (e.g., "https://openexchangerates.org/api").
            api_key: App ID used to authenticate requests.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Token {self.api_key}"
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_rates(self, base_code: str) -> FetchedRates:
        """Fetch the latest rates quoted from ``base_code``.

        Returns:
            FetchedRates with every target code the provider reported.

        Raises:
            RateFetchError: If the API call fails or the payload is malformed.
        """
        params = {"base": base_code}
        if self.api_key:
            params["app_id"] = self.api_key

        try:
            client = await self._get_client()
            response = await client.get("/latest.json", params=params)
            response.raise_for_status()
            # Parse numbers straight into Decimal to keep full precision
            data = response.json(parse_float=Decimal, parse_int=Decimal)
        except httpx.HTTPStatusError as e:
            logger.error(f"API error fetching rates for {base_code}: {e}")
            raise RateFetchError(f"API error: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch rates for {base_code}: {e}")
            raise RateFetchError(f"Failed to fetch rates: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid API response for {base_code}: {e}")
            raise RateFetchError(f"Invalid API response: {e}") from e

        logger.info(f"Fetched exchange rates for base currency: {base_code}")
        return parse_latest_response(base_code, data)


def parse_latest_response(base_code: str, data: Any) -> FetchedRates:
    """Build FetchedRates from a decoded ``/latest.json`` payload.

    The payload looks like ``{"base": "USD", "timestamp": 1700000000,
    "rates": {"EUR": 0.85, ...}}``.

    Raises:
        RateFetchError: If ``rates`` is missing or holds invalid values.
    """
    if not isinstance(data, dict) or not isinstance(data.get("rates"), dict):
        raise RateFetchError("Invalid API response: missing 'rates' object")

    rates: dict[str, Decimal] = {}
    for code, raw in data["rates"].items():
        try:
            value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
        except InvalidOperation as e:
            raise RateFetchError(
                f"Invalid API response: rate for {code} is not a number"
            ) from e
        if not value.is_finite() or value < 0:
            raise RateFetchError(f"Invalid API response: rate for {code} is {value}")
        rates[str(code).upper()] = value

    return FetchedRates(
        base=base_code,
        rates=rates,
        fetched_at=_parse_timestamp(data.get("timestamp")),
    )


def _parse_timestamp(raw: Any) -> datetime:
    """Convert the provider's Unix timestamp, falling back to now."""
    if raw is None:
        return datetime.now(UTC)
    try:
        return datetime.fromtimestamp(int(raw), tz=UTC)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning(f"Ignoring invalid provider timestamp: {raw!r}")
        return datetime.now(UTC)
