"""Price oracle adapter for the native value asset.

Wraps any PriceSource and refuses to return a price that is non-positive
or older than the staleness window. There is no retry: both failures are
fatal to the operation that asked.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import structlog

from bank.errors import OracleCompromised, StalePrice
from bank.units import native_to_usd

logger = structlog.get_logger()


@runtime_checkable
class PriceSource(Protocol):
    """Protocol for an external price feed.

    Implementations report the native asset price in reserve-asset terms
    with 8 fractional digits, and the time it was observed.
    """

    def latest_price(self) -> tuple[int, int]:
        """Return (price, observed_at)."""
        ...


@dataclass(frozen=True)
class PriceQuote:
    """A validated oracle answer. Never persisted, recomputed on each use."""

    price: int
    observed_at: int


class OracleAdapter:
    """Validating front for a PriceSource.

    Args:
        source: The underlying price feed
        staleness_window: Maximum accepted age of an answer in seconds
        clock: Returns the current timestamp in seconds
    """

    def __init__(
        self,
        source: PriceSource,
        staleness_window: int,
        clock: Callable[[], int],
    ) -> None:
        self._source = source
        self._staleness_window = staleness_window
        self._clock = clock

    def quote(self) -> PriceQuote:
        """Fetch and validate the latest price.

        Raises:
            OracleCompromised: If the reported price is zero or negative
            StalePrice: If now - observed_at exceeds the staleness window
        """
        price, observed_at = self._source.latest_price()
        if price <= 0:
            logger.warning("oracle_compromised", price=price)
            raise OracleCompromised(f"Oracle reported non-positive price: {price}")

        age = self._clock() - observed_at
        if age > self._staleness_window:
            logger.warning("oracle_stale", age=age, window=self._staleness_window)
            raise StalePrice(f"Price is {age}s old (window {self._staleness_window}s)")

        return PriceQuote(price=price, observed_at=observed_at)

    def native_to_usd(self, value: int) -> int:
        """Value a native amount (wei) in accounting units at the current price."""
        return native_to_usd(value, self.quote().price)
