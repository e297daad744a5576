"""Static price feed standing in for an external oracle aggregator."""

from __future__ import annotations

from bank.models.types import normalize_address


class StaticPriceFeed:
    """Reports whatever price and timestamp were last set.

    Price has 8 fractional digits (Chainlink answer format) and may be
    set to zero or negative to model a broken aggregator.
    """

    def __init__(self, address: str, price: int, observed_at: int) -> None:
        self.address = normalize_address(address, validate=True)
        self._price = price
        self._observed_at = observed_at
        self.reads = 0

    def set_price(self, price: int, observed_at: int) -> None:
        self._price = price
        self._observed_at = observed_at

    def latest_price(self) -> tuple[int, int]:
        self.reads += 1
        return self._price, self._observed_at
