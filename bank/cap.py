"""Global deposit cap enforcement.

Two timings are supported:

- PRE: the incoming value can be priced independently (native asset via
  the oracle), so the cap is checked before any swap is attempted.
- POST: the incoming value is only known once the swap has settled
  (arbitrary tokens), so the measured output is checked and a failure
  reverts the whole operation, swap and transfer-in included.
"""

from __future__ import annotations

from enum import Enum

import structlog

from bank.errors import GlobalLimitExceeded
from bank.ledger import Ledger
from bank.safe_int import S

logger = structlog.get_logger()


class CapCheck(str, Enum):
    """When the cap was verified relative to the conversion step."""

    PRE = "pre"
    POST = "post"


class CapGuard:
    """Enforces bank total + incoming <= global cap."""

    def __init__(self, ledger: Ledger, global_cap: int) -> None:
        self._ledger = ledger
        self.global_cap = global_cap

    @property
    def headroom(self) -> int:
        """Value that can still be deposited before hitting the cap."""
        return max(self.global_cap - self._ledger.total, 0)

    def pre_check(self, estimate: int) -> None:
        """Check an estimated deposit value before any external conversion."""
        self._enforce(estimate, CapCheck.PRE)

    def post_check(self, amount_out: int) -> None:
        """Check a measured conversion result after the swap settled."""
        self._enforce(amount_out, CapCheck.POST)

    def _enforce(self, amount: int, mode: CapCheck) -> None:
        total = self._ledger.total
        if S(total) + S(amount) > self.global_cap:
            logger.warning(
                "global_limit_exceeded",
                mode=mode.value,
                total=total,
                amount=amount,
                cap=self.global_cap,
            )
            raise GlobalLimitExceeded(total=total, amount=amount, cap=self.global_cap)
