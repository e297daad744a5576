"""Local host chain providing all-or-nothing operation boundaries.

Every stateful participant (token ledgers, pools, the bank's ledger) is
registered with the Chain. ``Chain.atomic()`` snapshots all of them on entry
and restores every snapshot if the block raises, so a failed operation
leaves no trace, including transfers and swaps it already performed.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog

from bank.chain.native import NativeBalances
from bank.models.types import normalize_address

logger = structlog.get_logger()


@runtime_checkable
class Participant(Protocol):
    """State holder that can be captured and restored."""

    def take_snapshot(self) -> dict[str, Any]: ...

    def restore_snapshot(self, snapshot: dict[str, Any]) -> None: ...


P = TypeVar("P", bound=Participant)


class Chain:
    """Single-threaded host with a clock, a contract directory and atomic blocks.

    Args:
        timestamp: Initial clock value in seconds. Defaults to wall-clock time.
    """

    def __init__(self, timestamp: int | None = None) -> None:
        self._participants: list[Participant] = []
        self._contracts: dict[str, object] = {}
        self._timestamp = int(time.time()) if timestamp is None else timestamp
        self._depth = 0
        self.native = self.register(NativeBalances())

    # --- Participants and contracts ---

    def register(self, participant: P) -> P:
        """Include a participant in every future atomic snapshot."""
        if not any(p is participant for p in self._participants):
            self._participants.append(participant)
        return participant

    def deploy(self, contract: Any) -> Any:
        """Register a contract under its address.

        Raises:
            ValueError: If the address is already taken
        """
        address = normalize_address(contract.address, validate=True)
        if address in self._contracts:
            raise ValueError(f"Address already in use: {address}")
        self._contracts[address] = contract
        if isinstance(contract, Participant):
            self.register(contract)
        logger.debug("contract_deployed", address=address, kind=type(contract).__name__)
        return contract

    def get_contract(self, address: str) -> object | None:
        """Look up a deployed contract by address."""
        return self._contracts.get(normalize_address(address))

    # --- Clock ---

    def now(self) -> int:
        """Current block timestamp in seconds."""
        return self._timestamp

    def set_time(self, timestamp: int) -> None:
        self._timestamp = timestamp

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new timestamp."""
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards: {seconds}")
        self._timestamp += seconds
        return self._timestamp

    # --- Atomicity ---

    @property
    def in_operation(self) -> bool:
        return self._depth > 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block as one indivisible operation.

        Nested blocks join the outermost one; only the outermost boundary
        snapshots and restores.
        """
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshots = [(p, p.take_snapshot()) for p in self._participants]
        self._depth = 1
        try:
            yield
        except Exception as err:
            for participant, snapshot in reversed(snapshots):
                participant.restore_snapshot(snapshot)
            logger.debug(
                "operation_reverted",
                reason=type(err).__name__,
                participants=len(snapshots),
            )
            raise
        finally:
            self._depth = 0
