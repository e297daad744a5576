"""Local host chain and in-memory external collaborators.

These stand in for the real ledger, tokens, swap venue and oracle so the
engine can run and be tested end to end.
"""

from bank.chain.host import Chain, Participant
from bank.chain.native import NativeBalances
from bank.chain.oracle_feed import StaticPriceFeed
from bank.chain.pool import ConstantProductPool, PoolError
from bank.chain.safe_transfer import SafeToken
from bank.chain.token import ApproveCall, FungibleToken, WrappedNative

__all__ = [
    "Chain",
    "Participant",
    "NativeBalances",
    "StaticPriceFeed",
    "ConstantProductPool",
    "PoolError",
    "SafeToken",
    "ApproveCall",
    "FungibleToken",
    "WrappedNative",
]
