"""Data models for the swap bank.

Receipts live in bank.models.receipts and API payloads in bank.models.api;
they are imported by path to keep this package free of engine imports.
"""

from bank.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
]
