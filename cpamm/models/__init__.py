"""Data models for exchange state and identities."""

from cpamm.models.state import PoolState, Quote
from cpamm.models.types import (
    Address,
    Amount,
    derive_address,
    is_valid_address,
    is_zero_address,
    normalize_address,
    validate_amount,
)

__all__ = [
    "Address",
    "Amount",
    "PoolState",
    "Quote",
    "derive_address",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    "validate_amount",
]
