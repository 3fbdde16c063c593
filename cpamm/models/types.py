"""Shared type definitions: asset identities and amounts.

Asset identities are Ethereum-style addresses (0x + 40 hex chars), compared
in lowercase. Amounts are plain ints constrained to the uint256 range.
"""

from __future__ import annotations

import hashlib
from typing import Annotated, Any

from pydantic import Field

from cpamm.constants import ZERO_ADDRESS
from cpamm.safe_int import UINT256_MAX

# Ethereum-style address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# Non-negative integer within uint256 range
Amount = Annotated[int, Field(ge=0, le=UINT256_MAX)]


def validate_amount(value: Any, name: str = "amount") -> int:
    """Validate that a value is a uint256 amount.

    Args:
        value: Value to validate
        name: Argument name used in error messages

    Returns:
        The value as int

    Raises:
        ValueError: If value is not an int, is negative, or exceeds 2^256-1
    """
    # bool is an int subclass but never a meaningful amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"{name} overflow: {value} > 2^256-1")
    return value


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for malformed addresses

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is malformed
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a well-formed address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def is_zero_address(address: str) -> bool:
    """Check if an address is the reserved "no asset" sentinel."""
    return normalize_address(address) == ZERO_ADDRESS


def derive_address(*parts: str | int) -> str:
    """Derive a deterministic address from its creator and a salt.

    The address is the last 20 bytes of sha256 over the joined parts, so the
    same creator and salt always yield the same identity.

    Args:
        parts: Creator address, nonce, or other salt values

    Returns:
        Lowercase address with 0x prefix
    """
    digest = hashlib.sha256(":".join(str(p) for p in parts).encode()).hexdigest()
    return "0x" + digest[-40:]
