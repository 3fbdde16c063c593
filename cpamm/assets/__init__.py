"""Fungible assets: the protocol pools consume and in-memory ledgers."""

from cpamm.assets.base import (
    FungibleAsset,
    InsufficientAllowance,
    InsufficientBalance,
    TokenError,
)
from cpamm.assets.directory import AssetDirectory
from cpamm.assets.native import NativeLedger
from cpamm.assets.token import Token

__all__ = [
    "AssetDirectory",
    "FungibleAsset",
    "InsufficientAllowance",
    "InsufficientBalance",
    "NativeLedger",
    "Token",
    "TokenError",
]
