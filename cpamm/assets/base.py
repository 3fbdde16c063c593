"""Fungible asset protocol consumed by pools, and token-level errors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class TokenError(Exception):
    """Base error for token ledger operations."""

    pass


class InsufficientBalance(TokenError):
    """Sender holds less than the amount being moved."""

    pass


class InsufficientAllowance(TokenError):
    """Spender was approved for less than the amount being pulled."""

    pass


@runtime_checkable
class FungibleAsset(Protocol):
    """Standard fungible-token contract.

    Pools only ever call these methods. A method may signal failure either
    by raising TokenError or by returning False; pools treat both as a
    rejected transfer.
    """

    @property
    def address(self) -> str:
        """Identity of the asset."""
        ...

    @property
    def name(self) -> str: ...

    @property
    def symbol(self) -> str: ...

    def total_supply(self) -> int: ...

    def balance_of(self, owner: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        """Move amount from owner to recipient using spender's allowance."""
        ...
