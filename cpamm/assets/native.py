"""Ledger for the base asset.

The base asset travels with a call (like a transaction's attached value):
moving it needs no allowance, only a sufficient balance on the sender.
"""

from __future__ import annotations

import threading
from collections import defaultdict

from cpamm.assets.base import InsufficientBalance
from cpamm.constants import DEFAULT_BASE_SYMBOL
from cpamm.models.types import normalize_address, validate_amount
from cpamm.safe_int import S


class NativeLedger:
    """Balances of the base asset keyed by normalized address."""

    def __init__(self, symbol: str = DEFAULT_BASE_SYMBOL) -> None:
        self.symbol = symbol
        self._balances: dict[str, int] = defaultdict(int)
        self._lock = threading.RLock()

    def balance_of(self, owner: str) -> int:
        return self._balances.get(normalize_address(owner), 0)

    def mint(self, owner: str, amount: int) -> None:
        """Credit owner with freshly issued base asset."""
        validate_amount(amount)
        owner_norm = normalize_address(owner)
        with self._lock:
            self._balances[owner_norm] = (S(self._balances[owner_norm]) + amount).value

    def send(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount of base asset from sender to recipient.

        Raises:
            InsufficientBalance: If sender holds less than amount
            Uint256Overflow: If the recipient balance would exceed 2**256 - 1
        """
        validate_amount(amount)
        sender_norm = normalize_address(sender)
        recipient_norm = normalize_address(recipient)
        with self._lock:
            balance = self._balances.get(sender_norm, 0)
            if balance < amount:
                raise InsufficientBalance(
                    f"{self.symbol}: balance {balance} < {amount} for {sender_norm}"
                )
            if sender_norm == recipient_norm:
                return
            credited = (S(self._balances[recipient_norm]) + amount).value
            self._balances[sender_norm] = balance - amount
            self._balances[recipient_norm] = credited
