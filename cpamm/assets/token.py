"""In-memory fungible token.

Implements the FungibleAsset protocol with the usual token semantics:
the initial supply is minted to the deployer, transfers move balances,
and transfer_from spends an allowance granted with approve().
"""

from __future__ import annotations

import threading
from collections import defaultdict

import structlog

from cpamm.assets.base import InsufficientAllowance, InsufficientBalance
from cpamm.models.types import normalize_address, validate_amount
from cpamm.safe_int import S

logger = structlog.get_logger()


class Token:
    """Token ledger keyed by normalized address."""

    def __init__(
        self,
        address: str,
        name: str,
        symbol: str,
        initial_supply: int = 0,
        owner: str | None = None,
    ) -> None:
        """Create a token, minting initial_supply to owner.

        Args:
            address: Identity of the token
            name: Display name
            symbol: Ticker symbol
            initial_supply: Amount minted to owner at construction
            owner: Receiver of the initial supply (required if initial_supply > 0)

        Raises:
            ValueError: If initial_supply is invalid or has no owner
        """
        self._address = normalize_address(address, validate=True)
        self._name = name
        self._symbol = symbol
        self._balances: dict[str, int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)
        self._total_supply = 0
        self._lock = threading.RLock()

        validate_amount(initial_supply, "initial_supply")
        if initial_supply:
            if owner is None:
                raise ValueError("initial_supply requires an owner")
            self._mint(owner, initial_supply)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._symbol}, {self._address})"

    @property
    def address(self) -> str:
        return self._address

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, owner: str) -> int:
        return self._balances.get(normalize_address(owner), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (normalize_address(owner), normalize_address(spender))
        return self._allowances.get(key, 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set spender's allowance over owner's balance (overwrites)."""
        validate_amount(amount)
        with self._lock:
            self._allowances[(normalize_address(owner), normalize_address(spender))] = amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Move amount from sender to recipient.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        validate_amount(amount)
        with self._lock:
            self._move(normalize_address(sender), normalize_address(recipient), amount)
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        """Move amount from owner to recipient, spending spender's allowance.

        Raises:
            InsufficientAllowance: If the allowance is below amount
            InsufficientBalance: If owner holds less than amount
        """
        validate_amount(amount)
        owner_norm = normalize_address(owner)
        key = (owner_norm, normalize_address(spender))
        with self._lock:
            allowed = self._allowances.get(key, 0)
            if allowed < amount:
                raise InsufficientAllowance(
                    f"{self._symbol}: allowance {allowed} < {amount} for {spender}"
                )
            self._move(owner_norm, normalize_address(recipient), amount)
            self._allowances[key] = allowed - amount
        return True

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(f"{self._symbol}: balance {balance} < {amount} for {sender}")
        if sender == recipient:
            return
        credited = (S(self._balances[recipient]) + amount).value
        self._balances[sender] = balance - amount
        self._balances[recipient] = credited

    def _mint(self, owner: str, amount: int) -> None:
        owner_norm = normalize_address(owner)
        with self._lock:
            self._total_supply = (S(self._total_supply) + amount).value
            self._balances[owner_norm] = (S(self._balances[owner_norm]) + amount).value
        logger.debug("token_minted", token=self._symbol, owner=owner_norm[-8:], amount=amount)

    def _burn(self, owner: str, amount: int) -> None:
        owner_norm = normalize_address(owner)
        with self._lock:
            balance = self._balances.get(owner_norm, 0)
            if balance < amount:
                raise InsufficientBalance(
                    f"{self._symbol}: burn amount {amount} exceeds balance {balance}"
                )
            self._balances[owner_norm] = balance - amount
            self._total_supply -= amount
