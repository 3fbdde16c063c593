"""Exchange error classes.

Every failure of a registry or pool operation is reported synchronously as
one of these exceptions. None are retried internally; a caller that retries
must re-read reserves, since prices move with every successful swap.
"""

from __future__ import annotations

# SlippageExceeded wording by direction
INSUFFICIENT_OUTPUT_TOTAL = "insufficient output total"
INSUFFICIENT_OUTPUT_AMOUNT = "insufficient output amount"
INSUFFICIENT_TOKEN_AMOUNT = "insufficient token amount"


class ExchangeError(Exception):
    """Base error for registry and pool operations."""

    pass


class InvalidAsset(ExchangeError):
    """The sentinel "no asset" identity (or an unknown one) was used."""

    def __init__(self, address: str, reason: str = "invalid token address") -> None:
        super().__init__(f"{reason}: {address}")
        self.address = address


class PoolAlreadyExists(ExchangeError):
    """A pool is already registered for this asset."""

    def __init__(self, address: str) -> None:
        super().__init__(f"exchange already exists: {address}")
        self.address = address


class NoPoolForAsset(ExchangeError):
    """No pool is registered for the asset a routed operation needs."""

    def __init__(self, address: str) -> None:
        super().__init__(f"no exchange for token: {address}")
        self.address = address


class TransferRejected(ExchangeError):
    """An underlying asset movement failed (balance or allowance too low)."""

    pass


class SlippageExceeded(ExchangeError):
    """Computed output is below the caller's stated minimum.

    The human-readable message depends on the swap direction
    ("insufficient output total" for base -> paired,
    "insufficient output amount" for paired -> base); callers should
    match on the exception type, not the wording.
    """

    def __init__(self, message: str, amount_out: int, min_amount_out: int) -> None:
        super().__init__(message)
        self.message = message
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out


class EmptyPool(ExchangeError):
    """Pricing or withdrawal was requested on a pool without reserves."""

    pass
