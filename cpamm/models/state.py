"""Pydantic snapshots of pool state and price quotes.

These are read-only views: pools build them under their lock so a snapshot
never mixes values from before and after a mutation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cpamm.models.types import Address, Amount


class PoolState(BaseModel):
    """Point-in-time view of a pool's reserves and share supply."""

    model_config = ConfigDict(frozen=True)

    address: Address
    asset: Address
    name: str
    symbol: str
    base_reserve: Amount
    paired_reserve: Amount
    total_shares: Amount

    @property
    def is_empty(self) -> bool:
        """True when no shares are outstanding."""
        return self.total_shares == 0


class Quote(BaseModel):
    """Result of running an amount through the pricing curve."""

    model_config = ConfigDict(frozen=True)

    amount_in: Amount
    amount_out: Amount
    # Intermediate base amount for routed (two-leg) quotes
    base_amount: Amount | None = Field(default=None)
