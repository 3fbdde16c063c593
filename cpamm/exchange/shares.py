"""Share token issued by a pool to its liquidity providers."""

from __future__ import annotations

from cpamm.assets.token import Token


class ShareToken(Token):
    """Transferable token representing proportional ownership of a pool.

    Only the owning pool mints and burns; holders may transfer, approve and
    transfer_from like any other token, so shares can themselves be paired
    in another pool.
    """

    def __init__(self, address: str, name: str, symbol: str) -> None:
        super().__init__(address, name, symbol)

    def mint(self, owner: str, amount: int) -> None:
        """Issue amount new shares to owner."""
        self._mint(owner, amount)

    def burn(self, owner: str, amount: int) -> None:
        """Destroy amount of owner's shares.

        Raises:
            InsufficientBalance: If owner holds fewer than amount shares
        """
        self._burn(owner, amount)
