"""Constant-product exchange pool.

A pool holds reserves of the base asset and of exactly one paired asset,
prices swaps between them on the fee-adjusted constant-product curve and
issues shares to liquidity providers.

Reserves:
- base reserve: a counter kept in lockstep with the pool's NativeLedger balance
- paired reserve: read live from asset.balance_of(pool) on every operation

Every public method holds the pool's lock for its whole duration, and every
mutating method runs inside a Journal so that a failure at any step leaves
reserves, shares and balances exactly as they were.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

from cpamm.amm.constant_product import ConstantProduct, constant_product
from cpamm.assets.base import FungibleAsset, TokenError
from cpamm.assets.native import NativeLedger
from cpamm.constants import SHARE_SYMBOL_SUFFIX
from cpamm.errors import (
    INSUFFICIENT_OUTPUT_AMOUNT,
    INSUFFICIENT_OUTPUT_TOTAL,
    INSUFFICIENT_TOKEN_AMOUNT,
    NoPoolForAsset,
    SlippageExceeded,
    TransferRejected,
)
from cpamm.exchange.shares import ShareToken
from cpamm.models.state import PoolState
from cpamm.models.types import normalize_address, validate_amount
from cpamm.routing.journal import Journal
from cpamm.routing.router import PoolLookup, preview_token_to_token, route_token_to_token
from cpamm.safe_int import S

logger = structlog.get_logger()


def _settle(action: Callable[[], bool], description: str) -> None:
    """Run an asset movement, converting any failure into TransferRejected."""
    try:
        ok = action()
    except TokenError as err:
        raise TransferRejected(f"{description}: {err}") from err
    if ok is False:
        raise TransferRejected(f"{description}: transfer returned false")


class Exchange:
    """Pool trading one paired asset against the base asset.

    Pools are created by PoolRegistry.create_pool(); the registry injects
    a pool_lookup so token-to-token swaps can find the peer pool.
    """

    def __init__(
        self,
        address: str,
        asset: FungibleAsset,
        native: NativeLedger,
        *,
        amm: ConstantProduct = constant_product,
        pool_lookup: PoolLookup | None = None,
        share_symbol_suffix: str = SHARE_SYMBOL_SUFFIX,
    ) -> None:
        """Create an empty pool for asset.

        Args:
            address: Identity of the pool (also its share token's address)
            asset: The paired asset; immutable for the pool's lifetime
            native: Ledger of the base asset
            amm: Pricing curve
            pool_lookup: Resolves an asset address to its pool, for routing
            share_symbol_suffix: Appended to the asset symbol for the share token
        """
        self.address = normalize_address(address, validate=True)
        self.asset = asset
        self.asset_address = normalize_address(asset.address)
        self.native = native
        self.amm = amm
        self.lock = threading.RLock()
        self.shares = ShareToken(
            self.address,
            name=f"{asset.name}-{native.symbol}",
            symbol=f"{asset.symbol}{share_symbol_suffix}",
        )
        self._base_reserve = 0
        self._pool_lookup = pool_lookup

    def __repr__(self) -> str:
        return f"Exchange({self.shares.symbol}, {self.address})"

    @property
    def name(self) -> str:
        return self.shares.name

    @property
    def symbol(self) -> str:
        return self.shares.symbol

    @property
    def base_reserve(self) -> int:
        with self.lock:
            return self._base_reserve

    @property
    def total_shares(self) -> int:
        with self.lock:
            return self.shares.total_supply()

    # --- Reads ---

    def get_reserve(self) -> int:
        """Return the paired-asset reserve (the pool's live balance)."""
        with self.lock:
            return self.asset.balance_of(self.address)

    def get_token_amount(self, base_in: int) -> int:
        """Paired amount bought by selling base_in of the base asset.

        Raises:
            EmptyPool: If the pool has no reserves
        """
        validate_amount(base_in, "base_in")
        with self.lock:
            return self.amm.get_amount_out(base_in, self._base_reserve, self.get_reserve())

    def get_eth_amount(self, paired_in: int) -> int:
        """Base amount bought by selling paired_in of the paired asset.

        Raises:
            EmptyPool: If the pool has no reserves
        """
        validate_amount(paired_in, "paired_in")
        with self.lock:
            return self.amm.get_amount_out(paired_in, self.get_reserve(), self._base_reserve)

    def get_token_to_token_amount(self, paired_in: int, other_asset: str) -> int:
        """Preview selling paired_in of this pool's asset for other_asset.

        Raises:
            NoPoolForAsset: If other_asset has no pool
            EmptyPool: If either pool has no reserves
        """
        validate_amount(paired_in, "paired_in")
        return preview_token_to_token(self, self.find_pool(other_asset), paired_in).amount_out

    def state(self) -> PoolState:
        """Snapshot reserves and share supply consistently."""
        with self.lock:
            return PoolState(
                address=self.address,
                asset=self.asset_address,
                name=self.shares.name,
                symbol=self.shares.symbol,
                base_reserve=self._base_reserve,
                paired_reserve=self.get_reserve(),
                total_shares=self.shares.total_supply(),
            )

    def find_pool(self, asset: str) -> Exchange:
        """Resolve the pool for asset through the injected lookup.

        Raises:
            NoPoolForAsset: If no lookup was injected or asset has no pool
        """
        pool = self._pool_lookup(asset) if self._pool_lookup is not None else None
        if pool is None:
            raise NoPoolForAsset(normalize_address(asset))
        return pool

    # --- Liquidity ---

    def add_liquidity(self, caller: str, paired_amount: int, base_amount: int) -> int:
        """Deposit base and paired asset in exchange for shares.

        On an empty pool both amounts are taken as given and set the price;
        the caller receives base_amount shares. On a non-empty pool the
        paired amount is derived from the current ratio and paired_amount
        is only an upper bound on what may be pulled.

        Args:
            caller: Liquidity provider (must have approved the pool)
            paired_amount: Paired asset supplied (exact if empty, maximum otherwise)
            base_amount: Base asset sent with the call

        Returns:
            Shares issued to caller

        Raises:
            SlippageExceeded: If the derived paired amount exceeds paired_amount
            TransferRejected: If either asset cannot be moved from caller
        """
        validate_amount(paired_amount, "paired_amount")
        validate_amount(base_amount, "base_amount")
        caller = normalize_address(caller)

        with self.lock, Journal() as journal:
            total_shares = self.shares.total_supply()
            quote = self.amm.quote_deposit(
                base_amount=base_amount,
                paired_amount=paired_amount,
                base_reserve=self._base_reserve,
                paired_reserve=self.get_reserve(),
                total_shares=total_shares,
            )
            if total_shares > 0 and quote.paired_amount > paired_amount:
                raise SlippageExceeded(
                    INSUFFICIENT_TOKEN_AMOUNT, quote.paired_amount, paired_amount
                )

            self._receive_base(caller, base_amount, journal)
            self._pull_paired(caller, quote.paired_amount, journal)
            self._mint_shares(caller, quote.shares, journal)

        logger.info(
            "liquidity_added",
            pool=self.address[-8:],
            provider=caller[-8:],
            base=base_amount,
            paired=quote.paired_amount,
            shares=quote.shares,
            initial=total_shares == 0,
        )
        return quote.shares

    def remove_liquidity(self, caller: str, share_amount: int) -> tuple[int, int]:
        """Burn shares and return the caller's pro-rata reserves.

        Returns:
            Tuple of (base amount, paired amount) sent to caller

        Raises:
            EmptyPool: If no shares are outstanding
            TransferRejected: If caller holds fewer than share_amount shares
        """
        validate_amount(share_amount, "share_amount")
        caller = normalize_address(caller)

        with self.lock, Journal() as journal:
            quote = self.amm.quote_withdrawal(
                shares=share_amount,
                base_reserve=self._base_reserve,
                paired_reserve=self.get_reserve(),
                total_shares=self.shares.total_supply(),
            )
            self._burn_shares(caller, share_amount, journal)
            self._debit_base(quote.base_amount, journal)
            self._send_base(caller, quote.base_amount, journal)
            self._push_paired(caller, quote.paired_amount)

        logger.info(
            "liquidity_removed",
            pool=self.address[-8:],
            provider=caller[-8:],
            shares=share_amount,
            base=quote.base_amount,
            paired=quote.paired_amount,
        )
        return quote.base_amount, quote.paired_amount

    # --- Swaps ---

    def eth_to_token_swap(self, caller: str, base_in: int, min_paired_out: int) -> int:
        """Sell base_in of the base asset for at least min_paired_out paired.

        Returns:
            Paired amount sent to caller

        Raises:
            SlippageExceeded: If the output is below min_paired_out
            TransferRejected: If caller cannot pay base_in
            EmptyPool: If the pool has no reserves
        """
        validate_amount(base_in, "base_in")
        validate_amount(min_paired_out, "min_paired_out")
        caller = normalize_address(caller)

        with self.lock, Journal() as journal:
            paired_out = self.buy_paired_with_base(caller, base_in, min_paired_out, caller, journal)

        logger.info(
            "eth_to_token_swap",
            pool=self.address[-8:],
            trader=caller[-8:],
            base_in=base_in,
            paired_out=paired_out,
        )
        return paired_out

    def token_to_eth_swap(self, caller: str, paired_in: int, min_base_out: int) -> int:
        """Sell paired_in of the paired asset for at least min_base_out base.

        Returns:
            Base amount sent to caller

        Raises:
            SlippageExceeded: If the output is below min_base_out
            TransferRejected: If paired_in cannot be pulled from caller
            EmptyPool: If the pool has no reserves
        """
        validate_amount(paired_in, "paired_in")
        validate_amount(min_base_out, "min_base_out")
        caller = normalize_address(caller)

        with self.lock, Journal() as journal:
            base_out = self.sell_paired_for_base(caller, paired_in, min_base_out, journal)
            self._send_base(caller, base_out, journal)

        logger.info(
            "token_to_eth_swap",
            pool=self.address[-8:],
            trader=caller[-8:],
            paired_in=paired_in,
            base_out=base_out,
        )
        return base_out

    def token_to_token_swap(
        self,
        caller: str,
        paired_in: int,
        min_paired_out: int,
        other_asset: str,
    ) -> int:
        """Sell this pool's asset for other_asset, routed through the base asset.

        Returns:
            Amount of other_asset sent to caller

        Raises:
            NoPoolForAsset: If other_asset has no pool
            SlippageExceeded: If the final output is below min_paired_out
            TransferRejected: If paired_in cannot be pulled from caller
        """
        validate_amount(paired_in, "paired_in")
        validate_amount(min_paired_out, "min_paired_out")
        return route_token_to_token(
            self, self.find_pool(other_asset), normalize_address(caller), paired_in, min_paired_out
        )

    # --- Swap legs (caller must hold self.lock) ---

    def sell_paired_for_base(
        self,
        seller: str,
        paired_in: int,
        min_base_out: int,
        journal: Journal,
    ) -> int:
        """Pull paired_in from seller and release base from the reserve.

        The released base is not delivered anywhere; the caller decides
        whether it goes to the seller or into another pool.

        Returns:
            Base amount released from the reserve
        """
        base_out = self.amm.get_amount_out(paired_in, self.get_reserve(), self._base_reserve)
        if base_out < min_base_out:
            raise SlippageExceeded(INSUFFICIENT_OUTPUT_AMOUNT, base_out, min_base_out)

        self._pull_paired(seller, paired_in, journal)
        self._debit_base(base_out, journal)
        return base_out

    def buy_paired_with_base(
        self,
        payer: str,
        base_in: int,
        min_paired_out: int,
        recipient: str,
        journal: Journal,
    ) -> int:
        """Take base_in from payer into the reserve and send paired to recipient.

        Returns:
            Paired amount sent to recipient
        """
        paired_out = self.amm.get_amount_out(base_in, self._base_reserve, self.get_reserve())
        if paired_out < min_paired_out:
            raise SlippageExceeded(INSUFFICIENT_OUTPUT_TOTAL, paired_out, min_paired_out)

        self._receive_base(payer, base_in, journal)
        self._push_paired(recipient, paired_out)
        return paired_out

    # --- Effects ---

    def _receive_base(self, payer: str, amount: int, journal: Journal) -> None:
        try:
            self.native.send(payer, self.address, amount)
        except TokenError as err:
            raise TransferRejected(f"base transfer from {payer}: {err}") from err
        self._base_reserve = (S(self._base_reserve) + amount).value
        journal.record("receive_base", lambda: self._refund_base(payer, amount))

    def _refund_base(self, payer: str, amount: int) -> None:
        self._base_reserve = (S(self._base_reserve) - amount).value
        self.native.send(self.address, payer, amount)

    def _debit_base(self, amount: int, journal: Journal) -> None:
        self._base_reserve = (S(self._base_reserve) - amount).value
        journal.record("debit_base", lambda: self._restore_base(amount))

    def _restore_base(self, amount: int) -> None:
        self._base_reserve = (S(self._base_reserve) + amount).value

    def _send_base(self, recipient: str, amount: int, journal: Journal) -> None:
        """Deliver base already debited from the reserve counter."""
        self.native.send(self.address, recipient, amount)
        journal.record("send_base", lambda: self.native.send(recipient, self.address, amount))

    def _pull_paired(self, owner: str, amount: int, journal: Journal) -> None:
        _settle(
            lambda: self.asset.transfer_from(self.address, owner, self.address, amount),
            f"{self.asset.symbol} transfer from {owner}",
        )
        journal.record("pull_paired", lambda: self._return_paired(owner, amount))

    def _return_paired(self, owner: str, amount: int) -> None:
        """Reverse a pull: give the asset back and re-grant the spent allowance."""
        _settle(
            lambda: self.asset.transfer(self.address, owner, amount),
            f"{self.asset.symbol} refund to {owner}",
        )
        allowance = S(self.asset.allowance(owner, self.address)) + amount
        _settle(
            lambda: self.asset.approve(owner, self.address, allowance.value),
            f"{self.asset.symbol} allowance restore for {owner}",
        )

    def _push_paired(self, recipient: str, amount: int) -> None:
        # Outgoing paired transfers are always the final effect of an
        # operation, so they never need compensating.
        _settle(
            lambda: self.asset.transfer(self.address, recipient, amount),
            f"{self.asset.symbol} transfer to {recipient}",
        )

    def _mint_shares(self, owner: str, amount: int, journal: Journal) -> None:
        self.shares.mint(owner, amount)
        journal.record("mint_shares", lambda: self.shares.burn(owner, amount))

    def _burn_shares(self, owner: str, amount: int, journal: Journal) -> None:
        try:
            self.shares.burn(owner, amount)
        except TokenError as err:
            raise TransferRejected(f"{self.symbol} burn: {err}") from err
        journal.record("burn_shares", lambda: self.shares.mint(owner, amount))
