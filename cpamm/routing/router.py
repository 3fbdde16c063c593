"""Token-to-token routing through the base asset.

A routed swap sells paired asset A into pool A for base, then spends that
base in pool B on paired asset B. The intermediate base amount moves
directly from pool A to pool B and is never handed to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

from cpamm.errors import INSUFFICIENT_OUTPUT_TOTAL, SlippageExceeded
from cpamm.models.state import Quote
from cpamm.routing.journal import Journal
from cpamm.routing.locks import ordered_locks
from cpamm.safe_int import S

if TYPE_CHECKING:
    from cpamm.exchange.pool import Exchange

logger = structlog.get_logger()


class PoolLookup(Protocol):
    """Resolves an asset address to its pool (None if there is none)."""

    def __call__(self, asset: str) -> Exchange | None: ...


def _price_route(pool_a: Exchange, pool_b: Exchange, paired_in: int) -> tuple[int, int]:
    """Price both legs against the current reserves (both pools locked).

    When both legs go through the same pool, the second leg sees the
    reserves the first leg leaves behind.

    Returns:
        Tuple of (intermediate base amount, paired B amount out)
    """
    paired_reserve_a = pool_a.get_reserve()
    base_reserve_a = pool_a.base_reserve
    base_amount = pool_a.amm.get_amount_out(paired_in, paired_reserve_a, base_reserve_a)

    if pool_b is pool_a:
        base_reserve_b = (S(base_reserve_a) - base_amount).value
        paired_reserve_b = (S(paired_reserve_a) + paired_in).value
    else:
        base_reserve_b = pool_b.base_reserve
        paired_reserve_b = pool_b.get_reserve()
    amount_out = pool_b.amm.get_amount_out(base_amount, base_reserve_b, paired_reserve_b)
    return base_amount, amount_out


def preview_token_to_token(pool_a: Exchange, pool_b: Exchange, paired_in: int) -> Quote:
    """Quote a routed swap without changing either pool.

    Both pools are locked while their reserves are read so the two legs
    price against one consistent state.

    Args:
        pool_a: Pool whose asset is sold
        pool_b: Pool whose asset is bought
        paired_in: Amount of pool A's asset sold

    Returns:
        Quote with the intermediate base amount and the final output

    Raises:
        EmptyPool: If either pool has no reserves
    """
    with ordered_locks(pool_a, pool_b):
        base_amount, amount_out = _price_route(pool_a, pool_b, paired_in)
    return Quote(amount_in=paired_in, amount_out=amount_out, base_amount=base_amount)


def route_token_to_token(
    pool_a: Exchange,
    pool_b: Exchange,
    caller: str,
    paired_in: int,
    min_paired_out: int,
) -> int:
    """Execute a routed swap as one all-or-nothing operation.

    Both pools stay locked from the first read to the last transfer. Both
    legs are priced and the minimum checked before anything moves; if a
    transfer fails part way, the effects already applied are reversed
    before the error propagates.

    Args:
        pool_a: Pool whose asset is sold
        pool_b: Pool whose asset is bought
        caller: Seller of pool A's asset and receiver of pool B's asset
        paired_in: Amount of pool A's asset sold
        min_paired_out: Minimum acceptable amount of pool B's asset

    Returns:
        Amount of pool B's asset sent to caller

    Raises:
        SlippageExceeded: If the output is below min_paired_out
        TransferRejected: If paired_in cannot be pulled from caller
        EmptyPool: If either pool has no reserves
    """
    with ordered_locks(pool_a, pool_b):
        base_amount, amount_out = _price_route(pool_a, pool_b, paired_in)
        if amount_out < min_paired_out:
            raise SlippageExceeded(INSUFFICIENT_OUTPUT_TOTAL, amount_out, min_paired_out)

        with Journal() as journal:
            base_amount = pool_a.sell_paired_for_base(caller, paired_in, base_amount, journal)
            amount_out = pool_b.buy_paired_with_base(
                pool_a.address, base_amount, amount_out, caller, journal
            )

    logger.info(
        "token_to_token_swap",
        pool_in=pool_a.address[-8:],
        pool_out=pool_b.address[-8:],
        trader=caller[-8:],
        paired_in=paired_in,
        base_amount=base_amount,
        paired_out=amount_out,
    )
    return amount_out
