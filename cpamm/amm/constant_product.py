"""Constant-product pricing and liquidity math.

The curve is x * y = k with a fee taken from the input amount:

    amount_out = (in * m * res_out) / (res_in * 100 + in * m)

where m = 100 - fee_percent (99 for the default 1% fee). The fee is never
paid out separately; it stays in the reserves and accrues to share holders.

All functions are pure and exact-integer; rounding is always toward zero.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.constants import DEFAULT_FEE_PERCENT, FEE_SCALE
from cpamm.errors import EmptyPool
from cpamm.safe_int import S


@dataclass(frozen=True)
class DepositQuote:
    """Amounts involved in adding liquidity to a pool."""

    base_amount: int
    paired_amount: int
    shares: int


@dataclass(frozen=True)
class WithdrawalQuote:
    """Amounts returned for burning shares."""

    shares: int
    base_amount: int
    paired_amount: int


class ConstantProduct:
    """Constant-product curve math.

    Formula: amount_out = (amount_in * 99 * reserve_out) / (reserve_in * 100 + amount_in * 99)

    The 99/100 factor accounts for the 1% fee.
    """

    def __init__(self, fee_multiplier: int = FEE_SCALE - DEFAULT_FEE_PERCENT) -> None:
        if not 0 < fee_multiplier <= FEE_SCALE:
            raise ValueError(f"fee_multiplier must be in (0, {FEE_SCALE}], got {fee_multiplier}")
        self.fee_multiplier = fee_multiplier

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for an exact input.

        Args:
            amount_in: Amount sold into the pool
            reserve_in: Reserve of the sold asset before the trade
            reserve_out: Reserve of the bought asset before the trade

        Returns:
            Amount bought, rounded down

        Raises:
            EmptyPool: If either reserve is zero
        """
        if reserve_in == 0 or reserve_out == 0:
            raise EmptyPool(f"invalid reserves: in={reserve_in}, out={reserve_out}")

        amount_in_with_fee = S(amount_in) * self.fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * FEE_SCALE + amount_in_with_fee

        return (numerator // denominator).value

    def get_routed_amount_out(
        self,
        amount_in: int,
        paired_reserve_a: int,
        base_reserve_a: int,
        base_reserve_b: int,
        paired_reserve_b: int,
    ) -> tuple[int, int]:
        """Calculate a two-leg paired A -> base -> paired B trade.

        Returns:
            Tuple of (intermediate base amount, paired B amount out)
        """
        base_amount = self.get_amount_out(amount_in, paired_reserve_a, base_reserve_a)
        return base_amount, self.get_amount_out(base_amount, base_reserve_b, paired_reserve_b)

    def quote_deposit(
        self,
        base_amount: int,
        paired_amount: int,
        base_reserve: int,
        paired_reserve: int,
        total_shares: int,
    ) -> DepositQuote:
        """Calculate what a liquidity deposit takes and mints.

        An empty pool (no shares) accepts both amounts as given and mints
        shares equal to the base amount. Otherwise the paired amount is
        derived from the current ratio and shares are minted pro rata;
        paired_amount is ignored.

        Raises:
            EmptyPool: If shares exist but the base reserve is zero
        """
        if total_shares == 0:
            return DepositQuote(
                base_amount=base_amount, paired_amount=paired_amount, shares=base_amount
            )
        if base_reserve == 0:
            raise EmptyPool("shares outstanding with zero base reserve")

        required_paired = S(paired_reserve).mul_div(base_amount, base_reserve)
        shares = S(total_shares).mul_div(base_amount, base_reserve)
        return DepositQuote(
            base_amount=base_amount,
            paired_amount=required_paired.value,
            shares=shares.value,
        )

    def quote_withdrawal(
        self,
        shares: int,
        base_reserve: int,
        paired_reserve: int,
        total_shares: int,
    ) -> WithdrawalQuote:
        """Calculate the pro-rata reserves returned for burning shares.

        Raises:
            EmptyPool: If no shares are outstanding
        """
        if total_shares == 0:
            raise EmptyPool("no liquidity to remove")
        return WithdrawalQuote(
            shares=shares,
            base_amount=S(base_reserve).mul_div(shares, total_shares).value,
            paired_amount=S(paired_reserve).mul_div(shares, total_shares).value,
        )


# Singleton for the default 1% fee
constant_product = ConstantProduct()
