"""Pricing curve math."""

from cpamm.amm.constant_product import (
    ConstantProduct,
    DepositQuote,
    WithdrawalQuote,
    constant_product,
)

__all__ = ["ConstantProduct", "DepositQuote", "WithdrawalQuote", "constant_product"]
