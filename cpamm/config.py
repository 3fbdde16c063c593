"""Configuration for exchange pools and the registry."""

from __future__ import annotations

import os
from dataclasses import dataclass

from cpamm.constants import (
    DEFAULT_BASE_SYMBOL,
    DEFAULT_FEE_PERCENT,
    FEE_SCALE,
    SHARE_SYMBOL_SUFFIX,
)


@dataclass(frozen=True)
class ExchangeConfig:
    """Centralized configuration for pools created by a registry.

    Attributes:
        fee_percent: Share of each swap input retained in the reserves (default: 1)
        share_symbol_suffix: Appended to the paired asset symbol for share tokens
        base_symbol: Symbol of the base asset, used in share-token names
        log_level: Log level name used by configure_logging()
    """

    fee_percent: int = DEFAULT_FEE_PERCENT
    share_symbol_suffix: str = SHARE_SYMBOL_SUFFIX
    base_symbol: str = DEFAULT_BASE_SYMBOL
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 <= self.fee_percent < FEE_SCALE:
            raise ValueError(f"fee_percent must be in [0, {FEE_SCALE}), got {self.fee_percent}")

    @property
    def fee_multiplier(self) -> int:
        """Input multiplier for the pricing curve (FEE_SCALE - fee_percent).

        For the default 1% fee this returns 99.
        """
        return FEE_SCALE - self.fee_percent

    @classmethod
    def from_env(cls) -> ExchangeConfig:
        """Build a config from environment variables with sensible defaults.

        - CPAMM_FEE_PERCENT: Swap fee in percent (default: 1)
        - CPAMM_SHARE_SYMBOL_SUFFIX: Share-token symbol suffix (default: _LP)
        - CPAMM_BASE_SYMBOL: Base asset symbol (default: Eth)
        - CPAMM_LOG_LEVEL: Log level (default: INFO)

        Raises:
            ValueError: If CPAMM_FEE_PERCENT is not an integer in range
        """
        return cls(
            fee_percent=int(os.environ.get("CPAMM_FEE_PERCENT", str(DEFAULT_FEE_PERCENT))),
            share_symbol_suffix=os.environ.get("CPAMM_SHARE_SYMBOL_SUFFIX", SHARE_SYMBOL_SUFFIX),
            base_symbol=os.environ.get("CPAMM_BASE_SYMBOL", DEFAULT_BASE_SYMBOL),
            log_level=os.environ.get("CPAMM_LOG_LEVEL", "INFO").upper(),
        )


# Default configuration instance
DEFAULT_CONFIG = ExchangeConfig()
