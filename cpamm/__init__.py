"""Constant-product AMM exchange: pool registry, pools and routed swaps."""

from cpamm.config import DEFAULT_CONFIG, ExchangeConfig
from cpamm.errors import (
    EmptyPool,
    ExchangeError,
    InvalidAsset,
    NoPoolForAsset,
    PoolAlreadyExists,
    SlippageExceeded,
    TransferRejected,
)
from cpamm.exchange import Exchange
from cpamm.registry import PoolRegistry

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_CONFIG",
    "EmptyPool",
    "Exchange",
    "ExchangeConfig",
    "ExchangeError",
    "InvalidAsset",
    "NoPoolForAsset",
    "PoolAlreadyExists",
    "PoolRegistry",
    "SlippageExceeded",
    "TransferRejected",
    "__version__",
]
