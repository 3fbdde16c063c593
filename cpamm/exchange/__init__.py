"""Exchange pools and their share tokens."""

from cpamm.exchange.pool import Exchange
from cpamm.exchange.shares import ShareToken

__all__ = ["Exchange", "ShareToken"]
