"""Routing and atomicity helpers shared by pools."""

from cpamm.routing.journal import Journal
from cpamm.routing.locks import ordered_locks
from cpamm.routing.router import PoolLookup, preview_token_to_token, route_token_to_token

__all__ = [
    "Journal",
    "PoolLookup",
    "ordered_locks",
    "preview_token_to_token",
    "route_token_to_token",
]
