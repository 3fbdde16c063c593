"""Deterministic lock acquisition across pools."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cpamm.exchange.pool import Exchange


@contextmanager
def ordered_locks(*pools: Exchange) -> Iterator[None]:
    """Hold every pool's lock for the duration of the block.

    Locks are taken in ascending paired-asset address order, each pool at
    most once, so two routed swaps over the same pair of pools in opposite
    directions cannot deadlock.
    """
    unique = {id(pool): pool for pool in pools}.values()
    with ExitStack() as stack:
        for pool in sorted(unique, key=lambda p: p.asset_address):
            stack.enter_context(pool.lock)
        yield
