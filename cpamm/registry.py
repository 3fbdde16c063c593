"""Pool registry: one exchange pool per paired asset.

The registry is the only way pools come into existence and the only way a
pool finds its peer for token-to-token routing: every pool it creates gets
the registry's get_pool() injected as its pool lookup.
"""

from __future__ import annotations

import threading

import structlog

from cpamm.amm.constant_product import ConstantProduct
from cpamm.assets.directory import AssetDirectory
from cpamm.assets.native import NativeLedger
from cpamm.config import DEFAULT_CONFIG, ExchangeConfig
from cpamm.errors import InvalidAsset, PoolAlreadyExists
from cpamm.exchange.pool import Exchange
from cpamm.models.types import derive_address, is_zero_address, normalize_address

logger = structlog.get_logger()


class PoolRegistry:
    """Registry mapping paired-asset addresses to their pools.

    Entries are only ever added: a pool, once created, is never replaced
    or removed.
    """

    def __init__(
        self,
        assets: AssetDirectory,
        native: NativeLedger | None = None,
        config: ExchangeConfig = DEFAULT_CONFIG,
        address: str | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            assets: Directory resolving asset addresses to assets
            native: Base asset ledger (created from config.base_symbol if None)
            config: Fee and naming configuration for created pools
            address: Identity of the registry, used to derive pool addresses
        """
        self.assets = assets
        self.native = native if native is not None else NativeLedger(config.base_symbol)
        self.config = config
        self.address = normalize_address(address or derive_address("registry", id(self)))
        self._amm = ConstantProduct(config.fee_multiplier)
        self._pools: dict[str, Exchange] = {}
        self._lock = threading.Lock()

    def create_pool(self, asset: str) -> Exchange:
        """Create the pool for asset.

        Args:
            asset: Address of the paired asset

        Returns:
            The new, empty pool

        Raises:
            InvalidAsset: If asset is the sentinel address or unknown
            PoolAlreadyExists: If asset already has a pool
        """
        asset_norm = normalize_address(asset)
        if is_zero_address(asset_norm):
            raise InvalidAsset(asset_norm)

        with self._lock:
            if asset_norm in self._pools:
                raise PoolAlreadyExists(asset_norm)
            token = self.assets.resolve(asset_norm)
            pool = Exchange(
                derive_address(self.address, asset_norm),
                token,
                self.native,
                amm=self._amm,
                pool_lookup=self.get_pool,
                share_symbol_suffix=self.config.share_symbol_suffix,
            )
            self._pools[asset_norm] = pool

        logger.info(
            "pool_created",
            asset=asset_norm[-8:],
            pool=pool.address[-8:],
            symbol=pool.symbol,
            name=pool.name,
        )
        return pool

    def get_pool(self, asset: str) -> Exchange | None:
        """Get the pool for asset, or None if there is none.

        Args:
            asset: Address of the paired asset (any case)
        """
        return self._pools.get(normalize_address(asset))

    @property
    def pool_count(self) -> int:
        """Return the number of registered pools."""
        return len(self._pools)
