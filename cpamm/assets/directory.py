"""Address-to-asset directory.

Pools and the registry deal in asset identities (addresses); the directory
resolves an identity to the FungibleAsset that implements it.
"""

from __future__ import annotations

import itertools

import structlog

from cpamm.assets.base import FungibleAsset
from cpamm.assets.token import Token
from cpamm.errors import InvalidAsset
from cpamm.models.types import derive_address, is_zero_address, normalize_address

logger = structlog.get_logger()


class AssetDirectory:
    """Registry of fungible assets known to the exchange."""

    def __init__(self) -> None:
        self._assets: dict[str, FungibleAsset] = {}
        self._nonce = itertools.count()

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and normalize_address(address) in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def register(self, asset: FungibleAsset) -> FungibleAsset:
        """Make an asset resolvable by its address.

        Raises:
            InvalidAsset: If the asset uses the sentinel address
            ValueError: If a different asset is already registered at that address
        """
        address = normalize_address(asset.address)
        if is_zero_address(address):
            raise InvalidAsset(address)
        existing = self._assets.get(address)
        if existing is not None and existing is not asset:
            raise ValueError(f"Address already in use: {address}")
        self._assets[address] = asset
        return asset

    def resolve(self, address: str) -> FungibleAsset:
        """Return the asset registered at address.

        Raises:
            InvalidAsset: If address is the sentinel or unknown
        """
        address_norm = normalize_address(address)
        if is_zero_address(address_norm):
            raise InvalidAsset(address_norm)
        asset = self._assets.get(address_norm)
        if asset is None:
            raise InvalidAsset(address_norm, reason="unknown token address")
        return asset

    def deploy_token(self, name: str, symbol: str, initial_supply: int, owner: str) -> Token:
        """Create a Token at a fresh deterministic address and register it.

        Args:
            name: Display name
            symbol: Ticker symbol
            initial_supply: Amount minted to owner
            owner: Deployer, who receives the initial supply

        Returns:
            The registered Token
        """
        address = derive_address(normalize_address(owner), next(self._nonce))
        token = Token(address, name, symbol, initial_supply, owner)
        self.register(token)
        logger.debug("token_deployed", symbol=symbol, address=address[-8:], supply=initial_supply)
        return token
