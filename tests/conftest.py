"""Pytest configuration and fixtures."""

import pytest

from cpamm.assets import Token
from cpamm.exchange import Exchange
from cpamm.registry import PoolRegistry
from tests.helpers import OWNER, make_registry, seed_pool, to_wei


@pytest.fixture
def registry() -> PoolRegistry:
    """Empty registry with funded test accounts."""
    return make_registry()


@pytest.fixture
def token(registry: PoolRegistry) -> Token:
    """Token with 1,000,000 units minted to OWNER."""
    return registry.assets.deploy_token("Token", "TKN", to_wei(1_000_000), OWNER)


@pytest.fixture
def exchange(registry: PoolRegistry, token: Token) -> Exchange:
    """Empty pool for token."""
    return registry.create_pool(token.address)


@pytest.fixture
def seeded_exchange(registry: PoolRegistry, token: Token) -> Exchange:
    """Pool for token seeded by OWNER with 1000 base / 2000 paired."""
    return seed_pool(registry, token, OWNER, paired=to_wei(2000), base=to_wei(1000))
