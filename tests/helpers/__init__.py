"""Test helpers module for shared test utilities.

- constants: Accounts and unit conversion
- factories: Registry and pool factory functions
"""

from tests.helpers.constants import OTHER, OWNER, STARTING_BASE, USER, to_wei
from tests.helpers.factories import make_registry, seed_pool

__all__ = [
    # Constants
    "OWNER",
    "USER",
    "OTHER",
    "STARTING_BASE",
    "to_wei",
    # Factories
    "make_registry",
    "seed_pool",
]
