"""Concurrency tests: parallel trades on shared pools.

Opposite-direction routed swaps lock the same two pools; they must neither
deadlock nor leave reserves out of step with balances.
"""

import threading

from cpamm.assets import Token
from cpamm.exchange import Exchange
from tests.helpers import OTHER, OWNER, STARTING_BASE, USER, make_registry, seed_pool, to_wei

ROUNDS = 40
TIMEOUT = 30


def run_threads(*targets) -> None:
    """Start every target together and fail if any does not finish."""
    barrier = threading.Barrier(len(targets))
    errors: list[BaseException] = []

    def wrap(target):
        def runner():
            barrier.wait()
            try:
                target()
            except BaseException as err:
                errors.append(err)

        return runner

    threads = [threading.Thread(target=wrap(t), daemon=True) for t in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(TIMEOUT)
    assert not any(thread.is_alive() for thread in threads), "deadlock"
    assert errors == []


class TestConcurrentTrading:
    """Tests for trades racing on shared pools."""

    def setup_method(self):
        self.registry = make_registry()
        assets = self.registry.assets
        self.token_a: Token = assets.deploy_token("Token A", "TKA", to_wei(1_000_000), OWNER)
        self.token_b: Token = assets.deploy_token("Token B", "TKB", to_wei(1_000_000), OWNER)
        self.pool_a: Exchange = seed_pool(
            self.registry, self.token_a, OWNER, paired=to_wei(2000), base=to_wei(1000)
        )
        self.pool_b: Exchange = seed_pool(
            self.registry, self.token_b, OWNER, paired=to_wei(1000), base=to_wei(1000)
        )
        self.token_a.transfer(OWNER, USER, to_wei(ROUNDS))
        self.token_a.approve(USER, self.pool_a.address, to_wei(ROUNDS))
        self.token_b.transfer(OWNER, OTHER, to_wei(ROUNDS))
        self.token_b.approve(OTHER, self.pool_b.address, to_wei(ROUNDS))

    def assert_consistent(self) -> None:
        native = self.registry.native
        holders = (OWNER, USER, OTHER, self.pool_a.address, self.pool_b.address)
        assert sum(native.balance_of(h) for h in holders) == 3 * STARTING_BASE
        for token in (self.token_a, self.token_b):
            assert sum(token.balance_of(h) for h in holders) == token.total_supply()
        for pool in (self.pool_a, self.pool_b):
            assert native.balance_of(pool.address) == pool.base_reserve

    def test_opposite_routes(self):
        """A -> B and B -> A routes in parallel complete and conserve value."""
        k_before = [p.base_reserve * p.get_reserve() for p in (self.pool_a, self.pool_b)]

        def a_to_b():
            for _ in range(ROUNDS):
                self.pool_a.token_to_token_swap(USER, to_wei(1), 0, self.token_b.address)

        def b_to_a():
            for _ in range(ROUNDS):
                self.pool_b.token_to_token_swap(OTHER, to_wei(1), 0, self.token_a.address)

        run_threads(a_to_b, b_to_a)

        assert self.token_a.balance_of(USER) == 0
        assert self.token_b.balance_of(OTHER) == 0
        assert self.token_b.balance_of(USER) > 0
        assert self.token_a.balance_of(OTHER) > 0
        k_after = [p.base_reserve * p.get_reserve() for p in (self.pool_a, self.pool_b)]
        assert all(after > before for after, before in zip(k_after, k_before))
        self.assert_consistent()

    def test_mixed_operations(self):
        """Swaps, routes and liquidity changes interleave safely."""
        self.token_a.approve(OWNER, self.pool_a.address, to_wei(10_000))

        def routes():
            for _ in range(ROUNDS):
                self.pool_a.token_to_token_swap(USER, to_wei(1), 0, self.token_b.address)

        def swaps():
            for _ in range(ROUNDS):
                self.pool_a.eth_to_token_swap(OTHER, to_wei(1), 0)

        def liquidity():
            for _ in range(ROUNDS // 4):
                shares = self.pool_a.add_liquidity(OWNER, to_wei(100), to_wei(10))
                self.pool_a.remove_liquidity(OWNER, shares)

        run_threads(routes, swaps, liquidity)

        assert self.pool_a.total_shares == to_wei(1000)
        assert self.pool_a.shares.balance_of(OWNER) == to_wei(1000)
        self.assert_consistent()
