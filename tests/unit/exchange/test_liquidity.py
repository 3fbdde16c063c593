"""Tests for adding and removing pool liquidity."""

import pytest

from cpamm.assets import Token
from cpamm.errors import EmptyPool, SlippageExceeded, TransferRejected
from cpamm.exchange import Exchange
from cpamm.registry import PoolRegistry
from tests.helpers import OWNER, STARTING_BASE, USER, to_wei


def assert_reserves(registry: PoolRegistry, pool: Exchange, base: int, paired: int) -> None:
    """Check the base counter, the ledger balance and the paired reserve together."""
    assert pool.base_reserve == base
    assert registry.native.balance_of(pool.address) == base
    assert pool.get_reserve() == paired


class TestAddLiquidityEmptyPool:
    """Tests for the initial, price-setting deposit."""

    def test_adds_liquidity(self, registry: PoolRegistry, token: Token, exchange: Exchange):
        """Both amounts are taken as given; shares equal base."""
        token.approve(OWNER, exchange.address, to_wei(200))

        shares = exchange.add_liquidity(OWNER, to_wei(200), to_wei(100))

        assert shares == to_wei(100)
        assert_reserves(registry, exchange, to_wei(100), to_wei(200))
        assert exchange.shares.balance_of(OWNER) == to_wei(100)
        assert exchange.total_shares == to_wei(100)
        assert registry.native.balance_of(OWNER) == STARTING_BASE - to_wei(100)

    def test_allows_zero_amounts(self, registry: PoolRegistry, token: Token, exchange: Exchange):
        """An all-zero deposit is a no-op."""
        token.approve(OWNER, exchange.address, 0)

        assert exchange.add_liquidity(OWNER, 0, 0) == 0

        assert_reserves(registry, exchange, 0, 0)
        assert exchange.total_shares == 0
        assert exchange.state().is_empty

    def test_missing_approval_rolls_back(
        self, registry: PoolRegistry, token: Token, exchange: Exchange
    ):
        """A rejected paired pull also returns the base already received."""
        with pytest.raises(TransferRejected):
            exchange.add_liquidity(OWNER, to_wei(200), to_wei(100))

        assert_reserves(registry, exchange, 0, 0)
        assert registry.native.balance_of(OWNER) == STARTING_BASE
        assert exchange.total_shares == 0

    def test_insufficient_base(self, registry: PoolRegistry, token: Token, exchange: Exchange):
        """The caller must hold the base amount sent."""
        token.approve(OWNER, exchange.address, to_wei(200))

        with pytest.raises(TransferRejected):
            exchange.add_liquidity(OWNER, to_wei(200), STARTING_BASE + 1)

        assert_reserves(registry, exchange, 0, 0)
        assert token.allowance(OWNER, exchange.address) == to_wei(200)

    def test_rejects_negative_amounts(self, exchange: Exchange):
        """Amounts are validated before anything happens."""
        with pytest.raises(ValueError):
            exchange.add_liquidity(OWNER, -1, 0)


class TestAddLiquidityExistingPool:
    """Tests for proportional deposits."""

    def test_derives_paired_amount(
        self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange
    ):
        """Only the proportional paired amount is pulled."""
        token.transfer(OWNER, USER, to_wei(300))
        token.approve(USER, seeded_exchange.address, to_wei(300))

        shares = seeded_exchange.add_liquidity(USER, to_wei(300), to_wei(100))

        assert shares == to_wei(100)
        assert_reserves(registry, seeded_exchange, to_wei(1100), to_wei(2200))
        assert token.balance_of(USER) == to_wei(100)
        assert token.allowance(USER, seeded_exchange.address) == to_wei(100)
        assert seeded_exchange.total_shares == to_wei(1100)

    def test_paired_limit_too_low(
        self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange
    ):
        """A deposit needing more paired than offered fails without effects."""
        token.approve(OWNER, seeded_exchange.address, to_wei(1000))

        with pytest.raises(SlippageExceeded, match="insufficient token amount") as exc_info:
            seeded_exchange.add_liquidity(OWNER, to_wei(199), to_wei(100))

        assert exc_info.value.amount_out == to_wei(200)
        assert_reserves(registry, seeded_exchange, to_wei(1000), to_wei(2000))
        assert seeded_exchange.total_shares == to_wei(1000)

    def test_ratio_preserved_after_swap(
        self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange
    ):
        """Deposits after price moves keep the ratio up to rounding."""
        seeded_exchange.eth_to_token_swap(USER, to_wei(1), 0)
        base_before = seeded_exchange.base_reserve
        paired_before = seeded_exchange.get_reserve()
        token.approve(OWNER, seeded_exchange.address, to_wei(1000))

        shares = seeded_exchange.add_liquidity(OWNER, to_wei(1000), to_wei(10))

        assert shares == 9_990009990009990009
        base_after = seeded_exchange.base_reserve
        paired_after = seeded_exchange.get_reserve()
        assert paired_after - paired_before == 19_960259323289922996
        drift = paired_before * base_after - paired_after * base_before
        assert 0 <= drift < base_before

    def test_insufficient_allowance(
        self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange
    ):
        """Allowance below the derived amount is rejected."""
        token.approve(OWNER, seeded_exchange.address, to_wei(199))

        with pytest.raises(TransferRejected):
            seeded_exchange.add_liquidity(OWNER, to_wei(200), to_wei(100))

        assert_reserves(registry, seeded_exchange, to_wei(1000), to_wei(2000))


    def test_zero_is_noop(self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange):
        """An all-zero deposit into a seeded pool changes nothing."""
        token.approve(OWNER, seeded_exchange.address, to_wei(50))
        before = seeded_exchange.state()
        token_before = token.balance_of(OWNER)
        base_before = registry.native.balance_of(OWNER)

        assert seeded_exchange.add_liquidity(OWNER, 0, 0) == 0

        assert seeded_exchange.state() == before
        assert seeded_exchange.shares.balance_of(OWNER) == to_wei(1000)
        assert token.balance_of(OWNER) == token_before
        assert token.allowance(OWNER, seeded_exchange.address) == to_wei(50)
        assert registry.native.balance_of(OWNER) == base_before


class TestRemoveLiquidity:
    """Tests for burning shares."""

    def test_removes_pro_rata(
        self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange
    ):
        """Burned shares return their slice of both reserves."""
        token_before = token.balance_of(OWNER)
        base_before = registry.native.balance_of(OWNER)

        result = seeded_exchange.remove_liquidity(OWNER, to_wei(100))

        assert result == (to_wei(100), to_wei(200))
        assert_reserves(registry, seeded_exchange, to_wei(900), to_wei(1800))
        assert seeded_exchange.total_shares == to_wei(900)
        assert token.balance_of(OWNER) == token_before + to_wei(200)
        assert registry.native.balance_of(OWNER) == base_before + to_wei(100)

    def test_fees_accrue_to_providers(self, seeded_exchange: Exchange):
        """After a swap, shares are worth more than they were."""
        seeded_exchange.eth_to_token_swap(USER, to_wei(1), 0)

        base_out, paired_out = seeded_exchange.remove_liquidity(OWNER, to_wei(500))

        assert base_out == 500_500000000000000000
        assert paired_out == 999_010979130660645960

    def test_remove_everything(self, registry: PoolRegistry, seeded_exchange: Exchange):
        """Burning all shares empties the pool."""
        seeded_exchange.remove_liquidity(OWNER, to_wei(1000))

        assert_reserves(registry, seeded_exchange, 0, 0)
        assert seeded_exchange.state().is_empty

    def test_zero_is_noop(self, registry: PoolRegistry, seeded_exchange: Exchange):
        """Burning zero shares changes nothing."""
        assert seeded_exchange.remove_liquidity(OWNER, 0) == (0, 0)
        assert_reserves(registry, seeded_exchange, to_wei(1000), to_wei(2000))

    def test_more_than_held(self, registry: PoolRegistry, seeded_exchange: Exchange):
        """Burning shares the caller does not hold is rejected."""
        with pytest.raises(TransferRejected):
            seeded_exchange.remove_liquidity(USER, to_wei(1))

        assert_reserves(registry, seeded_exchange, to_wei(1000), to_wei(2000))
        assert seeded_exchange.total_shares == to_wei(1000)

    def test_empty_pool(self, exchange: Exchange):
        """Removing from a pool without shares fails."""
        with pytest.raises(EmptyPool):
            exchange.remove_liquidity(OWNER, 0)

    def test_transferred_shares(
        self, registry: PoolRegistry, token: Token, seeded_exchange: Exchange
    ):
        """Shares are a token: whoever holds them can withdraw."""
        seeded_exchange.shares.transfer(OWNER, USER, to_wei(100))

        seeded_exchange.remove_liquidity(USER, to_wei(100))

        assert token.balance_of(USER) == to_wei(200)
        assert registry.native.balance_of(USER) == STARTING_BASE + to_wei(100)
        assert seeded_exchange.shares.balance_of(OWNER) == to_wei(900)
