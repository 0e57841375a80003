# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.errors import (
    AlreadyInitialized,
    ArithmeticUnderflow,
    InsufficientLiquidityBurned,
    ZeroLiquidity,
)
from pairswap.core.pair import MINIMUM_LIQUIDITY, ReservePool
from pairswap.state.canonical import ZERO_ADDRESS
from pairswap.state.events import Burn, Mint, Sync, Transfer


def test_initialize_is_one_way(env) -> None:
    pool = env.pool
    assert pool.initialized
    with pytest.raises(AlreadyInitialized):
        pool.initialize(env.chain.new_address(), pool.token0, pool.token1)


def test_tokens_are_ordered_by_address(env) -> None:
    assert env.pool.token0 < env.pool.token1


def test_first_deposit_locks_minimum_liquidity(env) -> None:
    lp = env.chain.new_address()
    mark = env.chain.events.mark()

    liquidity = env.deposit(lp, 2000, 8000)

    # isqrt(2000 * 8000) = 4000
    assert liquidity == 3000
    assert env.pool.balance_of(lp) == 3000
    assert env.pool.balance_of(ZERO_ADDRESS) == MINIMUM_LIQUIDITY
    assert env.pool.total_supply == 4000
    assert env.pool.get_reserves() == (2000, 8000)
    assert env.chain.events.records()[mark:] == [
        Transfer(from_=ZERO_ADDRESS, to=ZERO_ADDRESS, value=MINIMUM_LIQUIDITY),
        Transfer(from_=ZERO_ADDRESS, to=lp, value=3000),
        Sync(reserve0=2000, reserve1=8000),
        Mint(sender=lp, amount0=2000, amount1=8000),
    ]


def test_first_deposit_exactly_at_lock_issues_nothing(env) -> None:
    lp = env.chain.new_address()
    with pytest.raises(ZeroLiquidity):
        env.deposit(lp, 1000, 1000)
    assert env.pool.total_supply == 0
    # The failed transaction is rolled back, including the token transfers.
    assert env.balances(lp) == (1000, 1000)
    assert env.balances(env.pool.address) == (0, 0)


def test_first_deposit_below_lock_underflows(env) -> None:
    lp = env.chain.new_address()
    with pytest.raises(ArithmeticUnderflow):
        env.deposit(lp, 999, 1000)
    assert env.pool.total_supply == 0


def test_subsequent_deposit_is_pro_rata_minimum(env) -> None:
    first = env.chain.new_address()
    second = env.chain.new_address()
    env.deposit(first, 2000, 8000)

    # min(1000 * 4000 // 2000, 2000 * 4000 // 8000) = min(2000, 1000)
    liquidity = env.deposit(second, 1000, 2000)

    assert liquidity == 1000
    assert env.pool.total_supply == 5000
    assert env.pool.get_reserves() == (3000, 10000)


def test_one_sided_deposit_issues_no_shares(env) -> None:
    env.deposit(env.chain.new_address(), 2000, 8000)
    with pytest.raises(ZeroLiquidity):
        env.deposit(env.chain.new_address(), 500, 0)


def test_mint_fails_when_balances_fall_below_reserves(env) -> None:
    env.deposit(env.chain.new_address(), 2000, 8000)
    # Drain a token behind the pool's back.
    env.chain.balances.set(env.pool.address, env.pool.token0, 1500)
    with pytest.raises(ArithmeticUnderflow):
        env.pool.mint(env.chain.new_address(), env.chain.new_address())


def test_burn_is_pro_rata(env) -> None:
    lp = env.chain.new_address()
    env.deposit(lp, 2000, 8000)
    mark = env.chain.events.mark()

    amount0, amount1 = env.withdraw(lp, 3000)

    assert (amount0, amount1) == (1500, 6000)
    assert env.balances(lp) == (1500, 6000)
    assert env.pool.get_reserves() == (500, 2000)
    assert env.pool.total_supply == MINIMUM_LIQUIDITY
    assert env.pool.balance_of(lp) == 0
    assert env.chain.events.records()[-1] == Burn(sender=lp, amount0=1500, amount1=6000, to=lp)
    assert Sync(reserve0=500, reserve1=2000) in env.chain.events.records()[mark:]


def test_burn_without_shares_fails(env) -> None:
    env.deposit(env.chain.new_address(), 2000, 8000)
    with pytest.raises(InsufficientLiquidityBurned):
        env.chain.transact(env.pool.burn, env.chain.new_address(), env.chain.new_address())


def test_burn_of_dust_fails(env) -> None:
    lp = env.chain.new_address()
    env.deposit(lp, 2000, 8000)
    # 1 * 2000 // 4000 == 0
    with pytest.raises(InsufficientLiquidityBurned):
        env.withdraw(lp, 1)
    assert env.pool.balance_of(lp) == 3000
    assert env.pool.balance_of(env.pool.address) == 0


def test_mint_then_burn_round_trip(env) -> None:
    env.deposit(env.chain.new_address(), 2000, 8000)
    lp = env.chain.new_address()

    liquidity = env.deposit(lp, 1000, 4000)
    assert liquidity == 2000
    amount0, amount1 = env.withdraw(lp, liquidity)

    assert (amount0, amount1) == (1000, 4000)
    assert env.pool.get_reserves() == (2000, 8000)


def test_supply_equals_sum_of_balances_across_liquidity_events(env) -> None:
    lps = [env.chain.new_address() for _ in range(3)]
    minted = [env.deposit(lp, 2000 * (i + 1), 8000 * (i + 1)) for i, lp in enumerate(lps)]
    env.withdraw(lps[1], minted[1] // 2)
    env.pool.transfer(lps[2], lps[0], 10)
    assert env.pool.shares.verify_conservation()
    assert env.pool.total_supply == sum(env.pool.shares.holders().values())


def test_failed_initialize_leaves_pool_uninitialized(env) -> None:
    pool = ReservePool(env.chain.new_address(), env.chain, events=env.chain.events)
    factory = env.chain.new_address()

    with pytest.raises(ValueError):
        pool.initialize(factory, "not-an-address", env.token1.address)
    assert not pool.initialized
    assert (pool.factory, pool.token0, pool.token1) == (ZERO_ADDRESS, ZERO_ADDRESS, ZERO_ADDRESS)

    pool.initialize(factory, env.token0.address, env.token1.address)
    assert pool.initialized
    assert (pool.token0, pool.token1) == (env.token0.address, env.token1.address)
