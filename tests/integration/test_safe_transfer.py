# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.errors import CallReverted, TransferFailed
from pairswap.integration.tokens import (
    FalseReturnToken,
    NoReturnToken,
    RevertingToken,
    ScriptedReturnToken,
    StandardToken,
)
from pairswap.state.canonical import encode_bool


def _funded(env, kind=StandardToken, **kwargs) -> StandardToken:
    token = env.chain.deploy_token(kind, symbol="ODD", **kwargs)
    token.mint(env.pool.address, 100)
    return token


def test_standard_true_word_succeeds(env) -> None:
    token = _funded(env)
    to = env.chain.new_address()
    env.pool._safe_transfer(token.address, to, 40)
    assert token.balance_of(to) == 40
    assert token.balance_of(env.pool.address) == 60


def test_empty_return_data_succeeds(env) -> None:
    token = _funded(env, NoReturnToken)
    to = env.chain.new_address()
    env.pool._safe_transfer(token.address, to, 40)
    assert token.balance_of(to) == 40


def test_false_return_fails(env) -> None:
    token = _funded(env, FalseReturnToken)
    to = env.chain.new_address()
    with pytest.raises(TransferFailed) as excinfo:
        env.pool._safe_transfer(token.address, to, 40)
    assert excinfo.value.token == token.address
    assert excinfo.value.value == 40
    assert token.balance_of(env.pool.address) == 100


@pytest.mark.parametrize(
    "payload",
    [
        bytes(31),
        bytes(31) + b"\x01" + b"\x00",
        b"\x01" + bytes(31),
        bytes(30) + b"\x01\x01",
        encode_bool(True) + encode_bool(True),
    ],
)
def test_malformed_return_data_fails(env, payload: bytes) -> None:
    token = _funded(env, ScriptedReturnToken, payload=payload)
    with pytest.raises(TransferFailed):
        env.pool._safe_transfer(token.address, env.chain.new_address(), 1)


def test_revert_fails_and_chains_cause(env) -> None:
    token = _funded(env, RevertingToken)
    with pytest.raises(TransferFailed) as excinfo:
        env.pool._safe_transfer(token.address, env.chain.new_address(), 1)
    assert isinstance(excinfo.value.__cause__, CallReverted)


def test_insufficient_token_balance_is_a_revert(env) -> None:
    token = _funded(env)
    with pytest.raises(TransferFailed) as excinfo:
        env.pool._safe_transfer(token.address, env.chain.new_address(), 101)
    assert isinstance(excinfo.value.__cause__, CallReverted)


def test_pool_over_no_return_tokens_round_trips(make_pair_env) -> None:
    env = make_pair_env()
    chain = env.chain
    a = chain.deploy_token(NoReturnToken, symbol="NR0")
    b = chain.deploy_token(NoReturnToken, symbol="NR1")
    pool = chain.deploy_pair(a.address, b.address)
    lp = chain.new_address()
    a.mint(pool.address, 2000)
    b.mint(pool.address, 8000)

    liquidity = chain.transact(pool.mint, lp, lp)

    def _withdraw():
        pool.transfer(lp, pool.address, liquidity)
        return pool.burn(lp, lp)

    assert chain.transact(_withdraw) == (1500, 6000)
    assert a.balance_of(lp) + b.balance_of(lp) == 7500


def test_burn_against_reverting_token_is_rolled_back(make_pair_env) -> None:
    env = make_pair_env()
    chain = env.chain
    good = chain.deploy_token(symbol="OK")
    bad = chain.deploy_token(RevertingToken, symbol="BAD")
    pool = chain.deploy_pair(good.address, bad.address)
    lp = chain.new_address()
    good.mint(pool.address, 2000)
    bad.mint(pool.address, 8000)
    liquidity = chain.transact(pool.mint, lp, lp)

    def _withdraw():
        pool.transfer(lp, pool.address, liquidity)
        return pool.burn(lp, lp)

    with pytest.raises(TransferFailed):
        chain.transact(_withdraw)
    assert pool.balance_of(lp) == liquidity
    assert good.balance_of(lp) == 0
    assert pool.get_reserves() in ((2000, 8000), (8000, 2000))
