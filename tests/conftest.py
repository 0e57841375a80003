# [TESTER] v1

from __future__ import annotations

from dataclasses import dataclass

import pytest

from pairswap import Chain, ChainConfig, PairConfig, ReservePool
from pairswap.integration.tokens import StandardToken

GENESIS = 1_000


@dataclass
class PairEnv:
    """A deployed pool plus its two tokens on a fresh in-memory chain."""

    chain: Chain
    pool: ReservePool
    token0: StandardToken
    token1: StandardToken

    def fund(self, holder: str, amount0: int, amount1: int) -> None:
        self.token0.mint(holder, amount0)
        self.token1.mint(holder, amount1)

    def deposit(self, provider: str, amount0: int, amount1: int) -> int:
        """Fund *provider*, transfer both amounts in and mint, as one transaction."""
        self.fund(provider, amount0, amount1)

        def _tx() -> int:
            self.token0.transfer(provider, self.pool.address, amount0)
            self.token1.transfer(provider, self.pool.address, amount1)
            return self.pool.mint(provider, provider)

        return self.chain.transact(_tx)

    def withdraw(self, provider: str, liquidity: int) -> tuple[int, int]:
        def _tx() -> tuple[int, int]:
            self.pool.transfer(provider, self.pool.address, liquidity)
            return self.pool.burn(provider, provider)

        return self.chain.transact(_tx)

    def balances(self, holder: str) -> tuple[int, int]:
        return self.token0.balance_of(holder), self.token1.balance_of(holder)


def make_env(pair_config: PairConfig | None = None, *, genesis: int = GENESIS) -> PairEnv:
    chain = Chain(ChainConfig(chain_id=1, genesis_timestamp=genesis))
    token_a = chain.deploy_token(symbol="AAA")
    token_b = chain.deploy_token(symbol="BBB")
    pool = chain.deploy_pair(token_a.address, token_b.address, config=pair_config)
    token0 = chain.token(pool.token0)
    token1 = chain.token(pool.token1)
    assert isinstance(token0, StandardToken) and isinstance(token1, StandardToken)
    return PairEnv(chain=chain, pool=pool, token0=token0, token1=token1)


@pytest.fixture
def env() -> PairEnv:
    return make_env()


@pytest.fixture
def make_pair_env():
    return make_env
