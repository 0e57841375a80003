#!/usr/bin/env python3
"""
Offline pair demo: deposit, swap, accrue prices, withdraw.

Runs entirely against the in-memory chain and prints a JSON summary.

Usage:
    python tools/pair_demo.py [--config pair.yaml] [--deposit0 N] [--deposit1 N] [--swap-in N]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap import Chain, ChainConfig, PairConfig, PairError, load_config
from pairswap.core.pair import FEE_DENOMINATOR, FEE_NUMERATOR


def _amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    fee_keep = FEE_DENOMINATOR - FEE_NUMERATOR
    amount_in_with_fee = amount_in * fee_keep
    return (amount_in_with_fee * reserve_out) // (reserve_in * FEE_DENOMINATOR + amount_in_with_fee)


def run(chain_config: ChainConfig, pair_config: PairConfig, *, deposit0: int, deposit1: int, swap_in: int) -> dict:
    chain = Chain(chain_config)
    token_a = chain.deploy_token(symbol="AAA")
    token_b = chain.deploy_token(symbol="BBB")
    pool = chain.deploy_pair(token_a.address, token_b.address, config=pair_config)
    token0 = chain.token(pool.token0)
    token1 = chain.token(pool.token1)

    lp = chain.new_address()
    trader = chain.new_address()
    token0.mint(lp, deposit0)
    token1.mint(lp, deposit1)
    token0.mint(trader, swap_in * 2)
    token1.mint(trader, swap_in * 2)

    def deposit() -> int:
        token0.transfer(lp, pool.address, deposit0)
        token1.transfer(lp, pool.address, deposit1)
        return pool.mint(lp, lp)

    liquidity = chain.transact(deposit)
    chain.advance(60)

    # Both outputs must be positive: pay in token0 and take one unit of token0 back.
    # Quoting against a slightly smaller input covers the unit taken back.
    def trade() -> None:
        reserve0, reserve1 = pool.get_reserves()
        out1 = _amount_out(max(swap_in - 10, 0), reserve0, reserve1)
        token0.transfer(trader, pool.address, swap_in)
        pool.swap(trader, 1, out1, trader)

    chain.transact(trade)
    chain.advance(60)

    def withdraw() -> tuple:
        pool.transfer(lp, pool.address, liquidity)
        return pool.burn(lp, lp)

    amount0, amount1 = chain.transact(withdraw)

    return {
        "pool": pool.address,
        "token0": pool.token0,
        "token1": pool.token1,
        "liquidity_minted": liquidity,
        "withdrawn": [amount0, amount1],
        "reserves": list(pool.get_reserves()),
        "total_supply": pool.total_supply,
        "price0_cumulative_last": str(pool.price0_cumulative_last),
        "price1_cumulative_last": str(pool.price1_cumulative_last),
        "domain_separator": "0x" + pool.domain_separator().hex(),
        "events": len(chain.events),
    }


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Offline constant-product pair demo.")
    ap.add_argument("--config", type=Path, default=None, help="YAML file with optional chain:/pair: sections")
    ap.add_argument("--deposit0", type=int, default=2_000_000)
    ap.add_argument("--deposit1", type=int, default=8_000_000)
    ap.add_argument("--swap-in", type=int, default=10_000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config is not None:
        chain_config, pair_config = load_config(args.config)
    else:
        chain_config, pair_config = ChainConfig(), PairConfig()

    try:
        summary = run(
            chain_config,
            pair_config,
            deposit0=args.deposit0,
            deposit1=args.deposit1,
            swap_in=args.swap_in,
        )
    except PairError as exc:
        print(f"[pair-demo] FAIL: {type(exc).__name__}: {exc}")
        return 1

    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
