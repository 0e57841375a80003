"""
pairswap: settlement core of a two-asset constant-product pair.

Public API:
- `ReservePool`: reserves, share issuance, swaps, price accumulators
- `ShareLedger`: the pool's liquidity-share ledger
- `Chain`: in-memory host with transactional rollback
"""

from .core import (
    PairConfig,
    ChainConfig,
    PairError,
    ReservePool,
    MINIMUM_LIQUIDITY,
    load_config,
)
from .state import EventLog, ShareLedger, ZERO_ADDRESS
from .integration import Chain

__all__ = [
    "PairConfig",
    "ChainConfig",
    "PairError",
    "ReservePool",
    "MINIMUM_LIQUIDITY",
    "load_config",
    "EventLog",
    "ShareLedger",
    "ZERO_ADDRESS",
    "Chain",
]
