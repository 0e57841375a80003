"""
In-memory host for the pair core.

This is the imperative shell around `ReservePool`:
- owns the clock and chain id,
- deploys tokens over one shared `BalanceTable`,
- dispatches swap callbacks to registered callees,
- runs operations transactionally: if the call raises, token balances, pools,
  events, the clock and token/callee registrations are rolled back.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Type

from ..core.config import ChainConfig, PairConfig
from ..core.errors import CallReverted
from ..core.host import ExternalToken
from ..core.pair import ReservePool
from ..state.balances import BalanceTable
from ..state.canonical import address_from_int, canonical_address
from ..state.events import EventLog
from .tokens import StandardToken

logger = logging.getLogger(__name__)

Callee = Callable[[str, bytes], Optional[bytes]]

_FIRST_ADDRESS = 0x1000


class Chain:
    """Single-threaded execution environment; one call runs at a time."""

    def __init__(self, config: Optional[ChainConfig] = None) -> None:
        self.config = config if config is not None else ChainConfig()
        self.chain_id = self.config.chain_id
        self._timestamp = self.config.genesis_timestamp
        self.balances = BalanceTable()
        self.events = EventLog()
        self._tokens: Dict[str, ExternalToken] = {}
        self._callees: Dict[str, Callee] = {}
        self._pools: Dict[str, ReservePool] = {}
        self._next_address = _FIRST_ADDRESS

    # -- Clock ---------------------------------------------------------------

    def block_timestamp(self) -> int:
        return self._timestamp

    def set_timestamp(self, timestamp: int) -> None:
        if not isinstance(timestamp, int) or isinstance(timestamp, bool) or timestamp < 0:
            raise ValueError(f"timestamp must be a non-negative int: {timestamp!r}")
        self._timestamp = timestamp

    def advance(self, seconds: int) -> int:
        if not isinstance(seconds, int) or isinstance(seconds, bool) or seconds < 0:
            raise ValueError(f"seconds must be a non-negative int: {seconds!r}")
        self._timestamp += seconds
        return self._timestamp

    # -- Accounts and deployment ---------------------------------------------

    def new_address(self) -> str:
        address = address_from_int(self._next_address)
        self._next_address += 1
        return address

    def deploy_token(
        self,
        kind: Type[StandardToken] = StandardToken,
        *,
        symbol: str = "TKN",
        **kwargs: Any,
    ) -> StandardToken:
        token = kind(self.new_address(), self.balances, symbol=symbol, **kwargs)
        self._tokens[token.address] = token
        return token

    def add_token(self, token: ExternalToken) -> None:
        """Register an externally implemented token."""
        address = canonical_address(token.address, name="token address")
        if address in self._tokens:
            raise ValueError(f"token already registered at {address}")
        self._tokens[address] = token

    def deploy_pair(
        self,
        token_a: str,
        token_b: str,
        *,
        config: Optional[PairConfig] = None,
        factory: Optional[str] = None,
    ) -> ReservePool:
        """Deploy and initialize a pool, ordering the tokens by address as a factory does."""
        a = canonical_address(token_a, name="token_a")
        b = canonical_address(token_b, name="token_b")
        if a == b:
            raise ValueError("identical token addresses")
        token0, token1 = (a, b) if a < b else (b, a)
        pool = ReservePool(self.new_address(), self, config=config, events=self.events)
        self._pools[pool.address] = pool
        pool.initialize(factory if factory is not None else self.new_address(), token0, token1)
        return pool

    def register_callee(self, address: str, handler: Callee) -> None:
        self._callees[canonical_address(address, name="callee")] = handler

    # -- Host protocol -------------------------------------------------------

    def token(self, address: str) -> ExternalToken:
        token = self._tokens.get(canonical_address(address, name="token"))
        if token is None:
            raise CallReverted(f"no token deployed at {address}")
        return token

    def call(self, target: str, data: bytes, *, sender: str) -> bytes:
        """Message call; targets without a registered callee accept any data and return nothing."""
        handler = self._callees.get(canonical_address(target, name="target"))
        if handler is None:
            return b""
        out = handler(canonical_address(sender, name="sender"), bytes(data))
        return bytes(out or b"")

    # -- Transactions --------------------------------------------------------

    def transact(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run ``fn(*args, **kwargs)``; on any exception restore all chain state and re-raise."""
        balances_snap = self.balances.snapshot()
        pool_snaps = {addr: pool.snapshot() for addr, pool in self._pools.items()}
        event_mark = self.events.mark()
        timestamp = self._timestamp
        tokens = dict(self._tokens)
        callees = dict(self._callees)
        next_address = self._next_address
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            self.balances.restore(balances_snap)
            for addr, pool in list(self._pools.items()):
                snap = pool_snaps.get(addr)
                if snap is None:
                    # Deployed inside the failed transaction.
                    del self._pools[addr]
                else:
                    pool.restore(snap)
            self.events.truncate(event_mark)
            self._timestamp = timestamp
            self._tokens = tokens
            self._callees = callees
            self._next_address = next_address
            logger.warning("transaction rolled back: %s: %s", type(exc).__name__, exc)
            raise

    def __repr__(self) -> str:
        return (
            f"Chain(chain_id={self.chain_id}, t={self._timestamp}, "
            f"tokens={len(self._tokens)}, pools={len(self._pools)})"
        )
