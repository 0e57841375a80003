"""
Constant-product reserve pool (two assets, one share ledger).

The pool custodies two reserves and settles against externally observed token
balances: callers transfer tokens in first, then call ``mint``/``swap``; the
pool measures the difference against its cached reserves.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Checked uint256
- Invariant: after each swap, (b0*1000 - in0*3) * (b1*1000 - in1*3) >= r0 * r1 * 1000**2
- Reserves are uint112 and the update timestamp is uint32 (mod 2**32)
- Price accumulators are Q112 and wrap modulo 2**256

Every public mutating operation is all-or-nothing with respect to pool state.
External token movements are rolled back by the host (see ``Chain.transact``).
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, TypeVar

from ..state.canonical import ZERO_ADDRESS, canonical_address, is_abi_true
from ..state.events import Burn, EventLog, Mint, Swap, Sync
from ..state.shares import LedgerSnapshot, ShareLedger
from .config import PairConfig
from .errors import (
    AlreadyInitialized,
    CallReverted,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientOutputAmount,
    KInvariantViolated,
    TransferFailed,
    ZeroLiquidity,
)
from .host import Host
from .uint import (
    UINT32_MAX,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    encode_q112,
    isqrt,
    require_uint,
    saturating_sub,
    uqdiv,
    wrapping_add,
    wrapping_sub,
)

logger = logging.getLogger(__name__)

# Shares locked at the zero address on the first deposit.
MINIMUM_LIQUIDITY = 1000

# 0.3% swap fee, expressed per mille.
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class PoolSnapshot:
    factory: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    block_timestamp_last: int
    price0_cumulative_last: int
    price1_cumulative_last: int
    k_last: int
    ledger: LedgerSnapshot
    event_mark: int


def _atomic(method: F) -> F:
    """Restore pool state if *method* raises."""

    @functools.wraps(method)
    def wrapper(self: "ReservePool", *args: Any, **kwargs: Any) -> Any:
        snap = self.snapshot()
        try:
            return method(self, *args, **kwargs)
        except Exception:
            self.restore(snap)
            raise

    return wrapper  # type: ignore[return-value]


class ReservePool:
    """
    Pair contract state and entry points.

    Attributes:
        address: This pool's own address (holder of its reserves)
        host: Execution environment (clock, tokens, message calls)
        config: Pair options (fee switch)
        events: Log receiving Transfer/Approval/Mint/Burn/Swap/Sync records
        shares: Liquidity-share ledger owned by this pool
    """

    def __init__(
        self,
        address: str,
        host: Host,
        config: Optional[PairConfig] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        self.address = canonical_address(address, name="pool address")
        self.host = host
        self.config = config if config is not None else PairConfig()
        self.events = events if events is not None else EventLog()
        self.shares = ShareLedger(self.events)

        self.factory = ZERO_ADDRESS
        self.token0 = ZERO_ADDRESS
        self.token1 = ZERO_ADDRESS

        self._reserve0 = 0
        self._reserve1 = 0
        self._block_timestamp_last = 0
        self._price0_cumulative_last = 0
        self._price1_cumulative_last = 0
        self._k_last = 0

    # -- Reads ---------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self.factory != ZERO_ADDRESS

    @property
    def reserve0(self) -> int:
        return self._reserve0

    @property
    def reserve1(self) -> int:
        return self._reserve1

    @property
    def block_timestamp_last(self) -> int:
        return self._block_timestamp_last

    @property
    def price0_cumulative_last(self) -> int:
        return self._price0_cumulative_last

    @property
    def price1_cumulative_last(self) -> int:
        return self._price1_cumulative_last

    @property
    def k_last(self) -> int:
        return self._k_last

    def get_reserves(self) -> Tuple[int, int]:
        return self._reserve0, self._reserve1

    # -- Share ledger surface (delegated) ------------------------------------

    @property
    def total_supply(self) -> int:
        return self.shares.total_supply

    def balance_of(self, account: str) -> int:
        return self.shares.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self.shares.allowance(owner, spender)

    def nonces(self, owner: str) -> int:
        return self.shares.nonces(owner)

    def domain_separator(self) -> bytes:
        return self.shares.domain_separator(self.host.chain_id, self.address)

    def approve(self, sender: str, spender: str, value: int) -> bool:
        return self.shares.approve(sender, spender, value)

    def transfer(self, sender: str, to: str, value: int) -> bool:
        return self.shares.transfer(sender, to, value)

    def transfer_from(self, sender: str, owner: str, to: str, value: int) -> bool:
        return self.shares.transfer_from(sender, owner, to, value)

    def permit(self, owner: str, spender: str, value: int, deadline: int, v: int, r: bytes, s: bytes) -> bool:
        return self.shares.permit(owner, spender, value, deadline, v, r, s)

    # -- Lifecycle -----------------------------------------------------------

    def initialize(self, sender: str, token0: str, token1: str) -> None:
        """Record the caller as factory and bind the two assets (one-way)."""
        if self.initialized:
            raise AlreadyInitialized(f"pool {self.address} already initialized by {self.factory}")
        factory = canonical_address(sender, name="sender")
        token0 = canonical_address(token0, name="token0")
        token1 = canonical_address(token1, name="token1")
        self.factory, self.token0, self.token1 = factory, token0, token1
        logger.info("pool %s initialized: token0=%s token1=%s", self.address, self.token0, self.token1)

    # -- Liquidity -----------------------------------------------------------

    @_atomic
    def mint(self, sender: str, to: str) -> int:
        """
        Issue shares for tokens already transferred into the pool.

        First deposit:
            liquidity = isqrt(amount0 * amount1) - MINIMUM_LIQUIDITY
            (MINIMUM_LIQUIDITY is locked at the zero address)

        Subsequent deposits:
            liquidity = min(amount0 * S // reserve0, amount1 * S // reserve1)

        Returns:
            Shares minted to ``to``

        Raises:
            ArithmeticUnderflow: balances below reserves, or a first deposit too small for the lock
            ZeroLiquidity: the deposit would issue no shares
        """
        to = canonical_address(to, name="to")
        reserve0, reserve1 = self.get_reserves()
        balance0, balance1 = self._token_balances()
        amount0 = checked_sub(balance0, reserve0, what="balance0 - reserve0")
        amount1 = checked_sub(balance1, reserve1, what="balance1 - reserve1")

        fee_on = self._mint_fee(reserve0, reserve1)
        total_supply = self.shares.total_supply  # read after _mint_fee, which may mint
        lock_minimum = total_supply == 0
        if lock_minimum:
            liquidity = checked_sub(
                isqrt(checked_mul(amount0, amount1)),
                MINIMUM_LIQUIDITY,
                what="sqrt(amount0 * amount1) - MINIMUM_LIQUIDITY",
            )
        else:
            liquidity = min(
                checked_div(checked_mul(amount0, total_supply), reserve0),
                checked_div(checked_mul(amount1, total_supply), reserve1),
            )
        if liquidity == 0:
            raise ZeroLiquidity(f"deposit ({amount0}, {amount1}) issues no shares")

        if lock_minimum:
            self.shares.mint(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
        self.shares.mint(to, liquidity)

        self._update(balance0, balance1, reserve0, reserve1)
        if fee_on:
            self._k_last = checked_mul(self._reserve0, self._reserve1)
        self.events.emit(Mint(sender=canonical_address(sender, name="sender"), amount0=amount0, amount1=amount1))
        logger.debug("mint: to=%s liquidity=%d amounts=(%d, %d)", to, liquidity, amount0, amount1)
        return liquidity

    @_atomic
    def burn(self, sender: str, to: str) -> Tuple[int, int]:
        """
        Redeem the shares held by the pool itself (transfer them in first).

        Outputs:
            amount0 = liquidity * balance0 // total_supply
            amount1 = liquidity * balance1 // total_supply

        Raises:
            InsufficientLiquidityBurned: either output rounds to zero
            TransferFailed: a token refused the payout
        """
        to = canonical_address(to, name="to")
        reserve0, reserve1 = self.get_reserves()
        token0, token1 = self.token0, self.token1
        balance0, balance1 = self._token_balances()
        liquidity = self.shares.balance_of(self.address)

        fee_on = self._mint_fee(reserve0, reserve1)
        total_supply = self.shares.total_supply
        amount0 = checked_div(checked_mul(liquidity, balance0), total_supply)
        amount1 = checked_div(checked_mul(liquidity, balance1), total_supply)
        if amount0 == 0 or amount1 == 0:
            raise InsufficientLiquidityBurned(
                f"burning {liquidity} of {total_supply} shares yields ({amount0}, {amount1})"
            )

        self.shares.burn(self.address, liquidity)
        self._safe_transfer(token0, to, amount0)
        self._safe_transfer(token1, to, amount1)
        balance0, balance1 = self._token_balances()

        self._update(balance0, balance1, reserve0, reserve1)
        if fee_on:
            self._k_last = checked_mul(self._reserve0, self._reserve1)
        self.events.emit(
            Burn(sender=canonical_address(sender, name="sender"), amount0=amount0, amount1=amount1, to=to)
        )
        logger.debug("burn: to=%s liquidity=%d amounts=(%d, %d)", to, liquidity, amount0, amount1)
        return amount0, amount1

    # -- Swaps ---------------------------------------------------------------

    @_atomic
    def swap(self, sender: str, amount0_out: int, amount1_out: int, to: str, data: bytes = b"") -> None:
        """
        Send the requested outputs, optionally call back into ``to``, then
        infer inputs from balances and enforce the fee-adjusted invariant.

        Both outputs must be positive.

        Raises:
            InsufficientOutputAmount: either requested output is zero
            InsufficientLiquidity: an output would drain its reserve
            InsufficientInputAmount: no input arrived
            KInvariantViolated: fee-adjusted product decreased
        """
        require_uint("amount0_out", amount0_out)
        require_uint("amount1_out", amount1_out)
        if amount0_out == 0 or amount1_out == 0:
            raise InsufficientOutputAmount(f"outputs ({amount0_out}, {amount1_out}) must both be positive")
        reserve0, reserve1 = self.get_reserves()
        if amount0_out >= reserve0 or amount1_out >= reserve1:
            raise InsufficientLiquidity(
                f"outputs ({amount0_out}, {amount1_out}) exceed reserves ({reserve0}, {reserve1})"
            )

        to = canonical_address(to, name="to")
        self._safe_transfer(self.token0, to, amount0_out)
        self._safe_transfer(self.token1, to, amount1_out)
        if data:
            # Flash swap: the callee may re-enter any pool entry point.
            self.host.call(to, bytes(data), sender=self.address)
        balance0, balance1 = self._token_balances()

        amount0_in = saturating_sub(balance0, reserve0 - amount0_out)
        amount1_in = saturating_sub(balance1, reserve1 - amount1_out)
        if amount0_in == 0 and amount1_in == 0:
            raise InsufficientInputAmount("no input received")

        balance0_adjusted = checked_sub(
            checked_mul(balance0, FEE_DENOMINATOR),
            checked_mul(amount0_in, FEE_NUMERATOR),
            what="balance0Adjusted",
        )
        balance1_adjusted = checked_sub(
            checked_mul(balance1, FEE_DENOMINATOR),
            checked_mul(amount1_in, FEE_NUMERATOR),
            what="balance1Adjusted",
        )
        k_before = checked_mul(checked_mul(reserve0, reserve1), FEE_DENOMINATOR**2)
        k_after = checked_mul(balance0_adjusted, balance1_adjusted)
        if k_after < k_before:
            raise KInvariantViolated(k_before=k_before, k_after=k_after)

        self._update(balance0, balance1, reserve0, reserve1)
        self.events.emit(
            Swap(
                sender=canonical_address(sender, name="sender"),
                amount0_in=amount0_in,
                amount1_in=amount1_in,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
                to=to,
            )
        )
        logger.debug(
            "swap: in=(%d, %d) out=(%d, %d) to=%s", amount0_in, amount1_in, amount0_out, amount1_out, to
        )

    # -- Reconciliation ------------------------------------------------------

    @_atomic
    def skim(self, to: str) -> Tuple[int, int]:
        """Send any balance above the cached reserves to ``to``. Reserves are unchanged."""
        to = canonical_address(to, name="to")
        balance0, balance1 = self._token_balances()
        excess0 = checked_sub(balance0, self._reserve0, what="balance0 - reserve0")
        excess1 = checked_sub(balance1, self._reserve1, what="balance1 - reserve1")
        self._safe_transfer(self.token0, to, excess0)
        self._safe_transfer(self.token1, to, excess1)
        logger.debug("skim: to=%s excess=(%d, %d)", to, excess0, excess1)
        return excess0, excess1

    @_atomic
    def sync(self) -> None:
        """Force reserves to match current balances."""
        balance0, balance1 = self._token_balances()
        self._update(balance0, balance1, self._reserve0, self._reserve1)

    # -- Rollback support ----------------------------------------------------

    def snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            factory=self.factory,
            token0=self.token0,
            token1=self.token1,
            reserve0=self._reserve0,
            reserve1=self._reserve1,
            block_timestamp_last=self._block_timestamp_last,
            price0_cumulative_last=self._price0_cumulative_last,
            price1_cumulative_last=self._price1_cumulative_last,
            k_last=self._k_last,
            ledger=self.shares.snapshot(),
            event_mark=self.events.mark(),
        )

    def restore(self, snap: PoolSnapshot) -> None:
        self.factory = snap.factory
        self.token0 = snap.token0
        self.token1 = snap.token1
        self._reserve0 = snap.reserve0
        self._reserve1 = snap.reserve1
        self._block_timestamp_last = snap.block_timestamp_last
        self._price0_cumulative_last = snap.price0_cumulative_last
        self._price1_cumulative_last = snap.price1_cumulative_last
        self._k_last = snap.k_last
        self.shares.restore(snap.ledger)
        self.events.truncate(snap.event_mark)

    # -- Internals -----------------------------------------------------------

    def _token_balances(self) -> Tuple[int, int]:
        balance0 = self.host.token(self.token0).balance_of(self.address)
        balance1 = self.host.token(self.token1).balance_of(self.address)
        return balance0, balance1

    def _update(self, balance0: int, balance1: int, reserve0: int, reserve1: int) -> None:
        """Store new reserves and accumulate prices over the time since the last update."""
        require_uint("balance0", balance0, 112)
        require_uint("balance1", balance1, 112)
        block_timestamp = self.host.block_timestamp() & UINT32_MAX
        time_elapsed = wrapping_sub(block_timestamp, self._block_timestamp_last, 32)
        if time_elapsed > 0 and reserve0 != 0 and reserve1 != 0:
            self._price0_cumulative_last = wrapping_add(
                self._price0_cumulative_last, uqdiv(encode_q112(reserve1), reserve0) * time_elapsed
            )
            self._price1_cumulative_last = wrapping_add(
                self._price1_cumulative_last, uqdiv(encode_q112(reserve0), reserve1) * time_elapsed
            )
        self._reserve0 = balance0
        self._reserve1 = balance1
        self._block_timestamp_last = block_timestamp
        self.events.emit(Sync(reserve0=balance0, reserve1=balance1))
        logger.debug("sync: reserves=(%d, %d) t=%d elapsed=%d", balance0, balance1, block_timestamp, time_elapsed)

    def _mint_fee(self, reserve0: int, reserve1: int) -> bool:
        """
        Protocol fee: mint 1/6 of the growth in sqrt(k) since the last liquidity event.

        Disabled unless ``config.fee_to`` is set; when disabled a stale ``k_last`` is cleared.
        """
        fee_to = self.config.fee_to
        k_last = self._k_last
        if fee_to is None:
            if k_last != 0:
                self._k_last = 0
            return False
        if k_last != 0:
            root_k = isqrt(checked_mul(reserve0, reserve1))
            root_k_last = isqrt(k_last)
            if root_k > root_k_last:
                numerator = checked_mul(self.shares.total_supply, root_k - root_k_last)
                denominator = checked_add(checked_mul(root_k, 5), root_k_last)
                liquidity = numerator // denominator
                if liquidity > 0:
                    self.shares.mint(fee_to, liquidity)
                    logger.info("protocol fee: minted %d shares to %s", liquidity, fee_to)
        return True

    def _safe_transfer(self, token: str, to: str, value: int) -> None:
        """
        Transfer tolerant of tokens that return nothing.

        Succeeds iff the call did not revert and returned either no data or
        exactly one ABI word holding ``true``.
        """
        try:
            data = self.host.token(token).transfer(self.address, to, value)
        except CallReverted as exc:
            logger.warning("transfer reverted: token=%s to=%s value=%d: %s", token, to, value, exc)
            raise TransferFailed(token, to, value, reason=str(exc)) from exc
        data = bytes(data or b"")
        if data and not is_abi_true(data):
            logger.warning("transfer returned non-true payload: token=%s data=0x%s", token, data.hex())
            raise TransferFailed(token, to, value, reason=f"unexpected return data ({len(data)} bytes)")

    def __repr__(self) -> str:
        return (
            f"ReservePool(address={self.address}, "
            f"reserves=({self._reserve0}, {self._reserve1}), "
            f"total_supply={self.shares.total_supply})"
        )
