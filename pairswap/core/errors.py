"""Exception types for the pair settlement core.

Every failure aborts the whole operation. Callers that need all-or-nothing
semantics across external token movements run operations through
``Chain.transact()`` (see ``pairswap/integration/chain.py``).
"""

from __future__ import annotations


class PairError(Exception):
    """Base class for all pair/ledger failures."""


class AlreadyInitialized(PairError):
    """Raised when ``initialize`` is called on a pool whose factory is set."""


class InsufficientBalance(PairError):
    """Raised when a share transfer exceeds the sender's balance."""


class InsufficientAllowance(PairError):
    """Raised when ``transfer_from`` exceeds the spender's allowance."""


class InsufficientLiquidityBurned(PairError):
    pass


class InsufficientOutputAmount(PairError):
    pass


class InsufficientLiquidity(PairError):
    pass


class InsufficientInputAmount(PairError):
    pass


class ZeroLiquidity(PairError):
    """Raised when a deposit would issue zero shares."""


class KInvariantViolated(PairError):
    """Raised when the fee-adjusted balance product falls below the reserve product."""

    def __init__(self, k_before: int, k_after: int) -> None:
        self.k_before = k_before
        self.k_after = k_after
        super().__init__(f"K: adjusted product {k_after} < scaled reserve product {k_before}")


class ArithmeticOverflow(PairError, ArithmeticError):
    """Raised when a value exceeds its fixed bit width."""


class ArithmeticUnderflow(PairError, ArithmeticError):
    """Raised when an unsigned subtraction would go negative."""


class DivisionByZero(PairError, ArithmeticError):
    pass


class TransferFailed(PairError):
    """Raised when an external token transfer reverts or returns a non-true payload."""

    def __init__(self, token: str, to: str, value: int, reason: str = "") -> None:
        self.token = token
        self.to = to
        self.value = value
        msg = f"TRANSFER_FAILED: token={token} to={to} value={value}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class Unsupported(PairError):
    """Raised by entry points that exist for interface parity but are not implemented."""


class CallReverted(PairError):
    """Raised by an external collaborator (token or callee) whose call reverted."""
