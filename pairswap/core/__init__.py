"""
Core pair algorithms
"""

from .errors import (
    PairError,
    AlreadyInitialized,
    InsufficientBalance,
    InsufficientAllowance,
    InsufficientLiquidityBurned,
    InsufficientOutputAmount,
    InsufficientLiquidity,
    InsufficientInputAmount,
    KInvariantViolated,
    ZeroLiquidity,
    ArithmeticOverflow,
    ArithmeticUnderflow,
    DivisionByZero,
    TransferFailed,
    Unsupported,
    CallReverted,
)
from .uint import Q112, UINT32_MAX, UINT112_MAX, UINT256_MAX, isqrt
from .config import ChainConfig, PairConfig, load_config
from .host import ExternalToken, Host
from .pair import FEE_DENOMINATOR, FEE_NUMERATOR, MINIMUM_LIQUIDITY, ReservePool

__all__ = [
    "PairError",
    "AlreadyInitialized",
    "InsufficientBalance",
    "InsufficientAllowance",
    "InsufficientLiquidityBurned",
    "InsufficientOutputAmount",
    "InsufficientLiquidity",
    "InsufficientInputAmount",
    "KInvariantViolated",
    "ZeroLiquidity",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "DivisionByZero",
    "TransferFailed",
    "Unsupported",
    "CallReverted",
    "Q112",
    "UINT32_MAX",
    "UINT112_MAX",
    "UINT256_MAX",
    "isqrt",
    "ChainConfig",
    "PairConfig",
    "load_config",
    "ExternalToken",
    "Host",
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    "MINIMUM_LIQUIDITY",
    "ReservePool",
]
