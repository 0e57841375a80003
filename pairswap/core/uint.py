"""Fixed-width unsigned integer arithmetic for the pair core.

Every function operates on plain Python ints. Widths mirror the storage slots
of the on-chain pair:
- reserves are uint112,
- the last-update timestamp is uint32,
- supplies, balances and price accumulators are uint256.

Checked operations raise instead of wrapping. The price accumulators are the
one place where wrapping is intended (consumers difference two samples).
"""

from __future__ import annotations

from .errors import ArithmeticOverflow, ArithmeticUnderflow, DivisionByZero

UINT32_MAX: int = (1 << 32) - 1
UINT112_MAX: int = (1 << 112) - 1
UINT256_MAX: int = (1 << 256) - 1

# Q112 fixed point: 112 fractional bits.
Q112: int = 1 << 112


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint(name: str, value: int, bits: int = 256) -> int:
    """Return *value* if it fits an unsigned *bits*-wide slot, else raise ArithmeticOverflow."""
    _require_int(name, value)
    if value < 0:
        raise ArithmeticUnderflow(f"{name} must be non-negative: {value}")
    if value >> bits:
        raise ArithmeticOverflow(f"{name} does not fit uint{bits}: {value}")
    return value


# -- Checked uint256 helpers -------------------------------------------------

def checked_add(a: int, b: int) -> int:
    out = a + b
    if out > UINT256_MAX:
        raise ArithmeticOverflow(f"uint256 add overflow: {a} + {b}")
    return out


def checked_sub(a: int, b: int, *, what: str = "uint256 sub") -> int:
    if b > a:
        raise ArithmeticUnderflow(f"{what} underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    out = a * b
    if out > UINT256_MAX:
        raise ArithmeticOverflow(f"uint256 mul overflow: {a} * {b}")
    return out


def checked_div(a: int, b: int) -> int:
    if b == 0:
        raise DivisionByZero(f"division by zero: {a} / 0")
    return a // b


def saturating_sub(a: int, b: int) -> int:
    """``max(a - b, 0)``."""
    return a - b if a > b else 0


def wrapping_add(a: int, b: int, bits: int = 256) -> int:
    return (a + b) & ((1 << bits) - 1)


def wrapping_sub(a: int, b: int, bits: int = 256) -> int:
    return (a - b) & ((1 << bits) - 1)


# -- Q112 fixed point --------------------------------------------------------

def encode_q112(y: int) -> int:
    """Encode a uint112 as a UQ112x112 value."""
    require_uint("y", y, 112)
    return y * Q112


def uqdiv(x: int, y: int) -> int:
    """Divide a UQ112x112 by a uint112, returning a UQ112x112."""
    return checked_div(x, y)


# -- Square root -------------------------------------------------------------

def isqrt(y: int) -> int:
    """
    Integer square root via the Babylonian (Newton) iteration.

    Returns ``floor(sqrt(y))``. The iteration starts at ``y // 2 + 1`` and stops
    as soon as the iterate no longer decreases. Inputs 0..3 use closed forms.
    """
    _require_int("y", y)
    if y < 0:
        raise ValueError(f"isqrt of negative value: {y}")
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0
