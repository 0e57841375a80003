"""
Canonical encoding primitives for addresses and ABI words.

Addresses are carried through the core as lowercase, 0x-prefixed 20-byte hex
strings so that dictionary keys and comparisons are unambiguous. ABI words are
32-byte big-endian values, matching the host chain's calling convention.
"""

from __future__ import annotations

import re

from eth_utils import keccak


ADDRESS_NBYTES = 20
WORD_NBYTES = 32

ZERO_ADDRESS = "0x" + "00" * ADDRESS_NBYTES

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")


def canonical_address(value: str, *, name: str = "address") -> str:
    """
    Canonicalize an address (lowercase, 0x-prefixed, 20 bytes).

    Accepts either 0x-prefixed or raw hex input.
    """
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str")
    s = value.strip()
    if s.lower().startswith("0x"):
        s = s[2:]
    expected_len = 2 * ADDRESS_NBYTES
    if len(s) != expected_len:
        raise ValueError(f"{name} must be {ADDRESS_NBYTES} bytes (hex length {expected_len})")
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    return "0x" + s.lower()


def address_from_int(n: int) -> str:
    """Build an address from a small integer (handy for fixtures and demos)."""
    if not isinstance(n, int) or isinstance(n, bool) or n < 0 or n >> (8 * ADDRESS_NBYTES):
        raise ValueError(f"address int out of range: {n!r}")
    return "0x" + f"{n:0{2 * ADDRESS_NBYTES}x}"


def address_to_bytes(address: str) -> bytes:
    return bytes.fromhex(canonical_address(address)[2:])


def encode_uint256(value: int) -> bytes:
    """ABI-encode an unsigned int as one 32-byte big-endian word."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uint256 must be a non-negative int, got {value!r}")
    return value.to_bytes(WORD_NBYTES, "big")


def encode_address(address: str) -> bytes:
    """ABI-encode an address (left-padded to one word)."""
    return address_to_bytes(address).rjust(WORD_NBYTES, b"\x00")


def encode_bool(value: bool) -> bytes:
    return encode_uint256(1 if value else 0)


def is_abi_true(data: bytes) -> bool:
    """True iff *data* is exactly one ABI word holding boolean ``true``."""
    return len(data) == WORD_NBYTES and data[-1] == 1 and not any(data[:-1])


def keccak256(data: bytes) -> bytes:
    return keccak(data)


def keccak256_text(text: str) -> bytes:
    return keccak(text.encode("utf-8"))
