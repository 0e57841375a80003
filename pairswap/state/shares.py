"""
Liquidity-share ledger for a single pair.

ERC20-style balances, allowances and supply, mutated only by holders
(transfer/approve) and by the owning pool (mint/burn).

Notes:
- Zero balances and allowances are omitted to keep the tables sparse.
- ``total_supply`` always equals the sum of stored balances.
- Destination addresses are not checked against the zero address and mint
  does not cap the supply; both are intentionally permissive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..core.errors import ArithmeticUnderflow, InsufficientAllowance, InsufficientBalance, Unsupported
from ..core.uint import require_uint
from .canonical import (
    ZERO_ADDRESS,
    canonical_address,
    encode_address,
    encode_uint256,
    keccak256,
    keccak256_text,
)
from .events import Approval, EventLog, Transfer

NAME = "Uniswap V2"
SYMBOL = "UNI-V2"
DECIMALS = 18
VERSION = "1"

EIP712_DOMAIN_TYPEHASH = keccak256_text(
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
PERMIT_TYPEHASH = keccak256_text(
    "Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
)


@dataclass(frozen=True)
class LedgerSnapshot:
    total_supply: int
    balances: Dict[str, int]
    allowances: Dict[Tuple[str, str], int]
    nonces: Dict[str, int]


class ShareLedger:
    """Share balances keyed by canonical address."""

    def __init__(self, events: EventLog | None = None) -> None:
        self.events = events if events is not None else EventLog()
        self._total_supply = 0
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._nonces: Dict[str, int] = {}

    # -- Reads ---------------------------------------------------------------

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(canonical_address(account, name="account"), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (canonical_address(owner, name="owner"), canonical_address(spender, name="spender"))
        return self._allowances.get(key, 0)

    def nonces(self, owner: str) -> int:
        return self._nonces.get(canonical_address(owner, name="owner"), 0)

    def holders(self) -> Dict[str, int]:
        """Return all non-zero balances."""
        return dict(self._balances)

    def domain_separator(self, chain_id: int, verifying_contract: str) -> bytes:
        """EIP-712 domain separator for this ledger deployed at *verifying_contract*."""
        require_uint("chain_id", chain_id)
        return keccak256(
            EIP712_DOMAIN_TYPEHASH
            + keccak256_text(NAME)
            + keccak256_text(VERSION)
            + encode_uint256(chain_id)
            + encode_address(verifying_contract)
        )

    # -- Holder entry points -------------------------------------------------

    def approve(self, sender: str, spender: str, value: int) -> bool:
        self.approve_unchecked(sender, spender, value)
        return True

    def transfer(self, sender: str, to: str, value: int) -> bool:
        self._transfer(sender, to, value)
        return True

    def transfer_from(self, sender: str, owner: str, to: str, value: int) -> bool:
        require_uint("value", value)
        key = (canonical_address(owner, name="owner"), canonical_address(sender, name="sender"))
        current = self._allowances.get(key, 0)
        if current < value:
            raise InsufficientAllowance(f"allowance {current} < {value}")
        # A failed balance check leaves the allowance untouched.
        if self.balance_of(owner) < value:
            raise InsufficientBalance(f"balance {self.balance_of(owner)} < {value}")
        self._set_allowance(key, current - value)
        self._transfer(owner, to, value)
        return True

    def permit(
        self,
        owner: str,
        spender: str,
        value: int,
        deadline: int,
        v: int,
        r: bytes,
        s: bytes,
    ) -> bool:
        raise Unsupported("permit: signature recovery is not available")

    # -- Pool-only entry points ----------------------------------------------

    def mint(self, to: str, value: int) -> None:
        require_uint("value", value)
        to = canonical_address(to, name="to")
        self._set_balance(to, self._balances.get(to, 0) + value)
        self._total_supply += value
        self.events.emit(Transfer(from_=ZERO_ADDRESS, to=to, value=value))

    def burn(self, owner: str, value: int) -> None:
        require_uint("value", value)
        owner = canonical_address(owner, name="owner")
        current = self._balances.get(owner, 0)
        if current < value:
            raise ArithmeticUnderflow(f"burn exceeds balance: {current} < {value}")
        self._set_balance(owner, current - value)
        self._total_supply -= value
        self.events.emit(Transfer(from_=owner, to=ZERO_ADDRESS, value=value))

    def approve_unchecked(self, owner: str, spender: str, value: int) -> None:
        require_uint("value", value)
        owner = canonical_address(owner, name="owner")
        spender = canonical_address(spender, name="spender")
        self._set_allowance((owner, spender), value)
        self.events.emit(Approval(owner=owner, spender=spender, value=value))

    # -- Rollback support ----------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            total_supply=self._total_supply,
            balances=dict(self._balances),
            allowances=dict(self._allowances),
            nonces=dict(self._nonces),
        )

    def restore(self, snap: LedgerSnapshot) -> None:
        self._total_supply = snap.total_supply
        self._balances = dict(snap.balances)
        self._allowances = dict(snap.allowances)
        self._nonces = dict(snap.nonces)

    def verify_conservation(self) -> bool:
        """True iff the supply equals the sum of balances."""
        return self._total_supply == sum(self._balances.values())

    # -- Internals -----------------------------------------------------------

    def _transfer(self, sender: str, to: str, value: int) -> None:
        require_uint("value", value)
        sender = canonical_address(sender, name="sender")
        to = canonical_address(to, name="to")
        current = self._balances.get(sender, 0)
        if current < value:
            raise InsufficientBalance(f"balance {current} < {value}")
        self._set_balance(sender, current - value)
        self._set_balance(to, self._balances.get(to, 0) + value)
        self.events.emit(Transfer(from_=sender, to=to, value=value))

    def _set_balance(self, account: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def _set_allowance(self, key: Tuple[str, str], amount: int) -> None:
        if amount == 0:
            self._allowances.pop(key, None)
        else:
            self._allowances[key] = amount

    def __repr__(self) -> str:
        return f"ShareLedger(total_supply={self._total_supply}, holders={len(self._balances)})"
