"""
In-memory external tokens.

All tokens deployed on one `Chain` share a single `BalanceTable`, keyed by
(holder, token address). They differ only in what their ``transfer`` returns,
which is what the pair's safe-transfer check has to tolerate:

- `StandardToken`: moves value, returns one ABI word ``true``
- `NoReturnToken`: moves value, returns nothing
- `FalseReturnToken`: moves nothing, returns ``false``
- `ScriptedReturnToken`: moves value, returns a fixed payload
- `RevertingToken`: every transfer reverts
"""

from __future__ import annotations

from ..core.errors import CallReverted
from ..state.balances import BalanceTable
from ..state.canonical import canonical_address, encode_bool


class StandardToken:
    def __init__(self, address: str, table: BalanceTable, *, symbol: str = "TKN") -> None:
        self.address = canonical_address(address, name="token address")
        self.table = table
        self.symbol = symbol

    @property
    def total_supply(self) -> int:
        return self.table.supply_of(self.address)

    def balance_of(self, owner: str) -> int:
        return self.table.get(canonical_address(owner, name="owner"), self.address)

    def transfer(self, sender: str, to: str, amount: int) -> bytes:
        self._move(sender, to, amount)
        return encode_bool(True)

    def mint(self, to: str, amount: int) -> None:
        """Faucet: credit *amount* to *to* out of thin air."""
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"mint amount must be a non-negative int: {amount!r}")
        self.table.add(canonical_address(to, name="to"), self.address, amount)

    def _move(self, sender: str, to: str, amount: int) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise CallReverted(f"{self.symbol}: amount must be an int")
        try:
            self.table.move(
                self.address,
                canonical_address(sender, name="sender"),
                canonical_address(to, name="to"),
                amount,
            )
        except ValueError as exc:
            raise CallReverted(f"{self.symbol}: {exc}") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.symbol}@{self.address})"


class NoReturnToken(StandardToken):
    def transfer(self, sender: str, to: str, amount: int) -> bytes:
        self._move(sender, to, amount)
        return b""


class FalseReturnToken(StandardToken):
    def transfer(self, sender: str, to: str, amount: int) -> bytes:
        return encode_bool(False)


class ScriptedReturnToken(StandardToken):
    def __init__(self, address: str, table: BalanceTable, *, payload: bytes, symbol: str = "TKN") -> None:
        super().__init__(address, table, symbol=symbol)
        self.payload = bytes(payload)

    def transfer(self, sender: str, to: str, amount: int) -> bytes:
        self._move(sender, to, amount)
        return self.payload


class RevertingToken(StandardToken):
    def transfer(self, sender: str, to: str, amount: int) -> bytes:
        raise CallReverted(f"{self.symbol}: transfers are paused")
