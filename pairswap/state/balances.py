"""
External token balance tracking for the in-memory host.

Implements BalanceTable[Holder, Token] -> Amount. This is the storage behind
the in-memory token collaborators; the pair core itself never reads it
directly, only through each token's ``balance_of``.
"""

from __future__ import annotations

from typing import Dict, Tuple


# Type aliases
Address = str  # canonical 0x-prefixed 20-byte hex
Amount = int  # non-negative integer (arbitrary precision)


class BalanceTable:
    """
    Balance table mapping (holder, token) -> amount.

    Note: this class stores balances in a plain dict. Callers that render or hash
    balances should sort keys explicitly.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Address, Address], Amount] = {}

    def get(self, holder: Address, token: Address) -> Amount:
        """Get balance for (holder, token). Returns 0 if not found."""
        return self._balances.get((holder, token), 0)

    def set(self, holder: Address, token: Address, amount: Amount) -> None:
        """
        Set balance for (holder, token).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((holder, token), None)
        else:
            self._balances[(holder, token)] = amount

    def add(self, holder: Address, token: Address, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(holder, token)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(holder, token, new_balance)

    def move(self, token: Address, sender: Address, to: Address, amount: Amount) -> None:
        """Move *amount* of *token* from *sender* to *to*, all-or-nothing."""
        if amount < 0:
            raise ValueError(f"Amount must be non-negative: {amount}")
        current = self.get(sender, token)
        if current < amount:
            raise ValueError(f"Insufficient balance: {current} < {amount}")
        self.set(sender, token, current - amount)
        self.add(to, token, amount)

    def supply_of(self, token: Address) -> Amount:
        return sum(amount for (_, t), amount in self._balances.items() if t == token)

    def get_balances_for_token(self, token: Address) -> Dict[Address, Amount]:
        """Get all balances for a specific token, keyed by holder."""
        return {holder: amount for (holder, t), amount in self._balances.items() if t == token}

    def snapshot(self) -> Dict[Tuple[Address, Address], Amount]:
        return dict(self._balances)

    def restore(self, snap: Dict[Tuple[Address, Address], Amount]) -> None:
        self._balances = dict(snap)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
