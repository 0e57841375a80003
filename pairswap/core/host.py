"""
Collaborator interfaces the pair depends on.

The pair never moves external value itself: it asks the host for a token
handle and calls ``balance_of``/``transfer`` on it, and it reaches swap
recipients only through ``Host.call``. Any of these calls may re-enter the
pair.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ExternalToken(Protocol):
    """External value ledger for one asset."""

    address: str

    def balance_of(self, owner: str) -> int:
        ...

    def transfer(self, sender: str, to: str, amount: int) -> bytes:
        """
        Move *amount* from *sender* to *to*.

        Returns the raw return payload (empty for tokens that return nothing,
        one ABI word for standard tokens). Raises ``CallReverted`` when the call
        itself fails.
        """
        ...


class Host(Protocol):
    """Execution environment: clock, chain identity, tokens and message calls."""

    chain_id: int

    def block_timestamp(self) -> int:
        ...

    def token(self, address: str) -> ExternalToken:
        ...

    def call(self, target: str, data: bytes, *, sender: str) -> bytes:
        ...
