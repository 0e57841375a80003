"""Event records emitted by the share ledger and the reserve pool.

Records are frozen dataclasses appended to an `EventLog`. The log is
append-only for the core; the in-memory host truncates it when it rolls a
failed transaction back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterator, List, Type, TypeVar, Union


@dataclass(frozen=True)
class Transfer:
    from_: str
    to: str
    value: int


@dataclass(frozen=True)
class Approval:
    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class Mint:
    sender: str
    amount0: int
    amount1: int


@dataclass(frozen=True)
class Burn:
    sender: str
    amount0: int
    amount1: int
    to: str


@dataclass(frozen=True)
class Swap:
    sender: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int
    to: str


@dataclass(frozen=True)
class Sync:
    reserve0: int
    reserve1: int


EventRecord = Union[Transfer, Approval, Mint, Burn, Swap, Sync]

E = TypeVar("E")


class EventLog:
    """Ordered, append-only list of event records."""

    def __init__(self) -> None:
        self._records: List[EventRecord] = []

    def emit(self, record: EventRecord) -> None:
        self._records.append(record)

    def records(self) -> List[EventRecord]:
        return list(self._records)

    def of_type(self, kind: Type[E]) -> List[E]:
        return [r for r in self._records if isinstance(r, kind)]

    def to_dicts(self) -> List[dict]:
        """Plain-dict rendition (``{"event": <name>, ...fields}``) for JSON output."""
        return [{"event": type(r).__name__, **asdict(r)} for r in self._records]

    def mark(self) -> int:
        return len(self._records)

    def truncate(self, mark: int) -> None:
        if mark < 0 or mark > len(self._records):
            raise ValueError(f"invalid event log mark: {mark}")
        del self._records[mark:]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(list(self._records))

    def __repr__(self) -> str:
        return f"EventLog({len(self._records)} records)"
