"""
Runtime configuration for the pair and the in-memory host.

Configuration is plain frozen dataclasses validated on construction. A YAML
file may carry both sections:

    chain:
      chain_id: 1
      genesis_timestamp: 1700000000
    pair:
      fee_to: "0x00000000000000000000000000000000000000fe"
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import yaml

from ..state.canonical import ZERO_ADDRESS, canonical_address


@dataclass(frozen=True)
class PairConfig:
    """
    Pair options.

    ``fee_to`` switches the protocol fee on: when set, growth in ``sqrt(k)``
    between liquidity events is minted to it as 1/6 of the LP share.
    """

    fee_to: Optional[str] = None

    def __post_init__(self) -> None:
        if self.fee_to is not None:
            addr = canonical_address(self.fee_to, name="fee_to")
            if addr == ZERO_ADDRESS:
                raise ValueError("fee_to must not be the zero address (use None to disable)")
            object.__setattr__(self, "fee_to", addr)

    @property
    def fee_on(self) -> bool:
        return self.fee_to is not None


@dataclass(frozen=True)
class ChainConfig:
    chain_id: int = 1
    genesis_timestamp: int = 0

    def __post_init__(self) -> None:
        for name, v in (("chain_id", self.chain_id), ("genesis_timestamp", self.genesis_timestamp)):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if self.chain_id <= 0:
            raise ValueError(f"chain_id must be positive: {self.chain_id}")
        if self.genesis_timestamp < 0:
            raise ValueError(f"genesis_timestamp must be non-negative: {self.genesis_timestamp}")


def _section(cls: type, raw: Any, name: str) -> Any:
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise TypeError(f"config section {name!r} must be a mapping")
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ValueError(f"unknown keys in config section {name!r}: {unknown}")
    return cls(**dict(raw))


def config_from_dict(obj: Mapping[str, Any]) -> Tuple[ChainConfig, PairConfig]:
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")
    unknown = sorted(set(obj) - {"chain", "pair"})
    if unknown:
        raise ValueError(f"unknown config sections: {unknown}")
    return _section(ChainConfig, obj.get("chain"), "chain"), _section(PairConfig, obj.get("pair"), "pair")


def load_config(path: Union[str, Path]) -> Tuple[ChainConfig, PairConfig]:
    """Load ``(ChainConfig, PairConfig)`` from a YAML file. An empty file yields defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    return config_from_dict(obj)
