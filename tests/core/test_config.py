# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from pairswap.core.config import ChainConfig, PairConfig, config_from_dict, load_config
from pairswap.state.canonical import ZERO_ADDRESS


def test_defaults() -> None:
    chain, pair = config_from_dict({})
    assert chain == ChainConfig(chain_id=1, genesis_timestamp=0)
    assert pair.fee_to is None
    assert not pair.fee_on


def test_fee_to_is_canonicalized() -> None:
    pair = PairConfig(fee_to="0x00000000000000000000000000000000000000FE")
    assert pair.fee_to == "0x00000000000000000000000000000000000000fe"
    assert pair.fee_on


def test_fee_to_rejects_zero_and_malformed_addresses() -> None:
    with pytest.raises(ValueError):
        PairConfig(fee_to=ZERO_ADDRESS)
    with pytest.raises(ValueError):
        PairConfig(fee_to="0x1234")


def test_chain_config_validation() -> None:
    with pytest.raises(ValueError):
        ChainConfig(chain_id=0)
    with pytest.raises(ValueError):
        ChainConfig(genesis_timestamp=-1)
    with pytest.raises(TypeError):
        ChainConfig(chain_id=True)


def test_load_yaml(tmp_path: Path) -> None:
    path = tmp_path / "pair.yaml"
    path.write_text(
        "chain:\n"
        "  chain_id: 5\n"
        "  genesis_timestamp: 1700000000\n"
        "pair:\n"
        "  fee_to: '0x00000000000000000000000000000000000000fe'\n",
        encoding="utf-8",
    )
    chain, pair = load_config(path)
    assert chain == ChainConfig(chain_id=5, genesis_timestamp=1_700_000_000)
    assert pair.fee_to == "0x00000000000000000000000000000000000000fe"


def test_load_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == (ChainConfig(), PairConfig())


def test_unknown_sections_and_keys_are_rejected() -> None:
    with pytest.raises(ValueError, match="sections"):
        config_from_dict({"router": {}})
    with pytest.raises(ValueError, match="fee_rate"):
        config_from_dict({"pair": {"fee_rate": 3}})
    with pytest.raises(TypeError):
        config_from_dict({"chain": [1, 2]})
