from __future__ import annotations

import pytest

from src.contracts.validation import (
    validate_address,
    validate_deployments,
    validate_network_entry,
    validate_networks,
)
from src.core.errors import ConfigError
from src.core.models import AggregatorMode, NetworkConfig


ADDR = "0x" + "a" * 40


def test_network_entry_full_with_token() -> None:
    cfg = validate_network_entry("mainnet", {"type": "full", "link_token": ADDR})
    assert cfg == NetworkConfig(aggregator_mode=AggregatorMode.FULL, link_token=ADDR)


def test_network_entry_light_without_token() -> None:
    cfg = validate_network_entry("bsc", {"type": "light"})
    assert cfg.aggregator_mode is AggregatorMode.LIGHT
    assert cfg.link_token is None


@pytest.mark.parametrize(
    "entry",
    [
        None,
        {},
        {"type": ""},
        {"type": "medium"},
        {"type": "full", "extra": 1},
        {"type": "full", "link_token": "0x1234"},
    ],
)
def test_network_entry_malformed(entry) -> None:
    with pytest.raises(ConfigError):
        validate_network_entry("mainnet", entry)


def test_networks_must_be_mapping() -> None:
    with pytest.raises(ConfigError):
        validate_networks(["mainnet"])
    assert set(validate_networks({"a": {"type": "full"}, "b": {"type": "light"}})) == {"a", "b"}


def test_validate_address() -> None:
    assert validate_address(ADDR, field="x") == ADDR
    with pytest.raises(ConfigError):
        validate_address("not-an-address", field="x")
    with pytest.raises(ConfigError):
        validate_address(123, field="x")


def test_validate_deployments() -> None:
    assert validate_deployments({"FullAggregator": ADDR}) == {"FullAggregator": ADDR}
    with pytest.raises(ConfigError, match="LightAggregator"):
        validate_deployments({"LightAggregator": "0xdead"})
    with pytest.raises(ConfigError):
        validate_deployments("FullAggregator")
