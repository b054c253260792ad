from __future__ import annotations

from typing import Any

from web3 import Web3

from src.core.errors import ConfigError
from src.core.models import AggregatorMode, NetworkConfig


NETWORK_REQUIRED_KEYS = {"type"}
NETWORK_OPTIONAL_KEYS = {"link_token"}


def _require_exact_keys(obj: dict[str, Any], *, required: set[str], optional: set[str] | None = None) -> None:
    optional = optional or set()
    keys = set(obj.keys())
    missing = required - keys
    extra = keys - required - optional
    if missing:
        raise ConfigError(f"missing keys: {sorted(missing)}")
    if extra:
        raise ConfigError(f"unknown keys: {sorted(extra)}")


def _require_str(d: dict[str, Any], k: str) -> str:
    v = d.get(k)
    if not isinstance(v, str) or not v.strip():
        raise ConfigError(f"{k} must be non-empty string")
    return v


def validate_address(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{field} must be non-empty string")
    if not Web3.is_address(value):
        raise ConfigError(f"{field} is not a valid address: {value!r}")
    return value


def validate_network_entry(name: str, entry: Any) -> NetworkConfig:
    """Validate one per-network settings record, e.g. ``{"type": "full"}``."""

    if not isinstance(entry, dict):
        raise ConfigError(f"network {name!r}: entry must be object")
    try:
        _require_exact_keys(entry, required=NETWORK_REQUIRED_KEYS, optional=NETWORK_OPTIONAL_KEYS)
        mode = _require_str(entry, "type")
    except ConfigError as e:
        raise ConfigError(f"network {name!r}: {e}") from e

    try:
        aggregator_mode = AggregatorMode(mode)
    except ValueError as e:
        raise ConfigError(f"network {name!r}: type must be full/light, got {mode!r}") from e

    link_token = entry.get("link_token")
    if link_token is not None:
        link_token = validate_address(link_token, field=f"{name}.link_token")
    return NetworkConfig(aggregator_mode=aggregator_mode, link_token=link_token)


def validate_networks(data: Any) -> dict[str, NetworkConfig]:
    if not isinstance(data, dict):
        raise ConfigError("networks file must be a mapping of network name to settings")
    return {str(name): validate_network_entry(str(name), entry) for name, entry in data.items()}


def validate_deployments(data: Any) -> dict[str, str]:
    """Validate the harness's contract-name -> address mapping."""

    if not isinstance(data, dict):
        raise ConfigError("deployments must be a mapping of contract name to address")
    out: dict[str, str] = {}
    for name, address in data.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError("contract names must be non-empty strings")
        out[name] = validate_address(address, field=name)
    return out
