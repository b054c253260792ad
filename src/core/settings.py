from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import os

from src.contracts.validation import validate_deployments, validate_networks

from .errors import ConfigError
from .models import NetworkConfig


@dataclass(frozen=True)
class Settings:
    env: str
    rpc_url: str
    private_key: str | None
    networks_path: str
    dry_run: bool = True
    request_timeout: float = 10.0
    receipt_timeout: float = 120.0


def _env_flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_yaml(p: Path) -> Any:
    # Keep imports optional at module import time (tests/tools may not need YAML).
    try:
        import yaml  # type: ignore
    except ModuleNotFoundError as e:  # pragma: no cover
        raise ModuleNotFoundError(
            "PyYAML is required to load YAML config. Install with: pip install pyyaml"
        ) from e

    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {p}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {p}: {e}") from e


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{key} must be a mapping")
    return section


def _flag(value: Any, *, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _env_flag(value)
    raise ConfigError(f"{field} must be a boolean")


def _seconds(section: Dict[str, Any], key: str, default: float) -> float:
    try:
        value = float(section.get(key, default))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"chain.{key} must be a number of seconds") from e
    if value <= 0:
        raise ConfigError(f"chain.{key} must be > 0")
    return value


def load_settings(path: str | Path = "config/settings.yaml") -> Settings:
    p = Path(path)
    data: Dict[str, Any] = _read_yaml(p) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: settings must be a mapping")

    # Secrets and endpoints may come from the environment instead of the file.
    env_rpc_url = os.getenv("AGGFUND_RPC_URL")
    env_private_key = os.getenv("AGGFUND_PRIVATE_KEY")
    env_dry_run = os.getenv("AGGFUND_DRY_RUN")

    chain = _section(data, "chain")
    rpc_url = env_rpc_url or chain.get("rpc_url")
    if not rpc_url:
        raise ConfigError("chain.rpc_url is required (or set AGGFUND_RPC_URL)")

    dry_run = _flag(_section(data, "funding").get("dry_run", True), field="funding.dry_run")
    if env_dry_run is not None:
        dry_run = _env_flag(env_dry_run)

    networks_path = data.get("networks_path") or str(p.parent / "networks.yaml")
    return Settings(
        env=data.get("env", "dev"),
        rpc_url=str(rpc_url),
        private_key=env_private_key or chain.get("private_key"),
        networks_path=str(networks_path),
        dry_run=dry_run,
        request_timeout=_seconds(chain, "request_timeout", 10.0),
        receipt_timeout=_seconds(chain, "receipt_timeout", 120.0),
    )


def load_network_configs(path: str | Path) -> dict[str, NetworkConfig]:
    """Load the per-network settings file (network name -> {type, link_token})."""

    return validate_networks(_read_yaml(Path(path)))


def load_deployments(path: str | Path) -> dict[str, str]:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"deployments file not found: {p}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {p}: {e}") from e
    return validate_deployments(data)
