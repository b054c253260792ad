from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.funding.service import main


FULL = "0x" + "a" * 40
LIGHT = "0x" + "b" * 40
TOKEN = "0x" + "c" * 40


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for k in ("AGGFUND_RPC_URL", "AGGFUND_PRIVATE_KEY", "AGGFUND_DRY_RUN"):
        monkeypatch.delenv(k, raising=False)
    (tmp_path / "settings.yaml").write_text(
        "chain:\n  rpc_url: http://127.0.0.1:8545\nfunding:\n  dry_run: true\n", encoding="utf-8"
    )
    (tmp_path / "networks.yaml").write_text(
        "development:\n  type: full\nbsc:\n  type: light\n", encoding="utf-8"
    )
    (tmp_path / "deployments.json").write_text(
        json.dumps({"FullAggregator": FULL, "LightAggregator": LIGHT, "LinkToken": TOKEN}),
        encoding="utf-8",
    )
    return tmp_path


def _argv(ws: Path, network: str, *extra: str) -> list[str]:
    return [
        "--network",
        network,
        "--settings",
        str(ws / "settings.yaml"),
        "--deployments",
        str(ws / "deployments.json"),
        *extra,
    ]


def test_dry_run_funds_both_aggregators(workspace: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO")
    assert main(_argv(workspace, "development", "--dry-run")) == 0
    dry = [r.getMessage() for r in caplog.records if "[dry-run]" in r.getMessage()]
    assert len(dry) == 2
    assert FULL in dry[0] and LIGHT in dry[1]


@pytest.mark.parametrize("network", ["test", "bsc"])
def test_skipped_networks_exit_zero(workspace: Path, network: str) -> None:
    assert main(_argv(workspace, network)) == 0


def test_unknown_network_is_config_error(workspace: Path) -> None:
    assert main(_argv(workspace, "ropsten")) == 2


def test_missing_settings_file_is_config_error(workspace: Path) -> None:
    assert main(_argv(workspace, "development", "--settings", str(workspace / "missing.yaml"))) == 2


def test_missing_aggregator_is_transfer_error(workspace: Path) -> None:
    (workspace / "deployments.json").write_text(
        json.dumps({"FullAggregator": FULL, "LinkToken": TOKEN}), encoding="utf-8"
    )
    assert main(_argv(workspace, "development")) == 1


def test_test_network_needs_no_networks_file(workspace: Path) -> None:
    (workspace / "networks.yaml").unlink()
    assert main(_argv(workspace, "test")) == 0


def test_malformed_settings_value_is_config_error(workspace: Path) -> None:
    (workspace / "settings.yaml").write_text(
        "chain:\n  rpc_url: http://127.0.0.1:8545\n  request_timeout: soon\n", encoding="utf-8"
    )
    assert main(_argv(workspace, "development")) == 2
