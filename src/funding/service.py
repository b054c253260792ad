from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from src.core.errors import ConfigError, TransferError
from src.core.models import TEST_NETWORK, DeploymentContext
from src.core.settings import load_deployments, load_network_configs, load_settings

from .step import FundingStep
from .token import dry_run_token_factory, web3_token_factory

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Fund the Full and Light aggregators with one token each.")
    ap.add_argument("--network", required=True)
    ap.add_argument("--deployments", required=True, help="JSON file: contract name -> deployed address")
    ap.add_argument("--settings", default=str(Path("config") / "settings.yaml"))
    ap.add_argument("--networks", default=None, help="Override the per-network settings file")
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", dest="dry_run", action="store_true", default=None)
    mode.add_argument("--live", dest="dry_run", action="store_false")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        s = load_settings(args.settings)
        if args.network == TEST_NETWORK:
            logger.info("Skipping aggregator funding on network %r", args.network)
            return 0
        networks = load_network_configs(args.networks or s.networks_path)
        deployed = load_deployments(args.deployments)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2

    dry_run = s.dry_run if args.dry_run is None else args.dry_run
    factory = dry_run_token_factory() if dry_run else web3_token_factory(s)
    logger.info("Funding aggregators on network=%s env=%s dry_run=%s", args.network, s.env, dry_run)

    step = FundingStep(networks=networks, token_factory=factory)
    try:
        step.run(DeploymentContext(network_name=args.network, deployed=deployed))
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2
    except TransferError as e:
        logger.error("Funding aborted: %s", e)
        return 1

    for r in step.receipts:
        logger.info("  %s <- %s (tx=%s)", r.to, r.amount, r.tx_hash)
    return 0


if __name__ == "__main__":
    sys.exit(main())
