"""Aggregator funding step.

Must be purely mechanical:
- skips on the reserved "test" network and on light-mode networks
- sends exactly one whole token to FullAggregator, then to LightAggregator
- any failure aborts the step; the second transfer is never attempted
  after the first fails

No retries, no compensation. Re-running after a partial failure is an
operator decision.
"""

from __future__ import annotations

import logging
from typing import Mapping

from web3 import Web3

from src.core.errors import ConfigError, FundingError, TransferError
from src.core.models import (
    FULL_AGGREGATOR,
    LIGHT_AGGREGATOR,
    TEST_NETWORK,
    AggregatorMode,
    DeploymentContext,
    NetworkConfig,
    TransferReceipt,
)

from .resolver import resolve_token_address
from .token import TokenFactory, TokenHandle

logger = logging.getLogger(__name__)

# One whole token in base units (18 decimals).
FUNDING_AMOUNT: int = Web3.to_wei(1, "ether")
EMPTY_PAYLOAD = b""

FUNDED_CONTRACTS = (FULL_AGGREGATOR, LIGHT_AGGREGATOR)


class FundingStep:
    def __init__(self, *, networks: Mapping[str, NetworkConfig], token_factory: TokenFactory) -> None:
        self._networks = networks
        self._token_factory = token_factory
        self.receipts: list[TransferReceipt] = []

    def _network_config(self, network_name: str) -> NetworkConfig:
        config = self._networks.get(network_name)
        if config is None:
            raise ConfigError(f"no settings entry for network {network_name!r}")
        if not isinstance(config, NetworkConfig):
            raise ConfigError(f"settings entry for network {network_name!r} is malformed")
        return config

    def _token(self, context: DeploymentContext, config: NetworkConfig) -> TokenHandle:
        address = resolve_token_address(context, config)
        try:
            return self._token_factory(address)
        except FundingError:
            raise
        except Exception as e:
            raise TransferError(f"cannot bind token at {address}: {e}") from e

    def run(self, context: DeploymentContext) -> None:
        """Fund both aggregators for `context.network_name`, or skip."""

        self.receipts = []
        network = context.network_name
        if network == TEST_NETWORK:
            logger.info("Skipping aggregator funding on network %r", network)
            return

        config = self._network_config(network)
        if config.aggregator_mode == AggregatorMode.LIGHT:
            logger.info("Skipping aggregator funding: network %r runs in light mode", network)
            return

        token = self._token(context, config)
        # Resolve both recipients up front so a missing one fails before any transfer.
        recipients = [context.address_of(name) for name in FUNDED_CONTRACTS]

        for name, to in zip(FUNDED_CONTRACTS, recipients):
            try:
                receipt = token.transfer_and_call(to, FUNDING_AMOUNT, EMPTY_PAYLOAD)
            except FundingError:
                raise
            except Exception as e:
                raise TransferError(f"funding {name} at {to} failed: {e}") from e
            logger.info("Funded %s at %s (tx=%s)", name, to, receipt.tx_hash)
            self.receipts.append(receipt)
