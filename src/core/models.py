from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from .errors import TransferError


TEST_NETWORK = "test"

FULL_AGGREGATOR = "FullAggregator"
LIGHT_AGGREGATOR = "LightAggregator"
LINK_TOKEN = "LinkToken"


class AggregatorMode(str, Enum):
    FULL = "full"
    LIGHT = "light"


@dataclass(frozen=True)
class NetworkConfig:
    aggregator_mode: AggregatorMode
    # Token address for networks where the token is not deployed by the harness.
    link_token: Optional[str] = None


@dataclass(frozen=True)
class DeploymentContext:
    """What the deployment harness hands to a migration step.

    `deployed` maps logical contract name (e.g. "FullAggregator") to address.
    """

    network_name: str
    deployed: Mapping[str, str] = field(default_factory=dict)

    def address_of(self, name: str) -> str:
        address = self.deployed.get(name)
        if not address:
            raise TransferError(f"{name} is not deployed on network {self.network_name!r}")
        return address


@dataclass(frozen=True)
class TransferReceipt:
    tx_hash: str
    to: str
    amount: int
    status: int  # 1 = success, 0 = reverted
    block_number: int | None = None
