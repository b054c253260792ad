from __future__ import annotations

from src.core.errors import TransferError
from src.core.models import LINK_TOKEN, DeploymentContext, NetworkConfig


def resolve_token_address(context: DeploymentContext, config: NetworkConfig) -> str:
    """Token address for the network.

    Public networks pin the token in their settings entry. Development
    networks have a mock token deployed by the harness under `LinkToken`.
    """

    if config.link_token:
        return config.link_token
    address = context.deployed.get(LINK_TOKEN)
    if address:
        return address
    raise TransferError(
        f"no token address for network {context.network_name!r}: "
        f"set link_token in its settings or deploy {LINK_TOKEN}"
    )
