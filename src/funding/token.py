"""Token adapters for the funding step.

The step only needs one capability from the token contract: ERC-677
``transferAndCall(to, amount, data)``. `Web3Token` sends it on-chain;
`DryRunToken` echoes a confirmed receipt without touching a chain.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, cast

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import HTTPProvider, Web3
from web3.contract import Contract
from web3.exceptions import Web3Exception
from web3.middleware import SignAndSendRawMiddlewareBuilder

from src.core.errors import ConfigError, TransferError
from src.core.models import TransferReceipt
from src.core.settings import Settings

logger = logging.getLogger(__name__)

ERC677_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "transferAndCall",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint256"},
            {"name": "data", "type": "bytes"},
        ],
        "outputs": [{"name": "success", "type": "bool"}],
    },
]


class TokenHandle(Protocol):
    def transfer_and_call(self, to: str, amount: int, data: bytes) -> TransferReceipt:
        ...


TokenFactory = Callable[[str], TokenHandle]


class Web3Token:
    """ERC-677 token bound at `address`, signing with the deployer key."""

    def __init__(
        self,
        address: str,
        *,
        web3: Web3,
        account: LocalAccount,
        receipt_timeout: float = 120.0,
    ) -> None:
        self.address = Web3.to_checksum_address(address)
        self._web3 = web3
        self._account = account
        self._receipt_timeout = receipt_timeout
        self._contract: Contract = web3.eth.contract(address=self.address, abi=ERC677_ABI)

    def transfer_and_call(self, to: str, amount: int, data: bytes) -> TransferReceipt:
        recipient = Web3.to_checksum_address(to)
        logger.info("Dispatching transferAndCall token=%s to=%s amount=%s", self.address, recipient, amount)
        try:
            tx_hash = self._contract.functions.transferAndCall(recipient, amount, data).transact(
                {"from": self._account.address}
            )
            receipt = self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self._receipt_timeout)
        except (Web3Exception, ValueError) as exc:
            raise TransferError(f"transferAndCall to {recipient} failed: {exc}") from exc

        status = int(receipt["status"])
        if status != 1:
            raise TransferError(f"transferAndCall to {recipient} reverted (tx={tx_hash.to_0x_hex()})")

        logger.info(
            "Transaction confirmed to=%s hash=%s block=%s",
            recipient,
            tx_hash.to_0x_hex(),
            receipt.get("blockNumber"),
        )
        return TransferReceipt(
            tx_hash=tx_hash.to_0x_hex(),
            to=recipient,
            amount=amount,
            status=status,
            block_number=receipt.get("blockNumber"),
        )


class DryRunToken:
    """Stub token.

    In dry-run mode we simply log the call and echo a successful receipt.
    Calls are recorded in `calls` in issue order.
    """

    name = "dry-run"

    def __init__(self, address: str) -> None:
        self.address = address
        self.calls: list[tuple[str, int, bytes]] = []

    def transfer_and_call(self, to: str, amount: int, data: bytes) -> TransferReceipt:
        self.calls.append((to, amount, data))
        logger.info("[dry-run] transferAndCall token=%s to=%s amount=%s", self.address, to, amount)
        return TransferReceipt(tx_hash="0x" + "00" * 32, to=to, amount=amount, status=1)


def connect_web3(settings: Settings) -> tuple[Web3, LocalAccount]:
    """Build a Web3 client whose transactions are signed by the deployer key."""

    if not settings.private_key:
        raise ConfigError("a deployer private key is required for live funding (AGGFUND_PRIVATE_KEY)")

    try:
        account = cast(LocalAccount, Account.from_key(settings.private_key))
    except (ValueError, TypeError) as exc:
        raise ConfigError("deployer private key is malformed") from exc

    web3 = Web3(HTTPProvider(settings.rpc_url, request_kwargs={"timeout": settings.request_timeout}))
    if not web3.is_connected():
        raise TransferError(f"unable to connect to RPC at {settings.rpc_url}")

    web3.middleware_onion.add(cast(Any, SignAndSendRawMiddlewareBuilder.build(account)))
    web3.eth.default_account = account.address
    logger.info("Connected to %s as %s", settings.rpc_url, account.address)
    return web3, account


def web3_token_factory(settings: Settings) -> TokenFactory:
    # Connect lazily so skipped runs never open an RPC connection.
    state: dict[str, tuple[Web3, LocalAccount]] = {}

    def build(address: str) -> TokenHandle:
        if "conn" not in state:
            state["conn"] = connect_web3(settings)
        web3, account = state["conn"]
        return Web3Token(address, web3=web3, account=account, receipt_timeout=settings.receipt_timeout)

    return build


def dry_run_token_factory() -> TokenFactory:
    return DryRunToken
