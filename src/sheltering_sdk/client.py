"""Sheltering protocol client for Python.

This module provides the ShelteringClient class, the single entry point
for node operators (or a CLI layer) to drive the storage network's
challenge and sheltering-transfer protocols.

The client supports:
- Registry-resolved contract access through the head contract
- Challenge start / resolve / expire / status / history
- Sheltering transfer start / resolve / cancel / status / listing
- Signing with a local key, a node-managed account, or read-only mode
  that returns encoded payloads for offline signing

Example:
    >>> from sheltering_sdk import ClientConfig, Network, ShelteringClient, get_network_config
    >>> client = await ShelteringClient.create(
    ...     ClientConfig(network=get_network_config(Network.TESTNET)),
    ...     private_key="0x...",
    ... )
    >>> status = await client.challenges.status("0x" + "ab" * 32)
"""

from __future__ import annotations

from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3

from .binding import ContractBindings
from .challenges import ChallengeActions
from .config import ClientConfig
from .errors import InvalidArgumentError
from .registry import HeadRegistry
from .submitter import TransactionSubmitter
from .transfers import TransferActions
from .utils.logging import get_logger

__all__ = ["ShelteringClient"]

_logger = get_logger(__name__)


class ShelteringClient:
    """Wires registry, bindings, submitter and lifecycle actions from one config.

    Note: Use ``ShelteringClient.create()`` to verify the head contract
    before first use.

    Args:
        config: Client configuration
        private_key: Optional key for local signing; its address becomes the
            default sender unless the config sets one
        web3: Optional pre-built AsyncWeb3 (tests, custom providers)
    """

    def __init__(
        self,
        config: ClientConfig,
        private_key: Optional[str] = None,
        web3: Optional[AsyncWeb3] = None,
    ) -> None:
        self.config = config
        self.w3 = web3 or AsyncWeb3(
            AsyncHTTPProvider(
                config.network.rpc_url,
                request_kwargs={"timeout": config.timeout},
            )
        )

        self.account: Optional[LocalAccount] = None
        if private_key is not None:
            # Sanitize private key errors to prevent key leakage in stack traces
            try:
                self.account = Account.from_key(private_key)
            except Exception:
                raise InvalidArgumentError(
                    "<redacted>", field="private_key", reason="invalid private key format"
                ) from None
            self.w3.eth.default_account = self.account.address

        default_sender = config.default_sender or (self.account.address if self.account else None)
        self.submitter = TransactionSubmitter(
            self.w3,
            default_sender=default_sender,
            default_gas=config.default_gas,
            send_transactions=config.send_transactions,
            account=self.account,
        )
        self.registry = HeadRegistry(self.w3, config.network.head_address, self.submitter)
        self.bindings = ContractBindings(self.registry, self.w3, config.abi_for)
        self.challenges = ChallengeActions(
            self.w3,
            self.bindings,
            self.submitter,
            min_block_time=config.min_block_time,
            challenge_duration=config.challenge_duration,
        )
        self.transfers = TransferActions(
            self.w3,
            self.bindings,
            self.submitter,
            min_block_time=config.min_block_time,
            transfer_duration=config.transfer_duration,
        )

    @classmethod
    async def create(
        cls,
        config: ClientConfig,
        private_key: Optional[str] = None,
        web3: Optional[AsyncWeb3] = None,
    ) -> "ShelteringClient":
        """
        Factory method that builds a client and checks the head contract.

        Raises:
            ContractNotDeployedError: If the head contract has no context
            NetworkError: If the node cannot be reached
        """
        client = cls(config, private_key=private_key, web3=web3)
        context = await client.registry.context_address()
        _logger.info(
            "Connected to sheltering network",
            extra={"network": config.network.name.value, "context": context, "sender": client.address},
        )
        return client

    @property
    def address(self) -> Optional[str]:
        return self.submitter.default_sender

    @property
    def read_only(self) -> bool:
        return self.submitter.read_only
