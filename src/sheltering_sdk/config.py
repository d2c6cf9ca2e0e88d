from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

from .abis import DEFAULT_ABIS
from .constants import (
    DEFAULT_CHALLENGE_DURATION,
    DEFAULT_GAS,
    DEFAULT_HEAD_ADDRESS,
    DEFAULT_TRANSFER_DURATION,
    MIN_BLOCK_TIME,
    PROVIDER_TIMEOUT_SECONDS,
)
from .errors import InvalidArgumentError

__all__ = ["Network", "NetworkConfig", "NETWORKS", "get_network_config", "ClientConfig"]


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    LOCAL = "local"


@dataclass
class NetworkConfig:
    name: Network
    chain_id: int
    rpc_url: str
    head_address: str


NETWORKS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        name=Network.MAINNET,
        chain_id=16718,
        rpc_url="https://network.ambrosus.io",
        head_address=DEFAULT_HEAD_ADDRESS,
    ),
    Network.TESTNET: NetworkConfig(
        name=Network.TESTNET,
        chain_id=22040,
        rpc_url="https://network.ambrosus-test.io",
        head_address=DEFAULT_HEAD_ADDRESS,
    ),
    Network.LOCAL: NetworkConfig(
        name=Network.LOCAL,
        chain_id=1337,
        rpc_url="http://127.0.0.1:8545",
        head_address=DEFAULT_HEAD_ADDRESS,
    ),
}


def get_network_config(
    network: Network,
    rpc_url: Optional[str] = None,
    head_address: Optional[str] = None,
) -> NetworkConfig:
    cfg = NETWORKS[network]
    if rpc_url or head_address:
        return NetworkConfig(
            name=cfg.name,
            chain_id=cfg.chain_id,
            rpc_url=rpc_url or cfg.rpc_url,
            head_address=head_address or cfg.head_address,
        )
    return cfg


class ClientConfig(BaseModel):
    """
    Construction-time configuration for the sheltering client.

    The SDK never reads environment variables or files itself; the caller
    (usually a CLI layer) builds this object and passes it in.

    Attributes:
        network: Network preset (chain id, RPC URL, head contract address)
        default_sender: Address used as ``from`` for calls and submissions
        default_gas: Gas limit attached to submissions without overrides
        min_block_time: Lower bound on block production time in seconds
        challenge_duration: Challenge timeout used for history lookback
        transfer_duration: Transfer lifetime used for timeout and lookback
        send_transactions: When False, submissions return encoded call data
        timeout: HTTP provider timeout in seconds
        abis: Per-logical-name ABI overrides
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    network: NetworkConfig = Field(
        default_factory=lambda: NETWORKS[Network.MAINNET],
        description="Network preset",
    )
    default_sender: Optional[str] = Field(
        default=None,
        description="Default sender address",
    )
    default_gas: int = Field(
        default=DEFAULT_GAS,
        ge=21_000,
        description="Default gas limit for submissions",
    )
    min_block_time: int = Field(
        default=MIN_BLOCK_TIME,
        ge=1,
        description="Minimum block time in seconds",
    )
    challenge_duration: int = Field(
        default=DEFAULT_CHALLENGE_DURATION,
        ge=0,
        description="Challenge duration in seconds",
    )
    transfer_duration: int = Field(
        default=DEFAULT_TRANSFER_DURATION,
        ge=0,
        description="Transfer duration in seconds",
    )
    send_transactions: bool = Field(
        default=True,
        description="Broadcast submissions (False returns encoded payloads)",
    )
    timeout: int = Field(
        default=PROVIDER_TIMEOUT_SECONDS,
        ge=1,
        description="Provider request timeout in seconds",
    )
    abis: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict,
        description="ABI overrides keyed by logical contract name",
    )

    @field_validator("default_sender")
    @classmethod
    def _checksum_sender(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not Web3.is_address(value):
            raise ValueError("default_sender must be a valid account address")
        return Web3.to_checksum_address(value)

    def abi_for(self, contract_name: str) -> List[Dict[str, Any]]:
        """Return the ABI for a logical contract name, preferring overrides.

        Raises:
            InvalidArgumentError: If no ABI is known for the name
        """
        abi = self.abis.get(contract_name) or DEFAULT_ABIS.get(contract_name)
        if abi is None:
            raise InvalidArgumentError(contract_name, field="contract_name", reason="no ABI configured")
        return abi
