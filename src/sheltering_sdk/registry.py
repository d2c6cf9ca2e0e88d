"""
Address resolution through the head contract.

The head contract points at the current context, the context points at
the catalogue and storage catalogue, and each catalogue exposes one
address getter per logical contract name. Nothing is memoized here: every
``resolve`` reads the chain, so a redeployed context or contract is picked
up on the next call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from web3 import Web3

from .abis import CATALOGUE_ABI, CONTEXT_ABI, HEAD_ABI, STORAGE_CATALOGUE_ABI
from .errors import ContractNotDeployedError
from .models import LogicalContract
from .utils.logging import get_logger

if TYPE_CHECKING:
    from web3 import AsyncWeb3

    from .submitter import TransactionSubmitter

__all__ = ["HeadRegistry"]

_logger = get_logger(__name__)

_CATALOGUE_ABIS = {
    "catalogue": CATALOGUE_ABI,
    "storageCatalogue": STORAGE_CATALOGUE_ABI,
}


def _is_zero(address: str) -> bool:
    return not address or int(address, 16) == 0


class HeadRegistry:
    """Resolves logical contract names to their current addresses.

    Args:
        w3: Async Web3 instance
        head_address: Address of the head contract
        caller: Submitter used for read-only calls (error mapping, sender)
    """

    def __init__(self, w3: "AsyncWeb3", head_address: str, caller: "TransactionSubmitter") -> None:
        self._w3 = w3
        self._caller = caller
        self.head_address = Web3.to_checksum_address(head_address)
        self._head = w3.eth.contract(address=self.head_address, abi=HEAD_ABI)

    async def context_address(self) -> str:
        """Current context address.

        Raises:
            ContractNotDeployedError: If the head contract has no context set
        """
        address = await self._caller.call(self._head, "context")
        if _is_zero(address):
            raise ContractNotDeployedError("context", "context address is not set in the head contract")
        return Web3.to_checksum_address(address)

    async def contracts_version(self) -> str:
        context = await self._context()
        return await self._caller.call(context, "versionTag")

    async def resolve(self, name: Union[LogicalContract, str]) -> str:
        """Resolve a logical name to the currently registered address.

        Args:
            name: Logical contract name (e.g. "challenges")

        Returns:
            Checksummed contract address

        Raises:
            ContractNotDeployedError: If the name is unknown or unregistered
        """
        try:
            logical = LogicalContract(name)
        except ValueError:
            raise ContractNotDeployedError(str(name), "requested contract does not exist") from None

        catalogue = await self._catalogue(logical.catalogue)
        address = await self._caller.call(catalogue, logical.value)
        if _is_zero(address):
            raise ContractNotDeployedError(logical.value, "no address registered")
        _logger.debug("Resolved contract address", extra={"contract": logical.value, "address": address})
        return Web3.to_checksum_address(address)

    async def _context(self) -> Any:
        return self._w3.eth.contract(address=await self.context_address(), abi=CONTEXT_ABI)

    async def _catalogue(self, getter: str) -> Any:
        context = await self._context()
        address = await self._caller.call(context, getter)
        if _is_zero(address):
            raise ContractNotDeployedError(getter, "not registered in the context")
        return self._w3.eth.contract(address=Web3.to_checksum_address(address), abi=_CATALOGUE_ABIS[getter])
