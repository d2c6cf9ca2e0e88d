"""
Lazily bound contract interfaces that follow registry updates.

A ContractBinding caches one (address, contract) pair for a logical name.
Every ``get_callable`` asks the registry for the current address and
rebuilds the contract object only when that address differs from the
cached one, so a long-running process follows redeployments without a
restart or an explicit invalidation signal.

Two concurrent ``get_callable`` calls may both detect drift and rebind;
rebinding only replaces a local reference, so the race is harmless.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from .models import LogicalContract
from .utils.logging import get_logger

if TYPE_CHECKING:
    from web3 import AsyncWeb3

    from .registry import HeadRegistry

__all__ = ["ContractBinding", "ContractBindings"]

_logger = get_logger(__name__)


class ContractBinding:
    """Callable interface for one logical contract, rebound on address drift."""

    def __init__(
        self,
        name: LogicalContract,
        registry: "HeadRegistry",
        w3: "AsyncWeb3",
        abi: List[Dict[str, Any]],
    ) -> None:
        self.name = LogicalContract(name)
        self._registry = registry
        self._w3 = w3
        self._abi = abi
        self._address: Optional[str] = None
        self._contract: Any = None

    @property
    def cached_address(self) -> Optional[str]:
        return self._address

    async def get_address(self) -> str:
        """Current registry address for this binding's name."""
        return await self._registry.resolve(self.name)

    async def get_callable(self) -> Any:
        """Contract object bound to the current registry address.

        Raises:
            ContractNotDeployedError: Propagated from the registry
        """
        address = await self.get_address()
        if self._contract is None or address != self._address:
            if self._address is not None:
                _logger.info(
                    "Contract address changed, rebinding",
                    extra={"contract": self.name.value, "old": self._address, "new": address},
                )
            self._contract = self._w3.eth.contract(address=address, abi=self._abi)
            self._address = address
        return self._contract


class ContractBindings:
    """One ContractBinding per logical name, created on first use.

    Args:
        registry: Head registry used by every binding
        w3: Async Web3 instance
        abi_for: Callable returning the ABI for a logical name
    """

    def __init__(
        self,
        registry: "HeadRegistry",
        w3: "AsyncWeb3",
        abi_for: Callable[[str], List[Dict[str, Any]]],
    ) -> None:
        self._registry = registry
        self._w3 = w3
        self._abi_for = abi_for
        self._bindings: Dict[LogicalContract, ContractBinding] = {}

    def __getitem__(self, name: Union[LogicalContract, str]) -> ContractBinding:
        logical = LogicalContract(name)
        binding = self._bindings.get(logical)
        if binding is None:
            binding = ContractBinding(logical, self._registry, self._w3, self._abi_for(logical.value))
            self._bindings[logical] = binding
        return binding

    async def contract(self, name: Union[LogicalContract, str]) -> Any:
        return await self[name].get_callable()
