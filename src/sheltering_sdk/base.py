"""
Shared plumbing for the challenge and transfer lifecycle actions.

Every protocol call goes through a ContractBinding, so each operation
works against whatever address the registry reports at that moment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Union

from web3 import Web3

from .errors import InvalidArgumentError, NetworkError
from .models import LogicalContract, Submission
from .submitter import TransactionIntent
from .time_window import BlockBound, BlockRange, earliest_block, meaningful_range
from .utils.logging import get_logger
from .validation import validate_address

if TYPE_CHECKING:
    from web3 import AsyncWeb3

    from .binding import ContractBindings
    from .submitter import TransactionSubmitter

__all__ = ["ProtocolActions"]

_logger = get_logger(__name__)


def to_hex_id(value: Union[bytes, str]) -> str:
    """Normalize a bytes32 value returned by the ledger to 0x-prefixed hex."""
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return Web3.to_hex(value)


class ProtocolActions:
    """Base class for lifecycle actions bound to registry-resolved contracts.

    Args:
        w3: Async Web3 instance
        bindings: Registry-backed contract bindings
        submitter: Transaction submitter (also used for reads)
        min_block_time: Lower bound on block time for history windows
    """

    def __init__(
        self,
        w3: "AsyncWeb3",
        bindings: "ContractBindings",
        submitter: "TransactionSubmitter",
        min_block_time: int,
    ) -> None:
        self._w3 = w3
        self._bindings = bindings
        self._submitter = submitter
        self.min_block_time = min_block_time

    @property
    def sender(self) -> str:
        """Configured default sender.

        Raises:
            InvalidArgumentError: If no default sender is configured
        """
        sender = self._submitter.default_sender
        if not sender:
            raise InvalidArgumentError(sender, field="default_sender", reason="no default sender configured")
        return sender

    @staticmethod
    def _sender_override(sender: Optional[str]) -> Optional[str]:
        """Checksummed sender override, or None when the default applies."""
        if sender is None:
            return None
        return validate_address(sender, "sender")

    async def earliest_meaningful_block(self, duration_seconds: int) -> int:
        current = await self._w3.eth.block_number
        return earliest_block(current, duration_seconds, self.min_block_time)

    async def _range(
        self,
        duration_seconds: int,
        from_block: Optional[int],
        to_block: Optional[BlockBound],
    ) -> BlockRange:
        return await meaningful_range(self._w3, duration_seconds, self.min_block_time, from_block, to_block)

    async def _call(self, name: LogicalContract, method: str, *args: Any) -> Any:
        contract = await self._bindings.contract(name)
        return await self._submitter.call(contract, method, *args)

    async def _submit(
        self,
        name: LogicalContract,
        method: str,
        *args: Any,
        value: Optional[int] = None,
        sender: Optional[str] = None,
        gas: Optional[int] = None,
    ) -> Submission:
        contract = await self._bindings.contract(name)
        intent = TransactionIntent(contract=contract, method=method, args=args, value=value, sender=sender, gas=gas)
        return Submission.from_outcome(await self._submitter.submit(intent))

    async def _events(self, name: LogicalContract, event: str, block_range: BlockRange) -> List[Any]:
        contract = await self._bindings.contract(name)
        try:
            logs = await getattr(contract.events, event)().get_logs(
                from_block=block_range.from_block,
                to_block=block_range.to_block,
            )
        except Exception as e:
            raise NetworkError(f"{event} log query failed: {e}") from e
        _logger.debug(
            "Fetched events",
            extra={"event": event, "count": len(logs), "from_block": block_range.from_block},
        )
        return list(logs)
