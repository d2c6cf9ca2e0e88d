"""
Sheltering transfer lifecycle: start, resolve, cancel, status and listing.

A transfer hands custody of a bundle from its current shelterer (the
donor) to another Atlas. It mirrors the challenge state machine, except
that the donor may cancel it before resolution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from web3 import Web3

from .base import ProtocolActions, to_hex_id
from .constants import DEFAULT_TRANSFER_DURATION
from .models import LogicalContract, StartedTransfer, Submission, TransferListing, TransferStatus
from .time_window import BlockBound
from .utils.logging import get_logger
from .validation import validate_address, validate_id

if TYPE_CHECKING:
    from web3 import AsyncWeb3

    from .binding import ContractBindings
    from .submitter import TransactionSubmitter

__all__ = ["TransferActions"]

_logger = get_logger(__name__)

TRANSFERS = LogicalContract.SHELTERING_TRANSFERS
EMITTER = LogicalContract.TRANSFERS_EVENT_EMITTER


class TransferActions(ProtocolActions):
    """Sheltering transfer state machine operations."""

    def __init__(
        self,
        w3: "AsyncWeb3",
        bindings: "ContractBindings",
        submitter: "TransactionSubmitter",
        min_block_time: int,
        transfer_duration: int = DEFAULT_TRANSFER_DURATION,
    ) -> None:
        super().__init__(w3, bindings, submitter, min_block_time)
        self.transfer_duration = transfer_duration

    async def start(self, bundle_id: str, *, sender: Optional[str] = None, gas: Optional[int] = None) -> StartedTransfer:
        """Start transferring a bundle the sender currently shelters.

        Returns:
            Transfer id derived by the ledger from (donor, bundle) and the
            submission outcome
        """
        bundle = validate_id(bundle_id, "bundle_id")
        sender = self._sender_override(sender)
        donor = sender or self.sender
        transfer_id = await self.transfer_id(donor, bundle)
        submission = await self._submit(TRANSFERS, "start", bundle, sender=sender, gas=gas)
        _logger.info("Transfer started", extra={"transfer_id": transfer_id, "tx_hash": submission.transaction_hash})
        return StartedTransfer(transfer_id=transfer_id, submission=submission)

    async def resolve(self, transfer_id: str, *, sender: Optional[str] = None, gas: Optional[int] = None) -> Submission:
        validate_id(transfer_id, "transfer_id")
        sender = self._sender_override(sender)
        return await self._submit(TRANSFERS, "resolve", transfer_id, sender=sender, gas=gas)

    async def cancel(self, transfer_id: str, *, sender: Optional[str] = None, gas: Optional[int] = None) -> Submission:
        """Withdraw a transfer. Only its donor may do so; the ledger enforces it."""
        validate_id(transfer_id, "transfer_id")
        sender = self._sender_override(sender)
        return await self._submit(TRANSFERS, "cancel", transfer_id, sender=sender, gas=gas)

    async def status(self, transfer_id: str) -> TransferStatus:
        """Current status of a transfer from the default sender's perspective.

        The ledger has no timeout predicate for transfers, so ``is_timed_out``
        compares the creation time plus ``transfer_duration`` with the latest
        block timestamp. As with challenges, ``can_resolve`` and
        ``is_timed_out`` mean nothing when ``is_in_progress`` is False.
        """
        validate_id(transfer_id, "transfer_id")
        sender = self.sender
        is_in_progress = await self._call(TRANSFERS, "isInProgress", transfer_id)
        can_resolve = await self._call(TRANSFERS, "canResolve", sender, transfer_id)
        creation_time = int(await self._call(TRANSFERS, "getCreationTime", transfer_id))
        latest = await self._w3.eth.get_block("latest")
        is_timed_out = creation_time > 0 and creation_time + self.transfer_duration <= latest["timestamp"]
        return TransferStatus(
            transfer_id=transfer_id,
            is_in_progress=bool(is_in_progress),
            can_resolve=bool(can_resolve),
            is_timed_out=is_timed_out,
        )

    async def transfer_id(self, donor_id: str, bundle_id: str) -> str:
        donor = validate_address(donor_id, "donor_id")
        bundle = validate_id(bundle_id, "bundle_id")
        return to_hex_id(await self._call(TRANSFERS, "getTransferId", donor, bundle))

    async def donor(self, transfer_id: str) -> str:
        validate_id(transfer_id, "transfer_id")
        return Web3.to_checksum_address(await self._call(TRANSFERS, "getDonor", transfer_id))

    async def bundle(self, transfer_id: str) -> str:
        validate_id(transfer_id, "transfer_id")
        return to_hex_id(await self._call(TRANSFERS, "getBundle", transfer_id))

    async def designated_shelterer(self, transfer_id: str) -> str:
        """Atlas the ledger picked to take over the bundle."""
        validate_id(transfer_id, "transfer_id")
        return Web3.to_checksum_address(await self._call(TRANSFERS, "getDesignatedShelterer", transfer_id))

    async def list(
        self,
        from_block: Optional[int] = None,
        to_block: Optional[BlockBound] = None,
        pending_only: bool = False,
    ) -> List[TransferListing]:
        """Transfers started in a block range as (transfer id, donor, bundle).

        Started transfers are correlated by id, keeping the most recent
        start. With ``pending_only`` transfers later resolved (matched on
        donor and bundle) or cancelled are dropped.
        """
        block_range = await self._range(self.transfer_duration, from_block, to_block)
        tagged = [("started", e) for e in await self._events(EMITTER, "TransferStarted", block_range)]
        if pending_only:
            tagged += [("resolved", e) for e in await self._events(EMITTER, "TransferResolved", block_range)]
            tagged += [("cancelled", e) for e in await self._events(EMITTER, "TransferCancelled", block_range)]

        listings: Dict[Tuple[str, str], TransferListing] = {}
        for kind, event in sorted(tagged, key=lambda item: (item[1]["blockNumber"], item[1]["logIndex"])):
            args = event["args"]
            key = (Web3.to_checksum_address(args["donorId"]), to_hex_id(args["bundleId"]))
            if kind == "started":
                listings.pop(key, None)
                listings[key] = TransferListing(
                    transfer_id=to_hex_id(args["transferId"]),
                    donor_id=key[0],
                    bundle_id=key[1],
                    block_number=event["blockNumber"],
                )
            else:
                listings.pop(key, None)
        return list(listings.values())
