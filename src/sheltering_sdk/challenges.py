"""
Challenge lifecycle: start, resolve, expire, status and history.

A challenge asks a shelterer to prove it still holds a bundle. It moves
from not-existing to in-progress when started, and leaves in-progress
when resolved by a designated shelterer or marked as expired after its
timeout. Eligibility for resolve and expire is decided by the ledger
alone; this module only validates identifiers before submitting.

Example:
    >>> started = await client.challenges.start(shelterer, bundle_id)
    >>> status = await client.challenges.status(started.challenge_id)
    >>> if status.is_in_progress and status.is_timed_out:
    ...     await client.challenges.mark_as_expired(started.challenge_id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from web3 import Web3

from .base import ProtocolActions, to_hex_id
from .constants import DEFAULT_CHALLENGE_DURATION
from .errors import IneligibleOperationError, InsufficientFundsError
from .models import ChallengeListing, ChallengeStatus, LogicalContract, StartedChallenge, Submission
from .time_window import BlockBound
from .utils.logging import get_logger
from .validation import validate_address, validate_amount, validate_id

if TYPE_CHECKING:
    from web3 import AsyncWeb3

    from .binding import ContractBindings
    from .submitter import TransactionSubmitter

__all__ = ["ChallengeActions"]

_logger = get_logger(__name__)

CHALLENGES = LogicalContract.CHALLENGES
EMITTER = LogicalContract.CHALLENGES_EVENT_EMITTER


class ChallengeActions(ProtocolActions):
    """Challenge state machine operations."""

    def __init__(
        self,
        w3: "AsyncWeb3",
        bindings: "ContractBindings",
        submitter: "TransactionSubmitter",
        min_block_time: int,
        challenge_duration: int = DEFAULT_CHALLENGE_DURATION,
    ) -> None:
        super().__init__(w3, bindings, submitter, min_block_time)
        self.challenge_duration = challenge_duration

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------
    async def start(
        self,
        shelterer_id: str,
        bundle_id: str,
        fee: Optional[int] = None,
        *,
        sender: Optional[str] = None,
        gas: Optional[int] = None,
    ) -> StartedChallenge:
        """Start a challenge against a shelterer of a bundle.

        Args:
            shelterer_id: Address of the challenged shelterer
            bundle_id: Bundle identifier (0x + 64 hex)
            fee: Challenge fee in wei; looked up from the ledger when omitted
            sender: Sender override (replaces default sender and gas)
            gas: Gas override (replaces default sender and gas)

        Returns:
            Challenge id derived by the ledger and the submission outcome

        Raises:
            InvalidArgumentError: If an identifier is malformed (before any network call)
            IneligibleOperationError: If the shelterer does not hold the bundle
                or the same challenge is already in progress
            InsufficientFundsError: If the looked-up fee exceeds the sender balance
        """
        shelterer = validate_address(shelterer_id, "shelterer_id")
        bundle = validate_id(bundle_id, "bundle_id")
        sender = self._sender_override(sender)
        if fee is not None:
            validate_amount(fee, "fee")

        if not await self._call(LogicalContract.SHELTERING, "isSheltering", bundle, shelterer):
            raise IneligibleOperationError(f"{shelterer} is not sheltering {bundle}", code="NOT_SHELTERING")
        challenge_id = await self.challenge_id(shelterer, bundle)
        if await self._call(CHALLENGES, "challengeIsInProgress", challenge_id):
            raise IneligibleOperationError(
                f"Challenge {challenge_id} is already in progress", code="CHALLENGE_IN_PROGRESS"
            )
        if fee is None:
            fee = await self.fee_for_challenge(bundle)
            await self._ensure_balance(fee, sender)

        submission = await self._submit(CHALLENGES, "start", shelterer, bundle, value=fee, sender=sender, gas=gas)
        _logger.info(
            "Challenge started",
            extra={"challenge_id": challenge_id, "tx_hash": submission.transaction_hash},
        )
        return StartedChallenge(challenge_id=challenge_id, submission=submission)

    async def resolve(self, challenge_id: str, *, sender: Optional[str] = None, gas: Optional[int] = None) -> Submission:
        """Resolve a challenge. The ledger decides whether the caller may."""
        validate_id(challenge_id, "challenge_id")
        sender = self._sender_override(sender)
        return await self._submit(CHALLENGES, "resolve", challenge_id, sender=sender, gas=gas)

    async def mark_as_expired(
        self, challenge_id: str, *, sender: Optional[str] = None, gas: Optional[int] = None
    ) -> Submission:
        """Mark a timed-out challenge as expired.

        Meant to follow a ``status`` reporting ``is_timed_out``; not enforced here.
        """
        validate_id(challenge_id, "challenge_id")
        sender = self._sender_override(sender)
        return await self._submit(CHALLENGES, "markAsExpired", challenge_id, sender=sender, gas=gas)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def status(self, challenge_id: str) -> ChallengeStatus:
        """Current status of a challenge from the default sender's perspective.

        All three predicates are always queried. When ``is_in_progress`` is
        False the other two fields are returned as the ledger reports them
        but are not meaningful.
        """
        validate_id(challenge_id, "challenge_id")
        sender = self.sender
        is_in_progress = await self._call(CHALLENGES, "challengeIsInProgress", challenge_id)
        can_resolve = await self._call(CHALLENGES, "canResolve", sender, challenge_id)
        is_timed_out = await self._call(CHALLENGES, "challengeIsTimedOut", challenge_id)
        return ChallengeStatus(
            challenge_id=challenge_id,
            is_in_progress=bool(is_in_progress),
            can_resolve=bool(can_resolve),
            is_timed_out=bool(is_timed_out),
        )

    async def challenge_id(self, shelterer_id: str, bundle_id: str) -> str:
        shelterer = validate_address(shelterer_id, "shelterer_id")
        bundle = validate_id(bundle_id, "bundle_id")
        return to_hex_id(await self._call(CHALLENGES, "getChallengeId", shelterer, bundle))

    async def fee_for_challenge(self, bundle_id: str) -> int:
        bundle = validate_id(bundle_id, "bundle_id")
        storage_periods = await self._call(LogicalContract.SHELTERING, "getBundleStoragePeriodsCount", bundle)
        return await self._call(LogicalContract.FEES, "getFeeForChallenge", storage_periods)

    async def next_penalty(self, shelterer_id: str) -> int:
        """Penalty the shelterer would receive for its next failed challenge.

        Raises:
            IneligibleOperationError: If the node is not onboarded as an Atlas
        """
        node = validate_address(shelterer_id, "shelterer_id")
        basic_stake = await self._call(LogicalContract.ATLAS_STAKE_STORE, "getBasicStake", node)
        if int(basic_stake) == 0:
            raise IneligibleOperationError(f"Node {node} is not onboarded as an Atlas", code="NOT_ONBOARDED")
        penalties_count, last_penalty_time = await self._call(
            LogicalContract.ATLAS_STAKE_STORE, "getPenaltiesHistory", node
        )
        penalty, _ = await self._call(
            LogicalContract.FEES, "getPenalty", basic_stake, penalties_count, last_penalty_time
        )
        return int(penalty)

    async def list(
        self,
        from_block: Optional[int] = None,
        to_block: Optional[BlockBound] = None,
        pending_only: bool = True,
    ) -> List[ChallengeListing]:
        """Challenges created in a block range, oldest first.

        Without an explicit ``from_block`` the scan starts at the earliest
        block a still-open challenge could have been created in.

        A created challenge holds ``count`` open slots; each ChallengeResolved
        closes one and ChallengeTimeout closes the rest.
        """
        block_range = await self._range(self.challenge_duration, from_block, to_block)
        created = await self._events(EMITTER, "ChallengeCreated", block_range)
        if not pending_only:
            return [self._listing(event) for event in _ordered(created)]

        resolved = await self._events(EMITTER, "ChallengeResolved", block_range)
        timed_out = await self._events(EMITTER, "ChallengeTimeout", block_range)
        tagged = (
            [("created", e) for e in created]
            + [("resolved", e) for e in resolved]
            + [("timeout", e) for e in timed_out]
        )
        open_challenges: Dict[str, ChallengeListing] = {}
        for kind, event in sorted(tagged, key=lambda item: _position(item[1])):
            challenge_id = to_hex_id(event["args"]["challengeId"])
            if kind == "created":
                open_challenges[challenge_id] = self._listing(event)
            elif challenge_id not in open_challenges:
                continue
            elif kind == "timeout" or open_challenges[challenge_id].count <= 1:
                del open_challenges[challenge_id]
            else:
                current = open_challenges[challenge_id]
                open_challenges[challenge_id] = ChallengeListing(
                    challenge_id=current.challenge_id,
                    shelterer_id=current.shelterer_id,
                    bundle_id=current.bundle_id,
                    block_number=current.block_number,
                    count=current.count - 1,
                )
        return list(open_challenges.values())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _ensure_balance(self, fee: int, sender: Optional[str]) -> None:
        balance = await self._w3.eth.get_balance(sender or Web3.to_checksum_address(self.sender))
        if balance <= fee:
            raise InsufficientFundsError(fee, balance)

    @staticmethod
    def _listing(event: Any) -> ChallengeListing:
        args = event["args"]
        return ChallengeListing(
            challenge_id=to_hex_id(args["challengeId"]),
            shelterer_id=Web3.to_checksum_address(args["sheltererId"]),
            bundle_id=to_hex_id(args["bundleId"]),
            block_number=event["blockNumber"],
            count=int(args.get("count", 1)),
        )


def _position(event: Any) -> tuple:
    return event["blockNumber"], event["logIndex"]


def _ordered(events: List[Any]) -> List[Any]:
    return sorted(events, key=_position)
