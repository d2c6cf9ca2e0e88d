from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from web3 import Web3

__all__ = [
    "LogicalContract",
    "Submission",
    "ChallengeStatus",
    "TransferStatus",
    "StartedChallenge",
    "StartedTransfer",
    "ChallengeListing",
    "TransferListing",
]


class LogicalContract(str, Enum):
    """Logical contract names registered in the head contract's catalogues.

    Each member knows which catalogue holds its address, so resolution is a
    lookup over this closed set rather than a per-contract subclass.
    """

    # catalogue
    KYC_WHITELIST = "kycWhitelist"
    ROLES = "roles"
    FEES = "fees"
    TIME = "time"
    CHALLENGES = "challenges"
    PAYOUTS = "payouts"
    SHELTERING_TRANSFERS = "shelteringTransfers"
    SHELTERING = "sheltering"
    UPLOADS = "uploads"
    CONFIG = "config"
    VALIDATOR_PROXY = "validatorProxy"
    # storage catalogue
    APOLLO_DEPOSIT_STORE = "apolloDepositStore"
    ATLAS_STAKE_STORE = "atlasStakeStore"
    BUNDLE_STORE = "bundleStore"
    CHALLENGES_STORE = "challengesStore"
    KYC_WHITELIST_STORE = "kycWhitelistStore"
    PAYOUTS_STORE = "payoutsStore"
    ROLES_STORE = "rolesStore"
    SHELTERING_TRANSFERS_STORE = "shelteringTransfersStore"
    CHALLENGES_EVENT_EMITTER = "challengesEventEmitter"
    TRANSFERS_EVENT_EMITTER = "transfersEventEmitter"
    REWARDS_EVENT_EMITTER = "rewardsEventEmitter"
    ROLES_EVENT_EMITTER = "rolesEventEmitter"

    @property
    def catalogue(self) -> str:
        """Name of the context getter for the catalogue holding this contract."""
        if self.value.endswith("Store") or self.value.endswith("EventEmitter"):
            return "storageCatalogue"
        return "catalogue"


@dataclass(frozen=True)
class Submission:
    """Outcome of one state-changing call.

    Exactly one of ``receipt`` (broadcast) or ``payload`` (read-only mode,
    ABI-encoded call data for an external signer) is set.
    """

    receipt: Optional[Mapping[str, Any]] = None
    payload: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Union[Mapping[str, Any], str]) -> "Submission":
        if isinstance(outcome, str):
            return cls(payload=outcome)
        return cls(receipt=outcome)

    @property
    def is_broadcast(self) -> bool:
        return self.receipt is not None

    @property
    def transaction_hash(self) -> Optional[str]:
        if self.receipt is None:
            return None
        tx_hash = self.receipt["transactionHash"]
        return tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash)

    @property
    def block_number(self) -> Optional[int]:
        if self.receipt is None:
            return None
        return self.receipt["blockNumber"]


@dataclass(frozen=True)
class ChallengeStatus:
    """Point-in-time view of a challenge, from the caller's perspective.

    When ``is_in_progress`` is False the challenge does not exist or is
    already closed; ``can_resolve`` and ``is_timed_out`` are still the
    ledger's answers but carry no meaning in that case.
    """

    challenge_id: str
    is_in_progress: bool
    can_resolve: bool
    is_timed_out: bool


@dataclass(frozen=True)
class TransferStatus:
    """Point-in-time view of a sheltering transfer.

    Same caveat as ChallengeStatus: only meaningful while in progress.
    """

    transfer_id: str
    is_in_progress: bool
    can_resolve: bool
    is_timed_out: bool


@dataclass(frozen=True)
class StartedChallenge:
    challenge_id: str
    submission: Submission

    @property
    def transaction_hash(self) -> Optional[str]:
        return self.submission.transaction_hash

    @property
    def block_number(self) -> Optional[int]:
        return self.submission.block_number


@dataclass(frozen=True)
class StartedTransfer:
    transfer_id: str
    submission: Submission

    @property
    def transaction_hash(self) -> Optional[str]:
        return self.submission.transaction_hash


@dataclass(frozen=True)
class ChallengeListing:
    """Challenge found in event history.

    Attributes:
        challenge_id: Challenge identifier (bytes32 hex)
        shelterer_id: Challenged shelterer address
        bundle_id: Bundle identifier (bytes32 hex)
        block_number: Block of the ChallengeCreated event
        count: Number of challenges created in that event
    """

    challenge_id: str
    shelterer_id: str
    bundle_id: str
    block_number: int
    count: int = 1


@dataclass(frozen=True)
class TransferListing:
    transfer_id: str
    donor_id: str
    bundle_id: str
    block_number: int
