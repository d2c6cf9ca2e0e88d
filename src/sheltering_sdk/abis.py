"""
Minimal ABI descriptors for the contracts the SDK talks to.

Only the functions and events the SDK calls are listed. Full build
artifacts can be supplied instead through ``ClientConfig.abis``.
"""

from __future__ import annotations

from typing import Any, Dict, List

__all__ = [
    "HEAD_ABI",
    "CONTEXT_ABI",
    "CATALOGUE_ABI",
    "STORAGE_CATALOGUE_ABI",
    "CHALLENGES_ABI",
    "SHELTERING_TRANSFERS_ABI",
    "FEES_ABI",
    "SHELTERING_ABI",
    "ATLAS_STAKE_STORE_ABI",
    "CHALLENGES_EVENT_EMITTER_ABI",
    "TRANSFERS_EVENT_EMITTER_ABI",
    "DEFAULT_ABIS",
]

Abi = List[Dict[str, Any]]


def _view(name: str, inputs: List[tuple], outputs: List[tuple]) -> Dict[str, Any]:
    return {
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "name": name,
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": "view",
        "type": "function",
    }


def _write(name: str, inputs: List[tuple], payable: bool = False) -> Dict[str, Any]:
    return {
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "name": name,
        "outputs": [],
        "stateMutability": "payable" if payable else "nonpayable",
        "type": "function",
    }


def _event(name: str, inputs: List[tuple]) -> Dict[str, Any]:
    return {
        "anonymous": False,
        "inputs": [{"indexed": False, "name": n, "type": t} for n, t in inputs],
        "name": name,
        "type": "event",
    }


CATALOGUE_CONTRACTS = (
    "kycWhitelist",
    "roles",
    "fees",
    "time",
    "challenges",
    "payouts",
    "shelteringTransfers",
    "sheltering",
    "uploads",
    "config",
    "validatorProxy",
)

STORAGE_CATALOGUE_CONTRACTS = (
    "apolloDepositStore",
    "atlasStakeStore",
    "bundleStore",
    "challengesStore",
    "kycWhitelistStore",
    "payoutsStore",
    "rolesStore",
    "shelteringTransfersStore",
    "challengesEventEmitter",
    "transfersEventEmitter",
    "rewardsEventEmitter",
    "rolesEventEmitter",
)

HEAD_ABI: Abi = [
    _view("context", [], [("", "address")]),
    _view("owner", [], [("", "address")]),
]

CONTEXT_ABI: Abi = [
    _view("catalogue", [], [("", "address")]),
    _view("storageCatalogue", [], [("", "address")]),
    _view("versionTag", [], [("", "string")]),
]

CATALOGUE_ABI: Abi = [_view(name, [], [("", "address")]) for name in CATALOGUE_CONTRACTS]

STORAGE_CATALOGUE_ABI: Abi = [_view(name, [], [("", "address")]) for name in STORAGE_CATALOGUE_CONTRACTS]

CHALLENGES_ABI: Abi = [
    _write("start", [("sheltererId", "address"), ("bundleId", "bytes32")], payable=True),
    _write("resolve", [("challengeId", "bytes32")]),
    _write("markAsExpired", [("challengeId", "bytes32")]),
    _view("getChallengeId", [("sheltererId", "address"), ("bundleId", "bytes32")], [("", "bytes32")]),
    _view("challengeIsInProgress", [("challengeId", "bytes32")], [("", "bool")]),
    _view("canResolve", [("resolverId", "address"), ("challengeId", "bytes32")], [("", "bool")]),
    _view("challengeIsTimedOut", [("challengeId", "bytes32")], [("", "bool")]),
]

SHELTERING_TRANSFERS_ABI: Abi = [
    _write("start", [("bundleId", "bytes32")]),
    _write("resolve", [("transferId", "bytes32")]),
    _write("cancel", [("transferId", "bytes32")]),
    _view("getTransferId", [("sheltererId", "address"), ("bundleId", "bytes32")], [("", "bytes32")]),
    _view("getDonor", [("transferId", "bytes32")], [("", "address")]),
    _view("getBundle", [("transferId", "bytes32")], [("", "bytes32")]),
    _view("isInProgress", [("transferId", "bytes32")], [("", "bool")]),
    _view("canResolve", [("resolverId", "address"), ("transferId", "bytes32")], [("", "bool")]),
    _view("getCreationTime", [("transferId", "bytes32")], [("", "uint64")]),
    _view("getDesignatedShelterer", [("transferId", "bytes32")], [("", "address")]),
]

FEES_ABI: Abi = [
    _view("getFeeForChallenge", [("storagePeriods", "uint64")], [("", "uint256")]),
    _view("getFeeForUpload", [("storagePeriods", "uint64")], [("", "uint256")]),
    _view(
        "getPenalty",
        [("nominalStake", "uint256"), ("penaltiesCount", "uint256"), ("lastPenaltyTime", "uint64")],
        [("penalty", "uint256"), ("newPenaltiesCount", "uint256")],
    ),
]

SHELTERING_ABI: Abi = [
    _view("isSheltering", [("bundleId", "bytes32"), ("shelterer", "address")], [("", "bool")]),
    _view("getBundleStoragePeriodsCount", [("bundleId", "bytes32")], [("", "uint64")]),
]

ATLAS_STAKE_STORE_ABI: Abi = [
    _view("getBasicStake", [("node", "address")], [("", "uint256")]),
    _view(
        "getPenaltiesHistory",
        [("node", "address")],
        [("penaltiesCount", "uint256"), ("lastPenaltyTime", "uint64")],
    ),
]

CHALLENGES_EVENT_EMITTER_ABI: Abi = [
    _event(
        "ChallengeCreated",
        [("sheltererId", "address"), ("bundleId", "bytes32"), ("challengeId", "bytes32"), ("count", "uint256")],
    ),
    _event(
        "ChallengeResolved",
        [("sheltererId", "address"), ("bundleId", "bytes32"), ("challengeId", "bytes32"), ("resolverId", "address")],
    ),
    _event(
        "ChallengeTimeout",
        [("sheltererId", "address"), ("bundleId", "bytes32"), ("challengeId", "bytes32"), ("penalty", "uint256")],
    ),
]

TRANSFERS_EVENT_EMITTER_ABI: Abi = [
    _event("TransferStarted", [("transferId", "bytes32"), ("donorId", "address"), ("bundleId", "bytes32")]),
    _event("TransferResolved", [("donorId", "address"), ("recipientId", "address"), ("bundleId", "bytes32")]),
    _event("TransferCancelled", [("transferId", "bytes32"), ("donorId", "address"), ("bundleId", "bytes32")]),
]

# Keyed by logical contract name as registered in the catalogues.
DEFAULT_ABIS: Dict[str, Abi] = {
    "challenges": CHALLENGES_ABI,
    "shelteringTransfers": SHELTERING_TRANSFERS_ABI,
    "fees": FEES_ABI,
    "sheltering": SHELTERING_ABI,
    "atlasStakeStore": ATLAS_STAKE_STORE_ABI,
    "challengesEventEmitter": CHALLENGES_EVENT_EMITTER_ABI,
    "transfersEventEmitter": TRANSFERS_EVENT_EMITTER_ABI,
}
