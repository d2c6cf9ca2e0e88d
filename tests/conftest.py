"""
Shared fixtures: an in-memory ledger behind stub Web3/contract objects.

The stubs only implement what the SDK touches: ``eth.contract``,
``functions.<name>(*args).call/transact/build_transaction``,
``events.<name>().get_logs`` and ``encode_abi``.
"""

from typing import Any, Dict, List

import pytest

from sheltering_sdk.binding import ContractBindings
from sheltering_sdk.challenges import ChallengeActions
from sheltering_sdk.config import ClientConfig
from sheltering_sdk.registry import HeadRegistry
from sheltering_sdk.submitter import TransactionSubmitter
from sheltering_sdk.transfers import TransferActions


# =============================================================================
# Test Constants
# =============================================================================

HEAD = "0x0000000000000000000000000000000000000f10"
CONTEXT = "0x" + "c0" * 20
CATALOGUE = "0x" + "ca" * 20
STORAGE_CATALOGUE = "0x" + "5c" * 20
CHALLENGES = "0x" + "c1" * 20
CHALLENGES_V2 = "0x" + "c2" * 20
TRANSFERS = "0x" + "7a" * 20
FEES = "0x" + "fe" * 20
SHELTERING = "0x" + "5e" * 20
ATLAS_STAKE_STORE = "0x" + "a5" * 20
CHALLENGES_EMITTER = "0x" + "ce" * 20
TRANSFERS_EMITTER = "0x" + "7e" * 20
ZERO = "0x" + "00" * 20

SENDER = "0x1234567890123456789012345678901234567890"
SHELTERER = "0xabcdefABCDEFabcdefABCDEFabcdefABCDEFabcd".lower()
BUNDLE_ID = "0x" + "11" * 32
CHALLENGE_ID = "0x" + "aa" * 32
TRANSFER_ID = "0x" + "bb" * 32
TX_HASH = b"\x12" * 32


def log(args: Dict[str, Any], block: int, index: int = 0) -> Dict[str, Any]:
    return {"args": args, "blockNumber": block, "logIndex": index}


# =============================================================================
# Stubs
# =============================================================================


class StubFunction:
    def __init__(self, ledger: "StubLedger", address: str, name: str, args: tuple):
        self._ledger = ledger
        self._address = address
        self.fn_name = name
        self.args = args

    async def call(self, params=None):
        self._ledger.calls.append((self._address, self.fn_name, self.args, params))
        result = self._ledger.state[self._address][self.fn_name]
        if isinstance(result, Exception):
            raise result
        return result(*self.args) if callable(result) else result

    async def transact(self, params):
        self._ledger.sent.append((self._address, self.fn_name, self.args, params))
        if self._ledger.send_error is not None:
            raise self._ledger.send_error
        return TX_HASH

    async def build_transaction(self, params):
        self._ledger.built.append((self._address, self.fn_name, self.args, params))
        return {**params, "to": self._address, "data": "0x", "chainId": 16718}


class StubFunctions:
    def __init__(self, ledger: "StubLedger", address: str):
        self._ledger = ledger
        self._address = address

    def __getattr__(self, name: str):
        return lambda *args: StubFunction(self._ledger, self._address, name, args)


class StubEvent:
    def __init__(self, ledger: "StubLedger", address: str, name: str):
        self._ledger = ledger
        self._address = address
        self._name = name

    async def get_logs(self, from_block=None, to_block=None):
        self._ledger.log_queries.append((self._name, from_block, to_block))
        return list(self._ledger.events.get(self._address, {}).get(self._name, []))


class StubEvents:
    def __init__(self, ledger: "StubLedger", address: str):
        self._ledger = ledger
        self._address = address

    def __getattr__(self, name: str):
        return lambda: StubEvent(self._ledger, self._address, name)


class StubContract:
    def __init__(self, ledger: "StubLedger", address: str, abi: List[dict]):
        self.address = address
        self.abi = abi
        self.functions = StubFunctions(ledger, address.lower())
        self.events = StubEvents(ledger, address.lower())
        self._ledger = ledger

    def encode_abi(self, abi_element_identifier, args=None):
        self._ledger.encoded.append((self.address.lower(), abi_element_identifier, args))
        return "0x" + abi_element_identifier.encode().hex()


class StubEth:
    def __init__(self, ledger: "StubLedger"):
        self._ledger = ledger
        self.default_account = None
        self.contracts_built: List[StubContract] = []

    def contract(self, address=None, abi=None):
        built = StubContract(self._ledger, address, abi)
        self.contracts_built.append(built)
        return built

    @property
    def block_number(self):
        async def _block_number():
            return self._ledger.block_number

        return _block_number()

    async def get_block(self, _identifier):
        return {"number": self._ledger.block_number, "timestamp": self._ledger.timestamp}

    async def get_balance(self, _address):
        return self._ledger.balance

    async def get_transaction_count(self, _address, _block="latest"):
        return 7

    async def send_raw_transaction(self, raw):
        self._ledger.raw_sent.append(raw)
        return TX_HASH

    async def wait_for_transaction_receipt(self, tx_hash):
        return {"status": self._ledger.receipt_status, "transactionHash": tx_hash, "blockNumber": 42}


class StubWeb3:
    def __init__(self, ledger: "StubLedger"):
        self.eth = StubEth(ledger)


class StubLedger:
    """Contract state keyed by lowercase address, plus recorded traffic."""

    def __init__(self):
        self.state: Dict[str, Dict[str, Any]] = {}
        self.events: Dict[str, Dict[str, List[dict]]] = {}
        self.calls: list = []
        self.sent: list = []
        self.built: list = []
        self.raw_sent: list = []
        self.encoded: list = []
        self.log_queries: list = []
        self.block_number = 1000
        self.timestamp = 1_700_000_000
        self.balance = 10**21
        self.receipt_status = 1
        self.send_error = None

    def set(self, address: str, **methods: Any) -> None:
        self.state.setdefault(address.lower(), {}).update(methods)

    def add_events(self, address: str, name: str, logs: List[dict]) -> None:
        self.events.setdefault(address.lower(), {}).setdefault(name, []).extend(logs)

    def network_calls(self) -> int:
        return len(self.calls) + len(self.sent) + len(self.log_queries)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def ledger() -> StubLedger:
    ledger = StubLedger()
    ledger.set(HEAD, context=CONTEXT)
    ledger.set(CONTEXT, catalogue=CATALOGUE, storageCatalogue=STORAGE_CATALOGUE, versionTag="0.3.0")
    ledger.set(
        CATALOGUE,
        challenges=CHALLENGES,
        shelteringTransfers=TRANSFERS,
        fees=FEES,
        sheltering=SHELTERING,
        payouts=ZERO,
    )
    ledger.set(
        STORAGE_CATALOGUE,
        atlasStakeStore=ATLAS_STAKE_STORE,
        challengesEventEmitter=CHALLENGES_EMITTER,
        transfersEventEmitter=TRANSFERS_EMITTER,
    )
    ledger.set(
        CHALLENGES,
        getChallengeId=lambda shelterer, bundle: bytes.fromhex(CHALLENGE_ID[2:]),
        challengeIsInProgress=False,
        canResolve=False,
        challengeIsTimedOut=False,
    )
    ledger.set(
        TRANSFERS,
        getTransferId=lambda donor, bundle: bytes.fromhex(TRANSFER_ID[2:]),
        isInProgress=True,
        canResolve=True,
        getCreationTime=1_700_000_000 - 3600,
        getDonor=SENDER.lower(),
        getBundle=bytes.fromhex(BUNDLE_ID[2:]),
        getDesignatedShelterer=SHELTERER,
    )
    ledger.set(SHELTERING, isSheltering=True, getBundleStoragePeriodsCount=2)
    ledger.set(FEES, getFeeForChallenge=lambda periods: periods * 10**18, getPenalty=[5 * 10**18, 3])
    ledger.set(ATLAS_STAKE_STORE, getBasicStake=10_000 * 10**18, getPenaltiesHistory=[2, 1_690_000_000])
    return ledger


@pytest.fixture
def w3(ledger: StubLedger) -> StubWeb3:
    return StubWeb3(ledger)


@pytest.fixture
def submitter(w3: StubWeb3) -> TransactionSubmitter:
    return TransactionSubmitter(w3, default_sender=SENDER, default_gas=6_000_000)


@pytest.fixture
def registry(w3: StubWeb3, submitter: TransactionSubmitter) -> HeadRegistry:
    return HeadRegistry(w3, HEAD, submitter)


@pytest.fixture
def bindings(w3: StubWeb3, registry: HeadRegistry) -> ContractBindings:
    return ContractBindings(registry, w3, ClientConfig().abi_for)


@pytest.fixture
def challenges(w3, bindings, submitter) -> ChallengeActions:
    return ChallengeActions(w3, bindings, submitter, min_block_time=5, challenge_duration=600)


@pytest.fixture
def transfers(w3, bindings, submitter) -> TransferActions:
    return TransferActions(w3, bindings, submitter, min_block_time=5, transfer_duration=7200)
