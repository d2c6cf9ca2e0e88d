"""
Transaction submission and read-only calls against bound contracts.

Submission parameters follow an exact-replacement policy: the defaults are
``{"from": default_sender, "gas": default_gas}``, and an intent carrying a
sender and/or gas override replaces that map as a whole. Supplying only a
sender override therefore drops the default gas limit; callers that
override must pass a complete set.

In read-only mode (no signing authority) nothing is broadcast; ``submit``
returns the ABI-encoded call data so an external or multi-signature signer
can act on it later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

from web3 import Web3
from web3.exceptions import ContractLogicError

from .constants import ABI_SELECTOR_LENGTH, ABI_WORD_LENGTH, DEFAULT_GAS, REVERT_SELECTOR
from .errors import IneligibleOperationError, NetworkError, ShelteringError
from .utils.logging import get_logger

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount
    from web3 import AsyncWeb3

__all__ = ["TransactionIntent", "TransactionSubmitter"]

_logger = get_logger(__name__)


def _decode_revert_reason(raw: str) -> Optional[str]:
    """Decode a Solidity ``Error(string)`` revert payload.

    Args:
        raw: Hex-encoded error data string

    Returns:
        Decoded revert reason string, or None if decoding fails
    """
    if raw.startswith(REVERT_SELECTOR) and len(raw) >= 10:
        try:
            data = bytes.fromhex(raw[2:])
            if len(data) >= ABI_SELECTOR_LENGTH + ABI_WORD_LENGTH + ABI_WORD_LENGTH:
                offset = ABI_SELECTOR_LENGTH + ABI_WORD_LENGTH
                strlen = int.from_bytes(data[offset : offset + ABI_WORD_LENGTH], "big")
                reason_start = offset + ABI_WORD_LENGTH
                return data[reason_start : reason_start + strlen].decode(errors="ignore")
        except (ValueError, UnicodeDecodeError):
            return None
    return None


def _revert_message(exc: ContractLogicError) -> str:
    data = getattr(exc, "data", None)
    if isinstance(data, str):
        decoded = _decode_revert_reason(data)
        if decoded:
            return decoded
    return getattr(exc, "message", None) or str(exc)


def _hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else Web3.to_hex(value)


@dataclass
class TransactionIntent:
    """One state-changing operation, described before submission.

    Attributes:
        contract: Bound contract interface
        method: Contract function name
        args: Positional function arguments
        value: Native value to attach (wei)
        sender: Sender override
        gas: Gas limit override
    """

    contract: Any
    method: str
    args: Tuple[Any, ...] = ()
    value: Optional[int] = None
    sender: Optional[str] = None
    gas: Optional[int] = None

    def overrides(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.sender is not None:
            params["from"] = self.sender
        if self.gas is not None:
            params["gas"] = self.gas
        return params


class TransactionSubmitter:
    """Sends state-changing calls or encodes them for offline signing.

    Args:
        w3: Async Web3 instance
        default_sender: Address used as ``from`` when no override is given
        default_gas: Gas limit used when no override is given
        send_transactions: False switches to read-only mode
        account: Local account for client-side signing; when omitted the
            node's managed account signs (``eth_sendTransaction``)
    """

    def __init__(
        self,
        w3: "AsyncWeb3",
        default_sender: Optional[str],
        default_gas: int = DEFAULT_GAS,
        send_transactions: bool = True,
        account: Optional["LocalAccount"] = None,
    ) -> None:
        self._w3 = w3
        self.default_sender = default_sender
        self.default_gas = default_gas
        self.send_transactions = send_transactions
        self._account = account

    @property
    def read_only(self) -> bool:
        return not self.send_transactions

    def send_params(self, intent: TransactionIntent) -> Dict[str, Any]:
        """Build submission parameters for an intent.

        Overrides replace the default map whole; ``value`` is attached on top.
        """
        overrides = intent.overrides()
        if overrides:
            params = dict(overrides)
        else:
            params = {"from": self.default_sender, "gas": self.default_gas}
        if intent.value is not None:
            params["value"] = intent.value
        return params

    def encode(self, intent: TransactionIntent) -> str:
        """Return the ABI-encoded call data for an intent."""
        return intent.contract.encode_abi(intent.method, args=list(intent.args))

    async def submit(self, intent: TransactionIntent) -> Union[Any, str]:
        """Submit an intent.

        Returns:
            Transaction receipt in signing mode, encoded call data in
            read-only mode

        Raises:
            IneligibleOperationError: If the ledger rejects the call
            NetworkError: If the transport fails
        """
        if self.read_only:
            payload = self.encode(intent)
            _logger.info("Encoded transaction payload", extra={"method": intent.method})
            return payload

        params = self.send_params(intent)
        _logger.info(
            "Submitting transaction",
            extra={"method": intent.method, "from": params.get("from"), "value": params.get("value")},
        )
        return await self._broadcast(intent, params)

    async def call(self, contract: Any, method: str, *args: Any) -> Any:
        """Perform a read-only contract call from the default sender.

        Raises:
            IneligibleOperationError: If the call reverts
            NetworkError: If the transport fails
        """
        func = getattr(contract.functions, method)(*args)
        call_params = {"from": self.default_sender} if self.default_sender else {}
        _logger.debug("Calling contract", extra={"method": method})
        try:
            return await func.call(call_params)
        except ContractLogicError as e:
            reason = _revert_message(e)
            raise IneligibleOperationError(f"{method} reverted: {reason}", revert_reason=reason) from e
        except ShelteringError:
            raise
        except Exception as e:
            raise NetworkError(f"{method} call failed: {e}") from e

    async def _broadcast(self, intent: TransactionIntent, params: Dict[str, Any]) -> Any:
        func = getattr(intent.contract.functions, intent.method)(*intent.args)
        tx_hash = None
        try:
            if self._account is None:
                tx_hash = await func.transact(params)
            else:
                tx = await func.build_transaction(await self._with_nonce(params))
                signed = self._account.sign_transaction(tx)
                tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = await self._w3.eth.wait_for_transaction_receipt(tx_hash)
        except ContractLogicError as e:
            reason = _revert_message(e)
            raise IneligibleOperationError(
                f"{intent.method} rejected: {reason}", tx_hash=_hex(tx_hash), revert_reason=reason
            ) from e
        except ShelteringError:
            raise
        except Exception as e:
            raise NetworkError(f"{intent.method} submission failed: {e}", tx_hash=_hex(tx_hash)) from e

        if receipt["status"] != 1:
            raise IneligibleOperationError(f"{intent.method} reverted", tx_hash=_hex(tx_hash))
        _logger.info(
            "Transaction mined",
            extra={"method": intent.method, "tx_hash": _hex(tx_hash), "block": receipt.get("blockNumber")},
        )
        return receipt

    async def _with_nonce(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if "nonce" in params:
            return params
        sender = params.get("from") or self._account.address
        nonce = await self._w3.eth.get_transaction_count(sender, "pending")
        return {**params, "nonce": nonce}
