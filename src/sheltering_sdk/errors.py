"""
Exception hierarchy for the sheltering SDK.

All errors inherit from ShelteringError, which carries a machine-readable
code, an optional transaction hash and a details dictionary so callers
(typically a CLI layer) can decide on presentation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "ShelteringError",
    "InvalidArgumentError",
    "ContractNotDeployedError",
    "NetworkError",
    "IneligibleOperationError",
    "InsufficientFundsError",
]


class ShelteringError(Exception):
    """
    Base exception for all sheltering protocol errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "NETWORK_ERROR").
        tx_hash: Optional transaction hash related to the error.
        details: Optional dictionary with additional error context.

    Example:
        >>> raise ShelteringError(
        ...     "Challenge start reverted",
        ...     code="INELIGIBLE_OPERATION",
        ...     tx_hash="0x123...",
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "SHELTERING_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = details or {}

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.tx_hash:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "details": self.details,
        }


class InvalidArgumentError(ShelteringError):
    """Raised when a caller-supplied identifier or address is malformed.

    Detected locally; the offending value never reaches the network.
    """

    def __init__(self, value: Any, *, field: str, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid {field}: {value!r} ({reason})",
            code="INVALID_ARGUMENT",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ContractNotDeployedError(ShelteringError):
    """Raised when the registry has no current address for a logical name."""

    def __init__(self, contract_name: str, reason: Optional[str] = None) -> None:
        self.contract_name = contract_name
        message = f"Contract '{contract_name}' is not deployed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            code="CONTRACT_NOT_DEPLOYED",
            details={"contract_name": contract_name},
        )


class NetworkError(ShelteringError):
    """Raised when the ledger transport fails."""

    def __init__(self, message: str, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(message, code="NETWORK_ERROR", tx_hash=tx_hash)


class IneligibleOperationError(ShelteringError):
    """Raised when the ledger rejects a call because a protocol precondition is unmet.

    Attributes:
        revert_reason: Decoded ``Error(string)`` reason when the ledger gave one
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "INELIGIBLE_OPERATION",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        revert_reason: Optional[str] = None,
    ) -> None:
        self.revert_reason = revert_reason
        if revert_reason is not None:
            details = {**(details or {}), "revert_reason": revert_reason}
        super().__init__(message, code=code, tx_hash=tx_hash, details=details)


class InsufficientFundsError(IneligibleOperationError):
    """Raised when the sender balance does not cover a protocol fee.

    Attributes:
        fee: Required fee in wei
        balance: Current sender balance in wei
    """

    def __init__(self, fee: int, balance: int, action: str = "start a challenge") -> None:
        self.fee = fee
        self.balance = balance
        super().__init__(
            f"Insufficient funds: need at least {fee} wei to {action}. Balance: {balance} wei",
            code="INSUFFICIENT_FUNDS",
            details={"fee": str(fee), "balance": str(balance)},
        )
