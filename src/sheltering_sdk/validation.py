"""
Input validation for identifiers passed to the ledger.

Every operation that takes an account or content identifier validates it
here before any network call. Failures raise InvalidArgumentError.
"""

from __future__ import annotations

import re
from typing import Any

from web3 import Web3

from .constants import ID_PATTERN
from .errors import InvalidArgumentError

__all__ = ["is_valid_id", "validate_id", "validate_address", "validate_amount"]

_ID_RE = re.compile(ID_PATTERN, re.IGNORECASE)


def is_valid_id(value: Any) -> bool:
    """Return True for ``0x``-prefixed 64-hex-digit strings (any case)."""
    return isinstance(value, str) and _ID_RE.fullmatch(value) is not None


def validate_id(value: Any, field: str = "id") -> str:
    """Validate a 32-byte content identifier (challenge, transfer or bundle id).

    Args:
        value: Identifier to validate
        field: Field name for error message

    Returns:
        The identifier, unchanged

    Raises:
        InvalidArgumentError: If the value is not 0x followed by 64 hex digits
    """
    if not is_valid_id(value):
        raise InvalidArgumentError(value, field=field, reason="must be 0x followed by 64 hex characters")
    return value


def validate_address(value: Any, field: str = "address") -> str:
    """Validate an account identifier.

    Mixed-case addresses must carry a valid EIP-55 checksum; all-lowercase
    and all-uppercase hex addresses are accepted.

    Returns:
        Checksummed address

    Raises:
        InvalidArgumentError: If the address is malformed
    """
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InvalidArgumentError(value, field=field, reason="must be a valid account address")
    return Web3.to_checksum_address(value)


def validate_amount(value: Any, field: str = "amount") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(value, field=field, reason="must be an integer amount of wei")
    if value < 0:
        raise InvalidArgumentError(value, field=field, reason="must be non-negative")
    return value
