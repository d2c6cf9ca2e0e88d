"""Constants for the sheltering SDK.

This module defines the constant values used across the SDK, including
identifier formats, gas defaults, block timing and network settings.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ABI_WORD_LENGTH = 32
REVERT_SELECTOR = "0x08c379a0"

# Identifier Constants
BYTES32_HEX_LENGTH = 64
ID_PATTERN = r"^0x[0-9a-f]{64}$"  # matched case-insensitively
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Gas Constants
DEFAULT_GAS = 6_000_000

# Block Timing
MIN_BLOCK_TIME = 5  # seconds

# Protocol durations used for history lookback (seconds)
DAY = 24 * 60 * 60
DEFAULT_CHALLENGE_DURATION = 2 * DAY
DEFAULT_TRANSFER_DURATION = 2 * DAY

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30
DEFAULT_HEAD_ADDRESS = "0x0000000000000000000000000000000000000F10"

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ABI_WORD_LENGTH",
    "REVERT_SELECTOR",
    "BYTES32_HEX_LENGTH",
    "ID_PATTERN",
    "ZERO_ADDRESS",
    "DEFAULT_GAS",
    "MIN_BLOCK_TIME",
    "DAY",
    "DEFAULT_CHALLENGE_DURATION",
    "DEFAULT_TRANSFER_DURATION",
    "PROVIDER_TIMEOUT_SECONDS",
    "DEFAULT_HEAD_ADDRESS",
]
