"""
Sheltering SDK utilities.
"""

from sheltering_sdk.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
]
