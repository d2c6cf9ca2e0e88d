"""
Structured logging helpers for the sheltering SDK.

All SDK loggers live under the ``sheltering_sdk`` namespace and stay silent
(NullHandler) until the application calls :func:`configure_logging` or
attaches its own handlers.

Example:
    >>> from sheltering_sdk.utils.logging import configure_logging, get_logger
    >>> configure_logging("DEBUG")
    >>> _logger = get_logger(__name__)
    >>> _logger.info("Challenge started", extra={"challenge_id": "0x..."})
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "sheltering_sdk"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the SDK namespace.

    Args:
        name: Module name (usually ``__name__``). Names outside the SDK
            namespace are nested under it.

    Returns:
        Logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a handler to the SDK root logger.

    Calling this more than once replaces the previously configured handler
    instead of stacking duplicates.

    Args:
        level: Log level name or number
        fmt: Format string for the handler
        handler: Custom handler (defaults to a StreamHandler on stderr)

    Returns:
        The SDK root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(root.handlers):
        if getattr(existing, "_sheltering_sdk", False):
            root.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._sheltering_sdk = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    set_level(level)
    return root


def set_level(level: Union[int, str]) -> None:
    """Set the SDK root log level."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def enable_debug() -> None:
    set_level(logging.DEBUG)


def disable_logging() -> None:
    """Silence every SDK logger."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.CRITICAL + 1)
