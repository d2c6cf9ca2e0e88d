"""
Block windows for historical event scans.

A protocol duration (e.g. how long a challenge may stay open) is converted
into the earliest block an event of interest could have been emitted in.
The conversion assumes blocks are never produced faster than
``min_block_time`` seconds, so the window can only be wider than necessary,
never narrower.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .constants import MIN_BLOCK_TIME
from .errors import InvalidArgumentError
from .utils.logging import get_logger

if TYPE_CHECKING:
    from web3 import AsyncWeb3

__all__ = ["BlockRange", "earliest_block", "meaningful_range"]

_logger = get_logger(__name__)

BlockBound = Union[int, str]


@dataclass(frozen=True)
class BlockRange:
    """Inclusive block range for log queries.

    Attributes:
        from_block: First block to scan (never negative)
        to_block: Last block to scan, or a tag such as "latest"
    """

    from_block: int
    to_block: BlockBound = "latest"

    def __post_init__(self) -> None:
        if self.from_block < 0:
            raise InvalidArgumentError(self.from_block, field="from_block", reason="must be non-negative")
        if isinstance(self.to_block, int) and self.to_block < self.from_block:
            raise InvalidArgumentError(self.to_block, field="to_block", reason="must not precede from_block")


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def earliest_block(current_block: int, duration_seconds: int, min_block_time_seconds: int = MIN_BLOCK_TIME) -> int:
    """
    Compute the earliest block worth scanning for a duration-bounded event.

    ``max(0, current_block - ceil(duration_seconds / min_block_time_seconds))``

    Args:
        current_block: Current chain height
        duration_seconds: Protocol duration to look back over
        min_block_time_seconds: Lower bound on block production time

    Returns:
        Block number, floored at zero

    Raises:
        InvalidArgumentError: On negative inputs or a non-positive block time

    Example:
        >>> earliest_block(1000, 600, 5)
        880
        >>> earliest_block(50, 10_000, 5)
        0
    """
    if current_block < 0:
        raise InvalidArgumentError(current_block, field="current_block", reason="must be non-negative")
    if duration_seconds < 0:
        raise InvalidArgumentError(duration_seconds, field="duration_seconds", reason="must be non-negative")
    if min_block_time_seconds <= 0:
        raise InvalidArgumentError(
            min_block_time_seconds, field="min_block_time_seconds", reason="must be positive"
        )
    return max(0, current_block - _ceil_div(duration_seconds, min_block_time_seconds))


async def meaningful_range(
    w3: "AsyncWeb3",
    duration_seconds: int,
    min_block_time_seconds: int = MIN_BLOCK_TIME,
    from_block: Optional[int] = None,
    to_block: Optional[BlockBound] = None,
) -> BlockRange:
    """
    Build a BlockRange, deriving missing bounds from the current chain height.

    Explicit bounds are used as given; the chain is only queried when
    ``from_block`` is missing.
    """
    if from_block is None:
        current = await w3.eth.block_number
        from_block = earliest_block(current, duration_seconds, min_block_time_seconds)
        _logger.debug(
            "Derived scan window",
            extra={"current_block": current, "from_block": from_block, "duration": duration_seconds},
        )
    return BlockRange(from_block=from_block, to_block="latest" if to_block is None else to_block)
