from .binding import ContractBinding, ContractBindings
from .challenges import ChallengeActions
from .client import ShelteringClient
from .config import NETWORKS, ClientConfig, Network, NetworkConfig, get_network_config
from .constants import (
    BYTES32_HEX_LENGTH,
    DEFAULT_GAS,
    DEFAULT_HEAD_ADDRESS,
    ID_PATTERN,
    MIN_BLOCK_TIME,
    PROVIDER_TIMEOUT_SECONDS,
    ZERO_ADDRESS,
)
from .errors import (
    ContractNotDeployedError,
    IneligibleOperationError,
    InsufficientFundsError,
    InvalidArgumentError,
    NetworkError,
    ShelteringError,
)
from .models import (
    ChallengeListing,
    ChallengeStatus,
    LogicalContract,
    StartedChallenge,
    StartedTransfer,
    Submission,
    TransferListing,
    TransferStatus,
)
from .registry import HeadRegistry
from .submitter import TransactionIntent, TransactionSubmitter
from .time_window import BlockRange, earliest_block, meaningful_range
from .transfers import TransferActions
from .utils.logging import configure_logging, get_logger
from .validation import validate_address, validate_id

__version__ = "0.3.0"

__all__ = [
    # Client
    "ShelteringClient",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "ClientConfig",
    "get_network_config",
    # Registry / bindings
    "HeadRegistry",
    "ContractBinding",
    "ContractBindings",
    "LogicalContract",
    # Submission
    "TransactionIntent",
    "TransactionSubmitter",
    "Submission",
    # Lifecycle
    "ChallengeActions",
    "TransferActions",
    "ChallengeStatus",
    "TransferStatus",
    "StartedChallenge",
    "StartedTransfer",
    "ChallengeListing",
    "TransferListing",
    # Time window
    "BlockRange",
    "earliest_block",
    "meaningful_range",
    # Logging
    "configure_logging",
    "get_logger",
    # Validation
    "validate_address",
    "validate_id",
    # Errors
    "ShelteringError",
    "InvalidArgumentError",
    "ContractNotDeployedError",
    "NetworkError",
    "IneligibleOperationError",
    "InsufficientFundsError",
    # Constants
    "BYTES32_HEX_LENGTH",
    "DEFAULT_GAS",
    "DEFAULT_HEAD_ADDRESS",
    "ID_PATTERN",
    "MIN_BLOCK_TIME",
    "PROVIDER_TIMEOUT_SECONDS",
    "ZERO_ADDRESS",
]
