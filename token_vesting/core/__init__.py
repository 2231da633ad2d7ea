"""Core module - configuration, data models, types, and exceptions."""

from .config import EngineSettings, VestingConfig, get_settings, parse_duration, reload_settings
from .models import (
    BeneficiaryAccount,
    BeneficiaryReport,
    ClaimReceipt,
    CollectionReceipt,
    CollectorAccount,
    EliminationReceipt,
    EngineState,
    FeeTranche,
    GlobalTotals,
)
from .types import (
    DAY,
    PERMILLE,
    AccountStatus,
    Role,
)
from .exceptions import (
    VestingError,
    NotAuthorizedError,
    WindowNotOpenError,
    WindowClosedError,
    AlreadyRegisteredError,
    AlreadyEliminatedError,
    NothingToClaimError,
    NothingToCollectError,
    RequestExceedsMaxClaimableError,
    InvalidParameterError,
    ConfigurationError,
)

__all__ = [
    # Config
    "EngineSettings",
    "VestingConfig",
    "get_settings",
    "parse_duration",
    "reload_settings",
    # Models
    "BeneficiaryAccount",
    "BeneficiaryReport",
    "ClaimReceipt",
    "CollectionReceipt",
    "CollectorAccount",
    "EliminationReceipt",
    "EngineState",
    "GlobalTotals",
    # Types
    "DAY",
    "PERMILLE",
    "AccountStatus",
    "Role",
    # Exceptions
    "VestingError",
    "NotAuthorizedError",
    "WindowNotOpenError",
    "WindowClosedError",
    "AlreadyRegisteredError",
    "AlreadyEliminatedError",
    "NothingToClaimError",
    "NothingToCollectError",
    "RequestExceedsMaxClaimableError",
    "InvalidParameterError",
    "ConfigurationError",
]
