"""External collaborators: value ledger, access control and clock."""

from .base import AccessGate, Clock, TokenLedger
from .memory import (
    VAULT,
    InMemoryTokenLedger,
    InsufficientFundsError,
    ManualClock,
    RoleRegistry,
    SystemClock,
    Transfer,
)

__all__ = [
    "AccessGate",
    "Clock",
    "TokenLedger",
    "VAULT",
    "InMemoryTokenLedger",
    "InsufficientFundsError",
    "ManualClock",
    "RoleRegistry",
    "SystemClock",
    "Transfer",
]
