"""Type definitions and enums for the vesting engine."""

from enum import Enum
from typing import Literal


class Role(str, Enum):
    """Roles recognised by the access-control gate."""

    OWNER = "owner"
    MANAGER = "manager"
    BENEFICIARY = "beneficiary"

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            self.OWNER: "Owner",
            self.MANAGER: "Privileged Manager",
            self.BENEFICIARY: "Beneficiary",
        }
        return names.get(self, self.value)


class AccountStatus(str, Enum):
    """Lifecycle state of a beneficiary account."""

    ACTIVE = "active"
    ELIMINATED = "eliminated"


# Type aliases for common patterns
TokenAmount = int   # Smallest token unit
Timestamp = int     # Unix timestamp in seconds
Seconds = int       # Duration in seconds
Permille = int      # 0-1000 scale
Identity = str      # Account / wallet identifier

PERMILLE: Permille = 1000
DAY: Seconds = 86400

# Literal types for specific fields
OutputFormatType = Literal["json", "table"]
