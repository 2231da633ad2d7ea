"""Base classes for the engine's external collaborators.

The engine never moves value, checks roles or reads the time on its own;
it consumes these interfaces instead.
"""

import logging
from abc import ABC, abstractmethod

from ..core.types import Identity, Timestamp, TokenAmount

logger = logging.getLogger(__name__)


class TokenLedger(ABC):
    """Fungible-value ledger a claim ultimately moves value through."""

    @abstractmethod
    def transfer(self, to: Identity, amount: TokenAmount) -> None:
        """Move ``amount`` from the vesting vault to ``to``."""
        pass

    @abstractmethod
    def transfer_many(self, transfers: list[tuple[Identity, TokenAmount]]) -> None:
        """
        Make every ``(to, amount)`` transfer, or none of them.

        Raises before moving any value when the vault cannot cover the
        whole batch.
        """
        pass

    @abstractmethod
    def balance_of(self, identity: Identity) -> TokenAmount:
        """Return the balance held by ``identity``."""
        pass


class AccessGate(ABC):
    """Access-control gate authorizing privileged operations."""

    @abstractmethod
    def is_owner(self, identity: Identity) -> bool:
        pass

    @abstractmethod
    def is_privileged_manager(self, identity: Identity) -> bool:
        """True for the owner's delegated manager."""
        pass

    @abstractmethod
    def set_manager(self, manager: Identity | None) -> None:
        """Delegate the manager role; ``None`` revokes it."""
        pass

    def is_privileged(self, identity: Identity) -> bool:
        """Owner or delegated manager."""
        return self.is_owner(identity) or self.is_privileged_manager(identity)


class Clock(ABC):
    """Monotonic source of the current time."""

    @abstractmethod
    def now(self) -> Timestamp:
        pass
