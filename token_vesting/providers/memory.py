"""In-process implementations of the external collaborators.

Used by the CLI (persisted through the JSON store) and by the test suite.
"""

import logging
import time
from dataclasses import dataclass

from ..core.exceptions import VestingError
from ..core.types import Identity, Timestamp, TokenAmount
from .base import AccessGate, Clock, TokenLedger

logger = logging.getLogger(__name__)

VAULT = "vesting-vault"


class InsufficientFundsError(VestingError):
    """Raised when the vault cannot cover a transfer."""

    def __init__(self, requested: TokenAmount, available: TokenAmount):
        message = f"vault balance too low (requested={requested}, available={available})"
        super().__init__(message, {"requested": requested, "available": available})
        self.requested = requested
        self.available = available


@dataclass(frozen=True)
class Transfer:
    """A single disbursement recorded by the in-memory ledger."""

    to: Identity
    amount: TokenAmount


class InMemoryTokenLedger(TokenLedger):
    """Balance map with a single vault that funds every disbursement."""

    def __init__(self, balances: dict[Identity, TokenAmount] | None = None):
        """
        Initialize the ledger.

        Args:
            balances: Starting balances, including the vault under ``VAULT``
        """
        self.balances: dict[Identity, TokenAmount] = dict(balances or {})
        self._transfers: list[Transfer] = []

    def fund(self, amount: TokenAmount) -> None:
        """Deposit ``amount`` into the vault."""
        self.balances[VAULT] = self.balances.get(VAULT, 0) + amount

    def transfer(self, to: Identity, amount: TokenAmount) -> None:
        self.transfer_many([(to, amount)])

    def transfer_many(self, transfers: list[tuple[Identity, TokenAmount]]) -> None:
        requested = sum(amount for _, amount in transfers)
        available = self.balances.get(VAULT, 0)
        if requested > available:
            raise InsufficientFundsError(requested, available)

        for to, amount in transfers:
            self.balances[VAULT] = self.balances.get(VAULT, 0) - amount
            self.balances[to] = self.balances.get(to, 0) + amount
            self._transfers.append(Transfer(to=to, amount=amount))
            logger.debug(f"Transferred {amount} to {to}")

    def balance_of(self, identity: Identity) -> TokenAmount:
        return self.balances.get(identity, 0)

    def get_transfers(self) -> list[Transfer]:
        """Return every transfer made through this ledger, oldest first."""
        return list(self._transfers)


class RoleRegistry(AccessGate):
    """Single owner with an optional delegated manager."""

    def __init__(self, owner: Identity, manager: Identity | None = None):
        self.owner = owner
        self.manager = manager

    def is_owner(self, identity: Identity) -> bool:
        return identity == self.owner

    def is_privileged_manager(self, identity: Identity) -> bool:
        return self.manager is not None and identity == self.manager

    def set_manager(self, manager: Identity | None) -> None:
        logger.info(f"Manager set to {manager}")
        self.manager = manager


class SystemClock(Clock):
    """Wall-clock time in whole seconds."""

    def now(self) -> Timestamp:
        return int(time.time())


class ManualClock(Clock):
    """Clock advanced explicitly; never moves backwards."""

    def __init__(self, start: Timestamp = 0):
        self._now = start

    def now(self) -> Timestamp:
        return self._now

    def advance(self, seconds: int) -> Timestamp:
        if seconds < 0:
            raise ValueError("time never moves backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: Timestamp) -> Timestamp:
        if timestamp < self._now:
            raise ValueError(f"time never moves backwards ({timestamp} < {self._now})")
        self._now = timestamp
        return self._now
