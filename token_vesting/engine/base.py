"""Shared plumbing for engine components."""

import logging

from ..calculator.schedule import ScheduleCalculator
from ..core.config import VestingConfig
from ..core.exceptions import NotAuthorizedError
from ..core.models import BeneficiaryAccount
from ..core.types import Identity, Role, TokenAmount
from ..ledger.allocation_ledger import AllocationLedger
from ..providers.base import AccessGate, TokenLedger

logger = logging.getLogger(__name__)


class EngineComponent:
    """Base class wiring a component to the ledger and its collaborators."""

    def __init__(
        self,
        ledger: AllocationLedger,
        calculator: ScheduleCalculator,
        token_ledger: TokenLedger,
        access: AccessGate,
    ):
        self.ledger = ledger
        self.calculator = calculator
        self.token_ledger = token_ledger
        self.access = access

    @property
    def config(self) -> VestingConfig:
        return self.calculator.config

    def _require_owner(self, caller: Identity) -> None:
        if not self.access.is_owner(caller):
            raise NotAuthorizedError(caller, Role.OWNER.display_name)

    def _require_privileged(self, caller: Identity) -> None:
        if not self.access.is_privileged(caller):
            raise NotAuthorizedError(caller, Role.MANAGER.display_name)

    def _commit_and_disburse(
        self,
        updated: list[BeneficiaryAccount],
        transfers: list[tuple[Identity, TokenAmount]],
    ) -> None:
        """
        Commit account snapshots, then disburse.

        Every transfer goes to the token ledger as one all-or-nothing batch.
        A rejected batch restores the previous snapshots before the error
        propagates, so the caller observes all-or-nothing behaviour.

        Args:
            updated: New account snapshots
            transfers: (recipient, amount) pairs, zero amounts skipped
        """
        batch = [(recipient, amount) for recipient, amount in transfers if amount > 0]
        previous = [self.ledger.get(a.identity) for a in updated]
        self.ledger.commit(updated)
        try:
            if batch:
                self.token_ledger.transfer_many(batch)
        except Exception:
            logger.error("Disbursement failed, restoring ledger state")
            self.ledger.commit(previous)
            raise
