"""Consolidated per-beneficiary report.

Packages several read accessors into one response without mutating state.
"""

import logging

from .core.models import BeneficiaryReport
from .core.types import Identity
from .vesting import VestingEngine

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Builds BeneficiaryReport views from a VestingEngine."""

    def __init__(self, engine: VestingEngine):
        self.engine = engine

    def build(self, identity: Identity) -> BeneficiaryReport:
        """
        Assemble the report for one beneficiary at the engine's current time.

        ``upcoming_claimable`` is how much ``unlocked`` grows at the next
        schedule tick; it is 0 for eliminated accounts and once the schedule
        is exhausted.

        Args:
            identity: Beneficiary to report on

        Returns:
            BeneficiaryReport
        """
        engine = self.engine
        now = engine.now()
        account = engine.account(identity)
        current = engine.calculator.breakdown(account, now)
        next_unlock = engine.calculator.next_unlock_time(account, now)

        upcoming = 0
        if next_unlock and not account.is_eliminated:
            upcoming = max(0, engine.calculator.unlocked(account, next_unlock) - current.unlocked)

        return BeneficiaryReport(
            beneficiary=identity,
            timestamp=now,
            status=account.status,
            total_allocation=account.total_allocation,
            total_unlocked=account.total_claimed + current.unlocked,
            total_claimed=account.total_claimed,
            total_fee=account.total_fee,
            total_burned=account.total_burned,
            upcoming_claimable=upcoming,
            still_vesting=current.still_vesting,
            min_claimable=current.min_claimable,
            max_claimable=current.max_claimable,
            locked=current.locked,
            next_unlock_time=next_unlock,
        )

    def build_all(self) -> list[BeneficiaryReport]:
        """Reports for every registered beneficiary."""
        return [self.build(account.identity) for account in self.engine.ledger]
