"""Fee collection and collector rotation.

Fee booked on a beneficiary is released to the operator only once the
beneficiary's live schedule has passed the positions it was taken from.
Penalty and elimination fee sit in the unvested tail as ``FeeTranche``
records and mature tick by tick from there. Registration fees either follow
the schedule from the start or are collectible at once (``initial_fees_vest``).
"""

import logging

from ..core.exceptions import InvalidParameterError, NothingToCollectError
from ..core.models import BeneficiaryAccount, CollectionReceipt, CollectorAccount
from ..core.types import Identity, Timestamp, TokenAmount
from .base import EngineComponent

logger = logging.getLogger(__name__)


class FeeCollector(EngineComponent):
    """Harvests matured fee to the active collector identity."""

    def matured_fee(self, account: BeneficiaryAccount, now: Timestamp) -> TokenAmount:
        """Part of the account's fee whose vesting point has passed on the live clock."""
        if self.config.initial_fees_vest:
            matured = self.calculator.schedule_amount(account.initial_fee, now)
        else:
            matured = account.initial_fee

        vested = self.calculator.schedule_amount(account.total_allocation, now)
        matured += sum(tranche.matured(vested) for tranche in account.fee_tranches)
        return min(matured, account.total_fee)

    def collectible(self, account: BeneficiaryAccount, now: Timestamp) -> TokenAmount:
        """Matured fee not yet collected."""
        return max(0, self.matured_fee(account, now) - account.fee_collected)

    def collect_fees(
        self,
        caller: Identity,
        beneficiaries: list[Identity],
        now: Timestamp,
        max_amount: TokenAmount | None = None,
    ) -> CollectionReceipt:
        """
        Collect matured fee from the named beneficiaries.

        Args:
            caller: Owner or delegated manager
            beneficiaries: Accounts to harvest, in priority order
            now: Current time
            max_amount: Optional cap on the total collected

        Returns:
            CollectionReceipt for the active collector
        """
        self._require_privileged(caller)
        if max_amount is not None and max_amount <= 0:
            raise InvalidParameterError("max_amount", str(max_amount), "must be positive")

        remaining = max_amount
        increments: dict[Identity, TokenAmount] = {}
        updated: list[BeneficiaryAccount] = []

        for identity in dict.fromkeys(beneficiaries):
            account = self.ledger.get(identity)
            increment = self.collectible(account, now)
            if remaining is not None:
                increment = min(increment, remaining)
                remaining -= increment
            if increment > 0:
                increments[identity] = increment
                updated.append(
                    account.model_copy(update={"fee_collected": account.fee_collected + increment})
                )

        total = sum(increments.values())
        if total == 0:
            raise NothingToCollectError(list(beneficiaries))
        if max_amount is not None and total == max_amount:
            logger.warning(f"Fee collection capped at {max_amount}")

        collector = self.ledger.active_collector
        self.ledger.record_collection(total)
        try:
            self._commit_and_disburse(updated, [(collector.identity, total)])
        except Exception:
            self.ledger.record_collection(-total)
            raise

        logger.info(f"Collected {total} in fees to {collector.identity}")
        return CollectionReceipt(
            collector=collector.identity,
            timestamp=now,
            amount=total,
            per_beneficiary=increments,
        )

    def switch_fee_collectors(self, caller: Identity) -> CollectorAccount:
        """
        Make the standby collector active, handing over the running tally.

        Returns:
            The newly active collector
        """
        self._require_owner(caller)
        vacated = self.ledger.active_collector
        active = self.ledger.switch_collectors()
        logger.info(
            f"Fee collector switched from {vacated.identity} to {active.identity} "
            f"(tally {active.total_collected})"
        )
        return active
