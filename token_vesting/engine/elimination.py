"""Elimination: irrevocable forfeiture of a beneficiary's future accrual."""

import logging
from collections import Counter

from ..core.exceptions import (
    AlreadyEliminatedError,
    InvalidParameterError,
    WindowNotOpenError,
)
from ..core.models import EliminationReceipt
from ..core.types import Identity, Timestamp
from .base import EngineComponent

logger = logging.getLogger(__name__)


class EliminationManager(EngineComponent):
    """Freezes beneficiaries' clocks and books their unvested tail as fee."""

    def eliminate(
        self,
        caller: Identity,
        beneficiaries: list[Identity],
        now: Timestamp,
    ) -> list[EliminationReceipt]:
        """
        Eliminate every named beneficiary at ``now``.

        The unvested remainder on the live clock, ``total - max(vested,
        claimed + fee + burned)``, is added to the beneficiary's fee as a
        tranche at the top of the allocation. Matured but unclaimed tokens
        stay claimable; no further entitlement accrues.

        Args:
            caller: Owner or delegated manager
            beneficiaries: Registered identities to eliminate
            now: Current time

        Returns:
            One receipt per eliminated beneficiary
        """
        self._require_privileged(caller)
        if now < self.config.start_time:
            raise WindowNotOpenError("eliminating", now, self.config.start_time)

        unknown = [b for b in beneficiaries if b not in self.ledger]
        if unknown:
            raise InvalidParameterError("beneficiaries", ", ".join(unknown), "not whitelisted")

        repeated = [b for b, n in Counter(beneficiaries).items() if n > 1]
        already = [b for b in beneficiaries if self.ledger.get(b).is_eliminated]
        if already or repeated:
            raise AlreadyEliminatedError(sorted(set(already + repeated)))

        updated = []
        receipts = []
        for identity in beneficiaries:
            account = self.ledger.get(identity)
            forfeited = self.calculator.unvested_remainder(account, now)
            updated.append(
                account.model_copy(
                    update={
                        "eliminated_at": now,
                        "total_fee": account.total_fee + forfeited,
                        "elimination_fee": forfeited,
                        "fee_tranches": account.with_tail_fee(
                            forfeited, account.total_allocation - forfeited
                        ),
                    }
                )
            )
            receipts.append(
                EliminationReceipt(beneficiary=identity, eliminated_at=now, forfeited=forfeited)
            )
            logger.info(f"[{identity}] eliminated at {now}, forfeited {forfeited}")

        self.ledger.commit(updated)
        return receipts
