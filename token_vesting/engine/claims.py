"""Claim engine: validates and executes withdrawals.

A claim always releases everything that is penalty-free (``unlocked_batch1 +
unlocked_batch2``). On top of that a beneficiary may request an ``extra``
amount, drawn in order from:

1. early batch2 - matured under the undelayed clock but not yet released on
   the delayed batch2 clock. Each token taken forfeits one token of the
   still-vesting tail as fee.
2. the locked pool - the unvested remainder, net of penalty. The penalty is
   ``net * burn_rate / (1000 - burn_rate)``; ``penalty_fee_share`` of it is
   kept as collectible fee and the rest is burned.

Penalties are truncated so that claimed + fee + burned never exceeds the
allocation. The fee is booked as a tranche starting where the live schedule
stands, so it only becomes collectible as later ticks pass.
"""

import logging

from ..core.exceptions import (
    InvalidParameterError,
    NothingToClaimError,
    RequestExceedsMaxClaimableError,
)
from ..core.models import ClaimReceipt
from ..core.types import PERMILLE, Identity, Timestamp, TokenAmount
from .base import EngineComponent

logger = logging.getLogger(__name__)


class ClaimEngine(EngineComponent):
    """Executes claims against the allocation ledger."""

    def __init__(self, *args, burn_sink: Identity, **kwargs):
        """
        Initialize the claim engine.

        Args:
            burn_sink: Identity that receives burned penalty value
        """
        super().__init__(*args, **kwargs)
        self.burn_sink = burn_sink

    def claim(self, caller: Identity, now: Timestamp) -> ClaimReceipt:
        """Release the caller's penalty-free unlocked amount to the caller."""
        return self._execute(caller, 0, now)

    def claim_for(self, caller: Identity, beneficiary: Identity, now: Timestamp) -> ClaimReceipt:
        """Release ``beneficiary``'s penalty-free amount; value only reaches the beneficiary."""
        logger.debug(f"{caller} relaying claim for {beneficiary}")
        return self._execute(beneficiary, 0, now)

    def claim_with_extra(
        self,
        caller: Identity,
        extra: TokenAmount,
        now: Timestamp,
    ) -> ClaimReceipt:
        """Release the penalty-free amount plus ``extra`` from early batch2 and locked."""
        return self._execute(caller, extra, now)

    def _execute(self, beneficiary: Identity, extra: TokenAmount, now: Timestamp) -> ClaimReceipt:
        if extra < 0:
            raise InvalidParameterError("extra", str(extra), "must not be negative")

        account = self.ledger.get(beneficiary)
        breakdown = self.calculator.breakdown(account, now)

        if extra > breakdown.max_extra:
            raise RequestExceedsMaxClaimableError(beneficiary, extra, breakdown.max_extra)

        from_batch1 = breakdown.unlocked_batch1
        from_batch2 = breakdown.unlocked_batch2
        amount = from_batch1 + from_batch2 + extra
        if amount == 0:
            raise NothingToClaimError(beneficiary)

        from_early = min(extra, breakdown.early_batch2)
        from_locked = extra - from_early

        claimed = account.total_claimed + amount
        headroom = account.headroom - amount

        forfeited = min(from_early, headroom)
        headroom -= forfeited
        full_penalty = self.calculator.locked_penalty(from_locked)
        penalty = min(full_penalty, headroom)
        if forfeited < from_early or penalty < full_penalty:
            logger.warning(
                f"[{beneficiary}] penalty truncated to allocation headroom "
                f"(forfeit {forfeited}/{from_early}, penalty {penalty}/{full_penalty})"
            )

        penalty_fee = penalty * self.config.penalty_fee_share // PERMILLE
        burned = penalty - penalty_fee
        fee = forfeited + penalty_fee
        vested = self.calculator.schedule_amount(account.total_allocation, now)

        updated = account.model_copy(
            update={
                "total_claimed": claimed,
                "total_claimed_batch1": account.total_claimed_batch1 + from_batch1,
                "total_claimed_batch2": account.total_claimed_batch2 + from_batch2 + from_early,
                "total_claimed_from_locked": account.total_claimed_from_locked + from_locked,
                "total_fee": account.total_fee + fee,
                "total_burned": account.total_burned + burned,
                "fee_tranches": account.with_tail_fee(fee, vested),
            }
        )
        self._commit_and_disburse(
            [updated],
            [(beneficiary, amount), (self.burn_sink, burned)],
        )

        logger.info(
            f"[{beneficiary}] claimed {amount} "
            f"(batch1={from_batch1}, batch2={from_batch2}, early={from_early}, "
            f"locked={from_locked}, fee={fee}, burned={burned})"
        )

        return ClaimReceipt(
            beneficiary=beneficiary,
            timestamp=now,
            amount=amount,
            from_batch1=from_batch1,
            from_batch2=from_batch2,
            from_early_batch2=from_early,
            from_locked=from_locked,
            fee=fee,
            burned=burned,
        )
