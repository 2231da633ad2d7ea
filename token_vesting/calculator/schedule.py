"""Schedule calculator: pure time -> amount functions.

All amounts are integers in the token's smallest unit and every division
floors. The calculator never mutates an account.

Clock model:
- vested_time        = max(0, t - start - (batch2 ? batch2_delay : 0))
- linear_vested_time = max(0, vested_time - linear_vesting_offset)
- unlocks            = 0 before the offset, else min(count, linear_vested_time // period + 1)
- schedule           = first_unlock + linear_pool * unlocks // count

The first linear tick is released the moment the offset is reached.
"""

import logging
from dataclasses import dataclass

from ..core.config import VestingConfig
from ..core.models import BeneficiaryAccount
from ..core.types import PERMILLE, Timestamp, TokenAmount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Live:
    """Reference time follows the environment's clock."""

    def resolve(self, now: Timestamp) -> Timestamp:
        return now


@dataclass(frozen=True)
class FrozenAt:
    """Reference time pinned to a fixed instant (eliminated accounts)."""

    timestamp: Timestamp

    def resolve(self, now: Timestamp) -> Timestamp:
        return self.timestamp


ReferenceTime = Live | FrozenAt


def reference_time_for(account: BeneficiaryAccount) -> ReferenceTime:
    """Return the clock variant an account's entitlement is evaluated on."""
    if account.is_eliminated:
        return FrozenAt(account.eliminated_at)
    return Live()


@dataclass(frozen=True)
class ScheduleBreakdown:
    """Every derived quantity for one account at one instant."""

    reference_time: Timestamp
    vesting_schedule: TokenAmount          # Undelayed clock, whole allocation
    batch2_schedule: TokenAmount           # Clock batch2 is released on
    unlocked: TokenAmount                  # Matured, not yet claimed
    unlocked_batch1: TokenAmount
    unlocked_batch2: TokenAmount
    early_batch2: TokenAmount              # Unlocked, but batch2 not yet released
    still_vesting: TokenAmount             # Not yet matured
    locked_gross: TokenAmount              # Early-releasable part of still_vesting
    locked: TokenAmount                    # Net of penalty

    @property
    def min_claimable(self) -> TokenAmount:
        """Claimable without any penalty."""
        return self.unlocked_batch1 + self.unlocked_batch2

    @property
    def max_claimable(self) -> TokenAmount:
        """Claimable including early batch2 and the locked pool."""
        return self.unlocked + self.locked

    @property
    def max_extra(self) -> TokenAmount:
        """Largest ``extra`` a claim may request on top of ``min_claimable``."""
        return self.early_batch2 + self.locked


class ScheduleCalculator:
    """Computes vesting entitlements from a schedule configuration."""

    def __init__(self, config: VestingConfig):
        """
        Initialize the calculator.

        Args:
            config: Schedule parameters shared by every beneficiary
        """
        self.config = config

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def vested_time(self, at: Timestamp, for_batch2: bool = False) -> int:
        """Seconds elapsed since the (possibly delayed) start."""
        delay = self.config.batch2_delay if for_batch2 else 0
        return max(0, at - self.config.start_time - delay)

    def linear_vested_time(self, at: Timestamp, for_batch2: bool = False) -> int:
        """Seconds elapsed since linear accrual began."""
        return max(0, self.vested_time(at, for_batch2) - self.config.linear_vesting_offset)

    def linear_unlocks_passed(self, at: Timestamp, for_batch2: bool = False) -> int:
        """Number of discrete linear ticks released by ``at``."""
        if self.vested_time(at, for_batch2) < self.config.linear_vesting_offset:
            return 0
        if self.config.linear_unlocks_count == 0:
            return 0
        ticks = self.linear_vested_time(at, for_batch2) // self.config.linear_vesting_period + 1
        return min(self.config.linear_unlocks_count, ticks)

    def _has_started(self, at: Timestamp, for_batch2: bool) -> bool:
        delay = self.config.batch2_delay if for_batch2 else 0
        return at >= self.config.start_time + delay

    # ------------------------------------------------------------------
    # Schedules
    # ------------------------------------------------------------------

    def schedule_amount(
        self,
        amount: TokenAmount,
        at: Timestamp,
        for_batch2: bool = False,
    ) -> TokenAmount:
        """
        Matured part of ``amount`` at ``at`` under this schedule.

        Args:
            amount: Allocation the schedule is applied to
            at: Reference time
            for_batch2: Use the clock delayed by ``batch2_delay``

        Returns:
            Matured amount, never above ``amount``
        """
        if amount <= 0 or not self._has_started(at, for_batch2):
            return 0

        first_unlock = amount * self.config.first_unlock_permille // PERMILLE
        linear_pool = amount - first_unlock

        if self.config.linear_unlocks_count == 0:
            # No ticks: the whole linear pool is released at the offset
            linear_started = (
                self.vested_time(at, for_batch2) >= self.config.linear_vesting_offset
            )
            return first_unlock + (linear_pool if linear_started else 0)

        unlocks = self.linear_unlocks_passed(at, for_batch2)
        vested = first_unlock + linear_pool * unlocks // self.config.linear_unlocks_count
        return min(amount, vested)

    def vesting_schedule(
        self,
        account: BeneficiaryAccount,
        now: Timestamp,
        for_batch2: bool = False,
    ) -> TokenAmount:
        """Matured part of the account's allocation on its own reference clock."""
        at = reference_time_for(account).resolve(now)
        return self.schedule_amount(account.total_allocation, at, for_batch2)

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    def breakdown(self, account: BeneficiaryAccount, now: Timestamp) -> ScheduleBreakdown:
        """
        Derive every bucket for ``account`` at ``now``.

        Penalties and early draws are consumed from the front of the
        schedule and attributed to the batches pro rata by
        ``batch1_permille``. The elimination forfeiture lies beyond the
        frozen schedule and is not deducted.

        Args:
            account: Beneficiary snapshot
            now: Current time supplied by the environment

        Returns:
            ScheduleBreakdown
        """
        at = reference_time_for(account).resolve(now)
        total = account.total_allocation

        v1 = self.schedule_amount(total, at, for_batch2=False)
        if account.has_batch2_delay and not account.is_eliminated:
            v2 = self.schedule_amount(total, at, for_batch2=True)
        else:
            v2 = v1

        front_fee = account.total_fee - account.elimination_fee
        unlocked = max(0, v1 - account.total_claimed - front_fee - account.total_burned)

        front = front_fee + account.total_burned + account.total_claimed_from_locked
        batch1 = self.config.batch1_permille
        entitled1 = max(0, v1 - front) * batch1 // PERMILLE
        entitled2 = max(0, v2 - front) * (PERMILLE - batch1) // PERMILLE

        # Batch2 is served first when the buckets together exceed ``unlocked``
        unlocked2 = min(unlocked, max(0, entitled2 - account.total_claimed_batch2))
        unlocked1 = min(unlocked - unlocked2, max(0, entitled1 - account.total_claimed_batch1))
        early_batch2 = unlocked - unlocked1 - unlocked2

        still_vesting = max(0, total - account.consumed - unlocked)

        if at < self.config.start_time + self.config.locked_claimable_tokens_offset:
            locked_gross = 0
        else:
            locked_gross = max(0, still_vesting - early_batch2)
        locked = locked_gross * (PERMILLE - self.config.burn_rate) // PERMILLE

        logger.debug(
            f"[{account.identity}] t={at} V1={v1} V2={v2} unlocked={unlocked} "
            f"b1={unlocked1} b2={unlocked2} early={early_batch2} locked={locked}"
        )

        return ScheduleBreakdown(
            reference_time=at,
            vesting_schedule=v1,
            batch2_schedule=v2,
            unlocked=unlocked,
            unlocked_batch1=unlocked1,
            unlocked_batch2=unlocked2,
            early_batch2=early_batch2,
            still_vesting=still_vesting,
            locked_gross=locked_gross,
            locked=locked,
        )

    def unlocked(self, account: BeneficiaryAccount, now: Timestamp) -> TokenAmount:
        return self.breakdown(account, now).unlocked

    def unlocked_batch1(self, account: BeneficiaryAccount, now: Timestamp) -> TokenAmount:
        return self.breakdown(account, now).unlocked_batch1

    def unlocked_batch2(self, account: BeneficiaryAccount, now: Timestamp) -> TokenAmount:
        return self.breakdown(account, now).unlocked_batch2

    def locked(self, account: BeneficiaryAccount, now: Timestamp) -> TokenAmount:
        """Net receivable amount of the early-claimable unvested remainder."""
        return self.breakdown(account, now).locked

    def locked_penalty(self, net_amount: TokenAmount) -> TokenAmount:
        """Penalty forfeited to receive ``net_amount`` from the locked pool."""
        if net_amount <= 0:
            return 0
        burn_rate = self.config.burn_rate
        # burn_rate == PERMILLE leaves a zero locked pool, so no net draw reaches here
        return net_amount * burn_rate // (PERMILLE - burn_rate)

    def unvested_remainder(self, account: BeneficiaryAccount, at: Timestamp) -> TokenAmount:
        """Part of the allocation not matured on the live clock at ``at``."""
        v1 = self.schedule_amount(account.total_allocation, at, for_batch2=False)
        return max(0, account.total_allocation - max(v1, account.consumed))

    def next_unlock_time(self, account: BeneficiaryAccount, now: Timestamp) -> Timestamp:
        """Timestamp of the next schedule tick after the reference time, 0 if none."""
        at = reference_time_for(account).resolve(now)
        config = self.config

        if at < config.start_time:
            return config.start_time
        if self.vested_time(at) < config.linear_vesting_offset:
            return config.start_time + config.linear_vesting_offset

        unlocks = self.linear_unlocks_passed(at)
        if unlocks < config.linear_unlocks_count:
            return (
                config.start_time
                + config.linear_vesting_offset
                + unlocks * config.linear_vesting_period
            )
        return 0
