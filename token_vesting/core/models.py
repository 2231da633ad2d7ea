"""Pydantic data models for the vesting engine.

Accounts are immutable (frozen) snapshots. Operations build the updated
snapshot with ``model_copy`` and hand it to the ledger, which swaps it in
together with the running aggregates, so a failed operation never leaves a
half-written account behind.
"""

from pydantic import BaseModel, Field, field_validator

from .config import VestingConfig
from .types import AccountStatus, Identity, Timestamp, TokenAmount


class FeeTranche(BaseModel):
    """
    Fee taken out of the unvested tail of an allocation.

    The tranche occupies schedule positions ``[position, position + amount)``
    of the allocation and matures as the live schedule passes them.
    """

    position: TokenAmount
    amount: TokenAmount

    model_config = {"frozen": True}

    def matured(self, vested: TokenAmount) -> TokenAmount:
        """Part of the tranche the schedule has passed once ``vested`` has matured."""
        return min(self.amount, max(0, vested - self.position))


class BeneficiaryAccount(BaseModel):
    """Per-beneficiary allocation and running counters."""

    identity: Identity
    has_batch2_delay: bool = False
    eliminated_at: Timestamp = 0  # 0 while active
    total_allocation: TokenAmount = 0
    total_fee: TokenAmount = 0
    total_burned: TokenAmount = 0
    total_claimed: TokenAmount = 0
    total_claimed_batch1: TokenAmount = 0
    total_claimed_batch2: TokenAmount = 0
    total_claimed_from_locked: TokenAmount = 0
    initial_fee: TokenAmount = 0  # Fee baked in at registration
    elimination_fee: TokenAmount = 0  # Tail forfeited by elimination
    fee_collected: TokenAmount = 0
    fee_tranches: tuple[FeeTranche, ...] = ()  # Penalty and elimination fee, in booking order

    model_config = {"frozen": True}

    @field_validator(
        "eliminated_at",
        "total_allocation",
        "total_fee",
        "total_burned",
        "total_claimed",
        "total_claimed_batch1",
        "total_claimed_batch2",
        "total_claimed_from_locked",
        "initial_fee",
        "elimination_fee",
        "fee_collected",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Counters must not be negative, got {v}")
        return v

    @property
    def status(self) -> AccountStatus:
        """Lifecycle state derived from ``eliminated_at``."""
        return AccountStatus.ELIMINATED if self.eliminated_at else AccountStatus.ACTIVE

    @property
    def is_eliminated(self) -> bool:
        return self.eliminated_at != 0

    @property
    def consumed(self) -> TokenAmount:
        """Allocation already accounted for as claimed, fee or burn."""
        return self.total_claimed + self.total_fee + self.total_burned

    @property
    def headroom(self) -> TokenAmount:
        """Allocation not yet claimed, fee or burned."""
        return max(0, self.total_allocation - self.consumed)

    def with_tail_fee(self, amount: TokenAmount, vested: TokenAmount) -> tuple[FeeTranche, ...]:
        """
        Tranches after booking ``amount`` of tail fee with ``vested`` matured.

        The tranche starts where the schedule stands, moved down so that it
        ends no later than the allocation does.
        """
        if amount <= 0:
            return self.fee_tranches
        position = max(0, min(vested, self.total_allocation - amount))
        return self.fee_tranches + (FeeTranche(position=position, amount=amount),)


class CollectorAccount(BaseModel):
    """Running tally of fees disbursed to one fee-collector identity."""

    identity: Identity
    total_collected: TokenAmount = 0
    is_active: bool = False

    model_config = {"frozen": True}

    def hand_off(self, successor: "CollectorAccount") -> tuple["CollectorAccount", "CollectorAccount"]:
        """
        Move this collector's tally onto ``successor`` and make it active.

        Returns:
            (vacated, successor) with the vacated record zeroed
        """
        vacated = self.model_copy(update={"total_collected": 0, "is_active": False})
        taken_over = successor.model_copy(
            update={
                "total_collected": successor.total_collected + self.total_collected,
                "is_active": True,
            }
        )
        return vacated, taken_over


class GlobalTotals(BaseModel):
    """Aggregates across every beneficiary account."""

    total_allocated: TokenAmount = 0
    total_fee: TokenAmount = 0
    total_claimed: TokenAmount = 0
    total_burned: TokenAmount = 0
    total_fee_collected: TokenAmount = 0
    whitelisting_open: bool = True

    model_config = {"frozen": True}

    @property
    def uncollected_fee(self) -> TokenAmount:
        """Fee recorded but not yet collected (includes fee still maturing)."""
        return self.total_fee - self.total_fee_collected


class ClaimReceipt(BaseModel):
    """Outcome of a successful claim."""

    beneficiary: Identity
    timestamp: Timestamp
    amount: TokenAmount  # Total disbursed to the beneficiary
    from_batch1: TokenAmount = 0
    from_batch2: TokenAmount = 0
    from_early_batch2: TokenAmount = 0
    from_locked: TokenAmount = 0
    fee: TokenAmount = 0
    burned: TokenAmount = 0

    model_config = {"frozen": True}


class EliminationReceipt(BaseModel):
    """Forfeiture recorded for one eliminated beneficiary."""

    beneficiary: Identity
    eliminated_at: Timestamp
    forfeited: TokenAmount

    model_config = {"frozen": True}


class CollectionReceipt(BaseModel):
    """Outcome of a fee collection run."""

    collector: Identity
    timestamp: Timestamp
    amount: TokenAmount
    per_beneficiary: dict[Identity, TokenAmount] = Field(default_factory=dict)

    model_config = {"frozen": True}


class BeneficiaryReport(BaseModel):
    """Consolidated read-only view of one beneficiary."""

    beneficiary: Identity
    timestamp: Timestamp
    status: AccountStatus
    total_allocation: TokenAmount
    total_unlocked: TokenAmount  # Claimed plus currently unlocked
    total_claimed: TokenAmount
    total_fee: TokenAmount
    total_burned: TokenAmount
    upcoming_claimable: TokenAmount  # Growth of ``unlocked`` at the next tick
    still_vesting: TokenAmount
    min_claimable: TokenAmount  # Penalty-free claim
    max_claimable: TokenAmount  # Including early batch2 and locked pool
    locked: TokenAmount
    next_unlock_time: Timestamp  # 0 once the schedule is exhausted

    model_config = {"frozen": True}


class EngineState(BaseModel):
    """Serializable snapshot of the whole engine."""

    config: VestingConfig
    owner: Identity
    manager: Identity | None = None
    burn_sink: Identity
    accounts: list[BeneficiaryAccount] = Field(default_factory=list)
    collectors: list[CollectorAccount] = Field(default_factory=list)
    whitelisting_open: bool = True
    total_fee_collected: TokenAmount = 0
    balances: dict[Identity, TokenAmount] = Field(default_factory=dict)
