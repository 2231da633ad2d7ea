"""Vesting engine facade.

Composes the schedule calculator, the allocation ledger and the engine
components behind one object whose operations read "now" from the injected
clock. This is the surface the CLI and the reporting layer talk to.
"""

import logging

from .calculator.schedule import ScheduleBreakdown, ScheduleCalculator
from .core.config import VestingConfig
from .core.models import (
    BeneficiaryAccount,
    ClaimReceipt,
    CollectionReceipt,
    CollectorAccount,
    EliminationReceipt,
    EngineState,
    GlobalTotals,
)
from .core.types import Identity, Permille, Seconds, Timestamp, TokenAmount
from .engine import ClaimEngine, EliminationManager, FeeCollector, OwnerSettings, Registrar
from .ledger.allocation_ledger import AllocationLedger
from .providers.base import Clock, TokenLedger
from .providers.memory import InMemoryTokenLedger, RoleRegistry

logger = logging.getLogger(__name__)

DEFAULT_FEE_COLLECTORS: tuple[Identity, Identity] = ("fee-collector-a", "fee-collector-b")
DEFAULT_BURN_SINK: Identity = "burn-sink"


class VestingEngine:
    """Token vesting accounting engine."""

    def __init__(
        self,
        config: VestingConfig,
        owner: Identity,
        token_ledger: TokenLedger,
        clock: Clock,
        manager: Identity | None = None,
        fee_collectors: tuple[Identity, Identity] = DEFAULT_FEE_COLLECTORS,
        burn_sink: Identity = DEFAULT_BURN_SINK,
    ):
        """
        Initialize the engine.

        Args:
            config: Schedule parameters
            owner: Identity holding the owner role
            token_ledger: Ledger disbursements are made through
            clock: Source of the current time
            manager: Optional delegated manager
            fee_collectors: The two collector identities; the first starts active
            burn_sink: Identity receiving burned penalty value
        """
        self.clock = clock
        self.token_ledger = token_ledger
        self.access = RoleRegistry(owner, manager)
        self.burn_sink = burn_sink

        self.calculator = ScheduleCalculator(config)
        self.ledger = AllocationLedger(fee_collectors)

        parts = (self.ledger, self.calculator, self.token_ledger, self.access)
        self.registrar = Registrar(*parts)
        self.claims = ClaimEngine(*parts, burn_sink=burn_sink)
        self.elimination = EliminationManager(*parts)
        self.fee_collector = FeeCollector(*parts)
        self.settings = OwnerSettings(*parts)

    @property
    def config(self) -> VestingConfig:
        return self.calculator.config

    @property
    def owner(self) -> Identity:
        return self.access.owner

    @property
    def manager(self) -> Identity | None:
        return self.access.manager

    def now(self) -> Timestamp:
        return self.clock.now()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def whitelist(
        self,
        caller: Identity,
        beneficiaries: list[Identity],
        allocations: list[TokenAmount],
        batch2_delay_flags: list[bool],
        initial_fees: list[TokenAmount],
        is_final_batch: bool = False,
    ) -> list[BeneficiaryAccount]:
        return self.registrar.whitelist(
            caller, beneficiaries, allocations, batch2_delay_flags, initial_fees, is_final_batch
        )

    def claim(self, caller: Identity) -> ClaimReceipt:
        return self.claims.claim(caller, self.now())

    def claim_for(self, caller: Identity, beneficiary: Identity) -> ClaimReceipt:
        return self.claims.claim_for(caller, beneficiary, self.now())

    def claim_with_extra(self, caller: Identity, extra: TokenAmount) -> ClaimReceipt:
        return self.claims.claim_with_extra(caller, extra, self.now())

    def eliminate(self, caller: Identity, beneficiaries: list[Identity]) -> list[EliminationReceipt]:
        return self.elimination.eliminate(caller, beneficiaries, self.now())

    def collect_fees(
        self,
        caller: Identity,
        beneficiaries: list[Identity],
        max_amount: TokenAmount | None = None,
    ) -> CollectionReceipt:
        return self.fee_collector.collect_fees(caller, beneficiaries, self.now(), max_amount)

    def switch_fee_collectors(self, caller: Identity) -> CollectorAccount:
        return self.fee_collector.switch_fee_collectors(caller)

    # ------------------------------------------------------------------
    # Owner configuration
    # ------------------------------------------------------------------

    def set_burn_rate(self, caller: Identity, burn_rate: Permille) -> VestingConfig:
        return self.settings.set_burn_rate(caller, burn_rate)

    def set_locked_claimable_tokens_offset(self, caller: Identity, offset: Seconds) -> VestingConfig:
        return self.settings.set_locked_claimable_tokens_offset(caller, offset)

    def set_manager(self, caller: Identity, manager: Identity | None) -> None:
        self.settings.set_manager(caller, manager)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def account(self, identity: Identity) -> BeneficiaryAccount:
        return self.ledger.get(identity)

    def totals(self) -> GlobalTotals:
        return self.ledger.totals

    def collectors(self) -> list[CollectorAccount]:
        return self.ledger.collectors

    def breakdown(self, identity: Identity) -> ScheduleBreakdown:
        return self.calculator.breakdown(self.ledger.get(identity), self.now())

    def vesting_schedule(self, identity: Identity, for_batch2: bool = False) -> TokenAmount:
        return self.calculator.vesting_schedule(self.ledger.get(identity), self.now(), for_batch2)

    def locked(self, identity: Identity) -> TokenAmount:
        return self.breakdown(identity).locked

    def unlocked(self, identity: Identity) -> TokenAmount:
        return self.breakdown(identity).unlocked

    def unlocked_batch1(self, identity: Identity) -> TokenAmount:
        return self.breakdown(identity).unlocked_batch1

    def unlocked_batch2(self, identity: Identity) -> TokenAmount:
        return self.breakdown(identity).unlocked_batch2

    def early_batch2(self, identity: Identity) -> TokenAmount:
        return self.breakdown(identity).early_batch2

    def still_vesting(self, identity: Identity) -> TokenAmount:
        return self.breakdown(identity).still_vesting

    def next_unlock_time(self, identity: Identity) -> Timestamp:
        return self.calculator.next_unlock_time(self.ledger.get(identity), self.now())

    def vested_time(self, for_batch2: bool = False) -> int:
        return self.calculator.vested_time(self.now(), for_batch2)

    def linear_vested_time(self, for_batch2: bool = False) -> int:
        return self.calculator.linear_vested_time(self.now(), for_batch2)

    def linear_unlocks_passed(self, for_batch2: bool = False) -> int:
        return self.calculator.linear_unlocks_passed(self.now(), for_batch2)

    def collectible_fees(self, identity: Identity) -> TokenAmount:
        return self.fee_collector.collectible(self.ledger.get(identity), self.now())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_state(self) -> EngineState:
        """Snapshot the whole engine for persistence."""
        balances = {}
        if isinstance(self.token_ledger, InMemoryTokenLedger):
            balances = dict(self.token_ledger.balances)
        return EngineState(
            config=self.config,
            owner=self.owner,
            manager=self.manager,
            burn_sink=self.burn_sink,
            accounts=list(self.ledger),
            collectors=self.ledger.collectors,
            whitelisting_open=self.ledger.whitelisting_open,
            total_fee_collected=self.ledger.totals.total_fee_collected,
            balances=balances,
        )

    @classmethod
    def from_state(
        cls,
        state: EngineState,
        clock: Clock,
        token_ledger: TokenLedger | None = None,
    ) -> "VestingEngine":
        """
        Rebuild an engine from a snapshot.

        Running totals are re-derived from the accounts.

        Args:
            state: Persisted snapshot
            clock: Source of the current time
            token_ledger: Ledger to disburse through; defaults to an
                in-memory ledger seeded with the persisted balances
        """
        if token_ledger is None:
            token_ledger = InMemoryTokenLedger(state.balances)

        engine = cls(
            config=state.config,
            owner=state.owner,
            token_ledger=token_ledger,
            clock=clock,
            manager=state.manager,
            fee_collectors=tuple(c.identity for c in state.collectors) or DEFAULT_FEE_COLLECTORS,
            burn_sink=state.burn_sink,
        )
        engine.ledger.restore(state.accounts)
        if state.collectors:
            engine.ledger.restore_collectors(state.collectors)
        if not state.whitelisting_open:
            engine.ledger.close_whitelisting()

        logger.debug(f"Restored engine with {len(engine.ledger)} accounts")
        return engine
