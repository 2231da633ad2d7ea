"""Allocation ledger: beneficiary accounts, collectors and running totals.

Accounts are the single source of truth. The global totals are O(1) running
aggregates that are adjusted by the difference between the old and new
snapshot every time an account is committed, and can be re-derived with
``reconcile`` at any point.
"""

import logging
from typing import Iterable, Iterator

from ..core.exceptions import InvalidParameterError, VestingError
from ..core.models import BeneficiaryAccount, CollectorAccount, GlobalTotals
from ..core.types import Identity, TokenAmount

logger = logging.getLogger(__name__)

_AGGREGATED_FIELDS = {
    "total_allocated": "total_allocation",
    "total_fee": "total_fee",
    "total_claimed": "total_claimed",
    "total_burned": "total_burned",
    "total_fee_collected": "fee_collected",
}


class LedgerInconsistencyError(VestingError):
    """Raised when running totals disagree with the accounts they aggregate."""

    def __init__(self, field: str, running: int, derived: int):
        message = f"Running total {field}={running} differs from accounts ({derived})"
        super().__init__(message, {"field": field, "running": running, "derived": derived})


class AllocationLedger:
    """Holds every beneficiary account and the two fee-collector tallies."""

    def __init__(self, fee_collectors: tuple[Identity, Identity]):
        """
        Initialize an empty ledger.

        Args:
            fee_collectors: The two collector identities; the first starts active
        """
        primary, secondary = fee_collectors
        if primary == secondary:
            raise InvalidParameterError(
                "fee_collectors", f"{primary},{secondary}", "collectors must differ"
            )

        self._accounts: dict[Identity, BeneficiaryAccount] = {}
        self._running: dict[str, TokenAmount] = {name: 0 for name in _AGGREGATED_FIELDS}
        self._whitelisting_open = True
        self._collectors: dict[Identity, CollectorAccount] = {
            primary: CollectorAccount(identity=primary, is_active=True),
            secondary: CollectorAccount(identity=secondary),
        }

    # ------------------------------------------------------------------
    # Beneficiary accounts
    # ------------------------------------------------------------------

    def __contains__(self, identity: Identity) -> bool:
        return identity in self._accounts

    def __iter__(self) -> Iterator[BeneficiaryAccount]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def get(self, identity: Identity) -> BeneficiaryAccount:
        """Return the account, or a zeroed one for an unknown identity."""
        account = self._accounts.get(identity)
        if account is None:
            return BeneficiaryAccount(identity=identity)
        return account

    def commit(self, accounts: Iterable[BeneficiaryAccount]) -> None:
        """
        Swap in updated account snapshots and adjust the running totals.

        Callers validate everything before committing; this step cannot fail
        part-way.

        Args:
            accounts: New snapshots, keyed by their ``identity``
        """
        for account in accounts:
            previous = self.get(account.identity)
            for total_name, field in _AGGREGATED_FIELDS.items():
                delta = getattr(account, field) - getattr(previous, field)
                self._running[total_name] += delta
            self._accounts[account.identity] = account

    def restore(self, accounts: Iterable[BeneficiaryAccount]) -> None:
        """Load previously persisted accounts (running totals follow)."""
        self.commit(accounts)

    # ------------------------------------------------------------------
    # Global state
    # ------------------------------------------------------------------

    @property
    def whitelisting_open(self) -> bool:
        return self._whitelisting_open

    def close_whitelisting(self) -> None:
        if self._whitelisting_open:
            logger.info("Whitelisting closed")
        self._whitelisting_open = False

    @property
    def totals(self) -> GlobalTotals:
        """Snapshot of the running aggregates."""
        return GlobalTotals(whitelisting_open=self._whitelisting_open, **self._running)

    def reconcile(self) -> GlobalTotals:
        """
        Re-derive the totals from the accounts and compare.

        Returns:
            The derived totals

        Raises:
            LedgerInconsistencyError: If a running total has diverged
        """
        derived = {
            total_name: sum(getattr(a, field) for a in self._accounts.values())
            for total_name, field in _AGGREGATED_FIELDS.items()
        }
        for total_name, value in derived.items():
            if self._running[total_name] != value:
                raise LedgerInconsistencyError(total_name, self._running[total_name], value)
        return GlobalTotals(whitelisting_open=self._whitelisting_open, **derived)

    # ------------------------------------------------------------------
    # Fee collectors
    # ------------------------------------------------------------------

    @property
    def collectors(self) -> list[CollectorAccount]:
        return list(self._collectors.values())

    @property
    def active_collector(self) -> CollectorAccount:
        return next(c for c in self._collectors.values() if c.is_active)

    @property
    def standby_collector(self) -> CollectorAccount:
        return next(c for c in self._collectors.values() if not c.is_active)

    def record_collection(self, amount: TokenAmount) -> CollectorAccount:
        """Add ``amount`` to the active collector's running tally."""
        active = self.active_collector
        updated = active.model_copy(update={"total_collected": active.total_collected + amount})
        self._collectors[updated.identity] = updated
        return updated

    def switch_collectors(self) -> CollectorAccount:
        """
        Hand the active collector's tally over to the standby collector.

        Returns:
            The newly active collector
        """
        vacated, taken_over = self.active_collector.hand_off(self.standby_collector)
        self._collectors[vacated.identity] = vacated
        self._collectors[taken_over.identity] = taken_over
        return taken_over

    def restore_collectors(self, collectors: Iterable[CollectorAccount]) -> None:
        """Replace both collector records with persisted ones."""
        restored = {c.identity: c for c in collectors}
        if len(restored) != 2 or sum(c.is_active for c in restored.values()) != 1:
            raise InvalidParameterError(
                "collectors", ",".join(restored), "need exactly two, one active"
            )
        self._collectors = restored
