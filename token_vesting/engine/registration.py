"""Allocation registration (whitelisting)."""

import logging
from collections import Counter

from ..core.exceptions import (
    AlreadyRegisteredError,
    InvalidParameterError,
    WindowClosedError,
)
from ..core.models import BeneficiaryAccount
from ..core.types import Identity, TokenAmount
from .base import EngineComponent

logger = logging.getLogger(__name__)


class Registrar(EngineComponent):
    """Creates beneficiary accounts in owner-submitted batches."""

    def whitelist(
        self,
        caller: Identity,
        beneficiaries: list[Identity],
        allocations: list[TokenAmount],
        batch2_delay_flags: list[bool],
        initial_fees: list[TokenAmount],
        is_final_batch: bool = False,
    ) -> list[BeneficiaryAccount]:
        """
        Register a batch of beneficiaries.

        Args:
            caller: Owner
            beneficiaries: New identities
            allocations: Total allocation per identity
            batch2_delay_flags: Whether batch2 is released on the delayed clock
            initial_fees: Fee baked into each allocation at grant time
            is_final_batch: Close registration for good after this batch

        Returns:
            The created accounts
        """
        self._require_owner(caller)
        if not self.ledger.whitelisting_open:
            raise WindowClosedError("whitelisting")

        lengths = {len(beneficiaries), len(allocations), len(batch2_delay_flags), len(initial_fees)}
        if len(lengths) != 1:
            raise InvalidParameterError(
                "beneficiaries",
                str(len(beneficiaries)),
                "batched array lengths differ",
            )

        for identity, allocation, initial_fee in zip(beneficiaries, allocations, initial_fees):
            if allocation < 0:
                raise InvalidParameterError(f"allocations[{identity}]", str(allocation), "must not be negative")
            if initial_fee < 0 or initial_fee > allocation:
                raise InvalidParameterError(
                    f"initial_fees[{identity}]", str(initial_fee), "must be within 0..allocation"
                )

        repeated = [b for b, n in Counter(beneficiaries).items() if n > 1]
        already = [b for b in beneficiaries if b in self.ledger]
        if already or repeated:
            raise AlreadyRegisteredError(sorted(set(already + repeated)))

        accounts = [
            BeneficiaryAccount(
                identity=identity,
                total_allocation=allocation,
                has_batch2_delay=has_delay,
                total_fee=initial_fee,
                initial_fee=initial_fee,
            )
            for identity, allocation, has_delay, initial_fee in zip(
                beneficiaries, allocations, batch2_delay_flags, initial_fees
            )
        ]
        self.ledger.commit(accounts)
        if is_final_batch:
            self.ledger.close_whitelisting()

        logger.info(
            f"Whitelisted {len(accounts)} beneficiaries "
            f"({sum(allocations)} tokens, final={is_final_batch})"
        )
        return accounts
