"""Owner-only schedule and role settings."""

import logging

from ..core.config import VestingConfig
from ..core.types import Identity, Permille, Seconds
from .base import EngineComponent

logger = logging.getLogger(__name__)


class OwnerSettings(EngineComponent):
    """Applies owner changes to the shared schedule and the access gate."""

    def set_burn_rate(self, caller: Identity, burn_rate: Permille) -> VestingConfig:
        """Replace the burn rate; bounds are ``(0, 1000]``."""
        self._require_owner(caller)
        self.calculator.config = self.config.with_burn_rate(burn_rate)
        logger.info(f"Burn rate set to {burn_rate}")
        return self.config

    def set_locked_claimable_tokens_offset(self, caller: Identity, offset: Seconds) -> VestingConfig:
        self._require_owner(caller)
        self.calculator.config = self.config.with_locked_claimable_tokens_offset(offset)
        logger.info(f"Locked claimable tokens offset set to {offset}s")
        return self.config

    def set_manager(self, caller: Identity, manager: Identity | None) -> None:
        """Delegate (or revoke, with ``None``) the privileged manager role."""
        self._require_owner(caller)
        self.access.set_manager(manager)
