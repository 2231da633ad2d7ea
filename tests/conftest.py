"""Pytest configuration and fixtures for token vesting engine tests."""

from decimal import Decimal

import pytest

from token_vesting.calculator.schedule import ScheduleCalculator
from token_vesting.core.config import VestingConfig
from token_vesting.core.types import DAY
from token_vesting.providers.memory import InMemoryTokenLedger, ManualClock
from token_vesting.vesting import VestingEngine

UNIT = 10**18
START = 1_700_000_000
OWNER = "owner"
MANAGER = "manager"


def units(amount: int | float | str) -> int:
    """Whole tokens (decimal strings allowed) to the smallest unit."""
    return int(Decimal(str(amount)) * UNIT)


def at_day(days: int | float) -> int:
    """Timestamp ``days`` after START."""
    return START + int(days * DAY)


@pytest.fixture
def daily_config() -> VestingConfig:
    """20% first unlock, then 200 daily ticks after a 90 day offset.

    Batch1 holds 30% and batch2 is delayed by 90 days. Unvested tokens are
    early-claimable from the start at an 80% burn rate.
    """
    return VestingConfig(
        start_time=START,
        first_unlock_permille=200,
        linear_vesting_offset=90 * DAY,
        linear_vesting_period=DAY,
        linear_unlocks_count=200,
        batch1_permille=300,
        batch2_delay=90 * DAY,
        locked_claimable_tokens_offset=0,
        burn_rate=800,
    )


@pytest.fixture
def monthly_config() -> VestingConfig:
    """10% first unlock, then 9 monthly ticks starting one month in."""
    return VestingConfig(
        start_time=START,
        first_unlock_permille=100,
        linear_vesting_offset=30 * DAY,
        linear_vesting_period=30 * DAY,
        linear_unlocks_count=9,
        batch1_permille=300,
        batch2_delay=90 * DAY,
        locked_claimable_tokens_offset=0,
        burn_rate=800,
    )


@pytest.fixture
def calculator(daily_config: VestingConfig) -> ScheduleCalculator:
    return ScheduleCalculator(daily_config)


@pytest.fixture
def clock() -> ManualClock:
    """Clock parked one hour before the vesting start."""
    return ManualClock(START - 3600)


@pytest.fixture
def token_ledger() -> InMemoryTokenLedger:
    ledger = InMemoryTokenLedger()
    ledger.fund(units(1_000_000))
    return ledger


@pytest.fixture
def make_engine(clock: ManualClock, token_ledger: InMemoryTokenLedger):
    """Factory building an engine over the shared clock and token ledger."""

    def _make(config: VestingConfig) -> VestingEngine:
        return VestingEngine(config, OWNER, token_ledger, clock, manager=MANAGER)

    return _make


@pytest.fixture
def engine(make_engine, daily_config: VestingConfig) -> VestingEngine:
    """Engine on the daily schedule with whitelisting still open."""
    return make_engine(daily_config)


@pytest.fixture
def delayed_engine(engine: VestingEngine) -> VestingEngine:
    """Daily engine with alice (5000, batch2 delayed) registered."""
    engine.whitelist(OWNER, ["alice"], [units(5000)], [True], [0], is_final_batch=True)
    return engine


@pytest.fixture
def undelayed_engine(engine: VestingEngine) -> VestingEngine:
    """Daily engine with bob (5000, no batch2 delay) registered."""
    engine.whitelist(OWNER, ["bob"], [units(5000)], [False], [0], is_final_batch=True)
    return engine
