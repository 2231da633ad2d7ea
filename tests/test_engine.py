"""Tests for the VestingEngine facade: owner mutators and read accessors."""

import pytest

from token_vesting.core.exceptions import InvalidParameterError, NotAuthorizedError
from token_vesting.core.types import DAY
from token_vesting.providers.memory import VAULT, InMemoryTokenLedger, InsufficientFundsError

from conftest import MANAGER, OWNER, START, at_day, units


class TestOwnerConfiguration:
    """Tests for set_burn_rate / set_locked_claimable_tokens_offset / set_manager."""

    @pytest.mark.parametrize("rate", [0, 1001, -5])
    def test_burn_rate_out_of_bounds(self, engine, rate):
        with pytest.raises(InvalidParameterError):
            engine.set_burn_rate(OWNER, rate)
        assert engine.config.burn_rate == 800

    def test_burn_rate_changes_locked(self, undelayed_engine, clock):
        clock.set(at_day(160))
        assert undelayed_engine.locked("bob") == units(516)
        undelayed_engine.set_burn_rate(OWNER, 500)
        assert undelayed_engine.locked("bob") == units(1290)
        assert undelayed_engine.claims.config.burn_rate == 500

    def test_burn_rate_owner_only(self, engine):
        with pytest.raises(NotAuthorizedError):
            engine.set_burn_rate(MANAGER, 500)

    def test_locked_offset(self, undelayed_engine, clock):
        undelayed_engine.set_locked_claimable_tokens_offset(OWNER, 100 * DAY)
        clock.set(at_day(99))
        assert undelayed_engine.locked("bob") == 0
        clock.set(at_day(100))
        assert undelayed_engine.locked("bob") > 0

    def test_locked_offset_negative(self, engine):
        with pytest.raises(InvalidParameterError):
            engine.set_locked_claimable_tokens_offset(OWNER, -1)

    def test_set_manager(self, delayed_engine, clock):
        clock.set(at_day(100))
        delayed_engine.set_manager(OWNER, "ops")

        with pytest.raises(NotAuthorizedError):
            delayed_engine.eliminate(MANAGER, ["alice"])
        delayed_engine.eliminate("ops", ["alice"])
        assert delayed_engine.account("alice").is_eliminated

    def test_set_manager_owner_only(self, engine):
        with pytest.raises(NotAuthorizedError):
            engine.set_manager(MANAGER, "ops")

    def test_settings_component_shares_calculator(self, engine):
        engine.settings.set_burn_rate(OWNER, 600)
        assert engine.claims.config.burn_rate == 600

        with pytest.raises(NotAuthorizedError) as exc_info:
            engine.settings.set_burn_rate(MANAGER, 500)
        assert exc_info.value.caller == MANAGER
        assert engine.config.burn_rate == 600


class TestReadAccessors:
    """Read accessors never mutate state."""

    def test_time_accessors(self, engine, clock):
        clock.set(at_day(160))
        assert engine.vested_time() == 160 * DAY
        assert engine.vested_time(for_batch2=True) == 70 * DAY
        assert engine.linear_vested_time() == 70 * DAY
        assert engine.linear_unlocks_passed() == 71
        assert engine.linear_unlocks_passed(for_batch2=True) == 0

    def test_accessors_are_side_effect_free(self, delayed_engine, clock):
        clock.set(at_day(160))
        before = delayed_engine.to_state()
        delayed_engine.unlocked("alice")
        delayed_engine.locked("alice")
        delayed_engine.early_batch2("alice")
        delayed_engine.still_vesting("alice")
        delayed_engine.next_unlock_time("alice")
        delayed_engine.collectible_fees("alice")
        assert delayed_engine.to_state() == before

    def test_early_batch2_and_still_vesting(self, delayed_engine, clock):
        clock.set(at_day(160))
        assert delayed_engine.early_batch2("alice") == units(994)
        assert delayed_engine.still_vesting("alice") == units(2580)
        assert delayed_engine.next_unlock_time("alice") == at_day(161)

    def test_before_start(self, delayed_engine):
        assert delayed_engine.unlocked("alice") == 0
        assert delayed_engine.next_unlock_time("alice") == START


class TestManualClock:
    """The engine reads every operation's time from the injected clock."""

    def test_advance_moves_engine_time(self, engine, clock):
        clock.set(START)
        clock.advance(160 * DAY)
        assert engine.now() == at_day(160)
        assert engine.linear_unlocks_passed() == 71

    def test_never_moves_backwards(self, clock):
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(START - 7200)


class TestInMemoryTokenLedger:
    """Batch disbursement through the in-memory vault."""

    def test_transfer_many_moves_every_amount(self):
        vault = InMemoryTokenLedger()
        vault.fund(units(500))

        vault.transfer_many([("bob", units(300)), ("burn-sink", units(200))])

        assert vault.balance_of("bob") == units(300)
        assert vault.balance_of("burn-sink") == units(200)
        assert vault.balance_of(VAULT) == 0

    def test_transfer_many_checks_whole_batch_first(self):
        vault = InMemoryTokenLedger()
        vault.fund(units(500))

        with pytest.raises(InsufficientFundsError) as exc_info:
            vault.transfer_many([("bob", units(300)), ("burn-sink", units(201))])

        assert exc_info.value.requested == units(501)
        assert vault.balance_of("bob") == 0
        assert vault.balance_of(VAULT) == units(500)
        assert vault.get_transfers() == []
