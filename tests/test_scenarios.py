"""End-to-end vesting scenarios on the daily and monthly schedules."""

import pytest

from conftest import OWNER, START, at_day, units


class TestDailyScheduleWithDelay:
    """5000 tokens, 20% first unlock, 200 daily ticks, batch2 delayed 90 days."""

    def test_penalty_free_claims_to_completion(self, delayed_engine, clock):
        clock.set(START)
        assert delayed_engine.vesting_schedule("alice") == units(1000)
        assert delayed_engine.unlocked_batch1("alice") == units(300)
        assert delayed_engine.unlocked_batch2("alice") == 0

        clock.set(at_day(160))
        assert delayed_engine.vesting_schedule("alice") == units(2420)
        assert delayed_engine.locked("alice") == units("317.2")
        assert delayed_engine.unlocked("alice") == units(2420)
        assert delayed_engine.unlocked_batch1("alice") == units(726)
        assert delayed_engine.unlocked_batch2("alice") == units(700)
        delayed_engine.claim("alice")
        assert delayed_engine.account("alice").total_claimed == units(1426)
        assert delayed_engine.account("alice").total_fee == 0

        clock.set(at_day(230))
        assert delayed_engine.vesting_schedule("alice") == units(3820)
        assert delayed_engine.locked("alice") == 0
        assert delayed_engine.unlocked("alice") == units(2394)
        assert delayed_engine.unlocked_batch1("alice") == units(420)
        assert delayed_engine.unlocked_batch2("alice") == units(714)
        delayed_engine.claim("alice")
        assert delayed_engine.account("alice").total_claimed == units(2560)

        clock.set(at_day(300))
        assert delayed_engine.unlocked_batch1("alice") == units(354)
        assert delayed_engine.unlocked_batch2("alice") == units(980)
        delayed_engine.claim_with_extra("alice", units(1106))

        alice = delayed_engine.account("alice")
        assert alice.total_claimed == units(5000)
        assert alice.total_fee == 0

    def test_claiming_early_batch2_every_time(self, delayed_engine, clock):
        clock.set(at_day(160))
        delayed_engine.claim_with_extra("alice", units(994))
        alice = delayed_engine.account("alice")
        assert alice.total_claimed == units(2420)
        assert alice.total_fee == units(994)

        clock.set(at_day(230))
        assert delayed_engine.unlocked("alice") == units(406)
        assert delayed_engine.unlocked_batch1("alice") == units("121.8")
        assert delayed_engine.unlocked_batch2("alice") == 0
        assert delayed_engine.locked("alice") == units("179.16")
        delayed_engine.claim_with_extra("alice", units(384))
        alice = delayed_engine.account("alice")
        assert alice.total_claimed == units("2925.8")
        assert alice.total_fee == units("1677.4")

        clock.set(at_day(300))
        assert delayed_engine.unlocked("alice") == units("396.8")
        assert delayed_engine.unlocked_batch1("alice") == units("119.04")
        delayed_engine.claim_with_extra("alice", units(277))
        alice = delayed_engine.account("alice")
        assert alice.total_claimed == units("3321.84")
        assert alice.total_fee == units("1678.16")


class TestDailyScheduleWithoutDelay:
    """Same schedule; batch2 follows the undelayed clock."""

    def test_batch2_released_with_batch1(self, undelayed_engine, clock):
        clock.set(at_day(160))
        assert undelayed_engine.locked("bob") == units(516)
        assert undelayed_engine.unlocked_batch1("bob") == units(726)
        assert undelayed_engine.unlocked_batch2("bob") == units(1694)

    def test_elimination_after_claim(self, undelayed_engine, clock):
        clock.set(at_day(160))
        undelayed_engine.claim("bob")
        assert undelayed_engine.account("bob").total_claimed == units(2420)

        clock.set(at_day(230))
        undelayed_engine.eliminate(OWNER, ["bob"])

        bob = undelayed_engine.account("bob")
        assert bob.total_fee == units(1180)
        assert undelayed_engine.unlocked("bob") == units(1400)
        assert undelayed_engine.unlocked_batch1("bob") == units(420)
        assert undelayed_engine.unlocked_batch2("bob") == units(980)

        clock.set(at_day(400))
        assert undelayed_engine.unlocked("bob") == units(1400)
        assert undelayed_engine.unlocked_batch1("bob") == units(420)
        assert undelayed_engine.unlocked_batch2("bob") == units(980)

        undelayed_engine.claim("bob")
        bob = undelayed_engine.account("bob")
        assert bob.total_claimed + bob.total_fee == units(5000)


class TestMonthlySchedule:
    """10% first unlock, then 9 monthly ticks from one month after start."""

    @pytest.fixture
    def monthly_engine(self, make_engine, monthly_config):
        engine = make_engine(monthly_config)
        engine.whitelist(OWNER, ["carol"], [units(5000)], [True], [0], is_final_batch=True)
        return engine

    def test_monthly_claims(self, monthly_engine, clock):
        clock.set(at_day(30))
        assert monthly_engine.vesting_schedule("carol") == units(1000)
        assert monthly_engine.locked("carol") == units(660)
        assert monthly_engine.unlocked_batch1("carol") == units(300)
        monthly_engine.claim_with_extra("carol", units(100))
        carol = monthly_engine.account("carol")
        assert carol.total_claimed == units(400)
        assert carol.total_fee == units(100)

        clock.set(at_day(120))
        assert monthly_engine.vesting_schedule("carol") == units(2500)
        assert monthly_engine.locked("carol") == units(290)
        assert monthly_engine.unlocked("carol") == units(2000)
        assert monthly_engine.unlocked_batch1("carol") == units(420)
        assert monthly_engine.unlocked_batch2("carol") == units(530)
        monthly_engine.claim_with_extra("carol", units(1340))
        carol = monthly_engine.account("carol")
        assert carol.total_claimed == units(2690)
        assert carol.total_fee == units(2310)
