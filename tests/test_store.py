"""Tests for JSON persistence of engine state."""

from pathlib import Path

import pytest

from token_vesting.core.exceptions import ConfigurationError
from token_vesting.providers.memory import ManualClock
from token_vesting.storage.json_store import EngineStore
from token_vesting.vesting import VestingEngine

from conftest import OWNER, START, at_day, units


class TestEngineStore:
    """Tests for EngineStore save/load."""

    def test_load_missing_returns_none(self, tmp_path: Path):
        store = EngineStore(tmp_path / "state.json")
        assert store.exists() is False
        assert store.load() is None

    def test_round_trip_restores_engine(self, delayed_engine, clock, tmp_path: Path):
        clock.set(at_day(160))
        delayed_engine.claim_with_extra("alice", units(994))
        # The 994 forfeited sits past tick 71; ten more ticks release 200 of it
        clock.set(at_day(170))
        delayed_engine.collect_fees(OWNER, ["alice"])
        delayed_engine.switch_fee_collectors(OWNER)

        store = EngineStore(tmp_path / "nested" / "state.json")
        store.save(delayed_engine.to_state())
        restored = VestingEngine.from_state(store.load(), ManualClock(at_day(170)))

        assert restored.config == delayed_engine.config
        assert restored.account("alice") == delayed_engine.account("alice")
        assert restored.totals() == delayed_engine.totals()
        assert restored.collectors() == delayed_engine.collectors()
        assert restored.ledger.active_collector.identity == "fee-collector-b"
        assert restored.token_ledger.balance_of("alice") == units(2420)
        assert restored.unlocked("alice") == delayed_engine.unlocked("alice")
        restored.ledger.reconcile()

    def test_whitelisting_state_persisted(self, delayed_engine, tmp_path: Path):
        store = EngineStore(tmp_path / "state.json")
        store.save(delayed_engine.to_state())
        restored = VestingEngine.from_state(store.load(), ManualClock(START))
        assert restored.totals().whitelisting_open is False

    def test_corrupt_file(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            EngineStore(path).load()

    def test_delete(self, delayed_engine, tmp_path: Path):
        store = EngineStore(tmp_path / "state.json")
        store.save(delayed_engine.to_state())
        assert store.delete() is True
        assert store.delete() is False
