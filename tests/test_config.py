"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from token_vesting.core import config as config_module
from token_vesting.core.config import (
    EngineSettings,
    get_settings,
    VestingConfig,
    parse_duration,
    reload_settings,
)
from token_vesting.core.exceptions import ConfigurationError
from token_vesting.core.types import DAY

from conftest import START

ENV_VARS = ("VESTING_STATE_FILE", "VESTING_CONFIG_FILE", "VESTING_LOG_LEVEL")

SCHEDULE_YAML = f"""
vesting:
  start_time: {START}
  first_unlock_permille: 200
  linear_vesting_offset: 90d
  linear_vesting_period: 1d
  linear_unlocks_count: 200
  batch1_permille: 300
  batch2_delay: 90d
  burn_rate: 800
"""


class TestParseDuration:
    """Tests for duration parsing."""

    def test_plain_seconds(self):
        assert parse_duration(3600) == 3600
        assert parse_duration("45") == 45

    def test_suffixes(self):
        assert parse_duration("90d") == 90 * DAY
        assert parse_duration("12h") == 12 * 3600
        assert parse_duration("30m") == 1800
        assert parse_duration("2w") == 14 * DAY

    @pytest.mark.parametrize("value", ["", "ten days", "5y", True, "-3d"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestVestingConfig:
    """Tests for VestingConfig validation."""

    def test_defaults(self):
        config = VestingConfig(start_time=START, linear_vesting_period="1d")
        assert config.batch1_permille == 1000
        assert config.burn_rate == 1000
        assert config.penalty_fee_share == 1000
        assert config.initial_fees_vest is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"first_unlock_permille": 1001},
            {"batch1_permille": -1},
            {"burn_rate": 0},
            {"burn_rate": 1001},
            {"linear_vesting_period": 0},
            {"linear_unlocks_count": -1},
            {"start_time": 0},
        ],
    )
    def test_rejects_out_of_bounds(self, overrides):
        fields = {"start_time": START, "linear_vesting_period": DAY, **overrides}
        with pytest.raises(ValidationError):
            VestingConfig(**fields)

    def test_frozen(self):
        config = VestingConfig(start_time=START, linear_vesting_period=DAY)
        with pytest.raises(ValidationError):
            config.burn_rate = 10

    def test_linear_vesting_end(self, daily_config):
        assert daily_config.linear_vesting_end == START + 90 * DAY + 199 * DAY


class TestFromYaml:
    """Tests for loading a schedule from YAML."""

    def test_loads_nested_vesting_key(self, tmp_path: Path):
        path = tmp_path / "vesting.yaml"
        path.write_text(SCHEDULE_YAML)

        config = VestingConfig.from_yaml(path)

        assert config.linear_vesting_offset == 90 * DAY
        assert config.batch2_delay == 90 * DAY
        assert config.linear_unlocks_count == 200

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            VestingConfig.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_values(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text(f"start_time: {START}\nlinear_vesting_period: 1d\nburn_rate: 0\n")
        with pytest.raises(ConfigurationError):
            VestingConfig.from_yaml(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("vesting: [unclosed\n")
        with pytest.raises(ConfigurationError):
            VestingConfig.from_yaml(path)


class TestEngineSettings:
    """Tests for environment-driven settings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        """Drop VESTING_* variables and the cached settings for the test only."""
        for name in ENV_VARS:
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        monkeypatch.setattr(config_module, "_settings", None)

    def test_defaults(self):
        settings = EngineSettings.from_env()
        assert settings.state_file == Path("vesting_state.json")
        assert settings.config_file is None
        assert settings.log_level == "INFO"

    def test_from_env_file(self, tmp_path: Path):
        env_file = tmp_path / ".env"
        env_file.write_text("VESTING_STATE_FILE=/tmp/state.json\nVESTING_LOG_LEVEL=debug\n")

        settings = reload_settings(env_file)

        assert settings.state_file == Path("/tmp/state.json")
        assert settings.log_level == "DEBUG"
        assert get_settings() is settings
