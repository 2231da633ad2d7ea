"""Configuration management for vesting schedules and engine settings.

The vesting schedule is loaded from a YAML deployment file. Engine settings
(state file location, log level) come from environment variables or a .env file.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationInfo, field_validator

from .exceptions import ConfigurationError, InvalidParameterError
from .types import PERMILLE, Permille, Seconds, Timestamp

logger = logging.getLogger(__name__)

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)


def parse_duration(value: Any) -> Seconds:
    """
    Parse a duration into seconds.

    Accepts plain integers (seconds) or strings such as "90d", "12h", "30m".

    Args:
        value: Raw duration value

    Returns:
        Duration in seconds
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int):
        return value
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[(unit or "s").lower()]


class VestingConfig(BaseModel):
    """Schedule parameters shared by every beneficiary.

    Only ``burn_rate`` and ``locked_claimable_tokens_offset`` may change after
    construction, and only by replacing the model through the engine's owner
    mutators.
    """

    start_time: Timestamp
    first_unlock_permille: Permille = 0
    linear_vesting_offset: Seconds = 0
    linear_vesting_period: Seconds
    linear_unlocks_count: int = 0
    batch1_permille: Permille = PERMILLE
    batch2_delay: Seconds = 0
    locked_claimable_tokens_offset: Seconds = 0
    burn_rate: Permille = PERMILLE
    penalty_fee_share: Permille = PERMILLE  # Share of a locked-pool penalty kept as fee
    initial_fees_vest: bool = True  # Registration fees mature on the schedule

    model_config = {"frozen": True}

    @field_validator(
        "linear_vesting_offset",
        "linear_vesting_period",
        "batch2_delay",
        "locked_claimable_tokens_offset",
        mode="before",
    )
    @classmethod
    def parse_durations(cls, v: Any) -> Seconds:
        return parse_duration(v)

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: Timestamp) -> Timestamp:
        if v <= 0:
            raise ValueError(f"start_time must be a positive timestamp, got {v}")
        return v

    @field_validator("first_unlock_permille", "batch1_permille", "penalty_fee_share")
    @classmethod
    def validate_permille(cls, v: Permille, info: ValidationInfo) -> Permille:
        if v < 0 or v > PERMILLE:
            raise ValueError(f"{info.field_name} must be 0-{PERMILLE}, got {v}")
        return v

    @field_validator("burn_rate")
    @classmethod
    def validate_burn_rate(cls, v: Permille) -> Permille:
        if v <= 0 or v > PERMILLE:
            raise ValueError(f"burn_rate must be in (0, {PERMILLE}], got {v}")
        return v

    @field_validator("linear_vesting_period")
    @classmethod
    def validate_period(cls, v: Seconds) -> Seconds:
        if v <= 0:
            raise ValueError(f"linear_vesting_period must be positive, got {v}")
        return v

    @field_validator("linear_unlocks_count", "linear_vesting_offset", "batch2_delay", "locked_claimable_tokens_offset")
    @classmethod
    def validate_non_negative(cls, v: int, info: ValidationInfo) -> int:
        if v < 0:
            raise ValueError(f"{info.field_name} must not be negative, got {v}")
        return v

    @property
    def linear_vesting_end(self) -> Timestamp:
        """Timestamp of the last linear unlock on the undelayed clock."""
        ticks = max(self.linear_unlocks_count - 1, 0)
        return self.start_time + self.linear_vesting_offset + ticks * self.linear_vesting_period

    def with_burn_rate(self, burn_rate: Permille) -> "VestingConfig":
        """Return a copy with a new burn rate (bounds-checked)."""
        if burn_rate <= 0 or burn_rate > PERMILLE:
            raise InvalidParameterError(
                "burn_rate", str(burn_rate), f"must be in (0, {PERMILLE}]"
            )
        return self.model_copy(update={"burn_rate": burn_rate})

    def with_locked_claimable_tokens_offset(self, offset: Seconds) -> "VestingConfig":
        """Return a copy with a new locked-claimable offset."""
        if offset < 0:
            raise InvalidParameterError(
                "locked_claimable_tokens_offset", str(offset), "must not be negative"
            )
        return self.model_copy(update={"locked_claimable_tokens_offset": offset})

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "VestingConfig":
        """
        Load a schedule from a YAML deployment file.

        The file may either hold the fields at the top level or under a
        ``vesting`` key.

        Args:
            config_path: Path to the YAML file

        Returns:
            Validated VestingConfig
        """
        config_path = Path(config_path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigurationError(str(config_path), "file not found")
        except yaml.YAMLError as e:
            raise ConfigurationError(str(config_path), f"invalid YAML: {e}")

        if "vesting" in data:
            data = data["vesting"]

        try:
            config = cls.model_validate(data)
        except ValueError as e:
            raise ConfigurationError(str(config_path), str(e))

        logger.info(f"Loaded vesting config from {config_path}")
        return config


@dataclass
class EngineSettings:
    """Runtime settings for the CLI and persistence layer."""

    state_file: Path = Path("vesting_state.json")
    config_file: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Load settings from environment variables."""
        config_file = os.getenv("VESTING_CONFIG_FILE")
        return cls(
            state_file=Path(os.getenv("VESTING_STATE_FILE", "vesting_state.json")),
            config_file=Path(config_file) if config_file else None,
            log_level=os.getenv("VESTING_LOG_LEVEL", "INFO").upper(),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "EngineSettings":
        """
        Load settings from a .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the current directory.

        Returns:
            EngineSettings instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls.from_env()


# Global settings instance (lazy loaded)
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = EngineSettings.load()
    return _settings


def reload_settings(env_file: Optional[Path] = None) -> EngineSettings:
    """Reload settings from environment."""
    global _settings
    _settings = EngineSettings.load(env_file)
    return _settings
