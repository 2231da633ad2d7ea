"""Vesting schedule calculation module."""

from .schedule import (
    FrozenAt,
    Live,
    ReferenceTime,
    ScheduleBreakdown,
    ScheduleCalculator,
    reference_time_for,
)

__all__ = [
    "FrozenAt",
    "Live",
    "ReferenceTime",
    "ScheduleBreakdown",
    "ScheduleCalculator",
    "reference_time_for",
]
