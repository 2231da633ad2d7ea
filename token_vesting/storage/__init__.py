"""Persistence for engine snapshots."""

from .json_store import EngineStore

__all__ = ["EngineStore"]
