"""Allocation ledger module."""

from .allocation_ledger import AllocationLedger, LedgerInconsistencyError

__all__ = ["AllocationLedger", "LedgerInconsistencyError"]
