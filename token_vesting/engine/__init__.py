"""Engine components mutating the allocation ledger."""

from .claims import ClaimEngine
from .collection import FeeCollector
from .elimination import EliminationManager
from .registration import Registrar
from .settings import OwnerSettings

__all__ = ["ClaimEngine", "FeeCollector", "EliminationManager", "Registrar", "OwnerSettings"]
