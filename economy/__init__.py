"""Daily step economy: ledger state and the rules that drive it."""

from .coordinator import EconomyCoordinator
from .ledger import EconomyLedger

__all__ = ["EconomyCoordinator", "EconomyLedger"]
