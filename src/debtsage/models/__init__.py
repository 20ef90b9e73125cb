"""Simulation input and output types."""

from .debt import Debt, InvalidDebtInput, PayoffMethod, Strategy, to_decimal
from .results import (
    AggregateStats,
    DebtWarning,
    OutstandingDebt,
    PayoffResult,
    Savings,
    SimulationOutput,
    to_cents,
)

__all__ = [
    "AggregateStats",
    "Debt",
    "DebtWarning",
    "InvalidDebtInput",
    "OutstandingDebt",
    "PayoffMethod",
    "PayoffResult",
    "Savings",
    "SimulationOutput",
    "Strategy",
    "to_cents",
    "to_decimal",
]
