"""DebtSage: multi-debt payoff projections."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .models import Debt, InvalidDebtInput, PayoffMethod, SimulationOutput, Strategy
from .services.debts import compare_strategies, simulate

__all__ = [
    "BaseConfig",
    "Debt",
    "DevConfig",
    "InvalidDebtInput",
    "PayoffMethod",
    "SimulationOutput",
    "Strategy",
    "compare_strategies",
    "simulate",
]
