"""Pytest configuration and shared fixtures for DebtSage tests.

This module provides debt factories, ready-made debt portfolios, and helper
utilities for testing the payoff simulator and its adapters without touching
real configuration or log directories.
"""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from debtsage.models import Debt, PayoffMethod, Strategy

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config at a temporary data directory for every test."""
    for name in (
        "DEBTSAGE_DEV_MODE",
        "DEBTSAGE_MAX_MONTHS",
        "DEBTSAGE_PAYOFF_EPSILON",
        "DEBTSAGE_DEFAULT_METHOD",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path / "instance"))
    yield
    # setup_logging attaches file handlers; release them between tests
    logger = logging.getLogger("debtsage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Debt Fixtures
# =============================================================================


@pytest.fixture
def debt_factory():
    """Factory for creating test debts.

    Returns:
        Callable: Function that creates Debt instances with sensible defaults
    """

    counter = {"next": 1}

    def _create_debt(
        balance="1000",
        minimum_payment="50",
        interest_rate="0",
        *,
        id=None,
        name: str | None = None,
        type: str = "credit_card",
    ) -> Debt:
        """Create a test debt.

        Args:
            balance: Outstanding principal
            minimum_payment: Required monthly payment
            interest_rate: APR in percent (19.99 == 19.99%)
            id: Debt identifier (auto-incremented if not provided)
        """
        if id is None:
            id = counter["next"]
            counter["next"] += 1
        return Debt(
            id=id,
            name=name or f"Debt {id}",
            balance=Decimal(str(balance)),
            minimum_payment=Decimal(str(minimum_payment)),
            interest_rate=Decimal(str(interest_rate)),
            type=type,
        )

    return _create_debt


@pytest.fixture
def mixed_debts(debt_factory):
    """Three debts where smallest balance and highest rate are different debts."""
    return [
        debt_factory(5000, 100, 18, id="visa", name="Visa"),
        debt_factory(1000, 50, 12, id="store", name="Store card"),
        debt_factory(3000, 75, 24, id="loan", name="Personal loan"),
    ]


@pytest.fixture
def strategy_factory():
    """Factory for strategies: ``strategy_factory("snowball", 100)``."""

    def _create(method: PayoffMethod | str = PayoffMethod.AVALANCHE, extra="0") -> Strategy:
        return Strategy.create(method, extra)

    return _create


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_money_equal(actual, expected, tolerance="0.01"):
    """Assert that two amounts are equal within a tolerance.

    Args:
        actual: Actual value (Decimal, int, float or numeric string)
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    diff = abs(Decimal(str(actual)) - Decimal(str(expected)))
    assert diff <= Decimal(tolerance), f"Expected {expected}, got {actual} (diff: {diff})"
