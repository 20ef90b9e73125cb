"""Headline figures for a set of debts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ..models.debt import Debt, PayoffMethod, to_decimal
from ..models.results import to_cents
from .debts import validate_debts

_DESCRIPTIONS = {
    PayoffMethod.SNOWBALL: (
        "Pay minimum on all debts, focus extra payments on smallest balance first. "
        "Builds momentum and motivation."
    ),
    PayoffMethod.AVALANCHE: (
        "Pay minimum on all debts, focus extra payments on highest interest rate first. "
        "Saves the most money."
    ),
    PayoffMethod.CUSTOM: "Set your own payment priorities and amounts for each debt.",
}


@dataclass(slots=True)
class DebtSummary:
    """Totals shown alongside a payoff projection."""

    debt_count: int
    total_debt: Decimal
    total_minimum_payments: Decimal
    extra_payment_capacity: Decimal
    highest_interest_debt: Debt | None = None

    def as_dict(self) -> dict[str, Any]:
        highest = self.highest_interest_debt
        return {
            "debt_count": self.debt_count,
            "total_debt": str(to_cents(self.total_debt)),
            "total_minimum_payments": str(to_cents(self.total_minimum_payments)),
            "extra_payment_capacity": str(to_cents(self.extra_payment_capacity)),
            "highest_interest_debt": (
                {"id": highest.id, "name": highest.name, "interest_rate": str(highest.interest_rate)}
                if highest
                else None
            ),
        }


def summarize_debts(
    debts: Iterable[Debt | Mapping[str, Any]], debt_budget: Any = 0
) -> DebtSummary:
    """Summarize open debts against a monthly budget for debt payments.

    ``extra_payment_capacity`` is whatever the budget leaves after every
    minimum payment, never negative. Debts with a zero balance are ignored.
    """

    budget = to_decimal(debt_budget, field="debt_budget")
    open_debts = [d for d in validate_debts(debts) if d.balance > 0]
    total_minimums = sum((d.minimum_payment for d in open_debts), Decimal("0"))
    highest = None
    for debt in open_debts:
        # first debt wins on equal rates
        if highest is None or debt.interest_rate > highest.interest_rate:
            highest = debt
    return DebtSummary(
        debt_count=len(open_debts),
        total_debt=sum((d.balance for d in open_debts), Decimal("0")),
        total_minimum_payments=total_minimums,
        extra_payment_capacity=max(Decimal("0"), budget - total_minimums),
        highest_interest_debt=highest,
    )


def describe_strategy(method: PayoffMethod | str) -> str:
    """Return the one-line explanation shown next to a payoff method."""
    return _DESCRIPTIONS[PayoffMethod.parse(method)]


def format_duration(months: int) -> str:
    """Render a month count as ``"2y 3m"``."""

    if months < 0:
        raise ValueError("months cannot be negative")
    years, rest = divmod(months, 12)
    if not years:
        return f"{rest}m"
    return f"{years}y {rest}m"


__all__ = ["DebtSummary", "describe_strategy", "format_duration", "summarize_debts"]
