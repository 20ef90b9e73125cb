"""Payoff projection outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Hashable

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Quantize a full-precision amount for display."""

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _money(amount: Decimal) -> str:
    return str(to_cents(amount))


@dataclass(slots=True)
class PayoffResult:
    """Projection for a single debt that reached a zero balance."""

    debt_id: Hashable
    name: str
    type: str
    original_balance: Decimal
    payoff_month: int
    total_interest_paid: Decimal
    payoff_date: date | None = None
    total_paid: Decimal = field(init=False)

    def __post_init__(self) -> None:
        self.total_paid = self.original_balance + self.total_interest_paid

    def as_dict(self) -> dict[str, Any]:
        return {
            "debt_id": self.debt_id,
            "name": self.name,
            "type": self.type,
            "original_balance": _money(self.original_balance),
            "payoff_month": self.payoff_month,
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
            "total_interest_paid": _money(self.total_interest_paid),
            "total_paid": _money(self.total_paid),
        }


@dataclass(slots=True)
class OutstandingDebt:
    """A debt still carrying a balance when the month ceiling was reached."""

    debt_id: Hashable
    name: str
    remaining_balance: Decimal
    interest_accrued: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "debt_id": self.debt_id,
            "name": self.name,
            "remaining_balance": _money(self.remaining_balance),
            "interest_accrued": _money(self.interest_accrued),
        }


@dataclass(slots=True)
class DebtWarning:
    """Non-fatal configuration problem detected before simulating."""

    debt_id: Hashable
    kind: str
    message: str

    def as_dict(self) -> dict[str, Any]:
        return {"debt_id": self.debt_id, "kind": self.kind, "message": self.message}


@dataclass(slots=True)
class AggregateStats:
    """Totals across every debt paid off in one run."""

    total_months_to_payoff: int = 0
    total_interest_paid: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    debts_paid_off: int = 0
    payoff_date: date | None = None
    hit_ceiling: bool = False

    @classmethod
    def from_results(
        cls, results: list[PayoffResult], *, hit_ceiling: bool = False
    ) -> "AggregateStats":
        if not results:
            return cls(hit_ceiling=hit_ceiling)
        last = max(results, key=lambda r: r.payoff_month)
        return cls(
            total_months_to_payoff=last.payoff_month,
            total_interest_paid=sum((r.total_interest_paid for r in results), Decimal("0")),
            total_paid=sum((r.total_paid for r in results), Decimal("0")),
            debts_paid_off=len(results),
            payoff_date=last.payoff_date,
            hit_ceiling=hit_ceiling,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_months_to_payoff": self.total_months_to_payoff,
            "total_interest_paid": _money(self.total_interest_paid),
            "total_paid": _money(self.total_paid),
            "debts_paid_off": self.debts_paid_off,
            "payoff_date": self.payoff_date.isoformat() if self.payoff_date else None,
            "hit_ceiling": self.hit_ceiling,
        }


@dataclass(slots=True)
class Savings:
    """Difference between the baseline run and the accelerated run."""

    interest_saved: Decimal = Decimal("0")
    months_saved: int = 0

    @classmethod
    def between(cls, *, actual: AggregateStats, baseline: AggregateStats) -> "Savings":
        return cls(
            interest_saved=max(
                Decimal("0"), baseline.total_interest_paid - actual.total_interest_paid
            ),
            months_saved=max(0, baseline.total_months_to_payoff - actual.total_months_to_payoff),
        )

    def as_dict(self) -> dict[str, Any]:
        return {"interest_saved": _money(self.interest_saved), "months_saved": self.months_saved}


@dataclass(slots=True)
class SimulationOutput:
    """Everything one ``simulate`` call reports."""

    results: list[PayoffResult] = field(default_factory=list)
    aggregate: AggregateStats = field(default_factory=AggregateStats)
    baseline: AggregateStats = field(default_factory=AggregateStats)
    savings: Savings = field(default_factory=Savings)
    hit_ceiling: bool = False
    outstanding: list[OutstandingDebt] = field(default_factory=list)
    warnings: list[DebtWarning] = field(default_factory=list)

    def result_for(self, debt_id: Hashable) -> PayoffResult | None:
        """Return the payoff result for ``debt_id`` or ``None`` if it never paid off."""
        for result in self.results:
            if result.debt_id == debt_id:
                return result
        return None

    def as_dict(self) -> dict[str, Any]:
        """Serialize with amounts rounded to cents."""
        return {
            "results": [r.as_dict() for r in self.results],
            "aggregate": self.aggregate.as_dict(),
            "baseline": self.baseline.as_dict(),
            "savings": self.savings.as_dict(),
            "hit_ceiling": self.hit_ceiling,
            "outstanding": [o.as_dict() for o in self.outstanding],
            "warnings": [w.as_dict() for w in self.warnings],
        }


__all__ = [
    "AggregateStats",
    "CENT",
    "DebtWarning",
    "OutstandingDebt",
    "PayoffResult",
    "Savings",
    "SimulationOutput",
    "to_cents",
]
