"""Debt payoff simulator.

Debts are ordered once per run (snowball, avalanche or caller supplied) and
then amortized month by month. Every open debt accrues interest and receives
its minimum payment; the extra payment pool goes to the first open debt in the
priority order only. When a debt is retired its minimum payment joins the pool
from the following month on (except for custom ordering).

Each run is simulated twice, once with the caller's extra payment and once
without, so callers can show what the extra money buys.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_EVEN, Context, Decimal, localcontext
from typing import Any, Hashable, Iterable, Mapping, Sequence

from ..models.debt import Debt, InvalidDebtInput, PayoffMethod, Strategy, to_decimal
from ..models.results import (
    AggregateStats,
    DebtWarning,
    OutstandingDebt,
    PayoffResult,
    Savings,
    SimulationOutput,
    to_cents,
)

logger = logging.getLogger("debtsage.services.debts")

DEFAULT_MAX_MONTHS = 600  # 50 years
DEFAULT_EPSILON = Decimal("0.01")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_MONTHS_PER_YEAR = Decimal("12")
# Fixed precision so results never depend on the caller's decimal context.
_MONEY_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)


@dataclass(slots=True)
class _WorkingDebt:
    """Mutable per-run copy of a debt."""

    id: Hashable
    name: str
    type: str
    original_balance: Decimal
    balance: Decimal
    minimum_payment: Decimal
    interest_rate: Decimal
    interest_paid: Decimal = _ZERO

    @classmethod
    def from_debt(cls, debt: Debt) -> "_WorkingDebt":
        return cls(
            id=debt.id,
            name=debt.name,
            type=debt.type,
            original_balance=debt.balance,
            balance=debt.balance,
            minimum_payment=debt.minimum_payment,
            interest_rate=debt.interest_rate,
        )

    def monthly_interest(self) -> Decimal:
        return self.balance * (self.interest_rate / _HUNDRED) / _MONTHS_PER_YEAR


def _coerce_debt(item: Debt | Mapping[str, Any]) -> Debt:
    if isinstance(item, Debt):
        # Direct construction skips from_mapping, so normalize amounts here.
        return Debt(
            id=item.id,
            name=item.name,
            balance=to_decimal(item.balance, field="balance"),
            minimum_payment=to_decimal(item.minimum_payment, field="minimum_payment"),
            interest_rate=to_decimal(item.interest_rate, field="interest_rate"),
            type=item.type,
        )
    if isinstance(item, Mapping):
        return Debt.from_mapping(item)
    raise InvalidDebtInput(f"Unsupported debt record: {item!r}")


def validate_debts(debts: Iterable[Debt | Mapping[str, Any]]) -> list[Debt]:
    """Normalize and check debts, raising ``InvalidDebtInput`` on the first problem."""

    checked: list[Debt] = []
    seen: set[Hashable] = set()
    for item in debts:
        debt = _coerce_debt(item)
        if debt.id is None:
            raise InvalidDebtInput("Debt record is missing an id")
        if debt.balance < 0:
            raise InvalidDebtInput(f"Debt {debt.id!r} has a negative balance")
        if debt.minimum_payment < 0:
            raise InvalidDebtInput(f"Debt {debt.id!r} has a negative minimum payment")
        if debt.interest_rate < 0:
            raise InvalidDebtInput(f"Debt {debt.id!r} has a negative interest rate")
        try:
            duplicate = debt.id in seen
        except TypeError as exc:
            raise InvalidDebtInput(f"Debt id {debt.id!r} is not hashable") from exc
        if duplicate:
            raise InvalidDebtInput(f"Duplicate debt id {debt.id!r}")
        seen.add(debt.id)
        checked.append(debt)
    return checked


def validate_strategy(strategy: Strategy | Mapping[str, Any]) -> Strategy:
    """Return a normalized copy of ``strategy`` or raise ``InvalidDebtInput``."""

    if isinstance(strategy, Mapping):
        method = PayoffMethod.parse(strategy.get("method", PayoffMethod.AVALANCHE))
        raw_extra = strategy.get("extra_payment", strategy.get("extraPayment", 0))
    elif isinstance(strategy, Strategy):
        method = PayoffMethod.parse(strategy.method)
        raw_extra = strategy.extra_payment
    else:
        raise InvalidDebtInput(f"Unsupported strategy: {strategy!r}")
    extra = to_decimal(raw_extra, field="extra_payment")
    if extra < 0:
        raise InvalidDebtInput("Extra payment cannot be negative")
    return Strategy(method=method, extra_payment=extra)


def order_debts(debts: Sequence[Debt], method: PayoffMethod | str) -> list[Debt]:
    """Return debts in payoff priority order.

    Ties keep the input order so repeated runs stay deterministic.
    """

    method = PayoffMethod.parse(method)
    indexed = list(enumerate(debts))
    if method is PayoffMethod.SNOWBALL:
        indexed.sort(key=lambda pair: (pair[1].balance, pair[0]))
    elif method is PayoffMethod.AVALANCHE:
        indexed.sort(key=lambda pair: (-pair[1].interest_rate, pair[0]))
    return [debt for _, debt in indexed]


def add_months(start: date, months: int) -> date:
    """Return the first day of the month ``months`` after ``start``.

    Month 1 of a simulation is the month of ``start_date``, so a debt retired
    in month ``n`` is paid off in ``add_months(start_date, n - 1)``.
    """

    month = start.month + months
    year = start.year + (month - 1) // 12
    month = ((month - 1) % 12) + 1
    return date(year, month, 1)


def _configuration_warnings(ordered: Sequence[Debt]) -> list[DebtWarning]:
    warnings: list[DebtWarning] = []
    for debt in ordered:
        interest = _WorkingDebt.from_debt(debt).monthly_interest()
        if debt.minimum_payment <= interest:
            warnings.append(
                DebtWarning(
                    debt_id=debt.id,
                    kind="minimum_below_interest",
                    message=(
                        f"Minimum payment {debt.minimum_payment} does not cover "
                        f"monthly interest of {to_cents(interest)}"
                    ),
                )
            )
    return warnings


def _run(
    ordered: Sequence[Debt],
    strategy: Strategy,
    *,
    max_months: int,
    epsilon: Decimal,
    start_date: date | None,
) -> tuple[list[PayoffResult], list[OutstandingDebt]]:
    """Amortize fresh copies of ``ordered`` until every debt is retired or the ceiling hits."""

    remaining = [_WorkingDebt.from_debt(d) for d in ordered]
    available_extra = strategy.extra_payment
    rolls_minimums = strategy.method is not PayoffMethod.CUSTOM
    results: list[PayoffResult] = []
    month = 0

    while remaining and month < max_months:
        month += 1
        target = remaining[0]

        for debt in remaining:
            interest = debt.monthly_interest()
            debt.balance += interest
            debt.interest_paid += interest
            debt.balance -= min(debt.minimum_payment, debt.balance)
            if debt.id == target.id and available_extra > 0:
                debt.balance -= min(available_extra, debt.balance)

        freed = _ZERO
        still_open: list[_WorkingDebt] = []
        for debt in remaining:
            if debt.balance > epsilon:
                still_open.append(debt)
                continue
            results.append(
                PayoffResult(
                    debt_id=debt.id,
                    name=debt.name,
                    type=debt.type,
                    original_balance=debt.original_balance,
                    payoff_month=month,
                    total_interest_paid=debt.interest_paid,
                    payoff_date=add_months(start_date, month - 1) if start_date else None,
                )
            )
            if rolls_minimums:
                freed += debt.minimum_payment
        remaining = still_open
        # Freed minimums only reach the pool after this month's payments are done.
        available_extra += freed

    outstanding = [
        OutstandingDebt(
            debt_id=debt.id,
            name=debt.name,
            remaining_balance=debt.balance,
            interest_accrued=debt.interest_paid,
        )
        for debt in remaining
    ]
    return results, outstanding


def simulate(
    debts: Iterable[Debt | Mapping[str, Any]],
    strategy: Strategy | Mapping[str, Any],
    *,
    start_date: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    epsilon: Decimal | float | str = DEFAULT_EPSILON,
) -> SimulationOutput:
    """Project payoff for ``debts`` under ``strategy`` and compare with no extra payment.

    Invalid input raises ``InvalidDebtInput`` before anything is simulated.
    Debts that never amortize are reported through ``hit_ceiling`` and
    ``outstanding`` rather than an exception.
    """

    strategy = validate_strategy(strategy)
    checked = validate_debts(debts)
    if isinstance(max_months, bool) or not isinstance(max_months, int) or max_months < 1:
        raise InvalidDebtInput(f"max_months must be a positive integer, got {max_months!r}")
    epsilon = to_decimal(epsilon, field="epsilon")
    if epsilon < 0:
        raise InvalidDebtInput("epsilon cannot be negative")

    open_debts = [d for d in checked if d.balance > 0]
    if not open_debts:
        return SimulationOutput()

    with localcontext(_MONEY_CONTEXT):
        ordered = order_debts(open_debts, strategy.method)
        warnings = _configuration_warnings(ordered)
        for warning in warnings:
            logger.warning(
                "Debt %s will not amortize on minimum payments",
                warning.debt_id,
                extra={"debt_id": str(warning.debt_id), "detail": warning.message},
            )

        options = {"max_months": max_months, "epsilon": epsilon, "start_date": start_date}
        results, outstanding = _run(ordered, strategy, **options)
        baseline_results, baseline_outstanding = _run(
            ordered, strategy.without_extra(), **options
        )

        aggregate = AggregateStats.from_results(results, hit_ceiling=bool(outstanding))
        baseline = AggregateStats.from_results(
            baseline_results, hit_ceiling=bool(baseline_outstanding)
        )
        savings = Savings.between(actual=aggregate, baseline=baseline)

    logger.debug(
        "Simulated %s debts with %s strategy: %s months, %s interest",
        len(ordered),
        strategy.method.value,
        aggregate.total_months_to_payoff,
        aggregate.total_interest_paid,
        extra={
            "method": strategy.method.value,
            "extra_payment": str(strategy.extra_payment),
            "hit_ceiling": aggregate.hit_ceiling,
        },
    )
    return SimulationOutput(
        results=results,
        aggregate=aggregate,
        baseline=baseline,
        savings=savings,
        hit_ceiling=aggregate.hit_ceiling,
        outstanding=outstanding,
        warnings=warnings,
    )


def snowball_plan(
    *, debts: Iterable[Debt | Mapping[str, Any]], extra_payment: Any = 0, **kwargs: Any
) -> SimulationOutput:
    """Simulate paying the smallest balances first."""
    return simulate(debts, Strategy.create(PayoffMethod.SNOWBALL, extra_payment), **kwargs)


def avalanche_plan(
    *, debts: Iterable[Debt | Mapping[str, Any]], extra_payment: Any = 0, **kwargs: Any
) -> SimulationOutput:
    """Simulate paying the highest interest rates first."""
    return simulate(debts, Strategy.create(PayoffMethod.AVALANCHE, extra_payment), **kwargs)


def compare_strategies(
    debts: Iterable[Debt | Mapping[str, Any]],
    extra_payment: Any = 0,
    *,
    methods: Sequence[PayoffMethod | str] = (PayoffMethod.AVALANCHE, PayoffMethod.SNOWBALL),
    max_workers: int | None = None,
    **kwargs: Any,
) -> dict[PayoffMethod, SimulationOutput]:
    """Run ``simulate`` once per method with the same debts and extra payment.

    With ``max_workers`` above one the runs are spread over worker threads; each
    run works on its own copies so the output matches a sequential run.
    """

    checked = validate_debts(debts)
    strategies = [Strategy.create(method, extra_payment) for method in methods]

    def _one(strategy: Strategy) -> SimulationOutput:
        return simulate(checked, strategy, **kwargs)

    if max_workers and max_workers > 1 and len(strategies) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outputs = list(pool.map(_one, strategies))
    else:
        outputs = [_one(s) for s in strategies]
    return {s.method: output for s, output in zip(strategies, outputs)}


def best_strategy(outcomes: Mapping[PayoffMethod, SimulationOutput]) -> PayoffMethod | None:
    """Pick the cheapest method: least interest, then fewest months, then input order.

    Runs that hit the month ceiling rank after runs that pay everything off.
    """

    if not outcomes:
        return None
    ranked = sorted(
        enumerate(outcomes.items()),
        key=lambda item: (
            item[1][1].hit_ceiling,
            item[1][1].aggregate.total_interest_paid,
            item[1][1].aggregate.total_months_to_payoff,
            item[0],
        ),
    )
    return ranked[0][1][0]


__all__ = [
    "DEFAULT_EPSILON",
    "DEFAULT_MAX_MONTHS",
    "add_months",
    "avalanche_plan",
    "best_strategy",
    "compare_strategies",
    "order_debts",
    "simulate",
    "snowball_plan",
    "validate_debts",
    "validate_strategy",
]
