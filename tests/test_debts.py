"""Debt service tests: ordering, validation and input records."""

from __future__ import annotations

from decimal import Decimal

import pytest

from debtsage.models import Debt, InvalidDebtInput, PayoffMethod, Strategy
from debtsage.services.debts import (
    add_months,
    order_debts,
    simulate,
    validate_debts,
    validate_strategy,
)


def test_snowball_orders_by_balance(mixed_debts):
    """Verify snowball puts the smallest balance first."""
    ordered = order_debts(mixed_debts, PayoffMethod.SNOWBALL)

    assert [d.id for d in ordered] == ["store", "loan", "visa"]


def test_avalanche_orders_by_interest_rate(mixed_debts):
    """Verify avalanche puts the highest APR first."""
    ordered = order_debts(mixed_debts, "avalanche")

    assert [d.id for d in ordered] == ["loan", "visa", "store"]


def test_custom_keeps_input_order(mixed_debts):
    """Custom ordering must never re-sort what the caller supplied."""
    ordered = order_debts(mixed_debts, PayoffMethod.CUSTOM)

    assert [d.id for d in ordered] == ["visa", "store", "loan"]


def test_ties_keep_input_order(debt_factory):
    """Equal balances and equal rates fall back to the original position."""
    debts = [
        debt_factory(500, 25, 10, id="b"),
        debt_factory(500, 25, 10, id="a"),
        debt_factory(500, 25, 10, id="c"),
    ]

    assert [d.id for d in order_debts(debts, "snowball")] == ["b", "a", "c"]
    assert [d.id for d in order_debts(debts, "avalanche")] == ["b", "a", "c"]


def test_order_debts_does_not_mutate_input(mixed_debts):
    original = list(mixed_debts)
    order_debts(mixed_debts, "snowball")
    assert mixed_debts == original


def test_payoff_method_parse_is_case_insensitive():
    assert PayoffMethod.parse(" Snowball ") is PayoffMethod.SNOWBALL
    assert PayoffMethod.parse(PayoffMethod.CUSTOM) is PayoffMethod.CUSTOM


def test_payoff_method_parse_rejects_unknown():
    with pytest.raises(InvalidDebtInput, match="Invalid debt payoff strategy"):
        PayoffMethod.parse("tornado")


class TestValidation:
    """Invalid input is rejected before any simulation happens."""

    def test_negative_balance_rejected(self, debt_factory):
        with pytest.raises(InvalidDebtInput, match="negative balance"):
            simulate([debt_factory(balance=-1)], Strategy.create("snowball"))

    def test_negative_minimum_payment_rejected(self, debt_factory):
        with pytest.raises(InvalidDebtInput, match="negative minimum payment"):
            simulate([debt_factory(minimum_payment=-5)], Strategy.create("snowball"))

    def test_negative_interest_rate_rejected(self, debt_factory):
        with pytest.raises(InvalidDebtInput, match="negative interest rate"):
            simulate([debt_factory(interest_rate=-1)], Strategy.create("avalanche"))

    def test_negative_extra_payment_rejected(self, debt_factory):
        with pytest.raises(InvalidDebtInput, match="Extra payment cannot be negative"):
            simulate([debt_factory()], Strategy.create("avalanche", -10))

    def test_duplicate_ids_rejected(self, debt_factory):
        debts = [debt_factory(id=7), debt_factory(id=7)]
        with pytest.raises(InvalidDebtInput, match="Duplicate debt id"):
            validate_debts(debts)

    def test_unknown_method_in_mapping_rejected(self, debt_factory):
        with pytest.raises(InvalidDebtInput):
            simulate([debt_factory()], {"method": "random", "extraPayment": 0})

    def test_invalid_input_anywhere_rejects_whole_run(self, debt_factory):
        """A bad debt at the end of the list still fails the run."""
        debts = [debt_factory(), debt_factory(), debt_factory(balance=-0.01)]
        with pytest.raises(InvalidDebtInput):
            simulate(debts, Strategy.create("snowball", 100))

    def test_zero_max_months_rejected(self, debt_factory):
        with pytest.raises(InvalidDebtInput, match="max_months"):
            simulate([debt_factory()], Strategy.create("snowball"), max_months=0)

    def test_non_numeric_amount_rejected(self):
        with pytest.raises(InvalidDebtInput, match="balance must be a number"):
            Debt.from_mapping({"id": 1, "balance": "lots"})

    def test_validate_strategy_accepts_camel_case_mapping(self):
        strategy = validate_strategy({"method": "SNOWBALL", "extraPayment": "125.50"})

        assert strategy == Strategy(PayoffMethod.SNOWBALL, Decimal("125.50"))


class TestDebtRecords:
    """Debt.from_mapping accepts API and CSV style records."""

    def test_camel_case_record(self):
        debt = Debt.from_mapping(
            {
                "id": "abc",
                "name": "Visa",
                "currentBalance": "1,250.75",
                "minimumPayment": 35,
                "interestRate": "19.99",
                "type": "credit_card",
            }
        )

        assert debt.balance == Decimal("1250.75")
        assert debt.minimum_payment == Decimal("35")
        assert debt.interest_rate == Decimal("19.99")
        assert debt.type == "credit_card"

    def test_float_amounts_keep_their_decimal_text(self):
        debt = Debt.from_mapping({"id": 1, "balance": 19.99, "minimum_payment": 0.1})

        assert debt.balance == Decimal("19.99")
        assert debt.minimum_payment == Decimal("0.1")

    def test_missing_optional_fields_default_to_zero(self):
        debt = Debt.from_mapping({"id": 1, "balance": "100"})

        assert debt.minimum_payment == Decimal("0")
        assert debt.interest_rate == Decimal("0")
        assert debt.name == ""

    def test_missing_id_rejected(self):
        with pytest.raises(InvalidDebtInput, match="missing an id"):
            Debt.from_mapping({"balance": "100"})

    def test_directly_constructed_float_debt_is_normalized(self):
        debt = Debt(id=1, name="loose", balance=1000.0, minimum_payment=100, interest_rate=0)

        (checked,) = validate_debts([debt])

        assert checked.balance == Decimal("1000.0")
        assert isinstance(checked.minimum_payment, Decimal)


@pytest.mark.parametrize(
    ("start", "months", "expected"),
    [
        ((2025, 1, 15), 0, (2025, 1, 1)),
        ((2025, 1, 15), 11, (2025, 12, 1)),
        ((2025, 11, 1), 2, (2026, 1, 1)),
        ((2024, 6, 30), 25, (2026, 7, 1)),
    ],
)
def test_add_months(start, months, expected):
    from datetime import date

    assert add_months(date(*start), months) == date(*expected)
