"""Debt and payoff strategy inputs."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Hashable, Mapping


class InvalidDebtInput(ValueError):
    """Raised when debts or strategy settings cannot be simulated."""


class PayoffMethod(str, Enum):
    """Supported payoff orderings."""

    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "PayoffMethod | str") -> "PayoffMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidDebtInput(f"Invalid debt payoff strategy: {value!r}") from exc


def to_decimal(value: Any, *, field: str) -> Decimal:
    """Convert user supplied amounts into ``Decimal`` without float artifacts."""

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise InvalidDebtInput(f"{field} must be a number, got {value!r}")
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        # str() keeps 19.99 as 19.99 instead of its binary expansion
        text = str(value).strip().replace(",", "").lstrip("$")
        try:
            result = Decimal(text)
        except InvalidOperation as exc:
            raise InvalidDebtInput(f"{field} must be a number, got {value!r}") from exc
    if not result.is_finite():
        raise InvalidDebtInput(f"{field} must be finite, got {value!r}")
    return result


_FIELD_ALIASES = {
    "balance": ("balance", "currentBalance", "current_balance"),
    "minimum_payment": ("minimum_payment", "minimumPayment", "min_payment"),
    "interest_rate": ("interest_rate", "interestRate", "apr"),
}


@dataclass(frozen=True, slots=True)
class Debt:
    """A liability as seen by the payoff simulator."""

    id: Hashable
    name: str
    balance: Decimal
    minimum_payment: Decimal
    interest_rate: Decimal  # annual percentage, 19.99 == 19.99%
    type: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Debt":
        """Build a debt from an API/CSV style record (snake or camel case keys)."""

        def _pick(field: str, default: Any = None) -> Any:
            for key in _FIELD_ALIASES[field]:
                value = data.get(key)
                if value not in (None, ""):
                    return value
            return default

        if data.get("id") in (None, ""):
            raise InvalidDebtInput("Debt record is missing an id")
        balance = _pick("balance")
        if balance is None:
            raise InvalidDebtInput(f"Debt {data['id']!r} is missing a balance")
        return cls(
            id=data["id"],
            name=str(data.get("name") or ""),
            balance=to_decimal(balance, field="balance"),
            minimum_payment=to_decimal(_pick("minimum_payment", 0), field="minimum_payment"),
            interest_rate=to_decimal(_pick("interest_rate", 0), field="interest_rate"),
            type=str(data.get("type") or ""),
        )


@dataclass(frozen=True, slots=True)
class Strategy:
    """Payoff method plus the extra amount paid every month."""

    method: PayoffMethod = PayoffMethod.AVALANCHE
    extra_payment: Decimal = Decimal("0")

    @classmethod
    def create(cls, method: PayoffMethod | str, extra_payment: Any = 0) -> "Strategy":
        return cls(
            method=PayoffMethod.parse(method),
            extra_payment=to_decimal(extra_payment, field="extra_payment"),
        )

    def without_extra(self) -> "Strategy":
        """Return the same method with no extra payment (the baseline)."""
        return Strategy(method=self.method, extra_payment=Decimal("0"))


__all__ = ["Debt", "InvalidDebtInput", "PayoffMethod", "Strategy", "to_decimal"]
