"""CSV export helpers for payoff projections."""

from __future__ import annotations

import csv
from pathlib import Path

from ..models.results import SimulationOutput

HEADERS = [
    "payoff_order",
    "debt_id",
    "name",
    "type",
    "original_balance",
    "payoff_month",
    "payoff_date",
    "total_interest_paid",
    "total_paid",
    "remaining_balance",
    "status",
]


def _serialize_value(value) -> str:
    if value is None:
        return ""
    return str(value)


def export_results_csv(*, output: SimulationOutput, output_path: Path) -> Path:
    """Write one row per debt to CSV at ``output_path``.

    Paid-off debts come first in payoff order; debts still open at the month
    ceiling follow with status ``outstanding`` and their
    ``remaining_balance``. Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for order, result in enumerate(output.results, start=1):
            row = {key: _serialize_value(value) for key, value in result.as_dict().items()}
            row.update(payoff_order=str(order), remaining_balance="0.00", status="paid_off")
            writer.writerow(row)
        for debt in output.outstanding:
            outstanding = debt.as_dict()
            writer.writerow(
                {
                    "debt_id": _serialize_value(debt.debt_id),
                    "name": debt.name,
                    "total_interest_paid": outstanding["interest_accrued"],
                    "remaining_balance": outstanding["remaining_balance"],
                    "status": "outstanding",
                }
            )

    return output_path


__all__ = ["HEADERS", "export_results_csv"]
