"""Load debt records from CSV or JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from ..models.debt import Debt, InvalidDebtInput


class DebtImportError(ValueError):
    """Raised when a debts file cannot be read or understood."""


@dataclass(slots=True)
class ColumnMapping:
    """Maps debt fields to CSV headers (compared lower-cased)."""

    id: str = "id"
    name: str = "name"
    balance: str = "balance"
    minimum_payment: str = "minimum_payment"
    interest_rate: str = "interest_rate"
    type: str | None = "type"


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing.

    Every column is read as text so amounts reach ``Decimal`` untouched.
    """

    try:
        frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DebtImportError(f"Could not read {file_path}: {exc}") from exc
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


def rows_to_debts(*, rows: Iterable[Mapping], mapping: ColumnMapping) -> list[Debt]:
    """Convert dict-like rows into ``Debt`` records.

    Blank rows are skipped; anything else that cannot be parsed is an error,
    since silently dropping a debt would change the projection.
    """

    debts: list[Debt] = []
    for line, row in enumerate(rows, start=2):  # header is line 1
        values = {k: (v.strip() if isinstance(v, str) else v) for k, v in row.items()}
        if not any(v not in (None, "") for v in values.values()):
            continue
        record = {
            "id": values.get(mapping.id),
            "name": values.get(mapping.name),
            "balance": values.get(mapping.balance),
            "minimum_payment": values.get(mapping.minimum_payment),
            "interest_rate": values.get(mapping.interest_rate),
            "type": values.get(mapping.type) if mapping.type else None,
        }
        try:
            debts.append(Debt.from_mapping(record))
        except InvalidDebtInput as exc:
            raise DebtImportError(f"Row {line}: {exc}") from exc
    return debts


def _check_columns(frame: pd.DataFrame, mapping: ColumnMapping) -> None:
    required = [mapping.id, mapping.balance, mapping.minimum_payment, mapping.interest_rate]
    missing = [column for column in required if column not in frame.columns]
    if missing:
        raise DebtImportError(f"Missing required column(s): {', '.join(missing)}")


def load_debts_csv(
    file_path: Path, *, mapping: ColumnMapping | None = None, encoding: str = "utf-8"
) -> list[Debt]:
    """Read debts from a CSV export."""

    mapping = mapping or ColumnMapping()
    frame = normalize_frame(file_path=file_path, encoding=encoding)
    _check_columns(frame, mapping)
    return rows_to_debts(rows=frame.to_dict(orient="records"), mapping=mapping)


def load_debts_json(file_path: Path) -> list[Debt]:
    """Read debts from a JSON list (or an object with a ``debts`` list)."""

    try:
        payload = json.loads(Path(file_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise DebtImportError(f"Could not read {file_path}: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("debts")
    if not isinstance(payload, list):
        raise DebtImportError("Expected a list of debts")

    debts: list[Debt] = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise DebtImportError(f"Entry {position} is not an object")
        try:
            debts.append(Debt.from_mapping(item))
        except InvalidDebtInput as exc:
            raise DebtImportError(f"Entry {position}: {exc}") from exc
    return debts


def load_debts(file_path: Path | str) -> list[Debt]:
    """Dispatch on file extension (``.csv`` or ``.json``)."""

    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return load_debts_csv(path)
    if suffix == ".json":
        return load_debts_json(path)
    raise DebtImportError(f"Unsupported debts file type: {path.suffix or '(none)'}")


__all__ = [
    "ColumnMapping",
    "DebtImportError",
    "load_debts",
    "load_debts_csv",
    "load_debts_json",
    "normalize_frame",
    "rows_to_debts",
]
