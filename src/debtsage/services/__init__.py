"""Service module exports."""

from . import debts, export_csv, import_csv, summary

__all__ = ["debts", "export_csv", "import_csv", "summary"]
