"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_decimal(name: str, default: str) -> Decimal:
    value = os.getenv(name)
    if value is None or not value.strip():
        return Decimal(default)
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a decimal number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtSage"
    LOG_FILENAME = "debtsage.log"
    PAYOFF_METHODS = ("snowball", "avalanche", "custom")

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTSAGE_DEV_MODE", default=True)
        self.MAX_MONTHS = _env_int("DEBTSAGE_MAX_MONTHS", 600)
        self.PAYOFF_EPSILON = _env_decimal("DEBTSAGE_PAYOFF_EPSILON", "0.01")
        self.DEFAULT_METHOD = os.getenv("DEBTSAGE_DEFAULT_METHOD", "avalanche").strip().lower()
        if self.MAX_MONTHS < 1:
            raise ValueError("DEBTSAGE_MAX_MONTHS must be at least 1.")
        if self.PAYOFF_EPSILON < 0:
            raise ValueError("DEBTSAGE_PAYOFF_EPSILON cannot be negative.")
        if self.DEFAULT_METHOD not in self.PAYOFF_METHODS:
            raise ValueError(
                f"DEBTSAGE_DEFAULT_METHOD must be one of {', '.join(self.PAYOFF_METHODS)}."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("DEBTSAGE_DATA_DIR", "instance")
        return Path(data_root).expanduser().resolve()

    def simulation_options(self) -> dict[str, object]:
        """Expose keyword arguments for ``simulate`` to consume."""

        return {"max_months": self.MAX_MONTHS, "epsilon": self.PAYOFF_EPSILON}


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test suite."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | str | None = None) -> None:
        super().__init__()
        if data_dir is not None:
            self.DATA_DIR = Path(data_dir)
