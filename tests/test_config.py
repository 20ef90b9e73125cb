"""Configuration tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from debtsage.config import BaseConfig, DevConfig, TestConfig


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "instance").resolve()
    assert config.DEV_MODE is True
    assert config.MAX_MONTHS == 600
    assert config.PAYOFF_EPSILON == Decimal("0.01")
    assert config.DEFAULT_METHOD == "avalanche"
    assert config.simulation_options() == {"max_months": 600, "epsilon": Decimal("0.01")}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DEBTSAGE_DEV_MODE", "off")
    monkeypatch.setenv("DEBTSAGE_MAX_MONTHS", "360")
    monkeypatch.setenv("DEBTSAGE_PAYOFF_EPSILON", "0.005")
    monkeypatch.setenv("DEBTSAGE_DEFAULT_METHOD", " Snowball ")

    config = DevConfig()

    assert config.DEV_MODE is False
    assert config.MAX_MONTHS == 360
    assert config.PAYOFF_EPSILON == Decimal("0.005")
    assert config.DEFAULT_METHOD == "snowball"
    assert config.DEBUG is True


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("DEBTSAGE_MAX_MONTHS", "0", "at least 1"),
        ("DEBTSAGE_MAX_MONTHS", "ten", "must be an integer"),
        ("DEBTSAGE_PAYOFF_EPSILON", "-0.01", "cannot be negative"),
        ("DEBTSAGE_PAYOFF_EPSILON", "tiny", "decimal number"),
        ("DEBTSAGE_DEFAULT_METHOD", "fastest", "must be one of"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value, message):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=message):
        BaseConfig()


def test_test_config_data_dir(tmp_path):
    config = TestConfig(data_dir=tmp_path / "elsewhere")

    assert config.DATA_DIR == tmp_path / "elsewhere"
    assert config.TESTING is True
