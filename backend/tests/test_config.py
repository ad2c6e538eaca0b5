# tests/test_config.py
"""
Tests for Settings loading and validation.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from portfolio_metrics.config import Settings


class TestSettingsDefaults:
    """Defaults when nothing is set in the environment."""

    def test_capital_gains_defaults(self, monkeypatch):
        for name in ("LONG_TERM_THRESHOLD_DAYS", "LONG_TERM_TAX_RATE",
                     "SHORT_TERM_TAX_RATE", "LONG_TERM_EXEMPTION"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.long_term_threshold_days == 365
        assert settings.long_term_tax_rate == Decimal("0.125")
        assert settings.short_term_tax_rate == Decimal("0.20")
        assert settings.long_term_exemption == Decimal("125000")

    def test_accrual_and_solver_defaults(self, monkeypatch):
        for name in ("DAYS_PER_YEAR", "DEPOSIT_CUTOFF_DAY", "XIRR_MAX_ITERATIONS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.days_per_year == 365
        assert settings.deposit_cutoff_day == 5
        assert settings.xirr_max_iterations == 100


class TestSettingsFromEnvironment:
    """Environment variables override defaults."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LONG_TERM_EXEMPTION", "100000")
        monkeypatch.setenv("DEPOSIT_CUTOFF_DAY", "10")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.long_term_exemption == Decimal("100000")
        assert settings.deposit_cutoff_day == 10
        assert settings.log_level == "DEBUG"

    def test_environment_flags(self):
        assert Settings(environment="test").is_test
        assert Settings(environment="production").is_production


class TestSettingsValidation:
    """Invalid values fail at load time."""

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="VERBOSE")

    def test_tax_rate_above_one(self):
        with pytest.raises(ValidationError):
            Settings(short_term_tax_rate=Decimal("20"))

    @pytest.mark.parametrize("day", [0, 32])
    def test_cutoff_day_out_of_range(self, day):
        with pytest.raises(ValidationError):
            Settings(deposit_cutoff_day=day)

    def test_initial_guess_must_keep_rate_above_floor(self):
        with pytest.raises(ValidationError):
            Settings(xirr_initial_guess=-1.0)
