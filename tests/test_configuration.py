"""Mini README: Tests for settings and logging helpers.

Structure:
    * test_environment_overrides_defaults - ``FREIGHTBOOKS_`` variables win.
    * test_wallet_names_are_normalised - blanks and repeats are dropped.
    * test_blank_account_names_are_rejected - ledger keys cannot be empty.
    * test_get_settings_is_cached - one validation per process.
    * test_configure_root_logger_accepts_names - level strings resolve.
    * test_log_level_is_validated_by_settings - unknown level names fail at load time.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from freightbooks.configuration import FreightbooksSettings, get_settings
from freightbooks.logging_utils import configure_root_logger


def test_environment_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FREIGHTBOOKS_TDS_ACCOUNT_NAME", "TDS Receivable")
    monkeypatch.setenv("FREIGHTBOOKS_STRICT_RETRACTION", "true")

    settings = FreightbooksSettings()

    assert settings.tds_account_name == "TDS Receivable"
    assert settings.strict_retraction is True
    assert settings.default_fuel_wallet == "BPCL"


def test_wallet_names_are_normalised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FREIGHTBOOKS_FUEL_WALLETS", '["BPCL", " IOCL ", "", "BPCL"]')

    assert FreightbooksSettings().fuel_wallets == ["BPCL", "IOCL"]


def test_blank_account_names_are_rejected() -> None:
    with pytest.raises(ValidationError):
        FreightbooksSettings(tds_account_name="   ")


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()

    assert get_settings() is get_settings()


def test_configure_root_logger_accepts_names() -> None:
    previous = logging.getLogger().level
    try:
        configure_root_logger("debug")
        assert logging.getLogger().level == logging.DEBUG
        with pytest.raises(ValueError):
            configure_root_logger("chatty")
    finally:
        configure_root_logger(previous)


def test_log_level_is_validated_by_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FREIGHTBOOKS_LOG_LEVEL", " warning ")

    assert FreightbooksSettings().log_level == "WARNING"
    with pytest.raises(ValidationError):
        FreightbooksSettings(log_level="chatty")
