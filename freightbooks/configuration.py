"""Mini README: Centralised configuration models and helpers for freightbooks.

Structure:
    * FreightbooksSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables prefixed with
    ``FREIGHTBOOKS_``. The store reads the statutory TDS account name, the
    fuel wallets seeded into every fresh state and the retraction policy from
    here. The configuration is cached so validation happens once per process.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FreightbooksSettings(BaseSettings):
    """Runtime configuration for the ledger core and its console."""

    model_config = SettingsConfigDict(
        env_prefix="FREIGHTBOOKS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the console entry point.",
    )
    tds_account_name: str = Field(
        "TDS A/C",
        description="General ledger account that holds TDS deducted by clients.",
    )
    default_fuel_wallet: str = Field(
        "BPCL",
        description="Wallet credited by fuel top-ups that do not name a wallet.",
    )
    fuel_wallets: List[str] = Field(
        default_factory=lambda: ["BPCL", "HPCL", "IOCL", "Shell"],
        description="Fuel vendor wallets present, with zero balance, in every fresh state.",
    )
    strict_retraction: bool = Field(
        False,
        description=(
            "Raise RetractionMismatch instead of logging a warning when an update"
            " or delete finds nothing to retract."
        ),
    )

    @field_validator("fuel_wallets")
    @classmethod
    def _normalise_wallets(cls, value: List[str]) -> List[str]:
        """Strip wallet names and drop blanks and repeats while keeping order."""

        cleaned: List[str] = []
        for name in value:
            stripped = str(name).strip()
            if stripped and stripped not in cleaned:
                cleaned.append(stripped)
        return cleaned

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        """Normalise to the upper-case name ``logging`` understands."""

        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown logging level: {value}")
        return name

    @field_validator("tds_account_name", "default_fuel_wallet")
    @classmethod
    def _require_name(cls, value: str) -> str:
        """Account names are used as ledger keys and cannot be blank."""

        stripped = value.strip()
        if not stripped:
            raise ValueError("Account names must not be blank")
        return stripped


@lru_cache()
def get_settings() -> FreightbooksSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FreightbooksSettings()
