"""Mini README: Shared fixtures for the freightbooks test-suite.

Structure:
    * settings - explicit configuration so environment variables never leak in.
    * vehicles - one own-fleet truck and one market truck.
    * store - a LedgerStore with both vehicles and a loading slip per truck.

Loading slip ``ls-own`` runs on the own truck and ``ls-market`` on the market
truck; most tests hang memos and bills off those two slips.
"""

from __future__ import annotations

from datetime import date
from typing import List

import pytest

from freightbooks.configuration import FreightbooksSettings
from freightbooks.records import LoadingSlip, OwnershipType, Vehicle
from freightbooks.store import LedgerStore

OWN_VEHICLE = "KA01AB1234"
MARKET_VEHICLE = "MH12XY9876"


@pytest.fixture
def settings() -> FreightbooksSettings:
    return FreightbooksSettings(
        environment="test",
        log_level="DEBUG",
        tds_account_name="TDS A/C",
        default_fuel_wallet="BPCL",
        fuel_wallets=["BPCL", "HPCL"],
        strict_retraction=False,
    )


@pytest.fixture
def vehicles() -> List[Vehicle]:
    return [
        Vehicle(vehicle_no=OWN_VEHICLE, ownership_type=OwnershipType.OWN, owner_name="Company"),
        Vehicle(vehicle_no=MARKET_VEHICLE, ownership_type=OwnershipType.MARKET, owner_name="Sharma Roadlines"),
    ]


@pytest.fixture
def store(settings: FreightbooksSettings, vehicles: List[Vehicle]) -> LedgerStore:
    ledger_store = LedgerStore(settings=settings, vehicles=vehicles)
    ledger_store.add_loading_slip(
        LoadingSlip(
            id="ls-own",
            slip_number="LS-001",
            date=date(2024, 4, 1),
            party="Acme Cement",
            vehicle_no=OWN_VEHICLE,
            from_location="Bengaluru",
            to_location="Chennai",
            freight=100000.0,
        )
    )
    ledger_store.add_loading_slip(
        LoadingSlip(
            id="ls-market",
            slip_number="LS-002",
            date=date(2024, 4, 2),
            party="Acme Cement",
            vehicle_no=MARKET_VEHICLE,
            from_location="Pune",
            to_location="Hyderabad",
            freight=100000.0,
        )
    )
    return ledger_store
