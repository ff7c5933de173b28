"""Mini README: The store's materialised state.

Structure:
    * LedgerState - every collection the store owns, keyed by stable ids.

Relationships (memo -> loading slip -> vehicle -> ledger) are resolved by
lookup on these maps, never by back-pointers. Records are frozen, so
``clone`` only copies the maps and the journal; the store mutates a clone and
swaps it in when an event has been applied completely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from ..classification import VehicleClassifier
from ..derivation import BankingEffect, DerivationContext
from ..records.banking import BankingEntry, FuelTransaction, FuelWallet, VehicleFuelExpense
from ..records.documents import Bill, LoadingSlip, Memo, Vehicle
from .journal import LedgerJournal


@dataclass(slots=True)
class LedgerState:
    loading_slips: Dict[str, LoadingSlip] = field(default_factory=dict)
    memos: Dict[str, Memo] = field(default_factory=dict)
    bills: Dict[str, Bill] = field(default_factory=dict)
    banking_entries: Dict[str, BankingEntry] = field(default_factory=dict)
    banking_effects: Dict[str, BankingEffect] = field(default_factory=dict)
    vehicles: Dict[str, Vehicle] = field(default_factory=dict)
    fuel_wallets: Dict[str, FuelWallet] = field(default_factory=dict)
    fuel_transactions: Dict[str, FuelTransaction] = field(default_factory=dict)
    vehicle_fuel_expenses: Dict[str, VehicleFuelExpense] = field(default_factory=dict)
    journal: LedgerJournal = field(default_factory=LedgerJournal)

    @classmethod
    def fresh(
        cls,
        *,
        wallet_names: Iterable[str] = (),
        vehicles: Optional[Dict[str, Vehicle]] = None,
        strict_retraction: bool = False,
    ) -> "LedgerState":
        """Empty state seeded with zero-balance wallets and vehicle master data."""

        return cls(
            vehicles=dict(vehicles or {}),
            fuel_wallets={name: FuelWallet(name=name) for name in wallet_names},
            journal=LedgerJournal(strict=strict_retraction),
        )

    def clone(self) -> "LedgerState":
        return LedgerState(
            loading_slips=dict(self.loading_slips),
            memos=dict(self.memos),
            bills=dict(self.bills),
            banking_entries=dict(self.banking_entries),
            banking_effects=dict(self.banking_effects),
            vehicles=dict(self.vehicles),
            fuel_wallets=dict(self.fuel_wallets),
            fuel_transactions=dict(self.fuel_transactions),
            vehicle_fuel_expenses=dict(self.vehicle_fuel_expenses),
            journal=self.journal.copy(),
        )

    def classifier(self) -> VehicleClassifier:
        return VehicleClassifier(self.vehicles)

    def context(self, *, tds_account_name: str, default_fuel_wallet: str) -> DerivationContext:
        return DerivationContext(
            loading_slips=self.loading_slips,
            classifier=self.classifier(),
            tds_account_name=tds_account_name,
            default_fuel_wallet=default_fuel_wallet,
        )

    def memo_by_number(self, memo_number: str) -> Optional[Memo]:
        for memo in self.memos.values():
            if memo.memo_number == memo_number:
                return memo
        return None

    def bill_by_number(self, bill_number: str) -> Optional[Bill]:
        for bill in self.bills.values():
            if bill.bill_number == bill_number:
                return bill
        return None
