"""Mini README: Ledger fan-out for fuel drawn from a vendor wallet.

For the company fleet only the net cost matters, so a single vehicle expense
is posted. For market vehicles the vehicle's fuel cost and the wallet
depletion are posted separately so each can be audited on its own.
"""

from __future__ import annotations

from typing import List

from ..records.banking import VehicleFuelExpense
from ..records.documents import OwnershipType
from ..records.ledger import DerivedEntryId, EntryRole, LedgerEntry, LedgerType, SourceType
from .context import DerivationContext


def derive_fuel_entries(expense: VehicleFuelExpense, context: DerivationContext) -> List[LedgerEntry]:
    description = f"Fuel expense for vehicle {expense.vehicle_no} from {expense.wallet_name}"
    if context.ownership_of(expense.vehicle_no) is OwnershipType.OWN:
        return [
            LedgerEntry(
                entry_id=DerivedEntryId(expense.id, EntryRole.VEHICLE_EXPENSE),
                ledger_type=LedgerType.VEHICLE_EXPENSE,
                reference_id=expense.id,
                reference_name=f"Vehicle {expense.vehicle_no} - Fuel Expense",
                date=expense.date,
                description=description,
                debit=expense.amount,
                source_type=SourceType.FUEL,
                vehicle_no=expense.vehicle_no,
            )
        ]
    return [
        LedgerEntry(
            entry_id=DerivedEntryId(expense.id, EntryRole.VEHICLE_FUEL),
            ledger_type=LedgerType.VEHICLE_FUEL,
            reference_id=expense.id,
            reference_name=f"Vehicle {expense.vehicle_no} - Fuel Expense",
            date=expense.date,
            description=description,
            debit=expense.amount,
            source_type=SourceType.FUEL,
            vehicle_no=expense.vehicle_no,
        ),
        LedgerEntry(
            entry_id=DerivedEntryId(expense.id, EntryRole.WALLET_DRAW),
            ledger_type=LedgerType.FUEL_WALLET,
            reference_id=expense.id,
            reference_name=f"Fuel Wallet - {expense.wallet_name}",
            date=expense.date,
            description=f"Fuel allocated to vehicle {expense.vehicle_no}",
            debit=expense.amount,
            source_type=SourceType.FUEL,
            vehicle_no=expense.vehicle_no,
        ),
    ]
