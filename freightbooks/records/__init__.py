"""Mini README: Domain records every ledger derivation reads.

Modules:
    * documents - vehicles, loading slips, memos, bills and advances.
    * banking - bank/cash entries and fuel wallet records.
    * ledger - derived ledger entries and their identities.
"""

from .banking import (
    BankingCategory,
    BankingEntry,
    Book,
    EntryType,
    FuelTransaction,
    FuelTransactionType,
    FuelWallet,
    VehicleFuelExpense,
)
from .documents import (
    AdvancePayment,
    Bill,
    BillStatus,
    LoadingSlip,
    Memo,
    MemoStatus,
    OwnershipType,
    PaymentMode,
    Vehicle,
)
from .ledger import (
    VEHICLE_LEDGER_TYPES,
    DerivedEntryId,
    EntryRole,
    LedgerEntry,
    LedgerType,
    SourceKey,
    SourceType,
)

__all__ = [
    "AdvancePayment",
    "BankingCategory",
    "BankingEntry",
    "Bill",
    "BillStatus",
    "Book",
    "DerivedEntryId",
    "EntryRole",
    "EntryType",
    "FuelTransaction",
    "FuelTransactionType",
    "FuelWallet",
    "LedgerEntry",
    "LedgerType",
    "LoadingSlip",
    "Memo",
    "MemoStatus",
    "OwnershipType",
    "PaymentMode",
    "SourceKey",
    "SourceType",
    "VEHICLE_LEDGER_TYPES",
    "Vehicle",
    "VehicleFuelExpense",
]
