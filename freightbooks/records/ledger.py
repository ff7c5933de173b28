"""Mini README: Derived general ledger records.

Structure:
    * LedgerType - which ledger (party, supplier, vehicle, ...) an entry belongs to.
    * SourceType - the kind of event that produced an entry.
    * EntryRole - the part an entry plays for its source (main line, TDS, ...).
    * DerivedEntryId - identity of an entry as ``(source_id, role)``.
    * SourceKey - ``(source family, source_id)``, the scope retraction works on.
    * LedgerEntry - one posted line.

The identity of every derived entry is a pure function of the event that
produced it, so retracting an event is a set difference on ids rather than a
search through the ledger. Memos, bills, banking entries and fuel draws keep
separate id spaces, so an id is only meaningful together with its family.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple


class LedgerType(str, Enum):
    PARTY = "party"
    SUPPLIER = "supplier"
    GENERAL = "general"
    VEHICLE_INCOME = "vehicle_income"
    VEHICLE_EXPENSE = "vehicle_expense"
    FUEL_WALLET = "fuel_wallet"
    VEHICLE_FUEL = "vehicle_fuel"

    @property
    def is_vehicle_ledger(self) -> bool:
        return self in VEHICLE_LEDGER_TYPES


VEHICLE_LEDGER_TYPES = frozenset(
    {LedgerType.VEHICLE_INCOME, LedgerType.VEHICLE_EXPENSE, LedgerType.VEHICLE_FUEL}
)


class SourceType(str, Enum):
    MEMO = "memo"
    BILL = "bill"
    BANKING = "banking"
    CASHBOOK = "cashbook"
    FUEL = "fuel"

    @property
    def family(self) -> "SourceType":
        """The record collection a source id belongs to; cash book lines come from banking entries."""

        return SourceType.BANKING if self is SourceType.CASHBOOK else self


SourceKey = Tuple[SourceType, str]


class EntryRole(str, Enum):
    VEHICLE_INCOME = "vehicle-income"
    DETENTION = "detention"
    EXTRA = "extra"
    SUPPLIER = "supplier"
    PARTY = "party"
    TDS = "tds"
    VEHICLE_EXPENSE = "vehicle-expense"
    PERSON_LEDGER = "person-ledger"
    CATEGORY_LEDGER = "ledger"
    VEHICLE_FUEL = "vehicle-fuel"
    WALLET_DRAW = "wallet-draw"


@dataclass(slots=True, frozen=True, order=True)
class DerivedEntryId:
    source_id: str
    role: EntryRole

    def __str__(self) -> str:
        return f"{self.source_id}-{self.role.value}"


@dataclass(slots=True, frozen=True)
class LedgerEntry:
    """A posted ledger line derived from a memo, bill, banking entry or fuel draw."""

    entry_id: DerivedEntryId
    ledger_type: LedgerType
    reference_name: str
    date: date
    source_type: SourceType
    debit: float = 0.0
    credit: float = 0.0
    reference_id: Optional[str] = None
    description: str = ""
    vehicle_no: Optional[str] = None
    loading_slip_id: Optional[str] = None
    memo_number: Optional[str] = None
    bill_number: Optional[str] = None
    from_location: Optional[str] = None
    to_location: Optional[str] = None

    @property
    def id(self) -> str:
        return str(self.entry_id)

    @property
    def source_id(self) -> str:
        return self.entry_id.source_id

    @property
    def role(self) -> EntryRole:
        return self.entry_id.role

    @property
    def source_key(self) -> SourceKey:
        return (self.source_type.family, self.source_id)

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "ledger_type": self.ledger_type.value,
            "reference_id": self.reference_id,
            "reference_name": self.reference_name,
            "date": self.date.isoformat(),
            "description": self.description,
            "debit": self.debit,
            "credit": self.credit,
            "source_type": self.source_type.value,
            "source_id": self.source_id,
            "vehicle_no": self.vehicle_no,
            "loading_slip_id": self.loading_slip_id,
            "memo_number": self.memo_number,
            "bill_number": self.bill_number,
            "from_location": self.from_location,
            "to_location": self.to_location,
        }
