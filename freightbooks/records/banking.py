"""Mini README: Bank/cash transactions and fuel wallet records.

Structure:
    * EntryType - credit versus debit.
    * BankingCategory - closed set of categories a transaction can carry.
    * Book - which book (bank or cash) the entry was written in.
    * BankingEntry - one bank or cash transaction.
    * FuelWallet - prepaid balance held with a fuel vendor.
    * FuelTransactionType / FuelTransaction - wallet top-ups and allocations.
    * VehicleFuelExpense - fuel drawn from a wallet for a single vehicle.

``BankingEntry.validate`` enforces the category/field pairings before any
ledger derivation runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..errors import InvalidCategoryCombination, InvalidRecord
from ..utils.coercion import coerce_amount, optional_amount, optional_str, parse_date


class EntryType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"

    @classmethod
    def from_str(cls, value: str) -> "EntryType":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported entry type: {value}") from error


class BankingCategory(str, Enum):
    """Closed set of banking categories; each maps to exactly one effect."""

    BILL_ADVANCE = "bill_advance"
    BILL_PAYMENT = "bill_payment"
    MEMO_ADVANCE = "memo_advance"
    MEMO_PAYMENT = "memo_payment"
    EXPENSE = "expense"
    FUEL_WALLET = "fuel_wallet"
    VEHICLE_EXPENSE = "vehicle_expense"
    VEHICLE_CREDIT_NOTE = "vehicle_credit_note"
    OTHER = "other"

    @classmethod
    def from_str(cls, value: str) -> "BankingCategory":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported banking category: {value}") from error

    @property
    def is_advance(self) -> bool:
        return self in (BankingCategory.MEMO_ADVANCE, BankingCategory.BILL_ADVANCE)

    @property
    def is_payment(self) -> bool:
        return self in (BankingCategory.MEMO_PAYMENT, BankingCategory.BILL_PAYMENT)

    @property
    def is_vehicle_scoped(self) -> bool:
        return self in (BankingCategory.VEHICLE_EXPENSE, BankingCategory.VEHICLE_CREDIT_NOTE)

    @property
    def targets_memo(self) -> bool:
        return self in (BankingCategory.MEMO_ADVANCE, BankingCategory.MEMO_PAYMENT)

    @property
    def targets_bill(self) -> bool:
        return self in (BankingCategory.BILL_ADVANCE, BankingCategory.BILL_PAYMENT)


class Book(str, Enum):
    BANK = "bank"
    CASH = "cash"

    @classmethod
    def from_str(cls, value: str) -> "Book":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise InvalidRecord(f"Unsupported book: {value}") from error


@dataclass(slots=True, frozen=True)
class BankingEntry:
    """A bank or cash transaction as entered by the user.

    ``reference_id`` carries the memo or bill number for advance and payment
    categories. ``advance_id`` is filled in by the advance linker so the
    advance can be found again when the entry is edited or deleted.
    """

    id: str
    type: EntryType
    category: BankingCategory
    amount: float
    date: date
    reference_id: Optional[str] = None
    reference_name: Optional[str] = None
    vehicle_no: Optional[str] = None
    narration: str = ""
    wallet_name: Optional[str] = None
    book: Book = Book.BANK
    payment_mode: Optional[str] = None
    bank_account: Optional[str] = None
    advance_id: Optional[str] = None

    @property
    def counterparty_name(self) -> Optional[str]:
        """Trimmed reference name, or ``None`` when blank."""

        return optional_str(self.reference_name)

    def validate(self) -> None:
        """Reject category/field combinations the derivation rules cannot honour."""

        if self.amount < 0:
            raise InvalidRecord(f"Banking entry {self.id} has a negative amount")
        if self.category.is_vehicle_scoped and not optional_str(self.vehicle_no):
            raise InvalidCategoryCombination(
                f"Banking entry {self.id} uses category '{self.category.value}' without a vehicle number"
            )
        if self.category.is_advance and not optional_str(self.reference_id):
            raise InvalidCategoryCombination(
                f"Banking entry {self.id} uses category '{self.category.value}' without a reference id"
            )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BankingEntry":
        for key in ("id", "type", "category", "date"):
            if not payload.get(key):
                raise InvalidRecord(f"Field '{key}' is required")
        return cls(
            id=str(payload["id"]),
            type=EntryType.from_str(str(payload["type"])),
            category=BankingCategory.from_str(str(payload["category"])),
            amount=coerce_amount(payload.get("amount")),
            date=parse_date(payload["date"]),
            reference_id=optional_str(payload.get("reference_id")),
            reference_name=optional_str(payload.get("reference_name")),
            vehicle_no=optional_str(payload.get("vehicle_no")),
            narration=str(payload.get("narration") or ""),
            wallet_name=optional_str(payload.get("wallet_name")),
            book=Book.from_str(str(payload.get("book") or "bank")),
            payment_mode=optional_str(payload.get("payment_mode")),
            bank_account=optional_str(payload.get("bank_account")),
            advance_id=optional_str(payload.get("advance_id")),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category.value,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "reference_id": self.reference_id,
            "reference_name": self.reference_name,
            "vehicle_no": self.vehicle_no,
            "narration": self.narration,
            "wallet_name": self.wallet_name,
            "book": self.book.value,
            "payment_mode": self.payment_mode,
            "bank_account": self.bank_account,
            "advance_id": self.advance_id,
        }


@dataclass(slots=True, frozen=True)
class FuelWallet:
    name: str
    balance: float = 0.0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FuelWallet":
        name = optional_str(payload.get("name"))
        if name is None:
            raise InvalidRecord("Fuel wallets need a name")
        return cls(name=name, balance=coerce_amount(payload.get("balance"), field_name="balance"))

    def as_dict(self) -> Dict[str, object]:
        return {"name": self.name, "balance": self.balance}


class FuelTransactionType(str, Enum):
    WALLET_CREDIT = "wallet_credit"
    FUEL_ALLOCATION = "fuel_allocation"


@dataclass(slots=True, frozen=True)
class FuelTransaction:
    """Audit trail row for every change to a wallet balance."""

    id: str
    type: FuelTransactionType
    wallet_name: str
    amount: float
    date: date
    vehicle_no: Optional[str] = None
    narration: str = ""

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "type": self.type.value,
            "wallet_name": self.wallet_name,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "vehicle_no": self.vehicle_no,
            "narration": self.narration,
        }


@dataclass(slots=True, frozen=True)
class VehicleFuelExpense:
    """Fuel drawn from a vendor wallet for one vehicle."""

    id: str
    vehicle_no: str
    wallet_name: str
    amount: float
    date: date
    fuel_quantity: Optional[float] = None
    rate_per_liter: Optional[float] = None
    odometer_reading: Optional[float] = None
    narration: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "VehicleFuelExpense":
        for key in ("id", "vehicle_no", "wallet_name", "date"):
            if not payload.get(key):
                raise InvalidRecord(f"Field '{key}' is required")
        return cls(
            id=str(payload["id"]),
            vehicle_no=str(payload["vehicle_no"]).strip(),
            wallet_name=str(payload["wallet_name"]).strip(),
            amount=coerce_amount(payload.get("amount")),
            date=parse_date(payload["date"]),
            fuel_quantity=optional_amount(payload.get("fuel_quantity"), field_name="fuel_quantity"),
            rate_per_liter=optional_amount(payload.get("rate_per_liter"), field_name="rate_per_liter"),
            odometer_reading=optional_amount(payload.get("odometer_reading"), field_name="odometer_reading"),
            narration=str(payload.get("narration") or ""),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "vehicle_no": self.vehicle_no,
            "wallet_name": self.wallet_name,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "fuel_quantity": self.fuel_quantity,
            "rate_per_liter": self.rate_per_liter,
            "odometer_reading": self.odometer_reading,
            "narration": self.narration,
        }
