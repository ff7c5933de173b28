"""Mini README: Effect resolution and ledger fan-out for banking entries.

Structure:
    * BankingEffect - the six mutually exclusive effects a banking entry can have.
    * resolve_banking_effect - picks the effect for an entry, in priority order.
    * derive_banking_entries - ledger entries for an entry and its effect.
    * fuel_wallet_for - wallet a fuel top-up credits.

Resolution order:
    1. memo/bill advance   -> linked to the memo or bill, no ledger entry
    2. memo/bill payment   -> no ledger entry, seen through balance views only
    3. own-vehicle expense -> one vehicle_expense debit
    4. fuel wallet debit   -> wallet balance increases, no ledger entry
    5. named counterparty  -> general entry under the person/vendor name
    6. anything else       -> general entry under the category name

Only the ledger side lives here. Advance linking and wallet balances are
state changes the store performs for effects 1 and 4.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List

from ..classification import VehicleClassifier
from ..records.banking import BankingCategory, BankingEntry, Book, EntryType
from ..records.ledger import DerivedEntryId, EntryRole, LedgerEntry, LedgerType, SourceType
from .context import DerivationContext


class BankingEffect(str, Enum):
    ADVANCE_LINK = "advance_link"
    PAYMENT_ONLY = "payment_only"
    VEHICLE_EXPENSE = "vehicle_expense"
    FUEL_WALLET_TOPUP = "fuel_wallet_topup"
    PERSON_LEDGER = "person_ledger"
    CATEGORY_LEDGER = "category_ledger"

    @property
    def posts_ledger_entry(self) -> bool:
        return self in (
            BankingEffect.VEHICLE_EXPENSE,
            BankingEffect.PERSON_LEDGER,
            BankingEffect.CATEGORY_LEDGER,
        )


# Categories that never open a ledger under a person's name.
NON_PERSON_CATEGORIES = frozenset(
    {
        BankingCategory.FUEL_WALLET,
        BankingCategory.VEHICLE_EXPENSE,
        BankingCategory.VEHICLE_CREDIT_NOTE,
    }
)


def resolve_banking_effect(entry: BankingEntry, classifier: VehicleClassifier) -> BankingEffect:
    """Return the single effect an entry has given current vehicle master data."""

    category = entry.category
    if category.is_advance:
        return BankingEffect.ADVANCE_LINK
    if category.is_payment:
        return BankingEffect.PAYMENT_ONLY
    if category is BankingCategory.VEHICLE_EXPENSE and classifier.is_own(entry.vehicle_no):
        return BankingEffect.VEHICLE_EXPENSE
    if category is BankingCategory.FUEL_WALLET and entry.type is EntryType.DEBIT:
        return BankingEffect.FUEL_WALLET_TOPUP
    if entry.counterparty_name and category not in NON_PERSON_CATEGORIES:
        return BankingEffect.PERSON_LEDGER
    return BankingEffect.CATEGORY_LEDGER


def fuel_wallet_for(entry: BankingEntry, context: DerivationContext) -> str:
    """Wallet credited by a fuel top-up: explicit name, then narration, then default."""

    return entry.wallet_name or entry.narration.strip() or context.default_fuel_wallet


def _source_type(entry: BankingEntry) -> SourceType:
    return SourceType.CASHBOOK if entry.book is Book.CASH else SourceType.BANKING


def _signed(entry: BankingEntry) -> Dict[str, float]:
    if entry.type is EntryType.DEBIT:
        return {"debit": entry.amount, "credit": 0.0}
    return {"debit": 0.0, "credit": entry.amount}


def _no_entries(entry: BankingEntry, context: DerivationContext) -> List[LedgerEntry]:
    return []


def _vehicle_expense(entry: BankingEntry, context: DerivationContext) -> List[LedgerEntry]:
    label = "Cash Expense" if entry.book is Book.CASH else "Expense"
    return [
        LedgerEntry(
            entry_id=DerivedEntryId(entry.id, EntryRole.VEHICLE_EXPENSE),
            ledger_type=LedgerType.VEHICLE_EXPENSE,
            reference_id=entry.id,
            reference_name=f"Vehicle {entry.vehicle_no} - {label}",
            date=entry.date,
            description=entry.narration or "Vehicle expense",
            debit=entry.amount,
            credit=0.0,
            source_type=_source_type(entry),
            vehicle_no=entry.vehicle_no,
        )
    ]


def _person_ledger(entry: BankingEntry, context: DerivationContext) -> List[LedgerEntry]:
    person = entry.counterparty_name or ""
    if entry.type is EntryType.DEBIT:
        verb = "Cash payment to" if entry.book is Book.CASH else "Payment to"
    else:
        verb = "Cash receipt from" if entry.book is Book.CASH else "Receipt from"
    return [
        LedgerEntry(
            entry_id=DerivedEntryId(entry.id, EntryRole.PERSON_LEDGER),
            ledger_type=LedgerType.GENERAL,
            reference_id=entry.id,
            reference_name=person,
            date=entry.date,
            description=f"{verb} {person} - {entry.narration or entry.category.value}",
            source_type=_source_type(entry),
            vehicle_no=entry.vehicle_no,
            **_signed(entry),
        )
    ]


def _category_ledger(entry: BankingEntry, context: DerivationContext) -> List[LedgerEntry]:
    return [
        LedgerEntry(
            entry_id=DerivedEntryId(entry.id, EntryRole.CATEGORY_LEDGER),
            ledger_type=LedgerType.GENERAL,
            reference_id=entry.id,
            reference_name=entry.category.value,
            date=entry.date,
            description=entry.narration or entry.category.value,
            source_type=_source_type(entry),
            vehicle_no=entry.vehicle_no,
            **_signed(entry),
        )
    ]


_LEDGER_BUILDERS: Dict[BankingEffect, Callable[[BankingEntry, DerivationContext], List[LedgerEntry]]] = {
    BankingEffect.ADVANCE_LINK: _no_entries,
    BankingEffect.PAYMENT_ONLY: _no_entries,
    BankingEffect.VEHICLE_EXPENSE: _vehicle_expense,
    BankingEffect.FUEL_WALLET_TOPUP: _no_entries,
    BankingEffect.PERSON_LEDGER: _person_ledger,
    BankingEffect.CATEGORY_LEDGER: _category_ledger,
}

_UNHANDLED = set(BankingEffect) - set(_LEDGER_BUILDERS)
if _UNHANDLED:  # pragma: no cover - guards edits to BankingEffect
    raise RuntimeError(f"Banking effects without a ledger builder: {sorted(_UNHANDLED)}")


def derive_banking_entries(
    entry: BankingEntry, effect: BankingEffect, context: DerivationContext
) -> List[LedgerEntry]:
    """Return the ledger entries (zero or one) an entry posts for ``effect``."""

    return _LEDGER_BUILDERS[effect](entry, context)
