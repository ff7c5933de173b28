"""Mini README: Links advance banking entries to the memo or bill they settle.

Structure:
    * advance_id_for - deterministic id of the advance a banking entry creates.
    * build_advance - the AdvancePayment record for a banking entry.
    * AdvanceLinker - attaches and detaches advances on a working copy of the
      store's memo and bill collections.

An advance produces no ledger entry. It is appended to its parent's
``advance_payments`` and the banking entry keeps the advance id as a back-link,
so editing or deleting the banking entry can tear down exactly that advance.
"""

from __future__ import annotations

from dataclasses import replace
from typing import MutableMapping, Optional, Tuple, Union

from ..errors import InvalidCategoryCombination, ReferenceNotFound
from ..logging_utils import get_logger
from ..records.banking import BankingCategory, BankingEntry, EntryType
from ..records.documents import AdvancePayment, Bill, Memo, PaymentMode

LOGGER = get_logger(__name__)

Parent = Union[Memo, Bill]


def advance_id_for(entry: BankingEntry) -> str:
    return f"{entry.id}-advance"


def build_advance(entry: BankingEntry) -> AdvancePayment:
    """Create the advance record a ``*_advance`` banking entry contributes."""

    is_memo = entry.category is BankingCategory.MEMO_ADVANCE
    via = "bank debit" if entry.type is EntryType.DEBIT else "bank credit"
    return AdvancePayment(
        id=advance_id_for(entry),
        amount=entry.amount,
        date=entry.date,
        memo_number=entry.reference_id if is_memo else None,
        bill_number=None if is_memo else entry.reference_id,
        mode=PaymentMode.CASH if entry.payment_mode == "cash" else PaymentMode.BANK,
        reference=entry.narration,
        description=f"Advance payment via {via}",
    )


class AdvanceLinker:
    """Maintain advance links on mutable memo/bill mappings keyed by record id."""

    def __init__(self, memos: MutableMapping[str, Memo], bills: MutableMapping[str, Bill]) -> None:
        self._memos = memos
        self._bills = bills

    def _find_parent(self, entry: BankingEntry) -> Tuple[MutableMapping, Parent]:
        number = entry.reference_id
        if entry.category is BankingCategory.MEMO_ADVANCE:
            for memo in self._memos.values():
                if memo.memo_number == number:
                    return self._memos, memo
            raise ReferenceNotFound("Memo", str(number))
        if entry.category is BankingCategory.BILL_ADVANCE:
            for bill in self._bills.values():
                if bill.bill_number == number:
                    return self._bills, bill
            raise ReferenceNotFound("Bill", str(number))
        raise InvalidCategoryCombination(
            f"Banking entry {entry.id} with category '{entry.category.value}' is not an advance"
        )

    def link(self, entry: BankingEntry) -> BankingEntry:
        """Attach the entry's advance to its parent and return the back-linked entry."""

        collection, parent = self._find_parent(entry)
        advance = build_advance(entry)
        kept = tuple(item for item in parent.advance_payments if item.id != advance.id)
        collection[parent.id] = replace(parent, advance_payments=kept + (advance,))
        LOGGER.debug(
            "Linked advance %s (%.2f) to %s", advance.id, advance.amount, entry.reference_id
        )
        return replace(entry, advance_id=advance.id)

    def unlink(self, entry: BankingEntry) -> Optional[AdvancePayment]:
        """Detach the advance named by the entry's back-link, wherever it now lives."""

        advance_id = entry.advance_id or advance_id_for(entry)
        collections: Tuple[MutableMapping, ...] = (self._memos, self._bills)
        for collection in collections:
            for parent in list(collection.values()):
                for advance in parent.advance_payments:
                    if advance.id == advance_id:
                        remaining = tuple(
                            item for item in parent.advance_payments if item.id != advance_id
                        )
                        collection[parent.id] = replace(parent, advance_payments=remaining)
                        LOGGER.debug("Unlinked advance %s from %s", advance_id, parent.id)
                        return advance
        LOGGER.warning("Advance %s for banking entry %s was already unlinked", advance_id, entry.id)
        return None
