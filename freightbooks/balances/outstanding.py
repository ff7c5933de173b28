"""Mini README: Outstanding balances for the party and supplier master lists.

Structure:
    * PartyOutstanding / party_outstanding - receivable still due from a party.
    * SupplierOutstanding / supplier_outstanding - payable still due to a supplier.
    * all_party_balances / all_supplier_balances - master list rows, largest first.
    * MemoBalance / memo_balance - what is left to pay on a single memo.

Formulas:
    party    = Σ bill net - (Σ bill_payment + Σ bill_advance)
    supplier = Σ freight - Σ memo_advance - Σ commission - Σ mamool + Σ extra + Σ detention
    memo     = freight - advances - commission - mamool + detention + extra - payments

RTO is left out of both supplier formulas because it is reimbursed separately
even though it is part of a memo's net amount. Advances are the ones linked to
each document, so they follow a memo or bill through a renumbering. Payments
are read from banking entries whose ``reference_id`` names one of the documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

from ..classification import VehicleClassifier
from ..records.banking import BankingCategory, BankingEntry
from ..records.documents import Bill, LoadingSlip, Memo


def _status(outstanding: float) -> str:
    return "pending" if outstanding > 0 else "cleared"


def _sum_by_category(
    banking_entries: Iterable[BankingEntry], numbers: Iterable[str], category: BankingCategory
) -> float:
    wanted = set(numbers)
    return sum(
        entry.amount
        for entry in banking_entries
        if entry.category is category and entry.reference_id in wanted
    )


@dataclass(slots=True, frozen=True)
class PartyOutstanding:
    party_name: str
    total_bills: float
    total_payments: float
    total_advances: float
    outstanding_amount: float
    bill_count: int = 0
    last_bill_date: Optional[date] = None

    @property
    def status(self) -> str:
        return _status(self.outstanding_amount)

    def as_dict(self) -> Dict[str, object]:
        return {
            "party_name": self.party_name,
            "total_bills": self.total_bills,
            "total_payments": self.total_payments,
            "total_advances": self.total_advances,
            "outstanding_amount": self.outstanding_amount,
            "bill_count": self.bill_count,
            "last_bill_date": self.last_bill_date.isoformat() if self.last_bill_date else None,
            "status": self.status,
        }


def party_outstanding(
    party_name: str, bills: Iterable[Bill], banking_entries: Iterable[BankingEntry]
) -> PartyOutstanding:
    party_bills = [bill for bill in bills if bill.party == party_name]
    numbers = [bill.bill_number for bill in party_bills]
    banking = list(banking_entries)
    total_bills = sum(bill.net_amount for bill in party_bills)
    total_payments = _sum_by_category(banking, numbers, BankingCategory.BILL_PAYMENT)
    total_advances = sum(bill.total_advances for bill in party_bills)
    return PartyOutstanding(
        party_name=party_name,
        total_bills=total_bills,
        total_payments=total_payments,
        total_advances=total_advances,
        outstanding_amount=total_bills - (total_payments + total_advances),
        bill_count=len(party_bills),
        last_bill_date=max((bill.date for bill in party_bills), default=None),
    )


@dataclass(slots=True, frozen=True)
class SupplierOutstanding:
    supplier_name: str
    total_freight: float
    total_detention: float
    total_extra: float
    total_payments: float
    total_advances: float
    total_commission: float
    total_mamool: float
    outstanding_amount: float
    memo_count: int = 0
    last_memo_date: Optional[date] = None

    @property
    def status(self) -> str:
        return _status(self.outstanding_amount)

    def as_dict(self) -> Dict[str, object]:
        return {
            "supplier_name": self.supplier_name,
            "total_freight": self.total_freight,
            "total_detention": self.total_detention,
            "total_extra": self.total_extra,
            "total_payments": self.total_payments,
            "total_advances": self.total_advances,
            "total_commission": self.total_commission,
            "total_mamool": self.total_mamool,
            "outstanding_amount": self.outstanding_amount,
            "memo_count": self.memo_count,
            "last_memo_date": self.last_memo_date.isoformat() if self.last_memo_date else None,
            "status": self.status,
        }


def supplier_outstanding(
    supplier_name: str, memos: Iterable[Memo], banking_entries: Iterable[BankingEntry]
) -> SupplierOutstanding:
    supplier_memos = [memo for memo in memos if memo.supplier == supplier_name]
    numbers = [memo.memo_number for memo in supplier_memos]
    banking = list(banking_entries)
    total_freight = sum(memo.freight for memo in supplier_memos)
    total_detention = sum(memo.detention for memo in supplier_memos)
    total_extra = sum(memo.extra for memo in supplier_memos)
    total_commission = sum(memo.commission for memo in supplier_memos)
    total_mamool = sum(memo.mamool for memo in supplier_memos)
    total_advances = sum(memo.total_advances for memo in supplier_memos)
    return SupplierOutstanding(
        supplier_name=supplier_name,
        total_freight=total_freight,
        total_detention=total_detention,
        total_extra=total_extra,
        total_payments=_sum_by_category(banking, numbers, BankingCategory.MEMO_PAYMENT),
        total_advances=total_advances,
        total_commission=total_commission,
        total_mamool=total_mamool,
        outstanding_amount=(
            total_freight
            - total_advances
            - total_commission
            - total_mamool
            + total_extra
            + total_detention
        ),
        memo_count=len(supplier_memos),
        last_memo_date=max((memo.date for memo in supplier_memos), default=None),
    )


def all_party_balances(
    bills: Iterable[Bill], banking_entries: Iterable[BankingEntry]
) -> List[PartyOutstanding]:
    bill_list = list(bills)
    banking = list(banking_entries)
    parties = sorted({bill.party for bill in bill_list})
    balances = [party_outstanding(party, bill_list, banking) for party in parties]
    return sorted(balances, key=lambda balance: balance.outstanding_amount, reverse=True)


def all_supplier_balances(
    memos: Iterable[Memo],
    banking_entries: Iterable[BankingEntry],
    loading_slips: Optional[Mapping[str, LoadingSlip]] = None,
    classifier: Optional[VehicleClassifier] = None,
) -> List[SupplierOutstanding]:
    """Supplier rows; memos for own-fleet trips are skipped when slips and a classifier are given."""

    memo_list = list(memos)
    if loading_slips is not None and classifier is not None:
        memo_list = [
            memo
            for memo in memo_list
            if not (
                memo.loading_slip_id in loading_slips
                and classifier.is_own(loading_slips[memo.loading_slip_id].vehicle_no)
            )
        ]
    banking = list(banking_entries)
    suppliers = sorted({memo.supplier for memo in memo_list})
    balances = [supplier_outstanding(supplier, memo_list, banking) for supplier in suppliers]
    return sorted(balances, key=lambda balance: balance.outstanding_amount, reverse=True)


@dataclass(slots=True, frozen=True)
class MemoBalance:
    memo_number: str
    payable: float
    advances: float
    payments: float

    @property
    def balance(self) -> float:
        return self.payable - self.advances - self.payments

    def as_dict(self) -> Dict[str, object]:
        return {
            "memo_number": self.memo_number,
            "payable": self.payable,
            "advances": self.advances,
            "payments": self.payments,
            "balance": self.balance,
        }


def memo_balance(memo: Memo, banking_entries: Iterable[BankingEntry]) -> MemoBalance:
    banking = list(banking_entries)
    number = [memo.memo_number]
    return MemoBalance(
        memo_number=memo.memo_number,
        payable=memo.freight - memo.commission - memo.mamool + memo.detention + memo.extra,
        advances=memo.total_advances,
        payments=_sum_by_category(banking, number, BankingCategory.MEMO_PAYMENT),
    )
