"""Mini README: Account statements and the per-vehicle profit summary.

Structure:
    * StatementLine - one dated row with its running balance.
    * party_statement - bills charged to a party and the payments received.
    * supplier_statement - memos owed to a supplier and the payments made.
    * VehicleSummary / vehicle_summary - income, fuel and other expenses of one vehicle.

Statements add every document net of the advances already linked to it and
subtract the ``*_payment`` banking entries that name the document. The running
balance is accumulated over the whole history first and only then clipped to
the requested dates, so the first visible row carries the true opening
balance.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..records.banking import BankingCategory, BankingEntry
from ..records.documents import Bill, Memo
from ..records.ledger import LedgerEntry, LedgerType
from ..utils.coercion import parse_date

DateLike = Union[date, str, None]


@dataclass(slots=True, frozen=True)
class StatementLine:
    date: date
    kind: str
    reference: str
    description: str
    charge: float
    payment: float
    running_balance: float

    def as_dict(self) -> Dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "kind": self.kind,
            "reference": self.reference,
            "description": self.description,
            "charge": self.charge,
            "payment": self.payment,
            "running_balance": self.running_balance,
        }


def _bounds(date_from: DateLike, date_to: DateLike) -> Tuple[Optional[date], Optional[date]]:
    start = parse_date(date_from) if date_from is not None else None
    end = parse_date(date_to) if date_to is not None else None
    if start is not None and end is not None and start > end:
        raise ValueError(f"date_from {start} is after date_to {end}")
    return start, end


def _accumulate(
    rows: List[Tuple[date, int, str, str, str, float, float]],
    start: Optional[date],
    end: Optional[date],
) -> List[StatementLine]:
    # Documents sort ahead of payments dated the same day.
    running = 0.0
    lines: List[StatementLine] = []
    for row_date, _, kind, reference, description, charge, payment in sorted(rows):
        running += charge - payment
        if start is not None and row_date < start:
            continue
        if end is not None and row_date > end:
            continue
        lines.append(
            StatementLine(
                date=row_date,
                kind=kind,
                reference=reference,
                description=description,
                charge=charge,
                payment=payment,
                running_balance=running,
            )
        )
    return lines


def party_statement(
    party_name: str,
    bills: Iterable[Bill],
    banking_entries: Iterable[BankingEntry],
    *,
    date_from: DateLike = None,
    date_to: DateLike = None,
) -> List[StatementLine]:
    """Receivable statement: positive balances are owed by the party."""

    start, end = _bounds(date_from, date_to)
    party_bills = [bill for bill in bills if bill.party == party_name]
    numbers = {bill.bill_number for bill in party_bills}
    rows = [
        (bill.date, 0, "bill", bill.bill_number, f"Bill {bill.bill_number}", bill.outstanding_balance, 0.0)
        for bill in party_bills
    ]
    rows.extend(
        (
            entry.date,
            1,
            "payment",
            entry.id,
            entry.narration or f"Payment received against {entry.reference_id}",
            0.0,
            entry.amount,
        )
        for entry in banking_entries
        if entry.category is BankingCategory.BILL_PAYMENT and entry.reference_id in numbers
    )
    return _accumulate(rows, start, end)


def supplier_statement(
    supplier_name: str,
    memos: Iterable[Memo],
    banking_entries: Iterable[BankingEntry],
    *,
    date_from: DateLike = None,
    date_to: DateLike = None,
) -> List[StatementLine]:
    """Payable statement: positive balances are owed to the supplier."""

    start, end = _bounds(date_from, date_to)
    supplier_memos = [memo for memo in memos if memo.supplier == supplier_name]
    numbers = {memo.memo_number for memo in supplier_memos}
    rows = [
        (memo.date, 0, "memo", memo.memo_number, f"Memo {memo.memo_number}", memo.outstanding_balance, 0.0)
        for memo in supplier_memos
    ]
    rows.extend(
        (
            entry.date,
            1,
            "payment",
            entry.id,
            entry.narration or f"Payment made against {entry.reference_id}",
            0.0,
            entry.amount,
        )
        for entry in banking_entries
        if entry.category is BankingCategory.MEMO_PAYMENT and entry.reference_id in numbers
    )
    return _accumulate(rows, start, end)


@dataclass(slots=True, frozen=True)
class VehicleSummary:
    vehicle_no: str
    total_income: float
    fuel_expenses: float
    other_expenses: float

    @property
    def total_expenses(self) -> float:
        return self.fuel_expenses + self.other_expenses

    @property
    def net_profit(self) -> float:
        return self.total_income - self.total_expenses

    def as_dict(self) -> Dict[str, object]:
        return {
            "vehicle_no": self.vehicle_no,
            "total_income": self.total_income,
            "fuel_expenses": self.fuel_expenses,
            "other_expenses": self.other_expenses,
            "total_expenses": self.total_expenses,
            "net_profit": self.net_profit,
        }


def _is_fuel(entry: LedgerEntry) -> bool:
    return "fuel" in entry.description.lower() or "fuel" in entry.reference_name.lower()


def vehicle_summary(
    vehicle_no: str,
    entries: Iterable[LedgerEntry],
    *,
    date_from: DateLike = None,
    date_to: DateLike = None,
) -> VehicleSummary:
    """Profit summary of an own-fleet vehicle from its income and expense ledgers."""

    start, end = _bounds(date_from, date_to)
    selected = [
        entry
        for entry in entries
        if entry.vehicle_no == vehicle_no
        and (start is None or entry.date >= start)
        and (end is None or entry.date <= end)
    ]
    income = sum(
        entry.credit - entry.debit
        for entry in selected
        if entry.ledger_type is LedgerType.VEHICLE_INCOME
    )
    expenses = [entry for entry in selected if entry.ledger_type is LedgerType.VEHICLE_EXPENSE]
    fuel = sum(entry.debit - entry.credit for entry in expenses if _is_fuel(entry))
    other = sum(entry.debit - entry.credit for entry in expenses if not _is_fuel(entry))
    return VehicleSummary(
        vehicle_no=vehicle_no,
        total_income=income,
        fuel_expenses=fuel,
        other_expenses=other,
    )
